"""Free-text normalization utilities."""

import re

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str | None) -> str:
    """Collapse every whitespace run, line breaks included, to one space.

    Leading and trailing whitespace is removed. None becomes "".
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def split_labels(raw: str | None, separator: str = "|") -> tuple[str, ...]:
    """Split a raw label list into trimmed, non-empty labels, keeping order."""
    if not raw:
        return ()
    labels = (normalize_text(part) for part in raw.split(separator))
    return tuple(label for label in labels if label)
