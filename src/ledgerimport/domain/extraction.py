"""Row extraction from raw bank export text.

Bank exports often start with a few lines of metadata (bank name, account
number, query interval, ...) before the real table. The extractor drops a
fixed number of those lines and reads the rest as delimited text with a
header row. Quoted fields may contain the delimiter or line breaks, so one
logical row can span several physical lines.
"""

import csv
import io
from typing import Iterator

from ledgerimport.domain.entities import RawRecord
from ledgerimport.domain.errors import MalformedSourceError


def split_preamble(raw_source: str, preamble_lines: int) -> str:
    """Drop the first ``preamble_lines`` physical lines of the source.

    Raises:
        MalformedSourceError: If fewer than ``preamble_lines + 1`` lines exist
    """
    if preamble_lines < 0:
        raise MalformedSourceError("Preamble line count cannot be negative")

    lines = (raw_source or "").splitlines(keepends=True)
    if len(lines) < preamble_lines + 1:
        raise MalformedSourceError(
            f"Source has {len(lines)} line{'s' if len(lines) != 1 else ''}, "
            f"expected at least {preamble_lines + 1} (preamble plus header)"
        )
    return "".join(lines[preamble_lines:])


def read_header(raw_source: str, preamble_lines: int, delimiter: str) -> list[str]:
    """Return the header labels of the table following the preamble.

    Raises:
        MalformedSourceError: If the header row is empty or unparseable
    """
    table = split_preamble(raw_source, preamble_lines)
    reader = csv.reader(io.StringIO(table, newline=""), delimiter=delimiter)
    try:
        header = next(reader, None)
    except csv.Error as e:
        raise MalformedSourceError(f"Could not parse header row: {e}")

    labels = [label.strip() for label in header or []]
    if not any(labels):
        raise MalformedSourceError("Header row is empty")
    return labels


def extract_rows(raw_source: str, preamble_lines: int, delimiter: str) -> Iterator[RawRecord]:
    """Yield one RawRecord per data row of the source table.

    The result is lazy but restartable: calling this again on the same input
    yields the same records in the same order. The header is validated
    eagerly so that a malformed source fails on the call, not on iteration.

    Args:
        raw_source: Full source text (encoding and byte-order mark resolved)
        preamble_lines: Number of leading metadata lines to discard
        delimiter: Field delimiter (e.g. "," or ";")

    Returns:
        Iterator of column label -> raw string mappings

    Raises:
        MalformedSourceError: If the source is too short or has no header
    """
    header = read_header(raw_source, preamble_lines, delimiter)
    return _iter_records(split_preamble(raw_source, preamble_lines), header, delimiter)


def _iter_records(table: str, header: list[str], delimiter: str) -> Iterator[RawRecord]:
    reader = csv.reader(io.StringIO(table, newline=""), delimiter=delimiter)
    next(reader)
    try:
        for row_num, row in enumerate(reader, start=1):
            if not any(cell.strip() for cell in row):
                continue
            if len(row) > len(header) and any(cell.strip() for cell in row[len(header):]):
                raise MalformedSourceError(
                    f"Row {row_num}: has {len(row)} fields, header defines {len(header)}"
                )
            values = row + [""] * (len(header) - len(row))
            yield {label: value for label, value in zip(header, values) if label}
    except csv.Error as e:
        raise MalformedSourceError(f"Could not parse source table: {e}")
