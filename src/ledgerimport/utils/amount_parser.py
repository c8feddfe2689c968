"""Locale-aware amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from ledgerimport.domain.errors import InvalidNumberError, ValidationError

DEFAULT_NUMBER_FORMAT = "1,234.56"

# A number format is described by how it writes 1234.56
_FORMAT_PATTERN = re.compile(r"^1(?P<thousands>[^\d]?)234(?P<decimal>[^\d])56$")
_DIGITS = re.compile(r"^(\d+(\.\d+)?|\.\d+)$")
_SPACE_SEPARATORS = (" ", "\u00a0", "\u202f")


def number_separators(number_format: str) -> tuple[str, str]:
    """Return the (thousands, decimal) separators of a number format.

    Args:
        number_format: Sample pattern such as "1,234.56" or "1.234,56"

    Returns:
        Tuple of thousands separator ("" if none) and decimal separator

    Raises:
        ValidationError: If the pattern is not recognized
    """
    match = _FORMAT_PATTERN.match(number_format or "")
    if match is None or match.group("thousands") == match.group("decimal"):
        raise ValidationError(
            f"Unknown number format '{number_format}'. "
            "Use a sample such as '1,234.56', '1.234,56' or '1234.56'"
        )
    return match.group("thousands"), match.group("decimal")


def parse_amount(amount_str: str | None, number_format: str = DEFAULT_NUMBER_FORMAT) -> Decimal:
    """Parse a locale-formatted amount string into an exact Decimal.

    Handles:
    - "1.465.950,00" with format "1.234,56" -> Decimal("1465950.00")
    - "-13.900,00" with format "1.234,56" -> Decimal("-13900.00")
    - "1,234.56" with format "1,234.56" -> Decimal("1234.56")
    - "" or whitespace -> Decimal("0")

    Args:
        amount_str: Amount string
        number_format: Sample pattern describing the separators

    Returns:
        Decimal amount

    Raises:
        InvalidNumberError: If amount string cannot be parsed
    """
    if amount_str is None or not amount_str.strip():
        return Decimal("0")

    thousands, decimal_sep = number_separators(number_format)
    value = amount_str.strip()

    sign = ""
    if value[0] in "+-":
        sign = "-" if value[0] == "-" else ""
        value = value[1:].strip()

    if thousands in _SPACE_SEPARATORS:
        for space in _SPACE_SEPARATORS:
            value = value.replace(space, "")
    elif thousands:
        value = value.replace(thousands, "")
    value = value.replace(decimal_sep, ".")

    if not _DIGITS.match(value):
        raise InvalidNumberError(f"Could not parse amount '{amount_str}' as {number_format}")

    try:
        return Decimal(sign + value)
    except InvalidOperation as e:
        raise InvalidNumberError(f"Could not parse amount '{amount_str}': {e}")


def format_amount(amount: Decimal) -> str:
    """Render a Decimal as a plain, exact string without negative zero."""
    if amount == 0:
        amount = abs(amount)
    return format(amount, "f")
