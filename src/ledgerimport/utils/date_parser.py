"""Date parsing utilities."""

from datetime import date, datetime
from dateutil import parser as date_parser

from ledgerimport.domain.errors import InvalidDateError


def parse_date(date_str: str, date_format: str | None = None) -> date:
    """Parse a date string into a date object.

    With a ``date_format`` (strptime pattern, e.g. "%d/%m/%Y") the string must
    match it exactly. Without one, the string is parsed leniently with
    python-dateutil ("2024-01-15", "January 15, 2024", ...). Ambiguous
    numeric dates are read month-first; day-first sources need a pattern.

    Args:
        date_str: Date string
        date_format: Optional strptime pattern

    Returns:
        Date object

    Raises:
        InvalidDateError: If date string cannot be parsed
    """
    if date_str is None or not date_str.strip():
        raise InvalidDateError("Missing date")

    date_str = date_str.strip()

    if date_format:
        try:
            return datetime.strptime(date_str, date_format).date()
        except ValueError as e:
            raise InvalidDateError(f"Could not parse date '{date_str}' as {date_format}: {e}")

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise InvalidDateError(f"Could not parse date '{date_str}': {e}")


def to_iso(date_str: str, date_format: str | None = None) -> str:
    """Parse a source date and return it as an ISO 8601 string."""
    return parse_date(date_str, date_format).isoformat()
