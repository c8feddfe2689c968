"""Amount resolution into the canonical sign convention.

Canonical convention: positive = money leaving the account (outflow),
negative = money entering the account (inflow).
"""

from decimal import Decimal

from ledgerimport.domain.entities import ImportConfig, RawRecord, INFLOWS_POSITIVE
from ledgerimport.domain.errors import ValidationError
from ledgerimport.utils.amount_parser import parse_amount, format_amount


def resolve_debit_credit(
    debit_str: str | None, credit_str: str | None, number_format: str
) -> Decimal:
    """Collapse a debit/credit column pair into one signed amount.

    A column counts as present only when it parses to a non-zero number.
    Credit wins when both are present. Debits become positive whatever sign
    the source wrote them with, credits become negative.
    """
    credit = parse_amount(credit_str, number_format)
    if credit != 0:
        return -abs(credit)

    debit = parse_amount(debit_str, number_format)
    if debit != 0:
        return abs(debit)

    return Decimal("0")


def resolve_single_amount(amount_str: str | None, number_format: str, signage_convention: str) -> Decimal:
    """Bring a single-column amount to the canonical outflow-positive sign."""
    amount = parse_amount(amount_str, number_format)
    if signage_convention == INFLOWS_POSITIVE:
        amount = -amount
    return amount


def resolve_amount(record: RawRecord, config: ImportConfig) -> str:
    """Derive the canonical signed amount of a record as an exact string.

    Args:
        record: Raw tabular row
        config: Import configuration (column mapping, number format, signage)

    Returns:
        Exact decimal string, e.g. "13900.00" or "-287756.65"

    Raises:
        InvalidNumberError: If an amount column cannot be parsed
        ValidationError: If the config maps no amount column
    """
    if config.is_debit_credit:
        amount = resolve_debit_credit(
            record.get(config.columns["debit"]),
            record.get(config.columns["credit"]),
            config.number_format,
        )
    elif config.column("amount"):
        amount = resolve_single_amount(
            record.get(config.columns["amount"]),
            config.number_format,
            config.signage_convention,
        )
    else:
        raise ValidationError("Import config maps neither an amount column nor a debit/credit pair")

    return format_amount(amount)
