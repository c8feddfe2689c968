"""Normalization of raw records into staged rows."""

import logging

from ledgerimport.domain.amounts import resolve_amount
from ledgerimport.domain.entities import ImportConfig, RawRecord, StagedRow
from ledgerimport.domain.errors import (
    InvalidDateError,
    InvalidNumberError,
    MalformedSourceError,
    ValidationError,
    row_error,
)
from ledgerimport.domain.extraction import extract_rows, read_header
from ledgerimport.domain.formats import missing_mappings, required_column_keys
from ledgerimport.utils.date_parser import to_iso
from ledgerimport.utils.text import normalize_text, split_labels

logger = logging.getLogger(__name__)


def _value(record: RawRecord, config: ImportConfig, semantic_field: str) -> str:
    label = config.column(semantic_field)
    if not label:
        return ""
    return record.get(label) or ""


def normalize_record(record: RawRecord, config: ImportConfig, row_num: int = 1) -> StagedRow:
    """Build one staged row from a raw record.

    Raises:
        InvalidNumberError: If an amount column cannot be parsed
        InvalidDateError: If the date column cannot be parsed
    """
    try:
        amount = resolve_amount(record, config)
        date_iso = to_iso(_value(record, config, "date"), config.date_format or None)
    except InvalidNumberError as e:
        raise InvalidNumberError(row_error(row_num, str(e))) from e
    except InvalidDateError as e:
        raise InvalidDateError(row_error(row_num, str(e))) from e

    return StagedRow(
        account_label=normalize_text(_value(record, config, "account")),
        date=date_iso,
        amount=amount,
        currency=_value(record, config, "currency").strip() or config.default_currency,
        name=normalize_text(_value(record, config, "name")) or config.default_row_name,
        category_label=normalize_text(_value(record, config, "category")),
        tags_labels=split_labels(_value(record, config, "tags"), config.tags_separator),
        notes=normalize_text(_value(record, config, "notes")),
        position=row_num - 1,
    )


def check_columns(raw_source: str, config: ImportConfig) -> None:
    """Check that the config and the source header cover the required columns.

    Raises:
        ValidationError: If the config lacks a required mapping
        MalformedSourceError: If the header lacks a required column
    """
    missing = missing_mappings(config)
    if missing:
        raise ValidationError(f"Import config is missing required mappings: {', '.join(missing)}")
    if config.account_id is None and not config.column("account"):
        raise ValidationError("Import needs a fixed account or an account column")

    header = set(read_header(raw_source, config.preamble_lines, config.delimiter))
    missing_columns = [
        config.columns[key]
        for key in required_column_keys(config)
        if config.columns[key] not in header
    ]
    if missing_columns:
        raise MalformedSourceError(
            f"Source is missing required columns: {', '.join(missing_columns)}"
        )


def build_staged_rows(raw_source: str, config: ImportConfig) -> list[StagedRow]:
    """Normalize every data row of the source into staged rows.

    The whole batch is built in memory before anything is stored; the first
    bad row aborts the batch.

    Raises:
        MalformedSourceError: If the source table cannot be read
        InvalidNumberError: If a row's amount cannot be parsed
        InvalidDateError: If a row's date cannot be parsed
        ValidationError: If the config cannot drive normalization
    """
    check_columns(raw_source, config)
    records = extract_rows(raw_source, config.preamble_lines, config.delimiter)
    rows = [
        normalize_record(record, config, row_num)
        for row_num, record in enumerate(records, start=1)
    ]
    logger.debug("Normalized %d rows", len(rows))
    return rows
