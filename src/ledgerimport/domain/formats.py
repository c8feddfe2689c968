"""Import format domain service (configuration loader)."""

import csv
import io
from datetime import date
from typing import Optional

from ledgerimport.database.base import Database
from ledgerimport.domain.entities import (
    ImportConfig,
    ImportFormat as ImportFormatEntity,
    COLUMN_FIELDS,
    SIGNAGE_CONVENTIONS,
)
from ledgerimport.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    format_not_found,
)
from ledgerimport.domain.presets import PRESETS
from ledgerimport.utils.amount_parser import number_separators

_SAMPLE_VALUES = {
    "name": "Sample transaction",
    "currency": "USD",
    "category": "Food > Groceries",
    "tags": "weekly",
    "notes": "",
    "account": "Checking",
}


def column_keys(config: ImportConfig) -> list[str]:
    """Semantic fields an import with this config reads from the source."""
    keys = [field for field in COLUMN_FIELDS if config.column(field)]
    if config.is_debit_credit and "amount" in keys:
        keys.remove("amount")
    if config.account_id is not None and "account" in keys:
        keys.remove("account")
    return keys


def required_column_keys(config: ImportConfig) -> list[str]:
    """Semantic fields whose columns must be present in the source header."""
    keys = ["date"]
    keys.extend(["debit", "credit"] if config.is_debit_credit else ["amount"])
    if config.account_id is None:
        keys.append("account")
    return keys


def missing_mappings(config: ImportConfig) -> list[str]:
    """Required semantic fields that the config maps to no column.

    The account column is not required here because a fixed account can be
    supplied per import.
    """
    required = [k for k in required_column_keys(config) if k != "account"]
    return [k for k in required if not config.column(k)]


def validate_config(config: ImportConfig) -> None:
    """Check the scalar settings of a config.

    Raises:
        ValidationError: If a setting is invalid
    """
    number_separators(config.number_format)
    if config.signage_convention not in SIGNAGE_CONVENTIONS:
        raise ValidationError(
            f"Invalid signage convention '{config.signage_convention}'. "
            f"Must be one of: {', '.join(SIGNAGE_CONVENTIONS)}"
        )
    if len(config.delimiter) != 1:
        raise ValidationError(f"Delimiter must be a single character, got '{config.delimiter}'")
    if config.preamble_lines < 0:
        raise ValidationError("Preamble line count cannot be negative")
    if not config.tags_separator:
        raise ValidationError("Tags separator cannot be empty")
    unknown = set(config.columns) - set(COLUMN_FIELDS)
    if unknown:
        raise ValidationError(
            f"Invalid field(s) {', '.join(sorted(unknown))}. "
            f"Must be one of: {', '.join(COLUMN_FIELDS)}"
        )


def template(config: ImportConfig) -> str:
    """Render the header line plus one sample data row for a config."""
    _, decimal_sep = number_separators(config.number_format)
    samples = dict(_SAMPLE_VALUES)
    samples["date"] = date(2024, 1, 15).strftime(config.date_format or "%Y-%m-%d")
    samples["amount"] = config.number_format
    samples["debit"] = "-" + config.number_format
    samples["credit"] = f"0{decimal_sep}00"

    fields = column_keys(config)
    output = io.StringIO()
    writer = csv.writer(output, delimiter=config.delimiter, lineterminator="\n")
    writer.writerow([config.columns[f] for f in fields])
    writer.writerow([samples[f] for f in fields])
    return output.getvalue()


class FormatService:
    """Service for managing import formats."""

    def __init__(self, db: Database):
        """Initialize format service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_format(self, name: str, config: Optional[ImportConfig] = None) -> int:
        """Create a new stored import format.

        Args:
            name: Format name
            config: Format settings; column mappings may be added later

        Returns:
            Format ID

        Raises:
            ConflictError: If a stored or built-in format has that name
            ValidationError: If a setting is invalid
        """
        config = config or ImportConfig()
        if name in PRESETS or self.db.get_import_format_by_name(name) is not None:
            raise ConflictError(f"Import format with name '{name}' already exists")
        if config.account_id is not None:
            raise ValidationError("A fixed account is chosen per import, not per format")
        validate_config(config)
        return self.db.create_import_format(name=name, config=config)

    def get_format(self, name: str) -> Optional[ImportFormatEntity]:
        """Get stored import format by name.

        Args:
            name: Format name

        Returns:
            Format entity or None if not found
        """
        return self.db.get_import_format_by_name(name)

    def get_config(self, name: str) -> ImportConfig:
        """Load the configuration of a stored or built-in format.

        Stored formats are looked up first, then the built-in presets.

        Raises:
            NotFoundError: If no format has that name
        """
        fmt = self.db.get_import_format_by_name(name)
        if fmt is not None:
            return fmt.config
        if name in PRESETS:
            return PRESETS[name]
        raise NotFoundError(format_not_found(name))

    def list_formats(self) -> dict[str, ImportConfig]:
        """List built-in and stored formats by name."""
        formats = dict(PRESETS)
        formats.update({fmt.name: fmt.config for fmt in self.db.list_import_formats()})
        return dict(sorted(formats.items()))

    def add_mapping(self, name: str, field_name: str, column_label: str) -> None:
        """Map a source column to a semantic field of a stored format.

        Args:
            name: Format name
            field_name: Semantic field (date, name, amount, debit, credit, ...)
            column_label: Column label in the source header

        Raises:
            NotFoundError: If the stored format doesn't exist
            ValidationError: If the field is invalid or conflicts with the
                amount representation already mapped
        """
        fmt = self.db.get_import_format_by_name(name)
        if fmt is None:
            if name in PRESETS:
                raise ValidationError(f"Built-in format '{name}' cannot be changed")
            raise NotFoundError(format_not_found(name))

        if field_name not in COLUMN_FIELDS:
            raise ValidationError(
                f"Invalid field '{field_name}'. Must be one of: {', '.join(COLUMN_FIELDS)}"
            )
        if not column_label.strip():
            raise ValidationError("Column label cannot be empty")

        mapped = set(fmt.config.columns)
        if field_name == "amount" and mapped & {"debit", "credit"}:
            raise ValidationError("Cannot map 'amount' field for debit/credit format")
        if field_name in ("debit", "credit") and "amount" in mapped:
            raise ValidationError(f"Cannot map '{field_name}' field for single amount format")

        self.db.set_format_column(fmt.id, field_name, column_label.strip())

    def delete_format(self, name: str) -> None:
        """Delete a stored import format.

        Raises:
            NotFoundError: If the stored format doesn't exist
        """
        fmt = self.db.get_import_format_by_name(name)
        if fmt is None:
            raise NotFoundError(format_not_found(name))
        self.db.delete_import_format(fmt.id)
