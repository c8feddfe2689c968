"""Domain model entities for ledgerimport.

These are pure data classes representing business concepts, independent of
database schema. Services and the database layer exchange these values, so
the ORM models never leak out of the database package.
"""

from dataclasses import dataclass, field, fields, asdict
from datetime import datetime, date
from decimal import Decimal
from typing import Any, Optional, Mapping

INFLOWS_NEGATIVE = "inflows_negative"
INFLOWS_POSITIVE = "inflows_positive"
SIGNAGE_CONVENTIONS = (INFLOWS_NEGATIVE, INFLOWS_POSITIVE)

# Semantic fields a source column can feed
COLUMN_FIELDS = (
    "date",
    "name",
    "amount",
    "debit",
    "credit",
    "currency",
    "category",
    "tags",
    "notes",
    "account",
)

ENTITY_KINDS = ("account", "category", "tag")

# Import lifecycle
STATUS_PENDING = "pending"
STATUS_ROWS_STAGED = "rows_staged"
STATUS_MAPPED = "mapped"
STATUS_COMMITTED = "committed"
STATUS_FAILED = "failed"

# Raw tabular row as read from the source: column label -> raw string
RawRecord = dict[str, str]


@dataclass(frozen=True)
class ImportConfig:
    """Immutable configuration for one import.

    ``columns`` maps a semantic field (see ``COLUMN_FIELDS``) to the label of
    the source column that feeds it. A config that maps both ``debit`` and
    ``credit`` collapses the pair into one signed amount; otherwise the
    ``amount`` column is used.
    """

    preamble_lines: int = 0
    delimiter: str = ","
    number_format: str = "1,234.56"
    date_format: str = "%Y-%m-%d"
    columns: Mapping[str, str] = field(default_factory=dict)
    signage_convention: str = INFLOWS_NEGATIVE
    account_id: Optional[int] = None
    default_currency: str = "USD"
    default_row_name: str = "Imported item"
    tags_separator: str = "|"
    create_missing_entities: bool = True
    skip_unmatched: bool = False

    @property
    def is_debit_credit(self) -> bool:
        return "debit" in self.columns and "credit" in self.columns

    def column(self, semantic_field: str) -> Optional[str]:
        """Return the source column label for a semantic field, if mapped."""
        return self.columns.get(semantic_field)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["columns"] = dict(self.columns)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ImportConfig":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["columns"] = dict(values.get("columns") or {})
        return cls(**values)


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    name: str
    bank_name: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with hierarchical structure."""

    id: int
    name: str
    parent_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Tag:
    """Tag domain entity."""

    id: int
    name: str


@dataclass(frozen=True)
class EntityRef:
    """Canonical reference returned by the entity store."""

    kind: str
    id: int
    name: str


@dataclass(frozen=True)
class ImportFormat:
    """Stored import format (one per supported source layout)."""

    id: int
    name: str
    config: ImportConfig
    created_at: datetime


@dataclass(frozen=True)
class Import:
    """Import aggregate root."""

    id: int
    format_name: str
    status: str
    config: ImportConfig
    raw_source: str
    error: Optional[str]
    created_at: datetime

    @property
    def account_id(self) -> Optional[int]:
        return self.config.account_id


@dataclass(frozen=True)
class StagedRow:
    """One normalized transaction awaiting entity resolution and commit.

    ``amount`` is an exact decimal string in the canonical convention
    (positive = outflow, negative = inflow) and ``date`` is ISO formatted.
    """

    account_label: str
    date: str
    amount: str
    currency: str
    name: str
    category_label: str = ""
    tags_labels: tuple[str, ...] = ()
    notes: str = ""
    id: Optional[int] = None
    import_id: Optional[int] = None
    position: int = 0


@dataclass(frozen=True)
class MappingEntry:
    """Association from a raw label to a canonical entity."""

    id: int
    import_id: int
    kind: str
    label: str
    entity_id: Optional[int]

    @property
    def is_resolved(self) -> bool:
        return self.entity_id is not None


@dataclass(frozen=True)
class LedgerEntry:
    """Committed ledger entry."""

    id: int
    import_id: int
    account_id: int
    category_id: Optional[int]
    tag_ids: tuple[int, ...]
    date: date
    amount: Decimal
    currency: str
    name: str
    notes: Optional[str]
    created_at: datetime
