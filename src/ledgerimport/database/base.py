"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

from ledgerimport.domain.entities import (
    Account,
    Category,
    Tag,
    EntityRef,
    ImportConfig,
    ImportFormat,
    Import,
    StagedRow,
    MappingEntry,
    LedgerEntry,
)


class Database(ABC):
    """Abstract database interface for ledgerimport.

    Besides plain persistence this is the entity store (``find_entity`` /
    ``find_or_create_entity``) and the ledger store (``create_ledger_entry``
    inside ``atomic``) the import pipeline works against.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group writes into one all-or-nothing unit.

        Writes made inside the block are committed together when it exits
        normally and rolled back when it raises. Blocks may nest; only the
        outermost one commits.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(self, name: str, bank_name: str = "") -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by exact name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Category and tag operations
    @abstractmethod
    def create_category(self, name: str, parent_id: Optional[int] = None) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_path(self, path: str) -> Optional[Category]:
        """Get category by path (e.g., 'Food & Dining > Groceries')."""
        pass

    @abstractmethod
    def create_tag(self, name: str) -> int:
        """Create a tag. Returns tag ID."""
        pass

    @abstractmethod
    def get_tag_by_name(self, name: str) -> Optional[Tag]:
        """Get tag by exact name."""
        pass

    # Entity store
    @abstractmethod
    def get_entity(self, kind: str, entity_id: int) -> Optional[EntityRef]:
        """Get an account, category or tag reference by ID."""
        pass

    @abstractmethod
    def find_entity(self, kind: str, label: str) -> Optional[EntityRef]:
        """Find an account, category or tag by its label."""
        pass

    @abstractmethod
    def find_or_create_entity(self, kind: str, label: str) -> EntityRef:
        """Find an entity by label, creating it if missing.

        Idempotent: the same label always yields the same reference.
        """
        pass

    # Import format operations
    @abstractmethod
    def create_import_format(self, name: str, config: ImportConfig) -> int:
        """Create an import format with its column mappings. Returns format ID."""
        pass

    @abstractmethod
    def get_import_format_by_name(self, name: str) -> Optional[ImportFormat]:
        """Get import format by name."""
        pass

    @abstractmethod
    def list_import_formats(self) -> list[ImportFormat]:
        """List stored import formats."""
        pass

    @abstractmethod
    def set_format_column(self, format_id: int, field_name: str, column_label: str) -> None:
        """Map a source column to a semantic field, replacing a previous mapping."""
        pass

    @abstractmethod
    def delete_import_format(self, format_id: int) -> None:
        """Delete an import format."""
        pass

    # Import operations
    @abstractmethod
    def create_import(self, format_name: str, config: ImportConfig, raw_source: str) -> int:
        """Create an import in the pending state. Returns import ID."""
        pass

    @abstractmethod
    def get_import(self, import_id: int) -> Optional[Import]:
        """Get import by ID."""
        pass

    @abstractmethod
    def list_imports(self) -> list[Import]:
        """List imports, newest first."""
        pass

    @abstractmethod
    def update_import_status(self, import_id: int, status: str, error: Optional[str] = None) -> None:
        """Set import status and the retained error message (None clears it)."""
        pass

    @abstractmethod
    def update_import_config(self, import_id: int, config: ImportConfig) -> None:
        """Replace the config snapshot of an import."""
        pass

    # Staged row store
    @abstractmethod
    def replace_staged_rows(self, import_id: int, rows: Sequence[StagedRow]) -> None:
        """Replace all staged rows of an import with ``rows`` as one unit."""
        pass

    @abstractmethod
    def list_staged_rows(self, import_id: int) -> list[StagedRow]:
        """List staged rows of an import in source order."""
        pass

    # Mapping operations
    @abstractmethod
    def sync_mappings(self, import_id: int, labels: dict[str, set[str]]) -> None:
        """Make the import's mapping entries match ``labels`` (kind -> labels).

        Entries for labels still present keep their resolution, new labels
        get unresolved entries, entries for vanished labels are removed.
        """
        pass

    @abstractmethod
    def list_mappings(self, import_id: int, kind: Optional[str] = None) -> list[MappingEntry]:
        """List mapping entries of an import, optionally of one kind."""
        pass

    @abstractmethod
    def resolve_mapping(self, mapping_id: int, entity_id: Optional[int]) -> None:
        """Record the entity a mapping entry resolves to (None unresolves it)."""
        pass

    # Ledger store
    @abstractmethod
    def create_ledger_entry(
        self,
        import_id: Optional[int],
        account_id: int,
        date: date,
        amount: Decimal,
        currency: str,
        name: str,
        notes: Optional[str] = None,
        category_id: Optional[int] = None,
        tag_ids: Sequence[int] = (),
    ) -> int:
        """Create a ledger entry. Returns entry ID."""
        pass

    @abstractmethod
    def list_ledger_entries(
        self, import_id: Optional[int] = None, account_id: Optional[int] = None
    ) -> list[LedgerEntry]:
        """List ledger entries ordered by date, optionally filtered."""
        pass

    @abstractmethod
    def count_ledger_entries(self, import_id: Optional[int] = None) -> int:
        """Count ledger entries, optionally of one import."""
        pass
