"""Import domain service.

An import moves through ``pending -> rows_staged -> mapped -> committed``;
any failure of a step is recorded on the import (``error``) before the
exception propagates. A committed import can no longer change.

Staging, mapping and committing the same import are serialized with a
per-import lock so no step sees a half-replaced row set.
"""

import dataclasses
import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from ledgerimport.database.base import Database
from ledgerimport.domain.entities import (
    Import as ImportEntity,
    LedgerEntry,
    MappingEntry,
    StagedRow,
    STATUS_COMMITTED,
    STATUS_FAILED,
    STATUS_MAPPED,
    STATUS_PENDING,
    STATUS_ROWS_STAGED,
)
from ledgerimport.domain.errors import (
    DomainError,
    ImportStateError,
    NotFoundError,
    UnresolvableMappingError,
    ValidationError,
    account_not_found,
    import_committed,
    import_not_found,
)
from ledgerimport.domain.formats import FormatService, validate_config
from ledgerimport.domain.ledger_commit import LedgerCommitter
from ledgerimport.domain.mapping import MappingResolver, mapping_steps
from ledgerimport.domain.staging import build_staged_rows

logger = logging.getLogger(__name__)

_locks_guard = threading.Lock()
# import id -> [lock, number of callers using it]
_import_locks: dict[int, list] = {}


@contextmanager
def _import_lock(import_id: int) -> Iterator[None]:
    with _locks_guard:
        slot = _import_locks.setdefault(import_id, [threading.RLock(), 0])
        slot[1] += 1
    try:
        with slot[0]:
            yield
    finally:
        with _locks_guard:
            slot[1] -= 1
            if slot[1] == 0:
                del _import_locks[import_id]


class ImportService:
    """Service driving imports from raw source to ledger entries."""

    def __init__(self, db: Database):
        """Initialize import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.format_service = FormatService(db)
        self.resolver = MappingResolver(db)
        self.committer = LedgerCommitter(db)

    def create_import(
        self,
        format_name: str,
        raw_source: str,
        account_id: Optional[int] = None,
        **overrides: Any,
    ) -> int:
        """Create a pending import from raw source text.

        Args:
            format_name: Stored or built-in format name
            raw_source: Source text (encoding already resolved)
            account_id: Optional fixed target account for every row
            **overrides: ImportConfig fields to change for this import only
                (e.g. default_currency="ARS")

        Returns:
            Import ID

        Raises:
            NotFoundError: If the format or account doesn't exist
            ValidationError: If an override is invalid
        """
        config = self.format_service.get_config(format_name)
        if account_id is not None and self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        try:
            config = dataclasses.replace(config, account_id=account_id, **overrides)
        except TypeError as e:
            raise ValidationError(f"Invalid import setting: {e}")
        validate_config(config)

        import_id = self.db.create_import(format_name=format_name, config=config, raw_source=raw_source)
        logger.info("Created import %s with format '%s'", import_id, format_name)
        return import_id

    def get_import(self, import_id: int) -> Optional[ImportEntity]:
        """Get import by ID.

        Args:
            import_id: Import ID

        Returns:
            Import entity or None if not found
        """
        return self.db.get_import(import_id)

    def list_imports(self) -> list[ImportEntity]:
        """List imports, newest first."""
        return self.db.list_imports()

    def _require(self, import_id: int) -> ImportEntity:
        imp = self.db.get_import(import_id)
        if imp is None:
            raise NotFoundError(import_not_found(import_id))
        return imp

    def _require_mutable(self, import_id: int) -> ImportEntity:
        imp = self._require(import_id)
        if imp.status == STATUS_COMMITTED:
            raise ImportStateError(import_committed(import_id))
        return imp

    def _record_error(self, imp: ImportEntity, status: str, error: DomainError) -> None:
        logger.warning("Import %s: %s", imp.id, error)
        self.db.update_import_status(imp.id, status, str(error))

    def update_config(self, import_id: int, **changes: Any) -> ImportEntity:
        """Replace the import's config with a changed copy.

        The import goes back to ``pending``; staged rows built from the old
        config stay until the next ``stage``.

        Raises:
            ImportStateError: If the import is committed
            ValidationError: If a change is invalid
        """
        with _import_lock(import_id):
            imp = self._require_mutable(import_id)
            try:
                config = dataclasses.replace(imp.config, **changes)
            except TypeError as e:
                raise ValidationError(f"Invalid import setting: {e}")
            validate_config(config)
            if config.account_id is not None and self.db.get_account(config.account_id) is None:
                raise NotFoundError(account_not_found(config.account_id))

            self.db.update_import_config(import_id, config)
            self.db.update_import_status(import_id, STATUS_PENDING)
            return self._require(import_id)

    def stage(self, import_id: int) -> int:
        """Regenerate the staged rows of an import from its raw source.

        The previous rows are replaced as a whole, so re-running is always
        safe. On a parse error the previous rows stay untouched and the
        status is unchanged.

        Returns:
            Number of staged rows

        Raises:
            ImportStateError: If the import is committed
            MalformedSourceError, InvalidNumberError, InvalidDateError,
            ValidationError: If the source cannot be normalized
        """
        with _import_lock(import_id):
            imp = self._require_mutable(import_id)
            try:
                rows = build_staged_rows(imp.raw_source, imp.config)
            except ValidationError as e:
                self._record_error(imp, imp.status, e)
                raise

            try:
                with self.db.atomic():
                    self.db.replace_staged_rows(import_id, rows)
                    self.resolver.sync(imp)
            except DomainError as e:
                self._record_error(imp, imp.status, e)
                raise
            self.db.update_import_status(import_id, STATUS_ROWS_STAGED)
            logger.info("Staged %d rows for import %s", len(rows), import_id)
            return len(rows)

    def sync_mappings(self, import_id: int) -> dict[str, set[str]]:
        """Refresh mapping entries from the current staged rows."""
        with _import_lock(import_id):
            imp = self._require_mutable(import_id)
            return self.resolver.sync(imp)

    def resolve(self, import_id: int) -> int:
        """Resolve all pending mapping entries and mark the import mapped.

        Returns:
            Number of entries resolved by this call

        Raises:
            ImportStateError: If rows are not staged or the import is committed
            UnresolvableMappingError: If a label cannot be resolved
        """
        with _import_lock(import_id):
            imp = self._require_mutable(import_id)
            if imp.status == STATUS_PENDING:
                raise ImportStateError(f"Import {import_id} has no staged rows; stage it first")
            try:
                resolved = self.resolver.resolve_all(imp)
            except DomainError as e:
                self._record_error(imp, STATUS_ROWS_STAGED, e)
                raise
            self.db.update_import_status(import_id, STATUS_MAPPED)
            logger.info("Resolved %d mappings for import %s", resolved, import_id)
            return resolved

    def map_label(self, import_id: int, kind: str, label: str, entity_id: int) -> MappingEntry:
        """Resolve one mapping entry to a chosen entity."""
        with _import_lock(import_id):
            imp = self._require_mutable(import_id)
            return self.resolver.map_label(imp, kind, label, entity_id)

    def dry_run(self, import_id: int) -> dict[str, int]:
        """Count what publishing the import would create.

        Returns:
            Dict with ``transactions`` (staged rows) and, per mapping step,
            the number of labels still unresolved (``accounts``,
            ``categories``, ``tags``)
        """
        imp = self._require(import_id)
        unresolved = self.resolver.unresolved(imp)
        summary = {"transactions": len(self.db.list_staged_rows(import_id))}
        plural = {"account": "accounts", "category": "categories", "tag": "tags"}
        for step in mapping_steps(imp.config):
            summary[plural[step.kind]] = sum(1 for m in unresolved if m.kind == step.kind)
        return summary

    def commit(self, import_id: int) -> int:
        """Commit the staged rows of an import as ledger entries.

        Pending mappings are resolved first, inside the same atomic unit.

        Returns:
            Number of ledger entries created

        Raises:
            ImportStateError: If the import is committed or has no staged rows
            CommitValidationError: If an entry fails validation; nothing is
                written and the import becomes ``failed``
            UnresolvableMappingError: If a mapping cannot be resolved; the
                import stays ``rows_staged``
            DomainError: Any other failure also leaves the import ``failed``
        """
        with _import_lock(import_id):
            imp = self._require_mutable(import_id)
            if imp.status == STATUS_PENDING:
                raise ImportStateError(f"Import {import_id} has no staged rows; stage it first")
            try:
                count = self.committer.commit(imp)
            except UnresolvableMappingError as e:
                self._record_error(imp, STATUS_ROWS_STAGED, e)
                raise
            except DomainError as e:
                self._record_error(imp, STATUS_FAILED, e)
                raise
            self.db.update_import_status(import_id, STATUS_COMMITTED)
            logger.info("Committed %d ledger entries for import %s", count, import_id)
            return count

    def publish(self, import_id: int) -> int:
        """Stage (when still pending) and commit an import."""
        with _import_lock(import_id):
            imp = self._require_mutable(import_id)
            if imp.status == STATUS_PENDING:
                self.stage(import_id)
            return self.commit(import_id)

    def run(
        self,
        format_name: str,
        raw_source: str,
        account_id: Optional[int] = None,
        **overrides: Any,
    ) -> int:
        """Create, stage and commit an import in one go. Returns import ID."""
        import_id = self.create_import(format_name, raw_source, account_id=account_id, **overrides)
        self.publish(import_id)
        return import_id

    def list_staged_rows(self, import_id: int) -> list[StagedRow]:
        """List the staged rows of an import."""
        self._require(import_id)
        return self.db.list_staged_rows(import_id)

    def list_mappings(self, import_id: int) -> list[MappingEntry]:
        """List the mapping entries of an import."""
        self._require(import_id)
        return self.db.list_mappings(import_id)

    def list_entries(self, import_id: int) -> list[LedgerEntry]:
        """List the ledger entries committed by an import."""
        self._require(import_id)
        return self.db.list_ledger_entries(import_id=import_id)
