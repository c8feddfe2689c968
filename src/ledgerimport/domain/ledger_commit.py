"""Ledger commit: staged rows to ledger entries in one atomic unit."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from ledgerimport.database.base import Database
from ledgerimport.domain.entities import Import, ImportConfig, StagedRow
from ledgerimport.domain.errors import CommitValidationError, account_not_found, row_error
from ledgerimport.domain.mapping import MappingResolver

logger = logging.getLogger(__name__)


class LedgerCommitter:
    """Builds one ledger entry per staged row, all or nothing."""

    def __init__(self, db: Database):
        """Initialize ledger committer.

        Args:
            db: Database instance (ledger store)
        """
        self.db = db
        self.resolver = MappingResolver(db)

    def commit(self, import_: Import) -> int:
        """Resolve pending mappings and write the ledger entries of an import.

        Everything happens inside one atomic block: entity creations from
        mapping resolution and every entry write land together or not at all.

        Returns:
            Number of ledger entries created

        Raises:
            CommitValidationError: If any entry fails validation (nothing is written)
            UnresolvableMappingError: If a mapping cannot be resolved (nothing is written)
        """
        config = import_.config
        with self.db.atomic():
            self.resolver.resolve_all(import_)
            lookup = self.resolver.resolution_table(import_)
            rows = self.db.list_staged_rows(import_.id)
            for row in rows:
                try:
                    values = self._entry_values(row, config, lookup)
                except CommitValidationError as e:
                    raise CommitValidationError(row_error(row.position + 1, str(e))) from e
                self.db.create_ledger_entry(import_id=import_.id, **values)
        logger.debug("Wrote %d ledger entries for import %s", len(rows), import_.id)
        return len(rows)

    def _entry_values(
        self, row: StagedRow, config: ImportConfig, lookup: dict[tuple[str, str], int]
    ) -> dict[str, Any]:
        if config.account_id is not None:
            account_id = config.account_id
            if self.db.get_account(account_id) is None:
                raise CommitValidationError(account_not_found(account_id))
        else:
            account_id = lookup.get(("account", row.account_label))
            if account_id is None:
                raise CommitValidationError(f"No account resolved for '{row.account_label}'")

        try:
            entry_date = date.fromisoformat(row.date)
        except (TypeError, ValueError):
            raise CommitValidationError(f"Invalid date '{row.date}'")

        try:
            amount = Decimal(row.amount)
        except (TypeError, InvalidOperation):
            raise CommitValidationError(f"Invalid amount '{row.amount}'")
        if not amount.is_finite():
            raise CommitValidationError(f"Invalid amount '{row.amount}'")

        if not row.currency:
            raise CommitValidationError("Missing currency")
        if not row.name:
            raise CommitValidationError("Missing name")

        category_id = None
        if row.category_label:
            category_id = lookup.get(("category", row.category_label))
            if category_id is None and not config.skip_unmatched:
                raise CommitValidationError(f"No category resolved for '{row.category_label}'")

        tag_ids: list[int] = []
        for label in row.tags_labels:
            tag_id = lookup.get(("tag", label))
            if tag_id is None:
                if config.skip_unmatched:
                    continue
                raise CommitValidationError(f"No tag resolved for '{label}'")
            if tag_id not in tag_ids:
                tag_ids.append(tag_id)

        return {
            "account_id": account_id,
            "date": entry_date,
            "amount": amount,
            "currency": row.currency,
            "name": row.name,
            "notes": row.notes or None,
            "category_id": category_id,
            "tag_ids": tag_ids,
        }
