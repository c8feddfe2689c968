"""Entity mapping: raw account/category/tag labels to canonical entities."""

import logging
from typing import Iterable, Optional, Sequence

from ledgerimport.database.base import Database
from ledgerimport.domain.entities import (
    EntityRef,
    Import,
    ImportConfig,
    MappingEntry,
    StagedRow,
    ENTITY_KINDS,
)
from ledgerimport.domain.errors import (
    NotFoundError,
    UnresolvableMappingError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class MappingStep:
    """Resolves one kind of raw label."""

    kind = ""

    def labels(self, row: StagedRow) -> Iterable[str]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AccountMapping(MappingStep):
    kind = "account"

    def labels(self, row: StagedRow) -> Iterable[str]:
        return (row.account_label,)


class CategoryMapping(MappingStep):
    kind = "category"

    def labels(self, row: StagedRow) -> Iterable[str]:
        return (row.category_label,)


class TagMapping(MappingStep):
    kind = "tag"

    def labels(self, row: StagedRow) -> Iterable[str]:
        return row.tags_labels


def mapping_steps(config: ImportConfig) -> list[MappingStep]:
    """Mapping steps for a config, in resolution order.

    The account step comes first and only exists when the import has no
    fixed target account. Category and tag resolution do not depend on the
    account.
    """
    steps: list[MappingStep] = []
    if config.account_id is None:
        steps.append(AccountMapping())
    steps.extend([CategoryMapping(), TagMapping()])
    return steps


def collect_labels(rows: Sequence[StagedRow], config: ImportConfig) -> dict[str, set[str]]:
    """Distinct non-empty raw labels per kind that need a mapping entry."""
    labels: dict[str, set[str]] = {}
    for step in mapping_steps(config):
        labels[step.kind] = {label for row in rows for label in step.labels(row) if label}
    return labels


class MappingResolver:
    """Keeps an import's mapping entries in sync and resolves them."""

    def __init__(self, db: Database):
        """Initialize mapping resolver.

        Args:
            db: Database instance (entity store and mapping storage)
        """
        self.db = db

    def collect_labels(self, import_: Import) -> dict[str, set[str]]:
        """Distinct raw labels per kind found in the import's staged rows."""
        rows = self.db.list_staged_rows(import_.id)
        return collect_labels(rows, import_.config)

    def sync(self, import_: Import) -> dict[str, set[str]]:
        """Create missing mapping entries and drop entries for vanished labels.

        Existing resolutions for labels that are still present are kept.
        """
        labels = self.collect_labels(import_)
        self.db.sync_mappings(import_.id, labels)
        logger.debug(
            "Synced mappings for import %s: %s",
            import_.id,
            {kind: len(kind_labels) for kind, kind_labels in labels.items()},
        )
        return labels

    def unresolved(self, import_: Import) -> list[MappingEntry]:
        """Mapping entries of the import's steps that have no target yet."""
        kinds = {step.kind for step in mapping_steps(import_.config)}
        return [
            m for m in self.db.list_mappings(import_.id)
            if m.kind in kinds and not m.is_resolved
        ]

    def resolve_all(self, import_: Import) -> int:
        """Resolve every unresolved mapping entry, step by step.

        Entities created here are part of the caller's atomic block when one
        is open; otherwise resolution is its own all-or-nothing unit.

        Returns:
            Number of entries resolved by this call

        Raises:
            UnresolvableMappingError: If a label matches no entity and the
                config neither creates missing entities nor skips them
        """
        config = import_.config
        resolved = 0
        with self.db.atomic():
            for step in mapping_steps(config):
                for entry in self.db.list_mappings(import_.id, kind=step.kind):
                    if entry.is_resolved:
                        continue
                    ref = self._resolve_label(step.kind, entry.label, config)
                    if ref is None:
                        logger.debug("Skipping unmatched %s '%s'", step.kind, entry.label)
                        continue
                    self.db.resolve_mapping(entry.id, ref.id)
                    resolved += 1
        return resolved

    def _resolve_label(self, kind: str, label: str, config: ImportConfig) -> Optional[EntityRef]:
        if config.create_missing_entities:
            return self.db.find_or_create_entity(kind, label)

        ref = self.db.find_entity(kind, label)
        if ref is not None:
            return ref
        if config.skip_unmatched and kind != "account":
            return None
        raise UnresolvableMappingError(f"No {kind} matches '{label}'")

    def map_label(self, import_: Import, kind: str, label: str, entity_id: int) -> MappingEntry:
        """Point one mapping entry at an existing entity (operator edit).

        Raises:
            ValidationError: If the kind is invalid
            NotFoundError: If the entry or the entity doesn't exist
        """
        if kind not in ENTITY_KINDS:
            raise ValidationError(
                f"Invalid mapping kind '{kind}'. Must be one of: {', '.join(ENTITY_KINDS)}"
            )
        if self.db.get_entity(kind, entity_id) is None:
            raise NotFoundError(f"{kind.capitalize()} {entity_id} not found")

        for entry in self.db.list_mappings(import_.id, kind=kind):
            if entry.label == label:
                self.db.resolve_mapping(entry.id, entity_id)
                return MappingEntry(
                    id=entry.id,
                    import_id=entry.import_id,
                    kind=kind,
                    label=label,
                    entity_id=entity_id,
                )
        raise NotFoundError(f"Import {import_.id} has no {kind} mapping for '{label}'")

    def resolution_table(self, import_: Import) -> dict[tuple[str, str], int]:
        """Map (kind, label) to entity ID for every resolved entry."""
        return {
            (m.kind, m.label): m.entity_id
            for m in self.db.list_mappings(import_.id)
            if m.entity_id is not None
        }
