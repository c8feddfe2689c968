"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so a schema change stays inside
the database package.
"""

from decimal import Decimal

from ledgerimport.domain import entities as domain
from ledgerimport.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Tag as ORMTag,
    ImportFormat as ORMImportFormat,
    Import as ORMImport,
    ImportRow as ORMImportRow,
    ImportMapping as ORMImportMapping,
    Entry as ORMEntry,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        parent_id=orm_category.parent_id,
        created_at=orm_category.created_at,
    )


def tag_to_domain(orm_tag: ORMTag) -> domain.Tag:
    """Convert SQLAlchemy Tag model to domain Tag entity."""
    return domain.Tag(id=orm_tag.id, name=orm_tag.name)


def import_format_to_domain(orm_format: ORMImportFormat) -> domain.ImportFormat:
    """Convert SQLAlchemy ImportFormat model (and its columns) to a domain ImportFormat."""
    config = domain.ImportConfig(
        preamble_lines=orm_format.preamble_lines,
        delimiter=orm_format.delimiter,
        number_format=orm_format.number_format,
        date_format=orm_format.date_format,
        columns={c.field_name: c.column_label for c in orm_format.columns},
        signage_convention=orm_format.signage_convention,
        default_currency=orm_format.default_currency,
        default_row_name=orm_format.default_row_name,
        tags_separator=orm_format.tags_separator,
        create_missing_entities=orm_format.create_missing_entities,
        skip_unmatched=orm_format.skip_unmatched,
    )
    return domain.ImportFormat(
        id=orm_format.id,
        name=orm_format.name,
        config=config,
        created_at=orm_format.created_at,
    )


def import_to_domain(orm_import: ORMImport) -> domain.Import:
    """Convert SQLAlchemy Import model to domain Import entity."""
    return domain.Import(
        id=orm_import.id,
        format_name=orm_import.format_name,
        status=orm_import.status,
        config=domain.ImportConfig.from_dict(orm_import.config),
        raw_source=orm_import.raw_source,
        error=orm_import.error,
        created_at=orm_import.created_at,
    )


def staged_row_to_domain(orm_row: ORMImportRow) -> domain.StagedRow:
    """Convert SQLAlchemy ImportRow model to domain StagedRow entity."""
    return domain.StagedRow(
        id=orm_row.id,
        import_id=orm_row.import_id,
        position=orm_row.position,
        account_label=orm_row.account_label,
        date=orm_row.date,
        amount=orm_row.amount,
        currency=orm_row.currency,
        name=orm_row.name,
        category_label=orm_row.category_label,
        tags_labels=tuple(orm_row.tags or ()),
        notes=orm_row.notes,
    )


def staged_row_to_orm(row: domain.StagedRow, import_id: int, position: int) -> ORMImportRow:
    """Build a SQLAlchemy ImportRow model from a domain StagedRow."""
    return ORMImportRow(
        import_id=import_id,
        position=position,
        account_label=row.account_label,
        date=row.date,
        amount=row.amount,
        currency=row.currency,
        name=row.name,
        category_label=row.category_label,
        tags=list(row.tags_labels),
        notes=row.notes,
    )


def mapping_to_domain(orm_mapping: ORMImportMapping) -> domain.MappingEntry:
    """Convert SQLAlchemy ImportMapping model to domain MappingEntry entity."""
    return domain.MappingEntry(
        id=orm_mapping.id,
        import_id=orm_mapping.import_id,
        kind=orm_mapping.kind,
        label=orm_mapping.label,
        entity_id=orm_mapping.entity_id,
    )


def entry_to_domain(orm_entry: ORMEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy Entry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        import_id=orm_entry.import_id,
        account_id=orm_entry.account_id,
        category_id=orm_entry.category_id,
        tag_ids=tuple(tag.id for tag in orm_entry.tags),
        date=orm_entry.date,
        amount=Decimal(orm_entry.amount),
        currency=orm_entry.currency,
        name=orm_entry.name,
        notes=orm_entry.notes,
        created_at=orm_entry.created_at,
    )
