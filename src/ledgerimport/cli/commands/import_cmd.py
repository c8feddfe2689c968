"""Import commands."""

from pathlib import Path

import click
from ledgerimport.cli.error_handling import handle_domain_error
from ledgerimport.domain.account import AccountService
from ledgerimport.domain.entities import ENTITY_KINDS
from ledgerimport.domain.errors import DomainError
from ledgerimport.domain.imports import ImportService
from ledgerimport.utils.account_resolver import resolve_account


def _read_source(csv_file: str) -> str:
    # utf-8-sig drops the byte-order mark some banks prepend
    return Path(csv_file).read_text(encoding="utf-8-sig")


def _fixed_account(ctx, account: str | None) -> int | None:
    if account is None:
        return None
    try:
        return resolve_account(AccountService(ctx.obj["db"]), account)
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.group()
def import_group():
    """Import bank exports into the ledger."""
    pass


@import_group.command("create")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "format_name", required=True, help="Import format name")
@click.option("--account", help="Fixed target account name or ID for every row")
@click.pass_context
def create_import(ctx, csv_file: str, format_name: str, account: str | None):
    """Create an import from a file and stage its rows."""
    service = ImportService(ctx.obj["db"])
    account_id = _fixed_account(ctx, account)

    try:
        import_id = service.create_import(format_name, _read_source(csv_file), account_id=account_id)
        click.echo(f"Created import {import_id}")
        count = service.stage(import_id)
        click.echo(f"  Staged: {count} rows")
    except DomainError as e:
        handle_domain_error(ctx, e)


@import_group.command("stage")
@click.argument("import_id", type=int)
@click.pass_context
def stage_import(ctx, import_id: int):
    """Regenerate the staged rows of an import."""
    service = ImportService(ctx.obj["db"])
    try:
        count = service.stage(import_id)
        click.echo(f"Staged {count} rows for import {import_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@import_group.command("mappings")
@click.argument("import_id", type=int)
@click.pass_context
def list_mappings(ctx, import_id: int):
    """List the label mappings of an import."""
    service = ImportService(ctx.obj["db"])
    try:
        mappings = service.list_mappings(import_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not mappings:
        click.echo("No mappings found.")
        return
    for m in mappings:
        target = m.entity_id if m.is_resolved else "(unresolved)"
        click.echo(f"{m.kind:8s} | {m.label:30s} -> {target}")


@import_group.command("map")
@click.argument("import_id", type=int)
@click.argument("kind", type=click.Choice(ENTITY_KINDS))
@click.argument("label")
@click.argument("entity_id", type=int)
@click.pass_context
def map_label(ctx, import_id: int, kind: str, label: str, entity_id: int):
    """Map LABEL of KIND to an existing entity."""
    service = ImportService(ctx.obj["db"])
    try:
        service.map_label(import_id, kind, label, entity_id)
        click.echo(f"Mapped {kind} '{label}' to {entity_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@import_group.command("resolve")
@click.argument("import_id", type=int)
@click.pass_context
def resolve_import(ctx, import_id: int):
    """Resolve all pending mappings of an import."""
    service = ImportService(ctx.obj["db"])
    try:
        count = service.resolve(import_id)
        click.echo(f"Resolved {count} mappings for import {import_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@import_group.command("dry-run")
@click.argument("import_id", type=int)
@click.pass_context
def dry_run(ctx, import_id: int):
    """Show what committing an import would create."""
    service = ImportService(ctx.obj["db"])
    try:
        summary = service.dry_run(import_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    for key, value in summary.items():
        click.echo(f"  {key.capitalize()}: {value}")


@import_group.command("commit")
@click.argument("import_id", type=int)
@click.pass_context
def commit_import(ctx, import_id: int):
    """Commit the staged rows of an import as ledger entries."""
    service = ImportService(ctx.obj["db"])
    try:
        count = service.commit(import_id)
        click.echo(f"Committed {count} entries for import {import_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@import_group.command("show")
@click.argument("import_id", type=int)
@click.pass_context
def show_import(ctx, import_id: int):
    """Show status and staged rows of an import."""
    service = ImportService(ctx.obj["db"])
    imp = service.get_import(import_id)
    if imp is None:
        click.echo(f"Error: Import {import_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"\nImport {imp.id} ({imp.format_name})")
    click.echo(f"Status: {imp.status}")
    if imp.error:
        click.echo(f"Error: {imp.error}")

    rows = service.list_staged_rows(import_id)
    click.echo(f"\nRows: {len(rows)}")
    for row in rows:
        click.echo(f"  {row.date} | {row.amount:>14s} {row.currency} | {row.name}")


@import_group.command("list")
@click.pass_context
def list_imports(ctx):
    """List imports, newest first."""
    service = ImportService(ctx.obj["db"])

    imports = service.list_imports()
    if not imports:
        click.echo("No imports found.")
        return
    for imp in imports:
        click.echo(f"{imp.id:4d} | {imp.status:12s} | {imp.format_name:20s} | {imp.created_at:%Y-%m-%d %H:%M}")


@import_group.command("run")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "format_name", required=True, help="Import format name")
@click.option("--account", help="Fixed target account name or ID for every row")
@click.pass_context
def run_import(ctx, csv_file: str, format_name: str, account: str | None):
    """Create, stage and commit an import in one step."""
    service = ImportService(ctx.obj["db"])
    account_id = _fixed_account(ctx, account)

    try:
        import_id = service.create_import(format_name, _read_source(csv_file), account_id=account_id)
        count = service.publish(import_id)
        click.echo("\nImport complete:")
        click.echo(f"  Import: {import_id}")
        click.echo(f"  Committed: {count} entries")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_group, name="import")
