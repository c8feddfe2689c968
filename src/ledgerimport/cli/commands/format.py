"""Import format management commands."""

import click
from ledgerimport.cli.error_handling import handle_domain_error
from ledgerimport.domain.entities import ImportConfig, SIGNAGE_CONVENTIONS, COLUMN_FIELDS
from ledgerimport.domain.errors import DomainError
from ledgerimport.domain.formats import FormatService, missing_mappings, template
from ledgerimport.domain.presets import PRESETS


@click.group()
def format_group():
    """Manage import formats."""
    pass


@format_group.command("create")
@click.argument("name")
@click.option("--preamble", "preamble_lines", type=int, default=0, show_default=True,
              help="Metadata lines before the header row")
@click.option("--delimiter", default=",", show_default=True, help="Field delimiter")
@click.option("--number-format", default="1,234.56", show_default=True,
              help="How the source writes 1234.56 (e.g. '1.234,56')")
@click.option("--date-format", default="%Y-%m-%d", show_default=True,
              help="strptime pattern of the date column ('' to auto-detect)")
@click.option("--signage", "signage_convention", type=click.Choice(SIGNAGE_CONVENTIONS),
              default=SIGNAGE_CONVENTIONS[0], show_default=True,
              help="Which direction the source writes as positive")
@click.option("--currency", "default_currency", default="USD", show_default=True,
              help="Currency for rows without a currency column")
@click.option("--no-create", "no_create", is_flag=True,
              help="Only match existing accounts/categories/tags, never create them")
@click.option("--skip-unmatched", is_flag=True,
              help="Leave unmatched categories and tags empty instead of failing")
@click.pass_context
def create_format(
    ctx,
    name: str,
    preamble_lines: int,
    delimiter: str,
    number_format: str,
    date_format: str,
    signage_convention: str,
    default_currency: str,
    no_create: bool,
    skip_unmatched: bool,
):
    """Create a new import format."""
    db = ctx.obj["db"]
    service = FormatService(db)

    config = ImportConfig(
        preamble_lines=preamble_lines,
        delimiter=delimiter,
        number_format=number_format,
        date_format=date_format,
        signage_convention=signage_convention,
        default_currency=default_currency,
        create_missing_entities=not no_create,
        skip_unmatched=skip_unmatched,
    )
    try:
        format_id = service.create_format(name=name, config=config)
        click.echo(f"Created import format '{name}' (ID: {format_id})")
        click.echo("Use 'format map' to add column mappings.")
    except DomainError as e:
        handle_domain_error(ctx, e)


@format_group.command("map")
@click.argument("format_name")
@click.argument("field", type=click.Choice(COLUMN_FIELDS))
@click.argument("column")
@click.pass_context
def map_column(ctx, format_name: str, field: str, column: str):
    """Map a source COLUMN to a semantic FIELD."""
    db = ctx.obj["db"]
    service = FormatService(db)

    try:
        service.add_mapping(format_name, field, column)
        click.echo(f"Mapped column '{column}' to '{field}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@format_group.command("list")
@click.pass_context
def list_formats(ctx):
    """List built-in and stored import formats."""
    db = ctx.obj["db"]
    service = FormatService(db)

    click.echo("\nImport Formats:")
    click.echo("-" * 60)
    for name, config in service.list_formats().items():
        missing = missing_mappings(config)
        status = "✓" if not missing else "✗"
        origin = "built-in" if name in PRESETS else "stored"
        click.echo(f"{status} {name} ({origin})")
        if missing:
            click.echo(f"  Missing required fields: {', '.join(missing)}")


@format_group.command("show")
@click.argument("format_name")
@click.pass_context
def show_format(ctx, format_name: str):
    """Show details and a sample of an import format."""
    db = ctx.obj["db"]
    service = FormatService(db)

    try:
        config = service.get_config(format_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nFormat: {format_name}")
    click.echo(f"Preamble lines: {config.preamble_lines}")
    click.echo(f"Delimiter: {config.delimiter!r}")
    click.echo(f"Number format: {config.number_format}")
    click.echo(f"Date format: {config.date_format or '(auto)'}")
    click.echo(f"Signage: {config.signage_convention}")
    click.echo(f"Type: {'Debit/Credit Format' if config.is_debit_credit else 'Single Amount Format'}")
    click.echo(f"Default currency: {config.default_currency}")

    click.echo("\nColumn Mappings:")
    if not config.columns:
        click.echo("  (none)")
    else:
        for field in COLUMN_FIELDS:
            if config.column(field):
                click.echo(f"  {config.columns[field]} -> {field}")

    if not missing_mappings(config):
        click.echo("\nTemplate:")
        click.echo(template(config), nl=False)


@format_group.command("delete")
@click.argument("format_name")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_format(ctx, format_name: str, yes: bool) -> None:
    """Delete a stored import format."""
    db = ctx.obj["db"]
    service = FormatService(db)

    if not yes and not click.confirm(f"Are you sure you want to delete format '{format_name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_format(format_name)
        click.echo(f"Deleted format '{format_name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register format commands with main CLI."""
    cli.add_command(format_group, name="format")
