"""Command line entry point."""

import logging

import click
from ledgerimport import __version__
from ledgerimport.cli.commands import account, format, import_cmd
from ledgerimport.database.factories import create_sqlite_database, DB_PATH_ENVVAR

COMMAND_MODULES = (account, format, import_cmd)


@click.group()
@click.version_option(__version__, prog_name="ledgerimport")
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    envvar=DB_PATH_ENVVAR,
    help=f"SQLite database file [env: {DB_PATH_ENVVAR}; default: ~/.ledgerimport/ledgerimport.db]",
)
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline steps and tracebacks")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Import bank exports into a ledger.

    Bank statements with metadata preambles, locale-formatted numbers and
    split debit/credit columns are staged, mapped to accounts, categories
    and tags, and committed as signed ledger entries in one transaction.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # --help and --version never reach a subcommand; leave the database alone
    if ctx.invoked_subcommand is None:
        return
    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()
    ctx.obj["db"] = db
    ctx.call_on_close(db.disconnect)


for module in COMMAND_MODULES:
    module.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
