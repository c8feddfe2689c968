"""Account commands."""

import click
from ledgerimport.cli.error_handling import handle_domain_error
from ledgerimport.domain.account import AccountService
from ledgerimport.domain.errors import DomainError
from ledgerimport.utils.account_resolver import resolve_account


@click.group()
def account_group():
    """Manage target accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--bank", "bank_name", default="", help="Bank holding the account")
@click.pass_context
def create_account(ctx, name: str, bank_name: str):
    """Create an account that imports can target.

    Examples:
        ledgerimport account create "Caja Ahorro Pesos" --bank "Banco Galicia"
    """
    service = AccountService(ctx.obj["db"])
    try:
        account_id = service.create_account(name=name, bank_name=bank_name)
        click.echo(f"Created account '{name.strip()}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        bank = f" | Bank: {acc.bank_name}" if acc.bank_name else ""
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s}{bank}")


@account_group.command("entries")
@click.argument("account")
@click.pass_context
def list_entries(ctx, account: str):
    """List the ledger entries of ACCOUNT (name or ID)."""
    service = AccountService(ctx.obj["db"])
    try:
        entries = service.list_entries(resolve_account(service, account))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not entries:
        click.echo("No entries found.")
        return
    for entry in entries:
        click.echo(f"{entry.date} | {entry.amount:>14} {entry.currency} | {entry.name}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
