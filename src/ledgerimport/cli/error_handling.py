"""CLI error reporting."""

import logging

import click

from ledgerimport.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Print ``Error: <message>`` to stderr and exit with status 1.

    The traceback is only logged, at DEBUG level (``--verbose``).
    """
    logger.debug("%s in '%s'", type(error).__name__, ctx.command_path, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
