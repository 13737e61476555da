"""CLI error handling helpers."""

import logging

import click

from crowdvest.domain.errors import DomainError, IntegrityGuardError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Report a rejected operation on stderr and exit with status 1.

    Integrity guard rejections are also logged at warning level, since they
    mean the data still references the record being removed.
    """
    if isinstance(error, IntegrityGuardError):
        logger.warning("%s refused: %s", ctx.command_path, error)
    else:
        logger.debug("%s failed with %s: %s", ctx.command_path, type(error).__name__, error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
