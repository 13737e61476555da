"""Main CLI entry point."""

import logging

import click

from crowdvest.cli.error_handling import handle_domain_error
from crowdvest.config import load_settings
from crowdvest.database.factories import create_database, create_sqlite_database

# Import and register all commands at module level
from crowdvest.cli.commands import audit, flag, referral, saga, sector


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CROWDVEST_DB_PATH environment variable)",
    envvar="CROWDVEST_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar="CROWDVEST_LOG_LEVEL",
    default="WARNING",
    show_default=True,
    help="Logging level",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Crowdvest - administration tools for the investment platform data store.

    Manage feature flags, sectors and referral campaigns, and inspect sagas
    and the activity log.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except ValueError as e:
        handle_domain_error(ctx, e)
    ctx.obj["settings"] = settings

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if db_path is not None:
            db = create_sqlite_database(database_path=db_path)
        else:
            db = create_database(settings)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
flag.register_commands(cli)
sector.register_commands(cli)
saga.register_commands(cli)
audit.register_commands(cli)
referral.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
