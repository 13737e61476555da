"""Feature flag commands."""

import click

from crowdvest.cli.error_handling import handle_domain_error
from crowdvest.domain.errors import DomainError
from crowdvest.domain.feature_flags import FeatureFlagService


@click.group()
def flag_group():
    """Manage feature flags."""
    pass


@flag_group.command("create")
@click.argument("key")
@click.argument("name")
@click.option("--description", help="Flag description")
@click.option("--active/--inactive", default=False, help="Whether the flag starts switched on")
@click.option("--rollout", type=int, help="Percentage of users (0-100) to enable the flag for")
@click.pass_context
def create_flag(ctx, key: str, name: str, description: str | None, active: bool, rollout: int | None):
    """Create a feature flag.

    Examples:
        crowdvest flag create new_checkout "New checkout flow"
        crowdvest flag create beta "Beta features" --active --rollout 25
    """
    service = FeatureFlagService(ctx.obj["db"])
    try:
        flag_id = service.create_flag(
            key=key, name=name, description=description, is_active=active, rollout_percentage=rollout
        )
        click.echo(f"Created flag '{key}' (ID: {flag_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@flag_group.command("list")
@click.pass_context
def list_flags(ctx):
    """List all feature flags."""
    service = FeatureFlagService(ctx.obj["db"])
    flags = service.list_flags()
    if not flags:
        click.echo("No feature flags found.")
        return

    click.echo("\nFeature flags:")
    click.echo("-" * 60)
    for f in flags:
        state = "on " if f.is_active else "off"
        rollout = "all" if f.rollout_percentage is None else f"{f.rollout_percentage}%"
        click.echo(f"{f.key:30s} | {state} | rollout: {rollout}")


@flag_group.command("check")
@click.argument("key")
@click.option("--user", "user_id", type=int, help="User ID to evaluate the flag for")
@click.pass_context
def check_flag(ctx, key: str, user_id: int | None):
    """Show whether a flag is enabled for a user.

    Examples:
        crowdvest flag check beta --user 42
    """
    service = FeatureFlagService(ctx.obj["db"])
    enabled = service.is_enabled_for(key, user_id)
    who = f"user {user_id}" if user_id is not None else "anonymous users"
    click.echo(f"'{key}' is {'enabled' if enabled else 'disabled'} for {who}")


@flag_group.command("set")
@click.argument("key")
@click.option("--active/--inactive", default=None, help="Switch the flag on or off")
@click.option("--rollout", type=int, help="Percentage of users (0-100)")
@click.option("--clear-rollout", is_flag=True, help="Remove the rollout percentage (enable for everyone)")
@click.pass_context
def set_flag(ctx, key: str, active: bool | None, rollout: int | None, clear_rollout: bool):
    """Change a flag's state or rollout percentage."""
    if rollout is not None and clear_rollout:
        click.echo("Error: --rollout and --clear-rollout cannot be combined.", err=True)
        ctx.exit(1)
    if active is None and rollout is None and not clear_rollout:
        click.echo("Nothing to change.")
        return

    service = FeatureFlagService(ctx.obj["db"])
    try:
        if active is not None:
            service.set_active(key, active)
        if rollout is not None or clear_rollout:
            service.set_rollout_percentage(key, rollout)
        click.echo(f"Updated flag '{key}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register feature flag commands with main CLI."""
    cli.add_command(flag_group, name="flag")
