"""Activity log commands."""

from datetime import datetime, time, UTC

import click

from crowdvest.cli.date_filters import resolve_cli_date_range
from crowdvest.cli.error_handling import handle_domain_error
from crowdvest.domain.audit import ActivityLogService
from crowdvest.domain.entities import TargetRef
from crowdvest.utils.date_parser import PERIODS


def parse_target(value: str) -> TargetRef:
    """Parse "type:id" (e.g. "company:12") into a TargetRef."""
    target_type, sep, raw_id = value.partition(":")
    if not sep or not target_type or not raw_id.isdigit():
        raise ValueError(f"Invalid target '{value}'. Expected TYPE:ID, e.g. company:12")
    return TargetRef(type=target_type, id=int(raw_id))


@click.group()
def audit_group():
    """Query the activity log."""
    pass


@audit_group.command("list")
@click.option("--actor", type=int, help="Filter by actor user ID")
@click.option("--action", help="Filter by action name")
@click.option("--target", help="Filter by target as TYPE:ID (e.g. company:12)")
@click.option("--since", help="Start date (YYYY-MM-DD, 'yesterday', '7 days ago', ...)")
@click.option("--until", help="End date (inclusive)")
@click.option("--period", type=click.Choice(PERIODS), help="Named period")
@click.option("--limit", type=int, default=100, show_default=True, help="Maximum number of entries")
@click.pass_context
def list_logs(
    ctx,
    actor: int | None,
    action: str | None,
    target: str | None,
    since: str | None,
    until: str | None,
    period: str | None,
    limit: int,
):
    """List activity log entries, newest first.

    Examples:
        crowdvest audit list --actor 3 --period this-week
        crowdvest audit list --target company:12 --since "30 days ago"
    """
    start, end = resolve_cli_date_range(ctx, since=since, until=until, period=period)

    target_ref = None
    if target:
        try:
            target_ref = parse_target(target)
        except ValueError as e:
            handle_domain_error(ctx, e)

    service = ActivityLogService(ctx.obj["db"])
    logs = service.list_logs(
        actor_id=actor,
        action=action,
        target=target_ref,
        since=datetime.combine(start, time.min, tzinfo=UTC) if start else None,
        until=datetime.combine(end, time.max, tzinfo=UTC) if end else None,
        limit=limit,
    )
    if not logs:
        click.echo("No activity found.")
        return

    for log in logs:
        actor_label = f"user {log.actor_id}" if log.actor_id is not None else "system"
        target_label = f" on {log.target}" if log.target is not None else ""
        click.echo(
            f"{log.created_at.strftime('%Y-%m-%d %H:%M:%S')} | {actor_label:10s} | {log.action}{target_label}"
        )
        if log.description:
            click.echo(f"    {log.description}")


def register_commands(cli):
    """Register audit commands with main CLI."""
    cli.add_command(audit_group, name="audit")
