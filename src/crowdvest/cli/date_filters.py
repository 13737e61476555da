"""CLI helpers for date range resolution."""

from datetime import date

import click

from crowdvest.utils.date_parser import get_date_range, parse_date


def resolve_cli_date_range(
    ctx,
    *,
    since: str | None,
    until: str | None,
    period: str | None,
) -> tuple[date | None, date | None]:
    """Resolve a CLI date range from --period or explicit --since/--until."""
    if period and (since or until):
        click.echo("Error: --period cannot be combined with --since or --until.", err=True)
        ctx.exit(1)

    if period:
        return get_date_range(period)

    start = None
    end = None
    if since:
        try:
            start = parse_date(since)
        except ValueError as e:
            click.echo(f"Error: Invalid --since date: {e}", err=True)
            ctx.exit(1)
    if until:
        try:
            end = parse_date(until)
        except ValueError as e:
            click.echo(f"Error: Invalid --until date: {e}", err=True)
            ctx.exit(1)
    return start, end
