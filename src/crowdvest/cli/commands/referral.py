"""Referral campaign commands."""

from datetime import date
from decimal import Decimal, InvalidOperation

import click

from crowdvest.cli.error_handling import handle_domain_error
from crowdvest.domain.errors import DomainError
from crowdvest.domain.referral import ReferralService
from crowdvest.utils.amount_parser import parse_amount
from crowdvest.utils.date_parser import parse_date


def _service(ctx) -> ReferralService:
    settings = ctx.obj["settings"]
    return ReferralService(ctx.obj["db"], max_multiplier=settings.max_referral_multiplier)


@click.group()
def referral_group():
    """Manage referral campaigns."""
    pass


@referral_group.command("create-campaign")
@click.argument("name")
@click.option("--start", "start_str", required=True, help="Start date")
@click.option("--end", "end_str", required=True, help="End date (inclusive)")
@click.option("--multiplier", default="1.00", show_default=True, help="Bonus multiplier")
@click.option("--bonus", "bonus_str", default="0", show_default=True, help="Flat bonus per referral")
@click.option("--max-referrals", type=int, help="Maximum referrals for the campaign")
@click.option("--description", help="Campaign description")
@click.pass_context
def create_campaign(
    ctx,
    name: str,
    start_str: str,
    end_str: str,
    multiplier: str,
    bonus_str: str,
    max_referrals: int | None,
    description: str | None,
):
    """Create a referral campaign.

    Examples:
        crowdvest referral create-campaign "Diwali Double" --start 2024-10-25 --end 2024-11-05 --multiplier 2
    """
    try:
        start = parse_date(start_str)
        end = parse_date(end_str)
        bonus = parse_amount(bonus_str)
        multiplier_value = Decimal(multiplier)
    except (ValueError, InvalidOperation) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        campaign_id = _service(ctx).create_campaign(
            name=name,
            start_date=start,
            end_date=end,
            multiplier=multiplier_value,
            bonus_amount=bonus,
            max_referrals=max_referrals,
            description=description,
        )
        click.echo(f"Created referral campaign '{name}' (ID: {campaign_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@referral_group.command("list")
@click.option("--active", "active_only", is_flag=True, help="Only campaigns running today")
@click.pass_context
def list_campaigns(ctx, active_only: bool):
    """List referral campaigns, latest first."""
    service = _service(ctx)
    campaigns = service.active_campaigns() if active_only else service.list_campaigns()
    if not campaigns:
        click.echo("No referral campaigns found.")
        return

    today = date.today()
    click.echo("\nReferral campaigns:")
    click.echo("-" * 80)
    for c in campaigns:
        state = "running" if c.is_running(today) else "idle"
        click.echo(
            f"ID: {c.id:3d} | {c.name:25s} | {c.start_date} to {c.end_date} | "
            f"x{c.multiplier} | bonus {c.bonus_amount} | {state}"
        )


def register_commands(cli):
    """Register referral commands with main CLI."""
    cli.add_command(referral_group, name="referral")
