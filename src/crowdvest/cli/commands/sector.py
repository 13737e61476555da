"""Sector management commands."""

import click

from crowdvest.cli.error_handling import handle_domain_error
from crowdvest.domain.errors import DomainError
from crowdvest.domain.sector import SectorService


@click.group()
def sector_group():
    """Manage sectors."""
    pass


@sector_group.command("create")
@click.argument("name")
@click.option("--slug", help="Custom slug (derived from the name if omitted)")
@click.option("--description", help="Sector description")
@click.pass_context
def create_sector(ctx, name: str, slug: str | None, description: str | None):
    """Create a sector.

    Examples:
        crowdvest sector create "Food & Beverages"
        crowdvest sector create "FinTech" --slug fintech-payments
    """
    service = SectorService(ctx.obj["db"])
    try:
        sector_id = service.create_sector(name=name, slug=slug, description=description)
        sector = service.get_sector(sector_id)
        click.echo(f"Created sector '{sector.name}' (ID: {sector_id}, slug: {sector.slug})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@sector_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive sectors")
@click.pass_context
def list_sectors(ctx, include_inactive: bool):
    """List sectors."""
    service = SectorService(ctx.obj["db"])
    sectors = service.list_sectors(include_inactive=include_inactive)
    if not sectors:
        click.echo("No sectors found.")
        return

    click.echo("\nSectors:")
    click.echo("-" * 60)
    for s in sectors:
        click.echo(f"ID: {s.id:3d} | {s.name:25s} | {s.slug}")


@sector_group.command("rename")
@click.argument("sector_id", type=int)
@click.argument("new_name")
@click.pass_context
def rename_sector(ctx, sector_id: int, new_name: str):
    """Rename a sector. The slug follows unless it was set by hand."""
    service = SectorService(ctx.obj["db"])
    try:
        service.rename_sector(sector_id, new_name)
        sector = service.get_sector(sector_id)
        click.echo(f"Renamed sector to '{sector.name}' (slug: {sector.slug})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@sector_group.command("delete")
@click.argument("sector_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_sector(ctx, sector_id: int, yes: bool):
    """Delete a sector.

    The sector can only be deleted if no companies or deals reference it.
    """
    service = SectorService(ctx.obj["db"])
    sector = service.get_sector(sector_id)
    if sector is None:
        click.echo(f"Error: Sector {sector_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete sector '{sector.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_sector(sector_id)
        click.echo(f"Deleted sector '{sector.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register sector commands with main CLI."""
    cli.add_command(sector_group, name="sector")
