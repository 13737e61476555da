"""Saga inspection commands."""

import click

from crowdvest.cli.error_handling import handle_domain_error
from crowdvest.domain.errors import DomainError
from crowdvest.domain.guards import SAGA_TRANSITIONS
from crowdvest.domain.saga import SagaService


def _format_time(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value is not None else "-"


@click.group()
def saga_group():
    """Inspect and resolve sagas."""
    pass


@saga_group.command("list")
@click.option("--status", type=click.Choice(sorted(SAGA_TRANSITIONS)), help="Filter by status")
@click.option("--type", "saga_type", help="Filter by saga type")
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum number of sagas")
@click.option("--attention", is_flag=True, help="Only failed or stuck sagas")
@click.pass_context
def list_sagas(ctx, status: str | None, saga_type: str | None, limit: int, attention: bool):
    """List sagas, newest first."""
    service = SagaService(ctx.obj["db"])
    if attention:
        sagas = service.needs_attention()
    else:
        sagas = service.list_sagas(status=status, saga_type=saga_type, limit=limit)

    if not sagas:
        click.echo("No sagas found.")
        return

    click.echo(f"\n{'Saga ID':36s} | {'Type':25s} | {'Status':17s} | Steps | Created")
    click.echo("-" * 110)
    for s in sagas:
        click.echo(
            f"{s.saga_id:36s} | {s.saga_type:25s} | {s.status:17s} | "
            f"{s.steps_completed:2d}/{s.steps_total:<2d} | {_format_time(s.created_at)}"
        )


@saga_group.command("show")
@click.argument("saga_id")
@click.pass_context
def show_saga(ctx, saga_id: str):
    """Show a saga and its steps."""
    service = SagaService(ctx.obj["db"])
    saga = service.get_saga(saga_id)
    if saga is None:
        click.echo(f"Error: Saga {saga_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"Saga:     {saga.saga_id}")
    click.echo(f"Type:     {saga.saga_type}")
    click.echo(f"Status:   {saga.status}")
    click.echo(f"Progress: {saga.steps_completed}/{saga.steps_total} ({saga.progress_percentage}%)")
    if saga.failure_reason:
        click.echo(f"Failure:  step {saga.failure_step}: {saga.failure_reason}")
    if saga.resolution_notes:
        click.echo(f"Resolved: by user {saga.resolved_by}: {saga.resolution_notes}")

    steps = service.list_steps(saga_id)
    if steps:
        click.echo("\nSteps:")
        for step in steps:
            line = f"  {step.step_number:2d}. {step.operation}"
            if step.compensation_status:
                line += f" [compensation {step.compensation_status}]"
            if step.compensation_error:
                line += f": {step.compensation_error}"
            click.echo(line)


@saga_group.command("resolve")
@click.argument("saga_id")
@click.option("--by", "resolved_by", type=int, required=True, help="ID of the resolving admin user")
@click.option("--notes", help="Resolution notes")
@click.pass_context
def resolve_saga(ctx, saga_id: str, resolved_by: int, notes: str | None):
    """Mark a saga manually resolved."""
    service = SagaService(ctx.obj["db"])
    try:
        service.resolve_manually(saga_id, resolved_by=resolved_by, notes=notes)
        click.echo(f"Saga {saga_id} marked manually_resolved")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register saga commands with main CLI."""
    cli.add_command(saga_group, name="saga")
