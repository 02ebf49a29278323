"""Summary commands."""

import click
from presupuestos.domain.summary import SummaryService


@click.command("stats")
@click.pass_context
def show_stats(ctx):
    """Show dashboard statistics."""
    db = ctx.obj["db"]
    service = SummaryService(db)

    stats = service.get_stats()

    click.echo("\nSummary:")
    click.echo("-" * 40)
    click.echo(f"Total budgets:   {stats.total}")
    click.echo(f"Pending:         {stats.pending}")
    click.echo(f"Expiring soon:   {stats.expiring_soon}")
    click.echo(f"Approved:        {stats.approved}")
    click.echo(f"Rejected:        {stats.rejected}")

    click.echo("\nBy stage:")
    for stage, count in stats.by_stage.items():
        click.echo(f"  {stage:25s} {count:5d}")

    if stats.by_manufacturer:
        click.echo("\nBy manufacturer:")
        # Largest first, then by name
        for name, count in sorted(stats.by_manufacturer.items(), key=lambda kv: (-kv[1], kv[0])):
            click.echo(f"  {name:25s} {count:5d}")


def register_commands(cli):
    """Register summary commands with main CLI."""
    cli.add_command(show_stats)
