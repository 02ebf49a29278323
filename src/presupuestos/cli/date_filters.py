"""CLI helpers for date range resolution."""

from datetime import date

import click

from presupuestos.utils.date_parser import parse_date


def resolve_cli_date_range(
    ctx,
    *,
    date_from: str | None,
    date_to: str | None,
) -> tuple[date | None, date | None]:
    """Parse --from/--to options, exiting with an error on bad input."""
    start = None
    end = None

    if date_from:
        try:
            start = parse_date(date_from)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if date_to:
        try:
            end = parse_date(date_to)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)

    return start, end
