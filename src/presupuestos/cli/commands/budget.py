"""Budget follow-up commands."""

import click
from presupuestos.cli.date_filters import resolve_cli_date_range
from presupuestos.cli.error_handling import handle_domain_error
from presupuestos.domain.budget import BudgetService
from presupuestos.domain.entities import FollowUpStage, Quote
from presupuestos.domain.summary import (
    DATE_TYPES,
    PRIORITY_FILTERS,
    STATUS_FILTERS,
    SummaryService,
)


def _value(enum_or_str) -> str:
    return getattr(enum_or_str, "value", enum_or_str)


def _format_row(quote: Quote) -> str:
    done = "x" if quote.completado else " "
    return (
        f"[{done}] {quote.id:10s} | {quote.empresa[:28]:28s} | {quote.fabricante[:14]:14s} | "
        f"{_value(quote.tipo_seguimiento):20s} | {_value(quote.prioridad):5s} | "
        f"{quote.dias_restantes:4d}d | {quote.monto_total:>12}"
    )


@click.command("list")
@click.option("--search", default="", help="Search text in ID, company or manufacturer")
@click.option(
    "--status",
    type=click.Choice(STATUS_FILTERS),
    default="all",
    show_default=True,
    help="Filter by status",
)
@click.option("--from", "date_from", help="Start date (YYYY-MM-DD or relative like 'this month')")
@click.option("--to", "date_to", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option(
    "--date-type",
    type=click.Choice(DATE_TYPES),
    default="creation",
    show_default=True,
    help="Which date --from/--to apply to",
)
@click.pass_context
def list_budgets(ctx, search: str, status: str, date_from: str | None, date_to: str | None, date_type: str):
    """List budgets with optional filters.

    Examples:
        presupuestos list --status pending
        presupuestos list --search "municipalidad"
        presupuestos list --from "this month"
    """
    db = ctx.obj["db"]
    service = SummaryService(db)
    start, end = resolve_cli_date_range(ctx, date_from=date_from, date_to=date_to)

    quotes = service.list_budgets(
        search=search, status=status, date_from=start, date_to=end, date_type=date_type
    )

    if not quotes:
        click.echo("No budgets found.")
        return

    click.echo(f"\nBudgets ({len(quotes)}):")
    click.echo("-" * 120)
    for quote in quotes:
        click.echo(_format_row(quote))


@click.command("tasks")
@click.option(
    "--priority",
    type=click.Choice(PRIORITY_FILTERS, case_sensitive=False),
    default="all",
    show_default=True,
    help="Show only pending tasks with this priority",
)
@click.pass_context
def list_tasks(ctx, priority: str):
    """List follow-up tasks, highest priority first."""
    db = ctx.obj["db"]
    service = SummaryService(db)

    tasks = service.list_tasks(priority=priority)
    if not tasks:
        click.echo("No tasks found.")
        return

    click.echo("\nTasks:")
    click.echo("-" * 100)
    for quote in tasks:
        done = "x" if quote.completado else " "
        click.echo(f"[{done}] {_value(quote.prioridad):5s} | {quote.id:10s} | {quote.empresa}")
        click.echo(f"      {quote.accion}")


@click.command("show")
@click.argument("budget_id")
@click.pass_context
def show_budget(ctx, budget_id: str):
    """Show budget details, line items and history."""
    db = ctx.obj["db"]
    service = BudgetService(db)

    quote = service.get_budget(budget_id)
    if quote is None:
        click.echo(f"Error: Budget {budget_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"\nBudget {quote.id}")
    click.echo("-" * 60)
    click.echo(f"Company:      {quote.empresa}")
    click.echo(f"Manufacturer: {quote.fabricante}")
    click.echo(f"Created:      {quote.fecha_creacion}")
    click.echo(f"Validity:     {quote.validez} days ({quote.dias_restantes} remaining)")
    click.echo(f"Stage:        {_value(quote.tipo_seguimiento)}")
    click.echo(f"Priority:     {_value(quote.prioridad)}")
    click.echo(f"Action:       {quote.accion}")
    click.echo(f"Status:       {_value(quote.estado)}")
    click.echo(f"Type:         {'Licitación' if quote.es_licitacion else 'Presupuesto'}")
    click.echo(f"Total:        {quote.monto_total} {quote.moneda}")
    if quote.finalizado:
        click.echo(f"Finalized:    {quote.fecha_finalizado}")
    contact = quote.contacto
    if contact is not None:
        details = ", ".join(v for v in (contact.email, contact.telefono) if v)
        click.echo(f"Contact:      {contact.nombre}" + (f" ({details})" if details else ""))
    for alerta in quote.alertas:
        click.echo(f"Alert:        {alerta}")
    if quote.notas:
        click.echo(f"Notes:        {quote.notas}")

    if quote.items:
        click.echo("\nItems:")
        for item in quote.items:
            click.echo(
                f"  {item.codigo:15s} {item.descripcion[:40]:40s} "
                f"{item.cantidad:4d} x {item.precio}"
            )

    history = [(e.fecha, e.etapa, e.comentario) for e in quote.historial_etapas]
    history += [(e.fecha, e.accion, e.comentario) for e in quote.historial_acciones]
    if history:
        click.echo("\nHistory:")
        for fecha, what, comentario in sorted(history, key=lambda h: h[0]):
            click.echo(f"  {fecha} {what}" + (f": {comentario}" if comentario else ""))


@click.command("note")
@click.argument("budget_id")
@click.argument("text")
@click.pass_context
def save_note(ctx, budget_id: str, text: str):
    """Replace the notes of a budget."""
    db = ctx.obj["db"]
    service = BudgetService(db)

    try:
        service.save_notes(budget_id, text)
        click.echo(f"Saved notes for budget {budget_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.command("complete")
@click.argument("budget_id")
@click.pass_context
def toggle_complete(ctx, budget_id: str):
    """Mark the current follow-up action as done (or reopen it)."""
    db = ctx.obj["db"]
    service = BudgetService(db)

    try:
        quote = service.toggle_completed(budget_id)
        state = "completed" if quote.completado else "reopened"
        click.echo(f"Action {state} for budget {budget_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.command("finalize")
@click.argument("budget_id")
@click.option(
    "--status",
    required=True,
    type=click.Choice(["Aprobado", "Rechazado"]),
    help="Final outcome of the budget",
)
@click.pass_context
def finalize_budget(ctx, budget_id: str, status: str):
    """Close a budget as approved or rejected.

    Examples:
        presupuestos finalize 1001 --status Aprobado
    """
    db = ctx.obj["db"]
    service = BudgetService(db)

    try:
        service.finalize_budget(budget_id, status)
        click.echo(f"Budget {budget_id} finalized as {status}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.command("stage")
@click.argument("budget_id")
@click.argument("stage", type=click.Choice([s.value for s in FollowUpStage]))
@click.option("--comment", help="Comment stored in the stage history")
@click.pass_context
def advance_stage(ctx, budget_id: str, stage: str, comment: str | None):
    """Move a budget to another follow-up stage."""
    db = ctx.obj["db"]
    service = BudgetService(db)

    try:
        service.advance_stage(budget_id, stage, comentario=comment)
        click.echo(f"Budget {budget_id} moved to {stage}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.command("tender")
@click.argument("budget_id")
@click.option(
    "--yes/--no",
    "es_licitacion",
    default=True,
    show_default=True,
    help="Mark as tender or standard quote",
)
@click.pass_context
def change_type(ctx, budget_id: str, es_licitacion: bool):
    """Mark a budget as tender (licitación) or standard quote."""
    db = ctx.obj["db"]
    service = BudgetService(db)

    try:
        service.change_budget_type(budget_id, es_licitacion)
        kind = "tender" if es_licitacion else "standard quote"
        click.echo(f"Budget {budget_id} marked as {kind}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(list_budgets)
    cli.add_command(list_tasks)
    cli.add_command(show_budget)
    cli.add_command(save_note)
    cli.add_command(toggle_complete)
    cli.add_command(finalize_budget)
    cli.add_command(advance_stage)
    cli.add_command(change_type)
