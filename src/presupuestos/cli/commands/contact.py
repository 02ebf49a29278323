"""Contact commands."""

import click
from presupuestos.cli.error_handling import handle_domain_error
from presupuestos.domain.contact import ContactService


@click.command("contact")
@click.argument("budget_id")
@click.option("--name", "nombre", required=True, help="Contact name")
@click.option("--email", help="Contact email address")
@click.option("--phone", "telefono", help="Contact phone number")
@click.pass_context
def save_contact(ctx, budget_id: str, nombre: str, email: str | None, telefono: str | None):
    """Create or replace the contact of a budget.

    Examples:
        presupuestos contact 1001 --name "Ana Pérez" --email ana@example.com
    """
    db = ctx.obj["db"]
    service = ContactService(db)

    try:
        contact = service.save_contact(budget_id, nombre, email=email, telefono=telefono)
        click.echo(f"Saved contact '{contact.nombre}' for budget {budget_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@click.command("contacts")
@click.pass_context
def list_contacts(ctx):
    """List all budget contacts."""
    db = ctx.obj["db"]
    service = ContactService(db)

    contacts = service.list_contacts()
    if not contacts:
        click.echo("No contacts found.")
        return

    click.echo("\nContacts:")
    click.echo("-" * 80)
    for budget_id, contact in contacts:
        click.echo(
            f"{budget_id:10s} | {contact.nombre:25s} | "
            f"{contact.email or '-':25s} | {contact.telefono or '-'}"
        )


def register_commands(cli):
    """Register contact commands with main CLI."""
    cli.add_command(save_contact)
    cli.add_command(list_contacts)
