"""Main CLI entry point."""

import click
from presupuestos.database.factories import create_sqlite_database
from presupuestos.logging_config import configure_logging

# Import and register all commands at module level
from presupuestos.cli.commands import budget, contact, import_cmd, summary


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PRESUPUESTOS_DB_PATH environment variable)",
    envvar="PRESUPUESTOS_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Presupuestos - Quote follow-up tracker.

    Import quote exports from CSV, classify each quote into a follow-up stage
    and keep track of notes, contacts and final outcomes.
    """
    ctx.ensure_object(dict)
    configure_logging("DEBUG" if verbose else None)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
import_cmd.register_commands(cli)
budget.register_commands(cli)
contact.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
