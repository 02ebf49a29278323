"""CSV import commands."""

import click
from presupuestos.domain.entities import ImportOptions, ImportResult
from presupuestos.domain.quote_import import QuoteImportService
from presupuestos.cli.error_handling import handle_domain_error


def _print_result(result: ImportResult, title: str = "Import complete") -> None:
    click.echo(f"\n{title}:")
    click.echo(f"  Added: {result.added} budgets")
    click.echo(f"  Updated: {result.updated} budgets")
    click.echo(f"  Finalized: {result.deleted} budgets")
    click.echo(f"  Total in file: {result.total}")


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--no-compare",
    is_flag=True,
    help="Do not compare with previously imported budgets",
)
@click.option(
    "--no-auto-finalize",
    is_flag=True,
    help="Keep budgets missing from the file open instead of finalizing them",
)
@click.option("--dry-run", is_flag=True, help="Show what would change without saving")
@click.pass_context
def import_csv(ctx, csv_file: str, no_compare: bool, no_auto_finalize: bool, dry_run: bool):
    """Import budgets from a CSV export.

    Budgets already stored keep their notes, status and history. Budgets no
    longer present in the file are finalized as expired unless
    --no-auto-finalize or --no-compare is given.

    Examples:
        presupuestos import presupuestos.csv
        presupuestos import presupuestos.csv --dry-run
        presupuestos import presupuestos.csv --no-auto-finalize
    """
    db = ctx.obj["db"]
    service = QuoteImportService(db)
    options = ImportOptions(
        compare_with_previous=not no_compare,
        auto_finalize_missing=not no_auto_finalize,
    )

    try:
        if dry_run:
            with open(csv_file, encoding="utf-8-sig") as f:
                result = service.preview_csv_text(f.read(), options)
            _print_result(result, title="Dry run (nothing saved)")
        else:
            result = service.import_csv_file(csv_file, options)
            _print_result(result)
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)


@click.command("import-demo")
@click.option("--no-auto-finalize", is_flag=True, help="Keep missing budgets open")
@click.pass_context
def import_demo(ctx, no_auto_finalize: bool):
    """Import the bundled demo CSV (or PRESUPUESTOS_DEMO_CSV)."""
    db = ctx.obj["db"]
    service = QuoteImportService(db)
    options = ImportOptions(auto_finalize_missing=not no_auto_finalize)

    try:
        result = service.import_demo(options)
        _print_result(result)
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)


@click.command("import-logs")
@click.pass_context
def list_import_logs(ctx):
    """List past imports, newest first."""
    db = ctx.obj["db"]

    logs = db.list_import_logs()
    if not logs:
        click.echo("No imports found.")
        return

    click.echo("\nImports:")
    click.echo("-" * 80)
    for log in logs:
        click.echo(
            f"{log.timestamp:%Y-%m-%d %H:%M} | {log.file_name:30s} | "
            f"added {log.records_imported}, updated {log.records_updated}, "
            f"finalized {log.records_deleted}"
        )


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_csv)
    cli.add_command(import_demo)
    cli.add_command(list_import_logs)
