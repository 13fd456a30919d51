"""
Command-line interface for parse-schema.
"""

import asyncio
import sys
import traceback
from functools import wraps
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import (
    LoggingConfig,
    ReconcileOptions,
    TypeScriptOptions,
    load_config,
    setup_logging,
)
from .exceptions import ParseSchemaError
from .schema.operations import OperationType
from .schema.reconciler import ReconciliationResult, ReconciliationStatus
from .sync import SchemaSyncService


console = Console()


def handle_errors(func):
    """Decorator to handle errors gracefully in CLI commands."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ParseSchemaError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            sys.exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted by user[/yellow]")
            sys.exit(1)
        except click.Abort:
            raise
        except Exception as e:
            console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
            ctx = click.get_current_context(silent=True)
            if ctx is not None and (ctx.obj or {}).get("debug"):
                traceback.print_exc()
            sys.exit(1)
    return wrapper


def _run(coro_factory):
    """Run an operation against a fresh service and close it afterwards."""
    ctx = click.get_current_context()
    config = load_config(ctx.obj.get("config_path"))

    async def runner():
        async with SchemaSyncService(config) as service:
            return await coro_factory(service)

    return asyncio.run(runner())


@click.group()
@click.version_option(__version__)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Config file (default: config/parse-server.config.json)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, config_path: Optional[str], log_level: str, debug: bool):
    """parse-schema: Keep a Parse Server schema in sync with local files."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["debug"] = debug

    setup_logging(LoggingConfig(level="DEBUG" if debug else log_level.upper()))


@main.command()
@click.argument("schema_path", required=False, type=click.Path())
@click.option("--prefix", help="Class name prefix (namespace)")
@click.option(
    "--delete-classes/--no-delete-classes",
    default=True,
    show_default=True,
    help="Delete server classes missing locally",
)
@click.option(
    "--delete-fields/--no-delete-fields",
    default=True,
    show_default=True,
    help="Delete server fields missing or changed locally",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be done without making changes",
)
@handle_errors
def up(
    schema_path: Optional[str],
    prefix: Optional[str],
    delete_classes: bool,
    delete_fields: bool,
    dry_run: bool,
):
    """Apply the local schema to the server."""
    options = ReconcileOptions(
        prefix=prefix,
        delete_classes=delete_classes,
        delete_fields=delete_fields,
        dry_run=dry_run,
    )

    if dry_run:
        console.print("[yellow]Dry run mode - no changes will be made[/yellow]")

    result = _run(lambda service: service.up(schema_path, options))
    _display_result(result)


@main.command()
@click.argument("schema_path", required=False, type=click.Path())
@click.option("--prefix", help="Class name prefix (namespace)")
@handle_errors
def down(schema_path: Optional[str], prefix: Optional[str]):
    """Export the server schema to local files."""
    written = _run(lambda service: service.down(schema_path, prefix))
    console.print(f"[green]✓[/green] Exported {len(written)} file(s)")


@main.command()
@click.argument("schema_path", required=False, type=click.Path())
@click.option("--prefix", help="Class name prefix (namespace)")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be done without making changes",
)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@handle_errors
def delete(schema_path: Optional[str], prefix: Optional[str], dry_run: bool, yes: bool):
    """Delete the classes of the local schema from the server."""
    if not dry_run and not yes:
        if not click.confirm("Delete the local classes from the server?"):
            return

    options = ReconcileOptions(prefix=prefix, dry_run=dry_run)
    result = _run(lambda service: service.delete(schema_path, options))
    _display_result(result)


@main.command()
@click.argument("typescript_path", required=False, type=click.Path(file_okay=False))
@click.option("--prefix", help="Class name prefix (namespace)")
@click.option("--sdk/--no-sdk", default=True, show_default=True, help="Emit Parse SDK types")
@click.option("--global-sdk", is_flag=True, help="Use a global Parse object instead of importing it")
@click.option(
    "--class",
    "subclass",
    is_flag=True,
    help="Emit registered Parse.Object subclasses",
)
@handle_errors
def typescript(
    typescript_path: Optional[str],
    prefix: Optional[str],
    sdk: bool,
    global_sdk: bool,
    subclass: bool,
):
    """Generate TypeScript definitions from the server schema."""
    options = TypeScriptOptions(
        prefix=prefix, sdk=sdk, global_sdk=global_sdk, subclass=subclass
    )
    written = _run(lambda service: service.typescript(typescript_path, options))
    console.print(f"[green]✓[/green] Wrote {len(written)} TypeScript file(s)")


@main.command()
@handle_errors
def check():
    """Test the connection to the server."""
    status = _run(lambda service: service.check())

    if status.get("status") == "healthy":
        console.print(
            f"[green]✓ Server healthy[/green] ({status['response_time_ms']:.1f}ms)"
        )
        console.print(f"  URL: {status['url']}")
        return

    console.print("[red]✗ Server unhealthy[/red]")
    console.print(f"  URL: {status['url']}")
    if status.get("error"):
        console.print(f"  Error: {escape(status['error'])}")
    sys.exit(1)


def _display_result(result: ReconciliationResult):
    """Display the operations of a reconciliation run."""
    if not result.operations:
        console.print("[green]✓[/green] Schema is up to date")
    else:
        table = Table(
            title="Planned operations"
            if result.status == ReconciliationStatus.DRY_RUN
            else "Applied operations"
        )
        table.add_column("#", style="dim")
        table.add_column("Operation", style="cyan")
        table.add_column("Class", style="magenta")
        table.add_column("Fields", style="green")

        for index, operation in enumerate(result.operations, start=1):
            if operation.operation_type == OperationType.UPDATE_CLASS:
                fields = ", ".join(
                    [f"-{name}" for name in operation.deleted_fields]
                    + [f"+{name}" for name in operation.written_fields]
                ) or "(permissions)"
            else:
                fields = ""
            table.add_row(
                str(index),
                operation.operation_type.value,
                operation.class_name,
                fields,
                style="red" if operation.is_destructive else None,
            )

        console.print(table)

    if result.skipped:
        console.print(f"\n[yellow]Skipped ({len(result.skipped)}):[/yellow]")
        for message in result.skipped:
            console.print(f"  • {escape(message)}")


if __name__ == "__main__":
    main()
