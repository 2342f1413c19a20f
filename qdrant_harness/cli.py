"""
CLI commands for qdrant-harness.

Provides the `qharness` command-line interface for inspecting configured
managers and cleaning up collections left behind by interrupted test runs.
"""

import json
import logging
import sys
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config.loader import default_loader
from .errors import BackendError, ConfigurationError
from .storage.manager import QdrantManager

console = Console()


def _load_settings(ctx: click.Context):
    try:
        return default_loader.load(reload=True)
    except ConfigurationError as e:
        console.print(f"[red]❌ {e}[/red]")
        ctx.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="qharness")
@click.option(
    '--config', 'config_file',
    type=click.Path(dir_okay=False),
    help='Path to the qdrant-harness JSON settings file'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Logging level (default: from settings)'
)
@click.pass_context
def main(ctx: click.Context, config_file: Optional[str], log_level: Optional[str]):
    """
    qdrant-harness CLI.

    Inspect test managers and clean up leftover test collections.
    """
    if config_file:
        default_loader.configure(config_file)

    settings = _load_settings(ctx)
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    ctx.obj = settings


@main.command()
@click.pass_obj
def status(settings):
    """Show configured managers and whether their backend is reachable."""
    table = Table(title="qdrant-harness managers")
    table.add_column("Manager", style="cyan")
    table.add_column("Service")
    table.add_column("URL")
    table.add_column("Collection")
    table.add_column("Qdrant version")

    unreachable = 0
    for name in settings.managers:
        manager = QdrantManager.from_config(name, settings.manager_config(name))
        try:
            version = f"[green]{manager.get_version_number()}[/green]"
        except BackendError:
            version = "[red]unreachable[/red]"
            unreachable += 1
        finally:
            manager.close()

        table.add_row(
            name, settings.service_name(name), manager.url, manager.collection_name, version
        )

    console.print(table)
    console.print(f"Retries per test: [bold]{settings.retries}[/bold]")

    if unreachable:
        sys.exit(1)


@main.command()
@click.option(
    '--manager', '-m', 'names',
    multiple=True,
    help='Only clean up these managers (default: all)'
)
@click.option(
    '--yes', '-y',
    is_flag=True,
    help='Do not ask for confirmation'
)
@click.pass_obj
def cleanup(settings, names: Tuple[str, ...], yes: bool):
    """Drop test collections left behind by interrupted runs."""
    unknown = [name for name in names if name not in settings.managers]
    if unknown:
        console.print(f"[red]❌ Unknown managers: {', '.join(unknown)}[/red]")
        sys.exit(1)

    selected = list(names) or list(settings.managers)
    managers = [
        QdrantManager.from_config(name, settings.manager_config(name)) for name in selected
    ]

    if not yes:
        collections = ", ".join(m.collection_name for m in managers)
        if not click.confirm(f"Drop collections {collections}?"):
            console.print("[yellow]Aborted.[/yellow]")
            return

    failed = 0
    for manager in managers:
        try:
            if manager.index_exists():
                manager.drop_index()
                console.print(f"[green]✅ Dropped {manager.collection_name}[/green]")
            else:
                console.print(f"[blue]• {manager.collection_name} does not exist[/blue]")
        except BackendError as e:
            console.print(f"[red]❌ {manager.name}: {e}[/red]")
            failed += 1
        finally:
            manager.close()

    if failed:
        sys.exit(1)


@main.command(name="config")
@click.pass_obj
def show_config(settings):
    """Print the resolved settings as JSON."""
    data = settings.model_dump()
    if data.get("api_key"):
        data["api_key"] = "***"
    for manager in data["managers"].values():
        if manager.get("api_key"):
            manager["api_key"] = "***"
    click.echo(json.dumps(data, indent=2))


if __name__ == "__main__":
    main()
