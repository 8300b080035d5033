"""
Main CLI Application
Typer entry point that wires settings, logging, catalog and session together
"""

import platform
from typing import Annotated, Optional

import typer
from rich.console import Console

from format_converter import __version__
from format_converter.config import Settings, get_settings
from format_converter.core.catalog import FormatCatalog
from format_converter.core.conversion.engine import PillowEngine
from format_converter.core.conversion.invoker import ConversionInvoker
from format_converter.cli.session import ConsoleSession
from format_converter.utils.logging import setup_logging

app = typer.Typer(
    name="format-converter",
    help="Interactive multi-format image converter",
    rich_markup_mode="rich",
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()


def build_catalog(settings: Settings) -> FormatCatalog:
    """Construct the catalog once for the whole process"""
    catalog = FormatCatalog.default()
    if settings.symmetric_catalog:
        catalog = catalog.symmetric()
    return catalog


def build_session(
    settings: Settings, console: Console, debug: bool = False
) -> ConsoleSession:
    catalog = build_catalog(settings)
    invoker = ConversionInvoker(
        catalog,
        engine=PillowEngine(),
        output_dir_name=settings.output_dir_name,
        vector_density=settings.vector_density,
        atomic_writes=settings.atomic_writes,
    )
    return ConsoleSession(catalog, invoker, settings, console=console, debug=debug)


def show_version_info(console: Console) -> None:
    console.print(f"[bold cyan]Format Converter[/bold cyan] v{__version__}")
    console.print(
        f"[dim]Python {platform.python_version()} on {platform.system()}[/dim]"
    )


@app.command()
def main(
    version: Annotated[
        Optional[bool], typer.Option("--version", "-v", help="Show version and exit")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Enable verbose output")
    ] = False,
    debug: Annotated[
        bool, typer.Option("--debug", help="Enable debug mode with detailed errors")
    ] = False,
):
    """
    Convert files interactively.

    Prompts for a source file, offers the known target formats, writes the
    result into a [cyan]Converted[/cyan] folder beside the source and repeats
    until you type [cyan]exit[/cyan].
    """
    if version:
        show_version_info(console)
        raise typer.Exit()

    settings = get_settings()

    log_level = settings.log_level
    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"

    setup_logging(
        log_level=log_level,
        json_logs=settings.json_logs,
        enable_file_logging=settings.logging_enabled,
        log_dir=settings.log_dir,
        max_log_size_mb=settings.max_log_size_mb,
        backup_count=settings.log_backup_count,
        anonymize=settings.anonymize_logs,
    )

    session = build_session(settings, console, debug=debug)
    converted = session.run()

    if verbose or debug:
        console.print(f"[dim]{converted} file(s) converted[/dim]")


def run() -> None:
    """Console script entry point"""
    app()


if __name__ == "__main__":
    app()
