"""
Interactive Session
Prompt loop: source path -> target format -> convert -> continue
"""

from enum import Enum
from pathlib import Path
from typing import Callable, Optional, TextIO, Tuple

import structlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from format_converter.config import Settings
from format_converter.core.catalog import FormatCatalog
from format_converter.core.constants import AFFIRMATIVE_ANSWER
from format_converter.core.conversion.invoker import ConversionInvoker
from format_converter.core.exceptions import (
    FormatConverterError,
    InvalidSelectionError,
    OpenFileError,
    SourceNotFoundError,
    UnsupportedFormatError,
)
from format_converter.cli.utils.errors import ErrorHandler
from format_converter.cli.utils.launcher import open_with_default_app
from format_converter.models.conversion import ConversionResult
from format_converter.utils.logging import LoggingContext, new_session_id

logger = structlog.get_logger()


class SessionState(str, Enum):
    """States of the interactive loop"""

    AWAIT_SOURCE_PATH = "await_source_path"
    AWAIT_TARGET_FORMAT = "await_target_format"
    CONVERTING = "converting"
    AWAIT_CONTINUE = "await_continue"
    FINISHED = "finished"


class ConsoleSession:
    """Drives one conversion per iteration until the user exits"""

    def __init__(
        self,
        catalog: FormatCatalog,
        invoker: ConversionInvoker,
        settings: Settings,
        console: Optional[Console] = None,
        stream: Optional[TextIO] = None,
        opener: Callable[[Path], None] = open_with_default_app,
        debug: bool = False,
    ):
        self.catalog = catalog
        self.invoker = invoker
        self.settings = settings
        self.console = console or Console()
        self.stream = stream
        self.opener = opener
        self.error_handler = ErrorHandler(catalog, debug=debug)
        self.state = SessionState.AWAIT_SOURCE_PATH
        self.completed = 0

    def run(self) -> int:
        """Run the loop; returns the number of files converted"""
        self.console.print("\n[bold cyan]Advanced Multi-Format Image Converter[/bold cyan]")
        self.console.rule(style="cyan")

        source: Optional[Path] = None
        target: Optional[str] = None
        self.state = SessionState.AWAIT_SOURCE_PATH

        with LoggingContext(session_id=new_session_id()):
            logger.info("Session started", catalog_keys=len(self.catalog))

            while self.state is not SessionState.FINISHED:
                try:
                    if self.state is SessionState.AWAIT_SOURCE_PATH:
                        source = self.prompt_for_source()
                        self.state = (
                            SessionState.AWAIT_TARGET_FORMAT
                            if source is not None
                            else SessionState.FINISHED
                        )

                    elif self.state is SessionState.AWAIT_TARGET_FORMAT:
                        target = self.prompt_for_target(source)
                        self.state = (
                            SessionState.CONVERTING
                            if target is not None
                            else SessionState.FINISHED
                        )

                    elif self.state is SessionState.CONVERTING:
                        result = self.invoker.convert(source, target)
                        self.completed += 1
                        self.report(result)
                        self.prompt_to_open(result.output_path)
                        self.state = SessionState.AWAIT_CONTINUE

                    elif self.state is SessionState.AWAIT_CONTINUE:
                        self.state = (
                            SessionState.AWAIT_SOURCE_PATH
                            if self.prompt_to_continue()
                            else SessionState.FINISHED
                        )

                except FormatConverterError as e:
                    logger.warning(
                        "Conversion step failed",
                        error_code=e.error_code,
                        kind=e.kind.value,
                    )
                    self.error_handler.handle(e, self.console)
                    self.state = SessionState.AWAIT_SOURCE_PATH

                except KeyboardInterrupt:
                    self.console.print("\n[yellow]Interrupted[/yellow]")
                    self.state = SessionState.FINISHED

                except Exception as e:
                    logger.error("Unexpected error", error=str(e), exc_info=True)
                    self.error_handler.handle(e, self.console)
                    self.state = SessionState.AWAIT_SOURCE_PATH

            logger.info("Session finished", conversions=self.completed)

        self.console.print("[dim]Goodbye.[/dim]")
        return self.completed

    def _read(self, prompt: str) -> Optional[str]:
        """Read one line; None at end of input"""
        try:
            line = self.console.input(prompt, stream=self.stream)
        except EOFError:
            return None
        if self.stream is not None and line == "":
            return None
        return line.strip()

    def _ask_yes_no(self, prompt: str) -> bool:
        answer = self._read(prompt)
        return answer is not None and answer.lower() == AFFIRMATIVE_ANSWER

    @staticmethod
    def clean_path(raw: str) -> Path:
        """Strip matching quotes left by drag-and-drop and expand `~`"""
        raw = raw.strip()
        if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ("'", '"'):
            raw = raw[1:-1].strip()
        return Path(raw).expanduser()

    def prompt_for_source(self) -> Optional[Path]:
        """Ask until an existing, supported file is given; None means exit"""
        exit_keyword = self.settings.exit_keyword.lower()

        while True:
            raw = self._read(
                f"\nEnter the full path of the file to convert "
                f"(or '{escape(self.settings.exit_keyword)}' to quit): "
            )
            if raw is None or raw.lower() == exit_keyword:
                return None

            if not raw:
                self.console.print(
                    "[red]File not found. Please check the path and try again.[/red]"
                )
                continue

            try:
                return self.invoker.validate_source(self.clean_path(raw))
            except SourceNotFoundError:
                self.console.print(
                    "[red]File not found. Please check the path and try again.[/red]"
                )
            except UnsupportedFormatError as e:
                self.console.print("[red]Unsupported file format. Please try again.[/red]")
                suggestion = e.details.get("suggestion")
                if suggestion:
                    self.console.print(f"Did you mean [cyan]{suggestion}[/cyan]?")

    def menu_for(self, source_extension: str) -> Tuple[str, ...]:
        """Targets offered for a source, per the configured menu scope"""
        if self.settings.menu_scope == "source":
            return self.catalog.targets_for(source_extension)
        return self.catalog.list_all_targets()

    def prompt_for_target(self, source: Path) -> Optional[str]:
        """Show the numbered menu and ask until a valid number; None means exit"""
        current = source.suffix.lower()
        options = self.menu_for(current)

        self.console.print(f"\nCurrent file format: [cyan]{current}[/cyan]")
        table = Table(title="Supported conversion formats", show_header=True)
        table.add_column("#", style="dim", justify="right")
        table.add_column("Format", style="cyan")
        for index, extension in enumerate(options, 1):
            table.add_row(str(index), extension)
        self.console.print(table)

        while True:
            raw = self._read("\nEnter the number of the target format: ")
            if raw is None:
                return None

            try:
                return self.catalog.select_target(raw, options)
            except InvalidSelectionError as e:
                logger.debug("Invalid selection", error=e.message)
                self.console.print("[red]Invalid selection. Please try again.[/red]")

    def report(self, result: ConversionResult) -> None:
        for warning in result.warnings:
            self.console.print(f"[yellow]Warning: {escape(warning)}[/yellow]")

        self.console.print(
            f"\n[green]✓[/green] Conversion completed. File saved at: "
            f"{escape(str(result.output_path))}",
            soft_wrap=True,
        )

    def prompt_to_open(self, path: Path) -> None:
        if not self.settings.offer_open_after_convert:
            return
        if not self._ask_yes_no("Do you want to open the converted file? (Y/N): "):
            return

        try:
            self.opener(path)
        except OpenFileError as e:
            logger.warning("Could not open converted file", error=e.message)
            self.console.print(f"[yellow]Could not open file: {escape(e.message)}[/yellow]")

    def prompt_to_continue(self) -> bool:
        return self._ask_yes_no("\nDo you want to convert another file? (Y/N): ")
