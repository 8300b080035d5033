"""
Error Handling Utilities
Error panels with suggestions for the interactive session
"""

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from format_converter.core.catalog import FormatCatalog
from format_converter.core.exceptions import ErrorKind, FormatConverterError


class ErrorHandler:
    """Renders errors with helpful suggestions"""

    def __init__(self, catalog: Optional[FormatCatalog] = None, debug: bool = False):
        self.catalog = catalog
        self.debug = debug

    def suggestions_for(self, error: Exception) -> List[str]:
        """Suggestions keyed on the error kind"""
        if not isinstance(error, FormatConverterError):
            return ["Run again with [cyan]--debug[/cyan] to see the full traceback"]

        suggestions = []
        if error.kind is ErrorKind.FILE_NOT_FOUND:
            suggestions.append("Check if the file exists")
            suggestions.append("Verify the path is correct and points to a file")

        elif error.kind is ErrorKind.UNSUPPORTED_FORMAT:
            suggestion = error.details.get("suggestion")
            if suggestion:
                suggestions.append(f"Did you mean format: [cyan]{suggestion}[/cyan]?")
            if self.catalog is not None:
                known = ", ".join(self.catalog.keys())
                suggestions.append(f"Supported source formats: {known}")

        elif error.kind is ErrorKind.INVALID_SELECTION:
            count = error.details.get("option_count")
            if count:
                suggestions.append(f"Enter a number between 1 and {count}")

        elif error.kind is ErrorKind.CONVERSION_FAILURE:
            message = str(error).lower()
            if "no encoder" in message:
                suggestions.append("Pick a raster target such as .png or .jpg")
            elif "ghostscript" in message:
                suggestions.append("Install Ghostscript to read EPS and AI files")
            elif "cairo" in message:
                suggestions.append("Install the Cairo library to read SVG files")
            else:
                suggestions.append("Check that the source file is not corrupted")

        elif error.kind is ErrorKind.OPEN_FILE_FAILURE:
            suggestions.append("Open the file manually from the Converted folder")

        return suggestions

    def handle(self, error: Exception, console: Console) -> None:
        """Print an error panel"""
        if self.debug and not isinstance(error, FormatConverterError):
            console.print_exception()
            return

        error_text = Text()
        error_text.append("Error: ", style="bold red")
        error_text.append(str(error))

        suggestions = self.suggestions_for(error)
        if suggestions:
            error_text.append("\n\n")
            error_text.append("Suggestions:", style="bold yellow")
            for suggestion in suggestions:
                error_text.append("\n  • ")
                error_text.append_text(Text.from_markup(suggestion))

        title = type(error).__name__
        if isinstance(error, FormatConverterError):
            title = f"{title} ({error.error_code})"

        console.print(
            Panel(
                error_text,
                title=f"[bold red]{title}[/bold red]",
                border_style="red",
                padding=(1, 2),
            )
        )
