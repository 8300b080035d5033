"""
File Launcher
Open converted files with the operating system's default application
"""

from pathlib import Path

import structlog
import typer

from format_converter.core.exceptions import OpenFileError

logger = structlog.get_logger()


def open_with_default_app(path: Path) -> None:
    """Launch `path` with the OS default handler.

    Raises:
        OpenFileError: the file is missing or no handler could be started
    """
    path = Path(path)
    if not path.exists():
        raise OpenFileError(
            f"{path} does not exist", details={"path": str(path), "exists": False}
        )

    try:
        exit_code = typer.launch(str(path))
    except OSError as e:
        raise OpenFileError(str(e), details={"path": str(path)}) from e

    if exit_code != 0:
        raise OpenFileError(
            f"default application exited with status {exit_code}",
            details={"path": str(path)},
        )

    logger.debug("Launched converted file")
