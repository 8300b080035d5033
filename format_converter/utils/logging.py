import logging
import logging.handlers
import os
import re
import sys
import uuid
from typing import Any, Dict

import structlog

SENSITIVE_KEYS = {
    "path",
    "file_path",
    "source_path",
    "output_path",
    "filename",
    "file_name",
    "directory",
    "folder",
    "username",
}

_PATH_PATTERN = re.compile(r"^(/|~|[A-Za-z]:\\|\\\\)")


def filter_sensitive_data(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Remove file paths and names from log entries."""
    for key, value in list(event_dict.items()):
        key_lower = str(key).lower()
        if key_lower in ("event", "exception"):
            continue
        if any(
            sensitive == key_lower or key_lower.endswith(f"_{sensitive}")
            for sensitive in SENSITIVE_KEYS
        ):
            event_dict[key] = "***REDACTED***"
        elif isinstance(value, str) and _PATH_PATTERN.match(value):
            event_dict[key] = "***PATH_REDACTED***"
    return event_dict


def add_session_id(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the interactive session ID to log entries."""
    if "session_id" not in event_dict:
        event_dict["session_id"] = structlog.contextvars.get_contextvars().get(
            "session_id", "-"
        )
    return event_dict


def new_session_id() -> str:
    return uuid.uuid4().hex[:12]


def setup_logging(
    log_level: str = "WARNING",
    json_logs: bool = False,
    enable_file_logging: bool = False,
    log_dir: str = "./logs",
    max_log_size_mb: int = 10,
    backup_count: int = 3,
    anonymize: bool = True,
) -> None:
    """Configure structured logging for the converter.

    Console output goes to stderr so it never interleaves with the prompts
    on stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Use JSON format for logs
        enable_file_logging: Also log to a rotating file in log_dir
        log_dir: Directory for log files
        max_log_size_mb: Maximum size of each log file in MB
        backup_count: Number of backup files to keep
        anonymize: Redact paths and file names
    """
    level = getattr(logging, log_level.upper())
    handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    if enable_file_logging:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=os.path.join(log_dir, "format-converter.log"),
            maxBytes=max_log_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        handlers.append(file_handler)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_session_id,
    ]

    if anonymize:
        processors.append(filter_sensitive_data)

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=level,
        force=True,
    )

    # Suppress noisy loggers
    logging.getLogger("PIL").setLevel(logging.WARNING)


class LoggingContext:
    """Context manager for adding context to logs."""

    def __init__(self, **kwargs) -> None:
        self.context = kwargs
        self.tokens = None

    def __enter__(self) -> "LoggingContext":
        self.tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.tokens:
            structlog.contextvars.reset_contextvars(**self.tokens)
        self.tokens = None
