"""
Rich-based logger with call and user context support for wacall.

Provides context-aware logging with the call ID and phone number of the
webhook element currently being processed.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from wacall.core.config.settings import settings


class CompactFormatter(logging.Formatter):
    """Custom formatter that shortens long module names for better readability."""

    def format(self, record):
        if record.name.startswith("wacall."):
            # wacall.core.events.dispatcher -> events.dispatcher
            parts = record.name.split(".")
            if len(parts) > 2:
                record.name = ".".join(parts[-2:])

        return super().format(record)


# Rich theme for colored output
_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "debug": "dim white",
    }
)
_console = Console(theme=_theme)


class ContextLogger:
    """
    Logger wrapper that adds call and user context to messages.

    Context is added as a message prefix instead of modifying the format
    string, so handlers configured elsewhere keep working.
    """

    def __init__(
        self,
        logger: logging.Logger,
        call_id: str | None = None,
        user_id: str | None = None,
    ):
        self.logger = logger
        self.call_id = call_id or "---"
        self.user_id = user_id or "---"

    def _format_message(self, message: str) -> str:
        """Add context prefix to message."""
        from .context import get_current_call_context, get_current_user_context

        current_call = get_current_call_context() or self.call_id
        current_user = get_current_user_context() or self.user_id

        if current_call and current_call != "---":
            if current_user and current_user != "---":
                return f"[C:{current_call}][U:{current_user}] {message}"
            return f"[C:{current_call}] {message}"
        elif current_user and current_user != "---":
            return f"[U:{current_user}] {message}"
        return message

    def debug(self, message: str, *args, **kwargs) -> None:
        """Log debug message with context."""
        self.logger.debug(self._format_message(message), *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        """Log info message with context."""
        self.logger.info(self._format_message(message), *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        """Log warning message with context."""
        self.logger.warning(self._format_message(message), *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        """Log error message with context."""
        self.logger.error(self._format_message(message), *args, **kwargs)

    def bind(self, **kwargs) -> ContextLogger:
        """
        Create a new ContextLogger with additional or updated context.

        Returns a new logger instance rather than modifying the current one.

        Args:
            **kwargs: Context fields to bind (call_id, user_id)

        Returns:
            New ContextLogger instance with updated context

        Example:
            call_logger = logger.bind(call_id="wacid.HBgL...")
        """
        new_call_id = kwargs.get("call_id", self.call_id)
        new_user_id = kwargs.get("user_id", self.user_id)
        return ContextLogger(self.logger, call_id=new_call_id, user_id=new_user_id)


def setup_logging(
    *,
    level: str = "INFO",
    mode: str = "PROD",
    log_dir: str | None = None,
    console_fmt: str | None = None,
    file_fmt: str | None = None,
) -> None:
    """
    Initialize the root logger with Rich formatting.

    Parameters
    ----------
    level : str
        Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
    mode : str
        "DEV" creates daily log files + console; anything else → console only
    log_dir : str, optional
        Directory for log files (DEV mode only)
    console_fmt : str, optional
        Console format string
    file_fmt : str, optional
        File format string
    """
    lvl = level.upper()
    lvl = lvl if lvl in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"

    # RichHandler already shows level and time
    console_format = console_fmt or "[%(name)s] %(message)s"
    file_format = file_fmt or "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    rich_handler = RichHandler(
        console=_console,
        rich_tracebacks=True,
        tracebacks_show_locals=True,
        show_time=True,
        show_level=True,
        markup=False,
    )
    rich_handler.setFormatter(CompactFormatter(console_format))

    handlers: list[logging.Handler] = [rich_handler]

    if mode.upper() == "DEV" and log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, f"wacall_{datetime.now():%Y%m%d}.log")
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(CompactFormatter(file_format))
        handlers.append(file_handler)
        _console.print(f"[green]DEV mode:[/] console + file → {logfile}")
    else:
        _console.print(f"Logging configured for mode '{mode}'. Console only.")

    logging.basicConfig(level=lvl, handlers=handlers, force=True)

    setup_logger = logging.getLogger("WacallLoggerSetup")
    setup_logger.info(f"Logging initialized ({lvl})")


def setup_app_logging() -> None:
    """
    Initialize application logging.

    Called once during FastAPI application startup.
    """
    setup_logging(
        level=settings.log_level,
        mode="DEV" if settings.is_development else "PROD",
        log_dir=settings.log_dir if settings.is_development else None,
    )


def get_logger(name: str) -> ContextLogger:
    """
    Get a logger that automatically uses request context variables.

    Args:
        name: Logger name (usually __name__)

    Returns:
        ContextLogger instance with automatic context from context variables
    """
    from .context import get_current_call_context, get_current_user_context

    base_logger = logging.getLogger(name)
    return ContextLogger(
        base_logger,
        call_id=get_current_call_context(),
        user_id=get_current_user_context(),
    )


def get_app_logger() -> ContextLogger:
    """Get application logger for general app events (startup, shutdown, etc.)."""
    return get_logger("wacall.app")
