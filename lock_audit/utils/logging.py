"""Logging utilities for LockAudit."""

import logging
import sys
from pathlib import Path
from typing import Optional, Any
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

ROOT_LOGGER_NAME = "lock_audit"


class LockAuditLogger:
    """Thin wrapper over a logger in the ``lock_audit`` namespace."""

    def __init__(self, name: str) -> None:
        if not name.startswith(ROOT_LOGGER_NAME):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        self.logger = logging.getLogger(name)
        _configure_root_logger()

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(msg, extra=kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(msg, extra=kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(msg, extra=kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(msg, extra=kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        """Log critical message."""
        self.logger.critical(msg, extra=kwargs)


def _configure_root_logger() -> logging.Logger:
    """Attach the rich console handler to the package logger once."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if any(isinstance(handler, RichHandler) for handler in root.handlers):
        return root

    console = Console(stderr=True, theme=Theme({
        "info": "cyan",
        "warning": "yellow",
        "error": "red",
        "critical": "red bold",
        "debug": "dim",
    }))

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s", datefmt="[%X]"))

    root.addHandler(handler)
    root.propagate = False
    return root


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Setup logging configuration for LockAudit.

    Args:
        level: Logging level
        log_file: Optional log file path
        verbose: Enable verbose logging
    """
    if verbose:
        level = logging.DEBUG

    root = _configure_root_logger()
    root.setLevel(level)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root.addHandler(file_handler)

    # Third-party libraries stay quiet on the process root logger
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)


def get_logger(name: str) -> LockAuditLogger:
    """Get a LockAudit logger instance.

    Args:
        name: Logger name, placed under the ``lock_audit`` namespace

    Returns:
        Configured logger instance
    """
    return LockAuditLogger(name)
