"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

# Log file configuration
LOG_DIR = Path.home() / ".local" / "state" / "siteops"
LOG_FILE = LOG_DIR / "siteops.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
RETENTION_DAYS = 30

# Handlers installed by configure_logging carry this name so a second call
# replaces them instead of stacking duplicates.
HANDLER_NAME = "siteops"

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _cleanup_old_logs() -> None:
    """Delete log files older than RETENTION_DAYS."""
    if not LOG_DIR.exists():
        return
    cutoff = datetime.now() - timedelta(days=RETENTION_DAYS)
    for log_file in LOG_DIR.glob("siteops.log*"):
        try:
            if datetime.fromtimestamp(log_file.stat().st_mtime) < cutoff:
                log_file.unlink()
        except OSError:
            pass  # best effort


def _remove_installed_handlers(root_logger: logging.Logger) -> None:
    """Drop handlers added by a previous configure_logging call."""
    for handler in list(root_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)
            handler.close()


def _setup_file_logging() -> None:
    """Attach a rotating JSON file handler to the root logger."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    _cleanup_old_logs()

    file_handler = RotatingFileHandler(
        LOG_FILE,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
    )
    file_handler.set_name(HANDLER_NAME)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )

    logging.getLogger().addHandler(file_handler)


def _resolve_level(verbose: bool, debug: bool, level: str | None) -> int:
    """Pick the console log level from CLI flags and the profile setting."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if level:
        return logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)
    return logging.WARNING


def configure_logging(
    verbose: bool = False,
    debug: bool = False,
    json_output: bool = False,
    level: str | None = None,
    log_to_file: bool = True,
) -> None:
    """Configure structured logging for the application.

    Console output is human readable unless ``json_output`` is set. File logs
    go to ~/.local/state/siteops/siteops.log with rotation (10MB max,
    5 backups) and a 30 day retention sweep.

    Args:
        verbose: Enable INFO level console output.
        debug: Enable DEBUG level console output and local variables in
            tracebacks.
        json_output: Render console logs as JSON.
        level: Level name from the active profile, used when neither
            ``verbose`` nor ``debug`` is set.
        log_to_file: Attach the rotating file handler.
    """
    log_level = _resolve_level(verbose, debug, level)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Console logs go to stderr so command output on stdout stays clean.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.set_name(HANDLER_NAME)
    console_handler.setLevel(log_level)
    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=debug),
        )
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )

    root_logger = logging.getLogger()
    _remove_installed_handlers(root_logger)
    root_logger.setLevel(logging.DEBUG)  # handlers filter
    root_logger.addHandler(console_handler)

    if log_to_file:
        _setup_file_logging()


def configure_bootstrap_logging() -> None:
    """Route warnings and errors to stderr until ``configure_logging`` runs.

    Plugins are loaded while the CLI is assembled, before the global flags
    have been parsed, so only problems are reported at that stage.
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a configured logger with optional initial context.

    Args:
        name: Logger name. If None, uses the calling module's name.
        **initial_context: Initial context variables to bind to the logger.

    Returns:
        A bound structlog logger.
    """
    logger: structlog.BoundLogger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
