"""Logging configuration setup.

Provides logging configuration using:
- dictConfig for the root logger and its filters
- QueueHandler + QueueListener for non-blocking I/O
- ContextInjectingFilter for automatic context propagation
- JSONL format for machine parsing
"""

from __future__ import annotations

import atexit
import logging
import logging.config
import time
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from smartdns_web.infra.logging.context import ContextInjectingFilter

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

if TYPE_CHECKING:
    from smartdns_web.core.settings.logs import LoggingSettings


def complete() -> None:
    """Wait for all queued log records to be processed.

    Blocks until the queue is drained or five seconds have passed.
    """
    if _log_queue is None or _listener is None:
        return

    max_wait = 5.0
    start = time.time()

    while not _log_queue.empty() and (time.time() - start) < max_wait:
        time.sleep(0.01)

    time.sleep(0.05)


def shutdown() -> None:
    """Shutdown logging system and stop QueueListener.

    Detaches the root QueueHandler, so a later setup_logging() call
    configures logging from scratch.
    """
    global _log_queue, _listener, _queue_handler, _LOGGING_INITIALIZED

    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None

    if _listener is not None:
        complete()
        _listener.stop()
        _listener = None

    _log_queue = None
    _LOGGING_INITIALIZED = False


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from smartdns_web.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = settings_obj.to_logging_kwargs()
    if configure_kwargs:
        log_config = {**log_config, **configure_kwargs}

    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    console_level: str | None = None,
    file_level: str | None = None,
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    include_function_name: bool = False,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "smartdns-web",
    **kwargs: Any,
) -> None:
    """Configure logging with dictConfig and QueueHandler pattern.

    All handlers are attached to a QueueListener; the root logger only gets
    a QueueHandler, and application loggers propagate up to it.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        console_level: Console handler level. If None, uses log_level.
        file_level: File handler level. If None, uses log_level.
        file_path: Path to log file. None disables file logging.
        json_logs: Enable JSONL (JSON Lines) structured logging.
        console_enabled: Enable console/stderr logging.
        include_context: Enable ContextInjectingFilter for auto context.
        capture_warnings: Forward Python warnings to logging system.
        include_function_name: Include function name in records.
        file_max_bytes: Maximum log file size before rotation.
        file_backup_count: Number of rotated log files to keep.
        service_name: Static ``service`` field added to JSON records.
        **kwargs: Unused settings, logged at DEBUG.
    """
    if kwargs:
        logger.debug("Unused logging kwargs supplied: %s", ", ".join(sorted(kwargs.keys())))

    if capture_warnings:
        logging.captureWarnings(True)

    path = Path(file_path) if file_path else None
    if path:
        path.parent.mkdir(parents=True, exist_ok=True)

    root_filters = ["context"] if include_context else []
    filters_config: dict[str, Any] = {}
    if include_context:
        filters_config["context"] = {
            "()": "smartdns_web.infra.logging.context.ContextInjectingFilter",
        }

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": filters_config,
        # Handlers are attached to the QueueListener, not to root
        "root": {
            "level": log_level.upper(),
            "handlers": [],
            "filters": root_filters,
        },
    }
    logging.config.dictConfig(logging_config)

    _setup_queue_logging(
        console_enabled=console_enabled,
        file_path=path,
        console_level=console_level or log_level,
        file_level=file_level or log_level,
        file_max_bytes=file_max_bytes,
        file_backup_count=file_backup_count,
        json_logs=json_logs,
        include_function_name=include_function_name,
        service_name=service_name,
        include_context=include_context,
    )


def _build_formatter(
    json_logs: bool, include_function_name: bool, service_name: str
) -> logging.Formatter:
    """Create the formatter shared by every handler."""
    from smartdns_web.infra.logging.formatters import JSONFormatter

    if json_logs:
        fmt_keys = {"level": "levelname", "logger": "name", "message": "message"}
        if include_function_name:
            fmt_keys["function"] = "funcName"
        return JSONFormatter(fmt_keys=fmt_keys, static={"service": service_name})

    fmt = TEXT_FORMAT
    if include_function_name:
        fmt = "%(asctime)s - %(levelname)s - %(name)s - %(funcName)s - %(message)s"
    return logging.Formatter(fmt=fmt, datefmt=TEXT_DATEFMT)


def _setup_queue_logging(
    console_enabled: bool,
    file_path: Path | None,
    console_level: str,
    file_level: str,
    file_max_bytes: int,
    file_backup_count: int,
    json_logs: bool,
    include_function_name: bool,
    service_name: str,
    include_context: bool = True,
) -> None:
    """Set up QueueHandler + QueueListener for non-blocking logging."""
    global _log_queue, _listener, _queue_handler

    if _listener is not None:
        _listener.stop()
        _listener = None
    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)

    _log_queue = Queue()
    formatter = _build_formatter(json_logs, include_function_name, service_name)

    handlers: list[logging.Handler] = []

    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if file_path:
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=file_max_bytes,
            backupCount=file_backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        _queue_handler = None
        return

    _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
    _listener.start()
    atexit.register(shutdown)

    _queue_handler = QueueHandler(_log_queue)
    if include_context:
        # Root logger filters skip records propagated from child loggers
        _queue_handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(_queue_handler)
