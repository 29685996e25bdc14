"""
Structured logging with correlation IDs for the Semantix engine.

Core modules obtain a StructuredLogger through get_logger() and log key/value
events (document ids, result counts, file paths) instead of formatted prose.
The core never writes to the console directly; where the events end up is
decided by configure_logging().
"""

import contextvars
import json
import logging
import threading
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

import structlog


# Correlation ID shared by every event of one CLI invocation
correlation_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Request ID, set to the CLI command being run
request_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)

_configure_lock = threading.Lock()
_structlog_configured = False


def _iso_timestamp(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def current_correlation_id() -> Optional[str]:
    return correlation_id_context.get()


def current_request_id() -> Optional[str]:
    return request_id_context.get()


def add_context_ids(logger, method_name, event_dict):
    """structlog processor copying the active correlation and request IDs."""
    correlation_id = correlation_id_context.get()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id

    request_id = request_id_context.get()
    if request_id:
        event_dict["request_id"] = request_id

    return event_dict


def add_timestamp(logger, method_name, event_dict):
    now = time.time()
    event_dict["timestamp"] = _iso_timestamp(now)
    event_dict["timestamp_epoch"] = now
    return event_dict


def add_thread_info(logger, method_name, event_dict):
    """Record the emitting thread; several callers may share one store."""
    current = threading.current_thread()
    event_dict["thread_id"] = current.ident
    event_dict["thread_name"] = current.name
    return event_dict


def _configure_structlog():
    global _structlog_configured
    with _configure_lock:
        if _structlog_configured:
            return

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                add_timestamp,
                add_context_ids,
                add_thread_info,
                structlog.dev.ConsoleRenderer(colors=False),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _structlog_configured = True


class StructuredLogger:
    """
    Key/value logger for one engine component.

    Wraps a structlog BoundLogger with the component name bound, so every
    event can be traced back to the store, the search index or the codec.
    """

    def __init__(self, name: str, component: Optional[str] = None):
        self.name = name
        self.component = component or name

        _configure_structlog()
        self.logger = structlog.get_logger(name).bind(component=self.component)

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, **kwargs)

    def error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """Log an error event, flattening ``error`` into type and message fields."""
        if error is not None:
            kwargs["error_type"] = type(error).__name__
            kwargs["error_message"] = str(error)
        self.logger.error(message, **kwargs)


class LoggingContext:
    """
    Scope a correlation ID, and optionally a request ID, to a block.

    A correlation ID is generated when none is given. Previous values are
    restored on exit, so contexts nest.
    """

    def __init__(self, correlation_id: Optional[str] = None, request_id: Optional[str] = None):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.request_id = request_id
        self._tokens = []

    def __enter__(self):
        self._tokens.append((correlation_id_context, correlation_id_context.set(self.correlation_id)))
        if self.request_id:
            self._tokens.append((request_id_context, request_id_context.set(self.request_id)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)


class OperationLogger:
    """
    Times a file or batch operation and logs how it ended.

    Used as a context manager: a debug event on entry, then an info event with
    ``duration_ms`` on success or an error event if the block raised. Fields
    added to ``context`` inside the block are included in the final event.
    The exception itself is always re-raised.
    """

    def __init__(self, logger: StructuredLogger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time = None
        self.context = {}

    def _elapsed_ms(self) -> float:
        if self.start_time is None:
            return 0.0
        return round((time.time() - self.start_time) * 1000, 3)

    def start(self, **context):
        self.start_time = time.time()
        self.context = context
        self.logger.debug(
            f"Starting operation: {self.operation}",
            operation=self.operation,
            operation_status="started",
            **context,
        )

    def success(self, **extra):
        self.logger.info(
            f"Operation completed: {self.operation}",
            operation=self.operation,
            operation_status="success",
            duration_ms=self._elapsed_ms(),
            **self.context,
            **extra,
        )

    def error(self, error: Exception, **extra):
        self.logger.error(
            f"Operation failed: {self.operation}",
            error=error,
            operation=self.operation,
            operation_status="error",
            duration_ms=self._elapsed_ms(),
            **self.context,
            **extra,
        )

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.error(exc_val)
        else:
            self.success()
        return False


class JSONFormatter(logging.Formatter):
    """Renders stdlib log records as one JSON object per line."""

    def format(self, record):
        log_entry = {
            "timestamp": _iso_timestamp(record.created),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread_name": record.threadName,
        }

        correlation_id = current_correlation_id()
        if correlation_id:
            log_entry["correlation_id"] = correlation_id
        request_id = current_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def get_logger(name: str, component: Optional[str] = None) -> StructuredLogger:
    """Return a StructuredLogger for ``name``, tagged with ``component``."""
    return StructuredLogger(name, component)


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
):
    """
    Install a single console handler on the root logger.

    Args:
        log_level: Minimum level name, e.g. "WARNING"
        json_format: Emit JSONFormatter output instead of ``log_format`` lines
        log_format: Format string used when json_format is False
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(log_format))
    root_logger.addHandler(console_handler)
