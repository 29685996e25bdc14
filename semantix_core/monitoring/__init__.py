"""
Monitoring module for the Semantix engine.

Provides structured logging with correlation ids for the core and the CLI.
"""

from .structured_logger import (
    StructuredLogger,
    LoggingContext,
    OperationLogger,
    JSONFormatter,
    current_correlation_id,
    current_request_id,
    get_logger,
    configure_logging,
)

__all__ = [
    "StructuredLogger",
    "LoggingContext",
    "OperationLogger",
    "JSONFormatter",
    "current_correlation_id",
    "current_request_id",
    "get_logger",
    "configure_logging",
]
