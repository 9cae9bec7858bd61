"""Logging infrastructure for KostKelola backend."""

from .context import (
    TransactionIdFilter,
    get_transaction_id,
    set_transaction_id,
)
from .file_logger import FileLogger
from .logger_config import get_logger, setup_logging, shutdown_logging
from .middleware import LoggingMiddleware, RequestIdMiddleware

__all__ = [
    "FileLogger",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    "LoggingMiddleware",
    "RequestIdMiddleware",
    "TransactionIdFilter",
    "get_transaction_id",
    "set_transaction_id",
]
