"""
Central logging configuration for KostKelola.
Provides setup functions and logger management.
"""

import logging

from .file_logger import FileLogger, route_loggers_to_queue
from .structured_logger import setup_structured_logging


class LoggingConfig:
    """Central logging configuration manager."""

    def __init__(self):
        self.file_logger: FileLogger | None = None
        self._is_configured = False

    def setup(
        self,
        log_to_file: bool = False,
        log_level: str = "INFO",
        log_file_path: str = "logs/app.log",
        use_json_format: bool = True,
        max_bytes: int = 50 * 1024 * 1024,
        backup_count: int = 5,
    ) -> logging.Logger:
        """
        Set up logging once per process.

        Args:
            log_to_file: Also write rotating JSON log files
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_file_path: Path to the log file
            use_json_format: Whether console output is JSON
            max_bytes: Maximum file size before rotation
            backup_count: Number of backup files to keep

        Returns:
            Configured main logger instance
        """
        if self._is_configured:
            return get_logger()

        if log_to_file:
            self.file_logger = FileLogger(
                log_file_path=log_file_path,
                max_bytes=max_bytes,
                backup_count=backup_count,
                log_level=log_level,
                use_json_format=use_json_format,
            )
            self.file_logger.start()
            route_loggers_to_queue(self.file_logger.get_queue_handler())
        else:
            setup_structured_logging(log_level, use_json_format)

        self._is_configured = True
        return get_logger()

    def shutdown(self) -> None:
        """Shutdown logging gracefully."""
        if self.file_logger:
            self.file_logger.stop()
            self.file_logger = None
        self._is_configured = False


_logging_config = LoggingConfig()


def setup_logging(settings=None) -> logging.Logger:
    """
    Set up logging from application settings.

    Args:
        settings: Settings instance; the loaded application settings by default

    Returns:
        Configured main logger instance
    """
    if settings is None:
        from ...config import settings

    return _logging_config.setup(
        log_to_file=settings.log_to_file,
        log_level=settings.log_level,
        log_file_path=settings.log_file_path,
        use_json_format=settings.log_format.lower() == "json",
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger namespaced under the application logger.

    Args:
        name: Optional logger name, usually ``__name__``

    Returns:
        Logger instance
    """
    if not name:
        return logging.getLogger("kostkelola_backend")
    if name.startswith("kostkelola_backend"):
        return logging.getLogger(name)
    return logging.getLogger(f"kostkelola_backend.{name}")


def shutdown_logging() -> None:
    """Shutdown logging gracefully."""
    _logging_config.shutdown()
