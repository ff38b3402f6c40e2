"""
Logging Framework for sumextras

This module provides the logging infrastructure used across the package:
- Console and optional rotating file output
- Configurable log levels and formats
- Performance tracking
- Context tracking for debugging

Usage:
    from logger import get_logger

    logger = get_logger(__name__)
    logger.info("Table rebuilt")
    logger.log_operation("add_auto_labels", "completed", auto=4, manual=1)

    # Performance tracking
    with logger.track_time("tbl_summary"):
        tbl = tbl_summary(df, by="trt")
"""

import logging
import logging.handlers
import sys
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional

from config import CONFIG


class PerformanceLogger:
    """
    Track and log performance metrics.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.timings: Dict[str, list] = {}
        self._lock = threading.Lock()

    @contextmanager
    def track_time(self, operation: str, log_level: str = "DEBUG"):
        """
        Context manager that measures and logs the elapsed time of a named operation.

        If CONFIG['logging.log_performance'] is falsy, the context yields without measuring or logging.

        Parameters:
            operation (str): Name of the operation to record and log.
            log_level (str): Name of the logger method to call; falls back to debug if unavailable.
        """
        if not CONFIG.get('logging.log_performance'):
            yield
            return

        start_time = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start_time

            with self._lock:
                self.timings.setdefault(operation, []).append(elapsed)

            log_method = getattr(self.logger, log_level.lower(), self.logger.debug)
            log_method(f"{operation} completed in {elapsed:.3f}s")

    def get_timings(self, operation: Optional[str] = None) -> Dict[str, list]:
        """
        Return recorded performance timings, optionally for a single operation.
        """
        if operation:
            return {operation: self.timings.get(operation, [])}
        return self.timings


class ContextFilter(logging.Filter):
    """
    Add context information to log records.
    """

    def __init__(self):
        super().__init__()
        self.context: Dict[str, Any] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Attach stored context key/value pairs as attributes on the given LogRecord.
        """
        for key, value in self.context.items():
            setattr(record, key, value)
        return True

    def set_context(self, **kwargs) -> None:
        self.context.update(kwargs)

    def clear_context(self) -> None:
        self.context.clear()


class LoggerFactory:
    """
    Factory for creating and managing loggers.
    """

    _loggers: ClassVar[Dict[str, 'Logger']] = {}
    _context_filter: Optional[ContextFilter] = None
    _perf_logger: Optional[PerformanceLogger] = None
    _configured = False
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def configure(cls) -> None:
        """
        Perform one-time configuration of the package logger using values from CONFIG.

        Handlers are attached to the `logging.logger_name` logger (default "sumextras"),
        never to the root logger, so applications embedding the package keep control of
        their own logging. The method is idempotent.
        """
        if cls._configured:
            return

        cls._context_filter = ContextFilter()
        package_logger = logging.getLogger(CONFIG.get('logging.logger_name', 'sumextras'))

        if not CONFIG.get('logging.enabled'):
            package_logger.addHandler(logging.NullHandler())
            package_logger.propagate = False
            cls._configured = True
            return

        log_level = CONFIG.get('logging.level', 'INFO')
        numeric_level = getattr(logging, str(log_level).upper(), None)
        if not isinstance(numeric_level, int):
            print(f"[WARNING] Invalid log level '{log_level}', defaulting to INFO", file=sys.stderr)
            numeric_level = logging.INFO
        package_logger.setLevel(numeric_level)

        formatter = logging.Formatter(
            CONFIG.get('logging.format'), datefmt=CONFIG.get('logging.date_format')
        )

        # Clear existing handlers only if re-configuring
        if package_logger.handlers:
            package_logger.handlers.clear()

        if CONFIG.get('logging.file_enabled'):
            cls._setup_file_logging(package_logger, formatter)

        if CONFIG.get('logging.console_enabled'):
            cls._setup_console_logging(package_logger, formatter)

        cls._configured = True

    @classmethod
    def _setup_file_logging(cls, target: logging.Logger, formatter: logging.Formatter) -> None:
        """
        Attach a RotatingFileHandler configured from CONFIG['logging.*'].

        On any setup error a warning is printed to stderr and the function returns without raising.
        """
        try:
            log_dir = Path(CONFIG.get('logging.log_dir', 'logs'))
            log_dir.mkdir(exist_ok=True, parents=True)

            handler = logging.handlers.RotatingFileHandler(
                log_dir / CONFIG.get('logging.log_file', 'sumextras.log'),
                maxBytes=CONFIG.get('logging.max_log_size', 10485760),
                backupCount=CONFIG.get('logging.backup_count', 5),
            )
            handler.setFormatter(formatter)
            handler.addFilter(cls._context_filter)
            target.addHandler(handler)

        except OSError as e:
            print(f"[WARNING] Failed to setup file logging: {e}", file=sys.stderr)

    @classmethod
    def _setup_console_logging(cls, target: logging.Logger, formatter: logging.Formatter) -> None:
        """
        Attach a stderr StreamHandler at CONFIG['logging.console_level'].
        """
        console_handler = logging.StreamHandler(sys.stderr)
        console_level = CONFIG.get('logging.console_level', 'WARNING')
        console_handler.setLevel(getattr(logging, str(console_level).upper(), logging.WARNING))
        console_handler.setFormatter(formatter)
        console_handler.addFilter(cls._context_filter)
        target.addHandler(console_handler)

    @classmethod
    def get_logger(cls, name: str) -> 'Logger':
        """
        Retrieve a cached Logger by name, configuring the logging system on first use.
        """
        if not cls._configured:
            cls.configure()

        with cls._lock:
            if name not in cls._loggers:
                cls._loggers[name] = Logger(logging.getLogger(name), cls._context_filter)
            return cls._loggers[name]

    @classmethod
    def get_performance_logger(cls) -> PerformanceLogger:
        """
        Return the shared PerformanceLogger, creating it on first access.
        """
        if cls._perf_logger is None:
            cls._perf_logger = PerformanceLogger(logging.getLogger('sumextras.performance'))
        return cls._perf_logger


class Logger:
    """
    Wrapper around standard logger with additional features.
    """

    def __init__(self, standard_logger: logging.Logger, context_filter: Optional[ContextFilter] = None):
        self._logger = standard_logger
        self._context_filter = context_filter
        self._perf_logger = LoggerFactory.get_performance_logger()

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, msg: str, *args, **kwargs) -> None:
        """Log debug message."""
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs) -> None:
        self._logger.exception(msg, *args, **kwargs)

    def log_operation(self, operation: str, status: str = "started", **details) -> None:
        """
        Log an operation event with optional details.

        Builds a single-line message "[operation] STATUS key=value | ...". Uses ERROR when
        `status` is "failed" and DEBUG otherwise. Suppressed entirely when
        CONFIG['logging.log_table_operations'] is falsy.
        """
        if not CONFIG.get('logging.log_table_operations', True):
            return

        msg_parts = [f"[{operation}]"]

        if status:
            msg_parts.append(status.upper())

        if details:
            msg_parts.append(" | ".join(f"{k}={v}" for k, v in details.items()))

        msg = " ".join(msg_parts)

        if status.lower() == "failed":
            self.error(msg)
        else:
            self.debug(msg)

    @contextmanager
    def track_time(self, operation: str, log_level: str = "DEBUG"):
        """
        Record elapsed time for the named operation and log the duration at the given level.
        """
        with self._perf_logger.track_time(operation, log_level):
            yield

    def get_timings(self) -> Dict[str, list]:
        return self._perf_logger.get_timings()

    def set_context(self, **kwargs) -> None:
        """
        Attach key-value context that will be included on subsequent log records.
        """
        if self._context_filter:
            self._context_filter.set_context(**kwargs)

    def clear_context(self) -> None:
        if self._context_filter:
            self._context_filter.clear_context()


# Convenience function
def get_logger(name: str) -> Logger:
    """
    Obtain a configured logger for the given name (typically `__name__`).
    """
    return LoggerFactory.get_logger(name)
