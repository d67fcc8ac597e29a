"""
Centralized logging and error handling for AnimePulse.

This module provides consistent logging configuration and custom exceptions
across the entire application.
"""

import logging
from contextlib import contextmanager
from typing import Optional, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from rich.console import Console
from rich.logging import RichHandler

from .constants import LOG_FILENAME, SENSITIVE_PARAM_KEYS

# Global console instance for the entire application
console = Console()


class AnimePulseError(Exception):
    """Base exception for all AnimePulse-specific errors."""
    pass


class ConfigError(AnimePulseError):
    """Raised when there's a configuration-related error."""
    pass


class APIError(AnimePulseError):
    """Raised when an upstream source fails to produce usable data."""
    pass


class TransportError(APIError):
    """Connection refused, DNS failure or timeout."""
    pass


class ProtocolError(APIError):
    """The source answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ShapeError(APIError):
    """The payload is not JSON or lacks the expected results/detail field."""
    pass


class AnimePulseLogger:
    """
    Centralized logging configuration for AnimePulse.

    Owns the root logger handlers: a UTF-8 log file with full detail and a
    rich console handler that only shows warnings unless told otherwise.
    """

    def __init__(self, log_file: str = LOG_FILENAME):
        self.log_file = log_file
        self.console = console
        self._setup_root_logger()

    def _setup_root_logger(self) -> None:
        """Configure the root logger with file and console handlers."""
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # UTF-8 so titles in any script survive on Windows
        file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(file_formatter)

        console_handler = RichHandler(
            console=self.console,
            show_path=False,
            show_time=True,
            show_level=True,
            markup=False,
            keywords=[]
        )
        console_handler.setLevel(logging.WARNING)

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.INFO)

        # Clear existing handlers to avoid duplicates
        root_logger.handlers = []
        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def set_console_level(self, level: Union[str, int]) -> None:
        """
        Set the console logging level.

        Args:
            level: Logging level (e.g., 'DEBUG', 'INFO', 'WARNING')
        """
        self._set_handler_level(level, RichHandler)

    def set_file_level(self, level: Union[str, int]) -> None:
        """
        Set the file logging level.

        Args:
            level: Logging level (e.g., 'DEBUG', 'INFO', 'WARNING')
        """
        self._set_handler_level(level, logging.FileHandler)

    def _set_handler_level(self, level: Union[str, int], handler_cls: type) -> None:
        root_logger = logging.getLogger()

        numeric_level = level
        if isinstance(level, str):
            numeric_level = getattr(logging, level.upper(), logging.INFO)

        # Ensure root logger allows this level
        if numeric_level < root_logger.level:
            root_logger.setLevel(numeric_level)

        for handler in root_logger.handlers:
            if isinstance(handler, handler_cls):
                handler.setLevel(numeric_level)
                break


# Global logger instance
_logger_instance: Optional[AnimePulseLogger] = None


def setup_logging(log_file: str = LOG_FILENAME) -> AnimePulseLogger:
    """
    Set up the global logging configuration.

    Args:
        log_file: Path to the log file

    Returns:
        The configured AnimePulseLogger instance
    """
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = AnimePulseLogger(log_file)
    return _logger_instance


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Modules call this as:
        from anime_pulse.anime_pulse.logging import get_logger
        logger = get_logger(__name__)

    Handlers are only attached by setup_logging (the CLI does this), so
    library use never writes a log file behind the caller's back.
    """
    return logging.getLogger(name)


def set_log_level(level: Union[str, int], handler_type: str = "both") -> None:
    """
    Set the logging level for console, file, or both handlers.

    Args:
        level: Logging level (e.g., 'DEBUG', 'INFO', 'WARNING', 'ERROR')
        handler_type: 'console', 'file', or 'both'
    """
    instance = setup_logging()

    if handler_type in ("console", "both"):
        instance.set_console_level(level)
    if handler_type in ("file", "both"):
        instance.set_file_level(level)


@contextmanager
def temporary_log_level(level: Union[str, int], handler_type: str = "console"):
    """
    Temporarily change the log level.

    Usage:
        with temporary_log_level("DEBUG"):
            # Debug logging enabled here
            ...
        # Original log level restored
    """
    setup_logging()

    handler_cls = RichHandler if handler_type == "console" else logging.FileHandler
    root_logger = logging.getLogger()
    target = next((h for h in root_logger.handlers if isinstance(h, handler_cls)), None)
    previous_level = target.level if target is not None else None

    if target is not None:
        target.setLevel(level)
    try:
        yield
    finally:
        if target is not None and previous_level is not None:
            target.setLevel(previous_level)


def mask_url(url: str) -> str:
    """Replace sensitive query parameter values in a URL with asterisks."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    params = []
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if any(m in key.lower() for m in SENSITIVE_PARAM_KEYS):
            value = "********"
        params.append((key, value))
    return urlunsplit(parts._replace(query=urlencode(params)))


def log_api_call(url: str, method: str = "GET", source: Optional[str] = None) -> None:
    """
    Log an outbound API call with sensitive data masking.
    Logs at DEBUG level.
    """
    logger = get_logger("anime_pulse.api")

    # Quick check to avoid processing if not debug
    if not logger.isEnabledFor(logging.DEBUG):
        return

    logger.debug(f"API CALL: {method} {mask_url(url)} | Source: {source or 'n/a'}")


__all__ = [
    "console",
    "AnimePulseError",
    "ConfigError",
    "APIError",
    "TransportError",
    "ProtocolError",
    "ShapeError",
    "AnimePulseLogger",
    "setup_logging",
    "get_logger",
    "set_log_level",
    "temporary_log_level",
    "mask_url",
    "log_api_call",
]
