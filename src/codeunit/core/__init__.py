"""Core module exports."""

from codeunit.core.errors import (
    CodeUnitError,
    ConfigError,
    ErrorCode,
    InvalidCodeUnitError,
    ReflectionError,
)
from codeunit.core.logging import configure_logging, get_log_file_path, get_logger

__all__ = [
    # Errors
    "CodeUnitError",
    "ConfigError",
    "ErrorCode",
    "InvalidCodeUnitError",
    "ReflectionError",
    # Logging
    "configure_logging",
    "get_log_file_path",
    "get_logger",
]
