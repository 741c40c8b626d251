"""Config module exports."""

from codeunit.config.loader import load_config
from codeunit.config.models import (
    CodeUnitConfig,
    LoggingConfig,
    LogOutputConfig,
    ResolverConfig,
    RuntimeConfig,
)

__all__ = [
    "load_config",
    "CodeUnitConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ResolverConfig",
    "RuntimeConfig",
]
