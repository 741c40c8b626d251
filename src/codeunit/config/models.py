"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CODEUNIT__SECTION__KEY)
3. Repo YAML (.codeunit/config.yaml)
4. Global YAML (~/.config/codeunit/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    CODEUNIT__<SECTION>__<KEY>=<VALUE>

Examples:
    CODEUNIT__LOGGING__LEVEL=DEBUG
    CODEUNIT__RESOLVER__MAX_EXPANSION_DEPTH=64
    CODEUNIT__RUNTIME__TRAIT_SUFFIXES='["Mixin", "Trait"]'
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CODEUNIT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG traces every resolution branch.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ResolverConfig(BaseModel):
    """Selector resolution configuration.

    Env vars:
        CODEUNIT__RESOLVER__MAX_EXPANSION_DEPTH: Recursion guard for trait and parent walks
    """

    max_expansion_depth: int = Field(
        default=32,
        description="Maximum nesting followed when expanding trait closures and "
        "parent-class chains. Deeper hierarchies fail instead of recursing forever.",
    )

    @field_validator("max_expansion_depth")
    @classmethod
    def validate_depth(cls, v: int) -> int:
        if not (1 <= v <= 1024):
            raise ValueError(f"max_expansion_depth must be 1-1024, got {v}")
        return v


class RuntimeConfig(BaseModel):
    """Python runtime symbol table configuration.

    Env vars:
        CODEUNIT__RUNTIME__TRAIT_SUFFIXES: JSON list of class-name suffixes marking traits
        CODEUNIT__RUNTIME__SEARCH_MODULES: JSON list of modules for unqualified names
    """

    trait_suffixes: list[str] = Field(
        default_factory=lambda: ["Mixin"],
        description="Classes whose name ends with one of these suffixes are traits.",
    )
    search_modules: list[str] = Field(
        default_factory=lambda: ["__main__"],
        description="Modules searched, in order, for names without a module prefix.",
    )
    extra_paths: list[str] = Field(
        default_factory=list,
        description="Directories prepended to sys.path before importing modules.",
    )

    @field_validator("trait_suffixes")
    @classmethod
    def validate_suffixes(cls, v: list[str]) -> list[str]:
        if any(not suffix for suffix in v):
            raise ValueError("trait_suffixes must not contain empty strings")
        return v


class CodeUnitConfig(BaseModel):
    """Root configuration model.

    Used for type hints. The actual settings class with env/yaml support
    is created dynamically in loader.py.
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
