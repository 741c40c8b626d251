"""codeunit error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Resolution (selectors, units, symbol lookups)
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Resolution (3xxx)
    INVALID_SELECTOR = 3001
    UNIT_NOT_FOUND = 3002
    UNIT_WRONG_KIND = 3003
    UNIT_NOT_USER_DEFINED = 3004
    UNKNOWN_METHOD = 3005
    FILE_UNREADABLE = 3006
    FILE_NOT_ABSOLUTE = 3007
    FILE_EMPTY = 3008
    EXPANSION_TOO_DEEP = 3009
    REFLECTION_FAILURE = 3100


@dataclass(frozen=True, slots=True)
class CodeUnitError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'INVALID_SELECTOR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def with_details(self, **extra: Any) -> "CodeUnitError":
        """Copy of this error with ``extra`` merged into its details."""
        return replace(self, details={**self.details, **extra})

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class InvalidCodeUnitError(CodeUnitError):
    """A selector or name does not denote a valid code unit.

    Raised for names that do not exist, exist with another kind, or belong
    to the host runtime rather than to user code. File units fail with this
    error too when the path is missing or unreadable.
    """

    @classmethod
    def invalid_selector(cls, selector: str) -> "InvalidCodeUnitError":
        return cls(
            code=ErrorCode.INVALID_SELECTOR,
            message=f'"{selector}" is not a valid code unit',
            details={"selector": selector},
        )

    @classmethod
    def not_found(cls, name: str, kind: str) -> "InvalidCodeUnitError":
        return cls(
            code=ErrorCode.UNIT_NOT_FOUND,
            message=f'{kind} "{name}" does not exist',
            details={"name": name, "kind": kind},
        )

    @classmethod
    def wrong_kind(cls, name: str, actual: str, expected: str) -> "InvalidCodeUnitError":
        return cls(
            code=ErrorCode.UNIT_WRONG_KIND,
            message=f'"{name}" is {_article(actual)} and not {_article(expected)}',
            details={"name": name, "actual": actual, "expected": expected},
        )

    @classmethod
    def not_user_defined(cls, name: str, kind: str) -> "InvalidCodeUnitError":
        return cls(
            code=ErrorCode.UNIT_NOT_USER_DEFINED,
            message=f'"{name}" is not a user-defined {kind}',
            details={"name": name, "kind": kind},
        )

    @classmethod
    def unknown_method(cls, owner: str, member: str) -> "InvalidCodeUnitError":
        return cls(
            code=ErrorCode.UNKNOWN_METHOD,
            message=f'"{owner}" does not declare a method "{member}"',
            details={"owner": owner, "member": member},
        )

    @classmethod
    def file_unreadable(cls, path: str) -> "InvalidCodeUnitError":
        return cls(
            code=ErrorCode.FILE_UNREADABLE,
            message=f'File "{path}" does not exist or is not readable',
            details={"path": path},
        )

    @classmethod
    def file_not_absolute(cls, path: str) -> "InvalidCodeUnitError":
        return cls(
            code=ErrorCode.FILE_NOT_ABSOLUTE,
            message=f'File "{path}" is not an absolute path',
            details={"path": path},
        )

    @classmethod
    def file_empty(cls, path: str) -> "InvalidCodeUnitError":
        return cls(
            code=ErrorCode.FILE_EMPTY,
            message=f'File "{path}" has no lines',
            details={"path": path},
        )

    @classmethod
    def expansion_too_deep(cls, name: str, limit: int) -> "InvalidCodeUnitError":
        return cls(
            code=ErrorCode.EXPANSION_TOO_DEEP,
            message=f'Expanding "{name}" exceeded the maximum depth of {limit}',
            details={"name": name, "limit": limit},
        )


class ReflectionError(CodeUnitError):
    """The symbol table itself failed while answering a lookup."""

    @classmethod
    def wrap(cls, exc: BaseException, name: str | None = None) -> "ReflectionError":
        original_code = getattr(exc, "code", 0)
        details: dict[str, Any] = {
            "original_type": type(exc).__name__,
            "original_code": original_code if isinstance(original_code, int) else 0,
        }
        if name is not None:
            details["name"] = name
        message = getattr(exc, "message", None) or str(exc)
        return cls(code=ErrorCode.REFLECTION_FAILURE, message=message, details=details)


class ConfigError(CodeUnitError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


def _article(noun: str) -> str:
    return f"{'an' if noun[:1] in ('a', 'e', 'i', 'o', 'u') else 'a'} {noun}"
