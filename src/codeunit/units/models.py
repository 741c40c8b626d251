"""Code unit value objects.

A code unit is one resolved construct (class, interface, trait, their
methods, a free function or a whole file) together with the file that
declares it and the 1-based lines it occupies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class UnitKind(str, Enum):
    """Closed set of code unit kinds."""

    CLASS = "class"
    CLASS_METHOD = "class_method"
    INTERFACE = "interface"
    INTERFACE_METHOD = "interface_method"
    TRAIT = "trait"
    TRAIT_METHOD = "trait_method"
    FUNCTION = "function"
    FILE = "file"

    @property
    def is_method(self) -> bool:
        return self in (UnitKind.CLASS_METHOD, UnitKind.INTERFACE_METHOD, UnitKind.TRAIT_METHOD)


@dataclass(frozen=True, slots=True)
class CodeUnit:
    """An immutable, kind-tagged code unit.

    Method units also carry the owning type and the member name; their
    ``name`` is ``"Owner::member"``. For file units ``name`` and
    ``source_file`` are both the absolute path.

    Instances are produced by ``UnitFactory``; the constructor only checks
    the structural invariants.
    """

    kind: UnitKind
    name: str
    source_file: str
    source_lines: tuple[int, ...]
    owner: str | None = None
    member: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Code unit name must not be empty")
        if not self.source_file:
            raise ValueError(f"Code unit {self.name} has no source file")
        if not self.source_lines:
            raise ValueError(f"Code unit {self.name} has no source lines")
        if self.source_lines[0] < 1 or any(
            a >= b for a, b in zip(self.source_lines, self.source_lines[1:], strict=False)
        ):
            raise ValueError(f"Source lines of {self.name} must be positive and increasing")
        if self.kind.is_method != (self.owner is not None and self.member is not None):
            raise ValueError(f"Only method units carry owner and member: {self.name}")

    def is_class(self) -> bool:
        return self.kind is UnitKind.CLASS

    def is_class_method(self) -> bool:
        return self.kind is UnitKind.CLASS_METHOD

    def is_interface(self) -> bool:
        return self.kind is UnitKind.INTERFACE

    def is_interface_method(self) -> bool:
        return self.kind is UnitKind.INTERFACE_METHOD

    def is_trait(self) -> bool:
        return self.kind is UnitKind.TRAIT

    def is_trait_method(self) -> bool:
        return self.kind is UnitKind.TRAIT_METHOD

    def is_function(self) -> bool:
        return self.kind is UnitKind.FUNCTION

    def is_file(self) -> bool:
        return self.kind is UnitKind.FILE

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        result: dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "source_file": self.source_file,
            "start_line": self.source_lines[0],
            "end_line": self.source_lines[-1],
        }
        if self.kind.is_method:
            result["owner"] = self.owner
            result["member"] = self.member
        return result
