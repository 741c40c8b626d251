"""Symbol table vocabulary.

A symbol table answers questions about the declarations known to a host
runtime: which named classes, interfaces, traits and functions exist,
whether they are user-defined, where they are declared, which methods they
declare and with what visibility, which traits they use and which class
they extend. The resolver only ever talks to this protocol, so it can run
against a live runtime or an in-memory fake alike.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Protocol


class SymbolKind(str, Enum):
    """Kinds of declarations a symbol table can report."""

    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"
    FUNCTION = "function"
    METHOD = "method"

    @classmethod
    def type_kinds(cls) -> frozenset[SymbolKind]:
        """Kinds that may own methods."""
        return frozenset({cls.CLASS, cls.INTERFACE, cls.TRAIT})


class Visibility(IntFlag):
    """Method visibility. Combine members with ``|`` to build filter masks."""

    PUBLIC = 1
    PROTECTED = 2
    PRIVATE = 4

    @classmethod
    def from_name(cls, name: str) -> Visibility:
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown visibility: {name}") from None


@dataclass(frozen=True, slots=True)
class Symbol:
    """One declaration reported by a symbol table."""

    name: str
    kind: SymbolKind
    file: str | None
    start_line: int
    end_line: int
    user_defined: bool = True
    visibility: Visibility = Visibility.PUBLIC  # meaningful for methods only

    @property
    def lines(self) -> range:
        """Inclusive line span of the declaration."""
        return range(self.start_line, self.end_line + 1)


class SymbolLookupError(Exception):
    """The lookup mechanism itself failed (malformed name, broken import, ...)."""

    def __init__(self, message: str, code: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class SymbolTable(Protocol):
    """Narrow capability interface consumed by the resolver.

    Absent names are reported with ``None`` or empty results; only failures
    of the lookup mechanism itself raise ``SymbolLookupError``.
    """

    def lookup_type(self, name: str) -> Symbol | None:
        """Return the class, interface or trait declared as ``name``."""
        ...

    def lookup_function(self, name: str) -> Symbol | None:
        """Return the free function declared as ``name``."""
        ...

    def lookup_method(self, owner: str, member: str) -> Symbol | None:
        """Return method ``member`` of type ``owner``, inherited ones included."""
        ...

    def methods_of(self, owner: str) -> list[Symbol]:
        """Return the methods of ``owner`` in declaration order."""
        ...

    def traits_of(self, name: str) -> list[str]:
        """Return the traits used directly by class or trait ``name``."""
        ...

    def parent_of(self, name: str) -> str | None:
        """Return the parent class of ``name``, if any."""
        ...
