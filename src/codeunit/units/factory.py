"""Construction of code units from symbol table lookups.

Every ``for_*`` constructor checks that the named entity exists, has
exactly the requested kind and is user-defined before it builds a unit.
Kind confusion is always an error, never a fallback.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from codeunit.core.errors import InvalidCodeUnitError, ReflectionError
from codeunit.symbols.models import Symbol, SymbolKind, SymbolLookupError, SymbolTable
from codeunit.units.models import CodeUnit, UnitKind

T = TypeVar("T")


def guarded_lookup(query: Callable[..., T], *args: str) -> T:
    """Run a symbol table query, re-raising mechanism failures as ReflectionError."""
    try:
        return query(*args)
    except SymbolLookupError as e:
        raise ReflectionError.wrap(e, name="::".join(args)) from e


def count_lines(data: bytes) -> int:
    """Count lines the way a line-oriented reader does; a final partial line counts."""
    if not data:
        return 0
    return data.count(b"\n") + (0 if data.endswith(b"\n") else 1)


class UnitFactory:
    """Builds validated code units against a symbol table."""

    def __init__(self, symbols: SymbolTable) -> None:
        self._symbols = symbols

    def for_class(self, name: str) -> CodeUnit:
        symbol = self._ensure_user_defined_type(name, SymbolKind.CLASS)
        return _unit(UnitKind.CLASS, name, symbol)

    def for_class_method(self, owner: str, member: str) -> CodeUnit:
        self._ensure_user_defined_type(owner, SymbolKind.CLASS)
        return self._method_unit(UnitKind.CLASS_METHOD, owner, member)

    def for_interface(self, name: str) -> CodeUnit:
        symbol = self._ensure_user_defined_type(name, SymbolKind.INTERFACE)
        return _unit(UnitKind.INTERFACE, name, symbol)

    def for_interface_method(self, owner: str, member: str) -> CodeUnit:
        self._ensure_user_defined_type(owner, SymbolKind.INTERFACE)
        return self._method_unit(UnitKind.INTERFACE_METHOD, owner, member)

    def for_trait(self, name: str) -> CodeUnit:
        symbol = self._ensure_user_defined_type(name, SymbolKind.TRAIT)
        return _unit(UnitKind.TRAIT, name, symbol)

    def for_trait_method(self, owner: str, member: str) -> CodeUnit:
        self._ensure_user_defined_type(owner, SymbolKind.TRAIT)
        return self._method_unit(UnitKind.TRAIT_METHOD, owner, member)

    def for_function(self, name: str) -> CodeUnit:
        symbol = guarded_lookup(self._symbols.lookup_function, name)
        if symbol is None:
            raise InvalidCodeUnitError.not_found(name, "function")
        if not symbol.user_defined:
            raise InvalidCodeUnitError.not_user_defined(name, "function")
        return _unit(UnitKind.FUNCTION, name, symbol)

    @staticmethod
    def for_file(path: str | Path) -> CodeUnit:
        """Build a file unit spanning every line of an existing, readable file."""
        file = Path(path)
        if not file.is_absolute():
            raise InvalidCodeUnitError.file_not_absolute(str(path))
        if not (file.is_file() and os.access(file, os.R_OK)):
            raise InvalidCodeUnitError.file_unreadable(str(path))
        try:
            data = file.read_bytes()
        except OSError as e:
            raise InvalidCodeUnitError.file_unreadable(str(path)) from e

        line_count = count_lines(data)
        if line_count == 0:
            raise InvalidCodeUnitError.file_empty(str(path))
        return CodeUnit(
            kind=UnitKind.FILE,
            name=str(file),
            source_file=str(file),
            source_lines=tuple(range(1, line_count + 1)),
        )

    def _ensure_user_defined_type(self, name: str, expected: SymbolKind) -> Symbol:
        symbol = guarded_lookup(self._symbols.lookup_type, name)
        if symbol is None:
            raise InvalidCodeUnitError.not_found(name, expected.value)
        if symbol.kind is not expected:
            raise InvalidCodeUnitError.wrong_kind(name, symbol.kind.value, expected.value)
        if not symbol.user_defined:
            raise InvalidCodeUnitError.not_user_defined(name, expected.value)
        return symbol

    def _method_unit(self, kind: UnitKind, owner: str, member: str) -> CodeUnit:
        symbol = guarded_lookup(self._symbols.lookup_method, owner, member)
        if symbol is None:
            raise InvalidCodeUnitError.unknown_method(owner, member)
        if not symbol.user_defined:
            raise InvalidCodeUnitError.not_user_defined(f"{owner}::{member}", "method")
        return _unit(kind, f"{owner}::{member}", symbol, owner=owner, member=member)


def _unit(
    kind: UnitKind,
    name: str,
    symbol: Symbol,
    owner: str | None = None,
    member: str | None = None,
) -> CodeUnit:
    if not symbol.file:
        raise InvalidCodeUnitError.not_user_defined(name, kind.value)
    return CodeUnit(
        kind=kind,
        name=name,
        source_file=symbol.file,
        source_lines=tuple(symbol.lines),
        owner=owner,
        member=member,
    )
