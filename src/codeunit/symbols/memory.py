"""In-memory symbol table.

Holds a fixed snapshot of declarations. Used for symbol manifests and as
a fake in tests.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from codeunit.symbols.models import Symbol, SymbolKind


@dataclass(frozen=True, slots=True)
class TypeDeclaration:
    """A class, interface or trait together with its relations."""

    symbol: Symbol
    parent: str | None = None
    traits: tuple[str, ...] = ()
    methods: tuple[Symbol, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.symbol.kind not in SymbolKind.type_kinds():
            raise ValueError(f"{self.symbol.name} is a {self.symbol.kind.value}, not a type")


class InMemorySymbolTable:
    """Symbol table backed by plain dictionaries."""

    def __init__(
        self,
        types: Iterable[TypeDeclaration] = (),
        functions: Iterable[Symbol] = (),
    ) -> None:
        self._types = {decl.symbol.name: decl for decl in types}
        self._functions = {fn.name: fn for fn in functions}

    def __len__(self) -> int:
        return len(self._types) + len(self._functions)

    def lookup_type(self, name: str) -> Symbol | None:
        decl = self._types.get(name)
        return decl.symbol if decl else None

    def lookup_function(self, name: str) -> Symbol | None:
        return self._functions.get(name)

    def lookup_method(self, owner: str, member: str) -> Symbol | None:
        for method in self.methods_of(owner):
            if method.name == member:
                return method
        return None

    def methods_of(self, owner: str) -> list[Symbol]:
        """Own methods first, then those of used traits, then inherited ones."""
        result: list[Symbol] = []
        seen_names: set[str] = set()
        self._collect_methods(owner, result, seen_names, visited=set())
        return result

    def traits_of(self, name: str) -> list[str]:
        decl = self._types.get(name)
        return list(decl.traits) if decl else []

    def parent_of(self, name: str) -> str | None:
        decl = self._types.get(name)
        return decl.parent if decl else None

    def _collect_methods(
        self,
        name: str,
        result: list[Symbol],
        seen_names: set[str],
        visited: set[str],
    ) -> None:
        decl = self._types.get(name)
        if decl is None or name in visited:
            return
        visited.add(name)

        for method in decl.methods:
            if method.name not in seen_names:
                seen_names.add(method.name)
                result.append(method)
        for trait in decl.traits:
            self._collect_methods(trait, result, seen_names, visited)
        if decl.parent:
            self._collect_methods(decl.parent, result, seen_names, visited)
