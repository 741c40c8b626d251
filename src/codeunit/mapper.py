"""Selector resolution and line-set reduction.

Selectors, in order of precedence:

- ``file:/abs/path``            the whole file
- ``Owner::member``             a method of a class, interface or trait
- ``::function``                a free function
- ``Class::<public>`` etc.      every method of a class with a visibility
- ``Class<extended>``           a class, its trait closure and its ancestors
- ``Name``                      a class (plus its trait closure), an
                                interface, a trait or a function

The six visibility tokens and the methods they select:

    <public>      public            <!public>     protected, private
    <protected>   protected         <!protected>  public, private
    <private>     private           <!private>    public, protected
"""

from __future__ import annotations

from codeunit.config.models import ResolverConfig
from codeunit.core.errors import InvalidCodeUnitError
from codeunit.core.logging import get_logger
from codeunit.symbols.models import Symbol, SymbolKind, SymbolTable, Visibility
from codeunit.units.collection import CodeUnitCollection
from codeunit.units.factory import UnitFactory, guarded_lookup
from codeunit.units.models import CodeUnit

log = get_logger(__name__)

FILE_PREFIX = "file:"
MEMBER_SEPARATOR = "::"
EXTENDED_SUFFIX = "<extended>"

VISIBILITY_SELECTORS: dict[str, Visibility] = {
    "<public>": Visibility.PUBLIC,
    "<!public>": Visibility.PROTECTED | Visibility.PRIVATE,
    "<protected>": Visibility.PROTECTED,
    "<!protected>": Visibility.PUBLIC | Visibility.PRIVATE,
    "<private>": Visibility.PRIVATE,
    "<!private>": Visibility.PUBLIC | Visibility.PROTECTED,
}


class Mapper:
    """Resolves selector strings into code units.

    The mapper keeps no state between calls; it only holds the symbol table
    it queries and the recursion limit for trait and parent expansion.
    """

    def __init__(self, symbols: SymbolTable, config: ResolverConfig | None = None) -> None:
        self._symbols = symbols
        self._units = UnitFactory(symbols)
        self._max_depth = (config or ResolverConfig()).max_expansion_depth

    def resolve(self, selector: str) -> CodeUnitCollection:
        """Resolve ``selector`` into one or more code units.

        Raises:
            InvalidCodeUnitError: Nothing valid matches the selector.
            ReflectionError: The symbol table failed while answering.
        """
        try:
            if selector.startswith(FILE_PREFIX):
                branch = "file"
                units = [UnitFactory.for_file(selector[len(FILE_PREFIX) :])]
            elif MEMBER_SEPARATOR in selector:
                branch = "member"
                units = self._resolve_member(selector)
            elif selector.endswith(EXTENDED_SUFFIX):
                branch = "extended"
                units = self._resolve_extended(selector)
            else:
                branch = "name"
                units = self._resolve_name(selector)
        except InvalidCodeUnitError as e:
            if e.details.get("selector") == selector:
                raise
            raise e.with_details(selector=selector) from e

        log.debug("selector_resolved", selector=selector, branch=branch, units=len(units))
        return CodeUnitCollection.from_iterable(units)

    @staticmethod
    def reduce_to_line_sets(units: CodeUnitCollection) -> dict[str, list[int]]:
        """Map each source file to the sorted, distinct lines its units occupy.

        The result depends only on the multiset of units, not on their order.
        """
        buckets: dict[str, set[int]] = {}
        for unit in units:
            buckets.setdefault(unit.source_file, set()).update(unit.source_lines)
        return {file: sorted(lines) for file, lines in sorted(buckets.items())}

    # -- selector branches ----------------------------------------------------

    def _resolve_member(self, selector: str) -> list[CodeUnit]:
        owner, member = selector.split(MEMBER_SEPARATOR, 1)

        if not owner:
            function = self._lookup_function(member)
            if function is not None and function.user_defined:
                return [self._units.for_function(member)]
            raise InvalidCodeUnitError.invalid_selector(selector)

        owner_symbol = self._lookup_type(owner)
        kind = owner_symbol.kind if owner_symbol else None

        if kind is SymbolKind.CLASS:
            mask = VISIBILITY_SELECTORS.get(member)
            if mask is not None:
                return self._methods_of_class(owner, mask)
            if guarded_lookup(self._symbols.lookup_method, owner, member) is not None:
                return [self._units.for_class_method(owner, member)]
        elif kind is SymbolKind.INTERFACE:
            return [self._units.for_interface_method(owner, member)]
        elif kind is SymbolKind.TRAIT:
            return [self._units.for_trait_method(owner, member)]

        raise InvalidCodeUnitError.invalid_selector(selector)

    def _resolve_name(self, name: str) -> list[CodeUnit]:
        symbol = self._lookup_type(name)
        if symbol is not None:
            if symbol.kind is SymbolKind.CLASS:
                return [self._units.for_class(name), *self._trait_closure(name)]
            if symbol.kind is SymbolKind.INTERFACE:
                return [self._units.for_interface(name)]
            if symbol.kind is SymbolKind.TRAIT:
                # A trait selected by name is just that trait; no closure.
                return [self._units.for_trait(name)]

        if self._lookup_function(name) is not None:
            return [self._units.for_function(name)]

        raise InvalidCodeUnitError.invalid_selector(name)

    def _resolve_extended(self, selector: str) -> list[CodeUnit]:
        name = selector[: -len(EXTENDED_SUFFIX)]
        symbol = self._lookup_type(name) if name else None
        if symbol is None or symbol.kind is not SymbolKind.CLASS:
            raise InvalidCodeUnitError.invalid_selector(selector)

        units = [self._units.for_class(name), *self._trait_closure(name)]

        current = name
        depth = 0
        while True:
            parent = guarded_lookup(self._symbols.parent_of, current)
            if parent is None:
                return units
            if not _is_user_defined(self._lookup_type(parent), SymbolKind.CLASS):
                log.debug("ancestor_walk_stopped", selector=selector, ancestor=parent)
                return units
            depth += 1
            if depth > self._max_depth:
                raise InvalidCodeUnitError.expansion_too_deep(name, self._max_depth)
            units.append(self._units.for_class(parent))
            units.extend(self._trait_closure(parent))
            current = parent

    # -- expansion helpers ----------------------------------------------------

    def _methods_of_class(self, owner: str, mask: Visibility) -> list[CodeUnit]:
        methods = guarded_lookup(self._symbols.methods_of, owner)
        return [
            self._units.for_class_method(owner, method.name)
            for method in methods
            if method.user_defined and method.visibility & mask
        ]

    def _trait_closure(self, name: str, depth: int = 1) -> list[CodeUnit]:
        """Traits used by ``name``, depth-first, each followed by its own traits."""
        if depth > self._max_depth:
            raise InvalidCodeUnitError.expansion_too_deep(name, self._max_depth)

        units: list[CodeUnit] = []
        for trait in guarded_lookup(self._symbols.traits_of, name):
            if not _is_user_defined(self._lookup_type(trait), SymbolKind.TRAIT):
                log.debug("trait_skipped", owner=name, trait=trait)
                continue
            units.append(self._units.for_trait(trait))
            units.extend(self._trait_closure(trait, depth + 1))
        return units

    def _lookup_type(self, name: str) -> Symbol | None:
        return guarded_lookup(self._symbols.lookup_type, name)

    def _lookup_function(self, name: str) -> Symbol | None:
        return guarded_lookup(self._symbols.lookup_function, name)


def _is_user_defined(symbol: Symbol | None, kind: SymbolKind) -> bool:
    return symbol is not None and symbol.kind is kind and symbol.user_defined
