"""The running Python interpreter as a symbol table.

Python has no native notion of interfaces or traits, so the mapping is:

- function:  a module-level function (``pkg.module.func``)
- interface: a class declared as a ``typing.Protocol``
- trait:     a class whose name ends with a configured suffix (``Mixin``)
- class:     any other class

Visibility follows naming conventions: ``__name`` is private, ``_name`` is
protected, everything else (dunders included) is public. Anything that
lives in ``builtins`` or the standard library, or has no Python source
file, is not user-defined.
"""

from __future__ import annotations

import builtins
import importlib
import inspect
import sys
from types import ModuleType
from typing import Any, Generic

from codeunit.config.models import RuntimeConfig
from codeunit.core.logging import get_logger
from codeunit.symbols.models import Symbol, SymbolKind, SymbolLookupError, Visibility

log = get_logger(__name__)

IMPORT_FAILED = 1
SOURCE_UNAVAILABLE = 2


class RuntimeSymbolTable:
    """Symbol table that introspects importable Python objects."""

    def __init__(self, config: RuntimeConfig | None = None) -> None:
        config = config or RuntimeConfig()
        self._trait_suffixes = tuple(config.trait_suffixes)
        self._search_modules = tuple(config.search_modules)
        for path in reversed(config.extra_paths):
            if path not in sys.path:
                sys.path.insert(0, path)

    # -- SymbolTable protocol -------------------------------------------------

    def lookup_type(self, name: str) -> Symbol | None:
        obj = self._resolve(name)
        if not inspect.isclass(obj):
            return None
        return self._symbol(name, obj, self._type_kind(obj))

    def lookup_function(self, name: str) -> Symbol | None:
        obj = self._resolve(name)
        if inspect.isclass(obj) or not (inspect.isfunction(obj) or inspect.isbuiltin(obj)):
            return None
        return self._symbol(name, obj, SymbolKind.FUNCTION)

    def lookup_method(self, owner: str, member: str) -> Symbol | None:
        for method in self.methods_of(owner):
            if method.name == member:
                return method
        return None

    def methods_of(self, owner: str) -> list[Symbol]:
        cls = self._resolve(owner)
        if not inspect.isclass(cls):
            return []

        methods: list[Symbol] = []
        seen: set[str] = set()
        for klass in cls.__mro__:
            if klass is object:
                continue
            for attr_name, attr in vars(klass).items():
                func = _unwrap_method(attr)
                if func is None:
                    continue
                member = _demangle(attr_name, klass)
                if member in seen:
                    continue
                seen.add(member)
                methods.append(
                    self._symbol(member, func, SymbolKind.METHOD, _visibility(member))
                )
        return methods

    def traits_of(self, name: str) -> list[str]:
        cls = self._resolve(name)
        if not inspect.isclass(cls):
            return []
        return [_qualified_name(base) for base in cls.__bases__ if self._is_trait(base)]

    def parent_of(self, name: str) -> str | None:
        cls = self._resolve(name)
        if not inspect.isclass(cls):
            return None
        bases = [
            base
            for base in cls.__bases__
            if base not in (object, Generic) and not self._is_trait(base) and not _is_protocol(base)
        ]
        # A user-defined base wins over a builtin one listed before it.
        for base in bases:
            if _is_user_defined(base):
                return _qualified_name(base)
        return _qualified_name(bases[0]) if bases else None

    # -- helpers --------------------------------------------------------------

    def _type_kind(self, cls: type) -> SymbolKind:
        if _is_protocol(cls):
            return SymbolKind.INTERFACE
        if self._is_trait(cls):
            return SymbolKind.TRAIT
        return SymbolKind.CLASS

    def _is_trait(self, cls: type) -> bool:
        return not _is_protocol(cls) and cls.__name__.endswith(self._trait_suffixes)

    def _symbol(
        self,
        name: str,
        obj: Any,
        kind: SymbolKind,
        visibility: Visibility = Visibility.PUBLIC,
    ) -> Symbol:
        if not _is_user_defined(obj):
            return Symbol(
                name=name,
                kind=kind,
                file=None,
                start_line=0,
                end_line=0,
                user_defined=False,
                visibility=visibility,
            )

        target = inspect.unwrap(obj) if callable(obj) and not inspect.isclass(obj) else obj
        try:
            file = inspect.getsourcefile(target)
            lines, start = inspect.getsourcelines(target)
        except (OSError, TypeError) as e:
            raise SymbolLookupError(
                f"Cannot read source of {name}: {e}", code=SOURCE_UNAVAILABLE
            ) from e
        return Symbol(
            name=name,
            kind=kind,
            file=file,
            start_line=max(start, 1),
            end_line=max(start, 1) + len(lines) - 1,
            visibility=visibility,
        )

    def _resolve(self, name: str) -> Any:
        """Return the object called ``name`` or None. Malformed names are absent."""
        parts = name.split(".")
        if not all(part.isidentifier() for part in parts):
            return None

        if len(parts) == 1:
            for module_name in self._search_modules:
                module = self._import(module_name)
                if module is not None and hasattr(module, name):
                    return getattr(module, name)
            return getattr(builtins, name, None)

        for split in range(len(parts) - 1, 0, -1):
            module = self._import(".".join(parts[:split]))
            if module is None:
                continue
            obj: Any = module
            for attr in parts[split:]:
                obj = getattr(obj, attr, None)
                if obj is None:
                    return None
            return obj
        return None

    @staticmethod
    def _import(module_name: str) -> ModuleType | None:
        module = sys.modules.get(module_name)
        if module is not None:
            return module
        try:
            return importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            missing = e.name or ""
            if module_name == missing or module_name.startswith(missing + "."):
                return None
            raise SymbolLookupError(
                f"Importing {module_name} failed: {e}", code=IMPORT_FAILED
            ) from e
        except Exception as e:
            log.debug("import_failed", module=module_name, error=str(e))
            raise SymbolLookupError(
                f"Importing {module_name} failed: {e}", code=IMPORT_FAILED
            ) from e


def _is_protocol(cls: type) -> bool:
    return bool(getattr(cls, "_is_protocol", False))


def _is_user_defined(obj: Any) -> bool:
    module = getattr(obj, "__module__", None)
    if not module or module == "builtins":
        return False
    if module.split(".")[0] in sys.stdlib_module_names:
        return False
    target = inspect.unwrap(obj) if callable(obj) and not inspect.isclass(obj) else obj
    try:
        return inspect.getsourcefile(target) is not None
    except TypeError:
        return False


def _unwrap_method(attr: Any) -> Any:
    if isinstance(attr, (staticmethod, classmethod)):
        attr = attr.__func__
    return attr if inspect.isfunction(attr) else None


def _demangle(attr_name: str, klass: type) -> str:
    prefix = f"_{klass.__name__.lstrip('_')}__"
    if attr_name.startswith(prefix) and not attr_name.endswith("__"):
        return "__" + attr_name[len(prefix) :]
    return attr_name


def _visibility(member: str) -> Visibility:
    if member.startswith("__") and member.endswith("__"):
        return Visibility.PUBLIC
    if member.startswith("__"):
        return Visibility.PRIVATE
    if member.startswith("_"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"
