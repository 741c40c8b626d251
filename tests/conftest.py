"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
provides the shared fixture symbol tables.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local codeunit package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from codeunit.symbols.memory import InMemorySymbolTable, TypeDeclaration  # noqa: E402
from codeunit.symbols.models import Symbol, SymbolKind, Visibility  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SRC = "/project/src"


def _type(
    name: str,
    kind: SymbolKind,
    file: str | None,
    start: int,
    end: int,
    *,
    user_defined: bool = True,
    parent: str | None = None,
    traits: tuple[str, ...] = (),
    methods: tuple[Symbol, ...] = (),
) -> TypeDeclaration:
    return TypeDeclaration(
        symbol=Symbol(name, kind, file, start, end, user_defined=user_defined),
        parent=parent,
        traits=traits,
        methods=methods,
    )


def _method(
    name: str,
    file: str,
    start: int,
    end: int,
    visibility: Visibility = Visibility.PUBLIC,
) -> Symbol:
    return Symbol(name, SymbolKind.METHOD, file, start, end, visibility=visibility)


def make_symbol_table() -> InMemorySymbolTable:
    """In-memory declarations shared by the unit, collection and mapper tests.

    Hierarchy:
        FixtureClassWithTrait uses FixtureTrait, which uses FixtureNestedTrait.
        FixtureChildClassWithTrait extends FixtureParentClassWithTrait (which
        extends the built-in Exception) and uses FixtureAnotherTrait plus a
        built-in trait.
    """
    class_file = f"{SRC}/fixture_class.py"
    interface_file = f"{SRC}/fixture_interface.py"
    trait_file = f"{SRC}/fixture_trait.py"

    types = [
        _type(
            "FixtureClass",
            SymbolKind.CLASS,
            class_file,
            12,
            28,
            methods=(
                _method("public_method", class_file, 14, 17),
                _method("protected_method", class_file, 19, 22, Visibility.PROTECTED),
                _method("private_method", class_file, 24, 27, Visibility.PRIVATE),
            ),
        ),
        _type(
            "FixtureInterface",
            SymbolKind.INTERFACE,
            interface_file,
            12,
            15,
            methods=(_method("method", interface_file, 14, 14),),
        ),
        _type(
            "FixtureTrait",
            SymbolKind.TRAIT,
            trait_file,
            5,
            10,
            traits=("FixtureNestedTrait",),
            methods=(_method("method", trait_file, 7, 9),),
        ),
        _type("FixtureNestedTrait", SymbolKind.TRAIT, f"{SRC}/fixture_nested_trait.py", 3, 6),
        _type("FixtureAnotherTrait", SymbolKind.TRAIT, f"{SRC}/fixture_another_trait.py", 3, 8),
        _type("BuiltinTrait", SymbolKind.TRAIT, None, 0, 0, user_defined=False),
        _type(
            "FixtureClassWithTrait",
            SymbolKind.CLASS,
            f"{SRC}/fixture_class_with_trait.py",
            3,
            9,
            traits=("FixtureTrait",),
        ),
        _type(
            "FixtureParentClassWithTrait",
            SymbolKind.CLASS,
            f"{SRC}/fixture_parent_class_with_trait.py",
            3,
            12,
            parent="Exception",
            traits=("FixtureTrait",),
        ),
        _type(
            "FixtureChildClassWithTrait",
            SymbolKind.CLASS,
            f"{SRC}/fixture_child_class_with_trait.py",
            3,
            10,
            parent="FixtureParentClassWithTrait",
            traits=("FixtureAnotherTrait", "BuiltinTrait"),
        ),
        _type(
            "FixtureException",
            SymbolKind.CLASS,
            f"{SRC}/fixture_exception.py",
            3,
            5,
            parent="Exception",
        ),
        _type("Exception", SymbolKind.CLASS, None, 0, 0, user_defined=False),
        _type("Countable", SymbolKind.INTERFACE, None, 0, 0, user_defined=False),
    ]
    functions = [
        Symbol("f", SymbolKind.FUNCTION, f"{SRC}/functions.py", 3, 6),
        Symbol("app.helpers.slugify", SymbolKind.FUNCTION, f"{SRC}/app/helpers.py", 10, 14),
        Symbol("strlen", SymbolKind.FUNCTION, None, 0, 0, user_defined=False),
    ]
    return InMemorySymbolTable(types=types, functions=functions)


@pytest.fixture
def symbols() -> InMemorySymbolTable:
    return make_symbol_table()


@pytest.fixture
def fixture_modules(monkeypatch: pytest.MonkeyPatch) -> Path:
    """Make the importable fixture package available to the runtime symbol table."""
    monkeypatch.syspath_prepend(str(FIXTURES_DIR))
    return FIXTURES_DIR
