"""Tests for selector resolution and line-set reduction."""

import itertools
from pathlib import Path

import pytest

from codeunit.config.models import ResolverConfig, RuntimeConfig
from codeunit.core.errors import ErrorCode, InvalidCodeUnitError, ReflectionError
from codeunit.mapper import VISIBILITY_SELECTORS, Mapper
from codeunit.symbols.memory import InMemorySymbolTable, TypeDeclaration
from codeunit.symbols.models import Symbol, SymbolKind, SymbolLookupError
from codeunit.symbols.runtime import RuntimeSymbolTable
from codeunit.units.collection import CodeUnitCollection
from codeunit.units.models import UnitKind

SRC = "/project/src"


@pytest.fixture
def mapper(symbols: InMemorySymbolTable) -> Mapper:
    return Mapper(symbols)


def _names(units: CodeUnitCollection) -> list[str]:
    return [unit.name for unit in units]


def _type(name: str, kind: SymbolKind = SymbolKind.CLASS, **relations: object) -> TypeDeclaration:
    return TypeDeclaration(
        symbol=Symbol(name, kind, f"{SRC}/{name.lower()}.py", 1, 3),
        **relations,  # type: ignore[arg-type]
    )


class TestPlainNames:
    """Selectors without ``::`` or ``<extended>``."""

    def test_given_class_when_resolved_then_class_unit_first(self, mapper: Mapper) -> None:
        # When
        units = mapper.resolve("FixtureClass")

        # Then
        assert units.count() == 1
        assert units[0].name == "FixtureClass"
        assert units[0].kind is UnitKind.CLASS

    def test_given_class_with_nested_traits_when_resolved_then_depth_first(
        self, mapper: Mapper
    ) -> None:
        """C uses T which uses U resolves to [C, T, U]."""
        units = mapper.resolve("FixtureClassWithTrait")

        assert _names(units) == ["FixtureClassWithTrait", "FixtureTrait", "FixtureNestedTrait"]
        assert [unit.kind for unit in units] == [UnitKind.CLASS, UnitKind.TRAIT, UnitKind.TRAIT]

    def test_sibling_traits_follow_nested_ones(self) -> None:
        table = InMemorySymbolTable(
            types=[
                _type("C", traits=("T1", "T2")),
                _type("T1", SymbolKind.TRAIT, traits=("U",)),
                _type("T2", SymbolKind.TRAIT),
                _type("U", SymbolKind.TRAIT),
            ]
        )

        assert _names(Mapper(table).resolve("C")) == ["C", "T1", "U", "T2"]

    def test_interface(self, mapper: Mapper) -> None:
        units = mapper.resolve("FixtureInterface")

        assert _names(units) == ["FixtureInterface"]
        assert units[0].is_interface()

    def test_trait_selected_directly_is_not_expanded(self, mapper: Mapper) -> None:
        units = mapper.resolve("FixtureTrait")

        assert _names(units) == ["FixtureTrait"]
        assert units[0].is_trait()

    def test_function(self, mapper: Mapper) -> None:
        units = mapper.resolve("app.helpers.slugify")

        assert units[0].is_function()
        assert units[0].source_lines == (10, 11, 12, 13, 14)

    def test_builtin_trait_skipped_in_closure(self, mapper: Mapper) -> None:
        units = mapper.resolve("FixtureChildClassWithTrait")

        assert _names(units) == ["FixtureChildClassWithTrait", "FixtureAnotherTrait"]

    def test_given_unknown_name_when_resolved_then_invalid_selector(self, mapper: Mapper) -> None:
        with pytest.raises(InvalidCodeUnitError) as exc_info:
            mapper.resolve("invalid")

        assert exc_info.value.code == ErrorCode.INVALID_SELECTOR
        assert exc_info.value.details == {"selector": "invalid"}

    @pytest.mark.parametrize("name", ["Exception", "Countable", "BuiltinTrait", "strlen"])
    def test_given_builtin_name_when_resolved_then_rejected(
        self, mapper: Mapper, name: str
    ) -> None:
        """Names that exist but are not user-defined never resolve."""
        with pytest.raises(InvalidCodeUnitError) as exc_info:
            mapper.resolve(name)

        assert exc_info.value.code == ErrorCode.UNIT_NOT_USER_DEFINED


class TestMemberSelectors:
    """Selectors of the form ``Owner::member``."""

    def test_class_method(self, mapper: Mapper) -> None:
        units = mapper.resolve("FixtureClass::public_method")

        assert _names(units) == ["FixtureClass::public_method"]
        assert units[0].is_class_method()
        assert units[0].source_lines == (14, 15, 16, 17)

    def test_interface_method(self, mapper: Mapper) -> None:
        units = mapper.resolve("FixtureInterface::method")

        assert units[0].is_interface_method()
        assert units[0].source_file == f"{SRC}/fixture_interface.py"

    def test_trait_method(self, mapper: Mapper) -> None:
        units = mapper.resolve("FixtureTrait::method")

        assert units[0].is_trait_method()
        assert units[0].source_lines == (7, 8, 9)

    def test_function_shorthand(self, mapper: Mapper) -> None:
        """``::name`` is a function, never a class method."""
        units = mapper.resolve("::f")

        assert units.count() == 1
        assert units[0].is_function()
        assert units[0].name == "f"

    @pytest.mark.parametrize(
        "selector",
        [
            "FixtureClass::doesNotExist",
            "Missing::method",
            "::strlen",
            "::Missing",
            "::FixtureClass",
            "FixtureClass::<everything>",
            "f::x",
        ],
    )
    def test_given_unresolvable_member_when_resolved_then_invalid_selector(
        self, mapper: Mapper, selector: str
    ) -> None:
        with pytest.raises(InvalidCodeUnitError) as exc_info:
            mapper.resolve(selector)

        assert exc_info.value.code == ErrorCode.INVALID_SELECTOR
        assert exc_info.value.details["selector"] == selector

    def test_unknown_interface_method(self, mapper: Mapper) -> None:
        with pytest.raises(InvalidCodeUnitError) as exc_info:
            mapper.resolve("FixtureInterface::missing")

        assert exc_info.value.code == ErrorCode.UNKNOWN_METHOD
        assert exc_info.value.details["selector"] == "FixtureInterface::missing"
        assert exc_info.value.details["member"] == "missing"

    def test_split_at_first_separator(self, mapper: Mapper) -> None:
        with pytest.raises(InvalidCodeUnitError) as exc_info:
            mapper.resolve("FixtureClass::public_method::extra")

        assert exc_info.value.details["selector"] == "FixtureClass::public_method::extra"


class TestVisibilitySelectors:
    """``Class::<token>`` expands to the methods matching the visibility mask."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("<public>", ["public_method"]),
            ("<!public>", ["protected_method", "private_method"]),
            ("<protected>", ["protected_method"]),
            ("<!protected>", ["public_method", "private_method"]),
            ("<private>", ["private_method"]),
            ("<!private>", ["public_method", "protected_method"]),
        ],
    )
    def test_given_token_when_resolved_then_matching_methods(
        self, mapper: Mapper, token: str, expected: list[str]
    ) -> None:
        # When
        units = mapper.resolve(f"FixtureClass::{token}")

        # Then
        assert [unit.member for unit in units] == expected
        assert all(unit.is_class_method() for unit in units)

    def test_positive_tokens_partition_all_methods(self, mapper: Mapper) -> None:
        all_methods = {"public_method", "protected_method", "private_method"}
        positive = [
            unit.member
            for token in ("<public>", "<protected>", "<private>")
            for unit in mapper.resolve(f"FixtureClass::{token}")
        ]

        assert sorted(positive) == sorted(all_methods)

    @pytest.mark.parametrize("visibility", ["public", "protected", "private"])
    def test_token_and_complement_cover_all_methods_once(
        self, mapper: Mapper, visibility: str
    ) -> None:
        selected = mapper.resolve(f"FixtureClass::<{visibility}>")
        complement = mapper.resolve(f"FixtureClass::<!{visibility}>")

        members = [unit.member for unit in selected.merge_with(complement)]

        assert sorted(members) == ["private_method", "protected_method", "public_method"]

    @pytest.mark.parametrize("owner", ["FixtureException", "Exception"])
    def test_class_without_matching_methods_gives_empty_collection(
        self, mapper: Mapper, owner: str
    ) -> None:
        units = mapper.resolve(f"{owner}::<!public>")

        assert units.is_empty()

    def test_inherited_trait_methods_included(self, mapper: Mapper) -> None:
        units = mapper.resolve("FixtureClassWithTrait::<public>")

        assert _names(units) == ["FixtureClassWithTrait::method"]
        assert units[0].source_file == f"{SRC}/fixture_trait.py"

    def test_tokens_apply_to_classes_only(self, mapper: Mapper) -> None:
        with pytest.raises(InvalidCodeUnitError) as exc_info:
            mapper.resolve("FixtureInterface::<public>")

        assert exc_info.value.code == ErrorCode.UNKNOWN_METHOD

    def test_six_tokens_known(self) -> None:
        assert len(VISIBILITY_SELECTORS) == 6


class TestExtendedSelectors:
    """``Class<extended>`` adds the ancestor chain."""

    def test_given_child_when_extended_then_class_traits_parents_in_order(
        self, mapper: Mapper
    ) -> None:
        # When
        units = mapper.resolve("FixtureChildClassWithTrait<extended>")

        # Then
        assert _names(units) == [
            "FixtureChildClassWithTrait",
            "FixtureAnotherTrait",
            "FixtureParentClassWithTrait",
            "FixtureTrait",
            "FixtureNestedTrait",
        ]

    def test_class_without_parent(self, mapper: Mapper) -> None:
        assert _names(mapper.resolve("FixtureClass<extended>")) == ["FixtureClass"]

    def test_stops_at_missing_parent(self) -> None:
        table = InMemorySymbolTable(types=[_type("C", parent="Gone")])

        assert _names(Mapper(table).resolve("C<extended>")) == ["C"]

    @pytest.mark.parametrize(
        "selector",
        ["<extended>", "Missing<extended>", "FixtureInterface<extended>", "f<extended>"],
    )
    def test_given_non_class_when_extended_then_invalid(
        self, mapper: Mapper, selector: str
    ) -> None:
        with pytest.raises(InvalidCodeUnitError) as exc_info:
            mapper.resolve(selector)

        assert exc_info.value.code == ErrorCode.INVALID_SELECTOR

    def test_builtin_class_extended_rejected(self, mapper: Mapper) -> None:
        with pytest.raises(InvalidCodeUnitError) as exc_info:
            mapper.resolve("Exception<extended>")

        assert exc_info.value.code == ErrorCode.UNIT_NOT_USER_DEFINED
        assert exc_info.value.details["selector"] == "Exception<extended>"
        assert exc_info.value.details["name"] == "Exception"


class TestFileSelectors:
    def test_given_file_selector_when_resolved_then_whole_file(self, tmp_path: Path) -> None:
        # Given
        path = tmp_path / "module.py"
        path.write_text("a = 1\nb = 2\nc = 3")

        # When
        units = Mapper(InMemorySymbolTable()).resolve(f"file:{path}")

        # Then
        assert units.count() == 1
        assert units[0].is_file()
        assert units[0].source_lines == (1, 2, 3)

    def test_file_prefix_wins_over_member_separator(self, tmp_path: Path) -> None:
        path = tmp_path / "odd::name.py"
        path.write_text("x = 1\n")

        units = Mapper(InMemorySymbolTable()).resolve(f"file:{path}")

        assert units[0].source_file == str(path)

    def test_relative_file_rejected(self) -> None:
        with pytest.raises(InvalidCodeUnitError) as exc_info:
            Mapper(InMemorySymbolTable()).resolve("file:relative.py")

        assert exc_info.value.code == ErrorCode.FILE_NOT_ABSOLUTE
        assert exc_info.value.details["selector"] == "file:relative.py"


class TestExpansionGuard:
    """Pathological relation graphs fail cleanly instead of recursing forever."""

    def test_cyclic_parents(self) -> None:
        table = InMemorySymbolTable(types=[_type("A", parent="B"), _type("B", parent="A")])
        mapper = Mapper(table, ResolverConfig(max_expansion_depth=4))

        with pytest.raises(InvalidCodeUnitError) as exc_info:
            mapper.resolve("A<extended>")

        assert exc_info.value.code == ErrorCode.EXPANSION_TOO_DEEP
        assert exc_info.value.details["limit"] == 4

    def test_cyclic_traits(self) -> None:
        table = InMemorySymbolTable(
            types=[_type("C", traits=("T",)), _type("T", SymbolKind.TRAIT, traits=("T",))]
        )

        with pytest.raises(InvalidCodeUnitError) as exc_info:
            Mapper(table, ResolverConfig(max_expansion_depth=3)).resolve("C")

        assert exc_info.value.code == ErrorCode.EXPANSION_TOO_DEEP

    def test_chain_within_limit(self) -> None:
        table = InMemorySymbolTable(
            types=[_type("A", parent="B"), _type("B", parent="C"), _type("C")]
        )

        units = Mapper(table, ResolverConfig(max_expansion_depth=2)).resolve("A<extended>")

        assert _names(units) == ["A", "B", "C"]


class TestReflectionFailure:
    """Errors from the symbol table itself are kept apart from invalid selectors."""

    class BrokenTable(InMemorySymbolTable):
        def lookup_type(self, name: str) -> Symbol | None:
            raise SymbolLookupError(f"Importing {name} failed: boom", code=1)

    @pytest.mark.parametrize("selector", ["pkg.Broken", "pkg.Broken::run", "pkg.Broken<extended>"])
    def test_given_failing_lookup_when_resolved_then_reflection_error(
        self, selector: str
    ) -> None:
        with pytest.raises(ReflectionError) as exc_info:
            Mapper(self.BrokenTable()).resolve(selector)

        assert exc_info.value.code == ErrorCode.REFLECTION_FAILURE
        assert exc_info.value.message == "Importing pkg.Broken failed: boom"
        assert exc_info.value.details["original_code"] == 1


class TestReduceToLineSets:
    """Operation B: collection to sorted, distinct lines per file."""

    def test_overlapping_units_are_unioned(self, mapper: Mapper) -> None:
        units = mapper.resolve("FixtureClass").merge_with(
            mapper.resolve("FixtureClass::public_method")
        )

        result = Mapper.reduce_to_line_sets(units)

        assert result == {f"{SRC}/fixture_class.py": list(range(12, 29))}

    def test_files_sorted_and_lines_ascending(self, mapper: Mapper) -> None:
        units = mapper.resolve("FixtureClassWithTrait").merge_with(mapper.resolve("f"))

        result = Mapper.reduce_to_line_sets(units)

        assert list(result) == sorted(result)
        assert result[f"{SRC}/fixture_trait.py"] == [5, 6, 7, 8, 9, 10]
        assert result[f"{SRC}/functions.py"] == [3, 4, 5, 6]
        assert all(lines == sorted(set(lines)) for lines in result.values())

    def test_order_independent(self, mapper: Mapper) -> None:
        units = list(
            mapper.resolve("FixtureChildClassWithTrait<extended>")
            .merge_with(mapper.resolve("FixtureTrait::method"))
            .merge_with(mapper.resolve("::f"))
        )
        expected = Mapper.reduce_to_line_sets(CodeUnitCollection.from_iterable(units))

        for permutation in itertools.islice(itertools.permutations(units), 50):
            collection = CodeUnitCollection.from_iterable(permutation)
            assert Mapper.reduce_to_line_sets(collection) == expected

    def test_idempotent_on_duplicates(self, mapper: Mapper) -> None:
        once = mapper.resolve("FixtureClassWithTrait")
        twice = once.merge_with(once)

        assert Mapper.reduce_to_line_sets(twice) == Mapper.reduce_to_line_sets(once)

    def test_empty_collection(self) -> None:
        assert Mapper.reduce_to_line_sets(CodeUnitCollection()) == {}

    def test_resolution_is_repeatable(self, mapper: Mapper) -> None:
        assert mapper.resolve("FixtureClassWithTrait") == mapper.resolve("FixtureClassWithTrait")


class TestRuntimeResolution:
    """End-to-end resolution against real Python objects."""

    MODULE = "codeunit_fixture.classes"

    @pytest.fixture
    def runtime_mapper(self, fixture_modules: Path) -> Mapper:
        return Mapper(RuntimeSymbolTable(RuntimeConfig(search_modules=[self.MODULE])))

    def test_mixins_expand_depth_first(self, runtime_mapper: Mapper) -> None:
        units = runtime_mapper.resolve("FixtureClassWithTrait")

        assert _names(units) == [
            "FixtureClassWithTrait",
            f"{self.MODULE}.FixtureMixin",
            f"{self.MODULE}.FixtureNestedMixin",
        ]

    def test_extended_walks_python_bases(self, runtime_mapper: Mapper) -> None:
        units = runtime_mapper.resolve("FixtureChildClassWithTrait<extended>")

        assert _names(units) == [
            "FixtureChildClassWithTrait",
            f"{self.MODULE}.FixtureAnotherMixin",
            f"{self.MODULE}.FixtureParentClassWithTrait",
            f"{self.MODULE}.FixtureMixin",
            f"{self.MODULE}.FixtureNestedMixin",
        ]

    def test_extended_stops_at_builtin_base(self, runtime_mapper: Mapper) -> None:
        assert _names(runtime_mapper.resolve("FixtureError<extended>")) == ["FixtureError"]

    @pytest.mark.parametrize("name", ["FixtureGenericChild", "FixtureMixedError"])
    def test_extended_reaches_user_base_listed_after_another(
        self, runtime_mapper: Mapper, name: str
    ) -> None:
        units = runtime_mapper.resolve(f"{name}<extended>")

        assert _names(units) == [name, f"{self.MODULE}.FixtureClass"]

    def test_non_public_methods(self, runtime_mapper: Mapper) -> None:
        units = runtime_mapper.resolve("FixtureClass::<!public>")

        assert _names(units) == [
            "FixtureClass::_protected_method",
            "FixtureClass::__private_method",
        ]

    def test_exception_subclass_without_methods(self, runtime_mapper: Mapper) -> None:
        assert runtime_mapper.resolve("FixtureError::<!public>").is_empty()

    @pytest.mark.parametrize("selector", ["ValueError", "ValueError<extended>"])
    def test_builtin_exception_rejected(self, runtime_mapper: Mapper, selector: str) -> None:
        with pytest.raises(InvalidCodeUnitError) as exc_info:
            runtime_mapper.resolve(selector)

        assert exc_info.value.code == ErrorCode.UNIT_NOT_USER_DEFINED
        assert exc_info.value.details["selector"] == selector
        assert exc_info.value.details["name"] == "ValueError"

    def test_broken_module_is_reflection_error(self, runtime_mapper: Mapper) -> None:
        with pytest.raises(ReflectionError):
            runtime_mapper.resolve("codeunit_fixture.broken.Thing")
