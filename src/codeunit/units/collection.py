"""Ordered, immutable collections of code units."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from codeunit.units.models import CodeUnit


@dataclass(frozen=True, slots=True)
class CodeUnitCollection:
    """An ordered sequence of code units.

    Order is meaningful (a class precedes its traits, which precede its
    parents) and duplicates are kept. Merging returns a new collection.
    """

    units: tuple[CodeUnit, ...] = ()

    @classmethod
    def from_list(cls, *units: CodeUnit) -> CodeUnitCollection:
        return cls(tuple(units))

    @classmethod
    def from_iterable(cls, units: Iterable[CodeUnit]) -> CodeUnitCollection:
        return cls(tuple(units))

    def as_sequence(self) -> tuple[CodeUnit, ...]:
        return self.units

    def count(self) -> int:
        return len(self.units)

    def is_empty(self) -> bool:
        return not self.units

    def merge_with(self, other: CodeUnitCollection) -> CodeUnitCollection:
        return CodeUnitCollection(self.units + other.units)

    def source_lines(self) -> dict[str, list[int]]:
        """Sorted, distinct lines per source file. See ``Mapper.reduce_to_line_sets``."""
        # Import here to avoid circular dependency
        from codeunit.mapper import Mapper

        return Mapper.reduce_to_line_sets(self)

    def __iter__(self) -> Iterator[CodeUnit]:
        return iter(self.units)

    def __len__(self) -> int:
        return len(self.units)

    def __getitem__(self, index: int) -> CodeUnit:
        return self.units[index]
