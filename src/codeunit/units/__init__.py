"""Code unit value objects, collections and constructors."""

from codeunit.units.collection import CodeUnitCollection
from codeunit.units.factory import UnitFactory
from codeunit.units.models import CodeUnit, UnitKind

__all__ = [
    "CodeUnit",
    "CodeUnitCollection",
    "UnitFactory",
    "UnitKind",
]
