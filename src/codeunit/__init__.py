"""codeunit - resolve code unit selectors to source files and line sets."""

from codeunit.core.errors import (
    CodeUnitError,
    InvalidCodeUnitError,
    ReflectionError,
)
from codeunit.mapper import Mapper
from codeunit.units import CodeUnit, CodeUnitCollection, UnitFactory, UnitKind

__version__ = "0.1.0"

__all__ = [
    "CodeUnit",
    "CodeUnitCollection",
    "CodeUnitError",
    "InvalidCodeUnitError",
    "Mapper",
    "ReflectionError",
    "UnitFactory",
    "UnitKind",
    "__version__",
]
