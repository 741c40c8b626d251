"""Symbol tables consumed by the resolver."""

from codeunit.symbols.manifest import load_manifest
from codeunit.symbols.memory import InMemorySymbolTable, TypeDeclaration
from codeunit.symbols.models import (
    Symbol,
    SymbolKind,
    SymbolLookupError,
    SymbolTable,
    Visibility,
)
from codeunit.symbols.runtime import RuntimeSymbolTable

__all__ = [
    "InMemorySymbolTable",
    "RuntimeSymbolTable",
    "Symbol",
    "SymbolKind",
    "SymbolLookupError",
    "SymbolTable",
    "TypeDeclaration",
    "Visibility",
    "load_manifest",
]
