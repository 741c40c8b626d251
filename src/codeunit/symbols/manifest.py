"""YAML symbol manifests.

A manifest describes declarations of a code base that is not importable
from the current interpreter (another checkout, generated code, a snapshot
exported by a different tool). Example::

    symbols:
      - name: app.Service
        kind: class
        file: app/service.py
        start_line: 10
        end_line: 42
        parent: app.BaseService
        traits: [app.LoggingMixin]
        methods:
          - {name: run, visibility: public, start_line: 12, end_line: 20}
      - name: app.helpers.slugify
        kind: function
        file: app/helpers.py
        start_line: 1
        end_line: 6

Relative file paths resolve against the manifest's directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from codeunit.core.errors import ConfigError
from codeunit.core.logging import get_logger
from codeunit.symbols.memory import InMemorySymbolTable, TypeDeclaration
from codeunit.symbols.models import Symbol, SymbolKind, Visibility

log = get_logger(__name__)


class _Span(BaseModel):
    start_line: int = Field(ge=1)
    end_line: int = Field(ge=1)
    file: str | None = None
    user_defined: bool = True

    @model_validator(mode="after")
    def _check_span(self) -> _Span:
        if self.end_line < self.start_line:
            raise ValueError(f"end_line {self.end_line} precedes start_line {self.start_line}")
        return self


class MethodEntry(_Span):
    name: str = Field(min_length=1)
    visibility: Literal["public", "protected", "private"] = "public"


class SymbolEntry(_Span):
    name: str = Field(min_length=1)
    kind: Literal["class", "interface", "trait", "function"]
    parent: str | None = None
    traits: list[str] = Field(default_factory=list)
    methods: list[MethodEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_relations(self) -> SymbolEntry:
        if self.kind == "function" and (self.parent or self.traits or self.methods):
            raise ValueError(f"function {self.name} cannot have parent, traits or methods")
        if self.kind == "interface" and self.traits:
            raise ValueError(f"interface {self.name} cannot use traits")
        return self


class SymbolManifest(BaseModel):
    symbols: list[SymbolEntry] = Field(default_factory=list)


def _absolute(file: str | None, base_dir: Path) -> str | None:
    if file is None:
        return None
    path = Path(file)
    if not path.is_absolute():
        path = base_dir / path
    return str(path.resolve())


def build_symbol_table(manifest: SymbolManifest, base_dir: Path) -> InMemorySymbolTable:
    """Convert a validated manifest into an in-memory symbol table."""
    types: list[TypeDeclaration] = []
    functions: list[Symbol] = []

    for entry in manifest.symbols:
        file = _absolute(entry.file, base_dir)
        symbol = Symbol(
            name=entry.name,
            kind=SymbolKind(entry.kind),
            file=file,
            start_line=entry.start_line,
            end_line=entry.end_line,
            user_defined=entry.user_defined,
        )
        if symbol.kind is SymbolKind.FUNCTION:
            functions.append(symbol)
            continue

        methods = tuple(
            Symbol(
                name=method.name,
                kind=SymbolKind.METHOD,
                file=_absolute(method.file, base_dir) or file,
                start_line=method.start_line,
                end_line=method.end_line,
                user_defined=method.user_defined,
                visibility=Visibility.from_name(method.visibility),
            )
            for method in entry.methods
        )
        types.append(
            TypeDeclaration(
                symbol=symbol,
                parent=entry.parent,
                traits=tuple(entry.traits),
                methods=methods,
            )
        )

    return InMemorySymbolTable(types=types, functions=functions)


def parse_manifest(data: Any, source: str) -> SymbolManifest:
    try:
        return SymbolManifest.model_validate(data or {})
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field or source, err.get("input"), err["msg"]) from e


def load_manifest(path: Path) -> InMemorySymbolTable:
    """Load a YAML manifest file into a symbol table.

    Raises:
        ConfigError: If the file is missing, is not valid YAML or does not
            match the manifest schema.
    """
    if not path.is_file():
        raise ConfigError.file_not_found(str(path))
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e

    table = build_symbol_table(parse_manifest(data, str(path)), path.parent.resolve())
    log.debug("manifest_loaded", path=str(path), symbols=len(table))
    return table
