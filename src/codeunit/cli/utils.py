"""CLI utilities."""

from collections.abc import Iterable, Sequence
from pathlib import Path

import click

from codeunit.config.models import CodeUnitConfig
from codeunit.core.errors import CodeUnitError
from codeunit.mapper import Mapper
from codeunit.symbols.manifest import load_manifest
from codeunit.symbols.models import SymbolTable
from codeunit.symbols.runtime import RuntimeSymbolTable
from codeunit.units.collection import CodeUnitCollection

symbols_option = click.option(
    "--symbols",
    "manifest",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML symbol manifest. Without it, names are imported from the running interpreter.",
)
path_option = click.option(
    "--path",
    "extra_paths",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory to put on sys.path before importing (repeatable).",
)
json_option = click.option("--json", "as_json", is_flag=True, help="Output as JSON")


def build_mapper(
    config: CodeUnitConfig,
    manifest: Path | None = None,
    extra_paths: Sequence[Path] = (),
) -> Mapper:
    """Create a mapper over a manifest or over the Python runtime.

    Raises:
        click.ClickException: If the manifest cannot be loaded.
    """
    symbols: SymbolTable
    if manifest is not None:
        try:
            symbols = load_manifest(manifest)
        except CodeUnitError as e:
            raise click.ClickException(str(e)) from e
    else:
        runtime = config.runtime.model_copy(
            update={
                "extra_paths": [str(p.resolve()) for p in extra_paths]
                + config.runtime.extra_paths
            }
        )
        symbols = RuntimeSymbolTable(runtime)
    return Mapper(symbols, config.resolver)


def resolve_all(mapper: Mapper, selectors: Iterable[str]) -> CodeUnitCollection:
    """Resolve selectors in order and merge the results.

    Raises:
        click.ClickException: On the first selector that fails to resolve.
    """
    collection = CodeUnitCollection()
    for selector in selectors:
        try:
            collection = collection.merge_with(mapper.resolve(selector))
        except CodeUnitError as e:
            raise click.ClickException(str(e)) from e
    return collection


def compress_ranges(lines: Sequence[int]) -> str:
    """Render sorted line numbers as ``1-3, 7, 9-10``."""
    parts: list[str] = []
    start = 0
    for i, line in enumerate(lines):
        if i + 1 == len(lines) or lines[i + 1] != line + 1:
            first = lines[start]
            parts.append(str(first) if first == line else f"{first}-{line}")
            start = i + 1
    return ", ".join(parts)
