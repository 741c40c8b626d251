"""codeunit lines command - reduce selectors to per-file line sets."""

import json
from pathlib import Path

import click

from codeunit.cli.utils import (
    build_mapper,
    compress_ranges,
    json_option,
    path_option,
    resolve_all,
    symbols_option,
)


@click.command()
@click.argument("selectors", nargs=-1, required=True)
@symbols_option
@path_option
@json_option
@click.pass_context
def lines_command(
    ctx: click.Context,
    selectors: tuple[str, ...],
    manifest: Path | None,
    extra_paths: tuple[Path, ...],
    as_json: bool,
) -> None:
    """Print the distinct source lines covered by SELECTORS, per file.

    Output is suitable for building "only measure these lines" coverage
    filters.
    """
    mapper = build_mapper(ctx.obj["config"], manifest, extra_paths)
    line_sets = mapper.reduce_to_line_sets(resolve_all(mapper, selectors))

    if as_json:
        click.echo(json.dumps(line_sets, indent=2))
        return

    for source_file, lines in line_sets.items():
        click.echo(f"{source_file}: {compress_ranges(lines)}")
