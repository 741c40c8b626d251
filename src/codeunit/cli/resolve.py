"""codeunit resolve command - list the units a selector denotes."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from codeunit.cli.utils import (
    build_mapper,
    json_option,
    path_option,
    resolve_all,
    symbols_option,
)
from codeunit.units.collection import CodeUnitCollection


def _make_units_table(units: CodeUnitCollection) -> Table:
    table = Table(box=None, padding=(0, 1), pad_edge=False)
    table.add_column("Kind", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("File", overflow="fold")
    table.add_column("Lines", justify="right")
    for unit in units:
        table.add_row(
            unit.kind.value,
            unit.name,
            unit.source_file,
            f"{unit.source_lines[0]}-{unit.source_lines[-1]}",
        )
    return table


@click.command()
@click.argument("selectors", nargs=-1, required=True)
@symbols_option
@path_option
@json_option
@click.pass_context
def resolve_command(
    ctx: click.Context,
    selectors: tuple[str, ...],
    manifest: Path | None,
    extra_paths: tuple[Path, ...],
    as_json: bool,
) -> None:
    """Resolve SELECTORS into code units, in argument order.

    \b
    Examples:
        codeunit resolve 'app.models.User'
        codeunit resolve 'app.models.User::<public>' 'app.models.User<extended>'
        codeunit resolve '::app.helpers.slugify' --symbols symbols.yaml
    """
    mapper = build_mapper(ctx.obj["config"], manifest, extra_paths)
    units = resolve_all(mapper, selectors)

    if as_json:
        click.echo(json.dumps([unit.to_dict() for unit in units], indent=2))
        return

    if units.is_empty():
        click.echo("No code units matched.")
        return
    Console().print(_make_units_table(units))
