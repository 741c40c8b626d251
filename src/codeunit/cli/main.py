"""codeunit CLI - codeunit command."""

from pathlib import Path

import click

from codeunit import __version__
from codeunit.cli.lines import lines_command
from codeunit.cli.resolve import resolve_command
from codeunit.config.loader import load_config
from codeunit.core.errors import ConfigError
from codeunit.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="codeunit")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--root",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root holding .codeunit/config.yaml (default: current directory).",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, root: Path) -> None:
    """codeunit - map code unit selectors to source lines."""
    try:
        config = load_config(root.resolve())
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(resolve_command, name="resolve")
cli.add_command(lines_command, name="lines")


if __name__ == "__main__":
    cli()
