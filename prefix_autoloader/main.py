"""autoload command line interface."""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from .commands.paths import paths_cmd
from .commands.resolve import resolve_cmd
from .commands.run import run_cmd
from .console import console
from .logging_setup import init_json_logging


@click.group(invoke_without_command=True)
@click.version_option(package_name="prefix-autoloader")
@click.option(
    "--config",
    "-c",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file (default: $AUTOLOAD_CONFIG or ./autoload.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs on the console")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Append JSONL logs to this file")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool, log_file: str | None):
    """Resolve dotted names to source files through prefix mappings."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    level = "DEBUG" if verbose else None
    if log_file:
        init_json_logging(log_file, level)

    if verbose:
        root = logging.getLogger()
        root.setLevel(logging.DEBUG)
        if not any(isinstance(h, RichHandler) for h in root.handlers):
            root.addHandler(RichHandler(console=console, show_path=False))

    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


cli.add_command(paths_cmd)
cli.add_command(resolve_cmd)
cli.add_command(run_cmd)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
