"""Run a module with the loader installed on sys.meta_path."""

from __future__ import annotations

import logging
import runpy
import sys

import click

from ..console import console
from ..module_resolution import ConfigurationError
from ..settings import build_loader
from ..settings import load_settings

logger = logging.getLogger(__name__)


@click.command(
    "run",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.argument("module_name")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run_cmd(ctx: click.Context, module_name: str, args: tuple[str, ...]):
    """Run MODULE_NAME as __main__, importing through the prefix mapping.

    Remaining ARGS are passed to the module in sys.argv.
    """
    try:
        settings = load_settings(ctx.obj.get("config"))
        hook = build_loader(settings)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    hook.register(prepend=settings.prepend)
    saved_argv = sys.argv
    sys.argv = [module_name, *args]
    try:
        logger.debug(f"[autoload:run] running {module_name} with {list(args)}")
        runpy.run_module(module_name, run_name="__main__", alter_sys=True)
    finally:
        sys.argv = saved_argv
        hook.unregister()
