"""Dry-run symbol resolution."""

from __future__ import annotations

import sys

import click
from rich.table import Table

from ..console import console
from ..module_resolution import ConfigurationError
from ..settings import build_loader
from ..settings import load_settings


@click.command("resolve")
@click.argument("symbols", nargs=-1, required=True)
@click.pass_context
def resolve_cmd(ctx: click.Context, symbols: tuple[str, ...]):
    """Show which file each SYMBOL resolves to, without loading it.

    Exits with status 1 if any symbol is unresolved.

    Examples:

        \b
        autoload resolve app.models.user
        autoload -c autoload.yaml resolve app.models app.views.index
    """
    try:
        resolver = build_loader(load_settings(ctx.obj.get("config"))).resolver
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Symbol", style="green")
    table.add_column("Phase", style="yellow")
    table.add_column("Matched", style="magenta")
    table.add_column("File")

    missing = 0
    for symbol in symbols:
        resolution = resolver.locate(symbol)
        if resolution is None:
            missing += 1
            table.add_row(symbol, "-", "-", "[red]not found[/red]")
            continue
        phase = "package" if resolution.package else resolution.phase
        table.add_row(symbol, phase, resolution.key, str(resolution.file))

    console.print(table)

    if missing:
        console.print(f"[red]{missing} of {len(symbols)} symbol(s) not resolved[/red]")
        ctx.exit(1)
