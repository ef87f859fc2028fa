"""CLI command: termevents watch — print keys as the event stream delivers them."""

from __future__ import annotations

import dataclasses
import sys
import time

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from termevents.config import EventConfig
from termevents.errors import ChannelClosed
from termevents.keys import Key
from termevents.source import EventSource
from termevents.terminal.stdin import StdinTerminal

console = Console(stderr=True)

_QUIT_KEYS = (Key.from_char("q"), Key.ctrl("c"))


@click.command()
@click.option(
    "--tick-rate",
    "-t",
    type=click.IntRange(min=0),
    default=None,
    help="Heartbeat interval in milliseconds (default 250).",
)
@click.option("--show-ticks", is_flag=True, help="Print every heartbeat tick.")
@click.pass_context
def watch(ctx: click.Context, tick_rate: int | None, show_ticks: bool) -> None:
    """Read keys from the terminal until q is pressed."""
    config: EventConfig = ctx.obj.get("config") or EventConfig()
    if tick_rate is not None:
        config = dataclasses.replace(config, tick_rate=tick_rate / 1000)

    console.print(
        f"[bold]termevents[/bold] watching keyboard input, "
        f"tick rate [cyan]{config.tick_rate * 1000:.0f}ms[/cyan]"
    )
    console.print("  Press q to stop.\n")

    keys = 0
    ticks = 0
    started = time.monotonic()
    failed: ChannelClosed | None = None

    try:
        with StdinTerminal() as terminal, EventSource.with_config(
            config, terminal=terminal
        ) as events:
            for key in events:
                if key.is_tick:
                    ticks += 1
                    if show_ticks:
                        console.print("  [dim]tick[/dim]")
                    continue
                keys += 1
                console.print(
                    f"  [blue]{escape(str(key))}[/blue] [dim]({key.code.value})[/dim]"
                )
                if key in _QUIT_KEYS:
                    break
    except ChannelClosed as exc:
        failed = exc
    except KeyboardInterrupt:
        console.print("\n[dim]Stopping...[/dim]")

    _print_summary(keys, ticks, time.monotonic() - started)

    if failed is not None:
        console.print(f"\n[red]Event stream failed:[/red] {failed}")
        sys.exit(1)


def _print_summary(keys: int, ticks: int, elapsed: float) -> None:
    console.print("\n[bold]Summary[/bold]")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()

    table.add_row("Key presses", str(keys))
    table.add_row("Ticks", str(ticks))
    table.add_row("Elapsed", f"{elapsed:.1f}s")
    console.print(table)
