"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from termevents import __version__
from termevents.config import EventConfig


@click.group()
@click.version_option(version=__version__, prog_name="termevents")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """termevents — merged keyboard and tick event stream for terminal apps."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    try:
        ctx.obj["config"] = EventConfig.load()
    except ValueError as exc:
        raise click.UsageError(f"Invalid TERMEVENTS_* setting: {exc}") from exc

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _register_commands() -> None:
    from termevents.cli.watch import watch  # noqa: F811

    main.add_command(watch)


_register_commands()
