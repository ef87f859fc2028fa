"""Tests for CLI commands using Click's CliRunner."""

from __future__ import annotations

from unittest.mock import patch

from click.testing import CliRunner

from termevents.cli import main
from termevents.errors import ReadFailure


def test_main_help():
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "termevents" in result.output
    assert "watch" in result.output


def test_main_version():
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_watch_help():
    runner = CliRunner()
    result = runner.invoke(main, ["watch", "--help"])
    assert result.exit_code == 0
    assert "--tick-rate" in result.output


def test_watch_prints_keys_until_quit(terminal):
    terminal.inject_key(b"x")
    terminal.inject_key(b"\x1b[A")
    terminal.inject_key(b"q")

    runner = CliRunner()
    with patch("termevents.cli.watch.StdinTerminal") as terminal_cls:
        terminal_cls.return_value.__enter__.return_value = terminal
        result = runner.invoke(main, ["watch", "--tick-rate", "20"])

    assert result.exit_code == 0, result.output
    assert "x" in result.output
    assert "<Up>" in result.output
    assert "Key presses" in result.output
    assert "20ms" in result.output


def test_watch_exits_nonzero_on_stream_failure(terminal):
    terminal.inject(ReadFailure("terminal went away"))

    runner = CliRunner()
    with patch("termevents.cli.watch.StdinTerminal") as terminal_cls:
        terminal_cls.return_value.__enter__.return_value = terminal
        result = runner.invoke(main, ["watch", "--tick-rate", "20"])

    assert result.exit_code == 1
    assert "terminal went away" in result.output


def test_invalid_env_setting_is_a_usage_error():
    runner = CliRunner()
    result = runner.invoke(
        main, ["watch", "--help"], env={"TERMEVENTS_TICK_RATE_MS": "fast"}
    )
    assert result.exit_code == 2
    assert "TERMEVENTS_" in result.output
