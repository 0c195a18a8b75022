from __future__ import annotations

from pathlib import Path

import pytest
import typer
from rich.console import Console
from typer.testing import CliRunner

import stackctl.cli as cli
from stackctl import logging as stack_logging
from stackctl.settings import load_settings


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    # Resolves sys.stdout at write time, so capsys and CliRunner both see it.
    monkeypatch.setattr(cli, "console", Console(width=200))


def test_config_show_lists_settings(log_dir, monkeypatch, capsys):
    monkeypatch.setenv("STACK_CTL_TITLE_COLOR", "201")

    cli.config_show()

    out = capsys.readouterr().out
    assert "STACK_CTL_TITLE_COLOR" in out
    assert "201" in out
    assert str(log_dir) in out


def test_logs_path(log_dir, capsys):
    cli.logs_path()
    assert capsys.readouterr().out.strip() == str(log_dir / stack_logging.LOG_FILE_NAME)


def test_logs_show_tails_current_file(log_dir, capsys):
    log_dir.mkdir(parents=True)
    (log_dir / "stackctl.log").write_text("one\ntwo\nthree\n", encoding="utf-8")

    cli.logs_show(lines=2, file=None)

    out = capsys.readouterr().out
    assert "two" in out
    assert "three" in out
    assert "one" not in out.replace(str(log_dir), "")


def test_logs_show_named_file_stays_in_log_dir(log_dir, capsys):
    log_dir.mkdir(parents=True)
    (log_dir / "stackctl.log.2026-10-01").write_text("rotated\n", encoding="utf-8")

    cli.logs_show(lines=0, file="../../stackctl.log.2026-10-01")

    assert "rotated" in capsys.readouterr().out


def test_logs_show_missing_file_exits_1(log_dir, capsys):
    with pytest.raises(typer.Exit) as exc:
        cli.logs_show(lines=10, file="nope.log")
    assert exc.value.exit_code == 1
    assert "Log file not found" in capsys.readouterr().out


def test_logs_clear_with_yes(log_dir, capsys):
    log_dir.mkdir(parents=True)
    (log_dir / "stackctl.log").write_text("live\n", encoding="utf-8")
    rotated = log_dir / "stackctl.log.2026-10-01"
    rotated.write_text("old\n", encoding="utf-8")

    cli.logs_clear(yes=True)

    assert "Logs cleared" in capsys.readouterr().out
    assert not rotated.exists()
    assert (log_dir / "stackctl.log").read_text(encoding="utf-8") == ""


def test_logs_clear_declined(log_dir, monkeypatch, capsys):
    log_dir.mkdir(parents=True)
    (log_dir / "stackctl.log").write_text("live\n", encoding="utf-8")
    monkeypatch.setattr(cli, "confirm_destructive_action", lambda message, settings: False)

    cli.logs_clear(yes=False)

    assert "Cancelled" in capsys.readouterr().out
    assert (log_dir / "stackctl.log").read_text(encoding="utf-8") == "live\n"


def test_logs_clear_nothing_to_do(log_dir, capsys):
    cli.logs_clear(yes=True)
    assert "No log files" in capsys.readouterr().out


def test_menu_tree(log_dir, capsys):
    cli.menu_tree()

    out = capsys.readouterr().out
    assert "Stack Control CLI" in out
    assert "System" in out
    assert "Write Entry" in out
    assert "(Level, Message)" in out


def test_menu_routes(log_dir, capsys):
    cli.menu_routes()

    out = capsys.readouterr().out
    assert "System/Logs/Show Log" in out
    assert "System/Logs/Clear Logs" in out
    assert "System/Routes" in out


def test_write_then_show_through_the_cli(log_dir):
    """Plain CLI runs configure file logging, so notes land in the log."""
    runner = CliRunner()

    result = runner.invoke(cli.app, ["logs", "write", "warning", "disk almost full"])
    assert result.exit_code == 0
    assert "WARNING" in result.output

    result = runner.invoke(cli.app, ["logs", "show", "--lines", "5"])
    assert result.exit_code == 0
    assert "disk almost full" in result.output


def test_missing_log_file_exit_code(log_dir):
    result = CliRunner().invoke(cli.app, ["logs", "show", "--file", "nope.log"])
    assert result.exit_code == 1


def test_interactive_menu_without_terminal_exits_1(log_dir, monkeypatch):
    """Running with no subcommand needs a TTY; CliRunner is not one."""
    result = CliRunner().invoke(cli.app, [])
    assert result.exit_code == 1
    assert "Cannot start the interactive menu" in result.output
    assert Path(load_settings().STACK_CTL_LOG_DIR).is_dir()
