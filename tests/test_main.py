"""Tests for the daebot CLI entry point."""

from pathlib import Path
from unittest.mock import patch

import pytest

from daebot.main import main, parse_args


def test_parse_args_defaults() -> None:
    args = parse_args([])
    assert args.config == Path("config.yaml")
    assert not args.check


def test_check_prints_config(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("bot:\n  login: testbot\n  managed_repos: [dae]\n")
    assert main(["--config", str(path), "--check"]) == 0
    out = capsys.readouterr().out
    assert "Config OK: testbot dae /webhook/github" in out


def test_run_failure_returns_1(tmp_path: Path) -> None:
    with patch("daebot.main.run_bot", side_effect=RuntimeError("boom")):
        assert main(["--config", str(tmp_path / "missing.yaml")]) == 1


def test_keyboard_interrupt_exits_cleanly(tmp_path: Path) -> None:
    with patch("daebot.main.run_bot", side_effect=KeyboardInterrupt):
        assert main(["--config", str(tmp_path / "missing.yaml")]) == 0
