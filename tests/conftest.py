"""Shared fixtures for limit-alarm tests."""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_alarm_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every alarm path at a temporary directory.

    Keeps tests away from the real ~/.claude-alarm and ~/.claude, silences
    real alerts and disables push notifications.
    """
    alarm_dir = tmp_path / "alarm"
    monkeypatch.setenv("CLAUDE_ALARM_DIR", str(alarm_dir))
    monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(tmp_path / "claude"))
    monkeypatch.setenv("CLAUDE_ALARM_MOCK_ALERTS", "1")
    monkeypatch.delenv("CLAUDE_ALARM_NTFY_TOPIC", raising=False)
    return alarm_dir
