"""Unit tests for the alarm commands."""

import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from limit_alarm.alerts.platform import Platform
from limit_alarm.commands import (
    alarm_status,
    detect_config,
    ensure_config,
    fire_test_alarm,
    run_setup,
    run_uninstall,
    start_alarm,
    stop_alarm,
)
from limit_alarm.config import get_config_path
from limit_alarm.errors import AlarmAlreadyActiveError, InvalidDurationError
from limit_alarm.liveness import LivenessStore


@pytest.fixture
def liveness(isolated_alarm_env: Path) -> LivenessStore:
    """Liveness store at the standard (isolated) location."""
    return LivenessStore()


class TestStartAlarm:
    """Tests for manual alarms."""

    def test_start_spawns_daemon(self, liveness: LivenessStore) -> None:
        """A valid expression launches the daemon with its minutes."""
        calls: list[float] = []
        minutes = start_alarm("4h", liveness, spawn=calls.append)
        assert minutes == 240
        assert calls == [240]

    def test_start_writes_default_config(self, liveness: LivenessStore) -> None:
        """Starting an alarm creates the config file if missing."""
        start_alarm("30m", liveness, spawn=lambda _m: 0)
        assert get_config_path().exists()

    @pytest.mark.parametrize("expression", ["abc", "0", "-5m", "4x", ""])
    def test_invalid_expression(self, expression: str, liveness: LivenessStore) -> None:
        """Bad expressions raise without spawning."""
        calls: list[float] = []
        with pytest.raises(InvalidDurationError):
            start_alarm(expression, liveness, spawn=calls.append)
        assert calls == []

    def test_already_active(self, liveness: LivenessStore) -> None:
        """A live alarm blocks a manual one."""
        liveness.claim(os.getpid())
        with pytest.raises(AlarmAlreadyActiveError) as exc_info:
            start_alarm("30m", liveness, spawn=lambda _m: 0)
        assert exc_info.value.pid == os.getpid()


class TestStopAndStatus:
    """Tests for stop and status."""

    def test_status_without_alarm(self, liveness: LivenessStore) -> None:
        """No record means no status."""
        assert alarm_status(liveness) is None

    def test_status_with_alarm(self, liveness: LivenessStore) -> None:
        """A live record reports its PID."""
        liveness.claim(os.getpid())
        assert alarm_status(liveness) == os.getpid()

    def test_stop_without_alarm(self, liveness: LivenessStore) -> None:
        """Stopping with nothing running reports None."""
        assert stop_alarm(liveness) is None

    def test_stop_stale_alarm(self, liveness: LivenessStore) -> None:
        """A stale record is cleared and reported as already stopped."""
        process = subprocess.Popen([sys.executable, "-c", "pass"])
        process.wait()
        liveness.claim(process.pid)

        assert stop_alarm(liveness) is False
        assert liveness.exists() is False

    def test_stop_running_alarm(self, liveness: LivenessStore) -> None:
        """A running alarm process is signalled."""
        process = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
        try:
            liveness.claim(process.pid)
            assert stop_alarm(liveness) is True
            process.wait(timeout=10)
            assert liveness.exists() is False
        finally:
            if process.poll() is None:
                process.kill()
                process.wait()


class TestConfigCommands:
    """Tests for config detection, setup and uninstall."""

    def test_detect_config_macos(self) -> None:
        """macOS gets the Samantha voice."""
        assert detect_config(Platform.MACOS).voice == "Samantha"

    def test_detect_config_other(self) -> None:
        """Unknown platforms get no voice."""
        assert detect_config(Platform.OTHER).voice is None

    def test_ensure_config_keeps_existing(self, isolated_alarm_env: Path) -> None:
        """An existing config is loaded, not overwritten."""
        path = get_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump({"rate": 190}))

        config = ensure_config(Platform.MACOS)

        assert config.rate == 190
        assert yaml.safe_load(path.read_text()) == {"rate": 190}

    def test_fire_test_alarm(self, isolated_alarm_env: Path) -> None:
        """The test alarm runs to completion in this process."""
        assert fire_test_alarm() == 0
        assert not (isolated_alarm_env / "alarm.pid").exists()

    def test_run_setup(self, isolated_alarm_env: Path, tmp_path: Path) -> None:
        """Setup writes the config and installs hooks."""
        settings_path = tmp_path / "settings.json"
        with patch("limit_alarm.commands.detect_platform", return_value=Platform.MACOS):
            report = run_setup(settings_path)

        assert report.platform == Platform.MACOS
        assert report.config_path.exists()
        assert all(report.hooks.values())
        assert settings_path.exists()
        assert any("Samantha" in line for line in report.capabilities)

    def test_run_uninstall(self, isolated_alarm_env: Path, tmp_path: Path) -> None:
        """Uninstall removes hooks and the config directory."""
        settings_path = tmp_path / "settings.json"
        with patch("limit_alarm.commands.detect_platform", return_value=Platform.LINUX):
            run_setup(settings_path)

        assert run_uninstall(settings_path) is True
        assert not isolated_alarm_env.exists()
        assert "hooks" not in settings_path.read_text()

    def test_run_uninstall_without_config(self, isolated_alarm_env: Path) -> None:
        """Uninstall with nothing installed still succeeds."""
        assert run_uninstall() is False
