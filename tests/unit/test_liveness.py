"""Unit tests for the liveness record."""

import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from limit_alarm.liveness import LivenessStore, process_alive


@pytest.fixture
def dead_pid() -> int:
    """PID of a process that has already exited."""
    process = subprocess.Popen([sys.executable, "-c", "pass"])
    process.wait()
    return process.pid


@pytest.fixture
def store(tmp_path: Path) -> LivenessStore:
    """Create a store in a temporary directory."""
    return LivenessStore(tmp_path / "state" / "alarm.pid")


class TestProcessAlive:
    """Tests for the signal-0 probe."""

    def test_current_process_is_alive(self) -> None:
        """The test process itself is alive."""
        assert process_alive(os.getpid()) is True

    def test_exited_process_is_dead(self, dead_pid: int) -> None:
        """An exited (and reaped) process is not alive."""
        assert process_alive(dead_pid) is False

    def test_non_positive_pid(self) -> None:
        """PID 0 and negatives are never treated as alive."""
        assert process_alive(0) is False
        assert process_alive(-1) is False

    def test_permission_error_means_alive(self) -> None:
        """A process owned by someone else still exists."""
        with patch("limit_alarm.liveness.os.kill", side_effect=PermissionError):
            assert process_alive(1) is True


class TestLivenessStore:
    """Tests for claim / is_active / release."""

    def test_claim_then_active(self, store: LivenessStore) -> None:
        """A claimed record for a live process is active."""
        store.claim()
        assert store.is_active() is True
        assert store.read_pid() == os.getpid()

    def test_claim_writes_decimal_pid(self, store: LivenessStore) -> None:
        """The record is the PID as decimal text."""
        store.claim(4242)
        assert store.path.read_text() == "4242"

    def test_release_then_inactive(self, store: LivenessStore) -> None:
        """After release the alarm is inactive."""
        store.claim()
        store.release()
        assert store.is_active() is False
        assert store.exists() is False

    def test_release_is_idempotent(self, store: LivenessStore) -> None:
        """Releasing twice, or with no record, is fine."""
        store.release()
        store.claim()
        store.release()
        store.release()
        assert store.exists() is False

    def test_no_record_inactive(self, store: LivenessStore) -> None:
        """No record means no alarm."""
        assert store.is_active() is False

    def test_stale_record_reaped(self, store: LivenessStore, dead_pid: int) -> None:
        """A record for a dead process is inactive and gets deleted."""
        store.claim(dead_pid)
        assert store.is_active() is False
        assert store.exists() is False
        # Reaping again is a no-op
        assert store.is_active() is False

    def test_garbage_record_reaped(self, store: LivenessStore) -> None:
        """A record that is not a PID is treated as stale."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("not-a-pid")
        assert store.is_active() is False
        assert store.exists() is False

    def test_release_with_other_owner_keeps_record(self, store: LivenessStore) -> None:
        """A process does not remove a record that names someone else."""
        store.claim(4242)
        store.release(owner=os.getpid())
        assert store.read_pid() == 4242

    def test_release_with_matching_owner(self, store: LivenessStore) -> None:
        """The owner can release its own record."""
        store.claim()
        store.release(owner=os.getpid())
        assert store.exists() is False

    def test_default_path(self, isolated_alarm_env: Path) -> None:
        """The default record lives in the config directory."""
        assert LivenessStore().path == isolated_alarm_env / "alarm.pid"


class TestTerminate:
    """Tests for stopping the recorded process."""

    def test_terminate_signals_live_process(self, store: LivenessStore) -> None:
        """A live process gets SIGTERM and the record is removed."""
        process = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
        try:
            store.claim(process.pid)
            assert store.terminate() is True
            assert process.wait(timeout=10) != 0 or os.name == "nt"
            assert store.exists() is False
        finally:
            if process.poll() is None:
                process.kill()
                process.wait()

    def test_terminate_stale_record(self, store: LivenessStore, dead_pid: int) -> None:
        """A stale record is removed without signalling anything."""
        store.claim(dead_pid)
        assert store.terminate() is False
        assert store.exists() is False
