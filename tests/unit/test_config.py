"""Unit tests for configuration loading."""

import dataclasses
from pathlib import Path

import pytest
import yaml

from limit_alarm.config import AlarmConfig, get_config_dir, get_config_path, get_pid_path
from limit_alarm.config.loader import (
    config_to_dict,
    deep_merge,
    dict_to_config,
    load_config,
    load_yaml,
    save_config,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_simple_merge(self) -> None:
        """Test merging flat dictionaries."""
        base = {"a": 1, "b": 2}
        override = {"b": 3, "c": 4}
        result = deep_merge(base, override)
        assert result == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self) -> None:
        """Test merging nested dictionaries."""
        base = {"outer": {"a": 1, "b": 2}}
        override = {"outer": {"b": 3, "c": 4}}
        result = deep_merge(base, override)
        assert result == {"outer": {"a": 1, "b": 3, "c": 4}}

    def test_base_not_mutated(self) -> None:
        """The base mapping is left untouched."""
        base = {"a": 1}
        deep_merge(base, {"a": 2})
        assert base == {"a": 1}


class TestDefaults:
    """Tests for AlarmConfig defaults."""

    def test_hardcoded_defaults(self) -> None:
        """Defaults match the documented values."""
        config = AlarmConfig()
        assert config.display_message == "Time to build. Claude credits are back!"
        assert config.spoken_message == "Time to build. Clawed credits are back!"
        assert config.voice == "Samantha"
        assert config.rate == 165
        assert config.default_wait_minutes == 240
        assert config.scan_transcript is False
        assert config.recheck_interval_seconds == 30.0

    def test_config_is_immutable(self) -> None:
        """AlarmConfig cannot be mutated in place."""
        config = AlarmConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.rate = 200  # type: ignore[misc]


class TestDictToConfig:
    """Tests for merging raw options over defaults."""

    def test_empty_mapping_gives_defaults(self) -> None:
        """No options means all defaults."""
        assert dict_to_config({}) == AlarmConfig()

    def test_partial_override(self) -> None:
        """Present keys override, absent keys keep defaults."""
        config = dict_to_config({"rate": 200, "voice": "Alex"})
        assert config.rate == 200
        assert config.voice == "Alex"
        assert config.display_message == AlarmConfig().display_message

    def test_unknown_keys_ignored(self) -> None:
        """Keys the config does not know about are dropped."""
        config = dict_to_config({"colour": "blue", "rate": 150})
        assert config.rate == 150
        assert not hasattr(config, "colour")

    def test_camel_case_aliases(self) -> None:
        """Keys from the JSON config format are accepted."""
        config = dict_to_config(
            {"displayMessage": "Back!", "spokenMessage": "Back", "defaultWaitMinutes": 300}
        )
        assert config.display_message == "Back!"
        assert config.spoken_message == "Back"
        assert config.default_wait_minutes == 300

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("rate", "fast"),
            ("rate", 0),
            ("rate", True),
            ("default_wait_minutes", -5),
            ("default_wait_minutes", "soon"),
            ("default_wait_minutes", float("nan")),
            ("display_message", ""),
            ("display_message", 42),
            ("scan_transcript", "yes please"),
            ("transcript_tail_lines", -1),
            ("recheck_interval_seconds", 0),
            ("log_level", "LOUD"),
        ],
    )
    def test_unparsable_values_fall_back(self, key: str, value: object) -> None:
        """Values that cannot be used fall back to the default."""
        config = dict_to_config({key: value})
        assert getattr(config, key) == getattr(AlarmConfig(), key)

    def test_numeric_strings_accepted(self) -> None:
        """Numbers written as strings still parse."""
        config = dict_to_config({"rate": "180", "default_wait_minutes": "30"})
        assert config.rate == 180
        assert config.default_wait_minutes == 30.0

    def test_voice_can_be_disabled(self) -> None:
        """voice: null turns speech off."""
        assert dict_to_config({"voice": None}).voice is None

    def test_log_level_normalized(self) -> None:
        """Log level names are upper-cased."""
        assert dict_to_config({"log_level": "debug"}).log_level == "DEBUG"


class TestLoadAndSave:
    """Tests for reading and writing the config file."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """A missing config file is not an error."""
        assert load_config(tmp_path / "nope.yaml") == AlarmConfig()

    def test_malformed_yaml_gives_defaults(self, tmp_path: Path) -> None:
        """A corrupt config file falls back to defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("rate: [unterminated\n")
        assert load_config(path) == AlarmConfig()

    def test_non_mapping_gives_defaults(self, tmp_path: Path) -> None:
        """A config file that is not a mapping is ignored."""
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        assert load_yaml(path) == {}

    def test_json_content_parses(self, tmp_path: Path) -> None:
        """JSON configs from older versions load as YAML."""
        path = tmp_path / "config.yaml"
        path.write_text('{"displayMessage": "Go!", "rate": 170}')
        config = load_config(path)
        assert config.display_message == "Go!"
        assert config.rate == 170

    def test_save_round_trip(self, tmp_path: Path) -> None:
        """Saved config loads back equal."""
        path = tmp_path / "config.yaml"
        config = AlarmConfig(voice="espeak", rate=150, scan_transcript=True)
        save_config(config, path)
        assert load_config(path) == config

    def test_save_keeps_unknown_keys(self, tmp_path: Path) -> None:
        """Keys this version does not know survive a save."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"future_option": 1, "displayMessage": "Old"}))
        save_config(AlarmConfig(), path)

        with open(path) as f:
            data = yaml.safe_load(f)
        assert data["future_option"] == 1
        assert "displayMessage" not in data
        assert data == {"future_option": 1, **config_to_dict(AlarmConfig())}


class TestPaths:
    """Tests for config locations."""

    def test_env_override(self, isolated_alarm_env: Path) -> None:
        """CLAUDE_ALARM_DIR moves every file."""
        assert get_config_dir() == isolated_alarm_env
        assert get_config_path() == isolated_alarm_env / "config.yaml"
        assert get_pid_path() == isolated_alarm_env / "alarm.pid"

    def test_default_location(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Without the override the directory lives in the home directory."""
        monkeypatch.delenv("CLAUDE_ALARM_DIR")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / ".claude-alarm"
