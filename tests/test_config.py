"""
Tests for user configuration.
"""

import json

import pytest

from dispatch_sim.interface.config import (
    DEFAULT_CONFIG,
    get_config_path,
    load_config,
    parse_value,
    save_config,
    set_option,
)


class TestConfig:
    """Tests for loading and saving settings."""

    def test_defaults_when_missing(self, tmp_path):
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_defaults_not_shared(self, tmp_path):
        config = load_config(tmp_path)
        config["tick_interval"] = 99
        assert DEFAULT_CONFIG["tick_interval"] == 1.0

    def test_save_and_load(self, tmp_path):
        config = load_config(tmp_path)
        config["time_scale_ms"] = 250
        assert save_config(config, tmp_path)
        assert load_config(tmp_path)["time_scale_ms"] == 250

    def test_unknown_keys_dropped(self, tmp_path):
        get_config_path(tmp_path).write_text(
            json.dumps({"tick_interval": 0.5, "colour": "mauve"}), encoding="utf-8"
        )
        config = load_config(tmp_path)
        assert config["tick_interval"] == 0.5
        assert "colour" not in config
        assert config["enforce_team_limits"] is True

    def test_corrupt_file(self, tmp_path):
        get_config_path(tmp_path).write_text("{{{", encoding="utf-8")
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_set_option(self, tmp_path):
        config = set_option("enforce_team_limits", "off", tmp_path)
        assert config["enforce_team_limits"] is False
        assert load_config(tmp_path)["enforce_team_limits"] is False


class TestParseValue:
    """Tests for command-line value conversion."""

    def test_numbers(self):
        assert parse_value("time_scale_ms", "500") == 500.0
        assert parse_value("completion_display_ms", "2.5") == 2.5

    @pytest.mark.parametrize("raw,expected", [("yes", True), ("TRUE", True), ("0", False), ("off", False)])
    def test_booleans(self, raw, expected):
        assert parse_value("enforce_team_limits", raw) is expected

    def test_bad_boolean(self):
        with pytest.raises(ValueError):
            parse_value("enforce_team_limits", "maybe")

    def test_bad_number(self):
        with pytest.raises(ValueError):
            parse_value("tick_interval", "soon")

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            parse_value("volume", "11")
