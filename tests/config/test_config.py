"""
Tests for configuration loading and validation.
"""

import pytest
import yaml

from deadline_config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    get_active_config,
    load_config,
)
from deadline_config.loader import compute_checksum, parse_config, parse_engine_settings
from deadline_config.schema import DatabaseSettings, EngineSettings
from deadline_kernel.domain.values import MonthMode


def write_config(tmp_path, text, name="config.yaml"):
    path = tmp_path / name
    path.write_text(text)
    return path


class TestDefaults:

    def test_packaged_defaults_match_schema(self):
        config = load_config(DEFAULT_CONFIG_PATH)

        assert config.config_id == "deadline-defaults"
        assert config.version == 1
        assert config.engine == EngineSettings()
        assert config.database == DatabaseSettings()

    def test_minimal_document_uses_schema_defaults(self):
        config = parse_config({"config_id": "minimal"})

        assert config.version == 1
        assert config.engine.max_consecutive_skips == 366
        assert config.engine.month_mode == MonthMode.APPROXIMATE
        assert config.engine.bulk_max_items == 100

    def test_missing_config_id(self):
        with pytest.raises(KeyError):
            parse_config({"version": 1})


class TestEngineSettings:

    def test_month_mode_is_case_insensitive(self):
        assert parse_engine_settings({"month_mode": "CALENDAR"}).month_mode == MonthMode.CALENDAR

    def test_log_level_is_normalised(self):
        assert parse_engine_settings({"log_level": "debug"}).log_level == "DEBUG"

    @pytest.mark.parametrize("data,fragment", [
        ({"month_mode": "lunar"}, "month_mode"),
        ({"log_level": "LOUD"}, "log_level"),
        ({"max_consecutive_skips": 0}, "max_consecutive_skips"),
        ({"max_consecutive_skips": "many"}, "max_consecutive_skips"),
        ({"max_consecutive_skips": True}, "max_consecutive_skips"),
        ({"holiday_fetch_timeout_seconds": -1}, "holiday_fetch_timeout_seconds"),
        ({"bulk_min_items": 10, "bulk_max_items": 5}, "bulk_min_items"),
    ])
    def test_rejects_invalid_values(self, data, fragment):
        with pytest.raises(ValueError, match=fragment):
            parse_engine_settings(data)

    def test_timeout_accepts_integers(self):
        assert parse_engine_settings({"holiday_fetch_timeout_seconds": 2}).holiday_fetch_timeout_seconds == 2.0


class TestLoadConfig:

    def test_load_from_file(self, tmp_path):
        path = write_config(tmp_path, (
            "config_id: strict\n"
            "version: 3\n"
            "engine:\n"
            "  max_consecutive_skips: 30\n"
            "  month_mode: calendar\n"
            "database:\n"
            "  url: postgresql://localhost/deadlines\n"
        ))

        config = load_config(path)

        assert config.version == 3
        assert config.engine.max_consecutive_skips == 30
        assert config.engine.month_mode == MonthMode.CALENDAR
        assert config.database.url == "postgresql://localhost/deadlines"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = write_config(tmp_path, "engine: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_config(path)

    def test_document_must_be_mapping(self, tmp_path):
        path = write_config(tmp_path, "- just\n- a list\n")

        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    def test_checksum_is_deterministic(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})


class TestGetActiveConfig:

    def test_defaults_without_override(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

        assert get_active_config().config_id == "deadline-defaults"

    def test_environment_variable(self, monkeypatch, tmp_path):
        path = write_config(tmp_path, "config_id: from-env\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert get_active_config().config_id == "from-env"

    def test_explicit_path_wins_over_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(write_config(tmp_path, "config_id: from-env\n", "env.yaml")))
        explicit = write_config(tmp_path, "config_id: explicit\n", "explicit.yaml")

        assert get_active_config(explicit).config_id == "explicit"

    def test_emits_config_trace(self, monkeypatch, captured_logs):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

        config = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "DEADLINE_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["config_id"] == "deadline-defaults"
        assert traces[0]["checksum"] == config.checksum
        assert traces[0]["month_mode"] == "approximate"
        assert traces[0]["source"] == str(DEFAULT_CONFIG_PATH)
