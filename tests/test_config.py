"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from meetcal.config import AppConfig, EngineConfig


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.grace_minutes == 5
        assert config.min_range_days == 10
        assert config.default_durations == [15]
        assert config.hub_window_days == 8
        assert config.page_span_days == 7

    def test_durations_must_be_multiples_of_fifteen(self):
        with pytest.raises(ValidationError):
            EngineConfig(default_durations=[15, 20])

    def test_durations_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            EngineConfig(default_durations=[])

    def test_day_counts_must_be_positive(self):
        with pytest.raises(ValidationError):
            EngineConfig(hub_window_days=0)

    def test_negative_grace(self):
        with pytest.raises(ValidationError):
            EngineConfig(grace_minutes=-1)


class TestAppConfig:
    """Tests for AppConfig."""

    def test_load_from_yaml(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "engine:\n"
            "  grace_minutes: 10\n"
            "  default_durations: [30, 60]\n"
            "display_timezone: Europe/Berlin\n"
            "data_file: data.yaml\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.engine.grace_minutes == 10
        assert config.engine.default_durations == [30, 60]
        assert config.engine.min_range_days == 10
        assert config.display_timezone == "Europe/Berlin"
        assert config.data_file == tmp_path / "data.yaml"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_non_mapping_root(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError):
            AppConfig.load_from_yaml(config_path)

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError):
            AppConfig(display_timezone="Mars/Olympus_Mons")

    def test_data_file_override_wins(self, tmp_path: Path):
        config = AppConfig(data_file=tmp_path / "configured.yaml")

        assert config.resolve_data_file(tmp_path / "other.yaml") == tmp_path / "other.yaml"
        assert config.resolve_data_file() == tmp_path / "configured.yaml"

    def test_no_data_file(self):
        with pytest.raises(ValueError):
            AppConfig().resolve_data_file()
