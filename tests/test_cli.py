"""
Tests for the Typer command line interface.
"""

from pathlib import Path

import pendulum
import pytest
from typer.testing import CliRunner

import meetcal.cli.app as cli_app
from meetcal.cli.app import app
from meetcal.services.calendar_service import CalendarService

runner = CliRunner()


def _iso(value) -> str:
    return value.to_iso8601_string()


@pytest.fixture
def event_day():
    return pendulum.now("UTC").start_of("day").add(days=3)


@pytest.fixture
def config_file(tmp_path: Path, event_day) -> Path:
    data_path = tmp_path / "data.yaml"
    data_path.write_text(
        "events:\n"
        "  expo:\n"
        f"    - start: \"{_iso(event_day.add(hours=8))}\"\n"
        f"      end: \"{_iso(event_day.add(hours=18))}\"\n"
        "profiles:\n"
        "  - contact_id: alice\n"
        "    primary: true\n"
        "    durations: [30]\n"
        "    slots:\n"
        "      - day: every_day\n"
        "        start_time: \"09:00\"\n"
        "        end_time: \"12:00\"\n",
        encoding="utf-8",
    )

    config_path = tmp_path / "config.yaml"
    config_path.write_text("data_file: data.yaml\n", encoding="utf-8")
    return config_path


class TestAvailabilityCommand:
    """Tests for `meetcal availability`."""

    def test_event_hub(self, config_file: Path):
        result = runner.invoke(app, ["availability", "--event", "expo", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "1 available interval(s)" in result.output

    def test_with_recurring_profile(self, config_file: Path):
        result = runner.invoke(
            app,
            ["availability", "-e", "expo", "--contact", "alice", "--config", str(config_file)],
        )

        assert result.exit_code == 0, result.output
        assert "09:00" in result.output
        assert "12:00" in result.output

    def test_meeting_hub(self, config_file: Path):
        result = runner.invoke(app, ["availability", "--meeting-hub", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "available interval(s)" in result.output

    def test_missing_event(self, config_file: Path):
        result = runner.invoke(app, ["availability", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Event id (event-id) is must" in result.output

    def test_errors_use_requested_language(self, config_file: Path, monkeypatch):
        def build_service(config, store):
            return CalendarService(
                event_source=store,
                group_directory=store,
                record_store=store,
                profile_repository=store,
                table_availability=store,
                engine_config=config.engine,
                translator=lambda key, language: f"{language}:{key}",
            )

        monkeypatch.setattr(cli_app, "_build_service", build_service)

        result = runner.invoke(app, ["availability", "--language", "de", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "de:Event id (event-id) is must" in result.output

    def test_invalid_duration(self, config_file: Path):
        result = runner.invoke(app, ["availability", "-e", "expo", "-d", "20", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_data_file(self, tmp_path: Path):
        result = runner.invoke(app, ["availability", "-e", "expo", "--data", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "Data file not found" in result.output


class TestValidateMeetingCommand:
    """Tests for `meetcal validate-meeting`."""

    def test_inside_window(self, config_file: Path, event_day):
        result = runner.invoke(
            app,
            [
                "validate-meeting",
                "--event", "expo",
                "--start", _iso(event_day.add(hours=9)),
                "--end", _iso(event_day.add(hours=10)),
                "--config", str(config_file),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Timestamp is overlapped" in result.output

    def test_outside_window(self, config_file: Path, event_day):
        result = runner.invoke(
            app,
            [
                "validate-meeting",
                "--event", "expo",
                "--start", _iso(event_day.add(hours=20)),
                "--end", _iso(event_day.add(hours=21)),
                "--config", str(config_file),
            ],
        )

        assert result.exit_code == 1
        assert "not overlapping" in result.output

    def test_unknown_event(self, config_file: Path, event_day):
        result = runner.invoke(
            app,
            [
                "validate-meeting",
                "--event", "nope",
                "--start", _iso(event_day.add(hours=9)),
                "--end", _iso(event_day.add(hours=10)),
                "--config", str(config_file),
            ],
        )

        assert result.exit_code == 1
        assert "Event Not found" in result.output


class TestProfilesCommand:
    """Tests for `meetcal profiles`."""

    def test_lists_profiles_and_common_slots(self, config_file: Path):
        result = runner.invoke(app, ["profiles", "alice", "--common", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "alice" in result.output
        assert "Common slots" in result.output
        assert "Mon 09:00 - 12:00" in result.output
        assert "Sun 09:00 - 12:00" in result.output

    def test_unknown_contact(self, config_file: Path):
        result = runner.invoke(app, ["profiles", "nobody", "--config", str(config_file)])

        assert result.exit_code == 0
        assert "No profiles found" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "meetcal" in result.output
