"""
Tests for timesheet_config.

Covers:
- The packaged defaults
- Resolution through $TIMESHEET_CONFIG
- Rejection of unknown keys and wrongly typed values
- Seed file loading
"""

from decimal import Decimal

import pytest
import yaml

from timesheet_config import (
    CONFIG_ENV_VAR,
    DEFAULTS_PATH,
    TimesheetSettings,
    get_active_config,
    load_seed_file,
    parse_settings,
)


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data))
    return path


class TestActiveConfig:

    def test_packaged_defaults(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        settings = get_active_config()
        assert settings.workday.hours_per_day == Decimal("8")
        assert settings.workflow.enforce_transitions is False
        assert settings.database.url.startswith("sqlite")
        assert settings.logging.level == "INFO"
        assert settings.source == str(DEFAULTS_PATH)

    def test_defaults_match_schema(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        loaded = get_active_config()
        expected = TimesheetSettings()
        assert loaded.workday == expected.workday
        assert loaded.workflow == expected.workflow
        assert loaded.database == expected.database

    def test_env_var_points_at_file(self, tmp_path, monkeypatch):
        path = _write(tmp_path, "strict.yaml", {
            "workday": {"hours_per_day": 7.5},
            "workflow": {"enforce_transitions": True},
        })
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        settings = get_active_config()
        assert settings.workday.hours_per_day == Decimal("7.5")
        assert settings.workflow.enforce_transitions is True
        assert settings.source == str(path)

    def test_explicit_path_wins_over_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yaml"))
        path = _write(tmp_path, "explicit.yaml", {"logging": {"level": "debug"}})
        assert get_active_config(path).logging.level == "DEBUG"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "missing.yaml")

    def test_load_is_logged(self, captured_logs, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        get_active_config()
        assert any(r["message"] == "timesheet_config_loaded" for r in captured_logs())


class TestParseSettings:

    def test_empty_document_is_defaults(self):
        assert parse_settings({}) == TimesheetSettings()

    @pytest.mark.parametrize(
        "data",
        [
            {"payroll": {}},
            {"workday": {"hours_per_week": 40}},
            {"workday": {"hours_per_day": 0}},
            {"workday": {"hours_per_day": "eight"}},
            {"workday": {"hours_per_day": True}},
            {"workflow": {"enforce_transitions": "yes"}},
            {"database": {"url": ""}},
            {"database": {"echo": 1}},
            {"logging": {"level": "LOUD"}},
            {"workday": [8]},
        ],
    )
    def test_invalid_documents_rejected(self, data):
        with pytest.raises(ValueError):
            parse_settings(data)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            get_active_config(path)


class TestSeedFile:

    def test_sections_default_to_empty_lists(self, tmp_path):
        path = _write(tmp_path, "seed.yaml", {
            "customers": [{"name": "Acme"}],
        })
        seed = load_seed_file(path)
        assert seed["customers"] == [{"name": "Acme"}]
        assert seed["time_entries"] == []
        assert set(seed) == {
            "users", "customers", "projects", "week_statuses", "time_entries",
        }

    def test_unknown_section_rejected(self, tmp_path):
        path = _write(tmp_path, "seed.yaml", {"invoices": []})
        with pytest.raises(ValueError):
            load_seed_file(path)

    def test_section_must_be_list(self, tmp_path):
        path = _write(tmp_path, "seed.yaml", {"users": {"name": "Ada"}})
        with pytest.raises(ValueError):
            load_seed_file(path)
