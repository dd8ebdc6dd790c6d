"""
Tests for settings resolution: environment > YAML file > defaults.
"""

from zoneinfo import ZoneInfo

import pytest

from taskledger import paths
from taskledger.config import Settings, get_settings, load_settings, reset_settings
from taskledger.errors import ConfigError


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "taskledger.yaml"
    monkeypatch.setenv("TASKLEDGER_CONFIG", str(path))
    return path


def test_defaults(isolated_home):
    settings = load_settings()
    assert settings.report_timezone == "UTC"
    assert settings.report_period_days == 7
    assert settings.report_task_limit == 100
    assert settings.cors_origin_list == ["*"]
    assert settings.db_path == str(isolated_home.resolve() / "data" / "taskledger.db")


def test_yaml_values(config_file):
    config_file.write_text("report_timezone: America/New_York\nreport_task_limit: 20\n")
    settings = load_settings()
    assert settings.report_tz == ZoneInfo("America/New_York")
    assert settings.report_task_limit == 20


def test_environment_beats_yaml(config_file, monkeypatch):
    config_file.write_text("report_period_days: 14\nlog_json: false\n")
    monkeypatch.setenv("TASKLEDGER_REPORT_PERIOD", "30")
    monkeypatch.setenv("TASKLEDGER_LOG_JSON", "yes")
    settings = load_settings()
    assert settings.report_period_days == 30
    assert settings.log_json is True


def test_db_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(paths.APP_ENV_DB, str(tmp_path / "other.db"))
    assert load_settings().db_path == str(tmp_path / "other.db")


def test_unknown_keys_are_ignored(config_file):
    config_file.write_text("report_task_limit: 5\nfavourite_colour: green\n")
    assert load_settings().report_task_limit == 5


@pytest.mark.parametrize("content", ["report_task_limit: [1\n", "- just\n- a list\n"])
def test_invalid_yaml(config_file, content):
    config_file.write_text(content)
    with pytest.raises(ConfigError):
        load_settings()


def test_invalid_env_value(monkeypatch):
    monkeypatch.setenv("TASKLEDGER_REPORT_TASK_LIMIT", "lots")
    with pytest.raises(ConfigError):
        load_settings()


def test_unknown_timezone():
    settings = Settings(db_path="x.db", report_timezone="Mars/Olympus")
    with pytest.raises(ConfigError):
        _ = settings.report_tz


def test_cors_origin_list():
    settings = Settings(db_path="x.db", cors_origins="http://a.test, http://b.test,")
    assert settings.cors_origin_list == ["http://a.test", "http://b.test"]


def test_get_settings_is_cached_until_reset(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("TASKLEDGER_REPORT_PERIOD", "21")
    assert get_settings() is first
    reset_settings()
    assert get_settings().report_period_days == 21
