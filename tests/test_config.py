import pytest

from autoapply.config import (
    SETTINGS_PATH,
    Credentials,
    Settings,
    env_int,
    load_credentials,
    load_settings,
    validate,
)
from autoapply.errors import ConfigError


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "nope.yaml")
    assert settings.check_interval_ms == 30_000
    assert settings.max_applications_per_hour == 10
    assert settings.min_budget == 0
    assert settings.skills_filter == []


def test_shipped_settings_file_is_valid():
    settings = load_settings(SETTINGS_PATH)
    assert "python" in settings.skills_filter
    assert settings.apply_delay_ms < settings.check_interval_ms


def test_yaml_values_are_loaded(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "check_interval_ms: 60000\n"
        "max_applications_per_hour: 5\n"
        "skills_filter: [Python, ' React ']\n"
        "min_budget: 100\n"
        "synonyms:\n  react: [React, JSX]\n"
        "something_else: 1\n",
        encoding="utf-8",
    )
    settings = load_settings(path)
    criteria = settings.criteria()

    assert settings.max_applications_per_hour == 5
    assert criteria.skills_filter == frozenset({"python", "react"})
    assert criteria.synonyms == {"react": frozenset({"react", "jsx"})}
    assert criteria.min_budget == 100


@pytest.mark.parametrize(
    "overrides",
    [
        {"min_budget": -1},
        {"max_applications_per_hour": 0},
        {"check_interval_ms": 0},
        {"apply_delay_ms": 30_000},
        {"check_interval_ms": "fast"},
        {"card_selectors": []},
    ],
)
def test_invalid_values_raise(overrides):
    with pytest.raises(ConfigError):
        validate(Settings(**overrides))


def test_non_mapping_file_raises(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(path)


def test_credentials_from_env(monkeypatch):
    monkeypatch.setenv("CODEMENTOR_EMAIL", "me@example.com")
    monkeypatch.setenv("CODEMENTOR_PASSWORD", "s3cret")
    creds = load_credentials()
    assert creds == Credentials("me@example.com", "s3cret")
    assert "s3cret" not in repr(creds)


def test_missing_credentials(monkeypatch):
    monkeypatch.delenv("CODEMENTOR_EMAIL", raising=False)
    monkeypatch.setenv("CODEMENTOR_PASSWORD", "s3cret")
    assert load_credentials() is None


def test_env_int(monkeypatch):
    monkeypatch.setenv("SLOW_MO_MS", "250")
    assert env_int("SLOW_MO_MS") == 250
    monkeypatch.setenv("SLOW_MO_MS", "slow")
    with pytest.raises(ConfigError):
        env_int("SLOW_MO_MS")
