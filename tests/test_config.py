"""Tests for settings resolution."""

import pytest

from cursor_templates.config import CONFIG_FILE, HOME_ENV_VAR, load_settings
from cursor_templates.errors import ConfigurationError


def test_defaults_resolve_against_home(tmp_path):
    settings = load_settings(tmp_path)
    assert settings.home == tmp_path.resolve()
    assert settings.templates_dir == tmp_path.resolve() / "templates"
    assert settings.registry_file.name == "registry.json"
    assert settings.ratings_file.name == "ratings.json"
    assert settings.quality_report.name == "quality-metrics.json"
    assert settings.validation_report.name == "template-test-report.json"


def test_home_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path))
    assert load_settings().home == tmp_path.resolve()


def test_explicit_home_wins(tmp_path, monkeypatch):
    monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path / "env"))
    assert load_settings(tmp_path).home == tmp_path.resolve()


def test_home_defaults_to_cwd(tmp_path, monkeypatch):
    monkeypatch.delenv(HOME_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    assert load_settings().home == tmp_path.resolve()


def test_yaml_overrides(tmp_path):
    absolute = tmp_path / "elsewhere" / "ratings.json"
    (tmp_path / CONFIG_FILE).write_text(
        f"templates_dir: library\nratings_file: {absolute}\nunknown_key: 1\n",
        encoding="utf-8",
    )
    settings = load_settings(tmp_path)
    assert settings.templates_dir == tmp_path.resolve() / "library"
    assert settings.ratings_file == absolute
    assert settings.registry_file == tmp_path.resolve() / "registry.json"


def test_empty_config_file(tmp_path):
    (tmp_path / CONFIG_FILE).write_text("", encoding="utf-8")
    assert load_settings(tmp_path).templates_dir.name == "templates"


def test_malformed_yaml(tmp_path):
    (tmp_path / CONFIG_FILE).write_text("templates_dir: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_settings(tmp_path)


def test_non_mapping_yaml(tmp_path):
    (tmp_path / CONFIG_FILE).write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="mapping"):
        load_settings(tmp_path)
