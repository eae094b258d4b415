"""Unit tests for config.py"""

import pytest

from mddata.config import load_config


def test_load_config_defaults():
    """Settings defaults are used when no config.yaml, env var, or CLI override exists."""
    settings = load_config()
    assert settings.url_base == ""
    assert settings.numbered is False
    assert settings.max_key_length == 64
    assert settings.output_dir == "dist"


def test_load_config_uses_env_url_base(monkeypatch):
    """MDDATA_URL_BASE env var is picked up by load_config."""
    monkeypatch.setenv("MDDATA_URL_BASE", "/docs")
    settings = load_config()
    assert settings.url_base == "/docs"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDDATA_URL_BASE takes precedence over config.yaml url_base."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("url_base: '/project'\n")
    monkeypatch.setenv("MDDATA_URL_BASE", "/override")
    settings = load_config()
    assert settings.url_base == "/override"


def test_load_config_reads_config_yaml(tmp_path, monkeypatch):
    """Values in config.yaml are applied."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("numbered: true\noutput_format: yaml\n")
    settings = load_config()
    assert settings.numbered is True
    assert settings.output_format == "yaml"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var."""
    monkeypatch.setenv("MDDATA_URL_BASE", "/env")
    settings = load_config(overrides={"url_base": "/cli"})
    assert settings.url_base == "/cli"


def test_load_config_none_override_ignored(monkeypatch):
    """None overrides leave lower layers in place."""
    monkeypatch.setenv("MDDATA_URL_BASE", "/env")
    settings = load_config(overrides={"url_base": None})
    assert settings.url_base == "/env"


def test_load_config_invalid_yaml(tmp_path, monkeypatch):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


# --- generalized env var pattern ---

def test_load_config_env_max_key_length(monkeypatch):
    """MDDATA_MAX_KEY_LENGTH env var is coerced to int and applied to settings."""
    monkeypatch.setenv("MDDATA_MAX_KEY_LENGTH", "12")
    settings = load_config()
    assert settings.max_key_length == 12


def test_load_config_env_numbered(monkeypatch):
    """MDDATA_NUMBERED env var is coerced to bool."""
    monkeypatch.setenv("MDDATA_NUMBERED", "true")
    settings = load_config()
    assert settings.numbered is True


def test_load_config_env_overrides_config_yaml_max_key_length(tmp_path, monkeypatch):
    """MDDATA_MAX_KEY_LENGTH env var takes precedence over config.yaml."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("max_key_length: 40\n")
    monkeypatch.setenv("MDDATA_MAX_KEY_LENGTH", "20")
    settings = load_config()
    assert settings.max_key_length == 20


@pytest.mark.parametrize("name,value", [
    ("MDDATA_OUTPUT_FORMAT", "pdf"),
    ("MDDATA_MAX_KEY_LENGTH", "0"),
    ("MDDATA_LOG_LEVEL", "LOUD"),
])
def test_load_config_rejects_invalid_values(monkeypatch, name, value):
    """Out-of-range settings fail validation (pydantic ValidationError is a ValueError)."""
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_config()
