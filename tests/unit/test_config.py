"""Unit tests for config.py"""

import pytest
from pydantic import ValidationError

from streampub.config import load_config


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Run each test away from any project config.yaml and STREAMPUB_ env vars."""
    monkeypatch.chdir(tmp_path)
    for name in ("DB_URL", "CHUNK_SIZE", "OUTPUT_FORMAT", "VISUAL_SLOTS", "RENDER_INTERVAL"):
        monkeypatch.delenv(f"STREAMPUB_{name}", raising=False)


def test_load_config_defaults():
    """Settings defaults apply when no config.yaml, env var, or CLI override exists."""
    settings = load_config()
    assert settings.db_url == "sqlite:///streampub.db"
    assert settings.chunk_size == 64
    assert settings.visual_slots == 3
    assert settings.output_format == "json"
    assert settings.render_interval == 0.0


def test_load_config_uses_env_db_url(monkeypatch):
    """STREAMPUB_DB_URL env var is picked up by load_config."""
    monkeypatch.setenv("STREAMPUB_DB_URL", "sqlite:///env.db")
    assert load_config().db_url == "sqlite:///env.db"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """An env var takes precedence over config.yaml."""
    (tmp_path / "config.yaml").write_text("chunk_size: 16\noutput_format: md\n")
    monkeypatch.setenv("STREAMPUB_CHUNK_SIZE", "8")
    settings = load_config()
    assert settings.chunk_size == 8
    assert settings.output_format == "md"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("STREAMPUB_OUTPUT_FORMAT", "md")
    settings = load_config(overrides={"output_format": "html", "chunk_size": None})
    assert settings.output_format == "html"
    assert settings.chunk_size == 64


def test_load_config_env_coerces_numbers(monkeypatch):
    """Numeric env vars are coerced by the settings model."""
    monkeypatch.setenv("STREAMPUB_VISUAL_SLOTS", "2")
    monkeypatch.setenv("STREAMPUB_RENDER_INTERVAL", "0.25")
    settings = load_config()
    assert settings.visual_slots == 2
    assert settings.render_interval == 0.25


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


@pytest.mark.parametrize("overrides", [
    {"output_format": "pdf"},
    {"visual_slots": 4},
    {"chunk_size": 0},
    {"log_level": "LOUD"},
])
def test_load_config_rejects_invalid_values(overrides):
    """Out-of-range settings fail validation."""
    with pytest.raises(ValidationError):
        load_config(overrides=overrides)
