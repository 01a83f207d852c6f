"""
Unit tests for ScribrConfig.

Tests configuration loading, saving, and defaults.
"""

import json
import logging
from dataclasses import fields
from pathlib import Path

import pytest

from domscribr.config import CONFIG_PATH, DEFAULT_CONFIG, STORE_ENV, ScribrConfig, configure_logging


class TestScribrConfigDefaults:
    """Tests for default configuration values."""

    def test_default_values(self):
        config = ScribrConfig()

        assert config.store_path == "~/.domscribr/sessions.json"
        assert config.ignore_attribute == "data-dom-scribr-ignore"
        assert config.fingerprint_text_limit == 200
        assert config.message_namespace == "domscribr"
        assert config.log_level == "WARNING"

    def test_defaults_dict_matches_dataclass(self):
        assert DEFAULT_CONFIG == ScribrConfig().__dict__

    def test_defaults_dict_covers_every_field(self):
        assert set(DEFAULT_CONFIG) == {f.name for f in fields(ScribrConfig)}

    def test_config_path(self):
        assert CONFIG_PATH == Path.home() / ".domscribr" / "config.json"


class TestScribrConfigLoad:
    """Tests for ScribrConfig.load()."""

    def test_load_without_file_returns_defaults(self, tmp_path: Path):
        config = ScribrConfig.load(path=tmp_path / "missing.json")
        assert config == ScribrConfig()

    def test_load_partial_file(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"fingerprint_text_limit": 80}))

        config = ScribrConfig.load(path=path)

        assert config.fingerprint_text_limit == 80
        assert config.message_namespace == "domscribr"

    def test_unknown_keys_ignored(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"log_level": "DEBUG", "badge_color": "#1f2937"}))

        config = ScribrConfig.load(path=path)

        assert config.log_level == "DEBUG"
        assert not hasattr(config, "badge_color")

    def test_invalid_json_returns_defaults(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text("{invalid")
        assert ScribrConfig.load(path=path) == ScribrConfig()

    def test_save_and_reload(self, tmp_path: Path):
        path = tmp_path / "sub" / "config.json"
        ScribrConfig(message_namespace="scribe", fingerprint_text_limit=50).save(path=path)

        config = ScribrConfig.load(path=path)

        assert config.message_namespace == "scribe"
        assert config.fingerprint_text_limit == 50


class TestStorePath:
    """Tests for resolved_store_path()."""

    def test_expands_user(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv(STORE_ENV, raising=False)
        path = ScribrConfig().resolved_store_path()
        assert path == Path.home() / ".domscribr" / "sessions.json"

    def test_environment_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(STORE_ENV, str(tmp_path / "env.json"))
        assert ScribrConfig().resolved_store_path() == tmp_path / "env.json"


def test_configure_logging_accepts_names(monkeypatch: pytest.MonkeyPatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging("debug")
    configure_logging("not-a-level")

    assert calls[0]["level"] == logging.DEBUG
    assert calls[1]["level"] == logging.WARNING
