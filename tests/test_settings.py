"""Tests for tweetspy.settings module."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomlkit

from tweetspy.config_store import CONFIG_FILE, read_raw_toml, write_raw_toml
from tweetspy.settings import BotSettings, ConfigError, default_config, load_settings


def _write_config(data: dict, tmp_path: Path) -> Path:
    """Helper to write config dict to TOML file."""
    config_path = tmp_path / CONFIG_FILE
    config_path.write_text(tomlkit.dumps(data))
    return config_path


class TestBotSettings:
    """Tests for BotSettings model."""

    def test_defaults(self) -> None:
        settings = BotSettings()
        assert settings.search_results == 2
        assert settings.whois_recent == 3
        assert settings.top_tracks_limit == 10
        assert settings.interactive_workers == 1
        assert settings.network_workers == 1
        assert settings.contact is None

    def test_url_templates_format(self) -> None:
        settings = BotSettings()
        assert settings.status_url.format(username="bob", status_id=5) == (
            "https://twitter.com/bob/statuses/5"
        )
        assert settings.profile_url.format(username="bob") == "https://twitter.com/bob"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TWEETSPY__NETWORK_WORKERS", "4")
        assert BotSettings().network_workers == 4

    def test_workers_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            BotSettings(network_workers=0)


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_no_path_gives_defaults(self) -> None:
        assert load_settings(None).search_results == 2

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "nope.toml").whois_recent == 3

    def test_reads_bot_table(self, tmp_path: Path) -> None:
        path = _write_config(
            {"bot": {"search_results": 5, "contact": "me@example.com"}}, tmp_path
        )
        settings = load_settings(path)
        assert settings.search_results == 5
        assert settings.contact == "me@example.com"

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        path = _write_config({"bot": {"search_results": 0}}, tmp_path)
        with pytest.raises(ConfigError, match="Invalid config"):
            load_settings(path)

    def test_malformed_toml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILE
        path.write_text("[bot\nsearch_results = ")
        with pytest.raises(ConfigError, match="Malformed"):
            load_settings(path)

    def test_bot_must_be_table(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILE
        path.write_text('bot = "nope"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_settings(path)


class TestConfigStore:
    """Tests for raw TOML round trips."""

    def test_default_config_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / CONFIG_FILE
        write_raw_toml(default_config(), path)
        data = read_raw_toml(path)
        assert data["bot"]["search_results"] == 2
        assert load_settings(path).network_workers == 1
