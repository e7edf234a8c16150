"""Pydantic settings for the bot core.

Values come from the ``[bot]`` table of a TOML file; keys the file leaves out
can be supplied with environment variables (TWEETSPY__SEARCH_RESULTS, etc.).
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__
from .config_store import CONFIG_SECTION, read_raw_toml
from .logging import get_logger

logger = get_logger(__name__)


class ConfigError(RuntimeError):
    """Configuration error."""

    pass


class BotSettings(BaseSettings):
    """Runtime settings consumed by the built-in commands and queues."""

    model_config = SettingsConfigDict(
        env_prefix="TWEETSPY__",
        env_nested_delimiter="__",
        extra="ignore",
    )

    version: str = __version__
    project_url: str = "https://github.com/dustin/twitterspy"
    search_help_url: str = "https://twitter.com/search-advanced"
    contact: str | None = None
    post_source: str = "tweetspy"

    # Format strings for links sent back to users
    status_url: str = "https://twitter.com/{username}/statuses/{status_id}"
    profile_url: str = "https://twitter.com/{username}"

    search_results: int = Field(default=2, ge=1)
    whois_recent: int = Field(default=3, ge=0)
    top_tracks_limit: int = Field(default=10, ge=1)

    interactive_workers: int = Field(default=1, ge=1)
    network_workers: int = Field(default=1, ge=1)


def default_config() -> dict[str, Any]:
    """Return the TOML document written by ``tweetspy init``."""
    defaults = BotSettings.model_construct()
    return {
        CONFIG_SECTION: {
            "project_url": defaults.project_url,
            "search_results": defaults.search_results,
            "whois_recent": defaults.whois_recent,
            "interactive_workers": defaults.interactive_workers,
            "network_workers": defaults.network_workers,
        }
    }


def load_settings(path: Path | None = None) -> BotSettings:
    """Load settings from a TOML file.

    A missing file (or no path at all) yields defaults plus environment
    overrides.

    Raises:
        ConfigError: If the file is not valid TOML or fails validation.
    """
    data: dict[str, Any] = {}
    if path is not None and path.exists():
        try:
            raw = read_raw_toml(path)
        except tomllib.TOMLDecodeError as e:
            logger.error("settings.load_failed", path=str(path), error=str(e))
            raise ConfigError(f"Malformed config {path}: {e}") from e
        section = raw.get(CONFIG_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigError(f"[{CONFIG_SECTION}] in {path} must be a table")
        data = section

    try:
        return BotSettings(**data)
    except ValidationError as e:
        logger.error("settings.validation_failed", path=str(path), error=str(e))
        raise ConfigError(f"Invalid config: {e}") from e
