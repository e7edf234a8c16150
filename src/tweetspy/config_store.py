"""Raw TOML configuration I/O utilities.

Separates file I/O from validation so settings can be loaded and written
without going through pydantic.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import tomlkit

CONFIG_FILE = "tweetspy.toml"
CONFIG_SECTION = "bot"


def read_raw_toml(path: Path) -> dict[str, Any]:
    """Read raw TOML data from a file.

    Raises:
        FileNotFoundError: If the file does not exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    with open(path, "rb") as f:
        return tomllib.load(f)


def write_raw_toml(data: dict[str, Any], path: Path) -> None:
    """Write raw TOML data to a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomlkit.dumps(data))
