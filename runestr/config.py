"""runestr configuration (environment + config.toml) loading."""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from runestr.constants import (
    CACHE_DIR_NAME,
    CONFIG_NAME,
    ENV_HOME,
    ENV_NO_CACHE,
    RUNESTR_HOME,
    TABLE_EXT,
)
from runestr.internals.errors import ConfigError

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class TextConfig:
    home: Path
    cache_dir: Path
    table_cache: bool = True

    def table_cache_path(self, unicode_version: str) -> Path:
        """Location of the table cache file for a given Unicode version."""
        return self.cache_dir / f"tables-{unicode_version}{TABLE_EXT}"


def load_config(environ: dict[str, str] | None = None) -> TextConfig:
    """Load configuration from the environment and <home>/config.toml.

    Environment variables win over the file: RUNESTR_HOME picks the home
    directory and a truthy RUNESTR_NO_CACHE disables the table cache.

    Raises:
        ConfigError: TE5001 if config.toml is not valid TOML, TE5002 if a
            known key has the wrong type.
    """
    if environ is None:
        environ = dict(os.environ)

    home = Path(environ[ENV_HOME]).expanduser() if environ.get(ENV_HOME) else RUNESTR_HOME
    cache_dir = home / CACHE_DIR_NAME
    table_cache = True

    config_path = home / CONFIG_NAME
    if config_path.is_file():
        tables = _load_file(config_path).get("tables", {})
        if "cache" in tables:
            table_cache = _expect(config_path, "tables.cache", tables["cache"], bool, "a boolean")
        if "cache_dir" in tables:
            raw_dir = _expect(config_path, "tables.cache_dir", tables["cache_dir"], str, "a string")
            cache_dir = Path(raw_dir).expanduser()
            if not cache_dir.is_absolute():
                cache_dir = home / cache_dir

    if environ.get(ENV_NO_CACHE, "").strip().lower() in _TRUE_VALUES:
        table_cache = False

    return TextConfig(home=home, cache_dir=cache_dir, table_cache=table_cache)


def _load_file(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError("TE5001", path=str(path), reason=str(e)) from e


def _expect(path: Path, key: str, value, kind: type, expected: str):
    if not isinstance(value, kind):
        raise ConfigError("TE5002", key=key, path=str(path),
                          expected=expected, actual=type(value).__name__)
    return value
