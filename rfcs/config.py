"""Configuration file loading and persistence."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from rfcs.schemas import Config, ConfigKey, GitSettings

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"

# Config written by earlier releases, migrated on first load
LEGACY_CONFIG_FILENAME = "config.toml"


class ConfigError(Exception):
    """Raised when the configuration cannot be read or updated."""

    pass


def default_config_dir() -> Path:
    """Directory holding the config file and any cloned repository."""
    return Path.home() / ".config" / "rfcs"


def default_config_path() -> Path:
    return default_config_dir() / CONFIG_FILENAME


def write_config(config: Config, path: Path) -> None:
    """Write config to path, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2) + "\n")
    logger.debug(f"Wrote config to {path}")


def _load_legacy_config(path: Path) -> Config | None:
    """Read a TOML config left by earlier releases, if there is one."""
    try:
        data = tomllib.loads(path.read_text())
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot migrate legacy config file {path}: {e}") from e

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid legacy config file {path}: {e}") from e

    logger.info(f"Migrating legacy config from {path}")
    return config


def load_config(path: Path) -> Config:
    """Load the config file, writing a default one if it does not exist yet.

    A missing file is first looked for in its legacy TOML form next to it,
    and migrated when found.

    Raises:
        ConfigError: If the file cannot be read or is not a valid config
    """
    try:
        content = path.read_text()
    except FileNotFoundError:
        config = _load_legacy_config(path.with_name(LEGACY_CONFIG_FILENAME))
        if config is None:
            logger.info(f"No config at {path}, writing defaults")
            config = Config()
        write_config(config, path)
        return config
    except OSError as e:
        raise ConfigError(f"Unexpected error when reading config file from {path}: {e}") from e

    try:
        return Config.model_validate_json(content)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def set_config_value(config: Config, key: str, value: str) -> Config:
    """Return a copy of config with key set to value.

    Raises:
        ConfigError: If key is not a known configuration key
    """
    try:
        config_key = ConfigKey(key)
    except ValueError:
        known = ", ".join(k.value for k in ConfigKey)
        raise ConfigError(f"Unknown configuration key '{key}', known keys: {known}") from None

    git = config.git or GitSettings()
    if config_key == ConfigKey.GIT_URL:
        git = git.model_copy(update={"url": value})
    else:
        git = git.model_copy(update={"repo": Path(value).expanduser()})

    return config.model_copy(update={"git": git})
