"""Config file loading.

Default removal options can be stored in ~/.config/rimraf/config.toml:

    max_retries = 5
    emfile_wait = 2000
    glob = { recursive = true }

Only the tunables listed in CONFIG_KEYS may appear in the file.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from rimraf.core.options import CONFIG_KEYS, RimrafOptions
from rimraf.core.paths import get_config_path

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base exception for config file errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None, **overrides: Any) -> RimrafOptions:
    """Load removal options from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.
        **overrides: Option values that take precedence over the file.

    Returns:
        Validated RimrafOptions.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    unknown = sorted(set(data) - CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

    logger.debug("Loaded config from %s", config_path)
    try:
        return RimrafOptions.model_validate({**data, **overrides})
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None, **overrides: Any) -> RimrafOptions:
    """Load removal options, falling back to defaults when no file exists.

    An explicitly given path that does not exist is still an error.

    Args:
        path: Explicit config file path, or None for the default location.
        **overrides: Option values that take precedence over the file.

    Returns:
        Validated RimrafOptions.

    Raises:
        ConfigError: If the file exists but is invalid, or if an explicit
            path does not exist.
    """
    try:
        return load_config(path, **overrides)
    except ConfigNotFoundError:
        if path is not None:
            raise
    try:
        return RimrafOptions.model_validate(overrides)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid options: {e}") from e
