"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path

from pydantic import ValidationError

from nda_search.config.defaults import (
    DEFAULT_CONFIG_TOML,
    ENV_BASE_URL,
    ENV_HISTORY_PATH,
    ENV_LOG_LEVEL,
    ENV_NO_HISTORY,
    get_config_path,
)
from nda_search.config.schema import NDASearchConfig
from nda_search.exceptions import ConfigError, ConfigValidationError

# Global config instance (singleton)
_config: NDASearchConfig | None = None


def load_config(
    config_path: Path | None = None,
    *,
    create_if_missing: bool = True,
) -> NDASearchConfig:
    """Load configuration from a TOML file and environment variables.

    Args:
        config_path: Path to config file. If None, uses default.
        create_if_missing: Create default config if file doesn't exist.

    Returns:
        Loaded and validated configuration.

    Raises:
        ConfigError: If configuration cannot be loaded.
        ConfigValidationError: If configuration is invalid.
    """
    path = config_path or get_config_path()

    if not path.exists():
        if not create_if_missing:
            return _apply_env_overrides(NDASearchConfig())
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(DEFAULT_CONFIG_TOML)
        except OSError as e:
            raise ConfigError(f"Failed to create config at {path}: {e}") from e

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    try:
        config = NDASearchConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}") from e

    return _apply_env_overrides(config)


def _apply_env_overrides(config: NDASearchConfig) -> NDASearchConfig:
    """Apply environment variable overrides to configuration."""
    base_url = os.environ.get(ENV_BASE_URL)
    if base_url:
        config.service.base_url = base_url.rstrip("/")

    log_level = os.environ.get(ENV_LOG_LEVEL)
    if log_level:
        config.logging.level = log_level.upper()

    no_history = os.environ.get(ENV_NO_HISTORY)
    if no_history and no_history.lower() in ("1", "true", "yes"):
        config.history.enabled = False

    history_path = os.environ.get(ENV_HISTORY_PATH)
    if history_path:
        config.history.path = Path(history_path)

    return config


def get_config() -> NDASearchConfig:
    """Get the current configuration (singleton).

    Loads config on first access, caches for subsequent calls.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Path | None = None) -> NDASearchConfig:
    """Reload configuration from disk."""
    global _config
    _config = load_config(config_path)
    return _config


def reset_config() -> None:
    """Reset the configuration singleton (mainly for testing)."""
    global _config
    _config = None
