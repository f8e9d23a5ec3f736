"""Configuration management."""

from nda_search.config.loader import get_config, load_config, reload_config, reset_config
from nda_search.config.schema import NDASearchConfig

__all__ = ["NDASearchConfig", "get_config", "load_config", "reload_config", "reset_config"]
