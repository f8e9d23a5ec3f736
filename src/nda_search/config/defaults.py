"""Default configuration values and paths."""

import os
from pathlib import Path
from typing import Final

# Default directories
DEFAULT_CONFIG_DIR: Final[Path] = Path.home() / ".config" / "nda-search"
DEFAULT_CACHE_DIR: Final[Path] = Path.home() / ".cache" / "nda-search"

# Default file paths
DEFAULT_CONFIG_FILE: Final[Path] = DEFAULT_CONFIG_DIR / "config.toml"
DEFAULT_HISTORY_DB: Final[Path] = DEFAULT_CACHE_DIR / "history.duckdb"

# Upstream service
DEFAULT_BASE_URL: Final[str] = "https://nda.nih.gov/api/datadictionary"
DEFAULT_SEARCH_URL: Final[str] = "https://nda.nih.gov/api/search/nda"

# Environment variable names
ENV_CONFIG_PATH: Final[str] = "NDA_SEARCH_CONFIG"
ENV_BASE_URL: Final[str] = "NDA_SEARCH_BASE_URL"
ENV_LOG_LEVEL: Final[str] = "NDA_SEARCH_LOG_LEVEL"
ENV_NO_HISTORY: Final[str] = "NDA_SEARCH_NO_HISTORY"
ENV_HISTORY_PATH: Final[str] = "NDA_SEARCH_HISTORY_PATH"

# Default config content (TOML)
DEFAULT_CONFIG_TOML: Final[str] = """\
# nda-search configuration

[service]
base_url = "https://nda.nih.gov/api/datadictionary"
search_url = "https://nda.nih.gov/api/search/nda"
timeout = 30.0

[search]
batch_size = 25
batch_pause_seconds = 0.1
supplementary_categories = []
max_cached_elements = 1000
full_text_size = 10000
max_results = 50

[history]
enabled = true
max_entries = 10

[output]
default_format = "rich"
color = true

[logging]
level = "WARNING"
json_format = false
"""


def ensure_directories() -> None:
    """Ensure all default directories exist."""
    DEFAULT_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    DEFAULT_CACHE_DIR.mkdir(parents=True, exist_ok=True)


def get_config_path() -> Path:
    """Get the configuration file path."""
    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_FILE


def get_history_path() -> Path:
    """Get the search history database path."""
    env_path = os.environ.get(ENV_HISTORY_PATH)
    if env_path:
        return Path(env_path)
    return DEFAULT_HISTORY_DB
