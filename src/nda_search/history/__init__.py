"""Recent-search history and its persistence."""

from nda_search.history.recent import DEFAULT_MAX_ENTRIES, RecentSearchHistory
from nda_search.history.store import DuckDBHistoryStore

__all__ = [
    "DEFAULT_MAX_ENTRIES",
    "DuckDBHistoryStore",
    "RecentSearchHistory",
]
