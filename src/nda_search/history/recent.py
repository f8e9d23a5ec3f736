"""Bounded most-recent-first search history."""

from collections.abc import Iterable, Iterator

DEFAULT_MAX_ENTRIES = 10


class RecentSearchHistory:
    """Up to ``max_entries`` distinct queries, most recent first.

    Re-running a query moves it to the front. The history lives in
    memory; persisting it between sessions is up to the caller (see
    ``nda_search.history.store``).
    """

    def __init__(
        self,
        entries: Iterable[str] = (),
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: list[str] = []
        for entry in entries:
            entry = entry.strip()
            if entry and entry not in self._entries:
                self._entries.append(entry)
        del self._entries[max_entries:]

    def add(self, query: str) -> None:
        """Record a query as the most recent search."""
        query = query.strip()
        if not query:
            return
        if query in self._entries:
            self._entries.remove(query)
        self._entries.insert(0, query)
        del self._entries[self.max_entries :]

    def remove(self, query: str) -> bool:
        """Forget one query. Returns True if it was present."""
        query = query.strip()
        if query in self._entries:
            self._entries.remove(query)
            return True
        return False

    def clear(self) -> int:
        """Forget all queries and return how many there were."""
        count = len(self._entries)
        self._entries.clear()
        return count

    @property
    def most_recent(self) -> str | None:
        return self._entries[0] if self._entries else None

    def to_list(self) -> list[str]:
        return list(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, query: object) -> bool:
        return query in self._entries

    def __repr__(self) -> str:
        return f"RecentSearchHistory({self._entries!r}, max_entries={self.max_entries})"
