"""Session cache of structure element lists."""

from typing import Any

from nda_search.search.models import Element

DEFAULT_MAX_ELEMENTS = 1000


class CandidateCache:
    """In-memory map from structure short name to its element list.

    The catalog is read-mostly, so entries never expire within a
    session. Structures with ``max_elements`` or more elements are not
    cached to keep memory bounded.

    Attributes:
        max_elements: Element count at or above which lists are not cached.
    """

    def __init__(self, max_elements: int = DEFAULT_MAX_ELEMENTS) -> None:
        self.max_elements = max_elements
        self._entries: dict[str, list[Element]] = {}

        # Statistics tracking
        self._hits = 0
        self._misses = 0
        self._skipped = 0

    def get(self, structure_id: str) -> list[Element] | None:
        """Return the cached element list for a structure, if any."""
        elements = self._entries.get(structure_id)
        if elements is None:
            self._misses += 1
            return None
        self._hits += 1
        return elements

    def put(self, structure_id: str, elements: list[Element]) -> bool:
        """Cache a structure's element list.

        Returns:
            True if the list was stored, False if it was too large.
        """
        if len(elements) >= self.max_elements:
            self._skipped += 1
            return False
        self._entries[structure_id] = list(elements)
        return True

    def clear(self) -> int:
        """Drop all entries and return how many were dropped."""
        count = len(self._entries)
        self._entries.clear()
        return count

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        total_requests = self._hits + self._misses
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "skipped": self._skipped,
            "hit_rate": self._hits / total_requests if total_requests else 0.0,
            "max_elements": self.max_elements,
        }

    def __contains__(self, structure_id: object) -> bool:
        return structure_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CandidateCache(entries={len(self)}, max_elements={self.max_elements})"
