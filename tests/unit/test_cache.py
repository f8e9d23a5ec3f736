"""Unit tests for the structure element cache."""

from nda_search.search.cache import CandidateCache
from nda_search.search.models import Element


def _elements(count: int) -> list[Element]:
    return [Element(name=f"item_{i}") for i in range(count)]


class TestCandidateCache:
    """Tests for CandidateCache."""

    def test_miss_then_hit(self) -> None:
        cache = CandidateCache()
        assert cache.get("fingertap01") is None

        cache.put("fingertap01", _elements(2))
        cached = cache.get("fingertap01")

        assert cached is not None
        assert [e.name for e in cached] == ["item_0", "item_1"]
        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5

    def test_empty_list_is_cached(self) -> None:
        cache = CandidateCache()
        assert cache.put("empty01", []) is True
        assert cache.get("empty01") == []

    def test_large_structures_not_cached(self) -> None:
        cache = CandidateCache(max_elements=3)

        assert cache.put("small01", _elements(2)) is True
        assert cache.put("large01", _elements(3)) is False

        assert "small01" in cache
        assert "large01" not in cache
        assert cache.stats()["skipped"] == 1

    def test_put_copies_list(self) -> None:
        cache = CandidateCache()
        elements = _elements(1)
        cache.put("s01", elements)
        elements.append(Element(name="late"))

        assert len(cache.get("s01") or []) == 1

    def test_clear(self) -> None:
        cache = CandidateCache()
        cache.put("a", _elements(1))
        cache.put("b", _elements(1))

        assert cache.clear() == 2
        assert len(cache) == 0

    def test_repr(self) -> None:
        assert "max_elements=10" in repr(CandidateCache(max_elements=10))
