"""In-memory data dictionary client for testing."""

import asyncio
from collections.abc import Iterable
from typing import Any

from nda_search.exceptions import (
    ElementNotFoundError,
    ServiceConnectionError,
    ServiceStatusError,
)
from nda_search.search.models import Element, StructureSummary
from nda_search.service.base import DataDictionaryClient, FullTextHit


class MockDataDictionaryClient(DataDictionaryClient):
    """Mock data dictionary backed by an in-memory catalog.

    Structures are registered with their element lists; the element
    index used by exact lookup is derived from them. Keyword structure
    search matches the term against short names, titles and element
    names unless explicit results are configured. Every call is recorded
    so tests can assert on network traffic.
    """

    def __init__(
        self,
        structures: dict[str, list[Element]] | None = None,
        *,
        titles: dict[str, str] | None = None,
        categories: dict[str, list[str]] | None = None,
        search_results: dict[str, list[str]] | None = None,
        failing_structures: Iterable[str] = (),
        failing_elements: Iterable[str] = (),
        fail_structure_search: bool = False,
        exact_lookup_status: int | None = None,
        latency_ms: int = 0,
    ) -> None:
        """Initialize the mock catalog.

        Args:
            structures: Short name to element list.
            titles: Short name to structure title.
            categories: Category name to short names.
            search_results: Keyword to short names, overriding matching.
            failing_structures: Short names whose detail fetch fails.
            failing_elements: Element names whose exact lookup fails.
            fail_structure_search: Make keyword and category listing fail.
            exact_lookup_status: Force every exact lookup to fail with
                this status (404 raises ElementNotFoundError).
            latency_ms: Simulated latency per call in milliseconds.
        """
        self._structures: dict[str, list[Element]] = {}
        self._elements: dict[str, Element] = {}
        self._titles = titles or {}
        self._categories = categories or {}
        self._search_results = search_results
        self._failing = set(failing_structures)
        self._failing_elements = {name.lower() for name in failing_elements}
        self._fail_structure_search = fail_structure_search
        self._exact_lookup_status = exact_lookup_status
        self._latency_ms = latency_ms
        self._call_history: list[dict[str, Any]] = []
        self._closed = False

        for short_name, elements in (structures or {}).items():
            self.add_structure(short_name, elements)

    def add_structure(self, short_name: str, elements: list[Element]) -> None:
        """Register a structure and index its elements by name."""
        self._structures[short_name] = list(elements)
        for element in elements:
            existing = self._elements.get(element.name.lower())
            owners = existing.structures if existing else ()
            if short_name not in owners:
                owners = owners + (short_name,)
            self._elements[element.name.lower()] = Element(
                name=element.name,
                type=element.type,
                description=element.description,
                notes=element.notes,
                structures=owners,
                value_range=element.value_range,
                size=element.size,
            )

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Get history of all calls made to this client."""
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)

    @property
    def closed(self) -> bool:
        return self._closed

    def calls(self, method: str) -> list[dict[str, Any]]:
        """Calls made to one method, in order."""
        return [call for call in self._call_history if call["method"] == method]

    def clear_history(self) -> None:
        self._call_history.clear()

    async def _record_call(self, method: str, **kwargs: Any) -> None:
        self._call_history.append({"method": method, **kwargs})
        if self._latency_ms > 0:
            await asyncio.sleep(self._latency_ms / 1000)

    def _summary(self, short_name: str) -> StructureSummary:
        category = next(
            (name for name, members in self._categories.items() if short_name in members),
            "",
        )
        return StructureSummary(
            short_name=short_name,
            title=self._titles.get(short_name, ""),
            category=category,
        )

    async def get_element(self, name: str) -> Element:
        await self._record_call("get_element", name=name)
        if name.lower() in self._failing_elements:
            raise ServiceConnectionError(f"dataelement/{name} failed")
        if self._exact_lookup_status == 404:
            raise ElementNotFoundError(name)
        if self._exact_lookup_status is not None:
            raise ServiceStatusError(
                f"dataelement/{name} returned {self._exact_lookup_status}",
                status_code=self._exact_lookup_status,
            )
        element = self._elements.get(name.lower())
        if element is None:
            raise ElementNotFoundError(name)
        return element

    async def search_structures(self, term: str) -> list[StructureSummary]:
        await self._record_call("search_structures", term=term)
        if self._fail_structure_search:
            raise ServiceConnectionError("structure search unavailable")

        if self._search_results is not None:
            names = self._search_results.get(term, [])
        else:
            needle = term.lower()
            names = [
                short_name
                for short_name, elements in self._structures.items()
                if needle in short_name.lower()
                or needle in self._titles.get(short_name, "").lower()
                or any(needle in e.name.lower() for e in elements)
            ]
        return [self._summary(name) for name in names]

    async def list_category(self, category: str) -> list[StructureSummary]:
        await self._record_call("list_category", category=category)
        if self._fail_structure_search:
            raise ServiceConnectionError("category listing unavailable")
        return [self._summary(name) for name in self._categories.get(category, [])]

    async def get_structure(self, short_name: str) -> list[Element]:
        await self._record_call("get_structure", short_name=short_name)
        if short_name in self._failing:
            raise ServiceConnectionError(f"datastructure/{short_name} failed")
        elements = self._structures.get(short_name)
        if elements is None:
            raise ServiceStatusError(
                f"datastructure/{short_name} returned 404", status_code=404
            )
        return sorted(
            elements,
            key=lambda e: e.position if e.position is not None else float("inf"),
        )

    async def search_elements_full(
        self, query: str, size: int = 10000
    ) -> list[FullTextHit]:
        await self._record_call("search_elements_full", query=query, size=size)
        needle = query.lower()
        hits = []
        for element in self._elements.values():
            in_name = needle in element.name.lower()
            in_description = needle in element.description.lower()
            if not (in_name or in_description):
                continue
            hits.append(
                FullTextHit(
                    name=element.name,
                    type=element.type,
                    score=2.0 if in_name else 1.0,
                    structures=tuple(self._summary(s) for s in element.structures),
                )
            )
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[:size]

    async def aclose(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return f"MockDataDictionaryClient(structures={len(self._structures)})"
