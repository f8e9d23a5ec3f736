"""Candidate discovery and batched element retrieval.

The service has no element-level index, so fuzzy search pulls the
element lists of every candidate structure. Candidates are fetched in
fixed-size batches: items inside a batch run concurrently, batches run
one after another with a short pause in between to smooth the request
rate against the upstream service.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from nda_search.exceptions import DiscoveryError, ServiceError
from nda_search.search.aggregator import MatchAggregator
from nda_search.search.cache import CandidateCache
from nda_search.search.models import BatchProgress, Element
from nda_search.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from nda_search.service.base import DataDictionaryClient

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 25
DEFAULT_BATCH_PAUSE = 0.1

ProgressSink = Callable[[BatchProgress], None]


def partition(candidates: Iterable[str], batch_size: int) -> list[list[str]]:
    """Split candidates into ordered batches of at most ``batch_size``.

    Candidates are sorted first so the batch order does not depend on
    set iteration order.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    ordered = sorted(set(candidates))
    return [ordered[i : i + batch_size] for i in range(0, len(ordered), batch_size)]


class BatchRetriever:
    """Discovers candidate structures and fetches their elements."""

    def __init__(
        self,
        client: "DataDictionaryClient",
        cache: CandidateCache | None = None,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_pause: float = DEFAULT_BATCH_PAUSE,
        supplementary_categories: Iterable[str] = (),
        aggregator: MatchAggregator | None = None,
    ) -> None:
        """Initialize the retriever.

        Args:
            client: Data dictionary client.
            cache: Structure element cache shared across searches.
            batch_size: Structures fetched concurrently per batch.
            batch_pause: Seconds to wait between batches.
            supplementary_categories: Categories whose structures are
                always added to the candidates.
            aggregator: Used to count matches for progress reports.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.client = client
        self.cache = cache if cache is not None else CandidateCache()
        self.batch_size = batch_size
        self.batch_pause = batch_pause
        self.supplementary_categories = tuple(supplementary_categories)
        self.aggregator = aggregator or MatchAggregator()
        self._in_flight: dict[str, asyncio.Future[list[Element]]] = {}

    async def discover(self, query: str) -> set[str]:
        """Collect candidate structure short names for a query.

        Raises:
            DiscoveryError: If any structure list cannot be fetched.
        """
        lookups = [self.client.search_structures(query)]
        lookups.extend(
            self.client.list_category(category)
            for category in self.supplementary_categories
        )
        try:
            listings = await asyncio.gather(*lookups)
        except ServiceError as e:
            raise DiscoveryError(f"Error fetching data structures: {e}") from e

        candidates = {
            summary.short_name
            for listing in listings
            for summary in listing
            if summary.short_name
        }
        log_with_context(
            logger,
            logging.DEBUG,
            "Discovered candidate structures",
            query=query,
            candidates=len(candidates),
        )
        return candidates

    async def fetch_all(
        self,
        candidates: Iterable[str],
        progress_sink: ProgressSink | None = None,
        *,
        query: str | None = None,
        is_current: Callable[[], bool] | None = None,
    ) -> dict[str, list[Element]]:
        """Fetch the element lists of all candidates, batch by batch.

        Args:
            candidates: Structure short names.
            progress_sink: Called after each batch with cumulative progress.
            query: When given, progress reports count matching elements
                instead of retrieved elements.
            is_current: Checked before each batch; returning False stops
                retrieval and returns what was fetched so far.

        Returns:
            Structure short name to element list. Structures whose fetch
            failed map to an empty list.
        """
        batches = partition(candidates, self.batch_size)
        total = len(batches)
        results: dict[str, list[Element]] = {}

        for index, batch in enumerate(batches, start=1):
            if is_current is not None and not is_current():
                logger.debug("Retrieval superseded before batch %d/%d", index, total)
                break

            fetched = await asyncio.gather(*(self._fetch_one(sid) for sid in batch))
            results.update(zip(batch, fetched))

            if progress_sink is not None:
                if query is not None:
                    count = self.aggregator.count(results, query)
                else:
                    count = sum(len(elements) for elements in results.values())
                progress_sink(BatchProgress(index, total, count))

            if index < total and self.batch_pause > 0:
                await asyncio.sleep(self.batch_pause)

        return results

    async def _fetch_one(self, structure_id: str) -> list[Element]:
        cached = self.cache.get(structure_id)
        if cached is not None:
            return cached

        # Share one request between concurrent searches for the same structure
        future = self._in_flight.get(structure_id)
        if future is None:
            future = asyncio.ensure_future(self._load(structure_id))
            self._in_flight[structure_id] = future
            future.add_done_callback(
                lambda _: self._in_flight.pop(structure_id, None)
            )

        try:
            return await asyncio.shield(future)
        except ServiceError as e:
            log_with_context(
                logger,
                logging.DEBUG,
                "Structure fetch failed, skipping",
                structure=structure_id,
                error=str(e),
            )
            return []

    async def _load(self, structure_id: str) -> list[Element]:
        elements = await self.client.get_structure(structure_id)
        self.cache.put(structure_id, elements)
        return elements
