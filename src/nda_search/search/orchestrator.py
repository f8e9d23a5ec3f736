"""Search orchestration: exact lookup, then discovery, retrieval and ranking.

A single ``SearchOrchestrator`` drives the state of one search surface.
Every ``search()`` call starts a new epoch; work belonging to an older
epoch stops at its next suspension point and never publishes a state,
so late results cannot overwrite a newer search.
"""

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from nda_search.exceptions import (
    DiscoveryError,
    ElementNotFoundError,
    InvalidQueryError,
    ServiceError,
    ServiceStatusError,
)
from nda_search.history.recent import RecentSearchHistory
from nda_search.search.aggregator import MatchAggregator
from nda_search.search.cache import DEFAULT_MAX_ELEMENTS, CandidateCache
from nda_search.search.models import (
    BatchProgress,
    Element,
    ExactHit,
    Failed,
    Idle,
    MatchRecord,
    NoMatch,
    PartialInProgress,
    PartialResult,
    SearchState,
)
from nda_search.search.retriever import (
    DEFAULT_BATCH_PAUSE,
    DEFAULT_BATCH_SIZE,
    BatchRetriever,
)
from nda_search.utils.logging import get_logger

if TYPE_CHECKING:
    from nda_search.service.base import DataDictionaryClient

logger = get_logger(__name__)

StateListener = Callable[[SearchState], None]


def no_match_message(query: str) -> str:
    return f'No data elements found matching "{query}"'


class SearchOrchestrator:
    """Runs element searches and owns their state.

    The orchestrator owns the candidate cache, the recent-search history
    and the epoch counter, and hands them to the components that need
    them. Listeners receive every published state, including progress
    updates while structures are being retrieved.

    Attributes:
        client: Data dictionary client.
        cache: Structure element cache, kept for the orchestrator's lifetime.
        history: Recent searches, recorded after exact hits and after
            completed fuzzy searches.
        aggregator: Match scanner and ranker.
        retriever: Candidate discovery and batched retrieval.
    """

    def __init__(
        self,
        client: "DataDictionaryClient",
        *,
        cache: CandidateCache | None = None,
        history: RecentSearchHistory | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_pause: float = DEFAULT_BATCH_PAUSE,
        supplementary_categories: Iterable[str] = (),
        max_cached_elements: int = DEFAULT_MAX_ELEMENTS,
        max_results: int | None = None,
    ) -> None:
        self.client = client
        self.cache = cache if cache is not None else CandidateCache(max_cached_elements)
        self.history = history if history is not None else RecentSearchHistory()
        self.aggregator = MatchAggregator(max_results=max_results)
        self.retriever = BatchRetriever(
            client,
            self.cache,
            batch_size=batch_size,
            batch_pause=batch_pause,
            supplementary_categories=supplementary_categories,
            aggregator=self.aggregator,
        )
        self._state: SearchState = Idle()
        self._epoch = 0
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SearchState:
        """The currently active search state."""
        return self._state

    @property
    def epoch(self) -> int:
        return self._epoch

    def add_listener(self, listener: StateListener) -> None:
        """Subscribe to published states."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        self._listeners.remove(listener)

    def _is_current(self, epoch: int) -> bool:
        return epoch == self._epoch

    def _publish(self, epoch: int, state: SearchState) -> bool:
        """Make ``state`` active unless its epoch has been superseded."""
        if not self._is_current(epoch):
            logger.debug("Dropping stale %s for %r", state.kind.value, state.query)
            return False
        self._state = state
        for listener in list(self._listeners):
            listener(state)
        return True

    def _next_epoch(self) -> int:
        self._epoch += 1
        return self._epoch

    def reset(self) -> None:
        """Abandon any in-flight search and return to idle."""
        self._publish(self._next_epoch(), Idle())

    async def search(self, query: str) -> SearchState:
        """Search for an element by exact name, falling back to fuzzy search.

        Args:
            query: Full or partial element name, or words from a description.

        Returns:
            The terminal state of this search. If a newer search started
            meanwhile, the last state this search reached is returned
            without having been published.

        Raises:
            InvalidQueryError: If the query is empty.
        """
        query = query.strip()
        if not query:
            raise InvalidQueryError("Empty search query")

        epoch = self._next_epoch()
        self._publish(epoch, Idle(query))

        # 1. Exact lookup
        try:
            element = await self.client.get_element(query)
        except (ElementNotFoundError, ServiceStatusError) as e:
            logger.debug("Exact lookup missed for %r: %s", query, e)
        except ServiceError as e:
            return self._fail(epoch, query, f"Error searching for elements: {e}")
        else:
            hit = ExactHit(query, element=element)
            if self._publish(epoch, hit):
                self.history.add(query)
            return hit

        # 2. Discovery
        in_progress = PartialInProgress(query)
        if not self._publish(epoch, in_progress):
            return in_progress

        try:
            candidates = await self.retriever.discover(query)
        except DiscoveryError as e:
            return self._fail(epoch, query, str(e))
        if not candidates:
            return self._fail(
                epoch, query, "Error fetching data structures: no candidate structures"
            )
        if not self._is_current(epoch):
            return in_progress

        # 3. Batched retrieval
        def on_progress(progress: BatchProgress) -> None:
            self._publish(
                epoch,
                PartialInProgress(
                    query,
                    batch_index=progress.batch_index,
                    total_batches=progress.total_batches,
                    matches_so_far=progress.cumulative_match_count,
                ),
            )

        elements_by_structure = await self.retriever.fetch_all(
            candidates,
            on_progress,
            query=query,
            is_current=lambda: self._is_current(epoch),
        )
        if not self._is_current(epoch):
            return in_progress

        # 4. Aggregation
        matches = self.aggregator.scan(elements_by_structure, query)
        if not matches:
            no_match = NoMatch(
                query,
                message=no_match_message(query),
                suggestions=tuple(self.aggregator.suggest(elements_by_structure, query)),
            )
            if self._publish(epoch, no_match):
                self.history.add(query)
            return no_match

        self.history.add(query)

        # 5. A single match is opened directly
        if len(matches) == 1:
            element = await self._fetch_detail(matches[0])
            hit = ExactHit(query, element=element)
            if not self._publish(epoch, hit):
                logger.debug("Discarding promoted hit for superseded %r", query)
            return hit

        result = PartialResult(query, matches=tuple(matches))
        self._publish(epoch, result)
        return result

    async def select_result(self, record: MatchRecord) -> ExactHit | Failed:
        """Open one record of the active result list.

        Fetches the element's full detail; if that fails, the summary
        element held by the record is shown instead.

        Returns:
            ``ExactHit`` for the chosen element, or ``Failed`` without a
            state change when no result list containing ``record`` is
            active.
        """
        state = self._state
        if not isinstance(state, PartialResult) or record not in state.matches:
            return Failed(record.name, reason="No search result to select from")

        epoch = self._next_epoch()
        element = await self._fetch_detail(record)
        hit = ExactHit(state.query, element=element)
        self._publish(epoch, hit)
        return hit

    async def _fetch_detail(self, record: MatchRecord) -> Element:
        try:
            return await self.client.get_element(record.name)
        except ServiceError as e:
            logger.debug("Detail fetch for %r failed, using summary: %s", record.name, e)
            return record.element

    def _fail(self, epoch: int, query: str, reason: str) -> Failed:
        failed = Failed(query, reason=reason)
        if self._publish(epoch, failed):
            logger.warning("Search for %r failed: %s", query, reason)
        return failed

    def __repr__(self) -> str:
        return (
            f"SearchOrchestrator(state={self._state.kind.value}, "
            f"epoch={self._epoch}, cached={len(self.cache)})"
        )
