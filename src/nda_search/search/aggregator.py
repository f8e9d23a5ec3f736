"""Match aggregation and ranking for fuzzy element search.

Retrieved elements are matched against the query as a whole word in
their name and description. Hits are deduplicated by element name,
scored by where they matched, and ordered best first.
"""

import re
from collections.abc import Iterable, Mapping
from functools import lru_cache

from nda_search.search.models import Element, MatchRecord, MatchType
from nda_search.search.scoring import TOKEN_DELIMITER, relevance

# Fixed tiers: both > name > description
TIER_SCORES: dict[MatchType, float] = {
    MatchType.BOTH: 100.0,
    MatchType.NAME: 60.0,
    MatchType.DESCRIPTION: 30.0,
}
EXACT_NAME_BONUS = 50.0
PREFIX_BONUS = 20.0
LENGTH_PENALTY_PER_CHAR = 0.5
MAX_LENGTH_PENALTY_CHARS = 20


def search_terms(query: str) -> tuple[str, ...]:
    """Lower-cased query plus its naive singular or plural counterpart.

    ``"taps"`` yields ``("taps", "tap")`` and ``"tap"`` yields
    ``("tap", "taps")``.
    """
    term = query.strip().lower()
    if not term:
        return ()
    if term.endswith("s") and len(term) > 1:
        return (term, term[:-1])
    return (term, term + "s")


def _as_words(text: str) -> str:
    return text.lower().replace(TOKEN_DELIMITER, " ")


@lru_cache(maxsize=128)
def _word_pattern(terms: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(_as_words(term)) for term in terms)
    return re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)")


def matches_word(text: str | None, terms: Iterable[str]) -> bool:
    """Whether any term appears in ``text`` as a whole word.

    ``"tap"`` does not match ``"finger tapping test"``; ``"taps"``
    matches ``"number of taps"``. Underscores delimit words, so element
    names like ``tap_count`` match ``"tap"``.
    """
    terms = tuple(terms)
    if not text or not terms:
        return False
    return _word_pattern(terms).search(_as_words(text)) is not None


def classify(element: Element, terms: tuple[str, ...]) -> MatchType | None:
    """Classify where an element matches, or None when it does not."""
    in_name = matches_word(element.name, terms)
    in_description = matches_word(element.description, terms)
    if in_name and in_description:
        return MatchType.BOTH
    if in_name:
        return MatchType.NAME
    if in_description:
        return MatchType.DESCRIPTION
    return None


def score_match(name: str, query: str, match_type: MatchType) -> float:
    """Relevance of a classified hit; higher is better."""
    name = name.lower()
    query = query.strip().lower()

    score = TIER_SCORES[match_type]
    if name == query:
        score += EXACT_NAME_BONUS
    elif name.startswith(query):
        score += PREFIX_BONUS

    length_gap = min(abs(len(name) - len(query)), MAX_LENGTH_PENALTY_CHARS)
    return score - length_gap * LENGTH_PENALTY_PER_CHAR


class MatchAggregator:
    """Scans retrieved elements and builds the ranked match list."""

    def __init__(self, max_results: int | None = None) -> None:
        """Initialize the aggregator.

        Args:
            max_results: Truncate ranked output to this many records.
        """
        self.max_results = max_results

    def scan(
        self,
        elements_by_structure: Mapping[str, Iterable[Element]],
        query: str,
    ) -> list[MatchRecord]:
        """Match, deduplicate and rank elements against a query.

        Args:
            elements_by_structure: Structure short name to its elements.
            query: The search query.

        Returns:
            Match records sorted by descending relevance. Ties keep the
            order in which element names were first discovered.
        """
        terms = search_terms(query)
        if not terms:
            return []

        # dict preserves first-insertion order; reassignment keeps the slot
        by_name: dict[str, MatchRecord] = {}

        for structure_id, elements in elements_by_structure.items():
            for element in elements:
                match_type = classify(element, terms)
                if match_type is None:
                    continue
                by_name[element.name.lower()] = MatchRecord(
                    element=element,
                    match_type=match_type,
                    relevance_score=score_match(element.name, query, match_type),
                    source_structure=structure_id,
                    name_relevance=relevance(element, query.strip()),
                )

        ranked = sorted(by_name.values(), key=lambda r: r.relevance_score, reverse=True)
        if self.max_results is not None:
            ranked = ranked[: self.max_results]
        return ranked

    def count(
        self,
        elements_by_structure: Mapping[str, Iterable[Element]],
        query: str,
    ) -> int:
        """Number of distinct matching element names."""
        terms = search_terms(query)
        return len(
            {
                element.name.lower()
                for elements in elements_by_structure.values()
                for element in elements
                if classify(element, terms) is not None
            }
        )

    def suggest(
        self,
        elements_by_structure: Mapping[str, Iterable[Element]],
        query: str,
        limit: int = 3,
    ) -> list[str]:
        """Closest element names by edit-distance relevance.

        Used when a scan finds nothing, to point at likely typos.
        """
        scores: dict[str, tuple[float, str]] = {}
        for elements in elements_by_structure.values():
            for element in elements:
                score = relevance(element, query.strip())
                if score > 0:
                    scores[element.name.lower()] = (score, element.name)
        ranked = sorted(scores.values(), key=lambda pair: pair[0], reverse=True)
        return [name for _, name in ranked[:limit]]
