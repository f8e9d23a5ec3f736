"""Edit-distance relevance scoring for element names.

Element names in the data dictionary are underscore-delimited
(``visit_date``, ``tap_count_left``), so scoring works on name tokens:
each query token is matched against its closest name token, exact token
hits weigh far more than small typos, and names that do not literally
contain the query are dampened so substring and prefix matches stay
ahead of weak token-distance matches.
"""

from rapidfuzz.distance import Levenshtein

from nda_search.search.models import Element

TOKEN_DELIMITER = "_"

# Returned for an exact case-insensitive name match. Composite scores are
# clamped below it.
PERFECT_SCORE = 1000.0
MAX_COMPOSITE_SCORE = PERFECT_SCORE - 1.0

EXACT_TOKEN_BONUS = 100.0
TYPO_TOKEN_BONUS = 50.0
MAX_TYPO_DISTANCE = 2
PREFIX_BONUS = 500.0
DAMPENING = 0.1


def distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning ``a`` into ``b``.

    Insertions, deletions and substitutions all cost one. Comparison is
    case-sensitive; callers lower-case both sides first.
    """
    return Levenshtein.distance(a, b)


def _best_token_distance(token: str, candidates: list[str]) -> int:
    return min(distance(token, candidate) for candidate in candidates)


def relevance(element: Element | str, query: str) -> float:
    """Score how well an element name answers a query.

    Args:
        element: The element, or its bare name.
        query: The search query, in any case.

    Returns:
        ``PERFECT_SCORE`` for an exact case-insensitive match, otherwise a
        non-negative composite strictly below it.
    """
    name = (element.name if isinstance(element, Element) else element).lower()
    query = query.lower()

    if name == query:
        return PERFECT_SCORE

    name_tokens = name.split(TOKEN_DELIMITER)
    score = 0.0

    for query_token in query.split(TOKEN_DELIMITER):
        best = _best_token_distance(query_token, name_tokens)
        if best == 0:
            score += EXACT_TOKEN_BONUS
        elif best <= MAX_TYPO_DISTANCE:
            score += TYPO_TOKEN_BONUS / best

    if name.startswith(query + TOKEN_DELIMITER):
        score += PREFIX_BONUS

    if name.isdigit() or query.isdigit():
        score *= DAMPENING

    if query not in name:
        score *= DAMPENING

    return min(score, MAX_COMPOSITE_SCORE)
