"""Fuzzy data element search.

An exact lookup runs first; on a miss, candidate structures are
discovered, their elements retrieved in batches, and whole-word hits in
element names and descriptions are ranked.
"""

from nda_search.search.aggregator import MatchAggregator, search_terms
from nda_search.search.cache import CandidateCache
from nda_search.search.models import (
    BatchProgress,
    Element,
    ExactHit,
    Failed,
    Idle,
    MatchRecord,
    MatchType,
    NoMatch,
    PartialInProgress,
    PartialResult,
    SearchState,
    StateKind,
    StructureSummary,
)
from nda_search.search.orchestrator import SearchOrchestrator
from nda_search.search.retriever import BatchRetriever, partition
from nda_search.search.scoring import distance, relevance
from nda_search.search.structures import (
    StructureQuery,
    parse_structure_query,
    rank_structures,
)

__all__ = [
    # Orchestration
    "SearchOrchestrator",
    "BatchRetriever",
    "MatchAggregator",
    "CandidateCache",
    "partition",
    "search_terms",
    # Scoring
    "distance",
    "relevance",
    # Structures
    "StructureQuery",
    "parse_structure_query",
    "rank_structures",
    # Model
    "Element",
    "StructureSummary",
    "MatchType",
    "MatchRecord",
    "BatchProgress",
    "StateKind",
    "SearchState",
    "Idle",
    "ExactHit",
    "PartialInProgress",
    "PartialResult",
    "NoMatch",
    "Failed",
]
