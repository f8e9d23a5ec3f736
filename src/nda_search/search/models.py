"""Core data model for element search.

Elements are immutable once mapped from the service payloads. Match
records and search states are transient and belong to a single search.
"""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Element:
    """A named field definition in the data dictionary.

    Attributes:
        name: Element name, unique within the catalog in practice.
        type: Declared data type (e.g. "String", "Integer").
        description: Human-readable description.
        notes: Free-text notes, often value code explanations.
        structures: Short names of the data structures using the element.
        value_range: Allowed values, when the service provides them.
        size: Declared maximum size for string elements.
        position: Position inside the structure it was fetched through.
    """

    name: str
    type: str = "String"
    description: str = ""
    notes: str | None = None
    structures: tuple[str, ...] = ()
    value_range: str | None = None
    size: int | None = None
    position: int | None = None


@dataclass(frozen=True)
class StructureSummary:
    """A data structure as listed by structure search."""

    short_name: str
    title: str = ""
    category: str = ""


class MatchType(str, Enum):
    """Where a query hit occurred."""

    NAME = "name"
    DESCRIPTION = "description"
    BOTH = "both"


@dataclass
class MatchRecord:
    """One ranked hit of a fuzzy search.

    ``name_relevance`` is the edit-distance relevance of the element
    name against the query. It explains the match but does not take
    part in ordering.
    """

    element: Element
    match_type: MatchType
    relevance_score: float
    source_structure: str
    name_relevance: float = 0.0

    @property
    def name(self) -> str:
        return self.element.name


@dataclass(frozen=True)
class BatchProgress:
    """Progress report emitted after each retrieval batch."""

    batch_index: int
    total_batches: int
    cumulative_match_count: int


class StateKind(str, Enum):
    """Discriminator for search states."""

    IDLE = "idle"
    EXACT_HIT = "exact_hit"
    PARTIAL_IN_PROGRESS = "partial_in_progress"
    PARTIAL_RESULT = "partial_result"
    NO_MATCH = "no_match"
    FAILED = "failed"


@dataclass(frozen=True)
class SearchState:
    """Base class for the states of a search."""

    query: str = ""

    kind = StateKind.IDLE
    is_terminal = False


@dataclass(frozen=True)
class Idle(SearchState):
    kind = StateKind.IDLE


@dataclass(frozen=True)
class ExactHit(SearchState):
    """The query resolved to a single element."""

    element: Element | None = None

    kind = StateKind.EXACT_HIT
    is_terminal = True


@dataclass(frozen=True)
class PartialInProgress(SearchState):
    """Fuzzy retrieval is running."""

    batch_index: int = 0
    total_batches: int = 0
    matches_so_far: int = 0

    kind = StateKind.PARTIAL_IN_PROGRESS


@dataclass(frozen=True)
class PartialResult(SearchState):
    """Fuzzy search produced a ranked match list."""

    matches: tuple[MatchRecord, ...] = ()

    kind = StateKind.PARTIAL_RESULT
    is_terminal = True


@dataclass(frozen=True)
class NoMatch(SearchState):
    """Fuzzy search completed without any match.

    ``suggestions`` holds close element names found during retrieval,
    ranked by edit-distance relevance.
    """

    message: str = ""
    suggestions: tuple[str, ...] = field(default_factory=tuple)

    kind = StateKind.NO_MATCH
    is_terminal = True


@dataclass(frozen=True)
class Failed(SearchState):
    """The search could not complete."""

    reason: str = ""

    kind = StateKind.FAILED
    is_terminal = True
