"""Data structure search: query parsing and result ranking."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from nda_search.search.models import StructureSummary

CATEGORY_PREFIX = "category:"

_SEPARATORS = re.compile(r"[_-]")


@dataclass(frozen=True)
class StructureQuery:
    """A parsed structure search.

    ``is_category`` queries list a whole category and are not ranked.
    """

    term: str
    is_category: bool = False


def parse_structure_query(text: str) -> StructureQuery:
    """Parse ``"category:imaging"`` style queries.

    Anything without the prefix is a keyword search.
    """
    text = text.strip()
    if text.lower().startswith(CATEGORY_PREFIX):
        return StructureQuery(text[len(CATEGORY_PREFIX) :].strip(), is_category=True)
    return StructureQuery(text)


def normalize_short_name(text: str) -> str:
    """Lower-case and drop ``_``/``-`` so ``ABC-CL_01`` matches ``abccl01``."""
    return _SEPARATORS.sub("", text.lower())


def _rank_key(
    structure: StructureSummary, query: str, normalized: str
) -> tuple[bool, bool, bool]:
    short_name = normalize_short_name(structure.short_name)
    return (
        short_name != normalized,
        normalized not in short_name,
        query not in structure.title.lower(),
    )


def rank_structures(
    structures: Iterable[StructureSummary], query: str
) -> list[StructureSummary]:
    """Order keyword search results for display.

    Exact short-name matches come first, then short names containing the
    query. Within each of those groups, structures whose title contains
    the query come first. Ties keep the order the service returned them in.
    """
    query = query.strip().lower()
    normalized = normalize_short_name(query)
    return sorted(structures, key=lambda s: _rank_key(s, query, normalized))
