"""Unit tests for structure query parsing and ranking."""

import pytest

from nda_search.search.models import (
    ExactHit,
    Failed,
    Idle,
    NoMatch,
    PartialInProgress,
    PartialResult,
    StateKind,
    StructureSummary,
)
from nda_search.search.structures import (
    StructureQuery,
    normalize_short_name,
    parse_structure_query,
    rank_structures,
)


class TestParseStructureQuery:
    """Tests for parse_structure_query."""

    def test_keyword(self) -> None:
        assert parse_structure_query(" tapping ") == StructureQuery("tapping")

    @pytest.mark.parametrize("text", ["category:Imaging", "Category: Imaging"])
    def test_category(self, text: str) -> None:
        assert parse_structure_query(text) == StructureQuery("Imaging", is_category=True)

    def test_empty_category(self) -> None:
        query = parse_structure_query("category:")
        assert query.is_category
        assert query.term == ""


class TestRankStructures:
    """Tests for rank_structures."""

    def test_normalize(self) -> None:
        assert normalize_short_name("ABC-CL_01") == "abccl01"

    def test_groups(self) -> None:
        structures = [
            StructureSummary("other01", "Unrelated"),
            StructureSummary("demo02", "Tapping demographics"),
            StructureSummary("fingertap01", "Finger Tapping"),
            StructureSummary("finger_tap", "Legacy"),
        ]

        ranked = rank_structures(structures, "fingertap")

        assert [s.short_name for s in ranked] == [
            "finger_tap",
            "fingertap01",
            "other01",
            "demo02",
        ]

    def test_title_match_beats_no_match(self) -> None:
        structures = [
            StructureSummary("a01", "Nothing"),
            StructureSummary("b01", "Finger Tapping"),
        ]

        ranked = rank_structures(structures, "Tapping")

        assert [s.short_name for s in ranked] == ["b01", "a01"]

    def test_title_match_orders_short_name_group(self) -> None:
        structures = [
            StructureSummary("tap01", "Other"),
            StructureSummary("tap02", "Finger tap test"),
        ]

        ranked = rank_structures(structures, "tap")

        assert [s.short_name for s in ranked] == ["tap02", "tap01"]

    def test_exact_short_name_beats_title(self) -> None:
        structures = [
            StructureSummary("tap01x", "Finger tap01 test"),
            StructureSummary("tap_01", "Other"),
        ]

        ranked = rank_structures(structures, "tap01")

        assert [s.short_name for s in ranked] == ["tap_01", "tap01x"]

    def test_stable_within_group(self) -> None:
        structures = [StructureSummary(f"x{i}", "") for i in range(4)]
        assert rank_structures(structures, "zzz") == structures


class TestSearchStates:
    """Tests for the search state types."""

    def test_kinds(self) -> None:
        assert Idle().kind is StateKind.IDLE
        assert ExactHit("age").kind is StateKind.EXACT_HIT
        assert PartialInProgress("age").kind is StateKind.PARTIAL_IN_PROGRESS
        assert PartialResult("age").kind is StateKind.PARTIAL_RESULT
        assert NoMatch("age").kind is StateKind.NO_MATCH
        assert Failed("age").kind is StateKind.FAILED

    def test_terminal(self) -> None:
        assert not Idle().is_terminal
        assert not PartialInProgress("age").is_terminal
        assert all(
            state.is_terminal
            for state in (ExactHit("a"), PartialResult("a"), NoMatch("a"), Failed("a"))
        )
