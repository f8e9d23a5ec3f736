"""Unit tests for edit-distance scoring."""

import pytest

from nda_search.search.models import Element
from nda_search.search.scoring import (
    MAX_COMPOSITE_SCORE,
    PERFECT_SCORE,
    distance,
    relevance,
)


class TestDistance:
    """Tests for the Levenshtein distance."""

    def test_identical_strings(self) -> None:
        assert distance("visit", "visit") == 0

    def test_empty_string(self) -> None:
        assert distance("", "abc") == 3
        assert distance("abc", "") == 3

    def test_single_edits(self) -> None:
        assert distance("tap", "taps") == 1  # insertion
        assert distance("taps", "tap") == 1  # deletion
        assert distance("tap", "top") == 1  # substitution

    def test_classic_example(self) -> None:
        assert distance("kitten", "sitting") == 3

    def test_symmetric(self) -> None:
        assert distance("subject", "subjct") == distance("subjct", "subject")


class TestRelevance:
    """Tests for name relevance."""

    def test_exact_match_is_perfect(self) -> None:
        assert relevance("subjectkey", "subjectkey") == PERFECT_SCORE

    def test_exact_match_ignores_case(self) -> None:
        assert relevance("SubjectKey", "subjectKEY") == PERFECT_SCORE

    @pytest.mark.parametrize("query", ["visit", "dat", "dte", "2"])
    def test_query_case_does_not_matter(self, query: str) -> None:
        for name in ("visit_date", "date_2", "other_visit"):
            assert relevance(name, query.upper()) == relevance(name, query)

    def test_accepts_element(self) -> None:
        element = Element(name="tap_count")
        assert relevance(element, "tap_count") == PERFECT_SCORE

    def test_composite_below_perfect(self) -> None:
        score = relevance("visit_date", "visit")
        assert 0 < score < PERFECT_SCORE
        assert score <= MAX_COMPOSITE_SCORE

    def test_prefix_beats_token_only(self) -> None:
        # "visit" starts visit_date but is only a later token of other_visit
        prefix = relevance("visit_date", "visit")
        token = relevance("other_visit", "visit")
        assert prefix > token

    def test_typo_scores_below_exact_token(self) -> None:
        exact = relevance("tap_count", "count")
        typo = relevance("tap_count", "cont")
        assert exact > typo > 0

    def test_missing_substring_is_dampened(self) -> None:
        # One typo token and no literal substring: 50 * 0.1
        assert relevance("tap_count", "tab") == 5.0

    def test_numeric_query_is_dampened(self) -> None:
        assert relevance("item_1", "1") < relevance("item_a", "a")

    def test_unrelated_scores_zero(self) -> None:
        assert relevance("interview_date", "zzzzzzzz") == 0.0
