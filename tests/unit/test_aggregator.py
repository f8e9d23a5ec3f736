"""Unit tests for match aggregation and ranking."""

import pytest

from nda_search.search.aggregator import (
    EXACT_NAME_BONUS,
    MatchAggregator,
    classify,
    matches_word,
    score_match,
    search_terms,
)
from nda_search.search.models import Element, MatchType


class TestSearchTerms:
    """Tests for singular/plural term expansion."""

    def test_plural_adds_singular(self) -> None:
        assert search_terms("taps") == ("taps", "tap")

    def test_singular_adds_plural(self) -> None:
        assert search_terms("tap") == ("tap", "taps")

    def test_lowercases_and_strips(self) -> None:
        assert search_terms("  Age ") == ("age", "ages")

    def test_empty(self) -> None:
        assert search_terms("   ") == ()


class TestMatchesWord:
    """Tests for whole-word matching."""

    def test_whole_word_only(self) -> None:
        assert not matches_word("finger tapping test", search_terms("tap"))

    def test_plural_counterpart(self) -> None:
        assert matches_word("number of taps", search_terms("tap"))
        assert matches_word("one tap per trial", search_terms("taps"))

    def test_underscore_delimits_words(self) -> None:
        assert matches_word("tap_count", search_terms("tap"))

    def test_query_with_underscore(self) -> None:
        assert matches_word("interview_age", search_terms("interview_age"))

    def test_case_insensitive(self) -> None:
        assert matches_word("Age In Months", search_terms("age"))

    def test_regex_characters_are_literal(self) -> None:
        assert not matches_word("abc", search_terms("a.c"))

    def test_query_edged_with_symbols(self) -> None:
        assert matches_word("written in c++ code", ["c++"])
        assert matches_word("score% correct", ["score%"])
        assert not matches_word("abc++", ["c++"])

    def test_empty_text(self) -> None:
        assert not matches_word(None, search_terms("age"))
        assert not matches_word("", search_terms("age"))


class TestClassify:
    """Tests for match type classification."""

    @pytest.mark.parametrize(
        ("name", "description", "expected"),
        [
            ("tap_count", "Number of taps", MatchType.BOTH),
            ("tap_count", "Count of trials", MatchType.NAME),
            ("trial_count", "Number of taps", MatchType.DESCRIPTION),
            ("tapping_rate", "Rate of tapping", None),
        ],
    )
    def test_classification(
        self, name: str, description: str, expected: MatchType | None
    ) -> None:
        element = Element(name=name, description=description)
        assert classify(element, search_terms("tap")) is expected


class TestScoreMatch:
    """Tests for relevance scoring of classified hits."""

    def test_tiers(self) -> None:
        both = score_match("tap_x", "tap", MatchType.BOTH)
        name = score_match("tap_x", "tap", MatchType.NAME)
        description = score_match("tap_x", "tap", MatchType.DESCRIPTION)
        assert both > name > description

    def test_exact_name_bonus(self) -> None:
        exact = score_match("age", "age", MatchType.NAME)
        assert exact == 60.0 + EXACT_NAME_BONUS

    def test_prefix_bonus(self) -> None:
        # 60 tier + 20 prefix - 7 chars * 0.5
        assert score_match("age_months", "age", MatchType.NAME) == 76.5

    def test_length_penalty_is_capped(self) -> None:
        long_name = "age_" + "x" * 60
        longer_name = "age_" + "x" * 90
        assert score_match(long_name, "age", MatchType.NAME) == score_match(
            longer_name, "age", MatchType.NAME
        )


class TestMatchAggregator:
    """Tests for MatchAggregator.scan."""

    def test_ranked_descending(self, catalog: dict[str, list[Element]]) -> None:
        matches = MatchAggregator().scan(catalog, "interview")
        scores = [m.relevance_score for m in matches]

        assert scores == sorted(scores, reverse=True)
        assert {m.name for m in matches} == {"interview_age", "interview_date"}

    def test_deduplicates_by_name(self, catalog: dict[str, list[Element]]) -> None:
        matches = MatchAggregator().scan(catalog, "interview_age")
        names = [m.name for m in matches]

        assert names.count("interview_age") == 1

    def test_last_structure_wins(self) -> None:
        elements = {
            "first01": [Element(name="age", description="unrelated")],
            "second01": [Element(name="age", description="age in years")],
        }
        matches = MatchAggregator().scan(elements, "age")

        assert len(matches) == 1
        assert matches[0].source_structure == "second01"
        assert matches[0].match_type is MatchType.BOTH

    def test_ties_keep_discovery_order(self) -> None:
        elements = {
            "s01": [
                Element(name="bbb", description="the visit"),
                Element(name="aaa", description="the visit"),
            ]
        }
        matches = MatchAggregator().scan(elements, "visit")

        assert [m.name for m in matches] == ["bbb", "aaa"]

    def test_deterministic(self, catalog: dict[str, list[Element]]) -> None:
        aggregator = MatchAggregator()
        assert aggregator.scan(catalog, "interview") == aggregator.scan(
            catalog, "interview"
        )

    def test_whole_word_scan(self, catalog: dict[str, list[Element]]) -> None:
        matches = MatchAggregator().scan(catalog, "taps")

        assert [m.name for m in matches] == ["tap_count"]
        assert matches[0].match_type is MatchType.BOTH

    def test_name_relevance_recorded(self, catalog: dict[str, list[Element]]) -> None:
        matches = MatchAggregator().scan(catalog, "tap_count")
        assert matches[0].name_relevance == 1000.0

    def test_max_results(self, catalog: dict[str, list[Element]]) -> None:
        matches = MatchAggregator(max_results=1).scan(catalog, "interview")
        assert len(matches) == 1

    def test_empty_query(self, catalog: dict[str, list[Element]]) -> None:
        assert MatchAggregator().scan(catalog, " ") == []

    def test_count(self, catalog: dict[str, list[Element]]) -> None:
        assert MatchAggregator().count(catalog, "interview") == 2

    def test_suggest(self, catalog: dict[str, list[Element]]) -> None:
        suggestions = MatchAggregator().suggest(catalog, "interveiw_age")
        assert suggestions[0] == "interview_age"
