"""Tests for the alignment calculator and aggregator."""

import pytest

from persona_sharpener.alignment import (
    AlignmentCalculator,
    calculate_alignment,
    calculate_overall_alignment,
    calculate_question_alignment,
)
from persona_sharpener.schema import (
    MatchType,
    Question,
    QuestionAlignmentStat,
    QuestionCategory,
    QuestionType,
)


class TestUnknownQuestion:
    """Tests for questions that are not in the bank."""

    def test_unknown_question_degrades(self):
        """Unknown ids give the lowest-confidence result."""
        result = calculate_alignment("no-such-question", "a", "a")
        assert result.score == 0
        assert result.match_type == MatchType.NONE
        assert result.explanation == "Unknown question"

    def test_non_string_question_id(self):
        """Non-string ids are treated as unknown instead of raising."""
        result = calculate_alignment(None, "a", "a")
        assert result.score == 0
        assert result.match_type == MatchType.NONE


class TestExactChoice:
    """Tests for this-or-that questions."""

    def test_same_choice(self):
        result = calculate_alignment("age-range", "younger", "younger")
        assert result.score == 100
        assert result.match_type == MatchType.EXACT
        assert result.explanation == "Same choice"

    def test_different_choice(self):
        result = calculate_alignment("age-range", "younger", "middle")
        assert result.score == 0
        assert result.match_type == MatchType.NONE
        assert result.explanation == "Different choice"

    def test_structural_equality_of_objects(self):
        """Objects compare by structure, not key order."""
        result = calculate_alignment("lifestyle", {"a": 1, "b": 2}, {"b": 2, "a": 1})
        assert result.score == 100

    def test_number_and_bool_differ(self):
        """1 and True are different answers."""
        result = calculate_alignment("lifestyle", 1, True)
        assert result.score == 0

    def test_missing_values_match(self):
        """Two missing answers are structurally equal."""
        result = calculate_alignment("lifestyle", None, None)
        assert result.score == 100


class TestSlider:
    """Tests for slider proximity scoring."""

    def test_within_ten_points(self):
        result = calculate_alignment("tech-savvy", 50, 58)
        assert result.score == 100
        assert result.match_type == MatchType.EXACT

    def test_first_decay_band(self):
        """diff 20 -> 100 - (20 - 10) * 2."""
        result = calculate_alignment("tech-savvy", 50, 70)
        assert result.score == 80
        assert result.match_type == MatchType.PARTIAL

    def test_second_decay_band(self):
        """diff 40 -> 70 - (40 - 25)."""
        result = calculate_alignment("tech-savvy", 50, 90)
        assert result.score == 55
        assert result.match_type == MatchType.PARTIAL

    def test_far_apart(self):
        """diff 60 -> max(0, 45 - 10)."""
        result = calculate_alignment("tech-savvy", 50, 110)
        assert result.score == 35
        assert result.match_type == MatchType.NONE

    def test_very_far_apart_floors_at_zero(self):
        result = calculate_alignment("tech-savvy", 0, 500)
        assert result.score == 0
        assert result.match_type == MatchType.NONE

    def test_rounds_half_up(self):
        """diff 12.25 -> 95.5, which rounds up to 96."""
        result = calculate_alignment("tech-savvy", 50, 62.25)
        assert result.score == 96

    def test_band_boundaries(self):
        assert calculate_alignment("tech-savvy", 0, 10).score == 100
        assert calculate_alignment("tech-savvy", 0, 25).score == 70
        assert calculate_alignment("tech-savvy", 0, 50).score == 45

    def test_non_numeric_defaults_to_midpoint(self):
        """Non-numeric input is read as 50."""
        assert calculate_alignment("tech-savvy", "lots", 50).score == 100
        assert calculate_alignment("tech-savvy", None, 55).score == 100
        assert calculate_alignment("tech-savvy", True, 50).score == 100

    def test_non_finite_defaults_to_midpoint(self):
        result = calculate_alignment("tech-savvy", float("nan"), 50)
        assert result.score == 100

    def test_monotonic_in_distance(self):
        """Score never increases as the values move apart."""
        scores = [calculate_alignment("time-available", 0, d / 2).score for d in range(0, 400)]
        assert all(a >= b for a, b in zip(scores, scores[1:]))
        assert all(0 <= s <= 100 for s in scores)


class TestRanking:
    """Tests for weighted ranking comparison."""

    ITEMS = ["save-time", "save-money", "look-good", "be-healthy", "reduce-stress", "achieve-more"]

    def test_identical_lists(self):
        result = calculate_alignment("primary-goal", self.ITEMS, list(self.ITEMS))
        assert result.score == 100
        assert result.match_type == MatchType.EXACT

    def test_adjacent_swap(self):
        """x and y shift by one (0.7 credit each), z stays: (21 + 17.5 + 20) / 75."""
        result = calculate_alignment(
            "primary-goal",
            ["save-time", "save-money", "look-good"],
            ["save-money", "save-time", "look-good"],
        )
        assert result.score == 78
        assert 70 < result.score < 100
        assert result.match_type == MatchType.PARTIAL

    def test_distance_two_credit(self):
        """a and c move two places (0.4 credit): (12 + 25 + 8) / 75."""
        result = calculate_alignment("primary-goal", ["a", "b", "c"], ["c", "b", "a"])
        assert result.score == 60

    def test_distance_over_two_gets_nothing(self):
        """a and d move three places: (0 + 25 + 20 + 0) / 90."""
        result = calculate_alignment("primary-goal", ["a", "b", "c", "d"], ["d", "b", "c", "a"])
        assert result.score == 50
        assert result.match_type == MatchType.PARTIAL

    def test_items_wrapped_in_objects(self):
        reference = [{"id": item, "label": item.title()} for item in self.ITEMS]
        candidate = [{"id": item} for item in self.ITEMS]
        result = calculate_alignment("primary-goal", reference, candidate)
        assert result.score == 100

    def test_missing_items_count_toward_maximum(self):
        result = calculate_alignment("primary-goal", ["a", "b", "c"], ["a"])
        # 30 of 75 points
        assert result.score == 40
        assert result.match_type == MatchType.NONE

    def test_extra_candidate_items_ignored(self):
        """The maximum comes from the reference list alone."""
        result = calculate_alignment("primary-goal", ["a", "b"], ["a", "b", "c", "d"])
        assert result.score == 100

    def test_positions_past_weight_table_weigh_one(self):
        reference = ["a", "b", "c", "d", "e", "f", "g"]
        candidate = ["a", "b", "c", "d", "e", "f"]
        # 100 of 101 points
        result = calculate_alignment("primary-goal", reference, candidate)
        assert result.score == 99

    def test_items_without_id_never_match(self):
        result = calculate_alignment("primary-goal", [{"label": "x"}], [{"label": "x"}])
        assert result.score == 0

    def test_list_ids(self):
        reference = [{"id": ["a", 1]}, {"id": {"k": "b"}}]
        result = calculate_alignment("primary-goal", reference, list(reference))
        assert result.score == 100

    @pytest.mark.parametrize("candidate", [[True], [1.0], ["1"]])
    def test_ids_compare_by_json_value(self, candidate):
        result = calculate_alignment("primary-goal", [1], candidate)
        assert result.score == 0
        assert result.match_type == MatchType.NONE

    def test_empty_reference(self):
        result = calculate_alignment("primary-goal", [], ["a"])
        assert result.score == 0
        assert result.match_type == MatchType.NONE

    @pytest.mark.parametrize("bad_value", ["save-time", 42, None, {"id": "a"}])
    def test_non_list_is_invalid(self, bad_value):
        result = calculate_alignment("discovery-channel", bad_value, ["social"])
        assert result.score == 0
        assert result.match_type == MatchType.NONE
        assert result.explanation == "Invalid ranking data"


class TestMultiSelect:
    """Tests for Jaccard similarity of selections."""

    def test_partial_overlap(self):
        """Intersection 2, union 4."""
        result = calculate_alignment("dealbreakers", ["a", "b", "c"], ["b", "c", "d"])
        assert result.score == 50
        assert result.match_type == MatchType.PARTIAL
        assert "2" in result.explanation

    def test_identical_sets(self):
        result = calculate_alignment("dealbreakers", ["privacy", "too-slow"], ["too-slow", "privacy"])
        assert result.score == 100
        assert result.match_type == MatchType.EXACT
        assert result.explanation == "2 shared selections"

    def test_both_empty(self):
        result = calculate_alignment("dealbreakers", [], [])
        assert result.score == 0
        assert result.match_type == MatchType.NONE

    def test_disjoint(self):
        result = calculate_alignment("influence-sources", ["friends"], ["experts"])
        assert result.score == 0
        assert "0" in result.explanation

    def test_duplicates_collapse(self):
        result = calculate_alignment("dealbreakers", ["a", "a", "b"], ["a", "b"])
        assert result.score == 100

    def test_list_ids_do_not_raise(self):
        result = calculate_alignment("dealbreakers", [{"id": ["a"]}], ["a"])
        assert result.score == 0
        assert result.match_type == MatchType.NONE

    def test_identical_list_ids(self):
        result = calculate_alignment("dealbreakers", [{"id": ["a"]}], [{"id": ["a"]}])
        assert result.score == 100

    def test_items_without_id_never_match(self):
        result = calculate_alignment("dealbreakers", [{"label": "a"}], [{"label": "b"}])
        assert result.score == 0
        assert result.match_type == MatchType.NONE

    def test_items_without_id_are_left_out(self):
        result = calculate_alignment("dealbreakers", ["a", {"label": "x"}], ["a"])
        assert result.score == 100

    def test_numbers_and_booleans_differ(self):
        result = calculate_alignment("dealbreakers", [1, 2], [True, 2.0])
        assert result.score == 0

    def test_non_list_is_invalid(self):
        result = calculate_alignment("dealbreakers", "privacy", ["privacy"])
        assert result.score == 0
        assert result.explanation == "Invalid selection data"

    def test_score_one_hundred_only_when_identical(self):
        pairs = [
            (["a"], ["a", "b"]),
            (["a", "b"], ["b"]),
            (["a", "b", "c"], ["a", "b", "c"]),
        ]
        for reference, candidate in pairs:
            result = calculate_alignment("dealbreakers", reference, candidate)
            assert (result.score == 100) == (set(reference) == set(candidate))


class TestFillBlank:
    """Tests for fill-in-the-blank comparison."""

    def test_exact_after_normalization(self):
        result = calculate_alignment(
            "success-scenario",
            {"blank": "Lose Weight ", "timeframe": "a month"},
            {"blank": "lose weight", "timeframe": "A MONTH"},
        )
        assert result.score == 100
        assert result.match_type == MatchType.EXACT

    def test_shared_long_word_is_half_point(self):
        """blank shares 'weight' (0.5), timeframe shares only 'a' (0)."""
        result = calculate_alignment(
            "success-scenario",
            {"blank": "lose weight fast", "timeframe": "a month"},
            {"blank": "gain weight", "timeframe": "a year"},
        )
        assert result.score == 25
        assert result.match_type == MatchType.NONE

    def test_partial_plus_exact(self):
        result = calculate_alignment(
            "current-workaround",
            {"workaround": "use spreadsheets", "reason": "it is slow"},
            {"workaround": "shared spreadsheets", "reason": "it is slow"},
        )
        assert result.score == 75
        assert result.match_type == MatchType.EXACT

    def test_missing_candidate_blank(self):
        result = calculate_alignment(
            "current-workaround",
            {"workaround": "paper notes", "reason": "messy"},
            {"workaround": "paper notes"},
        )
        assert result.score == 50
        assert result.match_type == MatchType.PARTIAL

    def test_extra_candidate_blanks_ignored(self):
        result = calculate_alignment(
            "success-scenario",
            {"blank": "sleep better"},
            {"blank": "sleep better", "timeframe": "a week"},
        )
        assert result.score == 100

    def test_empty_reference(self):
        result = calculate_alignment("success-scenario", {}, {"blank": "x"})
        assert result.score == 0

    @pytest.mark.parametrize("bad_value", ["text", ["a"], None, 3])
    def test_non_mapping_is_invalid(self, bad_value):
        result = calculate_alignment("success-scenario", bad_value, {"blank": "x"})
        assert result.score == 0
        assert result.explanation == "Invalid fill-blank data"


class TestScenario:
    """Tests for free-text keyword overlap."""

    def test_empty_text_is_neutral(self):
        result = calculate_alignment("functional-job", "", "Fit a workout in")
        assert result.score == 50
        assert result.match_type == MatchType.PARTIAL

    def test_only_stopwords_is_neutral(self):
        result = calculate_alignment("functional-job", "this that with", "something entirely different")
        assert result.score == 50
        assert result.match_type == MatchType.PARTIAL

    def test_theme_overlap(self):
        """workout, into, lunch shared out of four keywords each."""
        result = calculate_alignment(
            "functional-job",
            "Fit a workout into my lunch break",
            "I squeeze a workout into lunch",
        )
        assert result.score == 75
        assert result.match_type == MatchType.PARTIAL
        assert result.explanation == "Theme overlap detected"

    def test_no_overlap_hits_floor(self):
        result = calculate_alignment(
            "past-failures",
            "planning family meals",
            "tracking running distance",
        )
        assert result.score == 40
        assert result.match_type == MatchType.NONE
        assert result.explanation == "Unique perspective"

    def test_low_overlap_is_none_with_floor(self):
        """One of four keywords shared: raw 25, floored to 40."""
        result = calculate_alignment(
            "quote-capture",
            "logging every meal manually",
            "hate logging apps forever",
        )
        assert result.score == 40
        assert result.match_type == MatchType.NONE

    def test_case_and_punctuation_ignored(self):
        result = calculate_alignment("functional-job", "Track HABITS, daily!", "track habits daily")
        assert result.score == 100

    @pytest.mark.parametrize("reference,candidate", [
        ("a", "b"),
        ("completely unrelated words here", "nothing matching anywhere else"),
        ("same same same", "different different"),
        ("x" * 10, "y" * 10),
    ])
    def test_floor_for_non_empty_inputs(self, reference, candidate):
        assert calculate_alignment("recommendation-trigger", reference, candidate).score >= 40


class TestCustomQuestionLookup:
    """Tests for calculators built over a different question catalog."""

    def test_lookup_is_used(self):
        question = Question(
            id="custom",
            type=QuestionType.SLIDER,
            category=QuestionCategory.IDENTITY,
            field="demographics.techSavviness",
            question="How custom?",
        )
        calculator = AlignmentCalculator(question_lookup={"custom": question}.get)
        assert calculator.calculate("custom", 0, 100).score == 0
        assert calculator.calculate("age-range", "a", "a").explanation == "Unknown question"


class TestQuestionAlignment:
    """Tests for per-question aggregation."""

    def test_empty_candidates(self):
        result = calculate_question_alignment("age-range", "younger", [])
        assert (result.average_score, result.match_count, result.total) == (0, 0, 0)

    def test_mean_and_matches(self):
        result = calculate_question_alignment("age-range", "younger", ["younger", "younger", "middle"])
        assert result.average_score == 67
        assert result.match_count == 2
        assert result.total == 3

    def test_match_threshold(self):
        """Slider score 80 counts as a match only while the threshold allows it."""
        assert calculate_question_alignment("tech-savvy", 50, [70]).match_count == 1
        result = calculate_question_alignment("tech-savvy", 50, [70], match_threshold=90)
        assert result.match_count == 0
        assert result.average_score == 80

    def test_unknown_question(self):
        result = calculate_question_alignment("missing", "a", ["a", "a"])
        assert result.average_score == 0
        assert result.total == 2


class TestOverallAlignment:
    """Tests for the weighted overall alignment."""

    def test_empty(self):
        assert calculate_overall_alignment([]) == 0

    def test_weight_is_capped(self):
        """Weights 5 (capped from 10) and 1: (400 + 20) / 6."""
        stats = [
            QuestionAlignmentStat(question_id="a", average_score=80, response_count=10),
            QuestionAlignmentStat(question_id="b", average_score=20, response_count=1),
        ]
        assert calculate_overall_alignment(stats) == 70

    def test_weight_cap_argument(self):
        """Weights 10 and 1 under a higher cap: (800 + 20) / 11."""
        stats = [
            QuestionAlignmentStat(question_id="a", average_score=80, response_count=10),
            QuestionAlignmentStat(question_id="b", average_score=20, response_count=1),
        ]
        assert calculate_overall_alignment(stats, max_question_weight=10) == 75

    def test_zero_response_questions_excluded(self):
        stats = [
            {"questionId": "a", "averageScore": 100, "responseCount": 0},
            {"questionId": "b", "averageScore": 50, "responseCount": 2},
        ]
        assert calculate_overall_alignment(stats) == 50

    def test_only_zero_response_questions(self):
        stats = [{"questionId": "a", "averageScore": 100, "responseCount": 0}]
        assert calculate_overall_alignment(stats) == 0
