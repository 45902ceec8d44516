"""Alignment Calculator - compares validator answers against founder assumptions.

Each question type has its own similarity semantics. The calculator shapes
both raw values for the question type, then dispatches to the matching
strategy. It never raises: unknown questions and malformed values degrade to
a zero score with an explanation.
"""

import logging
import re
from typing import Any, Callable, Iterable, Optional, Union

from .questions import get_question_by_id
from .rounding import clamp_score, round_half_up
from .schema import (
    AlignmentResult,
    MatchType,
    Question,
    QuestionAlignment,
    QuestionAlignmentStat,
    QuestionType,
)
from .values import (
    BlankValue,
    ChoiceValue,
    RankingValue,
    ScenarioValue,
    SelectionValue,
    SliderValue,
    ValueShapeError,
    parse_value,
)

logger = logging.getLogger(__name__)

# Aggregation defaults
DEFAULT_MATCH_THRESHOLD = 70
DEFAULT_MAX_QUESTION_WEIGHT = 5


def _result(score: float, match_type: MatchType, explanation: str) -> AlignmentResult:
    return AlignmentResult(score=clamp_score(score), match_type=match_type, explanation=explanation)


def _bucket(score: int, exact_at: int, partial_at: int) -> MatchType:
    if score >= exact_at:
        return MatchType.EXACT
    if score >= partial_at:
        return MatchType.PARTIAL
    return MatchType.NONE


class AlignmentCalculator:
    """Scores how closely a candidate answer matches a reference answer.

    Principles:
    - One comparison strategy per question type
    - Scores always land in [0, 100]
    - Malformed input is scored, never raised
    """

    # Points per reference position; positions past the table are worth 1
    RANKING_POSITION_WEIGHTS = (30, 25, 20, 15, 7, 3)
    RANKING_TRAILING_WEIGHT = 1

    # Share of the position weight kept when an item moved by N places
    RANKING_DISTANCE_CREDIT = {0: 1.0, 1: 0.7, 2: 0.4}

    SCENARIO_STOPWORDS = frozenset([
        "that", "this", "with", "have", "from", "they", "their", "would",
        "could", "about", "which", "when", "what", "will", "been", "more",
        "some", "just", "like", "very", "also", "than",
    ])
    SCENARIO_MIN_WORD_LENGTH = 4
    SCENARIO_SCORE_FLOOR = 40

    FILL_BLANK_MIN_SHARED_WORD_LENGTH = 4

    _WORD_SPLIT = re.compile(r"\W+")

    def __init__(self, question_lookup: Optional[Callable[[str], Optional[Question]]] = None):
        """Initialize with an optional question lookup (defaults to the question bank)."""
        self._lookup = question_lookup or get_question_by_id
        self._strategies = {
            QuestionType.EXACT_CHOICE: self._score_exact_choice,
            QuestionType.SLIDER: self._score_slider,
            QuestionType.RANKING: self._score_ranking,
            QuestionType.MULTI_SELECT: self._score_multi_select,
            QuestionType.FILL_BLANK: self._score_fill_blank,
            QuestionType.SCENARIO: self._score_scenario,
        }

    def calculate(self, question_id: str, reference_value: Any, candidate_value: Any) -> AlignmentResult:
        """Compare a candidate value with the reference value for a question.

        Args:
            question_id: Id of the question both values answer
            reference_value: The founder's assumption (ground truth)
            candidate_value: The validator's answer

        Returns:
            AlignmentResult with a 0-100 score, match bucket and explanation
        """
        question = self._lookup(question_id)
        if question is None:
            logger.debug("Alignment requested for unknown question %r", question_id)
            return _result(0, MatchType.NONE, "Unknown question")

        try:
            reference = parse_value(question.type, reference_value)
            candidate = parse_value(question.type, candidate_value)
        except ValueShapeError as e:
            logger.debug("Malformed %s value for question %s: %s", e.question_type.value, question_id, e)
            return _result(0, MatchType.NONE, str(e))

        strategy = self._strategies.get(question.type, self._score_default)
        return strategy(reference, candidate)

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def _score_exact_choice(self, reference: ChoiceValue, candidate: ChoiceValue) -> AlignmentResult:
        if reference.canonical == candidate.canonical:
            return _result(100, MatchType.EXACT, "Same choice")
        return _result(0, MatchType.NONE, "Different choice")

    def _score_slider(self, reference: SliderValue, candidate: SliderValue) -> AlignmentResult:
        """Proximity scoring: within 10 points is a full match, then linear decay."""
        diff = abs(reference.position - candidate.position)

        if diff <= 10:
            return _result(100, MatchType.EXACT, "Very close values")
        if diff <= 25:
            # 100 down to 70
            return _result(100 - (diff - 10) * 2, MatchType.PARTIAL, "Similar values")
        if diff <= 50:
            # 70 down to 45
            return _result(70 - (diff - 25), MatchType.PARTIAL, "Somewhat different")
        return _result(max(0, 45 - (diff - 50)), MatchType.NONE, "Very different values")

    def _score_ranking(self, reference: RankingValue, candidate: RankingValue) -> AlignmentResult:
        """Weighted position comparison.

        Maximum points come from the reference list alone, so extra
        candidate items never affect the score.
        """
        earned = 0.0
        max_points = 0

        for ref_pos, item in enumerate(reference.item_ids):
            if ref_pos < len(self.RANKING_POSITION_WEIGHTS):
                weight = self.RANKING_POSITION_WEIGHTS[ref_pos]
            else:
                weight = self.RANKING_TRAILING_WEIGHT
            max_points += weight

            # Items without an id cannot be located in the candidate list
            if item is None or item not in candidate.item_ids:
                continue
            distance = abs(ref_pos - candidate.item_ids.index(item))
            earned += weight * self.RANKING_DISTANCE_CREDIT.get(distance, 0.0)

        score = round_half_up(earned / max_points * 100) if max_points > 0 else 0
        match_type = _bucket(score, 80, 50)
        explanation = {
            MatchType.EXACT: "Priorities align closely",
            MatchType.PARTIAL: "Some priority overlap",
            MatchType.NONE: "Different priorities",
        }[match_type]
        return _result(score, match_type, explanation)

    def _score_multi_select(self, reference: SelectionValue, candidate: SelectionValue) -> AlignmentResult:
        """Jaccard similarity of the two selections."""
        shared = len(reference.option_ids & candidate.option_ids)
        union = len(reference.option_ids | candidate.option_ids)

        score = round_half_up(shared / union * 100) if union > 0 else 0
        match_type = _bucket(score, 70, 40)
        if match_type == MatchType.EXACT:
            explanation = f"{shared} shared selections"
        elif match_type == MatchType.PARTIAL:
            explanation = f"{shared} overlap"
        else:
            explanation = f"Little overlap in selections ({shared} shared)"
        return _result(score, match_type, explanation)

    def _score_fill_blank(self, reference: BlankValue, candidate: BlankValue) -> AlignmentResult:
        """Per-blank comparison: exact text is a point, a shared word is half."""
        candidate_answers = candidate.as_dict()
        blanks = reference.answers
        exact = 0
        partial = 0

        for blank_id, ref_text in blanks:
            cand_text = candidate_answers.get(blank_id, "")
            if ref_text == cand_text:
                exact += 1
            elif ref_text and cand_text and self._share_long_word(ref_text, cand_text):
                partial += 1

        score = round_half_up((exact + partial * 0.5) / len(blanks) * 100) if blanks else 0
        match_type = _bucket(score, 70, 40)
        explanation = {
            MatchType.EXACT: "Similar responses",
            MatchType.PARTIAL: "Some similarity",
            MatchType.NONE: "Different responses",
        }[match_type]
        return _result(score, match_type, explanation)

    def _share_long_word(self, first: str, second: str) -> bool:
        shared = set(first.split()) & set(second.split())
        return any(len(word) >= self.FILL_BLANK_MIN_SHARED_WORD_LENGTH for word in shared)

    def _score_scenario(self, reference: ScenarioValue, candidate: ScenarioValue) -> AlignmentResult:
        """Keyword overlap with a floor, since free text is subjective."""
        if not reference.text or not candidate.text:
            return _result(50, MatchType.PARTIAL, "Open-ended response")

        ref_words = self._keywords(reference.text)
        cand_words = self._keywords(candidate.text)
        min_size = min(len(ref_words), len(cand_words))
        if min_size == 0:
            return _result(50, MatchType.PARTIAL, "Open-ended (no comparison)")

        raw = min(100, round_half_up(len(ref_words & cand_words) / min_size * 100))
        if raw >= 60:
            return _result(max(self.SCENARIO_SCORE_FLOOR, raw), MatchType.PARTIAL, "Theme overlap detected")
        return _result(max(self.SCENARIO_SCORE_FLOOR, raw), MatchType.NONE, "Unique perspective")

    def _keywords(self, text: str) -> set[str]:
        return {
            word for word in self._WORD_SPLIT.split(text)
            if len(word) >= self.SCENARIO_MIN_WORD_LENGTH and word not in self.SCENARIO_STOPWORDS
        }

    def _score_default(self, reference: ChoiceValue, candidate: ChoiceValue) -> AlignmentResult:
        if reference.canonical == candidate.canonical:
            return _result(100, MatchType.EXACT, "Exact match")
        return _result(0, MatchType.NONE, "Different values")


_default_calculator = AlignmentCalculator()


def calculate_alignment(question_id: str, reference_value: Any, candidate_value: Any) -> AlignmentResult:
    """Score one candidate answer against the reference answer for a question."""
    return _default_calculator.calculate(question_id, reference_value, candidate_value)


# =============================================================================
# Aggregation
# =============================================================================


def calculate_question_alignment(
    question_id: str,
    reference_value: Any,
    candidate_values: Iterable[Any],
    calculator: Optional[AlignmentCalculator] = None,
    match_threshold: int = DEFAULT_MATCH_THRESHOLD,
) -> QuestionAlignment:
    """Aggregate alignment for one question across all validator answers.

    Args:
        question_id: Question being compared
        reference_value: The founder's assumption
        candidate_values: Every validator answer to the question
        calculator: Calculator to use (defaults to the question bank calculator)
        match_threshold: Score at or above which an answer counts as a match

    Returns:
        Rounded mean score, number of matches (score at or above
        ``match_threshold``) and the number of candidates. No candidates
        gives all zeros.
    """
    calculator = calculator or _default_calculator
    candidates = list(candidate_values)
    if not candidates:
        return QuestionAlignment(average_score=0, match_count=0, total=0)

    total_score = 0
    match_count = 0
    for value in candidates:
        result = calculator.calculate(question_id, reference_value, value)
        total_score += result.score
        if result.score >= match_threshold:
            match_count += 1

    return QuestionAlignment(
        average_score=round_half_up(total_score / len(candidates)),
        match_count=match_count,
        total=len(candidates),
    )


def calculate_overall_alignment(
    question_stats: Iterable[Union[QuestionAlignmentStat, dict]],
    max_question_weight: int = DEFAULT_MAX_QUESTION_WEIGHT,
) -> int:
    """Weighted mean of per-question alignment.

    Each question weighs min(response_count, max_question_weight), so one
    heavily answered question cannot dominate. Questions without responses
    are ignored; no usable questions gives 0.
    """
    weighted_sum = 0.0
    total_weight = 0

    for stat in question_stats:
        if isinstance(stat, dict):
            stat = QuestionAlignmentStat.model_validate(stat)
        if stat.response_count <= 0:
            continue
        weight = min(stat.response_count, max_question_weight)
        weighted_sum += stat.average_score * weight
        total_weight += weight

    if total_weight == 0:
        return 0
    return round_half_up(weighted_sum / total_weight)
