"""Clarity & Confidence Scorer.

Measures how complete a founder's own persona answers are, independent of
any validator. Social answers count toward the emotional category and
anti-pattern answers never count.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Mapping, Union

from .questions import get_question_by_id
from .rounding import round_half_up
from .schema import PersonaClarity, QuestionCategory, ResponseInput

logger = logging.getLogger(__name__)

# Questions needed for full clarity in each scored category
CATEGORY_QUESTION_COUNTS = MappingProxyType({
    QuestionCategory.IDENTITY: 4,
    QuestionCategory.GOALS: 3,
    QuestionCategory.FRUSTRATIONS: 3,
    QuestionCategory.EMOTIONAL: 3,
    QuestionCategory.BEHAVIORS: 3,
})

# Categories scored under another category's heading
CATEGORY_FOLDING = MappingProxyType({
    QuestionCategory.SOCIAL: QuestionCategory.EMOTIONAL,
})

ResponseCollection = Union[Mapping[str, Union[ResponseInput, dict]], Iterable[Union[ResponseInput, dict]]]


def normalize_responses(responses: ResponseCollection) -> list[ResponseInput]:
    """Turn a response collection into one response per question.

    Accepts a mapping keyed by question id or any iterable of responses
    (models or camelCase dicts). A later response for the same question
    supersedes an earlier one.
    """
    if isinstance(responses, Mapping):
        responses = responses.values()

    latest: dict[str, ResponseInput] = {}
    for response in responses:
        if not isinstance(response, ResponseInput):
            response = ResponseInput.model_validate(response)
        latest[response.question_id] = response
    return list(latest.values())


def calculate_clarity(responses: ResponseCollection) -> PersonaClarity:
    """Score persona completeness per category and overall.

    Each confident answer adds 100 / (questions in its category) to the
    category; categories are capped at 100 and the overall score is the
    plain mean of the five categories.
    """
    totals = {category: 0.0 for category in CATEGORY_QUESTION_COUNTS}

    for response in normalize_responses(responses):
        if not response.is_answered:
            continue
        question = get_question_by_id(response.question_id)
        if question is None:
            logger.debug("Skipping clarity for unknown question %r", response.question_id)
            continue

        category = CATEGORY_FOLDING.get(question.category, question.category)
        if category not in totals:
            continue
        totals[category] += 100 / CATEGORY_QUESTION_COUNTS[category]

    scores = {category.value: min(100, round_half_up(total)) for category, total in totals.items()}
    overall = round_half_up(sum(scores.values()) / len(scores))
    return PersonaClarity(overall=overall, **scores)


def calculate_avg_confidence(responses: ResponseCollection) -> int:
    """Mean self-reported confidence of the answered (not unsure) responses."""
    answered = [r for r in normalize_responses(responses) if r.is_answered]
    if not answered:
        return 0
    return round_half_up(sum(r.confidence for r in answered) / len(answered))


def get_unsure_count(responses: ResponseCollection) -> int:
    return sum(1 for r in normalize_responses(responses) if r.is_unsure)
