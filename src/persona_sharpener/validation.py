"""Validation summary - compares validator responses against founder assumptions.

Builds the statistics shown on a persona's validation dashboard: session
counts, per-question and overall alignment, the confidence tier, and the
questions where validators disagree most with the founder.
"""

import json
import logging
from typing import Any, Iterable, Optional, Union

from .alignment import calculate_overall_alignment, calculate_question_alignment
from .config import EngineConfig
from .confidence import get_confidence_level
from .questions import get_question_by_id, get_total_questions
from .schema import (
    Misalignment,
    QuestionAlignmentStat,
    QuestionAlignmentSummary,
    ResponseInput,
    ValidationSessionSummary,
    ValidationSummary,
)

logger = logging.getLogger(__name__)

SESSION_COMPLETED = "completed"
SESSION_IN_PROGRESS = "in_progress"
SESSION_ABANDONED = "abandoned"


def _question_value(response: Union[ResponseInput, dict]) -> tuple[Optional[str], Any]:
    if isinstance(response, ResponseInput):
        return response.question_id, response.value
    question_id = response.get("questionId", response.get("question_id"))
    return question_id, response.get("value")


def compute_validation_summary(
    sessions: Iterable[Union[ValidationSessionSummary, dict]],
    founder_responses: Iterable[Union[ResponseInput, dict]],
    validation_responses: Iterable[Union[ResponseInput, dict]],
    total_questions: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> ValidationSummary:
    """Compute validation summary statistics.

    Args:
        sessions: Validation sessions for the persona
        founder_responses: Founder assumptions (question id + value)
        validation_responses: Validator answers across all sessions
        total_questions: Questions in the bank (defaults to the full bank)
        config: Thresholds to apply (defaults to the built-in settings)

    Returns:
        ValidationSummary. The overall alignment is None when no question
        has both a founder assumption and validator answers.
    """
    config = config or EngineConfig()
    cfg = config.validation_summary
    sessions = [
        s if isinstance(s, ValidationSessionSummary) else ValidationSessionSummary.model_validate(s)
        for s in sessions
    ]

    # Validator values grouped by question, in order of first appearance
    responses_by_question: dict[str, list[Any]] = {}
    total_responses = 0
    for response in validation_responses:
        question_id, value = _question_value(response)
        total_responses += 1
        if question_id is None:
            continue
        responses_by_question.setdefault(question_id, []).append(value)

    founder_by_question: dict[str, Any] = {}
    for response in founder_responses:
        question_id, value = _question_value(response)
        if question_id is not None:
            founder_by_question[question_id] = value

    question_alignments = []
    for question_id, validator_values in responses_by_question.items():
        if question_id not in founder_by_question:
            continue
        alignment = calculate_question_alignment(
            question_id,
            founder_by_question[question_id],
            validator_values,
            match_threshold=config.alignment.match_threshold,
        )
        question_alignments.append(QuestionAlignmentSummary(
            question_id=question_id,
            alignment_score=alignment.average_score,
            response_count=alignment.total,
        ))

    overall = None
    if question_alignments:
        stats = [
            QuestionAlignmentStat(
                question_id=q.question_id,
                average_score=q.alignment_score,
                response_count=q.response_count,
            )
            for q in question_alignments
        ]
        overall = calculate_overall_alignment(
            stats, max_question_weight=config.alignment.max_question_weight
        )

    candidates = [q for q in question_alignments if q.response_count >= cfg.misalignment_min_responses]
    candidates.sort(key=lambda q: q.alignment_score)
    top_misalignments = [_misalignment(q) for q in candidates[:cfg.max_misalignments]]

    logger.debug(
        "Validation summary: %d sessions, %d responses, %d compared questions",
        len(sessions), total_responses, len(question_alignments),
    )

    return ValidationSummary(
        total_sessions=len(sessions),
        completed_sessions=sum(1 for s in sessions if s.status == SESSION_COMPLETED),
        in_progress_sessions=sum(1 for s in sessions if s.status == SESSION_IN_PROGRESS),
        abandoned_sessions=sum(1 for s in sessions if s.status == SESSION_ABANDONED),
        total_responses=total_responses,
        questions_with_responses=len(responses_by_question),
        total_questions=total_questions if total_questions is not None else get_total_questions(),
        overall_alignment_score=overall,
        confidence_level=get_confidence_level(len(sessions)),
        top_misalignments=top_misalignments,
        question_alignments=question_alignments,
    )


def _misalignment(alignment: QuestionAlignmentSummary) -> Misalignment:
    question = get_question_by_id(alignment.question_id)
    return Misalignment(
        question_id=alignment.question_id,
        question_text=question.question if question else alignment.question_id,
        category=question.category.value if question else "unknown",
        alignment_score=alignment.alignment_score,
        response_count=alignment.response_count,
    )


# =============================================================================
# Display Formatting
# =============================================================================

_DISPLAY_KEYS = ("label", "text", "value", "id")


def _json_text(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), default=str)


def _display_text(obj: dict) -> Optional[str]:
    for key in _DISPLAY_KEYS:
        if key in obj:
            return str(obj[key])
    return None


def format_response_value(value: Any, truncate: bool = False) -> str:
    """Format any response value for display in validation views.

    Args:
        value: Response value of any shape
        truncate: Shorten long values for compact views
    """
    empty = "Skipped" if truncate else "No answer"
    if value is None:
        return empty
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float)):
        return str(value)

    if isinstance(value, (list, tuple)):
        formatted = []
        for item in value:
            if isinstance(item, dict):
                text = _display_text(item)
                formatted.append(text if text is not None else _json_text(item))
            else:
                formatted.append(str(item))
        if truncate and len(formatted) > 2:
            return ", ".join(formatted[:2]) + "..."
        return ", ".join(formatted)

    if isinstance(value, dict):
        if not value:
            return empty
        text = _display_text(value)
        if text is not None:
            return text

        # Fill-blank answers: join the non-blank strings
        strings = [v for v in value.values() if isinstance(v, str) and v.strip()]
        if strings:
            joined = ", ".join(strings)
            if truncate and len(joined) > 50:
                return joined[:50] + "..."
            return joined
        return "..." if truncate else _json_text(value)

    return str(value)

