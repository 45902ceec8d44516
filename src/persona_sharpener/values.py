"""Typed response values.

Responses arrive as untyped JSON. Before comparison, each raw value is
shaped into the variant that matches its question type, so every comparison
strategy works on an already-checked value. ``ValueShapeError`` is raised
for values that cannot be shaped; the alignment calculator turns it into a
degraded result.
"""

import json
import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from .schema import QuestionType


class ValueShapeError(ValueError):
    """Raised when a raw value does not fit its question type."""

    def __init__(self, question_type: QuestionType, message: str):
        super().__init__(message)
        self.question_type = question_type


@dataclass(frozen=True)
class ChoiceValue:
    """Single choice, compared structurally."""
    canonical: str


@dataclass(frozen=True)
class SliderValue:
    position: float


@dataclass(frozen=True)
class RankingValue:
    """Ordered item keys. ``None`` marks an item without an id."""
    item_ids: tuple


@dataclass(frozen=True)
class SelectionValue:
    """Keys of the selected options. Options without an id are left out."""
    option_ids: frozenset


@dataclass(frozen=True)
class BlankValue:
    """Blank id to normalized (lowercased, trimmed) answer text."""
    answers: tuple[tuple[str, str], ...]

    def as_dict(self) -> dict[str, str]:
        return dict(self.answers)


@dataclass(frozen=True)
class ScenarioValue:
    """Lowercased free text. Empty when no answer was given."""
    text: str


TypedValue = Union[ChoiceValue, SliderValue, RankingValue, SelectionValue, BlankValue, ScenarioValue]

SLIDER_DEFAULT = 50


def canonical_json(value: Any) -> str:
    """Canonical JSON rendering used for structural equality."""
    try:
        return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return repr(value)


def item_id(item: Any) -> Any:
    """Id of a ranking/selection item. Items may be plain ids or objects with an ``id``."""
    if isinstance(item, dict):
        return item.get("id")
    if hasattr(item, "id"):
        return item.id
    return item


def item_key(item: Any) -> Optional[str]:
    """Comparison key for an item: the canonical JSON of its id.

    Ids compare like exact-choice answers, so ``1``, ``1.0`` and ``True``
    are different ids and list or object ids need no hashing. Items without
    an id have no key.
    """
    key = item_id(item)
    if key is None:
        return None
    return canonical_json(key)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _as_text(value: Any) -> str:
    if value is None or value is False or value == "":
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
        return ""
    return str(value)


def to_choice(value: Any) -> ChoiceValue:
    if hasattr(value, "model_dump"):
        value = value.model_dump()
    return ChoiceValue(canonical=canonical_json(value))


def to_slider(value: Any) -> SliderValue:
    """Non-numeric slider input falls back to the midpoint."""
    return SliderValue(position=float(value) if _is_number(value) else float(SLIDER_DEFAULT))


def to_ranking(value: Any) -> RankingValue:
    if not isinstance(value, (list, tuple)):
        raise ValueShapeError(QuestionType.RANKING, "Invalid ranking data")
    return RankingValue(item_ids=tuple(item_key(item) for item in value))


def to_selection(value: Any) -> SelectionValue:
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueShapeError(QuestionType.MULTI_SELECT, "Invalid selection data")
    keys = (item_key(item) for item in value)
    return SelectionValue(option_ids=frozenset(key for key in keys if key is not None))


def to_blanks(value: Any) -> BlankValue:
    if hasattr(value, "model_dump"):
        value = value.model_dump()
    if not isinstance(value, dict):
        raise ValueShapeError(QuestionType.FILL_BLANK, "Invalid fill-blank data")
    return BlankValue(answers=tuple(
        (str(key), _as_text(answer).lower().strip())
        for key, answer in value.items()
    ))


def to_scenario(value: Any) -> ScenarioValue:
    return ScenarioValue(text=_as_text(value).lower())


_CONVERTERS = {
    QuestionType.EXACT_CHOICE: to_choice,
    QuestionType.SLIDER: to_slider,
    QuestionType.RANKING: to_ranking,
    QuestionType.MULTI_SELECT: to_selection,
    QuestionType.FILL_BLANK: to_blanks,
    QuestionType.SCENARIO: to_scenario,
}


def parse_value(question_type: QuestionType, value: Any) -> TypedValue:
    """Shape a raw response value for the given question type.

    Unrecognized types use structural comparison, like exact-choice questions.

    Raises:
        ValueShapeError: If the value cannot be shaped for the type.
    """
    converter = _CONVERTERS.get(question_type, to_choice)
    return converter(value)
