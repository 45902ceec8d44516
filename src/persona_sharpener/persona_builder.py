"""Persona builder - folds founder responses into a persona display profile.

Profiles are immutable; every update returns a new PersonaDisplay.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from .archetype import DEFAULT_ARCHETYPE, resolve_archetype
from .clarity import (
    ResponseCollection,
    calculate_avg_confidence,
    calculate_clarity,
    get_unsure_count,
    normalize_responses,
)
from .questions import get_question_by_id
from .schema import PersonaClarity, PersonaDisplay, Question, ResponseInput

logger = logging.getLogger(__name__)

EMPTY_SUMMARY = "Answer questions to build their profile."

AGE_DESCRIPTIONS = {
    "younger": "Young professional",
    "middle": "Mid-career professional",
    "older": "Experienced professional",
}

LIFESTYLE_DESCRIPTIONS = {
    "busy-professional": "juggling multiple priorities",
    "balanced-seeker": "seeking work-life harmony",
}

EMOTIONAL_DESCRIPTIONS = {
    "in-control": "who wants to feel in control",
    "accomplished": "who craves accomplishment",
    "cared-for": "who needs to feel supported",
    "free": "who yearns for freedom",
}


def create_empty_persona_display(persona_id: str, display_name: Optional[str] = None) -> PersonaDisplay:
    """Create a blank profile for a new persona."""
    return PersonaDisplay(
        id=persona_id,
        name=display_name or None,
        archetype=display_name or DEFAULT_ARCHETYPE,
        summary=EMPTY_SUMMARY,
        clarity=PersonaClarity(),
    )


def _field_name(model: BaseModel, key: str) -> Optional[str]:
    """Resolve a camelCase path segment to the model's attribute name."""
    for name, info in type(model).model_fields.items():
        if key in (name, info.alias):
            return name
    return None


def apply_response(persona: PersonaDisplay, question: Question, response: ResponseInput) -> PersonaDisplay:
    """Write a response's value into the persona at the question's field path.

    Unsure responses leave the persona unchanged. Values that do not fit the
    target field are ignored and logged.

    Args:
        persona: Current profile
        question: Question the response answers
        response: The founder's response

    Returns:
        A new PersonaDisplay (the input is never modified)
    """
    if response.is_unsure:
        return persona

    path = question.field.split(".")
    if len(path) == 1:
        target, key = persona, path[0]
    elif len(path) == 2:
        section_name = _field_name(persona, path[0])
        section = getattr(persona, section_name) if section_name else None
        if not isinstance(section, BaseModel):
            logger.debug("No persona section for field %s", question.field)
            return persona
        target, key = section, path[1]
    else:
        logger.debug("Unsupported persona field path %s", question.field)
        return persona

    name = _field_name(target, key)
    if name is None:
        logger.debug("No persona attribute for field %s", question.field)
        return persona

    try:
        updated = _with_value(target, name, response.value)
    except ValidationError as e:
        logger.warning(
            "Ignoring value for %s: does not fit field %s (%s)",
            question.id, question.field, e.error_count(),
        )
        return persona

    if target is persona:
        return updated
    return persona.model_copy(update={section_name: updated})


def _with_value(model: BaseModel, name: str, value: Any) -> BaseModel:
    data = model.model_dump()
    data[name] = value
    return type(model).model_validate(data)


def generate_summary(persona: PersonaDisplay) -> str:
    """One-line description from age range, lifestyle and emotional job."""
    parts = []

    age_range = persona.demographics.age_range
    if age_range:
        parts.append(AGE_DESCRIPTIONS.get(age_range, ""))

    lifestyle = persona.demographics.lifestyle
    if lifestyle in LIFESTYLE_DESCRIPTIONS:
        parts.append(LIFESTYLE_DESCRIPTIONS[lifestyle])

    emotional_job = persona.jobs.emotional
    if emotional_job:
        parts.append(EMOTIONAL_DESCRIPTIONS.get(emotional_job, ""))

    parts = [part for part in parts if part]
    if not parts:
        return EMPTY_SUMMARY
    return " ".join(parts) + "."


def build_persona_display(
    persona_id: str,
    responses: ResponseCollection,
    name: Optional[str] = None,
) -> PersonaDisplay:
    """Build the full persona profile from a founder's responses.

    Args:
        persona_id: Id of the persona
        responses: Founder responses (mapping or iterable); later responses
            for the same question supersede earlier ones
        name: Display name extracted from the founder's brain dump, if any

    Returns:
        PersonaDisplay with fields, clarity, confidence, archetype and summary
    """
    latest = normalize_responses(responses)
    persona = create_empty_persona_display(persona_id, name)

    for response in latest:
        question = get_question_by_id(response.question_id)
        if question is None:
            logger.debug("Skipping response to unknown question %r", response.question_id)
            continue
        persona = apply_response(persona, question, response)

    persona = persona.model_copy(update={
        "clarity": calculate_clarity(latest),
        "avg_confidence": calculate_avg_confidence(latest),
        "unsure_count": get_unsure_count(latest),
    })
    return persona.model_copy(update={
        "archetype": resolve_archetype(name, persona),
        "summary": generate_summary(persona),
    })
