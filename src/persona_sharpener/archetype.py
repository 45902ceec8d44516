"""Archetype Resolver - short human-readable labels for personas."""

from types import MappingProxyType
from typing import Optional, Union

from .schema import PersonaDisplay

DEFAULT_ARCHETYPE = "Your Ideal Customer"

# "<emotional job>-<lifestyle>" -> label
ARCHETYPES = MappingProxyType({
    "in-control-busy-professional": "The Efficient Optimizer",
    "in-control-balanced-seeker": "The Calm Commander",
    "accomplished-busy-professional": "The Driven Achiever",
    "accomplished-balanced-seeker": "The Mindful Achiever",
    "cared-for-busy-professional": "The Overwhelmed Overcomer",
    "cared-for-balanced-seeker": "The Supported Striver",
    "free-busy-professional": "The Escaping Executive",
    "free-balanced-seeker": "The Peace Seeker",
})


def _emotional_job_and_lifestyle(persona: Union[PersonaDisplay, dict, None]) -> tuple[str, str]:
    if isinstance(persona, PersonaDisplay):
        return persona.jobs.emotional or "", persona.demographics.lifestyle or ""
    if isinstance(persona, dict):
        jobs = persona.get("jobs") or {}
        demographics = persona.get("demographics") or {}
        if not isinstance(jobs, dict) or not isinstance(demographics, dict):
            return "", ""
        return str(jobs.get("emotional") or ""), str(demographics.get("lifestyle") or "")
    return "", ""


def generate_archetype(persona: Union[PersonaDisplay, dict, None]) -> str:
    """Derive an archetype from the persona's emotional job and lifestyle.

    Unmapped combinations (including missing attributes) give the default
    label.
    """
    emotional_job, lifestyle = _emotional_job_and_lifestyle(persona)
    return ARCHETYPES.get(f"{emotional_job}-{lifestyle}", DEFAULT_ARCHETYPE)


def resolve_archetype(
    extracted_name: Optional[str],
    persona: Union[PersonaDisplay, dict, None],
) -> str:
    """Resolve the display archetype for a persona.

    Priority:
    1. A name extracted from the founder's brain dump (e.g. "The Busy Executive")
    2. The generated archetype, when it is not the default
    3. The default label
    """
    if extracted_name:
        return extracted_name

    generated = generate_archetype(persona)
    if generated and generated != DEFAULT_ARCHETYPE:
        return generated

    return DEFAULT_ARCHETYPE
