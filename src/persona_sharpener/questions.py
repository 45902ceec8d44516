"""Question bank for the Persona Sharpener.

Static catalog of question definitions, grouped by category, plus the
interleaved sequence founders answer them in. Loaded once at import and
never mutated.
"""

from types import MappingProxyType
from typing import Iterable, Optional

from .schema import (
    BlankConfig,
    Question,
    QuestionCategory,
    QuestionOption,
    QuestionType,
    RankedItem,
    ResponseInput,
)


def _options(*triples: tuple) -> list[QuestionOption]:
    return [
        QuestionOption(value=t[0], label=t[1], sublabel=t[2] if len(t) > 2 else None)
        for t in triples
    ]


def _items(*pairs: tuple[str, str]) -> list[RankedItem]:
    return [RankedItem(id=item_id, label=label) for item_id, label in pairs]


_IDENTITY = (
    Question(
        id="age-range",
        type=QuestionType.EXACT_CHOICE,
        category=QuestionCategory.IDENTITY,
        field="demographics.ageRange",
        question="Your ideal customer is more likely to be...",
        validation_question="Which age range best describes you?",
        options=_options(
            ("younger", "18-35", "Digital native, mobile-first"),
            ("middle", "35-50", "Established career, time-poor"),
            ("older", "50+", "More deliberate, values quality"),
        ),
    ),
    Question(
        id="lifestyle",
        type=QuestionType.EXACT_CHOICE,
        category=QuestionCategory.IDENTITY,
        field="demographics.lifestyle",
        question="Which better describes their lifestyle?",
        validation_question="Which better describes your lifestyle?",
        options=_options(
            ("busy-professional", "Busy Professional", "Career-focused, optimizes for efficiency"),
            ("balanced-seeker", "Balance Seeker", "Prioritizes work-life harmony"),
        ),
    ),
    Question(
        id="tech-savvy",
        type=QuestionType.SLIDER,
        category=QuestionCategory.IDENTITY,
        field="demographics.techSavviness",
        question="How tech-savvy is your typical customer?",
        validation_question="How tech-savvy would you say you are?",
        min_label="Prefers simplicity",
        max_label="Power user",
        default_value=50,
    ),
    Question(
        id="decision-style",
        type=QuestionType.EXACT_CHOICE,
        category=QuestionCategory.IDENTITY,
        field="behaviors.decisionStyle",
        question="When trying something new, they typically...",
        validation_question="When trying something new, you typically...",
        options=_options(
            ("researcher", "Research First", "Reads reviews, compares options"),
            ("action-taker", "Jump In", "Figures it out as they go"),
        ),
    ),
)

_GOALS = (
    Question(
        id="primary-goal",
        type=QuestionType.RANKING,
        category=QuestionCategory.GOALS,
        field="goals.priorities",
        question="Rank what matters most to your customer:",
        validation_question="Rank what matters most to you:",
        items=_items(
            ("save-time", "Save time"),
            ("save-money", "Save money"),
            ("look-good", "Look/feel good"),
            ("be-healthy", "Be healthier"),
            ("reduce-stress", "Reduce stress"),
            ("achieve-more", "Achieve more"),
        ),
    ),
    Question(
        id="success-scenario",
        type=QuestionType.FILL_BLANK,
        category=QuestionCategory.GOALS,
        field="goals.successDefinition",
        question="Complete this from your customer's perspective:",
        validation_question="Complete this from your perspective:",
        template="I would consider this product a success if it helped me {blank} within {timeframe}.",
        blanks=[
            BlankConfig(id="blank", placeholder="achieve what outcome?"),
            BlankConfig(
                id="timeframe",
                placeholder="what timeframe?",
                suggestions=["a week", "a month", "3 months"],
            ),
        ],
    ),
    Question(
        id="functional-job",
        type=QuestionType.SCENARIO,
        category=QuestionCategory.GOALS,
        field="jobs.functional",
        question="When your customer uses your product, what's the primary task they're trying to accomplish?",
        validation_question="When you use products like this, what's the primary task you're trying to accomplish?",
        placeholder="e.g., 'Fit a workout into their lunch break' or 'Find the right gift in under 5 minutes'",
        helper_text="Focus on the functional job - what they literally need to get done",
    ),
)

_FRUSTRATIONS = (
    Question(
        id="past-failures",
        type=QuestionType.SCENARIO,
        category=QuestionCategory.FRUSTRATIONS,
        field="frustrations.pastFailures",
        question="What have they tried before that didn't work? Why did it fail them?",
        validation_question="What have you tried before that didn't work? Why did it fail you?",
        placeholder="e.g., 'They tried fitness apps but hated logging every meal...'",
        helper_text="Understanding past failures reveals what NOT to do",
    ),
    Question(
        id="dealbreakers",
        type=QuestionType.MULTI_SELECT,
        category=QuestionCategory.FRUSTRATIONS,
        field="frustrations.dealbreakers",
        question="Which of these would make them abandon a product like yours?",
        validation_question="Which of these would make you abandon a product like this?",
        options=_options(
            ("too-complex", "Too complicated to set up"),
            ("too-slow", "Takes too long to see results"),
            ("too-expensive", "Costs too much"),
            ("too-needy", "Requires too much daily effort"),
            ("too-generic", "Feels generic, not personalized"),
            ("bad-support", "Poor customer support"),
            ("privacy", "Privacy/data concerns"),
            ("social-required", "Forces social features"),
        ),
        max_selections=3,
        instruction="Select up to 3",
    ),
    Question(
        id="current-workaround",
        type=QuestionType.FILL_BLANK,
        category=QuestionCategory.FRUSTRATIONS,
        field="frustrations.currentWorkaround",
        question="How do they currently solve this problem (without your product)?",
        validation_question="How do you currently solve this problem?",
        template="Right now, they {workaround}, but they hate it because {reason}.",
        blanks=[
            BlankConfig(id="workaround", placeholder="what do they do?"),
            BlankConfig(id="reason", placeholder="why is it frustrating?"),
        ],
    ),
)

_EMOTIONAL = (
    Question(
        id="emotional-job",
        type=QuestionType.EXACT_CHOICE,
        category=QuestionCategory.EMOTIONAL,
        field="jobs.emotional",
        question="When using your product, they primarily want to feel...",
        validation_question="When using products like this, you primarily want to feel...",
        options=_options(
            ("in-control", "In Control", "Confident, organized, on top of things"),
            ("accomplished", "Accomplished", "Proud, successful, making progress"),
            ("cared-for", "Cared For", "Supported, understood, not alone"),
            ("free", "Free", "Unburdened, relaxed, without worry"),
        ),
    ),
    Question(
        id="quote-capture",
        type=QuestionType.SCENARIO,
        category=QuestionCategory.EMOTIONAL,
        field="quote",
        question="In your customer's voice, what would they say is their biggest frustration?",
        validation_question="In your own words, what's your biggest frustration in this area?",
        placeholder="Write naturally - we're capturing authentic language",
        helper_text="This quote will appear on the persona card",
    ),
    Question(
        id="recommendation-trigger",
        type=QuestionType.SCENARIO,
        category=QuestionCategory.EMOTIONAL,
        field="emotional.recommendationTrigger",
        question="What would make them tell a friend about your product?",
        validation_question="What would make you tell a friend about a product like this?",
        placeholder="e.g., 'If they finally stuck with a routine for more than 2 weeks...'",
        helper_text="This reveals the emotional payoff they're really seeking",
    ),
)

_SOCIAL = (
    Question(
        id="social-job",
        type=QuestionType.EXACT_CHOICE,
        category=QuestionCategory.SOCIAL,
        field="jobs.social",
        question="How do they want to be perceived by others?",
        validation_question="How do you want to be perceived by others in this area?",
        options=_options(
            ("competent", "Competent", "Has their act together"),
            ("aspirational", "Aspirational", "Someone to look up to"),
            ("relatable", "Relatable", "Down to earth, authentic"),
            ("innovative", "Innovative", "Ahead of the curve"),
        ),
    ),
    Question(
        id="influence-sources",
        type=QuestionType.MULTI_SELECT,
        category=QuestionCategory.SOCIAL,
        field="behaviors.influences",
        question="Who influences their decisions in this area?",
        validation_question="Who influences your decisions in this area?",
        options=_options(
            ("friends", "Friends & family"),
            ("colleagues", "Colleagues & peers"),
            ("influencers", "Social media influencers"),
            ("experts", "Industry experts"),
            ("reviews", "Online reviews"),
            ("nobody", "Research independently"),
        ),
        max_selections=2,
        instruction="Select top 2",
    ),
)

_BEHAVIORS = (
    Question(
        id="discovery-channel",
        type=QuestionType.RANKING,
        category=QuestionCategory.BEHAVIORS,
        field="behaviors.discoveryChannels",
        question="Where are they most likely to discover products like yours?",
        validation_question="Where are you most likely to discover products like this?",
        items=_items(
            ("social", "Social media"),
            ("search", "Google search"),
            ("friend", "Friend recommendation"),
            ("content", "Blog/article/podcast"),
            ("app-store", "App store browsing"),
            ("ads", "Paid ads"),
        ),
    ),
    Question(
        id="usage-time",
        type=QuestionType.EXACT_CHOICE,
        category=QuestionCategory.BEHAVIORS,
        field="behaviors.usageTime",
        question="When would they most likely use your product?",
        validation_question="When would you most likely use a product like this?",
        options=_options(
            ("morning", "Morning", "Part of their wake-up routine"),
            ("workday", "During Work", "Micro-moments between tasks"),
            ("evening", "Evening", "Wind-down or planning time"),
            ("weekend", "Weekend", "Dedicated personal time"),
        ),
    ),
    Question(
        id="time-available",
        type=QuestionType.SLIDER,
        category=QuestionCategory.BEHAVIORS,
        field="behaviors.timeAvailable",
        question="How much time can they realistically dedicate to this?",
        validation_question="How much time can you realistically dedicate to this?",
        min_label="< 5 min/day",
        max_label="30+ min/day",
        default_value=30,
    ),
)

_ANTI_PATTERNS = (
    Question(
        id="not-customer",
        type=QuestionType.MULTI_SELECT,
        category=QuestionCategory.ANTI_PATTERNS,
        field="antiPatterns",
        question="Who is explicitly NOT your customer?",
        validation_question=None,
        options=_options(
            ("price-sensitive", "People who only care about price"),
            ("experts", "People who already know everything"),
            ("no-problem", "People who don't have this problem"),
            ("no-change", "People resistant to change"),
            ("wrong-platform", "People on wrong platforms"),
            ("wrong-stage", "People at wrong life stage"),
        ),
        max_selections=3,
        instruction="Select up to 3",
    ),
)


QUESTION_BANK = MappingProxyType({
    QuestionCategory.IDENTITY: _IDENTITY,
    QuestionCategory.GOALS: _GOALS,
    QuestionCategory.FRUSTRATIONS: _FRUSTRATIONS,
    QuestionCategory.EMOTIONAL: _EMOTIONAL,
    QuestionCategory.SOCIAL: _SOCIAL,
    QuestionCategory.BEHAVIORS: _BEHAVIORS,
    QuestionCategory.ANTI_PATTERNS: _ANTI_PATTERNS,
})

# Interleaved so that founders see every category early on
QUESTION_SEQUENCE: tuple[Question, ...] = (
    _IDENTITY[:2]
    + _GOALS[:2]
    + _FRUSTRATIONS[:2]
    + _EMOTIONAL[:2]
    + _BEHAVIORS[:2]
    + _IDENTITY[2:]
    + _GOALS[2:]
    + _FRUSTRATIONS[2:]
    + _EMOTIONAL[2:]
    + _SOCIAL
    + _BEHAVIORS[2:]
    + _ANTI_PATTERNS
)

_QUESTIONS_BY_ID = MappingProxyType({q.id: q for q in QUESTION_SEQUENCE})


def get_question_by_id(question_id: str) -> Optional[Question]:
    """Look up a question by id. Returns None for unknown ids."""
    if not isinstance(question_id, str):
        return None
    return _QUESTIONS_BY_ID.get(question_id)


def get_questions_by_category(category) -> list[Question]:
    """Get the questions of a category (enum or string value)."""
    try:
        key = QuestionCategory(category)
    except ValueError:
        return []
    return list(QUESTION_BANK.get(key, ()))


def get_total_questions() -> int:
    return len(QUESTION_SEQUENCE)


# =============================================================================
# Validation Mode
# =============================================================================


def get_validation_questions() -> list[Question]:
    """Questions that can be put to real customers.

    Only questions with second-person validation wording qualify.
    """
    return [
        question
        for questions in QUESTION_BANK.values()
        for question in questions
        if question.validation_question
    ]


def get_validation_questions_by_category(category) -> list[Question]:
    return [q for q in get_questions_by_category(category) if q.validation_question]


def get_question_text(question: Question, is_validation: bool) -> str:
    """Get the wording to display for the given mode."""
    if is_validation and question.validation_question:
        return question.validation_question
    return question.question


def get_answered_question_ids(founder_responses: Iterable) -> set[str]:
    """Ids of the questions the founder answered.

    Accepts ResponseInput models or plain dicts with a ``questionId`` key.
    """
    ids = set()
    for response in founder_responses:
        if isinstance(response, ResponseInput):
            ids.add(response.question_id)
        elif isinstance(response, dict):
            question_id = response.get("questionId", response.get("question_id"))
            if question_id is not None:
                ids.add(question_id)
    return ids


def get_matching_validation_questions(founder_responses: Iterable) -> list[Question]:
    """Validation questions restricted to those the founder actually answered."""
    answered = get_answered_question_ids(founder_responses)
    return [q for q in get_validation_questions() if q.id in answered]
