"""Pydantic models for the Persona Sharpener engine.

Question definitions, founder/validator responses, and the derived
alignment, clarity and persona display structures. Field aliases match the
camelCase JSON produced by the surrounding web application.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Question Enums
# =============================================================================


class QuestionType(str, Enum):
    """Question type. Determines which comparison strategy applies."""
    EXACT_CHOICE = "this-or-that"
    SLIDER = "slider"
    RANKING = "ranking"
    MULTI_SELECT = "multi-select"
    FILL_BLANK = "fill-blank"
    SCENARIO = "scenario"


class QuestionCategory(str, Enum):
    """Topical category of a question."""
    IDENTITY = "identity"
    GOALS = "goals"
    FRUSTRATIONS = "frustrations"
    EMOTIONAL = "emotional"
    SOCIAL = "social"  # Scored as emotional
    BEHAVIORS = "behaviors"
    ANTI_PATTERNS = "antiPatterns"  # Never scored


class MatchType(str, Enum):
    """Coarse bucket summarizing an alignment score."""
    EXACT = "exact"
    PARTIAL = "partial"
    NONE = "none"


# =============================================================================
# Question Schema
# =============================================================================


class QuestionOption(BaseModel):
    """A selectable option for choice and multi-select questions."""
    value: str
    label: str
    sublabel: Optional[str] = None

    class Config:
        frozen = True


class RankedItem(BaseModel):
    """An item to be ordered in a ranking question."""
    id: str
    label: str
    rank: Optional[int] = None

    class Config:
        frozen = True


class BlankConfig(BaseModel):
    """One blank in a fill-in-the-blank template."""
    id: str
    placeholder: str
    suggestions: list[str] = Field(default_factory=list)

    class Config:
        frozen = True


class Question(BaseModel):
    """Immutable question definition from the question bank."""
    id: str
    type: QuestionType
    category: QuestionCategory
    field: str = Field(..., description="Dotted path into the persona profile")
    question: str
    validation_question: Optional[str] = Field(None, alias="validationQuestion")

    # Type-specific configuration
    options: list[QuestionOption] = Field(default_factory=list)
    items: list[RankedItem] = Field(default_factory=list)
    blanks: list[BlankConfig] = Field(default_factory=list)
    template: Optional[str] = None
    min_label: Optional[str] = Field(None, alias="min")
    max_label: Optional[str] = Field(None, alias="max")
    default_value: Optional[int] = Field(None, alias="defaultValue")
    max_selections: Optional[int] = Field(None, alias="maxSelections")

    # Display hints
    placeholder: Optional[str] = None
    helper_text: Optional[str] = Field(None, alias="helperText")
    instruction: Optional[str] = None

    class Config:
        frozen = True
        populate_by_name = True


# =============================================================================
# Responses
# =============================================================================


class ResponseInput(BaseModel):
    """One answer to one question.

    ``value`` keeps the raw JSON shape submitted by the respondent; the
    ``values`` module turns it into a typed value for the owning question.
    ``None`` means no value was given.
    """
    question_id: str = Field(..., alias="questionId")
    value: Any = None
    is_unsure: bool = Field(False, alias="isUnsure")
    confidence: int = Field(0, ge=0, le=100)
    additional_context: Optional[str] = Field(None, alias="additionalContext")
    context_source: Optional[str] = Field(None, alias="contextSource")

    class Config:
        frozen = True
        populate_by_name = True
        extra = "allow"

    @property
    def is_answered(self) -> bool:
        """True when the response carries a usable assumption."""
        return not self.is_unsure and self.value is not None


# =============================================================================
# Alignment Output
# =============================================================================


class AlignmentResult(BaseModel):
    """Similarity between a reference value and a candidate value."""
    score: int = Field(..., ge=0, le=100)
    match_type: MatchType = Field(..., alias="matchType")
    explanation: str

    class Config:
        frozen = True
        populate_by_name = True


class QuestionAlignment(BaseModel):
    """Alignment of one question across all candidate responses."""
    average_score: int = Field(0, alias="averageScore")
    match_count: int = Field(0, alias="matchCount")
    total: int = 0

    class Config:
        frozen = True
        populate_by_name = True


class QuestionAlignmentStat(BaseModel):
    """Per-question input to the overall alignment score."""
    question_id: str = Field(..., alias="questionId")
    average_score: int = Field(..., alias="averageScore")
    response_count: int = Field(..., alias="responseCount")

    class Config:
        frozen = True
        populate_by_name = True


# =============================================================================
# Clarity & Persona Display
# =============================================================================


class PersonaClarity(BaseModel):
    """Completeness of a persona profile, per category and overall."""
    overall: int = 0
    identity: int = 0
    goals: int = 0
    frustrations: int = 0
    emotional: int = 0
    behaviors: int = 0

    class Config:
        frozen = True


class PersonaDemographics(BaseModel):
    age_range: Optional[str] = Field(None, alias="ageRange")
    lifestyle: Optional[str] = None
    tech_savviness: Optional[float] = Field(None, alias="techSavviness")

    class Config:
        frozen = True
        populate_by_name = True


class PersonaJobs(BaseModel):
    functional: Optional[str] = None
    emotional: Optional[str] = None
    social: Optional[str] = None

    class Config:
        frozen = True


class PersonaGoals(BaseModel):
    priorities: Optional[list[Any]] = None
    success_definition: Optional[dict[str, Any]] = Field(None, alias="successDefinition")

    class Config:
        frozen = True
        populate_by_name = True


class PersonaFrustrations(BaseModel):
    past_failures: Optional[str] = Field(None, alias="pastFailures")
    dealbreakers: Optional[list[Any]] = None
    current_workaround: Optional[dict[str, Any]] = Field(None, alias="currentWorkaround")

    class Config:
        frozen = True
        populate_by_name = True


class PersonaBehaviors(BaseModel):
    decision_style: Optional[str] = Field(None, alias="decisionStyle")
    usage_time: Optional[str] = Field(None, alias="usageTime")
    time_available: Optional[float] = Field(None, alias="timeAvailable")
    discovery_channels: Optional[list[Any]] = Field(None, alias="discoveryChannels")
    influences: Optional[list[Any]] = None

    class Config:
        frozen = True
        populate_by_name = True


class PersonaEmotional(BaseModel):
    recommendation_trigger: Optional[str] = Field(None, alias="recommendationTrigger")

    class Config:
        frozen = True
        populate_by_name = True


class PersonaDisplay(BaseModel):
    """Founder-facing persona profile built up from responses."""
    id: str
    name: Optional[str] = None
    archetype: str = ""
    summary: str = ""
    quote: Optional[str] = None
    demographics: PersonaDemographics = Field(default_factory=PersonaDemographics)
    jobs: PersonaJobs = Field(default_factory=PersonaJobs)
    goals: PersonaGoals = Field(default_factory=PersonaGoals)
    frustrations: PersonaFrustrations = Field(default_factory=PersonaFrustrations)
    behaviors: PersonaBehaviors = Field(default_factory=PersonaBehaviors)
    emotional: PersonaEmotional = Field(default_factory=PersonaEmotional)
    anti_patterns: list[Any] = Field(default_factory=list, alias="antiPatterns")
    clarity: PersonaClarity = Field(default_factory=PersonaClarity)
    avg_confidence: int = Field(0, alias="avgConfidence")
    unsure_count: int = Field(0, alias="unsureCount")

    class Config:
        frozen = True
        populate_by_name = True


# =============================================================================
# Validation Summary
# =============================================================================


class NextConfidenceLevel(BaseModel):
    responses: int
    confidence: int

    class Config:
        frozen = True


class ConfidenceLevel(BaseModel):
    """Statistical confidence tier for a number of validation sessions."""
    min_responses: int = Field(..., alias="minResponses")
    confidence_percent: int = Field(..., alias="confidencePercent")
    label: str
    message: str
    next_level: Optional[NextConfidenceLevel] = Field(None, alias="nextLevel")

    class Config:
        frozen = True
        populate_by_name = True


class ValidationSessionSummary(BaseModel):
    """One respondent's validation session."""
    id: str
    respondent_name: Optional[str] = Field(None, alias="respondentName")
    respondent_email: Optional[str] = Field(None, alias="respondentEmail")
    status: str = "in_progress"
    questions_answered: int = Field(0, alias="questionsAnswered")
    questions_skipped: int = Field(0, alias="questionsSkipped")
    started_at: Optional[datetime] = Field(None, alias="startedAt")
    completed_at: Optional[datetime] = Field(None, alias="completedAt")

    class Config:
        populate_by_name = True
        extra = "allow"


class QuestionAlignmentSummary(BaseModel):
    question_id: str = Field(..., alias="questionId")
    alignment_score: int = Field(..., alias="alignmentScore")
    response_count: int = Field(..., alias="responseCount")

    class Config:
        populate_by_name = True


class Misalignment(BaseModel):
    """A question where validators disagree most with the founder."""
    question_id: str = Field(..., alias="questionId")
    question_text: str = Field(..., alias="questionText")
    category: str
    alignment_score: int = Field(..., alias="alignmentScore")
    response_count: int = Field(..., alias="responseCount")

    class Config:
        populate_by_name = True


class ValidationSummary(BaseModel):
    """Summary statistics for a persona's validation responses."""
    total_sessions: int = Field(0, alias="totalSessions")
    completed_sessions: int = Field(0, alias="completedSessions")
    in_progress_sessions: int = Field(0, alias="inProgressSessions")
    abandoned_sessions: int = Field(0, alias="abandonedSessions")
    total_responses: int = Field(0, alias="totalResponses")
    questions_with_responses: int = Field(0, alias="questionsWithResponses")
    total_questions: int = Field(0, alias="totalQuestions")
    overall_alignment_score: Optional[int] = Field(None, alias="overallAlignmentScore")
    confidence_level: ConfidenceLevel = Field(..., alias="confidenceLevel")
    top_misalignments: list[Misalignment] = Field(default_factory=list, alias="topMisalignments")
    question_alignments: list[QuestionAlignmentSummary] = Field(
        default_factory=list, alias="questionAlignments"
    )

    class Config:
        populate_by_name = True
