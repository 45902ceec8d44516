"""Statistical confidence tiers for validation response collection.

Thresholds (by number of validation sessions):
- 0: No Data (0%)
- 1-2: Early Signal (50%)
- 3-4: Statistically Meaningful (90%)
- 5-11: High Confidence (95%)
- 12+: Very High Confidence (99%)
"""

from .schema import ConfidenceLevel, NextConfidenceLevel

CONFIDENCE_LEVELS: tuple[ConfidenceLevel, ...] = (
    ConfidenceLevel(
        min_responses=0,
        confidence_percent=0,
        label="No Data",
        message="Share your validation link to start collecting responses.",
        next_level=NextConfidenceLevel(responses=3, confidence=90),
    ),
    ConfidenceLevel(
        min_responses=1,
        confidence_percent=50,
        label="Early Signal",
        message="You have initial feedback, but need more responses for reliable insights.",
        next_level=NextConfidenceLevel(responses=3, confidence=90),
    ),
    ConfidenceLevel(
        min_responses=3,
        confidence_percent=90,
        label="Statistically Meaningful",
        message="You have enough responses for basic statistical significance (90% confidence).",
        next_level=NextConfidenceLevel(responses=5, confidence=95),
    ),
    ConfidenceLevel(
        min_responses=5,
        confidence_percent=95,
        label="High Confidence",
        message="Strong sample size for reliable insights (95% confidence).",
        next_level=NextConfidenceLevel(responses=12, confidence=99),
    ),
    ConfidenceLevel(
        min_responses=12,
        confidence_percent=99,
        label="Very High Confidence",
        message="Excellent sample size for highly reliable insights (99% confidence).",
        next_level=None,
    ),
)

# Display colors (hex)
HIGH_CONFIDENCE_COLOR = "#4ADE80"
MEANINGFUL_CONFIDENCE_COLOR = "#D4A84B"
EARLY_SIGNAL_COLOR = "#FB923C"


def get_confidence_level(response_count: int) -> ConfidenceLevel:
    """Highest confidence tier the response count qualifies for.

    Example:
        get_confidence_level(0).label   # 'No Data'
        get_confidence_level(3).label   # 'Statistically Meaningful'
        get_confidence_level(12).label  # 'Very High Confidence'
    """
    for level in reversed(CONFIDENCE_LEVELS):
        if response_count >= level.min_responses:
            return level
    return CONFIDENCE_LEVELS[0]


def get_confidence_color(confidence_percent: int) -> str:
    if confidence_percent >= 95:
        return HIGH_CONFIDENCE_COLOR
    if confidence_percent >= 90:
        return MEANINGFUL_CONFIDENCE_COLOR
    return EARLY_SIGNAL_COLOR
