"""
Core domain: dimensions, ratings, mastery state, variants and schedules.
"""

from facet.core.dimensions import (
    ALL_DIFFICULTY_LEVELS,
    ALL_DIMENSIONS,
    DIFFICULTY_LABELS,
    DIFFICULTY_TARGET_TIMES_MS,
    DIMENSION_ACTION_VERBS,
    DIMENSION_DESCRIPTIONS,
    DIMENSION_DISPLAY_NAMES,
    display_name,
)
from facet.core.models import (
    Concept,
    Dimension,
    DimensionMastery,
    InvalidDimensionError,
    InvalidRatingError,
    MasteryProfile,
    Rating,
    ReviewOutcome,
    ScheduleEntry,
    Variant,
    complete_profile,
    create_empty_mastery_profile,
    create_initial_mastery,
    days_between,
    ensure_utc,
    utc_now,
)

__all__ = [
    # Models
    "Concept",
    "Dimension",
    "DimensionMastery",
    "MasteryProfile",
    "Rating",
    "ReviewOutcome",
    "ScheduleEntry",
    "Variant",
    # Errors
    "InvalidDimensionError",
    "InvalidRatingError",
    # Profile helpers
    "complete_profile",
    "create_empty_mastery_profile",
    "create_initial_mastery",
    # Time helpers
    "days_between",
    "ensure_utc",
    "utc_now",
    # Metadata
    "ALL_DIFFICULTY_LEVELS",
    "ALL_DIMENSIONS",
    "DIFFICULTY_LABELS",
    "DIFFICULTY_TARGET_TIMES_MS",
    "DIMENSION_ACTION_VERBS",
    "DIMENSION_DESCRIPTIONS",
    "DIMENSION_DISPLAY_NAMES",
    "display_name",
]
