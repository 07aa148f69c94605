"""
facet: adaptive mastery engine for spaced-repetition learning.

Tracks mastery across six cognitive dimensions of a concept and adapts
which question variant is shown next.

- core: domain models (Dimension, Rating, Variant, ScheduleEntry, ...)
- learning: EWMA mastery tracking and weakness analysis
- delivery: SM-2 scheduling, variant selection, review sessions
"""

from facet.core import (
    Concept,
    Dimension,
    DimensionMastery,
    Rating,
    ReviewOutcome,
    ScheduleEntry,
    Variant,
    create_empty_mastery_profile,
)
from facet.delivery import SessionCoordinator, SM2Scheduler, VariantSelector
from facet.learning import MasteryTracker, WeaknessAnalyzer

__version__ = "1.0.0"

__all__ = [
    "Concept",
    "Dimension",
    "DimensionMastery",
    "MasteryTracker",
    "Rating",
    "ReviewOutcome",
    "SM2Scheduler",
    "ScheduleEntry",
    "SessionCoordinator",
    "Variant",
    "VariantSelector",
    "WeaknessAnalyzer",
    "create_empty_mastery_profile",
]
