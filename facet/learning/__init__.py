"""
Learning: mastery tracking and weakness analysis.
"""

from facet.learning.mastery_tracker import (
    MasteryConfig,
    MasteryTracker,
    apply_review,
    combined_mastery,
    is_fragile_confidence,
    is_weak_dimension,
    rating_to_score,
    speed_score,
    update_ewma,
    update_mastery,
)
from facet.learning.weakness_analyzer import (
    OverallHealth,
    Severity,
    Weakness,
    WeaknessAnalyzer,
    WeaknessConfig,
    WeaknessProfile,
    analyze_weaknesses,
    get_suggestion,
)

__all__ = [
    # Mastery
    "MasteryConfig",
    "MasteryTracker",
    "apply_review",
    "combined_mastery",
    "is_fragile_confidence",
    "is_weak_dimension",
    "rating_to_score",
    "speed_score",
    "update_ewma",
    "update_mastery",
    # Weakness
    "OverallHealth",
    "Severity",
    "Weakness",
    "WeaknessAnalyzer",
    "WeaknessConfig",
    "WeaknessProfile",
    "analyze_weaknesses",
    "get_suggestion",
]
