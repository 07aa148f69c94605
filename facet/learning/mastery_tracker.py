"""
Mastery Tracker using EWMA (Exponentially Weighted Moving Average).

Tracks learner mastery per cognitive dimension with two smoothed signals:
- accuracy: EWMA of the review rating mapped to a 0-1 score
- speed: EWMA of response time relative to a per-difficulty target

Combined mastery = 0.7 * accuracy + 0.3 * speed
(correctness matters more than automaticity).

All functions are pure. Numeric inputs are clamped, never rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from loguru import logger

from facet.core.dimensions import DIFFICULTY_TARGET_TIMES_MS
from facet.core.models import (
    Dimension,
    DimensionMastery,
    MasteryProfile,
    Rating,
    ReviewOutcome,
    complete_profile,
    create_initial_mastery,
)

if TYPE_CHECKING:
    from config import Settings

DEFAULT_ALPHA = 0.15
DEFAULT_WEAK_THRESHOLD = 0.7
ACCURACY_WEIGHT = 0.7
SPEED_WEIGHT = 0.3
FRAGILE_ACCURACY_THRESHOLD = 0.7
FRAGILE_SPEED_THRESHOLD = 0.5

RATING_SCORES = MappingProxyType(
    {
        Rating.AGAIN: 0.0,
        Rating.HARD: 0.4,
        Rating.GOOD: 0.7,
        Rating.EASY: 1.0,
    }
)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp01(value: float) -> float:
    return clamp(value, 0.0, 1.0)


# ============================================================================
# EWMA Formulas
# ============================================================================


def update_ewma(current: float, observed: float, alpha: float = DEFAULT_ALPHA) -> float:
    """
    Fold a new observation into an EWMA value.

    Formula: new = (1 - alpha) * current + alpha * observed

    current, observed and alpha are each clamped to [0, 1] first,
    so alpha=0 returns current and alpha=1 returns observed.

    Args:
        current: Existing EWMA value
        observed: New observation
        alpha: Smoothing factor (weight of the new observation)

    Returns:
        Updated value in [0, 1]
    """
    current = clamp01(current)
    observed = clamp01(observed)
    alpha = clamp01(alpha)
    return clamp01((1 - alpha) * current + alpha * observed)


def rating_to_score(rating: Rating) -> float:
    """Map a rating to its accuracy score (again=0.0, hard=0.4, good=0.7, easy=1.0)."""
    match rating:
        case Rating.AGAIN:
            return RATING_SCORES[Rating.AGAIN]
        case Rating.HARD:
            return RATING_SCORES[Rating.HARD]
        case Rating.GOOD:
            return RATING_SCORES[Rating.GOOD]
        case Rating.EASY:
            return RATING_SCORES[Rating.EASY]
    raise AssertionError(f"Unhandled rating: {rating!r}")


def speed_score(time_ms: float, difficulty: int) -> float:
    """
    Score response speed against the target time for a difficulty.

    Score is 1.0 at 0ms, 0.5 at exactly the target, 0.0 at 2x target or slower.

    Args:
        time_ms: Response time in milliseconds
        difficulty: Variant difficulty (1-5, clamped)

    Returns:
        Speed score in [0, 1]
    """
    level = int(clamp(difficulty, 1, 5))
    target_ms = DIFFICULTY_TARGET_TIMES_MS[level]
    normalized = clamp(time_ms / target_ms, 0.0, 2.0)
    return 1 - normalized / 2


def combined_mastery(
    mastery: DimensionMastery,
    accuracy_weight: float = ACCURACY_WEIGHT,
    speed_weight: float = SPEED_WEIGHT,
) -> float:
    """Single scalar for how well a dimension is known."""
    return accuracy_weight * mastery.accuracy_ewma + speed_weight * mastery.speed_ewma


def is_fragile_confidence(
    mastery: DimensionMastery,
    accuracy_threshold: float = FRAGILE_ACCURACY_THRESHOLD,
    speed_threshold: float = FRAGILE_SPEED_THRESHOLD,
) -> bool:
    """Correct but not yet automatic: high accuracy with slow responses."""
    return mastery.accuracy_ewma > accuracy_threshold and mastery.speed_ewma < speed_threshold


def is_weak_dimension(mastery: DimensionMastery, threshold: float = DEFAULT_WEAK_THRESHOLD) -> bool:
    """Strictly below threshold; a score equal to the threshold is not weak."""
    return combined_mastery(mastery) < threshold


def update_mastery(
    current: DimensionMastery,
    rating: Rating,
    time_ms: float,
    difficulty: int,
    alpha: float = DEFAULT_ALPHA,
) -> DimensionMastery:
    """
    Fold one review into a dimension's mastery.

    Returns a new DimensionMastery; current is untouched.
    """
    return DimensionMastery(
        accuracy_ewma=update_ewma(current.accuracy_ewma, rating_to_score(rating), alpha),
        speed_ewma=update_ewma(current.speed_ewma, speed_score(time_ms, difficulty), alpha),
        recent_count=current.recent_count + 1,
    )


def apply_review(
    profile: MasteryProfile,
    outcome: ReviewOutcome,
    alpha: float = DEFAULT_ALPHA,
) -> dict[Dimension, DimensionMastery]:
    """Return a new profile with only the reviewed dimension updated."""
    updated = complete_profile(profile)
    updated[outcome.dimension] = update_mastery(
        updated[outcome.dimension],
        outcome.rating,
        outcome.time_ms,
        outcome.difficulty,
        alpha,
    )
    return updated


# ============================================================================
# Tracker
# ============================================================================


@dataclass
class MasteryConfig:
    """Configuration for mastery tracking."""

    alpha: float = DEFAULT_ALPHA
    accuracy_weight: float = ACCURACY_WEIGHT
    speed_weight: float = SPEED_WEIGHT
    weak_threshold: float = DEFAULT_WEAK_THRESHOLD
    fragile_accuracy_threshold: float = FRAGILE_ACCURACY_THRESHOLD
    fragile_speed_threshold: float = FRAGILE_SPEED_THRESHOLD

    @classmethod
    def from_settings(cls, settings: Settings) -> MasteryConfig:
        return cls(
            alpha=settings.ewma_alpha,
            accuracy_weight=settings.accuracy_weight,
            speed_weight=settings.speed_weight,
            weak_threshold=settings.weakness_threshold,
            fragile_accuracy_threshold=settings.fragile_accuracy_threshold,
            fragile_speed_threshold=settings.fragile_speed_threshold,
        )


class MasteryTracker:
    """
    Converts review outcomes into updated dimension mastery.

    Thin configurable wrapper over the module-level formulas so an
    orchestration layer can tune alpha and thresholds in one place.
    """

    def __init__(self, config: MasteryConfig | None = None):
        """
        Initialize tracker.

        Args:
            config: Custom configuration (uses defaults if None)
        """
        self.config = config or MasteryConfig()

    def update(
        self,
        current: DimensionMastery,
        rating: Rating,
        time_ms: float,
        difficulty: int,
    ) -> DimensionMastery:
        return update_mastery(current, rating, time_ms, difficulty, self.config.alpha)

    def record(
        self,
        profile: MasteryProfile,
        outcome: ReviewOutcome,
    ) -> dict[Dimension, DimensionMastery]:
        """
        Apply a review outcome to a profile.

        Args:
            profile: Current mastery profile (missing dimensions default to neutral)
            outcome: The completed review

        Returns:
            New profile with the outcome's dimension updated
        """
        updated = apply_review(profile, outcome, self.config.alpha)
        before = complete_profile(profile)[outcome.dimension]
        after = updated[outcome.dimension]
        logger.debug(
            f"Mastery {outcome.dimension.value}: "
            f"accuracy {before.accuracy_ewma:.3f}->{after.accuracy_ewma:.3f}, "
            f"speed {before.speed_ewma:.3f}->{after.speed_ewma:.3f} "
            f"({outcome.rating.value}, {outcome.time_ms}ms, d{outcome.difficulty})"
        )
        return updated

    def combined(self, mastery: DimensionMastery) -> float:
        return combined_mastery(mastery, self.config.accuracy_weight, self.config.speed_weight)

    def is_fragile(self, mastery: DimensionMastery) -> bool:
        return is_fragile_confidence(
            mastery,
            self.config.fragile_accuracy_threshold,
            self.config.fragile_speed_threshold,
        )

    def is_weak(self, mastery: DimensionMastery) -> bool:
        return self.combined(mastery) < self.config.weak_threshold

    @staticmethod
    def reset() -> DimensionMastery:
        """Explicit reinitialization back to neutral defaults."""
        return create_initial_mastery()
