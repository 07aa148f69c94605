"""
Adaptive Variant Selection with Safety Rails.

Picks which question variant of a due concept to show next. Each variant
gets a multiplicative weight:

    weight = weakness_boost * novelty_boost * anti_frustration * difficulty_alignment

and one variant is drawn by weighted random selection. The random source
is injectable so selection is reproducible under test.

Safety rails (enforced by the session loop around the selector):
- Session dimension cap: no dimension may exceed 70% of a session
- Confidence card: after 3 consecutive failures, show an easy strong card
- Maintenance reps: strong dimensions keep at least 20% of a session
"""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Sequence, TypeVar

from loguru import logger

from facet.core.dimensions import ALL_DIMENSIONS
from facet.core.models import (
    Dimension,
    DimensionMastery,
    MasteryProfile,
    Variant,
    complete_profile,
    days_between,
    utc_now,
)
from facet.learning.mastery_tracker import ACCURACY_WEIGHT, SPEED_WEIGHT, combined_mastery

if TYPE_CHECKING:
    from config import Settings

T = TypeVar("T")

RandomSource = Callable[[], float]

WEAKNESS_THRESHOLD = 0.7
STRONG_DIMENSION_PENALTY = 0.9


# =============================================================================
# Weight Components
# =============================================================================


def weakness_boost(
    mastery: DimensionMastery,
    threshold: float = WEAKNESS_THRESHOLD,
    accuracy_weight: float = ACCURACY_WEIGHT,
    speed_weight: float = SPEED_WEIGHT,
) -> float:
    """
    Boost weak dimensions, slightly penalize strong ones.

    Weak (combined < 0.7): 1 + 2 * (0.7 - combined), up to 2.4 at zero mastery.
    Strong: flat 0.9 so mastered material is not over-practiced.
    """
    score = combined_mastery(mastery, accuracy_weight, speed_weight)
    if score < threshold:
        return 1 + 2 * (threshold - score)
    return STRONG_DIMENSION_PENALTY


def novelty_boost(last_shown_at: datetime | None, now: datetime | None = None) -> float:
    """
    Favor variants not seen recently.

    never shown -> 2.0, >7 days -> 1.5, 3-7 days -> 1.2, <3 days -> 0.8
    """
    if last_shown_at is None:
        return 2.0

    days_since = days_between(last_shown_at, now or utc_now())
    if days_since > 7:
        return 1.5
    if days_since >= 3:
        return 1.2
    return 0.8


def anti_frustration_penalty(consecutive_failures: int) -> float:
    """Taper weights after consecutive failures: 1.0, 0.8, 0.6, then 0.3."""
    if consecutive_failures >= 3:
        return 0.3
    if consecutive_failures == 2:
        return 0.6
    if consecutive_failures == 1:
        return 0.8
    return 1.0


def ideal_difficulty(
    mastery: DimensionMastery,
    accuracy_weight: float = ACCURACY_WEIGHT,
    speed_weight: float = SPEED_WEIGHT,
) -> float:
    """Map combined mastery 0..1 onto difficulty 1..5."""
    return 1 + combined_mastery(mastery, accuracy_weight, speed_weight) * 4


def difficulty_alignment(
    difficulty: int,
    mastery: DimensionMastery,
    accuracy_weight: float = ACCURACY_WEIGHT,
    speed_weight: float = SPEED_WEIGHT,
) -> float:
    """
    Reward variants near the learner's level.

    Slightly above the ideal (within 1) is the challenge zone: 1.2.
    Otherwise gap <= 1: 1.0, gap <= 2: 0.7, larger: 0.5.
    """
    ideal = ideal_difficulty(mastery, accuracy_weight, speed_weight)
    gap = abs(difficulty - ideal)

    if difficulty > ideal and gap <= 1:
        return 1.2
    if gap <= 1:
        return 1.0
    if gap <= 2:
        return 0.7
    return 0.5


def variant_weight(
    variant: Variant,
    profile: MasteryProfile,
    consecutive_failures: int,
    now: datetime | None = None,
    *,
    weakness_threshold: float = WEAKNESS_THRESHOLD,
    accuracy_weight: float = ACCURACY_WEIGHT,
    speed_weight: float = SPEED_WEIGHT,
) -> float:
    """Combined selection weight for one variant (higher = more likely)."""
    mastery = profile[variant.dimension]
    return (
        weakness_boost(mastery, weakness_threshold, accuracy_weight, speed_weight)
        * novelty_boost(variant.last_shown_at, now)
        * anti_frustration_penalty(consecutive_failures)
        * difficulty_alignment(variant.difficulty, mastery, accuracy_weight, speed_weight)
    )


def weighted_random_select(
    items: Sequence[T],
    weights: Sequence[float],
    rng: RandomSource = random.random,
) -> T | None:
    """
    Draw one item with probability proportional to its weight.

    Args:
        items: Candidates
        weights: One weight per candidate
        rng: Source of uniform floats in [0, 1)

    Returns:
        Selected item, or None if items is empty, lengths differ,
        or total weight is not positive
    """
    if not items or len(items) != len(weights):
        return None

    total = sum(weights)
    if total <= 0:
        return None

    point = rng() * total
    cumulative = 0.0
    for item, weight in zip(items, weights):
        cumulative += weight
        if point < cumulative:
            return item

    # Floating point edge at the upper boundary
    return items[-1]


# =============================================================================
# Selector
# =============================================================================


@dataclass
class SelectionConfig:
    """Configuration for variant selection and its safety rails."""

    accuracy_weight: float = ACCURACY_WEIGHT
    speed_weight: float = SPEED_WEIGHT
    weakness_threshold: float = WEAKNESS_THRESHOLD
    session_dimension_cap: float = 0.7
    maintenance_min_percentage: float = 0.2
    maintenance_min_cards: int = 5
    strong_threshold: float = 0.7
    confidence_card_failures: int = 3
    confidence_card_max_difficulty: int = 2

    @classmethod
    def from_settings(cls, settings: Settings) -> SelectionConfig:
        return cls(
            accuracy_weight=settings.accuracy_weight,
            speed_weight=settings.speed_weight,
            weakness_threshold=settings.weakness_threshold,
            session_dimension_cap=settings.session_dimension_cap,
            maintenance_min_percentage=settings.maintenance_min_percentage,
            maintenance_min_cards=settings.maintenance_min_cards,
            strong_threshold=settings.strong_threshold,
            confidence_card_failures=settings.confidence_card_failures,
            confidence_card_max_difficulty=settings.confidence_card_max_difficulty,
        )


class VariantSelector:
    """
    Select the next variant for a due concept.

    Strategies:
    - Weighted: bias toward weak, novel, well-aligned variants
    - Maintenance: restrict to strong dimensions when they are neglected
    - Confidence: easy strong-dimension card after a failure streak
    """

    def __init__(
        self,
        config: SelectionConfig | None = None,
        rng: RandomSource | None = None,
    ):
        """
        Initialize selector.

        Args:
            config: Custom configuration (uses defaults if None)
            rng: Random source returning floats in [0, 1) (uses random.random if None)
        """
        self.config = config or SelectionConfig()
        self.rng = rng or random.random

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def weights(
        self,
        variants: Sequence[Variant],
        profile: MasteryProfile,
        consecutive_failures: int,
        now: datetime | None = None,
    ) -> list[float]:
        profile = complete_profile(profile)
        now = now or utc_now()
        return [
            variant_weight(
                v,
                profile,
                consecutive_failures,
                now,
                weakness_threshold=self.config.weakness_threshold,
                accuracy_weight=self.config.accuracy_weight,
                speed_weight=self.config.speed_weight,
            )
            for v in variants
        ]

    def select_variant_for_concept(
        self,
        variants: Sequence[Variant],
        profile: MasteryProfile,
        consecutive_failures: int,
        now: datetime | None = None,
    ) -> Variant | None:
        """Weighted draw across all variants; None if there is nothing to pick."""
        if not variants:
            return None

        weights = self.weights(variants, profile, consecutive_failures, now)
        selected = weighted_random_select(variants, weights, self.rng)
        if selected is not None:
            logger.debug(
                f"Selected variant {selected.id} ({selected.dimension.value}, d{selected.difficulty}) "
                f"from {len(variants)} candidates"
            )
        return selected

    def select_variant_with_maintenance(
        self,
        variants: Sequence[Variant],
        profile: MasteryProfile,
        consecutive_failures: int,
        session_dimensions: Sequence[Dimension],
        now: datetime | None = None,
    ) -> Variant | None:
        """
        Weighted selection that first honors maintenance reps.

        When strong dimensions are underrepresented in the session and the
        concept has strong-dimension variants, the draw is restricted to them.
        """
        if not variants:
            return None

        if self.needs_maintenance_rep(session_dimensions, profile):
            strong = set(self.strong_dimensions(profile))
            strong_variants = [v for v in variants if v.dimension in strong]
            if strong_variants:
                logger.info(f"Maintenance rep: restricting to {len(strong_variants)} strong-dimension variants")
                return self.select_variant_for_concept(strong_variants, profile, consecutive_failures, now)

        return self.select_variant_for_concept(variants, profile, consecutive_failures, now)

    def select_confidence_card(
        self,
        variants: Sequence[Variant],
        profile: MasteryProfile,
    ) -> Variant | None:
        """Uniform pick among easy variants of strong dimensions, or None."""
        strong = set(self.strong_dimensions(profile))
        easy_strong = [
            v
            for v in variants
            if v.dimension in strong and v.difficulty <= self.config.confidence_card_max_difficulty
        ]
        if not easy_strong:
            return None

        index = min(int(self.rng() * len(easy_strong)), len(easy_strong) - 1)
        selected = easy_strong[index]
        logger.info(f"Confidence card: {selected.id} ({selected.dimension.value}, d{selected.difficulty})")
        return selected

    # ------------------------------------------------------------------
    # Safety rails
    # ------------------------------------------------------------------

    def enforce_session_dimension_cap(
        self,
        session_dimensions: Sequence[Dimension],
        max_pct: float | None = None,
    ) -> bool:
        """
        True while every dimension is within its share of the session.

        Returns False once any single dimension exceeds max_pct of the
        cards shown so far.
        """
        return not self.capped_dimensions(session_dimensions, max_pct)

    def capped_dimensions(
        self,
        session_dimensions: Sequence[Dimension],
        max_pct: float | None = None,
    ) -> set[Dimension]:
        """Dimensions currently over the session cap."""
        if max_pct is None:
            max_pct = self.config.session_dimension_cap
        if not session_dimensions:
            return set()

        total = len(session_dimensions)
        counts = Counter(session_dimensions)
        return {d for d, count in counts.items() if count / total > max_pct}

    def should_insert_confidence_card(self, consecutive_failures: int) -> bool:
        return consecutive_failures >= self.config.confidence_card_failures

    def strong_dimensions(self, profile: MasteryProfile) -> list[Dimension]:
        """Dimensions at or above the strong threshold, in canonical order."""
        profile = complete_profile(profile)
        return [d for d in ALL_DIMENSIONS if self.combined(profile[d]) >= self.config.strong_threshold]

    def combined(self, mastery: DimensionMastery) -> float:
        return combined_mastery(mastery, self.config.accuracy_weight, self.config.speed_weight)

    def needs_maintenance_rep(
        self,
        session_dimensions: Sequence[Dimension],
        profile: MasteryProfile,
    ) -> bool:
        """
        Check whether strong dimensions are being neglected this session.

        Only applies once maintenance_min_cards have been shown and at
        least one dimension is strong.
        """
        if len(session_dimensions) < self.config.maintenance_min_cards:
            return False

        strong = set(self.strong_dimensions(profile))
        if not strong:
            return False

        strong_count = sum(1 for d in session_dimensions if d in strong)
        return strong_count / len(session_dimensions) < self.config.maintenance_min_percentage
