"""
Core domain models for the facet mastery engine.

Design:
- Dimension: the six cognitive facets a concept is tested on (closed set)
- Rating: learner self-assessment of a review (again/hard/good/easy)
- DimensionMastery: EWMA accuracy/speed state for one dimension
- MasteryProfile: total mapping Dimension -> DimensionMastery
- Concept / Variant: the learning material supplied by the caller
- ScheduleEntry: SM-2 state for one concept
- ReviewOutcome: a completed review, consumed once by the tracker and scheduler

All models are immutable; updates return new values via dataclasses.replace.
Timestamps are timezone-aware UTC. Naive datetimes are treated as UTC.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Mapping

SECONDS_PER_DAY = 86400.0


class InvalidRatingError(ValueError):
    """Raised when a string cannot be parsed into a Rating."""


class InvalidDimensionError(ValueError):
    """Raised when a string cannot be parsed into a Dimension."""


# ============================================================================
# Enumerations
# ============================================================================


class Dimension(str, Enum):
    """
    The six cognitive dimensions used to assess understanding of a concept.

    Order of declaration is the canonical iteration order.
    """

    DEFINITION_RECALL = "definition_recall"  # Recall the definition from the term
    PARAPHRASE_RECOGNITION = "paraphrase_recognition"  # Recognize a restatement
    EXAMPLE_CLASSIFICATION = "example_classification"  # Examples vs non-examples
    SCENARIO_APPLICATION = "scenario_application"  # Apply to a novel scenario
    DISCRIMINATION = "discrimination"  # Tell apart from similar concepts
    CLOZE_FILL = "cloze_fill"  # Complete a sentence with the missing term

    @classmethod
    def from_string(cls, value: str) -> Dimension:
        """
        Parse a dimension from its value or short alias.

        Accepts "scenario_application" as well as "scenario".

        Raises:
            InvalidDimensionError: if the value names no dimension
        """
        normalized = value.strip().lower()
        for dimension in cls:
            if normalized in (dimension.value, dimension.short_name):
                return dimension
        valid = ", ".join(d.value for d in cls)
        raise InvalidDimensionError(f'Invalid dimension: "{value}". Valid dimensions are: {valid}')

    @property
    def short_name(self) -> str:
        """Short alias ("definition", "scenario", ...)."""
        return self.value.split("_")[0]


class Rating(str, Enum):
    """Learner self-assessment of a single review."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def from_string(cls, value: str) -> Rating:
        """
        Parse a rating, ignoring case and surrounding whitespace.

        Raises:
            InvalidRatingError: if the value is not a known rating
        """
        normalized = value.strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(r.value for r in cls)
            raise InvalidRatingError(
                f'Invalid review result: "{value}". Valid results are: {valid}'
            ) from None

    @property
    def is_pass(self) -> bool:
        return self in (Rating.GOOD, Rating.EASY)

    @property
    def is_failure(self) -> bool:
        return self is Rating.AGAIN

    @property
    def is_struggle(self) -> bool:
        return self in (Rating.AGAIN, Rating.HARD)


# ============================================================================
# Mastery
# ============================================================================


@dataclass(frozen=True)
class DimensionMastery:
    """
    Mastery state for a single dimension.

    Both EWMA fields lie in [0, 1]; recent_count only ever grows.
    """

    accuracy_ewma: float = 0.5
    speed_ewma: float = 0.5
    recent_count: int = 0


MasteryProfile = Mapping[Dimension, DimensionMastery]


def create_initial_mastery() -> DimensionMastery:
    """Neutral mastery for a dimension that has never been observed."""
    return DimensionMastery(accuracy_ewma=0.5, speed_ewma=0.5, recent_count=0)


def create_empty_mastery_profile() -> dict[Dimension, DimensionMastery]:
    """Profile with every dimension at neutral defaults."""
    return {dimension: create_initial_mastery() for dimension in Dimension}


def complete_profile(
    partial: Mapping[Dimension, DimensionMastery],
) -> dict[Dimension, DimensionMastery]:
    """
    Fill any missing dimensions with neutral defaults.

    Used at the boundary where callers hand over profiles loaded
    from storage that may not have observed every dimension yet.
    """
    profile = create_empty_mastery_profile()
    profile.update(partial)
    return profile


# ============================================================================
# Learning Material
# ============================================================================


@dataclass(frozen=True)
class Concept:
    """A learning concept; the aggregate root for its variants."""

    id: str
    name: str
    definition: str = ""
    facts: tuple[str, ...] = ()


@dataclass(frozen=True)
class Variant:
    """
    A question instance testing one dimension of a concept.

    Only last_shown_at changes over a variant's life; use mark_shown().
    """

    id: str
    concept_id: str
    dimension: Dimension
    difficulty: int
    front: str = ""
    back: str = ""
    hints: tuple[str, ...] = ()
    last_shown_at: datetime | None = None

    def __post_init__(self):
        if not 1 <= self.difficulty <= 5:
            raise ValueError(f"Variant {self.id} difficulty must be 1-5, got {self.difficulty}")

    def mark_shown(self, at: datetime | None = None) -> Variant:
        """Return a copy stamped as shown at the given time (default now)."""
        return replace(self, last_shown_at=at or utc_now())


# ============================================================================
# Scheduling & Reviews
# ============================================================================


@dataclass(frozen=True)
class ScheduleEntry:
    """SM-2 scheduling state for a concept. Replaced wholesale after each review."""

    concept_id: str
    due_at: datetime
    interval_days: float = 1.0
    ease_factor: float = 2.5


@dataclass(frozen=True)
class ReviewOutcome:
    """A completed review of one variant."""

    concept_id: str
    variant_id: str
    dimension: Dimension
    difficulty: int
    rating: Rating
    time_ms: int
    hints_used: int = 0
    reviewed_at: datetime = field(default_factory=lambda: utc_now())


# ============================================================================
# Time helpers
# ============================================================================


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def days_between(earlier: datetime, later: datetime) -> float:
    """Signed number of days from earlier to later, as a float."""
    delta = ensure_utc(later) - ensure_utc(earlier)
    return delta.total_seconds() / SECONDS_PER_DAY
