"""
SM-2 Spaced Repetition Scheduler.

Concept-level scheduling over (interval_days, ease_factor):

    Rating  | Ease adjustment | Next interval
    --------+-----------------+----------------------------
    again   | -0.20           | 1 day (hard reset)
    hard    | -0.15           | interval * 1.2
    good    |  0.00           | interval * ease
    easy    | +0.15           | interval * ease

Ease factor stays within [1.3, 2.5]; intervals never drop below 1 day.
The ease update always happens before the interval is computed, so
good/easy intervals use the freshly adjusted ease.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Iterable

from loguru import logger

from facet.core.models import Rating, ScheduleEntry, days_between, ensure_utc, utc_now

if TYPE_CHECKING:
    from config import Settings


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class SM2Config:
    """Configuration for SM-2 algorithm."""

    minimum_easiness: float = 1.3
    maximum_easiness: float = 2.5
    initial_easiness: float = 2.5
    minimum_interval: float = 1.0  # Days
    initial_interval: float = 1.0  # Days for a new concept
    hard_multiplier: float = 1.2

    @classmethod
    def from_settings(cls, settings: Settings) -> SM2Config:
        return cls(
            minimum_easiness=settings.min_ease_factor,
            maximum_easiness=settings.max_ease_factor,
            initial_easiness=settings.default_ease_factor,
            minimum_interval=settings.min_interval_days,
            initial_interval=settings.min_interval_days,
            hard_multiplier=settings.hard_interval_multiplier,
        )


def ease_adjustment(rating: Rating) -> float:
    """Additive ease change for a rating."""
    match rating:
        case Rating.AGAIN:
            return -0.2
        case Rating.HARD:
            return -0.15
        case Rating.GOOD:
            return 0.0
        case Rating.EASY:
            return 0.15
    raise AssertionError(f"Unhandled rating: {rating!r}")


# =============================================================================
# SM-2 Scheduler
# =============================================================================


class SM2Scheduler:
    """
    Implements the SM-2 spaced repetition algorithm per concept.

    Each transition is one-shot: given the current ScheduleEntry and a
    rating, return a brand-new ScheduleEntry. Inputs are never mutated.
    """

    def __init__(self, config: SM2Config | None = None):
        """
        Initialize SM-2 scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
        """
        self.config = config or SM2Config()

    def update_ease_factor(self, current: float, rating: Rating) -> float:
        """Apply the rating's ease adjustment, clamped to [min, max]."""
        new_ease = current + ease_adjustment(rating)
        return max(self.config.minimum_easiness, min(self.config.maximum_easiness, new_ease))

    def next_interval(self, current_interval: float, ease_factor: float, rating: Rating) -> float:
        """
        Compute the next review interval in days.

        Args:
            current_interval: Interval before this review
            ease_factor: Ease factor (already updated for this review)
            rating: Review rating

        Returns:
            New interval, at least minimum_interval days
        """
        match rating:
            case Rating.AGAIN:
                new_interval = self.config.minimum_interval
            case Rating.HARD:
                new_interval = current_interval * self.config.hard_multiplier
            case Rating.GOOD | Rating.EASY:
                new_interval = current_interval * ease_factor
            case _:
                raise AssertionError(f"Unhandled rating: {rating!r}")

        return max(new_interval, self.config.minimum_interval)

    def schedule_next_review(
        self,
        current: ScheduleEntry,
        rating: Rating,
        now: datetime | None = None,
    ) -> ScheduleEntry:
        """
        Calculate the concept's next schedule after a review.

        Args:
            current: Schedule before the review
            rating: Review rating
            now: Review time (defaults to current UTC time)

        Returns:
            New ScheduleEntry due now + new interval
        """
        now = ensure_utc(now) if now else utc_now()
        new_ease = self.update_ease_factor(current.ease_factor, rating)
        new_interval = self.next_interval(current.interval_days, new_ease, rating)

        logger.debug(
            f"SM-2 {current.concept_id} ({rating.value}): "
            f"interval {current.interval_days:.2f}->{new_interval:.2f}d, "
            f"ease {current.ease_factor:.2f}->{new_ease:.2f}"
        )

        return ScheduleEntry(
            concept_id=current.concept_id,
            due_at=now + timedelta(days=new_interval),
            interval_days=new_interval,
            ease_factor=new_ease,
        )

    def create_initial_schedule(self, concept_id: str, now: datetime | None = None) -> ScheduleEntry:
        """New concepts are due immediately."""
        return ScheduleEntry(
            concept_id=concept_id,
            due_at=ensure_utc(now) if now else utc_now(),
            interval_days=self.config.initial_interval,
            ease_factor=self.config.initial_easiness,
        )

    @staticmethod
    def is_overdue(schedule: ScheduleEntry, now: datetime | None = None) -> bool:
        """Due at exactly now counts as overdue."""
        now = ensure_utc(now) if now else utc_now()
        return ensure_utc(schedule.due_at) <= now

    @staticmethod
    def overdue_days(schedule: ScheduleEntry, now: datetime | None = None) -> float:
        """Fractional days past due; 0 when not yet due."""
        now = now or utc_now()
        return max(0.0, days_between(schedule.due_at, now))

    def due_schedules(
        self,
        schedules: Iterable[ScheduleEntry],
        now: datetime | None = None,
    ) -> list[ScheduleEntry]:
        """Overdue schedules, most overdue first."""
        now = ensure_utc(now) if now else utc_now()
        due = [s for s in schedules if self.is_overdue(s, now)]
        due.sort(key=lambda s: ensure_utc(s.due_at))
        return due


# Default scheduler instance
default_scheduler = SM2Scheduler()
