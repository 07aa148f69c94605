"""
Review Session orchestration.

Threads the tracker, analyzer, scheduler and selector together in the
single-threaded review loop:

1. next_card(): find due concepts, pick a variant (with safety rails)
2. learner answers and rates the card
3. submit(): update mastery, reschedule the concept, stamp the variant
4. repeat until next_card() returns None

State is held in memory only. Callers that persist it read the public
attributes (profile, schedules, variants) after each submit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Iterable, Mapping

from loguru import logger

from facet.core.dimensions import ALL_DIMENSIONS
from facet.core.models import (
    Concept,
    Dimension,
    DimensionMastery,
    Rating,
    ReviewOutcome,
    ScheduleEntry,
    Variant,
    complete_profile,
    ensure_utc,
    utc_now,
)
from facet.delivery.scheduler import SM2Config, SM2Scheduler
from facet.delivery.variant_selector import SelectionConfig, VariantSelector
from facet.learning.mastery_tracker import MasteryConfig, MasteryTracker
from facet.learning.weakness_analyzer import WeaknessAnalyzer, WeaknessConfig, WeaknessProfile

if TYPE_CHECKING:
    from config import Settings

DEFAULT_SESSION_TIMEOUT = timedelta(minutes=30)


class UnknownConceptError(KeyError):
    """A review named a concept the coordinator does not hold."""


class UnknownVariantError(KeyError):
    """A review named a variant the coordinator does not hold."""


class ReviewMismatchError(ValueError):
    """A review disagrees with the stored variant it names."""


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ReviewSession:
    """Per-session state used by the safety rails."""

    started_at: datetime = field(default_factory=utc_now)
    session_dimensions: list[Dimension] = field(default_factory=list)
    consecutive_failures: int = 0
    timeout: timedelta = DEFAULT_SESSION_TIMEOUT

    @property
    def cards_shown(self) -> int:
        return len(self.session_dimensions)

    def is_expired(self, now: datetime | None = None) -> bool:
        """Sessions expire a fixed time after they started."""
        now = ensure_utc(now) if now else utc_now()
        return now - ensure_utc(self.started_at) > self.timeout

    def reset(self, now: datetime | None = None) -> None:
        self.started_at = ensure_utc(now) if now else utc_now()
        self.session_dimensions = []
        self.consecutive_failures = 0

    def refresh(self, now: datetime | None = None) -> bool:
        """Reset if expired. Returns True when a reset happened."""
        if not self.is_expired(now):
            return False
        logger.info(f"Session expired after {self.cards_shown} cards, starting a new one")
        self.reset(now)
        return True

    def record_selection(self, dimension: Dimension) -> None:
        self.session_dimensions.append(dimension)

    def record_result(self, rating: Rating) -> None:
        """Only 'again' counts as a failure; anything else breaks the streak."""
        if rating.is_failure:
            self.consecutive_failures += 1
        else:
            self.consecutive_failures = 0


@dataclass(frozen=True)
class CardSelection:
    """The next card to present."""

    concept: Concept
    variant: Variant
    schedule: ScheduleEntry


@dataclass(frozen=True)
class ReviewReceipt:
    """Result of submitting a review."""

    updated_mastery: DimensionMastery
    updated_schedule: ScheduleEntry
    next_card: CardSelection | None


# =============================================================================
# Coordinator
# =============================================================================


class SessionCoordinator:
    """
    In-memory review loop over a set of concepts and their variants.

    Concepts without a schedule are given an initial one (due immediately).
    """

    def __init__(
        self,
        concepts: Iterable[Concept],
        variants: Iterable[Variant],
        profile: Mapping[Dimension, DimensionMastery] | None = None,
        schedules: Iterable[ScheduleEntry] | None = None,
        *,
        tracker: MasteryTracker | None = None,
        analyzer: WeaknessAnalyzer | None = None,
        scheduler: SM2Scheduler | None = None,
        selector: VariantSelector | None = None,
        session: ReviewSession | None = None,
        now: datetime | None = None,
    ):
        """
        Initialize the coordinator.

        Args:
            concepts: Concepts under study
            variants: Variants for those concepts
            profile: Learner mastery profile (missing dimensions default to neutral)
            schedules: Existing schedules (one per concept)
            tracker/analyzer/scheduler/selector: Components (defaults if None)
            session: Session state (fresh session if None)
            now: Creation time for initial schedules
        """
        self.tracker = tracker or MasteryTracker()
        self.analyzer = analyzer or WeaknessAnalyzer()
        self.scheduler = scheduler or SM2Scheduler()
        self.selector = selector or VariantSelector()
        self.session = session or ReviewSession(started_at=ensure_utc(now) if now else utc_now())

        self.concepts: dict[str, Concept] = {c.id: c for c in concepts}
        self.variants: dict[str, Variant] = {v.id: v for v in variants}
        self.profile: dict[Dimension, DimensionMastery] = complete_profile(profile or {})
        self.schedules: dict[str, ScheduleEntry] = {s.concept_id: s for s in schedules or ()}

        for concept_id in self.concepts:
            if concept_id not in self.schedules:
                self.schedules[concept_id] = self.scheduler.create_initial_schedule(concept_id, now)

    @classmethod
    def from_settings(
        cls,
        concepts: Iterable[Concept],
        variants: Iterable[Variant],
        settings: Settings,
        **kwargs,
    ) -> SessionCoordinator:
        """Build a coordinator whose components are tuned from Settings."""
        rng = kwargs.pop("rng", None)
        now = kwargs.get("now")
        kwargs.setdefault(
            "session",
            ReviewSession(
                started_at=ensure_utc(now) if now else utc_now(),
                timeout=timedelta(minutes=settings.session_timeout_minutes),
            ),
        )
        return cls(
            concepts,
            variants,
            tracker=MasteryTracker(MasteryConfig.from_settings(settings)),
            analyzer=WeaknessAnalyzer(WeaknessConfig.from_settings(settings)),
            scheduler=SM2Scheduler(SM2Config.from_settings(settings)),
            selector=VariantSelector(SelectionConfig.from_settings(settings), rng),
            **kwargs,
        )

    def variants_for(self, concept_id: str) -> list[Variant]:
        return [v for v in self.variants.values() if v.concept_id == concept_id]

    # ------------------------------------------------------------------
    # Review loop
    # ------------------------------------------------------------------

    def next_card(self, now: datetime | None = None) -> CardSelection | None:
        """
        Pick the next card from the most overdue concept that has variants.

        Returns:
            CardSelection, or None when nothing is due
        """
        now = ensure_utc(now) if now else utc_now()
        self.session.refresh(now)

        for schedule in self.scheduler.due_schedules(self.schedules.values(), now):
            concept = self.concepts.get(schedule.concept_id)
            if concept is None:
                continue

            variants = self.variants_for(concept.id)
            if not variants:
                continue

            selected = None
            if self.selector.should_insert_confidence_card(self.session.consecutive_failures):
                selected = self.selector.select_confidence_card(variants, self.profile)

            if selected is None:
                selected = self.selector.select_variant_with_maintenance(
                    self._apply_dimension_cap(variants),
                    self.profile,
                    self.session.consecutive_failures,
                    self.session.session_dimensions,
                    now,
                )

            if selected is None:
                continue

            self.session.record_selection(selected.dimension)
            return CardSelection(concept=concept, variant=selected, schedule=schedule)

        return None

    def submit(self, outcome: ReviewOutcome, now: datetime | None = None) -> ReviewReceipt:
        """
        Record a completed review and return the next card.

        Raises:
            UnknownConceptError: outcome.concept_id is not held
            UnknownVariantError: outcome.variant_id is not held
            ReviewMismatchError: the variant belongs to another concept or dimension
        """
        concept = self.concepts.get(outcome.concept_id)
        if concept is None:
            raise UnknownConceptError(outcome.concept_id)
        variant = self.variants.get(outcome.variant_id)
        if variant is None:
            raise UnknownVariantError(outcome.variant_id)
        if variant.concept_id != concept.id or variant.dimension is not outcome.dimension:
            raise ReviewMismatchError(
                f"Variant {variant.id} is {variant.concept_id}/{variant.dimension.value}, "
                f"review says {concept.id}/{outcome.dimension.value}"
            )

        now = ensure_utc(now) if now else ensure_utc(outcome.reviewed_at)

        self.profile = self.tracker.record(self.profile, outcome)

        current = self.schedules.get(concept.id) or self.scheduler.create_initial_schedule(concept.id, now)
        updated_schedule = self.scheduler.schedule_next_review(current, outcome.rating, now)
        self.schedules[concept.id] = updated_schedule

        self.variants[variant.id] = variant.mark_shown(now)
        self.session.record_result(outcome.rating)

        logger.info(
            f"Reviewed {concept.name or concept.id} [{outcome.dimension.value}] "
            f"{outcome.rating.value} in {outcome.time_ms}ms; "
            f"next due in {updated_schedule.interval_days:.1f}d"
        )

        return ReviewReceipt(
            updated_mastery=self.profile[outcome.dimension],
            updated_schedule=updated_schedule,
            next_card=self.next_card(now),
        )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def due_count(self, now: datetime | None = None) -> dict[Dimension, int]:
        """Variants of due concepts, counted per dimension."""
        counts = {d: 0 for d in ALL_DIMENSIONS}
        for schedule in self.scheduler.due_schedules(self.schedules.values(), now):
            for variant in self.variants_for(schedule.concept_id):
                counts[variant.dimension] += 1
        return counts

    def weakness_report(self) -> tuple[WeaknessProfile, str]:
        analysis = self.analyzer.analyze(self.profile)
        return analysis, self.analyzer.suggestion(analysis)

    def _apply_dimension_cap(self, variants: list[Variant]) -> list[Variant]:
        """Drop over-represented dimensions unless that would leave nothing."""
        capped = self.selector.capped_dimensions(self.session.session_dimensions)
        if not capped:
            return variants

        allowed = [v for v in variants if v.dimension not in capped]
        if not allowed:
            return variants

        logger.info(f"Dimension cap hit: excluding {sorted(d.value for d in capped)}")
        return allowed
