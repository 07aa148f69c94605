"""
Unit tests for session state and the review coordinator.
"""

from datetime import timedelta

import pytest

from config import Settings
from facet.core.models import Dimension, Rating, ReviewOutcome, ScheduleEntry
from facet.delivery.session import (
    ReviewMismatchError,
    ReviewSession,
    SessionCoordinator,
    UnknownConceptError,
    UnknownVariantError,
)
from facet.delivery.variant_selector import VariantSelector

DEF = Dimension.DEFINITION_RECALL
SCENARIO = Dimension.SCENARIO_APPLICATION


class TestReviewSession:
    def test_failure_streak_counts_only_again(self, now):
        session = ReviewSession(started_at=now)
        session.record_result(Rating.AGAIN)
        session.record_result(Rating.AGAIN)
        assert session.consecutive_failures == 2

        session.record_result(Rating.HARD)
        assert session.consecutive_failures == 0

    def test_expiry_resets_state(self, now):
        session = ReviewSession(started_at=now, session_dimensions=[DEF, DEF], consecutive_failures=2)

        assert session.refresh(now + timedelta(minutes=29)) is False
        assert session.cards_shown == 2

        later = now + timedelta(minutes=31)
        assert session.refresh(later) is True
        assert session.cards_shown == 0
        assert session.consecutive_failures == 0
        assert session.started_at == later

    def test_custom_timeout(self, now):
        session = ReviewSession(started_at=now, timeout=timedelta(minutes=5))
        assert session.is_expired(now + timedelta(minutes=6))


@pytest.fixture
def coordinator(sample_concept, sample_variants, now):
    return SessionCoordinator(
        [sample_concept],
        sample_variants,
        selector=VariantSelector(rng=lambda: 0.0),
        now=now,
    )


class TestCoordinator:
    def test_new_concepts_get_initial_schedule(self, coordinator, sample_concept, now):
        schedule = coordinator.schedules[sample_concept.id]
        assert schedule.due_at == now
        assert schedule.interval_days == 1.0
        assert schedule.ease_factor == 2.5

    def test_existing_schedule_kept(self, sample_concept, sample_variants, now):
        existing = ScheduleEntry(sample_concept.id, now + timedelta(days=4), 4.0, 2.1)
        coordinator = SessionCoordinator([sample_concept], sample_variants, schedules=[existing], now=now)
        assert coordinator.schedules[sample_concept.id] == existing
        assert coordinator.next_card(now) is None

    def test_next_card_records_dimension(self, coordinator, sample_concept, now):
        card = coordinator.next_card(now)
        assert card.concept == sample_concept
        assert card.variant.id == "v-definition"
        assert coordinator.session.session_dimensions == [DEF]

    def test_submit_unknown_ids(self, coordinator, sample_concept, now):
        with pytest.raises(UnknownConceptError):
            coordinator.submit(ReviewOutcome("missing", "v-definition", DEF, 2, Rating.GOOD, 1000), now)
        with pytest.raises(UnknownVariantError):
            coordinator.submit(ReviewOutcome(sample_concept.id, "missing", DEF, 2, Rating.GOOD, 1000), now)

    def test_submit_rejects_dimension_mismatch(self, coordinator, sample_concept, now):
        outcome = ReviewOutcome(sample_concept.id, "v-definition", SCENARIO, 2, Rating.GOOD, 1000)
        with pytest.raises(ReviewMismatchError):
            coordinator.submit(outcome, now)
        assert coordinator.profile[SCENARIO].recent_count == 0
        assert coordinator.profile[DEF].recent_count == 0

    def test_confidence_card_after_failures(
        self, sample_concept, sample_variants, strong_definition_profile, now
    ):
        coordinator = SessionCoordinator(
            [sample_concept],
            sample_variants,
            profile=strong_definition_profile,
            selector=VariantSelector(rng=lambda: 0.99),
            session=ReviewSession(started_at=now, consecutive_failures=3),
            now=now,
        )
        card = coordinator.next_card(now)
        assert card.variant.dimension is DEF

    def test_dimension_cap_excludes_overused(self, sample_concept, sample_variants, now):
        coordinator = SessionCoordinator(
            [sample_concept],
            sample_variants,
            selector=VariantSelector(rng=lambda: 0.0),
            session=ReviewSession(started_at=now, session_dimensions=[DEF] * 8),
            now=now,
        )
        card = coordinator.next_card(now)
        assert card.variant.dimension is SCENARIO

    def test_due_count(self, coordinator, now):
        counts = coordinator.due_count(now)
        assert counts[DEF] == 1
        assert counts[SCENARIO] == 1
        assert counts[Dimension.CLOZE_FILL] == 0

    def test_weakness_report(self, coordinator):
        analysis, suggestion = coordinator.weakness_report()
        assert analysis.weaknesses == ()
        assert isinstance(suggestion, str) and suggestion

    def test_from_settings(self, sample_concept, sample_variants, now):
        settings = Settings(session_timeout_minutes=10, hard_interval_multiplier=1.5, ewma_alpha=0.3)
        coordinator = SessionCoordinator.from_settings(
            [sample_concept], sample_variants, settings, now=now, rng=lambda: 0.0
        )
        assert coordinator.session.timeout == timedelta(minutes=10)
        assert coordinator.session.started_at == now
        assert coordinator.scheduler.config.hard_multiplier == 1.5
        assert coordinator.tracker.config.alpha == 0.3
        assert coordinator.selector.rng() == 0.0
