"""
Integration Tests for the Review Loop.

Exercises the coordinator end to end:
1. New concepts are due immediately
2. Reviews update mastery and SM-2 schedules
3. Failure streaks trigger a confidence card
4. Weakness analysis reflects the reviews that were recorded
"""

from datetime import timedelta

import pytest

from facet.core.models import Concept, Dimension, Rating, ReviewOutcome, Variant
from facet.delivery.session import SessionCoordinator
from facet.delivery.variant_selector import VariantSelector

pytestmark = pytest.mark.integration


def outcome_for(card, rating, now, time_ms=10000):
    return ReviewOutcome(
        concept_id=card.concept.id,
        variant_id=card.variant.id,
        dimension=card.variant.dimension,
        difficulty=card.variant.difficulty,
        rating=rating,
        time_ms=time_ms,
        reviewed_at=now,
    )


class TestSchedulingProgression:
    """A single concept through good then again."""

    def test_good_then_again(self, sample_concept, sample_variants, now):
        coordinator = SessionCoordinator(
            [sample_concept],
            sample_variants,
            selector=VariantSelector(rng=lambda: 0.0),
            now=now,
        )

        card = coordinator.next_card(now)
        assert card is not None

        receipt = coordinator.submit(outcome_for(card, Rating.GOOD, now), now)
        assert receipt.updated_schedule.interval_days == pytest.approx(2.5)
        assert receipt.updated_schedule.ease_factor == pytest.approx(2.5)
        assert receipt.updated_schedule.due_at == now + timedelta(days=2.5)
        assert receipt.updated_mastery.recent_count == 1
        assert receipt.updated_mastery.accuracy_ewma == pytest.approx(0.53)
        assert receipt.next_card is None
        assert coordinator.variants[card.variant.id].last_shown_at == now

        later = now + timedelta(days=3)
        card = coordinator.next_card(later)
        assert card is not None

        receipt = coordinator.submit(outcome_for(card, Rating.AGAIN, later), later)
        assert receipt.updated_schedule.interval_days == pytest.approx(1.0)
        assert receipt.updated_schedule.ease_factor == pytest.approx(2.3)
        assert coordinator.session.consecutive_failures == 1


class TestFailureStreak:
    """Three misses in a row bring in an easy card from a strong dimension."""

    @pytest.fixture
    def deck(self):
        concepts = [Concept(id=f"c{i}", name=f"Concept {i}") for i in range(4)]
        variants = []
        for concept in concepts:
            variants.append(
                Variant(
                    id=f"{concept.id}-scenario",
                    concept_id=concept.id,
                    dimension=Dimension.SCENARIO_APPLICATION,
                    difficulty=3,
                )
            )
            variants.append(
                Variant(
                    id=f"{concept.id}-definition",
                    concept_id=concept.id,
                    dimension=Dimension.DEFINITION_RECALL,
                    difficulty=1,
                )
            )
        return concepts, variants

    def test_confidence_card_inserted(self, deck, strong_definition_profile, now):
        concepts, variants = deck
        coordinator = SessionCoordinator(
            concepts,
            variants,
            profile=strong_definition_profile,
            selector=VariantSelector(rng=lambda: 0.0),
            now=now,
        )

        card = coordinator.next_card(now)
        for expected_concept in ("c0", "c1", "c2"):
            assert card.concept.id == expected_concept
            assert card.variant.dimension is Dimension.SCENARIO_APPLICATION
            card = coordinator.submit(outcome_for(card, Rating.AGAIN, now), now).next_card

        assert coordinator.session.consecutive_failures == 3
        assert card.concept.id == "c3"
        assert card.variant.id == "c3-definition"

        scenario = coordinator.profile[Dimension.SCENARIO_APPLICATION]
        assert scenario.recent_count == 3
        assert scenario.accuracy_ewma < 0.35

    def test_weakness_report_after_misses(self, deck, strong_definition_profile, now):
        concepts, variants = deck
        coordinator = SessionCoordinator(
            concepts,
            variants,
            profile=strong_definition_profile,
            selector=VariantSelector(rng=lambda: 0.0),
            now=now,
        )

        card = coordinator.next_card(now)
        while card is not None:
            card = coordinator.submit(outcome_for(card, Rating.AGAIN, now, time_ms=40000), now).next_card

        analysis, suggestion = coordinator.weakness_report()
        assert analysis.is_dodging_pattern
        assert suggestion.startswith("Focus on")
