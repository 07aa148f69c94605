"""
Unit tests for the concept-level SM-2 scheduler.
"""

from datetime import timedelta

import pytest

from facet.core.models import Rating, ScheduleEntry
from facet.delivery.scheduler import SM2Config, SM2Scheduler, ease_adjustment


@pytest.fixture
def scheduler():
    return SM2Scheduler()


def entry(now, interval=1.0, ease=2.5):
    return ScheduleEntry(concept_id="c1", due_at=now, interval_days=interval, ease_factor=ease)


class TestEaseFactor:
    @pytest.mark.parametrize(
        ("rating", "delta"),
        [(Rating.AGAIN, -0.2), (Rating.HARD, -0.15), (Rating.GOOD, 0.0), (Rating.EASY, 0.15)],
    )
    def test_adjustments(self, rating, delta):
        assert ease_adjustment(rating) == pytest.approx(delta)

    def test_clamped_to_ceiling(self, scheduler):
        assert scheduler.update_ease_factor(2.5, Rating.EASY) == pytest.approx(2.5)

    def test_floor_holds_at_floor(self, scheduler):
        assert scheduler.update_ease_factor(1.3, Rating.AGAIN) == pytest.approx(1.3)

    def test_clamped_to_floor(self, scheduler):
        assert scheduler.update_ease_factor(1.4, Rating.AGAIN) == pytest.approx(1.3)


class TestScheduleNextReview:
    def test_good_from_initial(self, scheduler, now):
        updated = scheduler.schedule_next_review(entry(now), Rating.GOOD, now)
        assert updated.interval_days == pytest.approx(2.5)
        assert updated.ease_factor == pytest.approx(2.5)
        assert updated.due_at == now + timedelta(days=2.5)

    def test_good_compounds(self, scheduler, now):
        updated = scheduler.schedule_next_review(entry(now, 2.5), Rating.GOOD, now)
        assert updated.interval_days == pytest.approx(6.25)

    def test_again_resets_interval(self, scheduler, now):
        updated = scheduler.schedule_next_review(entry(now, 2.5), Rating.AGAIN, now)
        assert updated.interval_days == pytest.approx(1.0)
        assert updated.ease_factor == pytest.approx(2.3)

    def test_hard_multiplies_interval(self, scheduler, now):
        updated = scheduler.schedule_next_review(entry(now, 10.0), Rating.HARD, now)
        assert updated.interval_days == pytest.approx(12.0)
        assert updated.ease_factor == pytest.approx(2.35)

    def test_easy_uses_updated_ease(self, scheduler, now):
        updated = scheduler.schedule_next_review(entry(now, 4.0, 2.0), Rating.EASY, now)
        assert updated.ease_factor == pytest.approx(2.15)
        assert updated.interval_days == pytest.approx(8.6)

    def test_interval_never_below_minimum(self, scheduler, now):
        updated = scheduler.schedule_next_review(entry(now, 0.2, 1.3), Rating.GOOD, now)
        assert updated.interval_days == pytest.approx(1.0)

    def test_input_not_mutated(self, scheduler, now):
        current = entry(now)
        scheduler.schedule_next_review(current, Rating.AGAIN, now)
        assert current == entry(now)

    def test_custom_config(self, now):
        scheduler = SM2Scheduler(SM2Config(hard_multiplier=1.5))
        updated = scheduler.schedule_next_review(entry(now, 2.0), Rating.HARD, now)
        assert updated.interval_days == pytest.approx(3.0)


class TestDueTracking:
    def test_initial_schedule_due_now(self, scheduler, now):
        initial = scheduler.create_initial_schedule("c1", now)
        assert initial.due_at == now
        assert initial.interval_days == 1.0
        assert initial.ease_factor == 2.5
        assert scheduler.is_overdue(initial, now)

    def test_future_not_overdue(self, scheduler, now):
        future = ScheduleEntry("c1", now + timedelta(hours=1))
        assert not scheduler.is_overdue(future, now)
        assert scheduler.overdue_days(future, now) == 0.0

    def test_overdue_days(self, scheduler, now):
        past = ScheduleEntry("c1", now - timedelta(days=2))
        assert scheduler.overdue_days(past, now) == pytest.approx(2.0)

    def test_due_schedules_most_overdue_first(self, scheduler, now):
        schedules = [
            ScheduleEntry("recent", now - timedelta(hours=1)),
            ScheduleEntry("future", now + timedelta(days=1)),
            ScheduleEntry("old", now - timedelta(days=3)),
        ]
        due = scheduler.due_schedules(schedules, now)
        assert [s.concept_id for s in due] == ["old", "recent"]


class TestNextInterval:
    @pytest.mark.parametrize(
        ("interval", "ease", "rating", "expected"),
        [
            (7, 2.5, Rating.GOOD, 17.5),
            (10, 2.5, Rating.HARD, 12.0),
            (30, 2.5, Rating.AGAIN, 1.0),
            (0.5, 1.3, Rating.HARD, 1.0),
        ],
    )
    def test_concrete_cases(self, scheduler, interval, ease, rating, expected):
        assert scheduler.next_interval(interval, ease, rating) == pytest.approx(expected)

    def test_again_from_long_interval(self, scheduler, now):
        updated = scheduler.schedule_next_review(entry(now, 7.0), Rating.AGAIN, now)
        assert updated.interval_days == pytest.approx(1.0)
        assert updated.ease_factor == pytest.approx(2.3)
        assert updated.due_at == now + timedelta(days=1)

    def test_ease_stays_in_bounds_over_many_reviews(self, scheduler, now):
        current = entry(now)
        for rating in [Rating.AGAIN] * 12 + [Rating.EASY] * 12 + [Rating.HARD] * 12:
            current = scheduler.schedule_next_review(current, rating, now)
            assert 1.3 <= current.ease_factor <= 2.5
