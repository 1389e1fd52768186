from datetime import datetime, timedelta, timezone

import pytest

from goalcards.fsrs import Card, SchedulerParameters, State

UTC = timezone.utc
T0 = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def make_card(**overrides) -> Card:
    """Review card with S=10, D=5, last reviewed 10 days before T0."""
    fields = dict(
        state=State.REVIEW,
        due=T0,
        stability=10.0,
        difficulty=5.0,
        elapsed_days=8.0,
        scheduled_days=10.0,
        reps=5,
        lapses=0,
        last_review=T0 - timedelta(days=10),
        step=None,
    )
    fields.update(overrides)
    return Card(**fields)


@pytest.fixture
def now():
    return T0


@pytest.fixture
def params():
    return SchedulerParameters()


@pytest.fixture
def review_card():
    return make_card()


@pytest.fixture
def relearning_card():
    return make_card(
        state=State.RELEARNING,
        stability=2.1,
        difficulty=6.5,
        due=T0,
        last_review=T0 - timedelta(minutes=10),
        lapses=1,
        step=0,
    )
