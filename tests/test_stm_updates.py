import math
from datetime import timedelta

import pytest

from goalcards.fsrs import DEFAULT_WEIGHTS, Rating, SchedulerParameters
from goalcards.fsrs.stm_updates import (
    GRADUATE,
    StepDecision,
    hard_step_interval,
    is_short_term,
    learning_step,
    relearning_step,
    short_term_stability,
)

STEPS = (timedelta(minutes=1), timedelta(minutes=10))


def test_is_short_term():
    assert is_short_term(0.0)
    assert is_short_term(0.99)
    assert not is_short_term(1.0)


def test_short_term_stability_values(params):
    w = params.w
    assert short_term_stability(3.173, Rating.GOOD, params) == pytest.approx(
        3.173 * math.exp(w[17] * w[18])
    )
    assert short_term_stability(3.173, Rating.AGAIN, params) < 3.173


def test_short_term_success_never_shrinks():
    weights = list(DEFAULT_WEIGHTS)
    weights[18] = -2.0  # would give a factor below 1 for Good
    params = SchedulerParameters(weights=weights)
    assert short_term_stability(5.0, Rating.GOOD, params) == pytest.approx(5.0)
    assert short_term_stability(5.0, Rating.EASY, params) >= 5.0


def test_hard_step_interval():
    assert hard_step_interval(STEPS, 0) == timedelta(minutes=5, seconds=30)
    assert hard_step_interval(STEPS, 1) == timedelta(minutes=10)
    assert hard_step_interval((timedelta(minutes=10),), 0) == timedelta(minutes=15)


@pytest.mark.parametrize(
    "step, rating, expected",
    [
        (0, Rating.AGAIN, StepDecision(0, timedelta(minutes=1))),
        (1, Rating.AGAIN, StepDecision(0, timedelta(minutes=1))),
        (0, Rating.HARD, StepDecision(0, timedelta(minutes=5, seconds=30))),
        (1, Rating.HARD, StepDecision(1, timedelta(minutes=10))),
        (0, Rating.GOOD, StepDecision(1, timedelta(minutes=10))),
        (1, Rating.GOOD, GRADUATE),
        (0, Rating.EASY, GRADUATE),
        (5, Rating.HARD, GRADUATE),
        (5, Rating.AGAIN, StepDecision(0, timedelta(minutes=1))),
    ],
)
def test_learning_step(step, rating, expected):
    assert learning_step(STEPS, step, rating) == expected


def test_learning_step_without_steps_graduates():
    for rating in Rating:
        assert learning_step((), 0, rating) == GRADUATE


def test_relearning_step():
    steps = (timedelta(minutes=10),)
    assert relearning_step(steps, 0, Rating.AGAIN) == StepDecision(0, timedelta(minutes=10))
    assert relearning_step(steps, 0, Rating.HARD) == StepDecision(0, timedelta(minutes=15))
    assert relearning_step(steps, 1, Rating.HARD) == GRADUATE
    assert relearning_step(steps, 0, Rating.GOOD) == GRADUATE
    assert relearning_step(steps, 0, Rating.EASY) == GRADUATE
    assert relearning_step((), 0, Rating.AGAIN) == GRADUATE
