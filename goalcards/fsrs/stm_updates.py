"""
Short-Term Memory (STM) Updates

Same-day reviews and learning steps.

STM exists to:
- Walk new and lapsed cards through short learning steps
- Adjust stability for reviews less than a day apart, where the long-term
  formulas (driven by forgetting over days) do not apply

Key principle:
A same-day success never shrinks stability for Good or Easy.
"""

from __future__ import annotations

import math
from datetime import timedelta
from typing import NamedTuple, Optional, Sequence

from goalcards.fsrs.constants import Rating
from goalcards.fsrs.parameters import SchedulerParameters


class StepDecision(NamedTuple):
    """Outcome of the learning-step policy: next step index and delay."""
    step: Optional[int]  # None means the card graduates to Review
    interval: Optional[timedelta]  # None when graduating


GRADUATE = StepDecision(step=None, interval=None)


def is_short_term(elapsed_days: float) -> bool:
    """A review counts as short-term when it comes less than a day after the last one."""
    return elapsed_days < 1.0


def short_term_stability(
    stability: float,
    rating: Rating,
    params: SchedulerParameters
) -> float:
    """
    Stability after a same-day review.

    Formula: S' = S * e^(w[17] * (G - 3 + w[18]))

    The factor is floored at 1 for Good and Easy.
    """
    w = params.w
    factor = math.exp(w[17] * (int(rating) - 3 + w[18]))
    if rating >= Rating.GOOD:
        factor = max(factor, 1.0)
    return max(params.minimum_stability, stability * factor)


def hard_step_interval(steps: Sequence[timedelta], step: int) -> timedelta:
    """
    Delay for a Hard rating, which repeats the current step.

    On the first step the delay sits between the first two steps (or 1.5x a
    single step), so Hard always waits longer than Again.
    """
    if step == 0 and len(steps) == 1:
        return steps[0] * 1.5
    if step == 0 and len(steps) >= 2:
        return (steps[0] + steps[1]) / 2
    return steps[step]


def learning_step(
    steps: Sequence[timedelta],
    step: int,
    rating: Rating
) -> StepDecision:
    """
    Apply the learning-step policy for a Learning (or New) card.

    - Again: back to the first step
    - Hard: repeat the current step
    - Good: advance, graduating after the last step
    - Easy: graduate immediately

    Empty steps, or a step index past the configured steps (the steps were
    shortened since the card was last seen), graduate on any success.
    """
    if not steps:
        return GRADUATE
    if step >= len(steps) and rating != Rating.AGAIN:
        return GRADUATE

    if rating == Rating.AGAIN:
        return StepDecision(step=0, interval=steps[0])
    if rating == Rating.HARD:
        return StepDecision(step=step, interval=hard_step_interval(steps, step))
    if rating == Rating.GOOD:
        if step + 1 >= len(steps):
            return GRADUATE
        return StepDecision(step=step + 1, interval=steps[step + 1])
    return GRADUATE


def relearning_step(
    steps: Sequence[timedelta],
    step: int,
    rating: Rating
) -> StepDecision:
    """
    Apply the relearning-step policy for a Relearning card.

    Good and Easy always return the card to Review. Hard repeats the current
    step while steps remain. Again restarts the steps.
    """
    if not steps:
        return GRADUATE
    if rating == Rating.AGAIN:
        return StepDecision(step=0, interval=steps[0])
    if rating == Rating.HARD and step < len(steps):
        return StepDecision(step=step, interval=hard_step_interval(steps, step))
    return GRADUATE
