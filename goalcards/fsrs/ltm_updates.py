"""
Long-Term Memory (LTM) Updates

Implements stability and difficulty updates for reviews spaced a day or more
apart, plus the first-review initialization.

Key principles:
- Spaced, effortful success produces the largest stability gains
- Forgetting never increases stability
- Difficulty drifts toward the rating-dependent target and reverts slowly
  toward the Easy baseline
"""

from __future__ import annotations

import math

from goalcards.fsrs.constants import Rating
from goalcards.fsrs.parameters import SchedulerParameters


def clamp_difficulty(difficulty: float, params: SchedulerParameters) -> float:
    return max(params.minimum_difficulty, min(params.maximum_difficulty, difficulty))


def initial_stability(rating: Rating, params: SchedulerParameters) -> float:
    """
    Stability after the very first review.

    Formula: S_0(G) = w[G - 1]
    """
    return max(params.minimum_stability, params.w[int(rating) - 1])


def initial_difficulty(
    rating: Rating,
    params: SchedulerParameters,
    clamp: bool = True
) -> float:
    """
    Difficulty after the very first review.

    Formula: D_0(G) = w[4] - exp(w[5] * (G - 1)) + 1

    Again yields the hardest start, Easy the easiest.
    """
    w = params.w
    difficulty = w[4] - math.exp(w[5] * (int(rating) - 1)) + 1.0
    return clamp_difficulty(difficulty, params) if clamp else difficulty


def next_difficulty(
    difficulty: float,
    rating: Rating,
    params: SchedulerParameters
) -> float:
    """
    Update difficulty based on the rating.

    Formula:
        delta  = -w[6] * (G - 3)
        D'     = D + delta * (10 - D) / 9        (linear damping)
        D''    = w[7] * D_0(Easy) + (1 - w[7]) * D'   (mean reversion)

    Result is clipped to the configured difficulty bounds.

    Conceptually:
    - Again and Hard increase difficulty, Easy decreases it
    - Good leaves it in place apart from the slow reversion
    - Changes shrink as difficulty approaches the ceiling
    """
    w = params.w
    delta = -w[6] * (int(rating) - 3)
    damped = difficulty + delta * (10.0 - difficulty) / 9.0
    target = initial_difficulty(Rating.EASY, params, clamp=False)
    reverted = w[7] * target + (1.0 - w[7]) * damped
    return clamp_difficulty(reverted, params)


def recall_stability(
    difficulty: float,
    stability: float,
    retrievability: float,
    rating: Rating,
    params: SchedulerParameters
) -> float:
    """
    Update stability after successful recall (Hard/Good/Easy).

    Formula:
        S' = S * (1 + e^w[8] * (11 - D) * S^-w[9] * (e^(w[10] * (1 - R)) - 1) * h * b)

    Where:
        - h = w[15] for Hard, else 1 (hard penalty)
        - b = w[16] for Easy, else 1 (easy bonus)
        - (e^(w[10] * (1 - R)) - 1) rewards well-spaced (risky) success

    The growth factor never drops below 1 because R <= 1.
    """
    if rating == Rating.AGAIN:
        raise ValueError("Use forget_stability for AGAIN ratings")

    w = params.w
    hard_penalty = w[15] if rating == Rating.HARD else 1.0
    easy_bonus = w[16] if rating == Rating.EASY else 1.0

    growth = (
        math.exp(w[8])
        * (11.0 - difficulty)
        * stability ** (-w[9])
        * (math.exp(w[10] * (1.0 - retrievability)) - 1.0)
        * hard_penalty
        * easy_bonus
    )
    factor = 1.0 + max(0.0, growth)
    return max(params.minimum_stability, stability * factor)


def forget_stability(
    difficulty: float,
    stability: float,
    retrievability: float,
    params: SchedulerParameters
) -> float:
    """
    Post-lapse stability after a failed recall (Again).

    Formula:
        S' = w[11] * D^-w[12] * ((S + 1)^w[13] - 1) * e^(w[14] * (1 - R))

    Floored at the minimum stability, then capped at S / e^(w[17] * w[18])
    when short-term scheduling is on and at S otherwise. The cap wins, so a
    lapse never raises stability even for cards already below the floor.
    """
    w = params.w
    long_term = (
        w[11]
        * difficulty ** (-w[12])
        * ((stability + 1.0) ** w[13] - 1.0)
        * math.exp(w[14] * (1.0 - retrievability))
    )
    ceiling = stability
    if params.enable_short_term:
        ceiling = stability / math.exp(w[17] * w[18])
    return min(max(params.minimum_stability, long_term), ceiling)
