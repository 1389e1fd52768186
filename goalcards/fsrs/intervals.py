"""
Review Intervals

Turns a stability value into a whole-day review interval:
1. Invert the forgetting curve at the requested retention
2. Optionally fuzz the result so cards reviewed together spread out
3. Round and clamp into [minimum_interval, maximum_interval]

Learning and relearning steps are sub-day delays and never pass through here.
"""

from __future__ import annotations

import math
import random
from typing import Optional

from goalcards.fsrs.constants import FUZZ_MIN_INTERVAL, FUZZ_RANGES
from goalcards.fsrs.memory_state import next_interval
from goalcards.fsrs.parameters import SchedulerParameters


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_interval(days: int, params: SchedulerParameters) -> int:
    return max(params.minimum_interval, min(params.maximum_interval, days))


def fuzz_range(
    interval: float,
    elapsed_days: float,
    maximum_interval: int
) -> tuple[int, int]:
    """
    Inclusive (min, max) day range an interval may be fuzzed into.

    The spread grows piecewise with the interval (see FUZZ_RANGES). A card
    that has already waited longer than the new interval is not scheduled
    before elapsed_days + 1.
    """
    delta = 1.0
    for start, end, factor in FUZZ_RANGES:
        delta += factor * max(min(interval, end) - start, 0.0)

    interval = min(interval, maximum_interval)
    min_ivl = max(2, round_half_up(interval - delta))
    max_ivl = min(round_half_up(interval + delta), maximum_interval)
    if interval > elapsed_days:
        min_ivl = max(min_ivl, int(elapsed_days) + 1)
    min_ivl = min(min_ivl, max_ivl)
    return min_ivl, max_ivl


def apply_fuzz(
    interval: float,
    elapsed_days: float,
    params: SchedulerParameters,
    rng: Optional[random.Random]
) -> int:
    """Round the interval, fuzzing it when enabled and long enough to matter."""
    if not params.enable_fuzz or rng is None or interval < FUZZ_MIN_INTERVAL:
        return round_half_up(interval)
    min_ivl, max_ivl = fuzz_range(interval, elapsed_days, params.maximum_interval)
    return int(math.floor(rng.random() * (max_ivl - min_ivl + 1) + min_ivl))


def review_interval(
    stability: float,
    params: SchedulerParameters,
    elapsed_days: float = 0.0,
    rng: Optional[random.Random] = None
) -> int:
    """
    Whole-day interval for a card entering or staying in Review.

    Args:
        stability: Stability after the review (days)
        params: Scheduler configuration
        elapsed_days: Days since the previous review (only affects fuzz)
        rng: Seeded generator; fuzz is skipped without one

    Returns:
        Interval in days, within [minimum_interval, maximum_interval]
    """
    raw = next_interval(stability, params.request_retention)
    return clamp_interval(apply_fuzz(raw, elapsed_days, params, rng), params)


def ordered_review_intervals(
    hard: int,
    good: int,
    easy: int,
    params: SchedulerParameters
) -> tuple[int, int, int]:
    """
    Enforce Hard <= Good < Easy for the three success outcomes of a review.

    Good is pushed at least one day past Hard and Easy one day past Good,
    then everything is re-capped at maximum_interval.
    """
    hard = min(hard, good)
    good = max(good, hard + 1)
    easy = max(easy, good + 1)
    cap = params.maximum_interval
    return min(hard, cap), min(good, cap), min(easy, cap)


def fuzz_seed(timestamp_ms: int, reps: int, difficulty: float, stability: float) -> str:
    """Seed string for the per-review fuzz generator."""
    return f"{timestamp_ms}_{reps}_{difficulty * stability}"
