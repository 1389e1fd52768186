"""
Scheduler - FSRS Algorithm Logic

Pure FSRS scheduling and state updates (no I/O, no clock reads).

Main workflow:
1. Load card state (caller's responsibility)
2. Validate the card and the rating
3. Compute elapsed time and retrievability
4. Update difficulty and stability (initial / short-term / recall / lapse)
5. Pick the next state and interval from the (state, rating) table
6. Return the new card + its review log

Transition table:

    From        Again               Hard             Good             Easy
    New         Learning step 0     Learning step 0  next step/Review Review
    Learning    Learning step 0     same step        next step/Review Review
    Review      Relearning step 0*  Review           Review           Review
    Relearning  Relearning step 0*  same step/Review Review           Review

    * counts a lapse

Persisting the card and the log is the caller's job.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from typing import Any, Callable, NamedTuple, Optional

from goalcards.fsrs import intervals, ltm_updates, stm_updates
from goalcards.fsrs.constants import Rating, State
from goalcards.fsrs.conversion import number_to_rating
from goalcards.fsrs.errors import InvalidCardStateError, InvalidRatingError
from goalcards.fsrs.memory_state import (
    ONE_DAY,
    Card,
    ReviewLog,
    datetime_to_epoch_ms,
    days_between,
    ensure_utc,
    retrievability,
    validate_card,
)
from goalcards.fsrs.parameters import DEFAULT_PARAMETERS, SchedulerParameters

logger = logging.getLogger(__name__)


class SchedulingResult(NamedTuple):
    """Outcome of one rating: the updated card and the log entry for it."""
    card: Card
    log: ReviewLog


class _Outcome(NamedTuple):
    state: State
    step: Optional[int]
    interval: timedelta
    lapsed: bool = False


def _coerce_rating(rating: Any) -> Rating:
    if isinstance(rating, Rating):
        return rating
    coerced = number_to_rating(rating)
    if coerced is None:
        raise InvalidRatingError(f"invalid rating {rating!r}: expected 1-4", field="rating")
    return coerced


def next_memory_state(
    card: Card,
    rating: Rating,
    elapsed_days: float,
    params: SchedulerParameters
) -> tuple[float, float]:
    """
    Stability and difficulty after rating `card`.

    - New cards take the initial values for the rating
    - Again on a Review/Relearning card uses the post-lapse formula
    - Other reviews under a day apart use the short-term formula
    - Remaining Again ratings use the post-lapse formula
    - Everything else uses the recall formula

    Returns:
        (stability, difficulty)
    """
    if card.state == State.NEW:
        return (
            ltm_updates.initial_stability(rating, params),
            ltm_updates.initial_difficulty(rating, params),
        )

    r = retrievability(elapsed_days, card.stability)
    difficulty = ltm_updates.next_difficulty(card.difficulty, rating, params)

    if rating == Rating.AGAIN and card.state in (State.REVIEW, State.RELEARNING):
        stability = ltm_updates.forget_stability(card.difficulty, card.stability, r, params)
    elif params.enable_short_term and stm_updates.is_short_term(elapsed_days):
        stability = stm_updates.short_term_stability(card.stability, rating, params)
    elif rating == Rating.AGAIN:
        stability = ltm_updates.forget_stability(card.difficulty, card.stability, r, params)
    else:
        stability = ltm_updates.recall_stability(
            card.difficulty, card.stability, r, rating, params
        )
    return stability, difficulty


def _review_days(
    card: Card,
    rating: Rating,
    elapsed_days: float,
    params: SchedulerParameters,
    rng: Optional[random.Random]
) -> int:
    """Interval for a Review card rated Hard/Good/Easy, ordered across the three."""
    days = {}
    for option in (Rating.HARD, Rating.GOOD, Rating.EASY):
        stability, _ = next_memory_state(card, option, elapsed_days, params)
        days[option] = intervals.review_interval(stability, params, elapsed_days, rng)
    hard, good, easy = intervals.ordered_review_intervals(
        days[Rating.HARD], days[Rating.GOOD], days[Rating.EASY], params
    )
    return {Rating.HARD: hard, Rating.GOOD: good, Rating.EASY: easy}[rating]


def _graduate(stability: float, elapsed_days: float, params, rng) -> _Outcome:
    days = intervals.review_interval(stability, params, elapsed_days, rng)
    return _Outcome(State.REVIEW, None, timedelta(days=days))


def _from_learning(card, rating, stability, elapsed_days, params, rng) -> _Outcome:
    step = card.step if card.step is not None else 0
    decision = stm_updates.learning_step(params.learning_steps, step, rating)
    if decision.step is None:
        return _graduate(stability, elapsed_days, params, rng)
    return _Outcome(State.LEARNING, decision.step, decision.interval)


def _from_review(card, rating, stability, elapsed_days, params, rng) -> _Outcome:
    if rating == Rating.AGAIN:
        decision = stm_updates.relearning_step(params.relearning_steps, 0, rating)
        if decision.step is None:
            outcome = _graduate(stability, elapsed_days, params, rng)
            return outcome._replace(lapsed=True)
        return _Outcome(State.RELEARNING, decision.step, decision.interval, lapsed=True)

    days = _review_days(card, rating, elapsed_days, params, rng)
    return _Outcome(State.REVIEW, None, timedelta(days=days))


def _from_relearning(card, rating, stability, elapsed_days, params, rng) -> _Outcome:
    step = card.step if card.step is not None else 0
    decision = stm_updates.relearning_step(params.relearning_steps, step, rating)
    lapsed = rating == Rating.AGAIN
    if decision.step is None:
        return _graduate(stability, elapsed_days, params, rng)._replace(lapsed=lapsed)
    return _Outcome(State.RELEARNING, decision.step, decision.interval, lapsed=lapsed)


_TRANSITIONS: dict[State, Callable[..., _Outcome]] = {
    State.NEW: _from_learning,
    State.LEARNING: _from_learning,
    State.REVIEW: _from_review,
    State.RELEARNING: _from_relearning,
}


def schedule(
    card: Card,
    rating: Any,
    now: datetime,
    parameters: Optional[SchedulerParameters] = None
) -> SchedulingResult:
    """
    Apply one rating to a card and return the updated card + review log.

    This is the core FSRS algorithm. No database calls, no clock reads.
    Caller is responsible for:
    1. Loading the card
    2. Saving the returned card
    3. Persisting the returned log

    Args:
        card: Card to update (never modified)
        rating: Rating, or an integer 1-4
        now: Review timestamp; naive datetimes are treated as UTC
        parameters: Scheduler configuration (defaults to DEFAULT_PARAMETERS)

    Returns:
        SchedulingResult(card, log)

    Raises:
        InvalidRatingError: if the rating is not Again/Hard/Good/Easy
        InvalidCardStateError: if the card violates its invariants
    """
    params = parameters or DEFAULT_PARAMETERS
    rating = _coerce_rating(rating)
    now = ensure_utc(now)

    try:
        card = validate_card(card, params)
    except InvalidCardStateError as exc:
        logger.warning("Rejected card for scheduling: %s", exc.message)
        raise

    elapsed_days = days_between(card.last_review, now)
    stability, difficulty = next_memory_state(card, rating, elapsed_days, params)

    rng = None
    if params.enable_fuzz:
        seed = intervals.fuzz_seed(
            datetime_to_epoch_ms(now), card.reps, card.difficulty, card.stability
        )
        rng = random.Random(seed)

    outcome = _TRANSITIONS[card.state](card, rating, stability, elapsed_days, params, rng)

    due = now + outcome.interval
    updated = Card(
        state=outcome.state,
        due=due,
        stability=stability,
        difficulty=difficulty,
        elapsed_days=elapsed_days,
        scheduled_days=outcome.interval / ONE_DAY,
        reps=card.reps + 1,
        lapses=card.lapses + (1 if outcome.lapsed else 0),
        last_review=now,
        step=outcome.step,
    )
    log = ReviewLog(
        rating=rating,
        state=updated.state,
        due=updated.due,
        stability=updated.stability,
        difficulty=updated.difficulty,
        elapsed_days=elapsed_days,
        last_elapsed_days=card.elapsed_days,
        scheduled_days=updated.scheduled_days,
        review=now,
    )

    logger.debug(
        "Scheduled card %s -> %s on %s (S=%.3f, D=%.3f, due %s)",
        card.state.name, updated.state.name, rating.name,
        stability, difficulty, due.isoformat(),
    )
    return SchedulingResult(updated, log)


def preview(
    card: Card,
    now: datetime,
    parameters: Optional[SchedulerParameters] = None
) -> dict[Rating, SchedulingResult]:
    """
    Schedule the card under every rating, e.g. to label rating buttons.

    Each entry equals the result of calling schedule() with that rating.
    """
    return {rating: schedule(card, rating, now, parameters) for rating in Rating}
