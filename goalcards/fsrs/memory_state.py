"""
Memory State - FSRS Card State and Retrievability

Defines the core memory state variables and derived quantities for FSRS.

Key concepts:
- Stability (S): Days until recall probability decays to 90%
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from goalcards.fsrs.constants import DECAY, FACTOR, Rating, State
from goalcards.fsrs.errors import InvalidCardStateError
from goalcards.fsrs.ltm_updates import initial_difficulty, initial_stability
from goalcards.fsrs.parameters import DEFAULT_PARAMETERS, SchedulerParameters

UTC = timezone.utc
ONE_DAY = timedelta(days=1)
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)

# Epoch-ms range representable as a datetime
MIN_EPOCH_MS = (datetime.min.replace(tzinfo=UTC) - EPOCH) // _ONE_MS
MAX_EPOCH_MS = (datetime.max.replace(tzinfo=UTC) - EPOCH) // _ONE_MS


@dataclass(frozen=True)
class Card:
    """
    Memory state for a single flashcard.

    Instances are immutable; the scheduler returns a new Card per review.
    `step` is the learning/relearning step index and is None for New and
    Review cards.
    """
    state: State
    due: datetime

    # Long-term memory parameters
    stability: float  # S, in days
    difficulty: float  # D, range 1-10

    # Interval tracking
    elapsed_days: float  # Days between the previous two reviews
    scheduled_days: float  # Interval chosen at the previous review

    # Counters
    reps: int
    lapses: int

    last_review: Optional[datetime] = None
    step: Optional[int] = None


@dataclass(frozen=True)
class ReviewLog:
    """
    Immutable record of one scheduling event.

    `state`, `due`, `stability` and `difficulty` describe the card after the
    review; `last_elapsed_days` is the elapsed value carried by the card
    before it.
    """
    rating: Rating
    state: State
    due: datetime
    stability: float
    difficulty: float
    elapsed_days: float
    last_elapsed_days: float
    scheduled_days: float
    review: datetime


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC; naive values are treated as UTC."""
    if not isinstance(value, datetime):
        raise TypeError("expected a datetime instance")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def epoch_ms_to_datetime(value: int) -> datetime:
    """Epoch milliseconds to an aware UTC datetime (exact, no float rounding)."""
    return EPOCH + timedelta(milliseconds=value)


def datetime_to_epoch_ms(value: datetime) -> int:
    """Aware or naive (UTC) datetime to epoch milliseconds, truncating sub-ms."""
    return (ensure_utc(value) - EPOCH) // _ONE_MS


def days_between(start: Optional[datetime], end: datetime) -> float:
    """
    Fractional days from start to end.

    Returns 0 when start is None (never reviewed) or lies after end.
    """
    if start is None:
        return 0.0
    delta = ensure_utc(end) - ensure_utc(start)
    return max(0.0, delta / ONE_DAY)


def retrievability(elapsed_days: float, stability: float) -> float:
    """
    Probability of recall after elapsed_days for a given stability.

    Formula: R = (1 + FACTOR * t / S) ^ DECAY

    Interpretation:
    - Immediately after review: R = 1.0
    - When t equals S: R = 0.9
    - Decays slowly (power law) as t grows

    Raises:
        ValueError: if stability is not positive
    """
    if stability <= 0:
        raise ValueError("stability must be positive")
    if elapsed_days <= 0:
        return 1.0
    return (1.0 + FACTOR * elapsed_days / stability) ** DECAY


def next_interval(stability: float, requested_retention: float) -> float:
    """
    Days until retrievability falls to requested_retention.

    Exact inverse of retrievability(); no rounding or clamping is applied.

    Formula: t = S / FACTOR * (r ^ (1 / DECAY) - 1)
    """
    if stability <= 0:
        raise ValueError("stability must be positive")
    if not 0.0 < requested_retention < 1.0:
        raise ValueError("requested_retention must be between 0 and 1 (exclusive)")
    return stability / FACTOR * (requested_retention ** (1.0 / DECAY) - 1.0)


def card_retrievability(card: Card, now: datetime) -> float:
    """Current recall probability for a card; New cards report 0."""
    if card.state == State.NEW or card.last_review is None:
        return 0.0
    return retrievability(days_between(card.last_review, now), card.stability)


def new_card(
    now: datetime,
    parameters: Optional[SchedulerParameters] = None
) -> Card:
    """
    Initialize state for a card that has never been reviewed.

    The card is due immediately. Stability and difficulty start at the
    Good-rating initial values so the card satisfies its invariants; the
    first review overwrites both from the actual rating.
    """
    params = parameters or DEFAULT_PARAMETERS
    return Card(
        state=State.NEW,
        due=ensure_utc(now),
        stability=initial_stability(Rating.GOOD, params),
        difficulty=initial_difficulty(Rating.GOOD, params),
        elapsed_days=0.0,
        scheduled_days=0.0,
        reps=0,
        lapses=0,
        last_review=None,
        step=None,
    )


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_card(
    card: Card,
    parameters: Optional[SchedulerParameters] = None
) -> Card:
    """
    Check the card invariants and return the card with UTC timestamps.

    Difficulty must lie within the bounds configured on `parameters`.

    Raises:
        InvalidCardStateError: if any invariant is violated
    """
    if not isinstance(card, Card):
        raise InvalidCardStateError("expected a Card instance")
    params = parameters or DEFAULT_PARAMETERS

    try:
        state = State(card.state)
    except ValueError as exc:
        raise InvalidCardStateError(f"unknown card state {card.state!r}", field="state") from exc

    for name in ("due", "last_review"):
        value = getattr(card, name)
        if value is None and name == "last_review":
            continue
        if not isinstance(value, datetime):
            raise InvalidCardStateError(f"{name} must be a datetime", field=name)

    for name in ("stability", "difficulty", "elapsed_days", "scheduled_days"):
        value = getattr(card, name)
        if not _is_number(value) or not math.isfinite(value):
            raise InvalidCardStateError(f"{name} must be a finite number", field=name)

    for name in ("reps", "lapses"):
        value = getattr(card, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidCardStateError(f"{name} must be an integer", field=name)

    if card.stability <= 0:
        raise InvalidCardStateError(
            f"stability must be positive, got {card.stability}", field="stability"
        )
    d_min, d_max = params.minimum_difficulty, params.maximum_difficulty
    if not d_min <= card.difficulty <= d_max:
        raise InvalidCardStateError(
            f"difficulty must be within [{d_min}, {d_max}], got {card.difficulty}",
            field="difficulty",
        )
    if card.elapsed_days < 0 or card.scheduled_days < 0:
        raise InvalidCardStateError("elapsed_days and scheduled_days must be non-negative")
    if card.lapses < 0 or card.reps < card.lapses:
        raise InvalidCardStateError(
            f"expected reps >= lapses >= 0, got reps={card.reps} lapses={card.lapses}",
            field="reps",
        )
    if card.step is not None and card.step < 0:
        raise InvalidCardStateError("step must be non-negative", field="step")

    due = ensure_utc(card.due)
    last_review = ensure_utc(card.last_review) if card.last_review is not None else None

    if state != State.NEW and last_review is None:
        raise InvalidCardStateError(
            f"{state.name} card is missing last_review", field="last_review"
        )
    if last_review is not None and due < last_review:
        raise InvalidCardStateError("due must not precede last_review", field="due")

    return replace(card, state=state, due=due, last_review=last_review)
