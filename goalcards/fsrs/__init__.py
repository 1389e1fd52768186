"""
FSRS - Free Spaced Repetition Scheduler

Main API for the flashcard scheduling core.

This package implements the FSRS-5 memory model with:
- Power-law forgetting curve: R = (1 + FACTOR * t / S) ^ DECAY
- Difficulty with linear damping and mean reversion
- Learning/relearning steps and same-day (short-term) stability updates
- A versioned parameter object instead of inline magic numbers

Quick start:
    from datetime import datetime, timezone
    from goalcards import fsrs

    now = datetime.now(timezone.utc)
    card = fsrs.new_card(now)

    # Process a review (pure function, no I/O)
    card, log = fsrs.schedule(card, fsrs.Rating.GOOD, now)

    # Store the card as a plain object
    stored = fsrs.card_to_object(card)
"""

# Core scheduler API
from goalcards.fsrs.scheduler import SchedulingResult, next_memory_state, preview, schedule

# Configuration
from goalcards.fsrs.parameters import DEFAULT_PARAMETERS, SchedulerParameters

# Enums and bounds
from goalcards.fsrs.constants import (
    D_MAX,
    D_MIN,
    DEFAULT_WEIGHTS,
    S_MIN,
    WEIGHTS_VERSION,
    Rating,
    State,
)

# Memory state
from goalcards.fsrs.memory_state import (
    Card,
    ReviewLog,
    card_retrievability,
    days_between,
    new_card,
    next_interval,
    retrievability,
    validate_card,
)

# Boundary conversion
from goalcards.fsrs.conversion import (
    card_to_object,
    datetime_to_epoch_ms,
    epoch_ms_to_datetime,
    is_valid_rating,
    number_to_rating,
    number_to_state,
    object_to_card,
    object_to_review_log,
    rating_to_string,
    review_log_to_object,
    state_to_string,
)

# Errors
from goalcards.fsrs.errors import (
    InvalidCardStateError,
    InvalidParametersError,
    InvalidRatingError,
    MalformedCardRecordError,
    SchedulingError,
)


__all__ = [
    # Core algorithm
    "schedule",
    "preview",
    "next_memory_state",
    "SchedulingResult",

    # Configuration
    "SchedulerParameters",
    "DEFAULT_PARAMETERS",

    # Enums
    "Rating",
    "State",

    # Memory state
    "Card",
    "ReviewLog",
    "new_card",
    "retrievability",
    "card_retrievability",
    "next_interval",
    "days_between",
    "validate_card",

    # Conversion
    "number_to_rating",
    "is_valid_rating",
    "number_to_state",
    "rating_to_string",
    "state_to_string",
    "epoch_ms_to_datetime",
    "datetime_to_epoch_ms",
    "object_to_card",
    "card_to_object",
    "object_to_review_log",
    "review_log_to_object",

    # Errors
    "SchedulingError",
    "InvalidRatingError",
    "MalformedCardRecordError",
    "InvalidCardStateError",
    "InvalidParametersError",

    # Parameters
    "DEFAULT_WEIGHTS",
    "WEIGHTS_VERSION",
    "S_MIN",
    "D_MIN",
    "D_MAX",
]
