"""
Boundary conversion between stored objects and scheduler types.

Cards are stored as plain JSON objects (the `fsrsState` column) with epoch
millisecond timestamps:

    {"state": 2, "due": 1717200000000, "stability": 10.0, "difficulty": 5.0,
     "elapsed_days": 10.0, "scheduled_days": 10.0, "reps": 4, "lapses": 0,
     "last_review": 1716336000000, "learning_steps": 1}

`last_review` and `learning_steps` are omitted when unset. Validation here is
structural (types, known keys, known enum values); the card invariants are
checked by the scheduler.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from goalcards.fsrs.constants import Rating, State
from goalcards.fsrs.errors import MalformedCardRecordError
from goalcards.fsrs.memory_state import (
    Card,
    ReviewLog,
    MAX_EPOCH_MS,
    MIN_EPOCH_MS,
    datetime_to_epoch_ms,
    epoch_ms_to_datetime,
)

__all__ = [
    "FsrsStateRecord",
    "ReviewLogRecord",
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
]


# ---- Ratings and States ----

def _as_int(value: Any) -> Optional[int]:
    """Integers and integral floats (3.0 arrives from JSON) as int, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def number_to_rating(value: Any) -> Optional[Rating]:
    """Map 1-4 (or 1.0-4.0) to a Rating; anything else, bools included, gives None."""
    number = _as_int(value)
    if number is None:
        return None
    try:
        return Rating(number)
    except ValueError:
        return None


def is_valid_rating(value: Any) -> bool:
    return number_to_rating(value) is not None


def number_to_state(value: Any) -> Optional[State]:
    """Map 0-3 to a State, else None."""
    number = _as_int(value)
    if number is None:
        return None
    try:
        return State(number)
    except ValueError:
        return None


def rating_to_string(rating: Any) -> str:
    """Title-case label for a rating ("Again", "Hard", ...), "Unknown" otherwise."""
    parsed = rating if isinstance(rating, Rating) else number_to_rating(rating)
    return parsed.name.title() if parsed is not None else "Unknown"


def state_to_string(state: Any) -> str:
    parsed = state if isinstance(state, State) else number_to_state(state)
    return parsed.name.title() if parsed is not None else "Unknown"


# ---- Record Schemas ----

class FsrsStateRecord(BaseModel):
    """Stored shape of a card's memory state."""
    model_config = ConfigDict(extra="forbid", strict=True)

    state: int = Field(..., ge=0, le=3, description="0 New, 1 Learning, 2 Review, 3 Relearning")
    due: int = Field(..., ge=MIN_EPOCH_MS, le=MAX_EPOCH_MS, description="Epoch milliseconds")
    stability: float = Field(..., allow_inf_nan=False)
    difficulty: float = Field(..., allow_inf_nan=False)
    elapsed_days: float = Field(..., allow_inf_nan=False)
    scheduled_days: float = Field(..., allow_inf_nan=False)
    reps: int
    lapses: int
    last_review: Optional[int] = Field(
        None, ge=MIN_EPOCH_MS, le=MAX_EPOCH_MS, description="Epoch milliseconds"
    )
    learning_steps: Optional[int] = Field(None, description="Current learning/relearning step")


class ReviewLogRecord(BaseModel):
    """Stored shape of a review log entry."""
    model_config = ConfigDict(extra="forbid", strict=True)

    rating: int = Field(..., ge=1, le=4)
    state: int = Field(..., ge=0, le=3)
    due: int = Field(..., ge=MIN_EPOCH_MS, le=MAX_EPOCH_MS)
    stability: float = Field(..., allow_inf_nan=False)
    difficulty: float = Field(..., allow_inf_nan=False)
    elapsed_days: float = Field(..., allow_inf_nan=False)
    last_elapsed_days: float = Field(..., allow_inf_nan=False)
    scheduled_days: float = Field(..., allow_inf_nan=False)
    review: int = Field(..., ge=MIN_EPOCH_MS, le=MAX_EPOCH_MS)


def _validate(model: type[BaseModel], obj: Any, what: str) -> Any:
    if not isinstance(obj, Mapping):
        raise MalformedCardRecordError(f"{what} must be an object, got {type(obj).__name__}")
    try:
        return model.model_validate(dict(obj))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise MalformedCardRecordError(
            f"malformed {what}: {first['msg']}", field=field
        ) from exc


# ---- Cards ----

def object_to_card(obj: Mapping[str, Any]) -> Card:
    """
    Parse a stored card object into a Card.

    Raises:
        MalformedCardRecordError: on missing/unknown keys or wrong types
    """
    record: FsrsStateRecord = _validate(FsrsStateRecord, obj, "card record")
    return Card(
        state=State(record.state),
        due=epoch_ms_to_datetime(record.due),
        stability=record.stability,
        difficulty=record.difficulty,
        elapsed_days=record.elapsed_days,
        scheduled_days=record.scheduled_days,
        reps=record.reps,
        lapses=record.lapses,
        last_review=(
            epoch_ms_to_datetime(record.last_review)
            if record.last_review is not None else None
        ),
        step=record.learning_steps,
    )


def card_to_object(card: Card) -> dict[str, Any]:
    """Inverse of object_to_card; optional keys are emitted only when set."""
    obj: dict[str, Any] = {
        "state": int(card.state),
        "due": datetime_to_epoch_ms(card.due),
        "stability": card.stability,
        "difficulty": card.difficulty,
        "elapsed_days": card.elapsed_days,
        "scheduled_days": card.scheduled_days,
        "reps": card.reps,
        "lapses": card.lapses,
    }
    if card.last_review is not None:
        obj["last_review"] = datetime_to_epoch_ms(card.last_review)
    if card.step is not None:
        obj["learning_steps"] = card.step
    return obj


# ---- Review Logs ----

def object_to_review_log(obj: Mapping[str, Any]) -> ReviewLog:
    record: ReviewLogRecord = _validate(ReviewLogRecord, obj, "review log record")
    return ReviewLog(
        rating=Rating(record.rating),
        state=State(record.state),
        due=epoch_ms_to_datetime(record.due),
        stability=record.stability,
        difficulty=record.difficulty,
        elapsed_days=record.elapsed_days,
        last_elapsed_days=record.last_elapsed_days,
        scheduled_days=record.scheduled_days,
        review=epoch_ms_to_datetime(record.review),
    )


def review_log_to_object(log: ReviewLog) -> dict[str, Any]:
    return {
        "rating": int(log.rating),
        "state": int(log.state),
        "due": datetime_to_epoch_ms(log.due),
        "stability": log.stability,
        "difficulty": log.difficulty,
        "elapsed_days": log.elapsed_days,
        "last_elapsed_days": log.last_elapsed_days,
        "scheduled_days": log.scheduled_days,
        "review": datetime_to_epoch_ms(log.review),
    }
