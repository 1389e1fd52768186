"""
Rating policy per answer mode.

Self-graded flashcards pass the learner's rating through unchanged. In
multiple-choice mode the learner only picks an answer, so the rating is
derived from correctness and response time.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from goalcards.fsrs import Rating, number_to_rating
from goalcards.fsrs.errors import InvalidRatingError

logger = logging.getLogger(__name__)

# ---- Thresholds ----
FAST_ANSWER_MS = 10_000  # Correct answers at or under this count as Good


class StudyMode(str, Enum):
    """How the learner answers a card."""
    FLASHCARD = "flashcard"
    MULTIPLE_CHOICE = "multiple_choice"
    TIMED = "timed"


def adjust_rating(
    rating: Any,
    mode: StudyMode | str = StudyMode.FLASHCARD,
    response_time_ms: Optional[int] = None
) -> Rating:
    """
    Map a submitted rating to the rating the scheduler should see.

    Multiple choice:
    - Again (wrong answer) stays Again
    - Correct in <= FAST_ANSWER_MS becomes Good, slower becomes Hard
    - Without a response time the submitted rating is kept

    Args:
        rating: Rating or integer 1-4
        mode: Answer mode
        response_time_ms: Time to answer, in milliseconds

    Returns:
        The rating to schedule with

    Raises:
        InvalidRatingError: if the rating is not 1-4
    """
    parsed = rating if isinstance(rating, Rating) else number_to_rating(rating)
    if parsed is None:
        raise InvalidRatingError(f"invalid rating {rating!r}: expected 1-4", field="rating")

    if StudyMode(mode) != StudyMode.MULTIPLE_CHOICE:
        return parsed
    if parsed == Rating.AGAIN or response_time_ms is None:
        return parsed
    adjusted = Rating.GOOD if response_time_ms <= FAST_ANSWER_MS else Rating.HARD
    logger.debug(
        "Time-based rating applied: %s -> %s (%d ms, threshold %d ms)",
        parsed.name, adjusted.name, response_time_ms, FAST_ANSWER_MS,
    )
    return adjusted
