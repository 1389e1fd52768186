"""
Learner-facing descriptions of card state.

Everything takes `now` explicitly so the output is reproducible.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Any

from goalcards.fsrs import Card, Rating, State
from goalcards.fsrs.memory_state import ONE_DAY, ensure_utc

# ---- Progress ----
PROGRESS_STABILITY_CAP = 365.0  # Stability (days) that counts as 100%
LEARNING_PROGRESS = 25

ONE_HOUR = timedelta(hours=1)

_RATING_COLORS = {
    Rating.AGAIN: "red",
    Rating.HARD: "orange",
    Rating.GOOD: "green",
    Rating.EASY: "blue",
}
_STATE_COLORS = {
    State.NEW: "purple",
    State.LEARNING: "yellow",
    State.REVIEW: "green",
    State.RELEARNING: "orange",
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_interval(days: float) -> str:
    """
    Compact interval label: "6h", "12d", "3mo", "1.4y".
    """
    if days < 1:
        return f"{_round_half_up(days * 24)}h"
    if days < 30:
        return f"{_round_half_up(days)}d"
    if days < 365:
        return f"{_round_half_up(days / 30)}mo"
    years = _round_half_up(days / 365 * 10) / 10
    return f"{years:g}y"


def format_due_date(due: datetime, now: datetime) -> str:
    """
    Relative due label: "Overdue", "Due in 5h", "Due in 3d", "Due in 2w", "Due in 4mo".
    """
    diff = ensure_utc(due) - ensure_utc(now)
    diff_days = diff / ONE_DAY
    if diff_days < 0:
        return "Overdue"
    if diff_days < 1:
        return f"Due in {math.ceil(diff / ONE_HOUR)}h"
    if diff_days < 7:
        return f"Due in {math.ceil(diff_days)}d"
    if diff_days < 30:
        return f"Due in {math.ceil(diff_days / 7)}w"
    return f"Due in {math.ceil(diff_days / 30)}mo"


def difficulty_level(difficulty: float) -> str:
    if difficulty < 3:
        return "Easy"
    if difficulty < 5:
        return "Medium"
    if difficulty < 7:
        return "Hard"
    return "Very Hard"


def calculate_progress(card: Card) -> int:
    """
    Learning progress as a percentage.

    New cards are at 0, Learning/Relearning at 25, and Review cards scale
    from 25 to 100 as stability approaches a year.
    """
    if card.state == State.NEW:
        return 0
    if card.state in (State.LEARNING, State.RELEARNING):
        return LEARNING_PROGRESS
    share = min(card.stability / PROGRESS_STABILITY_CAP, 1.0)
    return _round_half_up(share * (100 - LEARNING_PROGRESS) + LEARNING_PROGRESS)


def recommended_action(card: Card, now: datetime) -> str:
    if card.state == State.NEW:
        return "Start learning this card"
    if card.state == State.LEARNING:
        return "Continue practicing"
    if card.state == State.REVIEW:
        return "Ready for review" if is_card_due(card, now) else "Review scheduled"
    return "Needs more practice"


def is_card_due(card: Card, now: datetime) -> bool:
    return ensure_utc(card.due) <= ensure_utc(now)


def days_until_due(card: Card, now: datetime) -> int:
    """Whole days until the card is due, rounded up; 0 when already due."""
    diff_days = (ensure_utc(card.due) - ensure_utc(now)) / ONE_DAY
    return max(0, math.ceil(diff_days))


def retention_rate(card: Card) -> float:
    """Percentage of reviews that were not lapses; 100 for an unreviewed card."""
    if card.reps == 0:
        return 100.0
    return (card.reps - card.lapses) / card.reps * 100.0


def rating_color(rating: Any) -> str:
    return _RATING_COLORS.get(rating, "gray")


def state_color(state: Any) -> str:
    return _STATE_COLORS.get(state, "gray")
