"""
Metric computations for study analytics.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable

import pandas as pd

from goalcards.analytics.types import CollectionStats, ReviewStats
from goalcards.fsrs import Card, Rating, ReviewLog, State
from goalcards.fsrs.memory_state import ensure_utc

REVIEW_COLUMNS = ["rating", "state", "review", "scheduled_days", "day_utc"]
CARD_COLUMNS = ["state", "due", "stability", "difficulty", "reps", "lapses"]

_SUCCESS_RATINGS = (int(Rating.GOOD), int(Rating.EASY))


def _round2(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def build_reviews_df(logs: Iterable[ReviewLog]) -> pd.DataFrame:
    """
    One row per review log, sorted by review time, with a UTC day column.
    """
    rows = [
        {
            "rating": int(log.rating),
            "state": int(log.state),
            "review": log.review,
            "scheduled_days": log.scheduled_days,
        }
        for log in logs
    ]
    if not rows:
        return pd.DataFrame(columns=REVIEW_COLUMNS)

    df = pd.DataFrame(rows)
    df["review"] = pd.to_datetime(df["review"], utc=True)
    df["day_utc"] = df["review"].dt.floor("D")
    return df.sort_values("review").reset_index(drop=True)


def build_cards_df(cards: Iterable[Card]) -> pd.DataFrame:
    """
    One row per card snapshot.
    """
    rows = [
        {
            "state": int(card.state),
            "due": card.due,
            "stability": card.stability,
            "difficulty": card.difficulty,
            "reps": card.reps,
            "lapses": card.lapses,
        }
        for card in cards
    ]
    if not rows:
        return pd.DataFrame(columns=CARD_COLUMNS)

    df = pd.DataFrame(rows)
    df["due"] = pd.to_datetime(df["due"], utc=True)
    return df


def build_day_index(reviews_df: pd.DataFrame) -> pd.DatetimeIndex:
    """
    Build a dense UTC day index spanning the review range.
    """
    if reviews_df.empty:
        return pd.DatetimeIndex([], tz="UTC")
    start = reviews_df["day_utc"].min()
    end = reviews_df["day_utc"].max()
    return pd.date_range(start=start, end=end, freq="D")


def compute_review_stats(reviews_df: pd.DataFrame, now: datetime) -> ReviewStats:
    """
    Totals for all time, today (UTC) and the 7 days before today.
    """
    if reviews_df.empty:
        return ReviewStats(0, 0, 0, 0.0, 0.0)

    today_start = pd.Timestamp(ensure_utc(now)).floor("D")
    week_start = today_start - timedelta(days=7)

    total = len(reviews_df)
    success = int(reviews_df["rating"].isin(_SUCCESS_RATINGS).sum())
    return ReviewStats(
        total_reviews=total,
        reviews_today=int((reviews_df["review"] >= today_start).sum()),
        reviews_this_week=int((reviews_df["review"] >= week_start).sum()),
        average_rating=_round2(float(reviews_df["rating"].mean())),
        retention_rate=_round2(success / total * 100),
    )


def compute_collection_stats(cards_df: pd.DataFrame, now: datetime) -> CollectionStats:
    """
    Due count, state breakdown and average difficulty/stability.
    """
    if cards_df.empty:
        return CollectionStats(0, 0, 0, 0, 0, 0, 0.0, 0.0)

    now_ts = pd.Timestamp(ensure_utc(now))
    counts = cards_df["state"].value_counts()
    return CollectionStats(
        total_cards=len(cards_df),
        due_cards=int((cards_df["due"] <= now_ts).sum()),
        new=int(counts.get(int(State.NEW), 0)),
        learning=int(counts.get(int(State.LEARNING), 0)),
        review=int(counts.get(int(State.REVIEW), 0)),
        relearning=int(counts.get(int(State.RELEARNING), 0)),
        average_difficulty=_round2(float(cards_df["difficulty"].mean())),
        average_stability=_round2(float(cards_df["stability"].mean())),
    )


def compute_daily_review_counts(
    reviews_df: pd.DataFrame,
    day_index: pd.DatetimeIndex
) -> pd.Series:
    """
    Reviews per UTC day, zero-filled across the index.
    """
    if reviews_df.empty or len(day_index) == 0:
        return pd.Series(dtype="int64")
    daily = reviews_df.groupby("day_utc").size()
    return daily.reindex(day_index, fill_value=0).astype("int64")
