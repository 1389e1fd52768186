from datetime import datetime, timedelta

import pandas as pd
import pytest

from conftest import UTC, make_card
from goalcards.analytics import build_study_summary
from goalcards.analytics.metrics import (
    build_cards_df,
    build_day_index,
    build_reviews_df,
    compute_collection_stats,
    compute_daily_review_counts,
    compute_review_stats,
)
from goalcards.fsrs import Rating, ReviewLog, State, new_card

NOW = datetime(2024, 6, 10, 15, 0, tzinfo=UTC)


def log_at(when, rating):
    return ReviewLog(
        rating=rating,
        state=State.REVIEW,
        due=when + timedelta(days=3),
        stability=3.0,
        difficulty=5.0,
        elapsed_days=1.0,
        last_elapsed_days=1.0,
        scheduled_days=3.0,
        review=when,
    )


@pytest.fixture
def logs():
    return [
        log_at(datetime(2024, 6, 10, 9, 0, tzinfo=UTC), Rating.GOOD),
        log_at(datetime(2024, 6, 10, 10, 0, tzinfo=UTC), Rating.AGAIN),
        log_at(datetime(2024, 6, 5, 18, 0, tzinfo=UTC), Rating.EASY),
        log_at(datetime(2024, 5, 20, 8, 0, tzinfo=UTC), Rating.HARD),
    ]


@pytest.fixture
def cards():
    return [
        new_card(NOW - timedelta(days=1)),
        make_card(due=NOW + timedelta(days=2), last_review=NOW - timedelta(days=1), difficulty=6.0),
        make_card(
            state=State.RELEARNING, step=0, due=NOW - timedelta(minutes=5),
            last_review=NOW - timedelta(minutes=15), stability=2.0, difficulty=7.0,
        ),
    ]


def test_reviews_df_is_sorted_with_days(logs):
    df = build_reviews_df(logs)
    assert list(df["rating"]) == [2, 4, 3, 1]
    assert df["day_utc"].iloc[0] == pd.Timestamp("2024-05-20", tz="UTC")


def test_review_stats(logs):
    stats = compute_review_stats(build_reviews_df(logs), NOW)
    assert stats.total_reviews == 4
    assert stats.reviews_today == 2
    assert stats.reviews_this_week == 3
    assert stats.average_rating == 2.5
    assert stats.retention_rate == 50.0


def test_review_stats_empty():
    stats = compute_review_stats(build_reviews_df([]), NOW)
    assert stats.total_reviews == 0
    assert stats.average_rating == 0.0
    assert stats.retention_rate == 0.0


def test_collection_stats(cards):
    stats = compute_collection_stats(build_cards_df(cards), NOW)
    assert stats.total_cards == 3
    assert stats.due_cards == 2
    assert stats.state_breakdown == {"new": 1, "learning": 0, "review": 1, "relearning": 1}
    # (5.2824 + 6 + 7) / 3 and (3.173 + 10 + 2) / 3
    assert stats.average_difficulty == pytest.approx(6.09)
    assert stats.average_stability == pytest.approx(5.06)


def test_collection_stats_empty():
    stats = compute_collection_stats(build_cards_df([]), NOW)
    assert stats.total_cards == 0
    assert stats.average_stability == 0.0


def test_daily_review_counts_are_dense(logs):
    df = build_reviews_df(logs)
    daily = compute_daily_review_counts(df, build_day_index(df))
    assert len(daily) == 22
    assert daily.sum() == 4
    assert daily[pd.Timestamp("2024-06-10", tz="UTC")] == 2
    assert daily[pd.Timestamp("2024-06-01", tz="UTC")] == 0


def test_build_study_summary(cards, logs):
    summary = build_study_summary(cards, logs, NOW)
    assert summary.reviews.total_reviews == 4
    assert summary.collection.due_cards == 2
    assert int(summary.daily_reviews.sum()) == 4


def test_build_study_summary_empty():
    summary = build_study_summary([], [], NOW)
    assert summary.reviews.total_reviews == 0
    assert summary.collection.total_cards == 0
    assert summary.daily_reviews.empty
