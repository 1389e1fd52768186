"""
Types for study analytics.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class ReviewStats:
    """
    Aggregates over a learner's review logs.

    `average_rating` and `retention_rate` (percentage of Good/Easy ratings)
    are rounded to two decimals and are 0 when there are no reviews.
    """
    total_reviews: int
    reviews_today: int
    reviews_this_week: int
    average_rating: float
    retention_rate: float


@dataclass(frozen=True)
class CollectionStats:
    """
    Snapshot of a card collection at one instant.
    """
    total_cards: int
    due_cards: int
    new: int
    learning: int
    review: int
    relearning: int
    average_difficulty: float
    average_stability: float

    @property
    def state_breakdown(self) -> dict[str, int]:
        return {
            "new": self.new,
            "learning": self.learning,
            "review": self.review,
            "relearning": self.relearning,
        }


@dataclass(frozen=True)
class StudySummary:
    """
    Everything the progress page shows, precomputed.
    """
    reviews: ReviewStats
    collection: CollectionStats
    daily_reviews: pd.Series
