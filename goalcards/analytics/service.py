"""
Service layer to assemble the study summary.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from goalcards.analytics.metrics import (
    build_cards_df,
    build_day_index,
    build_reviews_df,
    compute_collection_stats,
    compute_daily_review_counts,
    compute_review_stats,
)
from goalcards.analytics.types import StudySummary
from goalcards.fsrs import Card, ReviewLog

logger = logging.getLogger(__name__)


def build_study_summary(
    cards: Iterable[Card],
    logs: Iterable[ReviewLog],
    now: datetime
) -> StudySummary:
    """
    Build all values and series needed by the progress page.
    """
    reviews_df = build_reviews_df(logs)
    cards_df = build_cards_df(cards)
    day_index = build_day_index(reviews_df)

    summary = StudySummary(
        reviews=compute_review_stats(reviews_df, now),
        collection=compute_collection_stats(cards_df, now),
        daily_reviews=compute_daily_review_counts(reviews_df, day_index),
    )
    logger.debug(
        "Study summary: %d cards, %d reviews",
        summary.collection.total_cards, summary.reviews.total_reviews,
    )
    return summary
