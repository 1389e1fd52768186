"""
Study helpers built on the scheduling core.

Pure functions for assembling study queues, adjusting ratings by answer
mode and describing card state to a learner.
"""

from goalcards.study.display import (
    calculate_progress,
    days_until_due,
    difficulty_level,
    format_due_date,
    format_interval,
    is_card_due,
    rating_color,
    recommended_action,
    retention_rate,
    state_color,
)
from goalcards.study.queue import (
    GLOBAL_DEFAULTS,
    QueueChanges,
    StudyItem,
    StudySettings,
    build_session,
    detect_queue_changes,
    effective_settings,
    order_due_cards,
    select_new_cards,
)
from goalcards.study.rating_policy import FAST_ANSWER_MS, StudyMode, adjust_rating

__all__ = [
    "calculate_progress",
    "days_until_due",
    "difficulty_level",
    "format_due_date",
    "format_interval",
    "is_card_due",
    "rating_color",
    "recommended_action",
    "retention_rate",
    "state_color",
    "GLOBAL_DEFAULTS",
    "QueueChanges",
    "StudyItem",
    "StudySettings",
    "build_session",
    "detect_queue_changes",
    "effective_settings",
    "order_due_cards",
    "select_new_cards",
    "FAST_ANSWER_MS",
    "StudyMode",
    "adjust_rating",
]
