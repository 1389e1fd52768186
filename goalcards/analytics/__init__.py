"""
Analytics package exports.
"""

from goalcards.analytics.service import build_study_summary
from goalcards.analytics.types import CollectionStats, ReviewStats, StudySummary

__all__ = [
    "build_study_summary",
    "CollectionStats",
    "ReviewStats",
    "StudySummary",
]
