"""
Study Queue - Session Assembly

Builds a study session from a deck's cards:
1. Due cards (due <= now), ordered by lifecycle priority then due time
   - New, Learning, Relearning, Review
2. New cards limited by new_cards_per_day
3. Session capped at cards_per_session

Settings precedence: session overrides > deck overrides > global defaults.

Loading cards and persisting sessions is the caller's job; everything here
works on in-memory StudyItems.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Literal, Mapping, Optional, Sequence

from goalcards.fsrs import Card, State
from goalcards.fsrs.errors import InvalidParametersError
from goalcards.fsrs.memory_state import ensure_utc

# ---- Session Configuration ----
DEFAULT_NEW_CARDS_PER_DAY = 20
DEFAULT_CARDS_PER_SESSION = 50

# Lower sorts first
STATE_PRIORITY = {
    State.NEW: 1,
    State.LEARNING: 2,
    State.RELEARNING: 3,
    State.REVIEW: 4,
}

SettingsSource = Literal["session", "deck", "global"]


@dataclass(frozen=True)
class StudyItem:
    """A card's identifier paired with its memory state."""
    card_id: str
    card: Card


@dataclass(frozen=True)
class StudySettings:
    new_cards_per_day: int = DEFAULT_NEW_CARDS_PER_DAY
    cards_per_session: int = DEFAULT_CARDS_PER_SESSION
    source: SettingsSource = "global"

    def __post_init__(self) -> None:
        if self.new_cards_per_day < 0:
            raise InvalidParametersError(
                "new_cards_per_day must be non-negative", field="new_cards_per_day"
            )
        if self.cards_per_session < 1:
            raise InvalidParametersError(
                "cards_per_session must be at least 1", field="cards_per_session"
            )


GLOBAL_DEFAULTS = StudySettings()


@dataclass(frozen=True)
class QueueChanges:
    """Difference between a running session and the deck's current cards."""
    added: list[StudyItem] = field(default_factory=list)
    removed_ids: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed_ids)


def _pick(key: str, *sources: Optional[Mapping[str, Optional[int]]]) -> int:
    for source in sources:
        if source and source.get(key) is not None:
            return int(source[key])
    return getattr(GLOBAL_DEFAULTS, key)


def effective_settings(
    deck_overrides: Optional[Mapping[str, Optional[int]]] = None,
    session_overrides: Optional[Mapping[str, Optional[int]]] = None
) -> StudySettings:
    """
    Resolve study settings with precedence session > deck > global.

    Each override mapping may set `new_cards_per_day` and/or
    `cards_per_session`; None values fall through to the next level.
    `source` names the most specific level that was supplied.
    """
    if session_overrides is not None:
        source: SettingsSource = "session"
    elif deck_overrides and any(v is not None for v in deck_overrides.values()):
        source = "deck"
    else:
        source = "global"

    return StudySettings(
        new_cards_per_day=_pick("new_cards_per_day", session_overrides, deck_overrides),
        cards_per_session=_pick("cards_per_session", session_overrides, deck_overrides),
        source=source,
    )


def _sort_key(item: StudyItem) -> tuple[int, datetime]:
    return STATE_PRIORITY.get(item.card.state, 5), ensure_utc(item.card.due)


def order_due_cards(items: Iterable[StudyItem], now: datetime) -> list[StudyItem]:
    """Due items ordered by state priority, then earliest due first."""
    now = ensure_utc(now)
    due = [item for item in items if ensure_utc(item.card.due) <= now]
    return sorted(due, key=_sort_key)


def select_new_cards(items: Iterable[StudyItem], limit: int) -> list[StudyItem]:
    """First `limit` New cards, in input order."""
    if limit <= 0:
        return []
    return [item for item in items if item.card.state == State.NEW][:limit]


def build_session(
    items: Sequence[StudyItem],
    now: datetime,
    settings: StudySettings = GLOBAL_DEFAULTS
) -> list[StudyItem]:
    """
    Assemble one study session.

    Due cards in priority order, with New cards capped at
    settings.new_cards_per_day, the whole list capped at
    settings.cards_per_session.
    """
    session: list[StudyItem] = []
    new_taken = 0
    for item in order_due_cards(items, now):
        if len(session) >= settings.cards_per_session:
            break
        if item.card.state == State.NEW:
            if new_taken >= settings.new_cards_per_day:
                continue
            new_taken += 1
        session.append(item)
    return session


def detect_queue_changes(
    original_ids: Sequence[str],
    current: Sequence[StudyItem],
    now: datetime
) -> QueueChanges:
    """
    Compare a running session's card ids with the deck's current cards.

    Added cards are reported only if they are due; removed ids are every
    original id no longer in the deck.
    """
    now = ensure_utc(now)
    original = set(original_ids)
    current_ids = {item.card_id for item in current}

    added = [
        item for item in current
        if item.card_id not in original and ensure_utc(item.card.due) <= now
    ]
    removed = [card_id for card_id in original_ids if card_id not in current_ids]
    return QueueChanges(added=added, removed_ids=removed)
