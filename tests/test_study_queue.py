from datetime import timedelta

import pytest

from conftest import T0, make_card
from goalcards.fsrs import InvalidParametersError, State, new_card
from goalcards.study import (
    GLOBAL_DEFAULTS,
    StudyItem,
    StudySettings,
    build_session,
    detect_queue_changes,
    effective_settings,
    order_due_cards,
    select_new_cards,
)


def item(card_id, **overrides):
    if overrides.pop("new", False):
        return StudyItem(card_id, new_card(overrides.get("due", T0)))
    return StudyItem(card_id, make_card(**overrides))


@pytest.fixture
def deck():
    return [
        item("review-late", due=T0 - timedelta(hours=1)),
        item("review-early", due=T0 - timedelta(days=2), last_review=T0 - timedelta(days=12)),
        item("future", due=T0 + timedelta(days=3)),
        item("relearn", state=State.RELEARNING, step=0, lapses=1),
        item("learn", state=State.LEARNING, step=1),
        item("new-1", new=True, due=T0 - timedelta(days=1)),
        item("new-2", new=True),
        item("new-3", new=True),
    ]


def ids(items):
    return [i.card_id for i in items]


def test_order_due_cards(deck):
    assert ids(order_due_cards(deck, T0)) == [
        "new-1", "new-2", "new-3", "learn", "relearn", "review-early", "review-late",
    ]


def test_select_new_cards(deck):
    assert ids(select_new_cards(deck, 2)) == ["new-1", "new-2"]
    assert select_new_cards(deck, 0) == []


def test_build_session_limits_new_cards(deck):
    settings = StudySettings(new_cards_per_day=1, cards_per_session=50)
    assert ids(build_session(deck, T0, settings)) == [
        "new-1", "learn", "relearn", "review-early", "review-late",
    ]


def test_build_session_caps_size(deck):
    settings = StudySettings(new_cards_per_day=20, cards_per_session=4)
    assert ids(build_session(deck, T0, settings)) == ["new-1", "new-2", "new-3", "learn"]


def test_effective_settings_precedence():
    deck = {"new_cards_per_day": 10, "cards_per_session": 30}

    assert effective_settings() == GLOBAL_DEFAULTS
    assert GLOBAL_DEFAULTS.new_cards_per_day == 20
    assert GLOBAL_DEFAULTS.cards_per_session == 50

    from_deck = effective_settings(deck)
    assert (from_deck.new_cards_per_day, from_deck.cards_per_session, from_deck.source) == (10, 30, "deck")

    from_session = effective_settings(deck, {"new_cards_per_day": 5})
    assert (from_session.new_cards_per_day, from_session.cards_per_session) == (5, 30)
    assert from_session.source == "session"

    unset = effective_settings({"new_cards_per_day": None, "cards_per_session": None})
    assert unset == GLOBAL_DEFAULTS


def test_invalid_settings():
    with pytest.raises(InvalidParametersError):
        StudySettings(cards_per_session=0)
    with pytest.raises(InvalidParametersError):
        effective_settings({"new_cards_per_day": -1})


def test_detect_queue_changes(deck):
    changes = detect_queue_changes(["review-late", "gone"], deck, T0)
    assert "future" not in ids(changes.added)
    assert "review-early" in ids(changes.added)
    assert changes.removed_ids == ["gone"]
    assert changes.has_changes


def test_detect_queue_changes_none(deck):
    all_ids = ids(deck)
    changes = detect_queue_changes(all_ids, deck, T0)
    assert not changes.has_changes
