import pytest

from goalcards.fsrs import InvalidRatingError, Rating
from goalcards.study import FAST_ANSWER_MS, StudyMode, adjust_rating


@pytest.mark.parametrize(
    "rating, response_ms, expected",
    [
        (Rating.EASY, 5_000, Rating.GOOD),
        (Rating.GOOD, FAST_ANSWER_MS, Rating.GOOD),
        (Rating.GOOD, FAST_ANSWER_MS + 1, Rating.HARD),
        (Rating.HARD, 2_000, Rating.GOOD),
        (Rating.AGAIN, 1_000, Rating.AGAIN),
        (Rating.EASY, None, Rating.EASY),
    ],
)
def test_multiple_choice_uses_response_time(rating, response_ms, expected):
    assert adjust_rating(rating, StudyMode.MULTIPLE_CHOICE, response_ms) is expected


def test_mode_accepts_plain_strings():
    assert adjust_rating(4, "multiple_choice", 20_000) is Rating.HARD


@pytest.mark.parametrize("mode", [StudyMode.FLASHCARD, StudyMode.TIMED])
def test_other_modes_pass_through(mode):
    assert adjust_rating(Rating.EASY, mode, 60_000) is Rating.EASY
    assert adjust_rating(2, mode) is Rating.HARD


@pytest.mark.parametrize("rating", [0, 5, "4", None])
def test_invalid_rating_raises(rating):
    with pytest.raises(InvalidRatingError):
        adjust_rating(rating, StudyMode.MULTIPLE_CHOICE, 1_000)


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        adjust_rating(3, "speed_round", 1_000)
