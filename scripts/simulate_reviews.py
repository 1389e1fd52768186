"""
Simulate a sequence of reviews for one card and print the schedule.

Useful for eyeballing how parameter changes move intervals around.
Parameters come from FSRS_* environment variables (and a local .env).

Usage:
    # Rate a new card Good four times, each review on its due date
    python -m scripts.simulate_reviews --ratings 3,3,3,3

    # A lapse in the middle, with fuzz enabled
    FSRS_ENABLE_FUZZ=true python -m scripts.simulate_reviews --ratings 3,3,1,3,4

    # Preview all four outcomes for a fresh card
    python -m scripts.simulate_reviews --preview
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime, timezone

from goalcards import fsrs
from goalcards.study import format_due_date, format_interval


def parse_ratings(text: str) -> list[fsrs.Rating]:
    ratings = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        rating = fsrs.number_to_rating(int(part)) if part.isdigit() else None
        if rating is None:
            raise argparse.ArgumentTypeError(f"invalid rating {part!r}: expected 1-4")
        ratings.append(rating)
    return ratings


def simulate(ratings: list[fsrs.Rating], start: datetime, params: fsrs.SchedulerParameters) -> None:
    """Review on each due date and print one line per review."""
    card = fsrs.new_card(start, params)
    now = start

    print(f"{'#':>3}  {'rating':<6} {'state':<10} {'S':>9} {'D':>6} {'interval':>9}  due")
    for i, rating in enumerate(ratings, start=1):
        card, log = fsrs.schedule(card, rating, now, params)
        print(
            f"{i:>3}  {fsrs.rating_to_string(rating):<6} "
            f"{fsrs.state_to_string(card.state):<10} "
            f"{card.stability:>9.3f} {card.difficulty:>6.3f} "
            f"{format_interval(log.scheduled_days):>9}  {card.due:%Y-%m-%d %H:%M}"
        )
        now = card.due

    print(f"\nreps={card.reps} lapses={card.lapses}")


def show_preview(start: datetime, params: fsrs.SchedulerParameters) -> None:
    card = fsrs.new_card(start, params)
    for rating, (next_card, log) in fsrs.preview(card, start, params).items():
        print(
            f"{fsrs.rating_to_string(rating):<6} -> {fsrs.state_to_string(next_card.state):<10} "
            f"{format_interval(log.scheduled_days):>6}  ({format_due_date(next_card.due, start)})"
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate FSRS reviews for a single card")
    parser.add_argument("--ratings", type=parse_ratings, default="3,3,3,3",
                        help="Comma-separated ratings 1-4 (default: 3,3,3,3)")
    parser.add_argument("--preview", action="store_true",
                        help="Show the outcome of each rating for a new card instead")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    params = fsrs.SchedulerParameters.from_env()
    start = datetime.now(timezone.utc).replace(microsecond=0)

    print(f"Parameters: {params.version}, retention {params.request_retention}, "
          f"fuzz {'on' if params.enable_fuzz else 'off'}")
    print("=" * 60)

    if args.preview:
        show_preview(start, params)
    else:
        simulate(args.ratings, start, params)


if __name__ == "__main__":
    main()
