"""
FSRS Constants and Parameters

Enumerations and reference values for the FSRS-5 scheduler in one place.
Tunable values are copied into SchedulerParameters; the algorithm never reads
the weight vector from this module directly.
"""

from datetime import timedelta
from enum import IntEnum


# ---- Ratings and States ----

class Rating(IntEnum):
    """User feedback on a recall attempt."""
    AGAIN = 1  # Recall failed
    HARD = 2   # Recalled with serious effort
    GOOD = 3   # Recalled normally
    EASY = 4   # Recalled effortlessly


class State(IntEnum):
    """Lifecycle stage of a card."""
    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


# ---- Reference Weight Vector (FSRS-5) ----
# w[0]-w[3]   initial stability per rating
# w[4]-w[7]   initial difficulty, difficulty delta, mean reversion
# w[8]-w[10]  recall stability
# w[11]-w[14] post-lapse stability
# w[15]-w[16] hard penalty / easy bonus
# w[17]-w[18] short-term (same-day) stability

DEFAULT_WEIGHTS = (
    0.40255, 1.18385, 3.173, 15.69105,
    7.1949, 0.5345, 1.4604, 0.0046,
    1.54575, 0.1192, 1.01925,
    1.9395, 0.11, 0.29605, 2.2698,
    0.2315, 2.9898,
    0.51655, 0.6621,
)
WEIGHTS_VERSION = "fsrs-5"
WEIGHT_COUNT = 19
LEGACY_WEIGHT_COUNT = 17  # FSRS-4.5 vectors, padded with zeros


# ---- Forgetting Curve ----

DECAY = -0.5
FACTOR = 0.9 ** (1 / DECAY) - 1  # 19/81, so that R(t=S) = 0.9


# ---- Bounds ----

S_MIN = 0.01     # Minimum stability (days)
D_MIN = 1.0      # Minimum difficulty
D_MAX = 10.0     # Maximum difficulty


# ---- Scheduling Defaults ----

DEFAULT_REQUEST_RETENTION = 0.9
DEFAULT_MAXIMUM_INTERVAL = 36500  # days
DEFAULT_MINIMUM_INTERVAL = 1      # days
DEFAULT_LEARNING_STEPS = (timedelta(minutes=1), timedelta(minutes=10))
DEFAULT_RELEARNING_STEPS = (timedelta(minutes=10),)


# ---- Interval Fuzz ----
# (start, end, factor): intervals inside [start, end) widen by factor per day

FUZZ_MIN_INTERVAL = 2.5
FUZZ_RANGES = (
    (2.5, 7.0, 0.15),
    (7.0, 20.0, 0.1),
    (20.0, float("inf"), 0.05),
)
