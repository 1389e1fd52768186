"""
Scheduler Parameters

Versioned configuration for the FSRS scheduler. The weight vector and the
scheduling policy (retention target, interval caps, learning steps) travel
together in one frozen object that callers pass into `schedule`.

Environment variables (read by SchedulerParameters.from_env):
    FSRS_WEIGHTS            comma-separated weight vector (17 or 19 values)
    FSRS_REQUEST_RETENTION  target recall probability, e.g. 0.9
    FSRS_MAXIMUM_INTERVAL   longest review interval in days
    FSRS_LEARNING_STEPS     e.g. "1m,10m" (units s/m/h/d, empty for none)
    FSRS_RELEARNING_STEPS   e.g. "10m"
    FSRS_ENABLE_FUZZ        true/false
    FSRS_ENABLE_SHORT_TERM  true/false
"""

from __future__ import annotations

import logging
import math
import os
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Optional, Sequence

from dotenv import load_dotenv

from goalcards.fsrs.constants import (
    DEFAULT_LEARNING_STEPS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_MINIMUM_INTERVAL,
    DEFAULT_RELEARNING_STEPS,
    DEFAULT_REQUEST_RETENTION,
    DEFAULT_WEIGHTS,
    D_MAX,
    D_MIN,
    LEGACY_WEIGHT_COUNT,
    S_MIN,
    WEIGHT_COUNT,
    WEIGHTS_VERSION,
)
from goalcards.fsrs.errors import InvalidParametersError

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})
_STEP_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*([smhd])$")
_STEP_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_step(text: str) -> timedelta:
    """
    Parse a learning step such as "1m", "10m", "1h" or "2d".

    Raises:
        InvalidParametersError: for unknown units or non-positive durations
    """
    match = _STEP_RE.match(text.strip().lower())
    if match is None:
        raise InvalidParametersError(
            f"invalid step {text!r}: expected a number followed by s, m, h or d",
            field="steps",
        )
    amount, unit = match.groups()
    step = timedelta(**{_STEP_UNITS[unit]: float(amount)})
    if step <= timedelta(0):
        raise InvalidParametersError(f"step {text!r} must be positive", field="steps")
    return step


def parse_steps(text: str) -> tuple[timedelta, ...]:
    """Parse a comma-separated list of steps; an empty string means no steps."""
    parts = [part for part in (p.strip() for p in text.split(",")) if part]
    return tuple(parse_step(part) for part in parts)


def format_step(step: timedelta) -> str:
    """Inverse of parse_step for whole units."""
    seconds = int(step.total_seconds())
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if seconds % size == 0:
            return f"{seconds // size}{unit}"
    return f"{seconds}s"


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise InvalidParametersError(f"{name} must be true or false, got {raw!r}", field=name)


def _parse_number(name: str, raw: str, kind: type) -> Any:
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise InvalidParametersError(f"{name} must be a number, got {raw!r}", field=name) from exc


@dataclass(frozen=True)
class SchedulerParameters:
    """
    Configuration for one scheduler instance.

    `weights` accepts 19 FSRS-5 values or 17 FSRS-4.5 values; the latter are
    padded with zeros, which disables the short-term terms.

    The stability floor and difficulty bounds default to the FSRS-5 values
    the weights were fit against; change them together with the weights.
    """

    weights: Sequence[float] = DEFAULT_WEIGHTS
    request_retention: float = DEFAULT_REQUEST_RETENTION
    maximum_interval: int = DEFAULT_MAXIMUM_INTERVAL
    minimum_interval: int = DEFAULT_MINIMUM_INTERVAL
    learning_steps: Sequence[timedelta] = DEFAULT_LEARNING_STEPS
    relearning_steps: Sequence[timedelta] = DEFAULT_RELEARNING_STEPS
    enable_fuzz: bool = False
    enable_short_term: bool = True
    minimum_stability: float = S_MIN
    minimum_difficulty: float = D_MIN
    maximum_difficulty: float = D_MAX
    version: str = WEIGHTS_VERSION

    def __post_init__(self) -> None:
        weights = tuple(float(w) for w in self.weights)
        if len(weights) == LEGACY_WEIGHT_COUNT:
            weights = weights + (0.0, 0.0)
        if len(weights) != WEIGHT_COUNT:
            raise InvalidParametersError(
                f"weights must have {LEGACY_WEIGHT_COUNT} or {WEIGHT_COUNT} values, got {len(weights)}",
                field="weights",
            )
        if not all(math.isfinite(w) for w in weights):
            raise InvalidParametersError("weights must be finite", field="weights")
        if any(w <= 0 for w in weights[:4]):
            raise InvalidParametersError(
                "initial stability weights w[0]..w[3] must be positive", field="weights"
            )
        object.__setattr__(self, "weights", weights)

        if not 0.0 < self.request_retention < 1.0:
            raise InvalidParametersError(
                "request_retention must be between 0 and 1 (exclusive)", field="request_retention"
            )
        if self.minimum_interval < 1:
            raise InvalidParametersError("minimum_interval must be at least 1 day", field="minimum_interval")
        if self.maximum_interval < self.minimum_interval:
            raise InvalidParametersError(
                "maximum_interval must be >= minimum_interval", field="maximum_interval"
            )

        if not math.isfinite(self.minimum_stability) or self.minimum_stability <= 0:
            raise InvalidParametersError("minimum_stability must be positive", field="minimum_stability")
        if not (
            math.isfinite(self.minimum_difficulty)
            and math.isfinite(self.maximum_difficulty)
            and 0.0 < self.minimum_difficulty < self.maximum_difficulty
        ):
            raise InvalidParametersError(
                "difficulty bounds must satisfy 0 < minimum_difficulty < maximum_difficulty",
                field="minimum_difficulty",
            )

        for name in ("learning_steps", "relearning_steps"):
            steps = tuple(getattr(self, name))
            if any(step <= timedelta(0) for step in steps):
                raise InvalidParametersError(f"{name} must be positive durations", field=name)
            object.__setattr__(self, name, steps)

    @property
    def w(self) -> tuple[float, ...]:
        """Short alias used by the formulas."""
        return self.weights  # type: ignore[return-value]

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SchedulerParameters":
        """
        Build parameters from environment variables, defaulting anything unset.

        With no explicit mapping, a local .env file is loaded first.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        overrides: dict[str, Any] = {}

        raw = env.get("FSRS_WEIGHTS", "").strip()
        if raw:
            overrides["weights"] = tuple(
                _parse_number("FSRS_WEIGHTS", part, float) for part in raw.split(",") if part.strip()
            )

        raw = env.get("FSRS_REQUEST_RETENTION", "").strip()
        if raw:
            overrides["request_retention"] = _parse_number("FSRS_REQUEST_RETENTION", raw, float)

        raw = env.get("FSRS_MAXIMUM_INTERVAL", "").strip()
        if raw:
            overrides["maximum_interval"] = _parse_number("FSRS_MAXIMUM_INTERVAL", raw, int)

        # Empty string is meaningful here: no steps at all
        if "FSRS_LEARNING_STEPS" in env:
            overrides["learning_steps"] = parse_steps(env["FSRS_LEARNING_STEPS"])
        if "FSRS_RELEARNING_STEPS" in env:
            overrides["relearning_steps"] = parse_steps(env["FSRS_RELEARNING_STEPS"])

        raw = env.get("FSRS_ENABLE_FUZZ", "").strip()
        if raw:
            overrides["enable_fuzz"] = _parse_bool("FSRS_ENABLE_FUZZ", raw)

        raw = env.get("FSRS_ENABLE_SHORT_TERM", "").strip()
        if raw:
            overrides["enable_short_term"] = _parse_bool("FSRS_ENABLE_SHORT_TERM", raw)

        if overrides:
            logger.debug("FSRS parameter overrides from environment: %s", sorted(overrides))
        return cls(**overrides)

    def to_dict(self) -> dict[str, Any]:
        """Plain representation for logging or storing alongside review logs."""
        return {
            "version": self.version,
            "weights": list(self.weights),
            "request_retention": self.request_retention,
            "maximum_interval": self.maximum_interval,
            "minimum_interval": self.minimum_interval,
            "learning_steps": [format_step(s) for s in self.learning_steps],
            "relearning_steps": [format_step(s) for s in self.relearning_steps],
            "enable_fuzz": self.enable_fuzz,
            "enable_short_term": self.enable_short_term,
            "minimum_stability": self.minimum_stability,
            "minimum_difficulty": self.minimum_difficulty,
            "maximum_difficulty": self.maximum_difficulty,
        }


DEFAULT_PARAMETERS = SchedulerParameters()
