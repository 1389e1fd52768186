"""Error taxonomy for the scheduling core."""

from __future__ import annotations

from typing import Any, Optional


class SchedulingError(Exception):
    """Base error; `kind` tells callers how to map it to a response."""

    kind = "internal"

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.field is not None:
            payload["field"] = self.field
        return payload


class InvalidRatingError(SchedulingError, ValueError):
    """Raised when a rating is not one of Again/Hard/Good/Easy."""

    kind = "validation"


class MalformedCardRecordError(SchedulingError, ValueError):
    """Raised when a stored card or log object fails structural validation."""

    kind = "validation"


class InvalidCardStateError(SchedulingError):
    """Raised when a card violates its invariants (corrupted upstream state)."""

    kind = "data_integrity"


class InvalidParametersError(SchedulingError, ValueError):
    """Raised when scheduler configuration is out of range."""

    kind = "configuration"
