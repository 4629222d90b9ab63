"""Outcome values for remote operations.

Every fetch or mutation produces a ``FetchResult``. The public API collapses
anything that is not ``Outcome.OK`` to ``None`` (or ``False``), while caches
keep the last outcome so tests and logs can tell "no value" apart from
"the last call failed".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Self, TypeVar

T = TypeVar("T")


class Outcome(str, Enum):
    """Result classification of a remote operation."""

    OK = "ok"
    VERB_DISALLOWED = "verb_disallowed"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_RESPONSE = "malformed_response"
    VALIDATION_REJECTED = "validation_rejected"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Tagged result of a single remote step.

    Attributes:
        outcome: What happened.
        value: Payload-derived value, only set for ``Outcome.OK``.
        reason: Short explanation for rejected outcomes.
    """

    outcome: Outcome
    value: T | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, value: T) -> Self:
        """Create a successful result."""
        return cls(outcome=Outcome.OK, value=value)

    @classmethod
    def rejected(cls, outcome: Outcome, reason: str | None = None) -> Self:
        """Create a result for a failed or refused step.

        Args:
            outcome: Failure classification, never ``Outcome.OK``.
            reason: Optional explanation.

        Returns:
            FetchResult without a value.
        """
        if outcome is Outcome.OK:
            raise ValueError("Rejected result needs a failure outcome")
        return cls(outcome=outcome, reason=reason)

    @property
    def is_ok(self) -> bool:
        """Whether the step produced a usable value."""
        return self.outcome is Outcome.OK
