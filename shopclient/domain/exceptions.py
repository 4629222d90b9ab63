"""Shop client exceptions.

These never reach callers of the public API: they are raised while turning
a decoded payload into a typed shop object and are converted into a
``MALFORMED_RESPONSE`` outcome at the call site.
"""

from typing import Any


class ShopClientError(Exception):
    """Base class for all shop client exceptions."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize shop client error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MalformedResponseError(ShopClientError):
    """Raised when a response lacks the keys a shop object requires."""

    def __init__(self, resource: str, missing: list[str]) -> None:
        """Initialize malformed response error.

        Args:
            resource: REST path or object type the payload was meant for.
            missing: Keys that were required but absent.
        """
        super().__init__(
            f"Response for {resource} can not be interpreted, missing {missing}",
            details={"resource": resource, "missing": missing},
        )
