"""Input predicates.

Side-effect-free checks that classify caller input and payload values as
well formed. A regex mismatch on a non-empty value is reported as a warning,
the predicate itself only answers True or False.
"""

import re
from collections.abc import Mapping
from typing import Any

import structlog

logger = structlog.get_logger()

LOCALE_PATTERN = re.compile(r"^[a-z]{2,4}_[A-Z]{2,3}$")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")
HOST_PATTERN = re.compile(
    r"^([a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,6}$"
)
REQUEST_METHOD_PATTERN = re.compile(r"^(GET|POST|PUT|DELETE|PATCH)$")
LOG_LEVEL_PATTERN = re.compile(r"^(DEBUG|INFO|WARNING|ERROR)$")
PRODUCT_DIRECTION_PATTERN = re.compile(r"^(asc|desc)$")
PRODUCT_SORT_PATTERN = re.compile(r"^(name|price)$")


def _matches(value: Any, pattern: re.Pattern[str], kind: str) -> bool:
    if not isinstance(value, str) or is_empty(value):
        return False
    if pattern.match(value) is None:
        logger.warning("Input is not valid", expected=kind, value=value)
        return False
    return True


# ============================================================================
# Emptiness
# ============================================================================


def is_empty(value: Any) -> bool:
    """Check whether a value is None or the empty string."""
    return value is None or value == ""


def is_empty_mapping(value: Any) -> bool:
    """Check whether a mapping (or sequence) is None or has no entries."""
    return value is None or len(value) == 0


def is_empty_key(mapping: Any, key: Any) -> bool:
    """Check whether a key is missing from a mapping.

    Args:
        mapping: Mapping to inspect, may be None.
        key: Key that should exist.

    Returns:
        True if the mapping is empty, not a mapping, or lacks the key.
    """
    if not isinstance(mapping, Mapping) or is_empty_mapping(mapping):
        return True
    return key not in mapping


# ============================================================================
# Formats
# ============================================================================


def is_locale(value: Any) -> bool:
    """Check whether a value is a locale tag like ``en_US``."""
    return _matches(value, LOCALE_PATTERN, "locale")


def is_currency(value: Any) -> bool:
    """Check whether a value is an ISO 4217 currency code like ``EUR``."""
    return _matches(value, CURRENCY_PATTERN, "currency")


def is_host(value: Any) -> bool:
    """Check whether a value is a host name."""
    return _matches(value, HOST_PATTERN, "host")


def is_request_method(value: Any) -> bool:
    """Check whether a value is a supported HTTP request method."""
    return _matches(value, REQUEST_METHOD_PATTERN, "HTTP request method")


def is_log_level(value: Any) -> bool:
    """Check whether a value is a supported log level name."""
    return _matches(value, LOG_LEVEL_PATTERN, "log level")


def is_product_direction(value: Any) -> bool:
    """Check whether a value is a product sort direction."""
    return _matches(value, PRODUCT_DIRECTION_PATTERN, "products sort direction")


def is_product_sort(value: Any) -> bool:
    """Check whether a value is a product sort key."""
    return _matches(value, PRODUCT_SORT_PATTERN, "products sort parameter")


def is_product_id(value: Any) -> bool:
    """Check whether a value can be used as a product id."""
    return isinstance(value, str) and not is_empty(value)


# ============================================================================
# Numbers
# ============================================================================


def is_int(value: Any) -> bool:
    """Check whether a value is an int (booleans excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_float(value: Any) -> bool:
    """Check whether a value is a float."""
    return isinstance(value, float)


def is_ranged_int(
    value: Any,
    minimum: int | None = None,
    maximum: int | None = None,
) -> bool:
    """Check whether a value is an int within optional bounds.

    Args:
        value: Value to check.
        minimum: Inclusive lower bound, None for no bound.
        maximum: Inclusive upper bound, None for no bound.

    Returns:
        True if the value is an int inside the bounds.
    """
    if not is_int(value):
        return False
    if minimum is not None and value < minimum:
        return False
    if maximum is not None and value > maximum:
        return False
    return True


def is_ranged_float(
    value: Any,
    minimum: float | None = None,
    maximum: float | None = None,
) -> bool:
    """Check whether a value is a float within optional bounds.

    NaN never satisfies a bound.

    Args:
        value: Value to check.
        minimum: Inclusive lower bound, None for no bound.
        maximum: Inclusive upper bound, None for no bound.

    Returns:
        True if the value is a float inside the bounds.
    """
    if not is_float(value) or value != value:
        return False
    if minimum is not None and value < minimum:
        return False
    if maximum is not None and value > maximum:
        return False
    return True
