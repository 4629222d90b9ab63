"""Single remote step shared by every shop object.

Turns one transport call into a ``FetchResult`` so that the verb gate,
empty answers and transport failures are classified in one place.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from shopclient.domain.exceptions import MalformedResponseError
from shopclient.domain.results import FetchResult, Outcome
from shopclient.infrastructure.rest_client import (
    HTTPRequestMethod,
    QueryParams,
    Transport,
)

logger = structlog.get_logger()


async def request(
    client: Transport,
    path: str,
    method: HTTPRequestMethod = HTTPRequestMethod.GET,
    payload: dict[str, Any] | None = None,
    params: QueryParams | None = None,
    locale: str | None = None,
) -> FetchResult[dict[str, Any]]:
    """Issue one call and classify its result.

    Args:
        client: Transport to use.
        path: Resource path.
        method: HTTP verb; refused verbs abort before sending.
        payload: Optional JSON body.
        params: Optional query parameters (ignored when ``locale`` is set).
        locale: Scope the call to this locale.

    Returns:
        ``OK`` with the decoded object, ``VERB_DISALLOWED`` or
        ``EMPTY_RESPONSE``.
    """
    if not client.allows_method(method):
        return FetchResult.rejected(
            Outcome.VERB_DISALLOWED, f"{method.value} is not allowed for {path}"
        )

    if locale is None:
        response = await client.send(path, method=method, payload=payload, params=params)
    else:
        response = await client.send_with_localization(
            path, locale, method=method, payload=payload
        )

    if not response.success:
        reason = response.error.message if response.error else "request failed"
        return FetchResult.rejected(Outcome.EMPTY_RESPONSE, reason)
    if not isinstance(response.data, Mapping) or not response.data:
        return FetchResult.rejected(Outcome.EMPTY_RESPONSE, f"empty response for {path}")
    return FetchResult.ok(dict(response.data))


def require_keys(content: Mapping[str, Any], keys: Iterable[str], resource: str) -> None:
    """Ensure a payload carries every required key.

    Raises:
        MalformedResponseError: If any key is missing.
    """
    missing = [key for key in keys if key not in content]
    if missing:
        raise MalformedResponseError(resource, missing)


def malformed(error: MalformedResponseError) -> FetchResult[Any]:
    """Log a contract mismatch and turn it into a rejected result."""
    logger.error(error.message, **error.details)
    return FetchResult.rejected(Outcome.MALFORMED_RESPONSE, error.message)
