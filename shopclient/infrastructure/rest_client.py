"""Shop REST client.

Thin HTTP client for communicating with the shop's REST API.
This module handles authentication headers, the verb gate, error handling,
and response decoding. It never raises: every failure is reported as an
unsuccessful ``APIResponse``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import httpx
import structlog

from shopclient.infrastructure.config import Settings

logger = structlog.get_logger()

ACCEPT_HEADER = "application/vnd.epages.v1+json"

QueryParams = dict[str, Any] | list[tuple[str, Any]]


class HTTPRequestMethod(str, Enum):
    """HTTP verbs used by the shop objects."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


@dataclass
class APIError:
    """Represents an API error response."""

    error_code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class APIResponse:
    """Represents an API response."""

    success: bool
    data: dict[str, Any] | list[Any] | None = None
    error: APIError | None = None


class Transport(Protocol):
    """What the shop objects need from a REST client."""

    def allows_method(self, method: HTTPRequestMethod | str) -> bool: ...

    async def send(
        self,
        path: str,
        method: HTTPRequestMethod | str = HTTPRequestMethod.GET,
        payload: dict[str, Any] | None = None,
        params: QueryParams | None = None,
    ) -> APIResponse: ...

    async def send_with_localization(
        self,
        path: str,
        locale: str,
        method: HTTPRequestMethod | str = HTTPRequestMethod.GET,
        payload: dict[str, Any] | None = None,
    ) -> APIResponse: ...


class ShopRESTClient:
    """HTTP client for the shop REST API.

    Every call site names its verb; verbs not listed in
    ``Settings.allowed_methods`` are refused before anything is sent.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the REST client.

        Args:
            settings: Client settings (host, shop, token, timeout, verbs).
        """
        self.base_url = settings.base_url
        self.auth_token = settings.auth_token
        self.timeout = settings.timeout
        self.allowed_methods = frozenset(settings.allowed_methods)
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {
                "Content-Type": "application/json",
                "Accept": ACCEPT_HEADER,
            }
            if self.auth_token:
                headers["Authorization"] = f"Bearer {self.auth_token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def allows_method(self, method: HTTPRequestMethod | str) -> bool:
        """Check whether a verb may be issued.

        Args:
            method: HTTP verb.

        Returns:
            True if the verb is configured as allowed.
        """
        return HTTPRequestMethod(method).value in self.allowed_methods

    async def send(
        self,
        path: str,
        method: HTTPRequestMethod | str = HTTPRequestMethod.GET,
        payload: dict[str, Any] | None = None,
        params: QueryParams | None = None,
    ) -> APIResponse:
        """Send one request to a shop resource.

        Args:
            path: Resource path relative to the shop base URL.
            method: HTTP verb.
            payload: Request body as JSON.
            params: Query parameters; a list of pairs keeps its order.

        Returns:
            APIResponse with success status and data or error.
        """
        return await self._request(
            method=HTTPRequestMethod(method),
            path=path,
            json=payload,
            params=params,
        )

    async def send_with_localization(
        self,
        path: str,
        locale: str,
        method: HTTPRequestMethod | str = HTTPRequestMethod.GET,
        payload: dict[str, Any] | None = None,
    ) -> APIResponse:
        """Send one request scoped to a locale.

        Args:
            path: Resource path relative to the shop base URL.
            locale: Locale tag sent as ``locale`` query parameter.
            method: HTTP verb.
            payload: Request body as JSON.

        Returns:
            APIResponse with success status and data or error.
        """
        return await self._request(
            method=HTTPRequestMethod(method),
            path=path,
            json=payload,
            params={"locale": locale},
        )

    async def _request(
        self,
        method: HTTPRequestMethod,
        path: str,
        json: dict[str, Any] | None = None,
        params: QueryParams | None = None,
    ) -> APIResponse:
        """Make an API request.

        Args:
            method: HTTP method.
            path: API endpoint path.
            json: Request body as JSON.
            params: Query parameters.

        Returns:
            APIResponse with success status and data or error.
        """
        if not self.allows_method(method):
            logger.warning("HTTP method not allowed", method=method.value, path=path)
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="METHOD_NOT_ALLOWED",
                    message=f"Method {method.value} is not allowed",
                    status_code=405,
                ),
            )

        client = await self._get_client()

        # Filter out None params
        if isinstance(params, dict):
            params = {k: v for k, v in params.items() if v is not None}
        elif params:
            params = [(k, v) for k, v in params if v is not None]

        try:
            logger.debug(
                "Making API request",
                method=method.value,
                path=path,
                has_body=json is not None,
            )

            response = await client.request(
                method=method.value,
                url=path,
                json=json,
                params=params or None,
            )

            if response.status_code >= 400:
                try:
                    error_data = response.json()
                except ValueError:
                    error_data = {}
                if not isinstance(error_data, dict):
                    error_data = {}
                logger.warning(
                    "API request rejected",
                    method=method.value,
                    path=path,
                    status_code=response.status_code,
                )
                return APIResponse(
                    success=False,
                    error=APIError(
                        error_code=error_data.get("error_code", "UNKNOWN_ERROR"),
                        message=error_data.get("message", "Unknown error"),
                        status_code=response.status_code,
                        details=error_data.get("details", {}),
                    ),
                )

            # Handle empty responses (204 No Content)
            if response.status_code == 204 or not response.content:
                return APIResponse(success=True, data=None)

            return APIResponse(success=True, data=response.json())

        except httpx.TimeoutException as e:
            logger.error("API request timeout", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="TIMEOUT",
                    message=f"Request timed out: {path}",
                    status_code=504,
                ),
            )
        except httpx.RequestError as e:
            logger.error("API request failed", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="REQUEST_ERROR",
                    message=f"Request failed: {str(e)}",
                    status_code=500,
                ),
            )
        except ValueError as e:
            logger.error("API response is not JSON", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="INVALID_JSON",
                    message=f"Response body is not JSON: {path}",
                    status_code=502,
                ),
            )
