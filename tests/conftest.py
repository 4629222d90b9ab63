"""Pytest configuration and fixtures for shop client tests."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest

from shopclient.catalog.locales import LocaleRegistry
from shopclient.infrastructure.rest_client import APIError, APIResponse, HTTPRequestMethod


@dataclass
class Call:
    """One recorded transport call."""

    method: str
    path: str
    payload: dict[str, Any] | None = None
    params: Any = None
    locale: str | None = None


Responder = APIResponse | Callable[[Call], APIResponse]


class FakeTransport:
    """In-memory transport recording every call.

    Responses are queued per (method, path); the last queued response
    keeps being returned once the queue is down to one entry, until a new
    response is queued for the same call.
    """

    def __init__(self, allowed_methods: list[str] | None = None) -> None:
        self.allowed_methods = set(allowed_methods or [m.value for m in HTTPRequestMethod])
        self.calls: list[Call] = []
        self._responses: dict[tuple[str, str], list[Responder]] = {}
        self._sticky: set[tuple[str, str]] = set()

    def _queue(self, method: str, path: str) -> list[Responder]:
        key = (method, path)
        if key in self._sticky:
            self._sticky.discard(key)
            self._responses.pop(key, None)
        return self._responses.setdefault(key, [])

    def allows_method(self, method: HTTPRequestMethod | str) -> bool:
        return HTTPRequestMethod(method).value in self.allowed_methods

    def respond(self, method: str, path: str, data: Any = None) -> None:
        """Queue a successful response (a callable receives the call)."""
        if callable(data):
            handler = data
            responder: Responder = lambda call: APIResponse(success=True, data=handler(call))
        else:
            responder = APIResponse(success=True, data=data)
        self._queue(method, path).append(responder)

    def fail(self, method: str, path: str, status_code: int = 500) -> None:
        """Queue an error response."""
        self._queue(method, path).append(
            APIResponse(
                success=False,
                error=APIError(
                    error_code="SERVER_ERROR",
                    message="Server error",
                    status_code=status_code,
                ),
            )
        )

    def calls_to(self, method: str, path: str) -> list[Call]:
        return [c for c in self.calls if c.method == method and c.path == path]

    async def send(
        self,
        path: str,
        method: HTTPRequestMethod | str = HTTPRequestMethod.GET,
        payload: dict[str, Any] | None = None,
        params: Any = None,
    ) -> APIResponse:
        call = Call(HTTPRequestMethod(method).value, path, payload, params)
        return await self._answer(call)

    async def send_with_localization(
        self,
        path: str,
        locale: str,
        method: HTTPRequestMethod | str = HTTPRequestMethod.GET,
        payload: dict[str, Any] | None = None,
    ) -> APIResponse:
        call = Call(HTTPRequestMethod(method).value, path, payload, None, locale)
        return await self._answer(call)

    async def _answer(self, call: Call) -> APIResponse:
        self.calls.append(call)
        # Let concurrent callers interleave like a real network round trip.
        await asyncio.sleep(0)
        key = (call.method, call.path)
        queue = self._responses.get(key)
        if not queue:
            return APIResponse(success=True, data=None)
        if len(queue) > 1:
            responder = queue.pop(0)
        else:
            responder = queue[0]
            self._sticky.add(key)
        return responder(call) if callable(responder) else responder


class FakeClock:
    """Millisecond clock under test control."""

    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def transport() -> FakeTransport:
    """Create a fake transport allowing every verb."""
    return FakeTransport()


@pytest.fixture
def read_only_transport() -> FakeTransport:
    """Create a fake transport that only allows GET."""
    return FakeTransport(allowed_methods=["GET"])


@pytest.fixture
def clock() -> FakeClock:
    """Create a clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def locales(transport: FakeTransport) -> LocaleRegistry:
    """Create a registry whose shop answers with en_GB and de_DE."""
    transport.respond("GET", "locales", {"default": "en_GB", "items": ["en_GB", "de_DE"]})
    return LocaleRegistry(transport)


def product_payload(product_id: str = "P1", **overrides: Any) -> dict[str, Any]:
    """Build a product object as the search returns it."""
    payload = {
        "productId": product_id,
        "name": "Shoe",
        "shortDescription": "A shoe",
        "description": "A comfortable shoe",
        "forSale": True,
        "specialOffer": False,
        "availabilityText": "In stock",
        "images": [
            {"classifier": "Small", "url": "https://cdn.example.com/s.jpg"},
            {"classifier": "Large", "url": "https://cdn.example.com/l.jpg"},
        ],
        "priceInfo": {
            "price": {"amount": 49.9, "taxType": "GROSS", "currency": "EUR", "formatted": "49,90 €"},
            "quantity": {"amount": 1, "unit": "piece"},
            "depositPrice": {"amount": 0.25, "currency": "EUR"},
        },
    }
    payload.update(overrides)
    return payload
