"""Locale registry.

Caches the shop's default locale and the set of locales it supports.
Both are loaded together from the ``locales`` resource on first access
and kept until ``reset()``; there is no time-based expiry.
"""

import asyncio

import structlog

from shopclient.catalog.remote import malformed, request, require_keys
from shopclient.domain import validators
from shopclient.domain.exceptions import MalformedResponseError
from shopclient.domain.results import FetchResult, Outcome
from shopclient.infrastructure.rest_client import Transport

logger = structlog.get_logger()


class LocaleRegistry:
    """Process-wide cache of the shop's locales.

    A getter that finds its value missing performs exactly one load per call,
    so a backend that keeps failing costs one request per getter call.
    Concurrent getters on an empty registry share one load.
    """

    RESTPATH = "locales"

    def __init__(self, client: Transport) -> None:
        """Initialize an empty registry.

        Args:
            client: Transport used for loading.
        """
        self._client = client
        self._default: str | None = None
        self._items: frozenset[str] = frozenset()
        self._lock = asyncio.Lock()
        self._generation = 0
        self.last_outcome: Outcome | None = None

    async def get_default(self) -> str | None:
        """Get the default locale of the shop.

        Returns:
            Default locale tag, or None if the shop did not answer.
        """
        if self._default is None:
            await self._load()
        return self._default

    async def get_items(self) -> frozenset[str] | None:
        """Get the locales activated in the shop.

        Returns:
            Set of locale tags, or None if the shop did not answer.
        """
        if not self._items:
            await self._load()
        return self._items or None

    def reset(self) -> None:
        """Forget default and items; the next getter reloads them."""
        self._default = None
        self._items = frozenset()

    async def _load(self) -> None:
        generation = self._generation
        async with self._lock:
            if self._generation != generation:
                return
            result = await self._fetch()
            self._generation += 1
            self.last_outcome = result.outcome
            if not result.is_ok:
                return
            default, items = result.value
            self.reset()
            self._default = default
            self._items = items

    async def _fetch(self) -> FetchResult[tuple[str, frozenset[str]]]:
        result = await request(self._client, self.RESTPATH)
        if not result.is_ok:
            return result

        content = result.value
        try:
            require_keys(content, ("default", "items"), self.RESTPATH)
            if not validators.is_locale(content["default"]):
                raise MalformedResponseError(self.RESTPATH, ["default"])
            if not isinstance(content["items"], list):
                raise MalformedResponseError(self.RESTPATH, ["items"])
        except MalformedResponseError as e:
            return malformed(e)

        items = set()
        for item in content["items"]:
            if validators.is_locale(item):
                items.add(item)
            else:
                logger.warning("Ignoring invalid locale", path=self.RESTPATH, locale=item)
        return FetchResult.ok((content["default"], frozenset(items)))
