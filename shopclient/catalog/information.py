"""Localized shop information.

Shop information pages (contact, privacy policy, terms and conditions, ...)
carry three localized text fields. ``LocalizedFieldCache`` keeps one
locale-to-text mapping per field for a single REST resource and fetches a
locale on demand. A usable server answer is authoritative and replaces the
whole cache; a failed call leaves it untouched.
"""

import asyncio
from collections.abc import Mapping
from typing import Any, ClassVar

import structlog

from shopclient.catalog.locales import LocaleRegistry
from shopclient.catalog.remote import request
from shopclient.domain import validators
from shopclient.domain.results import FetchResult, Outcome
from shopclient.infrastructure.rest_client import HTTPRequestMethod, Transport

logger = structlog.get_logger()

NAME = "name"
NAVIGATION_CAPTION = "navigationCaption"
DESCRIPTION = "description"

FIELDS = (NAME, NAVIGATION_CAPTION, DESCRIPTION)


class LocalizedFieldCache:
    """Locale-keyed cache of the text fields of one REST resource."""

    def __init__(self, client: Transport, rest_path: str) -> None:
        """Initialize an empty cache.

        Args:
            client: Transport used for loading and updating.
            rest_path: Path of the owning resource.
        """
        self._client = client
        self.rest_path = rest_path
        self._values: dict[str, dict[str, str]] = {field: {} for field in FIELDS}
        self._lock = asyncio.Lock()
        self._generations: dict[str, int] = {}
        self.last_outcome: Outcome | None = None

    def cached(self, field: str, locale: str) -> str | None:
        """Look up a value without touching the network."""
        return self._values[field].get(locale)

    async def get(self, field: str, locale: str) -> str | None:
        """Get a field in a locale, loading the locale once if needed.

        Args:
            field: One of ``FIELDS``.
            locale: Locale tag.

        Returns:
            The localized text, or None if the shop has none for this locale.
        """
        if not validators.is_locale(locale):
            self.last_outcome = Outcome.VALIDATION_REJECTED
            return None

        if locale not in self._values[field]:
            await self._load(locale)
        return self._values[field].get(locale)

    async def set(self, field: str, value: str, locale: str) -> bool:
        """Update one field in one locale.

        Args:
            field: One of ``FIELDS``.
            value: New text, must not be empty.
            locale: Locale tag.

        Returns:
            True if the shop accepted the change and echoed the resource.
        """
        if (
            field not in FIELDS
            or not isinstance(value, str)
            or validators.is_empty(value)
            or not validators.is_locale(locale)
        ):
            logger.warning(
                "Rejected localized value",
                path=self.rest_path,
                field=field,
                locale=locale,
            )
            self.last_outcome = Outcome.VALIDATION_REJECTED
            return False

        async with self._lock:
            result = await request(
                self._client,
                self.rest_path,
                method=HTTPRequestMethod.PUT,
                payload={field: value},
                locale=locale,
            )
            self._apply(result, locale)
        return result.is_ok

    def reset(self) -> None:
        """Forget every field in every locale."""
        self._values = {field: {} for field in FIELDS}

    async def _load(self, locale: str) -> None:
        generation = self._generations.get(locale, 0)
        async with self._lock:
            if self._generations.get(locale, 0) != generation:
                return
            result = await request(self._client, self.rest_path, locale=locale)
            self._generations[locale] = generation + 1
            self._apply(result, locale)

    def _apply(self, result: FetchResult[dict[str, Any]], locale: str) -> None:
        self.last_outcome = result.outcome
        if not result.is_ok:
            return
        values = self._extract(result.value, locale)
        self._values = values

    @staticmethod
    def _extract(content: Mapping[str, Any], locale: str) -> dict[str, dict[str, str]]:
        values: dict[str, dict[str, str]] = {field: {} for field in FIELDS}
        for field in FIELDS:
            if isinstance(content.get(field), str):
                values[field][locale] = content[field]
        return values


class InformationResource:
    """Shop resource exposing localized name, navigation caption and description.

    Subclasses only name their REST path.
    """

    RESTPATH: ClassVar[str] = ""

    def __init__(
        self,
        client: Transport,
        locales: LocaleRegistry,
        rest_path: str | None = None,
    ) -> None:
        """Initialize the resource.

        Args:
            client: Transport used for loading and updating.
            locales: Registry providing the default locale.
            rest_path: Override for ``RESTPATH``.
        """
        path = rest_path or self.RESTPATH
        if validators.is_empty(path):
            raise ValueError(f"{type(self).__name__} needs a REST path")
        self._locales = locales
        self.cache = LocalizedFieldCache(client, path)

    @property
    def rest_path(self) -> str:
        return self.cache.rest_path

    def reset(self) -> None:
        """Drop all cached texts."""
        self.cache.reset()

    async def _get_default(self, field: str) -> str | None:
        default = await self._locales.get_default()
        if default is None:
            return None
        return await self.cache.get(field, default)

    async def _set_default(self, field: str, value: str) -> bool:
        default = await self._locales.get_default()
        if default is None:
            return False
        return await self.cache.set(field, value, default)

    # =========================================================================
    # Name
    # =========================================================================

    async def get_name(self, locale: str) -> str | None:
        """Get the name in a locale."""
        return await self.cache.get(NAME, locale)

    async def get_default_name(self) -> str | None:
        """Get the name in the shop's default locale."""
        return await self._get_default(NAME)

    async def set_name(self, value: str, locale: str) -> bool:
        """Set the name in a locale."""
        return await self.cache.set(NAME, value, locale)

    async def set_default_name(self, value: str) -> bool:
        """Set the name in the shop's default locale."""
        return await self._set_default(NAME, value)

    # =========================================================================
    # Navigation caption
    # =========================================================================

    async def get_navigation_caption(self, locale: str) -> str | None:
        """Get the navigation caption in a locale."""
        return await self.cache.get(NAVIGATION_CAPTION, locale)

    async def get_default_navigation_caption(self) -> str | None:
        """Get the navigation caption in the shop's default locale."""
        return await self._get_default(NAVIGATION_CAPTION)

    async def set_navigation_caption(self, value: str, locale: str) -> bool:
        """Set the navigation caption in a locale."""
        return await self.cache.set(NAVIGATION_CAPTION, value, locale)

    async def set_default_navigation_caption(self, value: str) -> bool:
        """Set the navigation caption in the shop's default locale."""
        return await self._set_default(NAVIGATION_CAPTION, value)

    # =========================================================================
    # Description
    # =========================================================================

    async def get_description(self, locale: str) -> str | None:
        """Get the description in a locale."""
        return await self.cache.get(DESCRIPTION, locale)

    async def get_default_description(self) -> str | None:
        """Get the description in the shop's default locale."""
        return await self._get_default(DESCRIPTION)

    async def set_description(self, value: str, locale: str) -> bool:
        """Set the description in a locale."""
        return await self.cache.set(DESCRIPTION, value, locale)

    async def set_default_description(self, value: str) -> bool:
        """Set the description in the shop's default locale."""
        return await self._set_default(DESCRIPTION, value)


class ContactInformation(InformationResource):
    """Contact information page."""

    RESTPATH = "legal/contact-information"


class PrivacyPolicyInformation(InformationResource):
    """Privacy policy page."""

    RESTPATH = "legal/privacy-policy"


class RightsOfWithdrawalInformation(InformationResource):
    """Rights of withdrawal page."""

    RESTPATH = "legal/rights-of-withdrawal"


class ShippingInformation(InformationResource):
    """Shipping information page."""

    RESTPATH = "legal/shipping-information"


class TermsAndConditionInformation(InformationResource):
    """Terms and conditions page."""

    RESTPATH = "legal/terms-and-conditions"
