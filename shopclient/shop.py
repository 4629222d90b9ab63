"""Shop facade.

Owns the transport and the process-wide caches of one shop and hands them
to the shop objects that need them.
"""

import structlog

from shopclient.catalog.cache import Clock, current_millis
from shopclient.catalog.information import (
    ContactInformation,
    PrivacyPolicyInformation,
    RightsOfWithdrawalInformation,
    ShippingInformation,
    TermsAndConditionInformation,
)
from shopclient.catalog.locales import LocaleRegistry
from shopclient.catalog.product import Product
from shopclient.catalog.product_filter import ProductFilter
from shopclient.catalog.product_search import ProductSearch
from shopclient.infrastructure.config import Settings
from shopclient.infrastructure.logging_config import configure_logging
from shopclient.infrastructure.rest_client import ShopRESTClient, Transport

logger = structlog.get_logger()


class Shop:
    """Entry point for one shop.

    Example:
        async with Shop(Settings(host="example.com", shop="DemoShop")) as shop:
            products = await shop.get_products(ProductFilter({"q": "shoe"}))
            name = await shop.contact_information.get_default_name()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: Transport | None = None,
        clock: Clock = current_millis,
    ) -> None:
        """Initialize the shop.

        Args:
            settings: Client settings, read from the environment if omitted.
                Logging is configured with ``settings.log_level``.
            client: Transport override, a ``ShopRESTClient`` by default.
            clock: Millisecond clock for product caches.
        """
        self.settings = settings or Settings()
        configure_logging(self.settings.log_level)

        self.client = client or ShopRESTClient(self.settings)

        self.locales = LocaleRegistry(self.client)

        self.contact_information = ContactInformation(self.client, self.locales)
        self.privacy_policy_information = PrivacyPolicyInformation(self.client, self.locales)
        self.rights_of_withdrawal_information = RightsOfWithdrawalInformation(
            self.client, self.locales
        )
        self.shipping_information = ShippingInformation(self.client, self.locales)
        self.terms_and_condition_information = TermsAndConditionInformation(
            self.client, self.locales
        )

        self.product_search = ProductSearch(
            self.client,
            self.locales,
            ttl_ms=self.settings.next_response_wait_time_ms,
            clock=clock,
        )

        logger.debug(
            "Shop client ready",
            base_url=self.settings.base_url,
            allowed_methods=self.settings.allowed_methods,
        )

    async def __aenter__(self) -> "Shop":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the transport if it holds a connection pool."""
        close = getattr(self.client, "close", None)
        if close is not None:
            await close()

    async def get_default_locale(self) -> str | None:
        """Default locale of the shop."""
        return await self.locales.get_default()

    async def get_locales(self) -> frozenset[str] | None:
        """Locales activated in the shop."""
        return await self.locales.get_items()

    async def get_products(self, product_filter: ProductFilter | None = None) -> list[Product] | None:
        """Search products, with default filter values if none is given."""
        return await self.product_search.get_products(product_filter or ProductFilter())

    async def delete_product(self, product: Product) -> bool:
        """Delete a product in the shop.

        Returns:
            True if the DELETE was issued.
        """
        return await product.delete()

    def reset(self) -> None:
        """Drop the locale registry and every cached information text."""
        self.locales.reset()
        for information in (
            self.contact_information,
            self.privacy_policy_information,
            self.rights_of_withdrawal_information,
            self.shipping_information,
            self.terms_and_condition_information,
        ):
            information.reset()
