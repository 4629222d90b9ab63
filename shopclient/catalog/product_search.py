"""Product search.

Runs a ``ProductFilter`` against the ``products`` resource and turns the
returned items into ``Product`` objects.
"""

from collections.abc import Mapping

import structlog

from shopclient.catalog.cache import Clock, current_millis
from shopclient.catalog.locales import LocaleRegistry
from shopclient.catalog.product import DEFAULT_TTL_MS, Product
from shopclient.catalog.product_filter import ProductFilter
from shopclient.catalog.remote import malformed, request, require_keys
from shopclient.domain import validators
from shopclient.domain.exceptions import MalformedResponseError
from shopclient.domain.results import Outcome
from shopclient.infrastructure.rest_client import Transport

logger = structlog.get_logger()

REQUIRED_KEYS = ("results", "page", "resultsPerPage")


class ProductSearch:
    """Issues product searches and materializes the results."""

    RESTPATH = "products"

    def __init__(
        self,
        client: Transport,
        locales: LocaleRegistry,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Clock = current_millis,
    ) -> None:
        """Initialize the search.

        Args:
            client: Transport for the search and for the created products.
            locales: Registry supplying the fallback locale.
            ttl_ms: Freshness window handed to every created product.
            clock: Millisecond clock handed to every created product.
        """
        self._client = client
        self._locales = locales
        self._ttl_ms = ttl_ms
        self._clock = clock
        self.last_outcome: Outcome | None = None

    async def get_products(self, product_filter: ProductFilter) -> list[Product] | None:
        """Search products.

        Args:
            product_filter: Search parameters.

        Returns:
            Products in server order; an empty list when nothing matched;
            None when the shop refused, did not answer, or answered with an
            unusable response.
        """
        result = await request(
            self._client,
            self.RESTPATH,
            params=product_filter.query_params(),
        )
        self.last_outcome = result.outcome
        if not result.is_ok:
            return None

        content = result.value
        try:
            require_keys(content, REQUIRED_KEYS, self.RESTPATH)
        except MalformedResponseError as e:
            self.last_outcome = malformed(e).outcome
            return None

        items = content.get("items")
        if not items:
            return []
        if not isinstance(items, list):
            self.last_outcome = malformed(MalformedResponseError(self.RESTPATH, ["items"])).outcome
            return None

        if validators.is_locale(product_filter.locale):
            locale = product_filter.locale
        else:
            locale = await self._locales.get_default()

        products = []
        for item in items:
            if not isinstance(item, Mapping):
                logger.error("Skipping product item that is not an object", item=item)
                continue
            try:
                product = Product.from_api_response(
                    {**item, "locale": locale},
                    client=self._client,
                    ttl_ms=self._ttl_ms,
                    clock=self._clock,
                )
            except MalformedResponseError as e:
                logger.error("Skipping product item", reason=e.message, **e.details)
                continue
            products.append(product)
        return products
