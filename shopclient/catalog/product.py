"""Product shop object.

A ``Product`` is built from one item of a product search response. Its plain
fields come from that payload; custom attributes and the stock level are
fetched on demand from the product's sub-resources and cached for
``Settings.next_response_wait_time_ms``. The slideshow is fetched once and
never refreshed.
"""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Self

import structlog

from shopclient.catalog.cache import Clock, RemoteValueCache, current_millis
from shopclient.catalog.price import Price, PriceWithQuantity
from shopclient.catalog.remote import malformed, request, require_keys
from shopclient.domain import validators
from shopclient.domain.base import Entity, ValueObject
from shopclient.domain.exceptions import MalformedResponseError
from shopclient.domain.results import FetchResult, Outcome
from shopclient.infrastructure.rest_client import HTTPRequestMethod, Transport

logger = structlog.get_logger()

IMAGE_CLASSIFIERS = ("Small", "Medium", "Large", "HotDeal")

DEFAULT_TTL_MS = 600


# ============================================================================
# Value Objects
# ============================================================================


@dataclass(frozen=True)
class Image(ValueObject):
    """An image URL with its size classifier."""

    classifier: str
    url: str

    @classmethod
    def from_api_response(cls, data: Any) -> Self | None:
        """Create from an image object, None if classifier or url is missing."""
        if validators.is_empty_key(data, "classifier") or validators.is_empty_key(data, "url"):
            return None
        if validators.is_empty(data["classifier"]) or validators.is_empty(data["url"]):
            return None
        return cls(classifier=data["classifier"], url=data["url"])


@dataclass(frozen=True)
class AttributeValue(ValueObject):
    """One value of a custom attribute."""

    value: Any
    display_value: str | None = None


@dataclass(frozen=True)
class ProductAttribute(ValueObject):
    """A custom product attribute.

    Attributes:
        key: Internal attribute key.
        display_key: Localized label.
        single_value: Whether only one of ``values`` applies.
        type: Attribute type as named by the shop.
        values: Attribute values in server order.
    """

    key: str
    display_key: str | None = None
    single_value: bool = True
    type: str | None = None
    values: tuple[AttributeValue, ...] = ()

    @classmethod
    def from_api_response(cls, data: Any) -> Self:
        """Create from an attribute object.

        Raises:
            MalformedResponseError: If the attribute has no key.
        """
        if validators.is_empty_key(data, "key") or validators.is_empty(data["key"]):
            raise MalformedResponseError("custom-attributes", ["key"])
        values = tuple(
            AttributeValue(value=item.get("value"), display_value=item.get("displayValue"))
            for item in data.get("values") or []
            if isinstance(item, Mapping)
        )
        return cls(
            key=data["key"],
            display_key=data.get("displayKey"),
            single_value=bool(data.get("singleValue", True)),
            type=data.get("type"),
            values=values,
        )


@dataclass(frozen=True)
class SlideshowImage(ValueObject):
    """One slideshow entry with its available sizes."""

    name: str | None
    type: str | None
    sizes: tuple[Image, ...] = ()

    def size(self, classifier: str) -> Image | None:
        """Get the image for a size classifier."""
        for image in self.sizes:
            if image.classifier == classifier:
                return image
        return None


class ProductSlideshow:
    """Slideshow of a product, loaded once."""

    RESTPATH = "slideshow"

    def __init__(self, product_id: str, items: list[SlideshowImage] | None = None) -> None:
        self.product_id = product_id
        self.items = items or []

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    @classmethod
    async def load(cls, client: Transport, product_id: str) -> "ProductSlideshow":
        """Fetch the slideshow of a product.

        A failed fetch yields an empty slideshow.

        Args:
            client: Transport to use.
            product_id: Owning product.

        Returns:
            ProductSlideshow instance.
        """
        path = f"{Product.RESTPATH}/{product_id}/{cls.RESTPATH}"
        result = await request(client, path)
        if not result.is_ok:
            return cls(product_id)

        entries = result.value.get("items")
        if not isinstance(entries, list):
            malformed(MalformedResponseError(path, ["items"]))
            return cls(product_id)

        items = []
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            sizes = tuple(
                image
                for image in map(Image.from_api_response, entry.get("sizes") or [])
                if image is not None
            )
            items.append(SlideshowImage(name=entry.get("name"), type=entry.get("type"), sizes=sizes))
        return cls(product_id, items)


# ============================================================================
# Product Entity
# ============================================================================


@dataclass(eq=False)
class Product(Entity[str]):
    """A product of the shop.

    Identity is the product id. Attributes and stock level are remote
    sub-resources cached with a shared TTL; everything else is fixed at
    construction.
    """

    RESTPATH = "products"
    RESTPATH_ATTRIBUTES = "custom-attributes"
    RESTPATH_STOCKLEVEL = "stock-level"

    client: Transport = field(kw_only=True, repr=False)
    ttl_ms: int = field(kw_only=True, default=DEFAULT_TTL_MS, repr=False)
    clock: Clock = field(kw_only=True, default=current_millis, repr=False)

    locale: str | None = None
    name: str | None = None
    short_description: str | None = None
    description: str | None = None
    for_sale: bool = True
    special_offer: bool = False
    availability_text: str | None = None
    images: dict[str, Image] = field(default_factory=dict)

    price: PriceWithQuantity | None = None
    deposit_price: Price | None = None
    eco_participation_price: Price | None = None
    with_deposit_price: Price | None = None
    manufacturer_price: Price | None = None
    base_price: Price | None = None

    _attributes: RemoteValueCache[list[ProductAttribute]] = field(init=False, repr=False)
    _stock_level: RemoteValueCache[float] = field(init=False, repr=False)
    _slideshow: ProductSlideshow | None = field(init=False, default=None, repr=False)
    _slideshow_lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock, repr=False)

    def __post_init__(self) -> None:
        self._attributes = RemoteValueCache(self._load_attributes, self.ttl_ms, self.clock)
        self._stock_level = RemoteValueCache(self._load_stock_level, self.ttl_ms, self.clock)

    @classmethod
    def from_api_response(
        cls,
        data: Any,
        *,
        client: Transport,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Clock = current_millis,
    ) -> Self:
        """Create from a product object of the API.

        Args:
            data: Product object, optionally annotated with ``locale``.
            client: Transport for the product's sub-resources.
            ttl_ms: Freshness window of attributes and stock level.
            clock: Millisecond clock.

        Returns:
            Product instance.

        Raises:
            MalformedResponseError: If the product id or a price is unusable.
        """
        if not isinstance(data, Mapping):
            raise MalformedResponseError(cls.RESTPATH, ["productId"])
        if not validators.is_product_id(data.get("productId")):
            raise MalformedResponseError(cls.RESTPATH, ["productId"])

        images = {}
        for item in data.get("images") or []:
            image = Image.from_api_response(item)
            if image is not None:
                images[image.classifier] = image

        prices = cls._prices_from(data.get("priceInfo"))

        return cls(
            id=data["productId"],
            client=client,
            ttl_ms=ttl_ms,
            clock=clock,
            locale=data.get("locale"),
            name=data.get("name"),
            short_description=data.get("shortDescription"),
            description=data.get("description"),
            for_sale=data.get("forSale") is not False,
            special_offer=data.get("specialOffer") is True,
            availability_text=data.get("availabilityText"),
            images=images,
            **prices,
        )

    @staticmethod
    def _prices_from(price_info: Any) -> dict[str, Any]:
        if not isinstance(price_info, Mapping):
            return {}
        prices: dict[str, Any] = {}
        if price_info.get("price") is not None and price_info.get("quantity") is not None:
            prices["price"] = PriceWithQuantity.from_api_response(
                price_info["price"], price_info["quantity"]
            )
        for key, attribute in (
            ("depositPrice", "deposit_price"),
            ("ecoParticipationPrice", "eco_participation_price"),
            ("priceWithDeposits", "with_deposit_price"),
            ("manufacturerPrice", "manufacturer_price"),
            ("basePrice", "base_price"),
        ):
            if price_info.get(key) is not None:
                prices[attribute] = Price.from_api_response(price_info[key])
        return prices

    @property
    def product_id(self) -> str:
        return self.id

    @property
    def resource_path(self) -> str:
        """REST path of this product."""
        return f"{self.RESTPATH}/{self.id}"

    # =========================================================================
    # Images
    # =========================================================================

    @property
    def small_image(self) -> Image | None:
        return self.images.get("Small")

    @property
    def medium_image(self) -> Image | None:
        return self.images.get("Medium")

    @property
    def large_image(self) -> Image | None:
        return self.images.get("Large")

    @property
    def hot_deal_image(self) -> Image | None:
        return self.images.get("HotDeal")

    # =========================================================================
    # Slideshow
    # =========================================================================

    async def get_slideshow(self) -> ProductSlideshow:
        """Get the slideshow, fetching it on first call only."""
        if self._slideshow is None:
            async with self._slideshow_lock:
                if self._slideshow is None:
                    self._slideshow = await ProductSlideshow.load(self.client, self.id)
        return self._slideshow

    # =========================================================================
    # Custom attributes
    # =========================================================================

    async def get_attributes(self) -> list[ProductAttribute] | None:
        """Get the custom attributes, refreshing them when stale.

        Returns:
            Attributes in server order, or None if they never loaded.
        """
        attributes = await self._attributes.get()
        return list(attributes) if attributes is not None else None

    async def get_attribute(self, index: int) -> ProductAttribute | None:
        """Get one custom attribute by its position in the server's list.

        Args:
            index: Zero-based position.

        Returns:
            The attribute, or None if there is none at that position.
        """
        if not validators.is_ranged_int(index, 0):
            return None
        attributes = self._attributes.value
        if attributes is None or index >= len(attributes) or self._attributes.is_stale():
            attributes = await self._attributes.refresh()
        if attributes is None or index >= len(attributes):
            return None
        return attributes[index]

    async def _load_attributes(self) -> FetchResult[list[ProductAttribute]]:
        path = f"{self.resource_path}/{self.RESTPATH_ATTRIBUTES}"
        result = await request(self.client, path)
        if not result.is_ok:
            return result
        try:
            require_keys(result.value, ("items",), path)
            items = result.value["items"]
            if not isinstance(items, list):
                raise MalformedResponseError(path, ["items"])
            attributes = [ProductAttribute.from_api_response(item) for item in items]
        except MalformedResponseError as e:
            return malformed(e)
        return FetchResult.ok(attributes)

    # =========================================================================
    # Stock level
    # =========================================================================

    async def get_stock_level(self) -> float | None:
        """Get the stock level, refreshing it when stale."""
        return await self._stock_level.get()

    async def increase_stock_level(self, step: float = 1.0) -> float | None:
        """Increase the stock level.

        Args:
            step: Non-negative amount to add.

        Returns:
            The stock level after the change, unchanged if rejected.
        """
        return await self._change_stock_level(step, 1.0)

    async def decrease_stock_level(self, step: float = 1.0) -> float | None:
        """Decrease the stock level.

        Args:
            step: Non-negative amount to subtract.

        Returns:
            The stock level after the change, unchanged if rejected.
        """
        return await self._change_stock_level(step, -1.0)

    async def _change_stock_level(self, step: Any, sign: float) -> float | None:
        await self._stock_level.get()

        if validators.is_int(step):
            step = float(step)
        if not validators.is_ranged_float(step, 0.0):
            logger.warning("Rejected stock level step", product_id=self.id, step=step)
            self._stock_level.reject(Outcome.VALIDATION_REJECTED)
            return self._stock_level.value

        delta = step * sign
        return await self._stock_level.mutate(lambda: self._put_stock_level(delta))

    async def _load_stock_level(self) -> FetchResult[float]:
        path = f"{self.resource_path}/{self.RESTPATH_STOCKLEVEL}"
        return self._parse_stock_level(await request(self.client, path), path)

    async def _put_stock_level(self, delta: float) -> FetchResult[float]:
        path = f"{self.resource_path}/{self.RESTPATH_STOCKLEVEL}"
        result = await request(
            self.client,
            path,
            method=HTTPRequestMethod.PUT,
            payload={"changeStocklevel": delta},
        )
        return self._parse_stock_level(result, path)

    @staticmethod
    def _parse_stock_level(result: FetchResult[dict[str, Any]], path: str) -> FetchResult[float]:
        if not result.is_ok:
            return result
        level = result.value.get("stocklevel")
        if not (validators.is_int(level) or validators.is_float(level)):
            return malformed(MalformedResponseError(path, ["stocklevel"]))
        return FetchResult.ok(float(level))

    # =========================================================================
    # Deletion
    # =========================================================================

    async def delete(self) -> bool:
        """Delete the product in the shop.

        Local caches stay as they are; the caller should drop this object.

        Returns:
            True if the DELETE was issued.
        """
        if not self.client.allows_method(HTTPRequestMethod.DELETE):
            return False
        await self.client.send(self.resource_path, method=HTTPRequestMethod.DELETE)
        return True
