"""Tests for the product shop object."""

import asyncio

import pytest

from conftest import FakeClock, FakeTransport, product_payload
from shopclient.catalog.price import Price, PriceWithQuantity
from shopclient.catalog.product import Image, Product, ProductAttribute
from shopclient.domain.exceptions import MalformedResponseError
from shopclient.domain.results import Outcome

STOCK = "products/P1/stock-level"
ATTRIBUTES = "products/P1/custom-attributes"
SLIDESHOW = "products/P1/slideshow"


@pytest.fixture
def product(transport: FakeTransport, clock: FakeClock) -> Product:
    """Create product P1 with a 600 ms cache window."""
    return Product.from_api_response(
        product_payload(locale="en_GB"), client=transport, ttl_ms=600, clock=clock
    )


def change_stock(start: float):
    """Stateful responder applying ``changeStocklevel`` to a running level."""
    level = {"value": start}

    def respond(call):
        level["value"] += call.payload["changeStocklevel"]
        return {"stocklevel": level["value"]}

    return respond


class TestProductFromApiResponse:
    """Tests for building products from search items."""

    def test_plain_fields(self, product: Product) -> None:
        """Plain fields are taken from the payload."""
        assert product.product_id == "P1"
        assert product.name == "Shoe"
        assert product.short_description == "A shoe"
        assert product.description == "A comfortable shoe"
        assert product.locale == "en_GB"
        assert product.for_sale is True
        assert product.special_offer is False
        assert product.availability_text == "In stock"
        assert product.resource_path == "products/P1"

    def test_prices(self, product: Product) -> None:
        """Price info is parsed into value objects."""
        assert product.price == PriceWithQuantity(
            amount=49.9,
            currency="EUR",
            tax_type="GROSS",
            formatted="49,90 €",
            quantity_amount=1.0,
            quantity_unit="piece",
        )
        assert product.deposit_price == Price(amount=0.25, currency="EUR")
        assert product.manufacturer_price is None
        assert str(product.deposit_price) == "0.25 EUR"

    def test_images(self, product: Product) -> None:
        """Images are indexed by classifier."""
        assert product.small_image == Image("Small", "https://cdn.example.com/s.jpg")
        assert product.large_image.url == "https://cdn.example.com/l.jpg"
        assert product.medium_image is None
        assert product.hot_deal_image is None

    def test_incomplete_images_skipped(self, transport: FakeTransport) -> None:
        """Images without url or classifier are ignored."""
        product = Product.from_api_response(
            product_payload(images=[{"classifier": "Small"}, {"url": "x"}]), client=transport
        )
        assert product.images == {}

    def test_missing_product_id(self, transport: FakeTransport) -> None:
        """A product needs an id."""
        payload = product_payload()
        del payload["productId"]
        with pytest.raises(MalformedResponseError):
            Product.from_api_response(payload, client=transport)

    def test_bad_currency(self, transport: FakeTransport) -> None:
        """A price with an unusable currency rejects the product."""
        payload = product_payload(priceInfo={"depositPrice": {"amount": 1, "currency": "euro"}})
        with pytest.raises(MalformedResponseError):
            Product.from_api_response(payload, client=transport)

    def test_flags_default(self, transport: FakeTransport) -> None:
        """Missing flags mean for sale and no special offer."""
        product = Product.from_api_response({"productId": "P2"}, client=transport)
        assert product.for_sale is True
        assert product.special_offer is False
        assert product.price is None

    def test_identity(self, transport: FakeTransport) -> None:
        """Products with the same id are equal."""
        a = Product.from_api_response(product_payload(), client=transport)
        b = Product.from_api_response(product_payload(name="Boot"), client=transport)
        assert a == b
        assert hash(a) == hash(b)


class TestStockLevel:
    """Tests for the cached stock level."""

    @pytest.mark.asyncio
    async def test_fresh_within_window(self, transport, clock, product) -> None:
        """The level is fetched again only after the window ends."""
        transport.respond("GET", STOCK, {"stocklevel": 5})
        transport.respond("GET", STOCK, {"stocklevel": 7})

        assert await product.get_stock_level() == 5.0
        clock.advance(500)
        assert await product.get_stock_level() == 5.0
        clock.advance(1000)
        assert await product.get_stock_level() == 7.0
        assert len(transport.calls_to("GET", STOCK)) == 2

    @pytest.mark.asyncio
    async def test_increase_and_decrease(self, transport, product) -> None:
        """Changes are sent as deltas and the answer is cached."""
        transport.respond("GET", STOCK, {"stocklevel": 5})
        transport.respond("PUT", STOCK, change_stock(5.0))

        assert await product.increase_stock_level(2.5) == 7.5
        assert await product.decrease_stock_level() == 6.5
        assert await product.decrease_stock_level(3) == 3.5

        payloads = [call.payload for call in transport.calls_to("PUT", STOCK)]
        assert payloads == [
            {"changeStocklevel": 2.5},
            {"changeStocklevel": -1.0},
            {"changeStocklevel": -3.0},
        ]
        assert await product.get_stock_level() == 3.5
        assert len(transport.calls_to("GET", STOCK)) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("step", [-1.0, -2, float("nan"), "1", True])
    async def test_invalid_step_rejected(self, transport, product, step) -> None:
        """Invalid steps never reach the shop."""
        transport.respond("GET", STOCK, {"stocklevel": 5})

        assert await product.increase_stock_level(step) == 5.0
        assert product._stock_level.last_outcome == Outcome.VALIDATION_REJECTED
        assert transport.calls_to("PUT", STOCK) == []

    @pytest.mark.asyncio
    async def test_put_disallowed(self, read_only_transport, clock) -> None:
        """A refused PUT keeps the cached level."""
        read_only_transport.respond("GET", STOCK, {"stocklevel": 5})
        product = Product.from_api_response(product_payload(), client=read_only_transport, clock=clock)

        assert await product.increase_stock_level(1.0) == 5.0
        assert product._stock_level.last_outcome == Outcome.VERB_DISALLOWED

    @pytest.mark.asyncio
    async def test_malformed_level(self, transport, product) -> None:
        """A level that is not a number is not cached."""
        transport.respond("GET", STOCK, {"stocklevel": "many"})

        assert await product.get_stock_level() is None
        assert product._stock_level.last_outcome == Outcome.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_concurrent_changes_apply_in_order(self, transport, product) -> None:
        """Concurrent changes are serialized."""
        transport.respond("GET", STOCK, {"stocklevel": 0})
        transport.respond("PUT", STOCK, change_stock(0.0))

        await asyncio.gather(*(product.increase_stock_level() for _ in range(3)))

        assert await product.get_stock_level() == 3.0
        assert len(transport.calls_to("GET", STOCK)) == 1


class TestAttributes:
    """Tests for the cached custom attributes."""

    ITEMS = {
        "items": [
            {
                "key": "color",
                "displayKey": "Color",
                "singleValue": True,
                "type": "String",
                "values": [{"value": "red", "displayValue": "Red"}],
            },
            {"key": "size", "singleValue": False, "values": []},
        ]
    }

    @pytest.mark.asyncio
    async def test_get_attributes(self, transport, product) -> None:
        """Attributes are parsed in server order."""
        transport.respond("GET", ATTRIBUTES, self.ITEMS)

        attributes = await product.get_attributes()

        assert [a.key for a in attributes] == ["color", "size"]
        assert attributes[0].display_key == "Color"
        assert attributes[0].values[0].display_value == "Red"
        assert attributes[1].single_value is False
        assert isinstance(attributes[1], ProductAttribute)

    @pytest.mark.asyncio
    async def test_get_attribute_by_index(self, transport, product) -> None:
        """Indexed access reuses a fresh list."""
        transport.respond("GET", ATTRIBUTES, self.ITEMS)

        assert (await product.get_attribute(0)).key == "color"
        assert (await product.get_attribute(1)).key == "size"
        assert len(transport.calls_to("GET", ATTRIBUTES)) == 1

    @pytest.mark.asyncio
    async def test_index_on_empty_cache_loads_once(self, transport, product) -> None:
        """An unknown index on an empty cache loads the list once."""
        transport.respond("GET", ATTRIBUTES, self.ITEMS)

        assert await product.get_attribute(5) is None
        assert await product.get_attribute(-1) is None
        assert len(transport.calls_to("GET", ATTRIBUTES)) == 1

    @pytest.mark.asyncio
    async def test_index_past_fresh_list_refetches(self, transport, product) -> None:
        """An index past a fresh cached list triggers exactly one refresh."""
        transport.respond("GET", ATTRIBUTES, self.ITEMS)
        transport.respond("GET", ATTRIBUTES, {"items": [{"key": "a"}, {"key": "b"}, {"key": "c"}]})
        await product.get_attributes()

        assert (await product.get_attribute(2)).key == "c"
        assert len(transport.calls_to("GET", ATTRIBUTES)) == 2

    @pytest.mark.asyncio
    async def test_refetch_after_expiry_replaces_list(self, transport, clock, product) -> None:
        """After the window ends the whole list is replaced."""
        transport.respond("GET", ATTRIBUTES, {"items": [{"key": "a"}, {"key": "b"}]})
        transport.respond("GET", ATTRIBUTES, {"items": [{"key": "z"}]})

        assert [a.key for a in await product.get_attributes()] == ["a", "b"]
        clock.advance(500)
        assert [a.key for a in await product.get_attributes()] == ["a", "b"]
        assert len(transport.calls_to("GET", ATTRIBUTES)) == 1

        clock.advance(1000)
        assert [a.key for a in await product.get_attributes()] == ["z"]
        assert len(transport.calls_to("GET", ATTRIBUTES)) == 2

        assert await product.get_attribute(1) is None
        assert len(transport.calls_to("GET", ATTRIBUTES)) == 3

    @pytest.mark.asyncio
    async def test_empty_list_is_valid(self, transport, product) -> None:
        """A product may have no attributes."""
        transport.respond("GET", ATTRIBUTES, {"items": []})

        assert await product.get_attributes() == []

    @pytest.mark.asyncio
    async def test_missing_items_is_malformed(self, transport, product) -> None:
        """A response without items is not cached."""
        transport.respond("GET", ATTRIBUTES, {"count": 0})

        assert await product.get_attributes() is None
        assert product._attributes.last_outcome == Outcome.MALFORMED_RESPONSE


class TestSlideshow:
    """Tests for the product slideshow."""

    @pytest.mark.asyncio
    async def test_loaded_once(self, transport, product) -> None:
        """The slideshow is fetched on first access only."""
        transport.respond(
            "GET",
            SLIDESHOW,
            {
                "items": [
                    {
                        "name": "front",
                        "type": "image",
                        "sizes": [{"classifier": "Large", "url": "https://cdn.example.com/f.jpg"}],
                    }
                ]
            },
        )

        slideshow = await product.get_slideshow()
        again = await product.get_slideshow()

        assert again is slideshow
        assert len(slideshow) == 1
        assert slideshow.items[0].size("Large").url == "https://cdn.example.com/f.jpg"
        assert slideshow.items[0].size("Small") is None
        assert len(transport.calls_to("GET", SLIDESHOW)) == 1

    @pytest.mark.asyncio
    async def test_failed_load_is_empty(self, transport, product) -> None:
        """A failed fetch yields an empty slideshow."""
        transport.fail("GET", SLIDESHOW)

        assert len(await product.get_slideshow()) == 0


class TestDelete:
    """Tests for product deletion."""

    @pytest.mark.asyncio
    async def test_delete(self, transport, product) -> None:
        """DELETE is sent to the product resource."""
        assert await product.delete() is True
        assert len(transport.calls_to("DELETE", "products/P1")) == 1

    @pytest.mark.asyncio
    async def test_delete_disallowed(self, read_only_transport) -> None:
        """Nothing is sent when DELETE is not allowed."""
        product = Product.from_api_response(product_payload(), client=read_only_transport)

        assert await product.delete() is False
        assert read_only_transport.calls == []
