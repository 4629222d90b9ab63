"""Shop REST client.

Typed, localized access to a shop's REST API.

This package provides:
- A locale registry loaded once per shop
- Localized shop information texts cached per locale
- Products whose custom attributes and stock level are cached with a TTL
- A product filter and search

Example:
    from shopclient import ProductFilter, Settings, Shop

    async with Shop(Settings(host="example.com", shop="DemoShop")) as shop:
        for product in await shop.get_products(ProductFilter({"q": "shoe"})) or []:
            print(product.name, await product.get_stock_level())
"""

from shopclient.catalog import (
    Image,
    Price,
    PriceWithQuantity,
    Product,
    ProductAttribute,
    ProductFilter,
)
from shopclient.infrastructure.config import Settings
from shopclient.infrastructure.logging_config import configure_logging
from shopclient.shop import Shop

__version__ = "0.1.0"

__all__ = [
    "Image",
    "Price",
    "PriceWithQuantity",
    "Product",
    "ProductAttribute",
    "ProductFilter",
    "Settings",
    "Shop",
    "configure_logging",
]
