"""Shop objects.

Locale registry, localized shop information, products with their cached
sub-resources, and the product search.
"""

from shopclient.catalog.cache import RemoteValueCache, current_millis
from shopclient.catalog.information import (
    ContactInformation,
    InformationResource,
    LocalizedFieldCache,
    PrivacyPolicyInformation,
    RightsOfWithdrawalInformation,
    ShippingInformation,
    TermsAndConditionInformation,
)
from shopclient.catalog.locales import LocaleRegistry
from shopclient.catalog.price import Price, PriceWithQuantity
from shopclient.catalog.product import (
    AttributeValue,
    Image,
    Product,
    ProductAttribute,
    ProductSlideshow,
    SlideshowImage,
)
from shopclient.catalog.product_filter import ProductFilter
from shopclient.catalog.product_search import ProductSearch

__all__ = [
    # Caching
    "RemoteValueCache",
    "current_millis",
    # Locales
    "LocaleRegistry",
    # Information
    "ContactInformation",
    "InformationResource",
    "LocalizedFieldCache",
    "PrivacyPolicyInformation",
    "RightsOfWithdrawalInformation",
    "ShippingInformation",
    "TermsAndConditionInformation",
    # Prices
    "Price",
    "PriceWithQuantity",
    # Products
    "AttributeValue",
    "Image",
    "Product",
    "ProductAttribute",
    "ProductSlideshow",
    "SlideshowImage",
    # Search
    "ProductFilter",
    "ProductSearch",
]
