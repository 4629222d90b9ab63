"""Product filter.

Caller-owned search parameters for the product search. Every setter
validates its input and keeps the previous value when it is rejected, so a
single call never leaves the filter half valid.
"""

import hashlib
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import structlog

from shopclient.domain import validators

logger = structlog.get_logger()

DEFAULT_PAGE = 1
DEFAULT_RESULTS_PER_PAGE = 10
DEFAULT_SORT = "name"
MAX_RESULTS_PER_PAGE = 100
MAX_PRODUCT_IDS = 12


class ProductFilter:
    """Search parameters for ``ProductSearch.get_products``.

    Example:
        product_filter = ProductFilter({"locale": "de_DE", "q": "shoe"})
        product_filter.set_sort("price")
        products = await shop.get_products(product_filter)
    """

    def __init__(self, params: Mapping[str, Any] | None = None) -> None:
        """Create a filter, optionally prefilled.

        Args:
            params: Values keyed by their query parameter names.
        """
        self.reset_filter()
        if params:
            self.set_product_filter(params)

    def set_product_filter(self, params: Mapping[str, Any]) -> None:
        """Fill the filter from a mapping keyed by query parameter names.

        Unknown keys are logged and ignored; invalid values keep the
        previous value like the individual setters do.
        """
        if not isinstance(params, Mapping):
            return

        setters = {
            "locale": self.set_locale,
            "currency": self.set_currency,
            "page": self.set_page,
            "resultsPerPage": self.set_results_per_page,
            "direction": self.set_direction,
            "sort": self.set_sort,
            "q": self.set_q,
            "categoryId": self.set_category_id,
        }
        for key, value in params.items():
            setter = setters.get(key)
            if setter is None:
                logger.warning("Unknown product filter attribute", attribute=key)
                continue
            setter(value)

    def reset_filter(self) -> None:
        """Restore every value to its default."""
        self._locale: str | None = None
        self._currency: str | None = None
        self._page = DEFAULT_PAGE
        self._results_per_page = DEFAULT_RESULTS_PER_PAGE
        self._direction: str | None = None
        self._sort: str | None = DEFAULT_SORT
        self._q: str | None = None
        self._category_id: str | None = None
        self._ids: list[str] = []

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def locale(self) -> str | None:
        return self._locale

    @property
    def currency(self) -> str | None:
        return self._currency

    @property
    def page(self) -> int:
        return self._page

    @property
    def results_per_page(self) -> int:
        return self._results_per_page

    @property
    def direction(self) -> str | None:
        return self._direction

    @property
    def sort(self) -> str | None:
        return self._sort

    @property
    def q(self) -> str | None:
        return self._q

    @property
    def category_id(self) -> str | None:
        return self._category_id

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(self._ids)

    # =========================================================================
    # Setters
    # =========================================================================

    def set_locale(self, locale: str) -> bool:
        """Set the locale of the results, e.g. ``de_DE``."""
        if not validators.is_locale(locale):
            return False
        self._locale = locale
        return True

    def set_currency(self, currency: str) -> bool:
        """Set the currency of the results, e.g. ``EUR``."""
        if not validators.is_currency(currency):
            return False
        self._currency = currency
        return True

    def set_page(self, page: int) -> bool:
        """Set the page to fetch, starting at 1."""
        if not validators.is_ranged_int(page, 1):
            return False
        self._page = page
        return True

    def set_results_per_page(self, results_per_page: int) -> bool:
        """Set the page size, between 1 and 100."""
        if not validators.is_ranged_int(results_per_page, 1, MAX_RESULTS_PER_PAGE):
            return False
        self._results_per_page = results_per_page
        return True

    def set_direction(self, direction: str) -> bool:
        """Set the sort direction, ``asc`` or ``desc``."""
        if not validators.is_product_direction(direction):
            return False
        self._direction = direction
        return True

    def set_sort(self, sort: str) -> bool:
        """Set the sort key, ``name`` or ``price``."""
        if not validators.is_product_sort(sort):
            return False
        self._sort = sort
        return True

    def set_q(self, q: str) -> bool:
        """Set the free-text search string."""
        if not isinstance(q, str) or validators.is_empty(q):
            return False
        self._q = q
        return True

    def set_category_id(self, category_id: str) -> bool:
        """Restrict the results to one category."""
        if not isinstance(category_id, str) or validators.is_empty(category_id):
            return False
        self._category_id = category_id
        return True

    def set_id(self, product_id: str) -> bool:
        """Add a product id to search for.

        At most 12 distinct ids are kept.
        """
        if (
            not validators.is_product_id(product_id)
            or len(self._ids) >= MAX_PRODUCT_IDS
            or product_id in self._ids
        ):
            return False
        self._ids.append(product_id)
        return True

    def unset_id(self, product_id: str) -> bool:
        """Remove a product id."""
        if product_id not in self._ids:
            return False
        self._ids.remove(product_id)
        return True

    def reset_ids(self) -> None:
        """Remove every product id."""
        self._ids = []

    # =========================================================================
    # Serialization
    # =========================================================================

    def query_params(self) -> list[tuple[str, str]]:
        """Ordered query terms for the non-empty values.

        Order: locale, currency, page, resultsPerPage, direction, sort, q,
        categoryId, then one ``id`` per product id.
        """
        values = (
            ("locale", self._locale),
            ("currency", self._currency),
            ("page", self._page),
            ("resultsPerPage", self._results_per_page),
            ("direction", self._direction),
            ("sort", self._sort),
            ("q", self._q),
            ("categoryId", self._category_id),
        )
        params = [(key, str(value)) for key, value in values if not validators.is_empty(value)]
        params.extend(("id", product_id) for product_id in self._ids)
        return params

    def query_string(self) -> str:
        """The query terms joined into a URL query string."""
        return urlencode(self.query_params())

    def hash_code(self) -> str:
        """SHA-512 hex digest identifying the current filter values."""
        values = [
            "" if value is None else str(value)
            for value in (
                self._locale,
                self._currency,
                self._page,
                self._results_per_page,
                self._direction,
                self._sort,
                self._q,
                self._category_id,
            )
        ]
        message = "\x1f".join(values + self._ids)
        return hashlib.sha512(message.encode("utf-8")).hexdigest()

    def print_filter(self) -> None:
        """Log the current filter values."""
        values = {key: value for key, value in self.query_params() if key != "id"}
        logger.info("Product filter", ids=list(self._ids), **values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProductFilter):
            return NotImplemented
        return self.hash_code() == other.hash_code()

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"<ProductFilter({self.query_string()})>"
