"""Tests for input predicates."""

import pytest

from shopclient.domain import validators


class TestFormats:
    """Tests for regex-based predicates."""

    @pytest.mark.parametrize("value", ["en_US", "de_DE", "en_GB", "gsw_CHE"])
    def test_valid_locales(self, value: str) -> None:
        """Language and region tags are locales."""
        assert validators.is_locale(value) is True

    @pytest.mark.parametrize("value", ["", None, "en", "EN_us", "en-US", "en_US_x", 5])
    def test_invalid_locales(self, value) -> None:
        """Anything else is not."""
        assert validators.is_locale(value) is False

    def test_currency(self) -> None:
        """Currencies are three upper-case letters."""
        assert validators.is_currency("EUR") is True
        assert validators.is_currency("eur") is False
        assert validators.is_currency("EURO") is False

    def test_product_direction_and_sort(self) -> None:
        """Only the supported sort values pass."""
        assert validators.is_product_direction("asc") is True
        assert validators.is_product_direction("desc") is True
        assert validators.is_product_direction("up") is False
        assert validators.is_product_sort("name") is True
        assert validators.is_product_sort("price") is True
        assert validators.is_product_sort("rating") is False

    def test_request_method(self) -> None:
        """Only known HTTP verbs pass."""
        assert validators.is_request_method("PATCH") is True
        assert validators.is_request_method("TRACE") is False

    def test_host(self) -> None:
        """Host names need a domain."""
        assert validators.is_host("shop.example.com") is True
        assert validators.is_host("localhost") is False


class TestNumbers:
    """Tests for numeric predicates."""

    def test_int_excludes_bool(self) -> None:
        """Booleans are not ints here."""
        assert validators.is_int(3) is True
        assert validators.is_int(True) is False
        assert validators.is_int(3.0) is False

    def test_ranged_int(self) -> None:
        """Bounds are inclusive and optional."""
        assert validators.is_ranged_int(1, 1) is True
        assert validators.is_ranged_int(0, 1) is False
        assert validators.is_ranged_int(100, None, 100) is True
        assert validators.is_ranged_int(101, None, 100) is False

    def test_ranged_float(self) -> None:
        """Floats are checked against bounds, NaN never passes."""
        assert validators.is_ranged_float(0.0, 0.0) is True
        assert validators.is_ranged_float(-0.5, 0.0) is False
        assert validators.is_ranged_float(1, 0.0) is False
        assert validators.is_ranged_float(float("nan"), 0.0) is False


class TestEmptiness:
    """Tests for emptiness predicates."""

    def test_is_empty(self) -> None:
        """None and the empty string are empty, zero is not."""
        assert validators.is_empty(None) is True
        assert validators.is_empty("") is True
        assert validators.is_empty(0) is False

    def test_is_empty_key(self) -> None:
        """Missing keys and empty mappings count as empty."""
        assert validators.is_empty_key({"a": 1}, "a") is False
        assert validators.is_empty_key({"a": 1}, "b") is True
        assert validators.is_empty_key({}, "a") is True
        assert validators.is_empty_key(None, "a") is True
