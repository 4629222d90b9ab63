"""Price value objects."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Self

from shopclient.domain import validators
from shopclient.domain.base import ValueObject
from shopclient.domain.exceptions import MalformedResponseError

TAX_TYPES = ("GROSS", "NET")


def _amount(data: Mapping[str, Any], resource: str) -> float:
    amount = data.get("amount")
    if validators.is_int(amount):
        return float(amount)
    if not validators.is_float(amount):
        raise MalformedResponseError(resource, ["amount"])
    return amount


@dataclass(frozen=True)
class Price(ValueObject):
    """A price as delivered by the shop.

    Attributes:
        amount: Price value in major currency units.
        currency: ISO 4217 currency code.
        tax_type: ``GROSS`` or ``NET``, if the shop says.
        formatted: Display string rendered by the shop.
    """

    amount: float
    currency: str
    tax_type: str | None = None
    formatted: str | None = None

    @classmethod
    def from_api_response(cls, data: Any) -> Self:
        """Create from a price object of the API.

        Raises:
            MalformedResponseError: If amount or currency is unusable.
        """
        if not isinstance(data, Mapping):
            raise MalformedResponseError("price", ["amount", "currency"])
        return cls(**cls._fields_from(data))

    @staticmethod
    def _fields_from(data: Mapping[str, Any]) -> dict[str, Any]:
        currency = data.get("currency")
        if not validators.is_currency(currency):
            raise MalformedResponseError("price", ["currency"])
        tax_type = data.get("taxType")
        return {
            "amount": _amount(data, "price"),
            "currency": currency,
            "tax_type": tax_type if tax_type in TAX_TYPES else None,
            "formatted": data.get("formatted"),
        }

    def __str__(self) -> str:
        return self.formatted or f"{self.amount:.2f} {self.currency}"


@dataclass(frozen=True)
class PriceWithQuantity(Price):
    """A price that applies to a quantity (e.g. 1 piece, 100 g).

    Attributes:
        quantity_amount: Quantity the price refers to.
        quantity_unit: Unit of that quantity.
    """

    quantity_amount: float = 1.0
    quantity_unit: str | None = None

    @classmethod
    def from_api_response(cls, data: Any, quantity: Any = None) -> Self:
        """Create from a price object and its quantity object.

        Args:
            data: Price object.
            quantity: Quantity object ``{amount, unit}``.

        Raises:
            MalformedResponseError: If the price or quantity is unusable.
        """
        if not isinstance(data, Mapping) or not isinstance(quantity, Mapping):
            raise MalformedResponseError("priceInfo", ["price", "quantity"])
        return cls(
            **cls._fields_from(data),
            quantity_amount=_amount(quantity, "quantity"),
            quantity_unit=quantity.get("unit"),
        )
