"""Domain layer - base classes, outcomes, exceptions and input predicates.

- **Base classes**: ``ValueObject`` and ``Entity`` for shop objects
- **Outcomes**: ``Outcome`` and ``FetchResult`` describing every remote step
- **Exceptions**: payload interpretation errors
- **Validators**: pure predicates in ``shopclient.domain.validators``
"""

from shopclient.domain.base import Entity, ValueObject
from shopclient.domain.exceptions import MalformedResponseError, ShopClientError
from shopclient.domain.results import FetchResult, Outcome

__all__ = [
    "Entity",
    "ValueObject",
    "MalformedResponseError",
    "ShopClientError",
    "FetchResult",
    "Outcome",
]
