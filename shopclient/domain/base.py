"""Shared bases for shop objects."""

from abc import ABC
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable payload fragment (price, image, attribute value), equal by content."""


@dataclass(eq=False)
class Entity(ABC, Generic[T]):
    """Shop object with a server-assigned id.

    Equality and hashing use ``id`` only, so a product rebuilt from a later
    search equals the one already held, whatever its cached sub-resources.
    """

    id: T

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
