"""
Base Value Object Classes for Domain-Driven Design

Value Objects are immutable domain primitives that have no identity.
They are compared by their values, not by reference.
"""

import math
import re
import time
from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Self, TypeVar

T = TypeVar("T")

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    """Render a non-negative integer in lowercase base 36."""
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def round_money(value: float | int | None) -> float:
    """Round a monetary amount to two decimals."""
    return round(float(value or 0), 2)


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for all value objects.

    Value objects are:
    - Immutable (frozen=True)
    - Compared by value (dataclass equality)
    - Have no identity
    """

    def __post_init__(self):
        """Override to add validation logic."""
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


@dataclass(frozen=True)
class Slug(ValueObject):
    """
    URL-safe identifier derived from a name.

    Lowercase, runs of non-alphanumerics collapse to a single hyphen,
    leading/trailing hyphens trimmed.
    """

    value: str

    def _validate(self) -> None:
        if not self.value:
            raise ValueError("Slug cannot be empty")

    @staticmethod
    def normalize(text: str) -> str:
        return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")

    @classmethod
    def from_name(cls, name: str, unique: bool = True) -> "Slug":
        """
        Build a slug from a display name.

        With `unique=True` a base-36 millisecond suffix is appended so two
        items with the same name get distinct slugs.
        """
        base = cls.normalize(name) or "item"
        if unique:
            base = f"{base}-{to_base36(int(time.time() * 1000))}"
        return cls(value=base)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Pagination(ValueObject):
    """
    Page/limit pair as read from query parameters.

    Out-of-range values are clamped rather than rejected.
    """

    page: int = 1
    limit: int = 10
    max_limit: int = 100

    def _validate(self) -> None:
        object.__setattr__(self, "page", max(1, int(self.page or 1)))
        object.__setattr__(self, "limit", min(max(1, int(self.limit or 1)), self.max_limit))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class PaginatedResult(Generic[T]):
    """A page of items plus the total match count."""

    items: list[T]
    total: int
    pagination: Pagination = field(default_factory=Pagination)
    extra_meta: dict[str, Any] = field(default_factory=dict)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.pagination.limit) if self.total else 0

    def meta(self) -> dict[str, Any]:
        return {
            "page": self.pagination.page,
            "limit": self.pagination.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            **self.extra_meta,
        }


class StatusEnum(str, Enum):
    """
    Base class for status enums.

    Provides common functionality for all status value objects.
    """

    @classmethod
    def values(cls) -> list[str]:
        """Get all possible values."""
        return [e.value for e in cls]

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create from string value (case-insensitive)."""
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        raise ValueError(f"Invalid {cls.__name__}: {value}")
