"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Events: Domain events and the per-request outbox
- Exceptions: Domain-specific errors carrying their HTTP status
"""

from app.core.domain.entities import (
    AggregateRoot,
    Entity,
    iso,
    sid,
    utcnow,
)
from app.core.domain.events import (
    DomainEvent,
    DomainEventPublisher,
    EventOutbox,
)
from app.core.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BusinessRuleViolationException,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    InsufficientStockException,
    IntegrationException,
    InvalidOperationException,
    PayloadTooLargeException,
    PaymentException,
    ValidationException,
)
from app.core.domain.value_objects import (
    PaginatedResult,
    Pagination,
    Slug,
    StatusEnum,
    ValueObject,
    round_money,
    to_base36,
)

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    "iso",
    "sid",
    "utcnow",
    # Value Objects
    "ValueObject",
    "Slug",
    "Pagination",
    "PaginatedResult",
    "StatusEnum",
    "round_money",
    "to_base36",
    # Events
    "DomainEvent",
    "DomainEventPublisher",
    "EventOutbox",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "InsufficientStockException",
    "InvalidOperationException",
    "AuthenticationException",
    "AuthorizationException",
    "DuplicateEntityException",
    "PaymentException",
    "IntegrationException",
    "PayloadTooLargeException",
]
