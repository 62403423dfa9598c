"""Shared Kernel - base classes для всієї domain layer.

- Entity: Об'єкт з identity
- DomainEvent: Подія що сталась в domain
- DomainException: Порушення бізнес-правил
"""

from .domain_event import DomainEvent
from .entity import Entity
from .exceptions import (
    BusinessRuleViolation,
    DomainException,
    EntityNotFound,
)

__all__ = [
    "Entity",
    "DomainEvent",
    "DomainException",
    "BusinessRuleViolation",
    "EntityNotFound",
]
