"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Handler code depends on
this abstraction, never on Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ContextManager, Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the aggregate managed by the
    repository (e.g. ``Product``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def add(self, entity: T) -> T:
        """Insert a new entity."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist changes to an existing entity."""

    @abstractmethod
    def atomic(self) -> ContextManager[None]:
        """Transaction boundary for a single command."""
