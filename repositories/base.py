"""
Base repository interface and abstract classes for the Repository pattern.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import TypeVar, Generic, Optional, List, AsyncIterator

# Generic type for entity models
T = TypeVar('T')


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository interface for record lookup and persistence.
    """

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[T]:
        """Retrieve an entity by its ID."""
        pass

    @abstractmethod
    async def save(self, entity: T) -> T:
        """Persist an entity, returning the stored state."""
        pass

    @abstractmethod
    async def list(self, skip: int = 0, limit: int = 100) -> List[T]:
        """List entities with pagination."""
        pass

    @asynccontextmanager
    async def locked(self, entity_id: str) -> AsyncIterator[None]:
        """
        Serialize read-modify-write cycles on one entity.

        The default does no locking; backends that can guarantee single-record
        atomicity override it.
        """
        yield


class SupabaseRepository(BaseRepository[T], ABC):
    """
    Base Supabase repository implementation with common functionality.
    """

    def __init__(self, supabase_client, table_name: str):
        self.supabase = supabase_client
        self.table_name = table_name
