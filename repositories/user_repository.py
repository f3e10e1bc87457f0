"""
User repository implementations: in-memory (default) and Supabase.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Iterable, List, Optional

from repositories.base import BaseRepository, SupabaseRepository
from entities.user import User
from common.exceptions import DatabaseException
from common.logging import get_logger

logger = get_logger("user_repository")

DEMO_USERS = [
    {
        "id": "4a0788f9-b851-4f86-8785-7f259cafa464",
        "firstName": "John",
        "lastName": "Doe",
        "birthYear": 1990,
        "password": "secret",
    },
]


class InMemoryUserRepository(BaseRepository[User]):
    """
    Process-local user store.

    Stored users are copied on the way in and out so callers never share
    instances with the store. ``locked`` keeps one asyncio.Lock per user id
    only while some caller holds or awaits it.
    """

    def __init__(self, users: Optional[Iterable[User]] = None):
        self._users: Dict[str, User] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_waiters: Dict[str, int] = {}
        for user in users or []:
            self._users[user.id] = user.model_copy(deep=True)

    @classmethod
    def with_demo_users(cls) -> "InMemoryUserRepository":
        return cls(User.from_dict(dict(data)) for data in DEMO_USERS)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Retrieve a user by ID."""
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def save(self, user: User) -> User:
        """Insert or replace a user."""
        self._users[user.id] = user.model_copy(deep=True)
        logger.info(f"Saved user (ID: {user.id})")
        return user.model_copy(deep=True)

    async def list(self, skip: int = 0, limit: int = 100) -> List[User]:
        """List users ordered by ID."""
        users = sorted(self._users.values(), key=lambda u: u.id)
        return [u.model_copy(deep=True) for u in users[skip : skip + limit]]

    @asynccontextmanager
    async def locked(self, user_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_waiters[user_id] = self._lock_waiters.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            # drop the lock once nobody holds or awaits it
            self._lock_waiters[user_id] -= 1
            if not self._lock_waiters[user_id]:
                del self._lock_waiters[user_id]
                del self._locks[user_id]


class SupabaseUserRepository(SupabaseRepository[User]):
    """
    Repository for User entity operations with Supabase.
    """

    def __init__(self, supabase_client, table_name: str = "users"):
        super().__init__(supabase_client, table_name)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Retrieve a user by ID."""
        try:
            result = self.supabase.table(self.table_name)\
                .select("*")\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                return None

            return User.from_dict(result.data[0])

        except Exception as e:
            logger.error(f"Failed to get user by ID {user_id}: {e}", exc_info=True)
            raise DatabaseException(
                detail="Failed to retrieve user",
                operation="select",
                context={"user_id": user_id}
            )

    async def save(self, user: User) -> User:
        """Upsert a user row."""
        try:
            result = self.supabase.table(self.table_name)\
                .upsert(user.to_dict())\
                .execute()

            if not result.data:
                raise DatabaseException(
                    detail="Failed to save user",
                    operation="upsert",
                    context={"user_id": user.id}
                )

            saved_user = User.from_dict(result.data[0])
            logger.info(f"Saved user (ID: {saved_user.id})")
            return saved_user

        except DatabaseException:
            raise
        except Exception as e:
            logger.error(f"Failed to save user {user.id}: {e}", exc_info=True)
            raise DatabaseException(
                detail="Failed to save user",
                operation="upsert",
                context={"user_id": user.id}
            )

    async def list(self, skip: int = 0, limit: int = 100) -> List[User]:
        """List users with pagination."""
        try:
            query = self.supabase.table(self.table_name).select("*")
            query = query.order("id", desc=False).range(skip, skip + limit - 1)
            result = query.execute()

            return [User.from_dict(row) for row in result.data or []]

        except Exception as e:
            logger.error(f"Failed to list users: {e}", exc_info=True)
            raise DatabaseException(
                detail="Failed to list users",
                operation="select"
            )
