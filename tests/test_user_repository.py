"""
Tests for the in-memory and Supabase user repositories.
"""

import asyncio
from types import SimpleNamespace

import pytest

from common.exceptions import DatabaseException
from entities.user import User
from repositories.user_repository import DEMO_USERS, InMemoryUserRepository, SupabaseUserRepository


class FakeQuery:
    """Minimal stand-in for the supabase-py query builder."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        self.client.executed.append((self.table, self.calls))
        if self.client.error:
            raise self.client.error
        return SimpleNamespace(data=self.client.rows)


class FakeSupabase:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.executed = []

    def table(self, name):
        return FakeQuery(self, name)


async def _enter(repository, user_id):
    async with repository.locked(user_id):
        pass

class TestInMemoryUserRepository:

    async def test_get_by_id_returns_copy(self, repository):
        first = await repository.get_by_id("u1")
        first.first_name = "Mutated"
        second = await repository.get_by_id("u1")
        assert second.first_name == "John"

    async def test_get_missing(self, repository):
        assert await repository.get_by_id("missing") is None

    async def test_save_and_list(self, repository, user_data):
        other = User.from_dict({**user_data, "id": "u0", "firstName": "Ann"})
        await repository.save(other)
        users = await repository.list()
        assert [u.id for u in users] == ["u0", "u1"]
        assert [u.id for u in await repository.list(skip=1, limit=1)] == ["u1"]

    async def test_demo_users(self):
        repo = InMemoryUserRepository.with_demo_users()
        user = await repo.get_by_id(DEMO_USERS[0]["id"])
        assert user.first_name == "John"
        assert user.birth_year == 1990

    async def test_locks_are_per_record(self, repository):
        async with repository.locked("u1"):
            async with repository.locked("u2"):
                pass

    async def test_locks_released_after_use(self, repository):
        for i in range(1000):
            async with repository.locked(f"missing-{i}"):
                pass
        assert repository._locks == {}
        assert repository._lock_waiters == {}

    async def test_lock_kept_while_awaited(self, repository):
        async with repository.locked("u1"):
            waiter = asyncio.create_task(_enter(repository, "u1"))
            await asyncio.sleep(0)
            assert repository._lock_waiters["u1"] == 2
        await waiter
        assert repository._locks == {}


class TestSupabaseUserRepository:

    async def test_get_by_id(self, user_data):
        client = FakeSupabase(rows=[user_data])
        repo = SupabaseUserRepository(client, "people")
        user = await repo.get_by_id("u1")
        assert user.first_name == "John"
        table, calls = client.executed[0]
        assert table == "people"
        assert ("eq", ("id", "u1"), {}) in calls

    async def test_get_by_id_missing(self):
        repo = SupabaseUserRepository(FakeSupabase(rows=[]))
        assert await repo.get_by_id("u1") is None

    async def test_save_upserts_full_row(self, user, user_data):
        client = FakeSupabase(rows=[user_data])
        repo = SupabaseUserRepository(client)
        saved = await repo.save(user)
        assert saved == user
        _, calls = client.executed[0]
        assert ("upsert", (user_data,), {}) in calls

    async def test_save_without_rows_fails(self, user):
        repo = SupabaseUserRepository(FakeSupabase(rows=[]))
        with pytest.raises(DatabaseException):
            await repo.save(user)

    async def test_list_paginates(self, user_data):
        client = FakeSupabase(rows=[user_data])
        repo = SupabaseUserRepository(client)
        users = await repo.list(skip=10, limit=5)
        assert [u.id for u in users] == ["u1"]
        _, calls = client.executed[0]
        assert ("order", ("id",), {"desc": False}) in calls
        assert ("range", (10, 14), {}) in calls

    async def test_client_errors_become_database_exceptions(self):
        repo = SupabaseUserRepository(FakeSupabase(error=RuntimeError("boom")))
        with pytest.raises(DatabaseException) as exc_info:
            await repo.get_by_id("u1")
        assert exc_info.value.status_code == 503
