"""
Shared fixtures for the partial update tests.
"""

import os

# Settings are read at import time; keep the app hermetic for tests.
os.environ.setdefault("REPOSITORY_BACKEND", "memory")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "simple")

import pytest

from entities.user import User
from policies.users import USER_UPDATE_POLICY
from repositories.user_repository import InMemoryUserRepository
from services.update_orchestrator import UpdateOrchestrator
from services.user_management import UserManagementService


USER_DATA = {
    "id": "u1",
    "firstName": "John",
    "lastName": "Doe",
    "birthYear": 1990,
    "password": "secret",
}


@pytest.fixture
def user() -> User:
    return User.from_dict(dict(USER_DATA))


@pytest.fixture
def policy():
    return USER_UPDATE_POLICY


@pytest.fixture
def repository(user) -> InMemoryUserRepository:
    return InMemoryUserRepository([user])


@pytest.fixture
def orchestrator(repository, policy) -> UpdateOrchestrator:
    return UpdateOrchestrator(repository, policy)


@pytest.fixture
def user_service(repository, orchestrator) -> UserManagementService:
    return UserManagementService(repository, orchestrator)


@pytest.fixture
def user_data() -> dict:
    return dict(USER_DATA)
