"""
Dependency injection setup for repositories and services.
"""

from functools import lru_cache
from typing import Annotated
from fastapi import Depends

from db.supabase_client import create_supabase_client
from entities.user import User
from policies.field_policy import FieldPolicy
from policies.users import USER_UPDATE_POLICY
from repositories.base import BaseRepository
from repositories.user_repository import InMemoryUserRepository, SupabaseUserRepository
from services.update_orchestrator import UpdateOrchestrator, create_update_orchestrator
from services.user_management import UserManagementService, create_user_management_service
from config.config import settings
from common.logging import get_logger

logger = get_logger("dependencies")


@lru_cache()
def get_supabase_client():
    """Get singleton Supabase client."""
    return create_supabase_client()


@lru_cache()
def get_user_repository() -> BaseRepository[User]:
    """Get singleton User repository for the configured backend."""
    if settings.uses_supabase():
        logger.info(f"Using Supabase user repository (table: {settings.supabase_table_users})")
        return SupabaseUserRepository(get_supabase_client(), settings.supabase_table_users)
    if settings.seed_demo_users:
        return InMemoryUserRepository.with_demo_users()
    return InMemoryUserRepository()


def get_user_update_policy() -> FieldPolicy:
    """Get the user update policy (built and checked at import time)."""
    return USER_UPDATE_POLICY


@lru_cache()
def get_user_update_orchestrator() -> UpdateOrchestrator:
    """Get singleton UpdateOrchestrator for users."""
    return create_update_orchestrator(get_user_repository(), get_user_update_policy())


@lru_cache()
def get_user_management_service() -> UserManagementService:
    """Get singleton UserManagementService with dependencies."""
    return create_user_management_service(
        get_user_repository(),
        get_user_update_orchestrator(),
    )


# Dependency annotations for FastAPI
UserManagementServiceDep = Annotated[UserManagementService, Depends(get_user_management_service)]
