"""
User Management service using Repository pattern.
"""

from typing import Any, List, Mapping

from entities.user import User
from entities.update_result import Rejected, Updated, UpdateResult
from repositories.base import BaseRepository
from services.update_orchestrator import UpdateOrchestrator
from common.exceptions import ResourceNotFoundException
from common.logging import get_logger, log_business_event, log_security_event

logger = get_logger("user_management_service")


class UserManagementService:
    """
    User Management service using Repository pattern.
    Handles business logic for listing, reading and partially updating users.
    """

    def __init__(self, user_repository: BaseRepository[User], orchestrator: UpdateOrchestrator):
        self.user_repository = user_repository
        self.orchestrator = orchestrator

    async def list_users(self, skip: int = 0, limit: int = 10) -> List[User]:
        """List users with pagination."""
        return await self.user_repository.list(skip=skip, limit=limit)

    async def get_user_by_id(self, user_id: str) -> User:
        """Get a user by ID."""
        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundException(resource_type="User", resource_id=user_id)
        return user

    async def update_user(self, user_id: str, payload: Mapping[str, Any]) -> UpdateResult:
        """Apply a partial update to a user's profile."""
        result = await self.orchestrator.update(user_id, payload)

        if isinstance(result, Rejected):
            protected = self.orchestrator.policy.protected_fields()
            attempted = [k for k in result.offending_keys if k in protected]
            if attempted:
                log_security_event(
                    event_type="PROTECTED_FIELD_UPDATE_ATTEMPT",
                    details={"entity_id": user_id, "fields": attempted},
                )
        elif isinstance(result, Updated):
            log_business_event(
                event_type="USER_UPDATED",
                entity_type="user",
                entity_id=user_id,
                action="update",
                details={"fields": sorted(payload.keys())},
            )

        return result


# Factory function
def create_user_management_service(
    user_repository: BaseRepository[User], orchestrator: UpdateOrchestrator
) -> UserManagementService:
    """Factory function to create UserManagementService instance."""
    return UserManagementService(user_repository, orchestrator)
