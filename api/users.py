from typing import Any, Dict, List
from fastapi import APIRouter, Body, Path, Query

from dependencies import UserManagementServiceDep
from entities.user import UserResponse
from entities.update_result import NotFound, Rejected, UpdateResult
from common.exceptions import ResourceNotFoundException, UpdateRejectedException

router = APIRouter(prefix="/users", tags=["Users"])


def _to_response(result: UpdateResult) -> Dict[str, Any]:
    """Map an update outcome onto the HTTP contract (200 / 403 / 404 / 422)."""
    if isinstance(result, NotFound):
        raise ResourceNotFoundException(resource_type="User", resource_id=result.record_id)
    if isinstance(result, Rejected):
        raise UpdateRejectedException(
            rejections=[r.model_dump(mode="json") for r in result.rejections],
            disallowed=result.has_disallowed_keys,
        )
    return result.record.to_public_dict()


@router.get(
    "",
    summary="List users",
    description="Fetches paginated users. Protected fields are never returned.",
    response_model=List[UserResponse]
)
async def get_all_users(
    user_service: UserManagementServiceDep,
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(10, ge=1, le=100, description="Maximum number of records to return"),
) -> List[Dict[str, Any]]:
    users = await user_service.list_users(skip=skip, limit=limit)
    return [u.to_public_dict() for u in users]


@router.get(
    "/{user_id}",
    summary="Get user by ID",
    description="Fetches a specific user by their ID.",
    response_model=UserResponse
)
async def get_user(
    user_service: UserManagementServiceDep,
    user_id: str = Path(..., description="User ID"),
) -> Dict[str, Any]:
    user = await user_service.get_user_by_id(user_id)
    return user.to_public_dict()


@router.patch(
    "/{user_id}",
    summary="Partially update a user",
    description=(
        "Applies only the supplied fields. Any field outside the allow-list "
        "rejects the whole request with 403; wrongly typed values give 422."
    ),
    response_model=UserResponse
)
async def patch_user(
    user_service: UserManagementServiceDep,
    user_id: str = Path(..., description="User ID"),
    payload: Dict[str, Any] = Body(..., description="Fields to change"),
) -> Dict[str, Any]:
    result = await user_service.update_user(user_id, payload)
    return _to_response(result)


@router.put(
    "/{user_id}",
    summary="Update a user",
    description="Same semantics as PATCH: omitted fields keep their current value.",
    response_model=UserResponse
)
async def put_user(
    user_service: UserManagementServiceDep,
    user_id: str = Path(..., description="User ID"),
    payload: Dict[str, Any] = Body(..., description="Fields to change"),
) -> Dict[str, Any]:
    result = await user_service.update_user(user_id, payload)
    return _to_response(result)
