from fastapi import APIRouter

from config.config import settings
from policies.users import USER_UPDATE_POLICY

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/status",
    summary="Application health status",
    description="Basic health check endpoint"
)
def health_status():
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "repository_backend": settings.repository_backend,
        "user_update_fields": sorted(USER_UPDATE_POLICY.fields()),
    }
