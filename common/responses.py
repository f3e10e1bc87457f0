"""
Standardized API response formats for consistent error responses.
"""

import json
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from uuid import UUID
from pydantic import BaseModel
from fastapi import status
from fastapi.responses import JSONResponse

from common.logging import request_id_var


class ErrorDetail(BaseModel):
    """Detailed error information."""
    code: str
    message: str
    field: Optional[str] = None
    context: Optional[Dict[str, Any]] = None


class APIResponse(BaseModel):
    """Standard error envelope."""
    success: bool
    error: Optional[ErrorDetail] = None
    request_id: Optional[str] = None
    timestamp: str


def _ensure_jsonable(value: Any) -> Any:
    """Recursively convert common non-JSON-serializable types to JSON-safe values.

    Handles dicts, lists/tuples/sets, datetime, UUID, enums and Pydantic models.
    Fallback converts unknown objects to str().
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value

    if isinstance(value, BaseModel):
        return _ensure_jsonable(value.model_dump(mode="json", by_alias=True, exclude_none=True))

    if isinstance(value, datetime):
        return value.isoformat()

    if isinstance(value, UUID):
        return str(value)

    if isinstance(value, dict):
        return {str(k): _ensure_jsonable(v) for k, v in value.items()}

    if isinstance(value, (list, tuple, set)):
        return [_ensure_jsonable(v) for v in value]

    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


def create_error_response(
    error_code: str,
    message: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    field: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> JSONResponse:
    """Create an error API response."""
    error_detail = ErrorDetail(
        code=error_code,
        message=message,
        field=field,
        context=context
    )

    response_data = APIResponse(
        success=False,
        error=error_detail,
        request_id=request_id_var.get(),
        timestamp=datetime.now(timezone.utc).isoformat()
    )

    content = _ensure_jsonable(response_data.model_dump(exclude_none=True))
    return JSONResponse(content=content, status_code=status_code)
