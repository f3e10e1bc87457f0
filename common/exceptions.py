"""
Centralized exception classes for the API layer.
Provides a hierarchy of custom exceptions with proper error codes and messages.
"""

from typing import Optional, Dict, Any, List
from fastapi import HTTPException, status


class BaseAPIException(HTTPException):
    """Base exception class for all application errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}


# Validation Exceptions
class UpdateRejectedException(BaseAPIException):
    """
    Partial update refused by the field policy.

    Disallowed fields map to 403; a payload whose only problems are
    type mismatches maps to 422.
    """

    def __init__(
        self,
        rejections: List[Dict[str, Any]],
        disallowed: bool,
        context: Optional[Dict[str, Any]] = None
    ):
        offending_keys = [r["key"] for r in rejections]
        if disallowed:
            status_code = status.HTTP_403_FORBIDDEN
            error_code = "UPDATE_FIELDS_NOT_ALLOWED"
        else:
            status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
            error_code = "UPDATE_FIELD_TYPE_MISMATCH"

        super().__init__(
            detail=f"invalid properties: [{','.join(offending_keys)}]",
            status_code=status_code,
            error_code=error_code,
            context=context or {"offending_keys": offending_keys, "rejections": rejections}
        )


# Resource Exceptions
class ResourceException(BaseAPIException):
    """Resource-related errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_404_NOT_FOUND,
        error_code: str = "RESOURCE_ERROR",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            detail=detail,
            status_code=status_code,
            error_code=error_code,
            context=context or {"resource_type": resource_type, "resource_id": resource_id}
        )


class ResourceNotFoundException(ResourceException):
    """Resource not found errors."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            detail=f"{resource_type} with ID '{resource_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND",
            resource_type=resource_type,
            resource_id=resource_id,
            context=context
        )


# External Service Exceptions
class ExternalServiceException(BaseAPIException):
    """External service errors."""

    def __init__(
        self,
        detail: str,
        service_name: str,
        error_code: str = "EXTERNAL_SERVICE_ERROR",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code=error_code,
            context=context or {"service_name": service_name}
        )


class DatabaseException(ExternalServiceException):
    """Database-related errors."""

    def __init__(
        self,
        detail: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            detail=detail,
            service_name="database",
            error_code="DATABASE_ERROR",
            context=context or {"operation": operation}
        )
