"""
Outcome models for partial updates.

Validation produces either ``Allowed`` or ``Rejected``; the orchestrator
produces ``NotFound``, ``Rejected`` or ``Updated``. All outcomes are frozen
values created per request.
"""

from enum import Enum
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field


class RejectionReason(str, Enum):
    """Why a payload key was refused."""
    NOT_ALLOWED = "not_allowed"
    TYPE_MISMATCH = "type_mismatch"


class RejectedKey(BaseModel):
    """One offending payload key."""
    key: str
    reason: RejectionReason
    message: str = ""

    class Config:
        frozen = True


class Allowed(BaseModel):
    """Every payload key is allowed and well-typed."""
    values: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True


class Rejected(BaseModel):
    """The payload was refused; nothing may be applied."""
    rejections: List[RejectedKey] = Field(..., min_length=1)

    class Config:
        frozen = True

    @property
    def offending_keys(self) -> List[str]:
        return [r.key for r in self.rejections]

    def keys_with_reason(self, reason: RejectionReason) -> List[str]:
        return [r.key for r in self.rejections if r.reason == reason]

    @property
    def has_disallowed_keys(self) -> bool:
        return any(r.reason == RejectionReason.NOT_ALLOWED for r in self.rejections)


class NotFound(BaseModel):
    """No record exists for the requested identifier."""
    record_id: str

    class Config:
        frozen = True


class Updated(BaseModel):
    """The update was applied; ``record`` is the new state."""
    record: Any

    class Config:
        frozen = True


ValidationOutcome = Union[Allowed, Rejected]
UpdateResult = Union[NotFound, Rejected, Updated]
