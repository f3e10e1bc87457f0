"""
User entity model for the domain layer.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """
    User entity representing a user in the system.

    Field names on the wire are the camelCase aliases. ``password`` is a
    protected field: no update policy may ever allow it.
    """
    id: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    birth_year: int = Field(..., alias="birthYear")
    password: str = Field(..., repr=False, json_schema_extra={"protected": True})

    class Config:
        populate_by_name = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert user to dictionary for storage, including protected fields."""
        return self.model_dump(by_alias=True)

    def to_public_dict(self) -> Dict[str, Any]:
        """Convert user to dictionary safe to return to clients."""
        return self.model_dump(by_alias=True, exclude={"password"})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create user from dictionary data."""
        return cls.model_validate(data)


class UserUpdate(BaseModel):
    """Model describing which user fields may be updated by clients."""
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    birth_year: Optional[int] = Field(None, alias="birthYear")

    class Config:
        populate_by_name = True


class UserResponse(BaseModel):
    """Public representation of a user."""
    id: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    birth_year: int = Field(..., alias="birthYear")

    class Config:
        populate_by_name = True
