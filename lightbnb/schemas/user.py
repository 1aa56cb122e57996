"""
Pydantic schemas for user requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserCreate(BaseModel):
    """Schema for registering a new user."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: str = Field(..., min_length=3, max_length=255, description="Unique email address")
    password: str = Field(..., min_length=1, max_length=255, description="Password hash")

    @field_validator("name", "email")
    @classmethod
    def reject_blank(cls, v):
        """Reject blank values; anything else is stored exactly as given."""
        if not v.strip():
            raise ValueError("Value cannot be empty")
        return v


class UserResponse(BaseModel):
    """A row of the users table."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    password: str
