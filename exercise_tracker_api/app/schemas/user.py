"""
Pydantic models for user data.

Users carry nothing but a unique username and an opaque identifier
assigned by the document store.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from . import is_blank


class UserCreate(BaseModel):
    """Schema for registering a user."""

    username: str = Field(..., example="alice")

    @model_validator(mode="before")
    @classmethod
    def require_username(cls, data: Any) -> Any:
        if not isinstance(data, dict) or is_blank(data.get("username")):
            raise ValueError("Username is required")
        username = data["username"]
        if not isinstance(username, str):
            data = {**data, "username": str(username)}
        return data


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    username: str
    id: str

    model_config = {
        "from_attributes": True,
    }
