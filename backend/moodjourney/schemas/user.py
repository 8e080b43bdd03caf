"""
MoodJourney Backend — User Schemas
===================================

Request bodies default every field so an absent key reaches the service as
an empty string; the service then reports "Username and email are required"
instead of the framework's generic body error.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Body of POST /users/ and POST /users/create-or-get."""
    username: Optional[str] = Field(default="", description="Unique username")
    email: Optional[str] = Field(default="", description="Unique email address")

    model_config = {"extra": "ignore"}


class UserResponse(BaseModel):
    """Full user record as stored."""
    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserResult(BaseModel):
    """Success envelope around a single user."""
    success: bool = Field(default=True)
    data: UserResponse


class UserCreateOrGetResult(BaseModel):
    """
    Success envelope for create-or-get.

    `message` tells the caller which branch ran: "User already exists"
    (HTTP 200, no write) or "User created successfully" (HTTP 201).
    """
    success: bool = Field(default=True)
    data: UserResponse
    message: str
