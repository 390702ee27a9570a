"""
User request/response schemas.
"""
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from nuclear.models.types import UserMode
from nuclear.schemas.common import Pagination


class UserCreate(BaseModel):
    email: EmailStr
    name: str | None = Field(None, max_length=255)
    mode: UserMode | None = None


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    name: str | None = Field(None, max_length=255)
    mode: UserMode | None = None


class UserResponse(BaseModel):
    id: str
    email: str
    name: str | None
    mode: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    users: list[UserResponse]
    pagination: Pagination


class UserPointsResponse(BaseModel):
    user_id: str
    total: int
