"""
Folder request/response schemas.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from nuclear.schemas.common import Pagination


class FolderCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    author_id: str | None = None
    parent_id: str | None = None


class FolderUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    parent_id: str | None = None  # null moves the folder to the root


class FolderResponse(BaseModel):
    id: str
    name: str
    description: str | None
    author_id: str
    parent_id: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FolderListResponse(BaseModel):
    folders: list[FolderResponse]
    pagination: Pagination
