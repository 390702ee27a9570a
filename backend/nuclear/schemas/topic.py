"""
Topic request/response schemas.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from nuclear.schemas.common import Pagination


class TopicFields(BaseModel):
    """Topic body without block_id; also used for topics nested in a block create."""
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    examples: list[str] | None = None


class TopicCreate(TopicFields):
    block_id: str | None = None


class TopicUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    examples: list[str] | None = None
    block_id: str | None = None


class TopicResponse(BaseModel):
    id: str
    name: str
    description: str | None
    examples: list[str] | None
    block_id: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TopicListResponse(BaseModel):
    topics: list[TopicResponse]
    pagination: Pagination
