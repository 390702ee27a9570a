"""
Block request/response schemas. author_id defaults to the caller when omitted.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from nuclear.schemas.common import Pagination
from nuclear.schemas.topic import TopicFields


class BlockCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=512)
    content: str = Field(..., min_length=1)
    author_id: str | None = None
    folder_id: str | None = None
    published: bool = False
    topics: list[TopicFields] | None = None  # created in the same transaction as the block


class BlockUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=512)
    content: str | None = Field(None, min_length=1)
    folder_id: str | None = None
    published: bool | None = None


class BlockResponse(BaseModel):
    id: str
    title: str
    content: str
    author_id: str
    folder_id: str | None
    published: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BlockListResponse(BaseModel):
    blocks: list[BlockResponse]
    pagination: Pagination


class BlockPointsTotalResponse(BaseModel):
    block_id: str
    total: int
