"""
Question request/response schemas.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from nuclear.models.types import Difficulty
from nuclear.schemas.common import Pagination


class QuestionCreate(BaseModel):
    text: str = Field(..., min_length=1)
    block_id: str | None = None
    type: str | None = Field(None, max_length=50)
    difficulty: Difficulty | None = None
    points: int | None = Field(None, ge=0)


class QuestionUpdate(BaseModel):
    text: str | None = Field(None, min_length=1)
    block_id: str | None = None
    type: str | None = Field(None, max_length=50)
    difficulty: Difficulty | None = None
    points: int | None = Field(None, ge=0)


class QuestionResponse(BaseModel):
    id: str
    text: str
    block_id: str | None
    type: str | None
    difficulty: str | None
    points: int | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QuestionListResponse(BaseModel):
    questions: list[QuestionResponse]
    pagination: Pagination
