"""
Quiz request/response schemas. time_limit in minutes; passing_score is a percentage.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from nuclear.schemas.common import Pagination


class QuizCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=512)
    description: str | None = None
    block_id: str | None = None
    topic_id: str | None = None
    time_limit: int | None = Field(None, ge=1)
    passing_score: int | None = Field(None, ge=0, le=100)


class QuizUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=512)
    description: str | None = None
    block_id: str | None = None
    topic_id: str | None = None
    time_limit: int | None = Field(None, ge=1)
    passing_score: int | None = Field(None, ge=0, le=100)


class QuizResponse(BaseModel):
    id: str
    title: str
    description: str | None
    block_id: str | None
    topic_id: str | None
    time_limit: int | None
    passing_score: int | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QuizListResponse(BaseModel):
    quizzes: list[QuizResponse]
    pagination: Pagination
