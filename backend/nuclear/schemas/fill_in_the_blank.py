"""
Fill-in-the-blank request/response schemas.
"""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from nuclear.models.fill_in_the_blank import BLANK_MARKER
from nuclear.models.types import Difficulty
from nuclear.schemas.common import Pagination


def _has_blank(v: str | None) -> str | None:
    if v is not None and BLANK_MARKER not in v:
        raise ValueError(f"sentence must contain a blank marker ({BLANK_MARKER})")
    return v


class FillInTheBlankCreate(BaseModel):
    sentence: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1, max_length=512)
    block_id: str | None = None
    hint: str | None = None
    difficulty: Difficulty | None = None

    @field_validator("sentence")
    @classmethod
    def sentence_has_blank(cls, v: str) -> str:
        return _has_blank(v)


class FillInTheBlankUpdate(BaseModel):
    sentence: str | None = Field(None, min_length=1)
    answer: str | None = Field(None, min_length=1, max_length=512)
    block_id: str | None = None
    hint: str | None = None
    difficulty: Difficulty | None = None

    @field_validator("sentence")
    @classmethod
    def sentence_has_blank(cls, v: str | None) -> str | None:
        return _has_blank(v)


class FillInTheBlankResponse(BaseModel):
    id: str
    sentence: str
    answer: str
    block_id: str | None
    hint: str | None
    difficulty: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FillInTheBlankListResponse(BaseModel):
    fill_in_the_blanks: list[FillInTheBlankResponse]
    pagination: Pagination


class AnswerCheckRequest(BaseModel):
    answer: str = Field(..., min_length=1)


class AnswerCheckResponse(BaseModel):
    id: str
    correct: bool
