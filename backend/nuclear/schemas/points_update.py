"""
Points update request/response schemas. Points are non-negative integers.
"""
from datetime import datetime

from pydantic import BaseModel, Field, StrictInt

from nuclear.schemas.common import Pagination


class PointsUpdateCreate(BaseModel):
    points: StrictInt = Field(..., ge=0)
    block_id: str | None = None
    user_id: str | None = None
    reason: str | None = None


class PointsUpdateUpdate(BaseModel):
    points: StrictInt | None = Field(None, ge=0)
    block_id: str | None = None
    user_id: str | None = None
    reason: str | None = None


class PointsUpdateResponse(BaseModel):
    id: str
    points: int
    block_id: str | None
    user_id: str | None
    reason: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PointsUpdateListResponse(BaseModel):
    points_updates: list[PointsUpdateResponse]
    pagination: Pagination
