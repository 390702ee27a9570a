"""
Points updates API: CRUD plus filtered listing (block, user, date range, minimum points).
Negative points are rejected (400).
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from nuclear.api.deps import PageParams
from nuclear.database import get_db
from nuclear.errors import PointsUpdateError
from nuclear.ratelimit import enforce_rate_limit
from nuclear.schemas.common import MessageResponse, Pagination
from nuclear.schemas.points_update import (
    PointsUpdateCreate,
    PointsUpdateListResponse,
    PointsUpdateResponse,
    PointsUpdateUpdate,
)
from nuclear.services import points_updates as points_service

router = APIRouter(prefix="/api/points-updates", tags=["points-updates"], dependencies=[Depends(enforce_rate_limit)])


@router.get("", response_model=PointsUpdateListResponse)
def list_points_updates(
    params: PageParams = Depends(),
    block_id: str | None = None,
    user_id: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    min_points: int | None = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    """Newest first. start/end are inclusive bounds on created_at."""
    items, total = points_service.get_points_updates_page(
        db, params.page, params.limit,
        block_id=block_id, user_id=user_id, start=start, end=end, min_points=min_points,
    )
    return PointsUpdateListResponse(
        points_updates=[PointsUpdateResponse.model_validate(p) for p in items],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.post("", response_model=PointsUpdateResponse, status_code=status.HTTP_201_CREATED)
def create_points_update(data: PointsUpdateCreate, db: Session = Depends(get_db)):
    return points_service.create_points_update(db, data.model_dump(mode="json", exclude_unset=True))


@router.get("/{update_id}", response_model=PointsUpdateResponse)
def get_points_update(update_id: str, db: Session = Depends(get_db)):
    update = points_service.get_points_update_by_id(db, update_id)
    if update is None:
        raise PointsUpdateError.not_found(update_id)
    return update


@router.put("/{update_id}", response_model=PointsUpdateResponse)
def update_points_update(update_id: str, data: PointsUpdateUpdate, db: Session = Depends(get_db)):
    return points_service.update_points_update(db, update_id, data.model_dump(mode="json", exclude_unset=True))


@router.delete("/{update_id}", response_model=MessageResponse)
def delete_points_update(update_id: str, db: Session = Depends(get_db)):
    points_service.delete_points_update(db, update_id)
    return MessageResponse(message="Points update deleted successfully")
