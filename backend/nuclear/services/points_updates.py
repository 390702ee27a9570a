"""
Points ledger access and aggregation.

Points are non-negative integers. Every create/update path goes through _points(), so the
rule holds regardless of caller. Totals are summed in the database; the other views filter
and order in SQL.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from nuclear.errors import PointsUpdateError
from nuclear.models.block import Block
from nuclear.models.points_update import PointsUpdate
from nuclear.models.user import User
from nuclear.services import base

logger = logging.getLogger(__name__)

FIELDS = ("points", "block_id", "user_id", "reason")
ORDERS = ("asc", "desc")


def _utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def check_date_range(start: datetime | None, end: datetime | None) -> None:
    if start is not None and end is not None and _utc(start) > _utc(end):
        raise PointsUpdateError.invalid("start", "start must not be after end")


def _points(value) -> int:
    if value is None:
        raise PointsUpdateError.invalid("points", "field is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise PointsUpdateError.invalid("points", "must be an integer")
    if value < 0:
        raise PointsUpdateError.invalid("points", "must not be negative")
    return value


def _clean(db: Session, data: dict, partial: bool) -> dict:
    base.reject_unknown_fields(data, FIELDS, PointsUpdateError)
    out = {}
    if not partial or "points" in data:
        out["points"] = _points(data.get("points"))
    if not partial or "block_id" in data:
        base.check_reference(db, Block, data.get("block_id"), "block_id", PointsUpdateError)
        out["block_id"] = data.get("block_id")
    if not partial or "user_id" in data:
        base.check_reference(db, User, data.get("user_id"), "user_id", PointsUpdateError)
        out["user_id"] = data.get("user_id")
    if not partial or "reason" in data:
        out["reason"] = base.optional_text(data, "reason", PointsUpdateError)
    return out


def get_points_update_by_id(db: Session, update_id: str) -> PointsUpdate | None:
    return base.get_row(db, PointsUpdate, update_id)


def get_all_points_updates(db: Session) -> list[PointsUpdate]:
    return db.query(PointsUpdate).order_by(PointsUpdate.created_at, PointsUpdate.id).all()


def get_points_updates_page(
    db: Session,
    page: int,
    limit: int,
    block_id: str | None = None,
    user_id: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    min_points: int | None = None,
) -> tuple[list[PointsUpdate], int]:
    q = db.query(PointsUpdate)
    if block_id:
        q = q.filter(PointsUpdate.block_id == block_id)
    if user_id:
        q = q.filter(PointsUpdate.user_id == user_id)
    check_date_range(start, end)
    if start is not None:
        q = q.filter(PointsUpdate.created_at >= _utc(start))
    if end is not None:
        q = q.filter(PointsUpdate.created_at <= _utc(end))
    if min_points is not None:
        q = q.filter(PointsUpdate.points >= min_points)
    return base.paginate(q.order_by(PointsUpdate.created_at.desc(), PointsUpdate.id), page, limit)


def points_update_exists(db: Session, update_id: str) -> bool:
    return base.row_exists(db, PointsUpdate, update_id)


def create_points_update(db: Session, data: dict) -> PointsUpdate:
    update = base.insert(db, PointsUpdate(**_clean(db, data, partial=False)), PointsUpdateError)
    logger.info("Recorded %s point(s) id=%s block_id=%s user_id=%s", update.points, update.id, update.block_id, update.user_id)
    return update


def update_points_update(db: Session, update_id: str, data: dict) -> PointsUpdate:
    update = base.require_row(db, PointsUpdate, update_id, PointsUpdateError)
    base.apply_changes(update, _clean(db, data, partial=True))
    base.save(db, PointsUpdateError, "update")
    db.refresh(update)
    return update


def delete_points_update(db: Session, update_id: str) -> PointsUpdate:
    update = base.require_row(db, PointsUpdate, update_id, PointsUpdateError)
    base.remove(db, update, PointsUpdateError)
    logger.info("Deleted points update id=%s", update_id)
    return update


def get_points_update_block(db: Session, update_id: str) -> Block | None:
    update = base.require_row(db, PointsUpdate, update_id, PointsUpdateError)
    return base.get_row(db, Block, update.block_id)


def get_points_update_user(db: Session, update_id: str) -> User | None:
    update = base.require_row(db, PointsUpdate, update_id, PointsUpdateError)
    return base.get_row(db, User, update.user_id)


def get_total_points_for_block(db: Session, block_id: str) -> int:
    """SUM(points) for the block; 0 when it has no entries."""
    total = db.query(func.coalesce(func.sum(PointsUpdate.points), 0)).filter(PointsUpdate.block_id == block_id).scalar()
    return int(total or 0)


def get_points_updates_by_date_range(
    db: Session, start: datetime, end: datetime, block_id: str | None = None
) -> list[PointsUpdate]:
    """Entries created within [start, end], oldest first."""
    if start is None or end is None:
        raise PointsUpdateError.invalid("start", "start and end are required")
    check_date_range(start, end)
    q = db.query(PointsUpdate).filter(PointsUpdate.created_at >= _utc(start), PointsUpdate.created_at <= _utc(end))
    if block_id:
        q = q.filter(PointsUpdate.block_id == block_id)
    return q.order_by(PointsUpdate.created_at, PointsUpdate.id).all()


def get_points_updates_above(db: Session, min_points: int, block_id: str | None = None) -> list[PointsUpdate]:
    """Entries with points >= min_points, largest first."""
    min_points = _points(min_points)
    q = db.query(PointsUpdate).filter(PointsUpdate.points >= min_points)
    if block_id:
        q = q.filter(PointsUpdate.block_id == block_id)
    return q.order_by(PointsUpdate.points.desc(), PointsUpdate.created_at, PointsUpdate.id).all()


def get_latest_points_update(db: Session, block_id: str) -> PointsUpdate | None:
    return (
        db.query(PointsUpdate)
        .filter(PointsUpdate.block_id == block_id)
        .order_by(PointsUpdate.created_at.desc(), PointsUpdate.id.desc())
        .first()
    )


def get_points_updates_for_block(db: Session, block_id: str, order: str = "desc") -> list[PointsUpdate]:
    """All entries for a block ordered by creation time (asc or desc)."""
    if order not in ORDERS:
        raise PointsUpdateError.invalid("order", "must be asc or desc")
    created = PointsUpdate.created_at.asc() if order == "asc" else PointsUpdate.created_at.desc()
    return db.query(PointsUpdate).filter(PointsUpdate.block_id == block_id).order_by(created, PointsUpdate.id).all()


def get_points_updates_by_user(db: Session, user_id: str) -> list[PointsUpdate]:
    return (
        db.query(PointsUpdate)
        .filter(PointsUpdate.user_id == user_id)
        .order_by(PointsUpdate.created_at.desc(), PointsUpdate.id)
        .all()
    )
