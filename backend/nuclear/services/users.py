"""
User access: CRUD, email lookups, authored content, points totals.
Email is unique (checked before insert and by the unique index). Deleting a user who still
authors blocks or folders is refused; their points updates are detached.
"""
import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from nuclear.database import atomic
from nuclear.errors import ErrorKind, UserError
from nuclear.models.block import Block
from nuclear.models.folder import Folder
from nuclear.models.points_update import PointsUpdate
from nuclear.models.types import UserMode
from nuclear.models.user import User
from nuclear.services import base

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("email", "name", "mode")
MODES = [m.value for m in UserMode]


def _clean_email(value) -> str:
    email = base.required_text({"email": value}, "email", UserError).lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain or " " in email:
        raise UserError.invalid("email", "must be a valid email address")
    return email


def _ensure_email_free(db: Session, email: str, exclude_id: str | None = None) -> None:
    q = db.query(User.id).filter(func.lower(User.email) == email)
    if exclude_id:
        q = q.filter(User.id != exclude_id)
    if q.first() is not None:
        raise UserError(
            ErrorKind.CONFLICT,
            f"A user with email {email} already exists",
            details=[{"field": "email", "message": "email already registered"}],
        )


def get_user_by_id(db: Session, user_id: str) -> User | None:
    return base.get_row(db, User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    if not email or not email.strip():
        return None
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def get_all_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at).all()


def get_users_page(db: Session, page: int, limit: int, search: str | None = None) -> tuple[list[User], int]:
    """Page of users, newest first; search matches email or name case-insensitively."""
    q = db.query(User)
    if search and search.strip():
        term = search.strip()
        q = q.filter(or_(base.contains_ci(User.email, term), base.contains_ci(User.name, term)))
    return base.paginate(q.order_by(User.created_at.desc(), User.id), page, limit)


def user_exists(db: Session, user_id: str) -> bool:
    return base.row_exists(db, User, user_id)


def email_exists(db: Session, email: str) -> bool:
    return get_user_by_email(db, email) is not None


def create_user(db: Session, data: dict) -> User:
    """Create a user; mode defaults to STUDENT. Duplicate email raises CONFLICT."""
    base.reject_unknown_fields(data, UPDATABLE_FIELDS, UserError)
    email = _clean_email(data.get("email"))
    name = base.optional_text(data, "name", UserError)
    mode = base.one_of(data.get("mode"), "mode", MODES, UserError) or UserMode.STUDENT.value
    _ensure_email_free(db, email)
    user = base.insert(db, User(email=email, name=name, mode=mode), UserError)
    logger.info("Created user id=%s mode=%s", user.id, user.mode)
    return user


def update_user(db: Session, user_id: str, data: dict) -> User:
    user = base.require_row(db, User, user_id, UserError)
    base.reject_unknown_fields(data, UPDATABLE_FIELDS, UserError)
    changes = {}
    if "email" in data:
        email = _clean_email(data["email"])
        _ensure_email_free(db, email, exclude_id=user_id)
        changes["email"] = email
    if "name" in data:
        changes["name"] = base.optional_text(data, "name", UserError)
    if "mode" in data:
        if data["mode"] is None:
            raise UserError.invalid("mode", "field is required")
        changes["mode"] = base.one_of(data["mode"], "mode", MODES, UserError)
    base.apply_changes(user, changes)
    base.save(db, UserError, "update")
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str) -> User:
    """Delete a user with no authored blocks or folders; detaches their points updates."""
    user = base.require_row(db, User, user_id, UserError)
    block_count = db.query(Block).filter(Block.author_id == user_id).count()
    folder_count = db.query(Folder).filter(Folder.author_id == user_id).count()
    if block_count or folder_count:
        logger.warning("Refused delete of user %s: %s block(s), %s folder(s)", user_id, block_count, folder_count)
        raise UserError(
            ErrorKind.CONFLICT,
            f"User {user_id} still authors {block_count} block(s) and {folder_count} folder(s); delete or reassign them first",
        )
    with atomic(db):
        db.query(PointsUpdate).filter(PointsUpdate.user_id == user_id).update(
            {PointsUpdate.user_id: None}, synchronize_session=False
        )
        base.remove(db, user, UserError)
    logger.info("Deleted user id=%s", user_id)
    return user


def get_user_blocks(db: Session, user_id: str) -> list[Block]:
    base.require_row(db, User, user_id, UserError)
    return db.query(Block).filter(Block.author_id == user_id).order_by(Block.created_at).all()


def get_user_folders(db: Session, user_id: str) -> list[Folder]:
    base.require_row(db, User, user_id, UserError)
    return db.query(Folder).filter(Folder.author_id == user_id).order_by(Folder.created_at).all()


def get_user_points_updates(db: Session, user_id: str) -> list[PointsUpdate]:
    base.require_row(db, User, user_id, UserError)
    return (
        db.query(PointsUpdate)
        .filter(PointsUpdate.user_id == user_id)
        .order_by(PointsUpdate.created_at.desc(), PointsUpdate.id)
        .all()
    )


def get_total_points_for_user(db: Session, user_id: str) -> int:
    base.require_row(db, User, user_id, UserError)
    total = db.query(func.coalesce(func.sum(PointsUpdate.points), 0)).filter(PointsUpdate.user_id == user_id).scalar()
    return int(total or 0)
