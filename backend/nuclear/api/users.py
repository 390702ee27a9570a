"""
Users API: paginated list with search, CRUD, authored content and points.
PUT is allowed for the user themself or an ADMIN; DELETE is ADMIN only.
Only ADMINs may create a TEACHER or ADMIN account.
Errors from the services layer are mapped to status codes in nuclear.main.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from nuclear.api.deps import PageParams, get_current_user, require_admin
from nuclear.database import get_db
from nuclear.models.user import User
from nuclear.ratelimit import enforce_rate_limit
from nuclear.schemas.block import BlockResponse
from nuclear.schemas.common import MessageResponse, Pagination
from nuclear.schemas.folder import FolderResponse
from nuclear.schemas.points_update import PointsUpdateResponse
from nuclear.schemas.user import UserCreate, UserListResponse, UserPointsResponse, UserResponse, UserUpdate
from nuclear.services import users as user_service
from nuclear.errors import UserError

router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(enforce_rate_limit)])
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, user_id: str) -> User:
    user = user_service.get_user_by_id(db, user_id)
    if user is None:
        raise UserError.not_found(user_id)
    return user


@router.get("", response_model=UserListResponse)
def list_users(
    params: PageParams = Depends(),
    search: str | None = Query(None, max_length=255),
    db: Session = Depends(get_db),
):
    """List users, newest first; search matches email or name."""
    users, total = user_service.get_users_page(db, params.page, params.limit, search)
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: UserCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Create a user; 409 if the email is taken. Only ADMINs may create a non-STUDENT account."""
    payload = data.model_dump(mode="json", exclude_unset=True)
    if payload.get("mode") not in (None, "STUDENT") and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only admins can set a user's mode")
    return user_service.create_user(db, payload)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update. Only ADMINs may change someone else or change a mode."""
    changes = data.model_dump(mode="json", exclude_unset=True)
    if current_user.id != user_id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only update your own account")
    if "mode" in changes and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only admins can change a user's mode")
    return user_service.update_user(db, user_id, changes)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: str, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    logger.info("User %s deleted by admin %s", user_id, admin.id)
    return MessageResponse(message="User deleted successfully")


@router.get("/{user_id}/blocks", response_model=list[BlockResponse])
def list_user_blocks(user_id: str, db: Session = Depends(get_db)):
    return user_service.get_user_blocks(db, user_id)


@router.get("/{user_id}/folders", response_model=list[FolderResponse])
def list_user_folders(user_id: str, db: Session = Depends(get_db)):
    return user_service.get_user_folders(db, user_id)


@router.get("/{user_id}/points", response_model=list[PointsUpdateResponse])
def list_user_points(user_id: str, db: Session = Depends(get_db)):
    return user_service.get_user_points_updates(db, user_id)


@router.get("/{user_id}/points/total", response_model=UserPointsResponse)
def get_user_points_total(user_id: str, db: Session = Depends(get_db)):
    return UserPointsResponse(user_id=user_id, total=user_service.get_total_points_for_user(db, user_id))
