"""
Shared dependencies: get_current_user from Bearer token, require_admin, owner checks, pagination params.
Every /api router except health depends on get_current_user.
"""
import logging

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from nuclear.config import settings
from nuclear.database import get_db
from nuclear.models.user import User
from nuclear.services import base
from nuclear.services.auth import decode_access_token

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Require valid Bearer token; return User or 401."""
    if not credentials or not (getattr(credentials, "credentials", None) or "").strip():
        logger.debug("Auth failed: no Bearer token in request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Send header: Authorization: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    if not payload or "sub" not in payload:
        logger.debug("Auth failed: invalid or expired token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = db.query(User).filter(User.id == str(payload["sub"])).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """403 unless the caller is an ADMIN."""
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


def require_owner_or_admin(author_id: str | None, current_user: User) -> None:
    """403 unless the caller authored the content or is an ADMIN."""
    if author_id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only modify your own content")


class PageParams:
    """page (1-based) and limit query params, clamped to configured bounds."""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int | None = Query(None, ge=1),
    ):
        self.page, self.limit = base.normalize_page(page, limit, settings.default_page_size, settings.max_page_size)
