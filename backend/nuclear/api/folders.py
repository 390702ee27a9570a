"""
Folders API: CRUD and tree navigation.
PUT with parent_id is cycle-checked (400 on a cycle). DELETE of a non-empty folder is 409
unless ?force=true, which removes the subtree and moves its blocks to the root.
PUT and DELETE are limited to the folder's author or an ADMIN.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from nuclear.api.deps import PageParams, get_current_user, require_owner_or_admin
from nuclear.database import get_db
from nuclear.errors import FolderError
from nuclear.models.folder import Folder
from nuclear.models.user import User
from nuclear.ratelimit import enforce_rate_limit
from nuclear.schemas.block import BlockResponse
from nuclear.schemas.common import MessageResponse, Pagination
from nuclear.schemas.folder import FolderCreate, FolderListResponse, FolderResponse, FolderUpdate
from nuclear.services import folders as folder_service

router = APIRouter(prefix="/api/folders", tags=["folders"], dependencies=[Depends(enforce_rate_limit)])


def _get_or_404(db: Session, folder_id: str) -> Folder:
    folder = folder_service.get_folder_by_id(db, folder_id)
    if folder is None:
        raise FolderError.not_found(folder_id)
    return folder


@router.get("", response_model=FolderListResponse)
def list_folders(
    params: PageParams = Depends(),
    author_id: str | None = None,
    root_only: bool = False,
    db: Session = Depends(get_db),
):
    folders, total = folder_service.get_folders_page(
        db, params.page, params.limit, author_id=author_id, root_only=root_only
    )
    return FolderListResponse(
        folders=[FolderResponse.model_validate(f) for f in folders],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
def create_folder(data: FolderCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    payload = data.model_dump(mode="json", exclude_unset=True)
    if not payload.get("author_id"):
        payload["author_id"] = current_user.id
    return folder_service.create_folder(db, payload)


@router.get("/{folder_id}", response_model=FolderResponse)
def get_folder(folder_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, folder_id)


@router.put("/{folder_id}", response_model=FolderResponse)
def update_folder(
    folder_id: str,
    data: FolderUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    require_owner_or_admin(_get_or_404(db, folder_id).author_id, current_user)
    return folder_service.update_folder(db, folder_id, data.model_dump(mode="json", exclude_unset=True))


@router.delete("/{folder_id}", response_model=MessageResponse)
def delete_folder(
    folder_id: str,
    force: bool = False,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    require_owner_or_admin(_get_or_404(db, folder_id).author_id, current_user)
    folder_service.delete_folder(db, folder_id, force=force)
    return MessageResponse(message="Folder deleted successfully")


@router.get("/{folder_id}/children", response_model=list[FolderResponse])
def list_children(folder_id: str, db: Session = Depends(get_db)):
    return folder_service.get_folder_children(db, folder_id)


@router.get("/{folder_id}/blocks", response_model=list[BlockResponse])
def list_folder_blocks(folder_id: str, db: Session = Depends(get_db)):
    return folder_service.get_folder_blocks(db, folder_id)


@router.get("/{folder_id}/ancestors", response_model=list[FolderResponse])
def list_ancestors(folder_id: str, db: Session = Depends(get_db)):
    """Breadcrumb: parent first, root last."""
    return folder_service.get_folder_ancestors(db, folder_id)
