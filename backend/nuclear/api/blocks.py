"""
Blocks API: CRUD, publish/unpublish, content attached to a block, points views.
POST may carry topics, created in the same transaction as the block.
PUT, DELETE and publish/unpublish are limited to the block's author or an ADMIN.
"""
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from nuclear.api.deps import PageParams, get_current_user, require_owner_or_admin
from nuclear.database import get_db
from nuclear.errors import BlockError, ErrorKind, PointsUpdateError
from nuclear.models.block import Block
from nuclear.models.user import User
from nuclear.ratelimit import enforce_rate_limit
from nuclear.schemas.block import BlockCreate, BlockListResponse, BlockPointsTotalResponse, BlockResponse, BlockUpdate
from nuclear.schemas.common import MessageResponse, Pagination
from nuclear.schemas.fill_in_the_blank import FillInTheBlankResponse
from nuclear.schemas.points_update import PointsUpdateResponse
from nuclear.schemas.question import QuestionResponse
from nuclear.schemas.quiz import QuizResponse
from nuclear.schemas.topic import TopicResponse
from nuclear.services import blocks as block_service
from nuclear.services import points_updates as points_service

router = APIRouter(prefix="/api/blocks", tags=["blocks"], dependencies=[Depends(enforce_rate_limit)])
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, block_id: str) -> Block:
    block = block_service.get_block_by_id(db, block_id)
    if block is None:
        raise BlockError.not_found(block_id)
    return block


@router.get("", response_model=BlockListResponse)
def list_blocks(
    params: PageParams = Depends(),
    author_id: str | None = None,
    folder_id: str | None = None,
    published: bool | None = None,
    db: Session = Depends(get_db),
):
    blocks, total = block_service.get_blocks_page(
        db, params.page, params.limit, author_id=author_id, folder_id=folder_id, published=published
    )
    return BlockListResponse(
        blocks=[BlockResponse.model_validate(b) for b in blocks],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.post("", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
def create_block(data: BlockCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Create a block (author defaults to the caller). Nested topics are all-or-nothing with the block."""
    payload = data.model_dump(mode="json", exclude_unset=True, exclude={"topics"})
    if not payload.get("author_id"):
        payload["author_id"] = current_user.id
    if data.topics:
        block, _ = block_service.create_block_with_topics(
            db, payload, [t.model_dump(mode="json", exclude_unset=True) for t in data.topics]
        )
        return block
    return block_service.create_block(db, payload)


@router.get("/{block_id}", response_model=BlockResponse)
def get_block(block_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, block_id)


@router.put("/{block_id}", response_model=BlockResponse)
def update_block(
    block_id: str,
    data: BlockUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    require_owner_or_admin(_get_or_404(db, block_id).author_id, current_user)
    return block_service.update_block(db, block_id, data.model_dump(mode="json", exclude_unset=True))


@router.delete("/{block_id}", response_model=MessageResponse)
def delete_block(block_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete a block; its quizzes, questions, topics, exercises and points entries are kept but detached."""
    require_owner_or_admin(_get_or_404(db, block_id).author_id, current_user)
    block_service.delete_block(db, block_id)
    return MessageResponse(message="Block deleted successfully")


@router.post("/{block_id}/publish", response_model=BlockResponse)
def publish_block(block_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    require_owner_or_admin(_get_or_404(db, block_id).author_id, current_user)
    return block_service.set_block_published(db, block_id, True)


@router.post("/{block_id}/unpublish", response_model=BlockResponse)
def unpublish_block(block_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    require_owner_or_admin(_get_or_404(db, block_id).author_id, current_user)
    return block_service.set_block_published(db, block_id, False)


@router.get("/{block_id}/quizzes", response_model=list[QuizResponse])
def list_block_quizzes(block_id: str, db: Session = Depends(get_db)):
    return block_service.get_block_quizzes(db, block_id)


@router.get("/{block_id}/questions", response_model=list[QuestionResponse])
def list_block_questions(block_id: str, db: Session = Depends(get_db)):
    return block_service.get_block_questions(db, block_id)


@router.get("/{block_id}/topics", response_model=list[TopicResponse])
def list_block_topics(block_id: str, db: Session = Depends(get_db)):
    return block_service.get_block_topics(db, block_id)


@router.get("/{block_id}/fill-in-the-blanks", response_model=list[FillInTheBlankResponse])
def list_block_fill_in_the_blanks(block_id: str, db: Session = Depends(get_db)):
    return block_service.get_block_fill_in_the_blanks(db, block_id)


@router.get("/{block_id}/points", response_model=list[PointsUpdateResponse])
def list_block_points(
    block_id: str,
    order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    _get_or_404(db, block_id)
    return points_service.get_points_updates_for_block(db, block_id, order=order)


@router.get("/{block_id}/points/total", response_model=BlockPointsTotalResponse)
def get_block_points_total(block_id: str, db: Session = Depends(get_db)):
    _get_or_404(db, block_id)
    return BlockPointsTotalResponse(block_id=block_id, total=points_service.get_total_points_for_block(db, block_id))


@router.get("/{block_id}/points/latest", response_model=PointsUpdateResponse)
def get_block_latest_points(block_id: str, db: Session = Depends(get_db)):
    """Most recent points entry for the block; 404 when there is none."""
    _get_or_404(db, block_id)
    latest = points_service.get_latest_points_update(db, block_id)
    if latest is None:
        raise PointsUpdateError(ErrorKind.NOT_FOUND, f"Block {block_id} has no points updates")
    return latest
