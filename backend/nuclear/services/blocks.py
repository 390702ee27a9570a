"""
Block access: CRUD, publish state, and the content hanging off a block.
create_block_with_topics runs block + topics in one transaction. Deleting a block detaches
its quizzes, questions, topics, fill-in-the-blanks and points updates (block_id -> NULL).
"""
import logging

from sqlalchemy.orm import Session, joinedload

from nuclear.database import atomic
from nuclear.errors import BlockError
from nuclear.models.block import Block
from nuclear.models.fill_in_the_blank import FillInTheBlank
from nuclear.models.folder import Folder
from nuclear.models.points_update import PointsUpdate
from nuclear.models.question import Question
from nuclear.models.quiz import Quiz
from nuclear.models.topic import Topic
from nuclear.models.user import User
from nuclear.services import base

logger = logging.getLogger(__name__)

CREATE_FIELDS = ("title", "content", "author_id", "folder_id", "published")
UPDATABLE_FIELDS = ("title", "content", "folder_id", "published")

# Tables whose block_id is cleared when the block goes away
_DEPENDENTS = (Quiz, Question, Topic, FillInTheBlank, PointsUpdate)


def _published_flag(value) -> bool:
    if not isinstance(value, bool):
        raise BlockError.invalid("published", "must be true or false")
    return value


def get_block_by_id(db: Session, block_id: str) -> Block | None:
    return base.get_row(db, Block, block_id)


def get_all_blocks(db: Session) -> list[Block]:
    return db.query(Block).order_by(Block.created_at).all()


def get_blocks_page(
    db: Session,
    page: int,
    limit: int,
    author_id: str | None = None,
    folder_id: str | None = None,
    published: bool | None = None,
) -> tuple[list[Block], int]:
    q = db.query(Block)
    if author_id:
        q = q.filter(Block.author_id == author_id)
    if folder_id:
        q = q.filter(Block.folder_id == folder_id)
    if published is not None:
        q = q.filter(Block.published.is_(published))
    return base.paginate(q.order_by(Block.created_at.desc(), Block.id), page, limit)


def block_exists(db: Session, block_id: str) -> bool:
    return base.row_exists(db, Block, block_id)


def create_block(db: Session, data: dict) -> Block:
    """Create a block. author_id must name a user; folder_id, when given, an existing folder."""
    base.reject_unknown_fields(data, CREATE_FIELDS, BlockError)
    title = base.required_text(data, "title", BlockError)
    content = base.required_text(data, "content", BlockError)
    author_id = base.required_text(data, "author_id", BlockError)
    folder_id = data.get("folder_id")
    published = _published_flag(data["published"]) if data.get("published") is not None else False
    base.check_reference(db, User, author_id, "author_id", BlockError)
    base.check_reference(db, Folder, folder_id, "folder_id", BlockError)
    block = base.insert(
        db,
        Block(title=title, content=content, author_id=author_id, folder_id=folder_id, published=published),
        BlockError,
    )
    logger.info("Created block id=%s author_id=%s", block.id, author_id)
    return block


def create_block_with_topics(db: Session, data: dict, topics: list[dict]) -> tuple[Block, list[Topic]]:
    """Create a block and its topics atomically; any invalid topic rolls back the block too."""
    from nuclear.services import topics as topic_service

    with atomic(db):
        block = create_block(db, data)
        created = [topic_service.create_topic(db, {**t, "block_id": block.id}) for t in topics]
    db.refresh(block)
    for t in created:
        db.refresh(t)
    logger.info("Created block id=%s with %s topic(s)", block.id, len(created))
    return block, created


def update_block(db: Session, block_id: str, data: dict) -> Block:
    block = base.require_row(db, Block, block_id, BlockError)
    base.reject_unknown_fields(data, UPDATABLE_FIELDS, BlockError)
    changes = {}
    if "title" in data:
        changes["title"] = base.required_text(data, "title", BlockError)
    if "content" in data:
        changes["content"] = base.required_text(data, "content", BlockError)
    if "folder_id" in data:
        base.check_reference(db, Folder, data["folder_id"], "folder_id", BlockError)
        changes["folder_id"] = data["folder_id"]
    if "published" in data:
        changes["published"] = _published_flag(data["published"])
    base.apply_changes(block, changes)
    base.save(db, BlockError, "update")
    db.refresh(block)
    return block


def set_block_published(db: Session, block_id: str, published: bool) -> Block:
    return update_block(db, block_id, {"published": published})


def delete_block(db: Session, block_id: str) -> Block:
    """Delete a block; dependents stay but lose their block reference."""
    block = base.require_row(db, Block, block_id, BlockError)
    with atomic(db):
        for model in _DEPENDENTS:
            db.query(model).filter(model.block_id == block_id).update(
                {model.block_id: None}, synchronize_session=False
            )
        base.remove(db, block, BlockError)
    logger.info("Deleted block id=%s", block_id)
    return block


def get_block_author(db: Session, block_id: str) -> User:
    block = base.require_row(db, Block, block_id, BlockError)
    return block.author


def get_block_folder(db: Session, block_id: str) -> Folder | None:
    block = base.require_row(db, Block, block_id, BlockError)
    return block.folder


def get_block_context(db: Session, block_id: str) -> Block:
    """Block with author and folder loaded in the same query."""
    block = (
        db.query(Block)
        .options(joinedload(Block.author), joinedload(Block.folder))
        .filter(Block.id == block_id)
        .first()
    )
    if block is None:
        raise BlockError.not_found(block_id)
    return block


def _children(db: Session, model, block_id: str) -> list:
    base.require_row(db, Block, block_id, BlockError)
    return db.query(model).filter(model.block_id == block_id).order_by(model.created_at, model.id).all()


def get_block_quizzes(db: Session, block_id: str) -> list[Quiz]:
    return _children(db, Quiz, block_id)


def get_block_questions(db: Session, block_id: str) -> list[Question]:
    return _children(db, Question, block_id)


def get_block_topics(db: Session, block_id: str) -> list[Topic]:
    return _children(db, Topic, block_id)


def get_block_fill_in_the_blanks(db: Session, block_id: str) -> list[FillInTheBlank]:
    return _children(db, FillInTheBlank, block_id)


def get_block_points_updates(db: Session, block_id: str) -> list[PointsUpdate]:
    return _children(db, PointsUpdate, block_id)


def get_blocks_by_author(db: Session, author_id: str) -> list[Block]:
    return db.query(Block).filter(Block.author_id == author_id).order_by(Block.created_at).all()


def get_blocks_by_folder(db: Session, folder_id: str) -> list[Block]:
    return db.query(Block).filter(Block.folder_id == folder_id).order_by(Block.created_at).all()


def get_published_blocks(db: Session) -> list[Block]:
    return db.query(Block).filter(Block.published.is_(True)).order_by(Block.created_at).all()
