"""
Topic access: CRUD, name/description search, uniform random pick (overall or within a block).
Deleting a topic detaches its quizzes (topic_id -> NULL).
"""
import logging
import random

from sqlalchemy import or_
from sqlalchemy.orm import Session

from nuclear.database import atomic
from nuclear.errors import TopicError
from nuclear.models.block import Block
from nuclear.models.quiz import Quiz
from nuclear.models.topic import Topic
from nuclear.services import base

logger = logging.getLogger(__name__)

FIELDS = ("name", "description", "examples", "block_id")


def _examples(value) -> list[str] | None:
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TopicError.invalid("examples", "must be a list of strings")
    cleaned = [v.strip() for v in value if v.strip()]
    return cleaned or None


def _clean(db: Session, data: dict, partial: bool) -> dict:
    base.reject_unknown_fields(data, FIELDS, TopicError)
    out = {}
    if not partial or "name" in data:
        out["name"] = base.required_text(data, "name", TopicError)
    if not partial or "description" in data:
        out["description"] = base.optional_text(data, "description", TopicError)
    if not partial or "examples" in data:
        out["examples"] = _examples(data.get("examples"))
    if not partial or "block_id" in data:
        base.check_reference(db, Block, data.get("block_id"), "block_id", TopicError)
        out["block_id"] = data.get("block_id")
    return out


def get_topic_by_id(db: Session, topic_id: str) -> Topic | None:
    return base.get_row(db, Topic, topic_id)


def get_all_topics(db: Session) -> list[Topic]:
    return db.query(Topic).order_by(Topic.created_at).all()


def get_topics_page(
    db: Session, page: int, limit: int, block_id: str | None = None, search: str | None = None
) -> tuple[list[Topic], int]:
    q = db.query(Topic)
    if block_id:
        q = q.filter(Topic.block_id == block_id)
    if search and search.strip():
        term = search.strip()
        q = q.filter(or_(base.contains_ci(Topic.name, term), base.contains_ci(Topic.description, term)))
    return base.paginate(q.order_by(Topic.name, Topic.id), page, limit)


def topic_exists(db: Session, topic_id: str) -> bool:
    return base.row_exists(db, Topic, topic_id)


def create_topic(db: Session, data: dict) -> Topic:
    topic = base.insert(db, Topic(**_clean(db, data, partial=False)), TopicError)
    logger.info("Created topic id=%s block_id=%s", topic.id, topic.block_id)
    return topic


def update_topic(db: Session, topic_id: str, data: dict) -> Topic:
    topic = base.require_row(db, Topic, topic_id, TopicError)
    base.apply_changes(topic, _clean(db, data, partial=True))
    base.save(db, TopicError, "update")
    db.refresh(topic)
    return topic


def delete_topic(db: Session, topic_id: str) -> Topic:
    topic = base.require_row(db, Topic, topic_id, TopicError)
    with atomic(db):
        db.query(Quiz).filter(Quiz.topic_id == topic_id).update({Quiz.topic_id: None}, synchronize_session=False)
        base.remove(db, topic, TopicError)
    logger.info("Deleted topic id=%s", topic_id)
    return topic


def get_topic_block(db: Session, topic_id: str) -> Block | None:
    topic = base.require_row(db, Topic, topic_id, TopicError)
    return base.get_row(db, Block, topic.block_id)


def get_topic_quizzes(db: Session, topic_id: str) -> list[Quiz]:
    base.require_row(db, Topic, topic_id, TopicError)
    return db.query(Quiz).filter(Quiz.topic_id == topic_id).order_by(Quiz.created_at, Quiz.id).all()


def get_topics_by_block(db: Session, block_id: str) -> list[Topic]:
    return db.query(Topic).filter(Topic.block_id == block_id).order_by(Topic.created_at, Topic.id).all()


def search_topics_by_name(db: Session, term: str) -> list[Topic]:
    """Topics whose name contains term, ignoring case."""
    term = base.required_search_term(term, TopicError)
    return db.query(Topic).filter(base.contains_ci(Topic.name, term)).order_by(Topic.name, Topic.id).all()


def search_topics(db: Session, term: str) -> list[Topic]:
    """Topics whose name or description contains term, ignoring case."""
    term = base.required_search_term(term, TopicError)
    return (
        db.query(Topic)
        .filter(or_(base.contains_ci(Topic.name, term), base.contains_ci(Topic.description, term)))
        .order_by(Topic.name, Topic.id)
        .all()
    )


def get_random_topic(db: Session, rng: random.Random | None = None) -> Topic | None:
    return base.random_row(db.query(Topic), Topic, rng)


def get_random_topic_by_block(db: Session, block_id: str, rng: random.Random | None = None) -> Topic | None:
    return base.random_row(db.query(Topic).filter(Topic.block_id == block_id), Topic, rng)
