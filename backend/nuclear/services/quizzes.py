"""
Quiz access. block_id and topic_id are optional references; time_limit is in minutes.
"""
import logging

from sqlalchemy.orm import Session

from nuclear.errors import QuizError
from nuclear.models.block import Block
from nuclear.models.quiz import Quiz
from nuclear.models.topic import Topic
from nuclear.services import base

logger = logging.getLogger(__name__)

FIELDS = ("title", "description", "block_id", "topic_id", "time_limit", "passing_score")


def _clean(db: Session, data: dict, partial: bool) -> dict:
    base.reject_unknown_fields(data, FIELDS, QuizError)
    out = {}
    if not partial or "title" in data:
        out["title"] = base.required_text(data, "title", QuizError)
    if not partial or "description" in data:
        out["description"] = base.optional_text(data, "description", QuizError)
    if not partial or "block_id" in data:
        base.check_reference(db, Block, data.get("block_id"), "block_id", QuizError)
        out["block_id"] = data.get("block_id")
    if not partial or "topic_id" in data:
        base.check_reference(db, Topic, data.get("topic_id"), "topic_id", QuizError)
        out["topic_id"] = data.get("topic_id")
    if not partial or "time_limit" in data:
        out["time_limit"] = base.optional_int(data, "time_limit", QuizError, minimum=1)
    if not partial or "passing_score" in data:
        out["passing_score"] = base.optional_int(data, "passing_score", QuizError, minimum=0, maximum=100)
    return out


def get_quiz_by_id(db: Session, quiz_id: str) -> Quiz | None:
    return base.get_row(db, Quiz, quiz_id)


def get_all_quizzes(db: Session) -> list[Quiz]:
    return db.query(Quiz).order_by(Quiz.created_at).all()


def get_quizzes_page(
    db: Session, page: int, limit: int, block_id: str | None = None, topic_id: str | None = None
) -> tuple[list[Quiz], int]:
    q = db.query(Quiz)
    if block_id:
        q = q.filter(Quiz.block_id == block_id)
    if topic_id:
        q = q.filter(Quiz.topic_id == topic_id)
    return base.paginate(q.order_by(Quiz.created_at.desc(), Quiz.id), page, limit)


def quiz_exists(db: Session, quiz_id: str) -> bool:
    return base.row_exists(db, Quiz, quiz_id)


def create_quiz(db: Session, data: dict) -> Quiz:
    quiz = base.insert(db, Quiz(**_clean(db, data, partial=False)), QuizError)
    logger.info("Created quiz id=%s block_id=%s", quiz.id, quiz.block_id)
    return quiz


def update_quiz(db: Session, quiz_id: str, data: dict) -> Quiz:
    quiz = base.require_row(db, Quiz, quiz_id, QuizError)
    base.apply_changes(quiz, _clean(db, data, partial=True))
    base.save(db, QuizError, "update")
    db.refresh(quiz)
    return quiz


def delete_quiz(db: Session, quiz_id: str) -> Quiz:
    quiz = base.require_row(db, Quiz, quiz_id, QuizError)
    base.remove(db, quiz, QuizError)
    logger.info("Deleted quiz id=%s", quiz_id)
    return quiz


def get_quiz_block(db: Session, quiz_id: str) -> Block | None:
    quiz = base.require_row(db, Quiz, quiz_id, QuizError)
    return base.get_row(db, Block, quiz.block_id)


def get_quiz_topic(db: Session, quiz_id: str) -> Topic | None:
    quiz = base.require_row(db, Quiz, quiz_id, QuizError)
    return base.get_row(db, Topic, quiz.topic_id)


def get_quizzes_by_block(db: Session, block_id: str) -> list[Quiz]:
    return db.query(Quiz).filter(Quiz.block_id == block_id).order_by(Quiz.created_at, Quiz.id).all()


def get_quizzes_by_topic(db: Session, topic_id: str) -> list[Quiz]:
    return db.query(Quiz).filter(Quiz.topic_id == topic_id).order_by(Quiz.created_at, Quiz.id).all()
