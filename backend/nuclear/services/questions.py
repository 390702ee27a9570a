"""
Question access. type is free-form (e.g. multiple_choice); difficulty is easy | medium | hard.
"""
import logging

from sqlalchemy.orm import Session

from nuclear.errors import QuestionError
from nuclear.models.block import Block
from nuclear.models.question import Question
from nuclear.models.types import Difficulty
from nuclear.services import base

logger = logging.getLogger(__name__)

FIELDS = ("text", "block_id", "type", "difficulty", "points")
DIFFICULTIES = [d.value for d in Difficulty]


def _clean(db: Session, data: dict, partial: bool) -> dict:
    base.reject_unknown_fields(data, FIELDS, QuestionError)
    out = {}
    if not partial or "text" in data:
        out["text"] = base.required_text(data, "text", QuestionError)
    if not partial or "block_id" in data:
        base.check_reference(db, Block, data.get("block_id"), "block_id", QuestionError)
        out["block_id"] = data.get("block_id")
    if not partial or "type" in data:
        out["type"] = base.optional_text(data, "type", QuestionError)
    if not partial or "difficulty" in data:
        difficulty = base.optional_text(data, "difficulty", QuestionError)
        out["difficulty"] = base.one_of(difficulty and difficulty.lower(), "difficulty", DIFFICULTIES, QuestionError)
    if not partial or "points" in data:
        out["points"] = base.optional_int(data, "points", QuestionError, minimum=0)
    return out


def get_question_by_id(db: Session, question_id: str) -> Question | None:
    return base.get_row(db, Question, question_id)


def get_all_questions(db: Session) -> list[Question]:
    return db.query(Question).order_by(Question.created_at).all()


def get_questions_page(db: Session, page: int, limit: int, block_id: str | None = None) -> tuple[list[Question], int]:
    q = db.query(Question)
    if block_id:
        q = q.filter(Question.block_id == block_id)
    return base.paginate(q.order_by(Question.created_at.desc(), Question.id), page, limit)


def question_exists(db: Session, question_id: str) -> bool:
    return base.row_exists(db, Question, question_id)


def create_question(db: Session, data: dict) -> Question:
    question = base.insert(db, Question(**_clean(db, data, partial=False)), QuestionError)
    logger.info("Created question id=%s block_id=%s", question.id, question.block_id)
    return question


def update_question(db: Session, question_id: str, data: dict) -> Question:
    question = base.require_row(db, Question, question_id, QuestionError)
    base.apply_changes(question, _clean(db, data, partial=True))
    base.save(db, QuestionError, "update")
    db.refresh(question)
    return question


def delete_question(db: Session, question_id: str) -> Question:
    question = base.require_row(db, Question, question_id, QuestionError)
    base.remove(db, question, QuestionError)
    logger.info("Deleted question id=%s", question_id)
    return question


def get_question_block(db: Session, question_id: str) -> Block | None:
    question = base.require_row(db, Question, question_id, QuestionError)
    return base.get_row(db, Block, question.block_id)


def get_questions_by_block(db: Session, block_id: str) -> list[Question]:
    return db.query(Question).filter(Question.block_id == block_id).order_by(Question.created_at, Question.id).all()
