"""
Fill-in-the-blank access: CRUD, search, uniform random pick, answer checking.
A sentence must contain the blank marker (___).
"""
import logging
import random
import re

from sqlalchemy import or_
from sqlalchemy.orm import Session

from nuclear.errors import FillInTheBlankError
from nuclear.models.block import Block
from nuclear.models.fill_in_the_blank import BLANK_MARKER, FillInTheBlank
from nuclear.models.types import Difficulty
from nuclear.services import base

logger = logging.getLogger(__name__)

FIELDS = ("sentence", "answer", "block_id", "hint", "difficulty")
DIFFICULTIES = [d.value for d in Difficulty]

_WHITESPACE = re.compile(r"\s+")


def _normalize_answer(value: str) -> str:
    return _WHITESPACE.sub(" ", value or "").strip().lower()


def _clean(db: Session, data: dict, partial: bool) -> dict:
    base.reject_unknown_fields(data, FIELDS, FillInTheBlankError)
    out = {}
    if not partial or "sentence" in data:
        sentence = base.required_text(data, "sentence", FillInTheBlankError)
        if BLANK_MARKER not in sentence:
            raise FillInTheBlankError.invalid("sentence", f"must contain a blank marker ({BLANK_MARKER})")
        out["sentence"] = sentence
    if not partial or "answer" in data:
        out["answer"] = base.required_text(data, "answer", FillInTheBlankError)
    if not partial or "block_id" in data:
        base.check_reference(db, Block, data.get("block_id"), "block_id", FillInTheBlankError)
        out["block_id"] = data.get("block_id")
    if not partial or "hint" in data:
        out["hint"] = base.optional_text(data, "hint", FillInTheBlankError)
    if not partial or "difficulty" in data:
        difficulty = base.optional_text(data, "difficulty", FillInTheBlankError)
        out["difficulty"] = base.one_of(
            difficulty and difficulty.lower(), "difficulty", DIFFICULTIES, FillInTheBlankError
        )
    return out


def get_fill_in_the_blank_by_id(db: Session, fitb_id: str) -> FillInTheBlank | None:
    return base.get_row(db, FillInTheBlank, fitb_id)


def get_all_fill_in_the_blanks(db: Session) -> list[FillInTheBlank]:
    return db.query(FillInTheBlank).order_by(FillInTheBlank.created_at).all()


def get_fill_in_the_blanks_page(
    db: Session, page: int, limit: int, block_id: str | None = None, search: str | None = None
) -> tuple[list[FillInTheBlank], int]:
    q = db.query(FillInTheBlank)
    if block_id:
        q = q.filter(FillInTheBlank.block_id == block_id)
    if search and search.strip():
        q = q.filter(_matches(search.strip()))
    return base.paginate(q.order_by(FillInTheBlank.created_at.desc(), FillInTheBlank.id), page, limit)


def fill_in_the_blank_exists(db: Session, fitb_id: str) -> bool:
    return base.row_exists(db, FillInTheBlank, fitb_id)


def create_fill_in_the_blank(db: Session, data: dict) -> FillInTheBlank:
    fitb = base.insert(db, FillInTheBlank(**_clean(db, data, partial=False)), FillInTheBlankError)
    logger.info("Created fill-in-the-blank id=%s block_id=%s", fitb.id, fitb.block_id)
    return fitb


def update_fill_in_the_blank(db: Session, fitb_id: str, data: dict) -> FillInTheBlank:
    fitb = base.require_row(db, FillInTheBlank, fitb_id, FillInTheBlankError)
    base.apply_changes(fitb, _clean(db, data, partial=True))
    base.save(db, FillInTheBlankError, "update")
    db.refresh(fitb)
    return fitb


def delete_fill_in_the_blank(db: Session, fitb_id: str) -> FillInTheBlank:
    fitb = base.require_row(db, FillInTheBlank, fitb_id, FillInTheBlankError)
    base.remove(db, fitb, FillInTheBlankError)
    logger.info("Deleted fill-in-the-blank id=%s", fitb_id)
    return fitb


def get_fill_in_the_blank_block(db: Session, fitb_id: str) -> Block | None:
    fitb = base.require_row(db, FillInTheBlank, fitb_id, FillInTheBlankError)
    return base.get_row(db, Block, fitb.block_id)


def get_fill_in_the_blanks_by_block(db: Session, block_id: str) -> list[FillInTheBlank]:
    return (
        db.query(FillInTheBlank)
        .filter(FillInTheBlank.block_id == block_id)
        .order_by(FillInTheBlank.created_at, FillInTheBlank.id)
        .all()
    )


def _matches(term: str):
    return or_(
        base.contains_ci(FillInTheBlank.sentence, term),
        base.contains_ci(FillInTheBlank.answer, term),
        base.contains_ci(FillInTheBlank.hint, term),
    )


def search_fill_in_the_blanks(db: Session, term: str) -> list[FillInTheBlank]:
    """Rows whose sentence, answer or hint contains term, ignoring case."""
    term = base.required_search_term(term, FillInTheBlankError)
    return db.query(FillInTheBlank).filter(_matches(term)).order_by(FillInTheBlank.created_at, FillInTheBlank.id).all()


def get_random_fill_in_the_blank(db: Session, rng: random.Random | None = None) -> FillInTheBlank | None:
    return base.random_row(db.query(FillInTheBlank), FillInTheBlank, rng)


def get_random_fill_in_the_blank_by_block(
    db: Session, block_id: str, rng: random.Random | None = None
) -> FillInTheBlank | None:
    """Uniform pick among this block's rows only; None if the block has none."""
    q = db.query(FillInTheBlank).filter(FillInTheBlank.block_id == block_id)
    return base.random_row(q, FillInTheBlank, rng)


def check_fill_in_the_blank_answer(db: Session, fitb_id: str, answer: str) -> bool:
    """Case-insensitive comparison with collapsed whitespace."""
    fitb = base.require_row(db, FillInTheBlank, fitb_id, FillInTheBlankError)
    if answer is None or not str(answer).strip():
        raise FillInTheBlankError.invalid("answer", "must not be empty")
    return _normalize_answer(str(answer)) == _normalize_answer(fitb.answer)
