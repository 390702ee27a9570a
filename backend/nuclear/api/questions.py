"""
Questions API: CRUD, filter by block.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from nuclear.api.deps import PageParams
from nuclear.database import get_db
from nuclear.errors import QuestionError
from nuclear.ratelimit import enforce_rate_limit
from nuclear.schemas.common import MessageResponse, Pagination
from nuclear.schemas.question import QuestionCreate, QuestionListResponse, QuestionResponse, QuestionUpdate
from nuclear.services import questions as question_service

router = APIRouter(prefix="/api/questions", tags=["questions"], dependencies=[Depends(enforce_rate_limit)])


@router.get("", response_model=QuestionListResponse)
def list_questions(params: PageParams = Depends(), block_id: str | None = None, db: Session = Depends(get_db)):
    questions, total = question_service.get_questions_page(db, params.page, params.limit, block_id=block_id)
    return QuestionListResponse(
        questions=[QuestionResponse.model_validate(q) for q in questions],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
def create_question(data: QuestionCreate, db: Session = Depends(get_db)):
    return question_service.create_question(db, data.model_dump(mode="json", exclude_unset=True))


@router.get("/{question_id}", response_model=QuestionResponse)
def get_question(question_id: str, db: Session = Depends(get_db)):
    question = question_service.get_question_by_id(db, question_id)
    if question is None:
        raise QuestionError.not_found(question_id)
    return question


@router.put("/{question_id}", response_model=QuestionResponse)
def update_question(question_id: str, data: QuestionUpdate, db: Session = Depends(get_db)):
    return question_service.update_question(db, question_id, data.model_dump(mode="json", exclude_unset=True))


@router.delete("/{question_id}", response_model=MessageResponse)
def delete_question(question_id: str, db: Session = Depends(get_db)):
    question_service.delete_question(db, question_id)
    return MessageResponse(message="Question deleted successfully")
