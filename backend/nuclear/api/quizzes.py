"""
Quizzes API: CRUD, filter by block or topic.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from nuclear.api.deps import PageParams
from nuclear.database import get_db
from nuclear.errors import QuizError
from nuclear.ratelimit import enforce_rate_limit
from nuclear.schemas.common import MessageResponse, Pagination
from nuclear.schemas.quiz import QuizCreate, QuizListResponse, QuizResponse, QuizUpdate
from nuclear.services import quizzes as quiz_service

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"], dependencies=[Depends(enforce_rate_limit)])


@router.get("", response_model=QuizListResponse)
def list_quizzes(
    params: PageParams = Depends(),
    block_id: str | None = None,
    topic_id: str | None = None,
    db: Session = Depends(get_db),
):
    quizzes, total = quiz_service.get_quizzes_page(db, params.page, params.limit, block_id=block_id, topic_id=topic_id)
    return QuizListResponse(
        quizzes=[QuizResponse.model_validate(q) for q in quizzes],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.post("", response_model=QuizResponse, status_code=status.HTTP_201_CREATED)
def create_quiz(data: QuizCreate, db: Session = Depends(get_db)):
    return quiz_service.create_quiz(db, data.model_dump(mode="json", exclude_unset=True))


@router.get("/{quiz_id}", response_model=QuizResponse)
def get_quiz(quiz_id: str, db: Session = Depends(get_db)):
    quiz = quiz_service.get_quiz_by_id(db, quiz_id)
    if quiz is None:
        raise QuizError.not_found(quiz_id)
    return quiz


@router.put("/{quiz_id}", response_model=QuizResponse)
def update_quiz(quiz_id: str, data: QuizUpdate, db: Session = Depends(get_db)):
    return quiz_service.update_quiz(db, quiz_id, data.model_dump(mode="json", exclude_unset=True))


@router.delete("/{quiz_id}", response_model=MessageResponse)
def delete_quiz(quiz_id: str, db: Session = Depends(get_db)):
    quiz_service.delete_quiz(db, quiz_id)
    return MessageResponse(message="Quiz deleted successfully")
