"""
Fill-in-the-blank API: CRUD, search, random pick, answer check.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from nuclear.api.deps import PageParams
from nuclear.database import get_db
from nuclear.errors import ErrorKind, FillInTheBlankError
from nuclear.ratelimit import enforce_rate_limit
from nuclear.schemas.common import MessageResponse, Pagination
from nuclear.schemas.fill_in_the_blank import (
    AnswerCheckRequest,
    AnswerCheckResponse,
    FillInTheBlankCreate,
    FillInTheBlankListResponse,
    FillInTheBlankResponse,
    FillInTheBlankUpdate,
)
from nuclear.services import fill_in_the_blanks as fitb_service

router = APIRouter(
    prefix="/api/fill-in-the-blanks",
    tags=["fill-in-the-blanks"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.get("", response_model=FillInTheBlankListResponse)
def list_fill_in_the_blanks(
    params: PageParams = Depends(),
    block_id: str | None = None,
    search: str | None = Query(None, max_length=255),
    db: Session = Depends(get_db),
):
    items, total = fitb_service.get_fill_in_the_blanks_page(db, params.page, params.limit, block_id=block_id, search=search)
    return FillInTheBlankListResponse(
        fill_in_the_blanks=[FillInTheBlankResponse.model_validate(f) for f in items],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.get("/random", response_model=FillInTheBlankResponse)
def random_fill_in_the_blank(block_id: str | None = None, db: Session = Depends(get_db)):
    if block_id:
        fitb = fitb_service.get_random_fill_in_the_blank_by_block(db, block_id)
    else:
        fitb = fitb_service.get_random_fill_in_the_blank(db)
    if fitb is None:
        raise FillInTheBlankError(ErrorKind.NOT_FOUND, "No fill-in-the-blank exercises available")
    return fitb


@router.post("", response_model=FillInTheBlankResponse, status_code=status.HTTP_201_CREATED)
def create_fill_in_the_blank(data: FillInTheBlankCreate, db: Session = Depends(get_db)):
    return fitb_service.create_fill_in_the_blank(db, data.model_dump(mode="json", exclude_unset=True))


@router.get("/{fitb_id}", response_model=FillInTheBlankResponse)
def get_fill_in_the_blank(fitb_id: str, db: Session = Depends(get_db)):
    fitb = fitb_service.get_fill_in_the_blank_by_id(db, fitb_id)
    if fitb is None:
        raise FillInTheBlankError.not_found(fitb_id)
    return fitb


@router.put("/{fitb_id}", response_model=FillInTheBlankResponse)
def update_fill_in_the_blank(fitb_id: str, data: FillInTheBlankUpdate, db: Session = Depends(get_db)):
    return fitb_service.update_fill_in_the_blank(db, fitb_id, data.model_dump(mode="json", exclude_unset=True))


@router.delete("/{fitb_id}", response_model=MessageResponse)
def delete_fill_in_the_blank(fitb_id: str, db: Session = Depends(get_db)):
    fitb_service.delete_fill_in_the_blank(db, fitb_id)
    return MessageResponse(message="Fill-in-the-blank deleted successfully")


@router.post("/{fitb_id}/check", response_model=AnswerCheckResponse)
def check_answer(fitb_id: str, data: AnswerCheckRequest, db: Session = Depends(get_db)):
    return AnswerCheckResponse(id=fitb_id, correct=fitb_service.check_fill_in_the_blank_answer(db, fitb_id, data.answer))
