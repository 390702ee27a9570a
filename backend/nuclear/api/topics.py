"""
Topics API: CRUD, search, random pick, quizzes under a topic.
/random is declared before /{topic_id} so it is not captured as an id.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from nuclear.api.deps import PageParams
from nuclear.database import get_db
from nuclear.errors import ErrorKind, TopicError
from nuclear.ratelimit import enforce_rate_limit
from nuclear.schemas.common import MessageResponse, Pagination
from nuclear.schemas.quiz import QuizResponse
from nuclear.schemas.topic import TopicCreate, TopicListResponse, TopicResponse, TopicUpdate
from nuclear.services import topics as topic_service

router = APIRouter(prefix="/api/topics", tags=["topics"], dependencies=[Depends(enforce_rate_limit)])


@router.get("", response_model=TopicListResponse)
def list_topics(
    params: PageParams = Depends(),
    block_id: str | None = None,
    search: str | None = Query(None, max_length=255),
    db: Session = Depends(get_db),
):
    """List topics by name; search matches name or description, ignoring case."""
    topics, total = topic_service.get_topics_page(db, params.page, params.limit, block_id=block_id, search=search)
    return TopicListResponse(
        topics=[TopicResponse.model_validate(t) for t in topics],
        pagination=Pagination.build(params.page, params.limit, total),
    )


@router.get("/random", response_model=TopicResponse)
def random_topic(block_id: str | None = None, db: Session = Depends(get_db)):
    """One topic chosen uniformly at random, optionally within a block; 404 when there are none."""
    if block_id:
        topic = topic_service.get_random_topic_by_block(db, block_id)
    else:
        topic = topic_service.get_random_topic(db)
    if topic is None:
        raise TopicError(ErrorKind.NOT_FOUND, "No topics available")
    return topic


@router.post("", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
def create_topic(data: TopicCreate, db: Session = Depends(get_db)):
    return topic_service.create_topic(db, data.model_dump(mode="json", exclude_unset=True))


@router.get("/{topic_id}", response_model=TopicResponse)
def get_topic(topic_id: str, db: Session = Depends(get_db)):
    topic = topic_service.get_topic_by_id(db, topic_id)
    if topic is None:
        raise TopicError.not_found(topic_id)
    return topic


@router.put("/{topic_id}", response_model=TopicResponse)
def update_topic(topic_id: str, data: TopicUpdate, db: Session = Depends(get_db)):
    return topic_service.update_topic(db, topic_id, data.model_dump(mode="json", exclude_unset=True))


@router.delete("/{topic_id}", response_model=MessageResponse)
def delete_topic(topic_id: str, db: Session = Depends(get_db)):
    topic_service.delete_topic(db, topic_id)
    return MessageResponse(message="Topic deleted successfully")


@router.get("/{topic_id}/quizzes", response_model=list[QuizResponse])
def list_topic_quizzes(topic_id: str, db: Session = Depends(get_db)):
    return topic_service.get_topic_quizzes(db, topic_id)
