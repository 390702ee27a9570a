"""Unit tests for quiz and question access: bounds, references, partial updates, delete."""
import pytest

from nuclear.errors import ErrorKind, QuestionError, QuizError
from nuclear.services import blocks as block_service
from nuclear.services import questions as question_service
from nuclear.services import quizzes as quiz_service
from nuclear.services import topics as topic_service


@pytest.fixture
def block(db, make_user):
    author = make_user(mode="TEACHER")
    return block_service.create_block(db, {"title": "T", "content": "C", "author_id": author.id})


@pytest.mark.parametrize(
    "field, value",
    [("time_limit", 0), ("passing_score", 101), ("passing_score", -1), ("time_limit", "ten")],
)
def test_quiz_bounds(db, field, value):
    with pytest.raises(QuizError) as exc:
        quiz_service.create_quiz(db, {"title": "Q", field: value})
    assert exc.value.kind is ErrorKind.VALIDATION
    assert exc.value.details[0]["field"] == field


def test_quiz_references(db, block):
    topic = topic_service.create_topic(db, {"name": "Decay", "block_id": block.id})
    quiz = quiz_service.create_quiz(
        db, {"title": "Q", "block_id": block.id, "topic_id": topic.id, "time_limit": 30, "passing_score": 70}
    )
    assert quiz_service.get_quiz_block(db, quiz.id).id == block.id
    assert quiz_service.get_quiz_topic(db, quiz.id).id == topic.id
    assert [q.id for q in quiz_service.get_quizzes_by_block(db, block.id)] == [quiz.id]
    assert [q.id for q in quiz_service.get_quizzes_by_topic(db, topic.id)] == [quiz.id]
    assert [q.id for q in block_service.get_block_quizzes(db, block.id)] == [quiz.id]
    with pytest.raises(QuizError) as exc:
        quiz_service.create_quiz(db, {"title": "Q", "topic_id": "nope"})
    assert exc.value.kind is ErrorKind.RELATIONSHIP


def test_quiz_update_and_delete(db):
    quiz = quiz_service.create_quiz(db, {"title": "Old", "passing_score": 50})
    updated = quiz_service.update_quiz(db, quiz.id, {"title": "New"})
    assert updated.title == "New" and updated.passing_score == 50
    quiz_service.delete_quiz(db, quiz.id)
    assert not quiz_service.quiz_exists(db, quiz.id)
    with pytest.raises(QuizError) as exc:
        quiz_service.delete_quiz(db, quiz.id)
    assert exc.value.kind is ErrorKind.NOT_FOUND


def test_question_difficulty_and_points(db, block):
    question = question_service.create_question(
        db, {"text": "What is a neutron?", "block_id": block.id, "difficulty": "HARD", "points": 3}
    )
    assert question.difficulty == "hard"
    assert question_service.get_question_block(db, question.id).id == block.id
    assert [q.id for q in question_service.get_questions_by_block(db, block.id)] == [question.id]
    with pytest.raises(QuestionError):
        question_service.update_question(db, question.id, {"points": -1})
    with pytest.raises(QuestionError):
        question_service.update_question(db, question.id, {"difficulty": "brutal"})


def test_question_page(db, block):
    for i in range(3):
        question_service.create_question(db, {"text": f"Q{i}", "block_id": block.id})
    question_service.create_question(db, {"text": "loose"})
    items, total = question_service.get_questions_page(db, page=1, limit=2, block_id=block.id)
    assert total == 3 and len(items) == 2
