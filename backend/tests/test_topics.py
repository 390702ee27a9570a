"""Unit tests for topic access: search, random selection, examples, delete detaching quizzes."""
import random

import pytest

from nuclear.errors import ErrorKind, TopicError
from nuclear.models.quiz import Quiz
from nuclear.services import blocks as block_service
from nuclear.services import quizzes as quiz_service
from nuclear.services import topics as topic_service


@pytest.fixture
def block(db, make_user):
    author = make_user(mode="TEACHER")
    return block_service.create_block(db, {"title": "Physics", "content": "C", "author_id": author.id})


def test_search_matches_name_or_description_ignoring_case(db):
    physics = topic_service.create_topic(db, {"name": "Nuclear Physics"})
    fission = topic_service.create_topic(db, {"name": "Fission", "description": "How NUCLEAR reactors split atoms"})
    topic_service.create_topic(db, {"name": "Organic Chemistry"})
    found = topic_service.search_topics(db, "nuclear")
    assert {t.id for t in found} == {physics.id, fission.id}
    by_name = topic_service.search_topics_by_name(db, "nuclear")
    assert [t.id for t in by_name] == [physics.id]


def test_search_ignores_case_beyond_ascii(db):
    energy = topic_service.create_topic(db, {"name": "ÉNERGIE nucléaire"})
    topic_service.create_topic(db, {"name": "Radioactivité"})
    assert [t.id for t in topic_service.search_topics_by_name(db, "énergie")] == [energy.id]
    assert [t.id for t in topic_service.search_topics(db, "NUCLÉAIRE")] == [energy.id]


@pytest.mark.parametrize("term", ["", "   ", None])
def test_search_rejects_empty_term(db, term):
    with pytest.raises(TopicError) as exc:
        topic_service.search_topics(db, term)
    assert exc.value.kind is ErrorKind.VALIDATION


def test_random_topic_empty_is_none(db, block):
    assert topic_service.get_random_topic(db) is None
    assert topic_service.get_random_topic_by_block(db, block.id) is None


def test_random_topic_by_block_stays_in_block(db, block):
    inside = {topic_service.create_topic(db, {"name": f"in-{i}", "block_id": block.id}).id for i in range(3)}
    topic_service.create_topic(db, {"name": "outside"})
    rng = random.Random(7)
    picks = {topic_service.get_random_topic_by_block(db, block.id, rng=rng).id for _ in range(50)}
    assert picks == inside


def test_examples_must_be_strings(db):
    topic = topic_service.create_topic(db, {"name": "T", "examples": [" U-235 ", "", "Pu-239"]})
    assert topic.examples == ["U-235", "Pu-239"]
    with pytest.raises(TopicError) as exc:
        topic_service.create_topic(db, {"name": "T", "examples": "U-235"})
    assert exc.value.details[0]["field"] == "examples"


def test_update_topic_partial(db, block):
    topic = topic_service.create_topic(db, {"name": "Old", "description": "keep"})
    updated = topic_service.update_topic(db, topic.id, {"name": "New", "block_id": block.id})
    assert updated.name == "New"
    assert updated.description == "keep"
    assert topic_service.get_topic_block(db, topic.id).id == block.id
    assert [t.id for t in topic_service.get_topics_by_block(db, block.id)] == [topic.id]


def test_delete_topic_detaches_quizzes(db):
    topic = topic_service.create_topic(db, {"name": "Decay"})
    quiz = quiz_service.create_quiz(db, {"title": "Half-lives", "topic_id": topic.id})
    assert [q.id for q in topic_service.get_topic_quizzes(db, topic.id)] == [quiz.id]
    topic_service.delete_topic(db, topic.id)
    assert not topic_service.topic_exists(db, topic.id)
    assert db.get(Quiz, quiz.id).topic_id is None
