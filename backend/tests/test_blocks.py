"""Unit tests for block access: references, publish state, transactional create with topics, delete detaching."""
import pytest

from nuclear.errors import BlockError, ErrorKind, TopicError
from nuclear.models.block import Block
from nuclear.models.points_update import PointsUpdate
from nuclear.models.quiz import Quiz
from nuclear.models.topic import Topic
from nuclear.services import blocks as block_service
from nuclear.services import folders as folder_service
from nuclear.services import points_updates as points_service
from nuclear.services import quizzes as quiz_service
from nuclear.services import topics as topic_service


@pytest.fixture
def author(make_user):
    return make_user(mode="TEACHER")


def test_create_block_defaults_unpublished(db, author):
    block = block_service.create_block(db, {"title": "Fission", "content": "Splitting nuclei", "author_id": author.id})
    assert block.published is False
    assert block.folder_id is None
    assert block_service.block_exists(db, block.id)
    assert block_service.get_block_author(db, block.id).id == author.id


def test_create_block_requires_author(db):
    with pytest.raises(BlockError) as exc:
        block_service.create_block(db, {"title": "T", "content": "C"})
    assert exc.value.kind is ErrorKind.VALIDATION


@pytest.mark.parametrize("field", ["author_id", "folder_id"])
def test_create_block_missing_reference(db, author, field):
    data = {"title": "T", "content": "C", "author_id": author.id, field: "does-not-exist"}
    with pytest.raises(BlockError) as exc:
        block_service.create_block(db, data)
    assert exc.value.kind is ErrorKind.RELATIONSHIP
    assert exc.value.details[0]["field"] == field


def test_publish_and_unpublish(db, author):
    block = block_service.create_block(db, {"title": "T", "content": "C", "author_id": author.id})
    assert block_service.set_block_published(db, block.id, True).published is True
    assert [b.id for b in block_service.get_published_blocks(db)] == [block.id]
    assert block_service.set_block_published(db, block.id, False).published is False
    assert block_service.get_published_blocks(db) == []


def test_published_must_be_bool(db, author):
    block = block_service.create_block(db, {"title": "T", "content": "C", "author_id": author.id})
    with pytest.raises(BlockError) as exc:
        block_service.update_block(db, block.id, {"published": "yes"})
    assert exc.value.kind is ErrorKind.VALIDATION


def test_create_block_with_topics(db, author):
    block, topics = block_service.create_block_with_topics(
        db,
        {"title": "Reactors", "content": "C", "author_id": author.id},
        [{"name": "Moderators"}, {"name": "Control rods", "examples": ["boron", "cadmium"]}],
    )
    assert [t.block_id for t in topics] == [block.id, block.id]
    assert {t.name for t in block_service.get_block_topics(db, block.id)} == {"Moderators", "Control rods"}


def test_create_block_with_invalid_topic_rolls_back(db, author):
    with pytest.raises(TopicError):
        block_service.create_block_with_topics(
            db,
            {"title": "Reactors", "content": "C", "author_id": author.id},
            [{"name": "Valid"}, {"name": "   "}],
        )
    assert db.query(Block).count() == 0
    assert db.query(Topic).count() == 0


def test_delete_block_detaches_dependents(db, author):
    block = block_service.create_block(db, {"title": "T", "content": "C", "author_id": author.id})
    quiz = quiz_service.create_quiz(db, {"title": "Q", "block_id": block.id})
    topic = topic_service.create_topic(db, {"name": "Topic", "block_id": block.id})
    entry = points_service.create_points_update(db, {"points": 10, "block_id": block.id})
    deleted = block_service.delete_block(db, block.id)
    assert deleted.title == "T"
    assert block_service.get_block_by_id(db, block.id) is None
    assert db.get(Quiz, quiz.id).block_id is None
    assert db.get(Topic, topic.id).block_id is None
    assert db.get(PointsUpdate, entry.id).block_id is None


def test_block_context_loads_author_and_folder(db, author):
    folder = folder_service.create_folder(db, {"name": "Physics", "author_id": author.id})
    block = block_service.create_block(
        db, {"title": "T", "content": "C", "author_id": author.id, "folder_id": folder.id}
    )
    loaded = block_service.get_block_context(db, block.id)
    assert loaded.author.email == author.email
    assert loaded.folder.name == "Physics"
    with pytest.raises(BlockError) as exc:
        block_service.get_block_context(db, "missing")
    assert exc.value.kind is ErrorKind.NOT_FOUND


def test_blocks_page_filters(db, author, make_user):
    other = make_user(mode="TEACHER")
    a = block_service.create_block(db, {"title": "A", "content": "C", "author_id": author.id, "published": True})
    block_service.create_block(db, {"title": "B", "content": "C", "author_id": author.id})
    block_service.create_block(db, {"title": "C", "content": "C", "author_id": other.id})
    items, total = block_service.get_blocks_page(db, page=1, limit=10, author_id=author.id)
    assert total == 2
    items, total = block_service.get_blocks_page(db, page=1, limit=10, published=True)
    assert [b.id for b in items] == [a.id]
    items, total = block_service.get_blocks_page(db, page=2, limit=2)
    assert total == 3 and len(items) == 1


def test_author_and_folder_lookups(db, author):
    folder = folder_service.create_folder(db, {"name": "Reactors", "author_id": author.id})
    loose = block_service.create_block(db, {"title": "Loose", "content": "C", "author_id": author.id})
    filed = block_service.create_block(
        db, {"title": "Filed", "content": "C", "author_id": author.id, "folder_id": folder.id}
    )
    assert [b.id for b in block_service.get_all_blocks(db)] == [loose.id, filed.id]
    assert [b.id for b in block_service.get_blocks_by_author(db, author.id)] == [loose.id, filed.id]
    assert [b.id for b in block_service.get_blocks_by_folder(db, folder.id)] == [filed.id]
    assert block_service.get_block_folder(db, filed.id).id == folder.id
    assert block_service.get_block_folder(db, loose.id) is None
    assert [b.id for b in folder_service.get_folder_blocks(db, folder.id)] == [filed.id]


def test_update_block_changes_only_given_fields(db, author):
    folder = folder_service.create_folder(db, {"name": "Reactors", "author_id": author.id})
    block = block_service.create_block(
        db, {"title": "Old", "content": "Moderators slow neutrons", "author_id": author.id, "folder_id": folder.id}
    )
    updated = block_service.update_block(db, block.id, {"title": "New"})
    assert updated.title == "New"
    db.expire_all()
    stored = block_service.get_block_by_id(db, block.id)
    assert stored.title == "New"
    assert stored.content == "Moderators slow neutrons"
    assert stored.folder_id == folder.id
    assert stored.author_id == author.id
    assert stored.published is False
