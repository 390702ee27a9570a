"""Unit tests for folder access: cycle prevention, traversal, delete with and without force."""
import pytest

from nuclear.errors import ErrorKind, FolderCycleError, FolderError
from nuclear.models.block import Block
from nuclear.services import blocks as block_service
from nuclear.services import folders as folder_service


@pytest.fixture
def owner(make_user):
    return make_user(mode="TEACHER")


@pytest.fixture
def chain(db, owner):
    """a -> b -> c (c is the deepest)."""
    a = folder_service.create_folder(db, {"name": "a", "author_id": owner.id})
    b = folder_service.create_folder(db, {"name": "b", "author_id": owner.id, "parent_id": a.id})
    c = folder_service.create_folder(db, {"name": "c", "author_id": owner.id, "parent_id": b.id})
    return a, b, c


def test_moving_folder_under_its_descendant_is_rejected(db, chain):
    a, b, c = chain
    with pytest.raises(FolderCycleError) as exc:
        folder_service.move_folder(db, a.id, c.id)
    assert exc.value.kind is ErrorKind.VALIDATION
    assert exc.value.folder_id == a.id and exc.value.parent_id == c.id
    db.expire_all()
    assert folder_service.get_folder_by_id(db, a.id).parent_id is None


def test_folder_cannot_be_its_own_parent(db, chain):
    a, _, _ = chain
    with pytest.raises(FolderCycleError):
        folder_service.update_folder(db, a.id, {"parent_id": a.id})


def test_move_to_root_and_sideways(db, owner, chain):
    a, b, c = chain
    other = folder_service.create_folder(db, {"name": "other", "author_id": owner.id})
    assert folder_service.move_folder(db, c.id, other.id).parent_id == other.id
    assert folder_service.move_folder(db, b.id, None).parent_id is None
    assert {f.id for f in folder_service.get_root_folders(db)} == {a.id, b.id, other.id}


def test_missing_parent_is_relationship_error(db, owner):
    with pytest.raises(FolderError) as exc:
        folder_service.create_folder(db, {"name": "x", "author_id": owner.id, "parent_id": "nope"})
    assert exc.value.kind is ErrorKind.RELATIONSHIP


def test_ancestors_and_descendants(db, chain):
    a, b, c = chain
    assert [f.id for f in folder_service.get_folder_ancestors(db, c.id)] == [b.id, a.id]
    assert [f.id for f in folder_service.get_folder_descendants(db, a.id)] == [b.id, c.id]
    assert [f.id for f in folder_service.get_folder_children(db, a.id)] == [b.id]
    assert folder_service.get_folder_parent(db, b.id).id == a.id
    assert folder_service.get_folder_parent(db, a.id) is None
    assert folder_service.is_descendant(db, a.id, c.id)
    assert not folder_service.is_descendant(db, c.id, a.id)
    assert not folder_service.is_descendant(db, a.id, a.id)


def test_delete_non_empty_folder_requires_force(db, owner, chain):
    a, _, _ = chain
    with pytest.raises(FolderError) as exc:
        folder_service.delete_folder(db, a.id)
    assert exc.value.kind is ErrorKind.CONFLICT
    assert folder_service.folder_exists(db, a.id)


def test_force_delete_removes_subtree_and_moves_blocks_to_root(db, owner, chain):
    a, b, c = chain
    block = block_service.create_block(
        db, {"title": "Deep", "content": "C", "author_id": owner.id, "folder_id": c.id}
    )
    folder_service.delete_folder(db, a.id, force=True)
    for folder in (a, b, c):
        assert not folder_service.folder_exists(db, folder.id)
    assert db.get(Block, block.id).folder_id is None


def test_delete_empty_folder(db, owner):
    folder = folder_service.create_folder(db, {"name": "empty", "author_id": owner.id})
    deleted = folder_service.delete_folder(db, folder.id)
    assert deleted.name == "empty"
    assert folder_service.get_folder_by_id(db, folder.id) is None


def test_root_and_child_scenario(db, owner):
    root = folder_service.create_folder(db, {"name": "Root", "author_id": owner.id})
    child = folder_service.create_folder(db, {"name": "Child", "author_id": owner.id, "parent_id": root.id})
    assert [f.name for f in folder_service.get_folder_children(db, root.id)] == ["Child"]
    assert folder_service.get_folder_owner(db, child.id).id == owner.id
    with pytest.raises(FolderCycleError):
        folder_service.move_folder(db, root.id, child.id)


def test_rename_keeps_parent(db, chain):
    a, b, _ = chain
    renamed = folder_service.update_folder(db, b.id, {"name": "Renamed"})
    assert renamed.name == "Renamed"
    db.expire_all()
    stored = folder_service.get_folder_by_id(db, b.id)
    assert stored.name == "Renamed"
    assert stored.parent_id == a.id
    assert stored.description is None
