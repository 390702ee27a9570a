"""
Folder access: CRUD plus tree traversal.

The parent/child relation must stay acyclic. Any change of parent_id walks the ancestor chain
of the proposed parent before anything is written; if the folder itself shows up (or the
parent is the folder), FolderCycleError is raised and the folder keeps its old parent.

Deleting a folder that still has child folders or blocks is refused unless force=True. With
force, the whole subtree of folders is deleted and every block inside it moves to the root.
"""
import logging

from sqlalchemy.orm import Session

from nuclear.database import atomic
from nuclear.errors import ErrorKind, FolderCycleError, FolderError
from nuclear.models.block import Block
from nuclear.models.folder import Folder
from nuclear.models.user import User
from nuclear.services import base

logger = logging.getLogger(__name__)

CREATE_FIELDS = ("name", "description", "author_id", "parent_id")
UPDATABLE_FIELDS = ("name", "description", "parent_id")


def get_folder_by_id(db: Session, folder_id: str) -> Folder | None:
    return base.get_row(db, Folder, folder_id)


def get_all_folders(db: Session) -> list[Folder]:
    return db.query(Folder).order_by(Folder.created_at).all()


def get_folders_page(
    db: Session, page: int, limit: int, author_id: str | None = None, root_only: bool = False
) -> tuple[list[Folder], int]:
    q = db.query(Folder)
    if author_id:
        q = q.filter(Folder.author_id == author_id)
    if root_only:
        q = q.filter(Folder.parent_id.is_(None))
    return base.paginate(q.order_by(Folder.name, Folder.id), page, limit)


def folder_exists(db: Session, folder_id: str) -> bool:
    return base.row_exists(db, Folder, folder_id)


def _parent_ids(db: Session, start_id: str | None):
    """Yield start_id, then its parent, grandparent, ... Stops at a root or on a repeated id."""
    seen = set()
    current = start_id
    while current and current not in seen:
        seen.add(current)
        yield current
        current = db.query(Folder.parent_id).filter(Folder.id == current).scalar()


def is_descendant(db: Session, ancestor_id: str, folder_id: str) -> bool:
    """True if folder_id sits somewhere below ancestor_id (a folder is not its own descendant)."""
    if ancestor_id == folder_id:
        return False
    return any(fid == ancestor_id for fid in _parent_ids(db, folder_id))


def _check_parent(db: Session, folder_id: str | None, parent_id: str | None) -> None:
    if parent_id is None:
        return
    base.check_reference(db, Folder, parent_id, "parent_id", FolderError)
    if folder_id is None:
        return
    if parent_id == folder_id or folder_id in _parent_ids(db, parent_id):
        logger.warning("Rejected folder move: %s under %s would create a cycle", folder_id, parent_id)
        raise FolderCycleError(folder_id, parent_id)


def create_folder(db: Session, data: dict) -> Folder:
    base.reject_unknown_fields(data, CREATE_FIELDS, FolderError)
    name = base.required_text(data, "name", FolderError)
    description = base.optional_text(data, "description", FolderError)
    author_id = base.required_text(data, "author_id", FolderError)
    parent_id = data.get("parent_id")
    base.check_reference(db, User, author_id, "author_id", FolderError)
    _check_parent(db, None, parent_id)
    folder = base.insert(
        db, Folder(name=name, description=description, author_id=author_id, parent_id=parent_id), FolderError
    )
    logger.info("Created folder id=%s parent_id=%s", folder.id, parent_id)
    return folder


def update_folder(db: Session, folder_id: str, data: dict) -> Folder:
    """Partial update; a parent_id change is cycle-checked before anything is written."""
    folder = base.require_row(db, Folder, folder_id, FolderError)
    base.reject_unknown_fields(data, UPDATABLE_FIELDS, FolderError)
    changes = {}
    if "name" in data:
        changes["name"] = base.required_text(data, "name", FolderError)
    if "description" in data:
        changes["description"] = base.optional_text(data, "description", FolderError)
    if "parent_id" in data:
        _check_parent(db, folder_id, data["parent_id"])
        changes["parent_id"] = data["parent_id"]
    base.apply_changes(folder, changes)
    base.save(db, FolderError, "update")
    db.refresh(folder)
    return folder


def move_folder(db: Session, folder_id: str, parent_id: str | None) -> Folder:
    """Re-parent a folder; None moves it to the root."""
    return update_folder(db, folder_id, {"parent_id": parent_id})


def delete_folder(db: Session, folder_id: str, force: bool = False) -> Folder:
    folder = base.require_row(db, Folder, folder_id, FolderError)
    child_count = db.query(Folder).filter(Folder.parent_id == folder_id).count()
    block_count = db.query(Block).filter(Block.folder_id == folder_id).count()
    if (child_count or block_count) and not force:
        logger.warning("Refused delete of non-empty folder %s", folder_id)
        raise FolderError(
            ErrorKind.CONFLICT,
            f"Folder {folder_id} contains {child_count} folder(s) and {block_count} block(s); "
            "empty it first or delete with force",
        )
    subtree = [folder_id] + [f.id for f in get_folder_descendants(db, folder_id)]
    with atomic(db):
        db.query(Block).filter(Block.folder_id.in_(subtree)).update(
            {Block.folder_id: None}, synchronize_session=False
        )
        # Deepest first so no remaining row points at a deleted parent
        for fid in reversed(subtree[1:]):
            base.remove(db, base.require_row(db, Folder, fid, FolderError), FolderError)
        base.remove(db, folder, FolderError)
    logger.info("Deleted folder id=%s (%s descendant folder(s))", folder_id, len(subtree) - 1)
    return folder


def get_folder_children(db: Session, folder_id: str) -> list[Folder]:
    base.require_row(db, Folder, folder_id, FolderError)
    return db.query(Folder).filter(Folder.parent_id == folder_id).order_by(Folder.created_at, Folder.id).all()


def get_folder_parent(db: Session, folder_id: str) -> Folder | None:
    folder = base.require_row(db, Folder, folder_id, FolderError)
    return base.get_row(db, Folder, folder.parent_id)


def get_folder_blocks(db: Session, folder_id: str) -> list[Block]:
    base.require_row(db, Folder, folder_id, FolderError)
    return db.query(Block).filter(Block.folder_id == folder_id).order_by(Block.created_at, Block.id).all()


def get_folder_owner(db: Session, folder_id: str) -> User:
    folder = base.require_row(db, Folder, folder_id, FolderError)
    return folder.author


def get_root_folders(db: Session, author_id: str | None = None) -> list[Folder]:
    q = db.query(Folder).filter(Folder.parent_id.is_(None))
    if author_id:
        q = q.filter(Folder.author_id == author_id)
    return q.order_by(Folder.name, Folder.id).all()


def get_folder_ancestors(db: Session, folder_id: str) -> list[Folder]:
    """Ancestors nearest first (parent, grandparent, ..., root)."""
    folder = base.require_row(db, Folder, folder_id, FolderError)
    return [base.get_row(db, Folder, fid) for fid in _parent_ids(db, folder.parent_id)]


def get_folder_descendants(db: Session, folder_id: str) -> list[Folder]:
    """All folders below folder_id, breadth first."""
    base.require_row(db, Folder, folder_id, FolderError)
    out: list[Folder] = []
    seen = {folder_id}
    frontier = [folder_id]
    while frontier:
        children = db.query(Folder).filter(Folder.parent_id.in_(frontier)).order_by(Folder.created_at, Folder.id).all()
        children = [c for c in children if c.id not in seen]
        seen.update(c.id for c in children)
        out.extend(children)
        frontier = [c.id for c in children]
    return out
