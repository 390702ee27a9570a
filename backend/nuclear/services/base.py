"""
Helpers shared by the per-entity access modules: lookups, reference checks, input cleaning,
commit with error translation, pagination and random row selection.
Every helper takes the module's error class so failures carry the right entity name.
"""
import logging
import random
from typing import Any, Iterable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from nuclear.database import in_atomic
from nuclear.errors import DataAccessError, ErrorKind

logger = logging.getLogger(__name__)


def get_row(db: Session, model, record_id: str | None):
    if not record_id:
        return None
    return db.query(model).filter(model.id == record_id).first()


def require_row(db: Session, model, record_id: str, error_cls: type[DataAccessError]):
    """Return the row or raise error_cls NOT_FOUND."""
    row = get_row(db, model, record_id)
    if row is None:
        raise error_cls.not_found(record_id)
    return row


def row_exists(db: Session, model, record_id: str | None) -> bool:
    if not record_id:
        return False
    return db.query(model.id).filter(model.id == record_id).first() is not None


def check_reference(db: Session, model, record_id: str | None, field: str, error_cls: type[DataAccessError]) -> None:
    """Optional foreign key: None passes; any other value must name an existing row."""
    if record_id is None:
        return
    if not row_exists(db, model, record_id):
        raise error_cls.missing_reference(field, model.__name__, record_id)


def reject_unknown_fields(data: dict, allowed: Iterable[str], error_cls: type[DataAccessError]) -> None:
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise error_cls(
            ErrorKind.VALIDATION,
            f"Unknown field(s): {', '.join(unknown)}",
            details=[{"field": f, "message": "field is not allowed"} for f in unknown],
        )


def required_text(data: dict, field: str, error_cls: type[DataAccessError]) -> str:
    """Required string field: present, a string, non-empty after stripping."""
    value = data.get(field)
    if value is None:
        raise error_cls.invalid(field, "field is required")
    if not isinstance(value, str):
        raise error_cls.invalid(field, "must be a string")
    value = value.strip()
    if not value:
        raise error_cls.invalid(field, "must not be empty")
    return value


def optional_text(data: dict, field: str, error_cls: type[DataAccessError]) -> str | None:
    """Optional string field: None stays None; blank strings become None."""
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise error_cls.invalid(field, "must be a string")
    return value.strip() or None


def optional_int(
    data: dict,
    field: str,
    error_cls: type[DataAccessError],
    minimum: int | None = None,
    maximum: int | None = None,
) -> int | None:
    value = data.get(field)
    if value is None:
        return None
    # bool is an int subclass; True is not a score
    if isinstance(value, bool) or not isinstance(value, int):
        raise error_cls.invalid(field, "must be an integer")
    if minimum is not None and value < minimum:
        raise error_cls.invalid(field, f"must be at least {minimum}")
    if maximum is not None and value > maximum:
        raise error_cls.invalid(field, f"must be at most {maximum}")
    return value


def one_of(value: str | None, field: str, choices: Iterable[str], error_cls: type[DataAccessError]) -> str | None:
    if value is None:
        return None
    choices = list(choices)
    if value not in choices:
        raise error_cls.invalid(field, f"must be one of {', '.join(choices)}")
    return value


def required_search_term(term: str | None, error_cls: type[DataAccessError]) -> str:
    if term is None or not str(term).strip():
        raise error_cls.invalid("search", "search term must not be empty")
    return str(term).strip()


def apply_changes(row, changes: dict) -> None:
    for key, value in changes.items():
        setattr(row, key, value)


def save(db: Session, error_cls: type[DataAccessError], action: str) -> None:
    """
    Flush pending changes; commit unless inside atomic(). IntegrityError becomes CONFLICT,
    other SQLAlchemy errors become OPERATION. The session is rolled back on failure.
    """
    try:
        db.flush()
        if not in_atomic(db):
            db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("%s %s: integrity error: %s", error_cls.entity, action, getattr(e, "orig", e))
        raise error_cls(ErrorKind.CONFLICT, f"{error_cls.entity} {action} violates a uniqueness or reference constraint") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s %s failed: %s", error_cls.entity, action, e)
        raise error_cls(ErrorKind.OPERATION, f"{error_cls.entity} {action} failed") from e


def insert(db: Session, row, error_cls: type[DataAccessError]):
    db.add(row)
    save(db, error_cls, "create")
    if not in_atomic(db):
        db.refresh(row)
    return row


def remove(db: Session, row, error_cls: type[DataAccessError]):
    """Delete row; the returned instance keeps its loaded column values."""
    db.refresh(row)
    db.delete(row)
    save(db, error_cls, "delete")
    return row


def normalize_page(page: int | None, limit: int | None, default_limit: int, max_limit: int) -> tuple[int, int]:
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else default_limit
    return page, min(limit, max_limit)


def paginate(query: Query, page: int, limit: int) -> tuple[list, int]:
    """Return (items for page, total). page is 1-based."""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total


def random_row(query: Query, model, rng: random.Random | None = None):
    """Uniform pick among the rows of query; None when empty."""
    count = query.order_by(None).count()
    if count == 0:
        return None
    offset = (rng or random).randrange(count)
    return query.order_by(model.id).offset(offset).limit(1).first()


def contains_ci(column, term: str):
    """
    Case-insensitive substring match; LIKE wildcards in term are matched literally.
    On SQLite this relies on the Unicode lower() installed by nuclear.database.
    """
    return column.icontains(term, autoescape=True)
