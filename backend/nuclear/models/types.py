"""
Column types and defaults shared by all models. Work on both SQLite (for local testing) and PostgreSQL.
Ids are UUID4 strings generated client-side; timestamps are UTC and set in Python so
rows created within the same second still order correctly.
"""
import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import String

ID_LENGTH = 36
IdType = String(ID_LENGTH)


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserMode(str, Enum):
    """User role."""
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
