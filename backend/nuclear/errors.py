"""
Error kinds raised by the data-access layer and their HTTP status codes.
Each entity module raises its own subclass (UserError, BlockError, ...) tagged with an ErrorKind;
the API layer maps kinds to statuses only through STATUS_BY_KIND.
"""
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"  # malformed or missing input
    NOT_FOUND = "not_found"  # target id absent
    CONFLICT = "conflict"  # uniqueness violation or refused delete
    RELATIONSHIP = "relationship"  # referenced foreign row absent
    OPERATION = "operation"  # unexpected storage failure


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.RELATIONSHIP: 404,
    ErrorKind.OPERATION: 500,
}


def status_for(kind: ErrorKind) -> int:
    """HTTP status for an error kind. KeyError means a kind was added without a status."""
    return STATUS_BY_KIND[kind]


class DataAccessError(Exception):
    """Base for all data-access failures. details: optional list of {field, message} dicts."""

    entity = "Record"

    def __init__(self, kind: ErrorKind, message: str, details: list[dict] | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details

    @classmethod
    def not_found(cls, record_id: str):
        return cls(ErrorKind.NOT_FOUND, f"{cls.entity} {record_id} not found")

    @classmethod
    def invalid(cls, field: str, message: str):
        return cls(ErrorKind.VALIDATION, f"Invalid {field}: {message}", details=[{"field": field, "message": message}])

    @classmethod
    def missing_reference(cls, field: str, target: str, record_id: str):
        return cls(
            ErrorKind.RELATIONSHIP,
            f"{target} {record_id} referenced by {field} does not exist",
            details=[{"field": field, "message": f"{target} not found"}],
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value!r}, {self.message!r})"


class UserError(DataAccessError):
    entity = "User"


class BlockError(DataAccessError):
    entity = "Block"


class FolderError(DataAccessError):
    entity = "Folder"


class FolderCycleError(FolderError):
    """Raised when a parent assignment would make a folder its own ancestor."""

    def __init__(self, folder_id: str, parent_id: str):
        super().__init__(
            ErrorKind.VALIDATION,
            f"Folder {parent_id} cannot be the parent of folder {folder_id}: it would create a cycle",
            details=[{"field": "parent_id", "message": "circular folder reference"}],
        )
        self.folder_id = folder_id
        self.parent_id = parent_id


class QuizError(DataAccessError):
    entity = "Quiz"


class QuestionError(DataAccessError):
    entity = "Question"


class TopicError(DataAccessError):
    entity = "Topic"


class FillInTheBlankError(DataAccessError):
    entity = "Fill-in-the-blank"


class PointsUpdateError(DataAccessError):
    entity = "Points update"
