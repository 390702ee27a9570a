"""Error kinds and their HTTP status mapping."""
import pytest

from nuclear.errors import (
    STATUS_BY_KIND,
    BlockError,
    DataAccessError,
    ErrorKind,
    FolderCycleError,
    FolderError,
    status_for,
)


def test_every_kind_has_a_status():
    assert set(STATUS_BY_KIND) == set(ErrorKind)


@pytest.mark.parametrize(
    "kind, status",
    [
        (ErrorKind.VALIDATION, 400),
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.CONFLICT, 409),
        (ErrorKind.RELATIONSHIP, 404),
        (ErrorKind.OPERATION, 500),
    ],
)
def test_status_for(kind, status):
    assert status_for(kind) == status


def test_constructors_carry_entity_and_details():
    err = BlockError.not_found("b1")
    assert err.kind is ErrorKind.NOT_FOUND
    assert str(err) == "Block b1 not found"
    err = BlockError.invalid("title", "must not be empty")
    assert err.details == [{"field": "title", "message": "must not be empty"}]
    err = BlockError.missing_reference("folder_id", "Folder", "f1")
    assert err.kind is ErrorKind.RELATIONSHIP
    assert isinstance(err, DataAccessError)


def test_cycle_error_is_a_folder_validation_error():
    err = FolderCycleError("child", "parent")
    assert isinstance(err, FolderError)
    assert err.kind is ErrorKind.VALIDATION
    assert err.details[0]["field"] == "parent_id"
