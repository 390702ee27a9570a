"""Unit tests for fill-in-the-blank access: blank marker, random picks, answer checking, search."""
import random

import pytest

from nuclear.errors import ErrorKind, FillInTheBlankError
from nuclear.services import blocks as block_service
from nuclear.services import fill_in_the_blanks as fitb_service


@pytest.fixture
def blocks(db, make_user):
    author = make_user(mode="TEACHER")
    return [
        block_service.create_block(db, {"title": f"Block {i}", "content": "C", "author_id": author.id})
        for i in range(2)
    ]


def _make(db, block_id=None, n=0):
    return fitb_service.create_fill_in_the_blank(
        db, {"sentence": f"Sentence {n}: the ___ splits.", "answer": "nucleus", "block_id": block_id}
    )


def test_sentence_must_contain_blank(db):
    with pytest.raises(FillInTheBlankError) as exc:
        fitb_service.create_fill_in_the_blank(db, {"sentence": "No blank here", "answer": "x"})
    assert exc.value.kind is ErrorKind.VALIDATION
    assert exc.value.details[0]["field"] == "sentence"


def test_difficulty_is_normalized(db):
    fitb = fitb_service.create_fill_in_the_blank(
        db, {"sentence": "A ___ B", "answer": "x", "difficulty": "Medium"}
    )
    assert fitb.difficulty == "medium"
    with pytest.raises(FillInTheBlankError):
        fitb_service.update_fill_in_the_blank(db, fitb.id, {"difficulty": "impossible"})


def test_random_by_block_only_returns_that_block(db, blocks):
    first, second = blocks
    ours = {_make(db, first.id, n).id for n in range(3)}
    for n in range(4):
        _make(db, second.id, n)
    rng = random.Random(42)
    picks = [fitb_service.get_random_fill_in_the_blank_by_block(db, first.id, rng=rng) for _ in range(100)]
    assert all(p.block_id == first.id for p in picks)
    # Uniform over three rows: every one shows up in 100 draws
    assert {p.id for p in picks} == ours


def test_random_empty(db, blocks):
    assert fitb_service.get_random_fill_in_the_blank(db) is None
    assert fitb_service.get_random_fill_in_the_blank_by_block(db, blocks[0].id) is None


@pytest.mark.parametrize(
    "answer, expected",
    [("nucleus", True), ("  NUCLEUS ", True), ("Nu cleus", False), ("atom", False)],
)
def test_check_answer(db, answer, expected):
    fitb = _make(db)
    assert fitb_service.check_fill_in_the_blank_answer(db, fitb.id, answer) is expected


def test_check_answer_unknown_id(db):
    with pytest.raises(FillInTheBlankError) as exc:
        fitb_service.check_fill_in_the_blank_answer(db, "missing", "x")
    assert exc.value.kind is ErrorKind.NOT_FOUND


def test_search_and_by_block(db, blocks):
    hit = fitb_service.create_fill_in_the_blank(
        db, {"sentence": "Uranium-235 is ___", "answer": "fissile", "hint": "Think REACTORS", "block_id": blocks[0].id}
    )
    _make(db)
    assert [f.id for f in fitb_service.search_fill_in_the_blanks(db, "reactors")] == [hit.id]
    assert [f.id for f in fitb_service.get_fill_in_the_blanks_by_block(db, blocks[0].id)] == [hit.id]
    assert fitb_service.get_fill_in_the_blank_block(db, hit.id).id == blocks[0].id


def test_update_hint_keeps_the_rest(db, blocks):
    fitb = _make(db, blocks[0].id)
    fitb_service.update_fill_in_the_blank(db, fitb.id, {"hint": "Think of the atom's core"})
    db.expire_all()
    stored = fitb_service.get_fill_in_the_blank_by_id(db, fitb.id)
    assert stored.hint == "Think of the atom's core"
    assert stored.sentence == "Sentence 0: the ___ splits."
    assert stored.answer == "nucleus"
    assert stored.block_id == blocks[0].id
