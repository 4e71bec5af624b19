"""Сценарии удаления агрегата вопроса"""

from __future__ import annotations

from datetime import datetime

import pytest

from qna_service.domains.identity.entities import User
from qna_service.domains.qna import (
    Answer,
    ContentType,
    DeleteHistory,
    DenialReason,
    PermissionDenied,
    Question,
)

from conftest import make_user

DELETED_AT = datetime(2024, 5, 1, 12, 30)


def _question(question_id: int, writer: User, *answers: Answer) -> Question:
    question = Question(id=question_id, title="How do I read a file?", contents="...").write_by(writer)
    for answer in answers:
        question.add_answer(answer)
    return question


def test_delete_by_non_owner_is_denied(alice: User, bob: User) -> None:
    answer = Answer(id=10, writer=alice, contents="Use open()")
    question = _question(1, alice, answer)

    result = question.delete(bob, deleted_at=DELETED_AT)

    assert not result.ok
    assert result.error.reason is DenialReason.NOT_QUESTION_OWNER
    assert str(result.error) == "not the question owner"
    assert result.histories == ()
    assert question.deleted is False
    assert answer.deleted is False


def test_delete_with_foreign_answer_is_denied(alice: User, bob: User) -> None:
    own = Answer(id=10, writer=alice, contents="mine")
    foreign = Answer(id=11, writer=bob, contents="theirs")
    question = _question(1, alice, own, foreign)
    updated_at = question.dated.updated_at

    result = question.delete(alice, deleted_at=DELETED_AT)

    assert not result.ok
    assert result.error.reason is DenialReason.FOREIGN_ANSWER_EXISTS
    assert str(result.error) == "foreign answer exists"
    assert question.deleted is False
    assert own.deleted is False
    assert foreign.deleted is False
    assert question.dated.updated_at == updated_at


def test_unwrap_raises_permission_denied(alice: User, bob: User) -> None:
    question = _question(1, alice, Answer(id=11, writer=bob))

    with pytest.raises(PermissionDenied) as excinfo:
        question.delete(alice).unwrap()

    assert excinfo.value.reason is DenialReason.FOREIGN_ANSWER_EXISTS
    assert isinstance(excinfo.value, PermissionError)


def test_delete_by_owner_marks_everything_and_returns_history(alice: User) -> None:
    answer = Answer(id=20, writer=alice, contents="answer")
    question = _question(2, alice, answer)

    histories = question.delete(alice, deleted_at=DELETED_AT).unwrap()

    assert histories == [
        DeleteHistory(ContentType.QUESTION, 2, alice, DELETED_AT),
        DeleteHistory(ContentType.ANSWER, 20, alice, DELETED_AT),
    ]
    assert question.deleted is True
    assert answer.deleted is True
    assert question.dated.updated_at == DELETED_AT
    assert answer.dated.updated_at == DELETED_AT


def test_delete_without_answers_returns_single_record(alice: User) -> None:
    question = _question(3, alice)

    histories = question.delete(alice).unwrap()

    assert len(histories) == 1
    assert histories[0].content_type is ContentType.QUESTION
    assert histories[0].content_id == 3
    assert histories[0].writer == alice
    assert question.deleted is True


def test_history_follows_answer_insertion_order(alice: User) -> None:
    answers = [Answer(id=answer_id, writer=alice) for answer_id in (33, 31, 32)]
    question = _question(4, alice, *answers)

    histories = question.delete(alice, deleted_at=DELETED_AT).unwrap()

    assert len(histories) == 1 + len(answers)
    assert [h.content_type for h in histories] == [
        ContentType.QUESTION,
        ContentType.ANSWER,
        ContentType.ANSWER,
        ContentType.ANSWER,
    ]
    assert [h.content_id for h in histories[1:]] == [33, 31, 32]
    assert all(h.created_at == DELETED_AT for h in histories)
    assert all(answer.deleted for answer in question.answers)


def test_owner_check_compares_identity_not_instance(alice: User) -> None:
    same_alice = User(
        uuid=alice.uuid,
        email="other@example.com",
        username="alias",
        password_hash="x",
    )
    question = _question(5, alice, Answer(id=50, writer=alice))

    assert question.delete(same_alice).ok


def test_delete_requires_login_user(alice: User) -> None:
    question = _question(6, alice)

    with pytest.raises(ValueError):
        question.delete(None)

    assert question.deleted is False


def test_delete_requires_bound_writer(alice: User) -> None:
    question = Question(id=7, title="Orphan")

    with pytest.raises(ValueError):
        question.delete(alice)

    assert question.deleted is False


def test_delete_twice_is_rejected(alice: User) -> None:
    question = _question(8, alice)
    question.delete(alice).unwrap()

    with pytest.raises(ValueError):
        question.delete(alice)


def test_delete_with_unsaved_ids_keeps_none_ids(alice: User) -> None:
    carol = make_user("carol")
    question = Question(title="Draft").write_by(carol)
    question.add_answer(Answer(writer=carol))

    histories = question.delete(carol).unwrap()

    assert [h.content_id for h in histories] == [None, None]
    assert all(h.writer == carol for h in histories)
