from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm.exc import StaleDataError

from qna_service.db.models.qna import DeleteHistory as DeleteHistoryModel
from qna_service.db.repositories import DeleteHistoryRepository, QuestionRepository
from qna_service.domains.identity.entities import User
from qna_service.domains.qna import ContentType, DenialReason, PermissionDenied
from qna_service.domains.qna.schemas import AnswerCreate, QuestionCreate
from qna_service.domains.qna.services import QnaService

from conftest import persist_users


def _seed(run_db, question_writer: User, *answer_writers: User) -> int:
    async def scenario(session):
        writers = {question_writer, *answer_writers}
        await persist_users(session, *writers)
        service = QnaService(session)
        question = await service.create_question(
            QuestionCreate(title="How do closures work?", contents="..."),
            question_writer,
        )
        for writer in answer_writers:
            await service.add_answer(question.id, AnswerCreate(contents="answer"), writer)
        return question.id

    return run_db(scenario)


async def _history_count(session) -> int:
    result = await session.execute(select(func.count()).select_from(DeleteHistoryModel))
    return result.scalar_one()


def test_delete_question_persists_flags_and_history(run_db, alice: User) -> None:
    question_id = _seed(run_db, alice, alice, alice)

    histories = run_db(lambda session: QnaService(session).delete_question(question_id, alice))

    assert [h.content_type for h in histories] == [
        ContentType.QUESTION,
        ContentType.ANSWER,
        ContentType.ANSWER,
    ]
    assert histories[0].content_id == question_id

    async def reload(session):
        question = await QuestionRepository(session).get_by_id(question_id)
        visible = await QnaService(session).get_question(question_id)
        return question, visible, await _history_count(session)

    question, visible, count = run_db(reload)

    assert question.deleted is True
    assert all(answer.deleted for answer in question.answers)
    assert [h.content_id for h in histories[1:]] == [a.id for a in question.answers]
    assert visible is None
    assert count == 3


def test_denied_delete_writes_nothing(run_db, alice: User, bob: User) -> None:
    question_id = _seed(run_db, alice, alice, bob)

    with pytest.raises(PermissionDenied) as excinfo:
        run_db(lambda session: QnaService(session).delete_question(question_id, alice))
    assert excinfo.value.reason is DenialReason.FOREIGN_ANSWER_EXISTS

    async def reload(session):
        question = await QuestionRepository(session).get_by_id(question_id)
        return question, await _history_count(session)

    question, count = run_db(reload)

    assert question.deleted is False
    assert not any(answer.deleted for answer in question.answers)
    assert count == 0


def test_delete_by_non_owner_is_denied(run_db, alice: User, bob: User) -> None:
    question_id = _seed(run_db, alice)

    with pytest.raises(PermissionDenied, match="not the question owner"):
        run_db(lambda session: QnaService(session).delete_question(question_id, bob))


def test_missing_question_is_reported_as_none(run_db, alice: User) -> None:
    async def scenario(session):
        service = QnaService(session)
        return (
            await service.get_question(999),
            await service.delete_question(999, alice),
            await service.add_answer(999, AnswerCreate(contents="x"), alice),
        )

    assert run_db(scenario) == (None, None, None)


def test_deleted_question_cannot_be_answered_or_deleted_again(run_db, alice: User) -> None:
    question_id = _seed(run_db, alice)
    run_db(lambda session: QnaService(session).delete_question(question_id, alice))

    async def scenario(session):
        service = QnaService(session)
        return (
            await service.add_answer(question_id, AnswerCreate(contents="late"), alice),
            await service.delete_question(question_id, alice),
        )

    assert run_db(scenario) == (None, None)


def test_overlapping_deletes_write_history_once(run_sessions, run_db, alice: User) -> None:
    question_id = _seed(run_db, alice, alice)

    async def scenario(session_factory):
        async with session_factory() as first, session_factory() as second:
            first_question = await QuestionRepository(first).get_by_id(question_id)
            second_question = await QuestionRepository(second).get_by_id(question_id)

            histories = first_question.delete(alice).unwrap()
            await QuestionRepository(first).save_deletion(first_question)
            await DeleteHistoryRepository(first).add_all(histories)
            await first.commit()

            late_histories = second_question.delete(alice).unwrap()
            with pytest.raises(StaleDataError):
                await QuestionRepository(second).save_deletion(second_question)
                await DeleteHistoryRepository(second).add_all(late_histories)
            await second.rollback()

        async with session_factory() as session:
            return await _history_count(session)

    assert run_sessions(scenario) == 2


def test_answer_added_after_load_aborts_deletion(run_sessions, run_db, alice: User, bob: User) -> None:
    question_id = _seed(run_db, alice, alice)
    run_db(lambda session: persist_users(session, bob))

    async def scenario(session_factory):
        async with session_factory() as session:
            question = await QuestionRepository(session).get_by_id(question_id)

            async with session_factory() as other:
                await QnaService(other).add_answer(question_id, AnswerCreate(contents="late"), bob)

            histories = question.delete(alice).unwrap()
            with pytest.raises(StaleDataError):
                await QuestionRepository(session).save_deletion(question)
                await DeleteHistoryRepository(session).add_all(histories)
            await session.rollback()

        async with session_factory() as session:
            reloaded = await QuestionRepository(session).get_by_id(question_id)
            return reloaded, await _history_count(session)

    question, count = run_sessions(scenario)

    assert question.deleted is False
    assert [answer.writer for answer in question.answers] == [alice, bob]
    assert not any(answer.deleted for answer in question.answers)
    assert count == 0
