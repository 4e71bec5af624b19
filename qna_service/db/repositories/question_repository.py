from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from qna_service.db.models.qna import Question as QuestionModel, Answer as AnswerModel
from qna_service.db.repositories.user_repository import UserRepository
from qna_service.domains.qna.common import DatedAt
from qna_service.domains.qna.entities import Answer, Question


class QuestionRepository:
    """Репозиторий для работы с вопросами и ответами.

    Изменения только добавляются в сессию; фиксацию транзакции
    выполняет сервис.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, question: Question) -> Question:
        """Сохранение нового вопроса и присвоение ему id"""
        if question.writer is None:
            raise ValueError("Question must be written by a user before saving")

        db_question = QuestionModel(
            title=question.title,
            contents=question.contents,
            deleted=question.deleted,
            writer_id=question.writer.uuid,
            created_at=question.dated.created_at,
            updated_at=question.dated.updated_at
        )

        self.session.add(db_question)
        await self.session.flush()
        question.id = db_question.id
        return question

    async def add_answer(self, answer: Answer) -> Answer:
        """Сохранение нового ответа, уже прикрепленного к вопросу"""
        if answer.question_id is None:
            raise ValueError("Answer must be attached to a persisted question")

        db_answer = AnswerModel(
            contents=answer.contents,
            deleted=answer.deleted,
            writer_id=answer.writer.uuid,
            question_id=answer.question_id,
            created_at=answer.dated.created_at,
            updated_at=answer.dated.updated_at
        )

        self.session.add(db_answer)
        await self.session.flush()
        answer.id = db_answer.id
        return answer

    async def get_by_id(self, question_id: int) -> Optional[Question]:
        """Загрузка агрегата вопроса вместе с авторами и ответами"""
        result = await self.session.execute(
            select(QuestionModel)
            .where(QuestionModel.id == question_id)
            .options(
                selectinload(QuestionModel.writer),
                selectinload(QuestionModel.answers).selectinload(AnswerModel.writer)
            )
            .execution_options(populate_existing=True)
        )
        db_question = result.scalar_one_or_none()
        return self._to_domain(db_question) if db_question else None

    async def save_deletion(self, question: Question) -> None:
        """Сохранение флагов удаления вопроса и всех его ответов.

        Вопрос обновляется, только если он еще не удален и набор живых
        ответов в БД совпадает с загруженным агрегатом. Иначе выбрасывается
        StaleDataError, и сервис откатывает транзакцию.
        """
        result = await self.session.execute(
            update(QuestionModel)
            .where(QuestionModel.id == question.id, QuestionModel.deleted.is_(False))
            .values(deleted=question.deleted, updated_at=question.dated.updated_at)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StaleDataError(f"Question {question.id} was deleted concurrently")

        live_answers = await self.session.execute(
            select(func.count())
            .select_from(AnswerModel)
            .where(AnswerModel.question_id == question.id, AnswerModel.deleted.is_(False))
        )
        if live_answers.scalar_one() != len(question.answers):
            raise StaleDataError(f"Answers of question {question.id} changed concurrently")

        for answer in question.answers:
            await self.session.execute(
                update(AnswerModel)
                .where(AnswerModel.id == answer.id)
                .values(deleted=answer.deleted, updated_at=answer.dated.updated_at)
                .execution_options(synchronize_session=False)
            )

    def _to_domain(self, db_question: QuestionModel) -> Question:
        """Преобразование модели БД в агрегат"""
        question = Question(
            id=db_question.id,
            title=db_question.title,
            contents=db_question.contents,
            deleted=db_question.deleted,
            dated=DatedAt(db_question.created_at, db_question.updated_at)
        )
        question.write_by(UserRepository.to_domain(db_question.writer))

        for db_answer in db_question.answers:
            question.add_answer(Answer(
                id=db_answer.id,
                writer=UserRepository.to_domain(db_answer.writer),
                contents=db_answer.contents,
                deleted=db_answer.deleted,
                dated=DatedAt(db_answer.created_at, db_answer.updated_at)
            ))

        return question
