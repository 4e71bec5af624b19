from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
import logging

from qna_service.db.repositories.question_repository import QuestionRepository
from qna_service.db.repositories.delete_history_repository import DeleteHistoryRepository
from qna_service.domains.identity.entities import User
from qna_service.domains.qna.entities import Answer, Question
from qna_service.domains.qna.history import DeleteHistory
from qna_service.domains.qna.schemas import QuestionCreate, AnswerCreate

logger = logging.getLogger(__name__)


class QnaService:
    """Сервис для работы с вопросами и ответами"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.question_repository = QuestionRepository(session)
        self.delete_history_repository = DeleteHistoryRepository(session)

    async def create_question(self, question_data: QuestionCreate, writer: User) -> Question:
        """Создание нового вопроса"""
        question = Question(
            title=question_data.title,
            contents=question_data.contents
        ).write_by(writer)

        await self.question_repository.add(question)
        await self.session.commit()
        return question

    async def get_question(self, question_id: int) -> Optional[Question]:
        """Получение вопроса; удаленный вопрос считается отсутствующим"""
        question = await self.question_repository.get_by_id(question_id)

        if not question or question.deleted:
            return None

        return question

    async def add_answer(
        self,
        question_id: int,
        answer_data: AnswerCreate,
        writer: User
    ) -> Optional[Answer]:
        """Добавление ответа к вопросу"""
        question = await self.get_question(question_id)

        if not question:
            return None

        answer = Answer(writer=writer, contents=answer_data.contents)
        question.add_answer(answer)

        await self.question_repository.add_answer(answer)
        await self.session.commit()
        return answer

    async def delete_question(self, question_id: int, login_user: User) -> Optional[List[DeleteHistory]]:
        """Удаление вопроса вместе с ответами и запись журнала удаления.

        Флаги удаления и журнал сохраняются в одной транзакции.
        """
        question = await self.get_question(question_id)

        if not question:
            return None

        result = question.delete(login_user)
        if not result.ok:
            logger.info(
                "Deletion of question %s by user %s denied: %s",
                question_id, login_user.uuid, result.error
            )
        histories = result.unwrap()

        try:
            await self.question_repository.save_deletion(question)
            await self.delete_history_repository.add_all(histories)
            await self.session.commit()
        except StaleDataError:
            await self.session.rollback()
            logger.warning("Question %s changed while being deleted, rolled back", question_id)
            raise
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception("Failed to persist deletion of question %s", question_id)
            raise

        logger.info(
            "Question %s deleted by user %s, %d history records written",
            question_id, login_user.uuid, len(histories)
        )
        return histories
