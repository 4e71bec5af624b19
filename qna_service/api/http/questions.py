from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from qna_service.core.auth import get_current_user
from qna_service.core.db import get_db
from qna_service.domains.identity.entities import User
from qna_service.domains.qna.entities import Answer, Question
from qna_service.domains.qna.errors import PermissionDenied
from qna_service.domains.qna.schemas import (
    QuestionCreate, QuestionResponse, AnswerCreate, AnswerResponse,
    DeleteHistoryResponse, QuestionDeleteResponse
)
from qna_service.domains.qna.services import QnaService

router = APIRouter(prefix="/questions", tags=["questions"])


def _answer_response(answer: Answer) -> AnswerResponse:
    return AnswerResponse(
        id=answer.id,
        contents=answer.contents,
        writer_id=answer.writer.uuid,
        question_id=answer.question_id,
        deleted=answer.deleted,
        created_at=answer.dated.created_at,
        updated_at=answer.dated.updated_at
    )


def _question_response(question: Question) -> QuestionResponse:
    return QuestionResponse(
        id=question.id,
        title=question.title,
        contents=question.contents,
        writer_id=question.writer.uuid,
        deleted=question.deleted,
        answers=[_answer_response(answer) for answer in question.answers],
        created_at=question.dated.created_at,
        updated_at=question.dated.updated_at
    )


@router.post("/", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_question(
    question_data: QuestionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового вопроса"""
    qna_service = QnaService(db)

    try:
        question = await qna_service.create_question(question_data, current_user)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return _question_response(question)


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Получение вопроса вместе с ответами"""
    qna_service = QnaService(db)

    question = await qna_service.get_question(question_id)

    if not question:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question not found"
        )

    return _question_response(question)


@router.post(
    "/{question_id}/answers",
    response_model=AnswerResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_answer(
    question_id: int,
    answer_data: AnswerCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Добавление ответа к вопросу"""
    qna_service = QnaService(db)

    answer = await qna_service.add_answer(question_id, answer_data, current_user)

    if not answer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question not found"
        )

    return _answer_response(answer)


@router.delete("/{question_id}", response_model=QuestionDeleteResponse)
async def delete_question(
    question_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Удаление вопроса вместе с ответами"""
    qna_service = QnaService(db)

    try:
        histories = await qna_service.delete_question(question_id, current_user)
    except PermissionDenied as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except StaleDataError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Question was modified concurrently, retry the request"
        )

    if histories is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question not found"
        )

    return QuestionDeleteResponse(
        question_id=question_id,
        histories=[
            DeleteHistoryResponse(
                content_type=history.content_type,
                content_id=history.content_id,
                writer_id=history.writer_id,
                created_at=history.created_at
            )
            for history in histories
        ]
    )
