from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional, List
from datetime import datetime
import uuid

from qna_service.domains.qna.entities import TITLE_MAX_LENGTH
from qna_service.domains.qna.history import ContentType


class QuestionCreate(BaseModel):
    """Схема для создания вопроса"""
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    contents: Optional[str] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()


class AnswerCreate(BaseModel):
    """Схема для создания ответа"""
    contents: str = Field(..., min_length=1)


class AnswerResponse(BaseModel):
    """Схема для ответа с данными ответа на вопрос"""
    id: int
    contents: str
    writer_id: uuid.UUID
    question_id: Optional[int]
    deleted: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuestionResponse(BaseModel):
    """Схема для ответа с данными вопроса"""
    id: int
    title: str
    contents: Optional[str]
    writer_id: uuid.UUID
    deleted: bool
    answers: List[AnswerResponse]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DeleteHistoryResponse(BaseModel):
    """Схема записи журнала удаления"""
    content_type: ContentType
    content_id: int
    writer_id: uuid.UUID
    created_at: datetime


class QuestionDeleteResponse(BaseModel):
    """Схема для ответа об удалении вопроса"""
    question_id: int
    histories: List[DeleteHistoryResponse]
