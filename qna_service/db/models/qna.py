from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UUID, Enum
from sqlalchemy.orm import relationship

from qna_service.core.db import Base
from qna_service.db.base import BaseModel
from qna_service.domains.qna.entities import TITLE_MAX_LENGTH
from qna_service.domains.qna.history import ContentType


class Question(BaseModel):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    contents = Column(Text)
    deleted = Column(Boolean, nullable=False, default=False)
    writer_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.uuid", name="fk_question_writer"),
        nullable=False
    )

    # Relationships
    writer = relationship("User")
    answers = relationship("Answer", back_populates="question", order_by="Answer.id")


class Answer(BaseModel):
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contents = Column(Text, default="")
    deleted = Column(Boolean, nullable=False, default=False)
    writer_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.uuid", name="fk_answer_writer"),
        nullable=False
    )
    question_id = Column(
        Integer,
        ForeignKey("questions.id", name="fk_answer_to_question"),
        nullable=False
    )

    # Relationships
    writer = relationship("User")
    question = relationship("Question", back_populates="answers")


class DeleteHistory(Base):
    __tablename__ = "delete_histories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content_type = Column(Enum(ContentType), nullable=False)
    content_id = Column(Integer, nullable=False)
    deleted_by_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.uuid", name="fk_delete_history_to_user"),
        nullable=False
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    deleted_by = relationship("User")
