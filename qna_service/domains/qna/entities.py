import weakref
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Tuple

from qna_service.domains.qna.common import DatedAt, same_entity
from qna_service.domains.qna.errors import DenialReason, PermissionDenied
from qna_service.domains.qna.history import ContentType, DeleteHistory, DeleteResult

if TYPE_CHECKING:
    from qna_service.domains.identity.entities import User

TITLE_MAX_LENGTH = 100


class Answer:
    """Сущность ответа на вопрос"""

    def __init__(
        self,
        writer: "User",
        contents: str = "",
        id: Optional[int] = None,
        deleted: bool = False,
        dated: Optional[DatedAt] = None
    ):
        if writer is None:
            raise ValueError("Answer requires a writer")

        self.id = id
        self.writer = writer
        self.contents = contents
        self.deleted = deleted
        self.dated = dated or DatedAt()
        self._question_ref: Optional[weakref.ref] = None
        self._hash: Optional[int] = None

    @property
    def question(self) -> Optional["Question"]:
        """Вопрос, к которому прикреплен ответ (не владеющая ссылка)"""
        if self._question_ref is None:
            return None
        return self._question_ref()

    @property
    def question_id(self) -> Optional[int]:
        question = self.question
        return question.id if question is not None else None

    def to_question(self, question: "Question") -> None:
        """Привязка ответа к вопросу"""
        self._question_ref = weakref.ref(question)

    def is_owner(self, user: "User") -> bool:
        """Проверка авторства ответа"""
        return self.writer == user

    def mark_deleted(self, deleted_at: Optional[datetime] = None) -> None:
        """Пометка ответа как удаленного"""
        self.deleted = True
        self.dated.touch(deleted_at)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Answer):
            return False
        return same_entity(self, other)

    def __hash__(self) -> int:
        """Хеш фиксируется при первом вызове и не меняется после присвоения id"""
        if self._hash is None:
            self._hash = hash(self.id) if self.id is not None else object.__hash__(self)
        return self._hash

    def __repr__(self) -> str:
        return f"Answer(id={self.id}, writer={self.writer.uuid}, deleted={self.deleted})"


class Question:
    """Агрегат вопроса: владеет ответами и управляет их удалением"""

    def __init__(
        self,
        title: str,
        contents: Optional[str] = None,
        id: Optional[int] = None,
        deleted: bool = False,
        writer: Optional["User"] = None,
        dated: Optional[DatedAt] = None
    ):
        self.id = id
        self.title = self._validate_title(title)
        self.contents = contents
        self.deleted = deleted
        self.writer = writer
        self.dated = dated or DatedAt()
        self._answers: List[Answer] = []
        self._hash: Optional[int] = None

    @staticmethod
    def _validate_title(title: str) -> str:
        if title is None or not title.strip():
            raise ValueError("Title cannot be empty")
        title = title.strip()
        if len(title) > TITLE_MAX_LENGTH:
            raise ValueError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
        return title

    @property
    def answers(self) -> Tuple[Answer, ...]:
        return tuple(self._answers)

    def write_by(self, writer: "User") -> "Question":
        """Назначение автора вопроса"""
        self.writer = writer
        return self

    def is_owner(self, user: "User") -> bool:
        """Проверка авторства вопроса"""
        if self.writer is None:
            raise ValueError("Question writer is not bound")
        return self.writer == user

    def add_answer(self, answer: Answer) -> None:
        """Добавление ответа с сохранением порядка"""
        answer.to_question(self)
        self._answers.append(answer)

    def delete(self, login_user: "User", deleted_at: Optional[datetime] = None) -> DeleteResult:
        """Удаление вопроса вместе со всеми ответами.

        Сначала проверяется авторство вопроса и каждого ответа, и только
        после успешной проверки выставляются флаги удаления. При отказе
        состояние агрегата не меняется.
        """
        if login_user is None:
            raise ValueError("Login user is required")
        if self.writer is None:
            raise ValueError("Question writer is not bound")
        if self.deleted:
            raise ValueError("Question is already deleted")

        error = self._validate_owner(login_user) or self._validate_answers(login_user)
        if error is not None:
            return DeleteResult.failure(error)

        deleted_at = deleted_at or datetime.utcnow()
        histories = [self._mark_deleted(deleted_at)]
        for answer in self._answers:
            answer.mark_deleted(deleted_at)
            histories.append(
                DeleteHistory(ContentType.ANSWER, answer.id, answer.writer, deleted_at)
            )
        return DeleteResult.success(histories)

    def _mark_deleted(self, deleted_at: datetime) -> DeleteHistory:
        self.deleted = True
        self.dated.touch(deleted_at)
        return DeleteHistory(ContentType.QUESTION, self.id, self.writer, deleted_at)

    def _validate_owner(self, login_user: "User") -> Optional[PermissionDenied]:
        if not self.is_owner(login_user):
            return PermissionDenied(DenialReason.NOT_QUESTION_OWNER)
        return None

    def _validate_answers(self, login_user: "User") -> Optional[PermissionDenied]:
        for answer in self._answers:
            if not answer.is_owner(login_user):
                return PermissionDenied(DenialReason.FOREIGN_ANSWER_EXISTS)
        return None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Question):
            return False
        return same_entity(self, other)

    def __hash__(self) -> int:
        """Хеш фиксируется при первом вызове и не меняется после присвоения id"""
        if self._hash is None:
            self._hash = hash(self.id) if self.id is not None else object.__hash__(self)
        return self._hash

    def __repr__(self) -> str:
        writer_id = self.writer.uuid if self.writer is not None else None
        return (
            f"Question(id={self.id}, title={self.title}, writer={writer_id}, "
            f"deleted={self.deleted})"
        )
