from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from qna_service.domains.qna.errors import PermissionDenied

if TYPE_CHECKING:
    from qna_service.domains.identity.entities import User


class ContentType(Enum):
    """Тип удаленного содержимого"""
    QUESTION = "QUESTION"
    ANSWER = "ANSWER"


@dataclass(frozen=True)
class DeleteHistory:
    """Запись журнала удаления одной единицы содержимого"""
    content_type: ContentType
    content_id: Optional[int]
    writer: "User"
    created_at: datetime

    @property
    def writer_id(self):
        return self.writer.uuid


@dataclass(frozen=True)
class DeleteResult:
    """Результат удаления вопроса: журнал удаления либо причина отказа"""
    histories: Tuple[DeleteHistory, ...] = ()
    error: Optional[PermissionDenied] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> List[DeleteHistory]:
        """Получение журнала удаления или выброс причины отказа"""
        if self.error is not None:
            raise self.error
        return list(self.histories)

    @classmethod
    def success(cls, histories: Sequence[DeleteHistory]) -> "DeleteResult":
        return cls(histories=tuple(histories))

    @classmethod
    def failure(cls, error: PermissionDenied) -> "DeleteResult":
        return cls(error=error)
