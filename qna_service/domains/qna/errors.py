from enum import Enum


class DenialReason(Enum):
    """Причины отказа в удалении вопроса"""
    NOT_QUESTION_OWNER = "not the question owner"
    FOREIGN_ANSWER_EXISTS = "foreign answer exists"


class PermissionDenied(PermissionError):
    """Отказ в удалении: пользователь не владеет всем содержимым вопроса"""

    def __init__(self, reason: DenialReason):
        super().__init__(reason.value)
        self.reason = reason

    def __repr__(self) -> str:
        return f"PermissionDenied({self.reason.value!r})"
