from qna_service.domains.qna.common import DatedAt, same_entity
from qna_service.domains.qna.entities import Answer, Question, TITLE_MAX_LENGTH
from qna_service.domains.qna.errors import DenialReason, PermissionDenied
from qna_service.domains.qna.history import ContentType, DeleteHistory, DeleteResult

__all__ = [
    "DatedAt", "same_entity",
    "Answer", "Question", "TITLE_MAX_LENGTH",
    "DenialReason", "PermissionDenied",
    "ContentType", "DeleteHistory", "DeleteResult"
]
