from qna_service.db.models.user import User
from qna_service.db.models.qna import Question, Answer, DeleteHistory

__all__ = [
    "User",
    "Question",
    "Answer",
    "DeleteHistory"
]
