from qna_service.db.repositories.user_repository import UserRepository
from qna_service.db.repositories.question_repository import QuestionRepository
from qna_service.db.repositories.delete_history_repository import DeleteHistoryRepository

__all__ = [
    "UserRepository",
    "QuestionRepository",
    "DeleteHistoryRepository"
]
