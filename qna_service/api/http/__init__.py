from qna_service.api.http.health import router as health_router
from qna_service.api.http.auth import router as auth_router
from qna_service.api.http.users import router as users_router
from qna_service.api.http.questions import router as questions_router

__all__ = [
    "health_router",
    "auth_router",
    "users_router",
    "questions_router"
]
