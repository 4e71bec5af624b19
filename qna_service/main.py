from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from qna_service.api.http import health_router, auth_router, users_router, questions_router
from qna_service.core.config import settings
from qna_service.core.db import create_engine, create_session_factory, init_models
from qna_service.core.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """Создание приложения вместе с движком БД"""
    setup_logging(settings.log_level)

    engine = create_engine(database_url or settings.database_url, echo=settings.database_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_models(engine)
        logger.info("Database schema is ready")
        yield
        await engine.dispose()

    app = FastAPI(
        title="QnA",
        description="Сервис вопросов и ответов",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # В продакшене указать конкретные домены
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(questions_router)

    @app.get("/")
    async def root():
        """Корневой эндпоинт"""
        return {
            "message": "QnA API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


app = create_app()
