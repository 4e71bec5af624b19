from __future__ import annotations

import asyncio
import uuid
from pathlib import Path
from typing import Any, Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from qna_service.core.db import create_engine, create_session_factory, init_models
from qna_service.db.repositories.user_repository import UserRepository
from qna_service.domains.identity.entities import User

Scenario = Callable[[AsyncSession], Awaitable[Any]]
FactoryScenario = Callable[[sessionmaker], Awaitable[Any]]


def make_user(name: str) -> User:
    return User(
        uuid=uuid.uuid4(),
        email=f"{name}@example.com",
        username=name,
        password_hash="not-a-real-hash",
    )


async def persist_users(session: AsyncSession, *users: User) -> None:
    repository = UserRepository(session)
    for user in users:
        await repository.create(user)


@pytest.fixture()
def alice() -> User:
    return make_user("alice")


@pytest.fixture()
def bob() -> User:
    return make_user("bob")


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'qna.sqlite3'}"


@pytest.fixture()
def run_sessions(database_url: str) -> Callable[[FactoryScenario], Any]:
    """Запуск асинхронного сценария с фабрикой сессий тестовой БД"""

    def _run(scenario: FactoryScenario) -> Any:
        async def _runner() -> Any:
            engine = create_engine(database_url)
            await init_models(engine)
            try:
                return await scenario(create_session_factory(engine))
            finally:
                await engine.dispose()

        return asyncio.run(_runner())

    return _run


@pytest.fixture()
def run_db(run_sessions: Callable[[FactoryScenario], Any]) -> Callable[[Scenario], Any]:
    """Запуск асинхронного сценария в отдельной сессии тестовой БД"""

    def _run(scenario: Scenario) -> Any:
        async def _with_session(session_factory: sessionmaker) -> Any:
            async with session_factory() as session:
                return await scenario(session)

        return run_sessions(_with_session)

    return _run
