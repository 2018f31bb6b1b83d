# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from todo_api.database import get_db
from todo_api.main import app
from todo_api.repositories.task_repository import TaskRepository
from todo_api.services.task_service import TaskService


@pytest.fixture()
async def engine(tmp_path: Path):
    """Fresh SQLite database per test, schema created from the models."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture()
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def repository(session) -> TaskRepository:
    return TaskRepository(session)


@pytest.fixture()
def service(repository) -> TaskService:
    return TaskService(repository)


@pytest.fixture()
async def client(session_factory):
    """
    HTTP client wired to the app with get_db pointed at the test database.

    App exceptions are not re-raised so 500 responses can be asserted on.
    """

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
