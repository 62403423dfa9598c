"""Pytest fixtures for SQLAlchemy integration tests."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from copytrader.infrastructure.persistence.sqlalchemy import Base, create_unit_of_work


@pytest.fixture
async def engine():
    """In-memory SQLite engine (aiosqlite) з усіма таблицями."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    """AsyncSession; rollback після кожного тесту."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def sql_uow_factory(session_factory):
    return lambda: create_unit_of_work(session_factory)
