from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import DateTime, Integer, String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from cqrs_ddd_search import SearchSettings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

# ---------------------------------------------------------------------------
# Test models
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class UserRecord(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String)
    email: Mapped[str] = mapped_column(String)
    status: Mapped[str] = mapped_column(String, default="active")
    createdAt: Mapped[datetime] = mapped_column("created_at", DateTime)  # noqa: N815
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


SEARCH_FIELDS = ["id", "name", "email", "status", "createdAt", "deleted_at"]
SORT_FIELDS = ["id", "name", "email", "createdAt"]


@pytest.fixture
def settings() -> SearchSettings:
    return SearchSettings(default_sort_field="createdAt")


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as sess:
        yield sess


@pytest.fixture
def seed_users(session_factory) -> Callable[[list[dict[str, Any]]], Awaitable[None]]:
    """Insert rows given as keyword dicts; ``id`` and ``email`` are filled in."""

    async def _seed(rows: list[dict[str, Any]]) -> None:
        async with session_factory() as sess:
            for i, row in enumerate(rows, start=1):
                data = {"id": i, "email": f"user{i}@example.com", **row}
                sess.add(UserRecord(**data))
            await sess.commit()

    return _seed


@pytest.fixture
def user_model() -> type[UserRecord]:
    return UserRecord


@pytest.fixture
def search_fields() -> list[str]:
    return list(SEARCH_FIELDS)


@pytest.fixture
def sort_fields() -> list[str]:
    return list(SORT_FIELDS)
