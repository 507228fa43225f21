"""Async SQLAlchemy engine, session factory, and request-scoped sessions.

The engine is built in the application lifespan and kept on ``app.state``;
nothing here opens a connection at import time.
"""

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from starlette.requests import HTTPConnection


def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def get_db(conn: HTTPConnection) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a session that commits on success."""
    session_factory: async_sessionmaker[AsyncSession] = conn.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
