from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession, AsyncEngine
from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Returns a session factory bound to `engine`."""
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )

@asynccontextmanager
async def get_db_session_context_manager(
    session_factory: async_sessionmaker[AsyncSession],
    existing_session: Optional[AsyncSession] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides an SQLAlchemy async session within an asynchronous context manager.

    If an `existing_session` is provided, it yields that session and the caller
    is responsible for its lifecycle (commit, rollback, close).
    Otherwise, it creates a new session from `session_factory`, commits it on
    successful exit, rolls it back on error, and closes it regardless.
    """
    if existing_session is not None:
        yield existing_session
        return

    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
