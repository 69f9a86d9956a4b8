"""Lookups against the archive.org item index."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from skin_moderation.models import ArchiveIndexEntry, InternetArchiveItemORM
from skin_moderation.utils.db_session import get_db_session_context_manager


class ArchiveIndex:
    """Async access to the `internet_archive_items` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def _first(self, stmt) -> Optional[ArchiveIndexEntry]:
        async with get_db_session_context_manager(self._session_factory) as session:
            item = (await session.execute(stmt)).scalars().first()
            return ArchiveIndexEntry.model_validate(item) if item is not None else None

    async def find_by_hash(self, md5: str) -> Optional[ArchiveIndexEntry]:
        stmt = (
            select(InternetArchiveItemORM)
            .where(InternetArchiveItemORM.md5 == md5)
            .order_by(InternetArchiveItemORM.id)
            .limit(1)
        )
        return await self._first(stmt)

    async def find_by_identifier(self, identifier: str) -> Optional[ArchiveIndexEntry]:
        stmt = select(InternetArchiveItemORM).where(InternetArchiveItemORM.identifier == identifier)
        return await self._first(stmt)
