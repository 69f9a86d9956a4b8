"""
Metadata store access for skins.

Exposes the three document-store style primitives the moderation core relies
on: `find_one`, `find_one_and_update` and `count`, each taking an exact-match
filter. A filter value of `NOT_TRUE` matches rows where the column is False or
NULL, mirroring the `{"$ne": true}` predicate of the moderation queries.
"""
import logging
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased

from skin_moderation.models import ContentRecord, SkinORM
from skin_moderation.utils.db_session import get_db_session_context_manager

logger = logging.getLogger(__name__)


class _NotTrue:
    """Sentinel filter value: column is not equal to True."""

    def __repr__(self) -> str:
        return "NOT_TRUE"


NOT_TRUE = _NotTrue()

SkinFilter = Mapping[str, Any]


def _column(name: str, entity=SkinORM):
    try:
        return getattr(entity, name)
    except AttributeError:
        raise ValueError(f"Unknown skin field in filter: {name!r}") from None


def build_conditions(filter_: SkinFilter, entity=SkinORM) -> list:
    """Translates an exact-match filter into SQLAlchemy WHERE clauses."""
    conditions = []
    for name, value in filter_.items():
        column = _column(name, entity)
        if value is NOT_TRUE:
            conditions.append(or_(column.is_(None), column.is_(False)))
        elif value is None:
            conditions.append(column.is_(None))
        else:
            conditions.append(column == value)
    return conditions


class SkinStore:
    """Async access to the `skins` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_one(self, filter_: SkinFilter) -> Optional[ContentRecord]:
        """Returns the first skin matching `filter_` in store order, or None."""
        stmt = select(SkinORM).where(*build_conditions(filter_)).order_by(SkinORM.id).limit(1)
        async with get_db_session_context_manager(self._session_factory) as session:
            skin = (await session.execute(stmt)).scalars().first()
            return ContentRecord.model_validate(skin) if skin is not None else None

    async def find_one_and_update(
        self, filter_: SkinFilter, values: Dict[str, Any]
    ) -> Optional[ContentRecord]:
        """
        Atomically sets `values` on the first skin matching `filter_`.

        Returns the updated record, or None when nothing matched.
        """
        for name in values:
            _column(name)
        # Aliased so the subquery is not correlated to the UPDATE target.
        candidate = aliased(SkinORM)
        target = (
            select(candidate.id)
            .where(*build_conditions(filter_, candidate))
            .order_by(candidate.id)
            .limit(1)
            .scalar_subquery()
        )
        stmt = (
            update(SkinORM)
            .where(SkinORM.id == target)
            .values(**values)
            .returning(SkinORM)
            .execution_options(synchronize_session=False)
        )
        async with get_db_session_context_manager(self._session_factory) as session:
            skin = (await session.execute(stmt)).scalars().first()
            if skin is None:
                logger.debug(f"find_one_and_update matched nothing for filter {dict(filter_)}")
                return None
            return ContentRecord.model_validate(skin)

    async def count(self, filter_: SkinFilter) -> int:
        stmt = select(func.count()).select_from(SkinORM).where(*build_conditions(filter_))
        async with get_db_session_context_manager(self._session_factory) as session:
            return (await session.execute(stmt)).scalar_one()
