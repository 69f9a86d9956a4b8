"""
Shared fixtures for the skin moderation tests.

Store-backed tests run against a throwaway SQLite file through aiosqlite, so
the real SQLAlchemy queries (including the NULL-aware "not true" filters) are
exercised without a Postgres server. The object-storage mirror is replaced by
the in-memory FakeMirror stub.
"""
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from skin_moderation.config.settings import Settings
from skin_moderation.core.moderation import ModerationStateMachine
from skin_moderation.core.reconciler import MirrorReconciler
from skin_moderation.core.skin_queries import SkinQueries
from skin_moderation.core.urls import SkinUrls
from skin_moderation.models import Base, InternetArchiveItemORM, SkinORM
from skin_moderation.storage.archive_index import ArchiveIndex
from skin_moderation.storage.skin_store import SkinStore
from skin_moderation.tests.stubs.fake_mirror import FakeMirror
from skin_moderation.tests.stubs.skin_hashes import (
    APPROVED_MD5,
    MODERN_MD5,
    REJECTED_MD5,
    TWEETED_MD5,
    UNREVIEWED_MD5,
)
from skin_moderation.utils.db_session import build_session_factory


@pytest.fixture
def test_settings():
    return Settings(
        DATABASE_URL="sqlite+aiosqlite://",
        SKIN_BUCKET_URL="https://s3.amazonaws.com/webamp-uploaded-skins",
        WEBAMP_ORIGIN="https://webamp.org",
        ARCHIVE_ORIGIN="https://archive.org",
        _env_file=None,
    )


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A fresh SQLite database with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'skins.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest.fixture
def add_skins(session_factory):
    """Returns a coroutine that inserts skins given as keyword dicts."""
    async def _add(*skins):
        async with session_factory() as session:
            for fields in skins:
                fields = dict(fields)
                fields.setdefault("file_paths", [f"/uploads/{fields['md5']}.wsz"])
                session.add(SkinORM(**fields))
            await session.commit()
    return _add


@pytest.fixture
def add_archive_items(session_factory):
    async def _add(*items):
        async with session_factory() as session:
            for identifier, md5 in items:
                session.add(InternetArchiveItemORM(identifier=identifier, md5=md5))
            await session.commit()
    return _add


@pytest_asyncio.fixture
async def seeded_skins(add_skins):
    """One classic skin in every derived state, plus a non-classic one."""
    await add_skins(
        dict(md5=UNREVIEWED_MD5, skin_type="CLASSIC", file_paths=["/uploads/Unreviewed.wsz"]),
        dict(md5=APPROVED_MD5, skin_type="CLASSIC", approved=True, file_paths=["/uploads/Approved.wsz"]),
        dict(md5=REJECTED_MD5, skin_type="CLASSIC", rejected=True, approved=False),
        dict(md5=TWEETED_MD5, skin_type="CLASSIC", approved=True, tweeted=True),
        dict(md5=MODERN_MD5, skin_type="MODERN", approved=True),
    )


@pytest.fixture
def skin_store(session_factory):
    return SkinStore(session_factory)


@pytest.fixture
def archive_index(session_factory):
    return ArchiveIndex(session_factory)


@pytest.fixture
def fake_mirror():
    return FakeMirror()


@pytest.fixture
def state_machine(skin_store, fake_mirror):
    return ModerationStateMachine(skin_store, fake_mirror)


@pytest.fixture
def reconciler(skin_store, fake_mirror):
    # One update at a time keeps SQLite free of writer contention.
    return MirrorReconciler(skin_store, fake_mirror, max_concurrency=1)


@pytest.fixture
def skin_queries(skin_store, archive_index, state_machine, test_settings):
    return SkinQueries(skin_store, archive_index, state_machine, SkinUrls(test_settings))
