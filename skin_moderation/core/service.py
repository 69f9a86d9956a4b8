"""
Composition root for the skin moderation core.

Builds every component from `Settings` and hands them their store clients
explicitly. The service owns the database engine it creates and disposes it
on exit.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from skin_moderation.config.settings import Settings, settings as default_settings
from skin_moderation.core.errors import SkinNotFoundError
from skin_moderation.core.identifier_resolver import IdentifierResolver
from skin_moderation.core.moderation import ModerationStateMachine
from skin_moderation.core.reconciler import MirrorReconciler
from skin_moderation.core.skin_queries import SkinQueries
from skin_moderation.core.urls import SkinUrls
from skin_moderation.monitoring.metrics import PrometheusExporter
from skin_moderation.storage.archive_index import ArchiveIndex
from skin_moderation.storage.s3_mirror import S3Mirror, S3MirrorConfig
from skin_moderation.storage.skin_store import SkinStore
from skin_moderation.utils.db_session import build_session_factory

logger = logging.getLogger(__name__)


class SkinModerationService:
    """
    Wires the resolver, state machine, reconciler and queries together.
    """
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        mirror: S3Mirror,
        settings: Settings = default_settings,
        metrics: Optional[PrometheusExporter] = None,
        engine: Optional[AsyncEngine] = None,
    ):
        self._engine = engine
        self.skin_store = SkinStore(session_factory)
        self.archive_index = ArchiveIndex(session_factory)
        self.mirror = mirror
        self.resolver = IdentifierResolver.default(self.archive_index)
        self.state_machine = ModerationStateMachine(self.skin_store, mirror, metrics=metrics)
        self.reconciler = MirrorReconciler(
            self.skin_store,
            mirror,
            max_concurrency=settings.RECONCILE_MAX_CONCURRENCY,
            metrics=metrics,
        )
        self.queries = SkinQueries(self.skin_store, self.archive_index, self.state_machine, SkinUrls(settings))

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "SkinModerationService":
        logger.info(f"Initializing {settings.APP_NAME} v{settings.APP_VERSION}")
        engine = create_async_engine(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        metrics = None
        if settings.ENABLE_PROMETHEUS:
            metrics = PrometheusExporter(settings.PROMETHEUS_PORT)
            metrics.start_server()
        return cls(
            session_factory=build_session_factory(engine),
            mirror=S3Mirror(S3MirrorConfig.from_settings(settings)),
            settings=settings,
            metrics=metrics,
            engine=engine,
        )

    async def resolve_existing(self, value: str) -> str:
        """Resolves `value` to an md5, raising SkinNotFoundError when it cannot."""
        md5 = await self.resolver.resolve(value)
        if md5 is None:
            raise SkinNotFoundError(value, f"Could not resolve {value!r} to a skin")
        return md5

    async def aclose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None

    async def __aenter__(self) -> "SkinModerationService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
