"""
Query/Reporting layer: read-only views over skins and their moderation state.
"""
import logging
from typing import Optional

from skin_moderation.core.errors import SkinNotFoundError
from skin_moderation.core.moderation import CLASSIC, TWEETABLE_FILTER, ModerationStateMachine
from skin_moderation.core.urls import SkinUrls
from skin_moderation.models import (
    ArchiveIndexEntry,
    ContentRecord,
    ReviewCandidate,
    SkinDetail,
    SkinStats,
)
from skin_moderation.storage.archive_index import ArchiveIndex
from skin_moderation.storage.skin_store import SkinStore

logger = logging.getLogger(__name__)


class SkinQueries:
    """Counts, next-candidate selection and per-skin detail assembly."""

    def __init__(
        self,
        skin_store: SkinStore,
        archive_index: ArchiveIndex,
        state_machine: ModerationStateMachine,
        urls: SkinUrls,
    ):
        self.skin_store = skin_store
        self.archive_index = archive_index
        self.state_machine = state_machine
        self.urls = urls

    async def _classic(self, md5: str) -> Optional[ContentRecord]:
        return await self.skin_store.find_one({"md5": md5, "skin_type": CLASSIC})

    async def detail(self, md5: str) -> SkinDetail:
        """
        Assembles the full read view of a skin.

        Raises:
            SkinNotFoundError: no classic skin has this md5. Logged as an
                alert since callers only ask for skins they found elsewhere.
        """
        skin = await self._classic(md5)
        if skin is None:
            logger.warning("Could not find skin in database", extra={"md5": md5, "alert": True})
            raise SkinNotFoundError(md5)

        item = await self.archive_index.find_by_hash(md5)
        item_name = item.identifier if item is not None else None

        return SkinDetail(
            md5=skin.md5,
            skin_url=self.urls.skin_url(skin.md5),
            screenshot_url=self.urls.screenshot_url(skin.md5),
            webamp_url=self.urls.webamp_url(skin.md5),
            average_color=skin.average_color,
            file_names=skin.file_names,
            canonical_filename=skin.canonical_filename,
            emails=skin.emails,
            tweet_url=skin.tweet_url,
            twitter_likes=skin.twitter_likes,
            readme_text=skin.readme_text,
            tweet_status=skin.status,
            internet_archive_item_name=item_name,
            internet_archive_url=self.urls.archive_url(item_name),
        )

    async def tweetable_count(self) -> int:
        return await self.skin_store.count(TWEETABLE_FILTER)

    async def counts(self) -> SkinStats:
        approved = await self.skin_store.count({"approved": True})
        rejected = await self.skin_store.count({"rejected": True})
        tweeted = await self.skin_store.count({"tweeted": True})
        tweetable = await self.tweetable_count()
        return SkinStats(approved=approved, rejected=rejected, tweeted=tweeted, tweetable=tweetable)

    async def skin_to_review(self) -> Optional[ReviewCandidate]:
        skin = await self.state_machine.next_reviewable()
        if skin is None:
            return None
        return ReviewCandidate(filename=skin.canonical_filename, md5=skin.md5)

    async def skin_to_tweet(self) -> Optional[ReviewCandidate]:
        skin = await self.state_machine.next_tweetable()
        if skin is None:
            return None
        return ReviewCandidate(filename=skin.canonical_filename, md5=skin.md5)

    # Single-property lookups, None when the skin or the value is missing.

    async def get_readme(self, md5: str) -> Optional[str]:
        skin = await self._classic(md5)
        return skin.readme_text if skin else None

    async def get_skin_url(self, md5: str) -> Optional[str]:
        skin = await self._classic(md5)
        return self.urls.skin_url(skin.md5) if skin else None

    async def get_screenshot_url(self, md5: str) -> Optional[str]:
        skin = await self._classic(md5)
        return self.urls.screenshot_url(skin.md5) if skin else None

    async def get_archive_item(self, md5: str) -> Optional[ArchiveIndexEntry]:
        return await self.archive_index.find_by_hash(md5)

    def archive_url(self, identifier: Optional[str]) -> Optional[str]:
        return self.urls.archive_url(identifier)
