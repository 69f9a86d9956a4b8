"""
Moderation State Machine for the skin moderation service.

The status of a skin is derived from three independent flags on its record
(see `SkinStatus.from_flags`). Transitions are a two-phase, best-effort
protocol:

1. set the flag in the metadata store. This is the commit point; a missing
   record raises `SkinNotFoundError`.
2. ask the object-storage mirror to record the same decision. A failure here
   does not undo phase 1; the result is reported as `MIRROR_PENDING` and the
   marker stays missing until the transition is issued again.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from skin_moderation.core.errors import MirrorWriteFailure, SkinNotFoundError
from skin_moderation.models import ContentRecord, SkinStatus
from skin_moderation.monitoring.metrics import PrometheusExporter
from skin_moderation.storage.s3_mirror import S3Mirror
from skin_moderation.storage.skin_store import NOT_TRUE, SkinStore

logger = logging.getLogger(__name__)

CLASSIC = "CLASSIC"

REVIEWABLE_FILTER = {
    "tweeted": NOT_TRUE,
    "approved": NOT_TRUE,
    "rejected": NOT_TRUE,
    "skin_type": CLASSIC,
}

TWEETABLE_FILTER = {
    "tweeted": NOT_TRUE,
    "approved": True,
    "rejected": NOT_TRUE,
    "skin_type": CLASSIC,
}


class TransitionOutcome(str, Enum):
    COMMITTED = "COMMITTED"
    MIRROR_PENDING = "MIRROR_PENDING"


@dataclass
class TransitionResult:
    """Outcome of a moderation transition."""
    action: str
    record: ContentRecord
    outcome: TransitionOutcome = TransitionOutcome.COMMITTED
    mirror_error: Optional[MirrorWriteFailure] = None

    @property
    def fully_committed(self) -> bool:
        return self.outcome is TransitionOutcome.COMMITTED


class ModerationStateMachine:
    """Owns the moderation flags of skins and their legal transitions."""

    def __init__(
        self,
        skin_store: SkinStore,
        mirror: S3Mirror,
        metrics: Optional[PrometheusExporter] = None,
    ):
        self.skin_store = skin_store
        self.mirror = mirror
        self.metrics = metrics

    async def _transition(
        self,
        action: str,
        flag: str,
        mirror_write: Callable[[str], Awaitable[None]],
        md5: str,
    ) -> TransitionResult:
        record = await self.skin_store.find_one_and_update({"md5": md5}, {flag: True})
        if record is None:
            raise SkinNotFoundError(md5)
        logger.info(f"Set {flag}=true for skin {md5}")
        if self.metrics:
            self.metrics.record_transition(action)

        try:
            await mirror_write(md5)
        except Exception as e:
            failure = MirrorWriteFailure(action, md5, e)
            logger.warning(
                f"Mirror write failed after committing {action} for {md5}: {e}",
                extra={"md5": md5, "action": action},
            )
            if self.metrics:
                self.metrics.record_mirror_failure(action)
            return TransitionResult(
                action=action,
                record=record,
                outcome=TransitionOutcome.MIRROR_PENDING,
                mirror_error=failure,
            )
        return TransitionResult(action=action, record=record)

    async def approve(self, md5: str) -> TransitionResult:
        return await self._transition("approve", "approved", self.mirror.mark_approved, md5)

    async def reject(self, md5: str) -> TransitionResult:
        return await self._transition("reject", "rejected", self.mirror.mark_rejected, md5)

    async def mark_tweeted(self, md5: str) -> TransitionResult:
        # Setting an already-set flag and re-putting a marker are both no-ops.
        return await self._transition("tweet", "tweeted", self.mirror.mark_tweeted, md5)

    async def get_status(self, md5: str) -> SkinStatus:
        record = await self.skin_store.find_one({"md5": md5})
        if record is None:
            raise SkinNotFoundError(md5)
        return record.status

    async def next_reviewable(self) -> Optional[ContentRecord]:
        """First UNREVIEWED classic skin in store order."""
        return await self.skin_store.find_one(REVIEWABLE_FILTER)

    async def next_tweetable(self) -> Optional[ContentRecord]:
        """First APPROVED, not yet tweeted, classic skin in store order."""
        return await self.skin_store.find_one(TWEETABLE_FILTER)
