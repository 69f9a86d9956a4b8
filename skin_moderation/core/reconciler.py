"""
Mirror reconciliation engine.

Pushes the moderation decisions recorded in the object-storage mirror into the
metadata store. The mirror is authoritative here, and the pass is a union: it
only ever sets `approved`/`rejected`/`tweeted` to true, never clears them. A
hash removed from a mirror set therefore keeps its stale flag in the metadata
store; that is a known limitation, not something this pass repairs.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set, Tuple

from skin_moderation.core.errors import ReconciliationPartialFailure
from skin_moderation.monitoring.metrics import PrometheusExporter
from skin_moderation.storage.s3_mirror import S3Mirror
from skin_moderation.storage.skin_store import SkinStore

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    """Statistics from one reconciliation pass."""
    approved_markers: int = 0
    rejected_markers: int = 0
    tweeted_markers: int = 0
    records_updated: int = 0
    missing_records: List[str] = field(default_factory=list)
    failures: Dict[str, BaseException] = field(default_factory=dict)
    processing_time_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        if self.failures:
            raise ReconciliationPartialFailure(self.failures)

    def as_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'statistics': {
                'approved_markers': self.approved_markers,
                'rejected_markers': self.rejected_markers,
                'tweeted_markers': self.tweeted_markers,
                'records_updated': self.records_updated,
                'missing_records': len(self.missing_records),
                'failed_updates': len(self.failures),
                'processing_time_seconds': self.processing_time_seconds,
            },
            'missing_records': sorted(self.missing_records),
            'failures': {key: str(error) for key, error in sorted(self.failures.items())},
        }


class MirrorReconciler:
    """Mirror -> metadata store convergence pass."""

    def __init__(
        self,
        skin_store: SkinStore,
        mirror: S3Mirror,
        max_concurrency: int = 50,
        metrics: Optional[PrometheusExporter] = None,
    ):
        self.skin_store = skin_store
        self.mirror = mirror
        self.max_concurrency = max_concurrency
        self.metrics = metrics

    async def _fetch_marker_sets(self) -> Tuple[Set[str], Set[str], Set[str]]:
        approved, rejected, tweeted = await asyncio.gather(
            self.mirror.list_approved(),
            self.mirror.list_rejected(),
            self.mirror.list_tweeted(),
        )
        return set(approved), set(rejected), set(tweeted)

    async def _apply(self, semaphore: asyncio.Semaphore, flag: str, md5: str):
        async with semaphore:
            return await self.skin_store.find_one_and_update({"md5": md5}, {flag: True})

    async def reconcile(self) -> ReconciliationReport:
        """
        Runs one pass. Per-hash problems never abort the pass: a hash with no
        skin record is skipped, an update that raises is collected in
        `report.failures`. Errors listing the mirror itself propagate.
        """
        logger.info("Starting mirror reconciliation")
        started = time.monotonic()
        report = ReconciliationReport()

        approved, rejected, tweeted = await self._fetch_marker_sets()
        report.approved_markers = len(approved)
        report.rejected_markers = len(rejected)
        report.tweeted_markers = len(tweeted)
        logger.info(
            f"Mirror markers: {len(approved)} approved, {len(rejected)} rejected, {len(tweeted)} tweeted"
        )

        jobs: List[Tuple[str, str]] = (
            [("approved", md5) for md5 in approved]
            + [("rejected", md5) for md5 in rejected]
            + [("tweeted", md5) for md5 in tweeted]
        )
        semaphore = asyncio.Semaphore(max(1, self.max_concurrency))
        results = await asyncio.gather(
            *(self._apply(semaphore, marker_set, md5) for marker_set, md5 in jobs),
            return_exceptions=True,
        )

        for (marker_set, md5), result in zip(jobs, results):
            if isinstance(result, Exception):
                report.failures[f"{marker_set}:{md5}"] = result
                logger.error(f"Failed to set {marker_set} for {md5}: {result}")
                outcome = "failed"
            elif isinstance(result, BaseException):
                raise result
            elif result is None:
                report.missing_records.append(md5)
                logger.warning(
                    f"Mirror has {marker_set} marker for {md5} but no skin record exists",
                    extra={"md5": md5, "alert": True},
                )
                outcome = "missing"
            else:
                report.records_updated += 1
                outcome = "updated"
            if self.metrics:
                self.metrics.record_reconciled(marker_set, outcome)

        report.processing_time_seconds = time.monotonic() - started
        if self.metrics:
            self.metrics.observe_reconcile_duration(report.processing_time_seconds)
        logger.info(
            f"Reconciliation complete: {report.records_updated} updated, "
            f"{len(report.missing_records)} missing, {len(report.failures)} failed "
            f"in {report.processing_time_seconds:.2f}s"
        )
        return report
