"""Exceptions raised by the skin moderation core."""

from typing import Dict, Optional


class SkinModerationError(Exception):
    """Base class for all errors of this package."""


class SkinNotFoundError(SkinModerationError):
    """No skin record matches the given md5."""

    def __init__(self, md5: str, message: Optional[str] = None):
        self.md5 = md5
        super().__init__(message or f"No skin found for md5 {md5}")


class MirrorWriteFailure(SkinModerationError):
    """
    Writing a marker to the object-storage mirror failed.

    Raised after the metadata write has already been committed, so it is
    reported on the transition result rather than propagated.
    """

    def __init__(self, action: str, md5: str, cause: BaseException):
        self.action = action
        self.md5 = md5
        self.cause = cause
        super().__init__(f"Mirror {action} failed for {md5}: {cause}")


class ReconciliationPartialFailure(SkinModerationError):
    """One or more per-hash updates failed during a reconciliation pass."""

    def __init__(self, failures: Dict[str, BaseException]):
        self.failures = failures
        super().__init__(
            f"Reconciliation finished with {len(failures)} failed update(s): "
            + ", ".join(sorted(failures))
        )
