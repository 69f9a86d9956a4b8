"""
Core components for the skin moderation service.
"""

from .errors import (
    MirrorWriteFailure,
    ReconciliationPartialFailure,
    SkinModerationError,
    SkinNotFoundError,
)
from .identifier_resolver import IdentifierResolver
from .moderation import ModerationStateMachine, TransitionOutcome, TransitionResult
from .reconciler import MirrorReconciler, ReconciliationReport
from .skin_queries import SkinQueries
from .service import SkinModerationService

__all__ = [
    "IdentifierResolver",
    "MirrorReconciler",
    "MirrorWriteFailure",
    "ModerationStateMachine",
    "ReconciliationPartialFailure",
    "ReconciliationReport",
    "SkinModerationError",
    "SkinModerationService",
    "SkinNotFoundError",
    "SkinQueries",
    "TransitionOutcome",
    "TransitionResult",
]
