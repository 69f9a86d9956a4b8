"""
Models package for the skin moderation service.

This package contains SQLAlchemy ORM models and Pydantic DTOs.
"""

# Ensure all ORM models are registered with the Base metadata when this package is imported.
from . import base
from . import archive_item_orm
from . import skin_orm

from .base import Base
from .archive_item_orm import InternetArchiveItemORM
from .skin_orm import SkinORM

from .dtos import (
    ArchiveIndexEntry,
    ContentRecord,
    ReviewCandidate,
    SkinDetail,
    SkinStats,
    SkinStatus,
)

__all__ = [
    # Base
    "Base",
    # ORMs
    "InternetArchiveItemORM",
    "SkinORM",
    # DTOs
    "ArchiveIndexEntry",
    "ContentRecord",
    "ReviewCandidate",
    "SkinDetail",
    "SkinStats",
    "SkinStatus",
]
