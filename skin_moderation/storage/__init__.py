"""
Adapters for the two external stores: the metadata database and the
object-storage mirror.
"""

from .archive_index import ArchiveIndex
from .s3_mirror import S3Mirror, S3MirrorConfig, S3MirrorError
from .skin_store import NOT_TRUE, SkinStore

__all__ = [
    "ArchiveIndex",
    "NOT_TRUE",
    "S3Mirror",
    "S3MirrorConfig",
    "S3MirrorError",
    "SkinStore",
]
