"""
Pydantic Data Transfer Objects (DTOs) for the skin moderation service.

These models are the typed read views handed out by the stores and the
reporting layer. Optional fields are explicit `None`, never missing keys.
"""

import posixpath
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class SkinStatus(str, Enum):
    """Moderation status derived from a skin's flags."""
    UNREVIEWED = "UNREVIEWED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    TWEETED = "TWEETED"

    @classmethod
    def from_flags(
        cls,
        approved: Optional[bool],
        rejected: Optional[bool],
        tweeted: Optional[bool],
    ) -> "SkinStatus":
        # Fixed priority: tweeted wins over stale approved/rejected flags.
        if tweeted:
            return cls.TWEETED
        if rejected:
            return cls.REJECTED
        if approved:
            return cls.APPROVED
        return cls.UNREVIEWED


class ContentRecord(BaseModel):
    """
    DTO for a skin row of the metadata store.

    Mirrors SkinORM.
    """
    md5: str = Field(..., min_length=32, max_length=32)
    skin_type: str = "CLASSIC"
    file_paths: List[str] = Field(default_factory=list)
    average_color: Optional[str] = None
    readme_text: Optional[str] = None
    emails: Optional[List[str]] = None
    tweet_url: Optional[str] = None
    twitter_likes: Optional[int] = None
    approved: Optional[bool] = None
    rejected: Optional[bool] = None
    tweeted: Optional[bool] = None

    model_config = {"from_attributes": True}

    @property
    def file_names(self) -> List[str]:
        return [posixpath.basename(path.replace("\\", "/")) for path in self.file_paths]

    @property
    def canonical_filename(self) -> Optional[str]:
        names = self.file_names
        return names[0] if names else None

    @property
    def status(self) -> SkinStatus:
        return SkinStatus.from_flags(self.approved, self.rejected, self.tweeted)


class ArchiveIndexEntry(BaseModel):
    """
    DTO for an archive.org item mapped to a skin.

    Mirrors InternetArchiveItemORM.
    """
    identifier: str
    md5: str

    model_config = {"from_attributes": True}


class ReviewCandidate(BaseModel):
    """The next skin to review or to tweet."""
    filename: Optional[str] = None
    md5: str


class SkinStats(BaseModel):
    """Moderation counters."""
    approved: int
    rejected: int
    tweeted: int
    tweetable: int


class SkinDetail(BaseModel):
    """
    Read view of one skin: record metadata, derived public URLs, derived
    status and the archive.org item it was uploaded to, if any.
    """
    md5: str
    skin_url: str
    screenshot_url: str
    webamp_url: str
    average_color: Optional[str] = None
    file_names: List[str] = Field(default_factory=list)
    canonical_filename: Optional[str] = None
    emails: Optional[List[str]] = None
    tweet_url: Optional[str] = None
    twitter_likes: Optional[int] = None
    readme_text: Optional[str] = None
    tweet_status: SkinStatus
    internet_archive_item_name: Optional[str] = None
    internet_archive_url: Optional[str] = None
