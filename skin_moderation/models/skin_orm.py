"""
SQLAlchemy ORM model for the 'skins' table.
"""

from typing import List, Optional

from sqlalchemy import Boolean, Index, Integer, String, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SkinORM(Base):
    """
    SQLAlchemy ORM model representing one uploaded skin.

    Rows are created by the ingestion process; this service only flips the
    moderation flags. The flags are nullable because older rows never had
    them written, and "not true" queries must treat NULL like False.

    Attributes:
        id (int): Surrogate primary key.
        md5 (str): 32-character hex content hash, the canonical identifier.
        skin_type (str): Artifact kind, stored in the `type` column (e.g. "CLASSIC", "MODERN").
        file_paths (list[str]): Original file paths, first entry is canonical.
        average_color (str, optional): Descriptive metadata.
        readme_text (str, optional): Text of the readme bundled in the archive.
        emails (list[str], optional): Emails found in the archive.
        tweet_url (str, optional): Set once the skin has been announced.
        twitter_likes (int, optional): Set once the skin has been announced.
        approved / rejected / tweeted (bool, optional): Independent moderation flags.
    """
    __tablename__ = "skins"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    md5: Mapped[str] = mapped_column(String(32), nullable=False, unique=True, comment="Content hash of the skin archive.")
    skin_type: Mapped[str] = mapped_column("type", Text, nullable=False, default="CLASSIC", comment="Artifact kind.")
    file_paths: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    average_color: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    readme_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    emails: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    tweet_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    twitter_likes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    approved: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    rejected: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    tweeted: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    __table_args__ = (
        Index("idx_skins_type_flags", "type", "tweeted", "approved", "rejected"),
    )

    def __repr__(self) -> str:
        return (
            f"<SkinORM(md5='{self.md5}', type='{self.skin_type}', approved={self.approved}, "
            f"rejected={self.rejected}, tweeted={self.tweeted})>"
        )
