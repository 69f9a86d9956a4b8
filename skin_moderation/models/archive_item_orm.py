"""
SQLAlchemy ORM model for the 'internet_archive_items' table.
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class InternetArchiveItemORM(Base):
    """
    Maps an archive.org item name to the md5 of the skin it holds.

    One item per md5 is the convention but is not enforced by the schema.
    """
    __tablename__ = "internet_archive_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    identifier: Mapped[str] = mapped_column(Text, nullable=False, unique=True, comment="archive.org item name.")
    md5: Mapped[str] = mapped_column(String(32), nullable=False, index=True, comment="Content hash of the archived skin.")

    def __repr__(self) -> str:
        return f"<InternetArchiveItemORM(identifier='{self.identifier}', md5='{self.md5}')>"
