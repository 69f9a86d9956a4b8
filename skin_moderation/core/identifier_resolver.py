"""
Identifier Resolver component for the skin moderation service.

Turns whatever an operator pasted (a raw md5, an archive.org details URL or a
bare archive item name) into a skin md5. Interpretations are tried in a fixed
order and the first one that yields a match wins:

1. an embedded 32-character hex string, returned as-is;
2. an archive.org details URL, whose item name is looked up in the index;
3. the whole input as an archive item name.

Nothing matching resolves to None rather than raising.
"""
import logging
import re
from typing import List, Optional, Sequence

from skin_moderation.storage.archive_index import ArchiveIndex

logger = logging.getLogger(__name__)

MD5_PATTERN = re.compile(r"([a-fA-F0-9]{32})")
ARCHIVE_URL_PATTERN = re.compile(r"^(https://)?archive\.org/details/([^/]+)/?")


class ResolutionStrategy:
    """One interpretation of the user input."""

    name = "strategy"

    async def match(self, value: str) -> Optional[str]:
        raise NotImplementedError


class Md5PatternStrategy(ResolutionStrategy):
    name = "md5"

    async def match(self, value: str) -> Optional[str]:
        # No existence check: an embedded hash is trusted as-is.
        found = MD5_PATTERN.search(value)
        return found.group(1) if found else None


class ArchiveUrlStrategy(ResolutionStrategy):
    name = "archive_url"

    def __init__(self, archive_index: ArchiveIndex):
        self.archive_index = archive_index

    async def match(self, value: str) -> Optional[str]:
        found = ARCHIVE_URL_PATTERN.match(value)
        if found is None:
            return None
        entry = await self.archive_index.find_by_identifier(found.group(2))
        return entry.md5 if entry else None


class ArchiveIdentifierStrategy(ResolutionStrategy):
    name = "archive_identifier"

    def __init__(self, archive_index: ArchiveIndex):
        self.archive_index = archive_index

    async def match(self, value: str) -> Optional[str]:
        entry = await self.archive_index.find_by_identifier(value)
        return entry.md5 if entry else None


class IdentifierResolver:
    """Tries each strategy in order until one yields an md5."""

    def __init__(self, strategies: Sequence[ResolutionStrategy]):
        self.strategies: List[ResolutionStrategy] = list(strategies)

    @classmethod
    def default(cls, archive_index: ArchiveIndex) -> "IdentifierResolver":
        return cls([
            Md5PatternStrategy(),
            ArchiveUrlStrategy(archive_index),
            ArchiveIdentifierStrategy(archive_index),
        ])

    async def resolve(self, value: str) -> Optional[str]:
        for strategy in self.strategies:
            md5 = await strategy.match(value)
            if md5 is not None:
                logger.debug(f"Resolved {value!r} to {md5} via {strategy.name}")
                return md5
        logger.info(f"Could not resolve {value!r} to a skin md5")
        return None
