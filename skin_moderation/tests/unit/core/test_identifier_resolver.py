import pytest
from unittest.mock import AsyncMock

from skin_moderation.core.identifier_resolver import (
    ArchiveIdentifierStrategy,
    ArchiveUrlStrategy,
    IdentifierResolver,
    Md5PatternStrategy,
)
from skin_moderation.models import ArchiveIndexEntry

ITEM_MD5 = "b" * 32


@pytest.fixture
def mock_archive_index():
    index = AsyncMock()

    async def find_by_identifier(identifier):
        if identifier == "my-item":
            return ArchiveIndexEntry(identifier="my-item", md5=ITEM_MD5)
        return None

    index.find_by_identifier.side_effect = find_by_identifier
    return index


@pytest.fixture
def resolver(mock_archive_index):
    return IdentifierResolver.default(mock_archive_index)


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [
    "0123456789abcdef0123456789ABCDEF",
    "https://s3.amazonaws.com/webamp-uploaded-skins/skins/0123456789abcdef0123456789ABCDEF.wsz",
    "look at 0123456789abcdef0123456789ABCDEF please",
])
async def test_embedded_md5_is_returned_verbatim(resolver, mock_archive_index, value):
    assert await resolver.resolve(value) == "0123456789abcdef0123456789ABCDEF"
    mock_archive_index.find_by_identifier.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("url", [
    "https://archive.org/details/my-item/",
    "https://archive.org/details/my-item",
    "archive.org/details/my-item/",
    "archive.org/details/my-item",
])
async def test_archive_url_variants_extract_the_same_item(resolver, mock_archive_index, url):
    assert await resolver.resolve(url) == ITEM_MD5
    mock_archive_index.find_by_identifier.assert_any_call("my-item")


@pytest.mark.asyncio
async def test_bare_item_name_is_looked_up(resolver):
    assert await resolver.resolve("my-item") == ITEM_MD5


@pytest.mark.asyncio
async def test_unknown_input_resolves_to_none(resolver):
    assert await resolver.resolve("https://archive.org/details/unknown-item") is None
    assert await resolver.resolve("nothing here") is None


@pytest.mark.asyncio
async def test_md5_strategy_wins_over_archive_lookups(mock_archive_index):
    """A URL holding both an item name and a hash resolves to the hash."""
    resolver = IdentifierResolver.default(mock_archive_index)
    value = "https://archive.org/details/my-item-" + "f" * 32
    assert await resolver.resolve(value) == "f" * 32
    mock_archive_index.find_by_identifier.assert_not_called()


@pytest.mark.asyncio
async def test_strategies_in_isolation(mock_archive_index):
    assert await Md5PatternStrategy().match("no hash") is None
    assert await ArchiveUrlStrategy(mock_archive_index).match("my-item") is None
    assert await ArchiveUrlStrategy(mock_archive_index).match("archive.org/details/my-item") == ITEM_MD5
    assert await ArchiveIdentifierStrategy(mock_archive_index).match("my-item") == ITEM_MD5


@pytest.mark.asyncio
async def test_resolver_against_archive_table(archive_index, add_archive_items):
    await add_archive_items(("my-item", ITEM_MD5))
    resolver = IdentifierResolver.default(archive_index)

    assert await resolver.resolve("https://archive.org/details/my-item/") == ITEM_MD5
    assert await resolver.resolve("my-item") == ITEM_MD5
    assert await resolver.resolve("other-item") is None
