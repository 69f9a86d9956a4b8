import pytest
from unittest.mock import MagicMock

from botocore.exceptions import ClientError

from skin_moderation.storage.s3_mirror import S3Mirror, S3MirrorConfig, S3MirrorError


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest.fixture
def mirror(s3_client):
    return S3Mirror(S3MirrorConfig(bucket_name="mirror-bucket"), client=s3_client)


def _client_error(operation):
    return ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, operation)


@pytest.mark.asyncio
@pytest.mark.parametrize("method, prefix", [
    ("mark_approved", "approved/"),
    ("mark_rejected", "rejected/"),
    ("mark_tweeted", "tweeted/"),
])
async def test_marking_writes_an_empty_marker(mirror, s3_client, method, prefix):
    await getattr(mirror, method)("a" * 32)

    s3_client.put_object.assert_called_once_with(
        Bucket="mirror-bucket", Key=f"{prefix}{'a' * 32}", Body=b""
    )


@pytest.mark.asyncio
async def test_listing_pages_through_prefix(mirror, s3_client):
    paginator = MagicMock()
    paginator.paginate.return_value = [
        {"Contents": [{"Key": "approved/" + "a" * 32}, {"Key": "approved/"}]},
        {"Contents": [{"Key": "approved/" + "b" * 32}]},
        {},
    ]
    s3_client.get_paginator.return_value = paginator

    assert await mirror.list_approved() == {"a" * 32, "b" * 32}
    s3_client.get_paginator.assert_called_once_with("list_objects_v2")
    paginator.paginate.assert_called_once_with(Bucket="mirror-bucket", Prefix="approved/")


@pytest.mark.asyncio
async def test_write_errors_are_wrapped(mirror, s3_client):
    s3_client.put_object.side_effect = _client_error("PutObject")

    with pytest.raises(S3MirrorError) as excinfo:
        await mirror.mark_rejected("a" * 32)
    assert isinstance(excinfo.value.__cause__, ClientError)


@pytest.mark.asyncio
async def test_list_errors_are_wrapped(mirror, s3_client):
    s3_client.get_paginator.return_value.paginate.side_effect = _client_error("ListObjectsV2")

    with pytest.raises(S3MirrorError):
        await mirror.list_tweeted()


def test_config_from_settings(test_settings):
    config = S3MirrorConfig.from_settings(test_settings)

    assert config.bucket_name == test_settings.MIRROR_BUCKET
    assert config.approved_prefix == "approved/"
    assert config.tweeted_prefix == "tweeted/"
