"""
Object-storage mirror of moderation decisions.

Each decision is an empty marker object keyed `<prefix><md5>` (for example
`approved/0123...`) in the mirror bucket. Marking is an idempotent PUT; listing
pages through every key under a prefix.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Set

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from skin_moderation.config.settings import Settings

logger = logging.getLogger(__name__)


class S3MirrorError(Exception):
    """Raised when the mirror bucket cannot be read or written."""
    pass


@dataclass
class S3MirrorConfig:
    """Configuration for the mirror bucket."""
    bucket_name: str
    approved_prefix: str = "approved/"
    rejected_prefix: str = "rejected/"
    tweeted_prefix: str = "tweeted/"
    endpoint_url: Optional[str] = None
    region_name: str = "us-east-1"
    access_key: Optional[str] = None
    secret_key: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> 'S3MirrorConfig':
        return cls(
            bucket_name=settings.MIRROR_BUCKET,
            approved_prefix=settings.MIRROR_APPROVED_PREFIX,
            rejected_prefix=settings.MIRROR_REJECTED_PREFIX,
            tweeted_prefix=settings.MIRROR_TWEETED_PREFIX,
            endpoint_url=settings.S3_ENDPOINT_URL,
            region_name=settings.S3_REGION,
            access_key=settings.S3_ACCESS_KEY,
            secret_key=settings.S3_SECRET_KEY,
        )


def create_s3_client(config: S3MirrorConfig):
    """Builds a boto3 S3 client for `config`."""
    return boto3.client(
        's3',
        endpoint_url=config.endpoint_url,
        region_name=config.region_name,
        aws_access_key_id=config.access_key,
        aws_secret_access_key=config.secret_key,
        config=Config(
            signature_version='s3v4',
            connect_timeout=5,
            read_timeout=10,
            retries={'max_attempts': 3},
        ),
    )


class S3Mirror:
    """Async facade over the synchronous boto3 client."""

    def __init__(self, config: S3MirrorConfig, client=None):
        self.config = config
        self._client = client if client is not None else create_s3_client(config)

    # Writes

    def _put_marker(self, key: str) -> None:
        try:
            self._client.put_object(Bucket=self.config.bucket_name, Key=key, Body=b"")
        except (BotoCoreError, ClientError) as e:
            raise S3MirrorError(f"Failed to write marker {key}: {e}") from e
        logger.debug(f"Wrote mirror marker s3://{self.config.bucket_name}/{key}")

    async def mark_approved(self, md5: str) -> None:
        await asyncio.to_thread(self._put_marker, f"{self.config.approved_prefix}{md5}")

    async def mark_rejected(self, md5: str) -> None:
        await asyncio.to_thread(self._put_marker, f"{self.config.rejected_prefix}{md5}")

    async def mark_tweeted(self, md5: str) -> None:
        await asyncio.to_thread(self._put_marker, f"{self.config.tweeted_prefix}{md5}")

    # Reads

    def _list_marked(self, prefix: str) -> Set[str]:
        md5s: Set[str] = set()
        try:
            paginator = self._client.get_paginator('list_objects_v2')
            for page in paginator.paginate(Bucket=self.config.bucket_name, Prefix=prefix):
                for obj in page.get('Contents', []):
                    name = obj['Key'][len(prefix):]
                    if name:
                        md5s.add(name)
        except (BotoCoreError, ClientError) as e:
            raise S3MirrorError(f"Failed to list markers under {prefix}: {e}") from e
        logger.info(f"Listed {len(md5s)} mirror markers under {prefix}")
        return md5s

    async def list_approved(self) -> Set[str]:
        return await asyncio.to_thread(self._list_marked, self.config.approved_prefix)

    async def list_rejected(self) -> Set[str]:
        return await asyncio.to_thread(self._list_marked, self.config.rejected_prefix)

    async def list_tweeted(self) -> Set[str]:
        return await asyncio.to_thread(self._list_marked, self.config.tweeted_prefix)
