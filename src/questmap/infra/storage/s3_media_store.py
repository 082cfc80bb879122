from __future__ import annotations

import asyncio
import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from questmap.core.settings import Settings
from questmap.domain.usecase.ports import MediaStoreError

log = logging.getLogger(__name__)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def s3_client(settings: Settings) -> Any:
    """Build an S3 client with bounded timeouts and a single attempt per call."""
    session = boto3.session.Session()
    client = session.client(
        "s3",
        endpoint_url=settings.s3_endpoint_url,
        region_name=settings.s3_region,
        aws_access_key_id=settings.s3_access_key_id,
        aws_secret_access_key=settings.s3_secret_access_key,
        config=Config(
            connect_timeout=settings.s3_connect_timeout,
            read_timeout=settings.s3_read_timeout,
            retries={"total_max_attempts": 1, "mode": "standard"},
            signature_version="s3v4",
            s3={"addressing_style": "path"} if settings.s3_endpoint_url else None,
        ),
    )
    log.debug(
        "Initialized S3 client",
        extra={
            "endpoint": settings.s3_endpoint_url,
            "region": settings.s3_region,
            "bucket": settings.s3_bucket,
        },
    )
    return client


class S3MediaStore:
    """Private bucket access. Blocking boto3 calls run in worker threads."""

    def __init__(self, *, client: Any, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3MediaStore":
        return cls(client=s3_client(settings), bucket=settings.s3_bucket)

    async def put_object(self, key: str, data: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as err:
            raise MediaStoreError(f"Could not store {key}") from err

    async def delete_object(self, key: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.delete_object, Bucket=self._bucket, Key=key
            )
        except (BotoCoreError, ClientError) as err:
            raise MediaStoreError(f"Could not delete {key}") from err

    async def list_keys(self, prefix: str) -> list[str]:
        try:
            return await asyncio.to_thread(self._list_keys_sync, prefix)
        except (BotoCoreError, ClientError) as err:
            raise MediaStoreError(f"Could not list {prefix}") from err

    async def signed_url(self, key: str, expires_in: int) -> str:
        """Presign a GET for ``key`` after confirming the object exists."""
        try:
            return await asyncio.to_thread(self._signed_url_sync, key, expires_in)
        except ClientError as err:
            code = str(err.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_CODES:
                raise MediaStoreError(f"Object not found: {key}") from err
            raise MediaStoreError(f"Could not sign {key}") from err
        except BotoCoreError as err:
            raise MediaStoreError(f"Could not sign {key}") from err

    def _list_keys_sync(self, prefix: str) -> list[str]:
        paginator = self._client.get_paginator("list_objects_v2")
        keys: list[str] = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            for item in page.get("Contents", []):
                keys.append(item["Key"])
        return keys

    def _signed_url_sync(self, key: str, expires_in: int) -> str:
        self._client.head_object(Bucket=self._bucket, Key=key)
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self._bucket, "Key": key},
            ExpiresIn=expires_in,
        )
