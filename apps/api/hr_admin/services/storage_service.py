"""Object storage cleanup for employee pictures (S3-compatible, e.g. Cloudflare R2)."""

from __future__ import annotations

import logging
from functools import lru_cache
from urllib.parse import unquote, urlparse

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from hr_admin.core.config import settings


logger = logging.getLogger(__name__)


def _normalize_endpoint(endpoint_url: str | None) -> str | None:
    if endpoint_url:
        return endpoint_url.rstrip("/")
    return None


def get_s3_client() -> BaseClient:
    """Return a configured S3 client (supports S3-compatible endpoints)."""
    return boto3.client(
        "s3",
        region_name=settings.S3_REGION or None,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        endpoint_url=_normalize_endpoint(settings.S3_ENDPOINT_URL),
    )


def object_key(key_or_url: str | None, public_url: str | None = None) -> str | None:
    """
    Derive the object key from a stored picture reference.

    Public URLs under the configured public base URL lose that prefix;
    other URLs keep only their path. Bare keys are returned as-is.
    """
    value = (key_or_url or "").strip()
    if not value:
        return None

    base = (public_url or "").rstrip("/")
    if base and value.startswith(base + "/"):
        key = value[len(base) + 1:]
    elif "://" in value:
        key = urlparse(value).path
    else:
        key = value

    key = unquote(key).lstrip("/")
    return key or None


class ObjectStorage:
    """Deletes stored objects; a missing bucket makes every call a no-op."""

    def __init__(
        self,
        bucket: str | None,
        public_url: str | None = None,
        client: BaseClient | None = None,
    ):
        self.bucket = bucket or None
        self.public_url = public_url
        self._client = client

    @property
    def client(self) -> BaseClient:
        if self._client is None:
            self._client = get_s3_client()
        return self._client

    def delete(self, key_or_url: str | None) -> bool:
        """
        Best-effort delete of one object.

        Returns True when the object was deleted (or did not exist).
        Storage failures are logged, never raised.
        """
        if not self.bucket:
            return False
        key = object_key(key_or_url, self.public_url)
        if not key:
            return False
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Failed to delete object key=%s: %s", key, exc)
            return False
        logger.info("Deleted object key=%s", key)
        return True


@lru_cache(maxsize=1)
def get_storage() -> ObjectStorage:
    """Process-wide storage configured from settings."""
    return ObjectStorage(settings.S3_BUCKET, public_url=settings.S3_PUBLIC_URL)
