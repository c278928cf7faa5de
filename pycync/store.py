"""S3 content store client for pycync."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import FetchFailure, ObjectNotFound, PushFailure, SetupError
from .utils import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


def _error_code(error: ClientError) -> str:
    """Extract the error code from a botocore ClientError."""
    return str(error.response.get("Error", {}).get("Code", ""))


class S3ContentStore:
    """Object store collaborator backed by an S3 bucket.

    Keys are exposed without the configured prefix, so callers only ever
    see logical paths.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        client: Any = None,
        endpoint_url: str | None = None,
        region_name: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_attempts: int = 3,
    ):
        """Initialize the content store.

        Args:
            bucket: Bucket name
            prefix: Optional key prefix all logical paths live under
            client: Optional pre-built boto3 S3 client
            endpoint_url: Optional endpoint for S3-compatible services
            region_name: Optional AWS region (uses boto3 defaults if not provided)
            page_size: Maximum keys requested per listing page
            max_attempts: Total attempts botocore makes for retryable errors
        """
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.page_size = page_size
        self.region_name = region_name

        if client is None:
            client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                region_name=region_name,
                config=BotoConfig(
                    retries={"max_attempts": max_attempts, "mode": "standard"}
                ),
            )
        self.s3 = client

    def _make_key(self, path: str) -> str:
        """Convert a logical path to an S3 key with prefix.

        The path is used verbatim so every listed key maps back to itself.
        """
        return f"{self.prefix}/{path}" if self.prefix else path

    def _strip_key(self, key: str) -> str:
        """Convert an S3 key back to a logical path."""
        if self.prefix:
            return key[len(self.prefix) + 1 :]
        return key

    def list_keys(self) -> Iterator[str]:
        """Yield every logical path in the bucket.

        Pagination is drained internally; directory marker keys (ending
        in ``/``) are skipped.

        Yields:
            Logical paths without the prefix

        Raises:
            FetchFailure: If any listing page cannot be retrieved
        """
        paginator = self.s3.get_paginator("list_objects_v2")
        kwargs: dict[str, Any] = {
            "Bucket": self.bucket,
            "PaginationConfig": {"PageSize": self.page_size},
        }
        if self.prefix:
            kwargs["Prefix"] = f"{self.prefix}/"

        try:
            for page in paginator.paginate(**kwargs):
                for obj in page.get("Contents", []):
                    key = obj["Key"]
                    if key.endswith("/"):
                        continue
                    yield self._strip_key(key)
        except (ClientError, BotoCoreError) as e:
            raise FetchFailure(f"Failed to list bucket {self.bucket}: {e}") from e

    def get(self, path: str) -> bytes:
        """Fetch the bytes stored under a logical path.

        Args:
            path: Logical path

        Returns:
            Object contents

        Raises:
            ObjectNotFound: If no object exists under the path
            FetchFailure: For any other S3 or network error
        """
        key = self._make_key(path)
        try:
            response = self.s3.get_object(Bucket=self.bucket, Key=key)
            return response["Body"].read()
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise ObjectNotFound(f"Object not found: {path}", path) from e
            raise FetchFailure(f"Failed to fetch {path}: {e}", path) from e
        except BotoCoreError as e:
            raise FetchFailure(f"Failed to fetch {path}: {e}", path) from e

    def put(self, path: str, data: bytes) -> None:
        """Store bytes under a logical path, overwriting any existing object.

        Args:
            path: Logical path
            data: Contents to store

        Raises:
            PushFailure: If the upload fails
        """
        key = self._make_key(path)
        try:
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=data)
        except (ClientError, BotoCoreError) as e:
            raise PushFailure(f"Failed to upload {path}: {e}", path) from e
        logger.debug("Uploaded %s (%d bytes) to s3://%s", path, len(data), self.bucket)

    def bucket_exists(self) -> bool:
        """Check whether the bucket exists and is accessible."""
        try:
            self.s3.head_bucket(Bucket=self.bucket)
            return True
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES | {"NoSuchBucket"}:
                return False
            raise SetupError(f"Cannot access bucket {self.bucket}: {e}") from e

    def create_bucket(self) -> None:
        """Create the bucket.

        Raises:
            SetupError: If the bucket cannot be created
        """
        kwargs: dict[str, Any] = {"Bucket": self.bucket}
        region = self.region_name or self.s3.meta.region_name
        # us-east-1 rejects an explicit location constraint
        if region and region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}

        try:
            self.s3.create_bucket(**kwargs)
        except ClientError as e:
            if _error_code(e) == "BucketAlreadyOwnedByYou":
                logger.debug("Bucket %s already exists", self.bucket)
                return
            raise SetupError(f"Failed to create bucket {self.bucket}: {e}") from e
        except BotoCoreError as e:
            raise SetupError(f"Failed to create bucket {self.bucket}: {e}") from e
        logger.info("Created bucket %s", self.bucket)
