"""S3-compatible storage client implementation.

This module provides an S3-compatible storage client that works with
AWS S3, Ceph RGW, MinIO, and other S3-compatible object storage services.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Sequence

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3gateway.infra.observability.metrics import STORAGE_REQUESTS
from s3gateway.infra.storage.client import (
    MAX_DELETE_BATCH,
    DeleteFailure,
    ObjectEntry,
    ObjectHead,
    ObjectListing,
    StorageError,
)

if TYPE_CHECKING:
    from s3gateway.common.config import Settings


class S3StorageClient:
    """S3-compatible object storage client.

    Wraps a single boto3 client, which is safe to share between threads.
    Every backend failure is re-raised as ``StorageError`` carrying the S3
    error code and HTTP status when the service returned one.
    """

    def __init__(self, *, settings: "Settings") -> None:
        """Initialize the S3 client with configuration from settings.

        Args:
            settings: Application settings containing S3 configuration.
        """
        self._settings = settings
        self._client = self._build_client(settings)

    @staticmethod
    def _build_client(settings: "Settings") -> Any:
        """Create a boto3 S3 client from settings."""
        addressing_style = (settings.S3_ADDRESSING_STYLE or "path").strip().lower()
        config = Config(
            signature_version="s3v4",
            s3={"addressing_style": addressing_style},
        )

        return boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,
            region_name=settings.S3_REGION,
            aws_access_key_id=settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            use_ssl=bool(settings.S3_USE_SSL),
            config=config,
        )

    def _call(self, operation: str, method: Callable[..., Any], **params: Any) -> Any:
        try:
            response = method(**params)
        except ClientError as exc:
            STORAGE_REQUESTS.labels(operation, "error").inc()
            error = exc.response.get("Error") or {}
            metadata = exc.response.get("ResponseMetadata") or {}
            code = error.get("Code")
            message = error.get("Message") or str(exc)
            raise StorageError(
                f"{operation} failed: {message}",
                operation=operation,
                code=str(code) if code is not None else None,
                status_code=metadata.get("HTTPStatusCode"),
            ) from exc
        except BotoCoreError as exc:
            STORAGE_REQUESTS.labels(operation, "transport_error").inc()
            raise StorageError(
                f"{operation} failed: {exc}", operation=operation
            ) from exc
        STORAGE_REQUESTS.labels(operation, "ok").inc()
        return response

    def list_buckets(self) -> list[str]:
        """Return the names of all buckets visible to the credentials."""
        response = self._call("list_buckets", self._client.list_buckets)
        return [
            bucket["Name"]
            for bucket in response.get("Buckets", [])
            if bucket.get("Name")
        ]

    def create_bucket(self, *, bucket: str) -> None:
        """Create a bucket."""
        self._call("create_bucket", self._client.create_bucket, Bucket=bucket)

    def delete_bucket(self, *, bucket: str) -> None:
        """Delete an empty bucket."""
        self._call("delete_bucket", self._client.delete_bucket, Bucket=bucket)

    def list_objects(
        self,
        *,
        bucket: str,
        prefix: str = "",
        delimiter: str | None = None,
        continuation_token: str | None = None,
    ) -> ObjectListing:
        """List a single page of objects."""
        params: dict[str, Any] = {"Bucket": bucket}
        if prefix:
            params["Prefix"] = prefix
        if delimiter:
            params["Delimiter"] = delimiter
        if continuation_token:
            params["ContinuationToken"] = continuation_token

        response = self._call("list_objects", self._client.list_objects_v2, **params)

        prefixes = tuple(
            common["Prefix"]
            for common in response.get("CommonPrefixes", [])
            if common.get("Prefix")
        )
        contents = tuple(
            ObjectEntry(
                key=obj.get("Key", ""),
                size=int(obj.get("Size") or 0),
                last_modified=obj.get("LastModified"),
            )
            for obj in response.get("Contents", [])
        )
        truncated = bool(response.get("IsTruncated", False))
        return ObjectListing(
            common_prefixes=prefixes,
            contents=contents,
            is_truncated=truncated,
            next_continuation_token=(
                response.get("NextContinuationToken") if truncated else None
            ),
        )

    def put_object(
        self,
        *,
        bucket: str,
        object_key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> None:
        """Write an object."""
        params: dict[str, Any] = {"Bucket": bucket, "Key": object_key, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        self._call("put_object", self._client.put_object, **params)

    def get_object(self, *, bucket: str, object_key: str) -> bytes:
        """Read the full body of an object."""
        response = self._call(
            "get_object", self._client.get_object, Bucket=bucket, Key=object_key
        )
        body = response["Body"]
        try:
            return body.read()
        except BotoCoreError as exc:
            raise StorageError(
                f"get_object failed while reading body: {exc}", operation="get_object"
            ) from exc
        finally:
            body.close()

    def head_object(self, *, bucket: str, object_key: str) -> ObjectHead:
        """Get object metadata without downloading the content."""
        response = self._call(
            "head_object", self._client.head_object, Bucket=bucket, Key=object_key
        )
        size = response.get("ContentLength")
        return ObjectHead(
            size_bytes=int(size) if size is not None else 0,
            etag=response.get("ETag"),
            content_type=response.get("ContentType"),
            last_modified=response.get("LastModified"),
        )

    def delete_objects(
        self, *, bucket: str, object_keys: Sequence[str]
    ) -> list[DeleteFailure]:
        """Delete a batch of objects and report the keys that failed."""
        if not object_keys:
            return []
        if len(object_keys) > MAX_DELETE_BATCH:
            raise StorageError(
                f"delete_objects accepts at most {MAX_DELETE_BATCH} keys, "
                f"got {len(object_keys)}",
                operation="delete_objects",
            )

        response = self._call(
            "delete_objects",
            self._client.delete_objects,
            Bucket=bucket,
            Delete={
                "Objects": [{"Key": key} for key in object_keys],
                "Quiet": True,
            },
        )
        return [
            DeleteFailure(
                key=error.get("Key", ""),
                code=error.get("Code"),
                message=error.get("Message"),
            )
            for error in response.get("Errors", [])
        ]

    def copy_object(
        self, *, bucket: str, source_key: str, destination_key: str
    ) -> None:
        """Server-side copy within one bucket."""
        self._call(
            "copy_object",
            self._client.copy_object,
            Bucket=bucket,
            Key=destination_key,
            CopySource={"Bucket": bucket, "Key": source_key},
        )

    def delete_object(self, *, bucket: str, object_key: str) -> None:
        """Delete an object from storage."""
        self._call(
            "delete_object", self._client.delete_object, Bucket=bucket, Key=object_key
        )
