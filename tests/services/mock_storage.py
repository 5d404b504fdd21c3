"""Mock storage client for testing gateway operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Sequence

from s3gateway.infra.storage.client import (
    MAX_DELETE_BATCH,
    DeleteFailure,
    ObjectEntry,
    ObjectHead,
    ObjectListing,
    StorageError,
)

BASE_TIME = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def _no_such_bucket(operation: str, bucket: str) -> StorageError:
    return StorageError(
        f"{operation} failed: The specified bucket does not exist: {bucket}",
        operation=operation,
        code="NoSuchBucket",
        status_code=404,
    )


@dataclass
class StoredBlob:
    data: bytes
    last_modified: datetime
    content_type: str | None = None


@dataclass
class MockStorageClient:
    """In-memory mock of StorageClient with S3 listing semantics.

    Keys are listed in lexicographic order. ``page_size`` caps the number of
    entries (contents plus common prefixes) per listing page.
    """

    buckets: dict[str, dict[str, StoredBlob]] = field(default_factory=dict)
    page_size: int = 1000
    calls: list[str] = field(default_factory=list)
    delete_batches: list[list[str]] = field(default_factory=list)
    fail_keys: set[str] = field(default_factory=set)
    fail_source_delete: bool = False
    errors: dict[str, StorageError] = field(default_factory=dict)
    _clock: int = field(default=0)

    # Test helpers

    def add_bucket(self, bucket: str) -> None:
        self.buckets.setdefault(bucket, {})

    def add_object(self, bucket: str, key: str, data: bytes = b"data") -> None:
        self.add_bucket(bucket)
        self._clock += 1
        self.buckets[bucket][key] = StoredBlob(
            data=data, last_modified=BASE_TIME + timedelta(seconds=self._clock)
        )

    def keys(self, bucket: str) -> list[str]:
        return sorted(self.buckets.get(bucket, {}))

    def fail_next(self, operation: str, error: StorageError) -> None:
        self.errors[operation] = error

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        error = self.errors.pop(operation, None)
        if error is not None:
            raise error

    def _bucket(self, operation: str, bucket: str) -> dict[str, StoredBlob]:
        if bucket not in self.buckets:
            raise _no_such_bucket(operation, bucket)
        return self.buckets[bucket]

    # StorageClient protocol

    def list_buckets(self) -> list[str]:
        self._enter("list_buckets")
        return list(self.buckets)

    def create_bucket(self, *, bucket: str) -> None:
        self._enter("create_bucket")
        if bucket in self.buckets:
            raise StorageError(
                "create_bucket failed: Your previous request to create the named "
                "bucket succeeded and you already own it.",
                operation="create_bucket",
                code="BucketAlreadyOwnedByYou",
                status_code=409,
            )
        self.buckets[bucket] = {}

    def delete_bucket(self, *, bucket: str) -> None:
        self._enter("delete_bucket")
        objects = self._bucket("delete_bucket", bucket)
        if objects:
            raise StorageError(
                "delete_bucket failed: The bucket you tried to delete is not empty",
                operation="delete_bucket",
                code="BucketNotEmpty",
                status_code=409,
            )
        del self.buckets[bucket]

    def list_objects(
        self,
        *,
        bucket: str,
        prefix: str = "",
        delimiter: str | None = None,
        continuation_token: str | None = None,
    ) -> ObjectListing:
        self._enter("list_objects")
        objects = self._bucket("list_objects", bucket)

        entries: list[tuple[str, ObjectEntry | None]] = []
        seen_prefixes: set[str] = set()
        for key in sorted(objects):
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix) :]
            if delimiter and delimiter in rest:
                common = prefix + rest[: rest.index(delimiter) + len(delimiter)]
                if common not in seen_prefixes:
                    seen_prefixes.add(common)
                    entries.append((common, None))
                continue
            blob = objects[key]
            entry = ObjectEntry(
                key=key, size=len(blob.data), last_modified=blob.last_modified
            )
            entries.append((key, entry))

        start = int(continuation_token) if continuation_token else 0
        page = entries[start : start + self.page_size]
        truncated = start + self.page_size < len(entries)
        return ObjectListing(
            common_prefixes=tuple(name for name, entry in page if entry is None),
            contents=tuple(entry for _, entry in page if entry is not None),
            is_truncated=truncated,
            next_continuation_token=str(start + self.page_size) if truncated else None,
        )

    def put_object(
        self,
        *,
        bucket: str,
        object_key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> None:
        self._enter("put_object")
        objects = self._bucket("put_object", bucket)
        self._clock += 1
        objects[object_key] = StoredBlob(
            data=bytes(data),
            last_modified=BASE_TIME + timedelta(seconds=self._clock),
            content_type=content_type,
        )

    def get_object(self, *, bucket: str, object_key: str) -> bytes:
        self._enter("get_object")
        objects = self._bucket("get_object", bucket)
        if object_key not in objects:
            raise StorageError(
                "get_object failed: The specified key does not exist.",
                operation="get_object",
                code="NoSuchKey",
                status_code=404,
            )
        return objects[object_key].data

    def head_object(self, *, bucket: str, object_key: str) -> ObjectHead:
        self._enter("head_object")
        objects = self.buckets.get(bucket, {})
        if object_key not in objects:
            # HEAD responses carry no body, so S3 reports only the status.
            raise StorageError(
                "head_object failed: Not Found",
                operation="head_object",
                code="404",
                status_code=404,
            )
        blob = objects[object_key]
        return ObjectHead(
            size_bytes=len(blob.data),
            etag=f'"etag-{object_key}"',
            content_type=blob.content_type,
            last_modified=blob.last_modified,
        )

    def delete_objects(
        self, *, bucket: str, object_keys: Sequence[str]
    ) -> list[DeleteFailure]:
        self._enter("delete_objects")
        objects = self._bucket("delete_objects", bucket)
        if len(object_keys) > MAX_DELETE_BATCH:
            raise StorageError(
                f"delete_objects accepts at most {MAX_DELETE_BATCH} keys",
                operation="delete_objects",
            )
        self.delete_batches.append(list(object_keys))
        failures: list[DeleteFailure] = []
        for key in object_keys:
            if key in self.fail_keys:
                failures.append(
                    DeleteFailure(key=key, code="AccessDenied", message="Access Denied")
                )
                continue
            objects.pop(key, None)
        return failures

    def copy_object(
        self, *, bucket: str, source_key: str, destination_key: str
    ) -> None:
        self._enter("copy_object")
        objects = self._bucket("copy_object", bucket)
        if source_key not in objects:
            raise StorageError(
                "copy_object failed: The specified key does not exist.",
                operation="copy_object",
                code="NoSuchKey",
                status_code=404,
            )
        source = objects[source_key]
        self._clock += 1
        objects[destination_key] = StoredBlob(
            data=source.data,
            last_modified=BASE_TIME + timedelta(seconds=self._clock),
            content_type=source.content_type,
        )

    def delete_object(self, *, bucket: str, object_key: str) -> None:
        self._enter("delete_object")
        objects = self._bucket("delete_object", bucket)
        if self.fail_source_delete:
            raise StorageError(
                "delete_object failed: Access Denied",
                operation="delete_object",
                code="AccessDenied",
                status_code=403,
            )
        objects.pop(object_key, None)
