"""Gateway service orchestrating bucket and object operations.

This module provides the application service behind the REST API: bucket
CRUD with existence checks, folder-aware listing and deletion, object reads
and writes, and the two-phase copy-then-delete move.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Sequence

from s3gateway.infra.storage.client import StorageClient, StorageError

from .base import DELIMITER, BaseService
from .deletion import BatchDeleter, DeleteReport
from .errors import (
    AlreadyExistsError,
    InvalidRequestError,
    MoveCleanupError,
    NotFoundError,
    classify,
    is_not_found,
    translate_storage_errors,
)
from .listing import ObjectLister, StoredObject
from .validation import validate_bucket_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UploadedObject:
    """Result of a successful upload."""

    bucket: str
    key: str
    size: int


@dataclass(frozen=True, slots=True)
class MovedObject:
    """Result of a completed move."""

    bucket: str
    source_key: str
    destination_key: str


def _sanitize_filename(filename: str) -> str:
    """Sanitize filename by removing path separators."""
    cleaned = filename.strip().replace("\\", "_").replace("/", "_")
    return cleaned.lstrip(".") or "file"


def build_object_key(prefix: str | None, filename: str | None) -> str:
    """Join an optional folder prefix and an uploaded file's name.

    A missing filename is replaced by a random UUID.
    """
    name = _sanitize_filename(filename) if filename else str(uuid.uuid4())
    if not prefix:
        return name
    return f"{prefix.rstrip(DELIMITER)}{DELIMITER}{name}"


class GatewayService(BaseService):
    """Application service for bucket and object management.

    Holds no state of its own besides the injected storage client; every
    existence or conflict check asks the backend.
    """

    def __init__(
        self,
        storage: StorageClient,
        *,
        lister: ObjectLister | None = None,
        deleter: BatchDeleter | None = None,
        max_upload_bytes: int | None = None,
    ) -> None:
        super().__init__(storage)
        self._lister = lister or ObjectLister(storage)
        self._deleter = deleter or BatchDeleter(storage, lister=self._lister)
        self._max_upload_bytes = max_upload_bytes

    @property
    def max_upload_bytes(self) -> int | None:
        return self._max_upload_bytes

    # Buckets

    def list_buckets(self) -> list[str]:
        with translate_storage_errors("buckets"):
            return self.storage.list_buckets()

    def create_bucket(self, name: str) -> None:
        """Create a bucket after validating its name.

        Raises:
            InvalidRequestError: If the name is empty or breaks a naming rule.
            AlreadyExistsError: If a bucket with this name is already listed.
            BackendError: If the backend call fails.
        """
        if not name:
            raise InvalidRequestError("Bucket name cannot be empty")
        bucket = validate_bucket_name(name)

        if bucket in self.list_buckets():
            logger.info("create_bucket_conflict bucket=%s", bucket)
            raise AlreadyExistsError(bucket, f"Bucket '{bucket}' already exists")

        with translate_storage_errors(bucket):
            self.storage.create_bucket(bucket=bucket)
        logger.info("create_bucket bucket=%s", bucket)

    def delete_bucket(self, name: str) -> None:
        """Delete a bucket that is currently listed.

        Raises:
            NotFoundError: If no bucket with this name is listed.
            NotEmptyError: If the backend refuses because objects remain.
            BackendError: If the backend call fails.
        """
        if name not in self.list_buckets():
            logger.info("delete_bucket_missing bucket=%s", name)
            raise NotFoundError(name, f"Bucket '{name}' not found")

        with translate_storage_errors(name):
            self.storage.delete_bucket(bucket=name)
        logger.info("delete_bucket bucket=%s", name)

    # Objects

    def list_objects(
        self, bucket: str, prefix: str | None = None
    ) -> list[StoredObject]:
        return self._lister.list(bucket, prefix)

    def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        if not key:
            raise InvalidRequestError("Object key cannot be empty")
        with translate_storage_errors(key):
            self.storage.put_object(
                bucket=bucket, object_key=key, data=data, content_type=content_type
            )
        logger.info("put_object bucket=%s key=%s size=%d", bucket, key, len(data))

    def upload_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        *,
        replace: bool = False,
        content_type: str | None = None,
    ) -> UploadedObject:
        """Write an object, optionally refusing to overwrite an existing one.

        The existence probe and the write are two separate backend calls; a
        concurrent writer can still slip in between them.

        Raises:
            InvalidRequestError: If the payload exceeds the upload limit.
            AlreadyExistsError: If ``replace`` is False and the key exists.
            BackendError: If a backend call fails.
        """
        if self._max_upload_bytes is not None and len(data) > self._max_upload_bytes:
            raise InvalidRequestError(
                f"File {key} exceeds maximum allowed size "
                f"({self._max_upload_bytes} bytes)"
            )
        if not replace and self.object_exists(bucket, key):
            raise AlreadyExistsError(
                key, f"File {key} already exists in bucket {bucket}"
            )
        self.put_object(bucket, key, data, content_type=content_type)
        return UploadedObject(bucket=bucket, key=key, size=len(data))

    def get_object(self, bucket: str, key: str) -> bytes:
        with translate_storage_errors(key):
            return self.storage.get_object(bucket=bucket, object_key=key)

    def object_exists(self, bucket: str, key: str) -> bool:
        """Probe for ``key`` with a HEAD request.

        Raises:
            BackendError: For any failure other than a not-found signal.
        """
        try:
            self.storage.head_object(bucket=bucket, object_key=key)
        except StorageError as exc:
            if is_not_found(exc):
                return False
            raise classify(exc, subject=key) from exc
        return True

    def delete_object(self, bucket: str, key: str) -> DeleteReport:
        return self._deleter.delete_many(bucket, [key])

    def delete_objects(self, bucket: str, keys: Sequence[str]) -> DeleteReport:
        return self._deleter.delete_many(bucket, keys)

    def create_folder(self, bucket: str, name: str) -> str:
        """Write the zero-byte marker for folder ``name`` and return its key."""
        if not name or not name.strip(DELIMITER):
            raise InvalidRequestError("Folder name cannot be empty")
        folder_key = name if name.endswith(DELIMITER) else f"{name}{DELIMITER}"
        self.put_object(bucket, folder_key, b"")
        return folder_key

    def move_object(
        self, bucket: str, source_key: str, destination_key: str
    ) -> MovedObject:
        """Move an object by copying it and then deleting the source.

        The two phases are not atomic and a failed delete does not roll the
        copy back.

        Raises:
            NotFoundError: If the source does not exist; nothing is copied.
            AlreadyExistsError: If the destination exists; nothing is copied.
            MoveCleanupError: If the copy succeeded but the source delete failed.
            BackendError: If a probe or the copy fails.
        """
        if not self.object_exists(bucket, source_key):
            raise NotFoundError(
                source_key,
                f"Source file {source_key} does not exist in bucket {bucket}",
            )
        if self.object_exists(bucket, destination_key):
            raise AlreadyExistsError(
                destination_key,
                f"Destination file {destination_key} already exists in bucket {bucket}",
            )

        with translate_storage_errors(source_key):
            self.storage.copy_object(
                bucket=bucket, source_key=source_key, destination_key=destination_key
            )

        try:
            self.storage.delete_object(bucket=bucket, object_key=source_key)
        except StorageError as exc:
            logger.error(
                "move_object_cleanup_failed bucket=%s source=%s destination=%s error=%s",
                bucket,
                source_key,
                destination_key,
                exc,
            )
            raise MoveCleanupError(
                f"File was copied but could not be deleted from source: {exc}",
                bucket=bucket,
                source_key=source_key,
                destination_key=destination_key,
            ) from exc

        logger.info(
            "move_object bucket=%s source=%s destination=%s",
            bucket,
            source_key,
            destination_key,
        )
        return MovedObject(
            bucket=bucket, source_key=source_key, destination_key=destination_key
        )
