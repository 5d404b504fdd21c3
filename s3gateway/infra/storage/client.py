"""Storage client protocol and data types.

This module defines the abstract interface the gateway needs from an
S3-compatible backend: bucket management, delimiter-aware listing, object
reads and writes, batched deletion and server-side copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Sequence

# Hard limit of the S3 DeleteObjects API.
MAX_DELETE_BATCH = 1000


class StorageError(RuntimeError):
    """Raised when object storage operations fail.

    ``code`` and ``status_code`` carry the backend's own error signal when it
    provides one (e.g. ``NoSuchKey`` / 404). Transport failures leave both
    unset.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.code = code
        self.status_code = status_code


@dataclass(frozen=True, slots=True)
class ObjectEntry:
    """A single object returned by a listing call."""

    key: str
    size: int
    last_modified: datetime | None = None


@dataclass(frozen=True, slots=True)
class ObjectListing:
    """One page of a ListObjectsV2 response."""

    common_prefixes: tuple[str, ...] = ()
    contents: tuple[ObjectEntry, ...] = ()
    is_truncated: bool = False
    next_continuation_token: str | None = None


@dataclass(frozen=True, slots=True)
class ObjectHead:
    """Metadata from a HEAD object request."""

    size_bytes: int
    etag: str | None
    content_type: str | None
    last_modified: datetime | None = None


@dataclass(frozen=True, slots=True)
class DeleteFailure:
    """Per-key failure reported inside a successful DeleteObjects call."""

    key: str
    code: str | None
    message: str | None


class StorageClient(Protocol):
    """Protocol defining the interface for object storage backends.

    Implementations must provide all methods defined here and raise
    ``StorageError`` for every backend failure.
    """

    def list_buckets(self) -> list[str]:
        """Return the names of all buckets visible to the credentials."""
        ...

    def create_bucket(self, *, bucket: str) -> None:
        """Create a bucket.

        Raises:
            StorageError: If the bucket exists or the operation fails.
        """
        ...

    def delete_bucket(self, *, bucket: str) -> None:
        """Delete an empty bucket.

        Raises:
            StorageError: If the bucket is missing, not empty, or the
                operation fails.
        """
        ...

    def list_objects(
        self,
        *,
        bucket: str,
        prefix: str = "",
        delimiter: str | None = None,
        continuation_token: str | None = None,
    ) -> ObjectListing:
        """List a single page of objects.

        Args:
            bucket: Bucket to list.
            prefix: Only keys starting with this prefix are returned.
            delimiter: When set, keys are grouped into common prefixes up to
                the next occurrence of the delimiter.
            continuation_token: Token from a previous truncated page.

        Returns:
            ObjectListing with common prefixes, contents and truncation info.

        Raises:
            StorageError: If the operation fails.
        """
        ...

    def put_object(
        self,
        *,
        bucket: str,
        object_key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> None:
        """Write an object, replacing any existing object with the same key."""
        ...

    def get_object(self, *, bucket: str, object_key: str) -> bytes:
        """Read the full body of an object."""
        ...

    def head_object(self, *, bucket: str, object_key: str) -> ObjectHead:
        """Get object metadata without downloading the content.

        Raises:
            StorageError: If the object doesn't exist or operation fails.
        """
        ...

    def delete_objects(
        self, *, bucket: str, object_keys: Sequence[str]
    ) -> list[DeleteFailure]:
        """Delete up to ``MAX_DELETE_BATCH`` objects in one request.

        Returns:
            Keys the backend reported as not deleted. An empty list means
            every key was accepted.

        Raises:
            StorageError: If the request itself fails.
        """
        ...

    def copy_object(
        self, *, bucket: str, source_key: str, destination_key: str
    ) -> None:
        """Server-side copy within one bucket."""
        ...

    def delete_object(self, *, bucket: str, object_key: str) -> None:
        """Delete a single object from storage.

        Raises:
            StorageError: If the operation fails.
        """
        ...
