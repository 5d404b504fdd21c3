"""Object storage abstraction layer.

This module provides a protocol-based abstraction for object storage backends,
enabling support for S3, Ceph, MinIO, and other S3-compatible services.
"""

from .client import (
    MAX_DELETE_BATCH,
    DeleteFailure,
    ObjectEntry,
    ObjectHead,
    ObjectListing,
    StorageClient,
    StorageError,
)

__all__ = [
    "MAX_DELETE_BATCH",
    "DeleteFailure",
    "ObjectEntry",
    "ObjectHead",
    "ObjectListing",
    "StorageClient",
    "StorageError",
]
