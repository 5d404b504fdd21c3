"""Gateway error taxonomy.

Backend failures of every shape (S3 service errors, transport errors,
validation failures) are reduced to the small set of ``GatewayError`` kinds
defined here, so the HTTP layer can map them with a single table.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from s3gateway.infra.storage.client import StorageError

from .base import ServiceError

NOT_FOUND_CODES = frozenset({"NoSuchBucket", "NoSuchKey", "NotFound", "404"})
ALREADY_EXISTS_CODES = frozenset({"BucketAlreadyExists", "BucketAlreadyOwnedByYou"})
NOT_EMPTY_CODES = frozenset({"BucketNotEmpty"})


class GatewayError(ServiceError):
    """Base class for every failure the gateway reports to its callers."""

    kind = "backend"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AlreadyExistsError(GatewayError):
    """A bucket or object with the requested name already exists."""

    kind = "already_exists"

    def __init__(self, name: str, message: str | None = None):
        super().__init__(message or f"'{name}' already exists")
        self.name = name


class NotFoundError(GatewayError):
    """The requested bucket or object does not exist."""

    kind = "not_found"

    def __init__(self, name: str, message: str | None = None):
        super().__init__(message or f"'{name}' not found")
        self.name = name


class NotEmptyError(GatewayError):
    """The bucket still holds objects and cannot be removed."""

    kind = "not_empty"

    def __init__(self, name: str, message: str | None = None):
        super().__init__(message or f"'{name}' is not empty")
        self.name = name


class BackendError(GatewayError):
    """Unclassified transport or service fault."""

    kind = "backend"


class InvalidRequestError(GatewayError):
    """Client supplied input violates a rule."""

    kind = "invalid"


class MoveCleanupError(BackendError):
    """The object was copied to its destination but the source survived.

    The move is not rolled back; callers decide whether to retry the delete
    of ``source_key`` or remove ``destination_key``.
    """

    kind = "move_cleanup_failed"

    def __init__(
        self, message: str, *, bucket: str, source_key: str, destination_key: str
    ):
        super().__init__(message)
        self.bucket = bucket
        self.source_key = source_key
        self.destination_key = destination_key


def is_not_found(error: StorageError) -> bool:
    """Return True when the backend signalled a missing bucket or key."""
    if error.status_code == 404:
        return True
    return error.code in NOT_FOUND_CODES


def classify(error: StorageError, *, subject: str) -> GatewayError:
    """Map a backend failure onto the gateway taxonomy.

    Typed signals (S3 error code, HTTP status) decide first. Message
    inspection is only consulted when the backend returned no code at all.
    """
    if is_not_found(error):
        return NotFoundError(subject, str(error))
    if error.code in ALREADY_EXISTS_CODES:
        return AlreadyExistsError(subject, str(error))
    if error.code in NOT_EMPTY_CODES:
        return NotEmptyError(subject, str(error))
    if error.code is None:
        return _classify_by_message(error, subject=subject)
    return BackendError(str(error))


def _classify_by_message(error: StorageError, *, subject: str) -> GatewayError:
    # Fallback for backends that report conflicts without an error code.
    text = str(error).lower()
    if "already exists" in text:
        return AlreadyExistsError(subject, str(error))
    if "not empty" in text:
        return NotEmptyError(subject, str(error))
    return BackendError(str(error))


@contextmanager
def translate_storage_errors(subject: str) -> Iterator[None]:
    """Re-raise ``StorageError`` raised inside the block as a ``GatewayError``."""
    try:
        yield
    except StorageError as exc:
        raise classify(exc, subject=subject) from exc
