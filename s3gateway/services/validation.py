"""Bucket name validation following the S3 naming rules."""

from __future__ import annotations

import string
from typing import NewType

from .errors import InvalidRequestError

BucketName = NewType("BucketName", str)

MIN_BUCKET_NAME_LENGTH = 3
MAX_BUCKET_NAME_LENGTH = 63

_EDGE_CHARACTERS = frozenset(string.ascii_lowercase + string.digits)
_ALLOWED_CHARACTERS = _EDGE_CHARACTERS | {".", "-"}


def bucket_name_violation(name: str) -> str | None:
    """Return the first naming rule ``name`` breaks, or None when it is valid.

    Rules are checked in a fixed order and only the first failure is
    reported.
    """
    if not MIN_BUCKET_NAME_LENGTH <= len(name) <= MAX_BUCKET_NAME_LENGTH:
        return (
            f"Bucket name must be between {MIN_BUCKET_NAME_LENGTH} and "
            f"{MAX_BUCKET_NAME_LENGTH} characters long. Got {len(name)} characters."
        )
    if not set(name) <= _ALLOWED_CHARACTERS:
        return (
            "Bucket name can only contain lowercase letters, numbers, "
            "periods (.), and hyphens (-)"
        )
    if name[0] not in _EDGE_CHARACTERS:
        return "Bucket name must begin with a letter or number"
    if name[-1] not in _EDGE_CHARACTERS:
        return "Bucket name must end with a letter or number"
    if ".." in name:
        return "Bucket name must not contain two adjacent periods"
    if _looks_like_ipv4(name):
        return "Bucket name must not be formatted as an IP address"
    if name.startswith("xn--"):
        return "Bucket name must not start with the prefix 'xn--'"
    if name.endswith("-s3alias"):
        return "Bucket name must not end with the suffix '-s3alias'"
    return None


def validate_bucket_name(name: str) -> BucketName:
    """Return ``name`` as a ``BucketName`` or raise ``InvalidRequestError``."""
    violation = bucket_name_violation(name)
    if violation is not None:
        raise InvalidRequestError(violation)
    return BucketName(name)


def _looks_like_ipv4(name: str) -> bool:
    segments = name.split(".")
    if len(segments) != 4:
        return False
    return all(segment.isdigit() and int(segment) <= 255 for segment in segments)
