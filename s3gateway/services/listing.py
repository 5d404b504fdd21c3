"""Folder-style object listing on top of delimiter-aware S3 listings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from .base import DELIMITER, BaseService
from .errors import translate_storage_errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoredObject:
    """A file or synthesized folder entry returned to callers."""

    name: str
    size: int
    last_modified: str | None = None

    @property
    def is_folder(self) -> bool:
        return self.name.endswith(DELIMITER)


def _format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0).isoformat()


class ObjectLister(BaseService):
    """Lists bucket contents, turning common prefixes into folder entries."""

    def list(self, bucket: str, prefix: str | None = None) -> list[StoredObject]:
        """Return the folders and files directly under ``prefix``.

        Folders come first, then files, each in backend order. The
        placeholder object whose key equals ``prefix`` is left out so a
        folder never lists itself. Only the first backend page is returned.

        Raises:
            NotFoundError: If the bucket does not exist.
            BackendError: If the listing call fails.
        """
        prefix = prefix or ""
        logger.info("list_objects bucket=%s prefix=%r", bucket, prefix)
        with translate_storage_errors(bucket):
            listing = self.storage.list_objects(
                bucket=bucket, prefix=prefix, delimiter=DELIMITER
            )

        if listing.is_truncated:
            logger.warning(
                "list_objects_truncated bucket=%s prefix=%r returned_first_page_only",
                bucket,
                prefix,
            )

        entries = [
            StoredObject(name=common_prefix, size=0)
            for common_prefix in listing.common_prefixes
        ]
        for obj in listing.contents:
            if prefix and obj.key == prefix:
                continue
            entries.append(
                StoredObject(
                    name=obj.key,
                    size=obj.size,
                    last_modified=_format_timestamp(obj.last_modified),
                )
            )
        return entries

    def list_keys_recursive(self, bucket: str, prefix: str) -> list[str]:
        """Return every key under ``prefix`` with no folder grouping.

        Follows continuation tokens until the backend reports no more pages.
        The placeholder whose key equals ``prefix`` is excluded.
        """
        keys: list[str] = []
        token: str | None = None
        with translate_storage_errors(bucket):
            while True:
                listing = self.storage.list_objects(
                    bucket=bucket, prefix=prefix, continuation_token=token
                )
                keys.extend(obj.key for obj in listing.contents if obj.key != prefix)
                token = listing.next_continuation_token
                if not listing.is_truncated or not token:
                    break
        return keys
