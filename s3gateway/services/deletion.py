"""Batched, folder-aware object deletion."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

from s3gateway.infra.storage.client import (
    MAX_DELETE_BATCH,
    DeleteFailure,
    StorageClient,
)

from .base import DELIMITER, BaseService
from .errors import translate_storage_errors
from .listing import ObjectLister

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeleteReport:
    """Outcome of a delete request.

    ``attempted`` lists every key sent to the backend, in request order.
    ``failed`` holds the per-key failures the backend reported; an empty list
    means every attempted deletion was accepted.
    """

    attempted: tuple[str, ...] = ()
    failed: tuple[DeleteFailure, ...] = ()

    @property
    def succeeded(self) -> bool:
        return not self.failed


def _chunks(keys: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(keys), size):
        yield keys[start : start + size]


class BatchDeleter(BaseService):
    """Deletes keys in batches, expanding folder markers into their contents."""

    def __init__(
        self,
        storage: StorageClient,
        *,
        lister: ObjectLister | None = None,
        batch_size: int = MAX_DELETE_BATCH,
    ):
        super().__init__(storage)
        if not 0 < batch_size <= MAX_DELETE_BATCH:
            raise ValueError(f"batch_size must be between 1 and {MAX_DELETE_BATCH}")
        self._lister = lister or ObjectLister(storage)
        self._batch_size = batch_size

    def delete_many(self, bucket: str, keys: Sequence[str]) -> DeleteReport:
        """Delete ``keys`` and everything stored under any folder marker among them.

        Per-key failures reported by the backend are logged and returned in
        the report; they do not stop the remaining batches. A failed delete
        request aborts the whole operation.

        Raises:
            NotFoundError: If the bucket does not exist.
            BackendError: If a listing or delete request fails.
        """
        if not keys:
            logger.info("delete_objects bucket=%s no_keys", bucket)
            return DeleteReport()

        expanded = self._expand(bucket, keys)
        logger.info(
            "delete_objects bucket=%s requested=%d expanded=%d",
            bucket,
            len(keys),
            len(expanded),
        )

        failures: list[DeleteFailure] = []
        for number, batch in enumerate(_chunks(expanded, self._batch_size), start=1):
            with translate_storage_errors(bucket):
                batch_failures = self.storage.delete_objects(
                    bucket=bucket, object_keys=list(batch)
                )
            for failure in batch_failures:
                logger.error(
                    "delete_object_failed bucket=%s batch=%d key=%s code=%s message=%s",
                    bucket,
                    number,
                    failure.key,
                    failure.code,
                    failure.message,
                )
            failures.extend(batch_failures)

        if failures:
            logger.warning(
                "delete_objects_partial bucket=%s attempted=%d failed=%d",
                bucket,
                len(expanded),
                len(failures),
            )
        return DeleteReport(attempted=tuple(expanded), failed=tuple(failures))

    def _expand(self, bucket: str, keys: Sequence[str]) -> list[str]:
        # Depth-first so a folder's contents directly follow its marker;
        # ``seen`` keeps each key to a single visit. A recursive listing already
        # covers nested markers, so those are not listed again.
        expanded: list[str] = []
        seen: set[str] = set()
        listed: list[str] = []
        pending = list(reversed(keys))
        while pending:
            key = pending.pop()
            if key in seen:
                continue
            seen.add(key)
            if key.endswith(DELIMITER) and not any(
                key.startswith(prefix) for prefix in listed
            ):
                listed.append(key)
                children = self._lister.list_keys_recursive(bucket, key)
                logger.info(
                    "delete_objects_expand bucket=%s prefix=%s found=%d",
                    bucket,
                    key,
                    len(children),
                )
                pending.extend(reversed(children))
            expanded.append(key)
        return expanded
