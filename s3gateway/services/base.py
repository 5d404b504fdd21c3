from __future__ import annotations

from s3gateway.infra.storage.client import StorageClient

# Folder convention shared by listing, deletion and folder creation.
DELIMITER = "/"


class ServiceError(Exception):
    """Base class for application service level exceptions."""


class BaseService:
    """Holds the storage client shared by the gateway services.

    Services keep no bucket or object state between calls; the backend is
    the only source of truth.
    """

    def __init__(self, storage: StorageClient):
        self._storage = storage

    @property
    def storage(self) -> StorageClient:
        return self._storage
