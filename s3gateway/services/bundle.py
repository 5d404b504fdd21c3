from __future__ import annotations

from dataclasses import dataclass, field

from s3gateway.infra.storage.client import StorageClient

from .deletion import BatchDeleter
from .gateway_service import GatewayService
from .listing import ObjectLister


@dataclass
class ServiceBundle:
    """Lazily constructs services sharing the same storage client."""

    storage: StorageClient
    max_upload_bytes: int | None = None
    _lister: ObjectLister | None = field(default=None, init=False, repr=False)
    _deleter: BatchDeleter | None = field(default=None, init=False, repr=False)
    _gateway: GatewayService | None = field(default=None, init=False, repr=False)

    def lister(self) -> ObjectLister:
        if self._lister is None:
            self._lister = ObjectLister(self.storage)
        return self._lister

    def deleter(self) -> BatchDeleter:
        if self._deleter is None:
            self._deleter = BatchDeleter(self.storage, lister=self.lister())
        return self._deleter

    def gateway(self) -> GatewayService:
        if self._gateway is None:
            self._gateway = GatewayService(
                self.storage,
                lister=self.lister(),
                deleter=self.deleter(),
                max_upload_bytes=self.max_upload_bytes,
            )
        return self._gateway


def get_service_bundle(
    storage: StorageClient, *, max_upload_bytes: int | None = None
) -> ServiceBundle:
    return ServiceBundle(storage=storage, max_upload_bytes=max_upload_bytes)
