from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request

from s3gateway.common.config import get_settings
from s3gateway.infra.storage.client import StorageClient
from s3gateway.services import GatewayService, get_service_bundle


def get_storage_client(request: Request) -> StorageClient:
    storage = getattr(request.app.state, "storage_client", None)
    if storage is None:
        raise HTTPException(status_code=503, detail="Storage backend is not configured")
    return storage


def get_gateway_service(
    storage: StorageClient = Depends(get_storage_client),
) -> GatewayService:
    settings = get_settings()
    services = get_service_bundle(
        storage, max_upload_bytes=settings.STORAGE_MAX_UPLOAD_BYTES
    )
    return services.gateway()


def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
    settings = get_settings()
    if settings.API_KEY_ENABLED:
        api_key_expected = getattr(settings, "API_KEY", None)
        if not x_api_key or (api_key_expected and x_api_key != api_key_expected):
            raise HTTPException(status_code=401, detail="Invalid API key")
