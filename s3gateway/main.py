import logging

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from s3gateway.api.v1.deps import get_storage_client, require_api_key
from s3gateway.api.v1.routers.buckets import router as buckets_router
from s3gateway.api.v1.routers.objects import router as objects_router
from s3gateway.api.v1.utils import to_http_exception
from s3gateway.common.config import get_settings
from s3gateway.common.logging import setup_logging
from s3gateway.infra.observability.metrics import metrics_app
from s3gateway.infra.observability.middleware import MetricsMiddleware
from s3gateway.infra.storage.client import StorageClient, StorageError
from s3gateway.infra.storage.s3_client import S3StorageClient
from s3gateway.services import GatewayError

http_logger = logging.getLogger("http")

ERROR_CODE_BY_STATUS = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    500: "internal_error",
    502: "bad_gateway",
    503: "service_unavailable",
}


def _normalize_detail(detail):
    if isinstance(detail, dict):
        maybe_code = detail.get("error_code")
        cleaned = {k: v for k, v in detail.items() if k != "error_code"}
        if len(cleaned) == 1 and "message" in cleaned:
            cleaned = cleaned["message"]
        if not cleaned:
            cleaned = None
        return cleaned, maybe_code if isinstance(maybe_code, str) else None
    return detail, None


def _resolve_error_code(status_code: int, override: str | None = None) -> str:
    if override:
        return override
    if status_code == 422:
        return "validation_error"
    return ERROR_CODE_BY_STATUS.get(status_code, "unknown_error")


def _problem_response(
    request: Request,
    *,
    status_code: int,
    title: str,
    detail,
    error_code: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render an RFC 7807 problem document."""
    return JSONResponse(
        status_code=status_code,
        media_type="application/problem+json",
        headers=headers,
        content={
            "type": "about:blank",
            "title": title,
            "status": status_code,
            "detail": detail,
            "error_code": error_code,
            "instance": str(request.url),
            "request_id": request.headers.get("X-Request-Id"),
        },
    )


def _describe_storage_target(settings) -> str:
    endpoint = settings.S3_ENDPOINT_URL or "<aws default>"
    return (
        f"endpoint={endpoint} region={settings.S3_REGION} "
        f"addressing_style={settings.S3_ADDRESSING_STYLE} "
        f"use_ssl={settings.S3_USE_SSL}"
    )


def create_app(storage_client: StorageClient | None = None) -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    app = FastAPI(
        title="S3 Gateway",
        version="v1.0",
        description="REST gateway for buckets and folder-style objects on S3-compatible storage",
    )
    if storage_client is None:
        storage_client = S3StorageClient(settings=settings)
    app.state.storage_client = storage_client

    if settings.CORS_ENABLED:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS or ["*"],
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
        )

    app.include_router(
        buckets_router,
        prefix="/api/v1",
        tags=["buckets"],
        dependencies=[Depends(require_api_key)],
    )
    app.include_router(
        objects_router,
        prefix="/api/v1",
        tags=["objects"],
        dependencies=[Depends(require_api_key)],
    )

    if settings.ENABLE_METRICS:
        app.add_middleware(MetricsMiddleware)
        app.mount("/metrics", metrics_app)

    @app.on_event("startup")
    def on_startup() -> None:
        startup_logger = logging.getLogger("s3gateway.startup")
        startup_logger.info(
            "Storage backend configured. [event=storage_configured] (%s)",
            _describe_storage_target(settings),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        detail, code_override = _normalize_detail(exc.detail)
        http_logger.log(
            logging.WARNING if exc.status_code < 500 else logging.ERROR,
            "http_exception status=%s detail=%s method=%s path=%s request_id=%s",
            exc.status_code,
            detail,
            request.method,
            request.url.path,
            request.headers.get("X-Request-Id"),
            extra={
                "extra": {
                    "status": exc.status_code,
                    "detail": detail,
                    "method": request.method,
                    "route": request.url.path,
                    "request_id": request.headers.get("X-Request-Id"),
                }
            },
        )
        return _problem_response(
            request,
            status_code=exc.status_code,
            title="HTTP Error",
            detail=detail,
            error_code=_resolve_error_code(exc.status_code, code_override),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        # Routes translate their own errors; this catches anything that slips past.
        return await http_exception_handler(request, to_http_exception(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return _problem_response(
            request,
            status_code=422,
            title="Validation Error",
            detail=jsonable_encoder(exc.errors()),
            error_code=_resolve_error_code(422),
        )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/ready")
    def ready(storage: StorageClient = Depends(get_storage_client)):
        try:
            storage.list_buckets()
        except StorageError as exc:
            return {"status": "not_ready", "detail": {"storage": str(exc)}}
        return {"status": "ready"}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("s3gateway.main:app", host="0.0.0.0", port=8080, reload=True)
