from __future__ import annotations

from fastapi import HTTPException, status

from s3gateway.services.errors import (
    AlreadyExistsError,
    BackendError,
    GatewayError,
    InvalidRequestError,
    MoveCleanupError,
    NotEmptyError,
    NotFoundError,
)

STATUS_BY_ERROR: dict[type[GatewayError], int] = {
    AlreadyExistsError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    NotEmptyError: status.HTTP_409_CONFLICT,
    InvalidRequestError: status.HTTP_400_BAD_REQUEST,
    BackendError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_CODE_BY_KIND = {
    "already_exists": "already_exists",
    "not_found": "not_found",
    "not_empty": "not_empty",
    "invalid": "invalid_request",
    "backend": "backend_error",
    "move_cleanup_failed": "move_cleanup_failed",
}


def status_for(exc: GatewayError) -> int:
    for error_type in type(exc).__mro__:
        code = STATUS_BY_ERROR.get(error_type)  # type: ignore[call-overload]
        if code is not None:
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: GatewayError) -> HTTPException:
    """Translate a gateway error into the HTTP status table of the API."""
    detail: dict[str, object] = {
        "message": exc.message,
        "error_code": ERROR_CODE_BY_KIND.get(exc.kind, "backend_error"),
    }
    if isinstance(exc, MoveCleanupError):
        detail.update(
            {
                "source": exc.source_key,
                "destination": exc.destination_key,
                "bucket": exc.bucket,
            }
        )
    return HTTPException(status_code=status_for(exc), detail=detail)
