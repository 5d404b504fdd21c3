"""Object API router.

This module provides REST API endpoints for listing, uploading, downloading,
viewing, deleting and moving objects, and for creating folders.
"""

from __future__ import annotations

import mimetypes
from pathlib import PurePosixPath
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile

from s3gateway.api.v1.deps import get_gateway_service
from s3gateway.api.v1.schemas.objects import (
    DeleteFailureOut,
    DeleteOut,
    ExistsOut,
    FolderCreate,
    FolderOut,
    MoveOut,
    MoveRequest,
    StoredObjectOut,
    UploadedFileOut,
    UploadOut,
)
from s3gateway.api.v1.utils import to_http_exception
from s3gateway.services import GatewayError, GatewayService, build_object_key

router = APIRouter()


def _filename_of(key: str) -> str:
    return PurePosixPath(key).name or key


def _content_disposition(filename: str) -> str:
    """Build an attachment header that survives non-ASCII filenames.

    Header values are encoded as latin-1, so the plain ``filename`` carries an
    ASCII fallback and ``filename*`` carries the UTF-8 name (RFC 6266).
    """
    fallback = "".join(
        char if char.isascii() and char.isprintable() else "_" for char in filename
    )
    fallback = fallback.replace("\\", "_").replace('"', "_")
    return (
        f'attachment; filename="{fallback}"; '
        f"filename*=UTF-8''{quote(filename, safe='')}"
    )


def _read_upload(upload: UploadFile, limit: int | None) -> bytes:
    # One byte past the limit is enough to reject the file without buffering it all.
    if limit is None:
        return upload.file.read()
    return upload.file.read(limit + 1)


@router.get(
    "/bucket/{bucket}/objects",
    response_model=list[StoredObjectOut],
    summary="List objects",
    description=(
        "List folders and files directly under an optional prefix. "
        "Folders are listed first and end with '/'."
    ),
)
def list_objects(
    bucket: str,
    prefix: str | None = Query(default=None),
    gateway: GatewayService = Depends(get_gateway_service),
) -> list[StoredObjectOut]:
    try:
        objects = gateway.list_objects(bucket, prefix)
    except GatewayError as exc:
        raise to_http_exception(exc) from exc
    return [StoredObjectOut.model_validate(obj) for obj in objects]


@router.post(
    "/bucket/{bucket}/objects",
    response_model=UploadOut,
    summary="Upload objects",
    description=(
        "Upload one or more files, optionally under a prefix. Existing keys are "
        "rejected with 409 unless replace=true."
    ),
)
def upload_objects(
    bucket: str,
    files: list[UploadFile] = File(...),
    prefix: str | None = Query(default=None),
    replace: bool = Query(default=False),
    gateway: GatewayService = Depends(get_gateway_service),
) -> UploadOut:
    uploaded: list[UploadedFileOut] = []
    for upload in files:
        key = build_object_key(prefix, upload.filename)
        data = _read_upload(upload, gateway.max_upload_bytes)
        try:
            result = gateway.upload_object(
                bucket,
                key,
                data,
                replace=replace,
                content_type=upload.content_type,
            )
        except GatewayError as exc:
            raise to_http_exception(exc) from exc
        uploaded.append(
            UploadedFileOut(
                filename=_filename_of(result.key),
                key=result.key,
                size=result.size,
                bucket=result.bucket,
            )
        )
    return UploadOut(files=uploaded)


@router.get(
    "/bucket/{bucket}/download/{key:path}",
    summary="Download object",
    description="Return the object body as an attachment.",
)
def download_object(
    bucket: str,
    key: str,
    gateway: GatewayService = Depends(get_gateway_service),
) -> Response:
    try:
        data = gateway.get_object(bucket, key)
    except GatewayError as exc:
        raise to_http_exception(exc) from exc
    return Response(
        content=data,
        media_type="application/octet-stream",
        headers={"Content-Disposition": _content_disposition(_filename_of(key))},
    )


@router.get(
    "/bucket/{bucket}/view/{key:path}",
    summary="View object",
    description="Return the object body with a content type guessed from its name.",
)
def view_object(
    bucket: str,
    key: str,
    gateway: GatewayService = Depends(get_gateway_service),
) -> Response:
    try:
        data = gateway.get_object(bucket, key)
    except GatewayError as exc:
        raise to_http_exception(exc) from exc
    media_type, _ = mimetypes.guess_type(_filename_of(key))
    return Response(content=data, media_type=media_type or "application/octet-stream")


@router.get(
    "/bucket/{bucket}/exists",
    response_model=ExistsOut,
    summary="Check object existence",
)
def object_exists(
    bucket: str,
    filename: str = Query(..., min_length=1),
    gateway: GatewayService = Depends(get_gateway_service),
) -> ExistsOut:
    try:
        return ExistsOut(exists=gateway.object_exists(bucket, filename))
    except GatewayError as exc:
        raise to_http_exception(exc) from exc


@router.delete(
    "/bucket/{bucket}/object/{key:path}",
    response_model=DeleteOut,
    summary="Delete object or folder",
    description=(
        "Delete an object. A key ending in '/' deletes the folder marker and "
        "every object stored under it. Keys the backend refused are listed in "
        "'failed'."
    ),
)
def delete_object(
    bucket: str,
    key: str,
    gateway: GatewayService = Depends(get_gateway_service),
) -> DeleteOut:
    try:
        report = gateway.delete_object(bucket, key)
    except GatewayError as exc:
        raise to_http_exception(exc) from exc
    message = (
        "File deleted successfully"
        if report.succeeded
        else "Deletion completed with failures"
    )
    return DeleteOut(
        message=message,
        key=key,
        bucket=bucket,
        deleted=len(report.attempted) - len(report.failed),
        failed=[DeleteFailureOut.model_validate(f) for f in report.failed],
    )


@router.post(
    "/bucket/{bucket}/folders",
    response_model=FolderOut,
    summary="Create folder",
    description="Write an empty folder marker object ending in '/'.",
)
def create_folder(
    bucket: str,
    payload: FolderCreate,
    gateway: GatewayService = Depends(get_gateway_service),
) -> FolderOut:
    try:
        path = gateway.create_folder(bucket, payload.name)
    except GatewayError as exc:
        raise to_http_exception(exc) from exc
    return FolderOut(message="Folder created successfully", path=path, bucket=bucket)


@router.post(
    "/bucket/{bucket}/move",
    response_model=MoveOut,
    summary="Move object",
    description=(
        "Copy an object to a new key and delete the source. If the copy "
        "succeeds but the delete fails, a 500 with error_code "
        "'move_cleanup_failed' is returned and both keys exist."
    ),
)
def move_object(
    bucket: str,
    payload: MoveRequest,
    gateway: GatewayService = Depends(get_gateway_service),
) -> MoveOut:
    try:
        moved = gateway.move_object(bucket, payload.source_key, payload.destination_key)
    except GatewayError as exc:
        raise to_http_exception(exc) from exc
    return MoveOut(
        message="File moved successfully",
        source=moved.source_key,
        destination=moved.destination_key,
        bucket=moved.bucket,
    )
