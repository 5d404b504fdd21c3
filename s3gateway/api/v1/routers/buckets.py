"""Bucket API router.

This module provides REST API endpoints for listing, creating and deleting
buckets.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from s3gateway.api.v1.deps import get_gateway_service
from s3gateway.api.v1.schemas.buckets import BucketCreate, MessageOut
from s3gateway.api.v1.utils import to_http_exception
from s3gateway.services import GatewayError, GatewayService

router = APIRouter()


@router.get(
    "/buckets",
    response_model=list[str],
    summary="List buckets",
    description="Return the names of all buckets available in the storage.",
)
def list_buckets(
    gateway: GatewayService = Depends(get_gateway_service),
) -> list[str]:
    try:
        return gateway.list_buckets()
    except GatewayError as exc:
        raise to_http_exception(exc) from exc


@router.post(
    "/buckets",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create bucket",
    description="Validate the bucket name and create the bucket.",
)
def create_bucket(
    payload: BucketCreate,
    gateway: GatewayService = Depends(get_gateway_service),
) -> MessageOut:
    try:
        gateway.create_bucket(payload.name)
    except GatewayError as exc:
        raise to_http_exception(exc) from exc
    return MessageOut(message=f"Bucket '{payload.name}' created successfully")


@router.delete(
    "/bucket/{name}",
    response_model=MessageOut,
    summary="Delete bucket",
    description="Delete an existing, empty bucket.",
)
def delete_bucket(
    name: str,
    gateway: GatewayService = Depends(get_gateway_service),
) -> MessageOut:
    try:
        gateway.delete_bucket(name)
    except GatewayError as exc:
        raise to_http_exception(exc) from exc
    return MessageOut(message=f"Bucket '{name}' deleted successfully")
