"""Pydantic schemas for bucket API endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class BucketCreate(BaseModel):
    """Request body for creating a bucket."""

    name: str


class MessageOut(BaseModel):
    """Generic confirmation message."""

    message: str
