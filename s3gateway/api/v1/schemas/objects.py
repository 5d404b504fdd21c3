"""Pydantic schemas for object API endpoints.

This module defines request and response models for listing, uploading,
deleting and moving objects, and for creating folders.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StoredObjectOut(BaseModel):
    """A file or folder entry in a bucket listing."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    size: int
    last_modified: str | None = None


class UploadedFileOut(BaseModel):
    """Information about one uploaded file."""

    filename: str
    key: str
    size: int
    bucket: str


class UploadOut(BaseModel):
    """Response model for a multipart upload request."""

    files: list[UploadedFileOut]


class ExistsOut(BaseModel):
    """Response model for an existence probe."""

    exists: bool


class DeleteFailureOut(BaseModel):
    """A key the backend refused to delete."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    code: str | None = None
    message: str | None = None


class DeleteOut(BaseModel):
    """Response model for object deletion."""

    message: str
    key: str
    bucket: str
    deleted: int
    failed: list[DeleteFailureOut]


class FolderCreate(BaseModel):
    """Request body for creating a folder."""

    name: str


class FolderOut(BaseModel):
    """Response model for folder creation."""

    message: str
    path: str
    bucket: str


class MoveRequest(BaseModel):
    """Request body for moving an object within a bucket."""

    source_key: str
    destination_key: str


class MoveOut(BaseModel):
    """Response model for a completed move."""

    message: str
    source: str
    destination: str
    bucket: str
