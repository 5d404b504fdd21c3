from .base import DELIMITER, BaseService, ServiceError
from .bundle import ServiceBundle, get_service_bundle
from .deletion import BatchDeleter, DeleteReport
from .errors import (
    AlreadyExistsError,
    BackendError,
    GatewayError,
    InvalidRequestError,
    MoveCleanupError,
    NotEmptyError,
    NotFoundError,
    classify,
    is_not_found,
)
from .gateway_service import (
    GatewayService,
    MovedObject,
    UploadedObject,
    build_object_key,
)
from .listing import ObjectLister, StoredObject
from .validation import BucketName, bucket_name_violation, validate_bucket_name

__all__ = [
    "DELIMITER",
    "BaseService",
    "ServiceError",
    "ServiceBundle",
    "get_service_bundle",
    "BatchDeleter",
    "DeleteReport",
    "GatewayError",
    "AlreadyExistsError",
    "NotFoundError",
    "NotEmptyError",
    "BackendError",
    "InvalidRequestError",
    "MoveCleanupError",
    "classify",
    "is_not_found",
    "GatewayService",
    "MovedObject",
    "UploadedObject",
    "build_object_key",
    "ObjectLister",
    "StoredObject",
    "BucketName",
    "bucket_name_violation",
    "validate_bucket_name",
]
