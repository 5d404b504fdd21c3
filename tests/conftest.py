from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

from s3gateway.common.config import get_settings

os.environ.setdefault("S3_REGION", "us-east-1")
os.environ["API_KEY_ENABLED"] = "false"
get_settings.cache_clear()  # type: ignore[attr-defined]

from s3gateway.main import create_app  # noqa: E402
from s3gateway.services import GatewayService  # noqa: E402
from tests.services.mock_storage import MockStorageClient  # noqa: E402


@pytest.fixture(autouse=True)
def reset_settings_cache():
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def mock_storage():
    return MockStorageClient()


@pytest.fixture()
def gateway(mock_storage):
    return GatewayService(mock_storage)


@pytest.fixture()
def client(mock_storage):
    app = create_app(storage_client=mock_storage)
    return TestClient(app)
