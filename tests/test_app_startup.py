from __future__ import annotations

import logging

from fastapi.testclient import TestClient

from s3gateway.infra.storage.client import StorageError
from s3gateway.main import create_app


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_ready_when_storage_answers(client, mock_storage):
    r = client.get("/ready")
    assert r.json() == {"status": "ready"}
    assert mock_storage.calls == ["list_buckets"]


def test_ready_reports_storage_failure(client, mock_storage):
    mock_storage.fail_next("list_buckets", StorageError("list_buckets failed: refused"))

    r = client.get("/ready")

    body = r.json()
    assert body["status"] == "not_ready"
    assert "refused" in body["detail"]["storage"]


def test_startup_logs_storage_target(mock_storage, monkeypatch, caplog):
    monkeypatch.setenv("S3_ENDPOINT_URL", "http://minio:9000")
    app = create_app(storage_client=mock_storage)
    # create_app reconfigures logging, so attach the capture handler afterwards
    startup_logger = logging.getLogger("s3gateway.startup")
    startup_logger.addHandler(caplog.handler)
    try:
        with TestClient(app):
            pass
    finally:
        startup_logger.removeHandler(caplog.handler)

    assert "event=storage_configured" in caplog.text
    assert "endpoint=http://minio:9000" in caplog.text


def test_injected_client_is_used(mock_storage):
    app = create_app(storage_client=mock_storage)
    assert app.state.storage_client is mock_storage


def test_metrics_disabled(mock_storage, monkeypatch):
    monkeypatch.setenv("ENABLE_METRICS", "false")
    client = TestClient(create_app(storage_client=mock_storage))

    assert client.get("/metrics").status_code == 404
