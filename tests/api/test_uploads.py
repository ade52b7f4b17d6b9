"""Tests for the upload HTTP endpoints."""

from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from uploadkit.api.app import create_app
from uploadkit.config import settings
from uploadkit.storage.exceptions import ConfigurationError
from uploadkit.storage.implementations.local import LocalStorageProvider


@pytest.fixture
def client(local_provider: LocalStorageProvider):
    with TestClient(create_app(storage_provider=local_provider)) as test_client:
        yield test_client


def test_health_reports_provider(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["provider"] == "local"


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"x-request-id": "req-123"})

    assert response.headers["x-request-id"] == "req-123"


def test_upload_and_serve(client: TestClient, storage_dir: Path):
    response = client.post(
        "/uploads", files={"file": ("holiday.png", b"png data", "image/png")}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["filename"].endswith(".png")
    assert body["filename"] != "holiday.png"
    assert body["mimetype"] == "image/png"
    assert body["size"] == len(b"png data")
    assert body["path"] == f"http://localhost:8088/uploads/{body['filename']}"
    assert "buffer" not in body
    assert (storage_dir / body["filename"]).read_bytes() == b"png data"

    served = client.get(f"/uploads/{body['filename']}")
    assert served.status_code == 200
    assert served.content == b"png data"


def test_upload_too_large(client: TestClient, storage_dir: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "max_upload_size", 4)

    response = client.post("/uploads", files={"file": ("big.txt", b"too large", "text/plain")})

    assert response.status_code == 413
    assert list(storage_dir.iterdir()) == []


def test_upload_simple(client: TestClient, storage_dir: Path, http_source):
    http_source["https://example.com/cat.gif"] = lambda: httpx.Response(
        200, content=b"GIF89a", headers={"content-type": "image/gif"}
    )

    response = client.post("/uploads/simple", json={"url": "https://example.com/cat.gif"})

    assert response.status_code == 200
    url = response.json()["url"]
    filename = url.rsplit("/", 1)[-1]
    assert filename.endswith(".gif")
    assert (storage_dir / filename).read_bytes() == b"GIF89a"


def test_upload_simple_source_missing(client: TestClient, storage_dir: Path, http_source):
    response = client.post("/uploads/simple", json={"url": "https://example.com/missing.png"})

    assert response.status_code == 502
    assert list(storage_dir.iterdir()) == []


def test_delete_by_url(client: TestClient, storage_dir: Path):
    body = client.post(
        "/uploads", files={"file": ("a.txt", b"hello", "text/plain")}
    ).json()

    response = client.delete("/uploads", params={"path": body["path"]})

    assert response.status_code == 204
    assert not (storage_dir / body["filename"]).exists()


def test_delete_missing_file_still_succeeds(client: TestClient):
    response = client.delete("/uploads", params={"path": "never-stored.png"})

    assert response.status_code == 204


def test_serve_missing_file(client: TestClient):
    assert client.get("/uploads/missing.png").status_code == 404


def test_invalid_provider_stops_startup(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STORAGE_PROVIDER", "ftp")

    with pytest.raises(ConfigurationError, match="Invalid storage type"):
        with TestClient(create_app()):
            pass
