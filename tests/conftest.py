"""
Shared pytest fixtures and configuration for all tests.
"""

from collections.abc import Generator
from pathlib import Path

import httpx
import pytest

from uploadkit.storage import reset_storage_settings
from uploadkit.storage.implementations.local import LocalStorageProvider

STORAGE_ENV_VARS = (
    "STORAGE_PROVIDER",
    "UPLOAD_DIRECTORY",
    "UPLOAD_PUBLIC_URL_BASE",
    "CLOUDFLARE_ACCOUNT_ID",
    "CLOUDFLARE_ENDPOINT_URL",
    "CLOUDFLARE_ACCESS_KEY",
    "CLOUDFLARE_SECRET_ACCESS_KEY",
    "CLOUDFLARE_REGION",
    "CLOUDFLARE_BUCKETNAME",
    "CLOUDFLARE_BUCKET_URL",
    "CLOUDFLARE_ACL",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_STORAGE_BUCKET",
    "FETCH_TIMEOUT",
)

_RealAsyncClient = httpx.AsyncClient


@pytest.fixture(autouse=True)
def clean_storage_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate tests from the host's storage environment and cached settings."""
    for name in STORAGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_storage_settings()
    yield
    reset_storage_settings()


@pytest.fixture
def http_source(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    """Serve fake remote sources to httpx.AsyncClient.

    Map a URL to an ``httpx.Response`` factory (``lambda: httpx.Response(...)``)
    or to an exception instance to raise. Unmapped URLs answer 404.
    """
    routes: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, content=b"not found")
        if isinstance(route, Exception):
            raise route
        return route()

    def client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return _RealAsyncClient(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)
    return routes


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def local_provider(storage_dir: Path) -> LocalStorageProvider:
    return LocalStorageProvider(
        base_path=storage_dir, public_url_base="http://localhost:8088/uploads"
    )
