"""Upload, upload-by-URL, removal and local file serving endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, Response, UploadFile
from fastapi.responses import FileResponse
from pydantic import BaseModel

from ...config import settings
from ...logging import get_logger
from ...storage import (
    FetchError,
    SecurityException,
    StorageProvider,
    UploadedFile,
    UploadError,
)
from ...storage.implementations.local import LocalStorageProvider
from ...storage.naming import DEFAULT_CONTENT_TYPE

router = APIRouter()
logger = get_logger(__name__)


class SimpleUploadRequest(BaseModel):
    url: str


class SimpleUploadResponse(BaseModel):
    url: str


def get_storage_provider(request: Request) -> StorageProvider:
    return request.app.state.storage_provider


StorageDep = Annotated[StorageProvider, Depends(get_storage_provider)]


@router.post("")
async def upload_file(storage: StorageDep, file: UploadFile = File(...)) -> dict:
    """Store a multipart upload under a generated name."""
    try:
        content = await file.read()
    except Exception as e:
        logger.error("Failed to read uploaded file", error=str(e), filename=file.filename)
        raise HTTPException(status_code=400, detail="Failed to read uploaded file") from e

    if len(content) > settings.max_upload_size:
        raise HTTPException(
            status_code=413,
            detail=(
                f"File size {len(content)} bytes exceeds maximum allowed size "
                f"of {settings.max_upload_size} bytes"
            ),
        )

    uploaded = UploadedFile(
        buffer=content,
        mimetype=file.content_type or DEFAULT_CONTENT_TYPE,
        originalname=file.filename or "",
        size=len(content),
    )

    try:
        stored = await storage.upload_file(uploaded)
    except UploadError as e:
        logger.error("Upload failed", error=str(e), filename=file.filename)
        raise HTTPException(status_code=502, detail="Storage backend rejected the upload") from e

    return stored.to_dict()


@router.post("/simple")
async def upload_from_url(body: SimpleUploadRequest, storage: StorageDep) -> SimpleUploadResponse:
    """Download a remote file and store it under a generated name."""
    try:
        url = await storage.upload_simple(body.url)
    except FetchError as e:
        raise HTTPException(status_code=502, detail=f"Could not fetch source: {e}") from e
    except UploadError as e:
        logger.error("Upload failed", error=str(e), source_url=body.url)
        raise HTTPException(status_code=502, detail="Storage backend rejected the upload") from e

    return SimpleUploadResponse(url=url)


@router.delete("", status_code=204)
async def remove_file(
    storage: StorageDep,
    path: Annotated[str, Query(description="Public URL or bare filename")],
) -> Response:
    """Remove a stored file. Always succeeds; failures are only logged."""
    await storage.remove_file(path)
    return Response(status_code=204)


@router.get("/{filename}")
async def serve_file(filename: str, storage: StorageDep):
    """Serve a file written by the local storage provider.

    Cloud providers return their own public URLs, so this route only
    answers when local storage is active.
    """
    if not isinstance(storage, LocalStorageProvider):
        raise HTTPException(status_code=404, detail="File not found")

    try:
        file_path = storage.resolve_path(filename)
    except SecurityException as e:
        logger.warning("Path traversal attempt detected", requested_path=filename)
        raise HTTPException(status_code=403, detail="Access denied") from e
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail="File not found") from e

    return FileResponse(file_path)
