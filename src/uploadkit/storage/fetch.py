"""Retrieval of remote sources for upload-by-URL."""

import base64
import binascii
from urllib.parse import unquote_to_bytes

import httpx

from ..logging import get_logger
from .exceptions import FetchError
from .naming import DEFAULT_CONTENT_TYPE

logger = get_logger(__name__)


def _decode_data_url(data_url: str) -> tuple[bytes, str]:
    """Decode ``data:[<mediatype>][;base64],<data>`` into content and content type."""
    try:
        header, data = data_url[5:].split(",", 1)
    except ValueError as e:
        raise FetchError(
            "Invalid data URL format: missing comma separator", url=data_url[:50]
        ) from e

    content_type = header.removesuffix(";base64") or DEFAULT_CONTENT_TYPE

    if header.endswith(";base64"):
        try:
            return base64.b64decode(data, validate=True), content_type
        except (binascii.Error, ValueError) as e:
            raise FetchError(f"Invalid base64 data URL: {e}", url=data_url[:50]) from e

    return unquote_to_bytes(data), content_type


async def fetch_source(url: str, timeout: float = 30.0) -> tuple[bytes, str]:
    """Download a source and report its content type.

    The body is read as raw bytes. The content type comes from the
    response's Content-Type header and defaults to
    ``application/octet-stream`` when the header is absent.

    Args:
        url: HTTP(S) URL, or a ``data:`` URL
        timeout: Transport timeout in seconds

    Returns:
        (content, content_type)

    Raises:
        FetchError: If the source is unreachable or answers with a non-2xx status
    """
    logger.debug("Fetching source", url=url[:100])

    if url.startswith("data:"):
        return _decode_data_url(url)

    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            async with client.stream("GET", url) as response:
                response.raise_for_status()

                chunks = []
                async for chunk in response.aiter_bytes(chunk_size=8192):
                    chunks.append(chunk)

                content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
    except httpx.HTTPStatusError as e:
        status_code = e.response.status_code
        logger.warning("Source returned error status", url=url, status_code=status_code)
        raise FetchError(
            f"Fetching {url} failed with status {status_code}", url=url, status_code=status_code
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning("Source unreachable", url=url, error=str(e))
        raise FetchError(f"Fetching {url} failed: {e}", url=url) from e

    content = b"".join(chunks)
    logger.info("Fetched source", url=url, size_bytes=len(content), content_type=content_type)
    return content, content_type
