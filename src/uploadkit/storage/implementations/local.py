"""Local filesystem storage provider for development and self-hosted deployments."""

from pathlib import Path
from urllib.parse import quote

import aiofiles
import aiofiles.os

from ...logging import get_logger
from ..base import StorageProvider
from ..exceptions import SecurityException, UploadError

logger = get_logger(__name__)


class LocalStorageProvider(StorageProvider):
    """Files in a local directory, served under a static URL base."""

    name = "local"

    def __init__(
        self,
        base_path: Path | str,
        public_url_base: str | None = None,
        fetch_timeout: float = 30.0,
    ):
        self.base_path = Path(base_path).resolve()
        self.public_url_base = public_url_base
        self.fetch_timeout = fetch_timeout
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_safe_file_path(self, key: str) -> Path:
        """Get file path with security validation."""
        file_path = (self.base_path / key).resolve()

        try:
            relative = file_path.relative_to(self.base_path)
        except ValueError as e:
            raise SecurityException(f"Path traversal detected: {key}") from e

        if not relative.parts:
            raise SecurityException(f"Key resolves to the storage root: {key!r}")

        return file_path

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        logger.debug("Uploading file", key=key, content_type=content_type)
        try:
            file_path = self._get_safe_file_path(key)

            # "xb" refuses to replace an existing file
            try:
                async with aiofiles.open(file_path, "xb") as f:
                    await f.write(content)
            except FileExistsError:
                raise
            except OSError:
                # Partial file under a name nobody will reference
                file_path.unlink(missing_ok=True)
                raise

        except SecurityException as e:
            raise UploadError(str(e), key=key) from e
        except FileExistsError as e:
            logger.error("File already exists", key=key)
            raise UploadError(f"File already exists: {key}", key=key) from e
        except OSError as e:
            logger.error(f"File system error uploading {key}: {e}")
            raise UploadError(f"Failed to write file: {e}", key=key) from e

        return await self.get_public_url(key)

    async def get_public_url(self, key: str) -> str:
        if self.public_url_base:
            encoded_key = quote(key, safe="/")
            return f"{self.public_url_base.rstrip('/')}/{encoded_key}"
        return (self.base_path / key).as_uri()

    async def delete(self, key: str) -> bool:
        file_path = self._get_safe_file_path(key)

        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            return False

        logger.debug(f"Successfully deleted {key} from local storage")
        return True

    def resolve_path(self, key: str) -> Path:
        """Path of an existing stored file, used to serve local uploads.

        Raises:
            SecurityException: If key escapes the storage root
            FileNotFoundError: If no file is stored under key
        """
        file_path = self._get_safe_file_path(key)
        if not file_path.is_file():
            raise FileNotFoundError(key)
        return file_path
