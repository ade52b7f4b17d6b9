"""Core storage interface and upload descriptors."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..logging import get_logger
from .exceptions import RemovalFault
from .fetch import fetch_source
from .naming import generate_filename, key_from_reference

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    """A file received from an upstream multipart decoder."""

    buffer: bytes
    mimetype: str
    originalname: str = ""
    size: int | None = None

    def __post_init__(self):
        if self.size is None:
            object.__setattr__(self, "size", len(self.buffer))


@dataclass(frozen=True)
class StoredObject:
    """Descriptor returned for a buffer upload.

    The attribute names follow the multer file shape that upload callers
    already consume: the public URL is exposed both as ``path`` and as
    ``destination``, and the buffer doubles as ``stream``.
    """

    filename: str
    mimetype: str
    size: int
    path: str
    buffer: bytes = field(repr=False)
    fieldname: str = "file"
    encoding: str = "7bit"

    @property
    def originalname(self) -> str:
        return self.filename

    @property
    def destination(self) -> str:
        return self.path

    @property
    def stream(self) -> bytes:
        return self.buffer

    @property
    def url(self) -> str:
        return self.path

    @property
    def key(self) -> str:
        """Backend key needed to remove the object later."""
        return self.filename

    def to_dict(self) -> dict[str, Any]:
        """Serializable view without the raw buffer."""
        return {
            "filename": self.filename,
            "originalname": self.originalname,
            "mimetype": self.mimetype,
            "size": self.size,
            "fieldname": self.fieldname,
            "encoding": self.encoding,
            "path": self.path,
            "destination": self.destination,
        }


class StorageProvider(ABC):
    """Abstract base class for all storage providers.

    Subclasses implement the backend primitives (``upload``, ``delete``,
    ``get_public_url``). The public operations ``upload_simple``,
    ``upload_file`` and ``remove_file`` are shared: they generate the
    object name server-side and make removal best-effort.
    """

    name: str = "abstract"

    # Timeout in seconds for upload_simple source fetches
    fetch_timeout: float = 30.0

    @abstractmethod
    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        """Write content under key without overwriting, and return its public URL.

        Raises:
            UploadError: On any backend failure, including an existing key
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete the object stored under key.

        Returns False when the backend reports the object was already absent.
        """
        pass

    @abstractmethod
    async def get_public_url(self, key: str) -> str:
        """Publicly resolvable URL for key."""
        pass

    def key_from_reference(self, reference: str) -> str:
        return key_from_reference(reference)

    async def upload_simple(self, source_url: str) -> str:
        """Fetch a remote file, store it under a generated name and return its public URL.

        Raises:
            FetchError: If the source is unreachable or answers with a non-2xx status
            UploadError: If the backend write fails
        """
        content, content_type = await fetch_source(source_url, timeout=self.fetch_timeout)
        key = generate_filename(content_type)

        url = await self.upload(key, content, content_type)
        logger.info(
            "Stored remote file",
            provider=self.name,
            source_url=source_url,
            key=key,
            content_type=content_type,
            size=len(content),
        )
        return url

    async def upload_file(self, file: UploadedFile) -> StoredObject:
        """Store an in-memory upload under a generated name.

        The user-supplied ``originalname`` is ignored for naming.

        Raises:
            UploadError: If the backend write fails
        """
        key = generate_filename(file.mimetype)

        url = await self.upload(key, file.buffer, file.mimetype)
        logger.info(
            "Stored uploaded file",
            provider=self.name,
            key=key,
            content_type=file.mimetype,
            size=file.size,
        )
        return StoredObject(
            filename=key,
            mimetype=file.mimetype,
            size=file.size if file.size is not None else len(file.buffer),
            path=url,
            buffer=file.buffer,
        )

    async def remove_file(self, reference: str) -> None:
        """Best-effort removal by public URL or bare filename.

        Backend failures, a missing object included, are logged as a
        ``RemovalFault`` and never raised.
        """
        try:
            key = self.key_from_reference(reference)
            deleted = await self.delete(key)
        except Exception as e:
            fault = RemovalFault(f"Failed to remove {reference}: {e}", key=reference)
            logger.warning(
                "Removal failed",
                provider=self.name,
                reference=reference,
                fault=str(fault),
                error_type=type(e).__name__,
            )
            return

        if deleted:
            logger.info("Removed file", provider=self.name, key=key)
        else:
            logger.debug("File already absent", provider=self.name, key=key)
