"""Object naming: random ids, MIME type to extension, reference to key."""

import mimetypes
import secrets
import string
from urllib.parse import unquote, urlsplit

DEFAULT_CONTENT_TYPE = "application/octet-stream"
FALLBACK_EXTENSION = "bin"
ID_LENGTH = 10

_ID_ALPHABET = string.ascii_letters + string.digits

# Built-in table only; the host's /etc/mime.types would make names machine dependent
_mime_types = mimetypes.MimeTypes()

# Preferred spellings where the built-in table lists several extensions
_PREFERRED_EXTENSIONS = {
    "application/octet-stream": "bin",
    "image/jpeg": "jpeg",
    "text/plain": "txt",
    "audio/mpeg": "mp3",
    "video/quicktime": "mov",
}


def make_id(length: int = ID_LENGTH) -> str:
    """Random alphanumeric identifier."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def normalize_content_type(content_type: str | None) -> str:
    """Strip parameters and case from a Content-Type header value.

    ``"Image/PNG; charset=binary"`` becomes ``"image/png"``; empty or missing
    values become ``application/octet-stream``.
    """
    if not content_type:
        return DEFAULT_CONTENT_TYPE

    media_type = content_type.split(";", 1)[0].strip().lower()
    if "/" not in media_type:
        return DEFAULT_CONTENT_TYPE
    return media_type


def extension_for(content_type: str | None) -> str:
    """Extension (without dot) for a MIME type, ``bin`` when unknown."""
    media_type = normalize_content_type(content_type)

    if media_type in _PREFERRED_EXTENSIONS:
        return _PREFERRED_EXTENSIONS[media_type]

    extension = _mime_types.guess_extension(media_type, strict=False)
    if not extension:
        return FALLBACK_EXTENSION
    return extension.lstrip(".")


def content_type_for(filename: str) -> str:
    """Reverse lookup used when a caller only has a file name."""
    content_type, _ = _mime_types.guess_type(filename, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE


def generate_filename(content_type: str | None) -> str:
    """Server-side object name ``<id>.<extension>``."""
    return f"{make_id()}.{extension_for(content_type)}"


def key_from_reference(reference: str) -> str:
    """Reduce a public URL or a bare filename to the object key.

    The key is the last path segment; query string and fragment are
    dropped and percent-encoding is decoded, so
    ``https://cdn.example.com/media/abc.png?v=1`` and ``abc.png`` give the
    same key.
    """
    reference = reference.strip()
    if "/" not in reference:
        # urlsplit would read "name:x.png" as a scheme
        path = reference.partition("#")[0].partition("?")[0]
    else:
        path = urlsplit(reference).path
    key = unquote(path.rstrip("/").rsplit("/", 1)[-1])

    if not key:
        raise ValueError(f"No object key in reference: {reference!r}")
    return key
