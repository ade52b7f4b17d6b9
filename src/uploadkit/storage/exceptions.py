"""Storage exception hierarchy."""


class StorageException(Exception):
    """Base exception for storage operations."""

    pass


class ConfigurationError(StorageException):
    """Unknown backend token or missing backend setting. Raised at startup."""

    pass


class SecurityException(StorageException):
    """Security-related storage exception."""

    pass


class FetchError(StorageException):
    """The source of an upload-by-URL could not be retrieved."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class UploadError(StorageException):
    """The backend rejected a write (collision, auth, quota, network)."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class RemovalFault(StorageException):
    """A backend failed to delete an object.

    Only ever logged: ``StorageProvider.remove_file`` absorbs it.
    """

    def __init__(self, message: str, key: str):
        super().__init__(message)
        self.key = key
