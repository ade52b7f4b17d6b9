"""Storage system for uploads.

This module provides a pluggable storage architecture that supports:
- Local filesystem storage for development and self-hosting
- S3-compatible object storage (Cloudflare R2, AWS S3, MinIO)
- Supabase storage with a service-role key

Main components:
- StorageProvider: Abstract base class with the upload/remove contract
- create_storage_provider: Builds the one provider selected by configuration
- StoredObject: Descriptor returned for buffer uploads
"""

from .base import StorageProvider, StoredObject, UploadedFile
from .config import (
    StorageBackend,
    StorageSettings,
    get_storage_settings,
    reset_storage_settings,
)
from .exceptions import (
    ConfigurationError,
    FetchError,
    RemovalFault,
    SecurityException,
    StorageException,
    UploadError,
)
from .factory import create_storage_provider

__all__ = [
    # Base classes and descriptors
    "StorageProvider",
    "StoredObject",
    "UploadedFile",
    # Exceptions
    "StorageException",
    "ConfigurationError",
    "FetchError",
    "UploadError",
    "RemovalFault",
    "SecurityException",
    # Configuration
    "StorageBackend",
    "StorageSettings",
    "get_storage_settings",
    "reset_storage_settings",
    # Factory
    "create_storage_provider",
]
