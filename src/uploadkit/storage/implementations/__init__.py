"""Storage provider implementations.

The S3 and Supabase providers need the ``storage-s3`` and
``storage-supabase`` extras; import them from their modules directly.
"""

from .local import LocalStorageProvider

__all__ = ["LocalStorageProvider"]
