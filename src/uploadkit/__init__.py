"""
uploadkit
Pluggable blob storage for user uploads: local disk, S3-compatible buckets, Supabase
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
