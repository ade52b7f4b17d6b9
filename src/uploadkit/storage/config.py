"""Storage configuration loaded from the environment."""

from enum import Enum

from pydantic_settings import BaseSettings

from ..logging import get_logger

logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Closed set of storage backends."""

    LOCAL = "local"
    CLOUDFLARE = "cloudflare"
    SUPABASE = "supabase"

    @classmethod
    def parse(cls, token: str) -> "StorageBackend | None":
        """Map a configuration token to a backend, None when unrecognized.

        A blank token selects the local backend, like an unset variable.
        """
        normalized = token.strip().lower()
        if not normalized:
            return cls.LOCAL
        if normalized == "s3":
            return cls.CLOUDFLARE
        try:
            return cls(normalized)
        except ValueError:
            return None


class StorageSettings(BaseSettings):
    """Backend selection plus the settings of every backend.

    Only the fields of the selected backend are required; the factory
    checks them when it builds the provider.
    """

    storage_provider: str = StorageBackend.LOCAL.value

    # Local filesystem
    upload_directory: str | None = None
    upload_public_url_base: str | None = "http://localhost:8088/uploads"

    # S3-compatible object storage (Cloudflare R2 naming)
    cloudflare_account_id: str | None = None
    cloudflare_endpoint_url: str | None = None
    cloudflare_access_key: str | None = None
    cloudflare_secret_access_key: str | None = None
    cloudflare_region: str = "auto"
    cloudflare_bucketname: str | None = None
    cloudflare_bucket_url: str | None = None
    cloudflare_acl: str | None = "public-read"

    # Supabase Storage
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None
    supabase_storage_bucket: str | None = None

    # Transport timeout for upload-by-URL
    fetch_timeout: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Loaded once per process; tests reset it with reset_storage_settings()
_storage_settings: StorageSettings | None = None


def get_storage_settings() -> StorageSettings:
    """Get the process-wide storage settings, loading them on first access."""
    global _storage_settings

    if _storage_settings is None:
        _storage_settings = StorageSettings()
        logger.info(
            "Loaded storage configuration",
            storage_provider=_storage_settings.storage_provider,
        )

    return _storage_settings


def reset_storage_settings() -> None:
    global _storage_settings
    _storage_settings = None
