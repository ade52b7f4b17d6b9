"""Factory selecting and building the configured storage provider."""

from ..logging import get_logger
from .base import StorageProvider
from .config import StorageBackend, StorageSettings, get_storage_settings
from .exceptions import ConfigurationError
from .implementations.local import LocalStorageProvider

logger = get_logger(__name__)

# Optional imports for cloud providers
try:
    from .implementations.s3 import S3StorageProvider, r2_endpoint_url

    _s3_available = True
except ImportError:
    S3StorageProvider = None
    r2_endpoint_url = None
    _s3_available = False

try:
    from .implementations.supabase import SupabaseStorageProvider

    _supabase_available = True
except ImportError:
    SupabaseStorageProvider = None
    _supabase_available = False


def create_storage_provider(settings: StorageSettings | None = None) -> StorageProvider:
    """Create the storage provider selected by ``settings.storage_provider``.

    Every call builds a new provider; callers keep it as a singleton if they
    want one. All validation happens before any client or directory is
    created, so a bad configuration never touches the network or disk.

    Args:
        settings: Storage settings, defaults to the process-wide settings

    Raises:
        ConfigurationError: If the backend token is unknown, a required
            setting is missing, or the backend's SDK is not installed
    """
    if settings is None:
        settings = get_storage_settings()

    backend = StorageBackend.parse(settings.storage_provider)
    if backend is None:
        allowed = ", ".join(b.value for b in StorageBackend)
        raise ConfigurationError(
            f"Invalid storage type {settings.storage_provider!r}. Expected one of: {allowed}"
        )

    if backend is StorageBackend.LOCAL:
        provider = _create_local_provider(settings)
    elif backend is StorageBackend.CLOUDFLARE:
        provider = _create_s3_provider(settings)
    else:
        provider = _create_supabase_provider(settings)

    logger.info("Created storage provider", provider=provider.name)
    return provider


def _require(settings: StorageSettings, backend: StorageBackend, *fields: str) -> None:
    missing = [name for name in fields if not getattr(settings, name)]
    if missing:
        env_names = ", ".join(name.upper() for name in missing)
        raise ConfigurationError(f"{backend.value} storage requires {env_names} to be set")


def _create_local_provider(settings: StorageSettings) -> LocalStorageProvider:
    _require(settings, StorageBackend.LOCAL, "upload_directory")

    return LocalStorageProvider(
        base_path=settings.upload_directory,
        public_url_base=settings.upload_public_url_base,
        fetch_timeout=settings.fetch_timeout,
    )


def _create_s3_provider(settings: StorageSettings) -> StorageProvider:
    _require(
        settings,
        StorageBackend.CLOUDFLARE,
        "cloudflare_access_key",
        "cloudflare_secret_access_key",
        "cloudflare_bucketname",
        "cloudflare_bucket_url",
    )
    if not settings.cloudflare_account_id and not settings.cloudflare_endpoint_url:
        raise ConfigurationError(
            "cloudflare storage requires CLOUDFLARE_ACCOUNT_ID "
            "or CLOUDFLARE_ENDPOINT_URL to be set"
        )
    if not _s3_available:
        raise ConfigurationError(
            "S3-compatible storage requires additional dependencies. "
            "Install with: pip install uploadkit[storage-s3]"
        )

    endpoint_url = settings.cloudflare_endpoint_url or r2_endpoint_url(
        settings.cloudflare_account_id
    )

    return S3StorageProvider(
        bucket=settings.cloudflare_bucketname,
        public_url_base=settings.cloudflare_bucket_url,
        region=settings.cloudflare_region,
        aws_access_key_id=settings.cloudflare_access_key,
        aws_secret_access_key=settings.cloudflare_secret_access_key,
        endpoint_url=endpoint_url,
        acl=settings.cloudflare_acl,
        fetch_timeout=settings.fetch_timeout,
    )


def _create_supabase_provider(settings: StorageSettings) -> StorageProvider:
    _require(
        settings,
        StorageBackend.SUPABASE,
        "supabase_url",
        "supabase_service_role_key",
        "supabase_storage_bucket",
    )
    if not _supabase_available:
        raise ConfigurationError(
            "Supabase storage requires additional dependencies. "
            "Install with: pip install uploadkit[storage-supabase]"
        )

    return SupabaseStorageProvider(
        url=settings.supabase_url,
        service_role_key=settings.supabase_service_role_key,
        bucket=settings.supabase_storage_bucket,
        fetch_timeout=settings.fetch_timeout,
    )
