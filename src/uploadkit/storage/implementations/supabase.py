"""Supabase Storage provider authenticated with a service-role key."""

from supabase import AsyncClient, AsyncClientOptions, create_async_client

from ...logging import get_logger
from ..base import StorageProvider
from ..exceptions import UploadError

logger = get_logger(__name__)


class SupabaseStorageProvider(StorageProvider):
    """Public Supabase bucket accessed server-side."""

    name = "supabase"

    def __init__(self, url: str, service_role_key: str, bucket: str, fetch_timeout: float = 30.0):
        self.url = url
        self.service_role_key = service_role_key
        self.bucket = bucket
        self.fetch_timeout = fetch_timeout
        self._client: AsyncClient | None = None

    async def _get_client(self) -> AsyncClient:
        """Get or create the async Supabase client.

        The service-role key is a static server credential, so session
        persistence and token refresh are off.
        """
        if self._client is None:
            self._client = await create_async_client(
                self.url,
                self.service_role_key,
                options=AsyncClientOptions(
                    auto_refresh_token=False,
                    persist_session=False,
                ),
            )
        return self._client

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        try:
            client = await self._get_client()
            await client.storage.from_(self.bucket).upload(
                path=key,
                file=content,
                file_options={
                    "content-type": content_type,
                    "upsert": "false",
                },
            )
            return await self.get_public_url(key)
        except Exception as e:
            logger.error(f"Unexpected error uploading {key} to Supabase: {e}")
            raise UploadError(f"Supabase upload failed: {e}", key=key) from e

    async def get_public_url(self, key: str) -> str:
        client = await self._get_client()
        return await client.storage.from_(self.bucket).get_public_url(key)

    async def delete(self, key: str) -> bool:
        client = await self._get_client()
        removed = await client.storage.from_(self.bucket).remove([key])
        return bool(removed)
