"""S3-compatible object storage provider (Cloudflare R2, AWS S3, MinIO)."""

from typing import Any

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ...logging import get_logger
from ..base import StorageProvider
from ..exceptions import UploadError

logger = get_logger(__name__)

# Error codes returned when IfNoneMatch="*" finds an existing object
_COLLISION_ERROR_CODES = {"PreconditionFailed", "ConditionalRequestConflict"}


def r2_endpoint_url(account_id: str) -> str:
    return f"https://{account_id}.r2.cloudflarestorage.com"


class S3StorageProvider(StorageProvider):
    """Bucket on an S3-compatible endpoint, public through a configured base URL."""

    name = "cloudflare"

    def __init__(
        self,
        bucket: str,
        public_url_base: str,
        region: str = "auto",
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        endpoint_url: str | None = None,
        acl: str | None = "public-read",
        fetch_timeout: float = 30.0,
    ):
        self.bucket = bucket
        self.public_url_base = public_url_base
        self.region = region
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self.endpoint_url = endpoint_url
        self.acl = acl
        self.fetch_timeout = fetch_timeout

        self.config = Config(
            region_name=self.region,
            max_pool_connections=50,
        )

        self._session: Any | None = None

    def _get_session(self) -> Any:
        """Get or create the aioboto3 session."""
        if self._session is None:
            self._session = aioboto3.Session(
                aws_access_key_id=self.aws_access_key_id,
                aws_secret_access_key=self.aws_secret_access_key,
                region_name=self.region,
            )
        return self._session

    def _client(self) -> Any:
        return self._get_session().client(
            "s3", config=self.config, endpoint_url=self.endpoint_url
        )

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        upload_params: dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": content,
            "ContentType": content_type,
            "IfNoneMatch": "*",
        }
        if self.acl:
            upload_params["ACL"] = self.acl

        try:
            async with self._client() as s3:
                await s3.put_object(**upload_params)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in _COLLISION_ERROR_CODES:
                logger.error("Object already exists", key=key, bucket=self.bucket)
                raise UploadError(f"Object already exists: {key}", key=key) from e
            logger.error(f"S3 rejected upload of {key}: {e}")
            raise UploadError(f"S3 upload failed: {e}", key=key) from e
        except BotoCoreError as e:
            logger.error(f"Unexpected error uploading {key} to S3: {e}")
            raise UploadError(f"S3 upload failed: {e}", key=key) from e

        return await self.get_public_url(key)

    async def get_public_url(self, key: str) -> str:
        return f"{self.public_url_base.rstrip('/')}/{key}"

    async def delete(self, key: str) -> bool:
        async with self._client() as s3:
            await s3.delete_object(Bucket=self.bucket, Key=key)
        return True
