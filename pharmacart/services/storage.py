# pharmacart/services/storage.py
"""
S3-compatible object storage for checkout uploads (prescription and
passport images). Works with AWS S3 or any endpoint set in S3_ENDPOINT.
"""
import hashlib
from datetime import datetime, timezone

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from pharmacart.domain.errors import StorageError
from pharmacart.utils.settings import S3_BUCKET, S3_REGION, S3_ACCESS_KEY, S3_SECRET_KEY, S3_ENDPOINT
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


class StorageService:
    def __init__(self, bucket: str | None = None, region: str | None = None):
        self._client = None
        self._bucket = bucket or S3_BUCKET
        self._region = region or S3_REGION

    @property
    def client(self):
        """Lazy-load S3 client."""
        if self._client is None:
            config = Config(
                signature_version="s3v4",
                retries={"max_attempts": 3, "mode": "standard"},
            )
            client_kwargs = {
                "service_name": "s3",
                "region_name": self._region,
                "aws_access_key_id": S3_ACCESS_KEY,
                "aws_secret_access_key": S3_SECRET_KEY,
                "config": config,
            }
            if S3_ENDPOINT:
                client_kwargs["endpoint_url"] = S3_ENDPOINT

            self._client = boto3.client(**client_kwargs)
        return self._client

    def public_url(self, key: str) -> str:
        if S3_ENDPOINT:
            return f"{S3_ENDPOINT.rstrip('/')}/{self._bucket}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    @staticmethod
    def generate_key(folder: str, filename: str, content: bytes) -> str:
        content_hash = hashlib.md5(content).hexdigest()[:8]
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        safe_filename = "".join(c for c in filename if c.isalnum() or c in ".-_").lower()
        return f"{folder}/{timestamp}_{content_hash}_{safe_filename or 'upload'}"

    def upload(self, content: bytes, key: str, content_type: str) -> str:
        try:
            self.client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload failed for {key}: {e}")
            raise StorageError("File upload failed") from e

        logger.info(f"Uploaded {key} ({len(content)} bytes)")
        return self.public_url(key)
