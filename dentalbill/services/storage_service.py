from typing import Any, Optional
from urllib.parse import quote

import boto3  # type: ignore
from fastapi.concurrency import run_in_threadpool

from dentalbill.core.config import settings
from dentalbill.core.exceptions import StorageUnavailable, ValidationFailed
from dentalbill.core.logger import logger


class StorageService:
    """Blob storage for clinic images and patient documents (S3-compatible)."""

    def __init__(self, client: Any = None, bucket: Optional[str] = None):
        self.bucket = bucket if bucket is not None else settings.S3_BUCKET
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self.bucket)

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client(  # type: ignore
                "s3",
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION,
            )
        return self._client

    def public_url(self, path: str) -> str:
        base = settings.S3_PUBLIC_URL or f"https://{self.bucket}.s3.{settings.AWS_REGION}.amazonaws.com"
        return f"{base.rstrip('/')}/{quote(path)}"

    async def upload(self, path: str, content: bytes, content_type: Optional[str]) -> str:
        if not self.enabled:
            raise StorageUnavailable()
        await run_in_threadpool(
            self.client.put_object,
            Bucket=self.bucket,
            Key=path,
            Body=content,
            ContentType=content_type or "application/octet-stream",
        )
        logger.info(f"Stored {len(content)} bytes at {path}")
        return self.public_url(path)

    async def download(self, path: str) -> bytes:
        if not self.enabled:
            raise StorageUnavailable()
        response = await run_in_threadpool(self.client.get_object, Bucket=self.bucket, Key=path)
        return response["Body"].read()

    async def delete(self, path: str) -> None:
        if not self.enabled:
            raise StorageUnavailable()
        await run_in_threadpool(self.client.delete_object, Bucket=self.bucket, Key=path)
        logger.info(f"Deleted stored object {path}")


def check_upload_size(size: int) -> None:
    if size < settings.MIN_UPLOAD_BYTES or size > settings.MAX_UPLOAD_BYTES:
        size_mb = size / (1024 * 1024)
        min_mb = round(settings.MIN_UPLOAD_BYTES / (1024 * 1024), 2)
        max_mb = round(settings.MAX_UPLOAD_BYTES / (1024 * 1024), 2)
        raise ValidationFailed(
            f"File size must be between {min_mb:g} MB and {max_mb:g} MB (Yours: {size_mb:.2f} MB)",
            field="file",
        )


storage_service = StorageService()
