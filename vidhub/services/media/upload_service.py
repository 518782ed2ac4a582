"""
VidHub Media Upload — hands local files to object storage.

The API spools each incoming multipart file to ``temp_dir``, passes the local
path to a ``MediaUploader`` and always removes the local copy afterwards.
``S3MediaUploader`` is the production uploader (MinIO or any S3 endpoint);
tests swap in their own through the ``get_uploader`` dependency.
"""
from __future__ import annotations

import asyncio
import logging
import mimetypes
import shutil
import uuid
from pathlib import Path
from typing import Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from vidhub.core.config import get_settings
from vidhub.core.errors import InvalidArgument, OperationFailed

logger = logging.getLogger(__name__)
settings = get_settings()


class MediaUploader(Protocol):
    async def upload(self, local_path: Path, folder: str) -> Optional[str]:
        """Upload ``local_path`` and return its hosted URL, or None on failure."""
        ...

    async def discard(self, url: str) -> None:
        """Remove a previously uploaded object."""
        ...


class S3MediaUploader:
    """Uploads to a MinIO / S3 bucket and returns a public URL."""

    def __init__(self):
        self._client = None
        self._bucket_ready = False

    @property
    def endpoint_url(self) -> str:
        endpoint = settings.minio_endpoint
        if "://" in endpoint:
            return endpoint
        return f"{'https' if settings.minio_secure else 'http'}://{endpoint}"

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                aws_access_key_id=settings.minio_access_key,
                aws_secret_access_key=settings.minio_secret_key,
                endpoint_url=self.endpoint_url,
            )
        return self._client

    def _public_base(self) -> str:
        base = settings.media_public_base_url or f"{self.endpoint_url}/{settings.minio_bucket}"
        return base.rstrip("/")

    def public_url(self, object_name: str) -> str:
        return f"{self._public_base()}/{object_name}"

    def object_name(self, url: str) -> Optional[str]:
        """Bucket key behind a URL returned by ``upload``, None for foreign URLs."""
        prefix = f"{self._public_base()}/"
        if not url.startswith(prefix) or len(url) == len(prefix):
            return None
        return url[len(prefix):]

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        try:
            self.client.head_bucket(Bucket=settings.minio_bucket)
        except ClientError:
            self.client.create_bucket(Bucket=settings.minio_bucket)
        self._bucket_ready = True

    def _put(self, local_path: Path, object_name: str) -> None:
        self._ensure_bucket()
        content_type = mimetypes.guess_type(local_path.name)[0] or "application/octet-stream"
        self.client.upload_file(
            str(local_path), settings.minio_bucket, object_name,
            ExtraArgs={"ContentType": content_type},
        )

    async def upload(self, local_path: Path, folder: str) -> Optional[str]:
        object_name = f"{folder}/{uuid.uuid4().hex}{local_path.suffix}"
        try:
            await asyncio.to_thread(self._put, local_path, object_name)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Upload of {local_path.name} failed: {e}")
            return None
        return self.public_url(object_name)

    async def discard(self, url: str) -> None:
        object_name = self.object_name(url)
        if object_name is None:
            logger.warning(f"Not removing {url}: outside the media bucket")
            return
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=settings.minio_bucket, Key=object_name)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Removal of {object_name} failed: {e}")


async def store_upload(file: Optional[UploadFile], uploader: MediaUploader, folder: str, label: str) -> str:
    """Spool ``file`` to disk, upload it and return the hosted URL."""
    if file is None or not file.filename:
        raise InvalidArgument(f"{label} is required")

    work_dir = Path(settings.temp_dir)
    work_dir.mkdir(parents=True, exist_ok=True)
    local_path = work_dir / f"{uuid.uuid4().hex}{Path(file.filename).suffix}"
    try:
        with local_path.open("wb") as out:
            shutil.copyfileobj(file.file, out)
        url = await uploader.upload(local_path, folder)
    finally:
        local_path.unlink(missing_ok=True)

    if not url:
        raise OperationFailed(f"Error while uploading {label.lower()}")
    return url


async def discard_uploads(uploader: MediaUploader, urls) -> None:
    """Remove objects uploaded for a request that did not complete."""
    for url in urls:
        await uploader.discard(url)


media_uploader = S3MediaUploader()
