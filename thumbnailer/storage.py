"""
Blob storage collaborators.

The pipeline only sees the ``BlobStore`` protocol: ``read(url)`` for the source
blob and ``write(container, key, data)`` for the thumbnail. Writes always
overwrite, so repeated deliveries of the same event are last-writer-wins.

Source URLs are ``https://<host>/<container>/<blob name>``:
  Azure:  https://<account>.blob.core.windows.net/<container>/<name>
  S3:     https://s3.<region>.amazonaws.com/<bucket>/<key>   (path-style)
"""
from __future__ import annotations

import logging
from typing import Protocol

import boto3
from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient, ContentSettings
from botocore.exceptions import BotoCoreError, ClientError

from thumbnailer.config import Settings
from thumbnailer.exceptions import ReadError, WriteError
from thumbnailer.thumbnail.naming import split_blob_url

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def read(self, url: str) -> bytes: ...

    def write(self, container: str, key: str, data: bytes, content_type: str | None = None) -> None: ...


# ── S3 ───────────────────────────────────────────────────────────────────────

class S3BlobStore:
    """Blob store backed by S3 (bucket == container)."""

    def __init__(self, client) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> S3BlobStore:
        kwargs = {"region_name": settings.aws_region}
        if settings.aws_access_key_id:
            kwargs["aws_access_key_id"] = settings.aws_access_key_id
            kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
        return cls(boto3.client("s3", **kwargs))

    def read(self, url: str) -> bytes:
        bucket, key = split_blob_url(url)
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            raise ReadError(f"Could not read s3://{bucket}/{key}: {exc}") from exc

    def write(self, container: str, key: str, data: bytes, content_type: str | None = None) -> None:
        params = {"Bucket": container, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        try:
            self._client.put_object(**params)
        except (BotoCoreError, ClientError) as exc:
            raise WriteError(f"Could not write s3://{container}/{key}: {exc}") from exc


# ── Azure Blob Storage ───────────────────────────────────────────────────────

class AzureBlobStore:
    """Blob store backed by an Azure storage account."""

    def __init__(self, service_client: BlobServiceClient) -> None:
        self._service = service_client

    @classmethod
    def from_settings(cls, settings: Settings) -> AzureBlobStore:
        if not settings.blob_storage_connection_string:
            raise ValueError("blob_storage_connection_string is required for the azure backend")
        return cls(BlobServiceClient.from_connection_string(settings.blob_storage_connection_string))

    def read(self, url: str) -> bytes:
        container, name = split_blob_url(url)
        try:
            blob = self._service.get_blob_client(container=container, blob=name)
            return blob.download_blob().readall()
        except AzureError as exc:
            raise ReadError(f"Could not read {container}/{name}: {exc}") from exc

    def write(self, container: str, key: str, data: bytes, content_type: str | None = None) -> None:
        settings = ContentSettings(content_type=content_type) if content_type else None
        try:
            container_client = self._service.get_container_client(container)
            container_client.upload_blob(key, data, overwrite=True, content_settings=settings)
        except AzureError as exc:
            raise WriteError(f"Could not write {container}/{key}: {exc}") from exc


def build_store(settings: Settings) -> BlobStore:
    """Return the configured storage collaborator."""
    if settings.storage_backend == "s3":
        return S3BlobStore.from_settings(settings)
    return AzureBlobStore.from_settings(settings)
