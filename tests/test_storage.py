from unittest.mock import MagicMock

import boto3
import pytest
from azure.core.exceptions import ResourceNotFoundError, ServiceRequestError
from moto import mock_aws

from thumbnailer.config import Settings
from thumbnailer.exceptions import InvalidEventError, ReadError, WriteError
from thumbnailer.storage import AzureBlobStore, S3BlobStore, build_store

REGION = "us-east-1"
SOURCE_BUCKET = "uploads"
DEST_BUCKET = "thumbnails"


@pytest.fixture
def aws_credentials(monkeypatch) -> None:
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


@pytest.fixture
def s3_client(aws_credentials):
    with mock_aws():
        client = boto3.client("s3", region_name=REGION)
        client.create_bucket(Bucket=SOURCE_BUCKET)
        client.create_bucket(Bucket=DEST_BUCKET)
        yield client


# ── S3 ───────────────────────────────────────────────────────────────────────

def test_s3_read_returns_object_bytes(s3_client) -> None:
    s3_client.put_object(Bucket=SOURCE_BUCKET, Key="photos/cat.png", Body=b"png-bytes")
    store = S3BlobStore(s3_client)
    assert store.read(f"https://s3.{REGION}.amazonaws.com/{SOURCE_BUCKET}/photos/cat.png") == b"png-bytes"


def test_s3_read_missing_object_raises_read_error(s3_client) -> None:
    store = S3BlobStore(s3_client)
    with pytest.raises(ReadError):
        store.read(f"https://s3.{REGION}.amazonaws.com/{SOURCE_BUCKET}/photos/missing.png")


def test_s3_read_malformed_url_raises_invalid_event(s3_client) -> None:
    with pytest.raises(InvalidEventError):
        S3BlobStore(s3_client).read("cat.png")


def test_s3_write_overwrites_with_content_type(s3_client) -> None:
    store = S3BlobStore(s3_client)
    store.write(DEST_BUCKET, "photos/cat.png", b"first", content_type="image/png")
    store.write(DEST_BUCKET, "photos/cat.png", b"second", content_type="image/png")

    obj = s3_client.get_object(Bucket=DEST_BUCKET, Key="photos/cat.png")
    assert obj["Body"].read() == b"second"
    assert obj["ContentType"] == "image/png"


def test_s3_write_to_missing_bucket_raises_write_error(s3_client) -> None:
    with pytest.raises(WriteError):
        S3BlobStore(s3_client).write("no-such-bucket", "cat.png", b"data")


def test_s3_from_settings(aws_credentials) -> None:
    settings = Settings(
        _env_file=None,
        storage_backend="s3",
        aws_access_key_id="key",
        aws_secret_access_key="secret",
        aws_region="eu-west-1",
    )
    store = build_store(settings)
    assert isinstance(store, S3BlobStore)
    assert store._client.meta.region_name == "eu-west-1"


# ── Azure ────────────────────────────────────────────────────────────────────

def test_azure_read_downloads_blob() -> None:
    service = MagicMock()
    service.get_blob_client.return_value.download_blob.return_value.readall.return_value = b"gif-bytes"
    store = AzureBlobStore(service)

    data = store.read("https://acct.blob.core.windows.net/images/a/b.gif")

    assert data == b"gif-bytes"
    service.get_blob_client.assert_called_once_with(container="images", blob="a/b.gif")


def test_azure_read_failure_raises_read_error() -> None:
    service = MagicMock()
    service.get_blob_client.return_value.download_blob.side_effect = ResourceNotFoundError("gone")
    with pytest.raises(ReadError):
        AzureBlobStore(service).read("https://acct.blob.core.windows.net/images/a.gif")


def test_azure_write_uploads_with_overwrite() -> None:
    service = MagicMock()
    store = AzureBlobStore(service)

    store.write("thumbnails", "a/b.jpg", b"jpeg-bytes", content_type="image/jpeg")

    service.get_container_client.assert_called_once_with("thumbnails")
    upload = service.get_container_client.return_value.upload_blob
    args, kwargs = upload.call_args
    assert args == ("a/b.jpg", b"jpeg-bytes")
    assert kwargs["overwrite"] is True
    assert kwargs["content_settings"].content_type == "image/jpeg"


def test_azure_write_failure_raises_write_error() -> None:
    service = MagicMock()
    service.get_container_client.return_value.upload_blob.side_effect = ServiceRequestError("timeout")
    with pytest.raises(WriteError) as exc_info:
        AzureBlobStore(service).write("thumbnails", "a.jpg", b"x")
    assert exc_info.value.retryable


def test_azure_from_settings_requires_connection_string() -> None:
    with pytest.raises(ValueError):
        build_store(Settings(_env_file=None, storage_backend="azure"))


def test_azure_from_settings_uses_connection_string() -> None:
    settings = Settings(
        _env_file=None,
        storage_backend="azure",
        blob_storage_connection_string=(
            "DefaultEndpointsProtocol=https;AccountName=acct;"
            "AccountKey=c2VjcmV0;EndpointSuffix=core.windows.net"
        ),
    )
    store = build_store(settings)
    assert isinstance(store, AzureBlobStore)
    assert store._service.account_name == "acct"
