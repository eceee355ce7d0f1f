import io
from collections.abc import Callable

import pytest
from PIL import Image

from thumbnailer.exceptions import ReadError
from thumbnailer.thumbnail.naming import split_blob_url
from thumbnailer.thumbnail.service import ThumbnailPipeline

SOURCE_HOST = "https://uploads.blob.core.windows.net"
THUMBNAIL_CONTAINER = "thumbnails"
THUMBNAIL_WIDTH = 480


class InMemoryBlobStore:
    """BlobStore fake that records every read and write."""

    def __init__(self) -> None:
        self.blobs: dict[tuple[str, str], bytes] = {}
        self.content_types: dict[tuple[str, str], str | None] = {}
        self.reads: list[str] = []
        self.writes: list[tuple[str, str]] = []

    def put(self, url: str, data: bytes) -> None:
        self.blobs[split_blob_url(url)] = data

    def read(self, url: str) -> bytes:
        self.reads.append(url)
        try:
            return self.blobs[split_blob_url(url)]
        except KeyError:
            raise ReadError(f"No such blob: {url}")

    def write(self, container: str, key: str, data: bytes, content_type: str | None = None) -> None:
        self.writes.append((container, key))
        self.blobs[(container, key)] = data
        self.content_types[(container, key)] = content_type


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    def _make(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
        colors = {"RGBA": (200, 40, 40, 128), "CMYK": (0, 160, 160, 40), "L": 120, "P": 120}
        color = colors.get(mode, (200, 40, 40))
        img = Image.new(mode, (width, height), color)
        buf = io.BytesIO()
        img.save(buf, format=fmt)
        return buf.getvalue()

    return _make


@pytest.fixture
def store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def pipeline(store: InMemoryBlobStore) -> ThumbnailPipeline:
    return ThumbnailPipeline(store, thumbnail_width=THUMBNAIL_WIDTH, container=THUMBNAIL_CONTAINER)


def image_size(data: bytes) -> tuple[int, int]:
    with Image.open(io.BytesIO(data)) as img:
        return img.size
