"""
Thumbnail — pipeline.

One invocation per blob-created event:

    validate event -> resolve encoding from the URL extension
        UNSUPPORTED -> log and return SKIPPED (no read, no write)
        supported   -> read source -> create thumbnail -> derive name -> write

Nothing is caught here. Failures propagate unchanged to the delivery edge,
which owns logging and retry/dead-letter signalling.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from thumbnailer.config import Settings
from thumbnailer.storage import BlobStore, build_store
from thumbnailer.thumbnail.constants import ResultStatus
from thumbnailer.thumbnail.encoders import select_encoding
from thumbnailer.thumbnail.naming import derive_blob_name, split_blob_url, url_extension
from thumbnailer.thumbnail.processor import create_thumbnail
from thumbnailer.thumbnail.schemas import BlobCreatedEvent, PipelineResult

logger = logging.getLogger(__name__)


class ThumbnailPipeline:
    """Stateless orchestration of one thumbnail per blob-created event.

    Safe to share across concurrent invocations: it holds only configuration
    and the injected store.
    """

    def __init__(self, store: BlobStore, thumbnail_width: int, container: str) -> None:
        if thumbnail_width <= 0:
            raise ValueError("thumbnail_width must be positive")
        self._store = store
        self._width = thumbnail_width
        self._container = container

    @classmethod
    def from_settings(cls, settings: Settings, store: BlobStore | None = None) -> ThumbnailPipeline:
        return cls(
            store if store is not None else build_store(settings),
            thumbnail_width=settings.thumbnail_width,
            container=settings.thumbnail_container,
        )

    def run(self, event: BlobCreatedEvent | Mapping[str, Any]) -> PipelineResult:
        event = BlobCreatedEvent.from_payload(event)
        url = event.url
        # Reject malformed URLs before any I/O
        split_blob_url(url)

        kind = select_encoding(url_extension(url))
        if not kind.is_supported:
            logger.info("No encoder support for: %s", url)
            return PipelineResult(status=ResultStatus.SKIPPED, source_url=url)

        source = self._store.read(url)
        thumbnail = create_thumbnail(source, self._width, kind)
        blob_name = derive_blob_name(url)
        self._store.write(self._container, blob_name, thumbnail.data, content_type=thumbnail.content_type)

        logger.info(
            "Thumbnail %sx%s written to %s/%s",
            thumbnail.width, thumbnail.height, self._container, blob_name,
        )
        return PipelineResult(
            status=ResultStatus.WRITTEN,
            source_url=url,
            container=self._container,
            blob_name=blob_name,
            width=thumbnail.width,
            height=thumbnail.height,
            content_type=thumbnail.content_type,
        )
