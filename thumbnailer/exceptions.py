"""
Thumbnailer — domain exceptions.

Every error carries a preset HTTP status, a machine-readable code and a
``retryable`` flag so that the delivery edges (webhook router, Lambda handler)
never need to decide these at the call site. The core raises them and never
catches them; the edges log and re-signal them to the host.
"""
from __future__ import annotations

from fastapi import status


class ThumbnailError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "thumbnail_error"
    detail: str = "Thumbnail generation failed."
    retryable: bool = False

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


# ── Event ────────────────────────────────────────────────────────────────────

class InvalidEventError(ThumbnailError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_event"
    detail = "The blob-created event is malformed or incomplete."


# ── Codec ────────────────────────────────────────────────────────────────────

class DecodeError(ThumbnailError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "decode_error"
    detail = "The source blob is not a readable image."


class EncodeError(ThumbnailError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "encode_error"
    detail = "The thumbnail could not be encoded."


# ── Storage ──────────────────────────────────────────────────────────────────

class ReadError(ThumbnailError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "read_error"
    detail = "Could not read the source blob from storage."
    retryable = True


class WriteError(ThumbnailError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "write_error"
    detail = "Could not write the thumbnail to storage."
    retryable = True
