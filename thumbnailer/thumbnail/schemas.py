"""
Thumbnail — Pydantic V2 event and result schemas.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from thumbnailer.exceptions import InvalidEventError
from thumbnailer.thumbnail.constants import ResultStatus


class BlobCreatedEvent(BaseModel):
    """A newly created source blob, as delivered by the trigger."""
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    url: str = Field(min_length=1, description="Fully qualified URL of the new blob")
    content_type: str | None = Field(default=None, alias="contentType")

    @field_validator("url", mode="before")
    @classmethod
    def _url_is_string(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError("url must be a string")
        return value

    @classmethod
    def from_payload(cls, payload: Any) -> BlobCreatedEvent:
        """Validate a raw trigger payload, raising InvalidEventError."""
        if isinstance(payload, cls):
            return payload
        if not isinstance(payload, Mapping):
            raise InvalidEventError("Event payload must be an object.")
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as exc:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) or "event" for err in exc.errors())
            raise InvalidEventError(f"Invalid blob-created event ({fields}).") from exc


class PipelineResult(BaseModel):
    """Outcome of one successful pipeline run."""
    model_config = ConfigDict(frozen=True)

    status: ResultStatus
    source_url: str
    container: str | None = None
    blob_name: str | None = None
    width: int | None = None
    height: int | None = None
    content_type: str | None = None
