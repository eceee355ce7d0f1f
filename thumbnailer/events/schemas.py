"""
Event Grid — delivery envelope schemas.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from thumbnailer.exceptions import InvalidEventError
from thumbnailer.thumbnail.schemas import PipelineResult

SUBSCRIPTION_VALIDATION_EVENT = "Microsoft.EventGrid.SubscriptionValidationEvent"
BLOB_CREATED_EVENT = "Microsoft.Storage.BlobCreated"


class EventGridEvent(BaseModel):
    """One Event Grid event. Only the fields the service reads are declared."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = ""
    event_type: str = Field(alias="eventType", min_length=1)
    subject: str = ""
    topic: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class SubscriptionValidationResponse(BaseModel):
    validationResponse: str


class DeliveryResponse(BaseModel):
    results: list[PipelineResult]


def parse_events(payload: Any) -> list[EventGridEvent]:
    """Accept a single event or an array of events."""
    items = payload if isinstance(payload, list) else [payload]
    try:
        return [EventGridEvent.model_validate(item) for item in items]
    except ValidationError as exc:
        raise InvalidEventError(f"Malformed Event Grid delivery: {exc.error_count()} error(s).") from exc
