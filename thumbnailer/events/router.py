"""
Event Grid webhook — blob-created deliveries.

Event Grid first performs a subscription-validation handshake, then POSTs
``Microsoft.Storage.BlobCreated`` events. Each event's ``data`` runs through
the thumbnail pipeline in a worker thread. Pipeline failures surface as the
error envelope with the error's preset status so Event Grid can retry (5xx) or
dead-letter (4xx) the delivery.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.concurrency import run_in_threadpool

from thumbnailer.events.schemas import (
    BLOB_CREATED_EVENT,
    SUBSCRIPTION_VALIDATION_EVENT,
    DeliveryResponse,
    SubscriptionValidationResponse,
    parse_events,
)
from thumbnailer.exceptions import InvalidEventError
from thumbnailer.thumbnail.service import ThumbnailPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def get_pipeline(request: Request) -> ThumbnailPipeline:
    """The pipeline built from the app's settings at startup."""
    return request.app.state.pipeline


@router.post(
    "/blob-created",
    response_model=DeliveryResponse | SubscriptionValidationResponse,
    summary="Receive Event Grid blob-created deliveries",
)
async def blob_created(
    payload: Any = Body(...),
    pipeline: ThumbnailPipeline = Depends(get_pipeline),
) -> DeliveryResponse | SubscriptionValidationResponse:
    events = parse_events(payload)

    for event in events:
        if event.event_type == SUBSCRIPTION_VALIDATION_EVENT:
            code = event.data.get("validationCode")
            if not isinstance(code, str) or not code:
                raise InvalidEventError("Subscription validation event has no validationCode.")
            logger.info("Event Grid subscription validated for topic %s", event.topic)
            return SubscriptionValidationResponse(validationResponse=code)

    results = []
    for event in events:
        if event.event_type != BLOB_CREATED_EVENT:
            logger.info("Ignoring Event Grid event %s of type %s", event.id, event.event_type)
            continue
        results.append(await run_in_threadpool(pipeline.run, event.data))
    return DeliveryResponse(results=results)
