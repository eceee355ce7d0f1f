"""
AWS Lambda handler — thumbnail generation for S3 uploads.

Triggered by S3 ObjectCreated notifications, delivered directly or wrapped in
SQS messages.

Flow:
  1. Ignores records that are not ObjectCreated:*, then builds a path-style
     blob URL (https://s3.<region>.amazonaws.com/<bucket>/<key>)
     for each remaining record.
  2. Runs the thumbnail pipeline: unsupported extensions are skipped, supported
     images are resized and written to THUMBNAIL_CONTAINER under the same key.
  3. Any failure is logged and re-raised so Lambda's retry / DLQ policy applies.

Environment variables:
  THUMBNAIL_WIDTH      — output width in pixels
  THUMBNAIL_CONTAINER  — destination bucket
  STORAGE_BACKEND      — set to "s3"
  AWS_REGION           — AWS region (set by Lambda runtime)
"""
from __future__ import annotations

import json
import logging
import urllib.parse
from functools import lru_cache

from thumbnailer.config import Settings
from thumbnailer.exceptions import InvalidEventError
from thumbnailer.thumbnail.schemas import BlobCreatedEvent
from thumbnailer.thumbnail.service import ThumbnailPipeline

logger = logging.getLogger()
logger.setLevel(logging.INFO)


@lru_cache
def get_pipeline() -> ThumbnailPipeline:
    return ThumbnailPipeline.from_settings(Settings())


def handler(event: dict, context: object) -> dict:
    """Lambda entry point — processes S3 or SQS-wrapped S3 events."""
    pipeline = get_pipeline()
    results = []

    for s3_record in _iter_s3_records(event):
        event_name = s3_record.get("eventName", "")
        if not event_name.startswith("ObjectCreated"):
            logger.info("Ignoring S3 event %s", event_name or "<unnamed>")
            continue
        try:
            result = pipeline.run(s3_record_to_event(s3_record))
        except Exception:
            logger.exception("Thumbnail generation failed for record: %s", s3_record)
            raise
        results.append(result.model_dump(mode="json"))

    return {"statusCode": 200, "results": results}


def _iter_s3_records(event: dict):
    for record in event.get("Records", []):
        # SQS wrapper: unwrap the S3 event from the SQS message body
        if record.get("eventSource") == "aws:sqs":
            try:
                body = json.loads(record.get("body") or "{}")
            except json.JSONDecodeError as exc:
                logger.error("Unreadable SQS message body: %s", exc)
                raise InvalidEventError("SQS message body is not valid JSON.") from exc
            yield from body.get("Records", [])
        else:
            yield record


def s3_record_to_event(record: dict) -> BlobCreatedEvent:
    """Translate one S3 notification record into a blob-created event."""
    s3_info = record.get("s3") or {}
    bucket = (s3_info.get("bucket") or {}).get("name", "")
    # S3 notifications carry form-encoded keys
    key = urllib.parse.unquote_plus((s3_info.get("object") or {}).get("key", ""))
    if not bucket or not key:
        raise InvalidEventError("S3 record is missing the bucket or object key.")

    region = record.get("awsRegion") or "us-east-1"
    url = f"https://s3.{region}.amazonaws.com/{bucket}/{urllib.parse.quote(key)}"
    return BlobCreatedEvent(url=url)
