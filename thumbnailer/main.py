"""
Thumbnailer ASGI app.

Run:  uvicorn thumbnailer.main:app --host 0.0.0.0 --port 8000
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import BaseModel

from thumbnailer.config import Settings
from thumbnailer.events.router import router as events_router
from thumbnailer.exceptions import ThumbnailError
from thumbnailer.middleware import (
    error_envelope_middleware,
    request_id_middleware,
    thumbnail_error_handler,
)
from thumbnailer.storage import BlobStore
from thumbnailer.thumbnail.service import ThumbnailPipeline


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Thumbnailer

Event-driven thumbnail generation for newly uploaded blobs.

* **Event Grid webhook** — subscription validation handshake and
  `Microsoft.Storage.BlobCreated` deliveries.
* **Formats** — PNG, JPEG and GIF sources are re-encoded in their own format;
  anything else is skipped.
* **Sizing** — fixed output width, height follows the source aspect ratio.

### Error shape
```json
{ "error": { "code": "read_error", "message": "..." }, "request_id": "..." }
```
400 marks the event as terminal (Event Grid dead-letters it without retrying);
503 and other 5xx codes are retried.
"""


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s:%(name)s: %(message)s",
    )


def get_settings() -> Settings:
    return Settings()


def create_app(settings: Settings | None = None, store: BlobStore | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Storage misconfiguration fails startup, not the first delivery
        app.state.pipeline = ThumbnailPipeline.from_settings(settings, store=store)
        yield

    app = FastAPI(
        title="Thumbnailer",
        version="1.0.0",
        description=_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(ThumbnailError, thumbnail_error_handler)

    # Middleware (applied in reverse-registration order: last added = outermost)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)

    app.include_router(events_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="thumbnailer")

    return app


app = create_app()
