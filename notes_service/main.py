"""FastAPI application for the notes service.

Endpoints:
  POST   /notes            — Add a note
  GET    /notes            — List all notes
  GET    /notes/{note_id}  — Fetch one note
  PUT    /notes/{note_id}  — Edit a note
  DELETE /notes/{note_id}  — Delete a note
  GET    /health           — Service health and note count
  GET    /metrics          — Prometheus metrics
"""

from __future__ import annotations

import functools
import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

from .config import Settings, settings as default_settings
from .handlers import NoteRequestHandler, fail
from .metrics import HTTP_DURATION, HTTP_REQUESTS, STORED_NOTES
from .routes import router as notes_router
from .store import NoteStore, generate_note_id

logging.basicConfig(
    level=default_settings.log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)

# Endpoints excluded from HTTP metrics
_METRICS_EXCLUDE = {"/metrics", "/openapi.json", "/docs", "/redoc"}


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request count and duration for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        """Wrap each request with timing and counting."""
        if request.url.path in _METRICS_EXCLUDE:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        # Route template, not raw path.
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        HTTP_REQUESTS.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        HTTP_DURATION.labels(endpoint=endpoint).observe(elapsed)
        return response


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Flatten pydantic error details into one readable line."""
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {error.get('msg')}" if loc else str(error.get("msg")))
    return "; ".join(parts)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject malformed note payloads with a 400 fail envelope."""
    detail = _describe_validation_error(exc)
    logger.warning("Rejected %s %s — %s", request.method, request.url.path, detail)
    return fail(400, f"Invalid note payload: {detail}")


def create_app(
    settings: Settings | None = None, store: NoteStore | None = None
) -> FastAPI:
    """Build the FastAPI app around an explicitly owned NoteStore."""
    settings = settings or default_settings
    if store is None:
        store = NoteStore(
            id_factory=functools.partial(generate_note_id, settings.id_length)
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown logging."""
        STORED_NOTES.set(store.count)
        logger.info("%s started with %d notes", settings.service_name, store.count)
        yield
        logger.info("%s shut down.", settings.service_name)

    app = FastAPI(title="Notes Service", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.handler = NoteRequestHandler(store)

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(notes_router)

    @app.get("/health")
    def health() -> dict[str, Any]:
        """Service status and number of stored notes."""
        return {
            "status": "healthy",
            "service": settings.service_name,
            "total_notes": store.count,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    @app.get("/metrics")
    def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
