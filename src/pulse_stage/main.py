"""Main entry point for the Pulse application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from pulse_stage.api.v1 import (
    feed_router,
    posts_router,
    previews_router,
    tips_router,
    users_router,
    votes_router,
)
from pulse_stage.core.errors import InternalError, ServiceError
from pulse_stage.core.settings import settings
from pulse_stage.services.metadata import get_metadata_client
from pulse_stage.services.reputation import ReputationDecayWorker

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Social content API with link previews, votes, tips and reputation",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(posts_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(tips_router, prefix="/api/v1")
app.include_router(previews_router, prefix="/api/v1")
app.include_router(feed_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


def configure_logging() -> None:
    """Configure the root logger from ``LOG_LEVEL``."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _error_response(exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
    )


@app.exception_handler(ServiceError)
async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    return _error_response(exc)


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(InternalError("Database operation failed"))


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    if settings.reputation_decay_enabled:
        worker = ReputationDecayWorker()
        await worker.start()
        app.state.decay_worker = worker
    else:
        app.state.decay_worker = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: ReputationDecayWorker | None = getattr(app.state, "decay_worker", None)
    if worker:
        await worker.stop()
    await get_metadata_client().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("pulse_stage.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
