"""Main entry point for the Newsdesk application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from newsdesk.api.v1 import admin_router, comments_router, reports_router
from newsdesk.core.settings import settings
from newsdesk.services.keyword_cache import get_keyword_cache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    cache = get_keyword_cache()
    logger.info(
        "%s %s starting (keyword cache %.0fs, auto-hide at %d reports)",
        settings.app_name,
        settings.app_version,
        cache.ttl_seconds,
        settings.auto_hide_report_threshold,
    )
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Newsdesk API",
    description="Comment moderation and abuse reporting for a community news site",
    version=settings.app_version,
    lifespan=lifespan,
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
app.include_router(comments_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


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
        "description": "Comment moderation and abuse reporting API",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=settings.log_level)
    uvicorn.run("newsdesk.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
