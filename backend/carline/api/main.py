"""Entry point for the FastAPI application.

This module constructs the FastAPI app, includes the routers and sets
up startup and shutdown events. When run with uvicorn it loads
configuration from ``carline.core.config``::

    uvicorn carline.api.main:app --app-dir backend --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from carline.api.dependencies import get_receipt_service
from carline.api.error_handlers import (
    generic_exception_handler,
    receipt_exception_handler,
    validation_exception_handler,
)
from carline.api.routes.ai import router as ai_router
from carline.core.config import settings
from carline.core.exceptions import ReceiptProcessingError
from carline.core.observability import init_sentry

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    # Startup
    logger.info("Starting up...")
    if init_sentry("api"):
        logger.info("Sentry SDK initialized (api)")
    yield
    # Shutdown
    logger.info("Shutting down...")
    if get_receipt_service.cache_info().currsize:
        await get_receipt_service().aclose()


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
)

"""CORS configuration.

Logic:
1. In development => allow all ( * ) for simplest DX.
2. Otherwise start from BACKEND_CORS_ORIGINS.
3. Ensure the FRONTEND_URL origin is present (parsed) when not wildcard.
4. Deduplicate while preserving order.
"""
env_is_dev = (settings.ENVIRONMENT or "development").lower() == "development"
allow_origins = ["*"] if env_is_dev else list(settings.BACKEND_CORS_ORIGINS or [])

if not env_is_dev:
    parsed = urlparse(settings.FRONTEND_URL or "")
    if parsed.scheme and parsed.netloc:
        front_origin = f"{parsed.scheme}://{parsed.netloc}"
        if front_origin not in allow_origins:
            allow_origins.append(front_origin)

# Deduplicate preserving order
seen = set()
allow_origins = [o for o in allow_origins if not (o in seen or seen.add(o))]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=not env_is_dev,
    allow_methods=["GET", "HEAD", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)

# Register custom exception handlers
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ReceiptProcessingError, receipt_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include routers
app.include_router(ai_router)


@app.api_route("/health", methods=["GET", "HEAD"])
async def health_check():
    """Health check endpoint (supports GET & HEAD)."""
    return {"status": "healthy"}
