"""
Integration Records API - FastAPI application.
CORS, /api routes, MongoDB lifecycle, health check, error handling.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.database import Database
from app.core.errors import APIError, api_error_handler, error_content, validation_error_handler

# Send app logs (including request logs) to stdout
_log_handler = logging.StreamHandler(sys.stdout)
_log_handler.setLevel(logging.INFO)
_log_handler.setFormatter(logging.Formatter("%(levelname)s:     %(message)s"))
_app_logger = logging.getLogger("app")
_app_logger.setLevel(logging.INFO)
if not _app_logger.handlers:
    _app_logger.addHandler(_log_handler)

logger = logging.getLogger(__name__)

# Load settings once at import so CORS list is available to middleware
_settings = get_settings()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request (method + path) with its status code."""

    async def dispatch(self, request: StarletteRequest, call_next: Callable) -> Response:
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle: one MongoDB client for the process."""
    logger.info("Starting Integration Records API")
    logger.info("CORS_ORIGINS=%s", _settings.cors_origins)
    if _settings.ENVIRONMENT == "production":
        _settings.validate_for_production()
    app.state.database = Database.from_settings(_settings)
    yield
    app.state.database.close()
    logger.info("Shutting down")


app = FastAPI(
    title="Integration Records API",
    version="1.0.0",
    description="Backend API: import, cache and search records from connected integrations.",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.add_exception_handler(APIError, api_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)


# Error handling middleware
@app.middleware("http")
async def catch_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            status_code=500,
            content=error_content("Internal Server Error"),
        )


# Root and health
@app.get("/")
def root():
    return {
        "message": "Integration Records API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "records": "/api/records",
            "import": "/api/records/import",
            "webhooks": "/api/webhooks",
            "schema": "/api/schema/{recordType}/{userId}",
            "forms": "/api/forms",
            "integrations": "/api/integrations",
        },
    }


@app.get("/health")
def health():
    return {"status": "healthy"}


app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8080"))
    uvicorn.run("app.main:app", host="0.0.0.0", port=port)
