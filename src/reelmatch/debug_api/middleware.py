"""Middleware components and error handlers for the debug API."""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Log each request with its status and latency.

    Adds an ``X-Process-Time`` header (milliseconds) to every response.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        """Time the downstream handler and log the outcome."""
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}"

        if response.status_code >= 500:
            logger.warning("%s %s -> %d (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms)
        else:
            logger.debug("%s %s -> %d (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 with field-level messages."""
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.warning("rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content=jsonable_encoder({"detail": "invalid request body", "errors": errors}))


def setup_error_handlers(app: FastAPI) -> None:
    """Register boundary error handlers on the application."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)


def setup_cors(app: FastAPI, origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Args:
        app: The FastAPI application instance
        origins: Allowed origins; defaults to all
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
