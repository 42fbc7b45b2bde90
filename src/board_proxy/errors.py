"""Exceptions and app-level error handlers."""
import logging
from typing import Optional

import pydantic
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Base class for failures talking to the upstream API."""


class UpstreamTransportError(UpstreamError):
    """The request never produced a response: refused, reset or timed out."""


class UpstreamResponseError(UpstreamError):
    """The upstream answered, but the body was not JSON."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        # keep enough of the body to debug without flooding the logs
        self.body = body[:500]


def error_response(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    """Build the `{"error": ...}` body used for local failures."""
    return JSONResponse(status_code=status_code, content={"error": message})


async def handle_request_validation_errors(request: Request, exc: Exception) -> JSONResponse:
    """Malformed client input is a 400, not FastAPI's default 422."""
    errors = exc.errors() if isinstance(exc, (RequestValidationError, pydantic.ValidationError)) else []
    logger.info(f"Rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid request",
            "detail": [
                {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
                for error in errors
            ],
        },
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Turn anything unhandled into a generic 500 instead of a dropped connection."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error while serving {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
