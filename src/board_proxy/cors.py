"""
Cross-origin policy.

Browsers only get through from the configured origins. Clients that send no
Origin header at all (curl, mobile apps, server-to-server) are let through.
"""
import logging
from typing import Iterable

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def cors_rejection_message(origin: str) -> str:
    return (
        "The CORS policy for this site does not allow access from the "
        f"specified Origin: {origin}"
    )


def is_origin_allowed(origin: str, allowed_origins: Iterable[str]) -> bool:
    """An empty origin is allowed; anything else must match exactly."""
    if not origin:
        return True
    return origin.rstrip("/") in {allowed.rstrip("/") for allowed in allowed_origins}


def origin_allow_list(allowed_origins: Iterable[str]):
    """Build an HTTP middleware that rejects requests from unknown origins."""
    allowed = list(allowed_origins)

    async def check_origin(request: Request, call_next):
        origin = request.headers.get("origin", "")
        if not is_origin_allowed(origin, allowed):
            logger.warning(f"Rejected {request.method} {request.url.path} from origin {origin}")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"error": cors_rejection_message(origin)},
            )
        return await call_next(request)

    return check_origin


def install_cors(app: FastAPI, allowed_origins: Iterable[str]) -> None:
    """
    Enforce the allow-list and emit CORS headers.

    Starlette runs the last-added middleware first, so CORSMiddleware sees
    preflight requests before the allow-list check does.
    """
    allowed = list(allowed_origins)
    app.middleware("http")(origin_allow_list(allowed))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
