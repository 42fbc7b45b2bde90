"""Translate upstream outcomes into responses for the caller."""
from typing import Any, Awaitable

from fastapi import status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from board_proxy.errors import UpstreamResponseError, UpstreamTransportError

INVALID_JSON_MESSAGE = "Invalid JSON response"


async def relay_upstream(call: Awaitable[Any], failure_message: str) -> Response:
    """
    Await an upstream call and relay its outcome.

    Parsed JSON is passed through verbatim with a 200, including GraphQL
    errors the upstream embeds in its body. Anything else becomes a 500
    with a fixed message; the upstream client has already logged the cause.
    """
    try:
        payload = await call
    except UpstreamResponseError:
        return PlainTextResponse(INVALID_JSON_MESSAGE, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except UpstreamTransportError:
        return PlainTextResponse(failure_message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)
