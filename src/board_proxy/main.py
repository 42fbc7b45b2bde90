from contextlib import asynccontextmanager
from textwrap import dedent
from typing import AsyncGenerator, Optional
import logging

import httpx
import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute

from board_proxy import __version__
from board_proxy.config.settings import Settings
from board_proxy.cors import install_cors
from board_proxy.errors import (
    handle_broad_exceptions,
    handle_request_validation_errors,
)
from board_proxy.routers.files import router as files_router
from board_proxy.routers.health import router as health_router
from board_proxy.routers.items import router as items_router
from board_proxy.upstream import UpstreamClient

# Set up logging
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the shared upstream client at startup and close it on shutdown."""
    if app.state.upstream is None:
        app.state.upstream = UpstreamClient(
            app.state.settings,
            transport=app.state.upstream_transport,
        )
    logger.info(f"Board proxy ready, forwarding to {app.state.settings.api_base_url}")
    yield
    upstream = getattr(app.state, "upstream", None)
    if upstream is not None:
        await upstream.aclose()
        app.state.upstream = None
    logger.info("Board proxy shut down")


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Create a FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted, which
            raises `pydantic.ValidationError` if MONDAY_API_KEY is unset.
        transport: Optional httpx transport for the upstream client.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Board Proxy",
        summary="Forward file uploads and item creation to monday.com",
        version=__version__,
        description=dedent(
            """\
        | Route | Upstream mutation |
        | --- | --- |
        | `POST /upload` | `add_file_to_column` |
        | `POST /create-item` | `create_item` |
        | `POST /create-subitem` | `create_subitem` |
        """
        ),
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.upstream_transport = transport
    app.state.upstream = None

    app.include_router(files_router, tags=["files"])
    app.include_router(items_router, tags=["items"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_request_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)
    install_cors(app, settings.allowed_origins)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    from board_proxy.cli import cli

    cli(["serve"])
