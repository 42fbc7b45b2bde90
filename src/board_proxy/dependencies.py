from fastapi import Request

from board_proxy.config.settings import Settings
from board_proxy.upstream import UpstreamClient


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


def get_upstream_client(request: Request) -> UpstreamClient:
    """
    Shared upstream client for this app.

    Created on first use so that hosts which skip the ASGI lifespan
    (e.g. Mangum with lifespan="off") still get one.
    """
    client = getattr(request.app.state, "upstream", None)
    if client is None:
        client = UpstreamClient(
            request.app.state.settings,
            transport=getattr(request.app.state, "upstream_transport", None),
        )
        request.app.state.upstream = client
    return client
