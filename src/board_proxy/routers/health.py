from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/health", response_class=PlainTextResponse)
async def health_check() -> str:
    """
    Liveness probe for uptime monitoring.

    Deliberately does not touch the upstream API, so it stays green while
    monday.com is unreachable.
    """
    return "OK"
