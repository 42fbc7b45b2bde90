import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import Response

from board_proxy.dependencies import get_upstream_client
from board_proxy.errors import error_response
from board_proxy.graphql import create_item_operation, create_subitem_operation
from board_proxy.responses import relay_upstream
from board_proxy.schemas import CreateItemRequest, CreateSubitemRequest, ErrorResponse
from board_proxy.upstream import UpstreamClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/create-item",
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_item(
    payload: Optional[CreateItemRequest] = Body(None),
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> Response:
    """
    Create an item on a board.

    Args:
        payload: `{"boardId": ..., "itemName": ...}`

    Returns:
        The upstream JSON response, unchanged.
    """
    if payload is None:
        payload = CreateItemRequest()
    if payload.missing_fields():
        return error_response("Missing boardId or itemName in request body")

    logger.info(f"Creating item on board {payload.board_id}")
    operation = create_item_operation(payload.board_id, payload.item_name)
    return await relay_upstream(upstream.execute(operation), "Create item failed")


@router.post(
    "/create-subitem",
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_subitem(
    payload: Optional[CreateSubitemRequest] = Body(None),
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> Response:
    """Create a subitem under an existing item and relay the upstream JSON."""
    if payload is None:
        payload = CreateSubitemRequest()
    if payload.missing_fields():
        return error_response("Missing parentItemId or itemName in request body")

    logger.info(f"Creating subitem under item {payload.parent_item_id}")
    operation = create_subitem_operation(payload.parent_item_id, payload.item_name)
    return await relay_upstream(upstream.execute(operation), "Create subitem failed")
