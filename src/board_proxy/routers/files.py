from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import Response

from board_proxy.config.settings import Settings
from board_proxy.dependencies import get_app_settings, get_upstream_client
from board_proxy.errors import error_response
from board_proxy.graphql import add_file_operation
from board_proxy.responses import relay_upstream
from board_proxy.schemas import ErrorResponse, is_missing
from board_proxy.staging import discard_staged, read_staged, stage_upload
from board_proxy.upstream import UpstreamClient

router = APIRouter()


@router.post(
    "/upload",
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def upload_file(
    item_id: Optional[str] = Query(None, description="Item that owns the file column"),
    column_id: Optional[str] = Query(None, description="File column to attach to"),
    file: Optional[UploadFile] = File(None, description="The file to attach"),
    settings: Settings = Depends(get_app_settings),
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> Response:
    """
    Attach a file to an item's file column.

    The file is staged on local disk, forwarded as a GraphQL multipart
    upload, and the staged copy is deleted whatever the upstream outcome.

    Args:
        item_id: Item that owns the file column
        column_id: File column to attach to
        file: Multipart form field named `file`

    Returns:
        The upstream JSON response, unchanged.
    """
    if is_missing(item_id) or is_missing(column_id):
        return error_response("Missing item_id or column_id in query params")

    if file is None or not file.filename:
        return error_response("No file uploaded")

    staged = await stage_upload(file, settings.upload_dir)
    try:
        content = await read_staged(staged)
        operation = add_file_operation(item_id, column_id)
        return await relay_upstream(
            upstream.upload_file(operation, staged.original_name, content),
            "Upload failed",
        )
    finally:
        discard_staged(staged)
