"""
Client for the upstream monday.com API.

One ``httpx.AsyncClient`` is shared for the lifetime of the app. Each public
call issues exactly one POST, reads the whole body and parses it as JSON.
"""
import json
import logging
from typing import Any, Dict, Optional

import httpx

from board_proxy.config.settings import Settings
from board_proxy.errors import UpstreamResponseError, UpstreamTransportError
from board_proxy.graphql import GraphQLOperation
from board_proxy.multipart import encode_graphql_upload
from board_proxy.utils.decorators import async_log_execution_time

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    """NaN and Infinity are not JSON, whatever Python's parser allows."""
    raise ValueError(f"Invalid JSON constant: {name}")


class UpstreamClient:
    """Sends GraphQL operations and file uploads to the upstream API."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.upstream_timeout_seconds),
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Authorization": self.settings.monday_api_key}
        if self.settings.api_version:
            headers["API-Version"] = self.settings.api_version
        return headers

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.post(url, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamTransportError(f"POST {url} failed: {e!r}") from e

    @staticmethod
    def _parse(response: httpx.Response) -> Any:
        try:
            return json.loads(response.content, parse_constant=_reject_constant)
        except ValueError as e:
            raise UpstreamResponseError(
                f"Invalid JSON response (status {response.status_code}): {response.text[:200]!r}",
                status_code=response.status_code,
                body=response.text,
            ) from e

    @async_log_execution_time
    async def execute(self, operation: GraphQLOperation) -> Any:
        """POST a GraphQL operation to ``/v2`` and return the parsed JSON."""
        response = await self._post(
            self.settings.graphql_url,
            json=operation.to_payload(),
            headers=self._headers(),
        )
        return self._parse(response)

    @async_log_execution_time
    async def upload_file(
        self,
        operation: GraphQLOperation,
        filename: str,
        content: bytes,
    ) -> Any:
        """POST a multipart GraphQL upload to ``/v2/file`` and return the parsed JSON."""
        encoded = encode_graphql_upload(
            query=operation.query,
            variables=operation.variables,
            filename=filename,
            content=content,
        )
        headers = self._headers()
        headers["Content-Type"] = encoded.content_type
        headers["Content-Length"] = str(encoded.content_length)

        logger.info(f"Uploading '{filename}' ({len(content)} bytes) to {self.settings.file_upload_url}")
        response = await self._post(
            self.settings.file_upload_url,
            content=encoded.body,
            headers=headers,
        )
        return self._parse(response)

    async def aclose(self) -> None:
        await self._client.aclose()
