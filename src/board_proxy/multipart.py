"""
Encoder for GraphQL multipart upload requests.

The upstream file endpoint expects a ``multipart/form-data`` body laid out as:

    --boundary  query      the mutation document
    --boundary  variables  JSON variables, with the file slot set to null
    --boundary  map        {"<file field>": ["variables.file"]}
    --boundary  <file>     raw bytes, tagged with the original filename
    --boundary--

The whole body is built in memory so the caller can send an exact
``Content-Length`` instead of chunked transfer encoding.
"""
import json
import secrets
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

CRLF = "\r\n"
BOUNDARY_PREFIX = "----WebKitFormBoundary"
DEFAULT_FILE_FIELD = "fileField"
FILE_VARIABLE_PATH = "variables.file"
FILE_CONTENT_TYPE = "application/octet-stream"
MAX_BOUNDARY_ATTEMPTS = 8


@dataclass(frozen=True)
class EncodedUpload:
    """A fully assembled multipart body and the boundary that frames it."""
    body: bytes
    boundary: str

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    @property
    def content_length(self) -> int:
        return len(self.body)


def generate_boundary() -> str:
    """Return a boundary with 96 bits of randomness from `secrets`."""
    return BOUNDARY_PREFIX + secrets.token_hex(12)


def choose_boundary(parts: Iterable[bytes], attempts: int = MAX_BOUNDARY_ATTEMPTS) -> str:
    """Pick a boundary that does not occur in any of ``parts``."""
    parts = list(parts)
    for _ in range(attempts):
        boundary = generate_boundary()
        needle = boundary.encode("ascii")
        if not any(needle in part for part in parts):
            return boundary
    raise RuntimeError("Could not generate a multipart boundary absent from the payload")


def quote_filename(filename: str) -> str:
    """Make a filename safe to place inside a quoted header parameter."""
    cleaned = filename.replace("\r", "").replace("\n", "")
    return cleaned.replace("\\", "\\\\").replace('"', '\\"')


def _field_part(boundary: str, name: str, value: str) -> str:
    return (
        f"--{boundary}{CRLF}"
        f'Content-Disposition: form-data; name="{name}"{CRLF}{CRLF}'
        f"{value}{CRLF}"
    )


def encode_graphql_upload(
    query: str,
    variables: Optional[Dict[str, Any]],
    filename: str,
    content: bytes,
    file_field: str = DEFAULT_FILE_FIELD,
    boundary: Optional[str] = None,
) -> EncodedUpload:
    """
    Assemble a GraphQL multipart upload body.

    Args:
        query: The mutation document; it must declare a ``$file`` variable.
        variables: Variables for the mutation. ``file`` is forced to ``null``.
        filename: Original name of the uploaded file.
        content: Raw file bytes.
        file_field: Form field name that carries the file.
        boundary: Explicit boundary, mostly for tests. Generated when omitted.

    Returns:
        EncodedUpload: the body plus its boundary.
    """
    variables_json = json.dumps({**(variables or {}), "file": None})
    map_json = json.dumps({file_field: [FILE_VARIABLE_PATH]})

    if boundary is None:
        boundary = choose_boundary(
            [query.encode("utf-8"), variables_json.encode("utf-8"), filename.encode("utf-8"), content]
        )

    head = (
        _field_part(boundary, "query", query)
        + _field_part(boundary, "variables", variables_json)
        + _field_part(boundary, "map", map_json)
        + f"--{boundary}{CRLF}"
        + f'Content-Disposition: form-data; name="{file_field}"; filename="{quote_filename(filename)}"{CRLF}'
        + f"Content-Type: {FILE_CONTENT_TYPE}{CRLF}{CRLF}"
    )
    tail = f"{CRLF}--{boundary}--{CRLF}"

    body = b"".join([head.encode("utf-8"), content, tail.encode("utf-8")])
    return EncodedUpload(body=body, boundary=boundary)
