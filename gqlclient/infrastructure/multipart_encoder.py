"""Encoder for the GraphQL multipart request convention.

The body carries three kinds of form-data parts, in this order::

    operations  {"query": ..., "variables": {"file": null}}
    map         {"0": ["variables.file"]}
    0           <bytes of the first attached file>
    1           ...

Every file variable is replaced by a ``null`` placeholder (or a list of them
for array uploads) which the server fills from the indexed file parts.
"""

import re
import secrets
from typing import Any

import httpx
from loguru import logger

from gqlclient.domain.errors import EncodingError
from gqlclient.domain.interfaces import IContentTypeResolver
from gqlclient.domain.request import FileUpload, Request
from gqlclient.infrastructure.content_types import guess_content_type
from gqlclient.infrastructure.json_encoder import (
    build_headers,
    encode_json_body,
    to_json_bytes,
)

BOUNDARY_BYTES = 16

# RFC 2046 boundary characters, minus space so the header never needs quoting.
BOUNDARY_PATTERN = re.compile(r"[0-9A-Za-z'()+_,\-./:=?]{1,70}")


def placeholder_variables(request: Request) -> dict[str, Any]:
    """Return a copy of the request variables with file placeholders filled in.

    A field with one file becomes ``None``; a field with N files becomes a
    list of N ``None``. The request's own mapping is left untouched.
    """
    variables = dict(request.variables)
    for field_name, uploads in request.files_by_field().items():
        if len(uploads) > 1:
            variables[field_name] = [None] * len(uploads)
        else:
            variables[field_name] = None
    return variables


def build_file_map(request: Request) -> dict[str, list[str]]:
    """Map each file's global index to the variable path it fills.

    Indexes follow attachment order across all fields, not field grouping.
    """
    counts = {field: len(uploads) for field, uploads in request.files_by_field().items()}
    positions: dict[str, int] = {}
    file_map: dict[str, list[str]] = {}

    for index, upload in enumerate(request.files):
        field = upload.field_name
        if counts[field] > 1:
            position = positions.get(field, 0)
            positions[field] = position + 1
            path = f"variables.{field}.{position}"
        else:
            path = f"variables.{field}"
        file_map[str(index)] = [path]

    return file_map


def read_source(upload: FileUpload) -> bytes:
    """Read an attachment's full content."""
    source = upload.source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)

    read = getattr(source, "read", None)
    if read is None:
        raise EncodingError(
            f"Error reading file {upload.file_name}: "
            f"{type(source).__name__} is neither bytes nor readable"
        )

    try:
        content = read()
    except OSError as exc:
        raise EncodingError(f"Error reading file {upload.file_name}: {exc}") from exc

    if isinstance(content, str):
        return content.encode("utf-8")
    if not isinstance(content, (bytes, bytearray)):
        raise EncodingError(
            f"Error reading file {upload.file_name}: read() returned {type(content).__name__}"
        )
    return bytes(content)


def _new_boundary(parts: list[bytes]) -> str:
    while True:
        boundary = secrets.token_hex(BOUNDARY_BYTES)
        if not any(boundary.encode("ascii") in part for part in parts):
            return boundary


def build_multipart_request(
    endpoint: str,
    request: Request,
    *,
    content_type_resolver: IContentTypeResolver = guess_content_type,
    boundary: str | None = None,
) -> httpx.Request:
    """Encode ``request`` as a ``multipart/form-data`` POST to ``endpoint``.

    Raises:
        EncodingError: if a file cannot be read, JSON serialisation fails, or
            an explicit ``boundary`` is not a valid RFC 2046 boundary or
            occurs inside the encoded content.
    """
    operations = encode_json_body(request, placeholder_variables(request))
    file_map = to_json_bytes(build_file_map(request), "file map")
    contents = [read_source(upload) for upload in request.files]

    parts = [operations, file_map, *contents]
    if boundary is None:
        boundary = _new_boundary(parts)
    elif not BOUNDARY_PATTERN.fullmatch(boundary):
        raise EncodingError(f"Invalid multipart boundary {boundary!r}")
    elif any(boundary.encode("ascii") in part for part in parts):
        raise EncodingError(f"Multipart boundary {boundary!r} occurs in the request content")

    # Parts without a filename render as plain form fields.
    files: list[tuple[str, tuple[Any, ...]]] = [
        ("operations", (None, operations)),
        ("map", (None, file_map)),
    ]
    for index, (upload, content) in enumerate(zip(request.files, contents)):
        content_type = content_type_resolver(upload.file_name)
        files.append((str(index), (upload.file_name, content, content_type)))

    logger.debug(
        f"[GraphQL] multipart body with {len(contents)} file part(s), "
        f"map={file_map.decode()}"
    )

    return httpx.Request(
        "POST",
        endpoint,
        files=files,
        headers=build_headers(request, f"multipart/form-data; boundary={boundary}"),
    )
