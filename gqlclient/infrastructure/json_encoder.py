from typing import Any

import httpx
from pydantic_core import PydanticSerializationError, to_json

from gqlclient.domain.errors import EncodingError
from gqlclient.domain.request import Request

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
DEFAULT_ACCEPT = "application/json"


def operation_payload(query: str, variables: dict[str, Any]) -> dict[str, Any]:
    """The ``{query, variables}`` object shared by both wire encodings."""
    return {"query": query, "variables": variables}


def to_json_bytes(value: Any, what: str) -> bytes:
    """Serialise ``value`` to compact JSON, raising :class:`EncodingError` on failure."""
    try:
        return to_json(value)
    except (PydanticSerializationError, ValueError, TypeError) as exc:
        raise EncodingError(f"Error marshaling the {what} to json: {exc}") from exc


def encode_json_body(request: Request, variables: dict[str, Any] | None = None) -> bytes:
    """Return ``{"query": ..., "variables": {...}}`` as JSON bytes.

    ``variables`` overrides the request's own mapping; the multipart encoder
    passes its placeholder-substituted copy here.
    """
    if variables is None:
        variables = request.variables
    return to_json_bytes(operation_payload(request.query, variables), "graphql request")


def build_headers(request: Request, content_type: str) -> httpx.Headers:
    """Default headers followed by the request's custom ones.

    A custom ``Accept`` replaces the default; ``Content-Type`` always comes
    from the encoder.
    """
    custom = {key.lower() for key in request.headers}
    pairs: list[tuple[str, str]] = [("Content-Type", content_type)]
    if "accept" not in custom:
        pairs.append(("Accept", DEFAULT_ACCEPT))
    for key, values in request.headers.items():
        if key.lower() == "content-type":
            continue
        pairs.extend((key, value) for value in values)
    return httpx.Headers(pairs)


def build_json_request(endpoint: str, request: Request) -> httpx.Request:
    """Encode ``request`` as an ``application/json`` POST to ``endpoint``."""
    body = encode_json_body(request)
    return httpx.Request(
        "POST",
        endpoint,
        content=body,
        headers=build_headers(request, JSON_CONTENT_TYPE),
    )
