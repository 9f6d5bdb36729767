from functools import partial

import httpx
from loguru import logger

from gqlclient.domain.interfaces import IContentTypeResolver, IRequestEncoder
from gqlclient.domain.request import Request
from gqlclient.infrastructure.content_types import guess_content_type
from gqlclient.infrastructure.json_encoder import build_json_request
from gqlclient.infrastructure.multipart_encoder import build_multipart_request


def select_encoder(
    request: Request,
    content_type_resolver: IContentTypeResolver = guess_content_type,
) -> IRequestEncoder:
    """Multipart when the request carries files, JSON otherwise."""
    if request.has_files:
        return partial(build_multipart_request, content_type_resolver=content_type_resolver)
    return build_json_request


def build_http_request(
    endpoint: str,
    request: Request,
    content_type_resolver: IContentTypeResolver = guess_content_type,
) -> httpx.Request:
    """Encode ``request`` into the HTTP request to send to ``endpoint``."""
    encoder = select_encoder(request, content_type_resolver)
    logger.debug(
        f"[GraphQL] encoding request as "
        f"{'multipart' if request.has_files else 'json'} ({len(request.files)} file(s))"
    )
    return encoder(endpoint, request)
