import threading
from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx
from loguru import logger

from gqlclient.application.encoding import build_http_request
from gqlclient.domain.errors import (
    ConfigurationError,
    RequestCancelledError,
    TransportError,
)
from gqlclient.domain.interfaces import IContentTypeResolver
from gqlclient.domain.request import Request
from gqlclient.domain.response import GraphQLResponse
from gqlclient.infrastructure.content_types import guess_content_type
from gqlclient.infrastructure.response_decoder import decode_response
from gqlclient.shared.decorators import log_errors

NO_COOKIE_STORE = "cookie operation requested on a client with no cookie store configured"


class GraphQLClient:
    """Sends :class:`Request` objects to a GraphQL endpoint over httpx.

    Requests with file attachments go out as multipart/form-data, everything
    else as JSON. The ``errors`` of a response are returned, never raised;
    call :meth:`GraphQLResponse.raise_for_errors` to treat them as fatal.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        http_client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
        headers: Mapping[str, str] | None = None,
        use_cookies: bool = False,
        timeout: float = 30.0,
        content_type_resolver: IContentTypeResolver = guess_content_type,
    ) -> None:
        if http_client is not None and transport is not None:
            raise ConfigurationError("pass either http_client or transport, not both")
        self._endpoint = endpoint
        self._owns_http_client = http_client is None
        self._http = http_client if http_client is not None else httpx.Client(transport=transport)
        self._headers = dict(headers or {})
        self._cookies: httpx.Cookies | None = httpx.Cookies() if use_cookies else None
        self._timeout = httpx.Timeout(timeout)
        self._content_type_resolver = content_type_resolver

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def cookies(self) -> httpx.Cookies:
        if self._cookies is None:
            raise ConfigurationError(NO_COOKIE_STORE)
        return self._cookies

    # ------------------------------------------------------------------
    # Cookies
    # ------------------------------------------------------------------

    def add_cookie(self, name: str, value: str) -> None:
        """Store a cookie that is sent with every following request."""
        self.cookies.set(name, value)

    def clear_cookies(self) -> None:
        """Reset the cookie store to empty."""
        if self._cookies is None:
            raise ConfigurationError(NO_COOKIE_STORE)
        self._cookies = httpx.Cookies()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    @log_errors
    def run(
        self,
        request: Request,
        target: Any = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> GraphQLResponse:
        """Send ``request`` and decode the response into ``target``.

        ``target`` is anything :func:`decode_response` accepts: ``None``, a
        pydantic model or dict instance to fill in place, or a type.

        Raises:
            RequestCancelledError: if ``cancel_event`` is set before sending.
            EncodingError: if the request cannot be encoded.
            TransportError: on network errors or non-2xx responses.
            DecodingError: if the body is not a valid GraphQL response.
        """
        self._check_cancelled(cancel_event)

        http_request = build_http_request(
            self._endpoint, request, self._content_type_resolver
        )
        request_keys = {key.lower() for key in request.headers}
        for key, value in self._headers.items():
            # Defaults replace the built-in Accept but never the request's own headers.
            if key.lower() in request_keys or key.lower() == "content-type":
                continue
            http_request.headers[key] = value
        http_request.extensions["timeout"] = self._timeout.as_dict()
        if self._cookies is not None:
            self._cookies.set_cookie_header(http_request)

        self._check_cancelled(cancel_event)

        try:
            response = self._http.send(http_request)
        except httpx.HTTPError as exc:
            raise TransportError(f"Error sending graphql request: {exc}") from exc

        logger.debug(f"[GraphQL] POST {self._endpoint} -> {response.status_code}")

        if self._cookies is not None:
            self._cookies.extract_cookies(response)

        if not response.is_success:
            raise TransportError(
                f"GraphQL endpoint error {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        return decode_response(response.content, target)

    @staticmethod
    def _check_cancelled(cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelledError("graphql request cancelled before it was sent")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_http_client:
            self._http.close()

    def __enter__(self) -> "GraphQLClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
