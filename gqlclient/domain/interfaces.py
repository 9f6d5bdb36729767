from typing import Protocol

import httpx

from .request import Request


class IContentTypeResolver(Protocol):
    def __call__(self, file_name: str) -> str:
        """Return the MIME type to send for a file with this name."""
        ...


class IRequestEncoder(Protocol):
    def __call__(self, endpoint: str, request: Request) -> httpx.Request: ...
