from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .response import GraphQLErrorRecord


class GraphQLClientError(Exception):
    """Base class for every error raised by the client."""


class EncodingError(GraphQLClientError):
    """Raised when a request cannot be turned into a wire body."""


class DecodingError(GraphQLClientError):
    """Raised when a response body is not valid JSON or does not fit the target."""


class TransportError(GraphQLClientError):
    """Raised on network failures and non-2xx HTTP responses."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RequestCancelledError(TransportError):
    """Raised when the caller cancelled the request before it was sent."""


class ConfigurationError(GraphQLClientError):
    """Raised when the client is missing configuration an operation needs."""


class GraphQLError(GraphQLClientError):
    """Raised when the server answered with a non-empty ``errors`` list."""

    def __init__(self, errors: "list[GraphQLErrorRecord]") -> None:
        self.errors = errors
        first = errors[0].message if errors else "unknown error"
        super().__init__(f"graphql: {first}")
