from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import GraphQLError


class GraphQLErrorRecord(BaseModel):
    """One entry of a response's ``errors`` list.

    Only ``message`` is validated. ``path``, ``locations`` and ``extensions``
    are kept as the server sent them, and any other keys become extra
    attributes.
    """

    model_config = ConfigDict(extra="allow")

    message: str
    path: Any = None
    locations: Any = None
    extensions: Any = None


class GraphQLResponse(BaseModel):
    """The ``{data, errors}`` envelope of a decoded response."""

    data: Any = None
    errors: list[GraphQLErrorRecord] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def raise_for_errors(self) -> None:
        """Raise :class:`GraphQLError` when the server reported any errors."""
        if self.errors:
            raise GraphQLError(self.errors)
