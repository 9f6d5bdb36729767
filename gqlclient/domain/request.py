from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FileUpload(BaseModel):
    """A single file attached to a request.

    ``source`` is either raw bytes or a readable binary object. It is read
    once, during multipart encoding.
    """

    model_config = ConfigDict(frozen=True)

    field_name: str
    file_name: str
    source: Any


class Request(BaseModel):
    """A GraphQL operation with its variables, file attachments and headers.

    Build it once, mutate it with :meth:`var`, :meth:`header` and :meth:`file`,
    then hand it to a client. Encoders never write back into ``variables``.
    """

    query: str
    variables: dict[str, Any] = Field(default_factory=dict)
    files: list[FileUpload] = Field(default_factory=list)
    headers: dict[str, list[str]] = Field(default_factory=dict)

    def __init__(self, query: str, **data: Any) -> None:
        super().__init__(query=query, **data)

    def var(self, name: str, value: Any) -> None:
        """Set variable ``name``; a later call with the same name wins."""
        self.variables[name] = value

    def header(self, key: str, value: str | list[str]) -> None:
        """Replace every value of header ``key`` (matched case-insensitively)."""
        for existing in list(self.headers):
            if existing.lower() == key.lower():
                del self.headers[existing]
        self.headers[key] = [value] if isinstance(value, str) else list(value)

    def file(self, field_name: str, file_name: str, source: Any) -> None:
        """Attach a file to variable ``field_name``.

        Attaching several files to the same field turns that variable into a
        list upload. Attachment order decides the multipart part indexes.
        """
        self.files.append(
            FileUpload(field_name=field_name, file_name=file_name, source=source)
        )

    @property
    def has_files(self) -> bool:
        return bool(self.files)

    def files_by_field(self) -> dict[str, list[FileUpload]]:
        grouped: dict[str, list[FileUpload]] = {}
        for upload in self.files:
            grouped.setdefault(upload.field_name, []).append(upload)
        return grouped
