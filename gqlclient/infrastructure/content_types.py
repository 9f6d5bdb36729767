"""File-name based content-type lookup for multipart file parts.

A plain table instead of the process-wide ``mimetypes`` registry, so the
result does not depend on the host's ``mime.types`` files.
"""

from collections.abc import Mapping
from pathlib import PurePath

from gqlclient.domain.interfaces import IContentTypeResolver

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: Mapping[str, str] = {
    ".avif": "image/avif",
    ".bmp": "image/bmp",
    ".css": "text/css; charset=utf-8",
    ".csv": "text/csv; charset=utf-8",
    ".gif": "image/gif",
    ".gz": "application/gzip",
    ".htm": "text/html; charset=utf-8",
    ".html": "text/html; charset=utf-8",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".js": "text/javascript; charset=utf-8",
    ".json": "application/json",
    ".md": "text/markdown; charset=utf-8",
    ".mjs": "text/javascript; charset=utf-8",
    ".mp3": "audio/mpeg",
    ".mp4": "video/mp4",
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".tar": "application/x-tar",
    ".txt": "text/plain; charset=utf-8",
    ".wasm": "application/wasm",
    ".webm": "video/webm",
    ".webp": "image/webp",
    ".xml": "text/xml; charset=utf-8",
    ".zip": "application/zip",
}


def guess_content_type(file_name: str) -> str:
    """Return the content type for ``file_name``'s extension.

    Falls back to ``application/octet-stream`` for unknown or missing
    extensions. The lookup is case-insensitive.
    """
    suffix = PurePath(file_name).suffix.lower()
    return CONTENT_TYPES.get(suffix, DEFAULT_CONTENT_TYPE)


def make_content_type_resolver(
    overrides: Mapping[str, str], fallback: str = DEFAULT_CONTENT_TYPE
) -> IContentTypeResolver:
    """Build a resolver that checks ``overrides`` before the default table.

    Keys are extensions with their leading dot, e.g. ``".heic"``.
    """
    table = {**CONTENT_TYPES, **{ext.lower(): ct for ext, ct in overrides.items()}}

    def resolve(file_name: str) -> str:
        return table.get(PurePath(file_name).suffix.lower(), fallback)

    return resolve
