"""Tests for the file-name content-type lookup."""

import pytest

from gqlclient.infrastructure.content_types import (
    DEFAULT_CONTENT_TYPE,
    guess_content_type,
    make_content_type_resolver,
)


@pytest.mark.parametrize(
    ("file_name", "expected"),
    [
        ("a.txt", "text/plain; charset=utf-8"),
        ("photo.JPG", "image/jpeg"),
        ("archive.tar.gz", "application/gzip"),
        ("dir/report.pdf", "application/pdf"),
        ("README", DEFAULT_CONTENT_TYPE),
        ("data.unknownext", DEFAULT_CONTENT_TYPE),
        (".bashrc", DEFAULT_CONTENT_TYPE),
    ],
)
def test_guess_content_type(file_name: str, expected: str) -> None:
    assert guess_content_type(file_name) == expected


def test_resolver_overrides_take_precedence() -> None:
    resolve = make_content_type_resolver({".TXT": "text/x-custom", ".heic": "image/heic"})

    assert resolve("a.txt") == "text/x-custom"
    assert resolve("b.heic") == "image/heic"
    assert resolve("c.png") == "image/png"


def test_resolver_custom_fallback() -> None:
    resolve = make_content_type_resolver({}, fallback="application/x-binary")

    assert resolve("noext") == "application/x-binary"
