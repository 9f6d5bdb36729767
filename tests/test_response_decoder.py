"""Tests for decoding GraphQL response envelopes."""

import io
from dataclasses import dataclass

import pytest
from pydantic import BaseModel, Field

from gqlclient.domain.errors import DecodingError, GraphQLError
from gqlclient.infrastructure.response_decoder import decode_response

SCALARS_BODY = """
  {
    "data": {
      "string": "string",
      "int": 1,
      "float": 1.1,
      "bool": true
    }
  }
"""

ERRORS_BODY = """
  {
    "errors": [
      {"message": "User not found."},
      {"message": "Permission denied.", "path": ["user", 0], "extensions": {"code": "FORBIDDEN"}}
    ]
  }
"""


class Scalars(BaseModel):
    text: str = Field(default="", alias="string")
    integer: int = Field(default=0, alias="int")
    number: float = Field(default=0.0, alias="float")
    flag: bool = Field(default=False, alias="bool")


class User(BaseModel):
    id: str
    name: str


class UserData(BaseModel):
    user: User | None = None


class Owner(BaseModel):
    login: str
    email: str | None = None


class Profile(BaseModel):
    owner: Owner


class Settings(BaseModel):
    options: dict[str, str] = Field(default_factory=dict)


@dataclass
class Point:
    x: int
    y: int


# ---------------------------------------------------------------------------
# Data binding
# ---------------------------------------------------------------------------


def test_decode_binds_scalars_into_model_instance() -> None:
    """Scalar values are bound in place into the caller's model."""
    target = Scalars()

    result = decode_response(SCALARS_BODY, target)

    assert result.data is target
    assert target.text == "string"
    assert target.integer == 1
    assert target.number == 1.1
    assert target.flag is True
    assert result.errors == []


def test_decode_into_model_class_returns_new_instance() -> None:
    result = decode_response(SCALARS_BODY.encode(), Scalars)

    assert isinstance(result.data, Scalars)
    assert result.data.text == "string"


def test_decode_keeps_missing_fields_and_ignores_unknown_keys() -> None:
    target = Scalars.model_validate({"string": "old", "int": 5})

    decode_response('{"data": {"string": "new", "unknown": [1, 2]}}', target)

    assert target.text == "new"
    assert target.integer == 5
    assert not hasattr(target, "unknown")


def test_decode_nested_model() -> None:
    target = UserData()

    decode_response('{"data": {"user": {"id": "1", "name": "Ada"}}}', target)

    assert target.user == User(id="1", name="Ada")


def test_decode_nested_model_keeps_fields_missing_from_response() -> None:
    """A partial nested object only overwrites the keys it carries."""
    target = UserData(user=User(id="1", name="Ada"))

    decode_response('{"data": {"user": {"id": "2"}}}', target)

    assert target.user == User(id="2", name="Ada")


def test_decode_nested_optional_field_keeps_prior_value() -> None:
    target = Profile(owner=Owner(login="ada", email="ada@example.com"))

    decode_response('{"data": {"owner": {"login": "lovelace"}}}', target)

    assert target.owner.login == "lovelace"
    assert target.owner.email == "ada@example.com"


def test_decode_into_dict_field_merges_keys() -> None:
    target = Settings(options={"theme": "dark", "lang": "en"})

    decode_response('{"data": {"options": {"lang": "de"}}}', target)

    assert target.options == {"theme": "dark", "lang": "de"}


def test_decode_into_dict_updates_in_place() -> None:
    target: dict = {"kept": True}

    decode_response('{"data": {"me": {"id": "1"}}}', target)

    assert target == {"kept": True, "me": {"id": "1"}}


def test_decode_into_dataclass_type() -> None:
    result = decode_response('{"data": {"x": 1, "y": 2}}', Point)

    assert result.data == Point(x=1, y=2)


def test_decode_without_target_returns_raw_data() -> None:
    result = decode_response('{"data": {"a": [1, 2]}}')

    assert result.data == {"a": [1, 2]}


def test_decode_reads_stream_body() -> None:
    result = decode_response(io.BytesIO(b'{"data": {"ok": true}}'))

    assert result.data == {"ok": True}


def test_decode_null_data_leaves_target_untouched() -> None:
    target = Scalars.model_validate({"string": "prior"})

    result = decode_response('{"data": null, "errors": [{"message": "boom"}]}', target)

    assert target.text == "prior"
    assert result.data is target
    assert result.errors[0].message == "boom"


def test_decode_null_data_into_type_is_none() -> None:
    result = decode_response('{"data": null}', Scalars)

    assert result.data is None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_decode_errors_preserves_order() -> None:
    """Two error records come back in server order, without raising."""
    result = decode_response(ERRORS_BODY, {})

    assert len(result.errors) == 2
    assert result.errors[0].message == "User not found."
    assert result.errors[1].message == "Permission denied."
    assert result.errors[1].path == ["user", 0]
    assert result.errors[1].extensions == {"code": "FORBIDDEN"}
    assert result.has_errors


def test_decode_keeps_unknown_error_fields() -> None:
    result = decode_response('{"errors": [{"message": "x", "locations": [{"line": 1, "column": 2}], "hint": "retry"}]}')

    error = result.errors[0]
    assert error.locations == [{"line": 1, "column": 2}]
    assert error.model_extra == {"hint": "retry"}


@pytest.mark.parametrize(
    "record",
    [
        '{"message": "boom", "extensions": "INTERNAL"}',
        '{"message": "boom", "locations": [{"line": 3}]}',
        '{"message": "boom", "path": "user.name"}',
    ],
)
def test_decode_tolerates_malformed_error_details(record: str) -> None:
    """Odd path/locations/extensions values never break decoding of data or message."""
    result = decode_response('{"data": {"a": 1}, "errors": [%s]}' % record)

    assert result.data == {"a": 1}
    assert result.errors[0].message == "boom"


def test_raise_for_errors() -> None:
    result = decode_response(ERRORS_BODY)

    with pytest.raises(GraphQLError, match="graphql: User not found.") as exc_info:
        result.raise_for_errors()

    assert [e.message for e in exc_info.value.errors] == ["User not found.", "Permission denied."]


def test_raise_for_errors_is_noop_without_errors() -> None:
    result = decode_response('{"data": {}}')

    result.raise_for_errors()
    assert not result.has_errors


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("body", ["not json", "", "[1, 2]", '{"errors": [{"path": ["a"]}]}'])
def test_decode_invalid_envelope_raises(body: str) -> None:
    with pytest.raises(DecodingError):
        decode_response(body)


def test_decode_type_mismatch_raises() -> None:
    target = Scalars()

    with pytest.raises(DecodingError):
        decode_response('{"data": {"int": "not a number"}}', target)

    assert target.integer == 0


def test_decode_non_object_data_into_model_raises() -> None:
    with pytest.raises(DecodingError):
        decode_response('{"data": [1, 2]}', Scalars())


def test_decode_non_object_data_into_dict_raises() -> None:
    with pytest.raises(DecodingError):
        decode_response('{"data": "text"}', {})
