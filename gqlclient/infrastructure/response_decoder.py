from typing import Any

from pydantic import BaseModel, PydanticUserError, TypeAdapter, ValidationError

from gqlclient.domain.errors import DecodingError
from gqlclient.domain.response import GraphQLErrorRecord, GraphQLResponse


class _Envelope(BaseModel):
    data: Any = None
    errors: list[GraphQLErrorRecord] | None = None


def _read_body(body: Any) -> bytes | str:
    if isinstance(body, (bytes, str)):
        return body
    if isinstance(body, (bytearray, memoryview)):
        return bytes(body)
    try:
        return body.read()
    except OSError as exc:
        raise DecodingError(f"Error reading graphql response body: {exc}") from exc


def _current_values(model: BaseModel) -> dict[str, Any]:
    return {
        (field.alias or name): getattr(model, name)
        for name, field in type(model).model_fields.items()
    }


def _merge(current: Any, incoming: Any) -> Any:
    """Overlay ``incoming`` JSON on ``current``, recursing into models and dicts."""
    if isinstance(incoming, dict):
        if isinstance(current, BaseModel):
            merged = _current_values(current)
        elif isinstance(current, dict):
            merged = dict(current)
        else:
            return incoming
        for key, value in incoming.items():
            merged[key] = _merge(merged.get(key), value)
        return merged
    return incoming


def _bind_model(data: Any, target: BaseModel) -> BaseModel:
    """Validate ``data`` over ``target``'s current values and copy the result in.

    Keys are matched by field alias at every nesting level; unknown keys are
    ignored and fields the response leaves out keep their current value.
    """
    if not isinstance(data, dict):
        raise DecodingError(
            f"Cannot bind {type(data).__name__} data into {type(target).__name__}"
        )

    fields = type(target).model_fields
    by_alias = {(field.alias or name): name for name, field in fields.items()}
    known = {key: value for key, value in data.items() if key in by_alias}
    if not known:
        return target

    try:
        bound = type(target).model_validate(_merge(target, known))
    except ValidationError as exc:
        raise DecodingError(f"Error decoding graphql response data: {exc}") from exc

    try:
        for alias in known:
            name = by_alias[alias]
            setattr(target, name, getattr(bound, name))
    except ValidationError as exc:
        raise DecodingError(f"Cannot bind response data into {type(target).__name__}: {exc}") from exc
    return target


def bind_data(data: Any, target: Any) -> Any:
    """Bind decoded ``data`` into ``target`` and return the bound value.

    ``target`` may be ``None`` (raw value), a pydantic model or ``dict``
    instance (updated in place), or a type validated with a ``TypeAdapter``.
    """
    if target is None:
        return data

    if isinstance(target, BaseModel):
        return target if data is None else _bind_model(data, target)

    if isinstance(target, dict):
        if data is None:
            return target
        if not isinstance(data, dict):
            raise DecodingError(f"Cannot bind {type(data).__name__} data into a dict")
        target.update(data)
        return target

    if data is None:
        return None

    try:
        adapter = TypeAdapter(target)
    except PydanticUserError as exc:
        raise DecodingError(f"Unsupported response target {target!r}: {exc}") from exc

    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        raise DecodingError(f"Error decoding graphql response data: {exc}") from exc


def decode_response(body: Any, target: Any = None) -> GraphQLResponse:
    """Decode a ``{data, errors}`` response body.

    A non-empty ``errors`` list is returned, not raised; callers decide
    whether to call :meth:`GraphQLResponse.raise_for_errors`.

    Raises:
        DecodingError: if the body is not a JSON object, an error record has
            no ``message``, or ``data`` does not fit ``target``.
    """
    raw = _read_body(body)
    try:
        envelope = _Envelope.model_validate_json(raw)
    except ValidationError as exc:
        raise DecodingError(f"Error decoding graphql response body: {exc}") from exc

    return GraphQLResponse(
        data=bind_data(envelope.data, target),
        errors=envelope.errors or [],
    )
