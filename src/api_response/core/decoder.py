"""
Response decoding.

Two entry points share one structural decoder (pydantic):

- parse_body builds a new value of a target type.
- parse_body_into updates the fields of an existing model instance, so
  every holder of that instance sees the refreshed server state.
"""

from __future__ import annotations

import collections.abc
import typing
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import AliasChoices, BaseModel, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo
from pydantic_core import to_json, to_jsonable_python

from api_response.core.body import get_body_as_string
from api_response.core.context import decode_context
from api_response.core.errors import ResponseDecodeError
from api_response.http.connector import ConnectorResponse
from api_response.utils.logging import get_logger

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

HTTP_NO_CONTENT = 204

_LIST_KINDS = (list, collections.abc.Sequence, collections.abc.MutableSequence)

log = get_logger("api_response.decoder")


@lru_cache(maxsize=256)
def _adapter(type_: Any) -> TypeAdapter:
    return TypeAdapter(type_)


_JSON_OBJECT: TypeAdapter[Dict[str, Any]] = TypeAdapter(Dict[str, Any])


def _empty_sequence_for(type_: Any) -> Optional[Any]:
    """Return an empty value for sequence types, None for anything else."""
    origin = typing.get_origin(type_) or type_
    if origin is tuple:
        return ()
    if origin in _LIST_KINDS:
        return []
    return None


def parse_body(connector_response: ConnectorResponse, type_: Type[T]) -> Optional[T]:
    """
    Decode a response body into a new instance of ``type_``.

    A 204 response is never read: sequence targets get an empty sequence,
    everything else gets None.

    Args:
        connector_response: Transport response to decode.
        type_: Target type; anything pydantic can validate.

    Returns:
        The decoded value, or the no-content result.

    Raises:
        ResponseDecodeError: the body is not valid JSON for ``type_``.
        OSError: the body could not be read.
    """
    if connector_response.status_code == HTTP_NO_CONTENT:
        return _empty_sequence_for(type_)

    data = get_body_as_string(connector_response)
    try:
        return _adapter(type_).validate_json(data, context=decode_context(connector_response))
    except ValidationError as e:
        raise _decode_failure(data, e) from e


def parse_body_into(connector_response: ConnectorResponse, instance: M) -> M:
    """
    Decode a response body onto an existing model instance and return it.

    Only fields present in the body are assigned; the rest keep their values.
    The merged state is validated in JSON mode, the same way parse_body
    validates a new value. There is no no-content handling here, callers use
    this when a body is expected.

    Raises:
        ResponseDecodeError: the body is not a JSON object valid for the model.
        OSError: the body could not be read.
        TypeError: ``instance`` is not a pydantic model.
    """
    if not isinstance(instance, BaseModel):
        raise TypeError(f"cannot merge a response body into {type(instance).__name__}")

    data = get_body_as_string(connector_response)
    model = type(instance)
    try:
        incoming = _JSON_OBJECT.validate_json(data)
        payload, supplied = _merge_payload(instance, incoming)
        updated = model.model_validate_json(to_json(payload), context=decode_context(connector_response))
    except ValidationError as e:
        raise _decode_failure(data, e) from e

    for name in supplied:
        instance.__dict__[name] = getattr(updated, name)
        instance.__pydantic_fields_set__.add(name)

    # only set when the model allows extra fields
    if updated.__pydantic_extra__ and instance.__pydantic_extra__ is not None:
        instance.__pydantic_extra__.update(
            (k, v) for k, v in updated.__pydantic_extra__.items() if k in incoming
        )
    return instance


def _accepted_keys(name: str, field: FieldInfo, by_name: bool) -> List[str]:
    """Input keys pydantic reads a field from, preferred key first."""
    keys: List[str] = []
    alias = field.validation_alias
    if isinstance(alias, str):
        keys.append(alias)
    elif isinstance(alias, AliasChoices):
        keys.extend(choice for choice in alias.choices if isinstance(choice, str))
    elif field.alias:
        keys.append(field.alias)
    if by_name or not keys:
        keys.append(name)
    return keys


def _merge_payload(instance: BaseModel, incoming: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Build the JSON payload for the merged state.

    Returns the payload and the names of the fields the body supplies.
    Current values of supplied fields are left out so they cannot shadow an
    incoming alias.
    """
    model = type(instance)
    config = model.model_config
    by_name = bool(config.get("populate_by_name") or config.get("validate_by_name"))
    dumped = instance.model_dump(mode="json", by_alias=True, round_trip=True)

    payload: Dict[str, Any] = {}
    supplied: List[str] = []
    for name, field in model.model_fields.items():
        keys = _accepted_keys(name, field, by_name)
        if any(key in incoming for key in keys):
            supplied.append(name)
            continue
        dump_key = field.serialization_alias or name
        if dump_key in dumped:
            payload[keys[0]] = dumped[dump_key]
        else:
            # fields marked exclude=True are missing from the dump
            payload[keys[0]] = to_jsonable_python(getattr(instance, name), by_alias=True)

    for key in instance.__pydantic_extra__ or {}:
        if key in dumped:
            payload[key] = dumped[key]
    payload.update(incoming)
    return payload, supplied


def _decode_failure(data: str, error: ValidationError) -> ResponseDecodeError:
    log.debug("Failed to deserialize: %s", data)
    return ResponseDecodeError(f"Failed to deserialize response body: {error}", body=data, cause=error)
