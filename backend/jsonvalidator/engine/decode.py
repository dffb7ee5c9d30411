"""Decoding helpers — parse the raw payload and re-nest embedded records.

Embedded fields read their keys from the enclosing JSON object, while the
target model expects them under the embedded field's own key. Before the
final decode the payload is rewritten so each embedded field receives a
copy of its enclosing object.
"""

import json
from functools import lru_cache
from typing import Any, Union, get_args

from pydantic import BaseModel

from jsonvalidator.engine.introspection import (
    element_type_of,
    ensure_complete,
    is_record_type,
    kind_of,
    normalize_type,
    strip_annotated,
)
from jsonvalidator.errors import MalformedJsonError
from jsonvalidator.markers import is_embedded, json_key_of
from jsonvalidator.models.schema import FieldKind

Payload = Union[str, bytes, bytearray]


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not valid JSON")


def parse_object(data: Payload) -> dict:
    """Parse `data` and require a top-level JSON object."""
    if not isinstance(data, (str, bytes, bytearray)):
        raise TypeError(f"Payload must be str or bytes, got {type(data).__name__}")

    try:
        payload = json.loads(data, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise MalformedJsonError(f"invalid json cannot be parsed: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedJsonError(f"payload must be a JSON object, got {type(payload).__name__}")
    return payload


# ── Embedded records ──

def _models_in(tp: Any) -> list[type[BaseModel]]:
    tp = strip_annotated(tp)
    if is_record_type(tp):
        return [tp]
    models = []
    for arg in get_args(tp):
        models.extend(_models_in(arg))
    return models


@lru_cache(maxsize=256)
def uses_embedding(model: type[BaseModel]) -> bool:
    """True if `model` or any model reachable from it has an embedded field."""
    pending = [model]
    seen: set[type[BaseModel]] = set()
    while pending:
        current = pending.pop()
        if current in seen:
            continue
        seen.add(current)
        ensure_complete(current)
        for info in current.model_fields.values():
            if is_embedded(info):
                return True
            pending.extend(_models_in(info.annotation))
    return False


def nest_embedded(model: type[BaseModel], obj: dict) -> dict:
    """Copy of `obj` with every embedded field filled from its enclosing object."""
    nested = dict(obj)
    for name, info in model.model_fields.items():
        key = json_key_of(name, info)
        field_type = normalize_type(info.annotation)
        if is_embedded(info):
            nested[key] = nest_embedded(field_type, obj)
        elif key in obj:
            nested[key] = _nest_value(field_type, obj[key])
    return nested


def _nest_value(tp: Any, value: Any) -> Any:
    kind = kind_of(tp)
    if kind is FieldKind.RECORD and isinstance(value, dict):
        return nest_embedded(tp, value)

    if kind is FieldKind.LIST and isinstance(value, list):
        element_type = normalize_type(element_type_of(tp, kind))
        return [_nest_value(element_type, item) for item in value]

    if kind is FieldKind.MAP and isinstance(value, dict):
        element_type = normalize_type(element_type_of(tp, kind))
        return {key: _nest_value(element_type, item) for key, item in value.items()}

    return value
