"""Type introspection — maps Python annotations onto schema node kinds."""

import collections.abc
import types
from typing import Annotated, Any, Optional, Union, get_args, get_origin

from pydantic import BaseModel

from jsonvalidator.models.schema import FieldKind

STRING_TYPES = (str, bytes, bytearray)
LIST_TYPES = (list, tuple, set, frozenset, collections.abc.Sequence, collections.abc.Set)
MAP_TYPES = (dict, collections.abc.Mapping)


def strip_annotated(tp: Any) -> Any:
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def normalize_type(tp: Any) -> Any:
    """Drop `Annotated` and one level of optionality (`Optional[X]`, `X | None`)."""
    tp = strip_annotated(tp)
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = get_args(tp)
        remaining = [arg for arg in args if arg is not type(None)]
        if len(args) == 2 and len(remaining) == 1:
            tp = strip_annotated(remaining[0])
    return tp


def is_record_type(tp: Any) -> bool:
    # Parameterized aliases such as list[X] are not classes
    if get_origin(tp) is not None or not isinstance(tp, type):
        return False
    return issubclass(tp, BaseModel)


def kind_of(tp: Any) -> FieldKind:
    """Structural kind of an already normalized type."""
    if is_record_type(tp):
        return FieldKind.RECORD

    container = get_origin(tp) or tp
    if not isinstance(container, type) or issubclass(container, STRING_TYPES):
        return FieldKind.LEAF
    if issubclass(container, MAP_TYPES):
        return FieldKind.MAP
    if issubclass(container, LIST_TYPES):
        return FieldKind.LIST
    return FieldKind.LEAF


def element_type_of(tp: Any, kind: FieldKind) -> Any:
    """Element type of a LIST or value type of a MAP (`Any` when unparameterized)."""
    args = get_args(tp)
    if kind is FieldKind.MAP:
        return args[1] if len(args) == 2 else Any
    # Heterogeneous tuples are approximated by their first element type
    return args[0] if args else Any


def memo_key(tp: Any) -> Optional[Any]:
    """`tp` itself when usable as a dict key, else None."""
    try:
        hash(tp)
    except TypeError:
        return None
    return tp


def ensure_complete(model: type[BaseModel]) -> None:
    """Resolve pending forward references of a model before reading its fields."""
    if not getattr(model, "__pydantic_complete__", True):
        model.model_rebuild()
