"""Value rules — JSON type checks, lengths, numeric ranges and value sets.

JSON values arrive as the standard decoder produces them:
None, bool, int, float, str, list or dict. `bool` is never a number here.
"""

import json
from typing import Any, Optional

from jsonvalidator.rules.context import FieldContext


# ── Helpers ──

def render_scalar(value: Any) -> Optional[str]:
    """String form used to compare a scalar against rule parameters.

    Returns None for null, arrays and objects.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    return None


def describe_given(ctx: FieldContext) -> str:
    """Short description of the received value for error messages."""
    if ctx.is_null:
        return "[NULL] given"
    rendered = render_scalar(ctx.value)
    if rendered is not None:
        return f"[{rendered}] given"
    if isinstance(ctx.value, dict):
        return "Object given"
    if isinstance(ctx.value, list):
        return "Array given"
    return "Incompatible type given"


def as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def length_of(value: Any) -> Optional[int]:
    if isinstance(value, (str, list, dict)):
        return len(value)
    return None


# ── Type rules ──

def is_array(ctx: FieldContext) -> tuple[str, bool]:
    return "Must be an array", isinstance(ctx.value, list)


def is_object(ctx: FieldContext) -> tuple[str, bool]:
    return "Must be an object", isinstance(ctx.value, dict)


def is_string(ctx: FieldContext) -> tuple[str, bool]:
    return "Must be a string", isinstance(ctx.value, str)


def is_bool(ctx: FieldContext) -> tuple[str, bool]:
    return "Must be a boolean", isinstance(ctx.value, bool)


def is_integer(ctx: FieldContext) -> tuple[str, bool]:
    return "Must be an integer", ctx.key_present and is_integral(ctx.value)


def is_float(ctx: FieldContext) -> tuple[str, bool]:
    # Integers count as floats
    return "Must be a float", as_number(ctx.value) is not None


def is_json(ctx: FieldContext) -> tuple[str, bool]:
    message = "Must be a valid json string"
    if not isinstance(ctx.value, str) or ctx.value == "":
        return message, False
    try:
        json.loads(ctx.value)
    except (ValueError, RecursionError):
        return message, False
    return message, True


# ── Length rules ──

def _check_length(ctx: FieldContext, minimum: Optional[int], maximum: Optional[int]) -> tuple[str, bool]:
    if minimum is not None and maximum is not None:
        if minimum == maximum:
            message = f"Length must be exactly {minimum}"
        else:
            message = f"Length must be between {minimum} and {maximum}"
    elif minimum is not None:
        message = f"Length must be at least {minimum}"
    else:
        message = f"Length must be at most {maximum}"

    actual = length_of(ctx.value)
    if actual is None:
        return message, False

    message = f"{message} - Actual length: {actual}"
    if minimum is not None and actual < minimum:
        return message, False
    if maximum is not None and actual > maximum:
        return message, False
    return "", True


def length_exact(ctx: FieldContext) -> tuple[str, bool]:
    expected = ctx.int_param(0)
    return _check_length(ctx, expected, expected)


def length_min(ctx: FieldContext) -> tuple[str, bool]:
    return _check_length(ctx, ctx.int_param(0), None)


def length_max(ctx: FieldContext) -> tuple[str, bool]:
    return _check_length(ctx, None, ctx.int_param(0))


def length_between(ctx: FieldContext) -> tuple[str, bool]:
    return _check_length(ctx, ctx.int_param(0), ctx.int_param(1))


def max_size(ctx: FieldContext) -> tuple[str, bool]:
    """Compact JSON encoding of the value must fit in the given number of bytes."""
    limit = ctx.int_param(0)
    encoded = json.dumps(ctx.value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    message = f"Encoded size must be at most {limit} bytes - Actual size: {len(encoded)}"
    return message, len(encoded) <= limit


# ── Numeric rules ──

def number_min(ctx: FieldContext) -> tuple[str, bool]:
    minimum = ctx.float_param(0)
    message = f"Must be a number greater than or equal to {ctx.param(0)}"
    value = as_number(ctx.value)
    return message, value is not None and minimum <= value


def number_max(ctx: FieldContext) -> tuple[str, bool]:
    maximum = ctx.float_param(0)
    message = f"Must be a number less than or equal to {ctx.param(0)}"
    value = as_number(ctx.value)
    return message, value is not None and value <= maximum


def number_between(ctx: FieldContext) -> tuple[str, bool]:
    minimum = ctx.float_param(0)
    maximum = ctx.float_param(1)
    message = f"Must be a number between {ctx.param(0)} and {ctx.param(1)}"
    value = as_number(ctx.value)
    return message, value is not None and minimum <= value <= maximum


def integer_between(ctx: FieldContext) -> tuple[str, bool]:
    minimum = ctx.int_param(0)
    maximum = ctx.int_param(1)
    message = f"Must be an integer between {minimum} and {maximum}"
    if not is_integral(ctx.value):
        return message, False
    return message, minimum <= int(ctx.value) <= maximum


# ── Set rules ──

def value_in(ctx: FieldContext) -> tuple[str, bool]:
    message = f"Value must be in set: [{', '.join(ctx.params)}] - {describe_given(ctx)}"
    rendered = None if ctx.is_null else render_scalar(ctx.value)
    return message, rendered is not None and rendered in ctx.params


def value_not_in(ctx: FieldContext) -> tuple[str, bool]:
    message = f"Value must not be in set: [{', '.join(ctx.params)}] - {describe_given(ctx)}"
    rendered = None if ctx.is_null else render_scalar(ctx.value)
    return message, rendered is not None and rendered not in ctx.params


def object_missing_keys(ctx: FieldContext) -> tuple[str, bool]:
    message = f"Must be an object without any of the keys [{', '.join(ctx.params)}]"
    if not isinstance(ctx.value, dict):
        return message, False
    return message, not any(key in ctx.value for key in ctx.params)
