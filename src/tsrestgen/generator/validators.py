"""Build the constraint/suffix chain appended to a compiled schema.

Every compiled expression ends with the same fixed sequence of calls:

1. type-specific constraints (string length, pattern and format; numeric
   bounds; array item counts),
2. at most one of ``.nullish()``, ``.nullable()`` or ``.optional()``,
3. ``.default(value)`` when the schema declares a default that can be
   expressed for its type.

The chain depends only on the schema and on whether the schema is a required
property, never on how the base expression was produced.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Optional

from tsrestgen.generator.expressions import Call, RegexLiteral, call, obj

_FORMAT_CALLS: dict[str, Call] = {
    "uuid": call("uuid"),
    "hostname": call("url"),
    "uri": call("url"),
    "email": call("email"),
    "date-time": call("datetime", obj(("offset", True))),
    "ipv4": call("ip", obj(("version", "v4"))),
    "ipv6": call("ip", obj(("version", "v6"))),
}

_NAMED_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r"}
_CONTROL_CHARS_RE = re.compile(
    r"[\t\n\r\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufffe\uffff]"
)
_UNESCAPED_SLASH_RE = re.compile(r"(?<!\\)/")


def sanitize_pattern(pattern: str) -> str:
    """Turn a JSON Schema ``pattern`` into a JavaScript regex literal.

    Surrounding ``/`` delimiters are stripped, tab/newline/carriage-return
    and other control or non-character code points are escaped
    (``\\xHH`` up to ``0xff``, ``\\uHHHH`` above), unescaped slashes are
    escaped, and the result is wrapped in ``/.../``.

    Example::

        sanitize_pattern("^a/b$")  # '/^a\\/b$/'
    """
    if len(pattern) >= 2 and pattern.startswith("/") and pattern.endswith("/"):
        pattern = pattern[1:-1]

    def escape(match: re.Match[str]) -> str:
        char = match.group(0)
        if char in _NAMED_ESCAPES:
            return _NAMED_ESCAPES[char]
        code = ord(char)
        return f"\\x{code:02x}" if code <= 0xFF else f"\\u{code:04x}"

    pattern = _CONTROL_CHARS_RE.sub(escape, pattern)
    pattern = _UNESCAPED_SLASH_RE.sub(r"\\/", pattern)
    return f"/{pattern}/"


def _string_calls(schema: dict[str, Any]) -> list[Call]:
    calls: list[Call] = []
    if "enum" not in schema:
        if schema.get("minLength"):
            calls.append(call("min", schema["minLength"]))
        if schema.get("maxLength"):
            calls.append(call("max", schema["maxLength"]))
    if schema.get("pattern"):
        calls.append(Call("regex", (RegexLiteral(sanitize_pattern(schema["pattern"])),)))
    format_call = _FORMAT_CALLS.get(schema.get("format"))
    if format_call is not None:
        calls.append(format_call)
    return calls


def _number_calls(schema: dict[str, Any]) -> list[Call]:
    if "enum" in schema:
        return []

    calls: list[Call] = []
    if schema.get("type") == "integer":
        calls.append(call("int"))

    # OpenAPI 3.0 uses boolean exclusive flags, 3.1 uses numeric bounds
    exclusive_min = schema.get("exclusiveMinimum")
    if schema.get("minimum") is not None:
        calls.append(call("gt" if exclusive_min is True else "gte", schema["minimum"]))
    elif _is_number(exclusive_min):
        calls.append(call("gt", exclusive_min))

    exclusive_max = schema.get("exclusiveMaximum")
    if schema.get("maximum") is not None:
        calls.append(call("lt" if exclusive_max is True else "lte", schema["maximum"]))
    elif _is_number(exclusive_max):
        calls.append(call("lt", exclusive_max))

    if schema.get("multipleOf") is not None:
        calls.append(call("multipleOf", schema["multipleOf"]))
    return calls


def _array_calls(schema: dict[str, Any]) -> list[Call]:
    calls: list[Call] = []
    if schema.get("minItems") is not None:
        calls.append(call("min", schema["minItems"]))
    if schema.get("maxItems") is not None:
        calls.append(call("max", schema["maxItems"]))
    return calls


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def constraint_calls(schema: dict[str, Any]) -> list[Call]:
    """Return the type-specific constraint calls for *schema*."""
    schema_type = schema.get("type")
    if schema_type == "string":
        return _string_calls(schema)
    if schema_type in ("number", "integer"):
        return _number_calls(schema)
    if schema_type == "array":
        return _array_calls(schema)
    return []


def presence_calls(schema: dict[str, Any], is_required: Optional[bool]) -> list[Call]:
    """Return the nullability/optionality suffix.

    ``is_required`` is ``None`` when the schema is not an object property,
    in which case a non-nullable schema gets no suffix at all.
    """
    if schema.get("nullable"):
        return [call("nullable")] if is_required else [call("nullish")]
    if is_required is False:
        return [call("optional")]
    return []


def default_value(schema: dict[str, Any]) -> Any:
    """Coerce ``schema["default"]`` to a value matching the schema's type.

    Returns ``None`` when no ``.default()`` should be emitted: the schema's
    type is not string, number, integer, boolean or array, or the value
    cannot be coerced to it.
    """
    value = schema["default"]
    schema_type = schema.get("type")
    if schema_type == "string":
        return value if isinstance(value, str) else json.dumps(value)
    if schema_type in ("number", "integer"):
        if _is_number(value):
            return value
        if isinstance(value, str):
            try:
                number = float(value)
            except ValueError:
                return None
            return number if math.isfinite(number) else None
        return None
    if schema_type == "boolean":
        return bool(value)
    if schema_type == "array" and isinstance(value, list):
        return value
    return None


def validator_calls(schema: dict[str, Any], is_required: Optional[bool] = None) -> list[Call]:
    """Return the full constraint/suffix chain for *schema*.

    Args:
        schema: A concrete schema object.
        is_required: ``True``/``False`` when *schema* is an object property
            (or parameter), ``None`` otherwise.
    """
    calls = constraint_calls(schema)
    calls.extend(presence_calls(schema, is_required))
    if "default" in schema:
        value = default_value(schema)
        if value is not None:
            calls.append(call("default", value))
    return calls
