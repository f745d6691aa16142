"""A small TypeScript expression tree and its printer.

The compiler and the contract assembler never build source text directly.
They build values from the closed set of node types below, and
:func:`render` turns a tree into deterministic TypeScript source:

* :class:`Identifier` -- a bare name (``Pet``, ``z``, ``File``).
* :class:`Literal` -- a string, number, boolean or ``null``.
* :class:`RegexLiteral` -- a regular-expression literal, already delimited.
* :class:`ArrayLiteral` -- ``[a, b]``.
* :class:`ObjectLiteral` -- ``{ "key": value }``, or ``{ Pet }`` shorthand.
* :class:`MethodChain` -- a base expression followed by ``.name(args)`` calls.

Nodes are frozen dataclasses so finished trees can be shared and compared.
The printer emits everything on one line; layout is left to the formatter.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class Literal:
    value: Union[str, int, float, bool, None]


@dataclass(frozen=True)
class RegexLiteral:
    pattern: str


@dataclass(frozen=True)
class ArrayLiteral:
    elements: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class ObjectLiteral:
    """An object literal.

    A property whose value is ``None`` is printed in shorthand form, so
    ``ObjectLiteral((("Pet", None),))`` renders as ``{ Pet }``.
    """

    properties: tuple[tuple[str, Optional[Expression]], ...] = ()


@dataclass(frozen=True)
class Call:
    """One ``.name(args)`` link of a :class:`MethodChain`."""

    name: str
    args: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class MethodChain:
    base: Expression
    calls: tuple[Call, ...] = ()


Expression = Union[Identifier, Literal, RegexLiteral, ArrayLiteral, ObjectLiteral, MethodChain]


# --------------------------------------------------------------------------- #
# Builders
# --------------------------------------------------------------------------- #


def call(name: str, *args: Any) -> Call:
    """Build a :class:`Call`, converting plain Python arguments to literals."""
    return Call(name, tuple(to_expression(arg) for arg in args))


def chain(base: Expression, *calls: Call) -> Expression:
    """Append *calls* to *base*.

    Chaining onto an existing :class:`MethodChain` extends it instead of
    nesting, and chaining nothing returns *base* unchanged.
    """
    if not calls:
        return base
    if isinstance(base, MethodChain):
        return MethodChain(base.base, base.calls + tuple(calls))
    return MethodChain(base, tuple(calls))


def z(method: str, *args: Any) -> Expression:
    """Shorthand for ``z.<method>(<args>)``."""
    return MethodChain(Identifier("z"), (call(method, *args),))


def array(*elements: Any) -> ArrayLiteral:
    return ArrayLiteral(tuple(to_expression(element) for element in elements))


def obj(*properties: tuple[str, Any]) -> ObjectLiteral:
    """Build an :class:`ObjectLiteral` from ``(key, value)`` pairs.

    A ``None`` value produces a shorthand property.
    """
    return ObjectLiteral(
        tuple(
            (key, None if value is None else to_expression(value))
            for key, value in properties
        )
    )


_NODE_TYPES = (Identifier, Literal, RegexLiteral, ArrayLiteral, ObjectLiteral, MethodChain)


def to_expression(value: Any) -> Expression:
    """Convert a plain Python value into an expression.

    Expressions pass through unchanged, lists and tuples become
    :class:`ArrayLiteral`, dicts become :class:`ObjectLiteral` and scalars
    become :class:`Literal`.  Anything else is converted with ``str()``.
    """
    if isinstance(value, _NODE_TYPES):
        return value
    if isinstance(value, (list, tuple)):
        return ArrayLiteral(tuple(to_expression(item) for item in value))
    if isinstance(value, dict):
        return ObjectLiteral(
            tuple((str(key), to_expression(item)) for key, item in value.items())
        )
    if value is None or isinstance(value, (str, int, float, bool)):
        return Literal(value)
    return Literal(str(value))


# --------------------------------------------------------------------------- #
# Printer
# --------------------------------------------------------------------------- #


def render(expression: Expression) -> str:
    """Print *expression* as TypeScript source on a single line.

    Example::

        render(chain(z("string"), call("min", 5)))  # 'z.string().min(5)'
    """
    if isinstance(expression, Identifier):
        return expression.name
    if isinstance(expression, Literal):
        return _render_literal(expression.value)
    if isinstance(expression, RegexLiteral):
        return expression.pattern
    if isinstance(expression, ArrayLiteral):
        return "[" + ", ".join(render(e) for e in expression.elements) + "]"
    if isinstance(expression, ObjectLiteral):
        return _render_object(expression)
    if isinstance(expression, MethodChain):
        text = render(expression.base)
        for link in expression.calls:
            text += f".{link.name}(" + ", ".join(render(a) for a in link.args) + ")"
        return text
    raise TypeError(f"Cannot render {type(expression).__name__}")


def _render_literal(value: Union[str, int, float, bool, None]) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def _render_object(expression: ObjectLiteral) -> str:
    if not expression.properties:
        return "{}"
    parts = []
    for key, value in expression.properties:
        if value is None:
            parts.append(key)
        else:
            parts.append(f"{json.dumps(key, ensure_ascii=False)}: {render(value)}")
    return "{ " + ", ".join(parts) + " }"
