"""Compile OpenAPI schema objects into Zod validation expressions.

:class:`SchemaCompiler` maps a schema (or a reference to one) to an
:mod:`~tsrestgen.generator.expressions` tree.  Dispatch runs in a fixed
priority order:

1. A reference to an exported component schema becomes that schema's
   identifier (``Pet``), with only the optional/nullable suffix.
2. Composition keywords: ``oneOf`` -> ``z.union``, ``allOf`` -> ``.and()``
   chain, ``anyOf`` -> union over every non-empty combination of members,
   each combination folded with ``.merge()``, largest combinations first.
   ``not`` and oversized ``anyOf`` lists raise
   :class:`~tsrestgen.exceptions.NotImplementedError_`.
3. ``enum`` -> ``z.literal`` / ``z.enum``.  A non-string enum that contains
   a string member compiles to ``z.never()``.
4. ``type`` -> the matching Zod primitive, array, object or record.

The constraint/suffix chain from :mod:`~tsrestgen.generator.validators` is
then appended.

Example::

    compiler = SchemaCompiler(GenerationContext.from_document(document))
    render(compiler.compile({"type": "string", "minLength": 5}))
    # 'z.string().min(5)'
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from tsrestgen.context import GenerationContext
from tsrestgen.exceptions import NotImplementedError_, UnexpectedError
from tsrestgen.generator.expressions import (
    Expression,
    Identifier,
    array,
    call,
    chain,
    obj,
    z,
)
from tsrestgen.generator.validators import presence_calls, validator_calls
from tsrestgen.parser.refs import is_reference

logger = logging.getLogger(__name__)

MAX_ANY_OF_MEMBERS = 8
"""Largest ``anyOf`` the power-set expansion accepts (255 combinations)."""


def power_set(items: list[Any]) -> list[list[Any]]:
    """Return every subset of *items*, built by doubling.

    Subsets keep the members' relative order; ``power_set([1, 2, 3])`` is
    ``[[], [1], [2], [1, 2], [3], [1, 3], [2, 3], [1, 2, 3]]``.
    """
    subsets: list[list[Any]] = [[]]
    for item in items:
        subsets.extend([*subset, item] for subset in list(subsets))
    return subsets


class SchemaCompiler:
    """Turn schemas into Zod expressions within one :class:`GenerationContext`.

    Args:
        ctx: The context whose exported schemas may be referenced by name.
    """

    def __init__(self, ctx: GenerationContext) -> None:
        self.ctx = ctx

    def compile(self, schema_or_ref: Any, is_required: Optional[bool] = None) -> Expression:
        """Compile *schema_or_ref* into a Zod expression.

        Args:
            schema_or_ref: A schema object or a Reference Object.
            is_required: ``True``/``False`` when compiling an object property
                or parameter, which controls the ``.optional()`` suffix;
                ``None`` for top-level schemas.

        Raises:
            NotImplementedError_: For ``not`` or an ``anyOf`` longer than
                :data:`MAX_ANY_OF_MEMBERS`.
            UnexpectedError: If the schema has an unsupported ``type``.
            ResolveRefError: If a reference cannot be resolved.
        """
        if is_reference(schema_or_ref):
            entry = self.ctx.exported_schema(schema_or_ref["$ref"])
            if entry is not None:
                return chain(
                    Identifier(entry.normalized_identifier),
                    *presence_calls({}, is_required),
                )

        schema = self.ctx.resolver.resolve_object(schema_or_ref)

        if isinstance(schema.get("type"), list) and len(schema["type"]) == 1:
            return self.compile({**schema, "type": schema["type"][0]}, is_required)

        return chain(self._compile_base(schema), *validator_calls(schema, is_required))

    # ------------------------------------------------------------------ #
    # Base expressions
    # ------------------------------------------------------------------ #

    def _compile_base(self, schema: dict[str, Any]) -> Expression:
        if "not" in schema:
            raise NotImplementedError_("Unsupported schema keyword: not")

        if schema.get("oneOf"):
            return self._union([self.compile(member) for member in schema["oneOf"]])

        if schema.get("allOf"):
            first, *rest = [self.compile(member) for member in schema["allOf"]]
            return chain(first, *(call("and", member) for member in rest))

        if schema.get("anyOf"):
            return self._any_of(schema["anyOf"])

        if "enum" in schema:
            return self._enum(schema)

        return self._compile_type(schema)

    def _union(self, members: list[Expression]) -> Expression:
        if len(members) == 1:
            return members[0]
        return z("union", array(*members))

    def _any_of(self, members: list[Any]) -> Expression:
        if len(members) > MAX_ANY_OF_MEMBERS:
            raise NotImplementedError_(
                f"anyOf with {len(members)} members is not supported "
                f"(at most {MAX_ANY_OF_MEMBERS})"
            )
        compiled = [self.compile(member) for member in members]
        subsets = [subset for subset in power_set(compiled) if subset]
        subsets.sort(key=len, reverse=True)
        combinations = [
            chain(first, *(call("merge", member) for member in rest))
            for first, *rest in subsets
        ]
        return self._union(combinations)

    def _enum(self, schema: dict[str, Any]) -> Expression:
        values = list(schema["enum"])

        if schema.get("type") == "string":
            if len(values) == 1:
                return z("literal", values[0])
            return z("enum", array(*values))

        if any(isinstance(value, str) for value in values):
            logger.debug("Enum %r mixes strings into a non-string type", values)
            return z("never")

        if len(values) == 1:
            return z("literal", values[0])
        return z("enum", array(*(z("literal", value) for value in values)))

    def _compile_type(self, schema: dict[str, Any]) -> Expression:
        schema_type = schema.get("type")

        if isinstance(schema_type, list) and len(schema_type) > 1:
            return z(
                "union",
                array(*(self.compile({**schema, "type": tag}) for tag in schema_type)),
            )

        if schema_type == "string":
            if schema.get("format") == "binary":
                return z("instanceof", Identifier("File"))
            return z("string")
        if schema_type in ("number", "integer"):
            return z("number")
        if schema_type == "boolean":
            return z("boolean")
        if schema_type == "null":
            return z("null")
        if schema_type == "array":
            items = schema.get("items")
            return z("array", z("any") if items is None else self.compile(items))
        if schema_type == "object" or schema.get("properties") is not None:
            return self._object(schema)
        if schema_type is None or schema_type == []:
            return z("unknown")

        raise UnexpectedError(f"Unsupported schema type {schema_type}")

    def _object(self, schema: dict[str, Any]) -> Expression:
        properties = schema.get("properties") or {}

        if not properties:
            additional = schema.get("additionalProperties")
            if additional is True:
                return z("record", z("any"))
            if isinstance(additional, dict):
                return z("record", self.compile(additional))

        required = set(schema.get("required") or [])
        return z(
            "object",
            obj(
                *(
                    (key, self.compile(prop, key in required))
                    for key, prop in properties.items()
                )
            ),
        )
