"""Assemble ts-rest contract entries from extracted operations.

Each :class:`~tsrestgen.models.OperationRecord` becomes one
:class:`ContractEntry`: a router key plus the object literal ts-rest expects
(``method``, ``path``, ``summary``, ``headers``, ``query``, ``pathParams``,
``body``, ``contentType`` and ``responses``).

Response keys are expanded to concrete status codes because ts-rest only
accepts numeric keys.  Exact codes always win.  A range (``4XX``) expands to
every code in :data:`CANONICAL_STATUS_CODES` with the same leading digit that
is not already present, and ``default`` expands to every canonical code not
yet produced.  Neither adds 2xx codes once any 2xx code has been produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from tsrestgen.context import GenerationContext
from tsrestgen.exceptions import (
    MissingContentTypeError,
    MissingSchemaInParameterObjectError,
    UnsupportedRequestBodyContentTypeError,
)
from tsrestgen.generator.compiler import SchemaCompiler
from tsrestgen.generator.expressions import (
    Expression,
    Identifier,
    MethodChain,
    ObjectLiteral,
    call,
    obj,
    z,
)
from tsrestgen.models import HTTPMethod, OperationRecord, ParameterLocation, StatusCodeKind
from tsrestgen.naming import camel_case, path_to_variable_name
from tsrestgen.parser.extractor import classify_status_code

logger = logging.getLogger(__name__)

CANONICAL_STATUS_CODES = (
    "200",
    "201",
    "204",
    "400",
    "401",
    "403",
    "404",
    "405",
    "409",
    "415",
    "500",
)
"""Codes emitted in place of ``default`` and ``NXX`` response keys."""

SUPPORTED_BODY_CONTENT_TYPES = (
    "application/json",
    "multipart/form-data",
    "application/x-www-form-urlencoded",
)

JSON_CONTENT_TYPE = "application/json"

# OpenAPI ``in`` value -> ts-rest contract key; cookie parameters are unsupported
_PARAMETER_KEYS = (
    (ParameterLocation.HEADER, "headers"),
    (ParameterLocation.QUERY, "query"),
    (ParameterLocation.PATH, "pathParams"),
)


@dataclass(frozen=True)
class ContractEntry:
    """One operation's contract, ready to be placed in ``c.router({...})``.

    Attributes:
        name: Router key, e.g. ``getPetById``.
        method: Upper-cased HTTP method.
        path: ts-rest path with ``:param`` segments.
        responses: ``(status_code, expression)`` pairs in ascending order.
    """

    name: str
    method: str
    path: str
    responses: tuple[tuple[str, Expression], ...]
    summary: Optional[str] = None
    headers: Optional[Expression] = None
    query: Optional[Expression] = None
    path_params: Optional[Expression] = None
    body: Optional[Expression] = None
    content_type: Optional[str] = None

    def to_expression(self) -> ObjectLiteral:
        properties: list[tuple[str, Any]] = [("method", self.method), ("path", self.path)]
        optional_properties = (
            ("summary", self.summary),
            ("headers", self.headers),
            ("query", self.query),
            ("pathParams", self.path_params),
            ("body", self.body),
            ("contentType", self.content_type),
        )
        properties.extend((key, value) for key, value in optional_properties if value is not None)
        properties.append(("responses", obj(*self.responses)))
        return obj(*properties)


def to_contract_path(path: str) -> str:
    """Rewrite ``/pets/{id}`` as ``/pets/:id``."""
    return path.replace("{", ":").replace("}", "")


def operation_name(operation: OperationRecord) -> str:
    """Return the router key for *operation*."""
    if operation.operation_id:
        return camel_case(operation.operation_id)
    return path_to_variable_name(operation.path)


class ContractAssembler:
    """Build :class:`ContractEntry` objects for the operations of a context.

    Args:
        ctx: The generation context.
        compiler: Schema compiler to use; one is created from *ctx* if omitted.
    """

    def __init__(self, ctx: GenerationContext, compiler: Optional[SchemaCompiler] = None) -> None:
        self.ctx = ctx
        self.compiler = compiler or SchemaCompiler(ctx)

    def assemble_all(self) -> list[ContractEntry]:
        """Assemble an entry for every operation, in document order."""
        return [self.assemble(operation) for operation in self.ctx.operations]

    def router(self, entries: list[ContractEntry]) -> Expression:
        """Return the ``c.router({...})`` expression for *entries*."""
        return MethodChain(
            Identifier("c"),
            (call("router", obj(*((entry.name, entry.to_expression()) for entry in entries))),),
        )

    def assemble(self, operation: OperationRecord) -> ContractEntry:
        """Build the contract entry for a single operation.

        Raises:
            MissingSchemaInParameterObjectError: If a parameter has no schema.
            MissingContentTypeError: If the request body has no content types.
            UnsupportedRequestBodyContentTypeError: If no request body
                content type is supported by ts-rest.
            InvalidStatusCodeError: If a response key is not a status code.
        """
        parameters = self._parameters(operation)
        summary = operation.summary if operation.summary is not None else operation.description

        body: Optional[Expression] = None
        content_type: Optional[str] = None
        if operation.request_body is not None or operation.method != HTTPMethod.GET:
            body, content_type = self._body(operation)

        return ContractEntry(
            name=operation_name(operation),
            method=operation.method.value.upper(),
            path=to_contract_path(operation.path),
            summary=summary or None,
            headers=parameters.get("headers"),
            query=parameters.get("query"),
            path_params=parameters.get("pathParams"),
            body=body,
            content_type=content_type,
            responses=self._responses(operation),
        )

    # ------------------------------------------------------------------ #
    # Parameters
    # ------------------------------------------------------------------ #

    def _parameters(self, operation: OperationRecord) -> dict[str, Expression]:
        grouped: dict[str, list[tuple[str, Expression]]] = {}

        for param in operation.parameters:
            location = param.get("in")
            if location == ParameterLocation.COOKIE.value:
                logger.debug(
                    "Dropping cookie parameter %r of %s %s",
                    param.get("name"),
                    operation.method.value,
                    operation.path,
                )
                continue

            for param_location, key in _PARAMETER_KEYS:
                if location != param_location.value:
                    continue
                if param.get("schema") is None:
                    raise MissingSchemaInParameterObjectError(str(param.get("name")))
                # Path parameters are always required
                is_required = param_location is ParameterLocation.PATH or param.get("required") is True
                grouped.setdefault(key, []).append(
                    (param["name"], self.compiler.compile(param["schema"], is_required))
                )

        return {
            key: z("object", obj(*grouped[key]))
            for _, key in _PARAMETER_KEYS
            if key in grouped
        }

    # ------------------------------------------------------------------ #
    # Request body
    # ------------------------------------------------------------------ #

    def _body(self, operation: OperationRecord) -> tuple[Expression, Optional[str]]:
        request_body = operation.request_body
        if request_body is None:
            return z("void"), None

        content = request_body.get("content") or {}
        if not content:
            raise MissingContentTypeError(
                f"Missing content type in request body at path "
                f"{operation.method.value} {operation.path}"
            )

        content_type = _select_body_content_type(content)
        media_type = content[content_type] or {}
        if content_type != JSON_CONTENT_TYPE and "json" in content_type:
            content_type = JSON_CONTENT_TYPE

        schema = media_type.get("schema")
        if schema is None:
            return z("void"), content_type
        return self.compiler.compile(schema, True), content_type

    # ------------------------------------------------------------------ #
    # Responses
    # ------------------------------------------------------------------ #

    def _responses(self, operation: OperationRecord) -> tuple[tuple[str, Expression], ...]:
        method, path = operation.method.value, operation.path
        classified: dict[StatusCodeKind, list[tuple[str, dict[str, Any]]]] = {
            kind: [] for kind in StatusCodeKind
        }
        for status_code, response in operation.responses.items():
            kind = classify_status_code(method, path, status_code)
            classified[kind].append((status_code, response))

        produced: dict[str, Expression] = {}

        def has_success() -> bool:
            return any(code.startswith("2") for code in produced)

        for status_code, response in classified[StatusCodeKind.EXACT]:
            produced[status_code] = self._response(response)

        for status_code, response in classified[StatusCodeKind.RANGE]:
            family = status_code[0]
            if family == "2" and has_success():
                continue
            codes = [
                code
                for code in CANONICAL_STATUS_CODES
                if code.startswith(family) and code not in produced
            ]
            if codes:
                expression = self._response(response)
                produced.update((code, expression) for code in codes)

        for _, response in classified[StatusCodeKind.DEFAULT]:
            skip_success = has_success()
            codes = [
                code
                for code in CANONICAL_STATUS_CODES
                if code not in produced and not (skip_success and code.startswith("2"))
            ]
            if codes:
                expression = self._response(response)
                produced.update((code, expression) for code in codes)

        return tuple(sorted(produced.items(), key=lambda item: int(item[0])))

    def _response(self, response: dict[str, Any]) -> Expression:
        content = response.get("content")
        if not content:
            return z("void")

        content_type = _select_response_content_type(content)
        schema = (content[content_type] or {}).get("schema")
        expression = z("void") if schema is None else self.compiler.compile(schema, True)

        if content_type == JSON_CONTENT_TYPE:
            return expression
        return MethodChain(
            Identifier("c"),
            (call("otherResponse", obj(("contentType", content_type), ("body", expression))),),
        )


def _select_body_content_type(content: dict[str, Any]) -> str:
    for content_type in content:
        if "json" in content_type:
            return content_type
    for content_type in content:
        if content_type in SUPPORTED_BODY_CONTENT_TYPES:
            return content_type
    raise UnsupportedRequestBodyContentTypeError(next(iter(content)))


def _select_response_content_type(content: dict[str, Any]) -> str:
    for content_type in content:
        if content_type == JSON_CONTENT_TYPE:
            return content_type
    return next(iter(content))
