"""Extract API operations from an OpenAPI document.

Walks ``document["paths"]`` and builds one
:class:`~tsrestgen.models.OperationRecord` per path + HTTP method pair.  The
record's parameters, request body and responses are resolved to concrete
objects; schemas nested inside them are left untouched for the compiler.

Path-level parameters are merged with operation-level parameters by plain
concatenation, dropping any parameter equal to one already seen (first
occurrence wins).  Paths with no item and operations without ``responses``
are skipped.  Every path-item key that is not a known non-operation field is
validated as an HTTP method, and every response key as a status code.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from tsrestgen.exceptions import InvalidHttpMethodError, InvalidStatusCodeError
from tsrestgen.models import HTTPMethod, OperationRecord, StatusCodeKind
from tsrestgen.parser.refs import RefResolver

logger = logging.getLogger(__name__)

# Path Item Object fields that are not operations
_PATH_ITEM_FIELDS = frozenset({"summary", "description", "parameters", "servers"})

_EXACT_STATUS_RE = re.compile(r"^[1-5][0-9][0-9]$")
_RANGE_STATUS_RE = re.compile(r"^[1-5]XX$", re.IGNORECASE)


def classify_status_code(method: str, path: str, status_code: str) -> StatusCodeKind:
    """Classify a response key as an exact code, a range or ``default``.

    Args:
        method: HTTP method of the operation, used in the error message.
        path: URL path of the operation, used in the error message.
        status_code: The response key, e.g. ``"200"``, ``"4XX"``, ``"default"``.

    Raises:
        InvalidStatusCodeError: If *status_code* is none of the three forms.
    """
    if status_code == "default":
        return StatusCodeKind.DEFAULT
    if _RANGE_STATUS_RE.match(status_code):
        return StatusCodeKind.RANGE
    if _EXACT_STATUS_RE.match(status_code):
        return StatusCodeKind.EXACT
    raise InvalidStatusCodeError(method, path, status_code)


def validate_http_method(method: str, path: str) -> HTTPMethod:
    """Return the :class:`HTTPMethod` for a path-item key (case-insensitive).

    Raises:
        InvalidHttpMethodError: If *method* is not an HTTP method.
    """
    try:
        return HTTPMethod(method.lower())
    except ValueError:
        raise InvalidHttpMethodError(method, path) from None


def extract_operations(
    document: dict[str, Any], resolver: RefResolver
) -> list[OperationRecord]:
    """Build an :class:`OperationRecord` for every operation in *document*.

    Operations are returned in document order: paths first, then methods in
    the order they appear within each path item.

    Args:
        document: The loaded OpenAPI document.
        resolver: Resolver bound to the same document.

    Returns:
        The extracted operations.

    Raises:
        InvalidHttpMethodError: If a path item has an unknown key.
        InvalidStatusCodeError: If a response key is not a valid status code.
        ResolveRefError: If a referenced component does not exist.
    """
    operations: list[OperationRecord] = []

    for path, path_item_or_ref in (document.get("paths") or {}).items():
        if not path_item_or_ref:
            continue
        path_item = resolver.resolve_object(path_item_or_ref)

        for key, operation in path_item.items():
            if key in _PATH_ITEM_FIELDS or key.startswith("x-"):
                continue
            method = validate_http_method(key, path)

            if not isinstance(operation, dict) or not operation.get("responses"):
                logger.debug("Skipping %s %s: no responses", key, path)
                continue

            operations.append(
                _extract_operation(path, method, path_item, operation, resolver)
            )

    logger.debug("Extracted %d operations", len(operations))
    return operations


def _extract_operation(
    path: str,
    method: HTTPMethod,
    path_item: dict[str, Any],
    operation: dict[str, Any],
    resolver: RefResolver,
) -> OperationRecord:
    merged: list[Any] = []
    for param in [*(path_item.get("parameters") or []), *(operation.get("parameters") or [])]:
        if param not in merged:
            merged.append(param)
    parameters = [resolver.resolve_object(param) for param in merged]

    request_body = operation.get("requestBody")
    if request_body is not None:
        request_body = resolver.resolve_object(request_body)

    responses: dict[str, dict[str, Any]] = {}
    for status_code, response in operation["responses"].items():
        # YAML loads unquoted keys such as 200 as integers
        status_code = str(status_code)
        classify_status_code(method.value, path, status_code)
        responses[status_code] = resolver.resolve_object(response)

    return OperationRecord(
        method=method,
        path=path,
        operation_id=operation.get("operationId"),
        summary=operation.get("summary"),
        description=operation.get("description"),
        parameters=parameters,
        request_body=request_body,
        responses=responses,
    )
