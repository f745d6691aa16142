"""Canonical Pydantic models shared across all tsrestgen modules.

Every other module imports its data shapes from here rather than defining
its own.  The models fall into two groups:

**Configuration models** -- loaded from ``tsrestgen.json``, environment
variables and CLI flags:
    :class:`GeneratorConfig`.

**Parser output models** -- produced from an OpenAPI document and consumed
by the contract generator:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`StatusCodeKind`,
    :class:`ComponentSchemaEntry` and :class:`OperationRecord`.

Parser output models are frozen.  Validation makes shallow copies of their
top-level ``dict`` fields, but nested schema objects are shared with the
loaded document, so the document must not be mutated while a generation pass is running.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Generator Config ---


class GeneratorConfig(BaseModel):
    """Settings controlling a single contract generation run.

    Resolved by :func:`~tsrestgen.config.resolve_config` from (high to low)
    CLI flags, ``TSRESTGEN_*`` environment variables, the project file
    ``./tsrestgen.json`` and the defaults declared here.

    Example::

        GeneratorConfig(format=False)
    """

    model_config = ConfigDict(extra="forbid")

    format: bool = Field(
        default=True, description="Pipe the generated source through prettier"
    )
    prettier_command: str = Field(
        default="prettier", description="Command used to invoke prettier"
    )
    format_timeout: float = Field(
        default=30.0, gt=0, description="Seconds to wait for the formatter"
    )
    validate_version: bool = Field(
        default=True, description="Reject documents that are not OpenAPI 3.x"
    )


# --- Parser Output Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class StatusCodeKind(str, enum.Enum):
    """Classification of an OpenAPI response key.

    ``EXACT`` is a concrete code such as ``"404"``, ``RANGE`` a family such as
    ``"4XX"`` and ``DEFAULT`` the literal ``"default"`` key.
    """

    EXACT = "exact"
    RANGE = "range"
    DEFAULT = "default"


class ComponentSchemaEntry(BaseModel):
    """One named entry of ``components.schemas``, ready to be declared.

    The ordered list of entries produced by
    :func:`~tsrestgen.parser.schemas.sort_component_schemas` is the exported
    declaration set; each entry appears after every schema it depends on.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    normalized_identifier: str = Field(
        description="``name`` rewritten into a valid TypeScript identifier"
    )
    ref: str = Field(description="The ``#/components/schemas/{name}`` reference")
    schema_: dict[str, Any] = Field(alias="schema")


class OperationRecord(BaseModel):
    """A single API operation (one URL path + HTTP method pair).

    Parameters, request body and responses are already resolved to concrete
    objects.  Schemas nested inside them may still be references; the
    compiler decides how to treat those.
    """

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    path: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: list[dict[str, Any]] = Field(default_factory=list)
    request_body: Optional[dict[str, Any]] = None
    responses: dict[str, dict[str, Any]] = Field(default_factory=dict)
