"""Per-document state shared by every stage of a generation run.

:class:`GenerationContext` is built once from a loaded document and then
passed, read-only, to the schema compiler and the contract assembler.  It
bundles the reference resolver, the dependency-ordered component schemas
and the extracted operations so each is computed exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from tsrestgen.models import ComponentSchemaEntry, OperationRecord
from tsrestgen.parser.extractor import extract_operations
from tsrestgen.parser.refs import RefResolver
from tsrestgen.parser.schemas import sort_component_schemas

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationContext:
    """Everything derived from one OpenAPI document before code generation.

    Attributes:
        document: The loaded OpenAPI document.  Must not be mutated while
            the context is in use.
        resolver: Resolver bound to ``document``.
        schemas: Component schemas in declaration (dependency) order.
        operations: Extracted operations in document order.
    """

    document: dict[str, Any]
    resolver: RefResolver
    schemas: list[ComponentSchemaEntry]
    operations: list[OperationRecord]
    schemas_by_ref: dict[str, ComponentSchemaEntry] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "schemas_by_ref", {entry.ref: entry for entry in self.schemas}
        )

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> GenerationContext:
        """Resolve, sort and extract everything needed from *document*.

        Raises:
            CircularRefDependencyError: If named schemas form a cycle.
            InvalidHttpMethodError: If a path item has an unknown key.
            InvalidStatusCodeError: If a response key is invalid.
            ResolveRefError: If a reference points at a missing component.
        """
        resolver = RefResolver(document)
        schemas = sort_component_schemas(document, resolver)
        operations = extract_operations(document, resolver)
        logger.debug(
            "Built generation context: %d schemas, %d operations",
            len(schemas),
            len(operations),
        )
        return cls(
            document=document,
            resolver=resolver,
            schemas=schemas,
            operations=operations,
        )

    @property
    def openapi_version(self) -> str:
        return str(self.document.get("openapi", ""))

    def exported_schema(self, ref: str) -> ComponentSchemaEntry | None:
        """Return the declared entry for *ref*, or ``None`` if it is not exported."""
        return self.schemas_by_ref.get(ref)
