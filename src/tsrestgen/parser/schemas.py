"""Order the named component schemas so that dependencies come first.

A generated module declares one ``const`` per entry of
``components.schemas``.  TypeScript ``const`` bindings cannot be used before
they are declared, so a schema must be emitted after every schema it
references.  This module:

1. Builds a dependency graph by walking each named schema through every
   place a nested schema may appear (``allOf``/``oneOf``/``anyOf`` members,
   array ``items``, object ``properties`` and schema-valued
   ``additionalProperties``).  Each reference found adds an edge.
2. Sorts the graph depth-first, dependencies before dependents, keeping the
   document's declaration order for unrelated schemas.
3. Wraps each sorted reference in a
   :class:`~tsrestgen.models.ComponentSchemaEntry`.

A genuine cycle between named schemas cannot be expressed as ``const``
declarations and raises :class:`~tsrestgen.exceptions.CircularRefDependencyError`.
"""

from __future__ import annotations

import logging
from typing import Any

from tsrestgen.exceptions import CircularRefDependencyError
from tsrestgen.models import ComponentSchemaEntry
from tsrestgen.naming import format_identifier
from tsrestgen.parser.refs import RefResolver, is_reference, make_ref, parse_ref

logger = logging.getLogger(__name__)

DependencyGraph = dict[str, dict[str, None]]
"""Adjacency map of schema ref -> ordered set of refs it depends on."""

_COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")


def build_dependency_graph(
    document: dict[str, Any], resolver: RefResolver
) -> DependencyGraph:
    """Build the structural dependency graph of ``components.schemas``.

    Every named schema gets a node, in declaration order, even when it has
    no dependencies.  Edges are kept in discovery order.

    Args:
        document: The loaded OpenAPI document.
        resolver: Resolver bound to the same document.

    Returns:
        The adjacency map.
    """
    schemas = (document.get("components") or {}).get("schemas") or {}
    graph: DependencyGraph = {make_ref("schemas", name): {} for name in schemas}
    walked: set[str] = set()

    for name, root in schemas.items():
        root_ref = make_ref("schemas", name)
        if root_ref in walked:
            continue
        walked.add(root_ref)

        # Explicit stack of (schema, owning ref); children are pushed in
        # reverse so they are walked in document order.
        pending: list[tuple[Any, str]] = [(root, root_ref)]
        while pending:
            schema, from_ref = pending.pop()

            if is_reference(schema):
                ref = schema["$ref"]
                graph.setdefault(from_ref, {})[ref] = None
                if ref not in walked:
                    walked.add(ref)
                    pending.append((resolver.resolve_ref(ref), ref))
                continue

            if not isinstance(schema, dict):
                continue
            pending.extend((child, from_ref) for child in reversed(_nested_schemas(schema)))

    return graph


def _nested_schemas(schema: dict[str, Any]) -> list[Any]:
    """Return the schemas nested directly inside *schema*, in document order."""
    nested: list[Any] = []
    for keyword in _COMPOSITION_KEYWORDS:
        nested.extend(schema.get(keyword) or [])

    schema_type = schema.get("type")
    is_array = schema_type == "array" or (
        isinstance(schema_type, list) and "array" in schema_type
    )
    if is_array and schema.get("items") is not None:
        nested.append(schema["items"])
        return nested

    additional = schema.get("additionalProperties")
    if schema_type == "object" or schema.get("properties") is not None or additional:
        nested.extend((schema.get("properties") or {}).values())
        if isinstance(additional, dict):
            nested.append(additional)
    return nested


def topological_sort(graph: DependencyGraph) -> list[str]:
    """Return the nodes of *graph* with every dependency before its dependents.

    Nodes are started in the graph's insertion order, so nodes with no
    ordering constraint between them keep that order.  The depth-first walk
    keeps its own stack, so long dependency chains do not hit the
    interpreter's recursion limit.

    Raises:
        CircularRefDependencyError: If a node is reached again while it is
            still on the current depth-first path.  The error's ``path`` runs
            from the first occurrence of that node back to itself.
    """
    ordered: dict[str, None] = {}
    visited: set[str] = set()

    for root in graph:
        if root in visited:
            continue
        visited.add(root)
        ancestors = [root]
        on_path = {root}
        stack = [iter(graph.get(root, {}))]
        while stack:
            for dep in stack[-1]:
                if dep in on_path:
                    raise CircularRefDependencyError(ancestors[ancestors.index(dep):] + [dep])
                if dep not in visited:
                    visited.add(dep)
                    ancestors.append(dep)
                    on_path.add(dep)
                    stack.append(iter(graph.get(dep, {})))
                    break
            else:
                stack.pop()
                node = ancestors.pop()
                on_path.discard(node)
                ordered[node] = None

    return list(ordered)


def sort_component_schemas(
    document: dict[str, Any], resolver: RefResolver
) -> list[ComponentSchemaEntry]:
    """Return one :class:`ComponentSchemaEntry` per named schema, dependencies first.

    Raises:
        CircularRefDependencyError: If named schemas depend on each other
            in a cycle.
        ResolveRefError: If a schema references a missing component.
    """
    graph = build_dependency_graph(document, resolver)
    sorted_refs = topological_sort(graph)
    logger.debug("Schema declaration order: %s", sorted_refs)

    entries: list[ComponentSchemaEntry] = []
    for ref in sorted_refs:
        name = parse_ref(ref).name
        entries.append(
            ComponentSchemaEntry(
                name=name,
                normalized_identifier=format_identifier(name),
                ref=ref,
                schema=resolver.resolve_ref(ref),
            )
        )
    return entries
