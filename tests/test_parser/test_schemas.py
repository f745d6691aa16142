"""Tests for tsrestgen.parser.schemas -- dependency graph and declaration order."""

from __future__ import annotations

from typing import Any

import pytest

from tsrestgen.exceptions import CircularRefDependencyError, ResolveRefError
from tsrestgen.parser.refs import RefResolver
from tsrestgen.parser.schemas import (
    build_dependency_graph,
    sort_component_schemas,
    topological_sort,
)


def _ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def _document(schemas: dict[str, Any]) -> dict[str, Any]:
    return {"openapi": "3.0.3", "paths": {}, "components": {"schemas": schemas}}


def _names(schemas: dict[str, Any]) -> list[str]:
    document = _document(schemas)
    return [entry.name for entry in sort_component_schemas(document, RefResolver(document))]


# ---------------------------------------------------------------------------
# build_dependency_graph
# ---------------------------------------------------------------------------


class TestBuildDependencyGraph:
    def test_every_schema_is_a_node(self) -> None:
        document = _document({"A": {"type": "string"}, "B": {"type": "number"}})
        graph = build_dependency_graph(document, RefResolver(document))
        assert graph == {"#/components/schemas/A": {}, "#/components/schemas/B": {}}

    def test_no_components(self) -> None:
        document = {"openapi": "3.0.3", "paths": {}}
        assert build_dependency_graph(document, RefResolver(document)) == {}

    def test_property_array_and_composition_edges(self) -> None:
        document = _document(
            {
                "Owner": {"type": "object", "properties": {"pet": _ref("Pet")}},
                "Pet": {"allOf": [_ref("Base"), {"type": "object"}]},
                "Base": {"type": "object"},
                "Pets": {"type": "array", "items": _ref("Pet")},
                "Map": {"type": "object", "additionalProperties": _ref("Base")},
            }
        )
        graph = build_dependency_graph(document, RefResolver(document))
        assert list(graph["#/components/schemas/Owner"]) == ["#/components/schemas/Pet"]
        assert list(graph["#/components/schemas/Pet"]) == ["#/components/schemas/Base"]
        assert list(graph["#/components/schemas/Pets"]) == ["#/components/schemas/Pet"]
        assert list(graph["#/components/schemas/Map"]) == ["#/components/schemas/Base"]
        assert graph["#/components/schemas/Base"] == {}

    def test_nested_inline_schemas_attribute_edges_to_named_schema(self) -> None:
        document = _document(
            {
                "Outer": {
                    "type": "object",
                    "properties": {
                        "inner": {
                            "type": "object",
                            "properties": {"tags": {"type": "array", "items": _ref("Tag")}},
                        }
                    },
                },
                "Tag": {"type": "string"},
            }
        )
        graph = build_dependency_graph(document, RefResolver(document))
        assert list(graph["#/components/schemas/Outer"]) == ["#/components/schemas/Tag"]

    def test_missing_reference_raises(self) -> None:
        document = _document({"A": {"type": "object", "properties": {"b": _ref("B")}}})
        with pytest.raises(ResolveRefError):
            build_dependency_graph(document, RefResolver(document))


# ---------------------------------------------------------------------------
# topological_sort
# ---------------------------------------------------------------------------


class TestTopologicalSort:
    def test_dependencies_come_first(self) -> None:
        graph = {"S1": {"S3": None}, "S2": {"S1": None}, "S3": {"S4": None}, "S4": {}}
        assert topological_sort(graph) == ["S4", "S3", "S1", "S2"]

    def test_independent_nodes_keep_insertion_order(self) -> None:
        assert topological_sort({"C": {}, "A": {}, "B": {}}) == ["C", "A", "B"]

    def test_two_node_cycle(self) -> None:
        with pytest.raises(CircularRefDependencyError) as exc_info:
            topological_sort({"A": {"B": None}, "B": {"A": None}})
        assert exc_info.value.path == ["A", "B", "A"]

    def test_cycle_path_starts_at_repeated_node(self) -> None:
        graph = {"Root": {"A": None}, "A": {"B": None}, "B": {"C": None}, "C": {"A": None}}
        with pytest.raises(CircularRefDependencyError) as exc_info:
            topological_sort(graph)
        assert exc_info.value.path == ["A", "B", "C", "A"]
        assert "A -> B -> C -> A" in str(exc_info.value)

    def test_self_loop(self) -> None:
        with pytest.raises(CircularRefDependencyError) as exc_info:
            topological_sort({"A": {"A": None}})
        assert exc_info.value.path == ["A", "A"]

    def test_diamond_is_not_a_cycle(self) -> None:
        graph = {"Top": {"L": None, "R": None}, "L": {"Base": None}, "R": {"Base": None}, "Base": {}}
        assert topological_sort(graph) == ["Base", "L", "R", "Top"]

    def test_long_chain(self) -> None:
        graph = {f"S{i}": {f"S{i + 1}": None} for i in range(5000)}
        graph["S5000"] = {}
        assert topological_sort(graph) == [f"S{i}" for i in range(5000, -1, -1)]

    def test_long_cycle(self) -> None:
        graph = {f"S{i}": {f"S{(i + 1) % 3000}": None} for i in range(3000)}
        with pytest.raises(CircularRefDependencyError) as exc_info:
            topological_sort(graph)
        assert len(exc_info.value.path) == 3001
        assert exc_info.value.path[0] == exc_info.value.path[-1] == "S0"


# ---------------------------------------------------------------------------
# sort_component_schemas
# ---------------------------------------------------------------------------


class TestSortComponentSchemas:
    def test_referenced_schema_declared_first(self) -> None:
        assert _names({"Pets": {"type": "array", "items": _ref("Pet")}, "Pet": {"type": "object"}}) == [
            "Pet",
            "Pets",
        ]

    def test_cycle_between_named_schemas(self) -> None:
        document = _document(
            {
                "A": {"type": "object", "properties": {"b": _ref("B")}},
                "B": {"type": "object", "properties": {"a": _ref("A")}},
            }
        )
        with pytest.raises(CircularRefDependencyError) as exc_info:
            sort_component_schemas(document, RefResolver(document))
        assert exc_info.value.path == [
            "#/components/schemas/A",
            "#/components/schemas/B",
            "#/components/schemas/A",
        ]

    def test_long_reference_chain(self) -> None:
        schemas: dict[str, Any] = {
            f"S{i}": {"type": "object", "properties": {"n": _ref(f"S{i + 1}")}} for i in range(1000)
        }
        schemas["S1000"] = {"type": "string"}
        assert _names(schemas) == [f"S{i}" for i in range(1000, -1, -1)]

    def test_entry_fields(self) -> None:
        pet = {"type": "object"}
        document = _document({"my-pet": pet})
        (entry,) = sort_component_schemas(document, RefResolver(document))
        assert entry.name == "my-pet"
        assert entry.normalized_identifier == "my_pet"
        assert entry.ref == "#/components/schemas/my-pet"
        assert entry.schema_ == pet

    def test_alias_schema_resolves_to_target(self) -> None:
        document = _document({"Alias": _ref("Target"), "Target": {"type": "string"}})
        entries = sort_component_schemas(document, RefResolver(document))
        assert [entry.name for entry in entries] == ["Target", "Alias"]
        assert entries[1].schema_ == {"type": "string"}
