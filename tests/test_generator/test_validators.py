"""Tests for tsrestgen.generator.validators -- constraint and suffix chains."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from tsrestgen.generator.expressions import Identifier, chain, render
from tsrestgen.generator.validators import (
    default_value,
    presence_calls,
    sanitize_pattern,
    validator_calls,
)


def _suffix(schema: dict[str, Any], is_required: Optional[bool] = None) -> str:
    """Render the chain appended to a placeholder base, without the base."""
    rendered = render(chain(Identifier("x"), *validator_calls(schema, is_required)))
    return rendered[1:]


# ---------------------------------------------------------------------------
# sanitize_pattern
# ---------------------------------------------------------------------------


class TestSanitizePattern:
    @pytest.mark.parametrize(
        "pattern,expected",
        [
            ("^a/b$", "/^a\\/b$/"),
            ("/abc/", "/abc/"),
            ("a\\/b", "/a\\/b/"),
            ("/", "/\\//"),
            ("a\tb\nc\rd", "/a\\tb\\nc\\rd/"),
            ("\x01", "/\\x01/"),
            ("\x7f", "/\\x7f/"),
            ("\u0085", "/\\x85/"),
            ("\ufffe", "/\\ufffe/"),
            ("^[a-z]+$", "/^[a-z]+$/"),
        ],
    )
    def test_sanitize(self, pattern: str, expected: str) -> None:
        assert sanitize_pattern(pattern) == expected


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------


class TestStringConstraints:
    def test_length(self) -> None:
        assert _suffix({"type": "string", "minLength": 5, "maxLength": 10}) == ".min(5).max(10)"

    def test_zero_length_is_ignored(self) -> None:
        assert _suffix({"type": "string", "minLength": 0}) == ""

    def test_length_ignored_with_enum(self) -> None:
        assert _suffix({"type": "string", "enum": ["a"], "minLength": 1}) == ""

    def test_pattern(self) -> None:
        assert _suffix({"type": "string", "pattern": ".*"}) == ".regex(/.*/)"

    @pytest.mark.parametrize(
        "fmt,expected",
        [
            ("uuid", ".uuid()"),
            ("uri", ".url()"),
            ("hostname", ".url()"),
            ("email", ".email()"),
            ("date-time", '.datetime({ "offset": true })'),
            ("ipv4", '.ip({ "version": "v4" })'),
            ("ipv6", '.ip({ "version": "v6" })'),
            ("date", ""),
            ("binary", ""),
        ],
    )
    def test_formats(self, fmt: str, expected: str) -> None:
        assert _suffix({"type": "string", "format": fmt}) == expected

    def test_order(self) -> None:
        schema = {"type": "string", "format": "email", "pattern": "@", "maxLength": 3}
        assert _suffix(schema) == ".max(3).regex(/@/).email()"


class TestNumberConstraints:
    def test_inclusive_bounds(self) -> None:
        assert _suffix({"type": "number", "minimum": 5, "maximum": 10}) == ".gte(5).lte(10)"

    def test_boolean_exclusive_bounds(self) -> None:
        schema = {
            "type": "number",
            "minimum": 5,
            "exclusiveMinimum": True,
            "maximum": 5,
            "exclusiveMaximum": True,
        }
        assert _suffix(schema) == ".gt(5).lt(5)"

    def test_numeric_exclusive_bounds(self) -> None:
        schema = {"type": "number", "exclusiveMinimum": 0, "exclusiveMaximum": 1.5}
        assert _suffix(schema) == ".gt(0).lt(1.5)"

    def test_zero_minimum_is_kept(self) -> None:
        assert _suffix({"type": "number", "minimum": 0}) == ".gte(0)"

    def test_integer_and_multiple_of(self) -> None:
        assert _suffix({"type": "integer", "multipleOf": 2}) == ".int().multipleOf(2)"

    def test_enum_has_no_constraints(self) -> None:
        assert _suffix({"type": "integer", "enum": [1, 2], "minimum": 1}) == ""


class TestArrayConstraints:
    def test_item_counts(self) -> None:
        assert _suffix({"type": "array", "minItems": 0, "maxItems": 3}) == ".min(0).max(3)"

    def test_no_constraints_for_other_types(self) -> None:
        assert _suffix({"type": "object", "minLength": 1, "minimum": 2}) == ""


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


class TestPresenceCalls:
    @pytest.mark.parametrize(
        "schema,is_required,expected",
        [
            ({"nullable": True}, True, ["nullable"]),
            ({"nullable": True}, False, ["nullish"]),
            ({"nullable": True}, None, ["nullish"]),
            ({}, False, ["optional"]),
            ({}, True, []),
            ({}, None, []),
            ({"nullable": False}, False, ["optional"]),
        ],
    )
    def test_presence(
        self, schema: dict[str, Any], is_required: Optional[bool], expected: list[str]
    ) -> None:
        assert [link.name for link in presence_calls(schema, is_required)] == expected


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaultValue:
    @pytest.mark.parametrize(
        "schema,expected",
        [
            ({"type": "number", "default": 1.5}, 1.5),
            ({"type": "integer", "default": "7"}, 7.0),
            ({"type": "number", "default": "abc"}, None),
            ({"type": "number", "default": "nan"}, None),
            ({"type": "integer", "default": [1]}, None),
            ({"type": "boolean", "default": 0}, False),
            ({"type": "boolean", "default": "yes"}, True),
            ({"type": "string", "default": "x"}, "x"),
            ({"type": "array", "default": [1, 2]}, [1, 2]),
            ({"type": "string", "default": 5}, "5"),
            ({"type": "array", "default": "x"}, None),
            ({"type": "object", "default": {"a": 1}}, None),
            ({"default": 3}, None),
        ],
    )
    def test_coercion(self, schema: dict[str, Any], expected: Any) -> None:
        assert default_value(schema) == expected

    def test_rendered_default(self) -> None:
        assert _suffix({"type": "boolean", "default": False}) == ".default(false)"
        assert _suffix({"type": "array", "default": [1, 2, 3]}) == ".default([1, 2, 3])"
        assert _suffix({"type": "object", "default": {"a": 1}}) == ""
        assert _suffix({"type": "number", "default": "abc"}, False) == ".optional()"


class TestValidatorCalls:
    def test_full_chain_order(self) -> None:
        schema = {"type": "string", "minLength": 1, "nullable": True, "default": "a"}
        assert _suffix(schema, False) == '.min(1).nullish().default("a")'

    def test_optional_before_default(self) -> None:
        assert _suffix({"type": "integer", "default": 1}, False) == ".int().optional().default(1)"
