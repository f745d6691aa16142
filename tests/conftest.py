"""Shared test fixtures for tsrestgen.

Provides the fixture directory, raw OpenAPI documents, helpers for building
a :class:`~tsrestgen.context.GenerationContext` from an inline document, and
the CLI runner.  These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from tsrestgen.context import GenerationContext
from tsrestgen.generator.compiler import SchemaCompiler
from tsrestgen.generator.expressions import render
from tsrestgen.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_document(
    paths: Optional[dict[str, Any]] = None,
    schemas: Optional[dict[str, Any]] = None,
    **components: Any,
) -> dict[str, Any]:
    """Build a minimal OpenAPI 3.0 document.

    Extra keyword arguments become additional ``components`` sections, e.g.
    ``parameters={...}``.
    """
    document: dict[str, Any] = {
        "openapi": "3.0.3",
        "info": {"title": "Test", "version": "1.0"},
        "paths": paths or {},
    }
    sections = dict(components)
    if schemas is not None:
        sections["schemas"] = schemas
    if sections:
        document["components"] = sections
    return document


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager's console holds a reference to sys.stderr at creation
    time.  When Typer's CliRunner redirects the stream and the test
    finishes, that reference becomes stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw petstore (OpenAPI 3.0) document."""
    with open(FIXTURES_DIR / "petstore.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES_DIR / "petstore.json"


@pytest.fixture
def petstore_ctx(petstore_raw: dict[str, Any]) -> GenerationContext:
    """Generation context for the petstore document."""
    return GenerationContext.from_document(petstore_raw)


# ---------------------------------------------------------------------------
# Compilation helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def compile_schema() -> Callable[..., str]:
    """Compile a schema and return the rendered Zod expression.

    Usage::

        compile_schema({"type": "string"})                      # 'z.string()'
        compile_schema({"$ref": "..."}, schemas={"Pet": {...}})  # 'Pet'
        compile_schema({"type": "string"}, is_required=False)    # '....optional()'
    """

    def _compile(
        schema: Any,
        is_required: Optional[bool] = None,
        schemas: Optional[dict[str, Any]] = None,
    ) -> str:
        ctx = GenerationContext.from_document(make_document(schemas=schemas))
        return render(SchemaCompiler(ctx).compile(schema, is_required))

    return _compile


@pytest.fixture
def build_document() -> Callable[..., dict[str, Any]]:
    """Return :func:`make_document` for tests that build inline documents."""
    return make_document


@pytest.fixture
def build_context() -> Callable[..., GenerationContext]:
    """Build a :class:`GenerationContext` from :func:`make_document` arguments."""

    def _build(**kwargs: Any) -> GenerationContext:
        return GenerationContext.from_document(make_document(**kwargs))

    return _build


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
