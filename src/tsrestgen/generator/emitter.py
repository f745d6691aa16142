"""Emit the complete TypeScript contract module for an OpenAPI document.

:func:`generate_contract` is the single public entry point of the generator.
The emitted module contains, in order:

1. imports of ``initContract`` from ``@ts-rest/core`` and ``z`` from ``zod``,
2. ``const c = initContract();``,
3. one ``const`` per component schema, dependencies first,
4. ``export const schemas = { ... };`` (only when there are schemas),
5. ``export const contract = c.router({ ... });``.

Generation is all-or-nothing: any error aborts the run before any text is
returned.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from tsrestgen.context import GenerationContext
from tsrestgen.generator.compiler import SchemaCompiler
from tsrestgen.generator.contract import ContractAssembler
from tsrestgen.generator.expressions import obj, render
from tsrestgen.generator.formatter import format_source
from tsrestgen.models import GeneratorConfig
from tsrestgen.parser.loader import load_spec, validate_openapi_version

logger = logging.getLogger(__name__)

_PRELUDE = (
    'import { initContract } from "@ts-rest/core";',
    'import { z } from "zod";',
    "",
    "const c = initContract();",
)


def generate_contract(
    source: Union[dict[str, Any], str],
    config: Optional[GeneratorConfig] = None,
) -> str:
    """Generate the ts-rest contract module for an OpenAPI document.

    Args:
        source: The loaded document, or a file path / URL / ``"-"`` to load
            it from.
        config: Generator settings; defaults are used when omitted.

    Returns:
        The module source text, formatted with prettier when
        ``config.format`` is set and prettier is available.

    Raises:
        TsRestGenError: Any subclass, if the document cannot be loaded or
            contains something the contract cannot express.

    Example::

        from tsrestgen.generator import generate_contract
        from tsrestgen.models import GeneratorConfig

        text = generate_contract("openapi.yaml", GeneratorConfig(format=False))
    """
    config = config or GeneratorConfig()

    document = load_spec(source) if isinstance(source, str) else source
    if config.validate_version:
        validate_openapi_version(document)

    ctx = GenerationContext.from_document(document)
    text = render_module(ctx)

    if config.format:
        text = format_source(text, config.prettier_command, config.format_timeout)
    return text


def render_module(ctx: GenerationContext) -> str:
    """Render the unformatted module text for *ctx*."""
    compiler = SchemaCompiler(ctx)
    assembler = ContractAssembler(ctx, compiler)

    lines = list(_PRELUDE)
    lines.append("")

    if ctx.schemas:
        for entry in ctx.schemas:
            expression = compiler.compile(entry.schema_)
            lines.append(f"const {entry.normalized_identifier} = {render(expression)};")
        lines.append("")
        exported = obj(*((entry.normalized_identifier, None) for entry in ctx.schemas))
        lines.append(f"export const schemas = {render(exported)};")
        lines.append("")

    entries = assembler.assemble_all()
    logger.debug("Assembled %d contract entries", len(entries))
    lines.append(f"export const contract = {render(assembler.router(entries))};")

    return "\n".join(lines) + "\n"
