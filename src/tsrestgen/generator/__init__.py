"""Contract generator -- compile schemas and operations into a ts-rest module.

This sub-package is the second half of the tsrestgen pipeline: taking a
:class:`~tsrestgen.context.GenerationContext` (built by the parser) and
emitting TypeScript source.

Typical usage::

    from tsrestgen.generator import generate_contract

    text = generate_contract("https://petstore3.swagger.io/api/v3/openapi.json")

Sub-modules:

* :mod:`~tsrestgen.generator.expressions` -- The TypeScript expression tree
  and its printer.
* :mod:`~tsrestgen.generator.validators` -- Constraint/suffix chains and
  regex pattern sanitizing.
* :mod:`~tsrestgen.generator.compiler` -- Schema to Zod expression compiler.
* :mod:`~tsrestgen.generator.contract` -- Per-operation contract entries and
  status-code expansion.
* :mod:`~tsrestgen.generator.emitter` -- Whole-module emission.
* :mod:`~tsrestgen.generator.formatter` -- Optional prettier pass.
"""

from tsrestgen.generator.compiler import SchemaCompiler
from tsrestgen.generator.contract import ContractAssembler, ContractEntry
from tsrestgen.generator.emitter import generate_contract, render_module

__all__ = [
    "ContractAssembler",
    "ContractEntry",
    "SchemaCompiler",
    "generate_contract",
    "render_module",
]
