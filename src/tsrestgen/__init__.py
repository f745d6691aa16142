"""tsrestgen -- Generate ts-rest contracts with Zod schemas from OpenAPI 3.0/3.1 specs.

This package reads an OpenAPI document and emits a TypeScript module that
declares one Zod schema per reusable component schema (in dependency order)
and a ts-rest router with one contract entry per API operation.

Typical workflow::

    tsrestgen openapi.yaml -o contract.ts

or, from Python::

    from tsrestgen.generator import generate_contract

    source = generate_contract("openapi.yaml")

Modules:
    app: Typer CLI entry point.
    context: Per-document generation context (resolver, sorted schemas, operations).
    models: Pydantic models shared across the package.
    config: Generator configuration and precedence resolution.
    exceptions: Typed error hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    naming: Identifier normalisation helpers.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
