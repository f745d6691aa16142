"""OpenAPI document parser -- load, resolve references, order schemas, extract operations.

This sub-package is the first half of the tsrestgen pipeline: it turns a raw
OpenAPI 3.x document (JSON or YAML, local file or remote URL) into the inputs
the contract generator consumes.

Typical usage::

    from tsrestgen.parser import (
        RefResolver,
        extract_operations,
        load_spec,
        sort_component_schemas,
    )

    document = load_spec("openapi.yaml")
    resolver = RefResolver(document)
    schemas = sort_component_schemas(document, resolver)
    operations = extract_operations(document, resolver)

Sub-modules:

* :mod:`~tsrestgen.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~tsrestgen.parser.refs` -- Kind-locked ``$ref`` parsing and
  resolution with a bounded chain length.
* :mod:`~tsrestgen.parser.schemas` -- Schema dependency graph and
  topological ordering.
* :mod:`~tsrestgen.parser.extractor` -- Produces
  :class:`~tsrestgen.models.OperationRecord` objects from ``paths``.
"""

from tsrestgen.parser.extractor import extract_operations
from tsrestgen.parser.loader import load_spec, validate_openapi_version
from tsrestgen.parser.refs import RefResolver, is_reference, parse_ref
from tsrestgen.parser.schemas import sort_component_schemas

__all__ = [
    "RefResolver",
    "extract_operations",
    "is_reference",
    "load_spec",
    "parse_ref",
    "sort_component_schemas",
    "validate_openapi_version",
]
