"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~tsrestgen.exceptions.TsRestGenError` subclass.
Build scripts can inspect the exit code to tell a broken input document
apart from a contract that cannot be expressed.

Example::

    $ tsrestgen broken.yaml -o contract.ts
    $ echo $?
    7   # EXIT_SPEC_ERROR -- the document could not be loaded or resolved
"""

EXIT_SUCCESS = 0
"""The contract was generated successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_SPEC_ERROR = 7
"""The OpenAPI document could not be parsed, or one of its references is broken."""

EXIT_CONTRACT_ERROR = 8
"""The document is valid but contains a construct the contract cannot express."""

EXIT_INTERNAL_ERROR = 70
"""An internal invariant was violated (EX_SOFTWARE)."""
