"""Exception hierarchy for tsrestgen.

All exceptions inherit from :class:`TsRestGenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`tsrestgen.exit_codes`
and a stable ``kind`` string naming the failure category.  The CLI entry
point in :func:`tsrestgen.app.main` catches ``TsRestGenError`` and exits with
the appropriate code.  Generation never produces partial output: the first
error aborts the whole run.

Subclass hierarchy::

    TsRestGenError (exit 1)
    +-- InvalidUsageError                       (exit 2)
    +-- ConfigError                             (exit 1)
    +-- SpecParseError                          (exit 7)
    +-- InvalidRefError                         (exit 7)
    +-- ResolveRefError                         (exit 7)
    +-- RefResolutionDepthExceededError         (exit 7)
    +-- CircularRefDependencyError              (exit 7)
    +-- InvalidHttpMethodError                  (exit 7)
    +-- InvalidStatusCodeError                  (exit 7)
    +-- MissingSchemaInParameterObjectError     (exit 8)
    +-- MissingContentTypeError                 (exit 8)
    +-- UnsupportedRequestBodyContentTypeError  (exit 8)
    +-- NotImplementedError_                    (exit 8)
    +-- UnexpectedError                         (exit 70)
"""

from __future__ import annotations

from tsrestgen.exit_codes import (
    EXIT_CONTRACT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INTERNAL_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_ERROR,
)


class TsRestGenError(Exception):
    """Base exception for all tsrestgen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`tsrestgen.exit_codes`.  ``kind`` defaults to the
    class name and is what callers should match on when they need a stable
    identifier.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    kind: str = "TsRestGenError"

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if "kind" not in cls.__dict__:
            cls.kind = cls.__name__

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(TsRestGenError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(TsRestGenError):
    """Raised for configuration problems (invalid JSON, bad values, unparsable env vars)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecParseError(TsRestGenError):
    """Raised when the OpenAPI document cannot be loaded, parsed, or is not OpenAPI 3.x."""

    exit_code = EXIT_SPEC_ERROR


# --------------------------------------------------------------------------- #
# Reference errors
# --------------------------------------------------------------------------- #


class InvalidRefError(TsRestGenError):
    """Raised when a ``$ref`` string is not of the form ``#/components/{kind}/{name}``."""

    exit_code = EXIT_SPEC_ERROR

    def __init__(self, ref: str):
        super().__init__(f"Invalid reference: {ref}")
        self.ref = ref


class ResolveRefError(TsRestGenError):
    """Raised when a reference points at a missing component or crosses kinds."""

    exit_code = EXIT_SPEC_ERROR

    def __init__(self, ref: str):
        super().__init__(f"Could not resolve reference: {ref}")
        self.ref = ref


class RefResolutionDepthExceededError(TsRestGenError):
    """Raised when a reference chain is longer than the resolver allows."""

    exit_code = EXIT_SPEC_ERROR

    def __init__(self, ref: str):
        super().__init__(f"Reference resolution depth exceeded: {ref}")
        self.ref = ref


class CircularRefDependencyError(TsRestGenError):
    """Raised when named schemas depend on each other in a cycle.

    ``path`` starts and ends with the same reference, e.g.
    ``["#/components/schemas/A", "#/components/schemas/B", "#/components/schemas/A"]``.
    """

    exit_code = EXIT_SPEC_ERROR

    def __init__(self, path: list[str]):
        super().__init__(f"Circular reference dependency found: {' -> '.join(path)}")
        self.path = list(path)


# --------------------------------------------------------------------------- #
# Operation errors
# --------------------------------------------------------------------------- #


class InvalidHttpMethodError(TsRestGenError):
    """Raised when a path item has a key that is neither a method nor a known field."""

    exit_code = EXIT_SPEC_ERROR

    def __init__(self, method: str, path: str):
        super().__init__(f"Invalid HTTP method at path {path}: {method}")
        self.method = method
        self.path = path


class InvalidStatusCodeError(TsRestGenError):
    """Raised when a response key is not ``NNN``, ``Nxx`` or ``default``."""

    exit_code = EXIT_SPEC_ERROR

    def __init__(self, method: str, path: str, status_code: str):
        super().__init__(f"Invalid status code at path {method} {path}: {status_code}")
        self.method = method
        self.path = path
        self.status_code = status_code


# --------------------------------------------------------------------------- #
# Contract errors
# --------------------------------------------------------------------------- #


class MissingSchemaInParameterObjectError(TsRestGenError):
    """Raised when a parameter object has no ``schema``."""

    exit_code = EXIT_CONTRACT_ERROR

    def __init__(self, name: str):
        super().__init__(f"Missing schema in parameter object: {name}")
        self.name = name


class MissingContentTypeError(TsRestGenError):
    """Raised when a request body declares an empty ``content`` map."""

    exit_code = EXIT_CONTRACT_ERROR


class UnsupportedRequestBodyContentTypeError(TsRestGenError):
    """Raised when no request body content type is JSON-like or in the allow-list."""

    exit_code = EXIT_CONTRACT_ERROR

    def __init__(self, content_type: str):
        super().__init__(f"Unsupported request body content type: {content_type}")
        self.content_type = content_type


class NotImplementedError_(TsRestGenError):
    """Raised for a recognised schema shape that has no Zod translation.

    Named with a trailing underscore to avoid shadowing the built-in
    ``NotImplementedError``.
    """

    exit_code = EXIT_CONTRACT_ERROR
    kind = "NotImplementedError"


class UnexpectedError(TsRestGenError):
    """Raised when a schema reaches a shape outside the compiler's dispatch table."""

    exit_code = EXIT_INTERNAL_ERROR
