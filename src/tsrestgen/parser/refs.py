"""Parse and resolve ``#/components/...`` references.

Unlike a bundler, this module never inlines or copies anything: a reference
is resolved by looking it up in ``document["components"]`` and the caller
receives the very object stored there.  That keeps schema identity intact so
the compiler can recognise a reference to a named schema and emit its
identifier instead of re-expanding it.

Resolution is *kind-locked*: a chain that starts in ``schemas`` must stay in
``schemas``.  A component that is itself a reference is followed until a
concrete object is reached, up to :data:`MAX_RESOLUTION_DEPTH` hops, which
turns an ``A -> B -> A`` alias loop into a typed error instead of a hang.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from tsrestgen.exceptions import (
    InvalidRefError,
    RefResolutionDepthExceededError,
    ResolveRefError,
)

COMPONENT_KINDS = (
    "schemas",
    "parameters",
    "requestBodies",
    "responses",
    "headers",
    "pathItems",
)
"""Component sections a reference may point into."""

MAX_RESOLUTION_DEPTH = 100


class ParsedRef(NamedTuple):
    kind: str
    name: str


def is_reference(obj: Any) -> bool:
    """Return ``True`` if *obj* is a Reference Object (a mapping with ``$ref``)."""
    return isinstance(obj, dict) and "$ref" in obj


def parse_ref(ref: str) -> ParsedRef:
    """Split ``#/components/{kind}/{name}`` into its kind and name.

    JSON Pointer escapes (``~1`` for ``/``, ``~0`` for ``~``) in the name are
    decoded.

    Raises:
        InvalidRefError: If *ref* is not a string, names an unknown kind,
            has an empty name, or has extra path segments.
    """
    if not isinstance(ref, str):
        raise InvalidRefError(str(ref))

    for kind in COMPONENT_KINDS:
        prefix = f"#/components/{kind}/"
        if ref.startswith(prefix):
            name = ref[len(prefix):]
            if not name or "/" in name:
                raise InvalidRefError(ref)
            return ParsedRef(kind, name.replace("~1", "/").replace("~0", "~"))

    raise InvalidRefError(ref)


def make_ref(kind: str, name: str) -> str:
    """Build the reference string for component *name* of *kind*."""
    return f"#/components/{kind}/{name.replace('~', '~0').replace('/', '~1')}"


class RefResolver:
    """Resolve references against a single, immutable OpenAPI document.

    Args:
        document: The loaded OpenAPI document.

    Example::

        resolver = RefResolver(document)
        pet = resolver.resolve_ref("#/components/schemas/Pet")
        param = resolver.resolve_object({"$ref": "#/components/parameters/Limit"})
    """

    def __init__(self, document: dict[str, Any]) -> None:
        self.document = document
        self._components: dict[str, Any] = document.get("components") or {}

    def resolve_ref(self, ref: str) -> dict[str, Any]:
        """Return the concrete component that *ref* points to.

        If the target is itself a reference it is followed, as long as it
        stays within the same component kind.

        Raises:
            InvalidRefError: If any reference in the chain is malformed.
            ResolveRefError: If a target is missing or the chain changes kind.
                The error always names the *original* reference.
            RefResolutionDepthExceededError: If the chain is longer than
                :data:`MAX_RESOLUTION_DEPTH` hops.
        """
        kind = parse_ref(ref).kind
        current = ref
        depth = 0
        while True:
            if depth > MAX_RESOLUTION_DEPTH:
                raise RefResolutionDepthExceededError(ref)

            current_kind, name = parse_ref(current)
            if current_kind != kind:
                raise ResolveRefError(ref)

            section = self._components.get(kind)
            target = section.get(name) if isinstance(section, dict) else None
            if not isinstance(target, dict):
                raise ResolveRefError(ref)

            if not is_reference(target):
                return target

            current = target["$ref"]
            depth += 1

    def resolve_object(self, ref_or_object: dict[str, Any]) -> dict[str, Any]:
        """Return *ref_or_object* itself, or the component it references."""
        if is_reference(ref_or_object):
            return self.resolve_ref(ref_or_object["$ref"])
        return ref_or_object
