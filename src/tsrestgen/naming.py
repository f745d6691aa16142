"""Identifier helpers used when naming generated declarations.

Two kinds of names appear in a generated contract module:

* **Schema declarations** (``const Pet = z.object(...)``) use the component
  name rewritten by :func:`format_identifier`, which replaces every character
  that is not valid in a TypeScript identifier.
* **Router keys** (``getPetById: {...}``) use :func:`camel_case` over the
  operation's ``operationId``, or :func:`path_to_variable_name` when the
  operation has none.
"""

from __future__ import annotations

import re

_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")
_INVALID_IDENTIFIER_CHARS_RE = re.compile(r"[^a-zA-Z0-9_$]")
_IDENTIFIER_START_RE = re.compile(r"[a-zA-Z_$]")


def split_words(value: str) -> list[str]:
    """Split *value* into words on separators, case changes and digit runs.

    ``"getHTTPResponse_v2"`` becomes ``["get", "HTTP", "Response", "v", "2"]``.
    """
    return _WORD_RE.findall(value)


def camel_case(value: str) -> str:
    """Convert *value* to ``camelCase``.

    Example::

        camel_case("get_pet-by.id")  # "getPetById"
        camel_case("ListPets")       # "listPets"
    """
    words = split_words(value)
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(word.capitalize() for word in tail)


def path_to_variable_name(path: str) -> str:
    """Derive a router key from a URL path template.

    Slashes, dots and opening braces act as word separators and closing
    braces are dropped before camel-casing::

        path_to_variable_name("/hello/world/{id}/text.it")  # "helloWorldIdTextIt"
    """
    dashed = re.sub(r"[/.{]", "-", path).replace("}", "")
    return camel_case(dashed)


def format_identifier(name: str) -> str:
    """Rewrite *name* into a valid TypeScript identifier.

    Characters outside ``[A-Za-z0-9_$]`` become underscores, and an
    underscore is prepended when the result does not start with a letter,
    ``_`` or ``$``.  The empty string becomes ``"_"``.
    """
    identifier = _INVALID_IDENTIFIER_CHARS_RE.sub("_", name)
    if not identifier or not _IDENTIFIER_START_RE.match(identifier):
        identifier = "_" + identifier
    return identifier
