"""Read OpenAPI documents from a URL, a local file, or stdin.

All I/O needed before generation happens here.  A *source* string is turned
into the plain ``dict`` that the rest of the pipeline walks; nothing in this
module knows about references, schemas or operations.

Public functions:

* :func:`load_spec` -- Fetch and parse a document from any supported source.
* :func:`validate_openapi_version` -- Reject documents that are not OpenAPI
  3.0.x / 3.1.x and return the declared version string.

Only a single, already-bundled document is supported: external ``$ref``
targets (other files or URLs) are not fetched.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from tsrestgen.exceptions import SpecParseError

logger = logging.getLogger(__name__)

_SUFFIX_HINTS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def load_spec(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load an OpenAPI document from URL, file path, or stdin (``"-"``).

    JSON and YAML are both accepted; the format is guessed from the file
    extension or response ``Content-Type`` and otherwise from the content.

    Args:
        source: An ``http(s)://`` URL, a file path, or ``"-"`` for stdin.
        timeout: Network timeout in seconds for URL sources.

    Returns:
        The parsed document.

    Raises:
        SpecParseError: If the source cannot be read or parsed.
    """
    if source == "-":
        logger.debug("Reading OpenAPI document from stdin")
        return _load_from_stdin()
    if source.startswith(("http://", "https://")):
        logger.debug("Fetching OpenAPI document from %s", source)
        return _load_from_url(source, timeout)
    logger.debug("Reading OpenAPI document from %s", source)
    return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content)


def _load_from_url(url: str, timeout: float) -> dict[str, Any]:
    """Fetch a document over HTTP(S), following redirects."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Read a local ``.json``/``.yaml``/``.yml`` file (or any text file)."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    return _parse_content(content, hint=_SUFFIX_HINTS.get(file_path.suffix.lower(), ""))


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON or YAML and require a mapping at the top level.

    JSON is tried first unless *hint* is ``"yaml"``.  A ``"json"`` hint
    disables the YAML fallback so that syntax errors are reported against
    the format the user actually wrote.

    Raises:
        SpecParseError: If the content is not a JSON/YAML object.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise SpecParseError(
        "Failed to parse spec as JSON or YAML" + "".join(f"\n  {e}" for e in errors)
    )


def _require_mapping(document: Any) -> dict[str, Any]:
    if not isinstance(document, dict):
        got = "empty document" if document is None else type(document).__name__
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {got})")
    return document


def validate_openapi_version(document: dict[str, Any]) -> str:
    """Check that *document* is OpenAPI 3.x and return its version string.

    Args:
        document: The parsed document.

    Returns:
        The ``openapi`` field as a string, e.g. ``"3.0.3"`` or ``"3.1.0"``.

    Raises:
        SpecParseError: For Swagger 2.x, a missing ``openapi`` field, or any
            major version other than 3.
    """
    if "swagger" in document:
        raise SpecParseError(
            f"Swagger {document['swagger']} is not supported. "
            "Only OpenAPI 3.0.x and 3.1.x are supported. "
            "Consider converting with https://converter.swagger.io"
        )

    version = document.get("openapi")
    if version is None:
        raise SpecParseError("Missing 'openapi' field. Is this an OpenAPI 3.x document?")

    version_str = str(version)
    if not version_str.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version_str}. "
            "Only OpenAPI 3.0.x and 3.1.x are supported."
        )
    return version_str
