"""Generator configuration and precedence resolution.

A :class:`~tsrestgen.models.GeneratorConfig` is assembled from four layers,
highest precedence first:

1. CLI flags (``--format/--no-format``, ``--prettier``),
2. environment variables (``TSRESTGEN_FORMAT``, ``TSRESTGEN_PRETTIER``),
3. the project file ``./tsrestgen.json``,
4. model defaults.

See :func:`resolve_config`.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from tsrestgen.exceptions import ConfigError
from tsrestgen.models import GeneratorConfig

PROJECT_CONFIG_FILENAME = "tsrestgen.json"

ENV_FORMAT = "TSRESTGEN_FORMAT"
ENV_PRETTIER = "TSRESTGEN_PRETTIER"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def load_project_config(directory: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load ``tsrestgen.json`` from *directory* (default: the working directory).

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object.
    """
    path = (directory or Path.cwd()) / PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid value for {name}: {value!r} (expected 0/1/true/false)")


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        overrides["format"] = _parse_bool(ENV_FORMAT, env_format)
    env_prettier = os.environ.get(ENV_PRETTIER)
    if env_prettier:
        overrides["prettier_command"] = env_prettier
    return overrides


def resolve_config(
    cli_format: Optional[bool] = None,
    cli_prettier: Optional[str] = None,
    directory: Optional[Path] = None,
) -> GeneratorConfig:
    """Resolve the effective :class:`GeneratorConfig`.

    Precedence (high to low):
        1. CLI flags (``cli_format``, ``cli_prettier``)
        2. Environment variables (``TSRESTGEN_FORMAT``, ``TSRESTGEN_PRETTIER``)
        3. Project config (``./tsrestgen.json``)
        4. Defaults

    Args:
        cli_format: ``--format``/``--no-format``; ``None`` when not given.
        cli_prettier: ``--prettier`` command; ``None`` when not given.
        directory: Where to look for the project file; defaults to the
            current working directory.

    Raises:
        ConfigError: If the project file or an environment variable holds
            an invalid value.
    """
    # 4 + 3. Defaults, then the project file
    data: dict[str, Any] = dict(load_project_config(directory) or {})

    # 2. Environment variables
    data.update(_env_overrides())

    # 1. CLI flags
    if cli_format is not None:
        data["format"] = cli_format
    if cli_prettier is not None:
        data["prettier_command"] = cli_prettier

    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
