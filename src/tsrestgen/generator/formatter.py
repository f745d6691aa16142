"""Optional re-formatting of generated source through prettier.

The generator's own printer emits correct but unindented TypeScript.  When
prettier is available on ``PATH`` the text is piped through it.  Any failure
(missing executable, non-zero exit, timeout) is logged at DEBUG level and the
unformatted text is returned unchanged, so formatting never makes a
generation run fail.
"""

from __future__ import annotations

import logging
import shlex
import subprocess

logger = logging.getLogger(__name__)

STDIN_FILEPATH = "contract.ts"


def format_source(
    source: str, command: str = "prettier", timeout: float = 30.0
) -> str:
    """Return *source* formatted by prettier, or *source* itself on failure.

    Args:
        source: TypeScript module text.
        command: Command line used to invoke prettier, e.g. ``"npx prettier"``.
        timeout: Seconds to wait for the formatter before giving up.
    """
    argv = [*shlex.split(command), "--stdin-filepath", STDIN_FILEPATH]
    try:
        result = subprocess.run(
            argv,
            input=source,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Formatter %r failed, keeping unformatted output: %s", command, exc)
        return source

    if not result.stdout.strip():
        logger.debug("Formatter %r produced no output, keeping unformatted output", command)
        return source
    return result.stdout
