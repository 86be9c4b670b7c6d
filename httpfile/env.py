"""Environment-variable placeholder expansion.

``{{NAME}}`` tokens are replaced with the value of the ``NAME`` environment
variable before a file is split into requests. Expansion works one line at
a time and never spans line breaks.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping

from httpfile.errors import MissingVariable

log = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def expand_placeholders(
    line: str, environ: Mapping[str, str] | None = None
) -> str:
    """Replace every ``{{NAME}}`` in *line* with its environment value.

    All placeholders are located on the original line and substituted in a
    single pass, so replacement values are inserted literally and never
    rescanned.

    Args:
        line: One line of the request file.
        environ: Variable lookup; defaults to ``os.environ``.

    Returns:
        The expanded line.

    Raises:
        MissingVariable: If a referenced variable is not set.
    """
    if environ is None:
        environ = os.environ

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        try:
            return environ[name]
        except KeyError:
            raise MissingVariable(name, line) from None

    return PLACEHOLDER_RE.sub(_substitute, line)


def expand_text(text: str, environ: Mapping[str, str] | None = None) -> str:
    """Expand placeholders on every line of *text*."""
    expanded = [expand_placeholders(line, environ) for line in text.split("\n")]
    log.debug("Expanded placeholders over %d lines", len(expanded))
    return "\n".join(expanded)
