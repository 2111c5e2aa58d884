"""Environment variable overrides for harness runs.

Blank values count as unset. Values that do not parse are logged and ignored
so a stray export never aborts a test session.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

_LOGGER = logging.getLogger(__name__)


def env_value(name: str) -> str | None:
    """Return the stripped value of ``name``, or ``None`` when unset or blank.

    Returns
    -------
    str | None
        Stripped value.
    """
    value = os.environ.get(name, "").strip()
    return value or None


def env_int(name: str, *, default: int | None = None) -> int | None:
    """Return ``name`` parsed as an integer.

    Returns
    -------
    int | None
        Parsed value, or ``default`` when unset or not an integer.
    """
    value = env_value(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        _LOGGER.warning("Ignoring %s=%r: not an integer", name, value)
        return default


def env_path(name: str) -> Path | None:
    """Return ``name`` as a user-expanded path.

    Returns
    -------
    Path | None
        Path, or ``None`` when unset.
    """
    value = env_value(name)
    return Path(value).expanduser() if value is not None else None


__all__ = ["env_int", "env_path", "env_value"]
