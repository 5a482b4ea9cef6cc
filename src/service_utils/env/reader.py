"""
Environment variable reading.

:func:`read_env` is the pure layer: it never logs and never exits, it only
reports what it found. :func:`get_env` adds the diagnostics.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from ..logging.core import get_logger
from .types import FILE_PREFIX, EnvStatus, EnvValue

logger = get_logger("service_utils.env")


def resolve_value(key: str, raw: Optional[str]) -> EnvValue:
    """Validate a raw value and follow ``file:`` indirection."""
    if raw is None:
        return EnvValue(key, EnvStatus.UNSET)

    value = raw.strip()
    if not value:
        return EnvValue(key, EnvStatus.EMPTY)

    if not value.startswith(FILE_PREFIX):
        return EnvValue(key, EnvStatus.PRESENT, value=value, source="literal")

    path = value[len(FILE_PREFIX) :]
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return EnvValue(key, EnvStatus.FILE_UNREADABLE, source="file", path=path, error=e)
    return EnvValue(key, EnvStatus.PRESENT, value=content.strip(), source="file", path=path)


def read_env(key: str, environ: Optional[Mapping[str, str]] = None) -> EnvValue:
    """Read ``key`` from ``environ`` (default: the process environment)."""
    source = os.environ if environ is None else environ
    return resolve_value(key, source.get(key))


def report(result: EnvValue) -> None:
    """Log the diagnostic for an invalid result. Unset variables are not reported."""
    if result.status is EnvStatus.EMPTY:
        logger.error(f"Env var {result.key} set but empty.")
    elif result.status is EnvStatus.FILE_UNREADABLE:
        logger.error(f"Failed to read file {result.path}: {result.error}")


def get_env(key: str) -> Optional[str]:
    """
    Return the trimmed value of ``key``, or ``None``.

    ``None`` is returned silently when the variable is unset, and after an
    error diagnostic when it is blank or points at an unreadable file.
    """
    result = read_env(key)
    report(result)
    return result.value
