"""
Environment variable helpers.

Three layers, from pure to fatal:

- :func:`read_env` reports a tagged :class:`EnvValue` and has no side effects
- :func:`get_env` logs invalid values and returns ``None`` for them
- :func:`get_env_exit`, :func:`exit_on_error` and :func:`exit_on_failure`
  terminate the process on failure
"""

from .exit import EXIT_FAILURE, EXIT_MISSING_ENV, exit_on_error, exit_on_failure, get_env_exit
from .reader import get_env, read_env
from .settings import EnvReaderSettings, FileIndirectionEnvSource
from .types import FILE_PREFIX, EnvStatus, EnvValue

__all__ = [
    "EXIT_FAILURE",
    "EXIT_MISSING_ENV",
    "FILE_PREFIX",
    "EnvReaderSettings",
    "EnvStatus",
    "EnvValue",
    "FileIndirectionEnvSource",
    "exit_on_error",
    "exit_on_failure",
    "get_env",
    "get_env_exit",
    "read_env",
]
