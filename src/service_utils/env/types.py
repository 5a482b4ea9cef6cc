"""Tagged results for environment variable reads."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional

FILE_PREFIX = "file:"

ValueSource = Literal["literal", "file"]


class EnvStatus(Enum):
    """Outcome of reading one environment variable."""

    PRESENT = "present"
    UNSET = "unset"
    EMPTY = "empty"  # set, but blank after trimming
    FILE_UNREADABLE = "file_unreadable"


@dataclass(frozen=True)
class EnvValue:
    """Tagged result of :func:`service_utils.env.read_env`.

    ``value`` is only set for ``PRESENT``; ``path`` is set whenever the raw
    value used the ``file:`` prefix, and ``error`` carries the read failure.
    """

    key: str
    status: EnvStatus
    value: Optional[str] = None
    source: Optional[ValueSource] = None
    path: Optional[str] = None
    error: Optional[OSError | UnicodeDecodeError] = None

    @property
    def ok(self) -> bool:
        return self.status is EnvStatus.PRESENT
