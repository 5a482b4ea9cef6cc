"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import orjson
from structlog.typing import EventDict

from ..config import LogFormat, LoggingSettings, LogStream
from .formatters import ConsoleFormatter


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    @abstractmethod
    def emit(self, event_dict: EventDict) -> None:
        """Emit a log event to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class StdioSink(BaseSink):
    """Standard I/O sink with configurable format.

    Args:
        fmt: Output format - console (colored on a TTY) or json
        stream: Output stream (default: stderr)
        formatter: Console formatter, ignored for json
    """

    def __init__(
        self,
        fmt: LogFormat = LogFormat.CONSOLE,
        stream: Any = None,
        formatter: ConsoleFormatter | None = None,
    ):
        self._fmt = fmt
        self._stream = stream or sys.stderr
        self._formatter = formatter or ConsoleFormatter()

    def emit(self, event_dict: EventDict) -> None:
        if self._fmt == LogFormat.JSON:
            output = orjson_dumps(event_dict)
        else:
            use_color = bool(getattr(self._stream, "isatty", lambda: False)())
            output = self._formatter.format(event_dict, use_color=use_color)

        self._stream.write(output + "\n")
        self._stream.flush()

    def close(self) -> None:
        pass


class FileSink(BaseSink):
    """Local file sink with rotation (JSON lines)."""

    def __init__(self, path: str | Path, max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._max_bytes = max_bytes
        self._backup_count = backup_count
        self._file = open(self._path, "a", encoding="utf-8")

    def emit(self, event_dict: EventDict) -> None:
        self._file.write(orjson_dumps(event_dict) + "\n")
        self._file.flush()
        self._maybe_rotate()

    def _rotated(self, index: int) -> Path:
        return self._path.with_name(f"{self._path.name}.{index}")

    def _maybe_rotate(self) -> None:
        if self._path.stat().st_size <= self._max_bytes:
            return
        self._file.close()
        if self._backup_count > 0:
            for i in range(self._backup_count - 1, 0, -1):
                src = self._rotated(i)
                if src.exists():
                    src.replace(self._rotated(i + 1))
            self._path.replace(self._rotated(1))
        else:
            self._path.unlink()
        self._file = open(self._path, "a", encoding="utf-8")

    def close(self) -> None:
        self._file.close()


def build_sinks(settings: LoggingSettings) -> list[BaseSink]:
    """Create the sinks described by ``settings``."""
    formatter = ConsoleFormatter(
        timestamp_format=settings.console_timestamp_format,
        level_width=settings.console_level_width,
        logger_width=settings.console_logger_width,
        separator=settings.console_separator,
        show_logger=settings.show_logger,
    )
    stream = sys.stdout if settings.stream == LogStream.STDOUT else sys.stderr
    sinks: list[BaseSink] = [StdioSink(fmt=settings.format, stream=stream, formatter=formatter)]
    if settings.file_path:
        sinks.append(FileSink(settings.file_path, settings.file_max_bytes, settings.file_backup_count))
    return sinks
