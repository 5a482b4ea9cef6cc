"""
Log formatters and color utilities.
"""

from __future__ import annotations

from datetime import datetime, timezone

from structlog.typing import EventDict

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "timestamp": "\033[90m",
    "logger": "\033[35m",
    "key": "\033[34m",
}

LEVEL_COLORS = {
    "DEBUG": "\033[34m",
    "INFO": "\033[32m",
    "WARN": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[1;31m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Human-readable single-line rendering with fixed-width columns.

    The logger column is omitted unless ``show_logger`` is set, so lines carry
    only timestamp, level and message.
    """

    EXCLUDED_KEYS = {"level", "message", "event", "logger", "timestamp", "_name"}

    def __init__(
        self,
        *,
        timestamp_format: str = "%Y-%m-%d %H:%M:%S",
        level_width: int = 5,
        logger_width: int = 32,
        separator: str = " ",
        show_logger: bool = False,
    ):
        self.timestamp_format = timestamp_format
        self.level_width = level_width
        self.logger_width = logger_width
        self.separator = separator
        self.show_logger = show_logger

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    def _format_timestamp(self, raw_timestamp: str | None) -> str:
        if raw_timestamp:
            try:
                dt = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
                if dt.tzinfo is None:
                    dt = dt.replace(tzinfo=timezone.utc)
                return dt.astimezone().strftime(self.timestamp_format)
            except (ValueError, TypeError):
                pass
        return datetime.now().strftime(self.timestamp_format)

    @staticmethod
    def _level_label(level: str) -> str:
        label = level.upper()
        return "WARN" if label == "WARNING" else label

    def format(self, event_dict: EventDict, *, use_color: bool = True) -> str:
        """Format an event dict into an aligned string."""
        message = str(event_dict.get("message", event_dict.get("event", "")))

        extras = []
        for k, v in event_dict.items():
            if k in self.EXCLUDED_KEYS:
                continue
            key = colorize(k, "key") if use_color else k
            value = colorize(str(v), "dim") if use_color else str(v)
            extras.append(f"{key}={value}")
        if extras:
            message = f"{message} " + " ".join(extras)

        label = self._level_label(str(event_dict.get("level", "info")))
        level_text = self._fit_right(label, self.level_width)
        if use_color and label in LEVEL_COLORS:
            level_text = f"{LEVEL_COLORS[label]}{level_text}{COLORS['reset']}"

        timestamp = self._format_timestamp(event_dict.get("timestamp"))
        columns = [colorize(timestamp, "timestamp") if use_color else timestamp, level_text]
        if self.show_logger:
            logger_text = self._fit_right(str(event_dict.get("logger", "root")), self.logger_width)
            columns.append(colorize(logger_text, "logger") if use_color else logger_text)
        columns.append(message)
        return self.separator.join(columns)
