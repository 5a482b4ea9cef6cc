"""
Filter directives.

A filter specification is a comma-separated list of directives, each one of:

- ``target=level``: records from ``target`` (and its children) at ``level`` or above
- ``level``: fallback for records no target directive matches
- ``target``: every record from ``target``

Targets are logger names. ``::`` separators are accepted and normalized to ``.``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from structlog.typing import EventDict, WrappedLogger
from structlog import DropEvent

# structlog's filtering loggers stop at DEBUG, so "trace" opens everything up.
OFF = logging.CRITICAL + 10

LEVELS: dict[str, int] = {
    "trace": logging.NOTSET,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "off": OFF,
}

_LEVEL_NAMES: dict[int, str] = {
    logging.NOTSET: "trace",
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "critical",
    OFF: "off",
}


class FilterParseError(ValueError):
    """Raised when a filter specification cannot be parsed."""

    def __init__(self, directive: str, reason: str):
        self.directive = directive
        self.reason = reason
        super().__init__(f"invalid filter directive {directive!r}: {reason}")


@dataclass(frozen=True)
class Directive:
    """A single ``target=level`` entry. ``target`` is ``None`` for the fallback level."""

    target: str | None
    level: int

    def matches(self, name: str) -> bool:
        if self.target is None:
            return True
        return name == self.target or name.startswith(self.target + ".")

    def __str__(self) -> str:
        level = _LEVEL_NAMES[self.level]
        if self.target is None:
            return level
        return f"{self.target}={level}"


def _parse_level(raw: str, directive: str) -> int:
    try:
        return LEVELS[raw.strip().lower()]
    except KeyError:
        raise FilterParseError(directive, f"unknown level {raw.strip()!r}") from None


def _parse_target(raw: str, directive: str) -> str:
    target = raw.strip().replace("::", ".")
    if not target or any(c.isspace() for c in target):
        raise FilterParseError(directive, "invalid target")
    return target


def parse_directive(raw: str) -> Directive:
    """Parse one directive entry."""
    text = raw.strip()
    if "=" in text:
        target, _, level = text.partition("=")
        return Directive(_parse_target(target, text), _parse_level(level, text))
    if text.lower() in LEVELS:
        return Directive(None, LEVELS[text.lower()])
    return Directive(_parse_target(text, text), logging.NOTSET)


@dataclass(frozen=True)
class FilterSpec:
    """An ordered set of directives resolving a minimum level per logger name."""

    directives: tuple[Directive, ...] = ()

    @classmethod
    def parse(cls, spec: str) -> FilterSpec:
        """Parse a comma-separated specification. Empty entries are skipped."""
        directives = tuple(parse_directive(part) for part in spec.split(",") if part.strip())
        return cls(directives)

    def level_for(self, name: str) -> int:
        """Minimum enabled level for ``name``; ``OFF`` when nothing matches."""
        best: Directive | None = None
        fallback = OFF
        for directive in self.directives:
            if directive.target is None:
                fallback = directive.level
            elif directive.matches(name):
                if best is None or len(directive.target) >= len(best.target or ""):
                    best = directive
        return best.level if best is not None else fallback

    def enabled(self, name: str, level: int) -> bool:
        return level >= self.level_for(name)

    @property
    def min_level(self) -> int:
        """Lowest level any directive enables, used to pre-filter in the bound logger."""
        if not self.directives:
            return OFF
        return min(d.level for d in self.directives)

    def __str__(self) -> str:
        return ",".join(str(d) for d in self.directives)


class DirectiveFilter:
    """structlog processor dropping events the filter spec does not enable.

    Must run after ``add_log_level`` and after the logger name is resolved into
    ``event_dict["logger"]``.
    """

    def __init__(self, spec: FilterSpec):
        self.spec = spec

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        level = LEVELS.get(str(event_dict.get("level", "info")).lower(), logging.INFO)
        if not self.spec.enabled(str(event_dict.get("logger", "root")), level):
            raise DropEvent
        return event_dict
