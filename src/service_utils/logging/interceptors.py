"""
Interceptors for capturing standard library logs.
"""

import logging

import structlog


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging events to structlog.

    Records keep their logger name so filter directives apply to them the same
    way they apply to structlog loggers.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.name == "structlog" or record.name.startswith("structlog."):
                return

            msg = self.format(record)
            logger = structlog.get_logger(_name=record.name or "stdlib")
            logger.log(_nearest_level(record.levelno), msg)
        except Exception:
            self.handleError(record)


def _nearest_level(levelno: int) -> int:
    """Round custom stdlib levels down to one structlog can dispatch."""
    for level in (logging.CRITICAL, logging.ERROR, logging.WARNING, logging.INFO):
        if levelno >= level:
            return level
    return logging.DEBUG


def install_stdlib_redirect(level: int) -> RedirectStdLibHandler:
    """Route the root stdlib logger through structlog, replacing its handlers."""
    handler = RedirectStdLibHandler()
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    return handler
