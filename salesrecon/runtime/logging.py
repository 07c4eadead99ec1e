"""Logging for the salesrecon namespace.

Every module logs through ``get_logger(__name__)``. Records go to stderr so
report tables on stdout stay clean. ``SALESRECON_LOG_LEVEL`` picks the
starting level; the CLI's ``--verbose`` flag lowers it to DEBUG.
"""

import logging
import os
import sys

LOGGER_NAMESPACE = "salesrecon"
DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"


def _formatter(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None) -> None:
    """Attach the stderr handler once; later calls are no-ops."""
    root = logging.getLogger(LOGGER_NAMESPACE)
    if root.handlers:
        return
    if level is None:
        name = os.environ.get("SALESRECON_LOG_LEVEL", "").upper()
        level = logging.getLevelNamesMapping().get(name, DEFAULT_LOG_LEVEL)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(level))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the namespace level, showing line numbers at DEBUG."""
    configure_logging(level)
    root = logging.getLogger(LOGGER_NAMESPACE)
    root.setLevel(level)
    for handler in root.handlers:
        handler.setFormatter(_formatter(level))
