"""Loggers for ramlify.

Modules log through ``get_logger(__name__)``; the CLI decides how much of it
is shown with ``configure_logging``.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

ROOT = "ramlify"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the ramlify logger for a module.

    Loggers are flat below the root: ``ramlify.generation.endpoints`` logs as
    ``ramlify.endpoints``.
    """
    if name is None or name == ROOT:
        return logging.getLogger(ROOT)
    return logging.getLogger(f"{ROOT}.{name.rsplit('.', 1)[-1]}")


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Show DEBUG records with ``verbose``, only WARNING and above with ``quiet``, INFO otherwise.

    Calling it again only changes the level.
    """
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logger = logging.getLogger(ROOT)
    logger.setLevel(level)
    if not any(isinstance(handler, _StderrHandler) for handler in logger.handlers):
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False


class _StderrHandler(logging.StreamHandler):
    """Writes to the sys.stderr current at emit time."""

    @property  # type: ignore[override]
    def stream(self) -> TextIO:
        return sys.stderr

    @stream.setter
    def stream(self, value: TextIO) -> None:
        pass
