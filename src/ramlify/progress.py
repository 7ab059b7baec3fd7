from __future__ import annotations

import logging
import time

from .log import get_logger


class Todo:
    """Reports a list of tasks as they start and finish.

    Tasks are assumed to run one after another: starting a task finishes
    the current one.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_logger(__name__)
        self._current: str | None = None
        self._started = 0.0

    @property
    def current(self) -> str | None:
        return self._current

    def start(self, name: str) -> None:
        if self._current is not None:
            self.finish()
        self._logger.info("> %s", name)
        self._current = name
        self._started = time.monotonic()

    def finish(self) -> None:
        if self._current is None:
            return
        elapsed_ms = (time.monotonic() - self._started) * 1000
        self._logger.info("done %s (%dms)", self._current, elapsed_ms)
        self._current = None
