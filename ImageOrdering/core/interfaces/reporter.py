"""
Progress reporting passed into the engine.

The engine never logs progress on its own; callers hand in a reporter.
``NullReporter`` is the engine default, ``LoggingReporter`` routes stages
and progress to the package logger.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional


class IProgressReporter(ABC):
    """Receives stage changes and progress counts"""

    @abstractmethod
    def stage(self, name: str, **info: Any) -> None:
        """A new stage started"""
        pass

    @abstractmethod
    def progress(self, name: str, done: int, total: int) -> None:
        """``done`` out of ``total`` units of stage ``name`` are finished"""
        pass


class NullReporter(IProgressReporter):
    """Reporter that discards everything"""

    def stage(self, name: str, **info: Any) -> None:
        pass

    def progress(self, name: str, done: int, total: int) -> None:
        pass


class LoggingReporter(IProgressReporter):
    """
    Reporter writing to a logger.

    Stages are logged at INFO. Progress is logged at DEBUG, and only every
    ``every_percent`` percent so large batches do not flood the log.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, every_percent: int = 10):
        self.logger = logger or logging.getLogger("ImageOrdering.progress")
        self.every_percent = max(1, every_percent)
        self._last_percent = {}

    def stage(self, name: str, **info: Any) -> None:
        if info:
            details = ", ".join(f"{key}={value}" for key, value in info.items())
            self.logger.info(f"{name} ({details})")
        else:
            self.logger.info(name)
        self._last_percent.pop(name, None)

    def progress(self, name: str, done: int, total: int) -> None:
        if total <= 0:
            return
        percent = (100 * done) // total
        last = self._last_percent.get(name, -self.every_percent)
        if percent - last >= self.every_percent or done == total:
            self._last_percent[name] = percent
            self.logger.debug(f"{name}: {done}/{total} ({percent}%)")


def resolve_reporter(reporter: Optional[IProgressReporter]) -> IProgressReporter:
    return reporter if reporter is not None else NullReporter()
