from __future__ import annotations

from typing import Optional


class SchedulerError(Exception):
    """Base class for everything the scheduling engine raises."""


class InvalidInputError(SchedulerError, ValueError):
    """
    The caller's request was rejected before any simulation started.

    ``pid`` names the offending process when the failed constraint belongs
    to a single one.
    """

    def __init__(self, message: str, pid: Optional[str] = None) -> None:
        super().__init__(message)
        self.pid = pid


class WorkloadFormatError(InvalidInputError):
    """A workload file could not be parsed into processes."""


class SchedulerInvariantError(SchedulerError, RuntimeError):
    """
    The engine produced an impossible schedule. This is a bug in the engine,
    never a consequence of caller input.
    """
