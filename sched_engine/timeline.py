from __future__ import annotations

import logging
from typing import List

from .errors import SchedulerInvariantError
from .models import IDLE_PID, ExecutionInterval, Process

logger = logging.getLogger(__name__)


class TimelineBuilder:
    """
    Accumulates execution intervals and owns the simulation clock.

    Every policy drives the clock exclusively through ``advance_to`` and
    ``run``, so idle gaps are always explicit and a process's completion time
    is recorded at the exact moment its remaining time reaches zero.
    """

    def __init__(self, start_time: int = 0) -> None:
        self._clock = start_time
        self._intervals: List[ExecutionInterval] = []

    @property
    def current_time(self) -> int:
        return self._clock

    @property
    def intervals(self) -> List[ExecutionInterval]:
        return list(self._intervals)

    def advance_to(self, time: int) -> None:
        """Move the clock forward to ``time``, emitting an idle interval for the gap."""
        if time <= self._clock:
            return
        logger.debug("CPU idle from %d to %d", self._clock, time)
        self._intervals.append(ExecutionInterval(pid=IDLE_PID, start_time=self._clock, end_time=time))
        self._clock = time

    def run(self, process: Process, duration: int) -> ExecutionInterval:
        """
        Execute ``process`` for ``duration`` time units starting at the current clock.
        """
        if duration <= 0:
            raise SchedulerInvariantError(
                f"Interval for {process.pid} at t={self._clock} has non-positive duration {duration}"
            )
        if process.finished:
            raise SchedulerInvariantError(f"{process.pid} dispatched after it already finished")
        if duration > process.remaining_time:
            raise SchedulerInvariantError(
                f"{process.pid} asked to run {duration} but only {process.remaining_time} remains"
            )

        interval = ExecutionInterval(pid=process.pid, start_time=self._clock, end_time=self._clock + duration)
        self._intervals.append(interval)
        logger.debug("Run %s from %d to %d", process.pid, interval.start_time, interval.end_time)

        if process.start_time is None:
            process.start_time = interval.start_time

        self._clock = interval.end_time
        process.remaining_time -= duration

        if process.remaining_time == 0:
            # Finished is terminal; this is the only place completion is set.
            process.completion_time = self._clock

        return interval
