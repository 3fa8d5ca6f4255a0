from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .errors import InvalidInputError, SchedulerInvariantError
from .metrics import annotate_processes, compute_system_metrics, summarize_process_metrics
from .models import IDLE_PID, ExecutionInterval, Process, ScheduleResult
from .policies import Policy, resolve_policy
from .timeline import TimelineBuilder

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_processes(processes: Sequence[Process]) -> None:
    """
    Reject the whole request if any process breaks an input constraint.
    Nothing is skipped: one bad process would shift everyone else's metrics.
    """
    if not processes:
        raise InvalidInputError("At least one process is required")

    seen = set()
    for p in processes:
        if p.pid in seen:
            raise InvalidInputError(f"Duplicate process id '{p.pid}'", pid=p.pid)
        seen.add(p.pid)

        if p.pid == IDLE_PID:
            raise InvalidInputError(f"Process id '{IDLE_PID}' is reserved for idle intervals", pid=p.pid)

        if not _is_int(p.arrival_time) or p.arrival_time < 0:
            raise InvalidInputError(
                f"Process '{p.pid}' has invalid arrival time {p.arrival_time!r} (must be an integer >= 0)",
                pid=p.pid,
            )
        if not _is_int(p.burst_time) or p.burst_time <= 0:
            raise InvalidInputError(
                f"Process '{p.pid}' has invalid burst time {p.burst_time!r} (must be an integer > 0)",
                pid=p.pid,
            )
        if p.priority is not None and not _is_int(p.priority):
            raise InvalidInputError(
                f"Process '{p.pid}' has non-integer priority {p.priority!r}", pid=p.pid
            )


def _check_timeline(processes: List[Process], timeline: List[ExecutionInterval], start_time: int) -> None:
    clock = start_time
    for interval in timeline:
        if interval.start_time != clock or interval.duration <= 0:
            raise SchedulerInvariantError(f"Timeline broken at {interval!r} (expected start {clock})")
        clock = interval.end_time

    for p in processes:
        if p.remaining_time != 0 or not p.finished:
            raise SchedulerInvariantError(f"{p.pid} ended with {p.remaining_time} time units left")

    busy = sum(sl.duration for sl in timeline if not sl.is_idle)
    expected = sum(p.burst_time for p in processes)
    if busy != expected:
        raise SchedulerInvariantError(f"CPU busy time {busy} does not match total burst time {expected}")


def schedule(processes: Iterable[Process], policy: Policy) -> ScheduleResult:
    """
    Run ``policy`` over ``processes`` and return the annotated result.

    The caller's Process objects are never modified; the engine schedules
    fresh copies and returns those, in input order.
    """
    requested = list(processes)
    validate_processes(requested)

    working = [p.copy() for p in requested]
    logger.info("Scheduling %d processes with %r", len(working), policy)

    start_time = policy.start_time(working)
    builder = TimelineBuilder(start_time)
    policy.simulate(working, builder)
    timeline = builder.intervals

    _check_timeline(working, timeline, start_time)
    annotate_processes(working, timeline)

    summary = summarize_process_metrics(working)
    result = ScheduleResult(
        algorithm=policy.label,
        quantum=policy.quantum,
        processes=working,
        timeline=timeline,
        avg_waiting_time=summary["avg_waiting"],
        avg_turnaround_time=summary["avg_turnaround"],
        avg_response_time=summary["avg_response"],
    )
    compute_system_metrics(result)

    logger.info(
        "%s finished at t=%d: avg waiting %.2f, avg turnaround %.2f",
        result.algorithm,
        result.system.makespan,
        result.avg_waiting_time,
        result.avg_turnaround_time,
    )
    return result


def run_algorithm(name: str, processes: Iterable[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm by name. Quantum is only used by
    round-robin and is required there.
    """
    return schedule(processes, resolve_policy(name, quantum))
