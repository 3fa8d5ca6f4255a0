from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Tuple

from .errors import InvalidInputError
from .models import Process
from .timeline import TimelineBuilder

logger = logging.getLogger(__name__)


def _arrival_order(processes: List[Process]) -> List[Process]:
    # sorted() is stable, so equal arrivals keep their input order.
    return sorted(processes, key=lambda p: p.arrival_time)


class Policy:
    """
    A scheduling policy. Subclasses turn a process list into execution
    intervals by driving a ``TimelineBuilder``.

    ``processes`` is always in caller input order; policies use the list
    index as the final tie-breaker.
    """

    name = ""
    label = ""
    quantum: Optional[int] = None

    def start_time(self, processes: List[Process]) -> int:
        """Clock value the timeline starts from."""
        return 0

    def simulate(self, processes: List[Process], builder: TimelineBuilder) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FCFSPolicy(Policy):
    """First-Come First-Serve (non-preemptive)."""

    name = "fcfs"
    label = "FCFS"

    def simulate(self, processes: List[Process], builder: TimelineBuilder) -> None:
        for p in _arrival_order(processes):
            builder.advance_to(p.arrival_time)
            builder.run(p, p.burst_time)


class _NonPreemptiveSelectionPolicy(Policy):
    """
    Shared loop for SJF and Priority: at every decision point pick the best
    ready process by ``selection_key`` and run it to completion.
    """

    def selection_key(self, process: Process) -> Tuple:
        raise NotImplementedError

    def simulate(self, processes: List[Process], builder: TimelineBuilder) -> None:
        pending = list(enumerate(processes))

        while pending:
            now = builder.current_time
            ready = [(idx, p) for idx, p in pending if p.arrival_time <= now]

            if not ready:
                builder.advance_to(min(p.arrival_time for _, p in pending))
                continue

            idx, chosen = min(ready, key=lambda item: self.selection_key(item[1]) + (item[0],))
            logger.debug(
                "%s picks %s at t=%d from %d ready", self.label, chosen.pid, now, len(ready)
            )
            builder.run(chosen, chosen.burst_time)
            pending.remove((idx, chosen))


class SJFPolicy(_NonPreemptiveSelectionPolicy):
    """
    Shortest Job First (non-preemptive).

    Among ready processes choose the smallest burst time; ties go to the
    earlier arrival, then to input order.
    """

    name = "sjf"
    label = "SJF (non-preemptive)"

    def selection_key(self, process: Process) -> Tuple:
        return (process.burst_time, process.arrival_time)


class PriorityPolicy(_NonPreemptiveSelectionPolicy):
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Processes without a
    priority rank after every process that has one. Ties go to the earlier
    arrival, then to input order.
    """

    name = "priority"
    label = "Priority (non-preemptive)"

    def selection_key(self, process: Process) -> Tuple:
        missing = process.priority is None
        return (missing, 0 if missing else process.priority, process.arrival_time)


class RoundRobinPolicy(Policy):
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive during a slice join the ready queue ahead of the
    process whose slice just ended.
    """

    name = "rr"
    label = "Round Robin"

    def __init__(self, quantum: Optional[int]) -> None:
        if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
            raise InvalidInputError(f"Round Robin requires a positive integer quantum, got {quantum!r}")
        self.quantum = quantum

    def __repr__(self) -> str:
        return f"RoundRobinPolicy(quantum={self.quantum})"

    def start_time(self, processes: List[Process]) -> int:
        # The clock opens at the first arrival; no leading idle interval.
        return min(p.arrival_time for p in processes)

    def simulate(self, processes: List[Process], builder: TimelineBuilder) -> None:
        arrivals = _arrival_order(processes)
        next_arrival = 0
        ready: Deque[Process] = deque()

        def admit_arrivals() -> None:
            nonlocal next_arrival
            while next_arrival < len(arrivals) and arrivals[next_arrival].arrival_time <= builder.current_time:
                ready.append(arrivals[next_arrival])
                next_arrival += 1

        unfinished = len(arrivals)
        while unfinished:
            admit_arrivals()
            if not ready:
                # Idle CPU: jump to the next arrival.
                builder.advance_to(arrivals[next_arrival].arrival_time)
                continue

            current = ready.popleft()
            builder.run(current, min(self.quantum, current.remaining_time))

            admit_arrivals()
            if current.remaining_time > 0:
                ready.append(current)
            else:
                unfinished -= 1


POLICIES: Dict[str, Callable[..., Policy]] = {
    "fcfs": FCFSPolicy,
    "sjf": SJFPolicy,
    "priority": PriorityPolicy,
    "rr": RoundRobinPolicy,
}

_ALIASES = {
    "round_robin": "rr",
    "round-robin": "rr",
}


def resolve_policy(name: str, quantum: Optional[int] = None) -> Policy:
    """
    Turn a case-insensitive policy selector into a ready-to-use policy.
    The quantum is only consulted for Round Robin.
    """
    key = name.strip().lower()
    key = _ALIASES.get(key, key)
    if key not in POLICIES:
        known = ", ".join(sorted(POLICIES))
        raise InvalidInputError(f"Unknown scheduling policy '{name}' (choose from {known})")

    if key == "rr":
        return RoundRobinPolicy(quantum)
    return POLICIES[key]()
