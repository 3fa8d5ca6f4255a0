from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Optional

IDLE_PID = "IDLE"


@dataclass
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: Optional[int] = None

    # Working and derived fields, filled in by the engine on its own copy.
    remaining_time: int = field(init=False, repr=False)
    start_time: Optional[int] = field(default=None, init=False)
    completion_time: Optional[int] = field(default=None, init=False)
    turnaround_time: Optional[int] = field(default=None, init=False)
    waiting_time: Optional[int] = field(default=None, init=False)
    response_time: Optional[int] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.remaining_time = self.burst_time

    @property
    def finished(self) -> bool:
        return self.completion_time is not None

    def copy(self) -> "Process":
        """Fresh, unscheduled copy carrying only the input fields."""
        return Process(
            pid=self.pid,
            arrival_time=self.arrival_time,
            burst_time=self.burst_time,
            priority=self.priority,
        )


@dataclass(frozen=True)
class ExecutionInterval:
    """
    One contiguous slice of execution in the Gantt chart. Idle gaps use
    ``IDLE_PID`` as their pid.
    """

    pid: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def is_idle(self) -> bool:
        return self.pid == IDLE_PID


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[Process] = field(default_factory=list)
    timeline: List[ExecutionInterval] = field(default_factory=list)
    avg_waiting_time: float = 0.0
    avg_turnaround_time: float = 0.0
    avg_response_time: float = 0.0
    system: Optional[SystemMetrics] = None

    def to_dict(self) -> dict:
        """
        JSON-ready view of the result. Process entries drop the working
        ``remaining_time`` field, which is always 0 after a run.
        """
        data = asdict(self)
        for entry in data["processes"]:
            entry.pop("remaining_time", None)
        return data
