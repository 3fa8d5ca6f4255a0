"""
Scheduling engine package.

Computes FCFS, SJF, Priority and Round Robin schedules for a fixed process
set, builds the Gantt timeline and derives per-process and aggregate metrics.
"""

from .engine import run_algorithm, schedule, validate_processes
from .errors import InvalidInputError, SchedulerError, SchedulerInvariantError, WorkloadFormatError
from .models import IDLE_PID, ExecutionInterval, Process, ScheduleResult, SystemMetrics
from .policies import FCFSPolicy, Policy, PriorityPolicy, RoundRobinPolicy, SJFPolicy, resolve_policy

__all__ = [
    "IDLE_PID",
    "ExecutionInterval",
    "FCFSPolicy",
    "InvalidInputError",
    "Policy",
    "PriorityPolicy",
    "Process",
    "RoundRobinPolicy",
    "SJFPolicy",
    "ScheduleResult",
    "SchedulerError",
    "SchedulerInvariantError",
    "SystemMetrics",
    "WorkloadFormatError",
    "resolve_policy",
    "run_algorithm",
    "schedule",
    "validate_processes",
]
