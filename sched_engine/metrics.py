from __future__ import annotations

from typing import Dict, List

from .errors import SchedulerInvariantError
from .models import ExecutionInterval, Process, ScheduleResult, SystemMetrics


def annotate_processes(processes: List[Process], timeline: List[ExecutionInterval]) -> None:
    """
    Fill in turnaround, waiting and response times for every finished process.

    The completion time recorded during simulation must agree with the end of
    the process's last interval in the timeline.
    """
    last_end: Dict[str, int] = {}
    for interval in timeline:
        if not interval.is_idle:
            last_end[interval.pid] = interval.end_time

    for p in processes:
        if p.completion_time is None or p.start_time is None:
            raise SchedulerInvariantError(f"{p.pid} never finished")
        if last_end.get(p.pid) != p.completion_time:
            raise SchedulerInvariantError(
                f"{p.pid} completed at {p.completion_time} but its last interval ends at {last_end.get(p.pid)}"
            )

        p.turnaround_time = p.completion_time - p.arrival_time
        p.waiting_time = p.turnaround_time - p.burst_time
        p.response_time = p.start_time - p.arrival_time

        if p.waiting_time < 0:
            raise SchedulerInvariantError(f"{p.pid} has negative waiting time {p.waiting_time}")


def summarize_process_metrics(processes: List[Process]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.

    Sums are exact integers; the single division is the only rounding.
    """
    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given annotated processes and
    the timeline, and store them on the result.
    """
    makespan = max(p.completion_time for p in result.processes)
    cpu_busy_time = sum(sl.duration for sl in result.timeline if not sl.is_idle)
    idle_time = sum(sl.duration for sl in result.timeline if sl.is_idle)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        idle_time=idle_time,
        makespan=makespan,
        throughput=len(result.processes) / makespan if makespan > 0 else 0.0,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )
    result.system = system
    return system
