import pytest

from sched_engine.errors import SchedulerInvariantError
from sched_engine.metrics import annotate_processes, compute_system_metrics, summarize_process_metrics
from sched_engine.models import ScheduleResult, Process
from sched_engine.timeline import TimelineBuilder


def _run_in_order(procs):
    b = TimelineBuilder()
    for p in procs:
        b.advance_to(p.arrival_time)
        b.run(p, p.burst_time)
    return b.intervals


def test_annotate_derives_turnaround_waiting_response():
    procs = [Process("A", 0, 4), Process("B", 2, 3)]
    timeline = _run_in_order(procs)
    annotate_processes(procs, timeline)
    a, b = procs
    assert (a.turnaround_time, a.waiting_time, a.response_time) == (4, 0, 0)
    assert (b.completion_time, b.turnaround_time, b.waiting_time, b.response_time) == (7, 5, 2, 2)


def test_annotate_rejects_unfinished_process():
    procs = [Process("A", 0, 4)]
    with pytest.raises(SchedulerInvariantError, match="never finished"):
        annotate_processes(procs, [])


def test_summary_averages_are_unrounded():
    procs = [Process("A", 0, 1), Process("B", 0, 1), Process("C", 0, 1)]
    annotate_processes(procs, _run_in_order(procs))
    summary = summarize_process_metrics(procs)
    assert summary["avg_waiting"] == 1.0
    assert summary["avg_turnaround"] == 2.0


def test_system_metrics_count_idle_separately():
    procs = [Process("A", 0, 2), Process("B", 6, 2)]
    timeline = _run_in_order(procs)
    annotate_processes(procs, timeline)
    result = ScheduleResult(algorithm="FCFS", quantum=None, processes=procs, timeline=timeline)
    system = compute_system_metrics(result)
    assert result.system is system
    assert (system.cpu_busy_time, system.idle_time, system.makespan) == (4, 4, 8)
    assert system.cpu_utilization == pytest.approx(0.5)
    assert system.throughput == pytest.approx(0.25)
