import itertools

import pytest

from sched_engine.engine import run_algorithm, schedule
from sched_engine.models import IDLE_PID, Process
from sched_engine.policies import FCFSPolicy, PriorityPolicy, RoundRobinPolicy, SJFPolicy


def _procs():
    return [
        Process("P1", arrival_time=0, burst_time=5, priority=2),
        Process("P2", arrival_time=1, burst_time=3, priority=1),
        Process("P3", arrival_time=2, burst_time=8, priority=3),
    ]


def _spans(result):
    return [(s.pid, s.start_time, s.end_time) for s in result.timeline]


def _by_pid(result):
    return {p.pid: p for p in result.processes}


ALL_POLICIES = [FCFSPolicy(), SJFPolicy(), PriorityPolicy(), RoundRobinPolicy(2)]


def test_fcfs_order():
    res = schedule(_procs(), FCFSPolicy())
    assert [s.pid for s in res.timeline] == ["P1", "P2", "P3"]
    assert res.processes[0].waiting_time == 0
    assert res.processes[1].waiting_time == 4
    assert res.processes[2].waiting_time == 6


def test_fcfs_scenario_two_processes():
    res = run_algorithm("fcfs", [Process("P1", 0, 10), Process("P2", 1, 5)])
    assert _spans(res) == [("P1", 0, 10), ("P2", 10, 15)]
    assert _by_pid(res)["P1"].waiting_time == 0
    assert _by_pid(res)["P2"].waiting_time == 9


def test_fcfs_idle_gap_is_explicit():
    res = run_algorithm("fcfs", [Process("P1", 0, 2), Process("P2", 10, 2)])
    assert _spans(res) == [("P1", 0, 2), (IDLE_PID, 2, 10), ("P2", 10, 12)]
    assert res.system.idle_time == 8
    assert res.system.cpu_busy_time == 4


def test_leading_idle_before_first_arrival():
    res = run_algorithm("sjf", [Process("A", 3, 2)])
    assert _spans(res) == [(IDLE_PID, 0, 3), ("A", 3, 5)]
    assert res.processes[0].waiting_time == 0


def test_fcfs_ties_follow_input_order():
    procs = [Process("B", 0, 2), Process("A", 0, 1), Process("C", 0, 3)]
    res = schedule(procs, FCFSPolicy())
    assert [s.pid for s in res.timeline] == ["B", "A", "C"]


def test_fcfs_is_stable_sort_by_arrival():
    base = [Process("X", 4, 1), Process("Y", 0, 2), Process("Z", 2, 2), Process("W", 2, 1)]
    for perm in itertools.permutations(base):
        res = schedule(list(perm), FCFSPolicy())
        order = [s.pid for s in res.timeline if s.pid != IDLE_PID]
        expected = [p.pid for p in sorted(perm, key=lambda p: p.arrival_time)]
        assert order == expected


def test_sjf_order():
    res = schedule(_procs(), SJFPolicy())
    assert [s.pid for s in res.timeline] == ["P1", "P2", "P3"]


def test_sjf_scenario_four_processes():
    procs = [
        Process("P1", 0, 8),
        Process("P2", 1, 4),
        Process("P3", 2, 9),
        Process("P4", 3, 5),
    ]
    res = run_algorithm("sjf", procs)
    assert _spans(res) == [("P1", 0, 8), ("P2", 8, 12), ("P4", 12, 17), ("P3", 17, 26)]
    waits = {pid: p.waiting_time for pid, p in _by_pid(res).items()}
    assert waits == {"P1": 0, "P2": 7, "P3": 15, "P4": 9}
    assert res.avg_waiting_time == pytest.approx(7.75)


def test_sjf_tie_breaks_by_arrival_then_input_order():
    procs = [
        Process("long", 0, 4),
        Process("late", 3, 2),
        Process("early", 1, 2),
        Process("twin", 1, 2),
    ]
    res = schedule(procs, SJFPolicy())
    assert [s.pid for s in res.timeline] == ["long", "early", "twin", "late"]


def test_priority_static():
    res = schedule(_procs(), PriorityPolicy())
    # P1 is alone at t=0; by t=5 P2 (priority 1) beats P3.
    assert _spans(res) == [("P1", 0, 5), ("P2", 5, 8), ("P3", 8, 16)]


def test_priority_missing_ranks_last_and_ties_use_input_order():
    procs = [
        Process("first", 0, 1, priority=5),
        Process("none", 0, 1),
        Process("b", 0, 1, priority=1),
        Process("a", 0, 1, priority=1),
    ]
    res = schedule(procs, PriorityPolicy())
    assert [s.pid for s in res.timeline] == ["b", "a", "first", "none"]


def test_rr_scenario_quantum_2():
    procs = [Process("P1", 0, 5), Process("P2", 1, 3), Process("P3", 2, 1)]
    res = run_algorithm("rr", procs, quantum=2)
    assert _spans(res) == [
        ("P1", 0, 2),
        ("P2", 2, 4),
        ("P3", 4, 5),
        ("P1", 5, 7),
        ("P2", 7, 8),
        ("P1", 8, 9),
    ]
    done = {pid: p.completion_time for pid, p in _by_pid(res).items()}
    assert done == {"P1": 9, "P2": 8, "P3": 5}


def test_rr_new_arrivals_queue_ahead_of_preempted_process():
    # B arrives exactly when A's slice ends and must run before A resumes.
    res = run_algorithm("rr", [Process("A", 0, 4), Process("B", 2, 2)], quantum=2)
    assert _spans(res) == [("A", 0, 2), ("B", 2, 4), ("A", 4, 6)]


def test_rr_idle_gap_then_resume():
    res = run_algorithm("rr", [Process("A", 0, 3), Process("B", 6, 1)], quantum=2)
    assert _spans(res) == [("A", 0, 2), ("A", 2, 3), (IDLE_PID, 3, 6), ("B", 6, 7)]


def test_rr_with_large_quantum_matches_fcfs():
    procs = [Process("P1", 0, 5), Process("P2", 1, 3), Process("P3", 9, 8), Process("P4", 9, 2)]
    rr = run_algorithm("rr", procs, quantum=8)
    fcfs = run_algorithm("fcfs", procs)
    assert _spans(rr) == _spans(fcfs)
    assert [p.waiting_time for p in rr.processes] == [p.waiting_time for p in fcfs.processes]
    assert rr.avg_turnaround_time == fcfs.avg_turnaround_time


@pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: p.name)
def test_busy_time_equals_total_burst(policy):
    procs = _procs() + [Process("P4", 30, 2, priority=0)]
    res = schedule(procs, policy)
    busy = sum(s.end_time - s.start_time for s in res.timeline if s.pid != IDLE_PID)
    assert busy == sum(p.burst_time for p in procs)
    assert res.system.cpu_busy_time == busy
    for p in res.processes:
        assert p.waiting_time >= 0
        assert p.turnaround_time >= p.burst_time
        assert p.remaining_time == 0


@pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: p.name)
def test_single_process_has_no_wait_or_idle(policy):
    res = schedule([Process("solo", 0, 3, priority=1)], policy)
    assert all(s.pid != IDLE_PID for s in res.timeline)
    assert res.processes[0].waiting_time == 0
    assert res.processes[0].completion_time == 3


@pytest.mark.parametrize("policy", ALL_POLICIES, ids=lambda p: p.name)
def test_scheduling_is_idempotent(policy):
    procs = _procs()
    first = schedule(procs, policy)
    second = schedule(procs, policy)
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_caller_processes_are_not_mutated():
    procs = _procs()
    res = schedule(procs, RoundRobinPolicy(2))
    for original in procs:
        assert original.completion_time is None
        assert original.remaining_time == original.burst_time
    assert all(p is not q for p, q in zip(procs, res.processes))


def test_processes_returned_in_input_order():
    procs = [Process("late", 5, 1), Process("early", 0, 1)]
    res = run_algorithm("fcfs", procs)
    assert [p.pid for p in res.processes] == ["late", "early"]


def test_engine_flags_a_policy_that_drops_work():
    from sched_engine.errors import SchedulerInvariantError
    from sched_engine.policies import Policy

    class Lazy(Policy):
        name = "lazy"
        label = "Lazy"

        def simulate(self, processes, builder):
            builder.run(processes[0], processes[0].burst_time)

    with pytest.raises(SchedulerInvariantError):
        schedule([Process("A", 0, 1), Process("B", 0, 1)], Lazy())


def test_rr_clock_opens_at_first_arrival():
    res = run_algorithm("rr", [Process("A", 3, 2), Process("B", 4, 1)], quantum=2)
    assert _spans(res) == [("A", 3, 5), ("B", 5, 6)]
    assert res.system.idle_time == 0
    assert _by_pid(res)["B"].waiting_time == 1


def test_rr_late_start_still_emits_gaps_between_arrivals():
    res = run_algorithm("rr", [Process("A", 2, 1), Process("B", 5, 1)], quantum=2)
    assert _spans(res) == [("A", 2, 3), (IDLE_PID, 3, 5), ("B", 5, 6)]


def test_rr_tied_arrivals_admitted_in_input_order():
    res = run_algorithm("rr", [Process("B", 0, 3), Process("A", 0, 3)], quantum=2)
    assert _spans(res) == [("B", 0, 2), ("A", 2, 4), ("B", 4, 5), ("A", 5, 6)]
