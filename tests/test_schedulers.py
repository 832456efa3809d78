import random

import pytest

from burst_scheduler.algorithms import (
    Algorithm,
    parse_algorithm,
    run_algorithm,
    schedule_sjf,
    schedule_srtf,
)
from burst_scheduler.errors import EmptyInputError, InvalidAlgorithmError, InvalidProcessError
from burst_scheduler.models import ProcessRecord


def _scenario_a():
    return [(1, 0, 5), (2, 1, 3), (3, 2, 8), (4, 3, 6)]


def _scenario_b():
    return [(1, 0, 8), (2, 1, 4), (3, 2, 9), (4, 3, 5)]


def _random_workload(seed, n=12):
    rng = random.Random(seed)
    arrival = 0
    procs = []
    for pid in range(1, n + 1):
        arrival += rng.choice([0, 0, 1, 2, 3, 7])
        procs.append((pid, arrival, rng.randint(1, 9)))
    return procs


def _slices(result):
    return [(s.id, s.start_time, s.end_time) for s in result.timeline]


def test_sjf_scenario_a():
    res = schedule_sjf(_scenario_a())
    assert res.algorithm == "SJF"
    assert res.as_tuples() == [(1, 0, 5, 0), (2, 1, 8, 4), (4, 3, 14, 5), (3, 2, 22, 12)]
    assert _slices(res) == [(1, 0, 5), (2, 5, 8), (4, 8, 14), (3, 14, 22)]


def test_srtf_scenario_b():
    res = schedule_srtf(_scenario_b())
    finish = {p.id: p.finish_time for p in res.processes}
    waiting = {p.id: p.waiting_time for p in res.processes}
    assert finish == {2: 5, 4: 10, 1: 17, 3: 26}
    assert waiting == {1: 9, 2: 0, 3: 15, 4: 2}
    assert [p.id for p in res.processes] == [2, 4, 1, 3]
    assert _slices(res) == [(1, 0, 1), (2, 1, 5), (4, 5, 10), (1, 10, 17), (3, 17, 26)]


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_single_process(algorithm):
    res = run_algorithm(algorithm, [(1, 0, 5)])
    assert res.as_tuples() == [(1, 0, 5, 0)]


def test_sjf_equal_bursts_run_in_arrival_order():
    res = schedule_sjf([(1, 0, 1), (2, 1, 4), (3, 1, 4), (4, 1, 4)])
    assert [p.id for p in res.processes] == [1, 2, 3, 4]
    assert [p.finish_time for p in res.processes] == [1, 5, 9, 13]


def test_sjf_waits_for_late_arrival_gap():
    res = schedule_sjf([(1, 0, 3), (2, 100, 2)])
    assert res.as_tuples() == [(1, 0, 3, 0), (2, 100, 102, 0)]
    assert _slices(res) == [(1, 0, 3), (2, 100, 102)]


def test_srtf_waits_for_late_arrival_gap():
    res = schedule_srtf([(1, 0, 3), (2, 100, 2), (3, 101, 1)])
    assert res.as_tuples() == [(1, 0, 3, 0), (2, 100, 102, 0), (3, 101, 103, 1)]


def test_clock_starts_at_first_arrival():
    res = schedule_sjf([(7, 10, 2), (8, 11, 1)])
    assert res.as_tuples() == [(7, 10, 12, 0), (8, 11, 13, 1)]


def test_srtf_equal_remaining_does_not_preempt():
    res = schedule_srtf([(1, 0, 4), (2, 1, 3)])
    assert _slices(res) == [(1, 0, 4), (2, 4, 7)]


def test_srtf_nested_preemptions():
    res = schedule_srtf([(1, 0, 10), (2, 1, 6), (3, 2, 2)])
    assert _slices(res) == [(1, 0, 1), (2, 1, 2), (3, 2, 4), (2, 4, 9), (1, 9, 18)]
    assert res.as_tuples() == [(3, 2, 4, 0), (2, 1, 9, 2), (1, 0, 18, 8)]


def test_srtf_waiting_accumulates_across_preemptions():
    res = schedule_srtf([(1, 0, 10), (2, 1, 2), (3, 4, 1)])
    assert _slices(res) == [(1, 0, 1), (2, 1, 3), (1, 3, 4), (3, 4, 5), (1, 5, 13)]
    p1 = next(p for p in res.processes if p.id == 1)
    assert p1.finish_time == 13
    assert p1.waiting_time == 3


def test_srtf_preempted_process_stays_ahead_of_equal_newcomer():
    # At t=2 process 1 has 3 left; process 2 arrives with 3 and process 3 with 1.
    res = schedule_srtf([(1, 0, 5), (2, 2, 3), (3, 2, 1)])
    assert _slices(res) == [(1, 0, 2), (3, 2, 3), (1, 3, 6), (2, 6, 9)]


def _assert_shortest_remaining_runs(processes, result):
    bursts = {pid: burst for pid, _, burst in processes}
    arrivals = {pid: arrival for pid, arrival, _ in processes}
    executed = {pid: 0 for pid in bursts}

    running_at = {}
    for sl in result.timeline:
        for t in range(sl.start_time, sl.end_time):
            assert t not in running_at
            running_at[t] = sl.id

    for t in range(min(arrivals.values()), max(running_at) + 1):
        eligible = {
            pid: bursts[pid] - executed[pid]
            for pid in bursts
            if arrivals[pid] <= t and executed[pid] < bursts[pid]
        }
        if not eligible:
            assert t not in running_at
            continue
        running = running_at[t]
        assert eligible[running] == min(eligible.values())
        executed[running] += 1

    assert executed == bursts


@pytest.mark.parametrize("seed", range(8))
def test_srtf_always_runs_shortest_remaining(seed):
    procs = _random_workload(seed)
    _assert_shortest_remaining_runs(procs, schedule_srtf(procs))


@pytest.mark.parametrize("seed", range(8))
def test_sjf_runs_each_process_once_to_completion(seed):
    procs = _random_workload(seed)
    res = schedule_sjf(procs)
    bursts = {pid: burst for pid, _, burst in procs}

    assert len(res.timeline) == len(procs)
    for sl in res.timeline:
        assert sl.end_time - sl.start_time == bursts[sl.id]

    finishes = [p.finish_time for p in res.processes]
    assert finishes == sorted(finishes)
    assert [s.end_time for s in res.timeline] == finishes


@pytest.mark.parametrize("algorithm", list(Algorithm))
@pytest.mark.parametrize("seed", range(5))
def test_results_cover_every_process(algorithm, seed):
    procs = _random_workload(seed, n=20)
    res = run_algorithm(algorithm, procs)
    by_id = {pid: (arrival, burst) for pid, arrival, burst in procs}

    assert len(res.processes) == len(procs)
    assert {p.id for p in res.processes} == set(by_id)
    for p in res.processes:
        arrival, burst = by_id[p.id]
        assert p.waiting_time == p.finish_time - arrival - burst
        assert p.waiting_time >= 0
        assert p.turnaround_time == p.finish_time - arrival

    assert res.system.cpu_busy_time == sum(burst for _, _, burst in procs)


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_repeated_runs_match(algorithm):
    procs = _random_workload(42)
    first = run_algorithm(algorithm, procs)
    second = run_algorithm(algorithm, procs)
    assert first.as_tuples() == second.as_tuples()
    assert _slices(first) == _slices(second)


def test_caller_records_are_not_modified():
    records = [ProcessRecord(id=1, arrival_time=0, original_burst_time=8), ProcessRecord(2, 1, 4)]
    res = schedule_srtf(records)
    assert [p.id for p in res.processes] == [2, 1]
    assert [r.remaining_burst_time for r in records] == [8, 4]
    assert all(r.finish_time is None for r in records)
    assert all(r.accumulated_waiting_time == 0 for r in records)


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_empty_input(algorithm):
    with pytest.raises(EmptyInputError):
        run_algorithm(algorithm, [])


@pytest.mark.parametrize(
    "procs",
    [
        [(1, 0, 3), (1, 2, 4)],
        [(1, 5, 3), (2, 2, 4)],
        [(1, 0, 0)],
        [(1, -1, 3)],
        [(-1, 0, 3)],
        [(1, 0)],
        [(1, 0, 2.5)],
        [(True, 0, 3)],
    ],
)
def test_invalid_process_entries(procs):
    with pytest.raises(InvalidProcessError):
        schedule_sjf(procs)


def test_invalid_input_leaves_caller_list_alone():
    procs = [(1, 0, 3), (1, 2, 4)]
    with pytest.raises(InvalidProcessError):
        schedule_srtf(procs)
    assert procs == [(1, 0, 3), (1, 2, 4)]


def test_parse_algorithm():
    assert parse_algorithm("sjf") is Algorithm.SJF
    assert parse_algorithm(" SRTF ") is Algorithm.SRTF
    assert parse_algorithm(Algorithm.SRTF) is Algorithm.SRTF


def test_unknown_algorithm():
    with pytest.raises(InvalidAlgorithmError):
        parse_algorithm("fcfs")
    with pytest.raises(ValueError):
        run_algorithm("rr", [(1, 0, 1)])
