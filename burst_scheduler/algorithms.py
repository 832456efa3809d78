from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from .errors import EmptyInputError, InvalidAlgorithmError, InvalidProcessError
from .metrics import compute_system_metrics
from .models import ProcessRecord, ScheduledSlice, ScheduleResult
from .sequence import (
    OrderedSequence,
    SortKey,
    by_finish_time,
    by_original_burst,
    by_remaining_burst,
)

logger = logging.getLogger(__name__)

ProcessInput = Union[Tuple[int, int, int], ProcessRecord]


class Algorithm(str, Enum):
    SJF = "SJF"
    SRTF = "SRTF"


def parse_algorithm(name: Union[str, Algorithm]) -> Algorithm:
    """
    Resolve a selector such as ``"sjf"`` or ``"SRTF"`` to an Algorithm.
    """
    if isinstance(name, Algorithm):
        return name
    try:
        return Algorithm[str(name).strip().upper()]
    except KeyError:
        choices = ", ".join(a.value for a in Algorithm)
        raise InvalidAlgorithmError(f"Unknown algorithm '{name}' (choose from {choices})") from None


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _unpack(entry: ProcessInput) -> Tuple[int, int, int]:
    if isinstance(entry, (tuple, list)):
        if len(entry) != 3:
            raise InvalidProcessError(f"Expected (id, arrival_time, burst_time), got {entry!r}")
        return entry[0], entry[1], entry[2]

    burst = getattr(entry, "original_burst_time", None)
    if burst is None:
        burst = getattr(entry, "burst_time", None)
    try:
        return entry.id, entry.arrival_time, burst
    except AttributeError as exc:
        raise InvalidProcessError(f"Not a process entry: {entry!r}") from exc


def _build_pending(processes: Iterable[ProcessInput]) -> OrderedSequence:
    """
    Validate the caller's entries and copy them into a fresh arrival pool.

    Nothing the caller passed in is modified; every record is new.
    """
    entries = list(processes)
    if not entries:
        raise EmptyInputError("No processes to schedule")

    pending = OrderedSequence()
    seen: set[int] = set()
    last_arrival = 0

    for entry in entries:
        pid, arrival, burst = _unpack(entry)

        if not _is_int(pid) or pid < 0:
            raise InvalidProcessError(f"Process id must be a non-negative integer, got {pid!r}")
        if pid in seen:
            raise InvalidProcessError(f"Duplicate process id {pid}")
        if not _is_int(arrival) or arrival < 0:
            raise InvalidProcessError(f"Process {pid}: arrival time must be a non-negative integer, got {arrival!r}")
        if not _is_int(burst) or burst <= 0:
            raise InvalidProcessError(f"Process {pid}: burst time must be a positive integer, got {burst!r}")
        if arrival < last_arrival:
            raise InvalidProcessError(
                f"Process {pid} arrives at {arrival}, before the previous process ({last_arrival}); "
                "input must be sorted by arrival time"
            )

        seen.add(pid)
        last_arrival = arrival
        pending.append(ProcessRecord(id=pid, arrival_time=arrival, original_burst_time=burst))

    return pending


def _admit_arrivals(pending: OrderedSequence, ready: OrderedSequence, clock: int, key: SortKey) -> None:
    """Move every pending record that has arrived by ``clock`` into the ready set."""
    while pending and pending.peek_head().arrival_time <= clock:
        record = pending.remove_head()
        ready.insert_sorted(record, key)
        logger.debug("t=%d: process %d ready (burst %d)", clock, record.id, record.remaining_burst_time)


def _idle_until_next_arrival(pending: OrderedSequence, clock: int) -> int:
    next_arrival = pending.peek_head().arrival_time
    logger.debug("t=%d: CPU idle until t=%d", clock, next_arrival)
    return next_arrival


def _complete(record: ProcessRecord, completed: OrderedSequence) -> None:
    assert record.finish_time is not None and record.remaining_burst_time == 0
    assert record.accumulated_waiting_time == (
        record.finish_time - record.arrival_time - record.original_burst_time
    ), f"waiting time drifted for process {record.id}"

    completed.insert_sorted(record, by_finish_time)
    logger.debug(
        "t=%d: process %d finished (waited %d)",
        record.finish_time,
        record.id,
        record.accumulated_waiting_time,
    )


def _build_result(algorithm: Algorithm, completed: OrderedSequence, timeline: List[ScheduledSlice]) -> ScheduleResult:
    result = ScheduleResult(
        algorithm=algorithm.value,
        processes=[record.to_result() for record in completed],
        timeline=timeline,
    )
    compute_system_metrics(result)
    return result


def schedule_sjf(processes: Iterable[ProcessInput]) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    ``processes`` are ``(id, arrival_time, burst_time)`` entries sorted by
    arrival. At each decision point the arrived process with the smallest
    burst runs to completion; equal bursts run in arrival order. When nothing
    has arrived yet the clock jumps to the next arrival.
    """
    pending = _build_pending(processes)
    ready = OrderedSequence()
    completed = OrderedSequence()
    timeline: List[ScheduledSlice] = []

    clock = pending.peek_head().arrival_time

    while pending or ready:
        _admit_arrivals(pending, ready, clock, by_original_burst)

        if not ready:
            clock = _idle_until_next_arrival(pending, clock)
            continue

        record = ready.remove_head()
        start_time = clock
        record.accumulated_waiting_time += start_time - record.ready_since
        logger.debug("t=%d: dispatch process %d for %d", clock, record.id, record.remaining_burst_time)

        clock += record.remaining_burst_time
        record.remaining_burst_time = 0
        record.finish_time = clock

        timeline.append(ScheduledSlice(id=record.id, start_time=start_time, end_time=clock))
        _complete(record, completed)

    return _build_result(Algorithm.SJF, completed, timeline)


def _find_preemptor(pending: OrderedSequence, running: ProcessRecord, clock: int) -> Optional[ProcessRecord]:
    """
    First arrived-but-not-admitted record with strictly less remaining time.

    The pending pool is in arrival order, so the scan stops at the first
    record that has not arrived yet.
    """
    for candidate in pending:
        if candidate.arrival_time > clock:
            break
        if candidate.remaining_burst_time < running.remaining_burst_time:
            return candidate
    return None


def schedule_srtf(processes: Iterable[ProcessInput]) -> ScheduleResult:
    """
    Shortest Remaining Time First (preemptive SJF).

    The dispatched process runs one time unit at a time. After every unit
    that leaves it unfinished, newly arrived processes are checked; the
    first one with strictly less remaining time preempts it. A preempted
    process goes back into the ready set behind any process with the same
    remaining time, and its waiting time keeps accumulating from the moment
    it was preempted.
    """
    pending = _build_pending(processes)
    ready = OrderedSequence()
    completed = OrderedSequence()
    timeline: List[ScheduledSlice] = []

    clock = pending.peek_head().arrival_time

    while pending or ready:
        _admit_arrivals(pending, ready, clock, by_remaining_burst)

        if not ready:
            clock = _idle_until_next_arrival(pending, clock)
            continue

        record = ready.remove_head()
        start_time = clock
        record.accumulated_waiting_time += start_time - record.ready_since
        logger.debug("t=%d: dispatch process %d (remaining %d)", clock, record.id, record.remaining_burst_time)

        preemptor: Optional[ProcessRecord] = None
        while record.remaining_burst_time > 0:
            record.remaining_burst_time -= 1
            clock += 1
            if record.remaining_burst_time > 0:
                preemptor = _find_preemptor(pending, record, clock)
                if preemptor is not None:
                    break

        timeline.append(ScheduledSlice(id=record.id, start_time=start_time, end_time=clock))

        if preemptor is not None:
            logger.debug(
                "t=%d: process %d (remaining %d) preempted by process %d (burst %d)",
                clock,
                record.id,
                record.remaining_burst_time,
                preemptor.id,
                preemptor.remaining_burst_time,
            )
            record.ready_since = clock
            ready.insert_sorted(record, by_remaining_burst)
            continue

        record.finish_time = clock
        _complete(record, completed)

    return _build_result(Algorithm.SRTF, completed, timeline)


ALGORITHMS: Dict[Algorithm, Callable[[Iterable[ProcessInput]], ScheduleResult]] = {
    Algorithm.SJF: schedule_sjf,
    Algorithm.SRTF: schedule_srtf,
}


def run_algorithm(name: Union[str, Algorithm], processes: Iterable[ProcessInput]) -> ScheduleResult:
    """
    Dispatch to the requested algorithm.
    """
    algorithm = parse_algorithm(name)
    func = ALGORITHMS[algorithm]
    return func(processes)
