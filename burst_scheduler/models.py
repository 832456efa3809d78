from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class ProcessRecord:
    """
    A process being scheduled: immutable input facts plus simulation state.

    ``remaining_burst_time`` starts at ``original_burst_time`` and is only
    decremented while the record holds the processor. ``ready_since`` is the
    time the record last became eligible to run (its arrival, or the instant
    it was preempted) and is what waiting time is accumulated from.
    """

    id: int
    arrival_time: int
    original_burst_time: int
    remaining_burst_time: int = -1
    finish_time: Optional[int] = None
    accumulated_waiting_time: int = 0
    ready_since: int = field(default=-1, repr=False)

    def __post_init__(self) -> None:
        if self.remaining_burst_time < 0:
            self.remaining_burst_time = self.original_burst_time
        if self.ready_since < 0:
            self.ready_since = self.arrival_time

    @property
    def finished(self) -> bool:
        return self.remaining_burst_time == 0

    def to_result(self) -> "ProcessResult":
        if self.finish_time is None:
            raise ValueError(f"Process {self.id} has not finished")
        return ProcessResult(
            id=self.id,
            arrival_time=self.arrival_time,
            finish_time=self.finish_time,
            waiting_time=self.accumulated_waiting_time,
            burst_time=self.original_burst_time,
        )


@dataclass(frozen=True)
class ProcessResult:
    id: int
    arrival_time: int
    finish_time: int
    waiting_time: int
    burst_time: int

    @property
    def turnaround_time(self) -> int:
        return self.waiting_time + self.burst_time

    def as_tuple(self) -> Tuple[int, int, int, int]:
        """The persisted four-tuple: (id, arrival, finish, waiting)."""
        return (self.id, self.arrival_time, self.finish_time, self.waiting_time)


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    id: int
    start_time: int
    end_time: int


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    processes: List[ProcessResult] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

    def as_tuples(self) -> List[Tuple[int, int, int, int]]:
        return [p.as_tuple() for p in self.processes]
