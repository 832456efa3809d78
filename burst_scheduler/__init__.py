"""
Burst scheduler package.

Simulates single-CPU batch scheduling under Shortest Job First and
Shortest Remaining Time First, and reports per-process finish and
waiting times.
"""

from .algorithms import Algorithm, run_algorithm, schedule_sjf, schedule_srtf
from .errors import (
    EmptyContainerError,
    EmptyInputError,
    InvalidAlgorithmError,
    InvalidProcessError,
    SchedulerError,
    WorkloadFormatError,
)
from .models import ProcessRecord, ProcessResult, ScheduledSlice, ScheduleResult
from .sequence import OrderedSequence

__all__ = [
    "Algorithm",
    "EmptyContainerError",
    "EmptyInputError",
    "InvalidAlgorithmError",
    "InvalidProcessError",
    "OrderedSequence",
    "ProcessRecord",
    "ProcessResult",
    "ScheduleResult",
    "ScheduledSlice",
    "SchedulerError",
    "WorkloadFormatError",
    "run_algorithm",
    "schedule_sjf",
    "schedule_srtf",
]
