from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by burst_scheduler."""


class EmptyInputError(SchedulerError):
    """The engine was given no processes to schedule."""


class InvalidProcessError(SchedulerError, ValueError):
    """An input process tuple is malformed (bad id, arrival, burst or order)."""


class InvalidAlgorithmError(SchedulerError, ValueError):
    """The algorithm selector names no supported discipline."""


class EmptyContainerError(SchedulerError, IndexError):
    """
    Head access on an empty OrderedSequence.

    The engines check sizes before touching the head, so seeing this outside
    of the sequence's own tests means an engine bug.
    """


class WorkloadFormatError(SchedulerError, ValueError):
    """A workload file could not be parsed."""
