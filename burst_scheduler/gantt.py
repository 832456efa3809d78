from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]

# (process id, or None while the CPU idles; width in time units; end time)
Segment = Tuple[Optional[int], int, int]


def _segments(slices: List[ScheduledSlice]) -> Iterator[Segment]:
    """Walk the timeline in start order, yielding idle gaps as id ``None``."""
    last_time = slices[0].start_time
    for sl in slices:
        if sl.start_time > last_time:
            yield None, sl.start_time - last_time, sl.start_time
        yield sl.id, max(1, sl.end_time - sl.start_time), sl.end_time
        last_time = sl.end_time


def _label(pid: int, width: int) -> str:
    return f"P{pid}"[:width].ljust(width)


def _time_marks(origin: int, segments: List[Segment]) -> str:
    return str(origin) + "".join(f"{end:>4}" for _, _, end in segments)


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart, for log files and tests.
    """
    if not slices:
        return "(no execution)"

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))
    segments = list(_segments(slices))

    bar = "".join("." * width if pid is None else "=" * width for pid, width, _ in segments)
    labels = "".join(" " * width if pid is None else _label(pid, width) for pid, width, _ in segments)

    return "\n".join(
        [
            "Gantt Chart:",
            f"|{bar}|",
            f" {labels}",
            _time_marks(slices[0].start_time, segments),
        ]
    )


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart"), ""

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))
    segments = list(_segments(slices))
    colors: Dict[int, str] = {}

    timeline = Text()
    labels = Text()
    for pid, width, _ in segments:
        if pid is None:
            timeline.append(" " * width)
            labels.append(" " * width)
            continue
        color = colors.setdefault(pid, COLORS[len(colors) % len(COLORS)])
        timeline.append(" " * width, style=f"on {color}")
        labels.append(_label(pid, width), style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    return Panel.fit(table, title="Gantt Chart"), _time_marks(slices[0].start_time, segments)
