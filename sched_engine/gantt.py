from __future__ import annotations

from typing import Dict, List, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ExecutionInterval

_COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def time_marks(intervals: List[ExecutionInterval]) -> str:
    """Boundary times under the chart, one right-aligned column per interval."""
    if not intervals:
        return ""
    marks = f"{intervals[0].start_time}"
    for sl in intervals:
        marks += f"{sl.end_time:>3}"
    return marks


def build_rich_gantt(intervals: List[ExecutionInterval]) -> Tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    Idle intervals are drawn as dim dots.
    """
    if not intervals:
        return Panel("No execution", title="Gantt Chart"), ""

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = _COLORS[len(pid_to_color) % len(_COLORS)]
        return pid_to_color[pid]

    bars = Text()
    labels = Text()

    for sl in intervals:
        width = sl.duration
        if sl.is_idle:
            bars.append("." * width, style="dim")
            labels.append(" " * width)
            continue
        bars.append(" " * width, style=f"on {pid_color(sl.pid)}")
        labels.append(sl.pid[:width].ljust(width), style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(bars)
    table.add_row(labels)

    return Panel.fit(table, title="Gantt Chart"), time_marks(intervals)
