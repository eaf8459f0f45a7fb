"""Text reports — render traces, comparisons and benchmarks as strings.

Every function here is pure: it takes finished results and returns a
string, never printing anything itself.  The CLI prints them; tests
assert on them.

Markers used in timelines:

- ``S`` — where the head started.
- ``*`` — a serviced request.
- ``·`` — a waypoint (edge visit or wrap jump) that serviced nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from py_disksched.result import ResultTrace
    from py_disksched.simulator import BenchmarkResult

DEFAULT_TIMELINE_WIDTH = 60
_MIN_TIMELINE_WIDTH = 20
_BOX_WIDTH = 57

START_MARKER = "S"
SERVICE_MARKER = "*"
WAYPOINT_MARKER = "·"


def service_flags(trace: ResultTrace) -> list[bool]:
    """Return, for each head move, whether it serviced a request.

    Waypoints only ever lead to more waypoints or to a service, so the
    path is matched against the service order from the end backwards.
    """
    moves = trace.head_path[1:]
    flags = [False] * len(moves)
    k = len(trace.service_order) - 1
    for i in range(len(moves) - 1, -1, -1):
        if k >= 0 and moves[i] == trace.service_order[k]:
            flags[i] = True
            k -= 1
    return flags


def summary(trace: ResultTrace) -> str:
    """Return a short multi-line summary of one run."""
    m = trace.metrics
    lines = [
        f"Algorithm: {trace.algorithm_name}",
        f"Requests Serviced: {trace.request_count}",
        f"Total Movement: {trace.total_movement} cylinders",
        f"Seek - Avg: {m.avg_seek:.2f}, Max: {m.max_seek}, Min: {m.min_seek}",
    ]
    if m.has_latency:
        lines.append(
            f"Latency - Avg: {m.avg_latency:.2f}, Max: {m.max_latency}, Min: {m.min_latency}"
        )
        lines.append(f"Throughput: {m.throughput:.4f} req/time-unit")
        lines.append(f"Fairness Index: {m.fairness_index:.4f}")
    lines.append(f"Service Order: {list(trace.service_order)}")
    lines.append(f"Head Path: {list(trace.head_path)}")
    return "\n".join(lines)


def _box_line(text: str) -> str:
    return f"| {text:<{_BOX_WIDTH - 2}} |"


def metrics_report(trace: ResultTrace) -> str:
    """Return a boxed report of every metric for one run."""
    m = trace.metrics
    rule = "+" + "-" * _BOX_WIDTH + "+"
    lines = [
        rule,
        _box_line(f"{trace.algorithm_name} Metrics"),
        rule,
        _box_line(f"Requests Serviced: {m.request_count}"),
        _box_line(f"Total Head Movement: {trace.total_movement}"),
        rule,
        _box_line("Seek Distance (cylinders):"),
        _box_line(f"  Average: {m.avg_seek:.2f}"),
        _box_line(f"  Maximum: {m.max_seek}"),
        _box_line(f"  Minimum: {m.min_seek}"),
        _box_line(f"  Std Dev: {m.seek_stddev:.2f}"),
    ]
    if m.has_latency or trace.arrival_times:
        lines.extend(
            [
                rule,
                _box_line("Response Latency (time units):"),
                _box_line(f"  Average: {m.avg_latency:.2f}"),
                _box_line(f"  Maximum: {m.max_latency}"),
                _box_line(f"  Minimum: {m.min_latency}"),
                _box_line(f"  Std Dev: {m.latency_stddev:.2f}"),
                rule,
                _box_line(f"Throughput: {m.throughput:.4f}"),
                _box_line(f"Fairness Index: {m.fairness_index:.4f}"),
                _box_line("  (1.0 = perfectly fair, lower = less fair)"),
            ]
        )
    lines.append(rule)
    return "\n".join(lines)


def simple_timeline(trace: ResultTrace) -> str:
    """Return the head path on one line.

    Example::

        SCAN: 50 ← 41* ← 34* ← 11* ← 0 → 60* → 79* [Total: 239]

    Arrows show the direction of each move; ``=`` marks a move of zero
    cylinders.  Serviced positions carry a ``*``.
    """
    if not trace.head_path:
        return "No movement recorded."
    parts = [f"{trace.algorithm_name}: {trace.head_path[0]}"]
    flags = service_flags(trace)
    for prev, curr, serviced in zip(trace.head_path, trace.head_path[1:], flags, strict=True):
        if curr > prev:
            arrow = "→"
        elif curr < prev:
            arrow = "←"
        else:
            arrow = "="
        parts.append(f"{arrow} {curr}{SERVICE_MARKER if serviced else ''}")
    return " ".join(parts) + f" [Total: {trace.total_movement}]"


def _column(cylinder: int, lower: int, upper: int, columns: int) -> int:
    col = (cylinder - lower) * (columns - 1) // (upper - lower)
    return max(0, min(columns - 1, col))


def ascii_timeline(
    trace: ResultTrace,
    *,
    lower: int,
    upper: int,
    width: int = DEFAULT_TIMELINE_WIDTH,
) -> str:
    """Return a bordered plot of the head path, one row per move.

    Args:
        trace: The run to draw.
        lower: Left edge of the plot (usually the disk's lower cylinder).
        upper: Right edge of the plot.
        width: Total width of the plot area in characters.

    """
    if not trace.head_path:
        return "No movement recorded."
    if upper <= lower:
        return "Invalid cylinder range."

    width = max(width, _MIN_TIMELINE_WIDTH)
    columns = width - 2
    title = f"+-- {trace.algorithm_name} Timeline "
    scale = f"{lower} {'-' * max(0, columns - len(str(lower)) - len(str(upper)) - 2)} {upper}"
    lines = [
        title + "-" * max(0, width - len(title) + 1) + "+",
        f"| {scale:<{columns}} |",
        "+" + "-" * width + "+",
    ]

    markers = [START_MARKER] + [
        SERVICE_MARKER if serviced else WAYPOINT_MARKER for serviced in service_flags(trace)
    ]
    prev_col: int | None = None
    for position, marker in zip(trace.head_path, markers, strict=True):
        col = _column(position, lower, upper, columns)
        row = [" "] * columns
        if prev_col is not None:
            for j in range(min(prev_col, col) + 1, max(prev_col, col)):
                row[j] = "-"
        row[col] = marker
        label = "START" if marker == START_MARKER else f"-> {position}"
        lines.append(f"| {''.join(row)} | {label}")
        prev_col = col

    lines.append("+" + "-" * width + "+")
    lines.append(
        f"  {START_MARKER}=start  {SERVICE_MARKER}=serviced  {WAYPOINT_MARKER}=waypoint"
        f"  Total: {trace.total_movement}"
    )
    return "\n".join(lines)


def _vs_best(movement: int, best: int) -> str:
    if movement == best:
        return "BEST"
    if best == 0:
        return "n/a"
    return f"+{(movement - best) * 100 / best:.1f}%"


def comparison_table(traces: Mapping[str, ResultTrace]) -> str:
    """Return a side-by-side table of several runs on one workload.

    The ``VS BEST`` column compares total movement to the lowest in the
    table.  A final line names the fairest algorithm.
    """
    if not traces:
        return "No results."
    best = min(t.total_movement for t in traces.values())
    lines = [
        f"{'ALGORITHM':<20} {'MOVEMENT':>9} {'AVG SEEK':>9} {'AVG LAT':>9} "
        f"{'FAIRNESS':>9} {'VS BEST':>8}"
    ]
    for trace in traces.values():
        m = trace.metrics
        lines.append(
            f"{trace.algorithm_name:<20} {trace.total_movement:>9} {m.avg_seek:>9.2f}"
            f" {m.avg_latency:>9.2f} {m.fairness_index:>9.4f}"
            f" {_vs_best(trace.total_movement, best):>8}"
        )
    fairest = max(traces.values(), key=lambda t: t.metrics.fairness_index)
    lines.append(
        f"Best fairness: {fairest.algorithm_name} ({fairest.metrics.fairness_index:.4f})"
    )
    return "\n".join(lines)


def benchmark_table(result: BenchmarkResult) -> str:
    """Return averaged benchmark figures per size, then scaling notes."""
    lines: list[str] = []
    for size in result.sizes:
        lines.append(f"Requests: {size}")
        lines.append(
            f"  {'ALGORITHM':<14} {'RUNS':>4} {'AVG MOVE':>11} {'AVG SEEK':>9}"
            f" {'AVG LAT':>10} {'MAX LAT':>10} {'FAIRNESS':>9}"
        )
        for name in result.algorithms:
            s = result.summary(size, name)
            lines.append(
                f"  {name:<14} {s.runs:>4} {s.avg_movement:>11.1f} {s.avg_seek:>9.2f}"
                f" {s.avg_latency:>10.2f} {s.max_latency:>10.1f} {s.fairness_index:>9.4f}"
            )
    lines.append("Scaling:")
    for name in result.algorithms:
        note = result.scaling(name)
        lines.append(f"  {name:<14} {note if note is not None else 'n/a'}")
    return "\n".join(lines)
