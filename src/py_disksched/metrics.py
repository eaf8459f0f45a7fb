"""Run metrics — how good was a schedule?

Total head movement is the headline number, but it hides a lot.  Two
schedules with the same movement can treat requests very differently:
one services everything promptly, the other makes a few unlucky
requests wait for several full sweeps.  The metrics here capture both
sides:

- **Seek statistics** — average, max, min and spread of individual moves.
- **Latency statistics** — how long each request waited between arrival
  and service (``service_time - arrival_time``).
- **Throughput** — requests serviced per unit of simulated time.
- **Jain's fairness index** — ``(sum l)^2 / (n * sum l^2)`` over the
  latencies.  1.0 means every request waited equally long; the index
  falls towards ``1/n`` as one request hogs all the waiting.

Everything is a pure function of a ``ResultTrace``: computing metrics
twice from the same trace always gives the same answer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from statistics import fmean, pstdev, pvariance
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from py_disksched.result import ResultTrace

PERFECT_FAIRNESS = 1.0


@dataclass(frozen=True)
class Metrics:
    """Seek, latency, throughput and fairness figures for one run."""

    request_count: int
    avg_seek: float
    max_seek: int
    min_seek: int
    seek_stddev: float
    avg_latency: float
    max_latency: int
    min_latency: int
    latency_stddev: float
    latency_variance: float
    throughput: float
    fairness_index: float
    total_simulated_time: int

    @property
    def has_latency(self) -> bool:
        """Return True if the run recorded any non-zero latency."""
        return self.avg_latency > 0


def latencies(trace: ResultTrace) -> list[int]:
    """Return per-request latency for a trace.

    When the trace carries arrival times, latency is ``service - arrival``.
    When it only has service times, every request is assumed to have
    arrived at time 0, so latency is the raw service time.  Untimed
    traces have no latencies at all.
    """
    service = trace.service_times
    arrival = trace.arrival_times
    if service and len(arrival) == len(service):
        return [s - a for s, a in zip(service, arrival, strict=True)]
    return list(service)


def jain_fairness(values: Sequence[float]) -> float:
    """Return Jain's fairness index of *values*.

    Zero or one sample, or all-zero samples, count as perfectly fair.
    """
    if len(values) <= 1:
        return PERFECT_FAIRNESS
    total = math.fsum(values)
    squares = math.fsum(v * v for v in values)
    if squares == 0:
        return PERFECT_FAIRNESS
    return (total * total) / (len(values) * squares)


def compute_metrics(trace: ResultTrace) -> Metrics:
    """Derive ``Metrics`` from a completed trace.

    Args:
        trace: The run to analyse.

    Returns:
        A fresh, immutable ``Metrics`` value.

    """
    n = trace.request_count
    seeks = list(trace.seek_distances)
    lats = latencies(trace)

    if seeks:
        avg_seek = fmean(seeks)
        max_seek = max(seeks)
        min_seek = min(seeks)
        seek_stddev = pstdev(seeks)
    else:
        avg_seek = trace.total_movement / n if n else 0.0
        max_seek = trace.total_movement
        min_seek = 0
        seek_stddev = 0.0

    if lats:
        avg_latency = fmean(lats)
        max_latency = max(lats)
        min_latency = min(lats)
        latency_stddev = pstdev(lats)
        latency_variance = pvariance(lats)
    else:
        avg_latency = 0.0
        max_latency = 0
        min_latency = 0
        latency_stddev = 0.0
        latency_variance = 0.0

    if trace.service_times:
        total_time = max(trace.service_times)
        throughput = n / total_time if total_time > 0 else float(n)
    else:
        # Untimed runs: one time unit per cylinder travelled
        total_time = trace.total_movement
        throughput = n / total_time if total_time > 0 else 0.0

    return Metrics(
        request_count=n,
        avg_seek=avg_seek,
        max_seek=max_seek,
        min_seek=min_seek,
        seek_stddev=seek_stddev,
        avg_latency=avg_latency,
        max_latency=max_latency,
        min_latency=min_latency,
        latency_stddev=latency_stddev,
        latency_variance=latency_variance,
        throughput=throughput,
        fairness_index=jain_fairness(lats),
        total_simulated_time=total_time,
    )
