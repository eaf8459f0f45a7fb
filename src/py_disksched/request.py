"""Disk requests — which cylinder, and when it was asked for.

A request names a cylinder and the simulated time it arrived.  The
positional algorithms (FCFS, SSTF, SCAN and friends) only look at the
cylinder; the rotating-queue algorithms (FSCAN, N-Step-SCAN) also honour
the arrival time, letting later requests queue up while the head is busy.

A ``RequestTrace`` is the ordered workload for one run.  It can be built
from a plain list of cylinders (everything arrives at time 0), from a
list with evenly spaced arrivals, or by a ``WorkloadGenerator``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from functools import total_ordering
from typing import overload


@total_ordering
@dataclass(frozen=True)
class Request:
    """A single disk access request.

    Requests sort by arrival time first and cylinder second, which is
    the order a FIFO device queue would see them in.

    Attributes:
        cylinder: The target cylinder.
        arrival_time: Simulated time the request arrived (>= 0).

    """

    cylinder: int
    arrival_time: int = 0

    def __post_init__(self) -> None:
        """Reject negative arrival times."""
        if self.arrival_time < 0:
            msg = "arrival_time cannot be negative"
            raise ValueError(msg)

    def __lt__(self, other: object) -> bool:
        """Order by (arrival_time, cylinder)."""
        if not isinstance(other, Request):
            return NotImplemented
        return (self.arrival_time, self.cylinder) < (other.arrival_time, other.cylinder)


class RequestTrace(Sequence[Request]):
    """An immutable, ordered collection of requests feeding one run."""

    def __init__(self, requests: Iterable[Request] = ()) -> None:
        """Create a trace from any iterable of requests (copied)."""
        self._requests: tuple[Request, ...] = tuple(requests)

    @classmethod
    def from_cylinders(cls, cylinders: Iterable[int]) -> RequestTrace:
        """Build a trace where every request arrives at time 0."""
        return cls(Request(cylinder) for cylinder in cylinders)

    @classmethod
    def with_sequential_arrivals(cls, cylinders: Iterable[int], *, interval: int) -> RequestTrace:
        """Build a trace where request *i* arrives at ``i * interval``."""
        return cls(Request(cylinder, i * interval) for i, cylinder in enumerate(cylinders))

    @property
    def cylinders(self) -> list[int]:
        """Return the cylinder of every request, in trace order."""
        return [r.cylinder for r in self._requests]

    @property
    def arrival_times(self) -> list[int]:
        """Return the arrival time of every request, in trace order."""
        return [r.arrival_time for r in self._requests]

    @property
    def is_time_based(self) -> bool:
        """Return True if any request arrives after time 0."""
        return any(r.arrival_time > 0 for r in self._requests)

    def sorted_by_arrival(self) -> RequestTrace:
        """Return a copy ordered by (arrival_time, cylinder)."""
        return RequestTrace(sorted(self._requests))

    @overload
    def __getitem__(self, index: int) -> Request: ...

    @overload
    def __getitem__(self, index: slice) -> RequestTrace: ...

    def __getitem__(self, index: int | slice) -> Request | RequestTrace:
        """Return one request, or a sub-trace for a slice."""
        if isinstance(index, slice):
            return RequestTrace(self._requests[index])
        return self._requests[index]

    def __len__(self) -> int:
        """Return the number of requests."""
        return len(self._requests)

    def __iter__(self) -> Iterator[Request]:
        """Iterate requests in trace order."""
        return iter(self._requests)

    def __eq__(self, other: object) -> bool:
        """Compare request-by-request."""
        if not isinstance(other, RequestTrace):
            return NotImplemented
        return self._requests == other._requests

    def __hash__(self) -> int:
        """Hash the underlying tuple."""
        return hash(self._requests)

    def __repr__(self) -> str:
        """Show the (cylinder, arrival) pairs."""
        pairs = ", ".join(f"{r.cylinder}@{r.arrival_time}" for r in self._requests)
        return f"RequestTrace([{pairs}])"
