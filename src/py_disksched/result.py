"""Result traces — the record of one scheduling run.

Every algorithm produces a ``ResultTrace``: where the head went, which
cylinders it serviced and in what order, how far each move was, and (in
time-based runs) when each request arrived and when it was serviced.
Reporting and metrics read traces; nothing ever writes to one after it
has been returned.

Traces are built by a ``TraceBuilder`` — a per-run accumulator that owns
the head position, the movement total and the simulated clock.  Each
algorithm threads its builder through small step functions instead of
mutating shared fields on a base class, so every step is independently
testable.

Bookkeeping rules:
    - ``head_path`` starts at the initial position and gains one entry
      per head move.  A move either services a request or is a
      *waypoint* (travel to a disk edge, or a wrap jump).
    - ``seek_distances`` gains one entry per recorded move, so
      ``len(seek_distances) == len(head_path) - 1`` and the distances
      always sum to ``total_movement``.
    - With path recording off, waypoints are not stored; their distance
      is folded into the next service's seek instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

from py_disksched.logging import LogLevel
from py_disksched.metrics import Metrics, compute_metrics

if TYPE_CHECKING:
    from py_disksched.context import RunContext
    from py_disksched.request import Request


@dataclass(frozen=True)
class ResultTrace:
    """Immutable outcome of one algorithm run.

    Attributes:
        algorithm_name: Display name, e.g. ``"SCAN"`` or ``"N_STEP_SCAN (N=4)"``.
        initial_position: Where the head started.
        total_movement: Total cylinders travelled (>= 0).
        service_order: Cylinders in the order they were serviced.
        head_path: Every position the head visited, starting with
            ``initial_position``.
        service_times: Clock value at each service (timed runs only).
        arrival_times: Arrival time of each serviced request (time-based
            runs only).
        seek_distances: Distance of each recorded head move.

    """

    algorithm_name: str
    initial_position: int
    total_movement: int = 0
    service_order: tuple[int, ...] = ()
    head_path: tuple[int, ...] = ()
    service_times: tuple[int, ...] = ()
    arrival_times: tuple[int, ...] = ()
    seek_distances: tuple[int, ...] = ()

    @classmethod
    def empty(cls, algorithm_name: str, initial_position: int) -> ResultTrace:
        """Return the zero-movement trace of an empty workload."""
        return cls(
            algorithm_name=algorithm_name,
            initial_position=initial_position,
            head_path=(initial_position,),
        )

    @property
    def request_count(self) -> int:
        """Return the number of requests serviced."""
        return len(self.service_order)

    @property
    def final_position(self) -> int:
        """Return where the head came to rest."""
        return self.head_path[-1] if self.head_path else self.initial_position

    @property
    def waypoint_count(self) -> int:
        """Return how many recorded moves did not service a request."""
        return len(self.head_path) - 1 - len(self.service_order)

    @cached_property
    def metrics(self) -> Metrics:
        """Return the derived metrics (computed once, on first access)."""
        return compute_metrics(self)


class TraceBuilder:
    """Per-run accumulator for head position, movement and clock.

    Usage::

        builder = TraceBuilder(context, name="SCAN")
        builder.service(request)
        builder.travel(geometry.upper)   # non-servicing waypoint
        trace = builder.build()

    """

    def __init__(
        self,
        context: RunContext,
        *,
        name: str,
        honour_arrivals: bool = False,
    ) -> None:
        """Start a trace at the context's initial position.

        Args:
            context: The run being traced.
            name: Algorithm name recorded in the trace and log.
            honour_arrivals: The policy schedules by arrival time.  Only
                then does a time-based context record arrival times;
                positional policies treat every request as arriving at 0.

        """
        self._context = context
        self._name = name
        self._time_based = honour_arrivals and context.time_based
        self._timed = self._time_based or context.record_timing
        self._position = context.initial_position
        self._movement = 0
        self._clock = 0
        self._detour = 0
        self._service_order: list[int] = []
        self._head_path: list[int] = [context.initial_position]
        self._service_times: list[int] = []
        self._arrival_times: list[int] = []
        self._seek_distances: list[int] = []

    @property
    def position(self) -> int:
        """Return the current head position."""
        return self._position

    @property
    def movement(self) -> int:
        """Return the movement accumulated so far."""
        return self._movement

    @property
    def clock(self) -> int:
        """Return the simulated time."""
        return self._clock

    @property
    def name(self) -> str:
        """Return the algorithm name this builder records."""
        return self._name

    def _move(self, cylinder: int) -> int:
        distance = abs(cylinder - self._position)
        self._movement += distance
        self._clock += distance
        self._position = cylinder
        return distance

    def service(self, request: Request) -> None:
        """Move to *request* and record it as serviced."""
        seek = self._move(request.cylinder) + self._detour
        self._detour = 0
        self._service_order.append(request.cylinder)
        self._head_path.append(request.cylinder)
        self._seek_distances.append(seek)
        if self._timed:
            self._service_times.append(self._clock)
        if self._time_based:
            self._arrival_times.append(request.arrival_time)
        if self._context.verbose:
            if self._time_based:
                message = f"({self._name}) Time={self._clock} Servicing at: {request.cylinder}"
            else:
                message = f"({self._name}) Servicing at: {request.cylinder}"
            self.log(LogLevel.DEBUG, message)

    def travel(self, cylinder: int) -> None:
        """Move to *cylinder* without servicing anything (a waypoint)."""
        distance = self._move(cylinder)
        if self._context.record_path:
            self._head_path.append(cylinder)
            self._seek_distances.append(distance)
        else:
            self._detour += distance

    def wait_until(self, time: int) -> None:
        """Idle the head until *time*; the clock never runs backwards."""
        self._clock = max(self._clock, time)

    def log(self, level: LogLevel, message: str) -> None:
        """Send an entry to the run's logger, if it has one."""
        if self._context.logger is not None:
            self._context.logger.log(level, message, source=self._name)

    def build(self) -> ResultTrace:
        """Freeze the accumulated state into a ``ResultTrace``."""
        return ResultTrace(
            algorithm_name=self._name,
            initial_position=self._context.initial_position,
            total_movement=self._movement,
            service_order=tuple(self._service_order),
            head_path=tuple(self._head_path),
            service_times=tuple(self._service_times),
            arrival_times=tuple(self._arrival_times),
            seek_distances=tuple(self._seek_distances),
        )
