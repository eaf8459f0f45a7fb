"""Run context — everything one scheduling run needs, validated once.

A ``RunContext`` bundles the disk geometry, the head's starting
position, the workload, and the knobs the rotating-queue algorithms
read (step size N, time-based mode).  Building one is where input
validation happens:

- The initial position must lie on the disk, or construction fails
  with ``InvalidGeometryError``.
- Requests outside the disk are either rejected
  (``OutOfRangeRequestError``) or clamped to the nearest edge, depending
  on the ``RangePolicy``.  Clamping rewrites the workload itself, so the
  algorithm and the recorded trace see the same cylinders.
- A step size below 1 is quietly raised to 1.

Once built, a context never changes, and it belongs to the one run that
uses it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from py_disksched.geometry import DiskGeometry, RangePolicy
from py_disksched.logging import Logger, LogLevel
from py_disksched.request import Request, RequestTrace

DEFAULT_STEP_SIZE = 4


@dataclass(frozen=True)
class RunContext:
    """Immutable inputs for one algorithm execution.

    Attributes:
        geometry: Disk bounds, direction and wrap policy.
        initial_position: Starting head cylinder.
        requests: The workload, in input order.
        step_size: N for N-Step-SCAN (>= 1).
        time_based: Honour arrival times (FSCAN / N-Step-SCAN only).
        record_timing: Stamp service times even for positional runs.
        record_path: Keep boundary and wrap waypoints in the head path.
        verbose: Log every individual service at DEBUG.
        logger: Where log entries go; None discards them.

    """

    geometry: DiskGeometry
    initial_position: int
    requests: RequestTrace = field(default_factory=RequestTrace)
    step_size: int = DEFAULT_STEP_SIZE
    time_based: bool = False
    record_timing: bool = False
    record_path: bool = True
    verbose: bool = True
    logger: Logger | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate position and requests; clamp the step size.

        Raises:
            InvalidGeometryError: If the initial position is off the disk.
            OutOfRangeRequestError: If any request is off the disk.

        """
        self.geometry.validate_position(self.initial_position)
        for request in self.requests:
            self.geometry.validate_cylinder(request.cylinder)
        if self.step_size < 1:
            object.__setattr__(self, "step_size", 1)

    @classmethod
    def create(
        cls,
        geometry: DiskGeometry,
        initial_position: int,
        requests: Iterable[Request] | Iterable[int],
        *,
        range_policy: RangePolicy = RangePolicy.CLAMP,
        step_size: int = DEFAULT_STEP_SIZE,
        time_based: bool = False,
        record_timing: bool = False,
        record_path: bool = True,
        verbose: bool = True,
        logger: Logger | None = None,
    ) -> RunContext:
        """Build a context, applying the out-of-range policy first.

        Args:
            geometry: Disk bounds, direction and wrap policy.
            initial_position: Starting head cylinder.
            requests: Request objects or bare cylinder numbers (which
                arrive at time 0).
            range_policy: Reject or clamp off-disk requests.
            step_size: N for N-Step-SCAN.
            time_based: Honour arrival times (FSCAN / N-Step-SCAN only).
            record_timing: Stamp service times for positional runs.
            record_path: Keep waypoints in the head path.
            verbose: Log every individual service.
            logger: Destination for log entries.

        Returns:
            A validated, immutable ``RunContext``.

        Raises:
            InvalidGeometryError: If the initial position is off the disk.
            OutOfRangeRequestError: If a request is off the disk and the
                policy is ``REJECT``.

        """
        geometry.validate_position(initial_position)
        trace = _as_trace(requests)
        if range_policy is RangePolicy.CLAMP:
            trace = _clamp_trace(trace, geometry, logger)
        return cls(
            geometry=geometry,
            initial_position=initial_position,
            requests=trace,
            step_size=step_size,
            time_based=time_based,
            record_timing=record_timing,
            record_path=record_path,
            verbose=verbose,
            logger=logger,
        )


def _as_trace(requests: Iterable[Request] | Iterable[int]) -> RequestTrace:
    """Normalise cylinders or requests into a ``RequestTrace``."""
    if isinstance(requests, RequestTrace):
        return requests
    return RequestTrace(r if isinstance(r, Request) else Request(r) for r in requests)


def _clamp_trace(
    trace: RequestTrace,
    geometry: DiskGeometry,
    logger: Logger | None,
) -> RequestTrace:
    """Pull every off-disk request onto the nearest edge."""
    if all(geometry.contains(r.cylinder) for r in trace):
        return trace
    clamped: list[Request] = []
    for request in trace:
        cylinder = geometry.clamp(request.cylinder)
        if cylinder != request.cylinder and logger is not None:
            logger.log(
                LogLevel.WARNING,
                f"Request {request.cylinder} is outside disk bounds "
                f"[{geometry.lower}, {geometry.upper}]. Clamping to {cylinder}.",
                source="context",
            )
        clamped.append(Request(cylinder, request.arrival_time))
    return RequestTrace(clamped)
