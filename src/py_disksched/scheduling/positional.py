"""Positional disk scheduling — order requests by where they are.

The six classic algorithms look only at cylinder numbers; arrival times
are ignored and every request is treated as already waiting.  Think of
the disk arm as an elevator in a tall building:

    - **FCFS** — stop at floors in the order buttons were pressed.
    - **SSTF** — always go to the nearest requested floor (greedy).
    - **SCAN** — go all the way to the top, then all the way down.
    - **LOOK** — like SCAN, but turn around at the last request instead
      of riding to the roof.
    - **C-SCAN** — go up to the top, drop straight to the ground floor,
      and go up again.  Nobody is favoured for living mid-building.
    - **C-LOOK** — C-SCAN with a choice of how to get back down: via the
      edges, or straight to the lowest waiting passenger.

All policies satisfy the ``DiskPolicy`` protocol — the Strategy
pattern — and each ``execute`` builds a fresh ``ResultTrace``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from py_disksched.geometry import WrapPolicy
from py_disksched.result import TraceBuilder
from py_disksched.scheduling.sweep import circular_sweep, scan_sweep, service_all

if TYPE_CHECKING:
    from py_disksched.context import RunContext
    from py_disksched.request import Request
    from py_disksched.result import ResultTrace


class FCFSPolicy:
    """First Come, First Served — service in input order.

    Simple and fair (no starvation), but the arm zigzags across the
    disk and total seek time is high.
    """

    @property
    def name(self) -> str:
        """Return ``"FCFS"``."""
        return "FCFS"

    def execute(self, context: RunContext) -> ResultTrace:
        """Service every request in the order given."""
        builder = TraceBuilder(context, name=self.name)
        service_all(builder, context.requests)
        return builder.build()


class SSTFPolicy:
    """Shortest Seek Time First — always go to the nearest request.

    A greedy choice that minimises each individual seek.  It usually
    beats FCFS on total movement but can **starve** requests far from a
    busy region.  When two requests are equally near, the lower cylinder
    wins, so the schedule is deterministic.

    Each step scans every remaining request: O(n^2) overall, which is
    fine at simulation scale.
    """

    @property
    def name(self) -> str:
        """Return ``"SSTF"``."""
        return "SSTF"

    def execute(self, context: RunContext) -> ResultTrace:
        """Repeatedly service the closest remaining request."""
        builder = TraceBuilder(context, name=self.name)
        remaining = list(context.requests)
        while remaining:
            nearest = _nearest(remaining, builder.position)
            remaining.remove(nearest)
            builder.service(nearest)
        return builder.build()


def _nearest(requests: list[Request], position: int) -> Request:
    """Return the request closest to *position*; ties go to the lower cylinder."""
    return min(requests, key=lambda r: (abs(r.cylinder - position), r.cylinder))


class SCANPolicy:
    """SCAN (elevator) — sweep to the edge, then reverse.

    Requests at the head are serviced first.  The head then sweeps in
    the geometry's direction, servicing requests in order.  If requests
    remain on the other side, it continues to the physical edge of the
    disk before reversing.  When nothing waits behind the head, the edge
    trip is skipped.

    No request waits more than two full sweeps.
    """

    @property
    def name(self) -> str:
        """Return ``"SCAN"``."""
        return "SCAN"

    def execute(self, context: RunContext) -> ResultTrace:
        """Sweep with an edge visit at the turn."""
        builder = TraceBuilder(context, name=self.name)
        scan_sweep(builder, context.requests, context.geometry, to_boundary=True)
        return builder.build()


class LOOKPolicy:
    """LOOK — SCAN that turns around at the last request.

    Identical service order to SCAN, but the head never travels past
    the furthest request in the sweep direction, so total movement is
    never worse than SCAN's.
    """

    @property
    def name(self) -> str:
        """Return ``"LOOK"``."""
        return "LOOK"

    def execute(self, context: RunContext) -> ResultTrace:
        """Sweep and reverse at the last request."""
        builder = TraceBuilder(context, name=self.name)
        scan_sweep(builder, context.requests, context.geometry, to_boundary=False)
        return builder.build()


class CSCANPolicy:
    """Circular SCAN — sweep one way, jump back, sweep again.

    Only services requests while moving in the geometry's direction.
    After the last request ahead, if anything is left behind the head,
    the arm travels to the edge, jumps to the opposite edge (charged the
    full ``upper - lower`` distance), and continues in the same
    direction.  Wait times are more uniform than SCAN's because middle
    cylinders are no longer passed twice per cycle.

    C-SCAN always wraps via the edges; the wrap policy applies to
    C-LOOK only.
    """

    @property
    def name(self) -> str:
        """Return ``"C_SCAN"``."""
        return "C_SCAN"

    def execute(self, context: RunContext) -> ResultTrace:
        """Sweep one way with an edge-to-edge wrap."""
        builder = TraceBuilder(context, name=self.name)
        circular_sweep(
            builder,
            context.requests,
            context.geometry,
            wrap=WrapPolicy.TO_BOUNDARY,
        )
        return builder.build()


class CLOOKPolicy:
    """Circular LOOK — C-SCAN with a configurable wrap.

    - ``WrapPolicy.TO_BOUNDARY`` reproduces C-SCAN exactly.
    - ``WrapPolicy.TO_FIRST_PENDING`` jumps from the last serviced
      cylinder straight to the first pending request on the far side,
      cutting out the wasted edge travel.
    """

    @property
    def name(self) -> str:
        """Return ``"C_LOOK"``."""
        return "C_LOOK"

    def execute(self, context: RunContext) -> ResultTrace:
        """Sweep one way, wrapping per the geometry's policy."""
        builder = TraceBuilder(context, name=self.name)
        circular_sweep(
            builder,
            context.requests,
            context.geometry,
            wrap=context.geometry.wrap_policy,
        )
        return builder.build()
