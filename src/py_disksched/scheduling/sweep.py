"""Sweep step functions shared by every direction-aware algorithm.

SCAN, LOOK, C-SCAN, C-LOOK, FSCAN and N-Step-SCAN all do the same
basic thing: split the pending requests around the head, service one
side in order, then deal with the other side.  They differ only in what
happens at the turn:

- **SCAN** travels to the disk edge before reversing.
- **LOOK** reverses at the last request.
- **C-SCAN** travels to the edge, jumps to the opposite edge, and keeps
  going the same way.
- **C-LOOK** either does what C-SCAN does or jumps straight to the first
  pending request, depending on the wrap policy.

The functions here take a ``TraceBuilder`` and drive it; they keep no
state of their own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from py_disksched.geometry import WrapPolicy

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from py_disksched.context import RunContext
    from py_disksched.geometry import DiskGeometry
    from py_disksched.request import Request
    from py_disksched.result import ResultTrace, TraceBuilder


class DiskPolicy(Protocol):
    """Protocol for disk scheduling policies (Strategy pattern)."""

    @property
    def name(self) -> str:
        """Return the registry name of the policy, e.g. ``"SCAN"``."""
        ...  # pragma: no cover

    def execute(self, context: RunContext) -> ResultTrace:
        """Run the policy to completion and return its trace."""
        ...  # pragma: no cover


def split_at(
    requests: Iterable[Request],
    position: int,
) -> tuple[list[Request], list[Request], list[Request]]:
    """Partition requests around the head.

    Returns:
        ``(at, below, above)`` — requests exactly at *position* in input
        order, requests below it in descending cylinder order, and
        requests above it in ascending cylinder order.

    """
    at: list[Request] = []
    below: list[Request] = []
    above: list[Request] = []
    for request in requests:
        if request.cylinder == position:
            at.append(request)
        elif request.cylinder < position:
            below.append(request)
        else:
            above.append(request)
    below.sort(key=lambda r: r.cylinder, reverse=True)
    above.sort(key=lambda r: r.cylinder)
    return at, below, above


def service_all(
    builder: TraceBuilder,
    requests: Iterable[Request],
    after_service: Callable[[], None] | None = None,
) -> None:
    """Service *requests* in the given order."""
    for request in requests:
        builder.service(request)
        if after_service is not None:
            after_service()


def _travel_to(builder: TraceBuilder, cylinder: int) -> None:
    if builder.position != cylinder:
        builder.travel(cylinder)


def scan_sweep(
    builder: TraceBuilder,
    requests: Iterable[Request],
    geometry: DiskGeometry,
    *,
    to_boundary: bool,
    after_service: Callable[[], None] | None = None,
) -> None:
    """Service *requests* with an elevator sweep.

    Requests at the head go first, then the side the geometry's
    direction points at, then the other side in reverse.  With
    *to_boundary* the head visits the disk edge before reversing, but
    only if there is something to reverse for.

    Args:
        builder: The run's accumulator.
        requests: The requests to service.
        geometry: Supplies the direction and the edges.
        to_boundary: SCAN (True) or LOOK (False) turning behaviour.
        after_service: Hook called after every service.

    """
    at, below, above = split_at(requests, builder.position)
    if geometry.moving_up:
        first, second, edge = above, below, geometry.upper
    else:
        first, second, edge = below, above, geometry.lower

    service_all(builder, at, after_service)
    service_all(builder, first, after_service)
    if second and to_boundary:
        _travel_to(builder, edge)
    service_all(builder, second, after_service)


def circular_sweep(
    builder: TraceBuilder,
    requests: Iterable[Request],
    geometry: DiskGeometry,
    *,
    wrap: WrapPolicy,
) -> None:
    """Service *requests* in one direction only, wrapping once.

    After the requests ahead of the head are done, any left behind it
    are serviced in the *same* direction after a wrap:

    - ``TO_BOUNDARY`` — travel to the near edge, then jump to the far
      edge.  The jump costs exactly ``upper - lower``.
    - ``TO_FIRST_PENDING`` — jump straight to the first pending request,
      paying only that distance.

    No requests behind the head means no wrap and no edge trip.
    """
    at, below, above = split_at(requests, builder.position)
    if geometry.moving_up:
        ahead = above
        behind = sorted(below, key=lambda r: r.cylinder)
        near_edge, far_edge = geometry.upper, geometry.lower
    else:
        ahead = below
        behind = sorted(above, key=lambda r: r.cylinder, reverse=True)
        near_edge, far_edge = geometry.lower, geometry.upper

    service_all(builder, at)
    service_all(builder, ahead)
    if behind and wrap is WrapPolicy.TO_BOUNDARY:
        _travel_to(builder, near_edge)
        builder.travel(far_edge)
    service_all(builder, behind)
