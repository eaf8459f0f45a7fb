"""Rotating-queue scheduling — FSCAN and N-Step-SCAN.

Plain SCAN has a subtle flaw: if new requests keep landing just ahead
of the head, the sweep keeps getting extended and requests on the far
side wait indefinitely ("arm stickiness").  The rotating-queue
algorithms fix this by **freezing** the set of requests a sweep will
service:

- **FSCAN** keeps two pools.  The *active* pool is swept in SCAN order;
  anything arriving meanwhile goes into the *holding* pool.  When the
  active pool drains, the pools swap.
- **N-Step-SCAN** takes at most N eligible requests (in arrival order)
  per sweep.  N=1 behaves like FCFS; N at least the workload size
  services in the same order as a single SCAN.

A sweep reverses at its last request rather than at the disk edge, so
the head never travels past the batch it is working on.

Time model: the simulated clock advances one unit per cylinder
travelled.  When nothing is eligible, the head idles until the next
arrival.

The rotation is a small state machine::

    IDLE → SWEEPING → ROTATING → SWEEPING → ... → DRAINED

``next_state`` is the whole transition function, so termination can be
checked without running a sweep.

Without time-based mode the input list is split up front instead
(halves for FSCAN, chunks of N for N-Step-SCAN) and each part is swept
in turn.  No waiting happens in that mode.
"""

from __future__ import annotations

from collections import deque
from enum import StrEnum
from typing import TYPE_CHECKING

from py_disksched.logging import LogLevel
from py_disksched.result import TraceBuilder
from py_disksched.scheduling.sweep import scan_sweep

if TYPE_CHECKING:
    from collections.abc import Iterable

    from py_disksched.context import RunContext
    from py_disksched.request import Request
    from py_disksched.result import ResultTrace


class RotationState(StrEnum):
    """Represent where a rotating-queue run currently is."""

    IDLE = "idle"
    SWEEPING = "sweeping"
    ROTATING = "rotating"
    DRAINED = "drained"


def next_state(*, active: bool, holding: bool, pending: bool) -> RotationState:
    """Return the state implied by which pools are non-empty.

    Args:
        active: The active pool has requests to sweep.
        holding: The holding pool has requests waiting for a swap.
        pending: Some requests have not arrived yet.

    """
    if active:
        return RotationState.SWEEPING
    if holding or pending:
        return RotationState.ROTATING
    return RotationState.DRAINED


class RotatingQueue:
    """Active, holding and not-yet-arrived request pools.

    ``pending`` is kept sorted by arrival time, so arrivals are always
    taken from the front.  Requests arriving together keep their input
    order.
    """

    def __init__(self, requests: Iterable[Request]) -> None:
        """Queue every request as pending."""
        self._pending: deque[Request] = deque(sorted(requests, key=lambda r: r.arrival_time))
        self._active: list[Request] = []
        self._holding: list[Request] = []
        self._state = RotationState.IDLE
        self._rotations = 0

    @property
    def state(self) -> RotationState:
        """Return the current rotation state."""
        return self._state

    @property
    def rotations(self) -> int:
        """Return how many batches have been taken for sweeping."""
        return self._rotations

    @property
    def active(self) -> list[Request]:
        """Return a copy of the active pool."""
        return list(self._active)

    @property
    def holding(self) -> list[Request]:
        """Return a copy of the holding pool."""
        return list(self._holding)

    @property
    def pending(self) -> list[Request]:
        """Return a copy of the requests that have not arrived yet."""
        return list(self._pending)

    def advance(self) -> RotationState:
        """Recompute and return the state from the pools."""
        self._state = next_state(
            active=bool(self._active),
            holding=bool(self._holding),
            pending=bool(self._pending),
        )
        return self._state

    def _arrivals(self, now: int) -> list[Request]:
        arrived: list[Request] = []
        while self._pending and self._pending[0].arrival_time <= now:
            arrived.append(self._pending.popleft())
        return arrived

    def admit(self, now: int) -> None:
        """Move requests that have arrived by *now* into the active pool."""
        self._active.extend(self._arrivals(now))

    def hold(self, now: int) -> None:
        """Move requests that have arrived by *now* into the holding pool."""
        self._holding.extend(self._arrivals(now))

    def take(self, limit: int | None = None) -> list[Request]:
        """Remove and return up to *limit* active requests (all if None)."""
        count = len(self._active) if limit is None else limit
        batch, self._active = self._active[:count], self._active[count:]
        self._rotations += 1
        return batch

    def rotate(self, builder: TraceBuilder) -> None:
        """Refill the active pool once it has drained.

        A non-empty holding pool becomes the active pool (the FSCAN
        swap).  Otherwise the head idles until the next arrival and
        everything eligible by then is admitted.
        """
        if self._holding:
            self._active, self._holding = self._holding, []
            return
        if self._pending:
            builder.wait_until(self._pending[0].arrival_time)
            self.admit(builder.clock)


def _cylinders(batch: list[Request]) -> list[int]:
    return [r.cylinder for r in batch]


class FSCANPolicy:
    """FSCAN (freeze SCAN) — sweep a frozen snapshot, queue the rest.

    Time-based: the requests present at time 0 form the first active
    pool.  Every request that arrives while a sweep is in progress is
    parked in the holding pool and can never join that sweep.  When the
    sweep finishes, the holding pool becomes active.

    Positional: the first half of the input (``len // 2`` requests) is
    swept, then the second half.
    """

    @property
    def name(self) -> str:
        """Return ``"FSCAN"``."""
        return "FSCAN"

    def execute(self, context: RunContext) -> ResultTrace:
        """Run FSCAN in the context's mode."""
        builder = TraceBuilder(context, name=self.name, honour_arrivals=True)
        if context.time_based:
            self._execute_time_based(context, builder)
        else:
            half = len(context.requests) // 2
            halves = [list(context.requests[:half]), list(context.requests[half:])]
            _sweep_parts(context, builder, [h for h in halves if h], label="Queue")
        return builder.build()

    def _execute_time_based(self, context: RunContext, builder: TraceBuilder) -> None:
        queue = RotatingQueue(context.requests)
        queue.admit(builder.clock)

        def park_arrivals() -> None:
            queue.hold(builder.clock)

        while (state := queue.advance()) is not RotationState.DRAINED:
            if state is RotationState.ROTATING:
                queue.rotate(builder)
                continue
            batch = queue.take()
            builder.log(
                LogLevel.INFO,
                f"Time={builder.clock} Processing Queue {queue.rotations}: {_cylinders(batch)}",
            )
            scan_sweep(
                builder,
                batch,
                context.geometry,
                to_boundary=False,
                after_service=park_arrivals,
            )


class NStepSCANPolicy:
    """N-Step-SCAN — sweep the next N requests, then the next N.

    Bounding each sweep to N requests caps how long any request can be
    postponed, and gives lower response-time variance than plain SCAN.

    Time-based: before each sweep, everything that has arrived joins the
    eligible pool in arrival order and the first N are taken.  A short
    batch is swept as-is; the head never waits for a batch to fill.

    Positional: the input is cut into contiguous chunks of N.
    """

    def __init__(self, *, step_size: int | None = None) -> None:
        """Create the policy.

        Args:
            step_size: N; if None, the run context's step size is used.
                Values below 1 are treated as 1.

        """
        self._step_size = None if step_size is None else max(1, step_size)

    @property
    def name(self) -> str:
        """Return ``"N_STEP_SCAN"``."""
        return "N_STEP_SCAN"

    def step_size_for(self, context: RunContext) -> int:
        """Return the N this policy will use for *context*."""
        return context.step_size if self._step_size is None else self._step_size

    def execute(self, context: RunContext) -> ResultTrace:
        """Run N-Step-SCAN in the context's mode."""
        step = self.step_size_for(context)
        builder = TraceBuilder(
            context, name=f"{self.name} (N={step})", honour_arrivals=True
        )
        builder.log(LogLevel.INFO, f"Step size N = {step}")
        if context.time_based:
            self._execute_time_based(context, builder, step)
        else:
            requests = list(context.requests)
            chunks = [requests[i : i + step] for i in range(0, len(requests), step)]
            _sweep_parts(context, builder, chunks, label="Subqueue")
        return builder.build()

    def _execute_time_based(self, context: RunContext, builder: TraceBuilder, step: int) -> None:
        queue = RotatingQueue(context.requests)
        queue.admit(builder.clock)

        while (state := queue.advance()) is not RotationState.DRAINED:
            if state is RotationState.ROTATING:
                queue.rotate(builder)
                continue
            batch = queue.take(step)
            builder.log(
                LogLevel.INFO,
                f"Time={builder.clock} Processing Subqueue {queue.rotations}: {_cylinders(batch)}",
            )
            scan_sweep(builder, batch, context.geometry, to_boundary=False)
            queue.admit(builder.clock)


def _sweep_parts(
    context: RunContext,
    builder: TraceBuilder,
    parts: list[list[Request]],
    *,
    label: str,
) -> None:
    """SCAN each pre-split part of the input in turn."""
    for number, part in enumerate(parts, start=1):
        builder.log(LogLevel.INFO, f"Processing {label} {number}: {_cylinders(part)}")
        scan_sweep(builder, part, context.geometry, to_boundary=False)
