"""Tests for the positional disk scheduling algorithms.

The disk arm moves across cylinders, and the time is dominated by
**seek time** — how far the arm must travel.  These algorithms only
look at cylinder numbers.

Algorithms tested:
    - **FCFS** — service in submission order.
    - **SSTF** — service the nearest request.
    - **SCAN** — sweep to the edge, then reverse.
    - **LOOK** — sweep to the last request, then reverse.
    - **C-SCAN** — sweep one way, jump edge to edge, continue.
    - **C-LOOK** — C-SCAN with a configurable wrap.
"""

from random import Random

import pytest

from py_disksched.context import RunContext
from py_disksched.geometry import Direction, DiskGeometry, WrapPolicy
from py_disksched.request import Request
from py_disksched.result import ResultTrace
from py_disksched.scheduling import (
    ALGORITHM_NAMES,
    CLOOKPolicy,
    CSCANPolicy,
    FCFSPolicy,
    LOOKPolicy,
    SCANPolicy,
    SSTFPolicy,
    UnknownAlgorithmError,
    create_policy,
)

# -- Textbook example constants -----------------------------------------------
# Classic example: 8 requests with the head at cylinder 53 on a 0..199 disk.
_TEXTBOOK_REQUESTS = [98, 183, 37, 122, 14, 124, 65, 67]
_TEXTBOOK_HEAD = 53

# Second example: 8 requests with the head at cylinder 50.
_EXAMPLE_REQUESTS = [176, 79, 34, 60, 92, 11, 41, 114]
_EXAMPLE_HEAD = 50

_UP = DiskGeometry(0, 199)
_DOWN = DiskGeometry(0, 199, direction=Direction.DECREASING)
_UP_FIRST = DiskGeometry(0, 199, wrap_policy=WrapPolicy.TO_FIRST_PENDING)
_POSITIONAL = ("FCFS", "SSTF", "SCAN", "LOOK", "C_SCAN", "C_LOOK")

# A late arrival that FCFS would service before it arrives.
_LATE_ARRIVALS = [Request(10, 0), Request(5, 100)]


def _run(
    policy: object,
    requests: list[int],
    head: int,
    geometry: DiskGeometry = _UP,
    **kwargs: bool,
) -> ResultTrace:
    """Execute a policy on a fresh context."""
    ctx = RunContext.create(geometry, head, requests, **kwargs)
    return policy.execute(ctx)  # type: ignore[attr-defined]


def _random_workloads(count: int) -> list[tuple[list[int], int]]:
    """Return reproducible (requests, head) pairs on the 0..199 disk."""
    rng = Random(1234)
    return [
        ([rng.randint(0, 199) for _ in range(rng.randint(1, 25))], rng.randint(0, 199))
        for _ in range(count)
    ]


# -- FCFS (First Come, First Served) ------------------------------------------


class TestFCFS:
    """FCFS services requests in the order they arrive — no reordering."""

    def test_preserves_order(self) -> None:
        """Requests are serviced in submission order."""
        trace = _run(FCFSPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        assert list(trace.service_order) == _TEXTBOOK_REQUESTS

    def test_head_movement(self) -> None:
        """Total movement is the sum of absolute differences."""
        trace = _run(FCFSPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        expected = 640
        assert trace.total_movement == expected

    def test_example_movement(self) -> None:
        """The second example costs 510 cylinders."""
        expected = 510
        assert _run(FCFSPolicy(), _EXAMPLE_REQUESTS, _EXAMPLE_HEAD).total_movement == expected

    def test_empty_queue(self) -> None:
        """An empty workload gives the zero-movement trace."""
        trace = _run(FCFSPolicy(), [], _TEXTBOOK_HEAD)
        assert trace == ResultTrace.empty("FCFS", _TEXTBOOK_HEAD)

    def test_request_at_head_costs_nothing(self) -> None:
        """A request at the head is serviced with a zero seek."""
        trace = _run(FCFSPolicy(), [_TEXTBOOK_HEAD], _TEXTBOOK_HEAD)
        assert trace.seek_distances == (0,)
        assert trace.total_movement == 0


# -- SSTF (Shortest Seek Time First) ------------------------------------------


class TestSSTF:
    """SSTF always services the request nearest to the current head."""

    def test_textbook_order(self) -> None:
        """The textbook example gives the textbook order."""
        trace = _run(SSTFPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        assert list(trace.service_order) == [65, 67, 37, 14, 98, 122, 124, 183]
        expected = 236
        assert trace.total_movement == expected

    def test_example_movement(self) -> None:
        """The second example costs 204 cylinders."""
        expected = 204
        assert _run(SSTFPolicy(), _EXAMPLE_REQUESTS, _EXAMPLE_HEAD).total_movement == expected

    def test_reduces_movement(self) -> None:
        """SSTF beats FCFS on the textbook example."""
        fcfs = _run(FCFSPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        sstf = _run(SSTFPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        assert sstf.total_movement < fcfs.total_movement

    def test_tie_goes_to_lower_cylinder(self) -> None:
        """Equidistant requests resolve to the lower cylinder."""
        trace = _run(SSTFPolicy(), [60, 40], 50)
        assert list(trace.service_order) == [40, 60]

    def test_every_step_is_nearest(self) -> None:
        """Each choice is at minimum distance among the remaining requests."""
        for requests, head in _random_workloads(20):
            trace = _run(SSTFPolicy(), requests, head)
            remaining = list(requests)
            position = head
            for cylinder in trace.service_order:
                nearest = min(abs(r - position) for r in remaining)
                assert abs(cylinder - position) == nearest
                remaining.remove(cylinder)
                position = cylinder


# -- SCAN (Elevator Algorithm) ------------------------------------------------


class TestSCAN:
    """SCAN moves in one direction to the edge, then reverses."""

    def test_decreasing_example(self) -> None:
        """Moving down: 50 -> 0 -> 176 costs 226."""
        trace = _run(SCANPolicy(), _EXAMPLE_REQUESTS, _EXAMPLE_HEAD, _DOWN)
        expected = 226
        assert trace.total_movement == expected
        assert list(trace.service_order) == [41, 34, 11, 60, 79, 92, 114, 176]
        assert trace.head_path == (50, 41, 34, 11, 0, 60, 79, 92, 114, 176)

    def test_increasing_example(self) -> None:
        """Moving up: 50 -> 199 -> 11 costs 337."""
        trace = _run(SCANPolicy(), _EXAMPLE_REQUESTS, _EXAMPLE_HEAD)
        expected = 337
        assert trace.total_movement == expected
        assert trace.head_path[6] == _UP.upper

    def test_textbook_increasing(self) -> None:
        """Textbook example moving up costs 331."""
        expected = 331
        trace = _run(SCANPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        assert trace.total_movement == expected

    def test_no_edge_trip_without_reversal(self) -> None:
        """If nothing waits behind the head, the edge is never visited."""
        trace = _run(SCANPolicy(), [60, 90], 50)
        assert trace.head_path == (50, 60, 90)
        assert trace.total_movement == 40  # noqa: PLR2004

    def test_requests_at_head_first(self) -> None:
        """A request at the head is serviced before the sweep."""
        trace = _run(SCANPolicy(), [70, 50, 30], 50)
        assert trace.service_order[0] == 50  # noqa: PLR2004

    def test_waypoint_fold_without_path(self) -> None:
        """With path recording off, the edge trip folds into the next seek."""
        trace = _run(SCANPolicy(), _EXAMPLE_REQUESTS, _EXAMPLE_HEAD, _DOWN, record_path=False)
        assert len(trace.head_path) == len(_EXAMPLE_REQUESTS) + 1
        assert trace.seek_distances[3] == 11 + 60  # 11 -> 0 -> 60
        assert sum(trace.seek_distances) == trace.total_movement


# -- LOOK ---------------------------------------------------------------------


class TestLOOK:
    """LOOK reverses at the last request instead of the edge."""

    def test_increasing_example(self) -> None:
        """Moving up the example costs 291."""
        expected = 291
        assert _run(LOOKPolicy(), _EXAMPLE_REQUESTS, _EXAMPLE_HEAD).total_movement == expected

    def test_decreasing_example(self) -> None:
        """Moving down the example costs 204."""
        expected = 204
        trace = _run(LOOKPolicy(), _EXAMPLE_REQUESTS, _EXAMPLE_HEAD, _DOWN)
        assert trace.total_movement == expected

    def test_same_order_as_scan(self) -> None:
        """LOOK services in SCAN's order."""
        scan = _run(SCANPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        look = _run(LOOKPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        assert look.service_order == scan.service_order
        assert look.waypoint_count == 0

    @pytest.mark.parametrize("geometry", [_UP, _DOWN])
    def test_never_worse_than_scan(self, geometry: DiskGeometry) -> None:
        """LOOK movement <= SCAN movement on any workload."""
        for requests, head in _random_workloads(30):
            look = _run(LOOKPolicy(), requests, head, geometry)
            scan = _run(SCANPolicy(), requests, head, geometry)
            assert look.total_movement <= scan.total_movement

    def test_equal_when_requests_reach_the_edge(self) -> None:
        """A request on the boundary makes SCAN's edge trip free."""
        look = _run(LOOKPolicy(), [199, 10], _EXAMPLE_HEAD)
        scan = _run(SCANPolicy(), [199, 10], _EXAMPLE_HEAD)
        expected = 338
        assert look.total_movement == scan.total_movement == expected

    def test_strictly_less_when_requests_stop_short(self) -> None:
        """SCAN pays for the trip past the last request; LOOK does not."""
        look = _run(LOOKPolicy(), [100, 10], _EXAMPLE_HEAD)
        scan = _run(SCANPolicy(), [100, 10], _EXAMPLE_HEAD)
        assert look.total_movement == 140  # noqa: PLR2004
        assert scan.total_movement == 338  # noqa: PLR2004


# -- C-SCAN (Circular SCAN) ---------------------------------------------------


class TestCSCAN:
    """C-SCAN sweeps one way and jumps back across the whole disk."""

    def test_textbook_path(self) -> None:
        """53 -> 183 -> 199 -> 0 -> 14 -> 37."""
        trace = _run(CSCANPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        assert trace.head_path == (53, 65, 67, 98, 122, 124, 183, 199, 0, 14, 37)
        expected = 382
        assert trace.total_movement == expected

    def test_wrap_costs_exactly_the_span(self) -> None:
        """The edge-to-edge jump is charged upper - lower, once."""
        trace = _run(CSCANPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        assert trace.seek_distances.count(_UP.span) == 1
        assert trace.waypoint_count == 2  # noqa: PLR2004

    def test_decreasing_wraps_to_upper(self) -> None:
        """Moving down, the jump lands on the upper edge."""
        trace = _run(CSCANPolicy(), _EXAMPLE_REQUESTS, _EXAMPLE_HEAD, _DOWN)
        assert trace.head_path[4:6] == (0, 199)
        assert list(trace.service_order) == [41, 34, 11, 176, 114, 92, 79, 60]
        expected = 388
        assert trace.total_movement == expected

    def test_no_wrap_without_requests_behind(self) -> None:
        """Nothing behind the head means no edge trip and no jump."""
        trace = _run(CSCANPolicy(), [60, 90], 50)
        assert trace.head_path == (50, 60, 90)

    def test_ignores_wrap_policy(self) -> None:
        """C-SCAN always wraps through the edges."""
        plain = _run(CSCANPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        first = _run(CSCANPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD, _UP_FIRST)
        assert plain.total_movement == first.total_movement

    def test_waypoints_fold_without_path(self) -> None:
        """Edge trip and jump fold into the first seek after the wrap."""
        trace = _run(CSCANPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD, record_path=False)
        assert trace.head_path == (53, 65, 67, 98, 122, 124, 183, 14, 37)
        assert trace.seek_distances[6] == 16 + 199 + 14
        assert sum(trace.seek_distances) == trace.total_movement


# -- C-LOOK -------------------------------------------------------------------


class TestCLOOK:
    """C-LOOK wraps via the edges or straight to the first pending request."""

    def test_boundary_matches_cscan(self) -> None:
        """TO_BOUNDARY reproduces C-SCAN exactly."""
        cscan = _run(CSCANPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        clook = _run(CLOOKPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        assert clook.head_path == cscan.head_path
        assert clook.total_movement == cscan.total_movement

    def test_first_pending_jumps_directly(self) -> None:
        """TO_FIRST_PENDING goes 183 -> 14 with no edge visits."""
        trace = _run(CLOOKPolicy(), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD, _UP_FIRST)
        assert trace.head_path == (53, 65, 67, 98, 122, 124, 183, 14, 37)
        expected = 322
        assert trace.total_movement == expected

    def test_first_pending_never_costs_more(self) -> None:
        """TO_FIRST_PENDING <= TO_BOUNDARY on any workload."""
        for requests, head in _random_workloads(30):
            boundary = _run(CLOOKPolicy(), requests, head)
            first = _run(CLOOKPolicy(), requests, head, _UP_FIRST)
            assert first.total_movement <= boundary.total_movement


# -- Properties shared by every algorithm ----------------------------------


@pytest.mark.parametrize("name", ALGORITHM_NAMES)
class TestCommonProperties:
    """Invariants every policy must satisfy."""

    def test_every_request_serviced_once(self, name: str) -> None:
        """service_order is a permutation of the input."""
        for requests, head in _random_workloads(15):
            trace = _run(create_policy(name), requests, head)
            assert sorted(trace.service_order) == sorted(requests)

    @pytest.mark.parametrize("record_path", [True, False])
    def test_seeks_sum_to_movement(self, name: str, *, record_path: bool) -> None:
        """sum(seek_distances) == total_movement, path recorded or not."""
        for requests, head in _random_workloads(15):
            trace = _run(create_policy(name), requests, head, record_path=record_path)
            assert sum(trace.seek_distances) == trace.total_movement
            assert len(trace.seek_distances) == len(trace.head_path) - 1

    def test_path_starts_at_head(self, name: str) -> None:
        """head_path[0] is the initial position."""
        trace = _run(create_policy(name), _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        assert trace.head_path[0] == _TEXTBOOK_HEAD
        assert trace.initial_position == _TEXTBOOK_HEAD

    def test_empty_workload(self, name: str) -> None:
        """No requests: zero movement, path is just the start."""
        trace = _run(create_policy(name), [], _TEXTBOOK_HEAD)
        assert trace.total_movement == 0
        assert trace.head_path == (_TEXTBOOK_HEAD,)

    def test_fresh_policy_each_run(self, name: str) -> None:
        """Running twice gives identical traces."""
        policy = create_policy(name)
        first = _run(policy, _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        second = _run(policy, _TEXTBOOK_REQUESTS, _TEXTBOOK_HEAD)
        assert first == second

    def test_latency_never_negative_when_time_based(self, name: str) -> None:
        """Every latency is a service time minus an arrival that preceded it."""
        ctx = RunContext.create(_UP, 0, _LATE_ARRIVALS, time_based=True)
        metrics = create_policy(name).execute(ctx).metrics
        assert metrics.min_latency >= 0
        assert metrics.avg_latency >= 0


@pytest.mark.parametrize("name", _POSITIONAL)
class TestArrivalTimesIgnored:
    """Positional policies treat every request as arriving at 0."""

    def test_time_based_context_records_no_arrivals(self, name: str) -> None:
        """A time-based context changes nothing for a positional policy."""
        timed = RunContext.create(_UP, 0, _LATE_ARRIVALS, time_based=True)
        plain = RunContext.create(_UP, 0, _LATE_ARRIVALS)
        trace = create_policy(name).execute(timed)
        assert trace.arrival_times == ()
        assert trace == create_policy(name).execute(plain)


# -- Registry -----------------------------------------------------------------


class TestRegistry:
    """Verify name lookup."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("scan", "SCAN"),
            ("c-look", "C_LOOK"),
            ("CSCAN", "C_SCAN"),
            ("n-step-scan", "N_STEP_SCAN"),
        ],
    )
    def test_aliases(self, token: str, expected: str) -> None:
        """Names are case-insensitive and accept '-' for '_'."""
        assert create_policy(token).name == expected

    def test_unknown_name(self) -> None:
        """Unknown names raise UnknownAlgorithmError (a KeyError)."""
        with pytest.raises(KeyError, match="ELEVATOR"):
            create_policy("ELEVATOR")
        with pytest.raises(UnknownAlgorithmError):
            create_policy("")
