"""Tests for requests and request traces."""

import pytest

from py_disksched.request import Request, RequestTrace

_CYLINDERS = [98, 183, 37, 122]
_INTERVAL = 5


class TestRequest:
    """Verify request construction and ordering."""

    def test_default_arrival_is_zero(self) -> None:
        """A bare cylinder arrives at time 0."""
        assert Request(42).arrival_time == 0

    def test_negative_arrival_rejected(self) -> None:
        """Arrival times cannot be negative."""
        with pytest.raises(ValueError, match="negative"):
            Request(42, -1)

    def test_orders_by_arrival_then_cylinder(self) -> None:
        """Earlier arrivals sort first; ties sort by cylinder."""
        requests = [Request(10, 5), Request(90, 0), Request(20, 0)]
        assert sorted(requests) == [Request(20, 0), Request(90, 0), Request(10, 5)]

    def test_requests_are_frozen(self) -> None:
        """Requests cannot be mutated."""
        request = Request(42)
        with pytest.raises(AttributeError):
            request.cylinder = 7  # type: ignore[misc]


class TestRequestTrace:
    """Verify the immutable workload container."""

    def test_from_cylinders(self) -> None:
        """Cylinders keep their order and arrive at time 0."""
        trace = RequestTrace.from_cylinders(_CYLINDERS)
        assert trace.cylinders == _CYLINDERS
        assert trace.arrival_times == [0] * len(_CYLINDERS)
        assert not trace.is_time_based

    def test_sequential_arrivals(self) -> None:
        """Request i arrives at i * interval."""
        trace = RequestTrace.with_sequential_arrivals(_CYLINDERS, interval=_INTERVAL)
        assert trace.arrival_times == [0, 5, 10, 15]
        assert trace.is_time_based

    def test_sequence_protocol(self) -> None:
        """A trace supports len, indexing and iteration."""
        trace = RequestTrace.from_cylinders(_CYLINDERS)
        assert len(trace) == len(_CYLINDERS)
        assert trace[1] == Request(183)
        assert [r.cylinder for r in trace] == _CYLINDERS

    def test_slice_returns_trace(self) -> None:
        """Slicing gives another RequestTrace."""
        trace = RequestTrace.from_cylinders(_CYLINDERS)
        head = trace[:2]
        assert isinstance(head, RequestTrace)
        assert head.cylinders == [98, 183]

    def test_sorted_by_arrival(self) -> None:
        """sorted_by_arrival returns an arrival-ordered copy."""
        trace = RequestTrace([Request(5, 9), Request(6, 1)])
        assert trace.sorted_by_arrival().cylinders == [6, 5]
        assert trace.cylinders == [5, 6]

    def test_equality_and_hash(self) -> None:
        """Traces with the same requests are equal and hash alike."""
        a = RequestTrace.from_cylinders(_CYLINDERS)
        b = RequestTrace.from_cylinders(list(_CYLINDERS))
        assert a == b
        assert hash(a) == hash(b)

    def test_input_is_copied(self) -> None:
        """Mutating the source list does not change the trace."""
        source = [Request(1), Request(2)]
        trace = RequestTrace(source)
        source.append(Request(3))
        assert len(trace) == len(source) - 1

    def test_repr(self) -> None:
        """Repr lists cylinder@arrival pairs."""
        trace = RequestTrace([Request(7, 3)])
        assert repr(trace) == "RequestTrace([7@3])"
