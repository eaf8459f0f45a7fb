"""Workload generation — reproducible streams of disk requests.

Real disk traffic is rarely uniform.  Databases hammer a few hot
tables, file systems cluster metadata near the middle of the platter,
and batch jobs sweep everything.  The generator models three shapes:

- **UNIFORM** — every cylinder equally likely.
- **NORMAL** — a bell curve centred on the middle of the disk, with a
  standard deviation of a quarter of the span.
- **HOTSPOT** — 70% of requests land near one of a few hot regions; the
  rest are uniform.

Arrival times are either uniform over ``[0, max_arrival_span)`` or
built from exponential gaps (a Poisson process).  The output is always
sorted by arrival, as the scheduling engine expects.

Every generator owns a seeded ``random.Random``, so the same seed gives
the same workload, and ``reset()`` replays it.
"""

from __future__ import annotations

import math
from enum import StrEnum
from random import Random

from py_disksched.geometry import (
    DEFAULT_LOWER_CYLINDER,
    DEFAULT_UPPER_CYLINDER,
    ConfigError,
)
from py_disksched.request import Request, RequestTrace

HOTSPOT_PROBABILITY = 0.7
HOTSPOT_FRACTIONS = (0.1, 0.5, 0.8)
HOTSPOT_RADIUS_DIVISOR = 25
DEFAULT_MEAN_INTERARRIVAL = 10.0


class Distribution(StrEnum):
    """Represent the spatial shape of a generated workload."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    HOTSPOT = "hotspot"

    @classmethod
    def from_token(cls, token: str) -> Distribution:
        """Parse a distribution name in any case.

        Raises:
            ConfigError: If the name is not a known distribution.

        """
        try:
            return cls(token.strip().lower())
        except ValueError:
            msg = f"Unknown distribution: {token!r}"
            raise ConfigError(msg) from None


class WorkloadGenerator:
    """Seeded source of request traces for one cylinder range."""

    def __init__(
        self,
        seed: int,
        *,
        lower: int = DEFAULT_LOWER_CYLINDER,
        upper: int = DEFAULT_UPPER_CYLINDER,
    ) -> None:
        """Create a generator.

        Args:
            seed: Random seed; equal seeds give equal workloads.
            lower: Lowest cylinder to generate.
            upper: Highest cylinder to generate.

        """
        self._seed = seed
        self._lower = lower
        self._upper = upper
        self._rng = Random(seed)
        span = upper - lower
        self._hotspots = tuple(lower + round(span * f) for f in HOTSPOT_FRACTIONS)
        self._hotspot_radius = max(1, span // HOTSPOT_RADIUS_DIVISOR)

    @property
    def seed(self) -> int:
        """Return the seed this generator was created with."""
        return self._seed

    @property
    def hotspots(self) -> tuple[int, ...]:
        """Return the centres of the HOTSPOT regions."""
        return self._hotspots

    def reset(self) -> None:
        """Rewind the random stream to replay the same workload."""
        self._rng.seed(self._seed)

    def generate(
        self,
        count: int,
        distribution: Distribution = Distribution.UNIFORM,
        max_arrival_span: int = 0,
    ) -> RequestTrace:
        """Generate *count* requests sorted by arrival time.

        Args:
            count: Number of requests.
            distribution: Spatial shape of the cylinders.
            max_arrival_span: Arrivals fall in ``[0, max_arrival_span)``;
                zero or less means everything arrives at time 0.

        """
        requests = [
            Request(self._cylinder(distribution), self._arrival(max_arrival_span))
            for _ in range(count)
        ]
        return RequestTrace(sorted(requests))

    def generate_poisson(
        self,
        count: int,
        distribution: Distribution = Distribution.UNIFORM,
        mean_interarrival: float = DEFAULT_MEAN_INTERARRIVAL,
    ) -> RequestTrace:
        """Generate *count* requests with exponential inter-arrival gaps.

        The first request arrives at time 0.
        """
        requests: list[Request] = []
        now = 0.0
        for _ in range(count):
            requests.append(Request(self._cylinder(distribution), int(now)))
            now += -mean_interarrival * math.log(1.0 - self._rng.random())
        return RequestTrace(requests)

    def random_position(self) -> int:
        """Return a uniformly random head position on the disk."""
        return self._uniform()

    def _cylinder(self, distribution: Distribution) -> int:
        match distribution:
            case Distribution.NORMAL:
                return self._normal()
            case Distribution.HOTSPOT:
                return self._hotspot()
            case _:
                return self._uniform()

    def _uniform(self) -> int:
        return self._rng.randint(self._lower, self._upper)

    def _normal(self) -> int:
        mean = (self._lower + self._upper) / 2
        sigma = (self._upper - self._lower) / 4
        return self._clamp(round(self._rng.gauss(mean, sigma)))

    def _hotspot(self) -> int:
        if self._rng.random() >= HOTSPOT_PROBABILITY:
            return self._uniform()
        centre = self._rng.choice(self._hotspots)
        offset = self._rng.gauss(0.0, self._hotspot_radius / 2)
        return self._clamp(centre + round(offset))

    def _arrival(self, max_arrival_span: int) -> int:
        if max_arrival_span <= 0:
            return 0
        return int(self._rng.random() * max_arrival_span)

    def _clamp(self, cylinder: int) -> int:
        return max(self._lower, min(self._upper, cylinder))

    def __repr__(self) -> str:
        """Show seed and range."""
        return f"WorkloadGenerator(seed={self._seed}, cylinders=[{self._lower}, {self._upper}])"
