"""Simulator — run, compare and benchmark disk scheduling policies.

The ``Simulator`` is the context in the Strategy pattern: it owns a
``SimulationConfig`` and a ``Logger``, builds a validated ``RunContext``
for each run, and hands it to a policy.

Three ways to use it:

- **run / compare** — one workload, one or many algorithms.  Only FSCAN
  and N-Step-SCAN honour arrival times; the positional algorithms see
  the same requests as a flat list.
- **batch** — a fixed grid of head positions and request lists, useful
  as a quick regression sweep.
- **benchmark** — randomised workloads at several sizes, several
  iterations each, summarised per algorithm.  Runs share nothing, so
  they may be spread over worker threads; each result slot has exactly
  one writer.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import StrEnum
from statistics import fmean
from typing import TYPE_CHECKING

from py_disksched.config import SimulationConfig
from py_disksched.context import RunContext
from py_disksched.logging import Logger, LogLevel
from py_disksched.request import Request, RequestTrace
from py_disksched.scheduling import (
    ALGORITHM_NAMES,
    TIME_AWARE_ALGORITHMS,
    create_policy,
    normalize_name,
)
from py_disksched.workload import (
    DEFAULT_MEAN_INTERARRIVAL,
    Distribution,
    WorkloadGenerator,
)

if TYPE_CHECKING:
    from py_disksched.result import ResultTrace

BATCH_POSITIONS = (100, 500, 1000, 2000)
BATCH_REQUESTS = (
    (100, 300, 600, 900),
    (2069, 98, 183, 37, 122, 14, 124),
    (124, 250, 500, 750, 1024),
)
DEFAULT_BENCHMARK_SIZES = (100, 500, 1000, 5000)
DEFAULT_BENCHMARK_ITERATIONS = 5
_SEED_ITERATION_STRIDE = 1000
_SUBLINEAR_FACTOR = 0.5
_LINEAR_FACTOR = 1.5


class Scaling(StrEnum):
    """Represent how an algorithm's movement grows with workload size."""

    SUB_LINEAR = "sub-linear"
    LINEAR = "linear"
    SUPER_LINEAR = "super-linear"


@dataclass(frozen=True)
class BenchmarkSummary:
    """Averaged figures for one algorithm at one workload size."""

    algorithm: str
    size: int
    runs: int
    avg_movement: float
    avg_seek: float
    max_seek: float
    avg_latency: float
    max_latency: float
    fairness_index: float


@dataclass
class BenchmarkResult:
    """Every trace from a benchmark, grouped by size then algorithm."""

    sizes: tuple[int, ...]
    algorithms: tuple[str, ...]
    results: dict[int, dict[str, list[ResultTrace]]] = field(default_factory=dict)

    def summary(self, size: int, algorithm: str) -> BenchmarkSummary:
        """Average the traces for one (size, algorithm) slot."""
        traces = self.results[size][algorithm]
        if not traces:
            return BenchmarkSummary(algorithm, size, 0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0)
        metrics = [t.metrics for t in traces]
        return BenchmarkSummary(
            algorithm=algorithm,
            size=size,
            runs=len(traces),
            avg_movement=fmean(t.total_movement for t in traces),
            avg_seek=fmean(m.avg_seek for m in metrics),
            max_seek=fmean(m.max_seek for m in metrics),
            avg_latency=fmean(m.avg_latency for m in metrics),
            max_latency=fmean(m.max_latency for m in metrics),
            fairness_index=fmean(m.fairness_index for m in metrics),
        )

    def scaling(self, algorithm: str) -> Scaling | None:
        """Classify growth from the smallest to the largest size.

        Returns None when there are fewer than two sizes or the smallest
        size produced no movement.
        """
        if len(self.sizes) < 2:  # noqa: PLR2004
            return None
        first = self.summary(self.sizes[0], algorithm).avg_movement
        last = self.summary(self.sizes[-1], algorithm).avg_movement
        if first <= 0:
            return None
        growth = last / first
        size_growth = self.sizes[-1] / self.sizes[0]
        if growth < size_growth * _SUBLINEAR_FACTOR:
            return Scaling.SUB_LINEAR
        if growth < size_growth * _LINEAR_FACTOR:
            return Scaling.LINEAR
        return Scaling.SUPER_LINEAR


class Simulator:
    """Run disk scheduling policies against workloads.

    Usage::

        sim = Simulator(SimulationConfig())
        trace = sim.run("SCAN", [98, 183, 37], initial_position=53)
        traces = sim.compare([98, 183, 37], initial_position=53)

    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        *,
        logger: Logger | None = None,
    ) -> None:
        """Create a simulator.

        Args:
            config: Run-wide settings; defaults to ``SimulationConfig()``.
            logger: Shared log; a fresh one is created if omitted.

        """
        self._config = config if config is not None else SimulationConfig()
        self._logger = logger if logger is not None else Logger()

    @property
    def config(self) -> SimulationConfig:
        """Return the simulation config."""
        return self._config

    @property
    def logger(self) -> Logger:
        """Return the shared logger."""
        return self._logger

    def context(
        self,
        requests: Iterable[Request] | Iterable[int],
        initial_position: int,
        *,
        time_based: bool = False,
        logger: Logger | None = None,
    ) -> RunContext:
        """Build a validated run context from the config.

        Raises:
            InvalidGeometryError: If the initial position is off the disk.
            OutOfRangeRequestError: If a request is off the disk and the
                config rejects such requests.

        """
        cfg = self._config
        return RunContext.create(
            cfg.geometry,
            initial_position,
            requests,
            range_policy=cfg.range_policy,
            step_size=cfg.step_size,
            time_based=time_based,
            record_timing=cfg.record_timing,
            record_path=cfg.record_path,
            verbose=cfg.verbose,
            logger=self._logger if logger is None else logger,
        )

    def run(
        self,
        algorithm: str,
        requests: Iterable[Request] | Iterable[int],
        initial_position: int,
        *,
        time_based: bool = False,
    ) -> ResultTrace:
        """Run one algorithm to completion.

        Args:
            algorithm: Registry name, e.g. ``"C_LOOK"``.
            requests: Workload (requests or bare cylinders).
            initial_position: Starting head cylinder.
            time_based: Honour arrival times (FSCAN / N-Step-SCAN).

        Raises:
            UnknownAlgorithmError: If the algorithm name is unknown.
            InvalidGeometryError: If the initial position is off the disk.

        """
        policy = create_policy(algorithm, step_size=self._config.step_size)
        timed = time_based and normalize_name(algorithm) in TIME_AWARE_ALGORITHMS
        ctx = self.context(requests, initial_position, time_based=timed)
        self._logger.log(
            LogLevel.INFO,
            f"Running {policy.name} on {len(ctx.requests)} requests from {initial_position}",
            source="simulator",
        )
        trace = policy.execute(ctx)
        self._logger.log(
            LogLevel.INFO,
            f"{trace.algorithm_name} Total Movement: {trace.total_movement}",
            source="simulator",
        )
        return trace

    def compare(
        self,
        requests: Iterable[Request] | Iterable[int],
        initial_position: int,
        *,
        algorithms: Sequence[str] | None = None,
        time_based: bool = False,
    ) -> dict[str, ResultTrace]:
        """Run several algorithms on the same workload.

        Returns:
            Traces keyed by registry name, in ``ALGORITHM_NAMES`` order
            when *algorithms* is None, otherwise in the order given.

        """
        workload = RequestTrace(
            r if isinstance(r, Request) else Request(r) for r in requests
        )
        names = [normalize_name(a) for a in (algorithms or ALGORITHM_NAMES)]
        return {
            name: self.run(name, workload, initial_position, time_based=time_based)
            for name in names
        }

    def batch(
        self,
        *,
        algorithms: Sequence[str] | None = None,
    ) -> list[tuple[int, tuple[int, ...], dict[str, ResultTrace]]]:
        """Run the fixed batch grid.

        Positions outside the configured disk are skipped.

        Returns:
            ``(initial_position, requests, traces)`` per grid cell.

        """
        cells: list[tuple[int, tuple[int, ...], dict[str, ResultTrace]]] = []
        geometry = self._config.geometry
        for position in BATCH_POSITIONS:
            if not geometry.contains(position):
                self._logger.log(
                    LogLevel.WARNING,
                    f"Skipping batch position {position} outside {geometry}",
                    source="simulator",
                )
                continue
            for requests in BATCH_REQUESTS:
                self._logger.log(
                    LogLevel.INFO,
                    f"Batch {len(cells) + 1}: Initial Position: {position}, "
                    f"Requests: {list(requests)}",
                    source="simulator",
                )
                traces = self.compare(requests, position, algorithms=algorithms)
                cells.append((position, requests, traces))
        return cells

    def benchmark(
        self,
        *,
        sizes: Sequence[int] = DEFAULT_BENCHMARK_SIZES,
        iterations: int = DEFAULT_BENCHMARK_ITERATIONS,
        seed: int = 0,
        distribution: Distribution = Distribution.UNIFORM,
        algorithms: Sequence[str] | None = None,
        workers: int = 1,
    ) -> BenchmarkResult:
        """Run every algorithm on randomised workloads of each size.

        Each iteration draws a Poisson workload (mean gap 10) and a
        random head position from the seed
        ``seed + iteration * 1000 + size``.  Rotating-queue algorithms
        run in time-based mode so latency figures are meaningful.
        Per-service logging is suppressed.

        Args:
            sizes: Workload sizes to try.
            iterations: Workloads per size.
            seed: Base seed.
            distribution: Spatial shape of the workloads.
            algorithms: Subset to run (all if None).
            workers: Thread pool size; 1 runs everything inline.

        """
        names = tuple(normalize_name(a) for a in (algorithms or ALGORITHM_NAMES))
        result = BenchmarkResult(sizes=tuple(sizes), algorithms=names)
        quiet = Simulator(
            SimulationConfig(
                geometry=self._config.geometry,
                verbose=False,
                record_path=self._config.record_path,
                record_timing=True,
                step_size=self._config.step_size,
                range_policy=self._config.range_policy,
            ),
            logger=Logger(),
        )
        self._logger.log(
            LogLevel.INFO,
            f"Benchmark: seed={seed} distribution={distribution} "
            f"iterations={iterations} sizes={list(sizes)}",
            source="simulator",
        )

        jobs: list[tuple[int, str, RequestTrace, int]] = []
        for size in sizes:
            result.results[size] = {name: [] for name in names}
            for iteration in range(iterations):
                generator = WorkloadGenerator(
                    seed + iteration * _SEED_ITERATION_STRIDE + size,
                    lower=self._config.geometry.lower,
                    upper=self._config.geometry.upper,
                )
                workload = generator.generate_poisson(
                    size, distribution, DEFAULT_MEAN_INTERARRIVAL
                )
                position = generator.random_position()
                jobs.extend((size, name, workload, position) for name in names)

        def execute(job: tuple[int, str, RequestTrace, int]) -> ResultTrace:
            _, name, workload, position = job
            return quiet.run(name, workload, position, time_based=True)

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                traces = list(pool.map(execute, jobs))
        else:
            traces = [execute(job) for job in jobs]

        for (size, name, _, _), trace in zip(jobs, traces, strict=True):
            result.results[size][name].append(trace)
        return result
