"""Command-line front end — the ``py-disksched`` console entry point.

Typical uses::

    py-disksched -r 98,183,37,122,14,124,65,67 -i 53
    py-disksched -r 98,183,37 -i 53 -a scan,c-look --wrap first --timeline
    py-disksched -g -c 50 -t 500 -s 7 -d hotspot -a fscan,n-step-scan -n 8
    py-disksched --batch
    py-disksched --benchmark --benchmark-sizes 100,1000 --benchmark-iterations 3

Requests given with ``-r`` are cylinders separated by commas or spaces.
A token written ``cylinder@time`` carries an arrival time, which makes
the run time-based.

Results go to stdout and log entries to stderr.  Bad input of any kind
exits with status 2.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from py_disksched.config import SimulationConfig, load_config
from py_disksched.geometry import (
    ConfigError,
    Direction,
    InvalidGeometryError,
    OutOfRangeRequestError,
    WrapPolicy,
)
from py_disksched.logging import Logger, LogLevel
from py_disksched.report import (
    ascii_timeline,
    benchmark_table,
    comparison_table,
    metrics_report,
    simple_timeline,
    summary,
)
from py_disksched.request import Request, RequestTrace
from py_disksched.scheduling import ALGORITHM_NAMES, UnknownAlgorithmError
from py_disksched.simulator import (
    DEFAULT_BENCHMARK_ITERATIONS,
    DEFAULT_BENCHMARK_SIZES,
    Simulator,
)
from py_disksched.workload import Distribution, WorkloadGenerator

if TYPE_CHECKING:
    from collections.abc import Sequence

    from py_disksched.result import ResultTrace

EXIT_OK = 0
EXIT_USAGE = 2
DEFAULT_GENERATED_COUNT = 20


class UsageError(ValueError):
    """Raise when the command-line arguments cannot describe a run."""


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``py-disksched``."""
    parser = argparse.ArgumentParser(
        prog="py-disksched",
        description="Simulate and compare disk-head scheduling algorithms.",
    )

    workload = parser.add_argument_group("workload")
    workload.add_argument(
        "-r", "--requests", help="Cylinders, comma or space separated; cyl@time sets arrival."
    )
    workload.add_argument("-i", "--initial-position", type=int, help="Starting head cylinder.")
    workload.add_argument("-g", "--generate", action="store_true", help="Generate a workload.")
    workload.add_argument("-s", "--seed", type=int, default=42, help="Seed for -g and benchmarks.")
    workload.add_argument(
        "-d", "--distribution", default="uniform", help="uniform, normal or hotspot."
    )
    workload.add_argument(
        "-c", "--count", type=int, default=DEFAULT_GENERATED_COUNT, help="Requests to generate."
    )
    workload.add_argument(
        "-t", "--time-span", type=int, default=0, help="Spread arrivals over [0, span)."
    )
    workload.add_argument(
        "--time-based", action="store_true", help="Honour arrival times (FSCAN, N-Step-SCAN)."
    )

    disk = parser.add_argument_group("disk")
    disk.add_argument("--config", type=Path, help="JSON config file.")
    disk.add_argument("--lower", type=int, help="Lowest cylinder.")
    disk.add_argument("--upper", type=int, help="Highest cylinder.")
    disk.add_argument("--direction", help="Initial sweep direction (increasing/decreasing).")
    disk.add_argument("--wrap", help="C-LOOK wrap policy (boundary/first).")
    disk.add_argument("-n", "--n-step", type=int, help="N for N-Step-SCAN.")

    algorithms = parser.add_argument_group("algorithms")
    algorithms.add_argument("-a", "--algorithms", help="Comma-separated algorithm names.")
    algorithms.add_argument(
        "--list-algorithms", action="store_true", help="List algorithm names and exit."
    )

    output = parser.add_argument_group("output")
    output.add_argument("--timeline", action="store_true", help="Draw an ASCII timeline.")
    output.add_argument(
        "--simple-timeline", action="store_true", help="Print the head path on one line."
    )
    output.add_argument("--show-order", action="store_true", help="Print each service order.")
    output.add_argument("--show-path", action="store_true", help="Print each head path.")
    output.add_argument("--metrics", action="store_true", help="Print full metrics reports.")
    verbosity = output.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings.")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log every service.")

    modes = parser.add_argument_group("modes")
    modes.add_argument("-b", "--batch", action="store_true", help="Run the fixed batch grid.")
    modes.add_argument("--benchmark", action="store_true", help="Run randomised benchmarks.")
    modes.add_argument(
        "--benchmark-iterations",
        type=int,
        default=DEFAULT_BENCHMARK_ITERATIONS,
        help="Workloads per size.",
    )
    modes.add_argument(
        "--benchmark-sizes",
        default=",".join(str(s) for s in DEFAULT_BENCHMARK_SIZES),
        help="Comma-separated workload sizes.",
    )
    return parser


def parse_requests(raw: str) -> list[Request]:
    """Parse ``"98, 183 37@5"`` into requests.

    Raises:
        UsageError: If a token is not an integer (or ``int@int``).

    """
    requests: list[Request] = []
    for token in raw.replace(",", " ").split():
        cylinder, _, arrival = token.partition("@")
        try:
            requests.append(Request(int(cylinder), int(arrival) if arrival else 0))
        except ValueError as e:
            msg = f"Invalid request {token!r}: {e}"
            raise UsageError(msg) from e
    return requests


def parse_int_list(raw: str) -> list[int]:
    """Parse a comma-separated list of positive integers.

    Raises:
        UsageError: If the list is empty or holds a non-positive value.

    """
    try:
        values = [int(item) for item in raw.split(",") if item.strip()]
    except ValueError as e:
        msg = f"Invalid number list {raw!r}"
        raise UsageError(msg) from e
    if not values or any(v <= 0 for v in values):
        msg = f"Expected positive integers, got {raw!r}"
        raise UsageError(msg)
    return values


def _split_names(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    return [name for name in raw.split(",") if name.strip()]


def build_config(args: argparse.Namespace) -> SimulationConfig:
    """Combine the config file (if any) with command-line overrides.

    Raises:
        ConfigError: If the file or a token is invalid.
        InvalidGeometryError: If the resulting bounds are impossible.

    """
    config = load_config(args.config) if args.config is not None else SimulationConfig()
    geometry = config.geometry
    if args.lower is not None or args.upper is not None:
        lower = geometry.lower if args.lower is None else args.lower
        upper = geometry.upper if args.upper is None else args.upper
        geometry = geometry.with_bounds(lower, upper)
    if args.direction is not None:
        geometry = geometry.with_direction(Direction.from_token(args.direction))
    if args.wrap is not None:
        geometry = geometry.with_wrap_policy(WrapPolicy.from_token(args.wrap))

    config = config.with_geometry(geometry)
    if args.n_step is not None:
        config = replace(config, step_size=args.n_step)
    if args.verbose:
        config = replace(config, verbose=True)
    elif args.quiet:
        config = replace(config, verbose=False)
    return config


def _workload(
    args: argparse.Namespace, config: SimulationConfig
) -> tuple[RequestTrace, int, bool]:
    """Return ``(requests, initial_position, time_based)`` for a single run."""
    if args.generate:
        generator = WorkloadGenerator(
            args.seed, lower=config.geometry.lower, upper=config.geometry.upper
        )
        trace = generator.generate(
            args.count, Distribution.from_token(args.distribution), args.time_span
        )
        position = (
            generator.random_position()
            if args.initial_position is None
            else args.initial_position
        )
        return trace, position, args.time_based or args.time_span > 0

    if args.requests is None:
        msg = "No workload: pass -r/--requests or -g/--generate"
        raise UsageError(msg)
    if args.initial_position is None:
        msg = "An initial position (-i) is required with -r"
        raise UsageError(msg)
    trace = RequestTrace(parse_requests(args.requests))
    return trace, args.initial_position, args.time_based or trace.is_time_based


def _print_details(args: argparse.Namespace, trace: ResultTrace, config: SimulationConfig) -> None:
    if args.show_order:
        print(f"{trace.algorithm_name} order: {list(trace.service_order)}")
    if args.show_path:
        print(f"{trace.algorithm_name} path: {list(trace.head_path)}")
    if args.simple_timeline:
        print(simple_timeline(trace))
    if args.timeline:
        print(ascii_timeline(trace, lower=config.geometry.lower, upper=config.geometry.upper))
    if args.metrics:
        print(metrics_report(trace))


def _run_single(args: argparse.Namespace, sim: Simulator) -> None:
    trace, position, time_based = _workload(args, sim.config)
    print(f"Disk: {sim.config.geometry}")
    print(f"Initial position: {position}")
    print(f"Requests ({len(trace)}): {trace.cylinders}")
    if time_based:
        print(f"Arrivals: {trace.arrival_times}")
    print()

    traces = sim.compare(
        trace, position, algorithms=_split_names(args.algorithms), time_based=time_based
    )
    if len(traces) == 1:
        print(summary(next(iter(traces.values()))))
    else:
        print(comparison_table(traces))
    for result in traces.values():
        _print_details(args, result, sim.config)


def _run_batch(args: argparse.Namespace, sim: Simulator) -> None:
    for number, (position, requests, traces) in enumerate(
        sim.batch(algorithms=_split_names(args.algorithms)), start=1
    ):
        print(f"Batch {number}: Initial Position: {position}, Requests: {list(requests)}")
        print(comparison_table(traces))
        print()


def _run_benchmark(args: argparse.Namespace, sim: Simulator) -> None:
    result = sim.benchmark(
        sizes=parse_int_list(args.benchmark_sizes),
        iterations=max(1, args.benchmark_iterations),
        seed=args.seed,
        distribution=Distribution.from_token(args.distribution),
        algorithms=_split_names(args.algorithms),
    )
    print(benchmark_table(result))


def _flush_log(logger: Logger, min_level: LogLevel) -> None:
    for entry in logger.filter(min_level=min_level):
        print(entry, file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    args = build_parser().parse_args(argv)

    if args.list_algorithms:
        for name in ALGORITHM_NAMES:
            print(name)
        return EXIT_OK

    if args.verbose:
        min_level = LogLevel.DEBUG
    elif args.quiet:
        min_level = LogLevel.WARNING
    else:
        min_level = LogLevel.INFO

    logger = Logger()
    try:
        sim = Simulator(build_config(args), logger=logger)
        if args.benchmark:
            _run_benchmark(args, sim)
        elif args.batch:
            _run_batch(args, sim)
        else:
            _run_single(args, sim)
    except (
        ConfigError,
        InvalidGeometryError,
        OutOfRangeRequestError,
        UnknownAlgorithmError,
        UsageError,
    ) as e:
        _flush_log(logger, min_level)
        print(f"Error: {e.args[0] if e.args else e}", file=sys.stderr)
        return EXIT_USAGE

    _flush_log(logger, min_level)
    return EXIT_OK
