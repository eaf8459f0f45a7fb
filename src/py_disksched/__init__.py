"""py-disksched — a disk-head scheduling simulator.

Re-exports the everyday entry points so callers can write::

    from py_disksched import DiskGeometry, Simulator, SimulationConfig
"""

from py_disksched.config import SimulationConfig, load_config
from py_disksched.context import RunContext
from py_disksched.geometry import (
    ConfigError,
    Direction,
    DiskGeometry,
    InvalidGeometryError,
    OutOfRangeRequestError,
    RangePolicy,
    WrapPolicy,
)
from py_disksched.metrics import Metrics, compute_metrics
from py_disksched.request import Request, RequestTrace
from py_disksched.result import ResultTrace
from py_disksched.scheduling import ALGORITHM_NAMES, create_policy
from py_disksched.simulator import Simulator
from py_disksched.workload import Distribution, WorkloadGenerator

__all__ = [
    "ALGORITHM_NAMES",
    "ConfigError",
    "Direction",
    "DiskGeometry",
    "Distribution",
    "InvalidGeometryError",
    "Metrics",
    "OutOfRangeRequestError",
    "RangePolicy",
    "Request",
    "RequestTrace",
    "ResultTrace",
    "RunContext",
    "SimulationConfig",
    "Simulator",
    "WorkloadGenerator",
    "WrapPolicy",
    "compute_metrics",
    "create_policy",
]
