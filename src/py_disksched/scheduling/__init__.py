"""Scheduling engine — every disk-head policy behind one protocol.

Re-exports public symbols so callers can write::

    from py_disksched.scheduling import SCANPolicy, create_policy

``create_policy`` looks policies up by their registry name.  Names are
case-insensitive and accept ``-`` in place of ``_`` (``c-look`` works).
"""

from py_disksched.scheduling.positional import (
    CLOOKPolicy,
    CSCANPolicy,
    FCFSPolicy,
    LOOKPolicy,
    SCANPolicy,
    SSTFPolicy,
)
from py_disksched.scheduling.rotating import (
    FSCANPolicy,
    NStepSCANPolicy,
    RotatingQueue,
    RotationState,
    next_state,
)
from py_disksched.scheduling.sweep import DiskPolicy, circular_sweep, scan_sweep, split_at

ALGORITHM_NAMES: tuple[str, ...] = (
    "FCFS",
    "SSTF",
    "SCAN",
    "C_SCAN",
    "LOOK",
    "C_LOOK",
    "FSCAN",
    "N_STEP_SCAN",
)

TIME_AWARE_ALGORITHMS: frozenset[str] = frozenset({"FSCAN", "N_STEP_SCAN"})


class UnknownAlgorithmError(KeyError):
    """Raise when a policy name is not in the registry."""


def normalize_name(name: str) -> str:
    """Return the registry spelling of an algorithm name."""
    return name.strip().upper().replace("-", "_")


def create_policy(name: str, *, step_size: int | None = None) -> DiskPolicy:
    """Return a fresh policy instance for *name*.

    Args:
        name: Registry name, e.g. ``"scan"`` or ``"N-STEP-SCAN"``.
        step_size: N for N-Step-SCAN (ignored by other policies).

    Raises:
        UnknownAlgorithmError: If *name* is not a known algorithm.

    """
    key = normalize_name(name)
    match key:
        case "FCFS":
            return FCFSPolicy()
        case "SSTF":
            return SSTFPolicy()
        case "SCAN":
            return SCANPolicy()
        case "C_SCAN" | "CSCAN":
            return CSCANPolicy()
        case "LOOK":
            return LOOKPolicy()
        case "C_LOOK" | "CLOOK":
            return CLOOKPolicy()
        case "FSCAN":
            return FSCANPolicy()
        case "N_STEP_SCAN" | "NSTEP" | "N_STEP":
            return NStepSCANPolicy(step_size=step_size)
        case _:
            msg = f"Unknown algorithm: {name}"
            raise UnknownAlgorithmError(msg)


__all__ = [
    "ALGORITHM_NAMES",
    "TIME_AWARE_ALGORITHMS",
    "CLOOKPolicy",
    "CSCANPolicy",
    "DiskPolicy",
    "FCFSPolicy",
    "FSCANPolicy",
    "LOOKPolicy",
    "NStepSCANPolicy",
    "RotatingQueue",
    "RotationState",
    "SCANPolicy",
    "SSTFPolicy",
    "UnknownAlgorithmError",
    "circular_sweep",
    "create_policy",
    "next_state",
    "normalize_name",
    "scan_sweep",
    "split_at",
]
