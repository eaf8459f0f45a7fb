"""Simulation configuration — one object for every run-wide setting.

A ``SimulationConfig`` combines the disk geometry with the settings
that shape how runs are recorded:

- **verbose** — log every individual service, not just rotations.
- **record_path** — keep edge trips and wrap jumps in the head path.
- **record_timing** — stamp service times on positional runs too.
- **step_size** — N for N-Step-SCAN.
- **range_policy** — reject or clamp requests that fall off the disk.

Configs can be written as JSON and loaded with ``load_config``, the
same way a bootloader reads a kernel image: every key is optional and
missing keys take the defaults below.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from py_disksched.context import DEFAULT_STEP_SIZE
from py_disksched.geometry import (
    DEFAULT_LOWER_CYLINDER,
    DEFAULT_UPPER_CYLINDER,
    ConfigError,
    Direction,
    DiskGeometry,
    InvalidGeometryError,
    RangePolicy,
    WrapPolicy,
)

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class SimulationConfig:
    """Run-wide settings shared by every algorithm in a comparison."""

    geometry: DiskGeometry = field(default_factory=DiskGeometry)
    verbose: bool = True
    record_path: bool = True
    record_timing: bool = False
    step_size: int = DEFAULT_STEP_SIZE
    range_policy: RangePolicy = RangePolicy.CLAMP

    def __post_init__(self) -> None:
        """Clamp the step size up to 1."""
        if self.step_size < 1:
            object.__setattr__(self, "step_size", 1)

    def with_geometry(self, geometry: DiskGeometry) -> SimulationConfig:
        """Return a copy using *geometry*."""
        return replace(self, geometry=geometry)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form understood by ``config_from_dict``."""
        return {
            "lower": self.geometry.lower,
            "upper": self.geometry.upper,
            "direction": str(self.geometry.direction),
            "wrap_policy": str(self.geometry.wrap_policy),
            "step_size": self.step_size,
            "verbose": self.verbose,
            "record_path": self.record_path,
            "record_timing": self.record_timing,
            "range_policy": str(self.range_policy),
        }


def _flag(data: dict[str, Any], key: str, *, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        msg = f"Invalid configuration value: {key} must be true or false, got {value!r}"
        raise ConfigError(msg)
    return value


def config_from_dict(data: dict[str, Any]) -> SimulationConfig:
    """Build a config from a plain mapping; missing keys take defaults.

    Raises:
        ConfigError: If a token is unknown or a value has the wrong type.
        InvalidGeometryError: If the bounds are impossible.

    """
    try:
        geometry = DiskGeometry(
            lower=int(data.get("lower", DEFAULT_LOWER_CYLINDER)),
            upper=int(data.get("upper", DEFAULT_UPPER_CYLINDER)),
            direction=Direction.from_token(str(data.get("direction", "increasing"))),
            wrap_policy=WrapPolicy.from_token(str(data.get("wrap_policy", "to_boundary"))),
        )
        return SimulationConfig(
            geometry=geometry,
            verbose=_flag(data, "verbose", default=True),
            record_path=_flag(data, "record_path", default=True),
            record_timing=_flag(data, "record_timing", default=False),
            step_size=int(data.get("step_size", DEFAULT_STEP_SIZE)),
            range_policy=RangePolicy.from_token(str(data.get("range_policy", "clamp"))),
        )
    except (ConfigError, InvalidGeometryError):
        raise
    except (TypeError, ValueError) as e:
        msg = f"Invalid configuration value: {e}"
        raise ConfigError(msg) from e


def load_config(path: Path) -> SimulationConfig:
    """Load a JSON config file.

    Raises:
        ConfigError: If the file cannot be read, is not a JSON object,
            or holds invalid values.
        InvalidGeometryError: If the bounds are impossible.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load config: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = "Config file must contain a JSON object"
        raise ConfigError(msg)
    return config_from_dict(data)
