"""Disk geometry — the bounds every head movement must respect.

A simulated disk is a line of cylinders numbered ``lower`` .. ``upper``.
The head starts somewhere on that line and moves left (towards lower
numbers) or right (towards higher numbers).  Two more settings shape
how the sweeping algorithms behave:

- **Direction** — which way a SCAN-family sweep starts.
- **WrapPolicy** — what a circular algorithm (C-LOOK) does when it runs
  out of requests ahead of it: travel to the edge and jump across the
  whole disk, or jump straight to the first pending request.

A ``DiskGeometry`` is frozen.  Instead of setters, the ``with_*``
methods hand back a validated *copy*, so a geometry can
never be observed in an invalid state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

DEFAULT_LOWER_CYLINDER = 0
DEFAULT_UPPER_CYLINDER = 4999


class InvalidGeometryError(ValueError):
    """Raise when disk bounds or a head position are impossible.

    Examples: a negative lower bound, ``upper <= lower``, or an initial
    head position outside ``[lower, upper]``.
    """


class OutOfRangeRequestError(ValueError):
    """Raise when a request targets a cylinder outside the disk."""


class ConfigError(ValueError):
    """Raise when a configuration token or file cannot be understood."""


class Direction(StrEnum):
    """Represent the initial sweep direction of the head."""

    INCREASING = "increasing"
    DECREASING = "decreasing"

    @property
    def opposite(self) -> Direction:
        """Return the other direction."""
        if self is Direction.INCREASING:
            return Direction.DECREASING
        return Direction.INCREASING

    @classmethod
    def from_token(cls, token: str) -> Direction:
        """Parse a user-supplied direction token.

        Accepts ``increasing``/``up``/``right``/``r`` and
        ``decreasing``/``down``/``left``/``l`` in any case.

        Raises:
            ConfigError: If the token is not a known alias.

        """
        key = token.strip().lower()
        if key in _DIRECTION_ALIASES:
            return _DIRECTION_ALIASES[key]
        msg = f"Unknown direction: {token!r}"
        raise ConfigError(msg)


_DIRECTION_ALIASES: dict[str, Direction] = {
    "increasing": Direction.INCREASING,
    "up": Direction.INCREASING,
    "right": Direction.INCREASING,
    "r": Direction.INCREASING,
    "decreasing": Direction.DECREASING,
    "down": Direction.DECREASING,
    "left": Direction.DECREASING,
    "l": Direction.DECREASING,
}


class WrapPolicy(StrEnum):
    """Represent how a circular algorithm returns to the far side."""

    TO_BOUNDARY = "to_boundary"
    TO_FIRST_PENDING = "to_first_pending"

    @classmethod
    def from_token(cls, token: str) -> WrapPolicy:
        """Parse a user-supplied wrap-policy token.

        Raises:
            ConfigError: If the token is not a known alias.

        """
        key = token.strip().lower().replace("-", "_")
        if key in _WRAP_ALIASES:
            return _WRAP_ALIASES[key]
        msg = f"Unknown wrap policy: {token!r}"
        raise ConfigError(msg)


_WRAP_ALIASES: dict[str, WrapPolicy] = {
    "to_boundary": WrapPolicy.TO_BOUNDARY,
    "boundary": WrapPolicy.TO_BOUNDARY,
    "start": WrapPolicy.TO_BOUNDARY,
    "wrap_to_start": WrapPolicy.TO_BOUNDARY,
    "to_first_pending": WrapPolicy.TO_FIRST_PENDING,
    "first": WrapPolicy.TO_FIRST_PENDING,
    "first_req": WrapPolicy.TO_FIRST_PENDING,
    "first_request": WrapPolicy.TO_FIRST_PENDING,
    "first_pending": WrapPolicy.TO_FIRST_PENDING,
    "wrap_to_first_req": WrapPolicy.TO_FIRST_PENDING,
}


class RangePolicy(StrEnum):
    """Represent what happens to a request outside the disk bounds."""

    REJECT = "reject"
    CLAMP = "clamp"

    @classmethod
    def from_token(cls, token: str) -> RangePolicy:
        """Parse a user-supplied range-policy token.

        Raises:
            ConfigError: If the token is neither ``reject`` nor ``clamp``.

        """
        try:
            return cls(token.strip().lower())
        except ValueError:
            msg = f"Unknown range policy: {token!r}"
            raise ConfigError(msg) from None


@dataclass(frozen=True)
class DiskGeometry:
    """Immutable bounds, sweep direction and wrap policy for one run.

    Attributes:
        lower: Lowest addressable cylinder (>= 0).
        upper: Highest addressable cylinder (> lower).
        direction: Initial sweep direction for SCAN-family algorithms.
        wrap_policy: Wrap behaviour for C-LOOK.

    """

    lower: int = DEFAULT_LOWER_CYLINDER
    upper: int = DEFAULT_UPPER_CYLINDER
    direction: Direction = Direction.INCREASING
    wrap_policy: WrapPolicy = WrapPolicy.TO_BOUNDARY

    def __post_init__(self) -> None:
        """Validate the bounds.

        Raises:
            InvalidGeometryError: If ``lower < 0`` or ``upper <= lower``.

        """
        if self.lower < 0:
            msg = f"Lower cylinder cannot be negative: {self.lower}"
            raise InvalidGeometryError(msg)
        if self.upper <= self.lower:
            msg = (
                f"Upper cylinder ({self.upper}) must be greater than "
                f"lower cylinder ({self.lower})"
            )
            raise InvalidGeometryError(msg)

    @property
    def size(self) -> int:
        """Return the number of cylinders on the disk."""
        return self.upper - self.lower + 1

    @property
    def span(self) -> int:
        """Return the distance from one edge to the other."""
        return self.upper - self.lower

    @property
    def moving_up(self) -> bool:
        """Return True if the initial sweep heads towards ``upper``."""
        return self.direction is Direction.INCREASING

    def contains(self, cylinder: int) -> bool:
        """Return True if *cylinder* lies within the bounds."""
        return self.lower <= cylinder <= self.upper

    def validate_cylinder(self, cylinder: int) -> None:
        """Check that a request cylinder lies within the bounds.

        Raises:
            OutOfRangeRequestError: If it does not.

        """
        if not self.contains(cylinder):
            msg = f"Cylinder {cylinder} is out of bounds [{self.lower}, {self.upper}]"
            raise OutOfRangeRequestError(msg)

    def validate_position(self, position: int) -> None:
        """Check that a head position lies within the bounds.

        Raises:
            InvalidGeometryError: If it does not.

        """
        if not self.contains(position):
            msg = (
                f"Initial position ({position}) must be within disk bounds "
                f"[{self.lower}, {self.upper}]"
            )
            raise InvalidGeometryError(msg)

    def clamp(self, cylinder: int) -> int:
        """Return *cylinder* pulled into ``[lower, upper]``."""
        return max(self.lower, min(self.upper, cylinder))

    def with_bounds(self, lower: int, upper: int) -> DiskGeometry:
        """Return a copy with new bounds (validated)."""
        return replace(self, lower=lower, upper=upper)

    def with_direction(self, direction: Direction) -> DiskGeometry:
        """Return a copy sweeping in *direction*."""
        return replace(self, direction=direction)

    def with_wrap_policy(self, wrap_policy: WrapPolicy) -> DiskGeometry:
        """Return a copy using *wrap_policy*."""
        return replace(self, wrap_policy=wrap_policy)

    def __str__(self) -> str:
        """Format as ``[lower, upper] direction/wrap``."""
        return f"[{self.lower}, {self.upper}] {self.direction}/{self.wrap_policy}"
