"""
Drops: transient forcing events that push a single cell to a target height.

A drop does not add a force. While it is alive it overrides its cell's
height with an eased profile:

    0 ──smoothstep──▶ drop_height ──plateau──▶ drop_height ──smoothstep──▶ 0
        (ease_in)                    (hold)                  (ease_out)

The smooth onset and release keep the lattice from being hit by a step,
which would excite the highest-frequency modes.

DropScheduler owns the simulated clock and the list of live drops. It
knows nothing about springs; GridSimulator asks it for the forcing field.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

import numpy as np

from ripplesim.core.lattice import LatticeConfig

logger = logging.getLogger(__name__)


def smoothstep(t: float) -> float:
    """Cubic Hermite ease t²(3 - 2t), flat at both ends of [0, 1]."""
    return t * t * (3.0 - 2.0 * t)


def drop_forcing(
    age: float,
    ease_in: float,
    hold: float,
    ease_out: float,
    drop_height: float,
) -> float:
    """
    Forced height of a drop at a given age.

    Args:
        age: Time since the drop was created
        ease_in, hold, ease_out: Phase durations
        drop_height: Plateau height

    Returns:
        Forced height; 0 before creation and after the drop has finished
    """
    total = ease_in + hold + ease_out
    if age < 0.0 or age > total:
        return 0.0

    if age < ease_in:
        return smoothstep(age / ease_in) * drop_height

    if age < ease_in + hold:
        return drop_height

    if ease_out <= 0.0:
        return 0.0
    t = (age - ease_in - hold) / ease_out
    return (1.0 - smoothstep(t)) * drop_height


@dataclass(frozen=True)
class Drop:
    """A forcing event at cell (x, y) created at simulated time start_time."""

    x: int
    y: int
    start_time: float

    def age(self, now: float) -> float:
        return now - self.start_time


@dataclass
class DropSchedulerConfig:
    """Configuration for drop creation and easing."""

    drop_height: float = 20.0  # Plateau height of the forcing
    drop_interval: float | None = 5.0  # Seconds between drops (None = no automatic drops)
    ease_in: float = 0.25  # Rise time
    hold: float = 0.5  # Plateau time
    ease_out: float = 0.25  # Release time

    # Half-open (x_min, x_max, y_min, y_max) region where drops may land.
    # None = the display window inset by the scheduler's margin.
    region: tuple[int, int, int, int] | None = None

    def __post_init__(self):
        for name in ("ease_in", "hold", "ease_out"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.drop_interval is not None and self.drop_interval <= 0:
            raise ValueError(f"drop_interval must be > 0, got {self.drop_interval}")
        if self.region is not None:
            x_min, x_max, y_min, y_max = self.region
            if x_max <= x_min or y_max <= y_min:
                raise ValueError(f"Empty drop region: {self.region}")

    @property
    def total_duration(self) -> float:
        return self.ease_in + self.hold + self.ease_out


def interior_region(lattice: LatticeConfig, margin: int) -> tuple[int, int, int, int]:
    """
    Display window shrunk by margin cells on every side, as (x_min, x_max, y_min, y_max).

    Falls back to the whole window when the margin would leave nothing.
    """
    if margin < 0:
        raise ValueError(f"margin must be >= 0, got {margin}")
    o, d = lattice.display_offset, lattice.display_size
    lo, hi = o + margin, o + d - margin
    if hi <= lo:
        lo, hi = o, o + d
    return lo, hi, lo, hi


@dataclass
class DropScheduler:
    """
    Creates drops at fixed intervals and retires them when finished.

    Drops are kept in creation order. When two live drops target the
    same cell, the one created first decides the forced height.
    """

    config: DropSchedulerConfig = field(default_factory=DropSchedulerConfig)
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    lattice: LatticeConfig = field(default_factory=LatticeConfig)  # Grid the drops land on
    margin: int = 4  # Distance kept from the display window edge when config.region is None

    current_time: float = field(default=0.0, init=False)
    last_drop_time: float = field(default=0.0, init=False)
    _drops: list[Drop] = field(default_factory=list, init=False)

    def __post_init__(self):
        if self.margin < 0:
            raise ValueError(f"margin must be >= 0, got {self.margin}")

        # Start one interval in the past so the first advance() drops.
        interval = self.config.drop_interval
        self.last_drop_time = -interval if interval is not None else 0.0

    @property
    def time(self) -> float:
        """Current simulated time."""
        return self.current_time

    @property
    def drops(self) -> tuple[Drop, ...]:
        """Live drops, oldest first."""
        return tuple(self._drops)

    @property
    def total_duration(self) -> float:
        return self.config.total_duration

    def advance(self, dt: float) -> None:
        """
        Move the clock forward, create a drop if one is due, retire old ones.

        At most one drop is created per call.
        """
        self.current_time += dt
        interval = self.config.drop_interval

        if interval is not None and self.current_time - self.last_drop_time >= interval:
            x, y = self._random_cell()
            self.add_drop(x, y)
            self.last_drop_time = self.current_time

        self._retire()

    def add_drop(self, x: int, y: int, start_time: float | None = None) -> Drop:
        """Place a drop at (x, y), starting now unless start_time is given."""
        if start_time is None:
            start_time = self.current_time
        drop = Drop(int(x), int(y), float(start_time))
        self._drops.append(drop)
        logger.debug("Drop created at (%d, %d), t=%.3f", drop.x, drop.y, drop.start_time)
        return drop

    def clear(self) -> None:
        """Remove every live drop."""
        self._drops.clear()

    def height_of(self, drop: Drop) -> float:
        """Forced height of a drop at the current time."""
        cfg = self.config
        return drop_forcing(
            drop.age(self.current_time),
            cfg.ease_in,
            cfg.hold,
            cfg.ease_out,
            cfg.drop_height,
        )

    def forced_height(self, x: int, y: int) -> float | None:
        """Forcing height for cell (x, y), or None if no live drop targets it."""
        for drop in self._drops:
            if drop.x == x and drop.y == y:
                return self.height_of(drop)
        return None

    def forcing_field(self, shape: tuple[int, int]) -> tuple[np.ndarray, np.ndarray]:
        """
        Forcing for a whole grid.

        Args:
            shape: (ny, nx) grid dimensions

        Returns:
            (mask, values) - bool mask of forced cells and their heights.
            Drops outside the grid are ignored.
        """
        mask = np.zeros(shape, dtype=bool)
        values = np.zeros(shape, dtype=np.float64)
        ny, nx = shape

        for drop in self._drops:
            if not (0 <= drop.x < nx and 0 <= drop.y < ny):
                continue
            if mask[drop.y, drop.x]:
                continue  # first-created wins
            mask[drop.y, drop.x] = True
            values[drop.y, drop.x] = self.height_of(drop)

        return mask, values

    @property
    def placement_region(self) -> tuple[int, int, int, int]:
        """Half-open region automatic drops are drawn from; never the grid margin."""
        if self.config.region is not None:
            return self.config.region
        return interior_region(self.lattice, self.margin)

    def _random_cell(self) -> tuple[int, int]:
        x_min, x_max, y_min, y_max = self.placement_region
        x = int(self.rng.integers(x_min, x_max))
        y = int(self.rng.integers(y_min, y_max))
        return x, y

    def _retire(self):
        total = self.config.total_duration
        now = self.current_time
        alive = [d for d in self._drops if d.age(now) <= total]
        if len(alive) != len(self._drops):
            logger.debug("Retired %d drop(s) at t=%.3f", len(self._drops) - len(alive), now)
            self._drops = alive
