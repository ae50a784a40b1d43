"""
Simulation: one self-contained ripple simulation.

Bundles a Lattice, a DropScheduler and a GridSimulator behind the two
calls a frame driver needs:

    sim = Simulation(SimulationConfig.default(), rng=np.random.default_rng(0))
    while running:
        sim.advance_frame(1 / 30)
        pixels = grayscale_pixels(sim.sample_display_window())

Per frame, the drop clock advances (creating/retiring drops) before the
lattice steps, so a new drop forces its cell in the same frame.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

import numpy as np

from ripplesim.core.lattice import Lattice, LatticeConfig
from ripplesim.core.drops import DropScheduler, DropSchedulerConfig, interior_region
from ripplesim.core.simulator import GridSimulator, SpringConfig

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Everything fixed for the lifetime of a simulation."""

    lattice: LatticeConfig = field(default_factory=LatticeConfig)
    springs: SpringConfig = field(default_factory=SpringConfig)
    drops: DropSchedulerConfig = field(default_factory=DropSchedulerConfig)

    # Drops land inside the display window, this many cells from its edge
    drop_margin: int = 4

    def __post_init__(self):
        if self.drop_margin < 0:
            raise ValueError(f"drop_margin must be >= 0, got {self.drop_margin}")

    @classmethod
    def default(cls) -> SimulationConfig:
        """72x72 physics grid showing its middle 24x24 square."""
        return cls()

    def drop_region(self) -> tuple[int, int, int, int]:
        """Half-open (x_min, x_max, y_min, y_max) region for drop placement."""
        if self.drops.region is not None:
            return self.drops.region
        return interior_region(self.lattice, self.drop_margin)


class Simulation:
    """
    A running ripple simulation.

    All mutable state (grid, drops, clock) belongs to this instance, so
    several simulations can run side by side.
    """

    def __init__(self, config: SimulationConfig | None = None, rng: np.random.Generator | None = None):
        if config is None:
            config = SimulationConfig.default()
        if rng is None:
            rng = np.random.default_rng()

        self.config = config
        self.rng = rng
        self.lattice = Lattice(config.lattice)

        self.drops = DropScheduler(
            config=config.drops,
            rng=rng,
            lattice=config.lattice,
            margin=config.drop_margin,
        )
        self.simulator = GridSimulator(
            lattice=self.lattice,
            config=config.springs,
            drops=self.drops,
        )
        self._frame = 0

        logger.debug(
            "Simulation initialized: %dx%d grid, display %d at offset %d",
            config.lattice.physical_size,
            config.lattice.physical_size,
            config.lattice.display_size,
            config.lattice.display_offset,
        )

    @property
    def time(self) -> float:
        """Simulated seconds elapsed."""
        return self.drops.time

    @property
    def frame(self) -> int:
        """Number of frames advanced."""
        return self._frame

    def advance_frame(self, dt: float) -> None:
        """Advance the clock and drops, then step the lattice."""
        self.drops.advance(dt)
        self.simulator.step(dt)
        self._frame += 1

    def run(self, n_frames: int, dt: float) -> dict:
        """
        Advance n_frames frames.

        Returns:
            Statistics dictionary
        """
        for _ in range(n_frames):
            self.advance_frame(dt)

        return {
            "n_frames": n_frames,
            "frame": self._frame,
            "time": self.time,
            "live_drops": len(self.drops.drops),
            "max_abs_height": float(np.abs(self.lattice.height).max()),
        }

    def sample_display_window(self) -> np.ndarray:
        """
        State of every visible cell.

        Returns:
            Array of shape (display_size², 3) with rows
            (height, velocity, acceleration), row-major (y outer, x inner).
        """
        height, velocity, accel = self.lattice.display_window()
        return np.stack(
            [height.ravel(), velocity.ravel(), accel.ravel()],
            axis=1,
        )

    def stability_ratio(self, dt: float) -> float:
        """
        Stability number of the integrator for this timestep.

        Semi-implicit Euler stays bounded while ω_max·dt < 2, with
        ω_max² = (8k + g)/m the stiffest lattice mode. The ratio
        (ω_max·dt)² / 4 is below 1 exactly when that holds.
        """
        s = self.config.springs
        omega_sq = (8.0 * s.spring_strength + s.ground_stiffness) / s.mass
        return omega_sq * dt * dt / 4.0

    def check_stability(self, dt: float) -> bool:
        """Log a warning and return False if dt is too large to stay stable."""
        ratio = self.stability_ratio(dt)
        if ratio >= 1.0:
            logger.warning(
                "Timestep dt=%.4g is unstable for these springs (ratio %.3f >= 1); "
                "heights will diverge",
                dt, ratio,
            )
            return False
        return True
