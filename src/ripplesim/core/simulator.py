"""
GridSimulator: advances the spring lattice by one fixed timestep.

Each free cell feels:
    spring_force = k · Σ(h_neighbor - h)       (4 orthogonal neighbors)
    ground_force = g · (0 - h)                 (anchor to rest height)

and is integrated with semi-implicit Euler, drag folded into velocity:
    v' = (v + a·dt) · damping
    h' = h + v'·dt

The stored acceleration is the measured (v' - v)/dt, which includes the
damping loss (0 for a zero-length step). It is a display signal and never fed back into the update.

Cells under a live drop are pinned to the drop's height, keep their
velocity and report zero acceleration.

Two-phase update: every new value is computed from the committed arrays
into the lattice's scratch buffers, then the buffers are swapped. No cell
ever sees a neighbor that was already updated this step.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
import logging

import numpy as np

if TYPE_CHECKING:
    from ripplesim.core.lattice import Lattice
    from ripplesim.core.drops import DropScheduler

logger = logging.getLogger(__name__)


@dataclass
class SpringConfig:
    """Physical constants of the lattice."""

    spring_strength: float = 50.0  # Coupling between neighbors
    ground_stiffness: float = 2.5  # Anchor to rest height (weaker, so waves spread)
    damping: float = 0.98  # Per-step velocity multiplier
    mass: float = 1.0

    def __post_init__(self):
        if self.mass <= 0:
            raise ValueError(f"mass must be > 0, got {self.mass}")


@dataclass
class GridSimulator:
    """
    Integrator for the spring lattice.

    The drop scheduler is optional; without one every cell evolves freely.
    """

    lattice: "Lattice"
    config: SpringConfig = field(default_factory=SpringConfig)
    drops: "DropScheduler | None" = None

    step_count: int = field(default=0, init=False)

    def step(self, dt: float) -> None:
        """Advance every cell by dt."""
        lat = self.lattice
        cfg = self.config

        height = lat.height
        velocity = lat.velocity

        # Phase 1: compute from the committed snapshot
        spring_force = cfg.spring_strength * (lat.neighbor_height_sum() - 4.0 * height)
        ground_force = cfg.ground_stiffness * (0.0 - height)
        accel = (spring_force + ground_force) / cfg.mass

        new_velocity = lat.next_velocity
        new_height = lat.next_height
        new_accel = lat.next_acceleration

        np.multiply(velocity + accel * dt, cfg.damping, out=new_velocity)
        np.add(height, new_velocity * dt, out=new_height)
        if dt != 0.0:
            np.divide(new_velocity - velocity, dt, out=new_accel)
        else:
            # Zero-length frame: nothing was measured
            new_accel.fill(0.0)

        if self.drops is not None:
            mask, values = self.drops.forcing_field(lat.shape)
            if mask.any():
                new_height[mask] = values[mask]
                new_velocity[mask] = velocity[mask]
                new_accel[mask] = 0.0

        # Phase 2: commit
        lat.commit()
        self.step_count += 1

    def run(self, n_steps: int, dt: float) -> dict:
        """
        Run n_steps of the integrator alone (the drop clock is not advanced).

        Returns:
            Statistics dictionary
        """
        for _ in range(n_steps):
            self.step(dt)

        stats = {
            "n_steps": n_steps,
            "step_count": self.step_count,
            "max_abs_height": float(np.abs(self.lattice.height).max()),
            "mean_abs_height": float(np.abs(self.lattice.height).mean()),
            "sum_sq_velocity": float(np.sum(self.lattice.velocity ** 2)),
        }
        logger.debug("Ran %d steps: %s", n_steps, stats)
        return stats
