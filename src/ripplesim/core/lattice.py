"""
Lattice: the 2D grid of point masses that carries the waves.

The lattice stores ONLY per-cell state:
- Height (displacement from rest)
- Velocity (rate of change of height)
- Acceleration (last measured value, kept for display mapping)

It knows nothing about springs or drops. The integrator lives in
GridSimulator, forcing in DropScheduler.

Arrays are indexed [y, x], like numpy images. Public lookups take (x, y).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
from scipy.ndimage import convolve


@dataclass
class LatticeConfig:
    """Configuration for a square lattice with a visible sub-window."""

    physical_size: int = 72  # Cells per side of the simulated grid
    display_size: int = 24  # Cells per side of the visible window
    display_offset: int = 24  # Top-left corner of the window (same on both axes)

    def __post_init__(self):
        if self.physical_size < 1:
            raise ValueError(f"physical_size must be >= 1, got {self.physical_size}")
        if self.display_size < 1:
            raise ValueError(f"display_size must be >= 1, got {self.display_size}")
        if self.display_offset < 0:
            raise ValueError(f"display_offset must be >= 0, got {self.display_offset}")
        if self.display_offset + self.display_size > self.physical_size:
            raise ValueError(
                "Display window does not fit: "
                f"{self.display_offset} + {self.display_size} > {self.physical_size}"
            )


# Stencil summing the four orthogonal neighbors
NEIGHBOR_KERNEL = np.array([
    [0.0, 1.0, 0.0],
    [1.0, 0.0, 1.0],
    [0.0, 1.0, 0.0],
])


class Cell(NamedTuple):
    """Snapshot of one lattice point."""

    height: float
    velocity: float
    acceleration: float


class Lattice:
    """
    The spring grid's state, double-buffered.

    `height`, `velocity` and `acceleration` hold the committed state.
    The `next_*` arrays are scratch buffers written during a step and
    swapped in by `commit()`.
    """

    def __init__(self, config: LatticeConfig):
        self.config = config
        n = config.physical_size

        self.height = np.zeros((n, n), dtype=np.float64)
        self.velocity = np.zeros((n, n), dtype=np.float64)
        self.acceleration = np.zeros((n, n), dtype=np.float64)

        self.next_height = np.zeros((n, n), dtype=np.float64)
        self.next_velocity = np.zeros((n, n), dtype=np.float64)
        self.next_acceleration = np.zeros((n, n), dtype=np.float64)

    @property
    def shape(self) -> tuple[int, int]:
        """Return (ny, nx) grid dimensions."""
        n = self.config.physical_size
        return n, n

    def in_bounds(self, x: int, y: int) -> bool:
        n = self.config.physical_size
        return 0 <= x < n and 0 <= y < n

    def get_height(self, x: int, y: int) -> float:
        """
        Height at (x, y), or 0.0 outside the grid.

        The boundary is fixed at rest height: waves reaching the edge see a
        neighbor pinned to zero.
        """
        if not self.in_bounds(x, y):
            return 0.0
        return float(self.height[y, x])

    def cell(self, x: int, y: int) -> Cell:
        """Committed state of the cell at (x, y)."""
        return Cell(
            float(self.height[y, x]),
            float(self.velocity[y, x]),
            float(self.acceleration[y, x]),
        )

    def neighbor_height_sum(self) -> np.ndarray:
        """
        Sum of the four orthogonal neighbor heights for every cell.

        The border is constant 0, so out-of-range neighbors count as rest height.
        """
        return convolve(self.height, NEIGHBOR_KERNEL, mode="constant", cval=0.0)

    def commit(self):
        """Swap the scratch buffers in as the committed state."""
        self.height, self.next_height = self.next_height, self.height
        self.velocity, self.next_velocity = self.next_velocity, self.velocity
        self.acceleration, self.next_acceleration = (
            self.next_acceleration, self.acceleration
        )

    @property
    def display_slice(self) -> tuple[slice, slice]:
        """Index expression selecting the display window as [y, x]."""
        o, d = self.config.display_offset, self.config.display_size
        return slice(o, o + d), slice(o, o + d)

    def display_window(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Read-only views of (height, velocity, acceleration) in the window.

        Views alias the committed buffers, so they are only valid until
        the next commit.
        """
        views = []
        for arr in (self.height, self.velocity, self.acceleration):
            view = arr[self.display_slice]
            view.flags.writeable = False
            views.append(view)
        return views[0], views[1], views[2]

