"""
Energy bookkeeping and drop ring profiles for the spring lattice.

IMPORTANT: This is NOT seen by the engine. One-way derivation only.

Mechanical energy of the lattice:
    kinetic  = ½·m·Σ v²
    coupling = ½·k·Σ_edges (h_i - h_j)²     (edges to the fixed 0 border included)
    ground   = ½·g·Σ h²

With damping < 1 and no drops, the total decays. Kinetic energy alone
does not: it trades with the potential terms as the waves oscillate.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from ripplesim.core.lattice import Lattice
    from ripplesim.core.simulator import SpringConfig
    from ripplesim.core.drops import Drop


def kinetic_energy(velocity: np.ndarray, mass: float = 1.0) -> float:
    """½·m·Σ v²"""
    return float(0.5 * mass * np.sum(velocity ** 2))


def coupling_energy(height: np.ndarray, spring_strength: float) -> float:
    """Energy stored in neighbor springs, border springs to height 0 included."""
    padded = np.pad(height, 1, mode="constant", constant_values=0.0)
    dx = np.diff(padded[1:-1, :], axis=1)
    dy = np.diff(padded[:, 1:-1], axis=0)
    return float(0.5 * spring_strength * (np.sum(dx ** 2) + np.sum(dy ** 2)))


def ground_energy(height: np.ndarray, ground_stiffness: float) -> float:
    """½·g·Σ h²"""
    return float(0.5 * ground_stiffness * np.sum(height ** 2))


def total_energy(lattice: "Lattice", springs: "SpringConfig") -> float:
    """Total mechanical energy of the committed lattice state."""
    return (
        kinetic_energy(lattice.velocity, springs.mass)
        + coupling_energy(lattice.height, springs.spring_strength)
        + ground_energy(lattice.height, springs.ground_stiffness)
    )


@dataclass
class EnergyTracker:
    """Records the energy terms of a lattice after each call to record()."""

    lattice: "Lattice"
    springs: "SpringConfig"

    kinetic: list[float] = field(default_factory=list, init=False)
    potential: list[float] = field(default_factory=list, init=False)

    def record(self):
        self.kinetic.append(kinetic_energy(self.lattice.velocity, self.springs.mass))
        self.potential.append(
            coupling_energy(self.lattice.height, self.springs.spring_strength)
            + ground_energy(self.lattice.height, self.springs.ground_stiffness)
        )

    @property
    def total(self) -> np.ndarray:
        return np.asarray(self.kinetic) + np.asarray(self.potential)

    def __len__(self) -> int:
        return len(self.kinetic)


def ring_profile(
    lattice: "Lattice",
    drop: "Drop",
    max_radius: int | None = None,
    component: str = "height",
) -> tuple[np.ndarray, np.ndarray]:
    """
    Mean of a lattice field over integer-radius rings around a drop.

    Only the display window is sampled, so the ring a drop sends out is
    measured the way it is shown. A cell at distance d from the drop
    falls in ring floor(d + 0.5); rings with no cells read 0.

    Args:
        lattice: Lattice to sample
        drop: Ring centre (anything with x, y in lattice coordinates)
        max_radius: Largest ring; clipped to the window edge nearest the drop
        component: "height", "velocity" or "acceleration"

    Returns:
        (radii, values) - 1D arrays of ring radius and mean field value
    """
    windows = dict(zip(("height", "velocity", "acceleration"), lattice.display_window()))
    if component not in windows:
        raise ValueError(f"Unknown component {component!r}")
    values = windows[component]

    offset = lattice.config.display_offset
    cx, cy = drop.x - offset, drop.y - offset
    ny, nx = values.shape
    if not (0 <= cx < nx and 0 <= cy < ny):
        raise ValueError(f"Drop at ({drop.x}, {drop.y}) is outside the display window")

    fit = min(cx, cy, nx - cx - 1, ny - cy - 1)
    max_radius = fit if max_radius is None else max(0, min(max_radius, fit))

    yy, xx = np.ogrid[:ny, :nx]
    rings = np.floor(np.hypot(xx - cx, yy - cy) + 0.5).astype(np.intp).ravel()

    n = max_radius + 1
    sums = np.bincount(rings, weights=values.ravel(), minlength=n)[:n]
    counts = np.bincount(rings, minlength=n)[:n]
    profile = np.divide(sums, counts, out=np.zeros(n), where=counts > 0)

    return np.arange(n), profile
