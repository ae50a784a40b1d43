"""
Analysis layer: derived quantities for diagnostics and plots.

IMPORTANT: This is NOT seen by the engine. One-way derivation only.

- kinetic/coupling/ground/total energy of a lattice
- EnergyTracker: energy history over a run
- ring_profile: mean field over rings around a drop, inside the display window
"""

from ripplesim.analysis.energy import (
    EnergyTracker,
    coupling_energy,
    ground_energy,
    kinetic_energy,
    ring_profile,
    total_energy,
)

__all__ = [
    "EnergyTracker",
    "coupling_energy",
    "ground_energy",
    "kinetic_energy",
    "ring_profile",
    "total_energy",
]
