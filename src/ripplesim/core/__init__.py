"""
Core engine primitives.

This layer knows NOTHING about colors, pixels or plotting.
It only knows:
- Cells with height, velocity and measured acceleration
- The spring/ground/damping update rule
- Drops: eased height overrides created on a clock
- Double-buffered stepping (compute all, then commit)

Simulation ties the pieces together for a frame driver.
"""

from ripplesim.core.lattice import Cell, Lattice, LatticeConfig
from ripplesim.core.drops import Drop, DropScheduler, DropSchedulerConfig, drop_forcing, smoothstep
from ripplesim.core.simulator import GridSimulator, SpringConfig
from ripplesim.core.simulation import Simulation, SimulationConfig

__all__ = [
    "Cell",
    "Lattice",
    "LatticeConfig",
    "Drop",
    "DropScheduler",
    "DropSchedulerConfig",
    "drop_forcing",
    "smoothstep",
    "GridSimulator",
    "SpringConfig",
    "Simulation",
    "SimulationConfig",
]
