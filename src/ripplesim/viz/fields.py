"""
2D visualization of lattice fields.

Provides heatmaps and profiles for:
- height, velocity, acceleration over the full physical grid
- the display window as rendered pixels
- energy history and radial ring profiles

All plots use matplotlib.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Literal

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes
from matplotlib.patches import Rectangle

from ripplesim.viz.pixels import ColorMapping, grayscale_pixels, hsv_pixels, samples_to_image

if TYPE_CHECKING:
    from ripplesim.core.lattice import Lattice
    from ripplesim.core.simulation import Simulation
    from ripplesim.analysis.energy import EnergyTracker


# Diverging water colormap: deep trough → rest → crest
def _create_water_cmap():
    """Create a colormap from dark blue (trough) through teal to white (crest)."""
    from matplotlib.colors import LinearSegmentedColormap

    colors = [
        (0.020, 0.047, 0.180),   # Deep navy (trough)
        (0.055, 0.180, 0.400),   # Dark blue
        (0.090, 0.380, 0.560),   # Blue
        (0.160, 0.560, 0.620),   # Teal (rest)
        (0.450, 0.760, 0.780),   # Light teal
        (0.820, 0.930, 0.940),   # Foam
        (0.993, 0.978, 0.925),   # Warm white (crest)
    ]
    return LinearSegmentedColormap.from_list("water", colors)


CMAP_WATER = _create_water_cmap()

CMAP_HEIGHT = CMAP_WATER
CMAP_VELOCITY = "coolwarm"
CMAP_ACCELERATION = "PuOr"

FieldName = Literal["height", "velocity", "acceleration"]


def _symmetric_limit(field: np.ndarray) -> float:
    limit = float(np.abs(field).max())
    return limit if limit > 0 else 1.0


def plot_field(
    field: np.ndarray,
    title: str = "",
    cmap=None,
    vmin: float | None = None,
    vmax: float | None = None,
    ax: Axes | None = None,
    colorbar: bool = True,
    figsize: tuple[float, float] = (8, 6),
) -> tuple[Figure, Axes]:
    """
    Plot a 2D field as a heatmap.

    Args:
        field: 2D array to plot, indexed [y, x]
        title: Plot title
        cmap: Colormap (default: water)
        vmin, vmax: Color scale limits (auto if None)
        ax: Existing axes to plot on (creates new figure if None)
        colorbar: Whether to add a colorbar
        figsize: Figure size if creating new figure

    Returns:
        (fig, ax) tuple
    """
    if cmap is None:
        cmap = CMAP_WATER

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    im = ax.imshow(
        field,
        origin="upper",
        cmap=cmap,
        vmin=vmin,
        vmax=vmax,
        aspect="equal",
    )

    if colorbar:
        plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04)

    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")

    return fig, ax


def plot_lattice_field(
    lattice: "Lattice",
    which: FieldName = "height",
    title: str | None = None,
    show_window: bool = True,
    ax: Axes | None = None,
    **kwargs,
) -> tuple[Figure, Axes]:
    """
    Plot one state field over the full physical grid.

    The display window is outlined when show_window is set.
    """
    field = getattr(lattice, which)
    cmap = {
        "height": CMAP_HEIGHT,
        "velocity": CMAP_VELOCITY,
        "acceleration": CMAP_ACCELERATION,
    }[which]
    limit = _symmetric_limit(field)

    fig, ax = plot_field(
        field,
        title=title if title is not None else which.capitalize(),
        cmap=cmap,
        vmin=-limit,
        vmax=limit,
        ax=ax,
        **kwargs,
    )

    if show_window:
        o = lattice.config.display_offset
        d = lattice.config.display_size
        ax.add_patch(Rectangle(
            (o - 0.5, o - 0.5), d, d,
            fill=False, edgecolor="white", linestyle="--", linewidth=1.0,
        ))

    return fig, ax


def plot_height_field(lattice: "Lattice", **kwargs) -> tuple[Figure, Axes]:
    """Plot the height field of a lattice."""
    return plot_lattice_field(lattice, "height", **kwargs)


def plot_display_window(
    sim: "Simulation",
    mode: Literal["grayscale", "hsv"] = "grayscale",
    mapping: ColorMapping | None = None,
    ax: Axes | None = None,
    figsize: tuple[float, float] = (5, 5),
) -> tuple[Figure, Axes]:
    """Show the display window exactly as its pixels would be rendered."""
    samples = sim.sample_display_window()
    if mode == "grayscale":
        pixels = grayscale_pixels(samples, mapping)
    else:
        pixels = hsv_pixels(samples, mapping)
    image = samples_to_image(pixels, sim.config.lattice.display_size)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    ax.imshow(image, interpolation="nearest")
    ax.set_title(f"t = {sim.time:.2f} s")
    ax.set_xticks([])
    ax.set_yticks([])

    return fig, ax


def plot_energy_history(
    tracker: "EnergyTracker",
    dt: float,
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 5),
) -> tuple[Figure, Axes]:
    """Plot kinetic, potential and total energy against simulated time."""
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    t = np.arange(len(tracker)) * dt
    ax.plot(t, tracker.kinetic, label="kinetic", alpha=0.7)
    ax.plot(t, tracker.potential, label="potential", alpha=0.7)
    ax.plot(t, tracker.total, label="total", color="black", linewidth=1.5)
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Energy")
    ax.grid(True, alpha=0.3)
    ax.legend()

    return fig, ax


def plot_radial_profile(
    radii: np.ndarray,
    values: np.ndarray,
    label: str = "",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 5),
    **plot_kwargs,
) -> tuple[Figure, Axes]:
    """
    Plot a 1D radial profile.

    Args:
        radii: Radius values
        values: Field values at each radius
        label: Line label
        ax: Existing axes (creates new if None)
        figsize: Figure size

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    ax.plot(radii, values, label=label, **plot_kwargs)
    ax.axhline(0.0, color="gray", linewidth=0.8)
    ax.set_xlabel("Distance from drop (cells)")
    ax.set_ylabel("Height")
    ax.grid(True, alpha=0.3)

    if label:
        ax.legend()

    return fig, ax


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
