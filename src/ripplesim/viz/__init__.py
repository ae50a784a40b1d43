"""
Visualization utilities.

- Pixel mappings for the display window (grayscale, hsv)
- Field heatmaps over the physical grid
- Energy history and radial profiles
"""

from ripplesim.viz.pixels import (
    ColorMapping,
    grayscale_pixels,
    hsv_pixels,
    samples_to_image,
)

from ripplesim.viz.fields import (
    plot_field,
    plot_lattice_field,
    plot_height_field,
    plot_display_window,
    plot_energy_history,
    plot_radial_profile,
    save_figure,
)

__all__ = [
    "ColorMapping",
    "grayscale_pixels",
    "hsv_pixels",
    "samples_to_image",
    "plot_field",
    "plot_lattice_field",
    "plot_height_field",
    "plot_display_window",
    "plot_energy_history",
    "plot_radial_profile",
    "save_figure",
]
