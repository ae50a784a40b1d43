"""Smoke tests for matplotlib field plots."""

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from ripplesim.analysis import EnergyTracker, ring_profile
from ripplesim.core import Simulation, SimulationConfig
from ripplesim.viz import (
    plot_display_window,
    plot_energy_history,
    plot_height_field,
    plot_lattice_field,
    plot_radial_profile,
    save_figure,
)


DT = 1.0 / 30.0


@pytest.fixture
def running_sim(rng):
    sim = Simulation(SimulationConfig.default(), rng=rng)
    sim.run(20, DT)
    yield sim
    plt.close("all")


class TestFieldPlots:
    """Plots build without errors."""

    def test_height_field_outlines_window(self, running_sim):
        fig, ax = plot_height_field(running_sim.lattice)
        assert len(ax.patches) == 1
        assert ax.get_title() == "Height"

    @pytest.mark.parametrize("which", ["velocity", "acceleration"])
    def test_other_fields(self, running_sim, which):
        fig, ax = plot_lattice_field(running_sim.lattice, which, show_window=False)
        assert len(ax.patches) == 0

    @pytest.mark.parametrize("mode", ["grayscale", "hsv"])
    def test_display_window(self, running_sim, mode):
        fig, ax = plot_display_window(running_sim, mode=mode)
        image = ax.get_images()[0].get_array()
        assert image.shape == (24, 24, 3)

    def test_energy_and_profile(self, running_sim, tmp_path):
        tracker = EnergyTracker(running_sim.lattice, running_sim.config.springs)
        for _ in range(5):
            running_sim.advance_frame(DT)
            tracker.record()
        fig, _ = plot_energy_history(tracker, DT)
        save_figure(fig, tmp_path / "energy.png")

        drop = running_sim.drops.drops[0]
        radii, values = ring_profile(running_sim.lattice, drop, max_radius=10)
        fig, ax = plot_radial_profile(radii, values, label="ring")
        assert len(ax.lines) == 2  # profile + zero line

        assert (tmp_path / "energy.png").exists()
