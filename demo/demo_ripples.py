#!/usr/bin/env python3
"""
Demo: Ripples on a Spring Lattice

Runs the default 72x72 lattice at 30 frames per simulated second:

1. Every 5 s a drop lifts one cell near the middle of the window
2. Springs spread the disturbance outward as a ring
3. The ground spring and damping settle the surface back to rest
4. Only the middle 24x24 square is "displayed"

With --realtime the loop is paced to wall-clock time like a pixel device.

Output: output/demo_ripples/
    frames.png   - display window snapshots (grayscale and hsv)
    energy.png   - energy history
    field.png    - full physical grid with the display window outlined
"""

import argparse
import logging
import time
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from ripplesim.core import Simulation, SimulationConfig
from ripplesim.analysis import EnergyTracker, ring_profile
from ripplesim.viz import (
    plot_display_window,
    plot_energy_history,
    plot_height_field,
    plot_radial_profile,
    save_figure,
)
from ripplesim.logging_config import setup_logging


FPS = 30


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--seconds", type=float, default=12.0, help="Simulated seconds to run")
    parser.add_argument("--seed", type=int, default=7, help="Seed for drop placement")
    parser.add_argument("--realtime", action="store_true", help="Pace frames to wall-clock time")
    parser.add_argument("--debug", action="store_true", help="Log drop creation/expiry")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    print("=" * 60)
    print("  SPRING LATTICE RIPPLES")
    print("=" * 60)

    dt = 1.0 / FPS
    config = SimulationConfig.default()
    sim = Simulation(config, rng=np.random.default_rng(args.seed))
    sim.check_stability(dt)
    print(f"\n1. Lattice {config.lattice.physical_size}x{config.lattice.physical_size}, "
          f"display {config.lattice.display_size}x{config.lattice.display_size} "
          f"at offset {config.lattice.display_offset}")
    print(f"   Stability ratio at dt=1/{FPS}: {sim.stability_ratio(dt):.3f}")

    tracker = EnergyTracker(sim.lattice, config.springs)
    n_frames = int(round(args.seconds * FPS))
    snapshot_frames = {int(round(s * FPS)) for s in (0.5, 1.0, 2.0, 4.0)}

    output_dir = Path("output/demo_ripples")
    output_dir.mkdir(parents=True, exist_ok=True)

    fig_frames, axes = plt.subplots(2, len(snapshot_frames), figsize=(3 * len(snapshot_frames), 6))
    column = 0
    first_drop = None

    print(f"\n2. Running {n_frames} frames ({args.seconds:.1f} s)...")
    start = time.perf_counter()
    for frame in range(1, n_frames + 1):
        sim.advance_frame(dt)
        tracker.record()

        if first_drop is None and sim.drops.drops:
            first_drop = sim.drops.drops[0]

        if frame in snapshot_frames:
            plot_display_window(sim, mode="grayscale", ax=axes[0, column])
            plot_display_window(sim, mode="hsv", ax=axes[1, column])
            column += 1

        if args.realtime:
            delay = start + frame * dt - time.perf_counter()
            if delay > 0:
                time.sleep(delay)

    print(f"   t = {sim.time:.2f} s, live drops: {len(sim.drops.drops)}, "
          f"max |h| = {np.abs(sim.lattice.height).max():.3f}")

    fig_frames.suptitle("Display window", fontsize=14, fontweight="bold")
    fig_frames.tight_layout()
    save_figure(fig_frames, output_dir / "frames.png")
    plt.close(fig_frames)

    fig_energy, _ = plot_energy_history(tracker, dt)
    save_figure(fig_energy, output_dir / "energy.png")
    plt.close(fig_energy)

    fig_field, ax = plt.subplots(1, 2, figsize=(14, 6))
    plot_height_field(sim.lattice, ax=ax[0])
    if first_drop is not None:
        radii, values = ring_profile(sim.lattice, first_drop, max_radius=20)
        plot_radial_profile(radii, values, label=f"around ({first_drop.x}, {first_drop.y})", ax=ax[1])
    fig_field.tight_layout()
    save_figure(fig_field, output_dir / "field.png")
    plt.close(fig_field)

    print(f"\n3. Saved figures to {output_dir}/")
    print("\n" + "=" * 60)
    print("  Ripple demonstration complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
