"""
Display mapping: cell state → RGB pixels.

Input is the (N, 3) array from Simulation.sample_display_window() with
rows (height, velocity, acceleration). Output is (N, 3) uint8 RGB in the
same order, ready for a pixel device or an image.

Two mappings:
- grayscale: brightness = base + height·gain, clamped to [0, 255]
- hsv: value from height, hue from velocity, saturation from |acceleration|
"""

from __future__ import annotations
from dataclasses import dataclass

import numpy as np
from matplotlib.colors import hsv_to_rgb


@dataclass
class ColorMapping:
    """Gains for turning cell state into colors."""

    base_brightness: float = 50.0  # Brightness at rest height (0..255)
    height_gain: float = 20.0  # Brightness per unit height
    base_hue: float = 0.58  # Hue at rest (blue)
    velocity_hue_gain: float = 0.005  # Hue shift per unit velocity
    base_saturation: float = 0.8
    acceleration_saturation_gain: float = -0.002  # Fast-changing cells wash out


def _as_samples(samples: np.ndarray) -> np.ndarray:
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 2 or samples.shape[1] != 3:
        raise ValueError(f"Expected samples of shape (N, 3), got {samples.shape}")
    return samples


def grayscale_pixels(samples: np.ndarray, mapping: ColorMapping | None = None) -> np.ndarray:
    """Gray level from height only."""
    if mapping is None:
        mapping = ColorMapping()
    samples = _as_samples(samples)

    brightness = mapping.base_brightness + samples[:, 0] * mapping.height_gain
    level = np.clip(brightness, 0, 255).astype(np.uint8)
    return np.repeat(level[:, None], 3, axis=1)


def hsv_pixels(samples: np.ndarray, mapping: ColorMapping | None = None) -> np.ndarray:
    """Colored mapping using all three state channels."""
    if mapping is None:
        mapping = ColorMapping()
    samples = _as_samples(samples)
    height, velocity, accel = samples[:, 0], samples[:, 1], samples[:, 2]

    hue = np.mod(mapping.base_hue + velocity * mapping.velocity_hue_gain, 1.0)
    saturation = np.clip(
        mapping.base_saturation + np.abs(accel) * mapping.acceleration_saturation_gain,
        0.0, 1.0,
    )
    value = np.clip(
        (mapping.base_brightness + height * mapping.height_gain) / 255.0,
        0.0, 1.0,
    )

    rgb = hsv_to_rgb(np.stack([hue, saturation, value], axis=1))
    return np.round(rgb * 255).astype(np.uint8)


def samples_to_image(pixels: np.ndarray, display_size: int) -> np.ndarray:
    """Reshape row-major (N, 3) pixels into a (display_size, display_size, 3) image."""
    pixels = np.asarray(pixels)
    if pixels.shape[0] != display_size * display_size:
        raise ValueError(
            f"Expected {display_size * display_size} pixels, got {pixels.shape[0]}"
        )
    return pixels.reshape(display_size, display_size, 3)
