"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def tiny_lattice_config():
    """A 3x3 grid displayed in full."""
    from ripplesim.core import LatticeConfig
    return LatticeConfig(physical_size=3, display_size=3, display_offset=0)


@pytest.fixture
def small_lattice_config():
    """A 12x12 grid showing its middle 4x4."""
    from ripplesim.core import LatticeConfig
    return LatticeConfig(physical_size=12, display_size=4, display_offset=4)


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)
