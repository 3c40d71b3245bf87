"""
Pytest configuration and shared fixtures for elastIGA tests.
"""

import io
import textwrap

import pytest
import sys
from pathlib import Path

# Add the parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from elastIGA.io.config import ElasticityConfig
from elastIGA.sim.elasticity import SIMElasticity


@pytest.fixture
def tolerance():
    """Default tolerance for floating point comparisons."""
    return 1e-12


@pytest.fixture
def make_sim():
    """Factory for elasticity drivers with a given number of patches."""
    def _make(dimension=2, n_patches=1, **config):
        sim = SIMElasticity(dimension, ElasticityConfig(**config))
        sim.partition.n_patches = n_patches
        return sim
    return _make


@pytest.fixture
def read_input():
    """Read (dedented) keyword input text into a driver."""
    def _read(sim, text):
        return sim.read_text(io.StringIO(textwrap.dedent(text)))
    return _read
