"""
Shared fixtures for the truck loading test-suite.

Run with:
    python -m pytest tests -v
"""

import os
import sys

import pytest

# Make the src/ layout importable without an editable install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from truckload.config import EngineConfig, Skid, TruckDimensions  # noqa: E402

STRATEGIES = ["floor_sweep", "extreme_points"]


def make_skid(sid, width=1.0, length=1.0, height=1.0, weight=100.0, **kwargs):
    """Skid with label == id and sensible defaults."""
    return Skid(id=str(sid), label=str(sid), width=width, length=length,
                height=height, weight=weight, **kwargs)


@pytest.fixture
def skid_factory():
    return make_skid


@pytest.fixture
def box_truck():
    """Usable space 10 (L) x 2 (W) x 2 (H)."""
    return TruckDimensions(length=10.0, width=2.0, height=2.0,
                           inside_length=10.0, inside_width=2.0, inside_height=2.0)


@pytest.fixture
def cube_truck():
    """Usable space 2 x 2 x 2 - room for exactly one 2x2 footprint."""
    return TruckDimensions(length=2.0, width=2.0, height=2.0,
                           inside_length=2.0, inside_width=2.0, inside_height=2.0)


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def fast_config():
    """Coarser sweep for the larger integration loads."""
    return EngineConfig(floor_sweep_step=0.25)
