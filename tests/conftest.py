import pytest

from mhn_globe.models import RenderParams
from mhn_globe.projection import SphereState
from mhn_globe.terrain import TerrainRaster


@pytest.fixture
def all_land():
    return TerrainRaster(["#" * 120] * 60)


@pytest.fixture
def all_ocean():
    return TerrainRaster([" " * 120] * 60)


@pytest.fixture
def small_state():
    """40x20 viewport with a radius-8 sphere centred on (20, 10)."""
    return SphereState(width=40, height=20, aspect_ratio=1.0, radius=8.0)


@pytest.fixture
def params():
    return RenderParams(rotation=0.0, arc_style="curved")
