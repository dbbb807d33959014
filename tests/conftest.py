import os

# Headless SDL so surfaces and the minimap can be drawn in CI.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from terrain_viewer.schema import TerrainCell
from terrain_viewer.settings import VisualizationSettings


@pytest.fixture
def make_cell():
    def _make(**values):
        return TerrainCell(**values)
    return _make


@pytest.fixture
def make_grid():
    """Builds a size x size grid; cell_fn(x, y) returns the field overrides for each cell."""
    def _make(size, cell_fn=None):
        return tuple(
            tuple(TerrainCell(x=x, y=y, **(cell_fn(x, y) if cell_fn else {})) for x in range(size))
            for y in range(size)
        )
    return _make


@pytest.fixture
def settings():
    return VisualizationSettings()
