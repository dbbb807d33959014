# terrain_viewer/layers/base.py

"""
================================================================================
LAYER INTERFACES
================================================================================
The two kinds of layer the renderer composes, and the per-frame context they
draw with.

Data Contract:
---------------
- ColorLayer: applies_to(settings) -> bool and color_of(cell, settings) ->
  (R, G, B). color_of is pure. A color layer MAY also provide
  render(context) to decorate the base raster after it is drawn.
- OverlayLayer: should_render(settings, selection) -> bool and
  render(context). Overlays draw on top of the raster and never change a
  cell's base color.
- FrameContext: everything a layer needs for one frame. Hovered/selected
  cells arrive here as an argument instead of living inside a layer.
================================================================================
"""
from dataclasses import dataclass
from typing import Callable, Iterator, Protocol

import pygame

from ..geometry import FrameGeometry
from ..schema import TerrainCell, TerrainGrid
from ..settings import NO_SELECTION, Selection, VisualizationSettings

ColorFn = Callable[[TerrainCell, VisualizationSettings], tuple]


@dataclass
class FrameContext:
    surface: pygame.Surface
    grid: TerrainGrid
    settings: VisualizationSettings
    geometry: FrameGeometry
    selection: Selection = NO_SELECTION
    world_size: int = 0
    frame_index: int = 0

    def iter_cells(self) -> Iterator[tuple[int, int, TerrainCell]]:
        """Yields (vx, vy, cell) for every cell of the window in row-major order."""
        for vy, row in enumerate(self.grid):
            for vx, cell in enumerate(row):
                if cell is not None:
                    yield vx, vy, cell

    def neighbour(self, vx: int, vy: int):
        if 0 <= vy < len(self.grid) and 0 <= vx < len(self.grid[vy]):
            return self.grid[vy][vx]
        return None

    def translucent_surface(self) -> pygame.Surface:
        """A transparent surface matching the canvas, for drawing with alpha."""
        return pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)


class ColorLayer(Protocol):
    id: str

    def applies_to(self, settings: VisualizationSettings) -> bool: ...
    def color_of(self, cell: TerrainCell, settings: VisualizationSettings) -> tuple: ...


class OverlayLayer(Protocol):
    id: str

    def should_render(self, settings: VisualizationSettings, selection: Selection) -> bool: ...
    def render(self, context: FrameContext) -> None: ...


class ColorModeLayer:
    """A color layer built from a pure color function, keyed by its mode name."""

    def __init__(self, mode: str, color_fn: ColorFn):
        self.id = mode
        self.mode = mode
        self._color_fn = color_fn

    def applies_to(self, settings: VisualizationSettings) -> bool:
        return settings.color_mode == self.mode

    def color_of(self, cell: TerrainCell, settings: VisualizationSettings) -> tuple:
        return self._color_fn(cell, settings)

    def __repr__(self):
        return f"{type(self).__name__}({self.mode!r})"
