# terrain_viewer/minimap.py

"""
================================================================================
MINIMAP RENDERER
================================================================================
Draws a low-resolution picture of the whole world and a rectangle showing
where the main view currently is.

Data Contract:
---------------
- Inputs (per frame): the target surface, the minimap cell grid ([y][x],
  possibly down-sampled), VisualizationSettings, a color function with the
  signature of TerrainRenderer.get_cell_color, the world size and the current
  viewport origin.
- Caching: the terrain picture is kept as a MinimapSnapshot and only redrawn
  when there is no snapshot, the color mode changed, or the snapshot is
  older than the staleness window. The viewport indicator is redrawn every
  frame on top of the cached picture.
- Side Effects: draws on the given surface.
================================================================================
"""
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

import pygame

from . import color_maps
from . import config as DEFAULTS
from .schema import TerrainGrid
from .settings import VisualizationSettings


@dataclass
class MinimapSnapshot:
    surface: pygame.Surface
    rendered_at: float
    color_mode: str


class MinimapRenderer:
    def __init__(self, size: int = DEFAULTS.MINIMAP_SIZE,
                 staleness_s: float = DEFAULTS.MINIMAP_STALENESS_S,
                 viewport_size: int = DEFAULTS.VIEWPORT_SIZE,
                 clock: Callable[[], float] = time.monotonic,
                 logger: Optional[logging.Logger] = None):
        self.size = size
        self.staleness_s = staleness_s
        self.viewport_size = viewport_size
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)
        self.snapshot: Optional[MinimapSnapshot] = None

    def needs_render(self, settings: VisualizationSettings, now: float) -> bool:
        if self.snapshot is None:
            return True
        if self.snapshot.color_mode != settings.color_mode:
            return True
        return now - self.snapshot.rendered_at > self.staleness_s

    def invalidate(self):
        """Drops the cached picture so the next frame redraws it."""
        self.snapshot = None

    def render(self, surface: pygame.Surface, grid: TerrainGrid, settings: VisualizationSettings,
               get_cell_color: Callable, world_size: Optional[int] = None,
               viewport_position: tuple[int, int] = (0, 0)) -> Optional[pygame.Rect]:
        """
        Draws the minimap onto surface. Returns the viewport indicator rect,
        or None when there is no grid to draw.
        """
        grid_size = len(grid) if grid else 0
        if not grid_size:
            return None

        now = self.clock()
        if self.needs_render(settings, now):
            self.logger.info(f"Rendering minimap terrain (next update in {self.staleness_s // 60:.0f} minutes)...")
            self.snapshot = MinimapSnapshot(
                surface=self._render_terrain(grid, settings, get_cell_color),
                rendered_at=now,
                color_mode=settings.color_mode,
            )

        surface.blit(self.snapshot.surface, (0, 0))
        return self._draw_viewport_indicator(surface, settings, world_size or grid_size, viewport_position)

    def _render_terrain(self, grid: TerrainGrid, settings: VisualizationSettings,
                        get_cell_color: Callable) -> pygame.Surface:
        colors = color_maps.get_color_array(grid, get_cell_color, settings)
        grid_surface = pygame.surfarray.make_surface(colors)
        # Nearest-neighbour scaling gives each grid cell a size/grid_size block.
        return pygame.transform.scale(grid_surface, (self.size, self.size))

    def indicator_rect(self, settings: VisualizationSettings, world_size: int,
                       viewport_position: tuple[int, int]) -> pygame.Rect:
        """
        The part of the world visible in the main view, in minimap pixels.

        Zooming shrinks the visible area inside the fixed fetched window; the
        offset centers that smaller square within the window.
        """
        visible_cells = self.viewport_size / settings.zoom_level
        px_per_cell = self.size / world_size
        center_offset = (self.viewport_size - visible_cells) / 2
        x = (viewport_position[0] + center_offset) * px_per_cell
        y = (viewport_position[1] + center_offset) * px_per_cell
        edge = visible_cells * px_per_cell
        return pygame.Rect(round(x), round(y), max(1, round(edge)), max(1, round(edge)))

    def _draw_viewport_indicator(self, surface: pygame.Surface, settings: VisualizationSettings,
                                 world_size: int, viewport_position: tuple[int, int]) -> pygame.Rect:
        rect = self.indicator_rect(settings, world_size, viewport_position)
        pygame.draw.rect(surface, DEFAULTS.MINIMAP_INDICATOR_COLOR, rect, DEFAULTS.MINIMAP_INDICATOR_WIDTH)
        return rect

    def click_to_world(self, px: float, py: float, world_size: int) -> Optional[tuple[int, int]]:
        """Converts a click on the minimap into the world cell under it."""
        if world_size <= 0 or self.size <= 0:
            return None
        scale = world_size / self.size
        return math.floor(px * scale), math.floor(py * scale)
