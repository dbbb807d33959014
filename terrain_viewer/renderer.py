# terrain_viewer/renderer.py

"""
================================================================================
TERRAIN RENDERER (LAYER COMPOSITOR)
================================================================================
Owns the layer registry and draws one frame of the viewport window.

Data Contract:
---------------
- Inputs (per frame): a target pygame.Surface, the viewport cell grid
  ([y][x]), VisualizationSettings, the hovered/selected Selection and the
  current world size.
- Draw order: base raster from the active color layer -> that layer's own
  decoration (if it has one) -> every enabled overlay in registration order
  (rivers, contours, clouds, precipitation, selection).
- get_cell_color(cell, settings) is the same mapping the raster uses, exposed
  for the minimap and any other consumer.
- cell_at(...) resolves a pointer position to a CellInfo using the same
  geometry the raster was drawn with.
- Side Effects: draws on the given surface; logs once per unknown color mode.
- Invariants: an empty grid or zero-size surface draws nothing and raises
  nothing. An unknown color mode renders with the default layer.
================================================================================
"""
import logging
from typing import Optional

import pygame

from .geometry import FrameGeometry
from .layers import FrameContext, create_color_layers, create_overlay_layers
from .schema import TerrainCell, TerrainGrid
from .settings import COLOR_MODE_DEFAULT, NO_SELECTION, CellInfo, Selection, VisualizationSettings

WIREFRAME_COLOR = (0, 0, 0, 51)


class TerrainRenderer:
    """Composes the color-mode layers and overlays into a rendered frame."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.color_layers = {}
        self.overlay_layers = []
        self.frame_count = 0
        self._unknown_modes = set()

        for layer in create_color_layers():
            self.register_color_layer(layer.mode, layer)
        for layer in create_overlay_layers():
            self.register_overlay_layer(layer)

        self.default_layer = self.color_layers[COLOR_MODE_DEFAULT]

    # --- Registry ---
    def register_color_layer(self, mode: str, layer):
        """Registers (or replaces) the color layer for a color mode."""
        self.color_layers[mode] = layer

    def register_overlay_layer(self, layer):
        """Appends an overlay; overlays draw in the order they are registered."""
        self.overlay_layers.append(layer)

    def resolve_color_layer(self, settings: VisualizationSettings):
        layer = self.color_layers.get(settings.color_mode)
        if layer is not None:
            return layer

        if settings.color_mode not in self._unknown_modes:
            self._unknown_modes.add(settings.color_mode)
            self.logger.warning(f"Unknown color mode '{settings.color_mode}', rendering with '{COLOR_MODE_DEFAULT}'.")
        return self.default_layer

    # --- Colors & Geometry ---
    def get_cell_color(self, cell: TerrainCell, settings: VisualizationSettings) -> tuple:
        """Returns the color the main raster draws for this cell and settings."""
        color = self.resolve_color_layer(settings).color_of(cell, settings)
        if color is None:
            return self.default_layer.color_of(cell, settings)
        return color

    @staticmethod
    def compute_geometry(grid: TerrainGrid, settings: VisualizationSettings,
                         width: int, height: int) -> FrameGeometry:
        return FrameGeometry.compute(width, height, len(grid) if grid else 0,
                                     settings.zoom_level, settings.pan_offset)

    def cell_at(self, grid: TerrainGrid, settings: VisualizationSettings, width: int, height: int,
                px: float, py: float) -> Optional[CellInfo]:
        """Resolves pointer pixel (px, py) on a width x height canvas to a cell."""
        if not grid:
            return None
        position = self.compute_geometry(grid, settings, width, height).pointer_to_cell(px, py)
        if position is None:
            return None

        cell_x, cell_y = position
        row = grid[cell_y] if cell_y < len(grid) else ()
        cell = row[cell_x] if cell_x < len(row) else None
        if cell is None:
            return None
        return CellInfo(cell=cell, x=cell_x, y=cell_y, screen_x=px, screen_y=py)

    # --- Frame ---
    def render(self, surface: pygame.Surface, grid: TerrainGrid, settings: VisualizationSettings,
               selection: Selection = NO_SELECTION, world_size: Optional[int] = None) -> FrameGeometry:
        """Draws one frame onto surface and returns the geometry it used."""
        width, height = surface.get_size()
        geometry = self.compute_geometry(grid, settings, width, height)
        if geometry.is_empty:
            return geometry

        color_layer = self.resolve_color_layer(settings)
        context = FrameContext(
            surface=surface,
            grid=grid,
            settings=settings,
            geometry=geometry,
            selection=selection,
            world_size=world_size or geometry.viewport_size,
            frame_index=self.frame_count,
        )

        self._render_terrain(context, color_layer)

        decorate = getattr(color_layer, "render", None)
        if callable(decorate) and color_layer.applies_to(settings):
            decorate(context)

        for layer in self.overlay_layers:
            if layer.should_render(settings, selection):
                layer.render(context)

        self.frame_count += 1
        return geometry

    def _render_terrain(self, context: FrameContext, layer):
        """Fills every cell of the window with its color from the active layer."""
        surface = context.surface
        geometry = context.geometry
        settings = context.settings
        draw_wireframe = settings.wireframe and geometry.shows_details
        wireframe = context.translucent_surface() if draw_wireframe else None

        for vx, vy, cell in context.iter_cells():
            color = layer.color_of(cell, settings)
            if color is None:
                color = self.default_layer.color_of(cell, settings)
            surface.fill(color, geometry.fill_rect(vx, vy))

            if wireframe is not None:
                pygame.draw.rect(wireframe, WIREFRAME_COLOR, geometry.cell_rect(vx, vy), 1)

        if wireframe is not None:
            surface.blit(wireframe, (0, 0))

    def draw_loading_indicator(self, surface: pygame.Surface, font: Optional[pygame.font.Font] = None):
        """Dims the canvas and, when a font is available, writes a loading message."""
        shade = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 128))
        surface.blit(shade, (0, 0))
        if font is not None:
            label = font.render("Loading viewport...", True, (255, 255, 255))
            surface.blit(label, label.get_rect(center=surface.get_rect().center))
