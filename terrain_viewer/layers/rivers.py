# terrain_viewer/layers/rivers.py

import pygame

from .. import config as DEFAULTS
from ..schema import WATER_CELL_TYPES
from .base import FrameContext

RIVER_COLOR_DEEP = (0, 64, 192, 230)
RIVER_COLOR_SHALLOW = (0, 128, 255, 230)


class RiverLayer:
    """Joins the centers of adjacent cells that belong to the same named river."""

    id = "rivers"

    def should_render(self, settings, selection=None) -> bool:
        return settings.show_rivers

    def render(self, context: FrameContext):
        geometry = context.geometry
        if geometry.is_empty or not geometry.shows_details:
            return

        overlay = context.translucent_surface()
        base_width = max(1.0, min(geometry.cell_width, geometry.cell_height) * 0.15)
        drawn = 0

        for vx, vy, cell in context.iter_cells():
            if cell.type not in WATER_CELL_TYPES or not cell.river_name:
                continue

            # Only right and down neighbours, so each joint is drawn once.
            for nx, ny in ((vx + 1, vy), (vx, vy + 1)):
                neighbour = context.neighbour(nx, ny)
                if neighbour is None or neighbour.type not in WATER_CELL_TYPES:
                    continue
                if neighbour.river_name != cell.river_name:
                    continue

                flow = max(1.0, min(3.0, cell.water_height or 1.0))
                color = RIVER_COLOR_DEEP if cell.water_height >= DEFAULTS.DEEP_RIVER_WATER_HEIGHT else RIVER_COLOR_SHALLOW
                pygame.draw.line(overlay, color, geometry.cell_center(vx, vy), geometry.cell_center(nx, ny),
                                 max(1, round(base_width * flow)))
                drawn += 1

        if drawn:
            context.surface.blit(overlay, (0, 0))
