# terrain_viewer/layers/contours.py

import math

import pygame

from .base import FrameContext

CONTOUR_COLOR = (0, 0, 0, 128)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def is_contour_cell(altitude: float, interval: float) -> bool:
    """True when the altitude, rounded to a whole unit, sits on a contour step."""
    if interval <= 0:
        return False
    return _round_half_up(altitude / interval) * interval == _round_half_up(altitude)


class ContourLayer:
    """Outlines cells whose altitude falls on a multiple of the contour interval."""

    id = "contours"

    def should_render(self, settings, selection=None) -> bool:
        return settings.contour_lines and settings.show_elevation

    def render(self, context: FrameContext):
        geometry = context.geometry
        if geometry.is_empty or not geometry.shows_details:
            return

        overlay = context.translucent_surface()
        interval = context.settings.contour_interval
        drawn = 0
        for vx, vy, cell in context.iter_cells():
            if is_contour_cell(cell.altitude, interval):
                pygame.draw.rect(overlay, CONTOUR_COLOR, geometry.cell_rect(vx, vy), 1)
                drawn += 1

        if drawn:
            context.surface.blit(overlay, (0, 0))
