# terrain_viewer/layers/wind.py

import math

import pygame

from .. import color_maps
from .. import config as DEFAULTS
from ..settings import COLOR_MODE_WIND
from .base import ColorModeLayer, FrameContext

ARROW_COLOR = (40, 40, 40, 204)
# Arrowhead strokes sit 30 degrees either side of the shaft.
ARROW_HEAD_ANGLE = math.pi / 6


def arrow_segments(center: tuple[float, float], cell_size: float, wind_speed: float,
                   wind_direction: float) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """
    Returns the three line segments (shaft, two head strokes) of a wind arrow.

    wind_direction is a compass bearing: 0 = north, clockwise. Screen y grows
    downward, so north maps to -90 degrees in screen space.
    """
    cx, cy = center
    speed = min(1.0, max(0.0, wind_speed) / DEFAULTS.MAX_WIND_SPEED)
    length = cell_size * (0.3 + speed * 0.6) * 0.45
    angle = math.radians(wind_direction - 90)

    tip = (cx + math.cos(angle) * length, cy + math.sin(angle) * length)
    tail = (cx - math.cos(angle) * length * 0.3, cy - math.sin(angle) * length * 0.3)
    head = length * 0.4
    left = (tip[0] - head * math.cos(angle - ARROW_HEAD_ANGLE), tip[1] - head * math.sin(angle - ARROW_HEAD_ANGLE))
    right = (tip[0] - head * math.cos(angle + ARROW_HEAD_ANGLE), tip[1] - head * math.sin(angle + ARROW_HEAD_ANGLE))
    return [(tail, tip), (tip, left), (tip, right)]


class WindLayer(ColorModeLayer):
    """Wind speed color ramp, decorated with one direction arrow per cell."""

    def __init__(self):
        super().__init__(COLOR_MODE_WIND, color_maps.wind_color)

    def render(self, context: FrameContext):
        if not self.applies_to(context.settings):
            return

        geometry = context.geometry
        if geometry.cell_width < DEFAULTS.WIND_ARROW_MIN_CELL_PX or geometry.cell_height < DEFAULTS.WIND_ARROW_MIN_CELL_PX:
            return

        overlay = context.translucent_surface()
        line_width = max(1, round(geometry.cell_width * 0.08))
        cell_size = min(geometry.cell_width, geometry.cell_height)
        drawn = 0

        for vx, vy, cell in context.iter_cells():
            speed = cell.wind_speed or 0.0
            if speed <= DEFAULTS.WIND_ARROW_MIN_SPEED:
                continue
            center = geometry.cell_center(vx, vy)
            for start, end in arrow_segments(center, cell_size, speed, cell.wind_direction or 0.0):
                pygame.draw.line(overlay, ARROW_COLOR, start, end, line_width)
            drawn += 1

        if drawn:
            context.surface.blit(overlay, (0, 0))
