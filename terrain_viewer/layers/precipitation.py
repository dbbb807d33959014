# terrain_viewer/layers/precipitation.py

import math

import pygame

from .. import config as DEFAULTS
from .base import FrameContext

# Rain streaks cycle through a 20px band, advancing 2px per frame.
STREAK_CYCLE_PX = 20
STREAK_STEP_PX = 2
STREAK_LENGTH_PX = 10
STREAK_SLANT_PX = 3


def animation_offset(frame_index: int) -> int:
    return (STREAK_STEP_PX * (frame_index + 1)) % STREAK_CYCLE_PX


def streak_count(precipitation_rate: float) -> int:
    """One to four streaks per cell, rising with intensity."""
    intensity = min(1.0, precipitation_rate * 2)
    return math.floor(intensity * 3) + 1


class PrecipitationLayer:
    """Animated slanted rain streaks over cells where it is precipitating."""

    id = "precipitation"

    def should_render(self, settings, selection=None) -> bool:
        return settings.show_precipitation

    def render(self, context: FrameContext):
        geometry = context.geometry
        if geometry.is_empty:
            return

        offset = animation_offset(context.frame_index)
        overlay = context.translucent_surface()
        drawn = 0

        for vx, vy, cell in context.iter_cells():
            rate = cell.precipitation_rate or 0.0
            if rate < DEFAULTS.PRECIPITATION_MIN_RATE:
                continue

            intensity = min(1.0, rate * 2)
            lines = streak_count(rate)
            color = (100, 149, 237, int((0.3 + intensity * 0.4) * 255))
            cell_x, cell_y = geometry.cell_origin(vx, vy)

            for i in range(lines):
                x = cell_x + (geometry.cell_width / (lines + 1)) * (i + 1)
                y = cell_y + ((offset + i * 7) % STREAK_CYCLE_PX) - STREAK_CYCLE_PX / 2
                pygame.draw.line(overlay, color, (x, y), (x - STREAK_SLANT_PX, y + STREAK_LENGTH_PX), 1)
            drawn += 1

        if drawn:
            context.surface.blit(overlay, (0, 0))
