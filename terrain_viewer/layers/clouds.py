# terrain_viewer/layers/clouds.py

import pygame

from .. import config as DEFAULTS
from .base import FrameContext


def cloud_alpha(cloud_density: float) -> int:
    """Opacity (0-255) of the cloud wash for a cell, capped at 70%."""
    return int(min(DEFAULTS.CLOUD_OVERLAY_MAX_ALPHA, cloud_density * 0.8) * 255)


class CloudLayer:
    """A translucent white wash over every cell with at least 10% cloud cover."""

    id = "clouds"

    def should_render(self, settings, selection=None) -> bool:
        return settings.show_clouds

    def render(self, context: FrameContext):
        geometry = context.geometry
        if geometry.is_empty:
            return

        overlay = context.translucent_surface()
        drawn = 0
        for vx, vy, cell in context.iter_cells():
            density = cell.cloud_density or 0.0
            if density < DEFAULTS.CLOUD_OVERLAY_MIN_DENSITY:
                continue
            pygame.draw.rect(overlay, (255, 255, 255, cloud_alpha(density)), geometry.fill_rect(vx, vy))
            drawn += 1

        if drawn:
            context.surface.blit(overlay, (0, 0))
