# terrain_viewer/layers/selection.py

import pygame

from ..settings import Selection
from .base import FrameContext

SELECTED_COLOR = (255, 215, 0)
SELECTED_WIDTH = 3
HOVERED_COLOR = (255, 255, 255)
HOVERED_WIDTH = 2


class SelectionLayer:
    """
    Outlines the selected cell (gold) and the hovered cell (white).

    The layer holds no state: the hovered/selected pair is read from the frame
    context on every call.
    """

    id = "selection"

    def should_render(self, settings, selection: Selection = None) -> bool:
        return bool(selection)

    def render(self, context: FrameContext):
        geometry = context.geometry
        if geometry.is_empty:
            return

        selection = context.selection
        for info, color, width in ((selection.selected, SELECTED_COLOR, SELECTED_WIDTH),
                                   (selection.hovered, HOVERED_COLOR, HOVERED_WIDTH)):
            if info is None:
                continue
            vx, vy = self._wrap(info.x, context), self._wrap(info.y, context)
            if 0 <= vx < geometry.viewport_size and 0 <= vy < geometry.viewport_size:
                pygame.draw.rect(context.surface, color, geometry.cell_rect(vx, vy), width)

    @staticmethod
    def _wrap(value: int, context: FrameContext) -> int:
        size = context.world_size or context.geometry.viewport_size
        return value % size if size else value
