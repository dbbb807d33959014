# terrain_viewer/layers/__init__.py

# Color-mode layers and overlay layers composed by the renderer.

from .base import ColorLayer, ColorModeLayer, FrameContext, OverlayLayer
from .clouds import CloudLayer
from .color_modes import create_color_layers
from .contours import ContourLayer
from .precipitation import PrecipitationLayer
from .rivers import RiverLayer
from .selection import SelectionLayer
from .wind import WindLayer


def create_overlay_layers() -> list:
    """The built-in overlays in their fixed draw order. Selection must stay last."""
    return [RiverLayer(), ContourLayer(), CloudLayer(), PrecipitationLayer(), SelectionLayer()]


__all__ = [
    "ColorLayer", "ColorModeLayer", "FrameContext", "OverlayLayer",
    "CloudLayer", "ContourLayer", "PrecipitationLayer", "RiverLayer", "SelectionLayer", "WindLayer",
    "create_color_layers", "create_overlay_layers",
]
