# terrain_viewer/__init__.py

# This file makes the 'terrain_viewer' directory a Python package.
# It also defines the public API of the rendering engine.

from .client import TerrainApiClient, TerrainApiError, TerrainBackend
from .geometry import FrameGeometry, wrap_origin, wrap_position
from .minimap import MinimapRenderer
from .renderer import TerrainRenderer
from .schema import MinimapGrid, TerrainCell, ViewportWindow
from .settings import CellInfo, Selection, VisualizationSettings
from .viewport import ViewportManager

__all__ = [
    "TerrainApiClient", "TerrainApiError", "TerrainBackend",
    "FrameGeometry", "wrap_origin", "wrap_position",
    "MinimapRenderer", "TerrainRenderer",
    "MinimapGrid", "TerrainCell", "ViewportWindow",
    "CellInfo", "Selection", "VisualizationSettings",
    "ViewportManager",
]
