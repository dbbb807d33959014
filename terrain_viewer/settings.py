# terrain_viewer/settings.py

"""
================================================================================
VISUALIZATION SETTINGS
================================================================================
Pure, per-frame configuration for the renderer plus the small records that
describe pointer selection.

Data Contract:
---------------
- VisualizationSettings is frozen. A settings change produces a new instance
  via replace(); nothing mutates an instance in place.
- Numeric tunables are clamped to their documented ranges on construction so
  a renderer never sees a zero or negative zoom level.
- CellInfo / Selection carry the hovered and selected cells into a frame as
  an explicit argument rather than as state held by a layer.
================================================================================
"""
import dataclasses
from dataclasses import dataclass
from typing import Optional

from . import config as DEFAULTS
from .schema import TerrainCell

# --- Color Modes (Rule 1) ---
COLOR_MODE_DEFAULT = "default"
COLOR_MODE_HEIGHTMAP = "heightmap"
COLOR_MODE_MOISTURE = "moisture"
COLOR_MODE_TEMPERATURE = "temperature"
COLOR_MODE_HUMIDITY = "humidity"
COLOR_MODE_WIND = "wind"
COLOR_MODE_GRASS = "grass"
COLOR_MODE_PRESSURE = "pressure"
COLOR_MODE_CLOUD = "cloud"

COLOR_MODES = (
    COLOR_MODE_DEFAULT,
    COLOR_MODE_HEIGHTMAP,
    COLOR_MODE_MOISTURE,
    COLOR_MODE_TEMPERATURE,
    COLOR_MODE_HUMIDITY,
    COLOR_MODE_WIND,
    COLOR_MODE_GRASS,
    COLOR_MODE_PRESSURE,
    COLOR_MODE_CLOUD,
)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class VisualizationSettings:
    show_rivers: bool = True
    show_moisture: bool = True
    show_elevation: bool = True
    show_clouds: bool = False
    show_precipitation: bool = False
    contour_lines: bool = False
    wireframe: bool = False
    exaggerate_height: float = 1.0
    contour_interval: float = DEFAULTS.DEFAULT_CONTOUR_INTERVAL
    zoom_level: float = DEFAULTS.DEFAULT_ZOOM
    color_mode: str = COLOR_MODE_DEFAULT
    # Pixel offset applied by both the forward transform and pointer
    # inversion. The fixed-viewport application leaves it at (0, 0).
    pan_offset: tuple = (0.0, 0.0)

    def __post_init__(self):
        zoom = self.zoom_level or DEFAULTS.MIN_ZOOM
        object.__setattr__(self, "zoom_level", _clamp(zoom, DEFAULTS.MIN_ZOOM, DEFAULTS.MAX_ZOOM))
        object.__setattr__(self, "exaggerate_height", _clamp(
            self.exaggerate_height, DEFAULTS.MIN_HEIGHT_EXAGGERATION, DEFAULTS.MAX_HEIGHT_EXAGGERATION))
        object.__setattr__(self, "contour_interval", _clamp(
            self.contour_interval, DEFAULTS.MIN_CONTOUR_INTERVAL, DEFAULTS.MAX_CONTOUR_INTERVAL))
        object.__setattr__(self, "pan_offset", tuple(self.pan_offset))

    def replace(self, **changes) -> "VisualizationSettings":
        """Returns a copy of these settings with the given fields changed."""
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class CellInfo:
    """A cell resolved from a pointer event, in viewport-local coordinates."""
    cell: TerrainCell
    x: int
    y: int
    screen_x: float = 0.0
    screen_y: float = 0.0

    def same_cell(self, other: Optional["CellInfo"]) -> bool:
        return other is not None and other.x == self.x and other.y == self.y


@dataclass(frozen=True)
class Selection:
    hovered: Optional[CellInfo] = None
    selected: Optional[CellInfo] = None

    def __bool__(self) -> bool:
        return self.hovered is not None or self.selected is not None


NO_SELECTION = Selection()
