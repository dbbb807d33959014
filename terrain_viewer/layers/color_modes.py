# terrain_viewer/layers/color_modes.py

"""
================================================================================
COLOR MODE REGISTRY
================================================================================
Builds the nine mutually exclusive color layers, one per color mode. Each is a
ColorModeLayer wrapping a pure function from color_maps; only the wind mode
adds a decoration pass (see wind.py).
================================================================================
"""
from .. import color_maps
from ..settings import (
    COLOR_MODE_CLOUD,
    COLOR_MODE_DEFAULT,
    COLOR_MODE_GRASS,
    COLOR_MODE_HEIGHTMAP,
    COLOR_MODE_HUMIDITY,
    COLOR_MODE_MOISTURE,
    COLOR_MODE_PRESSURE,
    COLOR_MODE_TEMPERATURE,
)
from .base import ColorModeLayer
from .wind import WindLayer

COLOR_FUNCTIONS = {
    COLOR_MODE_DEFAULT: color_maps.terrain_color,
    COLOR_MODE_HEIGHTMAP: color_maps.heightmap_color,
    COLOR_MODE_MOISTURE: color_maps.moisture_color,
    COLOR_MODE_TEMPERATURE: color_maps.temperature_color,
    COLOR_MODE_HUMIDITY: color_maps.humidity_color,
    COLOR_MODE_GRASS: color_maps.grass_color,
    COLOR_MODE_PRESSURE: color_maps.pressure_color,
    COLOR_MODE_CLOUD: color_maps.cloud_color,
}


def create_color_layers() -> list:
    """Returns the built-in color layers in registration order, default first."""
    layers = [ColorModeLayer(mode, fn) for mode, fn in COLOR_FUNCTIONS.items()]
    layers.insert(5, WindLayer())
    return layers
