# terrain_viewer/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module contains the color constants and functions for converting the
per-cell fields delivered by the backend (altitude, moisture, temperature,
humidity, wind, grass, pressure, clouds) into RGB colors.

It is designed to be a pure, stateless utility with no dependencies on Pygame,
allowing it to be used by both the main renderer and the minimap, and by any
other consumer that needs one cell's color without drawing a frame.

Every function takes a TerrainCell (and, where the mapping depends on it, the
VisualizationSettings) and returns an (R, G, B) tuple of ints in [0, 255].
Inputs are clamped to their documented domains before use, so the functions
never fail on out-of-range or absent values.
================================================================================
"""
import math

import numpy as np

from . import config as DEFAULTS
from .schema import (
    CELL_TYPE_EARTH,
    CELL_TYPE_MUD,
    CELL_TYPE_RIVER,
    CELL_TYPE_SPRING,
    TerrainCell,
)

# --- Default (Terrain) Palette ---
COLOR_SPRING = (0, 0, 255)
COLOR_RIVER_DEEP = (0, 64, 192)
COLOR_RIVER_SHALLOW = (0, 128, 255)
COLOR_FLAT_LAND = (200, 200, 200)

COLOR_MAP_SOIL = {
    # base color, darkening scale per channel, darkest allowed value
    "mud": ((120, 60, 0), (80, 40, 0), (40, 20, 0)),
    "earth": ((180, 120, 60), (185, 140, 83), (25, 10, 7)),
}

# --- Heightmap Palette ---
COLOR_MAP_HEIGHTMAP = {
    "low": (0, 0, 255),
    "mid": (255, 255, 255),
    "high": (102, 51, 0),
}

# --- Humidity Palette ---
COLOR_MAP_HUMIDITY = {
    "dry": (245, 222, 179),
    "moist": (173, 216, 230),
    "wet": (0, 0, 139),
}

# --- Wind Palette ---
COLOR_MAP_WIND = {
    "calm": (230, 230, 230),
    "breeze": (173, 216, 230),
    "strong": (65, 105, 225),
    "gale": (128, 0, 128),
}

# --- Grass Palette ---
COLOR_GRASS_SOIL = (139, 90, 43)
COLOR_MAP_GRASS = {
    "cool_season": (46, 139, 87),
    "warm_season": (107, 142, 35),
    "drought_resistant": (85, 107, 47),
    "wetland": (0, 128, 0),
    "default": (34, 139, 34),
}

# --- Cloud Palette ---
COLOR_CLEAR_SKY = (30, 60, 120)
COLOR_FULL_CLOUD = (255, 255, 255)


def _clip(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _rgb(r: float, g: float, b: float) -> tuple:
    """Floors each channel and clamps it into the displayable [0, 255] range."""
    return tuple(int(_clip(math.floor(c), 0, 255)) for c in (r, g, b))


def _mix(color1: tuple, color2: tuple, t: float) -> tuple:
    """Interpolates without clipping t; only the resulting channels are clamped."""
    return _rgb(*(a + (b - a) * t for a, b in zip(color1, color2)))


def _lerp_color(color1: tuple, color2: tuple, t: float) -> tuple:
    """Linearly interpolates between two RGB colors."""
    return _mix(color1, color2, _clip(t))


def normalized_altitude(cell: TerrainCell) -> float:
    """Maps altitude from the fixed -200..2200 range onto [0, 1]."""
    return _clip((cell.altitude + DEFAULTS.ALTITUDE_OFFSET) / DEFAULTS.ALTITUDE_RANGE)


def to_css(color: tuple) -> str:
    """Formats an RGB tuple as a CSS-style 'rgb(r, g, b)' string."""
    return f"rgb({color[0]}, {color[1]}, {color[2]})"


# --- Per-Cell Color Functions ---
def terrain_color(cell: TerrainCell, settings) -> tuple:
    """
    The default view: water features, moist soils, then a grayscale
    elevation ramp (white = low, black = high), then flat gray.
    """
    if cell.type == CELL_TYPE_SPRING and settings.show_rivers:
        return COLOR_SPRING

    if cell.type == CELL_TYPE_RIVER and settings.show_rivers:
        if cell.water_height >= DEFAULTS.DEEP_RIVER_WATER_HEIGHT:
            return COLOR_RIVER_DEEP
        return COLOR_RIVER_SHALLOW

    if cell.type in (CELL_TYPE_MUD, CELL_TYPE_EARTH) and settings.show_moisture:
        base, scale, floor = COLOR_MAP_SOIL[cell.type]
        darken = normalized_altitude(cell) * settings.exaggerate_height
        return _rgb(*(max(lo, math.floor(c - darken * s)) for c, s, lo in zip(base, scale, floor)))

    if settings.show_elevation:
        adjusted = min(1.0, normalized_altitude(cell) * settings.exaggerate_height)
        value = math.floor(255 - adjusted * 255)
        return _rgb(value, value, value)

    return COLOR_FLAT_LAND


def heightmap_color(cell: TerrainCell, settings) -> tuple:
    """Blue-to-white below the midpoint, white-to-brown above it."""
    adjusted = min(1.0, normalized_altitude(cell) * settings.exaggerate_height)

    if adjusted < 0.5:
        factor = adjusted * 2
        return _rgb(255 * factor, 255 * factor, 255)

    factor = (adjusted - 0.5) * 2
    mid, high = COLOR_MAP_HEIGHTMAP["mid"], COLOR_MAP_HEIGHTMAP["high"]
    return _rgb(*(m - (m - h) * factor for m, h in zip(mid, high)))


def moisture_color(cell: TerrainCell, settings=None) -> tuple:
    """Blue stays at full intensity; red and green fade out as moisture rises."""
    moisture = _clip(cell.moisture)
    fade = 255 * (1 - moisture)
    return _rgb(fade, fade, 255)


def temperature_color(cell: TerrainCell, settings=None) -> tuple:
    """Blue -> cyan -> green -> yellow -> red over -20..30 °C."""
    span = DEFAULTS.MAX_TEMPERATURE_C - DEFAULTS.MIN_TEMPERATURE_C
    t = _clip((cell.temperature - DEFAULTS.MIN_TEMPERATURE_C) / span)

    if t < 0.25:
        return _rgb(0, 255 * (t * 4), 255)
    if t < 0.5:
        return _rgb(0, 255, 255 * (1 - (t - 0.25) * 4))
    if t < 0.75:
        return _rgb(255 * ((t - 0.5) * 4), 255, 0)
    return _rgb(255, 255 * (1 - (t - 0.75) * 4), 0)


def humidity_color(cell: TerrainCell, settings=None) -> tuple:
    """Tan -> light blue -> dark blue over air humidity [0, 1]."""
    humidity = _clip(cell.air_humidity)
    if humidity < 0.5:
        return _lerp_color(COLOR_MAP_HUMIDITY["dry"], COLOR_MAP_HUMIDITY["moist"], humidity * 2)
    return _lerp_color(COLOR_MAP_HUMIDITY["moist"], COLOR_MAP_HUMIDITY["wet"], (humidity - 0.5) * 2)


def normalized_wind_speed(cell: TerrainCell) -> float:
    return _clip((cell.wind_speed or 0.0) / DEFAULTS.MAX_WIND_SPEED)


def wind_color(cell: TerrainCell, settings=None) -> tuple:
    """
    Pale lavender -> slate blue -> purple over wind speed capped at 15.

    The last segment spans 0.66..1.0 scaled by 3, so at the cap it overshoots
    to 1.02; the overshoot is kept and the channels are clamped instead.
    """
    speed = normalized_wind_speed(cell)
    if speed < 0.33:
        return _lerp_color(COLOR_MAP_WIND["calm"], COLOR_MAP_WIND["breeze"], speed * 3)
    if speed < 0.66:
        return _lerp_color(COLOR_MAP_WIND["breeze"], COLOR_MAP_WIND["strong"], (speed - 0.33) * 3)
    return _mix(COLOR_MAP_WIND["strong"], COLOR_MAP_WIND["gale"], (speed - 0.66) * 3)


def grass_color(cell: TerrainCell, settings=None) -> tuple:
    """
    Bare soil below 5% density (lighter when moist), blending into the
    grass type's green up to 30%, saturating up to 70%, then darkening.
    """
    density = _clip(cell.grass_density or 0.0)

    if density < DEFAULTS.GRASS_BARE_DENSITY:
        brown = 139 + math.floor(_clip(cell.moisture) * 50)
        return _rgb(brown, brown * 0.7, brown * 0.4)

    green = COLOR_MAP_GRASS.get(cell.grass_type, COLOR_MAP_GRASS["default"])

    if density < DEFAULTS.GRASS_SPARSE_DENSITY:
        return _lerp_color(COLOR_GRASS_SOIL, green, density / DEFAULTS.GRASS_SPARSE_DENSITY)

    if density < DEFAULTS.GRASS_FULL_DENSITY:
        factor = (density - DEFAULTS.GRASS_SPARSE_DENSITY) / (DEFAULTS.GRASS_FULL_DENSITY - DEFAULTS.GRASS_SPARSE_DENSITY)
        return _rgb(green[0] * (1 - factor * 0.3), green[1], green[2] * (1 - factor * 0.3))

    factor = (density - DEFAULTS.GRASS_FULL_DENSITY) / (1.0 - DEFAULTS.GRASS_FULL_DENSITY)
    return _rgb(
        green[0] * (0.7 - factor * 0.4),
        green[1] * (1 - factor * 0.2),
        green[2] * (0.7 - factor * 0.4),
    )


def pressure_color(cell: TerrainCell, settings=None) -> tuple:
    """Blue -> green -> orange over 980..1040 hPa (1013 when absent)."""
    pressure = cell.atmospheric_pressure
    if pressure is None:
        pressure = DEFAULTS.DEFAULT_PRESSURE_HPA
    span = DEFAULTS.MAX_PRESSURE_HPA - DEFAULTS.MIN_PRESSURE_HPA
    p = _clip((pressure - DEFAULTS.MIN_PRESSURE_HPA) / span)

    if p < 0.5:
        factor = p * 2
        return _rgb(factor * 100, 150 + factor * 105, 255 * (1 - factor))

    factor = (p - 0.5) * 2
    return _rgb(100 + factor * 155, 255 * (1 - factor), 0)


def cloud_color(cell: TerrainCell, settings=None) -> tuple:
    """Dark sky below 1% cloud cover, then dark blue to white by density."""
    density = _clip(cell.cloud_density or 0.0)
    if density < DEFAULTS.CLEAR_SKY_CLOUD_DENSITY:
        return COLOR_CLEAR_SKY
    return _lerp_color(COLOR_CLEAR_SKY, COLOR_FULL_CLOUD, density)


# --- Array Generation ---
def get_color_array(grid, color_fn, settings) -> np.ndarray:
    """
    Converts a row-major cell grid into a (width, height, 3) uint8 array, the
    layout pygame.surfarray expects. Missing cells stay black.
    """
    height = len(grid)
    width = max((len(row) for row in grid), default=0)
    colors = np.zeros((height, width, 3), dtype=np.uint8)
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell is not None:
                colors[y, x] = color_fn(cell, settings)
    return np.transpose(colors, (1, 0, 2))
