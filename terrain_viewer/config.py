# terrain_viewer/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the terrain
viewer. These values are used if they are not explicitly provided by the
user's configuration file.

DO NOT MODIFY THIS FILE FOR A SPECIFIC DEPLOYMENT.
Instead, pass a configuration file to the application with --config.
================================================================================
"""

# --- Viewport Geometry ---
# The backend always serves a square window of this many cells per side.
VIEWPORT_SIZE = 100
# Arrow keys move the viewport by this many world cells.
VIEWPORT_STEP_CELLS = 10

# --- Zoom ---
# zoom_level means "VIEWPORT_SIZE / zoom_level cells are visible on screen".
MIN_ZOOM = 1.0
MAX_ZOOM = 5.0
DEFAULT_ZOOM = VIEWPORT_SIZE / 45  # Show 45x45 cells initially

# --- Tunable Ranges ---
MIN_HEIGHT_EXAGGERATION = 0.5
MAX_HEIGHT_EXAGGERATION = 3.0
MIN_CONTOUR_INTERVAL = 25
MAX_CONTOUR_INTERVAL = 250
DEFAULT_CONTOUR_INTERVAL = 100

# --- Minimap ---
MINIMAP_SIZE = 150
# The resolution requested from the backend for the minimap grid.
MINIMAP_RESOLUTION = 150
# A rendered minimap bitmap is reused until it is this old (seconds).
MINIMAP_STALENESS_S = 10 * 60
# How often the minimap grid itself is re-fetched (seconds).
MINIMAP_FETCH_INTERVAL_S = 5 * 60
MINIMAP_INDICATOR_COLOR = (255, 215, 0)
MINIMAP_INDICATOR_WIDTH = 2

# --- Refresh Cadence ---
# Used until the backend reports its own update interval.
DEFAULT_VIEWPORT_REFRESH_S = 30
MIN_VIEWPORT_REFRESH_S = 1

# --- Backend ---
DEFAULT_API_URL = "http://localhost:5000"
API_URL_ENV_VAR = "TERRAIN_API_URL"
REQUEST_TIMEOUT_S = 10.0

# --- Elevation Normalization ---
# Altitudes are normalized over a fixed range of -200..+2200.
ALTITUDE_OFFSET = 200.0
ALTITUDE_RANGE = 2400.0

# --- Climate Ranges (Rule 8) ---
MIN_TEMPERATURE_C = -20.0
MAX_TEMPERATURE_C = 30.0
MIN_PRESSURE_HPA = 980.0
MAX_PRESSURE_HPA = 1040.0
DEFAULT_PRESSURE_HPA = 1013.0
MAX_WIND_SPEED = 15.0

# --- Thresholds ---
DEEP_RIVER_WATER_HEIGHT = 2.0
CLEAR_SKY_CLOUD_DENSITY = 0.01
CLOUD_OVERLAY_MIN_DENSITY = 0.1
CLOUD_OVERLAY_MAX_ALPHA = 0.7
PRECIPITATION_MIN_RATE = 0.05
WIND_ARROW_MIN_CELL_PX = 8
WIND_ARROW_MIN_SPEED = 0.1
# Wireframe, rivers and contours are skipped below this cell size (pixels).
DETAIL_MIN_CELL_PX = 0.5

# Grass density bands: bare soil, sparse, full, dense.
GRASS_BARE_DENSITY = 0.05
GRASS_SPARSE_DENSITY = 0.3
GRASS_FULL_DENSITY = 0.7

# --- Frame Loop ---
CLOCK_TICK_RATE = 60
CANVAS_BACKGROUND = (10, 10, 20)
