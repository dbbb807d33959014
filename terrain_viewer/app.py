# terrain_viewer/app.py

"""
================================================================================
TERRAIN VIEWER APPLICATION
================================================================================
The interactive pygame front end: one window holding the main terrain canvas,
the minimap in its bottom-right corner and a pygame_gui control panel.

Everything runs on a single asyncio event loop. The frame loop is a
coroutine; the two backend fetches are tasks on the same loop, so state is
only ever touched by one event at a time.
================================================================================
"""
import asyncio
import dataclasses
import json
import logging
import logging.config
import os
import sys
import time
from importlib import resources
from typing import Optional

import pygame
import pygame_gui

from . import config as DEFAULTS
from .client import TerrainApiClient, TerrainApiError, resolve_api_url
from .minimap import MinimapRenderer
from .renderer import TerrainRenderer
from .schema import MinimapGrid, ViewportWindow
from .settings import COLOR_MODES, CellInfo, Selection, VisualizationSettings
from .viewport import ViewportManager

# --- UI Constants (Rule 1) ---
UI_PANEL_WIDTH = 260
UI_ELEMENT_HEIGHT = 25
UI_SLIDER_HEIGHT = 30
UI_PADDING = 10
MINIMAP_MARGIN = 16
TOOLTIP_OFFSET = 10

# Keys that toggle a boolean setting.
TOGGLE_KEYS = {
    pygame.K_r: "show_rivers",
    pygame.K_c: "contour_lines",
    pygame.K_l: "show_clouds",
    pygame.K_p: "show_precipitation",
    pygame.K_g: "wireframe",
    pygame.K_m: "show_moisture",
    pygame.K_e: "show_elevation",
}

# Numeric settings exposed as sliders: field -> (label, low, high).
SLIDER_SETTINGS = {
    "zoom_level": ("Zoom", DEFAULTS.MIN_ZOOM, DEFAULTS.MAX_ZOOM),
    "exaggerate_height": ("Height Exaggeration", DEFAULTS.MIN_HEIGHT_EXAGGERATION, DEFAULTS.MAX_HEIGHT_EXAGGERATION),
    "contour_interval": ("Contour Interval", DEFAULTS.MIN_CONTOUR_INTERVAL, DEFAULTS.MAX_CONTOUR_INTERVAL),
}

ARROW_KEYS = {
    pygame.K_UP: (0, -1),
    pygame.K_DOWN: (0, 1),
    pygame.K_LEFT: (-1, 0),
    pygame.K_RIGHT: (1, 0),
}


def load_json_resource(path: Optional[str], default_name: str) -> dict:
    """Loads a JSON file from disk, or the packaged default when path is None."""
    if path:
        with open(path, "r") as f:
            return json.load(f)
    return json.loads(resources.files(__package__).joinpath(default_name).read_text())


def setup_logging(log_config_path: Optional[str] = None, log_dir: str = "logs"):
    """Initializes the logging system from a dictConfig JSON file."""
    log_config = load_json_resource(log_config_path, "logging_config.json")

    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    # Tell the logger where to create its file, overriding the JSON path.
    file_handler = log_config.get("handlers", {}).get("file")
    if file_handler is not None:
        file_handler["filename"] = os.path.join(log_dir, "terrain_viewer.log")

    logging.config.dictConfig(log_config)


def format_cell_tooltip(info: CellInfo) -> str:
    """Builds the tooltip HTML describing a hovered cell."""
    cell = info.cell
    lines = [
        f"<b>Position:</b> ({info.x}, {info.y})",
        f"<b>Type:</b> {cell.type}",
    ]
    if cell.river_name:
        lines.append(f"<b>River:</b> {cell.river_name}")
    pressure = f"{cell.atmospheric_pressure:.0f}" if cell.atmospheric_pressure is not None else "N/A"
    lines += [
        f"<b>Altitude:</b> {cell.altitude:.2f}",
        f"<b>Terrain Height:</b> {cell.terrain_height:.2f}",
        f"<b>Water Height:</b> {cell.water_height:.2f}",
        f"<b>Base Moisture:</b> {cell.base_moisture:.2f}",
        f"<b>Moisture:</b> {cell.moisture:.2f}",
        f"<b>Temperature:</b> {cell.temperature:.1f}°C",
        f"<b>Air Humidity:</b> {(cell.air_humidity or 0) * 100:.1f}%",
        f"<b>Pressure:</b> {pressure} hPa",
    ]
    return "<br>".join(lines)


def toggle_selection(current: Optional[CellInfo], clicked: Optional[CellInfo]) -> Optional[CellInfo]:
    """Clicking the selected cell again clears the selection; any other cell selects it."""
    if clicked is None:
        return current
    if clicked.same_cell(current):
        return None
    return clicked


def toggle_setting(settings: VisualizationSettings, name: str) -> VisualizationSettings:
    return settings.replace(**{name: not getattr(settings, name)})


def apply_slider_value(settings: VisualizationSettings, name: str, value: float) -> VisualizationSettings:
    """Applies a slider position; the contour interval moves in whole altitude units."""
    if name == "contour_interval":
        value = round(value)
    return settings.replace(**{name: value})


def settings_from_config(config: dict, logger: Optional[logging.Logger] = None) -> VisualizationSettings:
    """Builds settings from the "visualization" config section, skipping unknown keys."""
    known = {field.name for field in dataclasses.fields(VisualizationSettings)}
    section = config.get("visualization") or {}
    unknown = sorted(set(section) - known)
    if unknown:
        (logger or logging.getLogger(__name__)).warning(f"Ignoring unknown visualization settings: {unknown}")
    return VisualizationSettings(**{key: value for key, value in section.items() if key in known})


def refresh_interval_from_config(data: dict) -> Optional[int]:
    """Converts the backend's updateInterval (milliseconds) to whole seconds, or None if unusable."""
    interval_ms = data.get("updateInterval") if isinstance(data, dict) else None
    if isinstance(interval_ms, bool) or not isinstance(interval_ms, (int, float)) or interval_ms <= 0:
        return None
    return max(DEFAULTS.MIN_VIEWPORT_REFRESH_S, round(interval_ms / 1000))


class Application:
    """The main application class for the terrain viewer."""

    def __init__(self, config: dict, api_url: Optional[str] = None):
        self.logger = logging.getLogger(__name__)
        self.logger.info("Application starting.")
        self.config = config

        display_config = self.config.get("display", {})
        self.canvas_size = display_config.get("canvas_size", 800)
        self.tick_rate = display_config.get("clock_tick_rate", DEFAULTS.CLOCK_TICK_RATE)

        # --- State ---
        self.settings = settings_from_config(self.config, self.logger)
        self.window: Optional[ViewportWindow] = None
        self.minimap_grid: Optional[MinimapGrid] = None
        self.hovered: Optional[CellInfo] = None
        self.selected: Optional[CellInfo] = None
        self.is_running = True

        refresh_config = self.config.get("refresh", {})
        self.viewport_refresh_s = refresh_config.get("viewport_interval_s", DEFAULTS.DEFAULT_VIEWPORT_REFRESH_S)
        self.minimap_fetch_s = refresh_config.get("minimap_interval_s", DEFAULTS.MINIMAP_FETCH_INTERVAL_S)
        self._last_viewport_refresh = 0.0
        self._last_minimap_fetch = 0.0
        self._tasks = set()
        self._tooltip_text = ""

        # --- Dependency Injection (Rule 7, DIP) ---
        self.client = TerrainApiClient(resolve_api_url(api_url, self.config), logger=self.logger)
        self.viewport = ViewportManager(self.client, world_size=self.config.get("world_size", 0), logger=self.logger)
        self.renderer = TerrainRenderer(logger=self.logger)
        self.minimap = MinimapRenderer(logger=self.logger)

        self._setup_pygame()
        self._setup_ui()

    def _setup_pygame(self):
        """Initializes Pygame, the display window and the drawing surfaces."""
        pygame.init()
        self.screen_width = self.canvas_size + UI_PANEL_WIDTH
        self.screen_height = self.canvas_size
        self.logger.info(f"Initializing display in Windowed mode ({self.screen_width}x{self.screen_height}).")
        self.screen = pygame.display.set_mode((self.screen_width, self.screen_height))
        pygame.display.set_caption("Terrain Viewer")
        self.clock = pygame.time.Clock()

        self.canvas_rect = pygame.Rect(0, 0, self.canvas_size, self.canvas_size)
        self.canvas = pygame.Surface(self.canvas_rect.size)
        self.minimap_rect = pygame.Rect(
            self.canvas_size - DEFAULTS.MINIMAP_SIZE - MINIMAP_MARGIN,
            self.canvas_size - DEFAULTS.MINIMAP_SIZE - MINIMAP_MARGIN,
            DEFAULTS.MINIMAP_SIZE, DEFAULTS.MINIMAP_SIZE,
        )
        self.minimap_surface = pygame.Surface(self.minimap_rect.size)
        self.font = pygame.font.Font(None, 28)
        self.logger.info("Pygame initialized successfully.")

    def _setup_ui(self):
        """Creates the pygame_gui control panel and the hover tooltip."""
        self.ui_manager = pygame_gui.UIManager((self.screen_width, self.screen_height))
        self.ui_panel = pygame_gui.elements.UIPanel(
            relative_rect=pygame.Rect(self.canvas_size, 0, UI_PANEL_WIDTH, self.screen_height),
            manager=self.ui_manager,
            starting_height=1,
        )

        current_y = UI_PADDING
        element_width = UI_PANEL_WIDTH - (3 * UI_PADDING)

        pygame_gui.elements.UILabel(
            relative_rect=pygame.Rect(UI_PADDING, current_y, element_width, UI_ELEMENT_HEIGHT),
            text="Color Mode",
            manager=self.ui_manager,
            container=self.ui_panel,
        )
        current_y += UI_ELEMENT_HEIGHT
        self.color_mode_menu = pygame_gui.elements.UIDropDownMenu(
            options_list=list(COLOR_MODES),
            starting_option=self.settings.color_mode if self.settings.color_mode in COLOR_MODES else COLOR_MODES[0],
            relative_rect=pygame.Rect(UI_PADDING, current_y, element_width, UI_ELEMENT_HEIGHT),
            manager=self.ui_manager,
            container=self.ui_panel,
        )
        current_y += UI_ELEMENT_HEIGHT + UI_PADDING

        # --- Sliders (one per numeric setting) ---
        self.sliders = {}
        for name, (label, low, high) in SLIDER_SETTINGS.items():
            pygame_gui.elements.UILabel(
                relative_rect=pygame.Rect(UI_PADDING, current_y, element_width, UI_ELEMENT_HEIGHT),
                text=label,
                manager=self.ui_manager,
                container=self.ui_panel,
            )
            current_y += UI_ELEMENT_HEIGHT
            slider = pygame_gui.elements.UIHorizontalSlider(
                relative_rect=pygame.Rect(UI_PADDING, current_y, element_width, UI_SLIDER_HEIGHT),
                start_value=getattr(self.settings, name),
                value_range=(low, high),
                manager=self.ui_manager,
                container=self.ui_panel,
            )
            self.sliders[slider] = name
            current_y += UI_SLIDER_HEIGHT + UI_PADDING

        self.tooltip = pygame_gui.elements.UITextBox(
            relative_rect=pygame.Rect(0, 0, 250, -1),
            html_text="",
            manager=self.ui_manager,
            visible=False,
        )

    # --- Background Work ---
    def _spawn(self, coro):
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def request_viewport(self):
        self._spawn(self._load_viewport())

    def request_minimap(self):
        self._spawn(self._load_minimap())

    async def _load_viewport(self):
        try:
            window = await self.viewport.get_viewport_data()
        except TerrainApiError as e:
            self.logger.error(f"Failed to load viewport data: {e}")
            return
        if self.viewport.is_current(window):
            self.window = window

    async def _load_minimap(self):
        try:
            self.minimap_grid = await self.viewport.fetch_minimap(DEFAULTS.MINIMAP_RESOLUTION)
        except TerrainApiError as e:
            self.logger.error(f"Failed to fetch minimap data: {e}")

    async def _load_refresh_interval(self):
        try:
            data = await self.client.fetch_config()
        except TerrainApiError as e:
            self.logger.error(f"Failed to load config: {e}")
            return
        interval_s = refresh_interval_from_config(data)
        if interval_s is None:
            self.logger.warning(f"Backend reported an unusable updateInterval: {data!r}")
            return
        self.viewport_refresh_s = interval_s
        self.logger.info(f"Viewport refresh interval set to {self.viewport_refresh_s}s.")

    def move_viewport(self, dx: int, dy: int):
        self.viewport.move(dx, dy)
        self.request_viewport()

    # --- Main Loop ---
    def run(self):
        """Runs the application until the window is closed."""
        try:
            asyncio.run(self._main_loop())
        except Exception:
            self.logger.critical("An unhandled exception occurred!", exc_info=True)
        finally:
            self.client.close()
            self.logger.info("Exiting application.")
            pygame.quit()

    async def _main_loop(self):
        self.logger.info("Entering main loop.")
        self._spawn(self._load_refresh_interval())
        now = time.monotonic()
        self._last_viewport_refresh = now
        self._last_minimap_fetch = now
        self.request_viewport()
        self.request_minimap()

        while self.is_running:
            time_delta = self.clock.tick(self.tick_rate) / 1000.0
            self._handle_events()
            self._update_timers()
            self._update_tooltip()
            self._draw()
            self.ui_manager.update(time_delta)
            self.ui_manager.draw_ui(self.screen)
            pygame.display.flip()
            # Yield so fetch completions are applied between frames.
            await asyncio.sleep(0)

        for task in list(self._tasks):
            task.cancel()

    def _update_timers(self):
        now = time.monotonic()
        if now - self._last_viewport_refresh >= self.viewport_refresh_s:
            self._last_viewport_refresh = now
            self.viewport.invalidate_cache()
            self.request_viewport()
        if now - self._last_minimap_fetch >= self.minimap_fetch_s:
            self._last_minimap_fetch = now
            self.request_minimap()

    def _handle_events(self):
        """Processes user input and other events."""
        for event in pygame.event.get():
            # Pass events to the UI Manager first
            self.ui_manager.process_events(event)

            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)
            elif event.type == pygame.MOUSEMOTION:
                self._handle_pointer_move(event.pos)
            elif event.type == pygame.WINDOWLEAVE:
                self.hovered = None
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(event.pos)
            elif event.type == pygame_gui.UI_DROP_DOWN_MENU_CHANGED and event.ui_element == self.color_mode_menu:
                self.settings = self.settings.replace(color_mode=event.text)
                self.logger.info(f"Event: Color mode switched to '{event.text}'")
            elif event.type == pygame_gui.UI_HORIZONTAL_SLIDER_MOVED and event.ui_element in self.sliders:
                self.settings = apply_slider_value(self.settings, self.sliders[event.ui_element], event.value)

    def _handle_key(self, key: int):
        if key == pygame.K_ESCAPE:
            self.logger.info("Event: ESC key pressed. Exiting.")
            self.is_running = False
        elif key in ARROW_KEYS:
            step_x, step_y = ARROW_KEYS[key]
            self.move_viewport(step_x * DEFAULTS.VIEWPORT_STEP_CELLS, step_y * DEFAULTS.VIEWPORT_STEP_CELLS)
        elif key in TOGGLE_KEYS:
            name = TOGGLE_KEYS[key]
            self.settings = toggle_setting(self.settings, name)
            self.logger.info(f"Event: {name} set to {getattr(self.settings, name)}")
        elif key == pygame.K_v:
            index = COLOR_MODES.index(self.settings.color_mode) if self.settings.color_mode in COLOR_MODES else -1
            self.settings = self.settings.replace(color_mode=COLOR_MODES[(index + 1) % len(COLOR_MODES)])
            self.logger.info(f"Event: Color mode switched to '{self.settings.color_mode}'")

    def _cell_under(self, pos) -> Optional[CellInfo]:
        if self.window is None or not self.canvas_rect.collidepoint(pos):
            return None
        return self.renderer.cell_at(self.window.cells, self.settings, self.canvas_rect.width,
                                     self.canvas_rect.height, pos[0] - self.canvas_rect.x, pos[1] - self.canvas_rect.y)

    def _handle_pointer_move(self, pos):
        if self.minimap_rect.collidepoint(pos):
            self.hovered = None
            return
        self.hovered = self._cell_under(pos)

    def _handle_click(self, pos):
        if self.minimap_rect.collidepoint(pos):
            target = self.minimap.click_to_world(pos[0] - self.minimap_rect.x, pos[1] - self.minimap_rect.y,
                                                 self.viewport.world_size)
            if target is not None:
                self.viewport.center_on(*target)
                self.request_viewport()
            return
        if self.canvas_rect.collidepoint(pos):
            self.selected = toggle_selection(self.selected, self._cell_under(pos))

    def _update_tooltip(self):
        if self.hovered is None:
            if self.tooltip.visible:
                self.tooltip.hide()
            return
        text = format_cell_tooltip(self.hovered)
        if text != self._tooltip_text:
            self._tooltip_text = text
            self.tooltip.set_text(text)
        self.tooltip.set_position((self.hovered.screen_x + TOOLTIP_OFFSET, self.hovered.screen_y + TOOLTIP_OFFSET))
        if not self.tooltip.visible:
            self.tooltip.show()

    def _draw(self):
        """Handles all rendering for the application."""
        self.canvas.fill(DEFAULTS.CANVAS_BACKGROUND)
        if self.window is not None:
            self.renderer.render(self.canvas, self.window.cells, self.settings,
                                 Selection(hovered=self.hovered, selected=self.selected),
                                 self.viewport.world_size)
        if self.viewport.is_loading:
            self.renderer.draw_loading_indicator(self.canvas, self.font)
        self.screen.blit(self.canvas, self.canvas_rect)

        if self.minimap_grid is not None:
            self.minimap.render(self.minimap_surface, self.minimap_grid.cells, self.settings,
                                self.renderer.get_cell_color, self.viewport.world_size, self.viewport.position)
            self.screen.blit(self.minimap_surface, self.minimap_rect)
            pygame.draw.rect(self.screen, DEFAULTS.MINIMAP_INDICATOR_COLOR, self.minimap_rect.inflate(4, 4), 2)


def load_config(config_path: Optional[str], logger: logging.Logger) -> dict:
    """Loads application parameters from the config file."""
    logger.info(f"Loading configuration from {config_path or 'packaged defaults'}")
    try:
        return load_json_resource(config_path, "config.json")
    except FileNotFoundError:
        logger.critical(f"Configuration file not found at {config_path}. Exiting.")
        sys.exit(1)
    except json.JSONDecodeError:
        logger.critical(f"Error decoding JSON from {config_path}. Exiting.")
        sys.exit(1)
