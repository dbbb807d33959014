# terrain_viewer/viewport.py

"""
================================================================================
VIEWPORT MANAGER
================================================================================
Owns the world size, the viewport origin and the cache of the last fetched
viewport window.

Data Contract:
---------------
- Inputs (on initialization):
    - backend (TerrainBackend): provides fetch_viewport / fetch_minimap.
    - world_size (int): initial edge length of the toroidal world.
- Public Methods:
    - get_viewport_data(): returns the cached window or fetches it. At most
      one fetch is ever in flight; concurrent callers share it.
    - move(dx, dy) / center_on(x, y): change the origin with toroidal
      wrapping and invalidate the cache.
    - invalidate_cache(): forget the cached window (an outstanding fetch is
      not cancelled, but its result will no longer populate the cache).
    - fetch_minimap(resolution): passthrough that records the world size.
- Invariants: the fetch state is always exactly one of Idle, InFlight or
  Cached. A result is only cached while its request id is still the one in
  flight, so a superseded completion can never overwrite newer data.
================================================================================
"""
import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Optional

from . import config as DEFAULTS
from .geometry import wrap_origin
from .schema import MinimapGrid, ViewportWindow


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class InFlight:
    request_id: int
    task: asyncio.Future


@dataclass(frozen=True)
class Cached:
    window: ViewportWindow
    fetched_at: float


IDLE = Idle()


class ViewportManager:
    """Tracks where the viewport is and fetches the window of cells it shows."""

    def __init__(self, backend, world_size: int = 0, viewport_size: int = DEFAULTS.VIEWPORT_SIZE,
                 logger: Optional[logging.Logger] = None):
        self.backend = backend
        self.viewport_size = viewport_size
        self.logger = logger or logging.getLogger(__name__)
        self._world_size = world_size if world_size > 0 else 0
        self._position = (0, 0)
        self._next_request_id = 0
        self.state = IDLE
        self.last_timestamp = None
        self.fetch_count = 0

    # --- World & Position ---
    @property
    def world_size(self) -> int:
        return self._world_size

    def set_world_size(self, size: Optional[int]):
        """Records a world size reported by the backend. Absent or zero sizes are ignored."""
        if size and size > 0:
            self._world_size = size

    @property
    def position(self) -> tuple[int, int]:
        return self._position

    def set_position(self, x: int, y: int):
        self._position = (int(x), int(y))

    def move(self, dx: int, dy: int) -> tuple[int, int]:
        """Moves the origin by (dx, dy) cells, wrapping around the world, and invalidates the cache."""
        new_position = wrap_origin(self._position, (int(dx), int(dy)), self._world_size, self.viewport_size)
        self.logger.debug(f"Viewport moved by ({dx}, {dy}): {self._position} -> {new_position}")
        self._position = new_position
        self.invalidate_cache()
        return new_position

    def center_on(self, world_x: int, world_y: int) -> tuple[int, int]:
        """Moves the viewport so the given world cell sits in the middle of the window."""
        half = self.viewport_size // 2
        x, y = self._position
        return self.move(world_x - half - x, world_y - half - y)

    # --- Fetching ---
    @property
    def is_loading(self) -> bool:
        return isinstance(self.state, InFlight)

    @property
    def cached_window(self) -> Optional[ViewportWindow]:
        return self.state.window if isinstance(self.state, Cached) else None

    def invalidate_cache(self):
        self.state = IDLE

    def is_current(self, window: ViewportWindow) -> bool:
        """Whether window came from the latest request (in flight or cached)."""
        if isinstance(self.state, InFlight):
            return self.state.request_id == window.request_id
        if isinstance(self.state, Cached):
            return self.state.window.request_id == window.request_id
        return False

    async def get_viewport_data(self) -> ViewportWindow:
        state = self.state
        if isinstance(state, Cached):
            return state.window
        if isinstance(state, InFlight):
            return await asyncio.shield(state.task)

        self._next_request_id += 1
        request_id = self._next_request_id
        task = asyncio.ensure_future(self._fetch(request_id, self._position))
        self.state = InFlight(request_id, task)
        return await asyncio.shield(task)

    async def _fetch(self, request_id: int, position: tuple[int, int]) -> ViewportWindow:
        self.fetch_count += 1
        x, y = position
        window = None
        try:
            window = await self.backend.fetch_viewport(x, y, self.viewport_size, self.viewport_size)
            window = replace(window, request_id=request_id)
            self.set_world_size(window.world_size)
            if window.timestamp is not None:
                self.last_timestamp = window.timestamp
            return window
        finally:
            in_flight = isinstance(self.state, InFlight) and self.state.request_id == request_id
            if in_flight:
                self.state = Cached(window, time.monotonic()) if window is not None else IDLE
            elif window is None:
                self.logger.debug(f"Superseded viewport request {request_id} failed")

    async def fetch_minimap(self, resolution: int = DEFAULTS.MINIMAP_RESOLUTION) -> MinimapGrid:
        grid = await self.backend.fetch_minimap(resolution)
        self.set_world_size(grid.world_size)
        return grid
