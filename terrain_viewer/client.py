# terrain_viewer/client.py

"""
================================================================================
SIMULATION BACKEND CLIENT
================================================================================
The two data contracts with the terrain simulation backend, and an HTTP
implementation of them.

Data Contract:
---------------
- fetch_viewport(x, y, width, height) -> ViewportWindow
      GET /api/viewport?x=&y=&width=&height=
      -> {"viewport": [[cell, ...], ...], "worldSize": int, "timestamp": number}
- fetch_minimap(resolution) -> MinimapGrid
      GET /api/minimap?resolution=
      -> {"minimap": [[cell, ...], ...], "resolution": int, "worldSize": int}
- fetch_config() -> dict
      GET /api/config -> {"updateInterval": milliseconds}
- Errors: every transport or decoding failure is raised as TerrainApiError.
- Side Effects: network I/O. The blocking requests calls run in a worker
  thread via asyncio.to_thread so the event loop keeps drawing frames.
================================================================================
"""
import asyncio
import logging
import os
from typing import Optional, Protocol

import requests

from . import config as DEFAULTS
from .schema import MinimapGrid, ViewportWindow, grid_from_json


class TerrainApiError(Exception):
    """Raised when the backend cannot be reached or returns unusable data."""


class TerrainBackend(Protocol):
    """
    The interface the viewer expects from the simulation backend. Any object
    providing these coroutines can stand in for the HTTP client.
    """

    async def fetch_viewport(self, x: int, y: int, width: int, height: int) -> ViewportWindow: ...
    async def fetch_minimap(self, resolution: int) -> MinimapGrid: ...


def resolve_api_url(explicit: Optional[str] = None, config: Optional[dict] = None) -> str:
    """Command line beats environment, environment beats the config file."""
    if explicit:
        return explicit.rstrip("/")
    env_url = os.environ.get(DEFAULTS.API_URL_ENV_VAR)
    if env_url:
        return env_url.rstrip("/")
    return (config or {}).get("api_url", DEFAULTS.DEFAULT_API_URL).rstrip("/")


class TerrainApiClient:
    """Talks to the simulation backend over HTTP using requests."""

    def __init__(self, base_url: str, timeout: float = DEFAULTS.REQUEST_TIMEOUT_S,
                 session: Optional[requests.Session] = None, logger: Optional[logging.Logger] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def _get_json(self, path: str, params: Optional[dict] = None) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise TerrainApiError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise TerrainApiError(f"Invalid JSON from {url}: {e}") from e

    def get_viewport(self, x: int, y: int, width: int, height: int) -> ViewportWindow:
        data = self._get_json("/api/viewport", {"x": x, "y": y, "width": width, "height": height})
        if not isinstance(data.get("viewport"), list):
            raise TerrainApiError("Viewport response has no 'viewport' matrix")

        world_size = data.get("worldSize")
        timestamp = data.get("timestamp")
        return ViewportWindow(
            cells=grid_from_json(data["viewport"]),
            origin_x=x,
            origin_y=y,
            world_size=world_size if isinstance(world_size, int) and world_size > 0 else None,
            timestamp=timestamp if isinstance(timestamp, (int, float)) else None,
        )

    def get_minimap(self, resolution: int) -> MinimapGrid:
        data = self._get_json("/api/minimap", {"resolution": resolution})
        if not isinstance(data.get("minimap"), list):
            raise TerrainApiError("Minimap response has no 'minimap' matrix")
        return MinimapGrid(
            cells=grid_from_json(data["minimap"]),
            world_size=int(data.get("worldSize") or 0),
            resolution=int(data.get("resolution") or resolution),
        )

    def get_config(self) -> dict:
        return self._get_json("/api/config")

    async def fetch_viewport(self, x: int, y: int, width: int, height: int) -> ViewportWindow:
        return await asyncio.to_thread(self.get_viewport, x, y, width, height)

    async def fetch_minimap(self, resolution: int) -> MinimapGrid:
        return await asyncio.to_thread(self.get_minimap, resolution)

    async def fetch_config(self) -> dict:
        return await asyncio.to_thread(self.get_config)

    def close(self):
        self.session.close()
