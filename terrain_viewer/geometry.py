# terrain_viewer/geometry.py

"""
================================================================================
VIEWPORT GEOMETRY
================================================================================
The coordinate system shared by the renderer, the overlays, pointer hit
testing and viewport movement.

Data Contract:
---------------
- FrameGeometry.compute(...) derives the pixel size of one cell from the
  canvas size, the fetched window edge and the zoom level:
      visible_cells = viewport_size / zoom_level
      cell_width    = canvas_width  / visible_cells
      cell_height   = canvas_height / visible_cells
- cell_origin(vx, vy) is the forward transform (viewport cell -> pixel) and
  pointer_to_cell(px, py) is its exact inverse. Fill overscan only widens
  what is painted; it never moves the authoritative cell boundary.
- wrap_position(...) moves one axis of the viewport origin on the torus.
- Invariants: degenerate inputs (empty window, zero-size canvas) produce an
  "empty" geometry whose is_empty flag is True; nothing divides by zero.
================================================================================
"""
import math
from dataclasses import dataclass
from typing import Optional

from . import config as DEFAULTS


@dataclass(frozen=True)
class FrameGeometry:
    canvas_width: int
    canvas_height: int
    viewport_size: int
    visible_cells: float
    cell_width: float
    cell_height: float
    pan_x: float = 0.0
    pan_y: float = 0.0

    @classmethod
    def compute(cls, canvas_width: int, canvas_height: int, viewport_size: int,
                zoom_level: float, pan_offset: tuple = (0.0, 0.0)) -> "FrameGeometry":
        zoom = zoom_level or 1.0
        if viewport_size <= 0 or canvas_width <= 0 or canvas_height <= 0 or zoom <= 0:
            return cls(max(0, canvas_width), max(0, canvas_height), max(0, viewport_size), 0.0, 0.0, 0.0)

        visible_cells = viewport_size / zoom
        return cls(
            canvas_width=canvas_width,
            canvas_height=canvas_height,
            viewport_size=viewport_size,
            visible_cells=visible_cells,
            cell_width=canvas_width / visible_cells,
            cell_height=canvas_height / visible_cells,
            pan_x=pan_offset[0],
            pan_y=pan_offset[1],
        )

    @property
    def is_empty(self) -> bool:
        return self.cell_width <= 0 or self.cell_height <= 0

    @property
    def shows_details(self) -> bool:
        """Whether cells are large enough for strokes (wireframe, rivers, contours)."""
        return (self.cell_width >= DEFAULTS.DETAIL_MIN_CELL_PX
                and self.cell_height >= DEFAULTS.DETAIL_MIN_CELL_PX)

    def cell_origin(self, vx: int, vy: int) -> tuple[float, float]:
        """Top-left pixel of viewport cell (vx, vy)."""
        return vx * self.cell_width + self.pan_x, vy * self.cell_height + self.pan_y

    def cell_center(self, vx: int, vy: int) -> tuple[float, float]:
        x, y = self.cell_origin(vx, vy)
        return x + self.cell_width / 2, y + self.cell_height / 2

    def cell_rect(self, vx: int, vy: int) -> tuple[int, int, int, int]:
        """The exact cell boundary, rounded down to whole pixels. Used for strokes."""
        x, y = self.cell_origin(vx, vy)
        return (math.floor(x), math.floor(y),
                max(1, math.ceil(self.cell_width)), max(1, math.ceil(self.cell_height)))

    def fill_rect(self, vx: int, vy: int) -> tuple[int, int, int, int]:
        """The cell boundary plus a one-pixel overscan so neighbours leave no seams."""
        x, y = self.cell_origin(vx, vy)
        return (math.floor(x), math.floor(y),
                math.ceil(self.cell_width + 1), math.ceil(self.cell_height + 1))

    def pointer_to_cell(self, px: float, py: float) -> Optional[tuple[int, int]]:
        """
        Inverts cell_origin: returns the viewport cell under pixel (px, py), or
        None if the pointer is outside the fetched window.
        """
        if self.is_empty:
            return None
        cell_x = math.floor((px - self.pan_x) / self.cell_width)
        cell_y = math.floor((py - self.pan_y) / self.cell_height)
        if not (0 <= cell_x < self.viewport_size and 0 <= cell_y < self.viewport_size):
            return None
        return cell_x, cell_y


def wrap_position(position: int, delta: int, world_size: int, viewport_size: int) -> int:
    """
    Moves one axis of the viewport origin by delta on a toroidal world.

    The valid origins are 0..world_size - viewport_size. The raw position is
    reduced modulo world_size, so moving by a whole world is the identity. A
    result inside the seam band (past the last full window) snaps to the edge
    in the direction of travel: forward wraps to 0, backward to the last
    valid origin. Worlds no larger than the viewport have only origin 0.

    Reducing modulo (world_size - viewport_size + 1) instead would break both
    the whole-world identity and 950 + 100 -> 50 on a 1000-cell world.
    """
    max_pos = world_size - viewport_size
    if max_pos <= 0:
        return 0

    wrapped = (position + delta) % world_size
    if wrapped <= max_pos:
        return wrapped
    return max_pos if delta < 0 else 0


def wrap_origin(origin: tuple[int, int], delta: tuple[int, int], world_size: int,
                viewport_size: int = DEFAULTS.VIEWPORT_SIZE) -> tuple[int, int]:
    """Applies wrap_position to both axes independently."""
    return (
        wrap_position(origin[0], delta[0], world_size, viewport_size),
        wrap_position(origin[1], delta[1], world_size, viewport_size),
    )
