# terrain_viewer/schema.py

"""
================================================================================
TERRAIN DATA SCHEMA
================================================================================
Value records for the data delivered by the simulation backend.

Data Contract:
---------------
- TerrainCell: one grid cell, immutable once received. Optional fields are
  None when the backend does not provide them ("feature absent").
- ViewportWindow: a square matrix of cells indexed [y][x], the world origin it
  was fetched at, the world size reported with it and the backend timestamp.
  Replaced wholesale on every fetch; never mutated.
- MinimapGrid: the (possibly down-sampled) full-world matrix and the
  authoritative world size.
================================================================================
"""
from dataclasses import dataclass, fields
from typing import Optional, Sequence

# Cell classifications the renderer gives special treatment to.
CELL_TYPE_RIVER = "river"
CELL_TYPE_SPRING = "spring"
CELL_TYPE_MUD = "mud"
CELL_TYPE_EARTH = "earth"
WATER_CELL_TYPES = (CELL_TYPE_RIVER, CELL_TYPE_SPRING)


@dataclass(frozen=True)
class TerrainCell:
    id: int = 0
    x: int = 0
    y: int = 0
    # Elevation
    altitude: float = 0.0
    terrain_height: float = 0.0
    water_height: float = 0.0
    distance_from_water: float = 0.0
    # Moisture
    base_moisture: float = 0.0
    added_moisture: float = 0.0
    moisture: float = 0.0
    # Atmosphere
    temperature: float = 0.0
    air_humidity: float = 0.0
    cloud_density: float = 0.0
    precipitation_rate: float = 0.0
    ground_wetness: float = 0.0
    atmospheric_pressure: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[float] = None
    # Vegetation
    grass_density: Optional[float] = None
    grass_type: Optional[str] = None
    grass_health: Optional[float] = None
    grass_dormant: Optional[float] = None
    # Classification
    type: str = "land"
    river_name: Optional[str] = None

    @property
    def is_water(self) -> bool:
        return self.type in WATER_CELL_TYPES

    @classmethod
    def from_dict(cls, data: dict) -> "TerrainCell":
        """
        Builds a cell from a backend JSON object. Unknown keys are ignored and
        explicit nulls on non-optional numeric fields fall back to the default.
        """
        values = {}
        for field in fields(cls):
            if field.name not in data:
                continue
            value = data[field.name]
            if value is None and field.default is not None:
                continue
            values[field.name] = value
        return cls(**values)


TerrainGrid = Sequence[Sequence[TerrainCell]]


def grid_from_json(rows: list) -> tuple:
    """Converts a row-major list of lists of JSON objects into a cell grid."""
    return tuple(tuple(TerrainCell.from_dict(item) for item in row) for row in rows or [])


@dataclass(frozen=True)
class ViewportWindow:
    cells: tuple
    origin_x: int
    origin_y: int
    world_size: Optional[int] = None
    timestamp: Optional[float] = None
    request_id: int = 0

    @property
    def size(self) -> int:
        return len(self.cells)

    def cell_at(self, x: int, y: int) -> Optional[TerrainCell]:
        """Returns the cell at viewport-local (x, y), or None when out of range."""
        if 0 <= y < len(self.cells) and 0 <= x < len(self.cells[y]):
            return self.cells[y][x]
        return None


@dataclass(frozen=True)
class MinimapGrid:
    cells: tuple
    world_size: int
    resolution: int = 0
