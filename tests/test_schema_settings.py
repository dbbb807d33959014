import pytest

from terrain_viewer import config as DEFAULTS
from terrain_viewer.schema import TerrainCell, ViewportWindow, grid_from_json
from terrain_viewer.settings import NO_SELECTION, CellInfo, Selection, VisualizationSettings


def test_from_dict_ignores_unknown_keys_and_maps_fields():
    cell = TerrainCell.from_dict({"id": 7, "altitude": 120.5, "type": "river", "river_name": "Avon", "unknown": 1})
    assert cell.id == 7
    assert cell.altitude == 120.5
    assert cell.is_water
    assert cell.river_name == "Avon"


def test_from_dict_null_falls_back_to_default_for_required_numbers():
    cell = TerrainCell.from_dict({"moisture": None, "wind_speed": None, "atmospheric_pressure": None})
    assert cell.moisture == 0.0
    assert cell.wind_speed is None
    assert cell.atmospheric_pressure is None


def test_grid_from_json_is_row_major():
    grid = grid_from_json([[{"x": 0, "y": 0}, {"x": 1, "y": 0}], [{"x": 0, "y": 1}, {"x": 1, "y": 1}]])
    assert grid[1][0].y == 1
    assert grid[0][1].x == 1
    assert grid_from_json(None) == ()


def test_viewport_window_cell_at_bounds():
    window = ViewportWindow(cells=grid_from_json([[{"id": 1}, {"id": 2}]]), origin_x=0, origin_y=0)
    assert window.size == 1
    assert window.cell_at(1, 0).id == 2
    assert window.cell_at(2, 0) is None
    assert window.cell_at(0, -1) is None


@pytest.mark.parametrize("zoom, expected", [(0, DEFAULTS.MIN_ZOOM), (-3, DEFAULTS.MIN_ZOOM), (10, DEFAULTS.MAX_ZOOM), (2.5, 2.5)])
def test_zoom_is_clamped(zoom, expected):
    assert VisualizationSettings(zoom_level=zoom).zoom_level == expected


def test_tunables_are_clamped():
    settings = VisualizationSettings(exaggerate_height=9, contour_interval=1)
    assert settings.exaggerate_height == DEFAULTS.MAX_HEIGHT_EXAGGERATION
    assert settings.contour_interval == DEFAULTS.MIN_CONTOUR_INTERVAL


def test_replace_returns_a_new_instance():
    settings = VisualizationSettings()
    changed = settings.replace(color_mode="wind", show_rivers=False)
    assert settings.color_mode == "default"
    assert settings.show_rivers is True
    assert changed.color_mode == "wind"
    assert changed.show_rivers is False


def test_defaults_match_the_viewer():
    settings = VisualizationSettings()
    assert settings.show_rivers and settings.show_moisture and settings.show_elevation
    assert not settings.show_clouds
    assert settings.contour_interval == 100
    assert settings.zoom_level == pytest.approx(100 / 45)


def test_selection_truthiness():
    info = CellInfo(cell=TerrainCell(), x=1, y=2)
    assert not NO_SELECTION
    assert Selection(hovered=info)
    assert Selection(selected=info)
    assert info.same_cell(CellInfo(cell=TerrainCell(altitude=5), x=1, y=2))
    assert not info.same_cell(None)
