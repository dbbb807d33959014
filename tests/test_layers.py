import math

import pygame
import pytest

from terrain_viewer.geometry import FrameGeometry
from terrain_viewer.layers import FrameContext, SelectionLayer, WindLayer
from terrain_viewer.layers.clouds import cloud_alpha
from terrain_viewer.layers.contours import is_contour_cell
from terrain_viewer.layers.precipitation import animation_offset, streak_count
from terrain_viewer.layers.wind import arrow_segments
from terrain_viewer.renderer import TerrainRenderer
from terrain_viewer.settings import NO_SELECTION, CellInfo, Selection, VisualizationSettings


def rgb(surface, pos):
    return tuple(surface.get_at(pos))[:3]


@pytest.mark.parametrize("altitude, interval, expected", [
    (200, 100, True),
    (250, 100, False),
    (149.6, 50, True),
    (-100, 100, True),
    (137, 100, False),
    (100, 0, False),
])
def test_contour_cells(altitude, interval, expected):
    assert is_contour_cell(altitude, interval) is expected


def test_precipitation_animation_cycles_every_ten_frames():
    assert animation_offset(0) == 2
    assert animation_offset(9) == 0
    assert animation_offset(10) == animation_offset(0)


@pytest.mark.parametrize("rate, expected", [(0.05, 1), (0.25, 2), (0.5, 4), (3.0, 4)])
def test_streak_count_rises_with_intensity(rate, expected):
    assert streak_count(rate) == expected


def test_cloud_alpha_is_capped():
    assert cloud_alpha(0.5) == 102
    assert cloud_alpha(1.0) == int(0.7 * 255)


def test_arrow_points_along_compass_bearing():
    (tail, tip), _, _ = arrow_segments((0, 0), 20, 15, 0)
    assert tip[0] == pytest.approx(0, abs=1e-9)
    assert tip[1] == pytest.approx(-20 * 0.9 * 0.45)
    assert tail[1] > 0

    (_, east_tip), _, _ = arrow_segments((0, 0), 20, 15, 90)
    assert east_tip == pytest.approx((20 * 0.9 * 0.45, 0), abs=1e-9)


def test_arrow_length_scales_with_speed():
    (_, slow_tip), _, _ = arrow_segments((0, 0), 20, 1.5, 180)
    (_, fast_tip), _, _ = arrow_segments((0, 0), 20, 15, 180)
    assert 0 < slow_tip[1] < fast_tip[1]


def test_arrow_head_strokes_are_thirty_degrees_off_the_shaft():
    (tail, tip), (_, left), (_, right) = arrow_segments((0, 0), 40, 10, 45)
    shaft = math.atan2(tail[1] - tip[1], tail[0] - tip[0])
    for end in (left, right):
        stroke = math.atan2(end[1] - tip[1], end[0] - tip[0])
        delta = abs((stroke - shaft + math.pi) % (2 * math.pi) - math.pi)
        assert delta == pytest.approx(math.pi / 6)
    assert math.dist(tip, left) == pytest.approx(math.dist(tip, right))


def test_selection_layer_only_renders_with_a_selection():
    layer = SelectionLayer()
    info = CellInfo(cell=None, x=0, y=0)
    assert not layer.should_render(VisualizationSettings(), NO_SELECTION)
    assert layer.should_render(VisualizationSettings(), Selection(hovered=info))


def test_selection_wraps_world_coordinates(make_grid):
    grid = make_grid(10)
    surface = pygame.Surface((100, 100))
    settings = VisualizationSettings(zoom_level=1.0)
    context = FrameContext(
        surface=surface,
        grid=grid,
        settings=settings,
        geometry=FrameGeometry.compute(100, 100, 10, 1.0),
        selection=Selection(selected=CellInfo(cell=grid[1][2], x=1002, y=1)),
        world_size=1000,
    )
    SelectionLayer().render(context)
    assert rgb(surface, (20, 15)) == (255, 215, 0)


def test_wind_arrows_drawn_only_for_moving_air(make_grid):
    renderer = TerrainRenderer()
    settings = VisualizationSettings(zoom_level=1.0, color_mode="wind")
    surface = pygame.Surface((100, 100))

    calm = make_grid(10, lambda x, y: {"wind_speed": 0.05, "wind_direction": 0})
    renderer.render(surface, calm, settings)
    assert rgb(surface, (5, 5)) == renderer.get_cell_color(calm[0][0], settings)

    windy = make_grid(10, lambda x, y: {"wind_speed": 10, "wind_direction": 0})
    renderer.render(surface, windy, settings)
    assert rgb(surface, (5, 5)) != renderer.get_cell_color(windy[0][0], settings)


def test_wind_arrows_skipped_for_small_cells(make_grid):
    renderer = TerrainRenderer()
    settings = VisualizationSettings(zoom_level=1.0, color_mode="wind")
    surface = pygame.Surface((50, 50))  # 5px cells
    windy = make_grid(10, lambda x, y: {"wind_speed": 10, "wind_direction": 0})
    renderer.render(surface, windy, settings)
    assert rgb(surface, (2, 2)) == renderer.get_cell_color(windy[0][0], settings)


def test_wind_layer_is_a_color_layer():
    layer = WindLayer()
    assert layer.applies_to(VisualizationSettings(color_mode="wind"))
    assert not layer.applies_to(VisualizationSettings())


def test_rivers_join_cells_of_the_same_river(make_grid):
    renderer = TerrainRenderer()
    settings = VisualizationSettings(zoom_level=1.0, color_mode="moisture")
    surface = pygame.Surface((100, 100))
    river = {"type": "river", "river_name": "Avon", "water_height": 1.0}

    grid = make_grid(10, lambda x, y: river if y == 0 and x < 2 else {})
    renderer.render(surface, grid, settings)
    assert rgb(surface, (10, 5)) != (255, 255, 255)


def test_rivers_with_different_names_are_not_joined(make_grid):
    renderer = TerrainRenderer()
    settings = VisualizationSettings(zoom_level=1.0, color_mode="moisture")
    surface = pygame.Surface((100, 100))

    def cell_fn(x, y):
        if y == 0 and x < 2:
            return {"type": "river", "river_name": f"River {x}", "water_height": 1.0}
        return {}

    renderer.render(surface, make_grid(10, cell_fn), settings)
    assert rgb(surface, (10, 5)) == (255, 255, 255)


def test_contours_outline_cells_on_the_interval(make_grid):
    renderer = TerrainRenderer()
    settings = VisualizationSettings(zoom_level=1.0, color_mode="moisture", contour_lines=True)
    surface = pygame.Surface((100, 100))
    grid = make_grid(10, lambda x, y: {"altitude": 200 if (x, y) == (0, 0) else 137})
    renderer.render(surface, grid, settings)
    assert rgb(surface, (0, 5)) != (255, 255, 255)
    assert rgb(surface, (10, 5)) == (255, 255, 255)


def test_clouds_wash_cloudy_cells(make_grid):
    renderer = TerrainRenderer()
    settings = VisualizationSettings(zoom_level=1.0, color_mode="temperature", show_clouds=True)
    surface = pygame.Surface((100, 100))
    grid = make_grid(10, lambda x, y: {"temperature": -20, "cloud_density": 0.5 if x == 0 else 0.05})
    renderer.render(surface, grid, settings)
    cloudy = rgb(surface, (5, 5))
    clear = rgb(surface, (15, 5))
    assert clear == (0, 0, 255)
    assert cloudy[0] > 0 and cloudy[1] > 0


def test_precipitation_streaks_fall_on_wet_cells_and_move_between_frames(make_grid):
    renderer = TerrainRenderer()
    settings = VisualizationSettings(zoom_level=1.0, color_mode="temperature", show_precipitation=True)
    surface = pygame.Surface((100, 100))
    grid = make_grid(10, lambda x, y: {"temperature": -20, "precipitation_rate": 1.0 if (x, y) == (0, 0) else 0.01})

    def region(x0, y0, size=10):
        return [rgb(surface, (x, y)) for y in range(y0, y0 + size) for x in range(x0, x0 + size)]

    renderer.render(surface, grid, settings)
    first = region(0, 0, 20)
    assert any(color != (0, 0, 255) for color in region(0, 0))
    assert all(color == (0, 0, 255) for color in region(50, 50))

    renderer.render(surface, grid, settings)
    assert region(0, 0, 20) != first
    assert all(color == (0, 0, 255) for color in region(50, 50))


def test_precipitation_hidden_when_toggled_off(make_grid):
    renderer = TerrainRenderer()
    settings = VisualizationSettings(zoom_level=1.0, color_mode="temperature")
    surface = pygame.Surface((100, 100))
    grid = make_grid(10, lambda x, y: {"temperature": -20, "precipitation_rate": 1.0})
    renderer.render(surface, grid, settings)
    assert all(rgb(surface, (x, y)) == (0, 0, 255) for x in range(10) for y in range(10))
