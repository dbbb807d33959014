import pygame
import pytest

from terrain_viewer.minimap import MinimapRenderer
from terrain_viewer.renderer import TerrainRenderer
from terrain_viewer.settings import VisualizationSettings


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def rgb(surface, pos):
    return tuple(surface.get_at(pos))[:3]


@pytest.fixture
def clock():
    return FakeClock(1000.0)


@pytest.fixture
def minimap(clock):
    return MinimapRenderer(size=150, clock=clock)


@pytest.fixture
def grid(make_grid):
    return make_grid(3, lambda x, y: {"temperature": -20 + 10 * (x + y), "altitude": 300 * x + 100 * y})


def test_snapshot_is_reused_between_frames(minimap, grid, clock):
    renderer = TerrainRenderer()
    surface = pygame.Surface((150, 150))
    settings = VisualizationSettings()
    minimap.render(surface, grid, settings, renderer.get_cell_color, 3000)
    first = minimap.snapshot.surface
    clock.now += 60
    minimap.render(surface, grid, settings, renderer.get_cell_color, 3000)
    assert minimap.snapshot.surface is first


def test_snapshot_rebuilt_on_color_mode_change(minimap, grid):
    renderer = TerrainRenderer()
    surface = pygame.Surface((150, 150))
    minimap.render(surface, grid, VisualizationSettings(), renderer.get_cell_color, 3000)
    first = minimap.snapshot.surface
    minimap.render(surface, grid, VisualizationSettings(color_mode="temperature"), renderer.get_cell_color, 3000)
    assert minimap.snapshot.surface is not first
    assert minimap.snapshot.color_mode == "temperature"


def test_snapshot_rebuilt_when_stale(minimap, grid, clock):
    renderer = TerrainRenderer()
    surface = pygame.Surface((150, 150))
    settings = VisualizationSettings()
    minimap.render(surface, grid, settings, renderer.get_cell_color, 3000)
    first = minimap.snapshot.surface
    clock.now += 10 * 60 + 1
    minimap.render(surface, grid, settings, renderer.get_cell_color, 3000)
    assert minimap.snapshot.surface is not first


def test_invalidate_forces_redraw(minimap, clock):
    settings = VisualizationSettings()
    assert minimap.needs_render(settings, clock.now)
    minimap.snapshot = type("Snap", (), {"color_mode": "default", "rendered_at": clock.now})()
    assert not minimap.needs_render(settings, clock.now)
    minimap.invalidate()
    assert minimap.needs_render(settings, clock.now)


def test_minimap_pixels_use_shared_cell_colors(minimap, grid):
    renderer = TerrainRenderer()
    surface = pygame.Surface((150, 150))
    settings = VisualizationSettings(color_mode="temperature")
    minimap.render(surface, grid, settings, renderer.get_cell_color, 3000, (0, 0))
    for x, y in ((2, 1), (1, 2), (2, 2)):
        assert rgb(surface, (x * 50 + 25, y * 50 + 25)) == renderer.get_cell_color(grid[y][x], settings)


def test_empty_grid_renders_nothing(minimap):
    surface = pygame.Surface((150, 150))
    assert minimap.render(surface, (), VisualizationSettings(), lambda cell, s: (0, 0, 0)) is None
    assert minimap.snapshot is None


def test_indicator_rect_tracks_viewport(minimap):
    rect = minimap.indicator_rect(VisualizationSettings(zoom_level=1.0), 1000, (100, 200))
    assert rect == pygame.Rect(15, 30, 15, 15)


def test_indicator_shrinks_and_centers_with_zoom(minimap):
    wide = minimap.indicator_rect(VisualizationSettings(zoom_level=1.0), 1000, (0, 0))
    close = minimap.indicator_rect(VisualizationSettings(zoom_level=2.0), 1000, (0, 0))
    assert close.width < wide.width
    assert close.center == pytest.approx(wide.center, abs=1)


def test_indicator_drawn_over_snapshot(minimap, grid):
    renderer = TerrainRenderer()
    surface = pygame.Surface((150, 150))
    rect = minimap.render(surface, grid, VisualizationSettings(zoom_level=1.0), renderer.get_cell_color, 300, (100, 100))
    assert rect == pygame.Rect(50, 50, 50, 50)
    assert rgb(surface, (50, 75)) == (255, 215, 0)


def test_click_to_world(minimap):
    assert minimap.click_to_world(75, 10, 300) == (150, 20)
    assert minimap.click_to_world(149, 149, 300) == (298, 298)
    assert minimap.click_to_world(10, 10, 0) is None
