import logging

import pygame
import pytest

from terrain_viewer import config as DEFAULTS
from terrain_viewer.app import (
    SLIDER_SETTINGS,
    TOGGLE_KEYS,
    apply_slider_value,
    format_cell_tooltip,
    load_config,
    load_json_resource,
    refresh_interval_from_config,
    settings_from_config,
    toggle_selection,
    toggle_setting,
)
from terrain_viewer.schema import TerrainCell
from terrain_viewer.settings import VisualizationSettings, CellInfo


def test_clicking_selected_cell_again_clears_selection():
    cell = TerrainCell()
    first = CellInfo(cell=cell, x=4, y=5)
    selected = toggle_selection(None, first)
    assert selected is first
    assert toggle_selection(selected, CellInfo(cell=cell, x=4, y=5)) is None
    other = CellInfo(cell=cell, x=6, y=5)
    assert toggle_selection(selected, other) is other
    assert toggle_selection(selected, None) is selected


def test_tooltip_lists_cell_fields():
    cell = TerrainCell(type="river", river_name="Avon", altitude=123.456, temperature=12.34, air_humidity=0.5)
    text = format_cell_tooltip(CellInfo(cell=cell, x=3, y=9))
    assert "(3, 9)" in text
    assert "Avon" in text
    assert "123.46" in text
    assert "12.3°C" in text
    assert "50.0%" in text
    assert "N/A hPa" in text


def test_packaged_config_builds_settings():
    config = load_json_resource(None, "config.json")
    settings = VisualizationSettings(**config["visualization"])
    assert settings.color_mode == "default"
    assert config["display"]["canvas_size"] > 0


def test_packaged_logging_config_has_file_handler():
    log_config = load_json_resource(None, "logging_config.json")
    assert "file" in log_config["handlers"]


def test_missing_config_file_exits(tmp_path):
    with pytest.raises(SystemExit):
        load_config(str(tmp_path / "missing.json"), logging.getLogger("test"))


def test_malformed_config_file_exits(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(SystemExit):
        load_config(str(path), logging.getLogger("test"))


def test_moisture_and_elevation_have_toggle_keys():
    assert TOGGLE_KEYS[pygame.K_m] == "show_moisture"
    assert TOGGLE_KEYS[pygame.K_e] == "show_elevation"
    settings = VisualizationSettings()
    for name in TOGGLE_KEYS.values():
        assert getattr(toggle_setting(settings, name), name) is not getattr(settings, name)


def test_sliders_cover_every_numeric_tunable():
    assert SLIDER_SETTINGS["zoom_level"][1:] == (DEFAULTS.MIN_ZOOM, DEFAULTS.MAX_ZOOM)
    assert SLIDER_SETTINGS["exaggerate_height"][1:] == (DEFAULTS.MIN_HEIGHT_EXAGGERATION, DEFAULTS.MAX_HEIGHT_EXAGGERATION)
    assert SLIDER_SETTINGS["contour_interval"][1:] == (DEFAULTS.MIN_CONTOUR_INTERVAL, DEFAULTS.MAX_CONTOUR_INTERVAL)


def test_slider_values_update_settings():
    settings = VisualizationSettings()
    assert apply_slider_value(settings, "exaggerate_height", 2.5).exaggerate_height == 2.5
    assert apply_slider_value(settings, "contour_interval", 137.6).contour_interval == 138
    assert apply_slider_value(settings, "zoom_level", 4.0).zoom_level == 4.0


def test_unknown_visualization_keys_are_skipped(caplog):
    config = {"visualization": {"color_mode": "wind", "sparkles": True}}
    with caplog.at_level(logging.WARNING):
        settings = settings_from_config(config, logging.getLogger("test"))
    assert settings.color_mode == "wind"
    assert any("sparkles" in r.getMessage() for r in caplog.records)
    assert settings_from_config({}) == VisualizationSettings()


@pytest.mark.parametrize("data, expected", [
    ({"updateInterval": 30000}, 30),
    ({"updateInterval": 200}, 1),
    ({"updateInterval": "fast"}, None),
    ({"updateInterval": None}, None),
    ({"updateInterval": True}, None),
    ({"updateInterval": -5}, None),
    ({}, None),
    ([1, 2], None),
])
def test_refresh_interval_from_backend_config(data, expected):
    assert refresh_interval_from_config(data) == expected
