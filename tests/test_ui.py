import numpy as np
import pygame
import pytest

import config
from tissue import Role, Tissue, build_graph
from ui.colors import NAN_COLOR, auxin_to_rgb, membrane_to_rgb
from ui.panel import FramePanel
from ui.tissue_view import cell_at, cell_rect, describe_cell, membrane_rect

MAZE = [
    [-1, -1, 0],
    [0, -1, -1],
]
VIEW = pygame.Rect(0, 0, 300, 200)  # 100 x 100 px tiles


def test_auxin_colors():
    rgb = auxin_to_rgb(np.array([0.0, 5.0, 10.0, 50.0, np.nan]), max_auxin=10.0)
    assert rgb.shape == (5, 3)
    assert rgb.dtype == np.uint8
    assert tuple(rgb[0]) == (255, 255, 255)
    assert tuple(rgb[2]) == tuple(rgb[3])  # saturated above max_auxin
    brightness = rgb[:3].astype(int).sum(axis=1)
    assert brightness[0] > brightness[1] > brightness[2]
    assert tuple(rgb[4]) == NAN_COLOR


def test_negative_auxin_clips_to_white():
    assert tuple(auxin_to_rgb(np.array([-3.0]))[0]) == (255, 255, 255)


def test_membrane_colors():
    base = np.full((3, 3), 255, dtype=np.uint8)
    rgb = membrane_to_rgb(np.array([0.0, 0.5, 1.0]), base)
    assert tuple(rgb[0]) == (255, 255, 255)
    assert tuple(rgb[2]) == (255, 140, 25)
    # no PINS anywhere: base color everywhere
    assert np.array_equal(membrane_to_rgb(np.zeros(3), base), base)


def test_cell_rect_inside_tile():
    r = cell_rect((1, 2), (2, 3), VIEW)
    assert r == pygame.Rect(210, 110, 80, 80)
    assert pygame.Rect(200, 100, 100, 100).contains(r)


def test_membrane_rect_faces_neighbor():
    shape = (2, 3)
    box = cell_rect((0, 1), shape, VIEW)
    right = membrane_rect((0, 1), (0, 2), shape, VIEW)
    left = membrane_rect((0, 1), (0, 0), shape, VIEW)
    down = membrane_rect((0, 1), (1, 1), shape, VIEW)
    up = membrane_rect((0, 1), (-1, 1), shape, VIEW)
    assert right.right == box.right and right.height == box.height and right.width == 12
    assert left.left == box.left
    assert down.bottom == box.bottom and down.width == box.width and down.height == 12
    assert up.top == box.top


def test_cell_at():
    t = Tissue(build_graph(MAZE))
    assert cell_at((150, 50), t, VIEW) == 2
    assert cell_at((250, 150), t, VIEW) == 4
    assert cell_at((50, 150), t, VIEW) is None  # wall
    assert cell_at((350, 50), t, VIEW) is None  # outside


def test_describe_cell():
    t = Tissue(build_graph(MAZE), initial_pins=1.5)
    t.override_role(1, Role.SOURCE)
    t.set_edge_state(2, 3, 0.25)
    lines = describe_cell(t, t.snapshot(), 2)
    assert lines[0] == "Cell 2 at (0, 1)"
    assert lines[2] == "PINS 1.5"
    assert "  -> 3: 0.25" in lines
    assert describe_cell(t, t.snapshot(), 1)[0].endswith("(source)")


def make_panel() -> FramePanel:
    return FramePanel(pygame.Rect(640, 0, 320, 640), {"max_auxin": 10.0}, on_save=lambda: None, on_restart=lambda: None)


def test_panel_follows_newest_frame():
    panel = make_panel()
    panel.set_frame_count(5)
    assert panel.params["frame"] == 4
    panel.params["live"] = False
    panel.select_frame(1)
    panel.set_frame_count(9)
    assert panel.params["frame"] == 1
    assert panel.select_frame(50) == 8
    assert panel.select_frame(-2) == 0


def test_panel_restart_clamps_frame():
    panel = make_panel()
    panel.params["live"] = False
    panel.set_frame_count(5)
    panel.select_frame(4)
    panel.set_frame_count(1)
    assert panel.params["frame"] == 0


def test_panel_slider_values():
    panel = make_panel()
    panel.set_frame_count(11)
    slider = pygame.Rect(100, 0, 108, 12)
    panel._set_slider_value("frame", (150, 5), slider, 0, 10)
    assert panel.params["frame"] == 5
    assert panel.params["live"] is False
    panel._set_slider_value("max_auxin", (1000, 5), slider, 1, 50)
    assert panel.params["max_auxin"] == 50.0
    panel._set_slider_value("steps_per_frame", (0, 5), slider, 1, 200)
    assert panel.params["steps_per_frame"] == 1


def test_panel_arrow_keys_and_space():
    panel = make_panel()
    panel.set_frame_count(3)
    assert panel.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_LEFT, unicode=""))
    assert panel.params["frame"] == 1
    assert panel.params["live"] is False
    panel.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_RIGHT, unicode=""))
    panel.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_RIGHT, unicode=""))
    assert panel.params["frame"] == 2
    assert panel.params["paused"] is True
    panel.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE, unicode=" "))
    assert panel.params["paused"] is False


@pytest.mark.parametrize("cfg", [{"max_auxin": 25.0, "steps_per_frame": 5, "show_membranes": False}])
def test_panel_apply_config(cfg):
    panel = make_panel()
    panel.set_frame_count(7)
    panel.apply_config(cfg)
    assert panel.display_config() == cfg
    assert panel.params["frame"] == 0
    assert panel.params["paused"] is True


def test_panel_cycles_saved_configs(monkeypatch):
    loaded = []
    monkeypatch.setattr(config, "list_configs", lambda: ["a", "b", "c"])
    panel = FramePanel(
        pygame.Rect(640, 0, 320, 640),
        {"selected_config": "c", "on_load_config": loaded.append},
        on_save=lambda: None,
        on_restart=lambda: None,
    )
    assert panel.cycle_config(1) == "a"
    assert panel.cycle_config(-1) == "c"
    assert panel.cycle_config(-1) == "b"
    assert loaded == ["a", "c", "b"]
    assert panel.selected_config == "b"

    monkeypatch.setattr(config, "list_configs", lambda: [])
    assert panel.cycle_config(1) is None
    assert loaded == ["a", "c", "b"]
