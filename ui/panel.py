"""Right panel: frame slider over retained snapshots, color scale, run speed, play/pause, restart, saved configs."""

import pygame
from typing import Callable

import config
from ui import tooltips

FONT_SIZE = 16
TOOLTIP_FONT_SIZE = 19
TOOLTIP_SMALL_FONT_SIZE = 16
LABEL_COLOR = (200, 200, 200)
SLIDER_COLOR = (100, 100, 100)
KNOB_COLOR = (180, 180, 180)
BUTTON_COLOR = (60, 60, 60)
BUTTON_HOVER = (80, 80, 80)

MAX_AUXIN_RANGE = (1, 50)
STEPS_PER_FRAME_RANGE = (1, 200)


class FramePanel:
    """State: params dict; draw and handle events. Restart and Save callbacks."""

    def __init__(
        self,
        rect: pygame.Rect,
        initial: dict,
        on_save: Callable[[], None],
        on_restart: Callable[[], None],
    ) -> None:
        self.rect = rect
        self.params = {
            "frame": 0,
            "n_frames": 1,
            "live": True,
            "max_auxin": initial.get("max_auxin", 10.0),
            "steps_per_frame": initial.get("steps_per_frame", 20),
            "show_membranes": initial.get("show_membranes", True),
            "paused": True,
        }
        self.on_save = on_save
        self.on_restart = on_restart
        self.on_load_config = initial.get("on_load_config")
        self._selected_config: str | None = initial.get("selected_config")
        self._font = None
        self._slider_rects: dict = {}
        self._button_rects: dict = {}
        self._dragging: str | None = None
        self._tooltip_rects: dict[str, pygame.Rect] = {}
        self._hover_tooltip_text = None
        self._tooltip_font = None
        self._tooltip_small_font = None

    def _ensure_font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.Font(None, FONT_SIZE)
        return self._font

    def _ensure_tooltip_fonts(self) -> tuple[pygame.font.Font, pygame.font.Font]:
        if self._tooltip_font is None:
            self._tooltip_font = pygame.font.Font(None, TOOLTIP_FONT_SIZE)
            self._tooltip_small_font = pygame.font.Font(None, TOOLTIP_SMALL_FONT_SIZE)
        return self._tooltip_font, self._tooltip_small_font

    def get_params(self) -> dict:
        return self.params.copy()

    def set_frame_count(self, n_frames: int) -> None:
        """Called when the trajectory grows; keeps the selection in range and follows it when live."""
        self.params["n_frames"] = max(1, n_frames)
        if self.params["live"]:
            self.params["frame"] = self.params["n_frames"] - 1
        else:
            self.select_frame(self.params["frame"])

    def select_frame(self, k: int) -> int:
        self.params["frame"] = max(0, min(self.params["n_frames"] - 1, int(k)))
        return self.params["frame"]

    def draw(
        self,
        surface: pygame.Surface,
        step: int = 0,
        run_step: int = 0,
        n_steps: int = 0,
        n_cells: int = 0,
        n_membranes: int = 0,
        diverged_at: int | None = None,
    ) -> None:
        font = self._ensure_font()
        x, y = self.rect.x + 8, self.rect.y + 6
        line_h = 18
        gap = 4
        self._slider_rects.clear()
        self._button_rects.clear()
        self._tooltip_rects.clear()

        slider_w = self.rect.width - 16 - 60  # leave 60px for value text
        slider_h = 12

        for text in (
            f"Shown step: {step}",
            f"Computed: {run_step} / {n_steps}",
            f"Cells: {n_cells}   Membranes: {n_membranes}",
        ):
            surface.blit(font.render(text, True, LABEL_COLOR), (x, y))
            y += line_h
        if diverged_at is not None:
            surface.blit(font.render(f"Non-finite values since step {diverged_at}", True, (230, 90, 90)), (x, y))
            y += line_h
        y += gap

        n = self.params["n_frames"]
        sliders = (
            ("frame", "Frame", self.params["frame"], (0, n - 1), f"{self.params['frame'] + 1}/{n}"),
            ("max_auxin", "Max auxin", int(self.params["max_auxin"]), MAX_AUXIN_RANGE, f"{self.params['max_auxin']:g}"),
            ("steps_per_frame", "Steps per frame", self.params["steps_per_frame"], STEPS_PER_FRAME_RANGE,
             str(self.params["steps_per_frame"])),
        )
        for key, text, value, (lo, hi), shown in sliders:
            self._tooltip_rects[key] = pygame.Rect(x, y, self.rect.width - 16, line_h + slider_h + gap)
            surface.blit(font.render(text, True, LABEL_COLOR), (x, y))
            y += line_h
            sr = _draw_slider(surface, x, y, slider_w, slider_h, value, lo, hi)
            _draw_slider_value(surface, font, x + slider_w + 4, y, shown)
            self._slider_rects[key] = (sr, lo, hi)
            y += slider_h + gap

        # Toggles
        for key, text in (("live", "Live (follow newest frame)"), ("show_membranes", "Show membrane PINS")):
            box = pygame.Rect(x, y + 2, 14, 14)
            pygame.draw.rect(surface, KNOB_COLOR if self.params[key] else SLIDER_COLOR, box)
            pygame.draw.rect(surface, LABEL_COLOR, box, 1)
            surface.blit(font.render(text, True, LABEL_COLOR), (x + 18, y + 2))
            self._button_rects[key] = box.union(pygame.Rect(x, y, 18 + font.size(text)[0], 18))
            y += 18 + gap

        # Start / Pause / Resume and Restart (side by side)
        btn_h = 26
        pause_rect = pygame.Rect(x, y, 100, btn_h)
        color = BUTTON_HOVER if pause_rect.collidepoint(pygame.mouse.get_pos()) else BUTTON_COLOR
        pygame.draw.rect(surface, color, pause_rect)
        if run_step >= n_steps and n_steps > 0:
            text = "Finished"
        elif self.params["paused"]:
            text = "Start" if run_step == 0 else "Resume"
        else:
            text = "Pause"
        surface.blit(font.render(text, True, LABEL_COLOR), (pause_rect.x + 6, pause_rect.y + 4))
        self._button_rects["pause"] = pause_rect

        restart_rect = pygame.Rect(x + 104, y, 110, btn_h)
        color = BUTTON_HOVER if restart_rect.collidepoint(pygame.mouse.get_pos()) else BUTTON_COLOR
        pygame.draw.rect(surface, color, restart_rect)
        surface.blit(font.render("Restart", True, LABEL_COLOR), (restart_rect.x + 6, restart_rect.y + 4))
        self._button_rects["restart"] = restart_rect
        y += btn_h + gap * 2

        # Saved configs: step through them with < >, Save writes the shown one
        surface.blit(font.render("Config", True, LABEL_COLOR), (x, y))
        y += line_h
        name_rect = pygame.Rect(x, y, 150, btn_h)
        pygame.draw.rect(surface, SLIDER_COLOR, name_rect)
        shown = self._selected_config if self._selected_config is not None else "(unsaved)"
        surface.blit(font.render(shown[:22], True, LABEL_COLOR), (name_rect.x + 4, name_rect.y + 6))
        bx = name_rect.right + 4
        for key, text, w in (("prev_config", "<", 22), ("next_config", ">", 22), ("save", "Save", 56)):
            r = pygame.Rect(bx, y, w, btn_h)
            color = BUTTON_HOVER if r.collidepoint(pygame.mouse.get_pos()) else BUTTON_COLOR
            pygame.draw.rect(surface, color, r)
            surface.blit(font.render(text, True, LABEL_COLOR), (r.x + 6, r.y + 6))
            self._button_rects[key] = r
            bx = r.right + 4

    def update_hover_tooltip(self, pos: tuple[int, int]) -> None:
        self._hover_tooltip_text = None
        for key, r in self._tooltip_rects.items():
            if r.collidepoint(pos):
                self._hover_tooltip_text = tooltips.PARAM_TOOLTIPS.get(key)
                return

    def draw_tooltip(self, surface: pygame.Surface) -> None:
        tf, sf = self._ensure_tooltip_fonts()
        tooltips.draw_tooltip(surface, tf, sf, self._hover_tooltip_text, pygame.mouse.get_pos())

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Returns True if event was consumed."""
        if event.type == pygame.MOUSEBUTTONDOWN:
            return self._click(event.pos)
        if event.type == pygame.KEYDOWN:
            # Arrow keys step through frames, like dragging the slider one notch
            if event.key in (pygame.K_LEFT, pygame.K_RIGHT):
                self.params["live"] = False
                self.select_frame(self.params["frame"] + (1 if event.key == pygame.K_RIGHT else -1))
                return True
            if event.key == pygame.K_SPACE:
                self.params["paused"] = not self.params["paused"]
                return True
        elif event.type == pygame.MOUSEBUTTONUP:
            self._dragging = None
        elif event.type == pygame.MOUSEMOTION:
            self.update_hover_tooltip(event.pos)
            if self._dragging in self._slider_rects:
                sr, lo, hi = self._slider_rects[self._dragging]
                self._set_slider_value(self._dragging, event.pos, sr, lo, hi)
                return True
        return False

    def _click(self, pos: tuple[int, int]) -> bool:
        for key, (slider_rect, lo, hi) in self._slider_rects.items():
            if slider_rect.collidepoint(pos):
                self._dragging = key
                self._set_slider_value(key, pos, slider_rect, lo, hi)
                return True
        key = next((k for k, r in self._button_rects.items() if r.collidepoint(pos)), None)
        if key is None:
            return False
        if key == "pause":
            self.params["paused"] = not self.params["paused"]
        elif key == "restart":
            self.on_restart()
        elif key in ("live", "show_membranes"):
            self.params[key] = not self.params[key]
            if key == "live" and self.params["live"]:
                self.params["frame"] = self.params["n_frames"] - 1
        elif key in ("prev_config", "next_config"):
            self.cycle_config(-1 if key == "prev_config" else 1)
        elif key == "save":
            self.on_save()
        return True

    def cycle_config(self, delta: int) -> str | None:
        """Select and load the saved config delta places from the shown one (wrapping)."""
        names = config.list_configs()
        if not names:
            return None
        if self._selected_config in names:
            k = (names.index(self._selected_config) + delta) % len(names)
        else:
            k = 0 if delta > 0 else len(names) - 1
        self._selected_config = names[k]
        if self.on_load_config:
            self.on_load_config(names[k])
        return names[k]

    def apply_config(self, cfg: dict) -> None:
        """Load display settings from a config dict (e.g. after loading a saved config)."""
        self.params["max_auxin"] = cfg.get("max_auxin", self.params["max_auxin"])
        self.params["steps_per_frame"] = cfg.get("steps_per_frame", self.params["steps_per_frame"])
        self.params["show_membranes"] = cfg.get("show_membranes", self.params["show_membranes"])
        self.params["frame"] = 0
        self.params["n_frames"] = 1
        self.params["live"] = True
        self.params["paused"] = True

    @property
    def selected_config(self) -> str | None:
        return self._selected_config

    def set_selected_config(self, name: str) -> None:
        """Called after save so the config row shows the saved name."""
        self._selected_config = name

    def _set_slider_value(self, key: str, pos: tuple[int, int], slider_rect: pygame.Rect, lo: int, hi: int) -> None:
        t = (pos[0] - slider_rect.x) / max(1, slider_rect.width - 8)
        t = max(0, min(1, t))
        val = int(round(lo + t * (hi - lo)))
        if key == "frame":
            self.params["live"] = False
            self.select_frame(val)
        elif key == "max_auxin":
            self.params[key] = float(val)
        else:
            self.params[key] = val

    def display_config(self) -> dict:
        return {
            "max_auxin": self.params["max_auxin"],
            "steps_per_frame": self.params["steps_per_frame"],
            "show_membranes": self.params["show_membranes"],
        }


def _draw_slider(
    surface: pygame.Surface, x: int, y: int, w: int, h: int, value: int, vmin: int, vmax: int
) -> pygame.Rect:
    rect = pygame.Rect(x, y, w, h)
    pygame.draw.rect(surface, SLIDER_COLOR, rect)
    t = (value - vmin) / max(1, vmax - vmin)
    knob_x = x + 4 + int(t * (w - 8))
    pygame.draw.rect(surface, KNOB_COLOR, (knob_x, y, 8, h))
    return rect


def _draw_slider_value(
    surface: pygame.Surface, font: pygame.font.Font, x: int, y: int, value_str: str
) -> None:
    text = font.render(value_str, True, LABEL_COLOR)
    surface.blit(text, (x, y))
