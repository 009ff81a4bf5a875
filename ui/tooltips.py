"""Hover boxes: slider help for the frame panel and per-cell readouts over the tissue view."""

import pygame
from typing import Optional

TOOLTIP_BG = (28, 28, 32)
TOOLTIP_BORDER = (60, 60, 68)
TOOLTIP_TEXT = (240, 240, 235)
TOOLTIP_MINMAX = (150, 150, 148)
TOOLTIP_MAX_WIDTH = 220
TOOLTIP_PADDING = 6
TOOLTIP_OFFSET_Y = 8
TOOLTIP_DESC_MINMAX_GAP = 4

# slider key -> (what it controls, what its ends mean)
PARAM_TOOLTIPS = {
    "frame": (
        "Which retained snapshot is shown. Frames are kept every save_each steps, starting with the "
        "initial state at step 0. While Live is on the slider follows the newest frame.",
        "Min = initial state; max = latest retained step.",
    ),
    "max_auxin": (
        "Auxin level drawn in the darkest color. Cells at or above it saturate; the scale only affects "
        "display, not the simulation.",
        "Min = small differences visible; max = only strong accumulation shows.",
    ),
    "steps_per_frame": (
        "Euler steps computed per displayed frame while running.",
        "Min = slow, smooth progress; max = fast progress.",
    ),
}

# (text, font, color, gap above)
_Line = tuple[str, pygame.font.Font, tuple[int, int, int], int]


def wrap_tooltip_text(text: str, font: pygame.font.Font, max_width: int) -> list[str]:
    words = text.split()
    lines = []
    current: list[str] = []
    for word in words:
        w, _ = font.size(" ".join(current + [word]))
        if current and w > max_width:
            lines.append(" ".join(current))
            current = [word]
        else:
            current.append(word)
    if current:
        lines.append(" ".join(current))
    return lines


def _place_box(surface: pygame.Surface, mouse_pos: tuple[int, int], box_w: int, box_h: int) -> pygame.Rect:
    """Below-right of the cursor, flipped to the other side when it would leave the surface."""
    mx, my = mouse_pos
    sw, sh = surface.get_size()
    tx = mx + 12 if mx + 12 + box_w <= sw else mx - box_w - 12
    ty = my + TOOLTIP_OFFSET_Y if my + TOOLTIP_OFFSET_Y + box_h <= sh else my - box_h - TOOLTIP_OFFSET_Y
    return pygame.Rect(max(0, min(tx, sw - box_w)), max(0, min(ty, sh - box_h)), box_w, box_h)


def _draw_box(surface: pygame.Surface, lines: list[_Line], mouse_pos: tuple[int, int]) -> None:
    box_w = max(font.size(text)[0] for text, font, _, _ in lines) + 2 * TOOLTIP_PADDING
    box_h = sum(font.get_height() + gap for _, font, _, gap in lines) + 2 * TOOLTIP_PADDING
    box = _place_box(surface, mouse_pos, box_w, box_h)
    pygame.draw.rect(surface, TOOLTIP_BG, box)
    pygame.draw.rect(surface, TOOLTIP_BORDER, box, 1)
    y = box.y + TOOLTIP_PADDING
    for text, font, color, gap in lines:
        y += gap
        surface.blit(font.render(text, True, color), (box.x + TOOLTIP_PADDING, y))
        y += font.get_height()


def draw_tooltip(
    surface: pygame.Surface,
    font: pygame.font.Font,
    small_font: pygame.font.Font,
    tooltip_raw: Optional[tuple[str, Optional[str]] | str],
    mouse_pos: tuple[int, int],
) -> None:
    """Wrapped description, then the min/max hint in the small font."""
    if not tooltip_raw:
        return
    if isinstance(tooltip_raw, tuple):
        desc, min_max = tooltip_raw[0], tooltip_raw[1] if len(tooltip_raw) > 1 else None
    else:
        desc, min_max = tooltip_raw, None
    if not desc:
        return
    lines: list[_Line] = [(t, font, TOOLTIP_TEXT, 0) for t in wrap_tooltip_text(desc, font, TOOLTIP_MAX_WIDTH)]
    if min_max:
        hint = wrap_tooltip_text(min_max, small_font, TOOLTIP_MAX_WIDTH)
        lines += [(t, small_font, TOOLTIP_MINMAX, TOOLTIP_DESC_MINMAX_GAP if k == 0 else 0) for k, t in enumerate(hint)]
    _draw_box(surface, lines, mouse_pos)


def draw_lines(
    surface: pygame.Surface, font: pygame.font.Font, lines: list[str], mouse_pos: tuple[int, int]
) -> None:
    """Unwrapped multi-line box, e.g. cell hover info."""
    if lines:
        _draw_box(surface, [(t, font, TOOLTIP_TEXT, 0) for t in lines], mouse_pos)
