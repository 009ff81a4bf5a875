"""Left panel: one snapshot of the tissue. Cells as padded squares colored by auxin, membranes as bars."""

import pygame

from tissue import Role, Snapshot, Tissue
from ui.colors import (
    SINK_OUTLINE,
    SOURCE_OUTLINE,
    WALL_COLOR,
    auxin_to_rgb,
    membrane_to_rgb,
)

BORDER_COLOR = (80, 80, 80)
BORDER_PX = 1
CELL_PAD = 0.4  # half-width of a cell square, in tiles
MEMBRANE_THICKNESS = 0.12  # in tiles


def tile_size(shape: tuple[int, int], rect: pygame.Rect) -> tuple[float, float]:
    nr, nc = shape
    return rect.width / max(1, nc), rect.height / max(1, nr)


def cell_rect(position: tuple[int, int], shape: tuple[int, int], rect: pygame.Rect, pad: float = CELL_PAD) -> pygame.Rect:
    """Screen rect of the square drawn for the cell at grid (row, col)."""
    tw, th = tile_size(shape, rect)
    r, c = position
    cx = rect.x + (c + 0.5) * tw
    cy = rect.y + (r + 0.5) * th
    left, top = round(cx - pad * tw), round(cy - pad * th)
    return pygame.Rect(left, top, max(1, round(cx + pad * tw) - left), max(1, round(cy + pad * th) - top))


def membrane_rect(
    src: tuple[int, int],
    dst: tuple[int, int],
    shape: tuple[int, int],
    rect: pygame.Rect,
    pad: float = CELL_PAD,
    thickness: float = MEMBRANE_THICKNESS,
) -> pygame.Rect:
    """Bar along the side of src's square that faces dst."""
    box = cell_rect(src, shape, rect, pad)
    tw, th = tile_size(shape, rect)
    dr, dc = dst[0] - src[0], dst[1] - src[1]
    if dc:
        w = max(1, round(thickness * tw))
        x = box.right - w if dc > 0 else box.left
        return pygame.Rect(x, box.top, w, box.height)
    h = max(1, round(thickness * th))
    y = box.bottom - h if dr > 0 else box.top
    return pygame.Rect(box.left, y, box.width, h)


def draw_snapshot(
    surface: pygame.Surface,
    view_rect: pygame.Rect,
    tissue: Tissue,
    snapshot: Snapshot,
    max_auxin: float = 10.0,
    show_membranes: bool = True,
) -> None:
    graph = tissue.graph
    surface.fill(WALL_COLOR, view_rect)
    cell_rgb = auxin_to_rgb(snapshot.auxin, max_auxin)
    for k in range(graph.n_cells):
        r, g, b = (int(v) for v in cell_rgb[k])
        pygame.draw.rect(surface, (r, g, b), cell_rect(tuple(graph.positions[k]), graph.shape, view_rect))
    if show_membranes and graph.n_edges:
        edge_rgb = membrane_to_rgb(snapshot.membrane_pins, cell_rgb[graph.edge_src])
        for e in range(graph.n_edges):
            src = tuple(graph.positions[graph.edge_src[e]])
            dst = tuple(graph.positions[graph.edge_dst[e]])
            r, g, b = (int(v) for v in edge_rgb[e])
            pygame.draw.rect(surface, (r, g, b), membrane_rect(src, dst, graph.shape, view_rect))
    for cell_id, color in ((tissue.source, SOURCE_OUTLINE), (tissue.sink, SINK_OUTLINE)):
        if cell_id is not None:
            box = cell_rect(tissue.position(cell_id), graph.shape, view_rect).inflate(4, 4)
            pygame.draw.rect(surface, color, box, 2)
    pygame.draw.rect(surface, BORDER_COLOR, view_rect, BORDER_PX)


def cell_at(pos: tuple[int, int], tissue: Tissue, view_rect: pygame.Rect) -> int | None:
    """Cell id under a screen position, or None over walls and outside the view."""
    if not view_rect.collidepoint(pos):
        return None
    tw, th = tile_size(tissue.shape, view_rect)
    c = int((pos[0] - view_rect.x) / tw)
    r = int((pos[1] - view_rect.y) / th)
    nr, nc = tissue.shape
    if not (0 <= r < nr and 0 <= c < nc):
        return None
    cell_id = int(tissue.graph.cell_index[r, c])
    return cell_id or None


def describe_cell(tissue: Tissue, snapshot: Snapshot, cell_id: int) -> list[str]:
    """Hover text: position, role, auxin, cytoplasmic PINS and PINS per membrane."""
    role = tissue.role(cell_id)
    lines = [
        f"Cell {cell_id} at {tissue.position(cell_id)}" + ("" if role is Role.NORMAL else f" ({role.value})"),
        f"auxin {snapshot.auxin_of(cell_id):.4g}",
        f"PINS {snapshot.pins_of(cell_id):.4g}",
    ]
    for j in tissue.graph.neighbors(cell_id):
        lines.append(f"  -> {j}: {snapshot.membrane_pins_of(tissue.graph, cell_id, j):.4g}")
    return lines
