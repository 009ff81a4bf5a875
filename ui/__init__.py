"""UI: tissue view and frame panel."""

from ui.tissue_view import draw_snapshot, cell_at, describe_cell
from ui.panel import FramePanel
from ui.colors import auxin_to_rgb, membrane_to_rgb

__all__ = ["draw_snapshot", "cell_at", "describe_cell", "FramePanel", "auxin_to_rgb", "membrane_to_rgb"]
