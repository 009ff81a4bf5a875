"""
App shell: display and main loop. The integrator advances steps_per_frame Euler steps per
displayed frame while running; the panel's frame slider picks which retained snapshot is drawn.
Maze, tissue, UI, and config are wired here.
"""

import logging
import time

import pygame

import config
from maze import load_maze
from tissue import Integrator, Tissue
from ui import FramePanel, cell_at, describe_cell, draw_snapshot
from ui import tooltips

TITLE = "Auxin maze"
WIDTH, HEIGHT = 960, 640
BACKGROUND = (0, 0, 0)
VIEW_PANEL_WIDTH = 640  # left panel for the tissue

logger = logging.getLogger(__name__)


def build(cfg: dict) -> tuple[Tissue, Integrator]:
    maze = load_maze(cfg["maze"])
    tissue = config.tissue_from_config(maze, cfg)
    return tissue, config.integrator_from_config(tissue, cfg)


def run() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption(TITLE)
    clock = pygame.time.Clock()
    config.refresh_index()

    cfg = config.load_config()
    tissue, integrator = build(cfg)

    view_rect = pygame.Rect(0, 0, VIEW_PANEL_WIDTH, HEIGHT)
    panel_rect = pygame.Rect(VIEW_PANEL_WIDTH, 0, WIDTH - VIEW_PANEL_WIDTH, HEIGHT)

    def do_restart() -> None:
        nonlocal tissue, integrator
        logger.info("Restarting run")
        tissue, integrator = build(cfg)
        panel.set_frame_count(1)

    def save_current_config() -> None:
        nonlocal cfg
        name = panel.selected_config or time.strftime("run_%Y%m%d_%H%M%S")
        cfg = {**cfg, **panel.display_config()}
        config.save_config(cfg, name)
        panel.set_selected_config(config._sanitize_name(name))

    def load_config_callback(name: str) -> None:
        nonlocal cfg, tissue, integrator
        path = config.config_path(name)
        if not path.exists():
            logger.warning("Config %s no longer exists", name)
            return
        cfg = config.load_config(path)
        panel.apply_config(cfg)
        tissue, integrator = build(cfg)

    last = config.get_last_config()
    panel = FramePanel(
        panel_rect,
        {
            "max_auxin": cfg.get("max_auxin", 10.0),
            "steps_per_frame": cfg.get("steps_per_frame", 20),
            "show_membranes": cfg.get("show_membranes", True),
            "selected_config": last,
            "on_load_config": load_config_callback,
        },
        on_save=save_current_config,
        on_restart=do_restart,
    )
    hover_font = pygame.font.Font(None, tooltips.TOOLTIP_SMALL_FONT_SIZE)

    running = True
    while running:
        clock.tick(60)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break
            panel.handle_event(event)

        params = panel.get_params()
        if not params["paused"] and not integrator.done:
            # Cancellation only happens here, between steps.
            integrator.advance(max(1, params["steps_per_frame"]))
        panel.set_frame_count(len(integrator.trajectory))

        frame = integrator.trajectory[panel.params["frame"]] if len(integrator.trajectory) else None
        snapshot = frame.snapshot if frame is not None else tissue.snapshot()

        screen.fill(BACKGROUND)
        draw_snapshot(
            screen,
            view_rect,
            tissue,
            snapshot,
            max_auxin=params["max_auxin"],
            show_membranes=params["show_membranes"],
        )
        panel.draw(
            screen,
            step=frame.step if frame is not None else 0,
            run_step=integrator.step_count,
            n_steps=integrator.n_steps,
            n_cells=tissue.graph.n_cells,
            n_membranes=tissue.graph.n_edges,
            diverged_at=integrator.diverged_at,
        )
        panel.draw_tooltip(screen)
        hovered = cell_at(pygame.mouse.get_pos(), tissue, view_rect)
        if hovered is not None:
            tooltips.draw_lines(screen, hover_font, describe_cell(tissue, snapshot, hovered), pygame.mouse.get_pos())
        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    run()
