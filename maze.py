"""Read a maze from delimited text: one row per line, 0 = wall, nonzero (usually -1) = open."""

import logging
from pathlib import Path

import numpy as np

from tissue.graph import as_maze
from tissue.errors import InvalidGridError

MAZE_DIR = Path(__file__).resolve().parent / "mazes"

logger = logging.getLogger(__name__)


def load_maze(path: Path | str, delimiter: str = ",") -> np.ndarray:
    p = Path(path)
    if not p.is_absolute() and not p.exists():
        p = MAZE_DIR / p
    try:
        arr = np.loadtxt(p, delimiter=delimiter, dtype=np.float64, ndmin=2)
    except ValueError as e:
        raise InvalidGridError(f"{p}: {e}") from e
    maze = as_maze(arr)
    logger.info("Loaded maze %s (%d x %d)", p.name, *maze.shape)
    return maze


def list_mazes() -> list[str]:
    if not MAZE_DIR.exists():
        return []
    return sorted(f.name for f in MAZE_DIR.glob("*.csv"))
