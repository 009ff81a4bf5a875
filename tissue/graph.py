"""
Maze grid -> directed cell graph. One cell per open tile, ids 1..N in row-major scan
order. Each pair of 4-adjacent open tiles gives two membranes (i->j and j->i).
Edges are stored as parallel arrays sorted by source cell (CSR offsets per cell).
"""

import logging

import numpy as np

from tissue.constants import CARDINAL_OFFSETS, WALL
from tissue.errors import InvalidGridError, UnknownEdgeError

logger = logging.getLogger(__name__)


def as_maze(maze) -> np.ndarray:
    """Validate a grid of tile ids and return it as a 2D int64 array (a copy)."""
    try:
        arr = np.array(maze)
    except ValueError as e:  # ragged nested sequences
        raise InvalidGridError(f"grid is not rectangular: {e}") from e
    if arr.dtype == object:
        raise InvalidGridError("grid is not rectangular")
    if arr.ndim != 2:
        raise InvalidGridError(f"grid must be 2D, got {arr.ndim}D")
    if arr.size == 0:
        raise InvalidGridError("grid is empty")
    if arr.dtype.kind in "iub":
        return arr.astype(np.int64)
    if arr.dtype.kind == "f":
        if not np.all(np.isfinite(arr)) or not np.all(arr == np.round(arr)):
            raise InvalidGridError("tile ids must be integers (0 = wall, nonzero = open)")
        return arr.astype(np.int64)
    raise InvalidGridError(f"tile ids must be integers, got dtype {arr.dtype}")


class CellGraph:
    """Immutable topology. Cell ids are 1-based; array index = id - 1."""

    __slots__ = (
        "shape", "cell_index", "positions", "edge_src", "edge_dst", "edge_reverse",
        "offsets", "_edge_lookup",
    )

    def __init__(
        self,
        shape: tuple[int, int],
        cell_index: np.ndarray,
        positions: np.ndarray,
        edge_src: np.ndarray,
        edge_dst: np.ndarray,
    ) -> None:
        self.shape = shape
        # (rows, cols) -> cell id, 0 on walls
        self.cell_index = cell_index
        self.positions = positions
        self.edge_src = edge_src
        self.edge_dst = edge_dst
        self._edge_lookup = {
            (int(s) + 1, int(d) + 1): e for e, (s, d) in enumerate(zip(edge_src, edge_dst))
        }
        self.edge_reverse = np.array(
            [self._edge_lookup[(int(d) + 1, int(s) + 1)] for s, d in zip(edge_src, edge_dst)],
            dtype=np.int64,
        )
        counts = np.bincount(edge_src, minlength=len(positions))
        self.offsets = np.concatenate(([0], np.cumsum(counts))).astype(np.int64)
        for arr in (self.cell_index, self.positions, self.edge_src, self.edge_dst,
                    self.edge_reverse, self.offsets):
            arr.flags.writeable = False

    @property
    def n_cells(self) -> int:
        return len(self.positions)

    @property
    def n_edges(self) -> int:
        return len(self.edge_src)

    def cell_ids(self) -> range:
        return range(1, self.n_cells + 1)

    def _check_cell(self, cell_id: int) -> int:
        if not 1 <= cell_id <= self.n_cells:
            raise KeyError(f"no cell with id {cell_id}")
        return cell_id - 1

    def position(self, cell_id: int) -> tuple[int, int]:
        r, c = self.positions[self._check_cell(cell_id)]
        return int(r), int(c)

    def neighbors(self, cell_id: int) -> list[int]:
        k = self._check_cell(cell_id)
        lo, hi = self.offsets[k], self.offsets[k + 1]
        return [int(d) + 1 for d in self.edge_dst[lo:hi]]

    def degree(self, cell_id: int) -> int:
        k = self._check_cell(cell_id)
        return int(self.offsets[k + 1] - self.offsets[k])

    def has_edge(self, i: int, j: int) -> bool:
        return (i, j) in self._edge_lookup

    def edge_index(self, i: int, j: int) -> int:
        try:
            return self._edge_lookup[(i, j)]
        except KeyError:
            raise UnknownEdgeError(i, j) from None

    def edges(self) -> list[tuple[int, int]]:
        """All directed edges (i, j) as 1-based cell ids, grouped by source cell."""
        return [(int(s) + 1, int(d) + 1) for s, d in zip(self.edge_src, self.edge_dst)]


def build_graph(maze) -> CellGraph:
    """Scan open tiles row-major, number them, and link 4-adjacent open tiles both ways."""
    grid = as_maze(maze)
    nr, nc = grid.shape
    is_open = grid != WALL
    cell_index = np.zeros(grid.shape, dtype=np.int64)
    positions = np.argwhere(is_open)  # row-major order
    cell_index[is_open] = np.arange(1, len(positions) + 1)

    src: list[int] = []
    dst: list[int] = []
    for k, (r, c) in enumerate(positions):
        for dr, dc in CARDINAL_OFFSETS:
            rr, cc = r + dr, c + dc
            if 0 <= rr < nr and 0 <= cc < nc and is_open[rr, cc]:
                src.append(k)
                dst.append(int(cell_index[rr, cc]) - 1)

    graph = CellGraph(
        (int(nr), int(nc)),
        cell_index,
        positions.astype(np.int64).reshape(-1, 2),
        np.array(src, dtype=np.int64),
        np.array(dst, dtype=np.int64),
    )
    logger.info("Built cell graph: %d cells, %d membranes from %dx%d grid",
                graph.n_cells, graph.n_edges, nr, nc)
    return graph
