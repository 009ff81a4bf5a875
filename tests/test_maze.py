import numpy as np
import pytest

from maze import MAZE_DIR, list_mazes, load_maze
from tissue import InvalidGridError, build_graph


def test_bundled_maze():
    grid = load_maze("maze.csv")
    assert grid.shape == (12, 12)
    assert set(np.unique(grid)) <= {0, -1}
    g = build_graph(grid)
    assert g.n_cells == np.count_nonzero(grid)
    assert "maze.csv" in list_mazes()


def test_load_from_path(tmp_path):
    p = tmp_path / "small.csv"
    p.write_text("-1,0,-1\n-1,-1,-1\n")
    grid = load_maze(p)
    assert grid.dtype == np.int64
    assert grid.tolist() == [[-1, 0, -1], [-1, -1, -1]]


def test_single_row_stays_2d(tmp_path):
    p = tmp_path / "row.csv"
    p.write_text("-1,-1,0,-1\n")
    assert load_maze(p).shape == (1, 4)


def test_other_delimiter(tmp_path):
    p = tmp_path / "tabs.tsv"
    p.write_text("-1\t0\n0\t-1\n")
    assert load_maze(p, delimiter="\t").tolist() == [[-1, 0], [0, -1]]


@pytest.mark.parametrize("text", ["-1,0\n-1\n", "-1,x\n0,0\n", "-1,0.5\n0,0\n"])
def test_bad_files(tmp_path, text):
    p = tmp_path / "bad.csv"
    p.write_text(text)
    with pytest.raises(InvalidGridError):
        load_maze(p)


def test_maze_dir_exists():
    assert (MAZE_DIR / "maze.csv").exists()
