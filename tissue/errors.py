"""Errors raised at setup and lookup time. The integration loop itself raises nothing."""


class TissueError(Exception):
    """Base class for tissue model errors."""


class InvalidGridError(TissueError, ValueError):
    """Maze grid is empty, not rectangular, or holds non-integral tile ids."""


class UnknownEdgeError(TissueError, KeyError):
    """(i, j) is not a directed edge of the cell graph."""

    def __init__(self, i: int, j: int) -> None:
        super().__init__(i, j)
        self.i = i
        self.j = j

    def __str__(self) -> str:
        return f"no membrane from cell {self.i} to cell {self.j}"


class SetupError(TissueError):
    """Setup-only operation called after integration started, or conflicting roles."""


class DivergenceWarning(RuntimeWarning):
    """Non-finite auxin or PINS values appeared. Reported, never corrected."""
