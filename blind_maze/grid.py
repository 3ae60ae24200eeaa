"""
The maze terrain: a fixed-size rectangle of open, obstacle and goal cells.

A Grid is created once, at the start of a run, and is read-only from then
on. The backing numpy array is flagged non-writeable so that accidental
in-place edits fail loudly instead of silently changing the maze under a
running controller.

Random generation follows a simple policy: obstacles are dropped at
independent uniform positions over the whole grid, then the goal is dropped
the same way. Later writes overwrite earlier ones, so two obstacles landing
on one cell (or the goal landing on an obstacle) leave fewer obstacles than
requested. The goal is always written last, so there is always exactly one.
"""

from __future__ import annotations

import random
from enum import IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from blind_maze.geometry import Position


DEFAULT_WIDTH = 10
DEFAULT_HEIGHT = 7
DEFAULT_OBSTACLE_COUNT = 10


class Cell(IntEnum):
    """What occupies a grid cell."""
    OPEN = 0
    OBSTACLE = 1
    GOAL = 2

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @staticmethod
    def from_symbol(symbol: str) -> "Cell":
        try:
            return _FROM_SYMBOL[symbol]
        except KeyError:
            raise ValueError(f"unknown cell symbol {symbol!r}") from None


_SYMBOLS = {Cell.OPEN: ".", Cell.OBSTACLE: "O", Cell.GOAL: "X"}
_FROM_SYMBOL = {s: c for c, s in _SYMBOLS.items()}


class OutOfBounds(IndexError):
    """A read was attempted outside the grid extents."""

    def __init__(self, position: Tuple[int, int], width: int, height: int):
        self.position = position
        super().__init__(
            f"position {tuple(position)} outside {width}x{height} grid")


class Grid:
    """
    Immutable width x height cell array with exactly one goal.

    Indexing is (row, col); rows run 0..height-1 and columns 0..width-1.
    """

    def __init__(self, cells: np.ndarray):
        cells = np.array(cells, dtype=int)
        if cells.ndim != 2 or cells.size == 0:
            raise ValueError("grid must be a non-empty 2-D array")
        goals = np.argwhere(cells == Cell.GOAL)
        if len(goals) != 1:
            raise ValueError(f"grid must hold exactly one goal, found {len(goals)}")
        cells.setflags(write=False)
        self._cells = cells
        self._goal = Position(int(goals[0][0]), int(goals[0][1]))

    # --- construction -----------------------------------------------------

    @classmethod
    def from_strings(cls, rows: Sequence[str]) -> "Grid":
        """Build a grid from rows of '.', 'O' and 'X' symbols."""
        if not rows or len({len(r) for r in rows}) != 1:
            raise ValueError("rows must be non-empty and of equal length")
        return cls(np.array([[Cell.from_symbol(ch) for ch in r] for r in rows]))

    # --- queries ----------------------------------------------------------

    @property
    def width(self) -> int:
        return self._cells.shape[1]

    @property
    def height(self) -> int:
        return self._cells.shape[0]

    @property
    def goal(self) -> Position:
        return self._goal

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the backing array."""
        return self._cells

    @property
    def obstacle_count(self) -> int:
        return int(np.count_nonzero(self._cells == Cell.OBSTACLE))

    def in_bounds(self, position: Tuple[int, int]) -> bool:
        row, col = position
        return 0 <= row < self.height and 0 <= col < self.width

    def cell_at(self, position: Tuple[int, int]) -> Cell:
        if not self.in_bounds(position):
            raise OutOfBounds(position, self.width, self.height)
        return Cell(self._cells[position[0], position[1]])

    def is_obstacle(self, position: Tuple[int, int]) -> bool:
        return self.cell_at(position) == Cell.OBSTACLE

    def obstacles(self) -> List[Position]:
        return [Position(int(r), int(c))
                for r, c in np.argwhere(self._cells == Cell.OBSTACLE)]

    def open_positions(self) -> List[Position]:
        """Every position an agent may stand on (open cells and the goal)."""
        return [Position(int(r), int(c))
                for r, c in np.argwhere(self._cells != Cell.OBSTACLE)]

    def row(self, row: int) -> List[Cell]:
        return [Cell(v) for v in self._cells[row, :]]

    def column(self, col: int) -> List[Cell]:
        return [Cell(v) for v in self._cells[:, col]]

    def to_strings(self) -> List[str]:
        return ["".join(Cell(v).symbol for v in r) for r in self._cells]

    # --- equality ---------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Grid):
            return NotImplemented
        return np.array_equal(self._cells, other._cells)

    def __hash__(self) -> int:
        return hash(self._cells.tobytes()) ^ hash(self._cells.shape)

    def __repr__(self) -> str:
        return (f"Grid({self.width}x{self.height}, goal={self.goal}, "
                f"obstacles={self.obstacle_count})")


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def build_grid(width: int, height: int,
               obstacles: Iterable[Tuple[int, int]],
               goal: Tuple[int, int]) -> Grid:
    """Build a fixed layout. The goal overwrites an obstacle at the same cell."""
    _check_dimensions(width, height)
    cells = np.full((height, width), Cell.OPEN, dtype=int)
    for pos in obstacles:
        _check_inside(pos, width, height)
        cells[pos[0], pos[1]] = Cell.OBSTACLE
    _check_inside(goal, width, height)
    cells[goal[0], goal[1]] = Cell.GOAL
    return Grid(cells)


def random_position(width: int, height: int, rng: random.Random) -> Position:
    return Position(rng.randrange(height), rng.randrange(width))


def generate(width: int = DEFAULT_WIDTH,
             height: int = DEFAULT_HEIGHT,
             obstacle_count: int = DEFAULT_OBSTACLE_COUNT,
             rng: Optional[random.Random] = None) -> Grid:
    """
    Random maze with up to ``obstacle_count`` obstacles and one goal.

    Placements are drawn independently and may collide, so the effective
    obstacle count can be lower than requested.
    """
    _check_dimensions(width, height)
    if obstacle_count < 0:
        raise ValueError("obstacle_count must be non-negative")
    rng = rng or random.Random()

    obstacles = [random_position(width, height, rng) for _ in range(obstacle_count)]
    goal = random_position(width, height, rng)
    return build_grid(width, height, obstacles, goal)


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"grid dimensions must be positive, got {width}x{height}")


def _check_inside(pos: Tuple[int, int], width: int, height: int) -> None:
    if not (0 <= pos[0] < height and 0 <= pos[1] < width):
        raise OutOfBounds(pos, width, height)
