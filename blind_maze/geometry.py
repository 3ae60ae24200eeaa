"""
Positions, compass directions and the commands of the facing-aware agent.

Rows grow downwards and columns grow to the right, so UP decreases the row
and LEFT decreases the column. Nothing in here checks bounds: a Position
produced by step() may lie outside the grid and must be validated with
is_outside() before it is allowed to become agent state.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Tuple

if TYPE_CHECKING:
    from blind_maze.grid import Grid


# ---------------------------------------------------------------------------
# Directions and commands
# ---------------------------------------------------------------------------

class Direction(IntEnum):
    """The four compass directions, numbered clockwise."""
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    def delta(self) -> Tuple[int, int]:
        """Row, col displacement for one step in this direction."""
        return _DELTAS[self]

    def inverse(self) -> "Direction":
        return Direction((self + 2) % 4)

    def turned_left(self) -> "Direction":
        return Direction((self + 3) % 4)

    def turned_right(self) -> "Direction":
        return Direction((self + 1) % 4)

    @staticmethod
    def all() -> List["Direction"]:
        return [Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT]

    @staticmethod
    def priority() -> List["Direction"]:
        """Tie-break order used when several neighbours are candidates."""
        return [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]


_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
}


class Command(str, Enum):
    """Relative moves available to an agent that has a facing."""
    AHEAD = "ahead"
    TURN_LEFT = "turnLeft"
    TURN_RIGHT = "turnRight"


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------

class Position(NamedTuple):
    row: int
    col: int

    def __repr__(self) -> str:
        return f"({self.row}, {self.col})"


def step(position: Position, direction: Direction) -> Position:
    """The position one cell away in ``direction``. May be out of bounds."""
    dr, dc = direction.delta()
    return Position(position.row + dr, position.col + dc)


def inverse(direction: Direction) -> Direction:
    return direction.inverse()


def is_outside(position: Position, grid: "Grid") -> bool:
    row, col = position
    return row < 0 or row >= grid.height or col < 0 or col >= grid.width


def is_blocked(position: Position, grid: "Grid") -> bool:
    """True iff ``position`` is inside the grid and holds an obstacle."""
    if is_outside(position, grid):
        return False
    return grid.is_obstacle(position)


def turn_toward(facing: Direction, target: Direction) -> Optional[Command]:
    """
    The single turn that brings ``facing`` closer to ``target``.

    Returns None when already aligned. A reversal takes two turns and is
    always started with TURN_RIGHT.
    """
    if facing == target:
        return None
    if facing.turned_left() == target:
        return Command.TURN_LEFT
    return Command.TURN_RIGHT
