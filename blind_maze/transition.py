"""
State of a run and the transition function that advances it.

Every accepted move produces a new SimulationState; a rejected move (a bump
into an obstacle or the grid edge) hands back the very same state object
with ``accepted=False``. Rejection is an ordinary outcome, not an error.

Two agent flavours share this module:

- plain agents have no facing and move in absolute Directions;
- facing-aware agents carry a Direction they point in, receive the cells
  visible straight ahead, and act through Commands (AHEAD, TURN_LEFT,
  TURN_RIGHT). Moving in an absolute Direction also turns them to face it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple, Union

from blind_maze.geometry import (
    Command, Direction, Position, is_blocked, is_outside, step,
)
from blind_maze.grid import Cell, Grid


Move = Union[Direction, Command]


@dataclass(frozen=True)
class AgentState:
    """Where the agent stands and, for facing-aware agents, where it looks."""
    position: Position
    facing: Optional[Direction] = None

    def __post_init__(self):
        object.__setattr__(self, "position", Position(*self.position))


@dataclass(frozen=True)
class SimulationState:
    """The shared read-only grid plus the single agent state."""
    grid: Grid
    agent: AgentState

    @property
    def position(self) -> Position:
        return self.agent.position


@dataclass(frozen=True)
class Observation:
    """
    Everything a controller is shown on one tick.

    ``ahead`` lists the cells in the facing direction, nearest first, up to
    and including the first obstacle; it is empty for agents without a
    facing and for agents facing the grid edge. ``neighbors`` maps each
    direction to the adjacent cell, or None where the grid ends.
    """
    position: Position
    facing: Optional[Direction]
    here: Cell
    ahead: Tuple[Cell, ...] = ()
    neighbors: Dict[Direction, Optional[Cell]] = field(default_factory=dict)

    @property
    def at_goal(self) -> bool:
        return self.here == Cell.GOAL


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def apply_move(state: SimulationState,
               direction: Direction) -> Tuple[SimulationState, bool]:
    """Move one cell in ``direction`` unless the edge or an obstacle is in the way."""
    candidate = step(state.agent.position, direction)
    if is_outside(candidate, state.grid) or is_blocked(candidate, state.grid):
        return state, False

    facing = direction if state.agent.facing is not None else None
    return replace(state, agent=AgentState(candidate, facing)), True


def apply_command(state: SimulationState,
                  command: Command) -> Tuple[SimulationState, bool]:
    """Apply a relative command. Turns are always accepted."""
    facing = state.agent.facing
    if facing is None:
        raise ValueError("commands need a facing-aware agent")

    if command == Command.AHEAD:
        return apply_move(state, facing)
    if command == Command.TURN_LEFT:
        new_facing = facing.turned_left()
    elif command == Command.TURN_RIGHT:
        new_facing = facing.turned_right()
    else:
        raise ValueError(f"unknown command {command!r}")

    agent = AgentState(state.agent.position, new_facing)
    return replace(state, agent=agent), True


def transition(state: SimulationState, move: Move) -> Tuple[SimulationState, bool]:
    """Dispatch an absolute Direction or a relative Command."""
    if isinstance(move, Direction):
        return apply_move(state, move)
    return apply_command(state, Command(move))


def is_goal_reached(state: SimulationState) -> bool:
    return state.grid.cell_at(state.agent.position) == Cell.GOAL


# ---------------------------------------------------------------------------
# Sensing
# ---------------------------------------------------------------------------

def look_ahead(state: SimulationState) -> Tuple[Cell, ...]:
    """Cells visible in the facing direction, stopping at the first obstacle."""
    facing = state.agent.facing
    if facing is None:
        return ()

    seen = []
    pos = step(state.agent.position, facing)
    while not is_outside(pos, state.grid):
        cell = state.grid.cell_at(pos)
        seen.append(cell)
        if cell == Cell.OBSTACLE:
            break
        pos = step(pos, facing)
    return tuple(seen)


def observe(state: SimulationState) -> Observation:
    grid = state.grid
    here = state.agent.position
    neighbors: Dict[Direction, Optional[Cell]] = {}
    for direction in Direction.all():
        pos = step(here, direction)
        neighbors[direction] = None if is_outside(pos, grid) else grid.cell_at(pos)

    return Observation(
        position=here,
        facing=state.agent.facing,
        here=grid.cell_at(here),
        ahead=look_ahead(state),
        neighbors=neighbors,
    )
