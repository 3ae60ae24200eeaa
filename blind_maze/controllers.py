"""
Controllers: strategies that pick the agent's next move, one tick at a time.

A controller never sees the map. Each tick it receives the agent state and
an Observation of the immediate surroundings, and returns either a move or
None when it has nothing left to try. Whatever memory it needs lives inside
the controller instance and persists for the whole run.

The two explorers are depth-first searches driven step by step:

    visit cell → pick an unvisited open neighbour → push, move there
    dead end   → pop the last direction → move back the way we came
    empty stack with nothing left → the reachable region is exhausted

Replacing recursion with an explicit stack is what lets the simulation call
the controller once per tick instead of running the search to completion.
"""

from __future__ import annotations

import abc
import random
from typing import Dict, List, Optional, Set

from blind_maze.geometry import Command, Direction, Position, step, turn_toward
from blind_maze.grid import Cell
from blind_maze.transition import AgentState, Move, Observation


class Controller(abc.ABC):
    """Interface every strategy plugged into a Simulation must satisfy."""

    #: Whether the controller issues Commands and needs a facing agent.
    needs_facing: bool = False

    @abc.abstractmethod
    def next_move(self, agent: AgentState,
                  observation: Observation) -> Optional[Move]:
        """Return the move for this tick, or None when out of options."""

    def reset(self) -> None:
        """Forget everything learned so far."""


# ---------------------------------------------------------------------------
# Depth-first explorer for agents without a facing
# ---------------------------------------------------------------------------

class BacktrackingExplorer(Controller):
    """
    Blind depth-first maze solver moving in absolute directions.

    Candidate neighbours are tried in the fixed order UP, DOWN, LEFT, RIGHT.
    A neighbour is a candidate when it is inside the grid, not an obstacle
    and not yet visited. With no candidate the explorer retreats along the
    inverse of its most recent forward move; with an empty stack it gives up.
    """

    def __init__(self):
        self._visited: Set[Position] = set()
        self._stack: List[Direction] = []
        self.exhausted = False

    @property
    def visited(self) -> Set[Position]:
        return set(self._visited)

    @property
    def stack(self) -> List[Direction]:
        return list(self._stack)

    def reset(self) -> None:
        self._visited.clear()
        self._stack.clear()
        self.exhausted = False

    def mark_visited(self, position: Position) -> None:
        self._visited.add(Position(*position))

    def next_move(self, agent: AgentState,
                  observation: Observation) -> Optional[Direction]:
        if observation.at_goal:
            return None

        here = agent.position
        self.mark_visited(here)

        for direction in Direction.priority():
            cell = observation.neighbors.get(direction)
            if cell is None or cell == Cell.OBSTACLE:
                continue
            if step(here, direction) in self._visited:
                continue
            self._stack.append(direction)
            return direction

        if not self._stack:
            self.exhausted = True
            return None
        return self._stack.pop().inverse()


# ---------------------------------------------------------------------------
# Depth-first explorer that only sees straight ahead
# ---------------------------------------------------------------------------

class VisionExplorer(Controller):
    """
    Depth-first explorer for a facing agent that only sees what is ahead.

    The agent cannot inspect a neighbour without facing it, so each cell
    keeps a record of the directions already examined there. Directions are
    examined in the order ahead, left, right, back relative to the current
    facing. An empty view or an obstacle as the first visible cell means the
    way is shut and the agent turns instead of advancing.

    Retreating is a two-phase affair: turn until facing the inverse of the
    popped direction, then step AHEAD.
    """

    needs_facing = True

    def __init__(self):
        self._visited: Set[Position] = set()
        self._stack: List[Direction] = []
        self._examined: Dict[Position, Set[Direction]] = {}
        self._retreat: Optional[Direction] = None
        self.exhausted = False

    @property
    def visited(self) -> Set[Position]:
        return set(self._visited)

    @property
    def stack(self) -> List[Direction]:
        return list(self._stack)

    def reset(self) -> None:
        self._visited.clear()
        self._stack.clear()
        self._examined.clear()
        self._retreat = None
        self.exhausted = False

    def next_move(self, agent: AgentState,
                  observation: Observation) -> Optional[Command]:
        if observation.at_goal:
            return None
        facing = agent.facing
        if facing is None:
            raise ValueError("VisionExplorer needs an agent with a facing")

        here = agent.position
        self._visited.add(here)

        if self._retreat is not None:
            if facing == self._retreat:
                self._retreat = None
                return Command.AHEAD
            return turn_toward(facing, self._retreat)

        examined = self._examined.setdefault(here, set())
        if facing not in examined:
            examined.add(facing)
            target = step(here, facing)
            if _way_open(observation.ahead) and target not in self._visited:
                self._stack.append(facing)
                # No need to look back at the cell we came from.
                self._examined.setdefault(target, set()).add(facing.inverse())
                return Command.AHEAD

        for direction in (facing.turned_left(), facing.turned_right(),
                          facing.inverse()):
            if direction not in examined:
                return turn_toward(facing, direction)

        if not self._stack:
            self.exhausted = True
            return None

        back = self._stack.pop().inverse()
        if facing == back:
            return Command.AHEAD
        self._retreat = back
        return turn_toward(facing, back)


def _way_open(ahead) -> bool:
    return len(ahead) > 0 and ahead[0] != Cell.OBSTACLE


# ---------------------------------------------------------------------------
# Simple strategies
# ---------------------------------------------------------------------------

class ScanningRunner(Controller):
    """
    Starter strategy: walk ahead until blocked, then turn left.

    It keeps no map and can circle forever, so it only ever stops on the
    goal. Handy as a baseline against the explorers.
    """

    needs_facing = True

    def __init__(self):
        self.visited: Set[Position] = set()

    def reset(self) -> None:
        self.visited.clear()

    def next_move(self, agent: AgentState,
                  observation: Observation) -> Optional[Command]:
        if observation.at_goal:
            return None
        self.visited.add(agent.position)
        if not _way_open(observation.ahead):
            return Command.TURN_LEFT
        return Command.AHEAD


class RandomWalker(Controller):
    """Picks a uniformly random direction every tick, walls or not."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = random.Random(seed)

    def reset(self) -> None:
        self.rng = random.Random(self.seed)

    def next_move(self, agent: AgentState,
                  observation: Observation) -> Optional[Direction]:
        if observation.at_goal:
            return None
        return self.rng.choice(Direction.all())
