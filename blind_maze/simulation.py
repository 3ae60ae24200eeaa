"""
Simulation driver — owns the run and feeds the controller one tick at a time.

Each tick:

    observe state → controller.next_move → transition → replace state

The driver is the only place that holds the current SimulationState and the
only caller of the transition function. A run ends in one of two terminal
statuses: WON once the agent stands on the goal, EXHAUSTED once the
controller has no move left. Until then the driver stays IN_PROGRESS and a
caller may simply stop calling step() at any point between ticks.

A controller that raises is not allowed to take the simulation down with it:
the exception is logged, kept in ``faults`` and the tick counts as a tick
without a move.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from blind_maze.controllers import BacktrackingExplorer, Controller, VisionExplorer
from blind_maze.geometry import Direction, Position
from blind_maze.grid import (
    DEFAULT_HEIGHT, DEFAULT_OBSTACLE_COUNT, DEFAULT_WIDTH, Cell, Grid, generate,
)
from blind_maze.transition import (
    AgentState, Move, SimulationState, is_goal_reached, observe, transition,
)

logger = logging.getLogger(__name__)


@dataclass
class MazeConfig:
    """Configuration for building a random maze run."""
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    obstacle_count: int = DEFAULT_OBSTACLE_COUNT
    start: Optional[Tuple[int, int]] = None      # None = random open cell
    facing: Optional[Direction] = None           # Start facing for facing agents
    facing_aware: bool = False
    max_ticks: int = 500
    seed: Optional[int] = None


class RunStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    EXHAUSTED = "exhausted"


class StrategyFault(Exception):
    """A controller raised while choosing its move."""

    def __init__(self, tick: int, error: BaseException):
        self.tick = tick
        self.error = error
        super().__init__(f"tick {tick}: {type(error).__name__}: {error}")


@dataclass
class StepResult:
    """What happened on a single tick."""
    tick: int
    move: Optional[Move]
    accepted: bool
    status: RunStatus
    fault: Optional[StrategyFault] = None


@dataclass
class RunResult:
    """Result of driving a simulation until it stopped."""
    status: RunStatus
    ticks: int
    moves: int
    rejected: int
    path: List[Position]
    final_state: SimulationState
    faults: List[StrategyFault] = field(default_factory=list)

    @property
    def won(self) -> bool:
        return self.status == RunStatus.WON

    def summary(self) -> str:
        grid = self.final_state.grid
        lines = [
            "═" * 55,
            "  Blind Maze — Run Result",
            "═" * 55,
            f"  Status:            {self.status.value}",
            f"  Grid:              {grid.width}x{grid.height}, "
            f"{grid.obstacle_count} obstacles",
            f"  Goal:              {grid.goal}",
            f"  Final position:    {self.final_state.position}",
            f"  Ticks:             {self.ticks}",
            f"  Moves accepted:    {self.moves}",
            f"  Moves rejected:    {self.rejected}",
            f"  Cells visited:     {len(set(self.path))}",
            f"  Strategy faults:   {len(self.faults)}",
            "═" * 55,
        ]
        return "\n".join(lines)


class Simulation:
    """
    Drives one controller against one maze.

    The controller instance is kept for the whole run so its memory survives
    between ticks. Rejected moves are not retried: the controller is asked
    again on the next tick.
    """

    def __init__(self, state: SimulationState, controller: Controller,
                 max_ticks: int = 500):
        if controller.needs_facing and state.agent.facing is None:
            raise ValueError(
                f"{type(controller).__name__} needs an agent with a facing")
        self.controller = controller
        self.max_ticks = max_ticks
        self._state = state
        self.ticks = 0
        self.moves = 0
        self.rejected = 0
        self.path: List[Position] = [state.position]
        self.faults: List[StrategyFault] = []
        self.status = (RunStatus.WON if is_goal_reached(state)
                       else RunStatus.IN_PROGRESS)

    @classmethod
    def from_config(cls, config: MazeConfig,
                    controller: Optional[Controller] = None) -> "Simulation":
        """Generate a random maze and start position from ``config``."""
        rng = random.Random(config.seed)
        grid = generate(config.width, config.height, config.obstacle_count, rng)
        if controller is None:
            controller = (VisionExplorer() if config.facing_aware
                          else BacktrackingExplorer())
        facing_aware = config.facing_aware or controller.needs_facing
        state = initial_state(grid, rng, config.start,
                              config.facing, facing_aware)
        return cls(state, controller, config.max_ticks)

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def finished(self) -> bool:
        return self.status != RunStatus.IN_PROGRESS

    def step(self) -> StepResult:
        """Advance the run by one tick."""
        if self.finished:
            return StepResult(self.ticks, None, False, self.status)

        self.ticks += 1
        try:
            move = self.controller.next_move(self._state.agent,
                                             observe(self._state))
            if move is not None:
                new_state, accepted = transition(self._state, move)
        except Exception as exc:
            # Also covers moves the transition function cannot interpret.
            fault = StrategyFault(self.ticks, exc)
            self.faults.append(fault)
            logger.warning("controller %s failed: %s",
                           type(self.controller).__name__, fault,
                           exc_info=exc)
            return StepResult(self.ticks, None, False, self.status, fault)

        if move is None:
            self.status = RunStatus.EXHAUSTED
            logger.info("exploration exhausted after %d ticks at %s",
                        self.ticks, self._state.position)
            return StepResult(self.ticks, None, False, self.status)

        if accepted:
            self._state = new_state
            self.moves += 1
            if new_state.position != self.path[-1]:
                self.path.append(new_state.position)
        else:
            self.rejected += 1
        logger.debug("tick %d: %s -> %s (%s)", self.ticks, _name(move),
                     self._state.agent, "ok" if accepted else "rejected")

        if is_goal_reached(self._state):
            self.status = RunStatus.WON
            logger.info("goal %s reached after %d ticks",
                        self._state.grid.goal, self.ticks)
        return StepResult(self.ticks, move, accepted, self.status)

    def run(self, max_ticks: Optional[int] = None,
            verbose: bool = False) -> RunResult:
        """Step until the run is won, exhausted, or ``max_ticks`` more ticks pass."""
        if max_ticks is None:
            max_ticks = self.max_ticks
        for _ in range(max_ticks):
            if self.finished:
                break
            result = self.step()
            if verbose and (result.tick % 10 == 0 or self.finished):
                print(f"  [tick {result.tick:4d}] "
                      f"pos={self._state.position}  "
                      f"moves={self.moves:3d}  "
                      f"rejected={self.rejected:3d}  "
                      f"status={self.status.value}")
        return self.result()

    def result(self) -> RunResult:
        return RunResult(
            status=self.status,
            ticks=self.ticks,
            moves=self.moves,
            rejected=self.rejected,
            path=list(self.path),
            final_state=self._state,
            faults=list(self.faults),
        )


def initial_state(grid: Grid, rng: random.Random,
                  start: Optional[Tuple[int, int]] = None,
                  facing: Optional[Direction] = None,
                  facing_aware: bool = False) -> SimulationState:
    """
    Place the agent on ``grid``.

    A missing start is drawn uniformly from the cells the agent may stand
    on; it can coincide with the goal. Facing agents without an explicit
    facing get a random one.
    """
    if start is None:
        start = rng.choice(grid.open_positions())
    elif not grid.in_bounds(start):
        raise ValueError(f"start {tuple(start)} is outside the grid")
    elif grid.cell_at(start) == Cell.OBSTACLE:
        raise ValueError(f"start {tuple(start)} is on an obstacle")

    if facing_aware and facing is None:
        facing = rng.choice(Direction.all())
    return SimulationState(grid, AgentState(Position(*start), facing))


def _name(move: Move) -> str:
    return move.name if isinstance(move, Enum) else str(move)
