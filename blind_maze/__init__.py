"""
Blind Maze: solving a grid maze one tick at a time without seeing the map.

An agent sits in a fixed rectangular grid of open cells, obstacles and a
single goal. A controller steers it using only what the agent can sense
locally, and a simulation driver applies the chosen moves through a
transition function that rejects bumps into walls and the grid edge.
"""

from blind_maze.geometry import Command, Direction, Position, inverse, step
from blind_maze.grid import Cell, Grid, OutOfBounds, build_grid, generate
from blind_maze.transition import (
    AgentState, Observation, SimulationState,
    apply_command, apply_move, is_goal_reached, observe, transition,
)
from blind_maze.controllers import (
    BacktrackingExplorer, Controller, RandomWalker, ScanningRunner, VisionExplorer,
)
from blind_maze.simulation import (
    MazeConfig, RunResult, RunStatus, Simulation, StepResult, StrategyFault,
)

__version__ = "0.1.0"
__all__ = [
    "Command",
    "Direction",
    "Position",
    "inverse",
    "step",
    "Cell",
    "Grid",
    "OutOfBounds",
    "build_grid",
    "generate",
    "AgentState",
    "Observation",
    "SimulationState",
    "apply_command",
    "apply_move",
    "is_goal_reached",
    "observe",
    "transition",
    "BacktrackingExplorer",
    "Controller",
    "RandomWalker",
    "ScanningRunner",
    "VisionExplorer",
    "MazeConfig",
    "RunResult",
    "RunStatus",
    "Simulation",
    "StepResult",
    "StrategyFault",
]
