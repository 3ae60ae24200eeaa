"""
Demo: blind agents solving random mazes.

Shows both explorers on the same seeded maze:
- the backtracking explorer moves in absolute directions and can feel the
  four neighbouring cells;
- the vision explorer has a facing, only sees straight ahead and has to
  turn to look around.

The grid printed here is just a view of the simulation state; neither
controller ever sees it.
"""

import logging

from blind_maze import (
    BacktrackingExplorer, MazeConfig, Simulation, SimulationState, VisionExplorer,
)
from blind_maze.geometry import Direction

AGENT_SYMBOLS = {
    None: "A",
    Direction.UP: "^",
    Direction.RIGHT: ">",
    Direction.DOWN: "v",
    Direction.LEFT: "<",
}


def render(state: SimulationState) -> str:
    """ASCII rendering of the grid with the agent drawn on top."""
    lines = []
    for r, row in enumerate(state.grid.to_strings()):
        if r == state.position.row:
            col = state.position.col
            row = row[:col] + AGENT_SYMBOLS[state.agent.facing] + row[col + 1:]
        lines.append(" ".join(row))
    return "\n".join(lines)


def run_level(title: str, config: MazeConfig, controller) -> None:
    print(f"\n--- {title} ---\n")
    sim = Simulation.from_config(config, controller)
    print("Start:")
    print(render(sim.state))
    print()

    result = sim.run(verbose=True)
    print()
    print("End:")
    print(render(result.final_state))
    print()
    print(result.summary())


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print("=" * 60)
    print("  Blind Maze — Exploring without a map")
    print("=" * 60)

    run_level("Backtracking explorer",
              MazeConfig(seed=42), BacktrackingExplorer())
    run_level("Vision explorer",
              MazeConfig(seed=42, facing_aware=True), VisionExplorer())
    run_level("Vision explorer, cluttered 15x10 maze",
              MazeConfig(width=15, height=10, obstacle_count=40,
                         seed=7, facing_aware=True, max_ticks=2000),
              VisionExplorer())


if __name__ == "__main__":
    main()
