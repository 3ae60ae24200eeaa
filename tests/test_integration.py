"""
End-to-end runs on random mazes.

Both explorers must end every run: WON exactly when the goal is reachable
from the start, EXHAUSTED exactly when it is not.
"""

import unittest
from collections import deque

from blind_maze.controllers import BacktrackingExplorer, VisionExplorer
from blind_maze.geometry import Direction, step
from blind_maze.grid import Cell
from blind_maze.simulation import MazeConfig, RunStatus, Simulation


def reachable(grid, start):
    """Breadth-first flood fill over non-obstacle cells."""
    seen = {start}
    queue = deque([start])
    while queue:
        pos = queue.popleft()
        for d in Direction.all():
            nxt = step(pos, d)
            if (grid.in_bounds(nxt) and nxt not in seen
                    and grid.cell_at(nxt) != Cell.OBSTACLE):
                seen.add(nxt)
                queue.append(nxt)
    return seen


class TestRandomMazes(unittest.TestCase):
    """Explorers on seeded 10x7 mazes."""

    SEEDS = range(40)

    def _check(self, config, controller_factory, tick_budget):
        sim = Simulation.from_config(config, controller_factory())
        start = sim.state.position
        component = reachable(sim.state.grid, start)
        result = sim.run(max_ticks=tick_budget)

        self.assertNotEqual(result.status, RunStatus.IN_PROGRESS,
                            f"seed {config.seed} did not terminate")
        self.assertEqual(result.rejected, 0)
        self.assertEqual(result.faults, [])
        if sim.state.grid.goal in component:
            self.assertEqual(result.status, RunStatus.WON, f"seed {config.seed}")
        else:
            self.assertEqual(result.status, RunStatus.EXHAUSTED, f"seed {config.seed}")
            self.assertEqual(sim.controller.visited, component)
        return result

    def test_backtracking_explorer(self):
        for seed in self.SEEDS:
            config = MazeConfig(seed=seed, obstacle_count=20)
            result = self._check(config, BacktrackingExplorer, 2 * 10 * 7 + 1)
            self.assertLessEqual(result.moves, 2 * 10 * 7)

    def test_vision_explorer(self):
        for seed in self.SEEDS:
            config = MazeConfig(seed=seed, obstacle_count=20, facing_aware=True)
            self._check(config, VisionExplorer, 20 * 10 * 7)

    def test_dense_mazes(self):
        statuses = set()
        for seed in range(60):
            config = MazeConfig(seed=seed, obstacle_count=40)
            statuses.add(self._check(config, BacktrackingExplorer, 500).status)
        self.assertIn(RunStatus.WON, statuses)


if __name__ == "__main__":
    unittest.main()
