"""Tests for the grid model and maze generation."""

import random
import unittest

import numpy as np

from blind_maze.geometry import Position
from blind_maze.grid import Cell, Grid, OutOfBounds, build_grid, generate


class ScriptedRandom(random.Random):
    """Random source that replays a fixed list of randrange results."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def randrange(self, *args, **kwargs):
        return self._values.pop(0)


class TestGrid(unittest.TestCase):
    """Test basic grid queries."""

    def setUp(self):
        self.grid = Grid.from_strings([
            "..O",
            "O.X",
        ])

    def test_dimensions(self):
        self.assertEqual(self.grid.width, 3)
        self.assertEqual(self.grid.height, 2)

    def test_goal_and_obstacles(self):
        self.assertEqual(self.grid.goal, Position(1, 2))
        self.assertEqual(self.grid.obstacle_count, 2)
        self.assertEqual(sorted(self.grid.obstacles()), [(0, 2), (1, 0)])

    def test_cell_at(self):
        self.assertEqual(self.grid.cell_at((0, 0)), Cell.OPEN)
        self.assertEqual(self.grid.cell_at((0, 2)), Cell.OBSTACLE)
        self.assertEqual(self.grid.cell_at((1, 2)), Cell.GOAL)

    def test_cell_at_out_of_bounds(self):
        for pos in [(-1, 0), (0, -1), (2, 0), (0, 3)]:
            with self.assertRaises(OutOfBounds):
                self.grid.cell_at(pos)
        self.assertTrue(issubclass(OutOfBounds, IndexError))

    def test_open_positions_include_goal(self):
        open_cells = self.grid.open_positions()
        self.assertIn((1, 2), open_cells)
        self.assertNotIn((0, 2), open_cells)
        self.assertEqual(len(open_cells), 4)

    def test_rows_and_columns(self):
        self.assertEqual(self.grid.row(1), [Cell.OBSTACLE, Cell.OPEN, Cell.GOAL])
        self.assertEqual(self.grid.column(2), [Cell.OBSTACLE, Cell.GOAL])

    def test_round_trip_strings(self):
        self.assertEqual(self.grid.to_strings(), ["..O", "O.X"])

    def test_read_only(self):
        with self.assertRaises(ValueError):
            self.grid.cells[0, 0] = Cell.OBSTACLE

    def test_input_array_is_copied(self):
        cells = np.array([[0, 2]])
        grid = Grid(cells)
        cells[0, 0] = 1
        self.assertEqual(grid.cell_at((0, 0)), Cell.OPEN)

    def test_equality(self):
        same = Grid.from_strings(["..O", "O.X"])
        other = Grid.from_strings(["...", "O.X"])
        self.assertEqual(self.grid, same)
        self.assertEqual(hash(self.grid), hash(same))
        self.assertNotEqual(self.grid, other)

    def test_requires_exactly_one_goal(self):
        with self.assertRaises(ValueError):
            Grid.from_strings(["...", "..."])
        with self.assertRaises(ValueError):
            Grid.from_strings(["X..", "..X"])

    def test_rejects_bad_symbols_and_ragged_rows(self):
        with self.assertRaises(ValueError):
            Grid.from_strings(["..#", "..X"])
        with self.assertRaises(ValueError):
            Grid.from_strings(["..", "..X"])


class TestBuildGrid(unittest.TestCase):
    """Test fixed-layout construction."""

    def test_build(self):
        grid = build_grid(4, 3, obstacles=[(0, 1), (2, 2)], goal=(1, 3))
        self.assertEqual(grid.to_strings(), [".O..", "...X", "..O."])

    def test_goal_overwrites_obstacle(self):
        grid = build_grid(2, 2, obstacles=[(0, 0)], goal=(0, 0))
        self.assertEqual(grid.cell_at((0, 0)), Cell.GOAL)
        self.assertEqual(grid.obstacle_count, 0)

    def test_invalid_dimensions(self):
        with self.assertRaises(ValueError):
            build_grid(0, 3, obstacles=[], goal=(0, 0))

    def test_obstacle_outside(self):
        with self.assertRaises(OutOfBounds):
            build_grid(2, 2, obstacles=[(5, 5)], goal=(0, 0))


class TestGenerate(unittest.TestCase):
    """Test random maze generation."""

    def test_default_size(self):
        grid = generate(rng=random.Random(1))
        self.assertEqual((grid.width, grid.height), (10, 7))

    def test_exactly_one_goal_and_bounded_obstacles(self):
        for seed in range(50):
            grid = generate(10, 7, 10, random.Random(seed))
            self.assertEqual(int(np.count_nonzero(grid.cells == Cell.GOAL)), 1)
            self.assertLessEqual(grid.obstacle_count, 10)

    def test_seeded_generation_is_reproducible(self):
        a = generate(8, 5, 6, random.Random(7))
        b = generate(8, 5, 6, random.Random(7))
        self.assertEqual(a, b)

    def test_no_obstacles(self):
        grid = generate(4, 4, 0, random.Random(3))
        self.assertEqual(grid.obstacle_count, 0)

    def test_colliding_placements_reduce_obstacle_count(self):
        # Two obstacles on (1, 1), then the goal on (0, 0).
        rng = ScriptedRandom([1, 1, 1, 1, 0, 0])
        grid = generate(3, 3, 2, rng)
        self.assertEqual(grid.obstacle_count, 1)
        self.assertEqual(grid.goal, (0, 0))

    def test_goal_lands_on_obstacle(self):
        rng = ScriptedRandom([2, 2, 2, 2])
        grid = generate(3, 3, 1, rng)
        self.assertEqual(grid.obstacle_count, 0)
        self.assertEqual(grid.goal, (2, 2))

    def test_negative_obstacle_count(self):
        with self.assertRaises(ValueError):
            generate(3, 3, -1, random.Random(0))


if __name__ == "__main__":
    unittest.main()
