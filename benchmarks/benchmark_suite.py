"""
Benchmark suite for Blind Maze.

Runs every controller over a batch of seeded random mazes of increasing
obstacle density, measuring:
- Win rate, and how often the goal was provably unreachable (exhausted)
- Ticks spent per run, and ticks per won run
- Accepted versus rejected moves
- Wall-clock time

Runs that hit the tick budget without finishing are counted as timeouts;
only the simple baselines should ever produce them.
"""

import time
import numpy as np
from dataclasses import dataclass
from typing import Callable, List

from blind_maze import (
    BacktrackingExplorer, Controller, MazeConfig, RandomWalker, RunStatus,
    ScanningRunner, Simulation, VisionExplorer,
)


@dataclass
class BenchmarkProblem:
    """A family of random mazes sharing size and obstacle density."""
    name: str
    width: int
    height: int
    obstacle_count: int
    n_mazes: int = 50
    difficulty: str = "easy"  # easy, medium, hard


@dataclass
class Contender:
    name: str
    make: Callable[[int], Controller]
    facing_aware: bool = False


BENCHMARKS = [
    BenchmarkProblem("open_10x7", 10, 7, 0, difficulty="easy"),
    BenchmarkProblem("default_10x7", 10, 7, 10, difficulty="easy"),
    BenchmarkProblem("cluttered_10x7", 10, 7, 25, difficulty="medium"),
    BenchmarkProblem("dense_10x7", 10, 7, 40, difficulty="hard"),
    BenchmarkProblem("large_25x25", 25, 25, 150, n_mazes=20, difficulty="hard"),
]

CONTENDERS = [
    Contender("backtracking", lambda seed: BacktrackingExplorer()),
    Contender("vision", lambda seed: VisionExplorer(), facing_aware=True),
    Contender("scanning", lambda seed: ScanningRunner(), facing_aware=True),
    Contender("random", lambda seed: RandomWalker(seed=seed)),
]


def run_benchmark(problem: BenchmarkProblem, contender: Contender,
                  max_ticks: int = 5000, seed: int = 42) -> dict:
    """Run one contender over every maze of one problem."""
    statuses: List[RunStatus] = []
    ticks, won_ticks, moves, rejected = [], [], [], []

    t0 = time.time()
    for i in range(problem.n_mazes):
        config = MazeConfig(
            width=problem.width,
            height=problem.height,
            obstacle_count=problem.obstacle_count,
            facing_aware=contender.facing_aware,
            seed=seed + i,
        )
        sim = Simulation.from_config(config, contender.make(seed + i))
        result = sim.run(max_ticks=max_ticks)
        statuses.append(result.status)
        ticks.append(result.ticks)
        moves.append(result.moves)
        rejected.append(result.rejected)
        if result.won:
            won_ticks.append(result.ticks)
    elapsed = time.time() - t0

    n = len(statuses)
    return {
        "name": problem.name,
        "difficulty": problem.difficulty,
        "contender": contender.name,
        "win_rate": statuses.count(RunStatus.WON) / n,
        "exhausted_rate": statuses.count(RunStatus.EXHAUSTED) / n,
        "timeout_rate": statuses.count(RunStatus.IN_PROGRESS) / n,
        "mean_ticks": float(np.mean(ticks)),
        "mean_won_ticks": float(np.mean(won_ticks)) if won_ticks else float("nan"),
        "mean_moves": float(np.mean(moves)),
        "mean_rejected": float(np.mean(rejected)),
        "time_sec": elapsed,
    }


def run_all_benchmarks(max_ticks: int = 5000, seed: int = 42,
                       verbose: bool = True):
    """Run every contender on every problem and print a summary table."""
    print("=" * 90)
    print("  Blind Maze — Benchmark Suite")
    print("=" * 90)
    print()

    results = []
    for problem in BENCHMARKS:
        if verbose:
            print(f"  [{problem.difficulty:6s}] {problem.name:15s} "
                  f"{problem.width}x{problem.height}, "
                  f"{problem.obstacle_count} obstacles, {problem.n_mazes} mazes")
        for contender in CONTENDERS:
            r = run_benchmark(problem, contender, max_ticks=max_ticks, seed=seed)
            results.append(r)
            if verbose:
                print(f"           {r['contender']:13s} "
                      f"won={r['win_rate']:5.0%}  "
                      f"exhausted={r['exhausted_rate']:5.0%}  "
                      f"timeout={r['timeout_rate']:5.0%}  "
                      f"ticks/win={r['mean_won_ticks']:7.1f}  "
                      f"rejected={r['mean_rejected']:7.1f}  "
                      f"time={r['time_sec']:.2f}s")
        if verbose:
            print()

    # Summary: the explorers should never time out
    print("=" * 90)
    for contender in CONTENDERS:
        rows = [r for r in results if r["contender"] == contender.name]
        timeouts = sum(1 for r in rows if r["timeout_rate"] > 0)
        print(f"    {contender.name:13s}: mean win rate "
              f"{np.mean([r['win_rate'] for r in rows]):.0%}, "
              f"problems with timeouts {timeouts}/{len(rows)}")
    print("=" * 90)

    return results


if __name__ == "__main__":
    run_all_benchmarks()
