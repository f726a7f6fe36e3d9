"""
Minimum-cost paths through grid mazes where every turn costs one extra step.

Pipeline: read_maze -> seed the entry -> flood or astar -> classify the exit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from astar import astar
from flood import flood
from maze_parser import MazeFormatError, parse_header, parse_maze, read_maze
from maze_types import (
    CARDINALS,
    NO_ROTATION,
    Calculated,
    Direction,
    Empty,
    Field,
    Maze,
    Wall,
)

__all__ = [
    "CARDINALS",
    "NO_ROTATION",
    "Calculated",
    "Direction",
    "Empty",
    "Field",
    "Maze",
    "MazeFormatError",
    "Outcome",
    "RuleSet",
    "SOLVERS",
    "SolveResult",
    "Solver",
    "SolverKind",
    "Wall",
    "astar",
    "entry_point",
    "exit_point",
    "flood",
    "format_result",
    "parse_header",
    "parse_maze",
    "read_maze",
    "run",
    "seed",
    "solve",
]

logger = logging.getLogger(__name__)

# Takes a seeded maze, the exit coordinates and a step_cost keyword, returns the solved maze
Solver = Callable[..., Maze]


class SolverKind(Enum):
    """Algorithm used to solve a maze."""

    FLOOD = "flood"  # Whole-grid parallel relaxation
    ASTAR = "astar"  # Sequential best-first search


SOLVERS: dict[SolverKind, Solver] = {
    SolverKind.FLOOD: flood,
    SolverKind.ASTAR: astar,
}


@dataclass(frozen=True)
class RuleSet:
    """Settings for solving a maze."""

    solver: SolverKind = SolverKind.FLOOD
    entry: tuple[int, int] | None = None  # None = (0, 1)
    exit: tuple[int, int] | None = None  # None = (width - 1, height - 2)
    entry_cost: int = 0
    step_cost: int = 1  # Added per step; every turn adds 1 on top

    def __post_init__(self) -> None:
        """Reject negative costs, which would let paths get cheaper forever."""
        if self.entry_cost < 0:
            raise ValueError(f"entry_cost must not be negative, got {self.entry_cost}")
        if self.step_cost < 0:
            raise ValueError(f"step_cost must not be negative, got {self.step_cost}")


class Outcome(Enum):
    """What happened to the exit field."""

    REACHED = "reached"
    UNREACHABLE = "unreachable"  # Exit is passable but no path leads there
    INVALID = "invalid"  # Exit is a wall (or outside the maze)


@dataclass(frozen=True)
class SolveResult:
    """Classified exit field of a solved maze."""

    outcome: Outcome
    cost: int | None
    maze: Maze

    @staticmethod
    def from_field(field: Field, maze: Maze) -> SolveResult:
        match field:
            case Calculated(cost=cost):
                return SolveResult(Outcome.REACHED, cost, maze)
            case Empty():
                return SolveResult(Outcome.UNREACHABLE, None, maze)
            case Wall():
                return SolveResult(Outcome.INVALID, None, maze)
            case _:
                raise ValueError(f"Unknown field type: {field}")


def entry_point(maze: Maze) -> tuple[int, int]:
    return (0, 1)


def exit_point(maze: Maze) -> tuple[int, int]:
    return (maze.width - 1, maze.height - 2)


def seed(maze: Maze, x: int, y: int, cost: int = 0) -> None:
    """
    Mark (x, y) as reached with the given cost.

    The field may be entered from any side, so the first step out of it never
    counts as a turn.
    """
    maze.set_field(x, y, Calculated(Direction.ANY, cost))


def solve(maze: Maze, rules: RuleSet = RuleSet()) -> SolveResult:
    """
    Seed the entry, run the configured solver and classify the exit.

    The maze is handed over to the solver; use the maze in the result afterwards.

    Raises:
        IndexError: If the entry lies outside the maze
    """
    entry = rules.entry if rules.entry is not None else entry_point(maze)
    target = rules.exit if rules.exit is not None else exit_point(maze)

    seed(maze, *entry, cost=rules.entry_cost)
    solved = SOLVERS[rules.solver](maze, *target, step_cost=rules.step_cost)
    result = SolveResult.from_field(solved.field_at(*target), solved)

    logger.info(
        "solve: solver=%s entry=%s exit=%s outcome=%s cost=%s",
        rules.solver.value,
        entry,
        target,
        result.outcome.value,
        result.cost,
    )
    return result


def format_result(result: SolveResult) -> str:
    """Single output line: the cost, UNREACHABLE or INVALID."""
    match result.outcome:
        case Outcome.REACHED:
            return str(result.cost)
        case Outcome.UNREACHABLE:
            return "UNREACHABLE"
        case _:
            return "INVALID"


def run(lines: Iterable[str], rules: RuleSet = RuleSet()) -> str:
    """
    Read a maze description, solve it and format the answer.

    Raises:
        MazeFormatError: If the input is malformed
    """
    return format_result(solve(read_maze(lines), rules))
