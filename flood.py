"""
Flood relaxation solver.

Every iteration recomputes each field from the previous iteration only, so the
per-field update is a pure function of the front buffer. The whole iteration is
expressed as numpy array operations over the grid; the result goes into a back
buffer which is swapped in once the iteration is complete.
"""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np

from maze_types import CARDINALS, Calculated, Direction, Empty, Field, Maze, Wall

logger = logging.getLogger(__name__)

# Cost stored for Empty and Wall fields
UNREACHED: int = int(np.iinfo(np.int64).max)

# Neighbour offsets into the wall-padded grid, per arrival side
_PADDED_SLICES: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, 1),
    Direction.DOWN: (2, 1),
    Direction.LEFT: (1, 0),
    Direction.RIGHT: (1, 2),
}


class FloodTermination(Enum):
    """Reason why flooding stopped."""

    NO_CHANGES = "no_changes"  # Fixed point reached
    EXIT_SETTLED = "exit_settled"  # No change can beat the exit cost any more


class FloodState:
    """
    Double-buffered flood state for one maze and one exit.

    Usage:
        state = FloodState(maze, x, y)
        while not state.is_done():
            state.step()
        maze = state.to_maze()
    """

    def __init__(self, maze: Maze, x: int, y: int, step_cost: int = 1) -> None:
        self.step_cost = step_cost
        self.width = maze.width
        self.height = maze.height
        self.exit_idx = maze.index(x, y)

        shape = (self.height, self.width)
        walls = np.zeros(shape, dtype=bool)
        cost = np.full(shape, UNREACHED, dtype=np.int64)
        dirs = np.zeros(shape, dtype=np.uint8)

        for idx, field in enumerate(maze.fields):
            row, col = divmod(idx, self.width)
            match field:
                case Wall():
                    walls[row, col] = True
                case Calculated(directions=directions, cost=field_cost):
                    cost[row, col] = field_cost
                    dirs[row, col] = int(directions)
                case Empty():
                    pass
                case _:
                    raise ValueError(f"Unknown field type: {field}")

        self.walls = walls
        self.cost = cost
        self.dirs = dirs
        self._back_cost = np.empty_like(cost)
        self._back_dirs = np.empty_like(dirs)

        self.iterations = 0
        self.min_changed: int | None = 0  # Nothing is known yet, so not done
        self.termination_reason: FloodTermination | None = None

    def exit_cost(self) -> int | None:
        """Cost currently stored at the exit, None unless it is reached."""
        if self.exit_idx >= self.width * self.height:
            return None
        row, col = divmod(self.exit_idx, self.width)
        if self.walls[row, col] or self.cost[row, col] == UNREACHED:
            return None
        return int(self.cost[row, col])

    def is_done(self) -> bool:
        """
        Decide whether another iteration could still improve the exit.

        Stops when the last iteration changed nothing, or when its cheapest
        change is not cheaper than the exit already is.
        """
        if self.min_changed is None:
            self.termination_reason = FloodTermination.NO_CHANGES
            return True

        exit_cost = self.exit_cost()
        if exit_cost is not None and self.min_changed >= exit_cost:
            self.termination_reason = FloodTermination.EXIT_SETTLED
            return True

        return False

    def _candidates(self) -> tuple[np.ndarray, np.ndarray]:
        """Best cost reachable from any neighbour, and the sides achieving it."""
        padded_cost = np.pad(self.cost, 1, constant_values=UNREACHED)
        padded_dirs = np.pad(self.dirs, 1, constant_values=0)

        best = np.full(self.cost.shape, UNREACHED, dtype=np.int64)
        best_dirs = np.zeros(self.dirs.shape, dtype=np.uint8)

        for direction in CARDINALS:
            row, col = _PADDED_SLICES[direction]
            neighbor_cost = padded_cost[row:row + self.height, col:col + self.width]
            neighbor_dirs = padded_dirs[row:row + self.height, col:col + self.width]

            reached = neighbor_cost != UNREACHED
            # Leaving the neighbour's line of travel costs one extra
            turn = (neighbor_dirs & int(direction)) == 0
            candidate = np.where(reached, neighbor_cost, 0) + self.step_cost + turn
            candidate[~reached] = UNREACHED

            best_dirs = np.where(candidate < best, np.uint8(int(direction)), best_dirs)
            tie = reached & (candidate == best)
            best_dirs = np.where(tie, best_dirs | np.uint8(int(direction)), best_dirs)
            best = np.minimum(best, candidate)

        best[self.walls] = UNREACHED
        return best, best_dirs

    def step(self) -> int | None:
        """
        Run one iteration.

        Returns:
            The lowest cost among fields changed by this iteration, or None
        """
        best, best_dirs = self._candidates()

        has_candidate = best != UNREACHED
        current_empty = self.cost == UNREACHED
        replace = has_candidate & (current_empty | (best < self.cost))
        grow = (
            has_candidate
            & ~current_empty
            & (best == self.cost)
            & ((self.dirs & best_dirs) != best_dirs)
        )
        changed = replace | grow

        np.copyto(self._back_cost, self.cost)
        np.copyto(self._back_cost, best, where=replace)
        np.copyto(self._back_dirs, self.dirs)
        np.copyto(self._back_dirs, best_dirs, where=replace)
        np.copyto(self._back_dirs, self.dirs | best_dirs, where=grow)

        self.cost, self._back_cost = self._back_cost, self.cost
        self.dirs, self._back_dirs = self._back_dirs, self.dirs
        self.iterations += 1

        self.min_changed = int(best[changed].min()) if changed.any() else None
        logger.debug(
            "flood iteration %d: %d fields changed, cheapest change=%s",
            self.iterations,
            int(changed.sum()),
            self.min_changed,
        )
        return self.min_changed

    def costs(self) -> np.ndarray:
        """Copy of the current cost grid (UNREACHED for Empty and Wall)."""
        return self.cost.copy()

    def to_maze(self) -> Maze:
        fields: list[Field] = []
        for wall, cost, dirs in zip(
            self.walls.ravel(), self.cost.ravel(), self.dirs.ravel()
        ):
            if wall:
                fields.append(Wall())
            elif cost == UNREACHED:
                fields.append(Empty())
            else:
                fields.append(Calculated(Direction(int(dirs)), int(cost)))
        return Maze(fields, self.width)


def flood(maze: Maze, x: int, y: int, step_cost: int = 1) -> Maze:
    """
    Flood the maze from every calculated field until the exit at (x, y) is settled.

    The given maze must contain at least one Calculated field (the entry). The
    returned maze has the exit calculated with its minimal cost if it is
    reachable; other fields may only hold an upper bound of their cost.
    """
    state = FloodState(maze, x, y, step_cost)
    while not state.is_done():
        state.step()

    logger.info(
        "flood: %d iterations, termination=%s, exit cost=%s",
        state.iterations,
        state.termination_reason.value if state.termination_reason else None,
        state.exit_cost(),
    )
    return state.to_maze()
