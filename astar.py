"""
Best-first (A*-style) solver.

Fields are expanded in order of cost plus the minimal number of turns still
needed to head towards the exit. Search stops as soon as the exit gets a cost.
"""

from __future__ import annotations

import heapq
import logging

from maze_types import Calculated, Direction, Empty, Maze

logger = logging.getLogger(__name__)

# (outgoing direction, side the neighbour is entered from)
_STEPS = (
    (Direction.LEFT, Direction.RIGHT),
    (Direction.RIGHT, Direction.LEFT),
    (Direction.UP, Direction.DOWN),
    (Direction.DOWN, Direction.UP),
)

# Heap entries: (cost + heuristic, field index). Lowest priority pops first,
# ties go to the lowest index.
QueueItem = tuple[int, int]


def priority(maze: Maze, idx: int, field: Calculated, target: tuple[int, int]) -> int:
    """Actual cost plus the minimal number of turns still needed to head for the target."""
    needed = Direction.vec(maze.coords(idx), target)
    return field.cost + field.directions.min_rotation(needed)


def astar(maze: Maze, x: int, y: int, step_cost: int = 1) -> Maze:
    """
    Search from every calculated field towards the exit at (x, y).

    The maze is updated in place and returned. If the exit is reachable it is
    calculated with its minimal cost; otherwise it stays Empty (or Wall).
    """
    target = (x, y)
    queue: list[QueueItem] = [
        (priority(maze, idx, field, target), idx) for idx, field in maze.calculated()
    ]
    heapq.heapify(queue)

    expansions = 0
    pushes = len(queue)

    def push(idx: int, field: Calculated) -> None:
        nonlocal pushes
        maze.fields[idx] = field
        heapq.heappush(queue, (priority(maze, idx, field, target), idx))
        pushes += 1

    while queue:
        expected, idx = heapq.heappop(queue)
        field = maze.fields[idx]
        # Only Calculated fields are queued, and they never revert
        assert isinstance(field, Calculated)

        expansions += 1
        logger.debug(
            "Expanding field %s (%s), expected cost: %d",
            maze.coords(idx),
            field,
            expected,
        )

        for outgoing, entered_from in _STEPS:
            # Carrying on in a direction the field was entered with adds no turn
            turn = 0 if field.directions.contains_all(entered_from) else 1
            cost = field.cost + step_cost + turn

            next_idx = maze.neighbor_index(idx, outgoing)
            match maze.field_at_index(next_idx):
                case Empty():
                    push(next_idx, Calculated(entered_from, cost))
                case Calculated(directions=directions, cost=known) if known == cost:
                    merged = directions | entered_from
                    if merged != directions:
                        push(next_idx, Calculated(merged, cost))
                case Calculated(cost=known) if cost < known:
                    push(next_idx, Calculated(entered_from, cost))
                case _:
                    pass

        if isinstance(maze.field_at(x, y), Calculated):
            break

    logger.info(
        "astar: %d expansions, %d pushes, exit=%s",
        expansions,
        pushes,
        maze.field_at(x, y),
    )
    return maze
