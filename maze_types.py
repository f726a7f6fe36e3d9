"""
Shared type definitions for the turnmaze system.

A maze is a flat list of fields addressed by (x, y) = (column, row). Anything
outside the grid reads as a wall.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Iterator

# Result of min_rotation when no anchor direction is available
NO_ROTATION = 4


class Direction(IntFlag):
    """
    Set of up to four directions, stored as a 4-bit mask.

    Inside arrival sets a flag names the side a cell was entered from, so a
    cell entered while travelling rightwards carries LEFT.
    """

    NONE = 0
    LEFT = 1
    UP = 2
    RIGHT = 4
    DOWN = 8
    ANY = LEFT | UP | RIGHT | DOWN

    def contains_all(self, subset: Direction) -> bool:
        return (self & subset) == subset

    def rotate_left(self) -> Direction:
        """Rotate every flag one step: DOWN -> RIGHT -> UP -> LEFT -> DOWN."""
        value = int(self)
        return Direction(((value & 1) << 3) | (value >> 1))

    def rotate_right(self) -> Direction:
        """Rotate every flag one step: LEFT -> UP -> RIGHT -> DOWN -> LEFT."""
        value = int(self)
        return Direction(((value << 1) | (value >> 3)) & 0xF)

    def opposite(self) -> Direction:
        return self.rotate_right().rotate_right()

    @staticmethod
    def vec(start: tuple[int, int], end: tuple[int, int]) -> Direction:
        """
        Directions in which at least one step is needed to get from start to end.

        The flags are the arrival sides used along the way: travelling towards a
        larger x enters cells from the LEFT, towards a larger y from UP.
        """
        (from_x, from_y), (to_x, to_y) = start, end

        if from_x < to_x:
            horizontal = Direction.LEFT
        elif from_x > to_x:
            horizontal = Direction.RIGHT
        else:
            horizontal = Direction.NONE

        if from_y < to_y:
            vertical = Direction.UP
        elif from_y > to_y:
            vertical = Direction.DOWN
        else:
            vertical = Direction.NONE

        return horizontal | vertical

    def min_rotation(self, target: Direction) -> int:
        """
        Minimal number of single rotations so that at least one direction of
        self visits every direction of target.

        Each flag of self is tried as an anchor and rotated left and right
        independently. Used as a lower bound on the remaining turns, never as
        an exact cost. An empty self gives NO_ROTATION.
        """
        best = NO_ROTATION
        for anchor in CARDINALS:
            if not self.contains_all(anchor):
                continue

            for rotate in (Direction.rotate_left, Direction.rotate_right):
                current = anchor
                remaining = int(target) & ~int(anchor)
                steps = 0
                while remaining:
                    steps += 1
                    current = rotate(current)
                    remaining &= ~int(current)
                best = min(best, steps)

        return best


# Solver iteration order
CARDINALS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


# =============================================================================
# Field Types
# =============================================================================


@dataclass(frozen=True)
class Wall:
    """An impassable cell."""

    pass


@dataclass(frozen=True)
class Empty:
    """A passable cell no solver has reached yet."""

    pass


@dataclass(frozen=True)
class Calculated:
    """A reached cell with its best known cost."""

    directions: Direction  # Arrival sides achieving this cost
    cost: int


Field = Wall | Empty | Calculated


# =============================================================================
# Maze
# =============================================================================


@dataclass
class Maze:
    """A rectangular maze with all fields flattened row by row."""

    fields: list[Field]
    width: int

    @property
    def height(self) -> int:
        return len(self.fields) // self.width if self.width else 0

    @property
    def out_of_bounds(self) -> int:
        """Index every out-of-grid coordinate maps to; it never holds a field."""
        return len(self.fields)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        if not self.contains(x, y):
            return self.out_of_bounds
        return y * self.width + x

    def coords(self, idx: int) -> tuple[int, int]:
        return (idx % self.width, idx // self.width)

    def neighbor_index(self, idx: int, direction: Direction) -> int:
        """
        Index of the field next to idx in the given direction.

        Only single directions move; NONE or a combination returns idx itself.
        """
        if not 0 <= idx < len(self.fields):
            return self.out_of_bounds

        x, y = self.coords(idx)
        match direction:
            case Direction.UP:
                y -= 1
            case Direction.DOWN:
                y += 1
            case Direction.LEFT:
                x -= 1
            case Direction.RIGHT:
                x += 1
            case _:
                return idx

        return self.index(x, y)

    def field_at_index(self, idx: int) -> Field:
        if 0 <= idx < len(self.fields):
            return self.fields[idx]
        return Wall()

    def field_at(self, x: int, y: int) -> Field:
        return self.field_at_index(self.index(x, y))

    def neighbor(self, idx: int, direction: Direction) -> Field:
        return self.field_at_index(self.neighbor_index(idx, direction))

    def set_field(self, x: int, y: int, field: Field) -> None:
        idx = self.index(x, y)
        if idx == self.out_of_bounds:
            raise IndexError(
                f"Coordinate ({x}, {y}) is outside the {self.width}x{self.height} maze"
            )
        self.fields[idx] = field

    def calculated(self) -> Iterator[tuple[int, Calculated]]:
        """Yield (index, field) for every reached field."""
        for idx, field in enumerate(self.fields):
            if isinstance(field, Calculated):
                yield idx, field

    def copy(self) -> Maze:
        return Maze(list(self.fields), self.width)
