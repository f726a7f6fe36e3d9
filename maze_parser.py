"""
Maze parsing utilities for turnmaze.

Input format:
- First non-blank line: "width,height" (positive integers, whitespace allowed)
- Then exactly `height` rows, one character per field:
  * '0': Wall
  * '1': Empty (passable)
- Characters past `width` on a row are ignored

Malformed input is a contract violation and raises MazeFormatError.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from maze_types import Empty, Field, Maze, Wall

__all__ = ["MazeFormatError", "parse_header", "parse_maze", "read_maze"]

logger = logging.getLogger(__name__)

FIELD_CHARS: dict[str, type[Wall] | type[Empty]] = {
    "0": Wall,
    "1": Empty,
}


class MazeFormatError(ValueError):
    """Raised when maze input does not follow the expected format."""


def parse_header(line: str) -> tuple[int, int]:
    """
    Parse the "width,height" header line.

    Raises:
        MazeFormatError: If the line is not two comma separated positive integers
    """
    parts = [part.strip() for part in line.strip().split(",")]
    if len(parts) != 2 or not all(part.isdecimal() for part in parts):
        raise MazeFormatError(
            f"Invalid maze header: '{line.rstrip()}'\n"
            f"  Expected format: 'width,height' (e.g. '5,3')"
        )

    width, height = int(parts[0]), int(parts[1])
    if width <= 0 or height <= 0:
        raise MazeFormatError(
            f"Invalid maze dimensions: {width}x{height}\n"
            f"  Width and height must both be positive"
        )

    return width, height


def parse_maze(width: int, height: int, rows: Iterable[str]) -> Maze:
    """
    Build a maze from exactly `height` rows of '0'/'1' characters.

    Only the first `height` rows are consumed, so the rest of an iterator stays
    available to the caller.

    Args:
        width: Number of fields per row
        height: Number of rows to consume
        rows: Row strings, with or without trailing newlines

    Returns:
        Maze with every field set to Wall or Empty

    Raises:
        MazeFormatError: If a row is missing, too short, or has an invalid character
    """
    fields: list[Field] = []
    row_iter = iter(rows)

    for row_idx in range(height):
        row_str = next(row_iter, None)
        if row_str is None:
            raise MazeFormatError(
                f"Missing maze rows\n"
                f"  Expected: {height} rows\n"
                f"  Got: {row_idx} rows"
            )

        row_str = row_str.rstrip("\r\n")
        if len(row_str) < width:
            raise MazeFormatError(
                f"Row {row_idx} is too short: \"{row_str}\"\n"
                f"  Expected: at least {width} characters\n"
                f"  Got: {len(row_str)} characters"
            )

        for col_idx, char in enumerate(row_str[:width]):
            field_type = FIELD_CHARS.get(char)
            if field_type is None:
                raise MazeFormatError(
                    f"Invalid character '{char}' in maze\n"
                    f"  Row {row_idx}, column {col_idx}: \"{row_str}\"\n"
                    f"  Valid characters: '0' (wall), '1' (passable)"
                )
            fields.append(field_type())

    return Maze(fields, width)


def _meaningful_lines(lines: Iterable[str]) -> Iterator[str]:
    """Skip blank lines before the header, then pass everything through."""
    iterator = iter(lines)
    for line in iterator:
        if line.strip():
            yield line
            break
    yield from iterator


def read_maze(lines: Iterable[str]) -> Maze:
    """
    Read a complete maze description (header followed by rows).

    Args:
        lines: Any iterable of lines, such as an open text stream or
               text.splitlines()

    Raises:
        MazeFormatError: If the header or any row is malformed
    """
    line_iter = _meaningful_lines(lines)
    header = next(line_iter, None)
    if header is None:
        raise MazeFormatError("Empty maze input\n  Expected a 'width,height' header line")

    width, height = parse_header(header)
    maze = parse_maze(width, height, line_iter)

    logger.info("read_maze: parsed %dx%d maze", width, height)
    return maze
