"""
Pipe maze: follow the loop through the start tile and measure it.

The start tile `S` hides a pipe; its shape is inferred from which
neighbors connect back to it. The loop is then walked one tile at a time,
each step accepted only if the next pipe opens toward the tile we leave.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ascii_render import render_highlighted
from grid_parser import parse_grid
from grid_types import Direction, DirectionFlag, Point, SearchExhausted
from gridwalk import Grid

logger = logging.getLogger(__name__)

DAY = 10
TITLE = "Pipe Maze"

MAX_LOOP_LENGTH = 1_000_000

EXAMPLE = """\
..F7.
.FJ|.
SJ.L7
|F--J
LJ...
"""


class Pipe(Enum):
    """A maze tile. The value is its input character."""

    VERTICAL = "|"
    HORIZONTAL = "-"
    NORTH_EAST = "L"
    NORTH_WEST = "J"
    SOUTH_WEST = "7"
    SOUTH_EAST = "F"
    GROUND = "."
    START = "S"

    @property
    def openings(self) -> tuple[Direction, ...]:
        return _OPENINGS[self]

    def has_opening(self, direction: Direction) -> bool:
        return direction in self.openings

    @classmethod
    def with_openings(cls, openings: set[Direction]) -> Pipe | None:
        for pipe in cls:
            if len(pipe.openings) == 2 and set(pipe.openings) == openings:
                return pipe
        return None

    def __str__(self) -> str:
        return _DISPLAY.get(self, self.value)


_OPENINGS: dict[Pipe, tuple[Direction, ...]] = {
    Pipe.VERTICAL: (Direction.UP, Direction.DOWN),
    Pipe.HORIZONTAL: (Direction.LEFT, Direction.RIGHT),
    Pipe.NORTH_EAST: (Direction.UP, Direction.RIGHT),
    Pipe.NORTH_WEST: (Direction.UP, Direction.LEFT),
    Pipe.SOUTH_WEST: (Direction.DOWN, Direction.LEFT),
    Pipe.SOUTH_EAST: (Direction.DOWN, Direction.RIGHT),
    Pipe.GROUND: (),
    Pipe.START: (),
}

_DISPLAY = {
    Pipe.VERTICAL: "│",
    Pipe.HORIZONTAL: "─",
    Pipe.NORTH_EAST: "└",
    Pipe.NORTH_WEST: "┘",
    Pipe.SOUTH_WEST: "┐",
    Pipe.SOUTH_EAST: "┌",
}

# Crossings counted by a ray cast along a row. Only tiles that open
# downward count, so that a run like L-7 counts once and L-J not at all.
_CROSSINGS = {Pipe.VERTICAL, Pipe.SOUTH_WEST, Pipe.SOUTH_EAST}


@dataclass
class PipeMaze:
    """The maze with its start tile replaced by the pipe it hides."""

    grid: Grid[Pipe]
    start: Point

    @classmethod
    def parse(cls, text: str) -> PipeMaze:
        grid = parse_grid(text, Pipe)
        start = grid.find(lambda pipe: pipe is Pipe.START)
        if start is None:
            raise ValueError("Pipe maze has no start tile 'S'")
        grid[start] = cls._infer_start_pipe(grid, start)
        return cls(grid, start)

    @staticmethod
    def _infer_start_pipe(grid: Grid[Pipe], start: Point) -> Pipe:
        openings = set()
        for neighbor in grid.neighbors(start, DirectionFlag.FOUR_DIRECTIONS):
            toward_start = Direction.from_vec(neighbor, start)
            if toward_start is not None and grid[neighbor].has_opening(toward_start):
                openings.add(toward_start.invert())

        pipe = Pipe.with_openings(openings)
        if pipe is None:
            raise ValueError(
                f"Cannot infer the pipe under the start tile at {start}\n"
                f"  Connected neighbors: {len(openings)} "
                f"({', '.join(sorted(d.name for d in openings))})\n"
                f"  Expected exactly 2"
            )
        logger.debug("Start tile %s is %s", start, pipe.value)
        return pipe

    def loop(self) -> list[Point]:
        """
        Tiles of the loop in walking order, starting and ending next to the start.

        Raises:
            ValueError: If the loop is broken
            SearchExhausted: If the walk does not close within MAX_LOOP_LENGTH steps
        """
        points = [self.start]
        entered_from = self.grid[self.start].openings[0]

        for _ in range(MAX_LOOP_LENGTH):
            current = points[-1]
            pipe = self.grid[current]
            exit_to = next(d for d in pipe.openings if d != entered_from)
            entered_from = exit_to.invert()

            next_point = self.grid.move_in_direction_if(
                current,
                exit_to,
                lambda _, next_pipe: next_pipe.has_opening(entered_from),
            )
            if next_point is None:
                raise ValueError(f"Pipe loop is broken leaving {current} toward {exit_to.name}")
            if next_point == self.start:
                logger.info("Loop of %d tiles", len(points))
                return points
            points.append(next_point)

        raise SearchExhausted(f"Pipe loop did not close within {MAX_LOOP_LENGTH} steps", MAX_LOOP_LENGTH)

    def farthest_distance(self) -> int:
        return len(self.loop()) // 2

    def enclosed_tiles(self) -> set[Point]:
        """Tiles strictly inside the loop, found by counting crossings to the right."""
        members = set(self.loop())
        inside: set[Point] = set()
        for _, row in self.grid.iter_rows():
            crossings = 0
            for point, pipe in reversed(list(row)):
                if point in members:
                    if pipe in _CROSSINGS:
                        crossings += 1
                elif crossings % 2 == 1:
                    inside.add(point)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Loop and enclosed tiles:\n%s", render_highlighted(self.grid, [members, inside]))
        return inside


def solve(text: str) -> tuple[int, int]:
    maze = PipeMaze.parse(text)
    return maze.farthest_distance(), len(maze.enclosed_tiles())
