"""
The floor will be lava: trace a light beam through mirrors and splitters.

A beam state is a position plus a heading. Splitters fork the beam, and
mirrors can send it round in circles, so the trace is a flood fill over
beam states: a state seen before is never followed again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ascii_render import render_highlighted
from grid_parser import parse_grid
from grid_types import Direction, Point
from gridwalk import Grid, flood_fill

logger = logging.getLogger(__name__)

DAY = 16
TITLE = "The Floor Will Be Lava"

EXAMPLE = r"""
.|...\....
|.-.\.....
.....|-...
........|.
|.........
.........\
..../.\\..
.-.-/..|..
.|....-|.\
..//.|....
"""


class Tile(Enum):
    EMPTY = "."
    MIRROR_UP = "/"
    MIRROR_DOWN = "\\"
    SPLIT_VERTICAL = "|"
    SPLIT_HORIZONTAL = "-"

    def __str__(self) -> str:
        return self.value

    def redirect(self, heading: Direction) -> tuple[Direction, ...]:
        """Headings of the beams leaving this tile for a beam arriving with `heading`."""
        match self:
            case Tile.EMPTY:
                return (heading,)
            case Tile.MIRROR_UP:
                # / turns rightward beams up and upward beams right
                if heading in (Direction.LEFT, Direction.RIGHT):
                    return (heading.turn_left(),)
                return (heading.turn_right(),)
            case Tile.MIRROR_DOWN:
                if heading in (Direction.LEFT, Direction.RIGHT):
                    return (heading.turn_right(),)
                return (heading.turn_left(),)
            case Tile.SPLIT_VERTICAL:
                if heading in (Direction.UP, Direction.DOWN):
                    return (heading,)
                return (Direction.UP, Direction.DOWN)
            case Tile.SPLIT_HORIZONTAL:
                if heading in (Direction.LEFT, Direction.RIGHT):
                    return (heading,)
                return (Direction.LEFT, Direction.RIGHT)


@dataclass(frozen=True)
class Beam:
    """A beam on a tile, traveling in a direction (before the tile acts on it)."""

    position: Point
    direction: Direction


@dataclass
class Contraption:
    grid: Grid[Tile]

    @classmethod
    def parse(cls, text: str) -> Contraption:
        return cls(parse_grid(text, Tile))

    def _next_beams(self, beam: Beam) -> list[Beam]:
        result = []
        for heading in self.grid[beam.position].redirect(beam.direction):
            target = self.grid.move_in_direction_if(beam.position, heading, lambda _, __: True)
            if target is not None:
                result.append(Beam(target, heading))
        return result

    def energized(self, start: Beam) -> set[Point]:
        """Tiles a beam entering at `start` passes through."""
        beams = flood_fill(start, self._next_beams)
        return {beam.position for beam in beams}

    def edge_entries(self) -> list[Beam]:
        """Every beam entering the contraption from outside, along each edge."""
        len_x, len_y = self.grid.len_x, self.grid.len_y
        entries = []
        for x in range(len_x):
            entries.append(Beam(Point(x, 0), Direction.DOWN))
            entries.append(Beam(Point(x, len_y - 1), Direction.UP))
        for y in range(len_y):
            entries.append(Beam(Point(0, y), Direction.RIGHT))
            entries.append(Beam(Point(len_x - 1, y), Direction.LEFT))
        return entries

    def most_energized(self) -> int:
        best_count = 0
        best_entry: Beam | None = None
        for entry in self.edge_entries():
            count = len(self.energized(entry))
            if count > best_count:
                best_count, best_entry = count, entry
        if best_entry is not None:
            logger.info(
                "Best entry %s heading %s energizes %d tiles",
                best_entry.position,
                best_entry.direction.name,
                best_count,
            )
        return best_count


def solve(text: str) -> tuple[int, int]:
    contraption = Contraption.parse(text)
    start = Beam(Point(0, 0), Direction.RIGHT)
    energized = contraption.energized(start)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Energized from top-left:\n%s", render_highlighted(contraption.grid, [energized]))
    return len(energized), contraption.most_energized()
