"""
Parabolic reflector dish: tilt a platform of rocks and measure the load.

Round rocks roll until they hit a cube rock, another round rock or the
edge. A tilt is simulated line by line: walking from the edge the rocks
roll toward, every free cell is queued and each round rock is swapped into
the oldest queued cell. A cube rock clears the queue.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum

from grid_parser import parse_grid
from grid_types import Direction, Point
from gridwalk import Grid, advance_with_cycle_skip

logger = logging.getLogger(__name__)

DAY = 14
TITLE = "Parabolic Reflector Dish"

SPIN_CYCLES = 1_000_000_000
SPIN_ORDER = (Direction.UP, Direction.LEFT, Direction.DOWN, Direction.RIGHT)

EXAMPLE = """\
O....#....
O.OO#....#
.....##...
OO.#O....O
.O.....O#.
O.#..O.#.#
..O..#O..O
.......O..
#....###..
#OO..#....
"""


class Rock(Enum):
    EMPTY = "."
    ROUND = "O"
    CUBE = "#"

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class Platform:
    """A platform of rocks. Equal and hashable by its grid."""

    grid: Grid[Rock]

    @classmethod
    def parse(cls, text: str) -> Platform:
        return cls(parse_grid(text, Rock))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Platform):
            return NotImplemented
        return self.grid == other.grid

    def __hash__(self) -> int:
        return hash(self.grid)

    def __str__(self) -> str:
        return str(self.grid)

    def _lines_toward(self, direction: Direction) -> list[list[Point]]:
        """Lines of points, each ordered from the edge the rocks roll toward."""
        len_x, len_y = self.grid.len_x, self.grid.len_y
        match direction:
            case Direction.UP:
                return [[Point(x, y) for y in range(len_y)] for x in range(len_x)]
            case Direction.DOWN:
                return [[Point(x, y) for y in reversed(range(len_y))] for x in range(len_x)]
            case Direction.LEFT:
                return [[Point(x, y) for x in range(len_x)] for y in range(len_y)]
            case Direction.RIGHT:
                return [[Point(x, y) for x in reversed(range(len_x))] for y in range(len_y)]

    def tilt(self, direction: Direction) -> None:
        """Roll every round rock as far as it goes, in place."""
        for line in self._lines_toward(direction):
            free: deque[Point] = deque()
            for point in line:
                match self.grid[point]:
                    case Rock.EMPTY:
                        free.append(point)
                    case Rock.CUBE:
                        free.clear()
                    case Rock.ROUND:
                        if free:
                            target = free.popleft()
                            self.grid.swap(point, target)
                            free.append(point)

    def spin_cycle(self) -> Platform:
        """A copy of this platform tilted up, left, down and right in turn."""
        spun = Platform(self.grid.copy())
        for direction in SPIN_ORDER:
            spun.tilt(direction)
        return spun

    def total_load(self) -> int:
        """Load on the north beams: each round rock weighs its distance from the south edge."""
        return sum(
            self.grid.len_y - point.y
            for point, rock in self.grid.iter_cells()
            if rock is Rock.ROUND
        )


def load_after_spin_cycles(platform: Platform, cycles: int = SPIN_CYCLES) -> int:
    final = advance_with_cycle_skip(platform, Platform.spin_cycle, cycles)
    return final.total_load()


def solve(text: str, cycles: int = SPIN_CYCLES) -> tuple[int, int]:
    platform = Platform.parse(text)
    tilted = Platform(platform.grid.copy())
    tilted.tilt(Direction.UP)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Tilted north:\n%s", tilted)
    return tilted.total_load(), load_after_spin_cycles(platform, cycles)
