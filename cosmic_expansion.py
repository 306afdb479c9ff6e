"""
Cosmic expansion: galaxy distances in a universe whose empty rows and
columns have grown.
"""

from __future__ import annotations

import itertools
import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass

from grid_parser import parse_grid
from grid_types import Point

logger = logging.getLogger(__name__)

DAY = 11
TITLE = "Cosmic Expansion"

PART_ONE_EXPANSION = 2
PART_TWO_EXPANSION = 1_000_000

EXAMPLE = """\
...#......
.......#..
#.........
..........
......#...
.#........
.........#
..........
.......#..
#...#.....
"""


@dataclass(frozen=True)
class Universe:
    """Galaxy positions plus the sorted empty rows and columns between them."""

    galaxies: tuple[Point, ...]
    empty_columns: tuple[int, ...]
    empty_rows: tuple[int, ...]

    @classmethod
    def parse(cls, text: str) -> Universe:
        grid = parse_grid(text, lambda char: {"#": True, ".": False}[char])
        galaxies = tuple(point for point, is_galaxy in grid.iter_cells() if is_galaxy)
        empty_columns = tuple(x for x, column in enumerate(grid.columns()) if not any(column))
        empty_rows = tuple(y for y, row in enumerate(grid.rows()) if not any(row))
        logger.info(
            "%d galaxies, %d empty columns, %d empty rows",
            len(galaxies),
            len(empty_columns),
            len(empty_rows),
        )
        return cls(galaxies, empty_columns, empty_rows)

    def distance(self, a: Point, b: Point, expansion: int) -> int:
        """
        Manhattan distance after expansion.

        Every empty line lying strictly between the two galaxies counts as
        `expansion` lines instead of one.
        """
        crossed = _count_between(self.empty_columns, a.x, b.x) + _count_between(self.empty_rows, a.y, b.y)
        return a.manhattan_distance(b) + crossed * (expansion - 1)

    def sum_of_distances(self, expansion: int) -> int:
        return sum(self.distance(a, b, expansion) for a, b in itertools.combinations(self.galaxies, 2))


def _count_between(sorted_lines: tuple[int, ...], a: int, b: int) -> int:
    low, high = min(a, b), max(a, b)
    return max(0, bisect_left(sorted_lines, high) - bisect_right(sorted_lines, low))


def solve(text: str, expansion: int = PART_TWO_EXPANSION) -> tuple[int, int]:
    universe = Universe.parse(text)
    return universe.sum_of_distances(PART_ONE_EXPANSION), universe.sum_of_distances(expansion)
