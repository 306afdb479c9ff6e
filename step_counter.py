"""
Step counter: garden plots reachable in an exact number of steps.

For small step counts the frontier is simulated directly. For very large
counts on a garden that repeats infinitely in every direction, the answer
is extrapolated from a single tile: each tile splits into a center diamond
and four corner triangles, and the big diamond of reachable cells is made
of whole center diamonds and whole corner diamonds, counted by parity.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum

from grid_parser import parse_char_grid, parse_grid
from grid_types import DirectionFlag, Point, UnsupportedInputShape
from gridwalk import Grid, flood_fill, step_frontier

logger = logging.getLogger(__name__)

DAY = 21
TITLE = "Step Counter"

PART_ONE_STEPS = 64
PART_TWO_STEPS = 26_501_365

# The example garden is documented for a short walk.
EXAMPLE_STEPS = 6
EXAMPLE_OPTIONS = {"part_one_steps": EXAMPLE_STEPS}

EXAMPLE = """\
...........
.....###.#.
.###.##..#.
..#.#...#..
....#.#....
.##..S####.
.##..#...#.
.......##..
.##.#.####.
.##..##.##.
...........
"""


class Tile(Enum):
    PLOT = "."
    ROCK = "#"

    def __str__(self) -> str:
        return self.value


@dataclass
class Garden:
    """A garden tile and the elf's starting plot."""

    grid: Grid[Tile]
    start: Point

    @classmethod
    def parse(cls, text: str) -> Garden:
        chars = parse_char_grid(text)
        starts = [point for point, char in chars.iter_cells() if char == "S"]
        if len(starts) != 1:
            raise ValueError(f"Expected exactly one start 'S', found {len(starts)}")

        # The start is an ordinary plot.
        grid = parse_grid(text, lambda char: Tile.PLOT if char == "S" else Tile(char))
        return cls(grid, starts[0])

    def _open_neighbors(self, point: Point) -> list[Point]:
        return [
            neighbor
            for neighbor in self.grid.neighbors(point, DirectionFlag.FOUR_DIRECTIONS)
            if self.grid[neighbor] is Tile.PLOT
        ]

    def reachable_in(self, steps: int) -> set[Point]:
        """Plots the elf can stand on after exactly `steps` steps inside this tile."""
        return step_frontier([self.start], self._open_neighbors, steps)

    def all_reachable(self) -> set[Point]:
        """Every plot connected to the start within this tile."""
        return flood_fill(self.start, self._open_neighbors)

    def step_distances(self) -> dict[Point, int]:
        """Fewest steps from the start to every connected plot within this tile."""
        distances = {self.start: 0}
        queue = deque([self.start])
        while queue:
            point = queue.popleft()
            for neighbor in self._open_neighbors(point):
                if neighbor not in distances:
                    distances[neighbor] = distances[point] + 1
                    queue.append(neighbor)
        return distances

    def count_reachable_tiled(self, steps: int) -> int:
        """
        Exact-step count on the infinitely repeated garden, by simulation.

        Coordinates are unbounded here; cells are looked up modulo the tile
        size. Cost grows with steps squared, so this serves small counts and
        as a check on the extrapolation.
        """
        len_x, len_y = self.grid.len_x, self.grid.len_y

        def open_neighbors(point: Point) -> list[Point]:
            result = []
            for dx, dy in ((-1, 0), (0, -1), (1, 0), (0, 1)):
                neighbor = point.offset(dx, dy)
                if self.grid.cells[neighbor.y % len_y][neighbor.x % len_x] is Tile.PLOT:
                    result.append(neighbor)
            return result

        return len(step_frontier([self.start], open_neighbors, steps))

    def count_reachable_extrapolated(self, steps: int) -> int:
        """
        Exact-step count on the infinitely repeated garden, in closed form.

        Requires a square tile of odd size with the start in the middle,
        an open border, an open start row and column, every connected plot
        at its Manhattan distance from the start, and `steps` landing
        exactly on a tile edge (steps = size // 2 + n * size).

        Raises:
            UnsupportedInputShape: If any precondition fails
        """
        size = self._check_tileable()
        half = size // 2
        n, remainder = divmod(steps - half, size)
        if steps < half or remainder != 0:
            raise UnsupportedInputShape(
                f"Step count {steps} does not reach a tile edge\n"
                f"  Expected steps = {half} + n * {size}"
            )

        visited = self.all_reachable()
        center = [p for p in visited if abs(p.x - half) + abs(p.y - half) <= half]
        corners = len(visited) - len(center)
        same = sum(1 for p in center if (p.x + p.y) % 2 == steps % 2)
        other = len(center) - same

        # Tiles alternate parity; which kind the outer ring has depends on n.
        if n % 2 == 0:
            full = (n + 1) ** 2 * same + n**2 * other
        else:
            full = n**2 * same + (n + 1) ** 2 * other
        total = full + n * (n + 1) * corners

        logger.info(
            "Extrapolated %d steps over %d tile rings: %d center plots (%d same parity), %d corner plots",
            steps,
            n,
            len(center),
            same,
            corners,
        )
        return total

    def _check_tileable(self) -> int:
        len_x, len_y = self.grid.len_x, self.grid.len_y
        if len_x != len_y or len_x % 2 == 0:
            raise UnsupportedInputShape(
                f"Garden must be square with an odd side, got {len_x}x{len_y}"
            )
        half = len_x // 2
        if self.start != Point(half, half):
            raise UnsupportedInputShape(
                f"Start must be in the middle of the garden\n"
                f"  Expected: {Point(half, half)}\n"
                f"  Found: {self.start}"
            )
        blocked = [
            point
            for point, tile in self.grid.iter_cells()
            if tile is Tile.ROCK and (point.x in (0, len_x - 1) or point.y in (0, len_y - 1))
        ]
        if blocked:
            raise UnsupportedInputShape(
                f"Garden border must be fully open\n"
                f"  Rocks on border: {', '.join(str(p) for p in blocked[:10])}"
            )
        blocked = [
            point
            for point, tile in self.grid.iter_cells()
            if tile is Tile.ROCK and (point.x == half or point.y == half)
        ]
        if blocked:
            raise UnsupportedInputShape(
                f"Start row and column must be fully open\n"
                f"  Rocks on them: {', '.join(str(p) for p in blocked[:10])}"
            )
        detours = sorted(
            point
            for point, distance in self.step_distances().items()
            if distance != point.manhattan_distance(self.start)
        )
        if detours:
            raise UnsupportedInputShape(
                f"Every plot must be reachable along a Manhattan path from the start\n"
                f"  Plots needing a detour: {', '.join(str(p) for p in detours[:10])}"
            )
        return len_x


def solve(text: str, part_one_steps: int = PART_ONE_STEPS, part_two_steps: int = PART_TWO_STEPS) -> tuple[int, int]:
    garden = Garden.parse(text)
    return len(garden.reachable_in(part_one_steps)), garden.count_reachable_extrapolated(part_two_steps)
