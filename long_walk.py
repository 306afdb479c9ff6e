"""
A long walk: the longest hike through the forest that never steps on the
same tile twice.

Trails are long single-file corridors joined at a few junctions, so the
map is first compressed into a weighted graph of junctions. The longest
simple path over that graph is then found by exhaustive depth-first
search with an explicit stack.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from grid_parser import parse_grid
from grid_types import Direction, NoPathFound, Point, SearchExhausted
from gridwalk import Grid

logger = logging.getLogger(__name__)

DAY = 23
TITLE = "A Long Walk"

EXAMPLE = """\
#.#####################
#.......#########...###
#######.#########.#.###
###.....#.>.>.###.#.###
###v#####.#v#.###.#.###
###.>...#.#.#.....#...#
###v###.#.#.#########.#
###...#.#.#.......#...#
#####.#.#.#######.#.###
#.....#.#.#.......#...#
#.#####.#.#.#########v#
#.#...#...#...###...>.#
#.#.#v#######v###.###v#
#...#.>.#...>.>.#.###.#
#####v#.#.###v#.#.###.#
#.....#...#...#.#.#...#
#.#########.###.#.#.###
#...###...#...#...#.###
###.###.#.###v#####v###
#...#...#.#.>.>.#.>.###
#.###.###.#.###.#.#v###
#.....###...###...#...#
#####################.#
"""


class Trail(Enum):
    PATH = "."
    FOREST = "#"
    SLOPE_UP = "^"
    SLOPE_DOWN = "v"
    SLOPE_LEFT = "<"
    SLOPE_RIGHT = ">"

    @property
    def slope(self) -> Direction | None:
        """The only direction a hiker may leave this tile by, on icy slopes."""
        if self in (Trail.PATH, Trail.FOREST):
            return None
        return Direction(self.value)

    def __str__(self) -> str:
        return self.value


JunctionGraph = dict[Point, dict[Point, int]]


def _is_open(_: Point, trail: Trail) -> bool:
    return trail is not Trail.FOREST


@dataclass
class HikingMap:
    grid: Grid[Trail]
    start: Point
    end: Point

    @classmethod
    def parse(cls, text: str) -> HikingMap:
        grid = parse_grid(text, Trail)
        last = grid.len_y - 1
        start = next((p for p, t in grid.iter_cells() if p.y == 0 and t is Trail.PATH), None)
        end = next((p for p, t in grid.iter_cells() if p.y == last and t is Trail.PATH), None)
        if start is None or end is None:
            raise ValueError(
                f"Hiking map needs an open tile in the top and bottom rows\n"
                f"  Start: {start}\n"
                f"  End: {end}"
            )
        return cls(grid, start, end)

    def _open_directions(self, point: Point) -> list[Direction]:
        return [
            direction
            for direction in Direction.all()
            if self.grid.move_in_direction_if(point, direction, _is_open) is not None
        ]

    def junctions(self) -> set[Point]:
        """Tiles where three or more trails meet, plus the start and end."""
        result = {self.start, self.end}
        for point, trail in self.grid.iter_cells():
            if trail is not Trail.FOREST and len(self._open_directions(point)) >= 3:
                result.add(point)
        return result

    def junction_graph(self, slippery: bool) -> JunctionGraph:
        """
        Compress corridors into edges between junctions.

        Args:
            slippery: If True, slopes may only be left downhill, which makes
                some corridors one-way or impassable

        Returns:
            For every junction, the junctions reachable along one corridor
            and that corridor's length in steps
        """
        junctions = self.junctions()
        graph: JunctionGraph = {junction: {} for junction in junctions}
        for junction in junctions:
            for direction in self._open_directions(junction):
                found = self._follow_corridor(junction, direction, junctions, slippery)
                if found is None:
                    continue
                target, length = found
                if target != junction:
                    graph[junction][target] = max(length, graph[junction].get(target, 0))

        logger.info(
            "%d junctions, %d corridors (slippery=%s)",
            len(graph),
            sum(len(edges) for edges in graph.values()),
            slippery,
        )
        return graph

    def _follow_corridor(
        self,
        junction: Point,
        direction: Direction,
        junctions: set[Point],
        slippery: bool,
    ) -> tuple[Point, int] | None:
        max_steps = self.grid.len_x * self.grid.len_y
        current = junction
        heading = direction
        for steps in range(1, max_steps + 1):
            slope = self.grid[current].slope
            if slippery and slope is not None and slope != heading:
                return None
            next_point = self.grid.move_in_direction_if(current, heading, _is_open)
            if next_point is None:
                return None
            current = next_point
            if current in junctions:
                return current, steps

            onward = [d for d in self._open_directions(current) if d != heading.invert()]
            if len(onward) != 1:
                return None  # dead end
            heading = onward[0]

        raise SearchExhausted(f"Corridor from {junction} longer than {max_steps} steps", max_steps)

    def longest_hike(self, slippery: bool = True) -> int:
        """
        Length of the longest hike from start to end.

        Raises:
            NoPathFound: If the end cannot be reached at all
        """
        graph = self.junction_graph(slippery)
        bit = {node: 1 << i for i, node in enumerate(graph)}

        # Whoever reaches the end's only neighbor must head straight for the end.
        into_end = [(node, edges[self.end]) for node, edges in graph.items() if self.end in edges]
        last_stop, last_leg = into_end[0] if len(into_end) == 1 else (self.end, 0)

        best = -1
        stack = [(self.start, bit[self.start], 0)]
        while stack:
            node, visited, length = stack.pop()
            if node == last_stop:
                best = max(best, length + last_leg)
                continue
            for target, cost in graph[node].items():
                if not visited & bit[target]:
                    stack.append((target, visited | bit[target], length + cost))

        if best < 0:
            raise NoPathFound(f"No hike from {self.start} to {self.end}")
        return best


def solve(text: str) -> tuple[int, int]:
    hiking_map = HikingMap.parse(text)
    return hiking_map.longest_hike(slippery=True), hiking_map.longest_hike(slippery=False)
