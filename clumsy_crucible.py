"""
Clumsy crucible: least heat loss across a city under movement limits.

A crucible must keep going straight for at least `min_run` blocks before
it may turn, and may not go straight for more than `max_run` blocks. The
search node therefore carries heading and run length as well as position;
two visits to the same block with different histories are different
states.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from ascii_render import render_path
from grid_parser import parse_digit_grid
from grid_types import Direction, Point
from gridwalk import Grid, SearchResult, Successor, a_star_search, manhattan_heuristic

logger = logging.getLogger(__name__)

DAY = 17
TITLE = "Clumsy Crucible"

EXAMPLE = """\
2413432311323
3215453535623
3255245654254
3446585845452
4546657867536
1438598798454
4457876987766
3637877979653
4654967986887
4564679986453
1224686865563
2546548887735
4322674655533
"""


@dataclass(frozen=True)
class CrucibleRules:
    """Run-length limits for a crucible."""

    min_run: int = 1  # blocks in a straight line before a turn is allowed
    max_run: int = 3  # blocks in a straight line before a turn is forced

    def __post_init__(self) -> None:
        if not 1 <= self.min_run <= self.max_run:
            raise ValueError(
                f"Invalid crucible rules: min_run={self.min_run}, max_run={self.max_run}\n"
                f"  Expected 1 <= min_run <= max_run"
            )


STANDARD = CrucibleRules(min_run=1, max_run=3)
ULTRA = CrucibleRules(min_run=4, max_run=10)


@dataclass(frozen=True)
class Crucible:
    """Search state: where the crucible is, where it faces, and how long it has gone straight."""

    position: Point
    direction: Direction
    forward_count: int = 0

    def successors(self, city: Grid[int], rules: CrucibleRules) -> Iterator[Successor[Crucible]]:
        """
        Single-block moves allowed from this state.

        Going straight is pruned once the run reaches max_run. Turning
        needs a run of at least min_run, except at the start where the
        crucible has not moved yet. Each move costs the heat loss of the
        block entered.
        """
        if self.forward_count < rules.max_run:
            yield from self._step(city, self.direction, self.forward_count + 1)

        if self.forward_count == 0 or self.forward_count >= rules.min_run:
            yield from self._step(city, self.direction.turn_left(), 1)
            yield from self._step(city, self.direction.turn_right(), 1)

    def _step(self, city: Grid[int], direction: Direction, forward_count: int) -> Iterator[Successor[Crucible]]:
        target = self.position.move_in(direction)
        if target is None:
            return
        heat_loss = city.get(target)
        if heat_loss is None:
            return
        yield Successor(Crucible(target, direction, forward_count), heat_loss)


def minimal_heat_loss(
    city: Grid[int],
    rules: CrucibleRules = STANDARD,
    max_expansions: int | None = None,
) -> SearchResult[Crucible]:
    """
    Cheapest route from the top-left block to the bottom-right block.

    Args:
        city: Heat loss per block
        rules: Run-length limits
        max_expansions: Optional cap passed to the search

    Returns:
        The search result; its path starts at the top-left block
    """
    goal = Point(city.len_x - 1, city.len_y - 1)
    start = Crucible(Point(0, 0), Direction.RIGHT)

    result = a_star_search(
        start,
        lambda crucible: crucible.successors(city, rules),
        manhattan_heuristic(goal),
        lambda crucible: crucible.position == goal and crucible.forward_count >= rules.min_run,
        max_expansions,
    )

    logger.info(
        "Heat loss %d with runs %d..%d (%d states expanded)",
        result.cost,
        rules.min_run,
        rules.max_run,
        result.expanded,
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Route:\n%s", render_path(city, result.path))
    return result


def solve(text: str) -> tuple[int, int]:
    city = parse_digit_grid(text)
    return minimal_heat_loss(city, STANDARD).cost, minimal_heat_loss(city, ULTRA).cost
