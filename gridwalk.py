"""
Gridwalk core: a dense 2D grid and the searches that run over it.

The grid is row-major and addressed by `Point`. Checked reads return None
outside the grid; indexed access raises. On top of the grid sit a generic
A* search over implicit graphs, breadth-style flood fills, and a simulation
helper that skips ahead once a repeating state is found.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections import deque
from dataclasses import dataclass
from typing import (
    Callable,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    NamedTuple,
    Protocol,
    TypeVar,
)

from grid_types import (
    DimensionMismatch,
    Direction,
    DirectionFlag,
    NoPathFound,
    Point,
    SearchExhausted,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
N = TypeVar("N", bound=Hashable)
S = TypeVar("S", bound=Hashable)


# Neighbor offsets in the order neighbors are reported.
NEIGHBOR_OFFSETS: tuple[tuple[DirectionFlag, int, int], ...] = (
    (DirectionFlag.LEFT, -1, 0),
    (DirectionFlag.UP, 0, -1),
    (DirectionFlag.RIGHT, 1, 0),
    (DirectionFlag.DOWN, 0, 1),
    (DirectionFlag.UP_LEFT, -1, -1),
    (DirectionFlag.UP_RIGHT, 1, -1),
    (DirectionFlag.DOWN_LEFT, -1, 1),
    (DirectionFlag.DOWN_RIGHT, 1, 1),
)


# =============================================================================
# Grid
# =============================================================================


@dataclass(eq=False)
class Grid(Generic[T]):
    """
    A rectangular, mutable 2D grid of cells.

    Equality and hashing are structural so that snapshots can key caches.
    Never mutate a grid after using it as a key; cache a `copy()` instead.
    """

    cells: list[list[T]]

    def __post_init__(self) -> None:
        if not self.cells or not self.cells[0]:
            raise DimensionMismatch("Grid must have at least one row and one column")

        cols = len(self.cells[0])
        mismatched = [(y, len(row)) for y, row in enumerate(self.cells) if len(row) != cols]
        if mismatched:
            error_msg = (
                f"Inconsistent row lengths\n"
                f"  Expected: {cols} columns (from row 0)\n"
                f"  Mismatched rows:\n"
            )
            for y, actual_cols in mismatched:
                error_msg += f"    Row {y}: {actual_cols} columns\n"
            error_msg += "  All rows must have the same number of cells"
            raise DimensionMismatch(error_msg)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[T]]) -> Grid[T]:
        """Build a grid by consuming rows; rejects rows of unequal length."""
        return cls([list(row) for row in rows])

    @classmethod
    def filled(cls, len_x: int, len_y: int, value: T) -> Grid[T]:
        return cls([[value] * len_x for _ in range(len_y)])

    @property
    def len_x(self) -> int:
        return len(self.cells[0])

    @property
    def len_y(self) -> int:
        return len(self.cells)

    def in_bounds(self, point: Point) -> bool:
        return 0 <= point.x < self.len_x and 0 <= point.y < self.len_y

    def get(self, point: Point) -> T | None:
        """Checked read; None when the point lies outside the grid."""
        if not self.in_bounds(point):
            return None
        return self.cells[point.y][point.x]

    def __getitem__(self, point: Point) -> T:
        if not self.in_bounds(point):
            raise IndexError(f"{point} outside {self.len_x}x{self.len_y} grid")
        return self.cells[point.y][point.x]

    def __setitem__(self, point: Point, value: T) -> None:
        if not self.in_bounds(point):
            raise IndexError(f"{point} outside {self.len_x}x{self.len_y} grid")
        self.cells[point.y][point.x] = value

    def swap(self, a: Point, b: Point) -> None:
        self[a], self[b] = self[b], self[a]

    def copy(self) -> Grid[T]:
        return Grid([list(row) for row in self.cells])

    def find(self, predicate: Callable[[T], bool]) -> Point | None:
        """First point, in row-major order, whose cell satisfies predicate."""
        for point, cell in self.iter_cells():
            if predicate(cell):
                return point
        return None

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def neighbors(self, point: Point, directions: DirectionFlag) -> list[Point]:
        """
        In-bounds neighbors of a point for every direction in the mask.

        Neighbors are always reported in the same order: left, up, right,
        down, then up-left, up-right, down-left, down-right.
        """
        result = []
        for flag, dx, dy in NEIGHBOR_OFFSETS:
            if flag not in directions:
                continue
            neighbor = Point(point.x + dx, point.y + dy)
            if self.in_bounds(neighbor):
                result.append(neighbor)
        return result

    def move_in_direction_if(
        self,
        point: Point,
        direction: Direction,
        predicate: Callable[[Point, T], bool],
    ) -> Point | None:
        """
        Step one cell in a direction if the destination exists and is accepted.

        Args:
            point: Starting point
            direction: Direction to step in
            predicate: Called with the destination point and its cell

        Returns:
            The destination point, or None if it is off the grid or rejected
        """
        target = point.move_in(direction)
        if target is None or not self.in_bounds(target):
            return None
        if not predicate(target, self.cells[target.y][target.x]):
            return None
        return target

    def iter_cells(self) -> Iterator[tuple[Point, T]]:
        for y, row in enumerate(self.cells):
            for x, cell in enumerate(row):
                yield Point(x, y), cell

    def iter_rows(self) -> Iterator[tuple[int, Iterator[tuple[Point, T]]]]:
        for y, row in enumerate(self.cells):
            yield y, ((Point(x, y), cell) for x, cell in enumerate(row))

    def rows(self) -> list[list[T]]:
        return [list(row) for row in self.cells]

    def columns(self) -> list[list[T]]:
        return [list(column) for column in zip(*self.cells)]

    # -------------------------------------------------------------------------
    # Identity and display
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.cells == other.cells

    def __hash__(self) -> int:
        return hash(tuple(tuple(row) for row in self.cells))

    def __str__(self) -> str:
        return "\n".join("".join(str(cell) for cell in row) for row in self.cells)


# =============================================================================
# Best-first search
# =============================================================================


class SearchNode(Protocol):
    """A hashable search-graph vertex that sits somewhere on a grid."""

    @property
    def position(self) -> Point: ...


class Successor(NamedTuple, Generic[N]):
    """A reachable next node and the cost of moving to it."""

    node: N
    cost: int


@dataclass(frozen=True)
class SearchResult(Generic[N]):
    """Minimum total cost and the path that achieves it, start to goal inclusive."""

    cost: int
    path: tuple[N, ...]
    expanded: int


def manhattan_heuristic(goal: Point) -> Callable[[SearchNode], int]:
    def heuristic(node: SearchNode) -> int:
        return node.position.manhattan_distance(goal)

    return heuristic


def a_star_search(
    start: N,
    successors: Callable[[N], Iterable[tuple[N, int]]],
    heuristic: Callable[[N], int],
    is_goal: Callable[[N], bool],
    max_expansions: int | None = None,
) -> SearchResult[N]:
    """
    Find a minimum-cost path over an implicit graph.

    Args:
        start: Initial node
        successors: Yields (next_node, edge_cost) pairs; must depend only on the node
        heuristic: Lower bound on the remaining cost from a node
        is_goal: Goal predicate, tested when a node is taken off the frontier
        max_expansions: Optional cap on expanded nodes

    Returns:
        SearchResult with the total cost and the path from start to goal

    Raises:
        NoPathFound: If no goal is reachable
        SearchExhausted: If more than max_expansions nodes are expanded
    """
    # The counter breaks priority ties so that nodes are never compared.
    tie_breaker = itertools.count()
    frontier: list[tuple[int, int, int, N]] = [(heuristic(start), next(tie_breaker), 0, start)]
    best_cost: dict[N, int] = {start: 0}
    came_from: dict[N, N] = {}
    expanded = 0

    while frontier:
        _, _, cost, node = heapq.heappop(frontier)
        if cost > best_cost[node]:
            continue  # stale entry

        if is_goal(node):
            path = _reconstruct_path(came_from, node)
            logger.debug("Goal reached at cost %d after %d expansions", cost, expanded)
            return SearchResult(cost, path, expanded)

        expanded += 1
        if max_expansions is not None and expanded > max_expansions:
            raise SearchExhausted(
                f"Search expanded more than {max_expansions} nodes without reaching a goal",
                max_expansions,
            )

        for next_node, edge_cost in successors(node):
            tentative = cost + edge_cost
            known = best_cost.get(next_node)
            if known is not None and tentative >= known:
                continue
            best_cost[next_node] = tentative
            came_from[next_node] = node
            heapq.heappush(
                frontier,
                (tentative + heuristic(next_node), next(tie_breaker), tentative, next_node),
            )

    raise NoPathFound(f"No goal reachable from {start!r} ({expanded} nodes expanded)")


def _reconstruct_path(came_from: dict[N, N], goal: N) -> tuple[N, ...]:
    path = [goal]
    while path[-1] in came_from:
        path.append(came_from[path[-1]])
    path.reverse()
    return tuple(path)


# =============================================================================
# Flood fills and simulation
# =============================================================================


def flood_fill(start: N, next_states: Callable[[N], Iterable[N]]) -> set[N]:
    """All states reachable from start, including start itself."""
    visited = {start}
    queue = deque([start])
    while queue:
        state = queue.popleft()
        for next_state in next_states(state):
            if next_state not in visited:
                visited.add(next_state)
                queue.append(next_state)
    return visited


def step_frontier(
    starts: Iterable[N],
    next_states: Callable[[N], Iterable[N]],
    steps: int,
) -> set[N]:
    """States occupied after exactly `steps` moves from any start."""
    frontier = set(starts)
    for _ in range(steps):
        frontier = {next_state for state in frontier for next_state in next_states(state)}
    return frontier


def advance_with_cycle_skip(
    state: S,
    step: Callable[[S], S],
    iterations: int,
    max_iterations: int = 10_000,
) -> S:
    """
    Apply `step` `iterations` times, jumping ahead once a state repeats.

    Each state is remembered with the iteration it first appeared at. When
    a state comes round again the remaining iterations are reduced modulo
    the cycle length and the answer is read from history.

    Raises:
        SearchExhausted: If no repeat appears within max_iterations
    """
    seen: dict[S, int] = {}
    history: list[S] = []

    # One extra pass so that iterations == max_iterations can still be returned
    for i in range(max_iterations + 1):
        if i == iterations:
            return state
        first = seen.get(state)
        if first is not None:
            period = i - first
            logger.info("Cycle detected: state %d repeats at %d (period %d)", first, i, period)
            return history[first + (iterations - first) % period]
        seen[state] = i
        history.append(state)
        state = step(state)

    raise SearchExhausted(
        f"No repeating state within {max_iterations} iterations",
        max_iterations,
    )
