"""
Test suite for the gridwalk core: grid access, search and simulation.
"""

import pytest

from grid_types import (
    DimensionMismatch,
    Direction,
    DirectionFlag,
    NoPathFound,
    Point,
    SearchExhausted,
)
from gridwalk import (
    Grid,
    SearchResult,
    Successor,
    a_star_search,
    advance_with_cycle_skip,
    flood_fill,
    manhattan_heuristic,
    step_frontier,
)


def weighted_successors(grid: Grid[int]):
    """Orthogonal moves costing the weight of the cell entered; 0 is a wall."""

    def successors(point: Point) -> list[Successor[Point]]:
        return [
            Successor(neighbor, grid[neighbor])
            for neighbor in grid.neighbors(point, DirectionFlag.FOUR_DIRECTIONS)
            if grid[neighbor] > 0
        ]

    return successors


# =============================================================================
# Grid
# =============================================================================


class TestGridConstruction:
    """Tests for building grids."""

    def test_from_rows(self) -> None:
        """Rows are consumed in order."""
        grid = Grid.from_rows(["abc", "def"])
        assert grid.len_x == 3
        assert grid.len_y == 2
        assert grid[Point(0, 0)] == "a"
        assert grid[Point(2, 1)] == "f"

    def test_from_generator_rows(self) -> None:
        """Any iterable of iterables is accepted."""
        grid = Grid.from_rows((x * y for x in range(3)) for y in range(2))
        assert grid.rows() == [[0, 0, 0], [0, 1, 2]]

    def test_row_length_mismatch(self) -> None:
        """Rows of unequal length are rejected."""
        with pytest.raises(DimensionMismatch, match="same number of cells"):
            Grid.from_rows(["ab", "c"])

    def test_mismatch_message_names_rows(self) -> None:
        """The error names the expected width and each offending row."""
        with pytest.raises(DimensionMismatch) as excinfo:
            Grid.from_rows(["abc", "de", "fgh", "i"])
        message = str(excinfo.value)
        assert "Expected: 3 columns" in message
        assert "Row 1: 2 columns" in message
        assert "Row 3: 1 columns" in message

    def test_empty_grid_rejected(self) -> None:
        """A grid needs at least one cell."""
        with pytest.raises(DimensionMismatch):
            Grid.from_rows([])
        with pytest.raises(DimensionMismatch):
            Grid.from_rows([[]])

    def test_mismatch_is_value_error(self) -> None:
        """Callers catching ValueError also catch dimension errors."""
        with pytest.raises(ValueError):
            Grid.from_rows(["a", "bc"])

    def test_filled(self) -> None:
        """Size-based construction default-fills every cell."""
        grid = Grid.filled(4, 2, ".")
        assert grid.len_x == 4
        assert grid.len_y == 2
        assert all(cell == "." for _, cell in grid.iter_cells())

    def test_filled_rows_are_independent(self) -> None:
        """Writing one cell of a filled grid touches nothing else."""
        grid = Grid.filled(3, 3, 0)
        grid[Point(1, 1)] = 5
        assert sum(cell for _, cell in grid.iter_cells()) == 5


class TestGridAccess:
    """Tests for checked and unchecked access."""

    def test_get_returns_constructed_values(self) -> None:
        """Every in-bounds point reads back the value it was built with."""
        rows = [[10 * y + x for x in range(4)] for y in range(3)]
        grid = Grid.from_rows(rows)
        for y in range(3):
            for x in range(4):
                assert grid.get(Point(x, y)) == rows[y][x]

    def test_get_out_of_bounds_is_none(self) -> None:
        """Checked reads outside the grid are absent, not errors."""
        grid = Grid.from_rows(["ab", "cd"])
        assert grid.get(Point(2, 0)) is None
        assert grid.get(Point(0, 2)) is None
        assert grid.get(Point(5, 5)) is None
        assert grid.get(Point(-1, 0)) is None

    def test_index_out_of_bounds_raises(self) -> None:
        """Unchecked access outside the grid fails loudly."""
        grid = Grid.from_rows(["ab", "cd"])
        with pytest.raises(IndexError):
            grid[Point(2, 0)]
        with pytest.raises(IndexError):
            grid[Point(-1, 0)]
        with pytest.raises(IndexError):
            grid[Point(0, 3)] = "x"

    def test_set_item(self) -> None:
        """Indexed writes replace a single cell."""
        grid = Grid.from_rows(["ab", "cd"])
        grid[Point(1, 0)] = "z"
        assert grid.rows() == [["a", "z"], ["c", "d"]]

    def test_in_bounds(self) -> None:
        """Bounds are half-open on both axes."""
        grid = Grid.filled(3, 2, 0)
        assert grid.in_bounds(Point(2, 1))
        assert not grid.in_bounds(Point(3, 1))
        assert not grid.in_bounds(Point(2, 2))

    def test_find(self) -> None:
        """Find returns the first match in row-major order."""
        grid = Grid.from_rows(["..S", "S.."])
        assert grid.find(lambda c: c == "S") == Point(2, 0)
        assert grid.find(lambda c: c == "X") is None


class TestGridIteration:
    """Tests for row-major iteration."""

    def test_iter_cells_row_major(self) -> None:
        """Cells come out row by row, left to right."""
        grid = Grid.from_rows(["ab", "cd"])
        assert list(grid.iter_cells()) == [
            (Point(0, 0), "a"),
            (Point(1, 0), "b"),
            (Point(0, 1), "c"),
            (Point(1, 1), "d"),
        ]

    def test_iteration_is_restartable(self) -> None:
        """Each call gives a fresh iterator."""
        grid = Grid.from_rows(["ab", "cd"])
        assert list(grid.iter_cells()) == list(grid.iter_cells())
        assert len(list(grid.iter_rows())) == len(list(grid.iter_rows())) == 2

    def test_row_round_trip(self) -> None:
        """Reading back row by row reproduces the original rows in order."""
        rows = ["#..#", ".##.", "...."]
        grid = Grid.from_rows(rows)
        rebuilt = ["".join(cell for _, cell in row) for _, row in grid.iter_rows()]
        assert rebuilt == rows

    def test_iter_rows_indices(self) -> None:
        """Row groups carry their y and points on that row."""
        grid = Grid.from_rows(["ab", "cd", "ef"])
        for y, row in grid.iter_rows():
            assert all(point.y == y for point, _ in row)

    def test_columns(self) -> None:
        """Columns are read top to bottom."""
        grid = Grid.from_rows(["ab", "cd"])
        assert grid.columns() == [["a", "c"], ["b", "d"]]


class TestNeighbors:
    """Tests for masked neighbor enumeration."""

    def test_interior_all_directions(self) -> None:
        """An interior point has eight neighbors."""
        grid = Grid.filled(3, 3, 0)
        assert len(grid.neighbors(Point(1, 1), DirectionFlag.ALL_DIRECTIONS)) == 8

    def test_corner_all_directions(self) -> None:
        """A corner point has three neighbors."""
        grid = Grid.filled(4, 5, 0)
        for corner in (Point(0, 0), Point(3, 0), Point(0, 4), Point(3, 4)):
            assert len(grid.neighbors(corner, DirectionFlag.ALL_DIRECTIONS)) == 3

    def test_stable_order(self) -> None:
        """Cardinals come first (left, up, right, down), then diagonals."""
        grid = Grid.filled(3, 3, 0)
        assert grid.neighbors(Point(1, 1), DirectionFlag.ALL_DIRECTIONS) == [
            Point(0, 1),
            Point(1, 0),
            Point(2, 1),
            Point(1, 2),
            Point(0, 0),
            Point(2, 0),
            Point(0, 2),
            Point(2, 2),
        ]

    def test_four_directions(self) -> None:
        """The cardinal mask yields only orthogonal neighbors."""
        grid = Grid.filled(3, 3, 0)
        assert grid.neighbors(Point(1, 1), DirectionFlag.FOUR_DIRECTIONS) == [
            Point(0, 1),
            Point(1, 0),
            Point(2, 1),
            Point(1, 2),
        ]

    def test_partial_mask_at_edge(self) -> None:
        """Out-of-bounds neighbors are dropped, not clamped."""
        grid = Grid.filled(3, 3, 0)
        mask = DirectionFlag.LEFT | DirectionFlag.UP_LEFT | DirectionFlag.DOWN_LEFT
        assert grid.neighbors(Point(0, 1), mask) == []
        assert grid.neighbors(Point(1, 1), mask) == [Point(0, 1), Point(0, 0), Point(0, 2)]


class TestMoveInDirectionIf:
    """Tests for guarded single steps."""

    def test_accepted(self) -> None:
        """An accepted in-bounds move returns the destination."""
        grid = Grid.from_rows(["..", ".."])
        assert grid.move_in_direction_if(Point(0, 0), Direction.RIGHT, lambda _, c: c == ".") == Point(1, 0)

    def test_rejected_by_predicate(self) -> None:
        """The predicate sees the destination cell and can veto the move."""
        grid = Grid.from_rows([".#", ".."])
        seen = []

        def predicate(point: Point, cell: str) -> bool:
            seen.append((point, cell))
            return cell != "#"

        assert grid.move_in_direction_if(Point(0, 0), Direction.RIGHT, predicate) is None
        assert seen == [(Point(1, 0), "#")]

    def test_off_grid(self) -> None:
        """Moves off any edge return None without calling the predicate."""
        grid = Grid.from_rows(["..", ".."])

        def never(point: Point, cell: str) -> bool:
            raise AssertionError("predicate called for off-grid move")

        assert grid.move_in_direction_if(Point(0, 0), Direction.UP, never) is None
        assert grid.move_in_direction_if(Point(0, 0), Direction.LEFT, never) is None
        assert grid.move_in_direction_if(Point(1, 1), Direction.RIGHT, never) is None
        assert grid.move_in_direction_if(Point(1, 1), Direction.DOWN, never) is None


class TestGridMutationAndIdentity:
    """Tests for swap, copy, equality and hashing."""

    def test_swap(self) -> None:
        """Swap exchanges exactly two cells."""
        grid = Grid.from_rows(["ab", "cd"])
        grid.swap(Point(0, 0), Point(1, 1))
        assert grid.rows() == [["d", "b"], ["c", "a"]]

    def test_swap_preserves_identity(self) -> None:
        """Swapped cells are the same objects, not copies."""
        first, second = object(), object()
        grid = Grid.from_rows([[first, second]])
        grid.swap(Point(0, 0), Point(1, 0))
        assert grid[Point(0, 0)] is second
        assert grid[Point(1, 0)] is first

    def test_copy_is_independent(self) -> None:
        """Mutating a copy leaves the original alone."""
        grid = Grid.from_rows(["ab"])
        clone = grid.copy()
        clone[Point(0, 0)] = "z"
        assert grid[Point(0, 0)] == "a"
        assert clone != grid

    def test_structural_equality_and_hash(self) -> None:
        """Grids with the same cells are equal and usable as dict keys."""
        a = Grid.from_rows(["ab", "cd"])
        b = Grid.from_rows(["ab", "cd"])
        assert a == b
        assert hash(a) == hash(b)
        cache = {a: 1}
        assert cache[b] == 1

    def test_str(self) -> None:
        """Display joins cells per row and rows by newlines."""
        grid = Grid.from_rows([[1, 2], [3, 4]])
        assert str(grid) == "12\n34"


# =============================================================================
# A* search
# =============================================================================


class TestAStarSearch:
    """Tests for the generic best-first search."""

    def test_chooses_cheaper_of_two_paths(self) -> None:
        """The detour around the expensive column beats going straight through."""
        grid = Grid.from_rows([
            [1, 9, 1],
            [1, 9, 1],
            [1, 1, 1],
        ])
        start, goal = Point(0, 0), Point(2, 0)

        result = a_star_search(start, weighted_successors(grid), manhattan_heuristic(goal), lambda p: p == goal)

        assert result.cost == 6
        assert result.path[0] == start
        assert result.path[-1] == goal
        assert sum(grid[p] for p in result.path[1:]) == result.cost

    def test_path_is_connected(self) -> None:
        """Consecutive path nodes are orthogonal neighbors."""
        grid = Grid.from_rows([
            [1, 1, 1, 1],
            [5, 5, 5, 1],
            [1, 1, 1, 1],
        ])
        goal = Point(0, 2)
        result = a_star_search(Point(0, 0), weighted_successors(grid), manhattan_heuristic(goal), lambda p: p == goal)

        assert result.cost == 6
        for a, b in zip(result.path, result.path[1:]):
            assert a.manhattan_distance(b) == 1

    def test_zero_heuristic_agrees(self) -> None:
        """With no heuristic the search degrades to Dijkstra and finds the same cost."""
        grid = Grid.from_rows([
            [1, 3, 1, 2],
            [2, 8, 1, 9],
            [1, 1, 4, 1],
        ])
        goal = Point(3, 2)
        informed = a_star_search(Point(0, 0), weighted_successors(grid), manhattan_heuristic(goal), lambda p: p == goal)
        uninformed = a_star_search(Point(0, 0), weighted_successors(grid), lambda _: 0, lambda p: p == goal)
        assert informed.cost == uninformed.cost

    def test_start_is_goal(self) -> None:
        """A start that is already a goal costs nothing."""
        result = a_star_search(Point(1, 1), lambda _: [], lambda _: 0, lambda p: p == Point(1, 1))
        assert result == SearchResult(0, (Point(1, 1),), 0)

    def test_disconnected_goal(self) -> None:
        """An unreachable goal reports NoPathFound."""
        grid = Grid.from_rows([
            [1, 0, 1],
            [1, 0, 1],
            [1, 0, 1],
        ])
        goal = Point(2, 2)
        with pytest.raises(NoPathFound):
            a_star_search(Point(0, 0), weighted_successors(grid), manhattan_heuristic(goal), lambda p: p == goal)

    def test_expansion_cap(self) -> None:
        """Exceeding the expansion cap raises instead of running on."""
        grid = Grid.filled(20, 20, 1)
        goal = Point(19, 19)
        with pytest.raises(SearchExhausted) as excinfo:
            a_star_search(
                Point(0, 0),
                weighted_successors(grid),
                lambda _: 0,
                lambda p: p == goal,
                max_expansions=10,
            )
        assert excinfo.value.cap == 10

    def test_unbounded_graph_with_cap(self) -> None:
        """An infinite implicit graph without a goal stops at the cap."""
        with pytest.raises(SearchExhausted):
            a_star_search(0, lambda n: [(n + 1, 1)], lambda _: 0, lambda _: False, max_expansions=100)

    def test_plain_tuples_as_successors(self) -> None:
        """Successor functions may yield bare (node, cost) pairs."""
        edges = {"a": [("b", 1), ("c", 5)], "b": [("c", 1)], "c": []}
        result = a_star_search("a", lambda n: edges[n], lambda _: 0, lambda n: n == "c")
        assert result.cost == 2
        assert result.path == ("a", "b", "c")

    def test_cost_improvement_reopens_node(self) -> None:
        """A node first reached expensively is relaxed when a cheaper route appears."""
        edges = {
            "s": [("x", 10), ("a", 1)],
            "a": [("b", 1)],
            "b": [("x", 1)],
            "x": [("g", 1)],
            "g": [],
        }
        result = a_star_search("s", lambda n: edges[n], lambda _: 0, lambda n: n == "g")
        assert result.cost == 4
        assert result.path == ("s", "a", "b", "x", "g")


# =============================================================================
# Flood fills and simulation
# =============================================================================


class TestFloodFill:
    """Tests for reachability helpers."""

    def test_flood_fill_stops_at_walls(self) -> None:
        """Only cells connected to the start are reached."""
        grid = Grid.from_rows([
            "..#..",
            "..#..",
            "###..",
        ])

        def open_neighbors(point: Point) -> list[Point]:
            return [n for n in grid.neighbors(point, DirectionFlag.FOUR_DIRECTIONS) if grid[n] == "."]

        reached = flood_fill(Point(0, 0), open_neighbors)
        assert reached == {Point(0, 0), Point(1, 0), Point(0, 1), Point(1, 1)}

    def test_step_frontier_exact_steps(self) -> None:
        """The frontier after n steps holds cells at matching parity within range."""
        grid = Grid.filled(3, 3, ".")

        def open_neighbors(point: Point) -> list[Point]:
            return grid.neighbors(point, DirectionFlag.FOUR_DIRECTIONS)

        center = Point(1, 1)
        assert step_frontier([center], open_neighbors, 0) == {center}
        assert step_frontier([center], open_neighbors, 1) == {
            Point(0, 1),
            Point(1, 0),
            Point(2, 1),
            Point(1, 2),
        }
        assert step_frontier([center], open_neighbors, 2) == {
            center,
            Point(0, 0),
            Point(2, 0),
            Point(0, 2),
            Point(2, 2),
        }


class TestAdvanceWithCycleSkip:
    """Tests for simulation with period detection."""

    def test_pure_cycle(self) -> None:
        """A cycle from the very first state is skipped by modular arithmetic."""
        assert advance_with_cycle_skip(0, lambda x: (x + 1) % 5, 1_000_003) == 3

    def test_cycle_after_tail(self) -> None:
        """States before the cycle are not part of the period."""

        def step(x: int) -> int:
            return x + 1 if x < 6 else 3

        # 0 1 2 | 3 4 5 6 | 3 4 5 6 ...
        assert advance_with_cycle_skip(0, step, 10) == 6
        assert advance_with_cycle_skip(0, step, 11) == 3
        assert advance_with_cycle_skip(0, step, 1_000_000_000) == 3 + (1_000_000_000 - 3) % 4

    def test_fewer_iterations_than_cycle(self) -> None:
        """Short runs are simulated directly."""
        assert advance_with_cycle_skip(0, lambda x: (x + 1) % 100, 7) == 7
        assert advance_with_cycle_skip(42, lambda x: x + 1, 0) == 42

    def test_no_cycle_within_cap(self) -> None:
        """A state sequence that never repeats exhausts the cap."""
        with pytest.raises(SearchExhausted):
            advance_with_cycle_skip(0, lambda x: x + 1, 1000, max_iterations=50)

    def test_iterations_equal_to_cap(self) -> None:
        """Reaching the requested state exactly at the cap is not exhaustion."""
        assert advance_with_cycle_skip(0, lambda x: x + 1, 5, max_iterations=5) == 5
        with pytest.raises(SearchExhausted):
            advance_with_cycle_skip(0, lambda x: x + 1, 6, max_iterations=5)

    def test_grid_states(self) -> None:
        """Grid snapshots work as states when each step returns a new grid."""

        def shift(grid: Grid[str]) -> Grid[str]:
            rows = grid.rows()
            return Grid.from_rows([row[-1:] + row[:-1] for row in rows])

        start = Grid.from_rows(["#..."])
        assert advance_with_cycle_skip(start, shift, 10) == Grid.from_rows(["..#."])
