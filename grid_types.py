"""
Shared type definitions for the gridwalk toolkit.

Points, directions, neighbor masks and the error hierarchy used by every
grid, search and puzzle module.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag
from functools import total_ordering


# =============================================================================
# Errors
# =============================================================================


class GridError(Exception):
    """Base class for all grid toolkit failures."""


class DimensionMismatch(GridError, ValueError):
    """Rows of a grid do not all have the same length."""


class NoPathFound(GridError):
    """The search frontier emptied before a goal was reached."""


class SearchExhausted(GridError):
    """A search or simulation exceeded its iteration cap."""

    def __init__(self, message: str, cap: int) -> None:
        super().__init__(message)
        self.cap = cap


class UnsupportedInputShape(GridError, ValueError):
    """Input violates a structural precondition of a closed-form shortcut."""


# =============================================================================
# Directions
# =============================================================================


class Direction(Enum):
    """Cardinal direction for traversal. The value is its display character."""

    UP = "^"  # decreasing y
    DOWN = "v"  # increasing y
    LEFT = "<"  # decreasing x
    RIGHT = ">"  # increasing x

    @classmethod
    def all(cls) -> list[Direction]:
        return list(cls)

    @classmethod
    def from_vec(cls, from_point: Point, to_point: Point) -> Direction | None:
        """
        Direction of a single orthogonal step between two points.

        Returns None for zero, diagonal or multi-step deltas.
        """
        dx = to_point.x - from_point.x
        dy = to_point.y - from_point.y
        if abs(dx) + abs(dy) != 1:
            return None
        return _DELTA_TO_DIRECTION[(dx, dy)]

    @property
    def delta(self) -> tuple[int, int]:
        return _DIRECTION_DELTAS[self]

    def invert(self) -> Direction:
        return _INVERSE[self]

    def turn_left(self) -> Direction:
        return _LEFT_TURN[self]

    def turn_right(self) -> Direction:
        return _RIGHT_TURN[self]

    def __str__(self) -> str:
        return self.value


_DIRECTION_DELTAS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}
_DELTA_TO_DIRECTION = {delta: direction for direction, delta in _DIRECTION_DELTAS.items()}
_INVERSE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}
_LEFT_TURN = {
    Direction.UP: Direction.LEFT,
    Direction.LEFT: Direction.DOWN,
    Direction.DOWN: Direction.RIGHT,
    Direction.RIGHT: Direction.UP,
}
_RIGHT_TURN = {turned: direction for direction, turned in _LEFT_TURN.items()}


class DirectionFlag(Flag):
    """Bitmask over the eight compass directions, used for neighbor queries."""

    UP_LEFT = 1
    UP = 2
    UP_RIGHT = 4
    RIGHT = 8
    DOWN_RIGHT = 16
    DOWN = 32
    DOWN_LEFT = 64
    LEFT = 128

    FOUR_DIRECTIONS = UP | DOWN | LEFT | RIGHT
    ALL_DIRECTIONS = 0xFF

    @classmethod
    def from_direction(cls, direction: Direction) -> DirectionFlag:
        return cls[direction.name]


# =============================================================================
# Points
# =============================================================================


@total_ordering
@dataclass(frozen=True)
class Point:
    """
    Immutable grid coordinate.

    Points order row-major: by y first, then by x.
    """

    x: int
    y: int

    def __lt__(self, other: Point) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return (self.y, self.x) < (other.y, other.x)

    def __str__(self) -> str:
        return f"({self.x},{self.y})"

    @property
    def position(self) -> Point:
        """Points are their own search nodes."""
        return self

    def offset(self, dx: int, dy: int) -> Point:
        return Point(self.x + dx, self.y + dy)

    def move_in(self, direction: Direction, steps: int = 1) -> Point | None:
        """
        Move `steps` cells in a direction.

        Grid coordinates are never negative, so a move that would leave the
        first quadrant returns None instead of wrapping.
        """
        dx, dy = direction.delta
        x = self.x + dx * steps
        y = self.y + dy * steps
        if x < 0 or y < 0:
            return None
        return Point(x, y)

    def manhattan_distance(self, other: Point) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)
