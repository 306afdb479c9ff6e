"""
Gear ratios: numbers in an engine schematic that touch a symbol.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from grid_parser import parse_char_grid
from grid_types import DirectionFlag, Point
from gridwalk import Grid

logger = logging.getLogger(__name__)

DAY = 3
TITLE = "Gear Ratios"

EXAMPLE = """\
467..114..
...*......
..35..633.
......#...
617*......
.....+.58.
..592.....
......755.
...$.*....
.664.598..
"""

# Neighbor masks for a number read left to right: the first digit looks
# left, every digit looks up and down, the last digit looks right.
FIRST_DIGIT = DirectionFlag.LEFT | DirectionFlag.UP_LEFT | DirectionFlag.DOWN_LEFT
ANY_DIGIT = DirectionFlag.UP | DirectionFlag.DOWN
LAST_DIGIT = DirectionFlag.RIGHT | DirectionFlag.UP_RIGHT | DirectionFlag.DOWN_RIGHT


def is_symbol(char: str) -> bool:
    return char != "." and not char.isdigit()


@dataclass(frozen=True)
class SchematicNumber:
    """A number and the cells its digits occupy."""

    value: int
    start: Point
    length: int

    @property
    def cells(self) -> list[Point]:
        return [self.start.offset(i, 0) for i in range(self.length)]

    def border(self, schematic: Grid[str]) -> list[Point]:
        """Cells surrounding the number, in neighbor order, without duplicates."""
        result: list[Point] = []
        for i, cell in enumerate(self.cells):
            mask = ANY_DIGIT
            if i == 0:
                mask |= FIRST_DIGIT
            if i == self.length - 1:
                mask |= LAST_DIGIT
            result.extend(p for p in schematic.neighbors(cell, mask) if p not in result)
        return result


@dataclass
class Schematic:
    grid: Grid[str]
    numbers: list[SchematicNumber]

    @classmethod
    def parse(cls, text: str) -> Schematic:
        grid = parse_char_grid(text)
        numbers: list[SchematicNumber] = []
        for y, row in grid.iter_rows():
            digits = ""
            start: Point | None = None
            for point, char in row:
                if char.isdigit():
                    if start is None:
                        start = point
                    digits += char
                elif start is not None:
                    numbers.append(SchematicNumber(int(digits), start, len(digits)))
                    digits, start = "", None
            if start is not None:
                numbers.append(SchematicNumber(int(digits), start, len(digits)))
        logger.info("Schematic %dx%d with %d numbers", grid.len_x, grid.len_y, len(numbers))
        return cls(grid, numbers)

    def part_numbers(self) -> list[SchematicNumber]:
        return [
            number
            for number in self.numbers
            if any(is_symbol(self.grid[p]) for p in number.border(self.grid))
        ]

    def gear_ratios(self) -> list[int]:
        """Products of the two numbers next to each '*' that touches exactly two."""
        owner: dict[Point, SchematicNumber] = {}
        for number in self.numbers:
            for cell in number.cells:
                owner[cell] = number

        ratios = []
        for point, char in self.grid.iter_cells():
            if char != "*":
                continue
            adjacent: list[SchematicNumber] = []
            for neighbor in self.grid.neighbors(point, DirectionFlag.ALL_DIRECTIONS):
                number = owner.get(neighbor)
                if number is not None and number not in adjacent:
                    adjacent.append(number)
            if len(adjacent) == 2:
                ratios.append(adjacent[0].value * adjacent[1].value)
        return ratios


def solve(text: str) -> tuple[int, int]:
    schematic = Schematic.parse(text)
    return sum(n.value for n in schematic.part_numbers()), sum(schematic.gear_ratios())
