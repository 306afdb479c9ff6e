"""
Grid parsing utilities for gridwalk.

Turns puzzle text into grids:
1. Character grids, one cell per character
2. Digit grids, one integer weight per character
3. Mapped grids, where a per-character parser builds the cell
"""

from __future__ import annotations

from typing import Callable, TypeVar

from grid_types import DimensionMismatch
from gridwalk import Grid

__all__ = [
    "clean_input",
    "parse_char_grid",
    "parse_digit_grid",
    "parse_grid",
    "split_blocks",
]

T = TypeVar("T")


def clean_input(text: str) -> str:
    """Strip a byte-order mark, normalize line endings and trim surrounding blank lines."""
    return text.lstrip("\ufeff").replace("\r\n", "\n").strip("\n")


def split_blocks(text: str) -> list[str]:
    """Split text into blocks separated by one or more blank lines."""
    blocks: list[str] = []
    current: list[str] = []
    for line in clean_input(text).split("\n"):
        if line.strip():
            current.append(line)
        elif current:
            blocks.append("\n".join(current))
            current = []
    if current:
        blocks.append("\n".join(current))
    return blocks


def parse_grid(text: str, parse_cell: Callable[[str], T]) -> Grid[T]:
    """
    Parse a block of text into a grid, one cell per character.

    Args:
        text: Lines of equal length; leading and trailing whitespace on each
            line is ignored so that indented literals can be used
        parse_cell: Builds a cell from one character; raises ValueError
            (or KeyError) for characters it does not accept

    Returns:
        The parsed grid

    Raises:
        DimensionMismatch: If the lines differ in length
        ValueError: If a character is rejected by parse_cell
    """
    lines = [line.strip() for line in clean_input(text).split("\n")]
    lines = [line for line in lines if line]
    if not lines:
        raise DimensionMismatch("Cannot parse an empty grid")

    cols = len(lines[0])
    mismatched = [(y, line) for y, line in enumerate(lines) if len(line) != cols]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths\n"
            f"  Expected: {cols} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for y, line in mismatched:
            error_msg += f"    Row {y}: {len(line)} columns - \"{line}\"\n"
        error_msg += "  All rows must have the same number of cells"
        raise DimensionMismatch(error_msg)

    rows: list[list[T]] = []
    for y, line in enumerate(lines):
        row: list[T] = []
        for x, char in enumerate(line):
            try:
                row.append(parse_cell(char))
            except (KeyError, ValueError) as e:
                raise ValueError(
                    f"Invalid cell character: '{char}'\n"
                    f"  Row {y}: \"{line}\"\n"
                    f"  Position: column {x}"
                ) from e
        rows.append(row)

    return Grid.from_rows(rows)


def parse_char_grid(text: str) -> Grid[str]:
    return parse_grid(text, str)


def parse_digit_grid(text: str) -> Grid[int]:
    """Parse a grid of single decimal digits, e.g. heat-loss weights."""

    def parse_digit(char: str) -> int:
        if not char.isdigit():
            raise ValueError(f"expected a digit, got '{char}'")
        return int(char)

    return parse_grid(text, parse_digit)
