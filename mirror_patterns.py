"""
Point of incidence: find the line of reflection in each pattern of ash
and rocks, optionally after fixing a single smudge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from grid_parser import parse_grid, split_blocks
from grid_types import UnsupportedInputShape
from gridwalk import Grid

logger = logging.getLogger(__name__)

DAY = 13
TITLE = "Point of Incidence"

EXAMPLE = """\
#.##..##.
..#.##.#.
##......#
##......#
..#.##.#.
..##..##.
#.#.##.#.

#...##..#
#....#..#
..##..###
#####.##.
#####.##.
..##..###
#....#..#
"""


@dataclass(frozen=True)
class Reflection:
    """A reflection line, given as the number of columns left of it or rows above it."""

    vertical: bool
    offset: int

    @property
    def summary(self) -> int:
        return self.offset if self.vertical else 100 * self.offset


def _split_candidates(lines: list[list[bool]], smudges: int) -> list[int]:
    """Offsets between lines where the two mirrored halves differ in exactly `smudges` cells."""
    candidates = []
    for offset in range(1, len(lines)):
        differences = 0
        for above, below in zip(reversed(lines[:offset]), lines[offset:]):
            differences += sum(a != b for a, b in zip(above, below))
            if differences > smudges:
                break
        if differences == smudges:
            candidates.append(offset)
    return candidates


def find_reflection(pattern: Grid[bool], smudges: int = 0) -> Reflection:
    """
    Locate the single reflection line of a pattern.

    Args:
        pattern: Rocks are True, ash is False
        smudges: Number of cells that must differ across the mirror

    Raises:
        UnsupportedInputShape: If the pattern does not have exactly one line
    """
    found = [Reflection(False, offset) for offset in _split_candidates(pattern.rows(), smudges)]
    found += [Reflection(True, offset) for offset in _split_candidates(pattern.columns(), smudges)]
    if len(found) != 1:
        raise UnsupportedInputShape(
            f"Expected exactly one reflection line with {smudges} smudge(s), found {len(found)}\n"
            f"{_render(pattern)}"
        )
    return found[0]


def _render(pattern: Grid[bool]) -> str:
    return "\n".join("".join("#" if rock else "." for rock in row) for row in pattern.rows())


def parse_patterns(text: str) -> list[Grid[bool]]:
    return [parse_grid(block, lambda char: {"#": True, ".": False}[char]) for block in split_blocks(text)]


def solve(text: str) -> tuple[int, int]:
    patterns = parse_patterns(text)
    logger.info("%d patterns", len(patterns))
    clean = sum(find_reflection(pattern).summary for pattern in patterns)
    smudged = sum(find_reflection(pattern, smudges=1).summary for pattern in patterns)
    return clean, smudged
