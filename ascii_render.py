"""
ASCII rendering for gridwalk grids.

Provides three rendering approaches:
1. Plain rendering with optional per-point overrides
2. Layered highlighting - colors sets of points from a palette
3. Path rendering - draws a search path as direction arrows
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Sequence, TypeVar

import simple_chalk as chalk  # type: ignore[import-untyped]

from grid_types import Direction, Point
from gridwalk import Grid

logger = logging.getLogger(__name__)

T = TypeVar("T")

PALETTE: tuple[Callable[[str], str], ...] = (
    chalk.red,
    chalk.green,
    chalk.yellow,
    chalk.blue,
    chalk.magenta,
    chalk.cyan,
    chalk.redBright,
    chalk.greenBright,
    chalk.yellowBright,
    chalk.blueBright,
)


def render_grid(
    grid: Grid[T],
    cell_fn: Callable[[T], str] = str,
    overrides: Callable[[Point], str | None] | None = None,
) -> str:
    """
    Render a grid as text, one line per row.

    Args:
        grid: The grid to render
        cell_fn: Converts a cell to its display string
        overrides: Optional function returning a replacement string for a
            point, or None to fall back to cell_fn

    Returns:
        The rendered grid
    """
    lines = []
    for _, row in grid.iter_rows():
        line = ""
        for point, cell in row:
            replacement = overrides(point) if overrides is not None else None
            line += replacement if replacement is not None else cell_fn(cell)
        lines.append(line)
    return "\n".join(lines)


def render_highlighted(
    grid: Grid[T],
    layers: Sequence[Iterable[Point]],
    cell_fn: Callable[[T], str] = str,
    palette: Sequence[Callable[[str], str]] = PALETTE,
) -> str:
    """
    Render a grid with each layer of points drawn in its own color.

    Layer i uses palette[i % len(palette)]. A point in several layers takes
    the color of the first one.
    """
    colors: dict[Point, Callable[[str], str]] = {}
    for i, layer in enumerate(layers):
        colorize = palette[i % len(palette)]
        for point in layer:
            colors.setdefault(point, colorize)

    def override(point: Point) -> str | None:
        colorize = colors.get(point)
        if colorize is None:
            return None
        return colorize(cell_fn(grid[point]))

    return render_grid(grid, cell_fn, override)


def render_path(grid: Grid[T], path: Sequence[Any], cell_fn: Callable[[T], str] = str) -> str:
    """
    Render a search path over a grid.

    Each node must expose `position`; nodes that also carry a `direction`
    are drawn as arrows. The start of the path is drawn inverted.
    """
    marks: dict[Point, str] = {}
    for node in path:
        direction = getattr(node, "direction", None)
        glyph = str(direction) if isinstance(direction, Direction) else "#"
        marks[node.position] = chalk.blueBright(glyph)
    if path:
        start = path[0].position
        marks[start] = chalk.bgWhite.black(cell_fn(grid[start]))

    logger.debug(
        "render_path: %d nodes over %d cells, grid=%dx%d",
        len(path),
        len(marks),
        grid.len_x,
        grid.len_y,
    )

    return render_grid(grid, cell_fn, marks.get)
