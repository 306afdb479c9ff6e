"""
Command-line runner for the gridwalk puzzle solvers.

    python demo.py            # latest day, inputs/dayNN.txt
    python demo.py 17 -v      # day 17 with debug renders
    python demo.py 10 --example
    python demo.py --list
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from types import ModuleType
from typing import Any

from rich.console import Console
from rich.table import Table

import beam_contraption
import clumsy_crucible
import cosmic_expansion
import gear_ratios
import long_walk
import mirror_patterns
import pipe_maze
import reflector_dish
import step_counter
from grid_types import NoPathFound, UnsupportedInputShape

logger = logging.getLogger(__name__)

PUZZLES: dict[int, ModuleType] = {
    module.DAY: module
    for module in (
        gear_ratios,
        pipe_maze,
        cosmic_expansion,
        mirror_patterns,
        reflector_dish,
        beam_contraption,
        clumsy_crucible,
        step_counter,
        long_walk,
    )
}

INPUT_DIR = Path("inputs")


def input_path(day: int, input_dir: Path = INPUT_DIR) -> Path:
    return input_dir / f"day{day:02d}.txt"


def run_day(day: int, text: str, console: Console, options: dict[str, Any] | None = None) -> bool:
    """Solve one day and print both answers; False if the input had no answer."""
    module = PUZZLES[day]
    console.print(f"[bold]Day {day}: {module.TITLE}[/bold]")

    started = time.perf_counter()
    try:
        part_one, part_two = module.solve(text, **(options or {}))
    except NoPathFound as e:
        console.print(f"[red]no solution:[/red] {e}")
        return False
    except UnsupportedInputShape as e:
        console.print(f"[red]unsupported input shape:[/red] {e}")
        return False
    elapsed = time.perf_counter() - started

    console.print(f"part 1: [cyan]{part_one}[/cyan]")
    console.print(f"part 2: [cyan]{part_two}[/cyan]")
    logger.info("Day %d solved in %.3fs", day, elapsed)
    return True


def list_days(console: Console) -> None:
    table = Table(title="Puzzles")
    table.add_column("Day", justify="right")
    table.add_column("Title")
    table.add_column("Input")
    for day, module in sorted(PUZZLES.items()):
        path = input_path(day)
        table.add_row(str(day), module.TITLE, str(path) if path.exists() else "-")
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a grid puzzle solver.")
    parser.add_argument("day", type=int, nargs="?", help="puzzle day (default: latest)")
    parser.add_argument("--input", type=Path, help="puzzle input file (default: inputs/dayNN.txt)")
    parser.add_argument("--example", action="store_true", help="solve the built-in example input")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output, including grid renders")
    parser.add_argument("--list", action="store_true", help="list available puzzles")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s',
    )
    console = Console()

    if args.list:
        list_days(console)
        return 0

    day = args.day if args.day is not None else max(PUZZLES)
    if day not in PUZZLES:
        console.print(f"[red]No solver for day {day}.[/red] Available: {', '.join(map(str, sorted(PUZZLES)))}")
        return 2

    options: dict[str, Any] = {}
    if args.example:
        text = PUZZLES[day].EXAMPLE
        options = getattr(PUZZLES[day], "EXAMPLE_OPTIONS", {})
    else:
        path = args.input or input_path(day)
        if not path.exists():
            console.print(f"[red]Input file not found:[/red] {path}")
            return 2
        text = path.read_text()

    return 0 if run_day(day, text, console, options) else 1


if __name__ == "__main__":
    sys.exit(main())
