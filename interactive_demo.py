"""
Interactive demo for the parabolic reflector dish.
Display a platform and tilt it with keyboard commands.
"""

import logging
import sys

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_highlighted
from grid_types import Direction
from reflector_dish import EXAMPLE, Platform, Rock

KEY_DIRECTIONS = {
    "w": Direction.UP,
    "a": Direction.LEFT,
    "s": Direction.DOWN,
    "d": Direction.RIGHT,
}


class InteractiveDemo:
    """Interactive demo for tilt operations."""

    def __init__(self, platform: Platform) -> None:
        self.platform = Platform(platform.grid.copy())
        self.original_platform = platform  # never tilted, used for reset
        self.console = Console()
        self.status_message = "Ready"
        self.moves = 0

    def generate_display(self) -> Panel:
        """Generate the current display with platform and status."""
        round_rocks = [p for p, rock in self.platform.grid.iter_cells() if rock is Rock.ROUND]
        grid_text = render_highlighted(self.platform.grid, [round_rocks])

        status = Text()
        # Convert ANSI-colored grid text to Rich Text properly
        status.append_text(Text.from_ansi(grid_text))
        status.append("\n\n")
        status.append(f"Load on north beams: {self.platform.total_load()}\n", style="bold")
        status.append(f"Moves: {self.moves}\n")
        status.append("W/A/S/D tilt, C spin cycle, R reset, Q quit\n", style="dim")
        status.append(self.status_message)

        return Panel(status, title="Reflector Dish Interactive Tilt Demo", border_style="green", width=80)

    def tilt(self, direction: Direction) -> None:
        self.platform.tilt(direction)
        self.moves += 1
        self.status_message = f"Tilted {direction.name.lower()}"

    def spin(self) -> None:
        self.platform = self.platform.spin_cycle()
        self.moves += 1
        self.status_message = "Spin cycle complete"

    def reset_platform(self) -> None:
        """Reset the platform to its original state."""
        self.platform = Platform(self.original_platform.grid.copy())
        self.moves = 0
        self.status_message = "Platform reset to original state"

    def run(self) -> None:
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey().lower()

                    if key == "q":
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key == "r":
                        self.reset_platform()
                    elif key == "c":
                        self.spin()
                    elif key in KEY_DIRECTIONS:
                        self.tilt(KEY_DIRECTIONS[key])
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def main(text: str) -> None:
    """Run interactive demo with a platform parsed from text."""
    demo = InteractiveDemo(Platform.parse(text))
    demo.run()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    if len(sys.argv) > 1:
        with open(sys.argv[1]) as f:
            main(f.read())
    else:
        main(EXAMPLE)
