"""
Interactive viewer for classified pipe mazes.
Move a cursor over the grid with the keyboard and inspect each cell.
"""

from pathlib import Path
import logging

import readchar, sys
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render
from demo import LAYOUTS
from grid_parser import parse_grid_text
from grid_types import Coord, Direction, Label, PipeGrid
from pipemaze import MazeSolution, solve_grid


KEY_DIRECTIONS = {
    "w": Direction.N,
    "s": Direction.S,
    "a": Direction.W,
    "d": Direction.E,
}


class InteractiveDemo:
    """Interactive viewer for one solved maze."""

    def __init__(self, grid: PipeGrid) -> None:
        self.grid = grid
        self.solution: MazeSolution = solve_grid(grid)
        self.cursor = self.solution.start
        self.box = True
        self.console = Console()
        self.status_message = "Ready"

    def generate_display(self) -> Panel:
        """Generate the current display with grid and status."""
        solution = self.solution
        grid_text = render(solution.grid, solution.classification, box=self.box, highlight=self.cursor)

        status = Text()
        status.append("Cursor: ", style="bold")
        status.append(f"[{self.cursor.row}, {self.cursor.col}]\n")

        tile = self.grid.at(self.cursor)
        label = solution.classification.label_at(self.cursor)
        status.append("Tile: ", style="bold")
        status.append(f"{tile.name} ({tile.value!r})\n")
        status.append("Label: ", style="bold")
        status.append(f"{label.value}\n")
        if self.cursor in solution.loop:
            status.append("Loop index: ", style="bold")
            status.append(f"{solution.loop.index(self.cursor)} of {len(solution.loop)}\n")
        status.append("\n")

        # Convert ANSI-colored grid text to Rich Text properly
        status.append(Text.from_ansi(grid_text))
        status.append("\n\n")
        status.append(f"Farthest step: {solution.farthest}   ", style="bold")
        status.append(f"Enclosed: {solution.enclosed}\n\n", style="bold")
        status.append("Keys:\n", style="bold cyan")
        status.append("  W/A/S/D - Move cursor\n")
        status.append("  B - Toggle box drawing\n")
        status.append("  Q - Quit\n\n")

        # Status line at the bottom
        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Pipe Maze Viewer", border_style="green", width=80)

    def move(self, direction: Direction) -> None:
        target = self.cursor.step(direction)
        if not self.grid.contains(target):
            self.status_message = f"Edge of grid, cannot move {direction.value}"
            return
        self.cursor = target
        label = self.solution.classification.label_at(target)
        self.status_message = "On the loop" if label is Label.LOOP else f"Ground, {label.value}"

    def run(self) -> None:
        """Run the viewer until the user quits."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey().lower()
                    if key == "q":
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key == "b":
                        self.box = not self.box
                    elif key in KEY_DIRECTIONS:
                        self.move(KEY_DIRECTIONS[key])
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    source = sys.argv[1] if len(sys.argv) > 1 else "squeeze"
    if source in LAYOUTS:
        text = LAYOUTS[source]
    else:
        text = Path(source).read_text()
    InteractiveDemo(parse_grid_text(text)).run()
