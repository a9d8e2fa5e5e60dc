"""Tests for ascii_render module."""

import re

from ascii_render import render, render_grid
from grid_parser import parse_grid_text
from grid_types import Coord
from pipemaze import solve_grid

ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")

SQUARE = """
    .....
    .S-7.
    .|.|.
    .L-J.
    .....
"""


def strip_ansi(text: str) -> str:
    return ANSI_PATTERN.sub("", text)


class TestRender:
    """Tests for rendering a classified maze."""

    def test_plain(self) -> None:
        """Loop tiles keep their glyphs, other cells show I or O."""
        solution = solve_grid(parse_grid_text(SQUARE))
        output = render(solution.grid, solution.classification)

        assert output == "\n".join(
            [
                "OOOOO",
                "OF-7O",
                "O|I|O",
                "OL-JO",
                "OOOOO",
            ]
        )

    def test_unresolved_start(self) -> None:
        """Rendering the original grid keeps the start marker."""
        grid = parse_grid_text(SQUARE)
        solution = solve_grid(grid)
        output = render(grid, solution.classification)

        assert output.split("\n")[1] == "OS-7O"

    def test_stray_pipes_show_label(self) -> None:
        """Pipes off the loop are drawn as their region label."""
        solution = solve_grid(
            parse_grid_text(
                """
                -L|F7
                7S-7|
                L|7||
                -L-J|
                L|-JF
                """
            )
        )
        output = render(solution.grid, solution.classification)

        assert output.split("\n") == ["OOOOO", "OF-7O", "O|I|O", "OL-JO", "OOOOO"]

    def test_box_drawing(self) -> None:
        solution = solve_grid(parse_grid_text(SQUARE))
        output = render(solution.grid, solution.classification, box=True)

        assert output.split("\n")[1:4] == ["O┌─┐O", "O│I│O", "O└─┘O"]

    def test_color_keeps_glyphs(self) -> None:
        """Coloring only wraps glyphs in escape codes."""
        solution = solve_grid(parse_grid_text(SQUARE))
        plain = render(solution.grid, solution.classification)
        colored = render(solution.grid, solution.classification, color=True)

        assert strip_ansi(colored) == plain

    def test_highlight_keeps_glyphs(self) -> None:
        solution = solve_grid(parse_grid_text(SQUARE))
        plain = render(solution.grid, solution.classification)
        highlighted = render(solution.grid, solution.classification, highlight=Coord(2, 2))

        assert strip_ansi(highlighted) == plain


class TestRenderGrid:
    """Tests for rendering bare tiles."""

    def test_round_trips_text(self) -> None:
        grid = parse_grid_text(SQUARE)
        assert render_grid(grid) == "\n".join([".....", ".S-7.", ".|.|.", ".L-J.", "....."])

    def test_box(self) -> None:
        grid = parse_grid_text("F7\nLJ")
        assert render_grid(grid, box=True) == "┌┐\n└┘"
