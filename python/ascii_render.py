"""
ASCII rendering for classified pipe mazes.

Loop tiles are drawn as pipes, every other cell as its region label:
'I' for inside the loop, 'O' for outside.
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from grid_types import Classification, Coord, Label, PipeGrid, Tile

logger = logging.getLogger(__name__)

BOX_GLYPHS = {
    Tile.NORTH_SOUTH: "│",
    Tile.EAST_WEST: "─",
    Tile.NORTH_EAST: "└",
    Tile.NORTH_WEST: "┘",
    Tile.SOUTH_WEST: "┐",
    Tile.SOUTH_EAST: "┌",
    Tile.START: "S",
    Tile.GROUND: ".",
}

LABEL_GLYPHS = {
    Label.INSIDE: "I",
    Label.OUTSIDE: "O",
}


def _glyph(tile: Tile, label: Label, box: bool) -> str:
    if label is not Label.LOOP:
        return LABEL_GLYPHS[label]
    return BOX_GLYPHS[tile] if box else tile.value


def render(
    grid: PipeGrid,
    classification: Classification,
    color: bool = False,
    box: bool = False,
    highlight: Coord | None = None,
) -> str:
    """
    Render a maze with its region labels, one line per grid row.

    Args:
        grid: The maze (start marker may be resolved or not)
        classification: Labels from classify_regions
        color: Colorize loop/inside/outside with ANSI codes
        box: Draw loop tiles with box-drawing characters
        highlight: Optional cell to show in reverse video (implies color)

    Returns:
        Rendered string without a trailing newline
    """
    palette: dict[Label, Callable[[str], str]] = {
        Label.LOOP: chalk.yellow,
        Label.INSIDE: chalk.greenBright,
        Label.OUTSIDE: chalk.blue,
    }

    lines: list[str] = []
    for r, row in enumerate(grid.tiles):
        parts: list[str] = []
        for c, tile in enumerate(row):
            label = classification.labels[r][c]
            char = _glyph(tile, label, box)
            if highlight is not None and highlight == Coord(r, c):
                char = chalk.bgWhite.black(char)
            elif color or highlight is not None:
                char = palette[label](char)
            parts.append(char)
        lines.append("".join(parts))

    logger.debug("render: %dx%d grid, color=%s, box=%s", grid.rows, grid.cols, color, box)
    return "\n".join(lines)


def render_grid(grid: PipeGrid, box: bool = False) -> str:
    """Render bare tiles, without any classification."""
    if box:
        return "\n".join("".join(BOX_GLYPHS[tile] for tile in row) for row in grid.tiles)
    return "\n".join("".join(tile.value for tile in row) for row in grid.tiles)
