"""
Grid parsing utilities for pipe mazes.

Provides two entry points:
1. parse_grid for a sequence of already-split rows
2. parse_grid_text for a multi-line block (blank lines and indentation ignored)
"""

from __future__ import annotations

from typing import Sequence

from grid_types import MalformedGrid, PipeGrid, Tile

__all__ = ["parse_grid", "parse_grid_text"]

_TILES_BY_CHAR = {tile.value: tile for tile in Tile}


def parse_grid(rows: Sequence[str]) -> PipeGrid:
    """
    Parse raw character rows into a PipeGrid.

    Characters:
    - '.': Ground
    - 'S': Start marker
    - '|', '-': North-south and east-west pipes
    - 'L', 'J', '7', 'F': North-east, north-west, south-west and south-east bends

    Example:
        [".....",
         ".S-7.",
         ".|.|.",
         ".L-J.",
         "....."]
        Creates a 5x5 grid whose loop encloses the centre cell.

    Args:
        rows: One string per grid row, all of the same length

    Returns:
        The parsed PipeGrid

    Raises:
        MalformedGrid: If there are no rows, rows differ in length, or a character is unknown
    """
    if not rows:
        raise MalformedGrid("Cannot parse an empty grid: no rows given")

    parsed: list[tuple[Tile, ...]] = []
    for row_idx, row_str in enumerate(rows):
        tiles: list[Tile] = []
        for col_idx, char in enumerate(row_str):
            tile = _TILES_BY_CHAR.get(char)
            if tile is None:
                raise MalformedGrid(
                    f"Invalid character {char!r}\n"
                    f"  Row {row_idx}: \"{row_str}\"\n"
                    f"  Position: column {col_idx}\n"
                    f"  Valid characters: {' '.join(_TILES_BY_CHAR)}"
                )
            tiles.append(tile)
        parsed.append(tuple(tiles))

    # Validate all rows have same length
    cols = len(parsed[0])
    if cols == 0:
        raise MalformedGrid("Cannot parse a grid with zero columns")
    mismatched = [(i, len(row)) for i, row in enumerate(parsed) if len(row) != cols]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths\n"
            f"  Expected: {cols} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{rows[row_idx]}\"\n"
        error_msg += "  All rows must have the same number of tiles"
        raise MalformedGrid(error_msg)

    return PipeGrid(tuple(parsed))


def parse_grid_text(text: str) -> PipeGrid:
    """
    Parse a multi-line block, one grid row per line.

    Surrounding whitespace on each line and blank lines are dropped, so the
    block can be written indented inside a triple-quoted string.
    """
    lines = [line.strip() for line in text.strip().split("\n") if line.strip()]
    return parse_grid(lines)
