"""
Shared type definitions for the pipe maze system.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    """Cardinal direction for traversal."""

    N = "N"  # Up (decreasing row)
    S = "S"  # Down (increasing row)
    E = "E"  # Right (increasing col)
    W = "W"  # Left (decreasing col)

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_DELTAS = {
    Direction.N: (-1, 0),
    Direction.S: (1, 0),
    Direction.E: (0, 1),
    Direction.W: (0, -1),
}

_OPPOSITES = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
}


# =============================================================================
# Errors
# =============================================================================


class PipeMazeError(ValueError):
    """Base class for every failure raised while solving a maze."""


class MalformedGrid(PipeMazeError):
    """Rows of unequal length, an unknown character, or no rows at all."""


class NoStartTile(PipeMazeError):
    """The grid does not contain exactly one start marker."""


class MultipleStartTiles(NoStartTile):
    """More than one start marker was found."""


class OutOfBounds(PipeMazeError, IndexError):
    """A coordinate outside the grid was dereferenced."""


class NoClosedLoop(PipeMazeError):
    """The tracer ran out of routes without getting back to the start."""


class AmbiguousStartShape(PipeMazeError):
    """Zero or several connector shapes fit the start tile's neighbours."""


class OddLengthLoop(PipeMazeError):
    """A loop of odd length has no single farthest point."""


# =============================================================================
# Grid Definition Types
# =============================================================================


class Tile(Enum):
    """A grid tile, valued by its input character."""

    GROUND = "."
    START = "S"
    NORTH_SOUTH = "|"
    EAST_WEST = "-"
    NORTH_EAST = "L"
    NORTH_WEST = "J"
    SOUTH_WEST = "7"
    SOUTH_EAST = "F"

    @property
    def directions(self) -> frozenset[Direction]:
        """Directions this tile links to. The start marker links everywhere."""
        return _TILE_DIRECTIONS[self]

    @property
    def is_connector(self) -> bool:
        return self not in (Tile.GROUND, Tile.START)


_TILE_DIRECTIONS: dict[Tile, frozenset[Direction]] = {
    Tile.GROUND: frozenset(),
    Tile.START: frozenset(Direction),
    Tile.NORTH_SOUTH: frozenset({Direction.N, Direction.S}),
    Tile.EAST_WEST: frozenset({Direction.E, Direction.W}),
    Tile.NORTH_EAST: frozenset({Direction.N, Direction.E}),
    Tile.NORTH_WEST: frozenset({Direction.N, Direction.W}),
    Tile.SOUTH_WEST: frozenset({Direction.S, Direction.W}),
    Tile.SOUTH_EAST: frozenset({Direction.S, Direction.E}),
}

CONNECTOR_TILES: tuple[Tile, ...] = tuple(tile for tile in Tile if tile.is_connector)


def connects(tile: Tile, direction: Direction) -> bool:
    """Whether a tile has an opening toward the given direction."""
    return direction in tile.directions


@dataclass(frozen=True, order=True)
class Coord:
    """A (row, col) position within a grid."""

    row: int
    col: int

    def step(self, direction: Direction) -> Coord:
        dr, dc = direction.delta
        return Coord(self.row + dr, self.col + dc)


@dataclass(frozen=True)
class PipeGrid:
    """A rectangular 2D grid of tiles."""

    tiles: tuple[tuple[Tile, ...], ...]

    @property
    def rows(self) -> int:
        return len(self.tiles)

    @property
    def cols(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    def contains(self, coord: Coord) -> bool:
        return 0 <= coord.row < self.rows and 0 <= coord.col < self.cols

    def at(self, coord: Coord) -> Tile:
        """Tile at coord, raising OutOfBounds instead of wrapping negative indices."""
        if not self.contains(coord):
            raise OutOfBounds(
                f"Coordinate ({coord.row}, {coord.col}) is outside the grid\n"
                f"  Grid size: {self.rows} rows x {self.cols} columns"
            )
        return self.tiles[coord.row][coord.col]

    def coords(self) -> list[Coord]:
        """All coordinates in row-major order."""
        return [Coord(r, c) for r in range(self.rows) for c in range(self.cols)]

    def find_start(self) -> Coord:
        starts = [
            Coord(r, c)
            for r, row in enumerate(self.tiles)
            for c, tile in enumerate(row)
            if tile is Tile.START
        ]
        if not starts:
            raise NoStartTile(
                f"No start tile '{Tile.START.value}' in a {self.rows}x{self.cols} grid"
            )
        if len(starts) > 1:
            positions = ", ".join(f"({s.row}, {s.col})" for s in starts)
            raise MultipleStartTiles(
                f"Found {len(starts)} start tiles, expected exactly one\n"
                f"  Positions: {positions}"
            )
        return starts[0]

    def with_tile(self, coord: Coord, tile: Tile) -> PipeGrid:
        """Copy of this grid with a single tile replaced."""
        self.at(coord)
        rows = [list(row) for row in self.tiles]
        rows[coord.row][coord.col] = tile
        return PipeGrid(tuple(tuple(row) for row in rows))


# =============================================================================
# Classification Types
# =============================================================================


class Label(Enum):
    """Region label assigned to every cell."""

    LOOP = "loop"
    INSIDE = "inside"
    OUTSIDE = "outside"


@dataclass(frozen=True)
class Classification:
    """Per-cell labels, laid out parallel to the grid's tiles."""

    labels: tuple[tuple[Label, ...], ...]

    def label_at(self, coord: Coord) -> Label:
        return self.labels[coord.row][coord.col]

    def count(self, label: Label) -> int:
        return sum(row.count(label) for row in self.labels)

    def cells(self, label: Label) -> set[Coord]:
        return {
            Coord(r, c)
            for r, row in enumerate(self.labels)
            for c, cell_label in enumerate(row)
            if cell_label is label
        }


@dataclass(frozen=True)
class RuleSet:
    """Rules governing classification behavior."""

    allow_squeeze: bool = True  # False = plain flood fill over ground cells
